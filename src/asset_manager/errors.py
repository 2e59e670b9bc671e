"""Exception hierarchy for asset-manager."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from asset_manager.package import Package


class AssetManagerError(RuntimeError):
    """Base class for all asset-manager failures."""


class SettingsError(AssetManagerError):
    """Raised when .asset-manager.yaml cannot be parsed or validated."""


class ModuleConfigError(AssetManagerError):
    """Raised when a package's module configuration cannot be loaded."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path


class AssetOperationError(AssetManagerError):
    """A filesystem operation failed while processing one package."""

    action = "process"

    def __init__(self, package: "Package", path: Path, cause: OSError):
        super().__init__(
            f"Unable to {self.action} assets for {package.name} at {path}: {cause}"
        )
        self.package = package
        self.path = path
        self.cause = cause


class AssetInstallError(AssetOperationError):
    """Copying an asset group into the public directory failed."""

    action = "install"


class AssetUninstallError(AssetOperationError):
    """Removing an asset group from the public directory failed."""

    action = "uninstall"


__all__ = [
    "AssetInstallError",
    "AssetManagerError",
    "AssetOperationError",
    "AssetUninstallError",
    "ModuleConfigError",
    "SettingsError",
]
