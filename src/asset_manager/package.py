"""Host-side package model consumed by the asset installers.

The host package manager owns packages and operations; asset-manager only
needs a name and a way to resolve where the package was installed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Union


@dataclass(frozen=True)
class Package:
    """A dependency package as reported by the host."""

    name: str
    version: str | None = None
    install_path: Path | None = None

    def __str__(self) -> str:
        return f"{self.name} ({self.version})" if self.version else self.name


@dataclass(frozen=True)
class InstallOperation:
    package: Package


@dataclass(frozen=True)
class UpdateOperation:
    initial_package: Package
    target_package: Package


@dataclass(frozen=True)
class UninstallOperation:
    package: Package


Operation = Union[InstallOperation, UpdateOperation, UninstallOperation]


@dataclass(frozen=True)
class PackageEvent:
    """A lifecycle notification delivered by the host."""

    name: str
    operation: Operation | None = None


class InstallationManager(Protocol):
    """Resolves where the host installed a package."""

    def get_install_path(self, package: Package) -> Path:
        ...


class VendorInstallationManager:
    """Resolve packages to ``<vendor_dir>/<package name>``.

    A package carrying an explicit ``install_path`` is resolved to that path,
    which lets callers point at an extracted copy of a previous version.
    """

    def __init__(self, vendor_path: Path):
        self.vendor_path = Path(vendor_path)

    def get_install_path(self, package: Package) -> Path:
        if package.install_path is not None:
            return Path(package.install_path)
        return self.vendor_path / package.name


__all__ = [
    "InstallOperation",
    "InstallationManager",
    "Operation",
    "Package",
    "PackageEvent",
    "UninstallOperation",
    "UpdateOperation",
    "VendorInstallationManager",
]
