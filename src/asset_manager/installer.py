"""Copy asset groups declared by a package into the project's public directory."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from rich.console import Console

from asset_manager.core.constants import DIRECTORY_MODE, PUBLIC_DIR
from asset_manager.errors import AssetInstallError
from asset_manager.gitignore import PublicGitignore
from asset_manager.module_config import WriteError, declared_asset_paths
from asset_manager.package import (
    InstallationManager,
    InstallOperation,
    Package,
    PackageEvent,
    UpdateOperation,
)

logger = logging.getLogger(__name__)

_err_console = Console(stderr=True)


def default_write_error(message: str) -> None:
    _err_console.print(message, markup=False, highlight=False)


def iter_asset_groups(source: Path):
    """Yield the immediate subdirectories of *source*, sorted by name."""
    if not source.is_dir():
        return
    try:
        entries = sorted(source.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        logger.debug("Skipping unreadable asset source %s: %s", source, exc)
        return
    for entry in entries:
        if entry.is_dir():
            yield entry


@dataclass
class InstallResult:
    """Result of installing one package's assets."""

    package: Package
    groups: List[str] = field(default_factory=list)
    """Asset groups copied, in copy order"""

    files_copied: int = 0

    gitignore_added: List[str] = field(default_factory=list)
    """Entries appended to the public .gitignore"""


class AssetInstaller:
    """Publishes a package's declared asset groups into ``<project>/public``."""

    def __init__(
        self,
        installation_manager: InstallationManager,
        write_error: WriteError | None = None,
        *,
        project_path: Path | None = None,
        public_dir: str = PUBLIC_DIR,
    ):
        self.installation_manager = installation_manager
        self.write_error = write_error or default_write_error
        self.project_path = Path(project_path) if project_path else Path.cwd()
        self.public_dir = public_dir

    def set_project_path(self, path: Path) -> None:
        """Allow overriding the project path."""
        self.project_path = Path(path)

    @property
    def public_path(self) -> Path:
        return self.project_path / self.public_dir

    def __call__(self, target: Union[Package, PackageEvent]) -> InstallResult | None:
        return self.install(target)

    def install(self, target: Union[Package, PackageEvent]) -> InstallResult | None:
        """Copy the package's assets; returns None when nothing applies."""
        public_path = self.public_path
        if not public_path.is_dir():
            return None

        package = self._package(target)
        package_path = self.installation_manager.get_install_path(package)

        paths = declared_asset_paths(package_path, self.write_error)
        if paths is None:
            return None

        result = InstallResult(package=package)
        gitignore = PublicGitignore(public_path)
        for source in paths:
            self._copy_assets(package, source, public_path, gitignore, result)

        if result.groups:
            logger.info(
                "Installed %d asset group(s) for %s: %s",
                len(result.groups),
                package.name,
                ", ".join(result.groups),
            )
        return result

    def _copy_assets(
        self,
        package: Package,
        source: Path,
        public_path: Path,
        gitignore: PublicGitignore,
        result: InstallResult,
    ) -> None:
        """Copy each asset group under *source* and record it in .gitignore."""
        for group_path in iter_asset_groups(source):
            group = group_path.name
            try:
                result.files_copied += self._copy_tree(group_path, public_path / group)
                if gitignore.ensure_entry(group):
                    result.gitignore_added.append(f"{group}/")
            except OSError as exc:
                raise AssetInstallError(package, group_path, exc) from exc
            result.groups.append(group)

    @staticmethod
    def _copy_tree(source: Path, destination: Path) -> int:
        """Recursively copy files, overwriting existing ones. Returns file count."""
        destination.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
        copied = 0
        for file in sorted(source.rglob("*")):
            if file.is_dir():
                continue
            target = destination / file.relative_to(source)
            target.parent.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
            shutil.copy2(file, target)
            copied += 1
        return copied

    @staticmethod
    def _package(target: Union[Package, PackageEvent]) -> Package:
        if isinstance(target, Package):
            return target

        operation = target.operation
        if isinstance(operation, UpdateOperation):
            return operation.target_package
        if isinstance(operation, InstallOperation):
            return operation.package
        raise TypeError(f"Cannot install from a {type(operation).__name__} event")


__all__ = [
    "AssetInstaller",
    "InstallResult",
    "default_write_error",
    "iter_asset_groups",
]
