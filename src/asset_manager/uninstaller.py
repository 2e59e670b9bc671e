"""Remove asset groups a package previously published into the public directory."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from asset_manager.core.constants import PUBLIC_DIR
from asset_manager.errors import AssetUninstallError
from asset_manager.gitignore import PublicGitignore, gitignore_entry
from asset_manager.installer import default_write_error, iter_asset_groups
from asset_manager.module_config import WriteError, declared_asset_paths
from asset_manager.package import (
    InstallationManager,
    Package,
    PackageEvent,
    UninstallOperation,
    UpdateOperation,
)

logger = logging.getLogger(__name__)


@dataclass
class UninstallResult:
    """Result of uninstalling one package's assets."""

    package: Package
    removed: List[str] = field(default_factory=list)
    """Asset groups deleted from the public directory"""

    untracked: List[str] = field(default_factory=list)
    """Declared groups left alone because .gitignore does not list them"""

    missing: List[str] = field(default_factory=list)
    """Tracked groups whose public directory no longer exists"""


class AssetUninstaller:
    """Removes a package's asset groups, but only those recorded in .gitignore."""

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

    def __call__(self, target: Union[Package, PackageEvent]) -> UninstallResult | None:
        return self.uninstall(target)

    def uninstall(self, target: Union[Package, PackageEvent]) -> UninstallResult | None:
        """Remove the package's tracked assets; returns None when nothing applies."""
        public_path = self.public_path
        if not public_path.is_dir():
            # No public path in the project; nothing to remove
            return None

        gitignore = PublicGitignore(public_path)
        if not gitignore.exists():
            # No .gitignore rules; nothing could have been installed
            return None

        package = self._package(target)
        package_path = self.installation_manager.get_install_path(package)

        paths = declared_asset_paths(package_path, self.write_error)
        if paths is None:
            return None

        result = UninstallResult(package=package)
        with gitignore.locked():
            lines = gitignore.read_lines()
            try:
                for source in paths:
                    self._remove_assets(package, source, public_path, lines, result)
            finally:
                # Groups already deleted must lose their entry even if a later one fails
                gitignore.write_lines(lines)

        if result.removed:
            logger.info(
                "Removed %d asset group(s) for %s: %s",
                len(result.removed),
                package.name,
                ", ".join(result.removed),
            )
        return result

    def _remove_assets(
        self,
        package: Package,
        source: Path,
        public_path: Path,
        lines: List[str],
        result: UninstallResult,
    ) -> None:
        """Delete each tracked asset group declared under *source*."""
        for group_path in iter_asset_groups(source):
            group = group_path.name
            entry = gitignore_entry(group)
            if entry not in lines:
                # Not installed by us; never touch it
                result.untracked.append(group)
                continue

            path_to_remove = public_path / group
            if not path_to_remove.is_dir():
                result.missing.append(group)
                continue

            try:
                shutil.rmtree(path_to_remove)
            except OSError as exc:
                raise AssetUninstallError(package, path_to_remove, exc) from exc
            lines.remove(entry)
            result.removed.append(group)

    @staticmethod
    def _package(target: Union[Package, PackageEvent]) -> Package:
        if isinstance(target, Package):
            return target

        operation = target.operation
        if isinstance(operation, UpdateOperation):
            return operation.initial_package
        if isinstance(operation, UninstallOperation):
            return operation.package
        raise TypeError(f"Cannot uninstall from a {type(operation).__name__} event")


__all__ = [
    "AssetUninstaller",
    "UninstallResult",
]
