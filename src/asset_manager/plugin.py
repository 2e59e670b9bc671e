"""Package-manager plugin wiring host lifecycle events to the asset installers.

Updates uninstall the previous version's assets before installing the new
version's, since asset group names may differ between versions. With
``defer_installs`` enabled, installer runs are queued and executed in order
when the host finalizes the transaction (``post-autoload-dump``).
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Deque, Dict, List

from asset_manager.core.config import AssetManagerSettings
from asset_manager.core.constants import PUBLIC_DIR
from asset_manager.errors import AssetManagerError
from asset_manager.installer import AssetInstaller, InstallResult, default_write_error
from asset_manager.module_config import WriteError
from asset_manager.package import (
    InstallationManager,
    InstallOperation,
    Package,
    PackageEvent,
    UninstallOperation,
    UpdateOperation,
)
from asset_manager.uninstaller import AssetUninstaller, UninstallResult

logger = logging.getLogger(__name__)

POST_PACKAGE_INSTALL = "post-package-install"
POST_PACKAGE_UPDATE = "post-package-update"
PRE_PACKAGE_UNINSTALL = "pre-package-uninstall"
POST_AUTOLOAD_DUMP = "post-autoload-dump"


@dataclass(frozen=True)
class PackageFailure:
    """An install or uninstall that failed for one package."""

    action: str
    package: Package
    error: Exception


@dataclass(frozen=True)
class PendingAction:
    """A queued asset action awaiting :meth:`AssetManagerPlugin.flush`."""

    action: str
    package: Package
    run: Callable[[], object]


@dataclass
class PluginReport:
    """Accumulated outcomes for one host transaction."""

    installed: List[InstallResult] = field(default_factory=list)
    uninstalled: List[UninstallResult] = field(default_factory=list)
    failures: List[PackageFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class AssetManagerPlugin:
    """Responds to host package lifecycle events."""

    def __init__(
        self,
        installation_manager: InstallationManager,
        write_error: WriteError | None = None,
        *,
        project_path: Path | None = None,
        public_dir: str = PUBLIC_DIR,
        defer_installs: bool = False,
    ):
        self.installation_manager = installation_manager
        self.write_error = write_error or default_write_error
        self.project_path = Path(project_path) if project_path else Path.cwd()
        self.public_dir = public_dir
        self.defer_installs = defer_installs
        self.report = PluginReport()
        self._pending: Deque[PendingAction] = deque()

    @classmethod
    def from_settings(
        cls,
        settings: AssetManagerSettings,
        installation_manager: InstallationManager,
        write_error: WriteError | None = None,
    ) -> "AssetManagerPlugin":
        return cls(
            installation_manager,
            write_error,
            project_path=settings.project_path,
            public_dir=settings.public_dir,
            defer_installs=settings.defer_installs,
        )

    @staticmethod
    def get_subscribed_events() -> Dict[str, str]:
        """Map host event names to handler method names."""
        return {
            POST_PACKAGE_INSTALL: "on_post_package_install",
            POST_PACKAGE_UPDATE: "on_post_package_update",
            PRE_PACKAGE_UNINSTALL: "on_pre_package_uninstall",
            POST_AUTOLOAD_DUMP: "on_post_autoload_dump",
        }

    @property
    def pending(self) -> List[PendingAction]:
        return list(self._pending)

    def handle(self, event: PackageEvent) -> None:
        """Dispatch *event* to its handler; unknown events are ignored."""
        handler_name = self.get_subscribed_events().get(event.name)
        if handler_name is None:
            logger.debug("Ignoring unsubscribed event %s", event.name)
            return
        getattr(self, handler_name)(event)

    def on_post_package_install(self, event: PackageEvent) -> None:
        """Install assets provided by the package, if any."""
        operation = event.operation
        if not isinstance(operation, InstallOperation):
            raise TypeError(f"{event.name} requires an install operation")
        self.install(operation.package)

    def on_post_package_update(self, event: PackageEvent) -> None:
        """Uninstall the previous version's assets, then install the new version's."""
        operation = event.operation
        if not isinstance(operation, UpdateOperation):
            raise TypeError(f"{event.name} requires an update operation")
        self.uninstall(operation.initial_package)
        self.install(operation.target_package)

    def on_pre_package_uninstall(self, event: PackageEvent) -> None:
        """Uninstall assets provided by the package, if any."""
        operation = event.operation
        if not isinstance(operation, UninstallOperation):
            raise TypeError(f"{event.name} requires an uninstall operation")
        self.uninstall(operation.package)

    def on_post_autoload_dump(self, event: PackageEvent | None = None) -> None:
        self.flush()

    def install(self, package: Package) -> None:
        installer = self._installer()
        if self.defer_installs:
            logger.debug("Deferring asset install for %s", package.name)
            self._pending.append(
                PendingAction("install", package, lambda: installer(package))
            )
            return
        self._run("install", package, lambda: installer(package))

    def uninstall(self, package: Package) -> None:
        uninstaller = self._uninstaller()
        self._run("uninstall", package, lambda: uninstaller(package))

    def flush(self) -> PluginReport:
        """Run every deferred action in the order it was queued."""
        while self._pending:
            pending = self._pending.popleft()
            self._run(pending.action, pending.package, pending.run)
        return self.report

    def _run(self, action: str, package: Package, run: Callable[[], object]) -> None:
        try:
            result = run()
        except (AssetManagerError, OSError) as exc:
            logger.error("Failed to %s assets for %s: %s", action, package.name, exc)
            self.write_error(f"Failed to {action} assets for {package.name}: {exc}")
            self.report.failures.append(PackageFailure(action, package, exc))
            return

        if isinstance(result, InstallResult):
            self.report.installed.append(result)
        elif isinstance(result, UninstallResult):
            self.report.uninstalled.append(result)

    def _installer(self) -> AssetInstaller:
        return AssetInstaller(
            self.installation_manager,
            self.write_error,
            project_path=self.project_path,
            public_dir=self.public_dir,
        )

    def _uninstaller(self) -> AssetUninstaller:
        return AssetUninstaller(
            self.installation_manager,
            self.write_error,
            project_path=self.project_path,
            public_dir=self.public_dir,
        )


__all__ = [
    "AssetManagerPlugin",
    "POST_AUTOLOAD_DUMP",
    "POST_PACKAGE_INSTALL",
    "POST_PACKAGE_UPDATE",
    "PRE_PACKAGE_UNINSTALL",
    "PackageFailure",
    "PendingAction",
    "PluginReport",
]
