"""CLI command modules for asset-manager."""

from .assets import check, install, status, uninstall, update

__all__ = [
    "check",
    "install",
    "status",
    "uninstall",
    "update",
]
