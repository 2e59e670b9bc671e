"""Core settings and constants exports."""

from .config import AssetManagerSettings, load_settings, resolve_project_root
from .constants import (
    CONFIG_KEY_PATH,
    GITIGNORE_FILENAME,
    MODULE_CONFIG_CANDIDATES,
    PROJECT_ROOT_ENV,
    PUBLIC_DIR,
    SETTINGS_FILENAME,
    VENDOR_DIR,
)

__all__ = [
    "AssetManagerSettings",
    "CONFIG_KEY_PATH",
    "GITIGNORE_FILENAME",
    "MODULE_CONFIG_CANDIDATES",
    "PROJECT_ROOT_ENV",
    "PUBLIC_DIR",
    "SETTINGS_FILENAME",
    "VENDOR_DIR",
    "load_settings",
    "resolve_project_root",
]
