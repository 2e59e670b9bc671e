"""Shared path constants for asset-manager project and package layout."""

from __future__ import annotations

PUBLIC_DIR = "public"
VENDOR_DIR = "vendor"
GITIGNORE_FILENAME = ".gitignore"
SETTINGS_FILENAME = ".asset-manager.yaml"
PROJECT_ROOT_ENV = "ASSET_MANAGER_PROJECT_ROOT"

# Looked up under <package install path>, first match wins.
MODULE_CONFIG_CANDIDATES = (
    "config/module.config.yaml",
    "config/module.config.yml",
    "config/module.config.py",
)

# Name a Python module config must bind to the configuration document.
MODULE_CONFIG_VARIABLE = "config"

CONFIG_KEY_PATH = ("asset_manager", "resolver_configs", "paths")

DIRECTORY_MODE = 0o775

__all__ = [
    "CONFIG_KEY_PATH",
    "DIRECTORY_MODE",
    "GITIGNORE_FILENAME",
    "MODULE_CONFIG_CANDIDATES",
    "MODULE_CONFIG_VARIABLE",
    "PROJECT_ROOT_ENV",
    "PUBLIC_DIR",
    "SETTINGS_FILENAME",
    "VENDOR_DIR",
]
