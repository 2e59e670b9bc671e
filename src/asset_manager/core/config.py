"""Project settings for asset-manager.

Settings are resolved from, in order of precedence:

1. An explicit project root passed by the caller (``--project-root``).
2. The ``ASSET_MANAGER_PROJECT_ROOT`` environment variable.
3. The current working directory.

Optional overrides for the public and vendor directory names and for
deferred installs are read from ``<project root>/.asset-manager.yaml``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from asset_manager.core.constants import (
    PROJECT_ROOT_ENV,
    PUBLIC_DIR,
    SETTINGS_FILENAME,
    VENDOR_DIR,
)
from asset_manager.errors import SettingsError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetManagerSettings:
    """Resolved settings for one project.

    Attributes:
        project_path: Project root containing the public directory.
        public_dir: Name of the public directory under the project root.
        vendor_dir: Name of the directory packages are installed into.
        defer_installs: Queue installer runs until the batch is finalized.
    """

    project_path: Path
    public_dir: str = PUBLIC_DIR
    vendor_dir: str = VENDOR_DIR
    defer_installs: bool = False

    @property
    def public_path(self) -> Path:
        return self.project_path / self.public_dir

    @property
    def vendor_path(self) -> Path:
        return self.project_path / self.vendor_dir


def resolve_project_root(project_root: Path | str | None = None) -> Path:
    """Return the project root, honouring the explicit override and env var."""
    if project_root:
        return Path(project_root).expanduser().resolve()

    env_root = os.environ.get(PROJECT_ROOT_ENV)
    if env_root:
        return Path(env_root).expanduser().resolve()

    return Path.cwd()


def _expect_str(data: dict, key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str) or not value.strip():
        raise SettingsError(
            f"Invalid {key} in {SETTINGS_FILENAME}: expected a non-empty string"
        )
    return value.strip()


def load_settings(project_root: Path | str | None = None) -> AssetManagerSettings:
    """Load settings for the project rooted at *project_root*."""
    root = resolve_project_root(project_root)
    settings_file = root / SETTINGS_FILENAME

    if not settings_file.exists():
        return AssetManagerSettings(project_path=root)

    yaml = YAML(typ="safe")
    try:
        with open(settings_file, "r", encoding="utf-8") as f:
            data = yaml.load(f) or {}
    except (OSError, YAMLError) as exc:
        logger.error("Failed to load settings: %s", exc)
        raise SettingsError(f"Invalid YAML in {settings_file}: {exc}") from exc

    if not isinstance(data, dict):
        raise SettingsError(f"{settings_file} must contain a mapping at the top level")

    defer_installs = data.get("defer_installs", False)
    if not isinstance(defer_installs, bool):
        raise SettingsError(
            f"Invalid defer_installs in {SETTINGS_FILENAME}: expected true or false"
        )

    return AssetManagerSettings(
        project_path=root,
        public_dir=_expect_str(data, "public_dir", PUBLIC_DIR),
        vendor_dir=_expect_str(data, "vendor_dir", VENDOR_DIR),
        defer_installs=defer_installs,
    )


__all__ = [
    "AssetManagerSettings",
    "load_settings",
    "resolve_project_root",
]
