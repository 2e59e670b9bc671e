"""Locate, gate and load a package's module configuration.

The only data read from the configuration is the list of asset source
directories under ``asset_manager.resolver_configs.paths``. Anything else in
the document is ignored, and any other shape means "no assets".
"""

from __future__ import annotations

import logging
import os
import runpy
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from asset_manager.core.constants import (
    CONFIG_KEY_PATH,
    MODULE_CONFIG_CANDIDATES,
    MODULE_CONFIG_VARIABLE,
)
from asset_manager.errors import ModuleConfigError
from asset_manager.safety import is_declarative, is_safe_to_parse, needs_parsing

logger = logging.getLogger(__name__)

WriteError = Callable[[str], None]

UNSAFE_CONFIG_MESSAGE = (
    "Unable to check for asset configuration in {path}; "
    "file uses one or more exit() or eval() statements."
)


def locate_module_config(package_path: Path) -> Path | None:
    """Return the first module configuration file under *package_path*."""
    for candidate in MODULE_CONFIG_CANDIDATES:
        config_path = Path(package_path) / candidate
        if config_path.is_file():
            return config_path
    return None


def load_module_config(config_path: Path) -> Any:
    """Load the configuration document without any safety checks.

    Callers must gate scripts through :func:`is_safe_to_parse` first.
    """
    if is_declarative(config_path):
        yaml = YAML(typ="safe")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                return yaml.load(f)
        except (OSError, YAMLError) as exc:
            raise ModuleConfigError(config_path, f"invalid YAML: {exc}") from exc

    try:
        namespace = runpy.run_path(str(config_path), run_name="__asset_manager_config__")
    except Exception as exc:
        raise ModuleConfigError(
            config_path, f"configuration script raised {type(exc).__name__}: {exc}"
        ) from exc
    return namespace.get(MODULE_CONFIG_VARIABLE)


def extract_asset_paths(config: Any, base_path: Path) -> list[Path] | None:
    """Return declared asset source directories, or None when there are none.

    Relative entries are resolved against *base_path*. Order and duplicates
    are preserved; entries that are not paths are ignored.
    """
    node = config
    for key in CONFIG_KEY_PATH:
        if not isinstance(node, Mapping) or key not in node:
            return None
        node = node[key]

    if isinstance(node, Mapping):
        entries = list(node.values())
    elif isinstance(node, (list, tuple)):
        entries = list(node)
    else:
        return None

    paths: list[Path] = []
    for entry in entries:
        if not isinstance(entry, (str, os.PathLike)) or not str(entry):
            continue
        path = Path(entry)
        paths.append(path if path.is_absolute() else base_path / path)
    return paths


def write_unsafe_config_warning(config_path: Path, write_error: WriteError) -> None:
    logger.warning("Skipping unsafe module configuration %s", config_path)
    write_error(UNSAFE_CONFIG_MESSAGE.format(path=config_path))


def declared_asset_paths(package_path: Path, write_error: WriteError) -> list[Path] | None:
    """Return the asset source directories a package declares.

    Returns None when the package has no configuration, the configuration
    does not mention assets, is unsafe to load, or has the wrong shape. Only
    the unsafe case is reported through *write_error*.

    Raises:
        ModuleConfigError: If the configuration cannot be read or loaded.
    """
    config_path = locate_module_config(package_path)
    if config_path is None:
        logger.debug("No module configuration in %s", package_path)
        return None

    try:
        if not needs_parsing(config_path):
            logger.debug("%s declares no asset_manager key", config_path)
            return None

        if not is_safe_to_parse(config_path):
            write_unsafe_config_warning(config_path, write_error)
            return None
    except OSError as exc:
        raise ModuleConfigError(config_path, f"unreadable: {exc}") from exc

    config = load_module_config(config_path)
    paths = extract_asset_paths(config, config_path.parent)
    if paths is None:
        logger.debug("%s has no asset_manager.resolver_configs.paths", config_path)
    return paths


__all__ = [
    "UNSAFE_CONFIG_MESSAGE",
    "declared_asset_paths",
    "extract_asset_paths",
    "load_module_config",
    "locate_module_config",
]
