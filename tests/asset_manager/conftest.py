"""Shared fixtures for asset installer, uninstaller and plugin tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List

import pytest

from asset_manager.package import Package, VendorInstallationManager

from asset_fixtures import EXPECTED_ASSETS, PACKAGE_NAME, RecordingWriter, write_files


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Project root with an empty public directory."""
    root = tmp_path / "project"
    (root / "public").mkdir(parents=True)
    return root


@pytest.fixture
def public(project: Path) -> Path:
    return project / "public"


@pytest.fixture
def asset_sources(tmp_path: Path) -> List[Path]:
    """Two declared source directories holding three asset groups."""
    set_one = tmp_path / "assets" / "asset-set-1"
    set_two = tmp_path / "assets" / "asset-set-2"
    write_files(set_one, EXPECTED_ASSETS[:6])
    write_files(set_two, EXPECTED_ASSETS[6:])
    # Top-level files in a source directory are not asset groups
    (set_one / "README.md").write_text("not an asset group\n", encoding="utf-8")
    return [set_one, set_two]


@pytest.fixture
def package() -> Package:
    return Package(PACKAGE_NAME, version="1.0.0")


@pytest.fixture
def package_path(project: Path) -> Path:
    return project / "vendor" / PACKAGE_NAME


@pytest.fixture
def installation_manager(project: Path) -> VendorInstallationManager:
    return VendorInstallationManager(project / "vendor")


@pytest.fixture
def write_config(package_path: Path) -> Callable[[str, str], Path]:
    """Write ``config/<filename>`` for the fixture package."""

    def _write(content: str, filename: str = "module.config.yaml") -> Path:
        config_path = package_path / "config" / filename
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(content, encoding="utf-8")
        return config_path

    return _write


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()
