"""Tests for locating, gating and loading package module configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from asset_manager.errors import ModuleConfigError
from asset_manager.module_config import (
    declared_asset_paths,
    extract_asset_paths,
    load_module_config,
    locate_module_config,
)

from asset_fixtures import script_config, yaml_config


class TestLocateModuleConfig:
    def test_returns_none_without_config(self, package_path: Path) -> None:
        assert locate_module_config(package_path) is None

    def test_prefers_yaml_over_script(self, package_path: Path, write_config) -> None:
        write_config("config = {}\n", "module.config.py")
        yaml_path = write_config("asset_manager: {}\n", "module.config.yaml")
        assert locate_module_config(package_path) == yaml_path

    def test_finds_script(self, package_path: Path, write_config) -> None:
        script_path = write_config("config = {}\n", "module.config.py")
        assert locate_module_config(package_path) == script_path


class TestExtractAssetPaths:
    """Only asset_manager.resolver_configs.paths is read."""

    @pytest.mark.parametrize(
        "config",
        [
            None,
            [],
            "asset_manager",
            {},
            {"asset_manager": None},
            {"asset_manager": {"resolver_configs": {}}},
            {"asset_manager": {"resolver_configs": {"paths": "/single/string"}}},
            {"asset_manager": {"resolver_configs": {"paths": None}}},
        ],
    )
    def test_wrong_shapes_mean_no_assets(self, config, tmp_path: Path) -> None:
        assert extract_asset_paths(config, tmp_path) is None

    def test_preserves_order_and_duplicates(self, tmp_path: Path) -> None:
        config = {"asset_manager": {"resolver_configs": {"paths": ["/b", "/a", "/b"]}}}
        assert extract_asset_paths(config, tmp_path) == [Path("/b"), Path("/a"), Path("/b")]

    def test_resolves_relative_entries_and_skips_non_paths(self, tmp_path: Path) -> None:
        config = {
            "asset_manager": {
                "resolver_configs": {"paths": ["../asset", 42, None, "", tmp_path / "abs"]}
            }
        }
        assert extract_asset_paths(config, tmp_path / "config") == [
            tmp_path / "config" / "../asset",
            tmp_path / "abs",
        ]

    def test_mapping_contributes_values(self, tmp_path: Path) -> None:
        config = {"asset_manager": {"resolver_configs": {"paths": {"main": "/assets"}}}}
        assert extract_asset_paths(config, tmp_path) == [Path("/assets")]


class TestLoadModuleConfig:
    def test_loads_yaml(self, write_config) -> None:
        path = write_config(yaml_config(["/srv/assets"]))
        assert load_module_config(path) == {
            "asset_manager": {"resolver_configs": {"paths": ["/srv/assets"]}}
        }

    def test_loads_script_config_variable(self, write_config) -> None:
        path = write_config(script_config(["/srv/assets"]), "module.config.py")
        config = load_module_config(path)
        assert config["asset_manager"]["resolver_configs"]["paths"] == ["/srv/assets"]

    def test_script_without_config_variable_loads_none(self, write_config) -> None:
        path = write_config("settings = {}\n", "module.config.py")
        assert load_module_config(path) is None

    def test_invalid_yaml_raises(self, write_config) -> None:
        path = write_config("asset_manager: [unclosed\n")
        with pytest.raises(ModuleConfigError, match="invalid YAML"):
            load_module_config(path)

    def test_failing_script_raises(self, write_config) -> None:
        path = write_config("config = {'asset_manager': 1 / 0}\n", "module.config.py")
        with pytest.raises(ModuleConfigError, match="ZeroDivisionError"):
            load_module_config(path)


class TestDeclaredAssetPaths:
    def test_script_paths_relative_to_file(self, package_path: Path, write_config, writer) -> None:
        write_config(
            "from pathlib import Path\n\n"
            "config = {'asset_manager': {'resolver_configs': {'paths': [\n"
            "    str(Path(__file__).parent / 'assets'),\n"
            "]}}}\n",
            "module.config.py",
        )
        assert declared_asset_paths(package_path, writer) == [
            package_path / "config" / "assets"
        ]
        assert writer.messages == []

    def test_unsafe_script_is_reported_and_not_executed(
        self, package_path: Path, write_config, writer, tmp_path: Path, caplog
    ) -> None:
        caplog.set_level(logging.WARNING, logger="asset_manager.module_config")
        marker = tmp_path / "executed"
        config_path = write_config(
            script_config(
                ["/srv/assets"],
                prelude=f"open({str(marker)!r}, 'w').close()\nexec('pass')\n",
            ),
            "module.config.py",
        )

        assert declared_asset_paths(package_path, writer) is None
        assert not marker.exists()
        assert len(writer.messages) == 1
        assert str(config_path) in writer.messages[0]
        assert "exit() or eval()" in writer.messages[0]
        assert "Skipping unsafe module configuration" in caplog.text

    def test_unsafe_script_without_asset_key_is_silent(
        self, package_path: Path, write_config, writer
    ) -> None:
        write_config("import sys\nsys.exit(1)\n", "module.config.py")
        assert declared_asset_paths(package_path, writer) is None
        assert writer.messages == []

    def test_missing_config_is_silent(self, package_path: Path, writer) -> None:
        assert declared_asset_paths(package_path, writer) is None
        assert writer.messages == []
