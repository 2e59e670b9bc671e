"""Tests for the public .gitignore bookkeeping."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from asset_manager import gitignore as gitignore_module
from asset_manager.gitignore import PublicGitignore, gitignore_entry, split_lines


@pytest.mark.parametrize(
    "content, expected",
    [
        ("", [""]),
        ("a/\nb/", ["a/", "b/"]),
        ("a/\n", ["a/", ""]),
        ("a/\r\nb/\rc/", ["a/", "b/", "c/"]),
        ("\n\n", ["", "", ""]),
    ],
)
def test_split_lines(content: str, expected: list) -> None:
    assert split_lines(content) == expected


def test_gitignore_entry_marks_directory() -> None:
    assert gitignore_entry("api-tools") == "api-tools/"


class TestPublicGitignore:
    def test_missing_file_reads_as_single_empty_line(self, tmp_path: Path) -> None:
        gitignore = PublicGitignore(tmp_path)
        assert not gitignore.exists()
        assert gitignore.read_lines() == [""]
        assert gitignore.entries() == []

    def test_ensure_entry_creates_file(self, tmp_path: Path) -> None:
        gitignore = PublicGitignore(tmp_path)

        assert gitignore.ensure_entry("api-tools") is True

        assert gitignore.path.read_text(encoding="utf-8") == "\napi-tools/"

    def test_ensure_entry_is_idempotent(self, tmp_path: Path) -> None:
        gitignore = PublicGitignore(tmp_path)
        gitignore.path.write_text("node_modules/\napi-tools/\n", encoding="utf-8")

        assert gitignore.ensure_entry("api-tools") is False

        assert gitignore.path.read_text(encoding="utf-8") == "node_modules/\napi-tools/\n"

    def test_ensure_entry_requires_exact_line(self, tmp_path: Path) -> None:
        gitignore = PublicGitignore(tmp_path)
        gitignore.path.write_text("api-tools\n/api-tools/", encoding="utf-8")

        assert gitignore.ensure_entry("api-tools") is True

        assert gitignore.read_lines() == ["api-tools", "/api-tools/", "api-tools/"]

    def test_write_lines_joins_with_newlines(self, tmp_path: Path) -> None:
        gitignore = PublicGitignore(tmp_path)
        gitignore.write_lines(["a/", "", "b/"])
        assert gitignore.path.read_text(encoding="utf-8") == "a/\n\nb/"

    def test_entries_skip_comments_and_files(self, tmp_path: Path) -> None:
        gitignore = PublicGitignore(tmp_path)
        gitignore.path.write_text("# assets/\n\n*.log\napi-tools/\nbuild/\n", encoding="utf-8")

        assert gitignore.entries() == ["api-tools/", "build/"]

    def test_concurrent_ensure_entry_keeps_every_group(self, tmp_path: Path) -> None:
        groups = [f"group-{index}" for index in range(20)]

        def add(group: str) -> None:
            PublicGitignore(tmp_path).ensure_entry(group)

        threads = [threading.Thread(target=add, args=(group,)) for group in groups]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        lines = PublicGitignore(tmp_path).read_lines()
        assert sorted(line for line in lines if line) == sorted(f"{group}/" for group in groups)

    def test_lock_is_shared_while_held_and_released_after(self, tmp_path: Path) -> None:
        gitignore = PublicGitignore(tmp_path)
        key = gitignore.path.resolve()

        with gitignore.locked():
            assert key in gitignore_module._locks
            # Re-entrant for nested read-modify-write on the same file
            assert PublicGitignore(tmp_path).ensure_entry("api-tools") is True

        assert key not in gitignore_module._locks

    def test_undecodable_bytes_round_trip(self, tmp_path: Path) -> None:
        gitignore = PublicGitignore(tmp_path)
        gitignore.path.write_bytes(b"# caf\xe9\r\nnode_modules/")

        assert gitignore.ensure_entry("api-tools") is True

        assert gitignore.path.read_bytes() == b"# caf\xe9\nnode_modules/\napi-tools/"
        assert gitignore.entries() == ["node_modules/", "api-tools/"]
