"""Shared helpers for asset-manager CLI commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from asset_manager.core.config import AssetManagerSettings, load_settings
from asset_manager.errors import SettingsError

console = Console()


def get_settings_or_exit(ctx: typer.Context) -> AssetManagerSettings:
    """Load project settings using the ``--project-root`` stored on the context."""
    project_root: Path | None = ctx.obj if isinstance(ctx.obj, Path) else None
    try:
        return load_settings(project_root)
    except SettingsError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)


__all__ = ["console", "get_settings_or_exit"]
