"""Asset install, uninstall, update and inspection commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from asset_manager.cli.helpers import console, get_settings_or_exit
from asset_manager.core.config import AssetManagerSettings
from asset_manager.gitignore import PublicGitignore
from asset_manager.module_config import locate_module_config
from asset_manager.package import (
    InstallOperation,
    Package,
    PackageEvent,
    UninstallOperation,
    UpdateOperation,
    VendorInstallationManager,
)
from asset_manager.plugin import (
    POST_AUTOLOAD_DUMP,
    POST_PACKAGE_INSTALL,
    POST_PACKAGE_UPDATE,
    PRE_PACKAGE_UNINSTALL,
    AssetManagerPlugin,
    PluginReport,
)
from asset_manager.safety import is_safe_to_parse, needs_parsing


def _plugin(settings: AssetManagerSettings, defer: bool | None = None) -> AssetManagerPlugin:
    plugin = AssetManagerPlugin.from_settings(
        settings, VendorInstallationManager(settings.vendor_path)
    )
    if defer is not None:
        plugin.defer_installs = defer
    return plugin


def _report_payload(settings: AssetManagerSettings, report: PluginReport) -> dict[str, object]:
    return {
        "project_root": str(settings.project_path),
        "public_path": str(settings.public_path),
        "installed": [
            {
                "package": item.package.name,
                "groups": list(item.groups),
                "files_copied": item.files_copied,
                "gitignore_added": list(item.gitignore_added),
            }
            for item in report.installed
        ],
        "uninstalled": [
            {
                "package": item.package.name,
                "removed": list(item.removed),
                "untracked": list(item.untracked),
                "missing": list(item.missing),
            }
            for item in report.uninstalled
        ],
        "failures": [
            {"action": item.action, "package": item.package.name, "error": str(item.error)}
            for item in report.failures
        ],
    }


def _finish(settings: AssetManagerSettings, report: PluginReport, json_output: bool) -> None:
    if json_output:
        typer.echo(json.dumps(_report_payload(settings, report), indent=2))
    else:
        for installed in report.installed:
            console.print(
                f"[green]Installed[/green] {installed.package.name}: "
                f"{len(installed.groups)} group(s), {installed.files_copied} file(s)"
            )
        for uninstalled in report.uninstalled:
            console.print(
                f"[green]Removed[/green] {uninstalled.package.name}: "
                f"{', '.join(uninstalled.removed) or 'nothing tracked'}"
            )
            if uninstalled.untracked:
                console.print(
                    "[yellow]Left untracked groups in place:[/yellow] "
                    + ", ".join(uninstalled.untracked)
                )
        if not report.installed and not report.uninstalled and report.ok:
            console.print("[dim]No assets to publish or remove.[/dim]")

    if not report.ok:
        raise typer.Exit(1)


def install(
    ctx: typer.Context,
    names: List[str] = typer.Argument(..., help="Package names, resolved under the vendor directory"),
    defer: Optional[bool] = typer.Option(
        None,
        "--defer/--no-defer",
        help="Queue installs and run them after all packages are processed",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
) -> None:
    """Copy the assets declared by each package into the public directory."""
    settings = get_settings_or_exit(ctx)
    plugin = _plugin(settings, defer)

    for name in names:
        plugin.handle(PackageEvent(POST_PACKAGE_INSTALL, InstallOperation(Package(name))))
    plugin.handle(PackageEvent(POST_AUTOLOAD_DUMP))

    _finish(settings, plugin.report, json_output)


def uninstall(
    ctx: typer.Context,
    names: List[str] = typer.Argument(..., help="Package names, resolved under the vendor directory"),
    json_output: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
) -> None:
    """Remove the tracked assets of each package from the public directory."""
    settings = get_settings_or_exit(ctx)
    plugin = _plugin(settings)

    for name in names:
        plugin.handle(PackageEvent(PRE_PACKAGE_UNINSTALL, UninstallOperation(Package(name))))

    _finish(settings, plugin.report, json_output)


def update(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Package name, resolved under the vendor directory"),
    previous_path: Path = typer.Option(
        ...,
        "--previous-path",
        help="Install path of the version being replaced",
        exists=True,
        file_okay=False,
        resolve_path=True,
    ),
    json_output: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
) -> None:
    """Replace the assets of a previous package version with the current version's."""
    settings = get_settings_or_exit(ctx)
    plugin = _plugin(settings)

    operation = UpdateOperation(
        initial_package=Package(name, install_path=previous_path),
        target_package=Package(name),
    )
    plugin.handle(PackageEvent(POST_PACKAGE_UPDATE, operation))
    plugin.handle(PackageEvent(POST_AUTOLOAD_DUMP))

    _finish(settings, plugin.report, json_output)


def status(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output machine-readable JSON"),
) -> None:
    """List asset groups tracked in the public .gitignore."""
    settings = get_settings_or_exit(ctx)
    gitignore = PublicGitignore(settings.public_path)
    entries = [
        {"entry": entry, "present": (settings.public_path / entry.rstrip("/")).is_dir()}
        for entry in gitignore.entries()
    ]

    if json_output:
        typer.echo(
            json.dumps(
                {"public_path": str(settings.public_path), "entries": entries},
                indent=2,
            )
        )
        return

    if not settings.public_path.is_dir():
        console.print(f"[yellow]No public directory at {settings.public_path}[/yellow]")
        return

    table = Table(title="Published Asset Groups", show_header=True)
    table.add_column("Entry", style="cyan")
    table.add_column("Directory", style="green")
    for item in entries:
        table.add_row(item["entry"], "present" if item["present"] else "[red]missing[/red]")
    console.print(table)


def check(
    path: Path = typer.Argument(
        ...,
        help="Module configuration file, or a package directory containing one",
        exists=True,
        resolve_path=True,
    ),
) -> None:
    """Report whether a module configuration would be loaded."""
    config_path = locate_module_config(path) if path.is_dir() else path
    if config_path is None:
        console.print(f"[yellow]No module configuration found under {path}[/yellow]")
        raise typer.Exit(1)

    if not needs_parsing(config_path):
        console.print(f"[dim]No asset_manager configuration:[/dim] {config_path}")
        return

    if not is_safe_to_parse(config_path):
        console.print(f"[red]Unsafe, uses exit() or eval()-like constructs:[/red] {config_path}")
        raise typer.Exit(1)

    console.print(f"[green]Safe to load:[/green] {config_path}")


__all__ = ["check", "install", "status", "uninstall", "update"]
