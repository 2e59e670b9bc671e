"""
asset-manager - publish static assets declared by dependency packages.

Usage:
    asset-manager install org/package [org/other ...]
    asset-manager uninstall org/package
    asset-manager update org/package --previous-path /path/to/old/org/package
    asset-manager status
    asset-manager check vendor/org/package
"""

from pathlib import Path
from typing import Optional

import typer

from asset_manager.cli.commands import check, install, status, uninstall, update
from asset_manager.core.constants import PROJECT_ROOT_ENV

__version__ = "1.0.0"

app = typer.Typer(
    name="asset-manager",
    help="Copy and remove static assets declared by dependency packages",
    add_completion=False,
    no_args_is_help=True,
)


@app.callback()
def callback(
    ctx: typer.Context,
    project_root: Optional[Path] = typer.Option(
        None,
        "--project-root",
        envvar=PROJECT_ROOT_ENV,
        help="Project root containing the public directory (default: current directory)",
        file_okay=False,
    ),
):
    """Store the project root override for subcommands."""
    ctx.obj = project_root


app.command("install")(install)
app.command("uninstall")(uninstall)
app.command("update")(update)
app.command("status")(status)
app.command("check")(check)


def main():
    app()


if __name__ == "__main__":
    main()
