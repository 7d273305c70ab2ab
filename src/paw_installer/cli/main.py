"""paw-plugins CLI - Main entry point."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from paw_installer.activation import create_installation_manager
from paw_installer.config import configure_logging
from paw_installer.console import ConsoleIO
from paw_installer.errors import (
    InvalidPluginError,
    ManifestError,
    PluginInstallerError,
)
from paw_installer.packages import load_package

from .helpers import (
    build_settings,
    console,
    fail,
    get_cli_settings,
    load_registry,
    open_repository,
)

app = typer.Typer(
    name="paw-plugins",
    help="Install paw plugin packages and maintain the plugin registry",
    add_completion=False,
)


@app.callback()
def main(
    ctx: typer.Context,
    vendor_dir: Optional[Path] = typer.Option(
        None,
        "--vendor-dir",
        envvar="PAW_VENDOR_DIR",
        help="Install root (default: ./vendor)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable debug logging",
    ),
):
    """Manage plugin packages under a vendor dir."""
    settings = build_settings(vendor_dir, verbose)
    configure_logging(settings.log_level, settings.log_format)
    ctx.obj = settings


@app.command()
def install(
    ctx: typer.Context,
    package_dir: Path = typer.Argument(
        ...,
        help="Package directory (containing paw.yaml or paw.json) or manifest file",
        exists=True,
    ),
):
    """Install a package, registering it when it is a plugin."""
    settings = get_cli_settings(ctx)
    package = _load_package(package_dir)
    repo = open_repository(settings)

    installed = repo.find_package(package.name)
    if installed is not None:
        fail(
            f"{installed} is already installed",
            f"Use: paw-plugins update {package_dir}",
        )

    manager, plugins = create_installation_manager(ConsoleIO(), settings)
    try:
        manager.install(repo, package)
    except InvalidPluginError as e:
        fail(f"Installation of {package} failed: {e.reason}")
    except PluginInstallerError as e:
        fail(str(e))

    console.print(f"[green]✓ Installed[/green] {escape(str(package))}")
    if plugins.supports(package.type):
        record = plugins.get_plugins()[package.name]
        console.print(f"  Plugin handle: [cyan]{record.handle}[/cyan]")


@app.command()
def update(
    ctx: typer.Context,
    package_dir: Path = typer.Argument(
        ...,
        help="Directory or manifest of the new package version",
        exists=True,
    ),
):
    """Replace an installed package with another version."""
    settings = get_cli_settings(ctx)
    target = _load_package(package_dir)
    repo = open_repository(settings)

    initial = repo.find_package(target.name)
    if initial is None:
        fail(
            f"{target.pretty_name} is not installed",
            f"Use: paw-plugins install {package_dir}",
        )

    manager, _ = create_installation_manager(ConsoleIO(), settings)
    try:
        manager.update(repo, initial, target)
    except InvalidPluginError as e:
        fail(f"Update of {initial} to {target.pretty_version} failed: {e.reason}")
    except PluginInstallerError as e:
        fail(str(e))

    console.print(
        f"[green]✓ Updated[/green] {escape(target.pretty_name)} "
        f"({escape(initial.pretty_version)} → {escape(target.pretty_version)})"
    )


@app.command()
def uninstall(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Package name (vendor/name)"),
):
    """Remove an installed package and its registry entry."""
    settings = get_cli_settings(ctx)
    repo = open_repository(settings)

    package = repo.find_package(name)
    if package is None:
        fail(f"{name} is not installed")

    manager, _ = create_installation_manager(ConsoleIO(), settings)
    try:
        manager.uninstall(repo, package)
    except PluginInstallerError as e:
        fail(str(e))

    console.print(f"[green]✓ Removed[/green] {escape(str(package))}")


@app.command("list")
def list_plugins(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json", "-j",
        help="Output as JSON",
    ),
):
    """List registered plugins."""
    settings = get_cli_settings(ctx)
    plugins = load_registry(settings)

    if json_output:
        print(json.dumps({name: p.to_registry() for name, p in plugins.items()}, indent=2))
        return

    if not plugins:
        console.print("[yellow]No plugins installed[/yellow]")
        return

    table = Table(title="Installed Plugins")
    table.add_column("Package", style="cyan")
    table.add_column("Handle", style="bold")
    table.add_column("Version")
    table.add_column("Class")
    table.add_column("Developer")

    for name, plugin in plugins.items():
        table.add_row(
            name,
            plugin.handle,
            plugin.version or "-",
            plugin.class_name,
            plugin.developer or "-",
        )

    console.print(table)


@app.command()
def show(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Package name (vendor/name)"),
    json_output: bool = typer.Option(
        False,
        "--json", "-j",
        help="Output as JSON",
    ),
):
    """Show the registry entry of a plugin."""
    settings = get_cli_settings(ctx)
    plugins = load_registry(settings)

    plugin = plugins.get(name.lower())
    if plugin is None:
        fail(f"No plugin registered for {name}")

    if json_output:
        print(json.dumps(plugin.to_registry(), indent=2))
        return

    lines = [
        f"[bold]{escape(plugin.name or name)}[/bold] {escape(plugin.version or '')}",
        f"[dim]{escape(plugin.description or 'No description')}[/dim]",
        "",
        f"Handle:    {plugin.handle}",
        f"Class:     {escape(plugin.class_name)}",
        f"Base path: {escape(plugin.base_path)}",
    ]
    if plugin.developer:
        lines.append(f"Developer: {escape(plugin.developer)}")
    if plugin.aliases:
        lines.append("Aliases:")
        lines.extend(
            f"  {escape(alias)} → {escape(path)}" for alias, path in plugin.aliases.items()
        )
    console.print(Panel("\n".join(lines), title=name, border_style="blue"))


def _load_package(path: Path):
    try:
        return load_package(path)
    except ManifestError as e:
        fail(str(e))


if __name__ == "__main__":
    app()
