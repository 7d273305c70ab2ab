"""Shared helpers for CLI modules: settings, repository and registry access."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from paw_installer.config import Settings, get_settings
from paw_installer.errors import RegistryCorruptedError
from paw_installer.installer import FilesystemRepository
from paw_installer.plugins.models import PluginRecord
from paw_installer.registry import RegistryStore

console = Console()


def get_cli_settings(ctx: typer.Context) -> Settings:
    """Settings resolved by the main callback, or the environment defaults."""
    if isinstance(ctx.obj, Settings):
        return ctx.obj
    return get_settings()


def build_settings(vendor_dir: Path | None, verbose: bool) -> Settings:
    overrides: dict = {}
    if vendor_dir is not None:
        overrides["vendor_dir"] = vendor_dir
    if verbose:
        overrides["log_level"] = "DEBUG"
    if not overrides:
        return get_settings()
    return Settings(**overrides)


def open_repository(settings: Settings) -> FilesystemRepository:
    return FilesystemRepository(settings.repository_path)


def load_registry(settings: Settings) -> dict[str, PluginRecord]:
    """Load the plugin registry, exiting with a message when it is corrupted."""
    store = RegistryStore(settings.vendor_dir, settings.registry_file)
    try:
        return store.load()
    except RegistryCorruptedError as e:
        fail(str(e))


def fail(message: str, hint: str | None = None) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}", soft_wrap=True)
    if hint:
        console.print(escape(hint), soft_wrap=True)
    raise typer.Exit(1)
