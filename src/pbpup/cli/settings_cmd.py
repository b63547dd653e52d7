"""CLI commands for inspecting and checking pbpup settings."""

from __future__ import annotations

import json
import os
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console

settings_app = typer.Typer(help="Inspect and check pbpup configuration.")
console = Console()


def store_path_problem(path: Path) -> str | None:
    """Return why the profile database at *path* cannot be written, or ``None``."""
    parent = path.parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return f"cannot create {parent}: {e}"
    if path.exists():
        if not path.is_file():
            return f"{path} is not a file"
        if not os.access(path, os.W_OK):
            return f"{path} is not writable"
    elif not os.access(parent, os.W_OK):
        return f"{parent} is not writable"
    return None


@settings_app.command("show")
def show_settings() -> None:
    """Print the resolved settings as JSON."""
    from pbpup.settings import get_settings

    settings = get_settings()
    console.print_json(json.dumps(settings.model_dump(mode="json"), default=str))


@settings_app.command("validate")
def validate_settings() -> None:
    """Load the settings and check the profile store and browser options."""
    from pbpup.settings import get_settings

    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[red]✗[/red] Invalid settings ({e.error_count()} error(s)):")
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            console.print(f"  {location}: {error['msg']}", highlight=False)
        raise typer.Exit(code=1)

    problem = store_path_problem(Path(settings.store.path))
    if problem:
        console.print(f"[red]✗[/red] Profile store unusable: {problem}", highlight=False)
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Profile store: {settings.store.path}", highlight=False)
    console.print(f"[green]✓[/green] Browser channel: {settings.browser.channel or 'bundled chromium'}")
    console.print(f"  Headless: {settings.browser.headless}, find timeout: {settings.browser.find_timeout_ms} ms")
