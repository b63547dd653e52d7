"""Unified CLI entry point for pbpup.

Running ``pbpup`` with no arguments starts the interactive session.
Config precedence: built-in defaults -> settings.toml -> env vars (PBPUP_* with double underscores).
"""

from __future__ import annotations

import logging
import sys

import typer
from rich.console import Console

from pbpup.cli.settings_cmd import settings_app

try:
    from importlib.metadata import version

    VERSION = version("pbpup")
except Exception:
    VERSION = "unknown"

APP_HELP = (
    "pbpup: push build output into a forum plugin editor. "
    "Run without a command to start an interactive session. "
    "Config precedence: defaults -> settings.toml -> env vars (PBPUP_* with __)."
)

app = typer.Typer(add_completion=False, help=APP_HELP)
app.add_typer(settings_app, name="settings")

console = Console()


def configure_logging(level: str, log_file: str = "") -> None:
    """Route log records to stderr (or *log_file*) at *level*."""
    target: dict[str, object] = {"filename": log_file} if log_file else {"stream": sys.stderr}
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        **target,
    )
    # Quieten noisy libraries
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def run_session() -> int:
    """Wire the real collaborators together and run one session."""
    from pbpup.browser.clipboard import PyperclipClipboard
    from pbpup.browser.driver import PlaywrightDriver
    from pbpup.forum.session import SessionController
    from pbpup.prompts import ConsolePrompter
    from pbpup.settings import get_settings
    from pbpup.store import build_profile_store

    settings = get_settings()
    configure_logging(settings.log_level, settings.log_file)

    def connect() -> PlaywrightDriver:
        driver = PlaywrightDriver(settings.browser)
        with console.status("Starting browser..."):
            driver.connect()
        return driver

    console.rule("[bold green]PbPup[/bold green]")
    controller = SessionController(
        driver_factory=connect,
        store=build_profile_store(settings.store.path),
        prompter=ConsolePrompter(console),
        clipboard=PyperclipClipboard(),
        console=console,
        settings=settings,
    )
    try:
        return controller.run()
    except KeyboardInterrupt:
        controller.teardown()
        return 0


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context, version: bool = typer.Option(False, "--version", help="Show version and exit.")) -> None:
    """Start the interactive session when no subcommand is provided."""
    if version:
        typer.echo(f"pbpup {VERSION}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        raise typer.Exit(code=run_session())


if __name__ == "__main__":
    app()
