"""Run the profile's build command and paste its output into the editor."""

from __future__ import annotations

import logging
import subprocess

from rich.console import Console
from rich.markup import escape

from pbpup.exceptions import BuildCommandError
from pbpup.forum.paste import PasteProtocol
from pbpup.models.profile import Profile, ProfileField
from pbpup.prompts import Prompter, PromptKind, required

logger = logging.getLogger(__name__)

_STDERR_TAIL_CHARS = 2000


def run_build_command(command: str, *, timeout: float | None = None) -> str:
    """Run *command* through the shell and return its stdout verbatim.

    Output that is not valid UTF-8 is decoded with replacement characters.

    Raises:
        BuildCommandError: If the command cannot be spawned, times out, or
            exits non-zero.
    """
    logger.info("Running build command: %s", command)
    try:
        completed = subprocess.run(
            command,
            shell=True,
            capture_output=True,
            text=True,
            errors="replace",
            check=True,
            timeout=timeout,
        )
    except subprocess.CalledProcessError as e:
        raise BuildCommandError(command, e.returncode, e.stderr or "") from e
    except subprocess.TimeoutExpired as e:
        stderr = e.stderr.decode(errors="replace") if isinstance(e.stderr, bytes) else (e.stderr or "")
        raise BuildCommandError(command, None, f"timed out after {timeout}s\n{stderr}") from e
    except OSError as e:
        raise BuildCommandError(command, None, str(e)) from e
    return completed.stdout


class BuildRunner:
    """Resolve the build command, run it, and hand its output to the paste."""

    def __init__(
        self,
        prompter: Prompter,
        console: Console,
        paste: PasteProtocol,
        *,
        timeout: float | None = None,
    ) -> None:
        self.prompter = prompter
        self.console = console
        self.paste = paste
        self.timeout = timeout

    def run(self, profile: Profile, *, change_command: bool = False) -> bool:
        """Build and paste; return False when the build failed or printed nothing.

        Raises:
            RemoteActionError: If the paste itself fails.
            ClipboardError: If the system clipboard cannot be used.
        """
        command = self.resolve_command(profile, change_command=change_command)

        try:
            with self.console.status("Building..."):
                output = run_build_command(command, timeout=self.timeout)
        except BuildCommandError as e:
            logger.warning("%s", e)
            self.console.print(f"[red]✗[/red] {escape(str(e))}")
            if e.stderr:
                self.console.print(escape(e.stderr[-_STDERR_TAIL_CHARS:]), highlight=False)
            return False

        if not output.strip():
            logger.warning("Build command printed nothing: %s", command)
            self.console.print("[yellow]The build produced no output, nothing was saved.[/yellow]")
            return False

        self.console.print(output, markup=False, highlight=False)
        self.paste.paste(output)
        return True

    def resolve_command(self, profile: Profile, *, change_command: bool = False) -> str:
        """Return the stored command, prompting when absent or on request.

        A blank answer keeps the current command.
        """
        current = profile.get(ProfileField.BUILD_COMMAND)
        if current and not change_command:
            return current

        if current:
            self.console.print(f"Current command: {escape(current)}", highlight=False)
        command = self.prompter.ask(
            PromptKind.TEXT,
            "Enter a shell command (leave blank to keep current):",
            default=current,
            validate=None if current else required("Please enter a shell command"),
        )
        profile.set(ProfileField.BUILD_COMMAND, command)
        return command
