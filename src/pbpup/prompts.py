"""Operator prompts: free text, secrets, and single-select menus.

Validation failures never leave the prompter; the same question is asked
again in place until a valid answer arrives.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Protocol, runtime_checkable

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

logger = logging.getLogger(__name__)

# Returns an error message for a bad answer, or None when it is acceptable.
Validator = Callable[[str], str | None]


class PromptKind(str, Enum):
    """Kinds of question the operator can be asked."""

    TEXT = "text"
    SECRET = "secret"
    SELECT = "select"


@runtime_checkable
class Prompter(Protocol):
    """Ask the operator a question and return a validated answer."""

    def ask(
        self,
        kind: PromptKind,
        message: str,
        *,
        choices: Sequence[str] | None = None,
        validate: Validator | None = None,
        default: str | None = None,
    ) -> str:
        """Return the operator's answer.

        Args:
            kind: Text, secret (not echoed) or single-select.
            message: Question shown to the operator.
            choices: Options for ``PromptKind.SELECT``.
            validate: Optional validator; failures re-prompt.
            default: Returned when the operator leaves the answer blank.
        """
        ...


def required(error: str) -> Validator:
    """Validator rejecting blank answers with *error*."""

    def _check(value: str) -> str | None:
        return None if value.strip() else error

    return _check


class ConsolePrompter:
    """``Prompter`` rendering questions with ``rich.prompt``."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def ask(
        self,
        kind: PromptKind,
        message: str,
        *,
        choices: Sequence[str] | None = None,
        validate: Validator | None = None,
        default: str | None = None,
    ) -> str:
        if kind is PromptKind.SELECT:
            if not choices:
                raise ValueError("A select prompt needs at least one choice")
            return self._select(message, list(choices))

        while True:
            answer = Prompt.ask(
                escape(message),
                console=self.console,
                password=kind is PromptKind.SECRET,
                default="",
                show_default=False,
            )
            if not answer and default is not None:
                answer = default
            error = validate(answer) if validate else None
            if error is None:
                return answer
            self.console.print(f"[prompt.invalid]{escape(error)}")

    def _select(self, message: str, choices: list[str]) -> str:
        self.console.print(f"[bold]{escape(message)}[/bold]")
        for index, choice in enumerate(choices, start=1):
            self.console.print(f"  [cyan]{index}[/cyan]) {escape(choice)}")

        while True:
            answer = Prompt.ask("Choice", console=self.console).strip()
            if answer.isdigit() and 1 <= int(answer) <= len(choices):
                return choices[int(answer) - 1]
            if answer in choices:
                return answer
            self.console.print("[prompt.invalid]Please pick one of the listed options")
