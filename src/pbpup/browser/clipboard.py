"""System clipboard access and the scoped clipboard swap."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol, runtime_checkable

import pyperclip

from pbpup.exceptions import ClipboardError

logger = logging.getLogger(__name__)


@runtime_checkable
class ClipboardProvider(Protocol):
    """Read and write the clipboard; failures raise ``ClipboardError``."""

    def read(self) -> str: ...

    def write(self, text: str) -> None: ...


class PyperclipClipboard:
    """``ClipboardProvider`` over the process-wide system clipboard."""

    def read(self) -> str:
        try:
            return pyperclip.paste() or ""
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Could not read the clipboard: {e}") from e

    def write(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Could not write the clipboard: {e}") from e


@contextmanager
def clipboard_swap(clipboard: ClipboardProvider, text: str) -> Iterator[str]:
    """Put *text* on the clipboard for the duration of the block.

    The previous contents are captured before the write and written back
    when the block exits, however it exits. Yields the captured snapshot.
    """
    snapshot = clipboard.read()
    clipboard.write(text)
    logger.debug("Clipboard swapped (%d chars in, %d saved)", len(text), len(snapshot))
    try:
        yield snapshot
    finally:
        clipboard.write(snapshot)
        logger.debug("Clipboard restored")
