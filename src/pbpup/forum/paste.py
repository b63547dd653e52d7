"""Clipboard-swap injection into the plugin editor.

The editor only takes pasted input, so explicit text travels through the
system clipboard. Whatever the operator had on the clipboard is put back
before ``paste`` returns, even when a browser step fails.
"""

from __future__ import annotations

import logging

from rich.console import Console

from pbpup.browser.clipboard import ClipboardProvider, clipboard_swap
from pbpup.browser.driver import RemoteDriver
from pbpup.forum import selectors
from pbpup.models.results import require_element
from pbpup.settings.config import EditorSettings

logger = logging.getLogger(__name__)


class PasteProtocol:
    """Replace the editor contents and save the plugin."""

    def __init__(
        self,
        driver: RemoteDriver,
        clipboard: ClipboardProvider,
        console: Console,
        editor: EditorSettings | None = None,
    ) -> None:
        self.driver = driver
        self.clipboard = clipboard
        self.console = console
        self.editor = editor or EditorSettings()

    def paste(self, text: str | None = None) -> None:
        """Inject *text*, or the current clipboard when *text* is ``None``.

        Raises:
            RemoteActionError: If any editor step fails. The clipboard has
                already been restored by then.
            ClipboardError: If the clipboard cannot be swapped.
        """
        if text is None:
            self._inject()
            return
        with clipboard_swap(self.clipboard, text):
            self._inject()

    def _inject(self) -> None:
        with self.console.status("Saving plugin..."):
            self.driver.click(require_element(self.driver.find(selectors.EDITOR)))
            self.driver.send_keys(None, self.editor.select_all_keys)
            self.driver.send_keys(None, self.editor.paste_keys)
            self.driver.click(require_element(self.driver.find(selectors.SAVE_BUTTON)))
        logger.info("Plugin components saved")
