"""Unit tests for the clipboard-swap paste into the plugin editor."""

from __future__ import annotations

import pytest

from pbpup.exceptions import RemoteActionError
from pbpup.forum import selectors
from pbpup.forum.paste import PasteProtocol
from pbpup.settings.config import EditorSettings


@pytest.fixture()
def editor_page(driver):
    driver.add(selectors.EDITOR)
    driver.add(selectors.SAVE_BUTTON)
    return driver


class TestPasteWithText:
    """Explicit text goes through the clipboard and the clipboard comes back."""

    def test_injection_sequence(self, editor_page, clipboard, console) -> None:
        PasteProtocol(editor_page, clipboard, console).paste("build output")

        assert editor_page.clicked() == [selectors.EDITOR, selectors.SAVE_BUTTON]
        assert editor_page.keys_sent() == ["ControlOrMeta+a", "Shift+Insert"]

    def test_clipboard_holds_payload_while_pasting(self, editor_page, clipboard, console) -> None:
        during: list[str] = []
        original_send = editor_page.send_keys

        def spy(ref, keys):
            during.append(clipboard.content)
            original_send(ref, keys)

        editor_page.send_keys = spy
        PasteProtocol(editor_page, clipboard, console).paste("build output")
        assert during == ["build output", "build output"]

    @pytest.mark.parametrize("prior", ["", "operator clipboard", "multi\nline\ttext ✓"])
    def test_clipboard_restored(self, prior, editor_page, clipboard, console) -> None:
        clipboard.content = prior
        PasteProtocol(editor_page, clipboard, console).paste("payload")
        assert clipboard.content == prior
        assert clipboard.writes == ["payload", prior]

    @pytest.mark.parametrize("prior", ["", "operator clipboard"])
    def test_clipboard_restored_when_save_fails(self, prior, editor_page, clipboard, console) -> None:
        clipboard.content = prior
        editor_page.fail_on("click", selectors.SAVE_BUTTON, RemoteActionError("click", "detached"))

        with pytest.raises(RemoteActionError):
            PasteProtocol(editor_page, clipboard, console).paste("payload")
        assert clipboard.content == prior
        assert clipboard.writes[-1] == prior

    def test_clipboard_restored_on_interrupt(self, editor_page, clipboard, console) -> None:
        editor_page.fail_on("send_keys", None, KeyboardInterrupt())
        with pytest.raises(KeyboardInterrupt):
            PasteProtocol(editor_page, clipboard, console).paste("payload")
        assert clipboard.content == "operator clipboard"

    def test_missing_editor_raises_after_restore(self, driver, clipboard, console) -> None:
        with pytest.raises(RemoteActionError):
            PasteProtocol(driver, clipboard, console).paste("payload")
        assert clipboard.content == "operator clipboard"

    def test_custom_key_chords(self, editor_page, clipboard, console) -> None:
        keys = EditorSettings(select_all_keys="Control+a", paste_keys="Control+v")
        PasteProtocol(editor_page, clipboard, console, keys).paste("payload")
        assert editor_page.keys_sent() == ["Control+a", "Control+v"]


class TestPasteFromClipboard:
    """No text: the operator's clipboard is the payload and is left alone."""

    def test_clipboard_untouched(self, editor_page, clipboard, console) -> None:
        PasteProtocol(editor_page, clipboard, console).paste()
        assert clipboard.reads == 0
        assert clipboard.writes == []
        assert editor_page.keys_sent() == ["ControlOrMeta+a", "Shift+Insert"]

    def test_failure_still_untouched(self, driver, clipboard, console) -> None:
        with pytest.raises(RemoteActionError):
            PasteProtocol(driver, clipboard, console).paste()
        assert clipboard.reads == 0
        assert clipboard.writes == []
