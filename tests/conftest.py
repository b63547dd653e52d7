"""pbpup test configuration: shared fakes and fixtures for unit tests.

No test launches a browser or touches the real clipboard: the flows only
see the ``RemoteDriver`` / ``Prompter`` / ``ClipboardProvider`` protocols,
so the fakes below stand in for them.
"""

from __future__ import annotations

import io
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from pbpup.forum import selectors
from pbpup.models.profile import Profile, ProfileField
from pbpup.models.results import (
    ElementRef,
    Found,
    Locator,
    LookupResult,
    NotFound,
    RemoteActionFailure,
)
from pbpup.prompts import PromptKind, Validator
from pbpup.store.profile_store import InMemoryProfileStore


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the config dir at a temp directory and clear the settings cache."""
    from pbpup.settings.config import get_settings

    monkeypatch.setenv("PBPUP_CONFIG_DIR", str(tmp_path / "config"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeDriver:
    """Scriptable ``RemoteDriver``.

    Elements "exist" when registered with ``add``. The body text is served
    from ``body_texts`` one read at a time; the last entry repeats.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self.elements: dict[Locator, str] = {}
        self.broken: dict[Locator, str] = {}
        self.failures: dict[tuple[str, Locator | None], BaseException] = {}
        self.body_texts: list[str] = [""]
        self.release_calls = 0
        self.release_error: BaseException | None = None

    def add(self, locator: Locator, text: str = "") -> None:
        self.elements[locator] = text

    def fail_on(self, action: str, locator: Locator | None, exc: BaseException) -> None:
        self.failures[(action, locator)] = exc

    def _maybe_fail(self, action: str, locator: Locator | None) -> None:
        exc = self.failures.get((action, locator))
        if exc is not None:
            raise exc

    # RemoteDriver ---------------------------------------------------------

    def navigate(self, url: str) -> None:
        self.calls.append(("navigate", url))

    def find(self, locator: Locator) -> LookupResult:
        self.calls.append(("find", locator))
        if locator in self.broken:
            return RemoteActionFailure(locator, self.broken[locator])
        if locator == selectors.BODY or locator in self.elements:
            return Found(ElementRef(locator))
        return NotFound(locator)

    def click(self, ref: ElementRef) -> None:
        self.calls.append(("click", ref.locator))
        self._maybe_fail("click", ref.locator)

    def send_keys(self, ref: ElementRef | None, keys: str) -> None:
        self.calls.append(("send_keys", keys))
        self._maybe_fail("send_keys", ref.locator if ref else None)

    def type_text(self, ref: ElementRef, text: str) -> None:
        self.calls.append(("type_text", ref.locator, text))

    def get_text(self, ref: ElementRef) -> str:
        if ref.locator == selectors.BODY:
            if len(self.body_texts) > 1:
                return self.body_texts.pop(0)
            return self.body_texts[0]
        return self.elements[ref.locator]

    def execute_script(self, script: str, arg: Any = None) -> Any:
        self.calls.append(("execute_script", script, arg))
        return None

    def release(self) -> None:
        self.release_calls += 1
        if self.release_error is not None:
            raise self.release_error

    # Inspection -----------------------------------------------------------

    def clicked(self) -> list[Locator]:
        return [call[1] for call in self.calls if call[0] == "click"]

    def navigated(self) -> list[str]:
        return [call[1] for call in self.calls if call[0] == "navigate"]

    def keys_sent(self) -> list[str]:
        return [call[1] for call in self.calls if call[0] == "send_keys"]


class ScriptedPrompter:
    """``Prompter`` answering from a script.

    Each answer is a string, a zero-argument callable returning a string
    (to inspect state at prompt time), or an exception to raise. Answers
    failing validation are recorded in ``rejected`` and the next answer is
    used for the same question, as a real prompter re-asks in place.
    """

    def __init__(self, answers: Sequence[Any] = ()) -> None:
        self.answers = list(answers)
        self.asked: list[tuple[PromptKind, str]] = []
        self.rejected: list[str] = []

    def ask(
        self,
        kind: PromptKind,
        message: str,
        *,
        choices: Sequence[str] | None = None,
        validate: Validator | None = None,
        default: str | None = None,
    ) -> str:
        while True:
            self.asked.append((kind, message))
            if not self.answers:
                raise AssertionError(f"Unexpected prompt: {message!r}")
            answer = self.answers.pop(0)
            if isinstance(answer, BaseException) or (
                isinstance(answer, type) and issubclass(answer, BaseException)
            ):
                raise answer
            if callable(answer):
                answer = answer()
            if not answer and default is not None:
                answer = default
            if kind is PromptKind.SELECT:
                assert choices is not None and answer in choices, f"{answer!r} not in {choices!r}"
            if validate is not None and validate(answer) is not None:
                self.rejected.append(answer)
                continue
            return answer

    def messages(self) -> list[str]:
        return [message for _, message in self.asked]

    def count(self, message: str) -> int:
        return self.messages().count(message)


class FakeClipboard:
    """In-memory ``ClipboardProvider`` recording every operation."""

    def __init__(self, content: str = "") -> None:
        self.content = content
        self.reads = 0
        self.writes: list[str] = []

    def read(self) -> str:
        self.reads += 1
        return self.content

    def write(self, text: str) -> None:
        self.writes.append(text)
        self.content = text


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture()
def make_prompter() -> Callable[..., ScriptedPrompter]:
    """Return a factory: ``make_prompter("answer", ...)``."""

    def _make(*answers: Any) -> ScriptedPrompter:
        return ScriptedPrompter(answers)

    return _make


@pytest.fixture()
def clipboard() -> FakeClipboard:
    return FakeClipboard("operator clipboard")


@pytest.fixture()
def console() -> Console:
    """Recording console; read it back with ``console.export_text()``."""
    return Console(file=io.StringIO(), record=True, width=120, force_terminal=False)


@pytest.fixture()
def store() -> InMemoryProfileStore:
    return InMemoryProfileStore()


@pytest.fixture()
def profile(store: InMemoryProfileStore) -> Profile:
    """Profile ``forumA`` pointing at https://example.com."""
    store.set("forumA", "name", "forumA")
    p = Profile("forumA", store)
    p.set(ProfileField.FORUM_URL, "https://example.com")
    return p


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests that require external services or real I/O")
