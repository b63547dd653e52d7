"""Remote driver abstraction and its Playwright implementation.

The flows issue a handful of abstract commands (navigate, find, click, type,
read text, run a script) and never parse anything beyond plain page text.
``find`` is the only operation that reports a missing element, and it does
so as a ``NotFound`` value rather than an exception; the action methods
raise ``RemoteActionError``.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pbpup.exceptions import DriverConnectionError, RemoteActionError
from pbpup.models.results import (
    ElementRef,
    Found,
    Locator,
    LocatorStrategy,
    LookupResult,
    NotFound,
    RemoteActionFailure,
)

if TYPE_CHECKING:
    from pbpup.settings.config import BrowserSettings

logger = logging.getLogger(__name__)


@runtime_checkable
class RemoteDriver(Protocol):
    """Operations the controller needs from a live browser."""

    def navigate(self, url: str) -> None: ...

    def find(self, locator: Locator) -> LookupResult: ...

    def click(self, ref: ElementRef) -> None: ...

    def send_keys(self, ref: ElementRef | None, keys: str) -> None:
        """Press a key chord on *ref*, or on the focused element when ``None``."""
        ...

    def type_text(self, ref: ElementRef, text: str) -> None: ...

    def get_text(self, ref: ElementRef) -> str: ...

    def execute_script(self, script: str, arg: Any = None) -> Any: ...

    def release(self) -> None: ...


class PlaywrightDriver:
    """``RemoteDriver`` backed by a headed Playwright Chromium session.

    Call ``connect()`` once before use. ``release()`` closes the browser and
    stops Playwright; calling it again does nothing.
    """

    def __init__(self, settings: BrowserSettings | None = None) -> None:
        if settings is None:
            from pbpup.settings import get_settings

            settings = get_settings().browser
        self._settings = settings
        self._playwright = None
        self._browser = None
        self._page = None
        self._released = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def connect(self) -> None:
        """Launch the browser and open a page.

        Raises:
            DriverConnectionError: If Playwright or the browser cannot start.
        """
        from playwright.sync_api import sync_playwright

        launch_args: dict[str, Any] = {"headless": self._settings.headless}
        if self._settings.channel:
            launch_args["channel"] = self._settings.channel
        if self._settings.slow_mo_ms:
            launch_args["slow_mo"] = self._settings.slow_mo_ms

        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(**launch_args)
            context = self._browser.new_context()
            self._page = context.new_page()
            self._page.set_default_timeout(self._settings.timeout_ms)
        except Exception as e:
            logger.error("Browser launch failed: %s", e)
            self._stop_quietly()
            raise DriverConnectionError(f"Could not start the browser: {e}") from e
        logger.info("Browser connected (headless=%s)", self._settings.headless)

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        logger.info("Releasing browser")
        try:
            if self._browser is not None:
                self._browser.close()
        finally:
            if self._playwright is not None:
                self._playwright.stop()
            self._browser = None
            self._page = None
            self._playwright = None

    def _stop_quietly(self) -> None:
        try:
            self.release()
        except Exception as e:
            logger.debug("Ignoring error while stopping Playwright: %s", e)

    @property
    def page(self):
        if self._page is None:
            raise RemoteActionError("connect", "browser is not connected")
        return self._page

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def navigate(self, url: str) -> None:
        from playwright.sync_api import Error as PlaywrightError

        logger.info("Navigating to %s", url)
        try:
            self.page.goto(url, wait_until="domcontentloaded")
        except PlaywrightError as e:
            raise RemoteActionError("navigate", str(e)) from e

    def find(self, locator: Locator) -> LookupResult:
        from playwright.sync_api import Error as PlaywrightError
        from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

        handle = self._resolve(locator).first
        try:
            handle.wait_for(state="attached", timeout=self._settings.find_timeout_ms)
        except PlaywrightTimeoutError:
            logger.debug("No element for %s", locator)
            return NotFound(locator)
        except PlaywrightError as e:
            logger.warning("Lookup of %s failed: %s", locator, e)
            return RemoteActionFailure(locator, str(e))
        return Found(ElementRef(locator, handle))

    def click(self, ref: ElementRef) -> None:
        self._act("click", ref, lambda: ref.handle.click())

    def send_keys(self, ref: ElementRef | None, keys: str) -> None:
        if ref is None:
            self._act("send_keys", None, lambda: self.page.keyboard.press(keys))
        else:
            self._act("send_keys", ref, lambda: ref.handle.press(keys))

    def type_text(self, ref: ElementRef, text: str) -> None:
        self._act("type", ref, lambda: ref.handle.fill(text))

    def get_text(self, ref: ElementRef) -> str:
        return self._act("get_text", ref, lambda: ref.handle.inner_text())

    def execute_script(self, script: str, arg: Any = None) -> Any:
        from playwright.sync_api import Error as PlaywrightError

        try:
            return self.page.evaluate(script, arg)
        except PlaywrightError as e:
            raise RemoteActionError("execute_script", str(e)) from e

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve(self, locator: Locator):
        """Translate a ``Locator`` into a Playwright locator on the page."""
        page = self.page
        if locator.strategy is LocatorStrategy.CSS:
            return page.locator(locator.value)
        if locator.strategy is LocatorStrategy.NAME:
            return page.locator(f"[name={json.dumps(locator.value)}]")
        if locator.strategy is LocatorStrategy.LINK_TEXT:
            return page.get_by_role("link", name=locator.value, exact=True)
        return page.locator(f"xpath={locator.value}")

    def _act(self, action: str, ref: ElementRef | None, func):  # type: ignore[no-untyped-def]
        from playwright.sync_api import Error as PlaywrightError

        try:
            return func()
        except PlaywrightError as e:
            target = str(ref.locator) if ref is not None else "focused element"
            raise RemoteActionError(action, f"{target}: {e}") from e
