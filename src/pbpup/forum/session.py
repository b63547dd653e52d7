"""Session lifecycle: connect, log in, open the plugin, run the menu, tear down.

Every way out of a session (menu Exit, profile Exit, Ctrl-C, a fatal setup
failure) converges on ``Session.close()``, which releases the browser at
most once and never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from pbpup.browser.clipboard import ClipboardProvider
from pbpup.browser.driver import RemoteDriver
from pbpup.exceptions import DriverConnectionError, PbPupError
from pbpup.forum import selectors
from pbpup.forum.auth import AccountSelector, AuthenticationFlow
from pbpup.forum.build import BuildRunner
from pbpup.forum.paste import PasteProtocol
from pbpup.forum.profiles import ProfileSelector
from pbpup.forum.targets import TargetLocator
from pbpup.models.profile import Profile
from pbpup.models.results import NotFound, require_element
from pbpup.prompts import Prompter, PromptKind
from pbpup.store.profile_store import ProfileStore

if TYPE_CHECKING:
    from pbpup.settings.config import Settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DRIVER_UNAVAILABLE = 1

MENU_PASTE = "Update from Clipboard"
MENU_BUILD = "Run Build"
MENU_CHANGE_BUILD = "Change and Run Build Command"
MENU_EXIT = "Exit"
MENU_CHOICES = [MENU_PASTE, MENU_BUILD, MENU_CHANGE_BUILD, MENU_EXIT]


class Session:
    """One process run's browser connection and active profile name."""

    def __init__(self, driver: RemoteDriver) -> None:
        self.driver = driver
        self.profile_name: str | None = None
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the browser once; later calls are no-ops.

        Errors from the release (including a second Ctrl-C) are logged and
        swallowed so the process can still exit.
        """
        if self._closed:
            return
        self._closed = True
        try:
            self.driver.release()
        except (Exception, KeyboardInterrupt) as e:
            logger.warning("Ignoring error while releasing the browser: %r", e)


class SessionController:
    """Sequence the whole operator session.

    Args:
        driver_factory: Returns a connected ``RemoteDriver``; raises
            ``DriverConnectionError`` if it cannot.
        store: Profile store shared by every flow.
        prompter: Operator prompts.
        clipboard: System clipboard used by the paste.
        console: Operator console.
        settings: Resolved settings (editor keys, build timeout).
    """

    def __init__(
        self,
        *,
        driver_factory: Callable[[], RemoteDriver],
        store: ProfileStore,
        prompter: Prompter,
        clipboard: ClipboardProvider,
        console: Console,
        settings: Settings | None = None,
    ) -> None:
        if settings is None:
            from pbpup.settings import get_settings

            settings = get_settings()
        self.driver_factory = driver_factory
        self.store = store
        self.prompter = prompter
        self.clipboard = clipboard
        self.console = console
        self.settings = settings
        self.session: Session | None = None

    def run(self) -> int:
        """Run one session and return the process exit code."""
        try:
            driver = self.driver_factory()
        except DriverConnectionError as e:
            logger.error("%s", e)
            self.console.print(f"[red]✗[/red] {escape(str(e))}")
            return EXIT_DRIVER_UNAVAILABLE

        self.session = Session(driver)
        try:
            self._run_session(self.session)
        except (KeyboardInterrupt, EOFError):
            self.console.print("\nQuitting...")
        except PbPupError as e:
            logger.error("Session setup failed: %s", e)
            self.console.print(f"[red]✗[/red] {escape(str(e))}")
        finally:
            self.teardown()
        return EXIT_OK

    def teardown(self) -> None:
        if self.session is not None:
            self.session.close()

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _run_session(self, session: Session) -> None:
        driver = session.driver
        profile = ProfileSelector(self.store, self.prompter, self.console).select()
        if profile is None:
            self.console.print("Quitting...")
            return
        session.profile_name = profile.name

        forum_url = profile.forum_url
        with self.console.status("Going to login page..."):
            driver.navigate(forum_url)
            self._open_login(driver)

        AuthenticationFlow(driver, self.prompter, self.console).run(profile)
        self.console.print("[green]Success![/green]")
        AccountSelector(driver, self.prompter, self.console).run(profile)

        with self.console.status("Going to plugin build list..."):
            driver.navigate(forum_url + selectors.PLUGIN_MANAGE_PATH)
        TargetLocator(driver, self.prompter, self.console).open_plugin(profile)

        self.menu(driver, profile)

    def _open_login(self, driver: RemoteDriver) -> None:
        result = driver.find(selectors.LOGIN_LINK)
        if isinstance(result, NotFound):
            logger.warning("Login link not found, staying on the forum page")
            self.console.print("[yellow]Could not find the login link, trying the current page.[/yellow]")
            return
        driver.click(require_element(result))

    def menu(self, driver: RemoteDriver, profile: Profile) -> None:
        """Offer paste/build actions until the operator picks Exit."""
        paste = PasteProtocol(driver, self.clipboard, self.console, self.settings.editor)
        build = BuildRunner(self.prompter, self.console, paste, timeout=self.settings.build.timeout_sec)

        while True:
            choice = self.prompter.ask(PromptKind.SELECT, "What would you like to do?", choices=MENU_CHOICES)
            if choice == MENU_EXIT:
                self.console.print("Quitting...")
                return
            try:
                if choice == MENU_PASTE:
                    paste.paste()
                    self.console.print("[green]✓[/green] Saved from clipboard")
                elif choice == MENU_BUILD:
                    if build.run(profile):
                        self.console.print("[green]✓[/green] Build saved")
                elif choice == MENU_CHANGE_BUILD:
                    if build.run(profile, change_command=True):
                        self.console.print("[green]✓[/green] Build saved")
            except PbPupError as e:
                logger.warning("Menu action %r failed: %s", choice, e)
                self.console.print(f"[red]✗[/red] {escape(str(e))}")
