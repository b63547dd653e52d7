"""Forum login: credential exchange, captcha checkpoint, account chooser.

The login is an explicit state machine (see ``pbpup.models.states``). A
rejected login clears the stored username and restarts the whole exchange,
password included; there is no retry cap. A captcha is never solved
automatically: the operator solves it in the browser window and confirms.
"""

from __future__ import annotations

import logging

from rich.console import Console

from pbpup.browser.driver import RemoteDriver
from pbpup.forum import selectors
from pbpup.forum.targets import resolve_named_target
from pbpup.models.profile import Profile, ProfileField
from pbpup.models.results import Found, NotFound, require_element
from pbpup.models.states import STATE_TRANSITIONS, TERMINAL_STATES, AuthState
from pbpup.prompts import Prompter, PromptKind, required

logger = logging.getLogger(__name__)


def read_page_text(driver: RemoteDriver) -> str:
    """Return the visible text of the current page body ("" if there is none)."""
    result = driver.find(selectors.BODY)
    if isinstance(result, NotFound):
        return ""
    return driver.get_text(require_element(result))


class CaptchaCheckpoint:
    """Block until the "prove you are human" page is gone.

    Each time the marker is still present the operator is asked to solve the
    captcha and confirm. There is no timeout; the loop ends only when the
    marker disappears.
    """

    def __init__(self, driver: RemoteDriver, prompter: Prompter, console: Console) -> None:
        self.driver = driver
        self.prompter = prompter
        self.console = console

    def wait(self) -> int:
        """Return the number of operator confirmations it took."""
        confirmations = 0
        while selectors.CAPTCHA_MARKER in read_page_text(self.driver):
            if confirmations == 0:
                logger.info("Captcha shown on login page")
                self.console.print("[yellow]The forum is asking for a captcha.[/yellow]")
            self.prompter.ask(PromptKind.TEXT, "Validate captcha and press enter to continue...")
            confirmations += 1
        return confirmations


class AuthenticationFlow:
    """Drive the login form until the forum accepts the credentials."""

    def __init__(
        self,
        driver: RemoteDriver,
        prompter: Prompter,
        console: Console,
        captcha: CaptchaCheckpoint | None = None,
    ) -> None:
        self.driver = driver
        self.prompter = prompter
        self.console = console
        self.captcha = captcha or CaptchaCheckpoint(driver, prompter, console)

    def run(self, profile: Profile) -> int:
        """Log in with *profile*'s username, asking for anything missing.

        Returns:
            Number of credential submissions it took.

        Raises:
            RemoteActionError: If the login form itself cannot be driven.
        """
        state = AuthState.AWAIT_USERNAME
        password: str | None = None
        attempts = 0

        while state not in TERMINAL_STATES:
            if state is AuthState.AWAIT_USERNAME:
                if profile.get(ProfileField.USERNAME) is None:
                    username = self.prompter.ask(
                        PromptKind.TEXT,
                        "Enter your username or email:",
                        validate=required("Please enter a valid username or email"),
                    )
                    profile.set(ProfileField.USERNAME, username.strip())
                next_state = AuthState.AWAIT_PASSWORD

            elif state is AuthState.AWAIT_PASSWORD:
                password = self.prompter.ask(
                    PromptKind.SECRET,
                    "Enter your password:",
                    validate=required("Please enter a valid password"),
                )
                next_state = AuthState.SUBMIT

            elif state is AuthState.SUBMIT:
                attempts += 1
                try:
                    self._submit(profile.get(ProfileField.USERNAME) or "", password or "")
                finally:
                    password = None
                next_state = AuthState.CHECK_CAPTCHA

            elif state is AuthState.CHECK_CAPTCHA:
                self.captcha.wait()
                next_state = AuthState.CHECK_RESULT

            else:
                next_state = self._check_result(profile)

            if next_state not in STATE_TRANSITIONS[state]:
                logger.warning(
                    "Non-standard login transition: %s -> %s (allowed: %s)",
                    state.value, next_state.value, [s.value for s in STATE_TRANSITIONS[state]],
                )
            logger.debug("Login %s -> %s", state.value, next_state.value)
            state = next_state

        logger.info("Logged in as %s after %d attempt(s)", profile.get(ProfileField.USERNAME), attempts)
        return attempts

    def _submit(self, username: str, password: str) -> None:
        with self.console.status("Attempting to log in..."):
            self.driver.execute_script(selectors.SET_EMAIL_SCRIPT, username)
            field = require_element(self.driver.find(selectors.PASSWORD_FIELD))
            self.driver.type_text(field, password)
            self.driver.click(require_element(self.driver.find(selectors.LOGIN_BUTTON)))

    def _check_result(self, profile: Profile) -> AuthState:
        text = read_page_text(self.driver)
        if any(marker in text for marker in selectors.LOGIN_FAILURE_MARKERS):
            logger.warning("Login rejected for %s", profile.get(ProfileField.USERNAME))
            profile.clear(ProfileField.USERNAME)
            self.console.print(
                "[yellow]There was a problem logging in, please provide your info again.[/yellow]"
            )
            return AuthState.AWAIT_USERNAME
        return AuthState.SUCCESS


class AccountSelector:
    """Pick one of several forum accounts tied to the same login."""

    def __init__(self, driver: RemoteDriver, prompter: Prompter, console: Console) -> None:
        self.driver = driver
        self.prompter = prompter
        self.console = console

    def needs_selection(self) -> bool:
        result = self.driver.find(selectors.PAGE_TITLE)
        if not isinstance(result, Found):
            return False
        return self.driver.get_text(result.element).strip() == selectors.ACCOUNT_CHOOSER_TITLE

    def run(self, profile: Profile) -> str | None:
        """Choose the profile's account if the forum asks; return its id."""
        if not self.needs_selection():
            return None
        return resolve_named_target(
            profile,
            ProfileField.ACCOUNT_ID,
            driver=self.driver,
            prompter=self.prompter,
            console=self.console,
            message="User ID :",
            lookup=selectors.account_option,
            failure_message="User not found, please try again",
            status="Selecting user...",
        )
