"""Locate-with-recovery for named remote targets.

A profile field names something on the forum (a plugin, an account). The
stored name is trusted until the page proves it wrong; then exactly that
field is cleared and the operator is asked again, as many times as it
takes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from rich.console import Console
from rich.markup import escape

from pbpup.browser.driver import RemoteDriver
from pbpup.forum import selectors
from pbpup.models.profile import Profile, ProfileField
from pbpup.models.results import Locator, NotFound, require_element
from pbpup.prompts import Prompter, PromptKind, required

logger = logging.getLogger(__name__)


def resolve_named_target(
    profile: Profile,
    field: ProfileField,
    *,
    driver: RemoteDriver,
    prompter: Prompter,
    console: Console,
    message: str,
    lookup: Callable[[str], Locator],
    failure_message: str,
    after: Callable[[], None] | None = None,
    status: str = "Working...",
) -> str:
    """Find and click the element named by *field*, re-prompting until it exists.

    The accepted name is persisted only once its element has been clicked,
    so the field stays empty while the operator is still correcting it.

    Args:
        profile: Active profile holding *field*.
        field: Profile field with the target's name.
        driver: Remote driver used for the lookup and click.
        prompter: Asks for the name when the field is unset.
        console: Operator console for failure messages and the spinner.
        message: Prompt shown when the name is unknown.
        lookup: Builds the locator for a given name.
        failure_message: Shown when no element matches the name.
        after: Follow-up action run once the target has been clicked.
        status: Spinner text while the lookup runs.

    Returns:
        The accepted name.

    Raises:
        RemoteActionError: If the lookup or click fails for a reason other
            than a missing element.
    """
    while True:
        value = profile.get(field)
        if value is None:
            value = prompter.ask(
                PromptKind.TEXT,
                message,
                validate=required("Please enter a value"),
            ).strip()

        with console.status(status):
            result = driver.find(lookup(value))
            if isinstance(result, NotFound):
                found = False
            else:
                driver.click(require_element(result))
                found = True

        if not found:
            logger.warning("%s %r not found", field.value, value)
            console.print(f"[yellow]{escape(failure_message)}[/yellow]")
            profile.clear(field)
            continue

        if profile.get(field) != value:
            profile.set(field, value)
        if after is not None:
            after()
        logger.info("Resolved %s=%r", field.value, value)
        return value


class TargetLocator:
    """Open the edit page of the profile's plugin."""

    def __init__(self, driver: RemoteDriver, prompter: Prompter, console: Console) -> None:
        self.driver = driver
        self.prompter = prompter
        self.console = console

    def open_plugin(self, profile: Profile) -> str:
        return resolve_named_target(
            profile,
            ProfileField.PLUGIN_NAME,
            driver=self.driver,
            prompter=self.prompter,
            console=self.console,
            message="Plugin Name :",
            lookup=selectors.plugin_link,
            failure_message="Plugin does not appear to exist, please try again!",
            after=self._open_components_tab,
            status="Opening plugin edit page...",
        )

    def _open_components_tab(self) -> None:
        self.driver.click(require_element(self.driver.find(selectors.COMPONENTS_TAB)))
