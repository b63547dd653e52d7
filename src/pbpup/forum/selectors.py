"""Fixed locators and page phrases for the ProBoards admin surfaces.

Every element the controller touches and every phrase it matches against
page text is declared here.
"""

from __future__ import annotations

from pbpup.models.results import Locator

# --- pages -----------------------------------------------------------------

PLUGIN_MANAGE_PATH = "/admin/plugins/manage#build-container-tab"

# --- login -----------------------------------------------------------------

BODY = Locator.css("body")
LOGIN_LINK = Locator.css('a[href*="https://login.proboards.com/login"]')
PASSWORD_FIELD = Locator.name("password")
LOGIN_BUTTON = Locator.name("continue")
PAGE_TITLE = Locator.css("#title")

# Username is written as the field's value attribute rather than typed.
SET_EMAIL_SCRIPT = "(value) => document.getElementsByName('email')[0].setAttribute('value', value)"

CAPTCHA_MARKER = "Please prove you are human"

LOGIN_FAILURE_MARKERS: tuple[str, ...] = (
    "We could not find a forum account with that username",
    "The username and password fields are required",
    "We're sorry",
)

ACCOUNT_CHOOSER_TITLE = "Select Account"

# --- plugin editor -----------------------------------------------------------

COMPONENTS_TAB = Locator.css("a[href='#components-container']")
EDITOR = Locator.css(".CodeMirror-scroll")
SAVE_BUTTON = Locator.css(".save-components")


def account_option(account_id: str) -> Locator:
    """Radio input for *account_id* on the account chooser."""
    return Locator.xpath(f"//input[@value={_xpath_literal(account_id)}]")


def plugin_link(plugin_name: str) -> Locator:
    """Link to the plugin's edit page in the build list."""
    return Locator.link_text(plugin_name)


def _xpath_literal(value: str) -> str:
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    parts = value.split('"')
    return "concat(" + ", '\"', ".join(f'"{part}"' for part in parts) + ")"
