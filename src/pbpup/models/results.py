"""Element locators and the tagged outcome of looking one up.

``RemoteDriver.find`` never raises for a missing element. It returns one of
``Found``, ``NotFound`` or ``RemoteActionFailure`` and every call site
decides what a missing element means there.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from pbpup.exceptions import RemoteActionError


class LocatorStrategy(str, Enum):
    """How a ``Locator`` identifies its element."""

    CSS = "css"
    NAME = "name"
    LINK_TEXT = "link_text"
    XPATH = "xpath"


@dataclass(frozen=True)
class Locator:
    """Strategy + value pair identifying one remote element."""

    strategy: LocatorStrategy
    value: str

    @classmethod
    def css(cls, selector: str) -> Locator:
        return cls(LocatorStrategy.CSS, selector)

    @classmethod
    def name(cls, name: str) -> Locator:
        return cls(LocatorStrategy.NAME, name)

    @classmethod
    def link_text(cls, text: str) -> Locator:
        return cls(LocatorStrategy.LINK_TEXT, text)

    @classmethod
    def xpath(cls, expression: str) -> Locator:
        return cls(LocatorStrategy.XPATH, expression)

    def __str__(self) -> str:
        return f"{self.strategy.value}={self.value}"


@dataclass(frozen=True)
class ElementRef:
    """Opaque reference to an element the driver has located."""

    locator: Locator
    handle: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Found:
    element: ElementRef


@dataclass(frozen=True)
class NotFound:
    locator: Locator


@dataclass(frozen=True)
class RemoteActionFailure:
    locator: Locator
    cause: str


LookupResult = Union[Found, NotFound, RemoteActionFailure]


def require_element(result: LookupResult) -> ElementRef:
    """Unwrap a lookup where a missing element cannot be recovered locally.

    Raises:
        RemoteActionError: If the element is missing or the lookup failed.
    """
    if isinstance(result, Found):
        return result.element
    if isinstance(result, NotFound):
        raise RemoteActionError("find", f"no element matches {result.locator}")
    raise RemoteActionError("find", f"{result.locator}: {result.cause}")
