"""Profile selection: pick, create, or delete the active configuration."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.markup import escape

from pbpup.models.profile import NAME_KEY, Profile, ProfileField, normalize_forum_url
from pbpup.prompts import Prompter, PromptKind, required
from pbpup.store.profile_store import ProfileStore

logger = logging.getLogger(__name__)

NEW = "New"
DELETE = "Delete"
EXIT = "Exit"
CANCEL = "Cancel"
RESERVED_NAMES = frozenset({NEW, DELETE, EXIT, CANCEL})


class ProfileSelector:
    """Resolve the active profile and make sure its forum URL is known.

    No remote calls are made here; only the store is touched.
    """

    def __init__(self, store: ProfileStore, prompter: Prompter, console: Console) -> None:
        self.store = store
        self.prompter = prompter
        self.console = console

    def select(self) -> Profile | None:
        """Return the chosen profile, or ``None`` if the operator chose Exit."""
        while True:
            names = sorted(self.store.list_profiles())
            if not names:
                return self.create()

            choice = self.prompter.ask(
                PromptKind.SELECT,
                "Select a configuration",
                choices=[*names, NEW, DELETE, EXIT],
            )
            if choice == EXIT:
                return None
            if choice == NEW:
                return self.create()
            if choice == DELETE:
                self.delete_menu()
                continue

            profile = Profile(choice, self.store)
            if not profile.forum_url:
                self._ask_forum_url(profile)
            logger.info("Using profile %s", profile.name)
            return profile

    def create(self) -> Profile:
        """Prompt for a new profile name and its forum hostname."""
        name = self.prompter.ask(
            PromptKind.TEXT,
            "Name for configuration",
            validate=self._validate_new_name,
        ).strip()
        profile = Profile(name, self.store)
        self.store.set(name, NAME_KEY, name)
        self._ask_forum_url(profile)
        logger.info("Created profile %s (%s)", name, profile.forum_url)
        return profile

    def delete_menu(self) -> None:
        """Offer every profile for deletion; Cancel deletes nothing."""
        names = sorted(self.store.list_profiles())
        choice = self.prompter.ask(
            PromptKind.SELECT,
            "Choose a configuration to delete",
            choices=[*names, CANCEL],
        )
        if choice == CANCEL:
            return
        self.store.delete(choice)
        self.console.print(f"Deleted configuration [bold]{escape(choice)}[/bold]")

    def _ask_forum_url(self, profile: Profile) -> None:
        hostname = self.prompter.ask(
            PromptKind.TEXT,
            "Url of the forum (exclude https://) :",
            validate=required("Please enter the forum's hostname"),
        )
        profile.set(ProfileField.FORUM_URL, normalize_forum_url(hostname))

    def _validate_new_name(self, value: str) -> str | None:
        name = value.strip()
        if not name:
            return "Please enter a name for the configuration"
        if name in RESERVED_NAMES:
            return f"{name!r} is reserved, please choose another name"
        if self.store.exists(name):
            return f"A configuration named {name!r} already exists"
        return None
