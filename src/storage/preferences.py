# src/storage/preferences.py

"""Display preferences persisted across runs."""

import logging

from src.storage.local_storage import LocalStorage

logger = logging.getLogger("consulteja.preferences")

THEME_KEY = "theme"
COLOR_BLIND_KEY = "colorBlindMode"


class Preferences:
    """Theme and colour-blind mode flags backed by ``LocalStorage``."""

    def __init__(self, storage: LocalStorage | None = None) -> None:
        self.storage = storage or LocalStorage()

    @property
    def dark_mode(self) -> bool:
        return self.storage.get_item(THEME_KEY) == "dark"

    @dark_mode.setter
    def dark_mode(self, value: bool) -> None:
        self.storage.set_item(THEME_KEY, "dark" if value else "light")
        logger.info("Theme set to %s", "dark" if value else "light")

    @property
    def color_blind_mode(self) -> bool:
        return self.storage.get_item(COLOR_BLIND_KEY) == "true"

    @color_blind_mode.setter
    def color_blind_mode(self, value: bool) -> None:
        self.storage.set_item(COLOR_BLIND_KEY, "true" if value else "false")
        logger.info("Colour-blind mode %s", "on" if value else "off")

    def toggle_dark_mode(self) -> bool:
        """Flip the theme and return whether dark mode is now on."""
        self.dark_mode = not self.dark_mode
        return self.dark_mode

    def toggle_color_blind_mode(self) -> bool:
        """Flip colour-blind mode and return its new state."""
        self.color_blind_mode = not self.color_blind_mode
        return self.color_blind_mode
