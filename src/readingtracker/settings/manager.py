"""Manager for the theme preference."""

from ..errors import InvalidInputError
from ..storage.kv import THEME_KEY, KeyValueStore
from .schemas import ThemeMode

DEFAULT_THEME = ThemeMode.DARK


class ThemeManager:
    """Reads and writes the persisted theme preference."""

    def __init__(self, kv: KeyValueStore):
        """Initialize theme manager."""
        self.kv = kv

    def get_theme(self) -> ThemeMode:
        """Current theme; dark when nothing (or something unknown) is stored."""
        value = self.kv.get(THEME_KEY)
        try:
            return ThemeMode(value)
        except ValueError:
            return DEFAULT_THEME

    def set_theme(self, theme) -> ThemeMode:
        """Persist a theme.

        Raises:
            InvalidInputError: If theme is not a known ThemeMode value
        """
        try:
            mode = ThemeMode(theme)
        except ValueError:
            raise InvalidInputError(f"Unknown theme: {theme}")
        self.kv.set(THEME_KEY, mode.value)
        return mode

    def toggle_theme(self) -> ThemeMode:
        """Switch between dark and light, returning the new theme."""
        current = self.get_theme()
        new = ThemeMode.LIGHT if current == ThemeMode.DARK else ThemeMode.DARK
        return self.set_theme(new)
