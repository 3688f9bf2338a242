"""
Theme state for rendering.

The theme is an immutable value handed to whatever renders the UI. Loading
and toggling return a new ThemeState; there is no shared global.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

THEMES = ("light", "dark")


class ThemeState(BaseModel):
    model_config = ConfigDict(frozen=True)

    theme: str = "light"

    @classmethod
    def load(cls, preference: Optional[str], system_prefers_dark: bool = False) -> "ThemeState":
        """
        Resolve a stored preference ("light", "dark", "auto" or nothing).

        Unknown or "auto" preferences follow the system setting.
        """
        if preference in THEMES:
            return cls(theme=preference)
        return cls(theme="dark" if system_prefers_dark else "light")

    @property
    def is_dark(self) -> bool:
        return self.theme == "dark"

    def toggle(self) -> "ThemeState":
        return ThemeState(theme="light" if self.is_dark else "dark")
