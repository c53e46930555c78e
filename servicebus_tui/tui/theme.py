"""Rendering configuration.

Widgets receive a RenderTheme explicitly instead of reading module-level
style constants.
"""

from dataclasses import dataclass
from typing import Optional

from rich.style import Style

from ..core.config import ThemeConfig

SPINNER_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")


@dataclass(frozen=True)
class RenderTheme:
    """Colors and styles used by the pane renderers."""

    primary: str
    success: str
    error: str
    muted: str

    @classmethod
    def from_config(cls, config: Optional[ThemeConfig] = None) -> "RenderTheme":
        config = config or ThemeConfig()
        return cls(**config.model_dump())

    @property
    def subtle(self) -> Style:
        return Style(color=self.muted)

    @property
    def error_style(self) -> Style:
        return Style(color=self.error, bold=True)

    @property
    def selected(self) -> Style:
        return Style(color=self.success, bold=True)

    @property
    def heading(self) -> Style:
        return Style(color=self.primary, bold=True)

    @property
    def label(self) -> Style:
        return Style(color=self.muted)

    def border_color(self, focused: bool) -> str:
        return self.primary if focused else self.muted


def spinner_frame(index: int) -> str:
    return SPINNER_FRAMES[index % len(SPINNER_FRAMES)]
