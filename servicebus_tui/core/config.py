"""Configuration for the explorer.

Settings live in $XDG_CONFIG_HOME/servicebus-tui/config.json (default
~/.config/servicebus-tui/config.json). A missing file means defaults;
a malformed one is an error rather than a silent fallback.
"""

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator
from rich.color import Color as RichColor
from rich.color import ColorParseError as RichColorParseError
from textual.color import Color as TextualColor
from textual.color import ColorParseError as TextualColorParseError

from ..errors import ConfigError

CONFIG_DIR_NAME = "servicebus-tui"
CONFIG_FILE_NAME = "config.json"
CONNECTION_STRING_ENV = "SERVICEBUS_CONNECTION_STRING"


class LayoutConfig(BaseModel):
    """Pane width shares, floors and vertical chrome."""

    tree_percent: int = Field(default=15, ge=5, le=60)
    tree_min_width: int = Field(default=15, ge=10)
    detail_percent: int = Field(default=30, ge=10, le=70)
    detail_min_width: int = Field(default=30, ge=10)
    messages_min_width: int = Field(default=30, ge=10)
    chrome_height: int = Field(default=5, ge=0, description="Header, footer and border rows")
    min_content_height: int = Field(default=3, ge=1)

    @model_validator(mode="after")
    def validate_shares(self):
        if self.tree_percent + self.detail_percent >= 100:
            raise ValueError("tree_percent + detail_percent must leave room for the messages pane")
        return self


class ThemeConfig(BaseModel):
    """Colors used by the renderer.

    Values feed both Rich styles and Textual border styles, so each must
    parse as a color in both libraries (hex or rgb() notation is safest).
    """

    primary: str = "#ff5faf"
    success: str = "#00d787"
    error: str = "#ff0000"
    muted: str = "#808080"

    @field_validator("primary", "success", "error", "muted")
    @classmethod
    def validate_color(cls, value: str) -> str:
        try:
            RichColor.parse(value)
            TextualColor.parse(value)
        except (RichColorParseError, TextualColorParseError):
            raise ValueError(f"{value!r} is not a color both Rich and Textual can parse")
        return value


class ExplorerConfig(BaseModel):
    """Top-level settings."""

    fetch_timeout: float = Field(default=30.0, gt=0, description="Seconds before a fetch fails")
    peek_limit: int = Field(default=100, ge=1, le=1000)
    spinner_interval: float = Field(default=0.1, gt=0)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    theme: ThemeConfig = Field(default_factory=ThemeConfig)


def default_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(path: Optional[Path] = None) -> ExplorerConfig:
    """Load settings from disk.

    Args:
        path: Config file (default: default_config_path())

    Raises:
        ConfigError: If the file exists but is not valid
    """
    if path is None:
        path = default_config_path()

    if not path.exists():
        return ExplorerConfig()

    try:
        with path.open("r") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ConfigError(f"Failed to read config {path}: {e}")

    try:
        return ExplorerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}")


def connection_string_from_env() -> Optional[str]:
    value = os.environ.get(CONNECTION_STRING_ENV, "").strip()
    return value or None
