"""Configuration loading for the storyboard compiler."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from storyboard.models import Vector2


class TextConfig(BaseModel):
    default_color: str = "rgb(0,0,0)"
    default_position: Vector2 = Field(default_factory=lambda: Vector2(x=-266, y=64))
    cursor: str = "&boxv;"
    blink_duration: int = 15
    last_frame_duration: int = 1  # used when the last text frame declares no duration


class Config(BaseModel):
    seed: int = 0
    max_decimal_places: int | None = 2
    text: TextConfig = Field(default_factory=TextConfig)


def _project_root() -> Path:
    """Return the storyboard project root directory."""
    return Path(__file__).parent.parent


def load_config(config_path: Path | None = None) -> Config:
    """Load config from YAML file. Falls back to defaults if file missing."""
    if config_path is None:
        config_path = _project_root() / "config.yaml"

    if config_path.exists():
        raw: dict[str, Any] = yaml.safe_load(config_path.read_text()) or {}
        return Config(**raw)

    return Config()
