"""
Replay settings.

Settings are layered: defaults < JSON preferences file < environment.

Environment Variables:
    PANREPLAY_SETTINGS_FILE: Path to the JSON preferences file
    PANREPLAY_SPICY_LEFT_SIDE: true/false - spicy machines on the left
    PANREPLAY_USE_BREADING_QUEUE: true/false - enable queue shifting
    PANREPLAY_NOTIFICATION_FRAMES, PANREPLAY_TICK_SECONDS, ...:
        any other field, upper-cased with the PANREPLAY_ prefix

Usage:
    from panreplay.config import load_settings

    settings = load_settings()
    if settings.use_breading_queue:
        ...
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from .core.errors import ConfigError

ENV_PREFIX = "PANREPLAY_"
SETTINGS_FILE_ENV = "PANREPLAY_SETTINGS_FILE"


class ReplaySettings(BaseModel):
    """User-facing replay preferences and engine tunables."""

    # Machines 0-2 serve spicy pans when True, 3-5 otherwise.
    spicy_left_side: bool = True
    use_breading_queue: bool = False

    notification_frames: float = Field(default=100.0, gt=0)
    animation_seconds: float = Field(default=0.2, ge=0)
    tick_seconds: float = Field(default=0.05, gt=0)
    skip_seconds: int = Field(default=15, ge=1)
    holding_minutes: int = Field(default=20, ge=0)
    window_padding_seconds: int = Field(default=300, ge=0)
    fill_lead_seconds: int = Field(default=10, ge=0)


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for name in ReplaySettings.model_fields:
        val = os.getenv(ENV_PREFIX + name.upper())
        if val is not None and val.strip() != "":
            overrides[name] = val.strip()
    return overrides


def _read_file(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a JSON object")
    return data


def load_settings(path: Optional[Union[str, Path]] = None, **overrides: Any) -> ReplaySettings:
    """
    Load settings from file and environment.

    Args:
        path: JSON preferences file (default: $PANREPLAY_SETTINGS_FILE, if set)
        **overrides: Explicit values (e.g. CLI flags), highest precedence;
            None values are ignored

    Returns:
        Validated ReplaySettings

    Raises:
        ConfigError: If the file is unreadable or a value fails validation
    """
    if path is None:
        path = os.getenv(SETTINGS_FILE_ENV)

    data: Dict[str, Any] = {}
    if path:
        data.update(_read_file(Path(path)))
    data.update(_env_overrides())
    data.update({k: v for k, v in overrides.items() if v is not None})

    unknown = sorted(set(data) - set(ReplaySettings.model_fields))
    for key in unknown:
        data.pop(key)

    try:
        return ReplaySettings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid replay settings: {e}") from e


def save_settings(settings: ReplaySettings, path: Union[str, Path]) -> None:
    """Persist settings as the JSON preferences file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        f.write(json.dumps(settings.model_dump(), indent=2, sort_keys=True))
