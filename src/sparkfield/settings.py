"""Process-wide simulation defaults and their JSON loader."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any
import logging

from .utils import DEFAULT_FRAME_INTERVAL_MS, DEFAULT_PIXEL_SCALE, DEFAULT_REPLAY_STRIDE, load_json

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SimulationSettings:
    """Timing and scaling options read once when a session starts."""

    frame_interval_ms: int = DEFAULT_FRAME_INTERVAL_MS
    pixel_scale: float = DEFAULT_PIXEL_SCALE
    replay_stride: int = DEFAULT_REPLAY_STRIDE

    @property
    def fps(self) -> float:
        """Return the frame rate implied by the polling interval."""
        return 1000.0 / max(1, self.frame_interval_ms)


_defaults = SimulationSettings()


def current_settings() -> SimulationSettings:
    """Return a snapshot of the process-wide defaults."""
    return replace(_defaults)


def set_fps(fps: float) -> None:
    """Set the polling rate used by sessions created from now on."""
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")
    _defaults.frame_interval_ms = max(1, round(1000 / fps))
    logger.info("Default frame interval set to %d ms", _defaults.frame_interval_ms)


def configure(**overrides: Any) -> SimulationSettings:
    """Update process-wide defaults by field name and return a snapshot."""
    known = {f.name for f in fields(SimulationSettings)}
    for name, value in overrides.items():
        if name not in known:
            raise TypeError(f"Unknown simulation setting: {name}")
        setattr(_defaults, name, value)
    return current_settings()


def reset_defaults() -> None:
    """Restore the built-in defaults."""
    global _defaults
    _defaults = SimulationSettings()


def load_settings(path: Path) -> SimulationSettings:
    """Load settings from JSON with safe defaults for missing or bad values."""
    raw = load_json(path, {})
    settings = SimulationSettings()
    if not isinstance(raw, dict):
        logger.warning("Ignoring malformed settings file %s", path)
        return settings

    try:
        settings.frame_interval_ms = max(1, int(raw.get("frame_interval_ms", settings.frame_interval_ms)))
        settings.pixel_scale = float(raw.get("pixel_scale", settings.pixel_scale))
        settings.replay_stride = max(1, int(raw.get("replay_stride", settings.replay_stride)))
    except (TypeError, ValueError):
        logger.warning("Invalid values in settings file %s, using defaults", path)
        return SimulationSettings()
    if "fps" in raw and "frame_interval_ms" not in raw:
        try:
            settings.frame_interval_ms = max(1, round(1000 / float(raw["fps"])))
        except (TypeError, ValueError, ZeroDivisionError):
            logger.warning("Invalid fps in settings file %s", path)
    return settings
