"""Shared constants and small numeric helpers for sparkfield."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Tuple
import json
import random

DEFAULT_FRAME_INTERVAL_MS = 33
DEFAULT_PIXEL_SCALE = 1.0
DEFAULT_REPLAY_STRIDE = 4
FULL_TURN_DEGREES = 360
MAX_ALPHA = 255

Offset = Tuple[int, int]
Range = Tuple[float, float]


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Clamp a value into a closed interval."""
    return max(minimum, min(maximum, value))


def ordered(minimum: float, maximum: float) -> Range:
    """Return a (low, high) pair regardless of argument order."""
    if maximum < minimum:
        return maximum, minimum
    return minimum, maximum


def normalize_angle_range(min_angle: float, max_angle: float) -> Range:
    """Wrap max_angle forward by full turns so the arc runs clockwise from min_angle.

    A range of 270..90 means the arc through 0, not the descending 270..90 sweep.
    """
    while max_angle < min_angle:
        max_angle += FULL_TURN_DEGREES
    return min_angle, max_angle


def uniform(rng: random.Random, minimum: float, maximum: float) -> float:
    """Sample a float from a range, collapsing equal bounds to a fixed value."""
    if minimum == maximum:
        return minimum
    return rng.uniform(minimum, maximum)


def load_json(path: Path, default: Any) -> Any:
    """Load JSON data, returning default when missing or malformed."""
    if not path.exists():
        return default
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (json.JSONDecodeError, OSError):
        return default
