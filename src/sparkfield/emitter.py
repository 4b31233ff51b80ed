"""Emitter geometry: where in surface-local space particles are born."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag
from typing import Any
import random

import pygame

from .utils import Offset, uniform


class Gravity(IntFlag):
    """Which part of an emitter rectangle particles are born from.

    Axes without a flag emit across the whole rectangle on that axis.
    """

    FILL = 0
    LEFT = 1
    RIGHT = 2
    CENTER_HORIZONTAL = 4
    TOP = 8
    BOTTOM = 16
    CENTER_VERTICAL = 32
    CENTER = CENTER_HORIZONTAL | CENTER_VERTICAL


@dataclass(slots=True, frozen=True)
class EmitterBounds:
    """Axis-aligned birth area in surface-local coordinates; min == max is a point."""

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    @property
    def is_point(self) -> bool:
        return self.x_min == self.x_max and self.y_min == self.y_max

    def sample(self, rng: random.Random) -> tuple[float, float]:
        """Return a uniformly distributed birth position."""
        return uniform(rng, self.x_min, self.x_max), uniform(rng, self.y_min, self.y_max)


def element_rect(element: Any) -> pygame.Rect:
    """Return the screen rectangle of a rect, rect-like tuple, or anything with ``.rect``."""
    if isinstance(element, pygame.Rect):
        return element
    rect = getattr(element, "rect", None)
    if rect is not None:
        return pygame.Rect(rect)
    return pygame.Rect(element)


def point_bounds(x: float, y: float, parent_offset: Offset = (0, 0)) -> EmitterBounds:
    """Bounds for a single screen-space point."""
    local_x = x - parent_offset[0]
    local_y = y - parent_offset[1]
    return EmitterBounds(local_x, local_x, local_y, local_y)


def rect_bounds(rect: pygame.Rect, gravity: Gravity = Gravity.CENTER, parent_offset: Offset = (0, 0)) -> EmitterBounds:
    """Bounds for a screen-space rectangle narrowed by gravity flags."""
    left = rect.left - parent_offset[0]
    top = rect.top - parent_offset[1]

    if gravity & Gravity.LEFT:
        x_min = x_max = left
    elif gravity & Gravity.RIGHT:
        x_min = x_max = left + rect.width
    elif gravity & Gravity.CENTER_HORIZONTAL:
        x_min = x_max = left + rect.width // 2
    else:
        x_min, x_max = left, left + rect.width

    if gravity & Gravity.TOP:
        y_min = y_max = top
    elif gravity & Gravity.BOTTOM:
        y_min = y_max = top + rect.height
    elif gravity & Gravity.CENTER_VERTICAL:
        y_min = y_max = top + rect.height // 2
    else:
        y_min, y_max = top, top + rect.height

    return EmitterBounds(x_min, x_max, y_min, y_max)
