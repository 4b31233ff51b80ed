"""Easing curves mapping normalized time in [0, 1] onto progress in [0, 1]."""

from __future__ import annotations

from typing import Callable
import math

Easing = Callable[[float], float]


def linear(t: float) -> float:
    """Constant rate."""
    return t


def accelerate(t: float) -> float:
    """Starts slow, speeds up."""
    return t * t


def decelerate(t: float) -> float:
    """Starts fast, slows down."""
    return 1.0 - (1.0 - t) * (1.0 - t)


def accelerate_decelerate(t: float) -> float:
    """Slow at both ends, cosine shaped."""
    return math.cos((t + 1.0) * math.pi) / 2.0 + 0.5


def bounce(t: float) -> float:
    """Reaches the end early and bounces back against it, settling at 1."""
    n1, d1 = 7.5625, 2.75
    if t < 1 / d1:
        return n1 * t * t
    if t < 2 / d1:
        t -= 1.5 / d1
        return n1 * t * t + 0.75
    if t < 2.5 / d1:
        t -= 2.25 / d1
        return n1 * t * t + 0.9375
    t -= 2.625 / d1
    return n1 * t * t + 0.984375
