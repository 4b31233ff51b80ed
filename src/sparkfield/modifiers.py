"""Per-tick rules that set a particle attribute as a function of its age."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable
import math

from .easing import Easing, linear
from .particle import Particle


class ParticleModifier(ABC):
    """Writes the value an attribute holds at a given age; never accumulates."""

    @abstractmethod
    def apply(self, particle: Particle, age_ms: float) -> None:
        raise NotImplementedError


class _WindowedModifier(ParticleModifier):
    """Interpolates from ``initial`` to ``final`` across [start_ms, end_ms].

    Holds ``initial`` before the window and ``final`` after it.
    """

    def __init__(
        self,
        initial: float,
        final: float,
        start_ms: float,
        end_ms: float,
        easing: Easing = linear,
    ) -> None:
        self.initial = initial
        self.final = final
        self.start_ms = start_ms
        self.end_ms = end_ms
        self.easing = easing

    def value_at(self, age_ms: float) -> float:
        if age_ms < self.start_ms:
            return self.initial
        if age_ms >= self.end_ms:
            return self.final
        progress = (age_ms - self.start_ms) / (self.end_ms - self.start_ms)
        return self.initial + (self.final - self.initial) * self.easing(progress)


class AlphaModifier(_WindowedModifier):
    """Fades alpha (0-255) over a window of the particle's life."""

    def apply(self, particle: Particle, age_ms: float) -> None:
        particle.alpha = int(round(self.value_at(age_ms)))


class ScaleModifier(_WindowedModifier):
    """Grows or shrinks the particle over a window of its life."""

    def apply(self, particle: Particle, age_ms: float) -> None:
        particle.scale = self.value_at(age_ms)


class AccelerationModifier(ParticleModifier):
    """Adds a constant extra acceleration (pixels/ms², clockwise degrees) to the position."""

    def __init__(self, acceleration: float, angle: float) -> None:
        radians = math.radians(angle)
        self.acceleration_x = acceleration * math.cos(radians)
        self.acceleration_y = acceleration * math.sin(radians)

    def apply(self, particle: Particle, age_ms: float) -> None:
        particle.x += 0.5 * self.acceleration_x * age_ms * age_ms
        particle.y += 0.5 * self.acceleration_y * age_ms * age_ms


class CustomModifier(ParticleModifier):
    """Adapts a plain callable to the modifier interface."""

    def __init__(self, func: Callable[[Particle, float], None]) -> None:
        self.func = func

    def apply(self, particle: Particle, age_ms: float) -> None:
        self.func(particle, age_ms)
