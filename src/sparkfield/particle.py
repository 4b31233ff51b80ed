"""Pooled particle entities and their per-tick kinematics."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence
import pygame

from .utils import MAX_ALPHA

if TYPE_CHECKING:
    from .assets import FrameSequence
    from .modifiers import ParticleModifier


class Particle:
    """One reusable visual element.

    Position, rotation and every modifier-driven attribute are evaluated from the
    state stamped at activation and the particle's age, so the result of an update
    depends only on ``now_ms`` and not on how many ticks came before it:

        x = initial_x + speed_x * age + 0.5 * acceleration_x * age ** 2
        rotation = initial_rotation + rotation_speed * age / 1000

    Speeds are in pixels per millisecond, accelerations in pixels per square
    millisecond and rotation speed in degrees per second.
    """

    def __init__(self, asset: pygame.Surface) -> None:
        self.asset = asset
        self.modifiers: Sequence[ParticleModifier] = ()
        self.time_to_live = 0
        self.start_ms = 0
        self.age = 0
        self.initial_x = 0.0
        self.initial_y = 0.0
        self.x = 0.0
        self.y = 0.0
        self.reset()

    def reset(self) -> None:
        """Restore the attributes initializers build on."""
        self.scale = 1.0
        self.alpha = MAX_ALPHA
        self.speed_x = 0.0
        self.speed_y = 0.0
        self.acceleration_x = 0.0
        self.acceleration_y = 0.0
        self.initial_rotation = 0.0
        self.rotation = 0.0
        self.rotation_speed = 0.0

    def configure(self, time_to_live: int, x: float, y: float) -> None:
        """Fix lifetime and birth position once initializers have run."""
        self.time_to_live = time_to_live
        self.initial_x = x
        self.initial_y = y
        self.x = x
        self.y = y
        self.rotation = self.initial_rotation

    def activate(self, start_ms: int, modifiers: Sequence[ParticleModifier]) -> None:
        """Mark the particle as born at ``start_ms``."""
        self.start_ms = start_ms
        self.age = 0
        self.modifiers = modifiers

    @property
    def alive(self) -> bool:
        return self.age < self.time_to_live

    @property
    def image(self) -> pygame.Surface:
        """Return the surface to draw for the current state."""
        return self.asset

    def update(self, now_ms: int) -> bool:
        """Advance to ``now_ms``; return False once the particle has expired."""
        age = now_ms - self.start_ms
        self.age = age
        if age >= self.time_to_live:
            return False

        self.x = self.initial_x + self.speed_x * age + 0.5 * self.acceleration_x * age * age
        self.y = self.initial_y + self.speed_y * age + 0.5 * self.acceleration_y * age * age
        self.rotation = self.initial_rotation + self.rotation_speed * age / 1000.0
        for modifier in self.modifiers:
            modifier.apply(self, age)
        return True


class AnimatedParticle(Particle):
    """Particle that cycles through a frame sequence over its lifetime."""

    def __init__(self, sequence: FrameSequence) -> None:
        super().__init__(sequence.frames[0])
        self.sequence = sequence
        self.frame_index = 0

    def activate(self, start_ms: int, modifiers: Sequence[ParticleModifier]) -> None:
        super().activate(start_ms, modifiers)
        self.frame_index = 0

    @property
    def frame_duration_ms(self) -> int:
        return self.sequence.durations_ms[self.frame_index]

    @property
    def image(self) -> pygame.Surface:
        return self.sequence.frames[self.frame_index]

    def update(self, now_ms: int) -> bool:
        if not super().update(now_ms):
            return False
        self.frame_index = self.sequence.frame_at(self.age)
        return True
