"""One-shot rules that stamp randomized starting state on activated particles."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable
import math
import random

from .particle import Particle
from .utils import normalize_angle_range, ordered, uniform


class ParticleInitializer(ABC):
    """Sets one or more starting attributes of a freshly activated particle."""

    @abstractmethod
    def initialize(self, particle: Particle, rng: random.Random) -> None:
        raise NotImplementedError


class SpeedModuleAndAngleInitializer(ParticleInitializer):
    """Random speed magnitude along a random direction.

    Angles are degrees, 0 pointing right and growing clockwise (90 is down).
    """

    def __init__(self, speed_min: float, speed_max: float, min_angle: float, max_angle: float) -> None:
        self.speed_min, self.speed_max = ordered(speed_min, speed_max)
        self.min_angle, self.max_angle = normalize_angle_range(min_angle, max_angle)

    def initialize(self, particle: Particle, rng: random.Random) -> None:
        speed = uniform(rng, self.speed_min, self.speed_max)
        angle = math.radians(uniform(rng, self.min_angle, self.max_angle))
        particle.speed_x = speed * math.cos(angle)
        particle.speed_y = speed * math.sin(angle)


class SpeedByComponentsInitializer(ParticleInitializer):
    """Independent random speed per axis."""

    def __init__(self, min_x: float, max_x: float, min_y: float, max_y: float) -> None:
        self.min_x, self.max_x = ordered(min_x, max_x)
        self.min_y, self.max_y = ordered(min_y, max_y)

    def initialize(self, particle: Particle, rng: random.Random) -> None:
        particle.speed_x = uniform(rng, self.min_x, self.max_x)
        particle.speed_y = uniform(rng, self.min_y, self.max_y)


class RotationInitializer(ParticleInitializer):
    """Random starting tilt in degrees."""

    def __init__(self, min_angle: float, max_angle: float) -> None:
        self.min_angle, self.max_angle = normalize_angle_range(min_angle, max_angle)

    def initialize(self, particle: Particle, rng: random.Random) -> None:
        particle.initial_rotation = uniform(rng, self.min_angle, self.max_angle)


class RotationSpeedInitializer(ParticleInitializer):
    """Random spin in degrees per second; negative values spin counter-clockwise."""

    def __init__(self, min_speed: float, max_speed: float) -> None:
        self.min_speed, self.max_speed = ordered(min_speed, max_speed)

    def initialize(self, particle: Particle, rng: random.Random) -> None:
        particle.rotation_speed = uniform(rng, self.min_speed, self.max_speed)


class ScaleInitializer(ParticleInitializer):
    """Random scale factor applied around the image centre."""

    def __init__(self, min_scale: float, max_scale: float) -> None:
        self.min_scale, self.max_scale = ordered(min_scale, max_scale)

    def initialize(self, particle: Particle, rng: random.Random) -> None:
        particle.scale = uniform(rng, self.min_scale, self.max_scale)


class AccelerationInitializer(ParticleInitializer):
    """Random acceleration magnitude along a random direction."""

    def __init__(self, min_acceleration: float, max_acceleration: float, min_angle: float, max_angle: float) -> None:
        self.min_acceleration, self.max_acceleration = ordered(min_acceleration, max_acceleration)
        self.min_angle, self.max_angle = normalize_angle_range(min_angle, max_angle)

    def initialize(self, particle: Particle, rng: random.Random) -> None:
        angle = math.radians(uniform(rng, self.min_angle, self.max_angle))
        value = uniform(rng, self.min_acceleration, self.max_acceleration)
        particle.acceleration_x = value * math.cos(angle)
        particle.acceleration_y = value * math.sin(angle)


class CustomInitializer(ParticleInitializer):
    """Adapts a plain callable to the initializer interface."""

    def __init__(self, func: Callable[[Particle, random.Random], None]) -> None:
        self.func = func

    def initialize(self, particle: Particle, rng: random.Random) -> None:
        self.func(particle, rng)
