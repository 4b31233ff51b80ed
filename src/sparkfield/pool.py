"""Fixed-capacity particle pool split into available and active sets."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Sequence
import random
import threading

from .emitter import EmitterBounds
from .initializers import ParticleInitializer
from .modifiers import ParticleModifier
from .particle import Particle


class ParticlePool:
    """Owns every particle for the lifetime of a system; nothing is allocated later.

    ``active`` is the list handed to the renderer. Every structural change to it
    happens under ``lock``, which the renderer also holds while it draws.
    """

    def __init__(self, particles: Iterable[Particle]) -> None:
        self.available: deque[Particle] = deque(particles)
        self.active: list[Particle] = []
        self.lock = threading.RLock()
        self.capacity = len(self.available)

    @property
    def has_available(self) -> bool:
        return bool(self.available)

    def activate_one(
        self,
        now_ms: int,
        initializers: Sequence[ParticleInitializer],
        modifiers: Sequence[ParticleModifier],
        bounds: EmitterBounds,
        rng: random.Random,
        time_to_live: int,
    ) -> Particle:
        """Recycle the oldest available particle into the active set.

        The pool must not be empty; callers check ``has_available`` first.
        """
        with self.lock:
            particle = self.available.popleft()
            particle.reset()
            for initializer in initializers:
                initializer.initialize(particle, rng)
            x, y = bounds.sample(rng)
            particle.configure(time_to_live, x, y)
            particle.activate(now_ms, modifiers)
            self.active.append(particle)
        return particle

    def advance(self, now_ms: int) -> None:
        """Update every active particle and return expired ones to the pool."""
        with self.lock:
            active = self.active
            # Reverse walk: the element swapped into slot i has already been visited.
            for index in range(len(active) - 1, -1, -1):
                particle = active[index]
                if particle.update(now_ms):
                    continue
                last = active.pop()
                if index < len(active):
                    active[index] = last
                self.available.append(particle)

    def reclaim_all(self) -> int:
        """Force every active particle back to the pool and return how many moved."""
        with self.lock:
            count = len(self.active)
            self.available.extend(self.active)
            self.active.clear()
        return count
