"""pygame drawing surface for the live particle list."""

from __future__ import annotations

from typing import Sequence
import threading

import pygame

from .particle import Particle
from .utils import MAX_ALPHA, clamp


class ParticleField:
    """Draws whatever particle container it was handed, read-only.

    The container is the pool's own ``active`` list, not a copy; drawing holds the
    pool lock so a tick never moves particles mid-paint.
    """

    def __init__(self) -> None:
        self.particles: Sequence[Particle] | None = None
        self.lock: threading.RLock | None = None
        self.dirty = False

    @property
    def attached(self) -> bool:
        return self.particles is not None

    def set_particles(self, particles: Sequence[Particle], lock: threading.RLock | None = None) -> None:
        self.particles = particles
        self.lock = lock
        self.dirty = True

    def request_repaint(self) -> None:
        self.dirty = True

    def detach(self) -> None:
        """Drop the container reference; later draws paint nothing."""
        self.particles = None
        self.lock = None
        self.dirty = True

    def draw(self, surface: pygame.Surface) -> int:
        """Paint every live particle onto ``surface`` and return how many were drawn."""
        particles, lock = self.particles, self.lock
        self.dirty = False
        if particles is None:
            return 0
        if lock is None:
            return self._draw_all(surface, particles)
        with lock:
            return self._draw_all(surface, particles)

    @staticmethod
    def _draw_all(surface: pygame.Surface, particles: Sequence[Particle]) -> int:
        for particle in particles:
            draw_particle(surface, particle)
        return len(particles)


def draw_particle(surface: pygame.Surface, particle: Particle) -> None:
    """Blit one particle centred on its position with rotation, scale and alpha."""
    if particle.scale <= 0:
        return
    image = particle.image
    alpha = int(clamp(particle.alpha, 0, MAX_ALPHA))
    if particle.rotation or particle.scale != 1.0:
        # Rotation is clockwise on screen; pygame rotates counter-clockwise.
        image = pygame.transform.rotozoom(image, -particle.rotation, particle.scale)
    elif alpha < MAX_ALPHA:
        image = image.copy()
    if alpha < MAX_ALPHA:
        image.set_alpha(alpha)
    rect = image.get_rect(center=(round(particle.x), round(particle.y)))
    surface.blit(image, rect)
