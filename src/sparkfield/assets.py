"""Asset handles and the resolver that turns identifiers into drawable surfaces."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence, Union
import logging
import random

import pygame

from .particle import AnimatedParticle, Particle

logger = logging.getLogger(__name__)


class AssetError(RuntimeError):
    """Raised when a particle asset cannot be resolved to a drawable."""


@dataclass(slots=True, frozen=True)
class FrameSequence:
    """Looping frame animation with a duration per frame."""

    frames: tuple[pygame.Surface, ...]
    durations_ms: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.frames:
            raise AssetError("A frame sequence needs at least one frame")
        if len(self.frames) != len(self.durations_ms):
            raise AssetError("Frame sequence needs one duration per frame")
        if any(duration <= 0 for duration in self.durations_ms):
            raise AssetError("Frame durations must be positive")

    @classmethod
    def uniform(cls, frames: Iterable[pygame.Surface], frame_duration_ms: int) -> FrameSequence:
        """Build a sequence where every frame lasts the same time."""
        frames = tuple(frames)
        return cls(frames, (frame_duration_ms,) * len(frames))

    @property
    def total_ms(self) -> int:
        return sum(self.durations_ms)

    def frame_at(self, age_ms: float) -> int:
        """Return the frame index shown at ``age_ms``, looping the sequence."""
        elapsed = age_ms % self.total_ms
        for index, duration in enumerate(self.durations_ms):
            if elapsed < duration:
                return index
            elapsed -= duration
        return len(self.frames) - 1


AssetHandle = Union[pygame.Surface, FrameSequence]
AssetSource = Union[str, Path, pygame.Surface, FrameSequence]


def load_image(path: Path) -> pygame.Surface:
    """Load an image file, raising AssetError on any failure."""
    if not path.exists():
        raise AssetError(f"Particle asset not found: {path}")
    try:
        return pygame.image.load(str(path))
    except pygame.error as exc:
        raise AssetError(f"Could not load particle asset {path}: {exc}") from exc


def resolve_assets(sources: Sequence[AssetSource]) -> list[AssetHandle]:
    """Turn asset identifiers into drawable handles, failing fast on the first bad one."""
    if not sources:
        raise AssetError("At least one particle asset is required")
    handles: list[AssetHandle] = []
    for source in sources:
        if isinstance(source, (pygame.Surface, FrameSequence)):
            handles.append(source)
        elif isinstance(source, (str, Path)):
            handles.append(load_image(Path(source)))
        else:
            raise AssetError(f"Unsupported particle asset: {source!r}")
    logger.info("Resolved %d particle asset(s)", len(handles))
    return handles


def build_particles(handles: Sequence[AssetHandle], max_particles: int, rng: random.Random) -> list[Particle]:
    """Create the fixed particle set, spreading handles evenly and shuffling."""
    if not handles:
        raise AssetError("At least one particle asset is required")
    particles: list[Particle] = []
    for index in range(max_particles):
        handle = handles[index % len(handles)]
        if isinstance(handle, FrameSequence):
            particles.append(AnimatedParticle(handle))
        else:
            particles.append(Particle(handle))
    rng.shuffle(particles)
    return particles
