from __future__ import annotations

from collections import Counter
import random

import pygame
import pytest

from sparkfield.assets import AssetError, FrameSequence, build_particles, resolve_assets
from sparkfield.particle import AnimatedParticle, Particle


def test_resolve_loads_image_files(tmp_path) -> None:
    path = tmp_path / "spark.bmp"
    source = pygame.Surface((3, 5))
    source.fill((200, 10, 10))
    pygame.image.save(source, str(path))

    handles = resolve_assets([path, str(path)])
    assert [h.get_size() for h in handles] == [(3, 5), (3, 5)]


def test_resolve_passes_handles_through() -> None:
    surface = pygame.Surface((2, 2))
    sequence = FrameSequence.uniform([pygame.Surface((2, 2))], 40)
    assert resolve_assets([surface, sequence]) == [surface, sequence]


@pytest.mark.parametrize("sources", [[], [42]])
def test_resolve_rejects_bad_sources(sources) -> None:
    with pytest.raises(AssetError):
        resolve_assets(sources)


def test_resolve_wraps_loader_errors(tmp_path) -> None:
    path = tmp_path / "broken.bmp"
    path.write_bytes(b"not an image")
    with pytest.raises(AssetError) as info:
        resolve_assets([path])
    assert isinstance(info.value.__cause__, pygame.error)


def test_frame_sequence_validation() -> None:
    with pytest.raises(AssetError):
        FrameSequence((), ())
    with pytest.raises(AssetError):
        FrameSequence((pygame.Surface((1, 1)),), (10, 20))
    with pytest.raises(AssetError):
        FrameSequence((pygame.Surface((1, 1)),), (0,))


def test_build_particles_pads_handles_to_capacity() -> None:
    handles = [pygame.Surface((1, 1)) for _ in range(3)]
    particles = build_particles(handles, 10, random.Random(4))
    assert len(particles) == 10
    counts = Counter(id(p.asset) for p in particles)
    assert sorted(counts.values()) == [3, 3, 4]


def test_build_particles_picks_animated_variant() -> None:
    sequence = FrameSequence.uniform([pygame.Surface((1, 1)), pygame.Surface((1, 1))], 30)
    particles = build_particles([sequence, pygame.Surface((1, 1))], 4, random.Random(0))
    kinds = Counter(type(p) for p in particles)
    assert kinds == {AnimatedParticle: 2, Particle: 2}
