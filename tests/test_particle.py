from __future__ import annotations

import pygame
import pytest

from sparkfield.assets import FrameSequence
from sparkfield.particle import AnimatedParticle, Particle


def _particle(ttl: int = 100, start_ms: int = 50) -> Particle:
    particle = Particle(pygame.Surface((4, 4)))
    particle.configure(ttl, 10.0, 20.0)
    particle.activate(start_ms, ())
    return particle


def test_update_expires_exactly_at_time_to_live() -> None:
    particle = _particle(ttl=100, start_ms=50)
    assert particle.update(100) is True
    assert particle.update(149) is True
    assert particle.update(150) is False
    assert not particle.alive


def test_age_increases_with_now() -> None:
    particle = _particle()
    ages = []
    for now in (50, 60, 85, 120):
        particle.update(now)
        ages.append(particle.age)
    assert ages == [0, 10, 35, 70]


def test_kinematics_follow_velocity_and_acceleration() -> None:
    particle = Particle(pygame.Surface((4, 4)))
    particle.speed_x = 0.1
    particle.acceleration_x = 0.001
    particle.speed_y = -0.2
    particle.configure(1000, 10.0, 20.0)
    particle.activate(0, ())
    particle.update(10)
    assert particle.x == pytest.approx(11.05)
    assert particle.y == pytest.approx(18.0)


def test_result_does_not_depend_on_tick_spacing() -> None:
    coarse = _particle(ttl=1000, start_ms=0)
    fine = _particle(ttl=1000, start_ms=0)
    for p in (coarse, fine):
        p.speed_x = 0.05
        p.acceleration_y = 0.0004
    coarse.update(300)
    for now in range(0, 301, 7):
        fine.update(now)
    fine.update(300)
    assert (coarse.x, coarse.y) == pytest.approx((fine.x, fine.y))


def test_rotation_speed_is_degrees_per_second() -> None:
    particle = Particle(pygame.Surface((4, 4)))
    particle.initial_rotation = 10.0
    particle.rotation_speed = 90.0
    particle.configure(1000, 0.0, 0.0)
    particle.activate(0, ())
    particle.update(500)
    assert particle.rotation == pytest.approx(55.0)


def test_reset_restores_visual_defaults() -> None:
    particle = _particle()
    particle.scale = 3.0
    particle.alpha = 10
    particle.speed_x = 4.0
    particle.reset()
    assert (particle.scale, particle.alpha, particle.speed_x) == (1.0, 255, 0.0)


def test_animated_particle_walks_frames_and_loops() -> None:
    frames = [pygame.Surface((2, 2)) for _ in range(3)]
    particle = AnimatedParticle(FrameSequence(tuple(frames), (50, 50, 100)))
    particle.configure(1000, 0.0, 0.0)
    particle.activate(0, ())

    seen = []
    for now in (0, 60, 120, 220):
        particle.update(now)
        seen.append(particle.frame_index)
    assert seen == [0, 1, 2, 0]
    assert particle.image is frames[0]
    assert particle.frame_duration_ms == 50
