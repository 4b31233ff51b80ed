from __future__ import annotations

import math
import random

import pygame
import pytest

from sparkfield.emitter import EmitterBounds
from sparkfield.particle import Particle
from sparkfield.pool import ParticlePool
from sparkfield.scheduler import EmissionMode, EmissionScheduler, SessionClosedError, SessionState


def _scheduler(pool_size: int, ttl: int = 1000) -> EmissionScheduler:
    pool = ParticlePool(Particle(pygame.Surface((2, 2))) for _ in range(pool_size))
    return EmissionScheduler(pool, (), (), EmitterBounds(0, 0, 0, 0), random.Random(42), ttl)


def test_burst_activates_min_of_request_and_pool() -> None:
    scheduler = _scheduler(10)
    assert scheduler.burst(25) == 10
    assert scheduler.state is SessionState.DRAINING
    assert scheduler.mode is EmissionMode.BURST
    for now in (33, 66, 500):
        assert scheduler.emit_due(now) == 0
        scheduler.pool.advance(now)
    assert scheduler.activated == 10


def test_small_burst_leaves_rest_available() -> None:
    scheduler = _scheduler(10)
    assert scheduler.burst(4) == 4
    assert len(scheduler.pool.active) == 4
    assert len(scheduler.pool.available) == 6


def test_unbounded_rate_tracks_elapsed_time() -> None:
    scheduler = _scheduler(1000, ttl=10_000)
    scheduler.start_unbounded(50)
    for now in range(0, 3000, 33):
        scheduler.emit_due(now)
        scheduler.pool.advance(now)
        target = 0.05 * now
        assert target <= scheduler.activated < target + 1
    assert scheduler.activated == math.ceil(scheduler.particles_per_ms * now)


def test_timed_emission_stops_at_exact_boundary() -> None:
    scheduler = _scheduler(500)
    scheduler.start_timed(1000, 100)
    assert scheduler.emit_due(99) == 99
    assert scheduler.emit_due(100) == 0
    assert scheduler.state is SessionState.DRAINING
    assert scheduler.emit_due(150) == 0


def test_pool_exhaustion_is_backpressure() -> None:
    scheduler = _scheduler(3, ttl=100)
    scheduler.start_unbounded(1000)
    assert scheduler.emit_due(10) == 3
    assert scheduler.emit_due(20) == 0
    scheduler.pool.advance(110)
    assert scheduler.emit_due(120) == 3


def test_stop_emitting_drains_without_new_particles() -> None:
    scheduler = _scheduler(100, ttl=100)
    scheduler.start_unbounded(100)
    scheduler.emit_due(50)
    scheduler.stop_emitting()
    assert scheduler.state is SessionState.DRAINING
    assert scheduler.emit_due(500) == 0
    assert not scheduler.is_drained
    scheduler.pool.advance(500)
    assert scheduler.is_drained


def test_zero_rate_zero_duration_emits_nothing() -> None:
    scheduler = _scheduler(10)
    scheduler.start_timed(0, 0)
    assert scheduler.emit_due(0) == 0
    assert scheduler.emit_due(33) == 0
    assert scheduler.activated == 0


def test_terminated_scheduler_cannot_restart() -> None:
    scheduler = _scheduler(5)
    scheduler.start_unbounded(1000)
    scheduler.emit_due(3)
    assert scheduler.terminate() == 3
    assert len(scheduler.pool.available) == 5
    with pytest.raises(SessionClosedError):
        scheduler.start_unbounded(10)


def test_replay_catches_up_with_fewer_steps() -> None:
    scheduler = _scheduler(100, ttl=2000)
    scheduler.start_unbounded(10)
    steps = scheduler.replay(1000, frame_interval_ms=33, stride=4)
    assert steps == 8
    assert scheduler.activated == 10
    assert len(scheduler.pool.active) == 10


def test_replay_is_noop_without_start_time() -> None:
    scheduler = _scheduler(10)
    scheduler.start_unbounded(10)
    assert scheduler.replay(0, 33, 4) == 0
    assert scheduler.activated == 0
