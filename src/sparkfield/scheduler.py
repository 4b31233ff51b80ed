"""Emission scheduling: when particles are activated and where."""

from __future__ import annotations

from enum import Enum, auto
from typing import Sequence
import logging
import math
import random

from .emitter import EmitterBounds
from .initializers import ParticleInitializer
from .modifiers import ParticleModifier
from .pool import ParticlePool

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of one emission session."""

    IDLE = auto()
    EMITTING = auto()
    BURST = auto()
    DRAINING = auto()
    TERMINAL = auto()


class EmissionMode(Enum):
    """How long a session keeps activating particles."""

    UNBOUNDED = auto()
    TIMED = auto()
    BURST = auto()


class SessionClosedError(RuntimeError):
    """Raised when a terminated scheduler is asked to emit again."""


class EmissionScheduler:
    """Frame-quantized emission over a shared particle pool.

    The number of particles activated by time ``t`` tracks ``rate * t``: each tick
    activates particles one at a time until the running count reaches that target,
    the pool runs dry, or ``t`` is no longer strictly before the emission deadline.
    """

    def __init__(
        self,
        pool: ParticlePool,
        initializers: Sequence[ParticleInitializer],
        modifiers: Sequence[ParticleModifier],
        bounds: EmitterBounds,
        rng: random.Random,
        time_to_live: int,
    ) -> None:
        self.pool = pool
        self.initializers = tuple(initializers)
        self.modifiers = tuple(modifiers)
        self.bounds = bounds
        self.rng = rng
        self.time_to_live = time_to_live

        self.state = SessionState.IDLE
        self.mode: EmissionMode | None = None
        self.particles_per_ms = 0.0
        self.emitting_until: float | None = None
        self.activated = 0
        self.current_ms = 0

    def _begin(self, mode: EmissionMode) -> None:
        if self.state is SessionState.TERMINAL:
            raise SessionClosedError("A terminated emission session cannot be restarted")
        if self.state is not SessionState.IDLE:
            raise SessionClosedError(f"Emission already started ({self.state.name})")
        self.mode = mode
        self.activated = 0

    def start_unbounded(self, particles_per_second: float) -> None:
        """Emit at a steady rate until stopped."""
        self._begin(EmissionMode.UNBOUNDED)
        self.particles_per_ms = particles_per_second / 1000.0
        self.emitting_until = None
        self.state = SessionState.EMITTING

    def start_timed(self, particles_per_second: float, emitting_ms: int) -> None:
        """Emit at a steady rate while elapsed time is strictly below ``emitting_ms``."""
        self._begin(EmissionMode.TIMED)
        self.particles_per_ms = particles_per_second / 1000.0
        self.emitting_until = emitting_ms
        self.state = SessionState.EMITTING

    def burst(self, count: int, now_ms: int = 0) -> int:
        """Activate up to ``count`` particles at once, then only drain."""
        self._begin(EmissionMode.BURST)
        self.state = SessionState.BURST
        self.particles_per_ms = 0.0
        self.emitting_until = now_ms
        self.current_ms = now_ms
        while self.activated < count and self.pool.has_available:
            self._activate(now_ms)
        if self.activated < count:
            logger.debug("Burst capped at %d of %d particles", self.activated, count)
        self.state = SessionState.DRAINING
        return self.activated

    def should_emit(self, now_ms: int) -> bool:
        if self.state is not SessionState.EMITTING:
            return False
        return self.emitting_until is None or now_ms < self.emitting_until

    def emit_due(self, now_ms: int) -> int:
        """Activate the particles owed at ``now_ms`` and return how many were activated."""
        self.current_ms = now_ms
        if self.state is not SessionState.EMITTING:
            return 0
        if not self.should_emit(now_ms):
            self.state = SessionState.DRAINING
            logger.debug("Emission window closed at %d ms", now_ms)
            return 0

        target = self.particles_per_ms * now_ms
        count = 0
        while self.activated < target:
            if not self.pool.has_available:
                logger.debug("Pool exhausted at %d ms (%d active)", now_ms, len(self.pool.active))
                break
            self._activate(now_ms)
            count += 1
        return count

    def _activate(self, now_ms: int) -> None:
        self.pool.activate_one(
            now_ms,
            self.initializers,
            self.modifiers,
            self.bounds,
            self.rng,
            self.time_to_live,
        )
        self.activated += 1

    def stop_emitting(self) -> None:
        """Stop activating but keep animating live particles."""
        if self.state in (SessionState.EMITTING, SessionState.BURST):
            self.emitting_until = self.current_ms
            self.state = SessionState.DRAINING

    def update_bounds(self, bounds: EmitterBounds) -> None:
        self.bounds = bounds

    @property
    def is_drained(self) -> bool:
        return self.state is SessionState.DRAINING and not self.pool.active

    def replay(self, start_ms: int, frame_interval_ms: int, stride: int) -> int:
        """Fast-forward through [0, start_ms] with fewer, evenly spaced ticks.

        Each synthetic step covers ``stride`` live frame intervals. Returns the
        number of steps taken.
        """
        if start_ms <= 0 or self.particles_per_ms <= 0:
            return 0
        step_ms = max(1, frame_interval_ms * max(1, stride))
        steps = math.ceil(start_ms / step_ms)
        frame_ms = start_ms / steps
        for index in range(1, steps + 1):
            now_ms = round(frame_ms * index)
            self.emit_due(now_ms)
            self.pool.advance(now_ms)
        logger.debug("Replayed %d steps up to %d ms", steps, start_ms)
        return steps

    def terminate(self) -> int:
        """Enter the absorbing terminal state and reclaim every active particle."""
        self.state = SessionState.TERMINAL
        return self.pool.reclaim_all()
