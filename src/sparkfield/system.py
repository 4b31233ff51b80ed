"""Particle system facade and the session driver that runs one emission."""

from __future__ import annotations

from typing import Any, Callable, Sequence
import logging
import random
import threading

from .assets import AssetSource, build_particles, resolve_assets
from .easing import Easing, linear
from .emitter import EmitterBounds, Gravity, element_rect, point_bounds, rect_bounds
from .initializers import (
    AccelerationInitializer,
    CustomInitializer,
    ParticleInitializer,
    RotationInitializer,
    RotationSpeedInitializer,
    ScaleInitializer,
    SpeedByComponentsInitializer,
    SpeedModuleAndAngleInitializer,
)
from .modifiers import AlphaModifier, CustomModifier, ParticleModifier
from .pool import ParticlePool
from .renderer import ParticleField
from .scheduler import EmissionScheduler, SessionState
from .settings import SimulationSettings, current_settings
from .ticker import SteppedTickSource, ThreadedTickSource, TickSource
from .utils import MAX_ALPHA, Offset

logger = logging.getLogger(__name__)

TickSourceFactory = Callable[..., TickSource]


class EmissionSession:
    """Runs one emission from its first tick until it drains, completes or is cancelled.

    Each tick activates the particles owed, advances the pool and asks the renderer
    to repaint the same ``active`` list it was handed at start.
    """

    def __init__(self, scheduler: EmissionScheduler, source: TickSource, renderer: ParticleField) -> None:
        self.scheduler = scheduler
        self.source = source
        self.renderer = renderer
        self.ticks = 0
        self.last_tick_ms: int | None = None
        self.finished = False
        self.finish_reason: str | None = None
        self._finish_lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self.scheduler.state

    def start(self) -> None:
        pool = self.scheduler.pool
        self.renderer.set_particles(pool.active, pool.lock)
        logger.info(
            "Emission session started (%s, %d ms interval)",
            self.scheduler.mode.name if self.scheduler.mode else "idle",
            self.source.interval_ms,
        )
        self.source.start(self.on_tick, self._on_source_complete)

    def on_tick(self, now_ms: int) -> None:
        if self.finished:
            return
        self.scheduler.emit_due(now_ms)
        self.scheduler.pool.advance(now_ms)
        self.renderer.request_repaint()
        self.ticks += 1
        self.last_tick_ms = now_ms
        if self.scheduler.is_drained:
            self._finish("drained")

    def _on_source_complete(self) -> None:
        self._finish("completed")

    def stop_emitting(self) -> None:
        """Stop activating particles; live ones keep animating until they expire."""
        with self.source.lock:
            self.scheduler.stop_emitting()

    def update_bounds(self, bounds: EmitterBounds) -> None:
        with self.source.lock:
            self.scheduler.update_bounds(bounds)

    def cancel(self) -> None:
        """Abort now: no further ticks, every particle back in the pool on return."""
        # Waits for an in-flight tick before tearing down.
        self.source.cancel()
        self._finish("cancelled")

    def _finish(self, reason: str) -> None:
        with self._finish_lock:
            if self.finished:
                return
            self.finished = True
            self.finish_reason = reason
        self.source.cancel()
        reclaimed = self.scheduler.terminate()
        self.renderer.detach()
        logger.info(
            "Emission session %s after %d ticks (%d activated, %d reclaimed)",
            reason,
            self.ticks,
            self.scheduler.activated,
            reclaimed,
        )


class ParticleSystem:
    """Fixed pool of particles plus the configuration every emission shares.

    Configuration methods return ``self`` so they can be chained::

        system = (
            ParticleSystem(80, ["spark.png"], time_to_live=800)
            .set_speed_module_and_angle_range(0.1, 0.3, 200, 340)
            .set_rotation_speed_range(-90, 90)
            .set_fade_out(300)
        )
        system.one_shot(button, 60)

    Speeds are pixels per millisecond and accelerations pixels per square
    millisecond, both multiplied by the settings' ``pixel_scale``. Angles are in
    degrees, 0 pointing right, clockwise.
    """

    def __init__(
        self,
        max_particles: int,
        assets: Sequence[AssetSource],
        time_to_live: int,
        *,
        parent_offset: Offset = (0, 0),
        rng: random.Random | None = None,
        settings: SimulationSettings | None = None,
        renderer: ParticleField | None = None,
        tick_source: TickSourceFactory = ThreadedTickSource,
    ) -> None:
        self.rng = rng or random.Random()
        self.max_particles = max_particles
        self.time_to_live = time_to_live
        self.parent_offset = parent_offset
        self.settings = settings
        self.renderer = renderer or ParticleField()
        self.tick_source = tick_source
        self.initializers: list[ParticleInitializer] = []
        self.modifiers: list[ParticleModifier] = []
        self.start_time_ms = 0
        self.session: EmissionSession | None = None

        handles = resolve_assets(assets)
        self.pool = ParticlePool(build_particles(handles, max_particles, self.rng))

    # --- configuration -------------------------------------------------------

    def _settings(self) -> SimulationSettings:
        return self.settings if self.settings is not None else current_settings()

    def _px(self, value: float) -> float:
        return value * self._settings().pixel_scale

    def add_initializer(self, initializer: ParticleInitializer | Callable[..., None] | None) -> ParticleSystem:
        """Append an initializer; plain callables are wrapped, None is ignored."""
        if initializer is None:
            return self
        if not isinstance(initializer, ParticleInitializer):
            initializer = CustomInitializer(initializer)
        self.initializers.append(initializer)
        return self

    def add_modifier(self, modifier: ParticleModifier | Callable[..., None]) -> ParticleSystem:
        """Append a modifier; plain callables are wrapped."""
        if not isinstance(modifier, ParticleModifier):
            modifier = CustomModifier(modifier)
        self.modifiers.append(modifier)
        return self

    def set_speed_range(self, speed_min: float, speed_max: float) -> ParticleSystem:
        """Random speed in any direction."""
        return self.set_speed_module_and_angle_range(speed_min, speed_max, 0, 360)

    def set_speed_module_and_angle_range(
        self, speed_min: float, speed_max: float, min_angle: float, max_angle: float
    ) -> ParticleSystem:
        """Random speed within an arc; 270..90 is the arc through 0, not the one through 180."""
        self.initializers.append(
            SpeedModuleAndAngleInitializer(self._px(speed_min), self._px(speed_max), min_angle, max_angle)
        )
        return self

    def set_speed_by_components_range(
        self, min_x: float, max_x: float, min_y: float, max_y: float
    ) -> ParticleSystem:
        """Independent random speed per axis."""
        self.initializers.append(
            SpeedByComponentsInitializer(self._px(min_x), self._px(max_x), self._px(min_y), self._px(max_y))
        )
        return self

    def set_initial_rotation_range(self, min_angle: float, max_angle: float) -> ParticleSystem:
        """Random starting tilt in degrees."""
        self.initializers.append(RotationInitializer(min_angle, max_angle))
        return self

    def set_scale_range(self, min_scale: float, max_scale: float) -> ParticleSystem:
        """Random scale factor around the image centre."""
        self.initializers.append(ScaleInitializer(min_scale, max_scale))
        return self

    def set_rotation_speed(self, rotation_speed: float) -> ParticleSystem:
        """Fixed spin in degrees per second."""
        return self.set_rotation_speed_range(rotation_speed, rotation_speed)

    def set_rotation_speed_range(self, min_speed: float, max_speed: float) -> ParticleSystem:
        """Random spin in degrees per second."""
        self.initializers.append(RotationSpeedInitializer(min_speed, max_speed))
        return self

    def set_acceleration_module_and_angle_range(
        self, min_acceleration: float, max_acceleration: float, min_angle: float, max_angle: float
    ) -> ParticleSystem:
        """Random acceleration magnitude within an arc of directions."""
        self.initializers.append(
            AccelerationInitializer(self._px(min_acceleration), self._px(max_acceleration), min_angle, max_angle)
        )
        return self

    def set_acceleration(self, acceleration: float, angle: float) -> ParticleSystem:
        """Fixed acceleration, e.g. ``set_acceleration(0.0002, 90)`` for gravity."""
        return self.set_acceleration_module_and_angle_range(acceleration, acceleration, angle, angle)

    def set_fade_out(self, duration_ms: int, easing: Easing = linear) -> ParticleSystem:
        """Fade alpha to zero over the last ``duration_ms`` of each particle's life."""
        start = max(0, self.time_to_live - duration_ms)
        self.modifiers.append(AlphaModifier(MAX_ALPHA, 0, start, self.time_to_live, easing))
        return self

    def set_start_time(self, start_ms: int) -> ParticleSystem:
        """Begin later emissions as if they had been running for ``start_ms``."""
        self.start_time_ms = max(0, start_ms)
        return self

    def set_parent_offset(self, offset: Offset) -> ParticleSystem:
        """Screen position of the drawing surface; emitter coordinates are made relative to it."""
        self.parent_offset = offset
        return self

    # --- emission ------------------------------------------------------------

    @property
    def active_count(self) -> int:
        return len(self.pool.active)

    @property
    def available_count(self) -> int:
        return len(self.pool.available)

    @property
    def running(self) -> bool:
        return self.session is not None and not self.session.finished

    def emit(
        self, x: float, y: float, particles_per_second: float, emitting_ms: int | None = None
    ) -> EmissionSession:
        """Emit from a screen point, forever or for ``emitting_ms``."""
        return self._start_rate(point_bounds(x, y, self.parent_offset), particles_per_second, emitting_ms)

    def emit_from(
        self,
        element: Any,
        particles_per_second: float,
        emitting_ms: int | None = None,
        gravity: Gravity = Gravity.CENTER,
    ) -> EmissionSession:
        """Emit from a rect or sprite, narrowed to the edge or centre named by ``gravity``."""
        bounds = rect_bounds(element_rect(element), gravity, self.parent_offset)
        return self._start_rate(bounds, particles_per_second, emitting_ms)

    def one_shot(self, element: Any, count: int, easing: Easing = linear) -> EmissionSession:
        """Launch ``count`` particles at once from the centre of a rect or sprite."""
        bounds = rect_bounds(element_rect(element), Gravity.CENTER, self.parent_offset)
        return self._start_burst(bounds, count, easing)

    def one_shot_at(self, x: float, y: float, count: int, easing: Easing = linear) -> EmissionSession:
        """Launch ``count`` particles at once from a screen point."""
        return self._start_burst(point_bounds(x, y, self.parent_offset), count, easing)

    def update_emit_point(self, x: float, y: float) -> None:
        """Move the live session's emitter to a screen point."""
        if self.session is not None:
            self.session.update_bounds(point_bounds(x, y, self.parent_offset))

    def update_emit_from(self, element: Any, gravity: Gravity = Gravity.CENTER) -> None:
        """Move the live session's emitter onto a rect or sprite."""
        if self.session is not None:
            self.session.update_bounds(rect_bounds(element_rect(element), gravity, self.parent_offset))

    def stop_emitting(self) -> None:
        """Stop emitting but keep drawing live particles until they expire."""
        if self.session is not None:
            self.session.stop_emitting()

    def cancel(self) -> None:
        """Stop everything now and return all particles to the pool."""
        if self.session is not None:
            self.session.cancel()

    def advance(self, delta_ms: float) -> int:
        """Feed host-loop time to a stepped session; returns ticks fired."""
        if self.session is None or not isinstance(self.session.source, SteppedTickSource):
            return 0
        return self.session.source.advance(delta_ms)

    def draw(self, surface: Any) -> int:
        """Paint the live particles onto ``surface``."""
        return self.renderer.draw(surface)

    def _new_scheduler(self, bounds: EmitterBounds) -> EmissionScheduler:
        if self.session is not None:
            if self.running:
                logger.info("Cancelling live emission session before starting a new one")
            # Also waits out a session that is tearing itself down on the tick thread.
            self.session.cancel()
        return EmissionScheduler(
            self.pool,
            self.initializers,
            self.modifiers,
            bounds,
            self.rng,
            self.time_to_live,
        )

    def _start_rate(
        self, bounds: EmitterBounds, particles_per_second: float, emitting_ms: int | None
    ) -> EmissionSession:
        scheduler = self._new_scheduler(bounds)
        settings = self._settings()
        start_ms = self.start_time_ms
        if emitting_ms is None:
            scheduler.start_unbounded(particles_per_second)
            source = self.tick_source(settings.frame_interval_ms, start_ms=start_ms)
        else:
            scheduler.start_timed(particles_per_second, emitting_ms)
            source = self.tick_source(
                settings.frame_interval_ms,
                duration_ms=emitting_ms + self.time_to_live,
                easing=linear,
                start_ms=start_ms,
            )
        scheduler.replay(start_ms, settings.frame_interval_ms, settings.replay_stride)
        return self._run(scheduler, source)

    def _start_burst(self, bounds: EmitterBounds, count: int, easing: Easing) -> EmissionSession:
        scheduler = self._new_scheduler(bounds)
        settings = self._settings()
        scheduler.burst(count)
        source = self.tick_source(settings.frame_interval_ms, duration_ms=self.time_to_live, easing=easing)
        return self._run(scheduler, source)

    def _run(self, scheduler: EmissionScheduler, source: TickSource) -> EmissionSession:
        self.session = EmissionSession(scheduler, source, self.renderer)
        self.session.start()
        return self.session
