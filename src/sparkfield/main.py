"""Executable demo: confetti bursts and a spark stream in a pygame window."""

from __future__ import annotations

from pathlib import Path
import logging
import random
import sys

import pygame

from .assets import FrameSequence
from .easing import decelerate
from .modifiers import ScaleModifier
from .settings import load_settings
from .system import ParticleSystem
from .ticker import SteppedTickSource

SCREEN_WIDTH = 1000
SCREEN_HEIGHT = 640
FPS = 60
BG_COLOR = (8, 10, 22)
TEXT_COLOR = (220, 238, 255)
CONFETTI_COLORS = ((255, 85, 85), (255, 233, 68), (98, 246, 128), (30, 242, 255), (255, 48, 210))


def confetti_pieces() -> list[pygame.Surface]:
    """Small solid rectangles, one per palette colour."""
    pieces = []
    for color in CONFETTI_COLORS:
        piece = pygame.Surface((10, 5), pygame.SRCALPHA)
        piece.fill((*color, 255))
        pieces.append(piece)
    return pieces


def spark_sequence() -> FrameSequence:
    """A glowing dot that pulses between three radii."""
    frames = []
    for radius in (2, 3, 4):
        frame = pygame.Surface((10, 10), pygame.SRCALPHA)
        pygame.draw.circle(frame, (255, 200, 120, 255), (5, 5), radius)
        frames.append(frame)
    return FrameSequence.uniform(frames, 60)


class Demo:
    """Left click: confetti burst. Hold right button: sparks follow the mouse."""

    def __init__(self, root: Path) -> None:
        pygame.init()
        pygame.font.init()
        self.settings = load_settings(root / "sparkfield.json")
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("sparkfield")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 18)
        rng = random.Random()

        self.confetti = (
            ParticleSystem(
                120,
                confetti_pieces(),
                time_to_live=1600,
                rng=rng,
                settings=self.settings,
                tick_source=SteppedTickSource,
            )
            .set_speed_module_and_angle_range(0.15, 0.45, 200, 340)
            .set_acceleration(0.0005, 90)
            .set_initial_rotation_range(0, 360)
            .set_rotation_speed_range(-360, 360)
            .set_fade_out(500)
        )
        self.sparks = (
            ParticleSystem(
                200,
                [spark_sequence()],
                time_to_live=900,
                rng=rng,
                settings=self.settings,
                tick_source=SteppedTickSource,
            )
            .set_speed_range(0.02, 0.12)
            .add_modifier(ScaleModifier(1.0, 0.2, 300, 900, decelerate))
            .set_fade_out(400)
        )

    def run(self) -> None:
        running = True
        while running:
            delta_ms = self.clock.tick(FPS)
            running = self.handle_events()
            if not running:
                break
            if self.sparks.running:
                self.sparks.update_emit_point(*pygame.mouse.get_pos())
            self.confetti.advance(delta_ms)
            self.sparks.advance(delta_ms)
            self.render()
        self.confetti.cancel()
        self.sparks.cancel()
        pygame.quit()

    def handle_events(self) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.confetti.one_shot_at(*event.pos, count=80)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 3:
                self.sparks.emit(*event.pos, particles_per_second=120)
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 3:
                self.sparks.stop_emitting()
        return True

    def render(self) -> None:
        self.screen.fill(BG_COLOR)
        self.sparks.draw(self.screen)
        self.confetti.draw(self.screen)
        info = self.font.render(
            f"L-click: confetti   R-drag: sparks   active {self.confetti.active_count + self.sparks.active_count}",
            True,
            TEXT_COLOR,
        )
        self.screen.blit(info, (16, SCREEN_HEIGHT - 30))
        pygame.display.flip()


def main() -> None:
    """Launch the demo."""
    logging.basicConfig(level=logging.INFO, stream=sys.stdout)
    Demo(root=Path.cwd()).run()


if __name__ == "__main__":
    main()
