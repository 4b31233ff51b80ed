from __future__ import annotations

import threading
import time

from sparkfield.easing import accelerate
from sparkfield.ticker import SteppedTickSource, ThreadedTickSource


def test_periodic_source_delivers_fixed_steps() -> None:
    values: list[int] = []
    source = SteppedTickSource(10, start_ms=0)
    source.start(values.append)
    assert source.advance(0) == 1
    assert source.advance(25) == 2
    assert values == [0, 10, 20]


def test_periodic_source_honours_start_offset() -> None:
    values: list[int] = []
    source = SteppedTickSource(10, start_ms=500)
    source.start(values.append)
    source.advance(20)
    assert values == [500, 510, 520]


def test_bounded_source_completes_once() -> None:
    values: list[int] = []
    completions: list[bool] = []
    source = SteppedTickSource(10, duration_ms=30)
    assert source.bounded
    assert not SteppedTickSource(10).bounded
    source.start(values.append, lambda: completions.append(True))
    source.advance(100)
    source.advance(100)
    assert values == [0, 10, 20, 30]
    assert completions == [True]
    assert not source.running


def test_bounded_source_applies_easing() -> None:
    values: list[int] = []
    source = SteppedTickSource(50, duration_ms=100, easing=accelerate)
    source.start(values.append)
    source.advance(100)
    assert values == [0, 25, 100]


def test_cancel_stops_future_ticks() -> None:
    values: list[int] = []
    source = SteppedTickSource(10)
    source.start(values.append)
    source.advance(0)
    source.cancel()
    assert source.advance(100) == 0
    assert values == [0]


def test_cancel_from_inside_a_tick() -> None:
    values: list[int] = []
    source = SteppedTickSource(10)

    def on_tick(now: int) -> None:
        values.append(now)
        if now == 20:
            source.cancel()

    source.start(on_tick)
    source.advance(100)
    assert values == [0, 10, 20]


def test_threaded_ticks_are_serialized_and_cancel_is_final() -> None:
    values: list[int] = []
    busy = threading.Lock()
    overlaps: list[int] = []
    enough = threading.Event()

    def on_tick(now: int) -> None:
        if not busy.acquire(blocking=False):
            overlaps.append(now)
            return
        try:
            values.append(now)
            time.sleep(0.002)
            if len(values) >= 5:
                enough.set()
        finally:
            busy.release()

    source = ThreadedTickSource(1)
    source.start(on_tick)
    assert enough.wait(timeout=5)
    source.cancel()
    count = len(values)
    time.sleep(0.05)
    assert len(values) == count
    assert overlaps == []
    assert values == sorted(values)
