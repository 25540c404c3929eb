"""Tests for the pulse oscillator."""

from __future__ import annotations

import asyncio

import pytest

from ripples.core.oscillator import Direction, Oscillator


def test_starts_at_lower_bound_ascending():
    osc = Oscillator()
    assert osc.scale == 0.5
    assert osc.state.direction is Direction.ASCENDING


def test_reverses_at_bounds():
    osc = Oscillator(lower_bound=0.0, upper_bound=1.0, step=0.25)
    scales = [osc.tick().scale for _ in range(8)]
    assert scales == [0.25, 0.5, 0.75, 1.0, 0.75, 0.5, 0.25, 0.0]
    assert osc.state.direction is Direction.ASCENDING


def test_uneven_step_is_clamped():
    osc = Oscillator(lower_bound=0.0, upper_bound=1.0, step=0.3)
    scales = [osc.tick().scale for _ in range(5)]
    assert scales[3] == 1.0
    assert osc.state.direction is Direction.DESCENDING
    assert all(0.0 <= s <= 1.0 for s in scales)


def test_stays_within_bounds_over_long_run():
    osc = Oscillator()
    for _ in range(10_000):
        state = osc.tick()
        assert osc.lower_bound <= state.scale <= osc.upper_bound


def test_deterministic_for_tick_count():
    a = Oscillator().advance(1234)
    b = Oscillator().advance(1234)
    assert a == b


@pytest.mark.parametrize("kwargs", [
    {"lower_bound": 2.0, "upper_bound": 0.5},
    {"lower_bound": 1.0, "upper_bound": 1.0},
    {"step": 0},
    {"step": -0.1},
    {"tick_seconds": 0},
])
def test_invalid_parameters(kwargs):
    with pytest.raises(ValueError):
        Oscillator(**kwargs)


@pytest.mark.asyncio
async def test_run_advances_on_timer():
    osc = Oscillator(tick_seconds=0.01)
    task = asyncio.create_task(osc.run())
    await asyncio.sleep(0.1)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert osc.scale > 0.5
