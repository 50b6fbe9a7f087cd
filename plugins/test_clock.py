#!/usr/bin/env python3
"""
Tests for the playback clock and the key -> command table.

Verifies:
1. Running/Paused transitions and idempotent pause
2. Step bursts: exact counts while paused, no-op while running
3. Digit mapping (0 -> 10) and the pure command table / queue
"""

import pytest

from feedback_diffusion.clock import PlaybackState, SimulationClock, burst_size_for_digit
from feedback_diffusion.commands import Action, Command, CommandQueue, command_for_key


def test_toggle():
    print("Testing SimulationClock toggle...")
    clock = SimulationClock()
    assert clock.state is PlaybackState.RUNNING, "Clock should start running"
    assert clock.toggle() is PlaybackState.PAUSED
    assert clock.paused
    assert clock.toggle() is PlaybackState.RUNNING
    assert clock.running
    print("  ✓ Toggle working correctly")


def test_pause_is_idempotent():
    changes = []
    clock = SimulationClock(on_change=changes.append)
    clock.pause()
    snapshot = (clock.state, clock.ticks, clock.steps, clock.bursts, len(changes))
    clock.pause()
    assert (clock.state, clock.ticks, clock.steps, clock.bursts, len(changes)) == snapshot, \
        "Second pause must not change state, counters or notify"
    assert changes == [PlaybackState.PAUSED], "Exactly one change notification expected"


def test_should_run_pipeline_counts_ticks():
    clock = SimulationClock()
    assert clock.should_run_pipeline() is True
    clock.pause()
    assert clock.should_run_pipeline() is False
    assert clock.ticks == 2, "Every scheduled tick should be counted"


def test_step_burst_counts():
    print("Testing step bursts...")
    calls = []
    clock = SimulationClock()

    assert clock.step_burst(5, lambda: calls.append(1)) == 0, "Bursts are rejected while running"
    assert calls == [], "No steps may run while running"

    clock.pause()
    assert clock.step_burst(burst_size_for_digit(0), lambda: calls.append(1)) == 10
    assert len(calls) == 10, "Digit 0 should run exactly 10 steps"

    calls.clear()
    assert clock.step_burst(burst_size_for_digit(5), lambda: calls.append(1)) == 5
    assert len(calls) == 5, "Digit 5 should run exactly 5 steps"
    assert clock.steps == 15 and clock.bursts == 2
    assert clock.paused, "Bursts must not resume playback"
    print("  ✓ Step bursts working correctly")


def test_burst_size_for_digit():
    assert [burst_size_for_digit(d) for d in range(10)] == [10, 1, 2, 3, 4, 5, 6, 7, 8, 9]
    with pytest.raises(ValueError):
        burst_size_for_digit(11)


def test_command_table():
    assert command_for_key(" ") == Command(Action.TOGGLE_PLAY)
    assert command_for_key("0") == Command(Action.STEP_BURST, steps=10)
    assert command_for_key("7") == Command(Action.STEP_BURST, steps=7)
    assert command_for_key("B") == Command(Action.TOGGLE_CURSOR_COLOR), "Keys are case-insensitive"
    assert command_for_key("c").action is Action.CLEAR
    assert command_for_key("r").action is Action.SEED_RANDOM_POINTS
    assert command_for_key("t").action is Action.SUBMIT_TEXT
    assert command_for_key("s").action is Action.EXPORT_FRAME
    assert command_for_key("\x1b").action is Action.QUIT
    assert command_for_key("x") is None
    assert command_for_key("") is None


def test_command_queue_fifo():
    queue = CommandQueue()
    assert queue.push_key("z") is None, "Unbound keys are dropped"
    queue.push_key("r")
    queue.push_key("3")
    queue.push(Command(Action.TOGGLE_PLAY))
    assert len(queue) == 3
    drained = list(queue.drain())
    assert [c.action for c in drained] == [
        Action.SEED_RANDOM_POINTS, Action.STEP_BURST, Action.TOGGLE_PLAY,
    ], "Commands should drain in arrival order"
    assert len(queue) == 0


if __name__ == "__main__":
    print("\n=== Testing Clock and Commands ===\n")

    test_toggle()
    test_pause_is_idempotent()
    test_should_run_pipeline_counts_ticks()
    test_step_burst_counts()
    test_burst_size_for_digit()
    test_command_table()
    test_command_queue_fifo()

    print("\n✓ All tests passed!\n")
