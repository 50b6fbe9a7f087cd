"""
Simulation Clock

Two playback states:
  RUNNING - the feedback pipeline runs once per scheduled tick
  PAUSED  - the pipeline runs only on explicit step bursts

Seeding random points and submitting text pause the clock as a side
effect. The pipeline itself never changes playback state.
"""

import enum


class PlaybackState(str, enum.Enum):
    RUNNING = "Running"
    PAUSED = "Paused"


def burst_size_for_digit(digit):
    """Digit key -> number of steps: 1-9 map to themselves, 0 means 10."""
    digit = int(digit)
    if not 0 <= digit <= 9:
        raise ValueError(f"Step burst digit must be 0-9, got {digit}")
    return 10 if digit == 0 else digit


class SimulationClock:
    """Running/Paused state machine with step bursts.

    `on_change` is called with the new state whenever the state actually
    changes, so status displays can refresh.
    """

    def __init__(self, on_change=None):
        self.state = PlaybackState.RUNNING
        self.on_change = on_change
        self.ticks = 0          # scheduled ticks seen
        self.steps = 0          # tick-equivalents executed by bursts
        self.bursts = 0

    @property
    def running(self):
        return self.state is PlaybackState.RUNNING

    @property
    def paused(self):
        return self.state is PlaybackState.PAUSED

    def _set(self, state):
        self.state = state
        if self.on_change:
            self.on_change(state)

    def toggle(self):
        """Flip Running <-> Paused unconditionally."""
        self._set(PlaybackState.PAUSED if self.running else PlaybackState.RUNNING)
        return self.state

    def pause(self):
        """Pause; a no-op (no notification) when already paused."""
        if self.running:
            self._set(PlaybackState.PAUSED)
        return self.state

    def resume(self):
        if self.paused:
            self._set(PlaybackState.RUNNING)
        return self.state

    def should_run_pipeline(self):
        """Called once per scheduled tick."""
        self.ticks += 1
        return self.running

    def step_burst(self, n, step_fn):
        """Run `step_fn` exactly `n` times, synchronously, while paused.

        Returns the number of steps executed: 0 while running.
        """
        if self.running:
            return 0
        for _ in range(n):
            step_fn()
        self.steps += n
        self.bursts += 1
        return n
