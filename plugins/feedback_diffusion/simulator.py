"""
FeedbackSimulator -- headless core of the reaction-diffusion feedback loop

Owns the visible frame, the filter pipeline, the playback clock and the
small amount of interaction state (cursor/text colors). No pygame
dependency: the viewer and the headless snap mode both drive it.

Per scheduled tick:
  snapshot -> (if running) pipeline -> commit -> cursor -> border

Usage:
    from feedback_diffusion.simulator import FeedbackSimulator
    sim = FeedbackSimulator(resolution=300)
    frame = sim.tick()                 # (H, W) float32 [0, 1]
    sim.submit_text()                  # pauses, stamps text
    sim.step_burst(5)                  # 5 steps while paused
"""

from dataclasses import dataclass

import numpy as np

from .clock import SimulationClock
from .commands import Action
from .config import default_parameters, validate_resolution
from .filters import FeedbackPipeline
from .frame import FrameStore, save_frame_png, seed_frame
from .overlay import (
    WHITE, draw_border, draw_cursor, seed_random_points, stamp_text,
)


WARMUP_TICKS = 3
DEFAULT_EXPORT_DIR = "screenshots"


def color_name(value):
    return "White" if value == WHITE else "Black"


@dataclass
class SimulationState:
    """Interaction state shown on the status panel."""

    cursor_color: float = WHITE
    text_fill_color: float = WHITE

    @property
    def text_stroke_color(self):
        # Stroke is always the inverse of the fill
        return WHITE - self.text_fill_color


class FeedbackSimulator:
    """Headless feedback loop with play/pause, step bursts and stamping."""

    def __init__(self, resolution=300, seed_image=None, params=None,
                 rng=None, resolution_store=None,
                 export_dir=DEFAULT_EXPORT_DIR, warmup=True):
        self.seed_image = seed_image
        self.rng = rng if rng is not None else np.random.default_rng()
        self.resolution_store = resolution_store
        self.export_dir = export_dir
        self._subscribers = []
        self._reinit(validate_resolution(resolution), params, warmup)

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def _reinit(self, resolution, params=None, warmup=True):
        """Tear down every buffer and start over from the seed image."""
        self.resolution = resolution
        self.params = params if params is not None else default_parameters(resolution)
        self.state = SimulationState()
        self.frames = FrameStore(seed_frame(resolution, self.seed_image))
        self.pipeline = FeedbackPipeline(resolution)
        self.clock = SimulationClock(on_change=self._on_clock_change)
        if warmup:
            for _ in range(WARMUP_TICKS):
                self._advance(None)

    def set_resolution(self, resolution):
        """Persist the new resolution and reinitialize from the seed image."""
        resolution = validate_resolution(resolution)
        if self.resolution_store is not None:
            self.resolution_store.save(resolution)
        print(f"[RD] Reinitializing at {resolution}x{resolution}")
        self._reinit(resolution)
        self._notify()

    # ── Ticking ───────────────────────────────────────────────────────────

    @property
    def frame(self):
        """The visible frame (live array; copy before keeping it)."""
        return self.frames.draw()

    def _draw_overlay(self, pointer):
        frame = self.frames.draw()
        draw_cursor(frame, pointer, self.params.cursor_radius,
                    self.state.cursor_color)
        draw_border(frame)

    def _advance(self, pointer):
        """One tick-equivalent: pipeline on the snapshot, then overlay."""
        self.frames.commit(self.pipeline.run(self.frames.snapshot(), self.params))
        self._draw_overlay(pointer)

    def tick(self, pointer=None):
        """One scheduled tick. `pointer` is (x, y) in texels while pressed."""
        if self.clock.should_run_pipeline():
            self._advance(pointer)
        else:
            self._draw_overlay(pointer)
        return self.frames.draw()

    def step_burst(self, n, pointer=None):
        """Run `n` tick-equivalents now, only while paused.

        Only the final frame of the burst is visible to the caller.
        """
        return self.clock.step_burst(n, lambda: self._advance(pointer))

    # ── Playback ──────────────────────────────────────────────────────────

    @property
    def playback(self):
        return self.clock.state

    def toggle_play(self):
        return self.clock.toggle()

    def pause(self):
        return self.clock.pause()

    def _on_clock_change(self, state):
        self._notify()

    # ── Interactions ──────────────────────────────────────────────────────

    def toggle_cursor_color(self):
        self.state.cursor_color = WHITE - self.state.cursor_color
        self._notify()

    def toggle_text_colors(self):
        self.state.text_fill_color = WHITE - self.state.text_fill_color
        self._notify()

    def toggle_font(self):
        self.params.font_name = "Gothic" if self.params.font_name == "Mincho" else "Mincho"
        self._notify()

    def clear(self):
        """Replace the frame with blank white, bypassing the pipeline."""
        self.frames.replace_blank(WHITE)

    def seed_random_points(self):
        """Pause, then drop random black discs. Returns their centers."""
        self.pause()
        return seed_random_points(self.frames.draw(),
                                  self.params.random_point_count,
                                  self.params.random_point_size, self.rng)

    def submit_text(self):
        """Pause, then stamp the outlined text at the canvas center."""
        self.pause()
        p = self.params
        stamp_text(self.frames.draw(), p.text_content, p.text_size,
                   p.text_weight, p.outline_weight, p.font_name,
                   fill_value=self.state.text_fill_color,
                   stroke_value=self.state.text_stroke_color)

    def export_frame(self, directory=None, timestamp=None):
        path = save_frame_png(self.frames.draw(), directory or self.export_dir,
                              timestamp)
        print(f"[RD] Frame saved: {path}")
        return path

    # ── Commands ──────────────────────────────────────────────────────────

    def handle(self, command, pointer=None):
        """Apply one Command. QUIT is left to the caller."""
        action = command.action
        if action is Action.TOGGLE_PLAY:
            return self.toggle_play()
        if action is Action.STEP_BURST:
            return self.step_burst(command.steps, pointer)
        if action is Action.TOGGLE_CURSOR_COLOR:
            return self.toggle_cursor_color()
        if action is Action.TOGGLE_TEXT_COLORS:
            return self.toggle_text_colors()
        if action is Action.TOGGLE_FONT:
            return self.toggle_font()
        if action is Action.CLEAR:
            return self.clear()
        if action is Action.SEED_RANDOM_POINTS:
            return self.seed_random_points()
        if action is Action.SUBMIT_TEXT:
            return self.submit_text()
        if action is Action.EXPORT_FRAME:
            return self.export_frame()
        return None

    def drain(self, queue, pointer=None):
        """Process every queued command. Returns False once QUIT is seen."""
        keep_running = True
        for command in queue.drain():
            if command.action is Action.QUIT:
                keep_running = False
                continue
            self.handle(command, pointer)
        return keep_running

    # ── Status (read / observe) ───────────────────────────────────────────

    def status(self):
        return {
            "simulation_status": self.clock.state.value,
            "cursor_color": color_name(self.state.cursor_color),
            "text_fill_color": color_name(self.state.text_fill_color),
            "text_stroke_color": color_name(self.state.text_stroke_color),
            "font_name": self.params.font_name,
            "resolution": self.resolution,
            "ticks": self.clock.ticks,
        }

    def subscribe(self, callback):
        """Call `callback(status)` whenever a status field changes."""
        self._subscribers.append(callback)
        callback(self.status())

    def _notify(self):
        status = self.status()
        for callback in self._subscribers:
            callback(status)

    @property
    def stats(self):
        frame = self.frames.draw()
        return {
            "ticks": self.clock.ticks,
            "pipeline_runs": self.pipeline.runs,
            "mean": float(frame.mean()),
            "dark_pct": float((frame < 0.5).sum()) / frame.size * 100,
        }

