"""
Input Command Table

Keyboard input is translated into Command values through a pure lookup
table and queued; the viewer drains the queue once per tick. Tests can
push commands directly and replay a session deterministically.

Keys:
  SPACE   Play / Pause
  0-9     Step burst while paused (0 = 10 steps)
  B       Toggle cursor color (white / black)
  C       Clear canvas to white
  R       Random black points (pauses)
  T       Stamp text from the panel (pauses)
  S       Save frame as PNG
  Q / ESC Quit
"""

import enum
from collections import deque
from dataclasses import dataclass
from typing import Optional

from .clock import burst_size_for_digit


class Action(str, enum.Enum):
    TOGGLE_PLAY = "toggle_play"
    STEP_BURST = "step_burst"
    TOGGLE_CURSOR_COLOR = "toggle_cursor_color"
    TOGGLE_TEXT_COLORS = "toggle_text_colors"
    TOGGLE_FONT = "toggle_font"
    CLEAR = "clear"
    SEED_RANDOM_POINTS = "seed_random_points"
    SUBMIT_TEXT = "submit_text"
    EXPORT_FRAME = "export_frame"
    QUIT = "quit"


@dataclass(frozen=True)
class Command:
    action: Action
    steps: int = 0  # STEP_BURST only


KEY_BINDINGS = {
    " ": Command(Action.TOGGLE_PLAY),
    "b": Command(Action.TOGGLE_CURSOR_COLOR),
    "c": Command(Action.CLEAR),
    "r": Command(Action.SEED_RANDOM_POINTS),
    "t": Command(Action.SUBMIT_TEXT),
    "s": Command(Action.EXPORT_FRAME),
    "q": Command(Action.QUIT),
    "\x1b": Command(Action.QUIT),
}
KEY_BINDINGS.update({
    str(d): Command(Action.STEP_BURST, steps=burst_size_for_digit(d))
    for d in range(10)
})


def command_for_key(key: str) -> Optional[Command]:
    """Look up the command bound to a typed character (case-insensitive)."""
    if not key:
        return None
    return KEY_BINDINGS.get(key.lower())


class CommandQueue:
    """FIFO of pending commands, drained once per tick."""

    def __init__(self):
        self._pending = deque()

    def __len__(self):
        return len(self._pending)

    def push(self, command):
        if command is not None:
            self._pending.append(command)

    def push_key(self, key):
        """Translate and enqueue; returns the command or None if unbound."""
        command = command_for_key(key)
        self.push(command)
        return command

    def drain(self):
        while self._pending:
            yield self._pending.popleft()
