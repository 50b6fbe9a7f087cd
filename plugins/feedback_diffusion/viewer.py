"""
Interactive Pygame Viewer for the Reaction-Diffusion Feedback Loop

The canvas shows the simulator frame scaled to the window; the side panel
holds the tunable parameters and the read-only status lines.

Controls:
  SPACE       Play / Pause
  0-9         Step 1-9 frames while paused (0 = 10 frames)
  B           Toggle cursor color (white / black)
  C           Clear canvas to white
  R           Random black points (pauses)
  T           Stamp the panel text (pauses)
  S           Save frame as PNG
  TAB         Toggle control panel
  Q / ESC     Quit
  Mouse L     Draw with the cursor (on canvas area)
"""

import time

import numpy as np
import pygame

from .commands import Action, Command, CommandQueue
from .config import RESOLUTIONS, ResolutionStore, ui_scale
from .controls import ControlPanel, THEME
from .frame import to_uint8
from .simulator import FeedbackSimulator


PANEL_WIDTH = 300
DISPLAY_SIZE = 600


class Viewer:
    def __init__(self, resolution=None, seed_image=None, window=DISPLAY_SIZE,
                 settings_path=None):
        self.store = ResolutionStore(settings_path)
        if resolution is None:
            resolution = self.store.load()
        self.canvas_w = window
        self.canvas_h = window
        self.panel_visible = True
        self.running = True
        self.fps_history = []

        self.queue = CommandQueue()
        self.sim = FeedbackSimulator(resolution=resolution, seed_image=seed_image,
                                     resolution_store=self.store)

        # Built after pygame.init in run()
        self.panel = None
        self.status_labels = {}
        self._rebuild_panel = False

    @property
    def total_w(self):
        return self.canvas_w + (PANEL_WIDTH if self.panel_visible else 0)

    # ── Panel ─────────────────────────────────────────────────────────────

    def _push(self, action):
        return lambda: self.queue.push(Command(action))

    def _set_param(self, key, cast=float):
        def callback(val):
            setattr(self.sim.params, key, cast(val))
        return callback

    def _build_panel(self):
        """Build the side panel from the current simulator parameters."""
        panel = ControlPanel(self.canvas_w, 0, PANEL_WIDTH, self.canvas_h)
        params = self.sim.params
        scale = ui_scale(self.sim.resolution)
        labels = {}

        panel.add_section("QUALITY & PERFORMANCE")
        panel.add_button_row(
            [str(r) for r in RESOLUTIONS],
            selected=RESOLUTIONS.index(self.sim.resolution),
            on_select=self._on_resolution_select,
        )
        labels["simulation_status"] = panel.add_status("Status")

        panel.add_section("CURSOR")
        panel.add_slider("Radius", 10, 150 * scale, params.cursor_radius,
                         fmt=".0f", step=1, on_change=self._set_param("cursor_radius"))
        panel.add_button("Toggle Color  [B]", on_click=self._push(Action.TOGGLE_CURSOR_COLOR))
        labels["cursor_color"] = panel.add_status("Current Color")

        panel.add_section("TEXT")
        panel.add_text_field("Content (use / for newline)", params.text_content,
                             on_change=self._set_param("text_content", str))
        panel.add_slider("Size", 100 * scale, 500 * scale, params.text_size,
                         fmt=".0f", step=1, on_change=self._set_param("text_size"))
        panel.add_slider("Weight", 0, 30 * scale, params.text_weight,
                         fmt=".1f", step=0.5, on_change=self._set_param("text_weight"))
        panel.add_slider("Outline Weight", 0, 30 * scale, params.outline_weight,
                         fmt=".1f", step=0.5, on_change=self._set_param("outline_weight"))
        panel.add_button("Toggle Text Colors", on_click=self._push(Action.TOGGLE_TEXT_COLORS))
        labels["text_fill_color"] = panel.add_status("Fill Color")
        labels["text_stroke_color"] = panel.add_status("Stroke Color")
        panel.add_button("Toggle Font", on_click=self._push(Action.TOGGLE_FONT))
        labels["font_name"] = panel.add_status("Current Font")
        panel.add_button("Submit Text  [T]", on_click=self._push(Action.SUBMIT_TEXT))

        panel.add_section("PATTERN")
        panel.add_slider("Pattern Scale (Radius)", 1, 20, params.unsharp_radius,
                         fmt=".1f", step=0.5, on_change=self._set_param("unsharp_radius"))
        panel.add_slider("Blur Spread", 0.25, 4.0, params.blur_spread,
                         fmt=".2f", step=0.05, on_change=self._set_param("blur_spread"))
        panel.add_slider("Sharpen Amount", 0, 128, params.unsharp_amount,
                         fmt=".0f", step=1, on_change=self._set_param("unsharp_amount"))

        panel.add_section("RANDOM POINTS  [R]")
        panel.add_slider("Count", 1, 100, params.random_point_count,
                         fmt=".0f", step=1, on_change=self._set_param("random_point_count", int))
        panel.add_slider("Size", 10, 100, params.random_point_size,
                         fmt=".0f", step=1, on_change=self._set_param("random_point_size"))

        panel.add_spacer(4)
        panel.add_button("Play / Pause  [Space]", on_click=self._push(Action.TOGGLE_PLAY))
        panel.add_button("Clear  [C]", on_click=self._push(Action.CLEAR))
        panel.add_button("Save PNG  [S]", on_click=self._push(Action.EXPORT_FRAME))

        self.panel = panel
        self.status_labels = labels
        self._on_status(self.sim.status())

    def _on_status(self, status):
        """Simulator status observer: refresh the read-only panel lines."""
        for key, label in self.status_labels.items():
            label.value = status[key]

    def _on_resolution_select(self, idx, label):
        resolution = int(label)
        if resolution != self.sim.resolution:
            self.sim.set_resolution(resolution)
            self._rebuild_panel = True

    # ── Input ─────────────────────────────────────────────────────────────

    def _pointer(self):
        """Pressed pointer position in frame texels, or None."""
        if not pygame.mouse.get_pressed()[0]:
            return None
        mx, my = pygame.mouse.get_pos()
        if mx >= self.canvas_w or my >= self.canvas_h:
            return None
        if self.panel and any(getattr(w, "dragging", False) for w in self.panel.widgets):
            return None
        res = self.sim.resolution
        return (mx * res / self.canvas_w, my * res / self.canvas_h)

    def _handle_event(self, event):
        if event.type == pygame.QUIT:
            self.running = False
            return

        if event.type == pygame.KEYDOWN and event.key == pygame.K_TAB:
            self.panel_visible = not self.panel_visible
            pygame.display.set_mode((self.total_w, self.canvas_h))
            return

        if self.panel_visible and self.panel and self.panel.handle_event(event):
            return

        if event.type == pygame.KEYDOWN:
            if self.panel and self.panel.has_text_focus:
                return
            self.queue.push_key(event.unicode)

    # ── Rendering ─────────────────────────────────────────────────────────

    def _frame_surface(self):
        gray = to_uint8(self.sim.frame)
        rgb = np.repeat(gray.T[:, :, None], 3, axis=2)
        return pygame.surfarray.make_surface(rgb)

    def _draw_hud(self, screen, fps):
        stats = self.sim.stats
        line = (f"{self.sim.resolution}x{self.sim.resolution}  |  "
                f"Tick: {stats['ticks']:,}  |  FPS: {fps:.0f}")
        if self.sim.clock.paused:
            line = "[PAUSED]  " + line

        bg_surface = pygame.Surface((self.canvas_w, 24), pygame.SRCALPHA)
        bg_surface.fill((0, 0, 0, 140))
        screen.blit(bg_surface, (0, self.canvas_h - 24))
        text_surface = self.hud_font.render(line, True, (210, 215, 225))
        screen.blit(text_surface, (10, self.canvas_h - 18))

    def run(self):
        """Main viewer loop: events -> command queue -> tick -> present."""
        pygame.init()

        screen = pygame.display.set_mode((self.total_w, self.canvas_h))
        pygame.display.set_caption("Reaction-Diffusion")
        clock = pygame.time.Clock()

        self.hud_font = pygame.font.SysFont("menlo", 13)
        self.panel_font = pygame.font.SysFont("menlo", 12)

        self._build_panel()
        self.sim.subscribe(self._on_status)

        while self.running:
            frame_start = time.time()

            for event in pygame.event.get():
                self._handle_event(event)

            if self._rebuild_panel:
                self._rebuild_panel = False
                self._build_panel()

            pointer = self._pointer()
            if not self.sim.drain(self.queue, pointer):
                self.running = False
            self.sim.tick(pointer)

            screen = pygame.display.get_surface()
            screen.fill(THEME["bg"])
            scaled = pygame.transform.smoothscale(self._frame_surface(),
                                                  (self.canvas_w, self.canvas_h))
            screen.blit(scaled, (0, 0))

            self.fps_history.append(time.time() - frame_start)
            if len(self.fps_history) > 30:
                self.fps_history.pop(0)
            avg_fps = 1.0 / max(np.mean(self.fps_history), 0.001)
            self._draw_hud(screen, avg_fps)

            if self.panel_visible and self.panel:
                self.panel.draw(screen, self.panel_font)

            pygame.display.flip()
            clock.tick(60)

        pygame.quit()
