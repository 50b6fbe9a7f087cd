"""
Control Panel Widgets for the Reaction-Diffusion Viewer

Minimal, dark-themed widgets drawn directly with pygame. Sliders clamp
to their range before calling back, so the simulator only ever receives
valid parameter values.
"""

import pygame


# Theme colors
THEME = {
    "bg": (18, 18, 24),
    "panel": (25, 25, 35),
    "track": (50, 50, 65),
    "track_fill": (80, 140, 220),
    "handle": (200, 210, 230),
    "handle_active": (255, 255, 255),
    "text": (180, 185, 195),
    "text_bright": (230, 235, 245),
    "text_dim": (100, 105, 115),
    "button": (40, 42, 55),
    "button_hover": (55, 58, 75),
    "button_active": (70, 100, 180),
    "field": (34, 34, 46),
    "field_focus": (46, 52, 72),
    "divider": (40, 40, 55),
}


class Slider:
    """Horizontal slider with label and value display."""

    def __init__(self, x, y, width, label, min_val, max_val, value,
                 fmt=".2f", step=None, on_change=None):
        self.x = x
        self.y = y
        self.width = width
        self.height = 36
        self.label = label
        self.min_val = min_val
        self.max_val = max_val
        self.fmt = fmt
        self.step = step
        self.on_change = on_change
        self.dragging = False
        self.hovered = False
        self.value = self.clamp(value)

        self.track_y = self.y + 22
        self.track_h = 4
        self.handle_r = 7
        self.track_x = self.x + 8
        self.track_w = self.width - 16

    def clamp(self, val):
        val = max(self.min_val, min(self.max_val, val))
        if self.step:
            val = self.min_val + round((val - self.min_val) / self.step) * self.step
            val = max(self.min_val, min(self.max_val, val))
        return val

    def _val_to_x(self, val):
        frac = (val - self.min_val) / (self.max_val - self.min_val)
        return self.track_x + frac * self.track_w

    def _x_to_val(self, px):
        frac = max(0.0, min(1.0, (px - self.track_x) / self.track_w))
        return self.clamp(self.min_val + frac * (self.max_val - self.min_val))

    def _drag_to(self, px):
        self.value = self._x_to_val(px)
        if self.on_change:
            self.on_change(self.value)

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            mx, my = event.pos
            if (self.track_x - 4 <= mx <= self.track_x + self.track_w + 4 and
                    self.track_y - 12 <= my <= self.track_y + 12):
                self.dragging = True
                self._drag_to(mx)
                return True

        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.dragging = False

        elif event.type == pygame.MOUSEMOTION:
            mx, my = event.pos
            hx = self._val_to_x(self.value)
            self.hovered = abs(mx - hx) < 12 and abs(my - self.track_y) < 12
            if self.dragging:
                self._drag_to(mx)
                return True

        return False

    def set_value(self, val):
        self.value = self.clamp(val)

    def draw(self, surface, font):
        label_surf = font.render(self.label, True, THEME["text"])
        surface.blit(label_surf, (self.x + 8, self.y + 2))

        val_surf = font.render(f"{self.value:{self.fmt}}", True, THEME["text_bright"])
        surface.blit(val_surf, (self.x + self.width - val_surf.get_width() - 8, self.y + 2))

        track_rect = pygame.Rect(self.track_x, self.track_y - self.track_h // 2,
                                 self.track_w, self.track_h)
        pygame.draw.rect(surface, THEME["track"], track_rect, border_radius=2)

        hx = self._val_to_x(self.value)
        fill_rect = pygame.Rect(self.track_x, self.track_y - self.track_h // 2,
                                hx - self.track_x, self.track_h)
        pygame.draw.rect(surface, THEME["track_fill"], fill_rect, border_radius=2)

        color = THEME["handle_active"] if (self.dragging or self.hovered) else THEME["handle"]
        r = self.handle_r + (2 if self.dragging else 0)
        pygame.draw.circle(surface, color, (int(hx), self.track_y), r)


class Button:
    """Clickable button with label."""

    def __init__(self, x, y, width, height, label, on_click=None, active=False):
        self.rect = pygame.Rect(x, y, width, height)
        self.label = label
        self.on_click = on_click
        self.active = active
        self.hovered = False

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                if self.on_click:
                    self.on_click()
                return True
        elif event.type == pygame.MOUSEMOTION:
            self.hovered = self.rect.collidepoint(event.pos)
        return False

    def draw(self, surface, font):
        if self.active:
            color = THEME["button_active"]
        elif self.hovered:
            color = THEME["button_hover"]
        else:
            color = THEME["button"]
        pygame.draw.rect(surface, color, self.rect, border_radius=4)

        label_surf = font.render(self.label, True, THEME["text_bright"])
        lx = self.rect.x + (self.rect.width - label_surf.get_width()) // 2
        ly = self.rect.y + (self.rect.height - label_surf.get_height()) // 2
        surface.blit(label_surf, (lx, ly))


class ButtonRow:
    """Row of selectable buttons (radio style), e.g. the resolution choice."""

    def __init__(self, x, y, width, labels, selected=0, on_select=None, btn_height=26):
        self.labels = labels
        self.selected = selected
        self.on_select = on_select

        self.buttons = []
        padding = 4
        bw = max(40, (width - padding * (len(labels) - 1)) // max(1, len(labels)))
        bx = x
        by = y
        for label in labels:
            if bx + bw > x + width and bx > x:
                bx = x
                by += btn_height + padding
            self.buttons.append(Button(bx, by, bw, btn_height, label))
            bx += bw + padding

        self.total_height = by - y + btn_height
        self._update_active()

    def _update_active(self):
        for i, btn in enumerate(self.buttons):
            btn.active = (i == self.selected)

    def handle_event(self, event):
        for i, btn in enumerate(self.buttons):
            if btn.handle_event(event):
                self.selected = i
                self._update_active()
                if self.on_select:
                    self.on_select(i, self.labels[i])
                return True
        return False

    def draw(self, surface, font):
        for btn in self.buttons:
            btn.draw(surface, font)


class TextField:
    """Single-line text input. Click to focus, Enter or Escape to leave."""

    def __init__(self, x, y, width, label, value="", on_change=None):
        self.x = x
        self.y = y
        self.width = width
        self.height = 46
        self.label = label
        self.value = value
        self.on_change = on_change
        self.focused = False
        self.rect = pygame.Rect(x + 8, y + 18, width - 16, 24)

    def _set(self, value):
        self.value = value
        if self.on_change:
            self.on_change(value)

    def handle_event(self, event):
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.focused = self.rect.collidepoint(event.pos)
            return self.focused

        if not self.focused:
            return False

        if event.type == pygame.TEXTINPUT:
            self._set(self.value + event.text)
            return True
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_BACKSPACE:
                self._set(self.value[:-1])
            elif event.key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_ESCAPE):
                self.focused = False
            # Printable keys arrive as TEXTINPUT; swallow the KEYDOWN
            return True
        return False

    def draw(self, surface, font):
        label_surf = font.render(self.label, True, THEME["text"])
        surface.blit(label_surf, (self.x + 8, self.y + 2))
        color = THEME["field_focus"] if self.focused else THEME["field"]
        pygame.draw.rect(surface, color, self.rect, border_radius=3)
        shown = self.value + ("|" if self.focused else "")
        text_surf = font.render(shown, True, THEME["text_bright"])
        surface.blit(text_surf, (self.rect.x + 6,
                                 self.rect.y + (self.rect.height - text_surf.get_height()) // 2))


class StatusLabel:
    """Read-only `label: value` line, refreshed from simulator status."""

    def __init__(self, x, y, width, label, value=""):
        self.x = x
        self.y = y
        self.width = width
        self.height = 20
        self.label = label
        self.value = value

    def draw(self, surface, font):
        label_surf = font.render(self.label, True, THEME["text"])
        surface.blit(label_surf, (self.x + 8, self.y + 2))
        val_surf = font.render(str(self.value), True, THEME["text_bright"])
        surface.blit(val_surf, (self.x + self.width - val_surf.get_width() - 8, self.y + 2))


class SectionHeader:
    """Section divider with title."""

    def __init__(self, x, y, width, title):
        self.x = x
        self.y = y
        self.width = width
        self.title = title
        self.height = 24

    def draw(self, surface, font):
        pygame.draw.line(surface, THEME["divider"],
                         (self.x + 8, self.y + 8),
                         (self.x + self.width - 8, self.y + 8))
        title_surf = font.render(self.title, True, THEME["text_dim"])
        surface.blit(title_surf, (self.x + 8, self.y + 12))


class ControlPanel:
    """
    Side panel containing all controls.
    Manages layout, events, and rendering for the control widgets.
    """

    def __init__(self, x, y, width, height):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.widgets = []
        self.scroll = 0
        self._cursor_y = 8  # Next free vertical position

    @property
    def has_text_focus(self):
        """True while a text field is being edited (keyboard commands are off)."""
        return any(getattr(w, "focused", False) for w in self.widgets)

    def _add(self, widget, gap):
        self.widgets.append(widget)
        self._cursor_y += widget.height + gap
        return widget

    def add_section(self, title):
        return self._add(SectionHeader(0, self._cursor_y, self.width, title), 4)

    def add_slider(self, label, min_val, max_val, value, fmt=".2f",
                   step=None, on_change=None):
        return self._add(Slider(0, self._cursor_y, self.width, label,
                                min_val, max_val, value, fmt, step, on_change), 6)

    def add_text_field(self, label, value="", on_change=None):
        return self._add(TextField(0, self._cursor_y, self.width, label,
                                   value, on_change), 6)

    def add_status(self, label, value=""):
        return self._add(StatusLabel(0, self._cursor_y, self.width, label, value), 2)

    def add_button_row(self, labels, selected=0, on_select=None):
        row = ButtonRow(8, self._cursor_y, self.width - 16, labels,
                        selected, on_select)
        self.widgets.append(row)
        self._cursor_y += row.total_height + 8
        return row

    def add_button(self, label, on_click=None):
        btn = Button(8, self._cursor_y, self.width - 16, 28, label, on_click)
        self.widgets.append(btn)
        self._cursor_y += 36
        return btn

    def add_spacer(self, height=8):
        self._cursor_y += height

    @property
    def content_height(self):
        return max(self.height, self._cursor_y)

    def scroll_by(self, dy):
        self.scroll = max(0, min(self.content_height - self.height, self.scroll + dy))

    def handle_event(self, event):
        """Process events, adjusting coordinates for panel position and scroll."""
        if event.type == pygame.MOUSEWHEEL:
            mx, my = pygame.mouse.get_pos()
            if self.x <= mx <= self.x + self.width:
                self.scroll_by(-event.y * 30)
                return True
            return False

        if hasattr(event, "pos"):
            px, py = event.pos[0] - self.x, event.pos[1] - self.y
            local_pos = (px, py + self.scroll)
            if not (0 <= px <= self.width and 0 <= py <= self.height):
                # Release drags and drop text focus when clicking elsewhere
                if event.type in (pygame.MOUSEBUTTONUP, pygame.MOUSEBUTTONDOWN):
                    for widget in self.widgets:
                        if hasattr(widget, "dragging"):
                            widget.dragging = False
                        if hasattr(widget, "focused"):
                            widget.focused = False
                return False
            adjusted = pygame.event.Event(event.type, {
                **{k: v for k, v in event.__dict__.items() if k != "pos"},
                "pos": local_pos,
            })
        else:
            adjusted = event

        handled = False
        for widget in self.widgets:
            if hasattr(widget, "handle_event") and widget.handle_event(adjusted):
                handled = True
                # A click must reach every text field to update focus
                if adjusted.type != pygame.MOUSEBUTTONDOWN:
                    break
        return handled

    def draw(self, target_surface, font):
        """Draw the panel onto the target surface."""
        content = pygame.Surface((self.width, self.content_height))
        content.fill(THEME["panel"])
        pygame.draw.line(content, THEME["divider"], (0, 0), (0, self.content_height))
        for widget in self.widgets:
            widget.draw(content, font)
        visible = pygame.Rect(0, self.scroll, self.width, self.height)
        target_surface.blit(content, (self.x, self.y), visible)
