"""
Simulation Parameters and Persisted Settings

SimulationParameters holds every tunable the control panel exposes.
Ranges mirror the panel sliders, so values coming from the panel are
always valid; the model only rejects values constructed by hand.

Size-dependent defaults (cursor, text) scale with the processing
resolution relative to a 600px reference canvas.

The chosen resolution is the only state that survives a restart. It is
stored as a small JSON file by ResolutionStore.
"""

import json
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


RESOLUTIONS = (100, 200, 300, 400, 500, 600)
DEFAULT_RESOLUTION = 300
REFERENCE_SIZE = 600  # Text/cursor defaults are tuned for this canvas size

DEFAULT_SETTINGS_PATH = Path.home() / ".feedback_diffusion" / "settings.json"


class SimulationParameters(BaseModel):
    """Tunable parameters read by the pipeline and the overlay each tick."""

    model_config = ConfigDict(validate_assignment=True)

    # Pipeline
    blur_spread: float = Field(1.0, gt=0.0)
    unsharp_radius: float = Field(3.5, ge=1.0, le=20.0)
    unsharp_amount: float = Field(64.0, ge=0.0)

    # Cursor (drawn as circle diameter)
    cursor_radius: float = Field(50.0, ge=1.0)

    # Random points (R key)
    random_point_count: int = Field(50, ge=1, le=100)
    random_point_size: float = Field(50.0, ge=10.0, le=100.0)

    # Text stamp
    text_content: str = "模様"
    text_size: float = Field(125.0, gt=0.0)
    text_weight: float = Field(0.0, ge=0.0)
    outline_weight: float = Field(7.5, ge=0.0)
    font_name: Literal["Mincho", "Gothic"] = "Mincho"


def ui_scale(resolution):
    """Scale factor applied to size-dependent defaults."""
    return resolution / REFERENCE_SIZE


def default_parameters(resolution=DEFAULT_RESOLUTION):
    """Build the startup parameter set for a given processing resolution."""
    scale = ui_scale(resolution)
    return SimulationParameters(
        cursor_radius=resolution / 6,
        text_size=250 * scale,
        outline_weight=15 * scale,
    )


def validate_resolution(resolution):
    resolution = int(resolution)
    if resolution not in RESOLUTIONS:
        raise ValueError(f"Unsupported resolution: {resolution!r}. "
                         f"Choose one of {list(RESOLUTIONS)}")
    return resolution


class ResolutionStore:
    """Persists the chosen processing resolution across restarts."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH

    def load(self) -> int:
        """Return the stored resolution, or the default when unavailable."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return DEFAULT_RESOLUTION
        value = data.get("resolution") if isinstance(data, dict) else None
        if isinstance(value, int) and value in RESOLUTIONS:
            return value
        return DEFAULT_RESOLUTION

    def save(self, resolution: int) -> None:
        resolution = validate_resolution(resolution)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"resolution": resolution}),
                             encoding="utf-8")
