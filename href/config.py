"""
Configuration for replay.

Environment Variables:
    HREF_SPEED: Default playback speed multiplier - default: 1.0
    HREF_TICK_MS: Wall-clock interval between scheduler ticks - default: 16
    HREF_SHOW_SELECTION: Highlight selections in renderers (1/0) - default: 1
"""

import math
import os
from dataclasses import dataclass, field
from typing import Optional

from .core.options import ReconstructorOptions


def _env_float(key: str) -> Optional[float]:
    val = os.getenv(key)
    if not val:
        return None
    try:
        parsed = float(val)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) and parsed > 0 else None


def _env_bool(key: str) -> Optional[bool]:
    val = os.getenv(key)
    if not val:
        return None
    return val.strip().lower() not in ("0", "false", "no", "off")


@dataclass(frozen=True)
class PlayerOptions:
    """
    Player configuration.

    Fields:
        speed: Playback speed multiplier (default: 1.0)
        tick_interval_ms: Wall-clock delay between ticks in run()
        show_selection: Show selection in visualization
        auto_play: Start playing as soon as a document is loaded
        reconstructor: Text reconstruction policy
    """
    speed: float = 1.0
    tick_interval_ms: float = 16.0
    show_selection: bool = True
    auto_play: bool = False
    reconstructor: ReconstructorOptions = field(default_factory=ReconstructorOptions)

    @staticmethod
    def from_env(**overrides) -> "PlayerOptions":
        """
        Build options from HREF_* environment variables.

        Unset or invalid values fall back to defaults; keyword overrides win.
        """
        values = {}
        speed = _env_float("HREF_SPEED")
        if speed is not None:
            values["speed"] = speed
        tick = _env_float("HREF_TICK_MS")
        if tick is not None:
            values["tick_interval_ms"] = tick
        show = _env_bool("HREF_SHOW_SELECTION")
        if show is not None:
            values["show_selection"] = show
        values.update({k: v for k, v in overrides.items() if v is not None})
        return PlayerOptions(**values)
