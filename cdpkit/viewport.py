"""Window and device settings for emulation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Viewport:
    width: int = 800
    height: int = 600
    device_scale_factor: float | None = None
    emulating_mobile: bool = False
    is_landscape: bool = False
    has_touch: bool = False