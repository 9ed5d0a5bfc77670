"""Device and touch emulation of a target."""

from __future__ import annotations

from typing import Any

from cdpkit.frame import REQUEST_TIMEOUT
from cdpkit.viewport import Viewport


class EmulationManager:
    """Keeps the emulation state of a target and builds its setup commands."""

    def __init__(self, request_timeout: float = REQUEST_TIMEOUT) -> None:
        self.emulating_mobile = False
        self.has_touch = False
        self.needs_reload = False
        self.request_timeout = request_timeout

    def init_commands(self, viewport: Viewport) -> list[tuple[str, dict[str, Any]]]:
        """The commands that apply ``viewport``, as (method, params).

        Also records whether the page must be reloaded for them to take effect.
        """
        if viewport.is_landscape:
            orientation = {"type": "landscapePrimary", "angle": 90}
        else:
            orientation = {"type": "portraitPrimary", "angle": 0}
        scale = viewport.device_scale_factor
        set_device = {
            "width": viewport.width,
            "height": viewport.height,
            "deviceScaleFactor": 1.0 if scale is None else scale,
            "mobile": viewport.emulating_mobile,
            "screenOrientation": orientation,
        }
        commands = [
            ("Emulation.setDeviceMetricsOverride", set_device),
            ("Emulation.setTouchEmulationEnabled", {"enabled": True}),
        ]
        self.needs_reload = (
            self.emulating_mobile != viewport.emulating_mobile
            or self.has_touch != viewport.has_touch
        )
        return commands