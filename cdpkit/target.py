"""Kinds of browser targets and their configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from cdpkit.frame import REQUEST_TIMEOUT
from cdpkit.viewport import Viewport

_PAGE_INIT_COMMANDS: tuple[tuple[str, dict[str, Any]], ...] = (
    (
        "Target.setAutoAttach",
        {"autoAttach": True, "waitForDebuggerOnStart": True, "flatten": True},
    ),
    ("Performance.enable", {}),
    ("Log.enable", {}),
)


class TargetKind(Enum):
    PAGE = "page"
    BACKGROUND_PAGE = "background_page"
    SERVICE_WORKER = "service_worker"
    SHARED_WORKER = "shared_worker"
    OTHER = "other"
    BROWSER = "browser"
    WEBVIEW = "webview"
    UNKNOWN = "unknown"


_KNOWN_KINDS = {kind.value: kind for kind in TargetKind if kind is not TargetKind.UNKNOWN}


@dataclass(frozen=True)
class TargetType:
    """The type of a target; unknown types keep the name they were reported with."""

    kind: TargetKind
    name: str

    @classmethod
    def parse(cls, value: str) -> TargetType:
        return cls(_KNOWN_KINDS.get(value, TargetKind.UNKNOWN), value)

    def __str__(self) -> str:
        return self.name

    def is_page(self) -> bool:
        return self.kind is TargetKind.PAGE

    def is_background_page(self) -> bool:
        return self.kind is TargetKind.BACKGROUND_PAGE

    def is_service_worker(self) -> bool:
        return self.kind is TargetKind.SERVICE_WORKER

    def is_shared_worker(self) -> bool:
        return self.kind is TargetKind.SHARED_WORKER

    def is_other(self) -> bool:
        return self.kind is TargetKind.OTHER

    def is_browser(self) -> bool:
        return self.kind is TargetKind.BROWSER

    def is_webview(self) -> bool:
        return self.kind is TargetKind.WEBVIEW


@dataclass
class TargetConfig:
    ignore_https_errors: bool = True
    request_timeout: float = REQUEST_TIMEOUT
    viewport: Viewport | None = None


def page_init_commands(timeout: float = REQUEST_TIMEOUT) -> list[tuple[str, dict[str, Any]]]:
    """The commands that initialize a page target, as (method, params).

    They are meant to be answered within ``timeout`` seconds, which must be
    positive. Each call returns fresh parameter dictionaries.
    """
    if timeout <= 0:
        raise ValueError(f"timeout must be positive, got {timeout}")
    return [(method, dict(params)) for method, params in _PAGE_INIT_COMMANDS]