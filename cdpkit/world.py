"""JavaScript execution worlds of a frame."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass
class DOMWorld:
    """Tracks the execution context of one world of a frame."""

    execution_context: int | None = None
    detached: bool = False

    @classmethod
    def main_world(cls) -> DOMWorld:
        return cls()

    @classmethod
    def secondary_world(cls) -> DOMWorld:
        return cls()

    def set_context(self, ctx: int) -> None:
        self.execution_context = ctx

    def take_context(self) -> int | None:
        """Remove and return the execution context."""
        ctx, self.execution_context = self.execution_context, None
        return ctx


class DOMWorldKind(Enum):
    """The default world of a frame, or its isolated world with universal access."""

    MAIN = "main"
    SECONDARY = "secondary"