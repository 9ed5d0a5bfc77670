"""Browser contexts and sessions attached to targets."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(unsafe_hash=True)
class BrowserContext:
    """An independent browser session; the default context has no id."""

    id: str | None = None

    def is_incognito(self) -> bool:
        return self.id is not None

    def take(self) -> str | None:
        """Remove and return the context id."""
        context_id, self.id = self.id, None
        return context_id


@dataclass(frozen=True)
class Session:
    """A protocol session attached to a target."""

    session_id: str
    target_id: str