"""State of an HTTP request made by a page."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class HttpRequest:
    request_id: str
    frame: str | None = None
    interception_id: str | None = None
    allow_interception: bool = False
    redirect_chain: list[HttpRequest] = field(default_factory=list)
    from_memory_cache: bool = False
    failure_text: str | None = None
    response: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)
    is_navigation_request: bool = False
    interception_handled: bool = False
    method: str | None = None
    url: str | None = None
    resource_type: str | None = None
    post_data: str | None = None

    def set_response(self, response: dict[str, Any]) -> None:
        self.response = response