"""Tracks network requests of a target and issues network-related commands."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any

from cdpkit.request import HttpRequest


class NetworkEventKind(Enum):
    SEND_CDP_REQUEST = "send_cdp_request"
    REQUEST = "request"
    RESPONSE = "response"
    REQUEST_FAILED = "request_failed"
    REQUEST_FINISHED = "request_finished"


@dataclass
class NetworkEvent:
    """Something the network manager reports to its target."""

    kind: NetworkEventKind
    method: str | None = None
    params: dict[str, Any] | None = None
    request_id: str | None = None
    request: HttpRequest | None = None


class NetworkManager:
    """Keeps the state of a target's requests, interception and authentication."""

    def __init__(self, ignore_https_errors: bool = True, request_timeout: float = 30.0) -> None:
        self.ignore_https_errors = ignore_https_errors
        self.request_timeout = request_timeout
        self._queued_events: deque[NetworkEvent] = deque()
        self._requests: dict[str, HttpRequest] = {}
        self._requests_will_be_sent: dict[str, dict[str, Any]] = {}
        self._extra_headers: dict[str, str] = {}
        self._request_id_to_interception_id: dict[str, str] = {}
        self._user_cache_disabled = False
        self._attempted_authentications: set[str] = set()
        self._credentials: Any = None
        self._user_request_interception_enabled = False
        self._protocol_request_interception_enabled = False
        self._offline = False

    @property
    def extra_headers(self) -> dict[str, str]:
        return self._extra_headers

    def init_commands(self) -> list[tuple[str, dict[str, Any]]]:
        """The commands that initialize the network domain, as (method, params)."""
        commands: list[tuple[str, dict[str, Any]]] = [("Network.enable", {})]
        if self.ignore_https_errors:
            commands.append(("Security.setIgnoreCertificateErrors", {"ignore": True}))
        return commands

    def _push_cdp_request(self, method: str, params: dict[str, Any]) -> None:
        self._queued_events.append(
            NetworkEvent(NetworkEventKind.SEND_CDP_REQUEST, method=method, params=params)
        )

    def poll(self) -> NetworkEvent | None:
        """The next event to handle, or None."""
        return self._queued_events.popleft() if self._queued_events else None

    def set_extra_headers(self, headers: dict[str, str]) -> None:
        self._extra_headers = dict(headers)
        self._push_cdp_request("Network.setExtraHTTPHeaders", {"headers": dict(headers)})

    def set_request_interception(self, enabled: bool) -> None:
        self._user_request_interception_enabled = enabled
        self._update_protocol_request_interception()

    def set_cache_enabled(self, enabled: bool) -> None:
        self._user_cache_disabled = not enabled
        self.update_protocol_cache_disabled()

    def update_protocol_cache_disabled(self) -> None:
        self._push_cdp_request(
            "Network.setCacheDisabled",
            {
                "cacheDisabled": self._user_cache_disabled
                or self._protocol_request_interception_enabled
            },
        )

    def authenticate(self, credentials: Any) -> None:
        """Use credentials (with ``username`` and ``password``) for auth challenges."""
        self._credentials = credentials
        self._update_protocol_request_interception()

    def _update_protocol_request_interception(self) -> None:
        enabled = self._user_request_interception_enabled or self._credentials is not None
        if enabled == self._protocol_request_interception_enabled:
            return
        self.update_protocol_cache_disabled()
        if enabled:
            self._push_cdp_request(
                "Fetch.enable",
                {"patterns": [{"urlPattern": "*"}], "handleAuthRequests": True},
            )
        else:
            self._push_cdp_request("Fetch.disable", {})

    def on_fetch_request_paused(self, event: dict[str, Any]) -> None:
        request_id = event["requestId"]
        if (
            not self._user_request_interception_enabled
            and self._protocol_request_interception_enabled
        ):
            self._push_cdp_request("Fetch.continueRequest", {"requestId": request_id})
        network_id = event.get("networkId")
        if network_id is None:
            return
        will_be_sent = self._requests_will_be_sent.pop(network_id, None)
        if will_be_sent is not None:
            self._on_request(will_be_sent, request_id)
        else:
            self._request_id_to_interception_id[network_id] = request_id

    def on_fetch_auth_required(self, event: dict[str, Any]) -> None:
        request_id = event["requestId"]
        if request_id in self._attempted_authentications:
            response = "CancelAuth"
        elif self._credentials is not None:
            self._attempted_authentications.add(request_id)
            response = "ProvideCredentials"
        else:
            response = "Default"
        auth: dict[str, Any] = {"response": response}
        if self._credentials is not None:
            auth["username"] = self._credentials.username
            auth["password"] = self._credentials.password
        self._push_cdp_request(
            "Fetch.continueWithAuth",
            {"requestId": request_id, "authChallengeResponse": auth},
        )

    def set_offline_mode(self, value: bool) -> None:
        if self._offline == value:
            return
        self._offline = value
        self._push_cdp_request(
            "Network.emulateNetworkConditions",
            {
                "offline": value,
                "latency": 0,
                "downloadThroughput": -1.0,
                "uploadThroughput": -1.0,
            },
        )

    def on_request_will_be_sent(self, event: dict[str, Any]) -> None:
        """Track a new request; data URLs are never intercepted."""
        request_id = event["requestId"]
        if self._protocol_request_interception_enabled and not event["request"][
            "url"
        ].startswith("data:"):
            interception_id = self._request_id_to_interception_id.pop(request_id, None)
            if interception_id is not None:
                self._on_request(event, interception_id)
            else:
                self._requests_will_be_sent[request_id] = event
        else:
            self._on_request(event, None)

    def on_request_served_from_cache(self, event: dict[str, Any]) -> None:
        request = self._requests.get(event["requestId"])
        if request is not None:
            request.from_memory_cache = True

    def on_response_received(self, event: dict[str, Any]) -> None:
        request = self._requests.pop(event["requestId"], None)
        if request is not None:
            request.set_response(event["response"])
            self._queued_events.append(
                NetworkEvent(NetworkEventKind.REQUEST_FINISHED, request=request)
            )

    def on_network_loading_finished(self, event: dict[str, Any]) -> None:
        request = self._requests.pop(event["requestId"], None)
        if request is not None:
            if request.interception_id is not None:
                self._attempted_authentications.discard(request.interception_id)
            self._queued_events.append(
                NetworkEvent(NetworkEventKind.REQUEST_FINISHED, request=request)
            )

    def on_network_loading_failed(self, event: dict[str, Any]) -> None:
        request = self._requests.pop(event["requestId"], None)
        if request is not None:
            request.failure_text = event["errorText"]
            if request.interception_id is not None:
                self._attempted_authentications.discard(request.interception_id)
            self._queued_events.append(
                NetworkEvent(NetworkEventKind.REQUEST_FAILED, request=request)
            )

    def _on_request(self, event: dict[str, Any], interception_id: str | None) -> None:
        request_id = event["requestId"]
        redirect_chain: list[HttpRequest] = []
        redirect_response = event.get("redirectResponse")
        if redirect_response is not None:
            previous = self._requests.pop(request_id, None)
            if previous is not None:
                self._handle_request_redirect(previous, redirect_response)
                redirect_chain, previous.redirect_chain = previous.redirect_chain, []
                redirect_chain.append(previous)
        self._requests[request_id] = HttpRequest(
            request_id=request_id,
            frame=event.get("frameId"),
            interception_id=interception_id,
            allow_interception=self._user_request_interception_enabled,
            redirect_chain=redirect_chain,
        )
        self._queued_events.append(
            NetworkEvent(NetworkEventKind.REQUEST, request_id=request_id)
        )

    def _handle_request_redirect(self, request: HttpRequest, response: dict[str, Any]) -> None:
        request.set_response(response)
        if request.interception_id is not None:
            self._attempted_authentications.discard(request.interception_id)