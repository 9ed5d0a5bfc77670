"""Frames of a page, their execution contexts and navigation tracking."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from cdpkit.request import HttpRequest
from cdpkit.world import DOMWorld

REQUEST_TIMEOUT = 30.0
"""Default time in seconds an anticipated navigation may take."""

UTILITY_WORLD_NAME = "__chromiumoxide_utility_world__"
EVALUATION_SCRIPT_URL = "____chromiumoxide_utility_world___evaluation_script__"

_FRAME_INIT_COMMANDS: tuple[tuple[str, dict[str, Any]], ...] = (
    ("Page.enable", {}),
    ("Page.getFrameTree", {}),
    ("Page.setLifecycleEventsEnabled", {"enabled": True}),
    ("Runtime.enable", {}),
)


@dataclass
class CdpRequest:
    """A raw protocol request."""

    method: str
    params: Any = field(default_factory=dict)
    session_id: str | None = None


@dataclass
class Frame:
    """A frame of a page."""

    id: str
    parent_frame: str | None = None
    main_world: DOMWorld = field(default_factory=DOMWorld.main_world)
    secondary_world: DOMWorld = field(default_factory=DOMWorld.secondary_world)
    loader_id: str | None = None
    url: str | None = None
    http_request: HttpRequest | None = None
    child_frames: set[str] = field(default_factory=set)
    name: str | None = None
    lifecycle_events: set[str] = field(default_factory=set)

    @classmethod
    def with_parent(cls, frame_id: str, parent: Frame) -> Frame:
        """Create a frame and register it as a child of ``parent``."""
        parent.child_frames.add(frame_id)
        return cls(frame_id, parent_frame=parent.id)

    @classmethod
    def from_cdp(cls, frame: dict[str, Any]) -> Frame:
        """Create a frame from a protocol ``Page.Frame`` object."""
        return cls(
            frame["id"],
            parent_frame=frame.get("parentId"),
            loader_id=frame.get("loaderId"),
            url=frame.get("url"),
            name=frame.get("name"),
        )

    def _navigated(self, frame: dict[str, Any]) -> None:
        self.name = frame.get("name")
        fragment = frame.get("urlFragment")
        self.url = frame["url"] + fragment if fragment is not None else frame["url"]

    def _on_loading_stopped(self) -> None:
        self.lifecycle_events.add(LifecycleEvent.DOM_CONTENT_LOADED.value)
        self.lifecycle_events.add(LifecycleEvent.LOAD.value)

    def _on_loading_started(self) -> None:
        self.lifecycle_events.clear()
        self.http_request = None

    def is_loaded(self) -> bool:
        return LifecycleEvent.LOAD.value in self.lifecycle_events

    def clear_contexts(self) -> None:
        self.main_world.take_context()
        self.secondary_world.take_context()

    def destroy_context(self, ctx: int) -> None:
        if self.main_world.execution_context == ctx:
            self.main_world.take_context()
        elif self.secondary_world.execution_context == ctx:
            self.secondary_world.take_context()

    def execution_context(self) -> int | None:
        return self.main_world.execution_context

    def set_request(self, request: HttpRequest) -> None:
        self.http_request = request


@dataclass(frozen=True)
class NavigationOk:
    """A navigation that completed, within the same document or to a new one."""

    navigation_id: int
    same_document: bool


class NavigationError(Exception):
    """A navigation that could not be completed."""

    def __init__(self, navigation_id: int, message: str) -> None:
        super().__init__(message)
        self.navigation_id = navigation_id


class NavigationTimeout(NavigationError):
    def __init__(self, navigation_id: int, now: float, deadline: float) -> None:
        super().__init__(
            navigation_id,
            f"navigation {navigation_id} exceeded its deadline by {now - deadline:.3f}s",
        )
        self.now = now
        self.deadline = deadline


class FrameNotFound(NavigationError):
    def __init__(self, navigation_id: int, frame_id: str) -> None:
        super().__init__(navigation_id, f"frame {frame_id} of navigation {navigation_id} not found")
        self.frame_id = frame_id


@dataclass
class NavigationResult:
    """A previously submitted navigation has finished."""

    outcome: NavigationOk | NavigationError

    @property
    def navigation_id(self) -> int:
        return self.outcome.navigation_id

    @property
    def is_ok(self) -> bool:
        return isinstance(self.outcome, NavigationOk)

    def unwrap(self) -> NavigationOk:
        """Return the successful outcome or raise the navigation error."""
        if isinstance(self.outcome, NavigationError):
            raise self.outcome
        return self.outcome


@dataclass
class NavigationRequest:
    """A navigation request that needs to be submitted."""

    navigation_id: int
    request: CdpRequest


@dataclass
class NavigationWatcher:
    """Tracks an issued navigation request until completion."""

    id: int
    frame_id: str
    loader_id: str | None = None
    expected_lifecycle: set[str] = field(default_factory=set)
    same_document_navigation: bool = False

    @classmethod
    def until_page_load(
        cls, nav_id: int, frame_id: str, loader_id: str | None
    ) -> NavigationWatcher:
        return cls(nav_id, frame_id, loader_id, {LifecycleEvent.LOAD.value})

    def is_lifecycle_complete(self) -> bool:
        return not self.expected_lifecycle

    def _on_frame_navigated_within_document(self, event: dict[str, Any]) -> None:
        if self.frame_id == event["frameId"]:
            self.same_document_navigation = True


@dataclass
class FrameNavigationRequest:
    """A request that triggers a navigation, with the time it may take."""

    id: int
    request: CdpRequest
    timeout: float = REQUEST_TIMEOUT

    def set_frame_id(self, frame_id: str) -> None:
        """Put ``frame_id`` into the params' ``frameId`` unless already present."""
        params = self.request.params
        if isinstance(params, dict):
            params.setdefault("frameId", frame_id)


class LifecycleEvent(Enum):
    LOAD = "load"
    DOM_CONTENT_LOADED = "DOMContentLoaded"
    NETWORK_IDLE = "networkIdle"
    NETWORK_ALMOST_IDLE = "networkAlmostIdle"


class FrameManager:
    """Maintains the frames of a page and watches navigations until they complete."""

    def __init__(self, request_timeout: float = REQUEST_TIMEOUT) -> None:
        self.request_timeout = request_timeout
        self._main_frame: str | None = None
        self._frames: dict[str, Frame] = {}
        self._context_ids: dict[int, str] = {}
        self._isolated_worlds: set[str] = set()
        self._pending_navigations: deque[tuple[FrameNavigationRequest, NavigationWatcher]] = (
            deque()
        )
        self._navigation: tuple[NavigationWatcher, float] | None = None

    @staticmethod
    def init_commands(timeout: float = REQUEST_TIMEOUT) -> list[tuple[str, dict[str, Any]]]:
        """The commands that initialize frame tracking, as (method, params).

        They are meant to be answered within ``timeout`` seconds, which must be
        positive. Each call returns fresh parameter dictionaries.
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        return [(method, dict(params)) for method, params in _FRAME_INIT_COMMANDS]

    def main_frame(self) -> Frame | None:
        return self._frames.get(self._main_frame) if self._main_frame is not None else None

    def frames(self) -> Iterator[Frame]:
        return iter(list(self._frames.values()))

    def frame(self, frame_id: str) -> Frame | None:
        return self._frames.get(frame_id)

    def _check_lifecycle(self, watcher: NavigationWatcher, frame: Frame) -> bool:
        if not watcher.expected_lifecycle <= frame.lifecycle_events:
            return False
        return all(
            self._check_lifecycle(watcher, child)
            for child in (self._frames.get(cid) for cid in frame.child_frames)
            if child is not None
        )

    def _check_lifecycle_complete(
        self, watcher: NavigationWatcher, frame: Frame
    ) -> NavigationOk | None:
        if not self._check_lifecycle(watcher, frame):
            return None
        if watcher.same_document_navigation:
            return NavigationOk(watcher.id, same_document=True)
        if frame.loader_id != watcher.loader_id:
            return NavigationOk(watcher.id, same_document=False)
        return None

    def on_http_request_finished(self, request: HttpRequest) -> None:
        """Record the request in the frame it was made for."""
        if request.frame is not None:
            frame = self._frames.get(request.frame)
            if frame is not None:
                frame.set_request(request)

    def poll(self, now: float) -> NavigationResult | NavigationRequest | None:
        """Advance navigation tracking; ``now`` is a monotonic time in seconds."""
        if self._navigation is not None:
            watcher, deadline = self._navigation
            self._navigation = None
            if now > deadline:
                return NavigationResult(NavigationTimeout(watcher.id, now, deadline))
            frame = self._frames.get(watcher.frame_id)
            if frame is None:
                return NavigationResult(FrameNotFound(watcher.id, watcher.frame_id))
            nav = self._check_lifecycle_complete(watcher, frame)
            if nav is not None:
                return NavigationResult(nav)
            self._navigation = (watcher, deadline)
        elif self._pending_navigations:
            request, watcher = self._pending_navigations.popleft()
            self._navigation = (watcher, now + request.timeout)
            return NavigationRequest(request.id, request.request)
        return None

    def goto(self, request: FrameNavigationRequest) -> None:
        """Navigate the main frame, if there is one."""
        if self._main_frame is not None:
            self.navigate_frame(self._main_frame, request)

    def navigate_frame(self, frame_id: str, request: FrameNavigationRequest) -> None:
        frame = self._frames.get(frame_id)
        loader_id = frame.loader_id if frame is not None else None
        watcher = NavigationWatcher.until_page_load(request.id, frame_id, loader_id)
        request.set_frame_id(frame_id)
        self._pending_navigations.append((request, watcher))

    def on_frame_tree(self, frame_tree: dict[str, Any]) -> None:
        frame = frame_tree["frame"]
        self.on_frame_attached(frame["id"], frame.get("parentId"))
        self.on_frame_navigated(frame)
        for child in frame_tree.get("childFrames") or []:
            self.on_frame_tree(child)

    def on_frame_attached(self, frame_id: str, parent_frame_id: str | None) -> None:
        if frame_id in self._frames or parent_frame_id is None:
            return
        parent = self._frames.get(parent_frame_id)
        if parent is not None:
            self._frames[frame_id] = Frame.with_parent(frame_id, parent)

    def on_frame_detached(self, event: dict[str, Any]) -> None:
        self._remove_frames_recursively(event["frameId"])

    def on_frame_navigated(self, frame: dict[str, Any]) -> None:
        if frame.get("parentId") is not None:
            tracked = self._frames.pop(frame["id"], None)
            if tracked is not None:
                for child in list(tracked.child_frames):
                    self._remove_frames_recursively(child)
                tracked.child_frames.clear()
                tracked._navigated(frame)
                self._frames[tracked.id] = tracked
            return
        if self._main_frame is not None:
            main = self._frames.pop(self._main_frame)
            self._main_frame = None
            for child in list(main.child_frames):
                self._remove_frames_recursively(child)
            main.child_frames.clear()
            main.id = frame["id"]
        else:
            main = Frame(frame["id"])
        main._navigated(frame)
        self._main_frame = main.id
        self._frames[main.id] = main

    def on_frame_navigated_within_document(self, event: dict[str, Any]) -> None:
        frame = self._frames.get(event["frameId"])
        if frame is not None:
            frame.url = event["url"]
        if self._navigation is not None:
            self._navigation[0]._on_frame_navigated_within_document(event)

    def on_frame_stopped_loading(self, event: dict[str, Any]) -> None:
        frame = self._frames.get(event["frameId"])
        if frame is not None:
            frame._on_loading_stopped()

    def on_frame_started_loading(self, event: dict[str, Any]) -> None:
        frame = self._frames.get(event["frameId"])
        if frame is not None:
            frame._on_loading_started()

    def on_frame_execution_context_created(self, event: dict[str, Any]) -> None:
        context = event["context"]
        aux = context.get("auxData")
        aux = aux if isinstance(aux, dict) else None
        frame_id = aux.get("frameId") if aux is not None else None
        if isinstance(frame_id, str):
            frame = self._frames.get(frame_id)
            if frame is not None:
                if aux.get("isDefault") is True:
                    frame.main_world.set_context(context["id"])
                elif (
                    context.get("name") == UTILITY_WORLD_NAME
                    and frame.secondary_world.execution_context is None
                ):
                    frame.secondary_world.set_context(context["id"])
                self._context_ids[context["id"]] = frame.id
        if aux is not None and aux.get("type") == "isolated":
            self._isolated_worlds.add(context.get("name", ""))

    def on_frame_execution_context_destroyed(self, event: dict[str, Any]) -> None:
        ctx = event["executionContextId"]
        frame_id = self._context_ids.pop(ctx, None)
        if frame_id is not None:
            frame = self._frames.get(frame_id)
            if frame is not None:
                frame.destroy_context(ctx)

    def on_execution_contexts_cleared(self) -> None:
        for frame_id in self._context_ids.values():
            frame = self._frames.get(frame_id)
            if frame is not None:
                frame.clear_contexts()
        self._context_ids.clear()

    def on_page_lifecycle_event(self, event: dict[str, Any]) -> None:
        frame = self._frames.get(event["frameId"])
        if frame is None:
            return
        if event["name"] == "init":
            frame.loader_id = event["loaderId"]
            frame.lifecycle_events.clear()
        frame.lifecycle_events.add(event["name"])

    def _remove_frames_recursively(self, frame_id: str) -> Frame | None:
        frame = self._frames.pop(frame_id, None)
        if frame is None:
            return None
        for child in list(frame.child_frames):
            self._remove_frames_recursively(child)
        if frame.parent_frame is not None:
            parent = self._frames.get(frame.parent_frame)
            if parent is not None:
                parent.child_frames.discard(frame.id)
            frame.parent_frame = None
        return frame

    def ensure_isolated_world(self, world_name: str) -> list[tuple[str, dict[str, Any]]] | None:
        """Commands creating ``world_name`` in every frame, or None if it exists."""
        if world_name in self._isolated_worlds:
            return None
        self._isolated_worlds.add(world_name)
        commands: list[tuple[str, dict[str, Any]]] = [
            (
                "Page.addScriptToEvaluateOnNewDocument",
                {"source": f"//# sourceURL={EVALUATION_SCRIPT_URL}", "worldName": world_name},
            )
        ]
        commands.extend(
            (
                "Page.createIsolatedWorld",
                {"frameId": frame_id, "worldName": world_name, "grantUniveralAccess": True},
            )
            for frame_id in self._frames
        )
        return commands