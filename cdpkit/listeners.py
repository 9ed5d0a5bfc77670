"""Event subscriptions: channels, listeners and typed event streams."""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


class ChannelClosed(Exception):
    """Raised when sending to or receiving from a closed channel."""


class EventChannel:
    """An unbounded channel of events, closable from either side."""

    def __init__(self) -> None:
        self._buffer: deque[Any] = deque()
        self._waiters: deque[asyncio.Future[None]] = deque()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        return len(self._buffer)

    def _wake_one(self) -> None:
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return

    def send(self, event: Any) -> None:
        """Queue an event for the receiver."""
        if self._closed:
            raise ChannelClosed("channel is closed")
        self._buffer.append(event)
        self._wake_one()

    def close(self) -> None:
        """Close the channel; buffered events can still be received."""
        self._closed = True
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)

    async def receive(self) -> Any:
        """Wait for the next event; raises ChannelClosed once closed and drained."""
        while not self._buffer:
            if self._closed:
                raise ChannelClosed("channel is closed")
            waiter = asyncio.get_running_loop().create_future()
            self._waiters.append(waiter)
            try:
                await waiter
            finally:
                try:
                    self._waiters.remove(waiter)
                except ValueError:
                    pass
        return self._buffer.popleft()


def _custom_converter(event_type: type) -> Callable[[Any], Any]:
    from_params = getattr(event_type, "from_params", None)
    if from_params is not None:
        return from_params
    return lambda value: event_type(**value)


@dataclass
class EventListenerRequest:
    """A request to subscribe ``listener`` to the events of ``method``.

    Custom subscriptions carry a converter that builds the event from JSON params.
    """

    listener: EventChannel
    method: str
    converter: Callable[[Any], Any] | None = None

    @property
    def is_custom(self) -> bool:
        return self.converter is not None


def listener_request(event_type: type, listener: EventChannel) -> EventListenerRequest:
    """Build a subscription request for ``event_type``.

    The type names its method in ``METHOD_ID``; a true ``CUSTOM`` attribute marks
    an event that is built from JSON params, via ``from_params`` if defined.
    """
    converter = _custom_converter(event_type) if getattr(event_type, "CUSTOM", False) else None
    return EventListenerRequest(listener, event_type.METHOD_ID, converter)


@dataclass
class EventListener:
    """A single subscription with its queue of events not yet delivered."""

    listener: EventChannel
    converter: Callable[[Any], Any] | None = None
    queued_events: deque[Any] = field(default_factory=deque)

    @property
    def is_custom(self) -> bool:
        return self.converter is not None

    def start_send(self, event: Any) -> None:
        """Queue an event for delivery."""
        self.queued_events.append(event)

    def poll(self) -> None:
        """Deliver all queued events; raises ChannelClosed if the receiver is gone."""
        while True:
            if self.listener.closed:
                raise ChannelClosed("listener disconnected")
            if not self.queued_events:
                return
            self.listener.send(self.queued_events.popleft())


class EventListeners:
    """All active listeners, keyed by event method."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[EventListener]] = {}

    def __len__(self) -> int:
        return sum(len(subs) for subs in self._listeners.values())

    def add_listener(self, request: EventListenerRequest) -> None:
        self._listeners.setdefault(request.method, []).append(
            EventListener(request.listener, request.converter)
        )

    def start_send(self, event: Any) -> None:
        """Queue an event for every listener of its method."""
        for sub in self._listeners.get(type(event).METHOD_ID, ()):
            sub.start_send(event)

    def try_send_custom(self, method: str, value: Any) -> None:
        """Convert ``value`` with the first custom listener's type and queue it
        for all custom listeners of ``method``.

        Raises ValueError if the conversion fails.
        """
        subs = self._listeners.get(method)
        if not subs:
            return
        converter = next((sub.converter for sub in subs if sub.converter is not None), None)
        if converter is None:
            return
        try:
            event = converter(value)
        except (TypeError, KeyError, ValueError) as exc:
            raise ValueError(f"cannot convert params of {method}: {exc}") from exc
        for sub in subs:
            if sub.is_custom:
                sub.start_send(event)

    def poll(self) -> None:
        """Deliver queued events and drop listeners whose receiver is gone."""
        for method in list(self._listeners):
            alive = []
            for sub in self._listeners[method]:
                try:
                    sub.poll()
                except ChannelClosed:
                    continue
                alive.append(sub)
            if alive:
                self._listeners[method] = alive
            else:
                del self._listeners[method]


class EventStream:
    """The receiving side of a subscription, yielding events of one type."""

    def __init__(self, event_type: type, events: EventChannel) -> None:
        self.event_type = event_type
        self._events = events

    async def next(self) -> Any:
        """The next event of this stream's type, or None once the channel is closed."""
        while True:
            try:
                event = await self._events.receive()
            except ChannelClosed:
                return None
            if isinstance(event, self.event_type):
                return event

    def close(self) -> None:
        """Unsubscribe: the sending side drops this listener on its next poll."""
        self._events.close()

    def __aiter__(self) -> EventStream:
        return self

    async def __anext__(self) -> Any:
        event = await self.next()
        if event is None:
            raise StopAsyncIteration
        return event