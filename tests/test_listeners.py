from dataclasses import dataclass

import pytest

from cdpkit.listeners import (
    ChannelClosed,
    EventChannel,
    EventListener,
    EventListenerRequest,
    EventListeners,
    EventStream,
    listener_request,
)


@dataclass
class AnimationCanceled:
    METHOD_ID = "Animation.animationCanceled"
    id: str


@dataclass
class MyCustomEvent:
    METHOD_ID = "Custom.Event"
    CUSTOM = True
    name: str


@pytest.mark.asyncio
async def test_event_stream():
    channel = EventChannel()
    stream = EventStream(AnimationCanceled, channel)
    event = AnimationCanceled(id="id")
    channel.send(event)
    assert await stream.next() == event


@pytest.mark.asyncio
async def test_custom_event_stream():
    channel = EventChannel()
    stream = EventStream(MyCustomEvent, channel)
    event = MyCustomEvent(name="my event")
    channel.send(event)
    assert await stream.next() == event


@pytest.mark.asyncio
async def test_event_listeners():
    channel = EventChannel()
    listeners = EventListeners()
    event = AnimationCanceled(id="id")
    listeners.add_listener(listener_request(AnimationCanceled, channel))
    listeners.start_send(event)
    stream = EventStream(AnimationCanceled, channel)
    listeners.poll()
    assert await stream.next() == event


@pytest.mark.asyncio
async def test_custom_event_via_json():
    channel = EventChannel()
    listeners = EventListeners()
    listeners.add_listener(listener_request(MyCustomEvent, channel))
    listeners.try_send_custom("Custom.Event", {"name": "my event"})
    listeners.poll()
    stream = EventStream(MyCustomEvent, channel)
    assert await stream.next() == MyCustomEvent(name="my event")


def test_custom_conversion_failure_raises():
    listeners = EventListeners()
    listeners.add_listener(listener_request(MyCustomEvent, EventChannel()))
    with pytest.raises(ValueError):
        listeners.try_send_custom("Custom.Event", {"unexpected": 1})


def test_custom_send_ignored_for_builtin_listener():
    channel = EventChannel()
    listeners = EventListeners()
    listeners.add_listener(listener_request(AnimationCanceled, channel))
    listeners.try_send_custom("Animation.animationCanceled", {"id": "x"})
    listeners.poll()
    assert len(channel) == 0


def test_listener_request_kind():
    request = listener_request(MyCustomEvent, EventChannel())
    assert request.method == "Custom.Event"
    assert request.is_custom
    assert not listener_request(AnimationCanceled, EventChannel()).is_custom


@pytest.mark.asyncio
async def test_stream_skips_other_types_and_ends_on_close():
    channel = EventChannel()
    stream = EventStream(AnimationCanceled, channel)
    channel.send(MyCustomEvent(name="other"))
    channel.send(AnimationCanceled(id="a"))
    channel.close()
    assert [event async for event in stream] == [AnimationCanceled(id="a")]


@pytest.mark.asyncio
async def test_receive_on_closed_empty_channel_raises():
    channel = EventChannel()
    channel.close()
    with pytest.raises(ChannelClosed):
        await channel.receive()


def test_send_on_closed_channel_raises():
    channel = EventChannel()
    channel.close()
    with pytest.raises(ChannelClosed):
        channel.send(AnimationCanceled(id="x"))


def test_event_listener_poll_disconnected():
    channel = EventChannel()
    listener = EventListener(channel)
    channel.close()
    with pytest.raises(ChannelClosed):
        listener.poll()


def test_poll_drops_closed_listeners():
    open_channel, closed_channel = EventChannel(), EventChannel()
    listeners = EventListeners()
    listeners.add_listener(EventListenerRequest(open_channel, AnimationCanceled.METHOD_ID))
    listeners.add_listener(EventListenerRequest(closed_channel, AnimationCanceled.METHOD_ID))
    assert len(listeners) == 2
    closed_channel.close()
    listeners.start_send(AnimationCanceled(id="x"))
    listeners.poll()
    assert len(listeners) == 1
    assert len(open_channel) == 1


def test_events_of_other_methods_not_delivered():
    channel = EventChannel()
    listeners = EventListeners()
    listeners.add_listener(listener_request(AnimationCanceled, channel))
    listeners.start_send(MyCustomEvent(name="n"))
    listeners.poll()
    assert len(channel) == 0