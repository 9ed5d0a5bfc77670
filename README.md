# cdpkit

Building blocks for a Chrome DevTools Protocol client. The package holds the
client-side state of a browser session: the frame tree and the navigations
in progress, the network requests of a page, the types and start-up commands
of targets, and event subscriptions. It also has helpers for JavaScript
evaluation and for element geometry.

Every object here works on plain data. Protocol events go in as
dictionaries. Commands come out as `(method, params)` pairs or as queued
events, and your own code sends them to the browser.

## Installation

```
pip install cdpkit
```

The package depends only on the standard library.

## Modules

- `cdpkit.utils`
  - `is_likely_js_function(text)` guesses whether a string is function source. It recognises `function …`, `async function …` and arrow functions.
  - `evaluation_string(function, params)` builds a call such as `(fn)("a","b")`.
- `cdpkit.js`
  - `to_evaluation(text)` returns an `Evaluation` of kind `EvaluationKind.EXPRESSION` or `EvaluationKind.FUNCTION`, with the matching protocol params.
  - `EvaluationResult` wraps a remote object. `into_value()` returns its value and raises `ValueError` if there is none.
- `cdpkit.layout`
  - `Point` supports `+`, `-` and `/`. `to_mouse_event()` gives the params of a left single-click press.
  - `ElementQuad.from_quad(coords)` takes the 8 coordinates of a protocol quad. The result gives the center, area, width, height and extreme coordinates, and tells where one quad lies relative to another: `above`, `strictly_left_of`, `within_bounds_of`, and so on.
  - `BoxModel` gives `PageViewport` clips for its content, padding, border and margin boxes.
  - `BoundingBox` holds a position and a size.
- `cdpkit.session`
  - `BrowserContext` is the default context when it has no id, and incognito when it has one.
  - `Session` pairs a session id with a target id.
- `cdpkit.world`
  - `DOMWorld` holds the execution context of one world of a frame.
  - `DOMWorldKind` is `MAIN` or `SECONDARY`.
- `cdpkit.viewport`
  - `Viewport` holds window and device settings; the default size is 800×600.
- `cdpkit.request`
  - `HttpRequest` holds the state of a request: its response, failure text, redirect chain and so on.
- `cdpkit.listeners`
  - `EventChannel` is an unbounded asyncio channel.
  - `EventListeners` routes events to subscribers by the type's `METHOD_ID`. Custom event types, marked by `CUSTOM = True`, are built from JSON params.
  - `EventStream` yields the events of one type and can be used with `async for`.
  - Listeners whose channel is closed are dropped on the next `poll()`.
- `cdpkit.network`
  - `NetworkManager` follows requests, redirects, request interception, authentication challenges, the cache setting and offline mode.
  - `poll()` returns the queued `NetworkEvent`s one at a time.
- `cdpkit.frame`
  - `FrameManager` follows the frame tree, lifecycle events and execution contexts.
  - It watches queued navigations until they load or reach their deadline.
  - `poll(now)` returns a `NavigationRequest` to submit or a `NavigationResult`. A failed result carries a `NavigationTimeout` or `FrameNotFound` error.
- `cdpkit.target`
  - `TargetType.parse(name)` reads a target type.
  - `TargetConfig` holds the settings of a target.
  - `page_init_commands()` returns the page start-up commands.
- `cdpkit.target_init`
  - `TargetInitStage` lists the initialisation stages and `next_stage()` gives the one that follows.
  - `execution_context_for()` looks up the execution context of a world of a frame.
- `cdpkit.emulation`
  - `EmulationManager.init_commands(viewport)` returns the device-metrics and touch commands.
  - It also records whether the page needs a reload.
- `cdpkit.job`
  - `PeriodicJob.poll_ready(now)` returns `True` once per interval of monotonic time.

## Example

```python
from cdpkit.frame import FrameManager
from cdpkit.layout import ElementQuad
from cdpkit.network import NetworkManager
from cdpkit.utils import is_likely_js_function

assert is_likely_js_function("() => 42")
assert not is_likely_js_function("document.title")

quad = ElementQuad.from_quad([0, 0, 10, 0, 10, 5, 0, 5])
print(quad.quad_center(), quad.quad_area())  # Point(x=5.0, y=2.5) 50.0

frames = FrameManager()
frames.on_frame_navigated({"id": "main", "url": "https://example.com/"})
frames.on_page_lifecycle_event({"frameId": "main", "name": "load", "loaderId": "l1"})
assert frames.main_frame().is_loaded()

network = NetworkManager()
network.set_offline_mode(True)
event = network.poll()
print(event.method, event.params)  # Network.emulateNetworkConditions {...}
```

## What it does not do

The package has no transport and no browser handling:

- It does not open a WebSocket connection.
- It does not launch or find a browser executable.
- It does not send commands or match responses to requests.
- It has no high-level page or element API such as `goto`, `click`, screenshots or PDF export.

Connecting these objects to a live browser is left to the code that uses them.

## Running the tests

```
pip install -e ".[test]"
pytest
```