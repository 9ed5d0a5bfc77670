import pytest

from cdpkit.frame import (
    EVALUATION_SCRIPT_URL,
    REQUEST_TIMEOUT,
    UTILITY_WORLD_NAME,
    CdpRequest,
    Frame,
    FrameManager,
    FrameNavigationRequest,
    FrameNotFound,
    LifecycleEvent,
    NavigationOk,
    NavigationRequest,
    NavigationResult,
    NavigationTimeout,
    NavigationWatcher,
)
from cdpkit.request import HttpRequest


def cdp_frame(frame_id, parent=None, loader="L1", url="http://a.test/", **extra):
    frame = {"id": frame_id, "loaderId": loader, "url": url, **extra}
    if parent is not None:
        frame["parentId"] = parent
    return frame


def build_tree():
    manager = FrameManager()
    manager.on_frame_tree(
        {
            "frame": cdp_frame("main"),
            "childFrames": [
                {
                    "frame": cdp_frame("child", parent="main"),
                    "childFrames": [{"frame": cdp_frame("grand", parent="child")}],
                }
            ],
        }
    )
    return manager


def nav_request(nav_id, timeout=REQUEST_TIMEOUT):
    return FrameNavigationRequest(
        nav_id, CdpRequest("Page.navigate", {"url": "http://b.test/"}), timeout
    )


def test_frame_tree_builds_hierarchy():
    manager = build_tree()
    assert manager.main_frame().id == "main"
    assert {f.id for f in manager.frames()} == {"main", "child", "grand"}
    assert manager.frame("child").parent_frame == "main"
    assert manager.main_frame().child_frames == {"child"}
    assert manager.frame("child").child_frames == {"grand"}


def test_navigated_url_appends_fragment():
    manager = FrameManager()
    manager.on_frame_navigated(cdp_frame("main", url="http://a.test/", urlFragment="#top"))
    assert manager.main_frame().url == "http://a.test/#top"


def test_detach_removes_frames_recursively():
    manager = build_tree()
    manager.on_frame_detached({"frameId": "child"})
    assert {f.id for f in manager.frames()} == {"main"}
    assert manager.main_frame().child_frames == set()


def test_main_frame_navigation_drops_children_and_renames():
    manager = build_tree()
    manager.on_frame_navigated(cdp_frame("main2", url="http://c.test/"))
    assert manager.main_frame().id == "main2"
    assert manager.main_frame().url == "http://c.test/"
    assert [f.id for f in manager.frames()] == ["main2"]


def test_attach_requires_known_parent():
    manager = build_tree()
    manager.on_frame_attached("orphan", "missing")
    manager.on_frame_attached("other", None)
    assert manager.frame("orphan") is None
    assert manager.frame("other") is None


def test_with_parent_registers_child():
    parent = Frame("p")
    child = Frame.with_parent("c", parent)
    assert parent.child_frames == {"c"}
    assert child.parent_frame == "p"


def test_from_cdp_copies_fields():
    frame = Frame.from_cdp(cdp_frame("f", parent="p", loader="L9", name="n"))
    assert (frame.id, frame.parent_frame, frame.loader_id, frame.name) == ("f", "p", "L9", "n")


def test_loading_lifecycle():
    manager = build_tree()
    manager.on_frame_stopped_loading({"frameId": "main"})
    main = manager.main_frame()
    assert main.is_loaded()
    assert main.lifecycle_events == {"load", "DOMContentLoaded"}
    main.set_request(HttpRequest("r1"))
    manager.on_frame_started_loading({"frameId": "main"})
    assert not main.is_loaded()
    assert main.http_request is None


def test_lifecycle_init_resets_events_and_loader():
    manager = build_tree()
    manager.on_frame_stopped_loading({"frameId": "main"})
    manager.on_page_lifecycle_event({"frameId": "main", "name": "init", "loaderId": "L2"})
    main = manager.main_frame()
    assert main.loader_id == "L2"
    assert main.lifecycle_events == {"init"}


def test_new_document_navigation_completes():
    manager = build_tree()
    manager.goto(nav_request(7))
    req = manager.poll(0.0)
    assert isinstance(req, NavigationRequest)
    assert req.navigation_id == 7
    assert req.request.params["frameId"] == "main"
    assert manager.poll(1.0) is None
    for frame_id in ("main", "child", "grand"):
        manager.on_page_lifecycle_event({"frameId": frame_id, "name": "init", "loaderId": "L2"})
        manager.on_page_lifecycle_event({"frameId": frame_id, "name": "load", "loaderId": "L2"})
    result = manager.poll(2.0)
    assert isinstance(result, NavigationResult)
    assert result.unwrap() == NavigationOk(7, same_document=False)
    assert manager.poll(3.0) is None


def test_navigation_waits_for_child_frames():
    manager = build_tree()
    manager.goto(nav_request(1))
    manager.poll(0.0)
    manager.on_page_lifecycle_event({"frameId": "main", "name": "init", "loaderId": "L2"})
    manager.on_page_lifecycle_event({"frameId": "main", "name": "load", "loaderId": "L2"})
    assert manager.poll(1.0) is None


def test_same_document_navigation():
    manager = FrameManager()
    manager.on_frame_navigated(cdp_frame("main"))
    manager.on_frame_stopped_loading({"frameId": "main"})
    manager.goto(nav_request(3))
    manager.poll(0.0)
    manager.on_frame_navigated_within_document({"frameId": "main", "url": "http://a.test/#x"})
    result = manager.poll(1.0)
    assert result.is_ok
    assert result.unwrap() == NavigationOk(3, same_document=True)
    assert manager.main_frame().url == "http://a.test/#x"


def test_navigation_timeout():
    manager = build_tree()
    manager.goto(nav_request(4, timeout=5.0))
    manager.poll(0.0)
    result = manager.poll(10.0)
    assert not result.is_ok
    assert result.navigation_id == 4
    with pytest.raises(NavigationTimeout) as info:
        result.unwrap()
    assert info.value.deadline == 5.0


def test_navigation_frame_not_found():
    manager = build_tree()
    manager.navigate_frame("child", nav_request(5))
    manager.poll(0.0)
    manager.on_frame_detached({"frameId": "child"})
    result = manager.poll(1.0)
    with pytest.raises(FrameNotFound) as info:
        result.unwrap()
    assert info.value.frame_id == "child"
    assert info.value.navigation_id == 5


def test_goto_without_main_frame_does_nothing():
    manager = FrameManager()
    manager.goto(nav_request(1))
    assert manager.poll(0.0) is None


def test_set_frame_id_keeps_existing_value():
    request = FrameNavigationRequest(1, CdpRequest("Page.navigate", {"frameId": "keep"}))
    request.set_frame_id("other")
    assert request.request.params["frameId"] == "keep"
    fresh = FrameNavigationRequest(2, CdpRequest("Page.navigate", {}))
    fresh.set_frame_id("other")
    assert fresh.request.params == {"frameId": "other"}


def test_watcher_expects_load():
    watcher = NavigationWatcher.until_page_load(1, "main", None)
    assert watcher.expected_lifecycle == {"load"}
    assert not watcher.is_lifecycle_complete()


def test_execution_contexts():
    manager = build_tree()
    manager.on_frame_execution_context_created(
        {"context": {"id": 1, "name": "", "auxData": {"frameId": "main", "isDefault": True}}}
    )
    manager.on_frame_execution_context_created(
        {
            "context": {
                "id": 2,
                "name": UTILITY_WORLD_NAME,
                "auxData": {"frameId": "main", "isDefault": False},
            }
        }
    )
    main = manager.main_frame()
    assert main.execution_context() == 1
    assert main.secondary_world.execution_context == 2
    manager.on_frame_execution_context_destroyed({"executionContextId": 1})
    assert main.execution_context() is None
    assert main.secondary_world.execution_context == 2
    manager.on_execution_contexts_cleared()
    assert main.secondary_world.execution_context is None


def test_ensure_isolated_world():
    manager = build_tree()
    commands = manager.ensure_isolated_world(UTILITY_WORLD_NAME)
    assert commands[0][0] == "Page.addScriptToEvaluateOnNewDocument"
    assert commands[0][1]["source"] == f"//# sourceURL={EVALUATION_SCRIPT_URL}"
    assert {params["frameId"] for _, params in commands[1:]} == {"main", "child", "grand"}
    assert all(params["worldName"] == UTILITY_WORLD_NAME for _, params in commands)
    assert manager.ensure_isolated_world(UTILITY_WORLD_NAME) is None


def test_isolated_context_registers_world():
    manager = build_tree()
    manager.on_frame_execution_context_created(
        {"context": {"id": 9, "name": "mine", "auxData": {"type": "isolated"}}}
    )
    assert manager.ensure_isolated_world("mine") is None


def test_http_request_finished_is_recorded():
    manager = build_tree()
    request = HttpRequest("r1", frame="child")
    manager.on_http_request_finished(request)
    assert manager.frame("child").http_request is request


def test_init_commands():
    methods = [method for method, _ in FrameManager.init_commands(REQUEST_TIMEOUT)]
    assert methods == [
        "Page.enable",
        "Page.getFrameTree",
        "Page.setLifecycleEventsEnabled",
        "Runtime.enable",
    ]


def test_lifecycle_event_names():
    assert LifecycleEvent.LOAD.value == "load"
    assert LifecycleEvent.DOM_CONTENT_LOADED.value == "DOMContentLoaded"
    assert LifecycleEvent("networkIdle") is LifecycleEvent.NETWORK_IDLE