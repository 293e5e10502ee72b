from __future__ import annotations

import asyncio

import pytest

from overlaysync.contracts.exceptions import UnsupportedFieldError
from overlaysync.engines.recording import (
    CallLog,
    RecordingEngine,
    RecordingSuite,
    RecordingUiExtension,
    setter_names,
)


def test_calls_are_logged_in_order_with_stable_ids() -> None:
    engine = RecordingEngine()

    first = engine.Marker({"title": "a"})
    second = engine.Marker({"title": "b"})
    first.set_title("c")

    assert (first.id, second.id) == ("marker-1", "marker-2")
    assert [(call.sequence, call.target, call.name) for call in engine.log.calls] == [
        (1, "marker-1", "create"),
        (2, "marker-2", "create"),
        (3, "marker-1", "set_title"),
    ]
    assert first.options["title"] == "c"


def test_unknown_setter_raises_only_when_called() -> None:
    marker = RecordingEngine().Marker({})

    setter = marker.set_tag

    with pytest.raises(UnsupportedFieldError) as excinfo:
        setter("x")
    assert excinfo.value.field == "tag"
    with pytest.raises(AttributeError):
        marker.open_popup  # noqa: B018


def test_event_bus_tracks_listeners_per_target() -> None:
    engine = RecordingEngine()
    marker = engine.Marker({})
    fired: list[str] = []

    handle = engine.event.add_listener(marker, "click", lambda event: fired.append(event))
    engine.event.trigger(marker, "click", "e1")
    engine.event.trigger(marker, "dblclick", "e2")
    engine.event.remove_listener(handle)
    engine.event.trigger(marker, "click", "e3")

    assert fired == ["e1"]
    assert engine.event.listener_count(marker) == 0
    assert engine.log.names(marker.id)[-2:] == ["add_listener", "remove_listener"]


def test_info_window_opens_and_closes_on_a_map() -> None:
    engine = RecordingEngine()
    map_object = engine.Map("target", {})
    window = engine.InfoWindow({})

    assert not window.visible
    window.open(map_object, (1, 2))
    assert window.visible
    window.close()

    assert [(call.name, call.args) for call in engine.log.for_target(window.id)][1:] == [
        ("open", ("map-1", (1, 2))),
        ("close", ()),
    ]


def test_setter_names_filters_lifecycle_calls() -> None:
    engine = RecordingEngine()
    marker = engine.Marker({})
    marker.set_map(None)
    marker.set_position((1, 2))
    marker.hide()

    assert setter_names(engine.log.calls) == ["set_map", "set_position"]


def test_call_log_clear_keeps_sequence_monotonic() -> None:
    log = CallLog()
    log.record("a", "x")
    log.clear()
    log.record("a", "y")

    assert [(call.sequence, call.name) for call in log.calls] == [(2, "y")]


@pytest.mark.asyncio
async def test_ui_extension_loads_known_modules_only() -> None:
    ui = RecordingUiExtension(CallLog())

    module = await ui.load_module("misc/PathSimplifier")

    assert module is ui.modules["misc/PathSimplifier"]
    with pytest.raises(LookupError, match="Unknown UI module"):
        await ui.load_module("misc/Nope")


@pytest.mark.asyncio
async def test_gated_ui_extension_waits_for_the_gate() -> None:
    suite = RecordingSuite(ui_gate=asyncio.Event())
    ui = suite.ui()

    task = asyncio.ensure_future(ui.load_module("misc/PathSimplifier"))
    await asyncio.sleep(0)
    assert not task.done()

    suite.ui_gate.set()
    assert await task is ui.modules["misc/PathSimplifier"]


def test_suite_namespaces_share_one_log() -> None:
    suite = RecordingSuite()
    engine = suite.engine()
    visual = suite.visual()

    map_object = engine.Map("target", {})
    container = visual.Container(map_object)
    layer = visual.VisualLayer({"container": container})
    layer.render()

    assert [call.target for call in suite.log.calls] == [
        "map-1",
        "visual_container-1",
        "visual_layer-1",
        "visual_layer-1",
    ]
