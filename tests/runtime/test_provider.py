from __future__ import annotations

import asyncio
from typing import Any

import pytest

from overlaysync.contracts.exceptions import ConfigError, MissingScopeError, OverlaySyncError
from overlaysync.engines.recording import RecordingPathNavigator, RecordingPathSimplifier, RecordingSuite
from overlaysync.overlays.path_navigator import PathNavigatorAdapter
from overlaysync.overlays.path_simplifier import PathSimplifierAdapter
from overlaysync.runtime.provider import ProviderNode, ProviderState
from tests.fakes.scope import ready_scope


def dataset(*names: str) -> list[dict[str, Any]]:
    return [{"name": name, "path": [[116.0, 39.0], [117.0, 40.0]]} for name in names]


@pytest.mark.asyncio
async def test_mount_loads_the_module_then_builds_the_host() -> None:
    _, handle, engine = await ready_scope()
    completed: list[tuple[Any, Any]] = []
    provider = ProviderNode(
        PathSimplifierAdapter(),
        handle,
        {"data": dataset("a"), "z_index": 1, "on_complete": lambda map, host: completed.append((map, host))},
    )

    context = await provider.mount()

    assert context is not None
    assert provider.state is ProviderState.READY
    assert isinstance(context.host, RecordingPathSimplifier)
    assert context.host.options["map"] is handle.map
    assert context.host.data == dataset("a")
    assert context.module is handle.ui.modules["misc/PathSimplifier"]
    assert context.generation == 0
    assert completed == [(handle.map, context.host)]
    assert ("ui", "load_module") in [(call.target, call.name) for call in engine.log.calls]
    assert provider.listener_count == context.host.listener_count() == 6


@pytest.mark.asyncio
async def test_new_dataset_tears_down_before_rebuilding() -> None:
    _, handle, engine = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    states: list[ProviderState] = []
    provider.subscribe(states.append)
    await provider.mount()
    old_host = provider.host

    await provider.update({"data": dataset("a")})

    assert states == [ProviderState.READY, ProviderState.TEARING_DOWN, ProviderState.READY]
    assert provider.generation == 1
    assert provider.context is not None and provider.context.generation == 1
    assert provider.host is not old_host
    assert old_host.data is None
    assert old_host.listener_count() == 0
    assert engine.log.names(old_host.id)[-1] == "set_data"


@pytest.mark.asyncio
async def test_same_dataset_object_patches_in_place() -> None:
    _, handle, engine = await ready_scope()
    data = dataset("a", "b")
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": data, "z_index": 1})
    states: list[ProviderState] = []
    provider.subscribe(states.append)
    await provider.mount()
    host = provider.host
    mark = len(engine.log.calls)

    await provider.update({"data": data, "z_index": 2})

    assert states == [ProviderState.READY, ProviderState.READY]
    assert provider.generation == 0
    assert provider.host is host
    assert [(call.name, call.args) for call in engine.log.calls[mark:]] == [("set_z_index_of_path", (2,))]


@pytest.mark.asyncio
async def test_visibility_change_alone_patches_in_place() -> None:
    _, handle, engine = await ready_scope()
    data = dataset("a")
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": data})
    states: list[ProviderState] = []
    provider.subscribe(states.append)
    await provider.mount()
    host = provider.host
    mark = len(engine.log.calls)

    await provider.update({"data": data, "visible": False})

    assert states == [ProviderState.READY, ProviderState.READY]
    assert provider.host is host
    assert provider.generation == 0
    assert [call.name for call in engine.log.calls[mark:]] == ["hide"]


@pytest.mark.asyncio
async def test_provider_mounts_only_once() -> None:
    _, handle, engine = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    await provider.mount()
    host = provider.host

    with pytest.raises(OverlaySyncError, match="can only be mounted once"):
        await provider.mount()
    provider.unmount()

    assert host.listener_count() == 0
    names = engine.log.names()
    assert names.count("on") == names.count("off") == 6


@pytest.mark.asyncio
async def test_failed_rebuild_tears_down_and_the_next_update_rebuilds() -> None:
    _, handle, engine = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    slot = provider.add_child(PathNavigatorAdapter(), {"path_index": 0})
    await provider.mount()
    provider.update_child(slot, {"speed": 5})

    with pytest.raises(ConfigError, match="requires a path_index"):
        await provider.update({"data": dataset("b")})

    assert provider.state is ProviderState.TEARING_DOWN
    assert provider.host is None
    assert provider.children == ()
    assert provider.listener_count == 0
    names = engine.log.names()
    assert names.count("on") == names.count("off")

    provider.update_child(slot, {"path_index": 0, "speed": 5})
    await provider.update({"data": dataset("c"), "z_index": 3})

    assert provider.state is ProviderState.READY
    assert provider.host.data == dataset("c")
    assert provider.host.options["z_index"] == 3
    (child,) = provider.children
    assert child.host.options["speed"] == 5


@pytest.mark.asyncio
async def test_failed_mount_is_retried_by_the_next_update() -> None:
    _, handle, _ = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    slot = provider.add_child(PathNavigatorAdapter(), {})

    with pytest.raises(ConfigError):
        await provider.mount()

    assert provider.state is ProviderState.LOADING
    assert provider.host is None
    assert provider.listener_count == 0

    provider.update_child(slot, {"path_index": 0})
    await provider.update({"data": dataset("a")})

    assert provider.state is ProviderState.READY
    assert len(provider.children) == 1


@pytest.mark.asyncio
async def test_unsubscribe_stops_state_notifications() -> None:
    _, handle, _ = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    states: list[ProviderState] = []
    unsubscribe = provider.subscribe(states.append)

    await provider.mount()
    unsubscribe()
    unsubscribe()
    await provider.update({"data": dataset("b")})

    assert states == [ProviderState.READY]


@pytest.mark.asyncio
async def test_unmount_while_loading_never_builds_the_host() -> None:
    suite = RecordingSuite(ui_gate=asyncio.Event())
    _, handle, _ = await ready_scope(suite=suite)
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    provider.add_child(PathNavigatorAdapter(), {"path_index": 0})

    task = asyncio.ensure_future(provider.mount())
    await asyncio.sleep(0)
    assert provider.state is ProviderState.LOADING
    provider.unmount()
    suite.ui_gate.set()

    assert await task is None
    assert provider.state is ProviderState.UNMOUNTED
    assert provider.host is None
    assert not any(call.target.startswith("path_") for call in suite.log.calls)
    assert provider not in handle.nodes


@pytest.mark.asyncio
async def test_update_while_loading_is_built_from_the_newest_config() -> None:
    suite = RecordingSuite(ui_gate=asyncio.Event())
    _, handle, _ = await ready_scope(suite=suite)
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})

    task = asyncio.ensure_future(provider.mount())
    await asyncio.sleep(0)
    await provider.update({"data": dataset("b"), "z_index": 5})
    suite.ui_gate.set()
    context = await task

    assert context is not None
    assert context.host.data == dataset("b")
    assert context.host.options["z_index"] == 5
    assert provider.generation == 0


@pytest.mark.asyncio
async def test_children_are_rebuilt_against_the_new_host() -> None:
    _, handle, engine = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    provider.add_child(PathNavigatorAdapter(), {"path_index": 0, "speed": 100})
    await provider.mount()
    old_host = provider.host
    (old_child,) = provider.children
    old_navigator = old_child.host

    await provider.update({"data": dataset("a", "b")})

    (new_child,) = provider.children
    assert new_child is not old_child
    assert not old_child.mounted
    assert old_navigator.destroyed
    assert isinstance(new_child.host, RecordingPathNavigator)
    assert ("create_path_navigator", (0,)) in [
        (call.name, call.args) for call in engine.log.for_target(provider.host.id)
    ]
    assert "create_path_navigator" in engine.log.names(old_host.id)
    destroyed_at = next(c.sequence for c in engine.log.calls if c.target == old_navigator.id and c.name == "destroy")
    cleared_at = next(c.sequence for c in engine.log.calls if c.target == old_host.id and c.args == (None,))
    assert destroyed_at < cleared_at


@pytest.mark.asyncio
async def test_listener_registrations_balance_across_rebuild_and_unmount() -> None:
    scope, handle, engine = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    provider.add_child(PathNavigatorAdapter(), {"path_index": 0})
    await provider.mount()

    await provider.update({"data": dataset("b")})
    await provider.update({"data": dataset("c")})
    scope.unmount()

    names = engine.log.names()
    assert names.count("on") == names.count("off") > 0
    assert names.count("add_listener") == names.count("remove_listener")
    assert provider.state is ProviderState.UNMOUNTED
    assert provider.children == ()


@pytest.mark.asyncio
async def test_navigator_speed_and_range_patch_in_place() -> None:
    _, handle, engine = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    slot = provider.add_child(PathNavigatorAdapter(), {"path_index": 0, "speed": 100})
    await provider.mount()
    navigator = provider.children[0].host
    mark = len(engine.log.calls)

    provider.update_child(slot, {"path_index": 0, "speed": 200, "range": (0, 5)})
    provider.update_child(slot, {"path_index": 0, "speed": 200, "range": (0, 5)})

    assert [(c.name, c.args) for c in engine.log.calls[mark:] if c.target == navigator.id] == [
        ("set_speed", (200,)),
        ("set_range", (0, 5)),
    ]


@pytest.mark.asyncio
async def test_child_added_after_ready_is_built_immediately() -> None:
    _, handle, _ = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    context = await provider.mount()
    completed: list[tuple[Any, ...]] = []

    provider.add_child(PathNavigatorAdapter(), {"path_index": 0, "on_complete": lambda *args: completed.append(args)})

    (child,) = provider.children
    assert completed == [(handle.map, child.host, context.host)]
    assert child.host.options["path_navigator_style"] == {"content": "defaultPathNavigator"}


@pytest.mark.asyncio
async def test_navigator_image_content_is_resolved_through_the_module() -> None:
    _, handle, engine = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    provider.add_child(
        PathNavigatorAdapter(),
        {"path_index": 0, "path_navigator_style": {"content": "https://img.example/car.png", "width": 16}},
    )
    await provider.mount()

    (child,) = provider.children

    assert child.host.options["path_navigator_style"] == {
        "content": {"image": "https://img.example/car.png"},
        "width": 16,
    }
    assert "render_later" in engine.log.names(provider.host.id)


@pytest.mark.asyncio
async def test_unmount_during_rebuild_stops_before_rebuilding() -> None:
    _, handle, _ = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    await provider.mount()

    task = asyncio.ensure_future(provider.update({"data": dataset("b")}))
    await asyncio.sleep(0)
    assert provider.state is ProviderState.TEARING_DOWN
    provider.unmount()
    await task

    assert provider.state is ProviderState.UNMOUNTED
    assert provider.host is None
    assert provider.generation == 0


@pytest.mark.asyncio
async def test_provider_update_after_unmount_raises() -> None:
    _, handle, _ = await ready_scope()
    provider = ProviderNode(PathSimplifierAdapter(), handle, {"data": dataset("a")})
    await provider.mount()
    provider.unmount()
    provider.unmount()

    with pytest.raises(OverlaySyncError, match="has been unmounted"):
        await provider.update({"data": dataset("b")})


def test_provider_without_scope_raises() -> None:
    with pytest.raises(MissingScopeError, match="PathSimplifier cannot be used as a standalone"):
        ProviderNode(PathSimplifierAdapter(), None, {"data": []})
