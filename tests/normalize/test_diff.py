from __future__ import annotations

from typing import Any

from overlaysync.contracts.overlay import OptionsSnapshot
from overlaysync.normalize.diff import apply_master_setter, apply_setters, field_changed, visibility_transition


class SpyHost:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def __getattr__(self, name: str) -> Any:
        def record(value: Any) -> None:
            self.calls.append((name, value))

        return record


def snap(**raw: Any) -> OptionsSnapshot:
    return OptionsSnapshot(raw=raw, coerced={name: ("coerced", value) for name, value in raw.items()})


def test_field_changed_by_value_not_reference() -> None:
    assert not field_changed(snap(position=[1, 2]), snap(position=[1, 2]), "position")
    assert field_changed(snap(position=[1, 2]), snap(position=[3, 4]), "position")


def test_omitted_field_is_never_a_change() -> None:
    assert not field_changed(snap(title="a"), snap(), "title")
    assert field_changed(snap(), snap(title="a"), "title")


def test_explicit_none_is_a_change() -> None:
    assert field_changed(snap(icon="a.png"), snap(icon=None), "icon")


def test_visibility_only_flips_on_true_false_transitions() -> None:
    assert visibility_transition(snap(visible=True), snap(visible=True)) is None
    assert visibility_transition(snap(visible=True), snap(visible=False)) is False
    assert visibility_transition(snap(visible=False), snap(visible=True)) is True
    assert visibility_transition(snap(visible=None), snap(visible=True)) is None
    assert visibility_transition(snap(visible=True), snap()) is None


def test_apply_setters_calls_only_changed_fields_with_coerced_values() -> None:
    host = SpyHost()

    touched = apply_setters(
        host,
        snap(position=[1, 2], title="a"),
        snap(position=[3, 4], title="a"),
        {"position": "set_position", "title": "set_title"},
    )

    assert touched == ["position"]
    assert host.calls == [("set_position", ("coerced", [3, 4]))]


def test_master_setter_sends_everything_but_visibility_once() -> None:
    host = SpyHost()

    sent = apply_master_setter(
        host,
        snap(visible=True, stroke_color="#f00", path=[1]),
        snap(visible=False, stroke_color="#0f0", path=[1]),
        "set_options",
    )

    assert sent is True
    assert host.calls == [("set_options", {"stroke_color": ("coerced", "#0f0"), "path": ("coerced", [1])})]


def test_master_setter_skips_when_only_visibility_changed() -> None:
    host = SpyHost()

    sent = apply_master_setter(host, snap(visible=True, radius=3), snap(visible=False, radius=3), "set_options")

    assert sent is False
    assert host.calls == []
