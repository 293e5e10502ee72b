"""Overlay adapter contract."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Literal

if TYPE_CHECKING:
    from overlaysync.runtime.scope import ScopeHandle


def lower_event_name(callback_field: str) -> str:
    """``on_drag_start`` -> ``dragstart``."""
    return callback_field.removeprefix("on_").replace("_", "").lower()


def camel_event_name(callback_field: str) -> str:
    """``on_path_mouseover`` -> ``pathMouseover``."""
    head, *rest = callback_field.removeprefix("on_").split("_")
    return head.lower() + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class CallbackDeclaration:
    """Versioned list of the callback fields an overlay type accepts.

    ``fields`` are bound to engine events; ``lifecycle`` callbacks (such as
    ``on_complete``) are split out of the render options but fired by the
    runtime itself rather than by the engine.
    """

    version: int
    fields: tuple[str, ...]
    lifecycle: tuple[str, ...] = ("on_complete",)
    naming: Callable[[str], str] = lower_event_name

    @property
    def all_fields(self) -> frozenset[str]:
        return frozenset(self.fields) | frozenset(self.lifecycle)

    def event_names(self) -> dict[str, str]:
        return {name: self.naming(name) for name in self.fields}


@dataclass(frozen=True)
class OverlayConfig:
    render_options: Mapping[str, Any] = field(default_factory=dict)
    event_callbacks: Mapping[str, Callable[..., Any]] = field(default_factory=dict)


@dataclass(frozen=True)
class OptionsSnapshot:
    """Render options last applied to a host.

    ``raw`` keeps the caller's pre-coercion values and is what equality checks
    run against; ``coerced`` holds the engine values handed to the host.
    """

    raw: Mapping[str, Any] = field(default_factory=dict)
    coerced: Mapping[str, Any] = field(default_factory=dict)


class OverlayAdapter(ABC):
    """One overlay type: how to split, coerce, build, patch and destroy it."""

    name: ClassVar[str]
    callbacks: ClassVar[CallbackDeclaration]
    deep_copy_fields: ClassVar[frozenset[str]] = frozenset()
    defaults: ClassVar[Mapping[str, Any]] = {}
    event_style: ClassVar[Literal["bus", "emitter"]] = "bus"
    container_name: ClassVar[str | None] = None

    @abstractmethod
    def parse_config(self, config: Mapping[str, Any]) -> OverlayConfig: ...  # pragma: no cover

    @abstractmethod
    def coerce(self, engine: Any, options: Mapping[str, Any]) -> dict[str, Any]: ...  # pragma: no cover

    @abstractmethod
    def construct(
        self, scope: ScopeHandle, snapshot: OptionsSnapshot, *, container: Any = None
    ) -> Any: ...  # pragma: no cover

    @abstractmethod
    def update(
        self, host: Any, previous: OptionsSnapshot, current: OptionsSnapshot, *, scope: ScopeHandle
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    def teardown(self, host: Any, *, scope: ScopeHandle) -> None: ...  # pragma: no cover


class ModuleOverlayAdapter(OverlayAdapter):
    """Overlay whose host class comes from a UI module loaded at mount time.

    ``construct`` receives the loaded module as ``container``. A by-value
    change to any of ``rebuild_fields`` rebuilds the host instead of patching.
    """

    module_name: ClassVar[str]
    rebuild_fields: ClassVar[tuple[str, ...]] = ("data",)
