"""Event processor base classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from flowdiagram.events.types import (
        ClearEvent,
        Event,
        FrameEndEvent,
        FrameStartEvent,
        InterruptEvent,
        RenderErrorEvent,
    )


# Mapping from event class name to handler method name.
_EVENT_METHOD_MAP: dict[str, str] = {
    "FrameStartEvent": "on_frame_start",
    "FrameEndEvent": "on_frame_end",
    "InterruptEvent": "on_interrupt",
    "ClearEvent": "on_clear",
    "RenderErrorEvent": "on_render_error",
}


class EventProcessor:
    """Base class for event consumers.

    Subclass and override ``on_event`` to receive all events,
    or use ``TypedEventProcessor`` for per-type dispatch.
    """

    def on_event(self, event: Event) -> None:
        """Called for every event. Override in subclasses."""

    def shutdown(self) -> None:
        """Called once when the renderer is closed. Override to flush buffers."""


class TypedEventProcessor(EventProcessor):
    """Dispatches ``on_event`` to typed handler methods automatically.

    Override any of the ``on_*`` methods below to handle specific event types.
    Unhandled event types are silently ignored.
    """

    def on_event(self, event: Event) -> None:
        method_name = _EVENT_METHOD_MAP.get(type(event).__name__)
        if method_name is not None:
            method = getattr(self, method_name, None)
            if method is not None:
                method(event)

    def on_frame_start(self, event: FrameStartEvent) -> None: ...
    def on_frame_end(self, event: FrameEndEvent) -> None: ...
    def on_interrupt(self, event: InterruptEvent) -> None: ...
    def on_clear(self, event: ClearEvent) -> None: ...
    def on_render_error(self, event: RenderErrorEvent) -> None: ...
