"""Event system for observing rendering."""

from flowdiagram.events.dispatcher import EventDispatcher
from flowdiagram.events.processor import EventProcessor, TypedEventProcessor
from flowdiagram.events.types import (
    BaseEvent,
    ClearEvent,
    Event,
    FrameEndEvent,
    FrameStartEvent,
    InterruptEvent,
    RenderErrorEvent,
)

__all__ = [
    # Event types
    "BaseEvent",
    "ClearEvent",
    "Event",
    "FrameEndEvent",
    "FrameStartEvent",
    "InterruptEvent",
    "RenderErrorEvent",
    # Processor interfaces
    "EventProcessor",
    "TypedEventProcessor",
    # Dispatcher
    "EventDispatcher",
]
