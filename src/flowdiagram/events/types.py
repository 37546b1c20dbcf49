"""Event types emitted while rendering."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Union


def _now() -> float:
    """Current timestamp."""
    return time.time()


@dataclass(frozen=True)
class BaseEvent:
    """Base class for all render events.

    Attributes:
        frame_id: Sequence number of the render that produced this event.
        timestamp: Unix timestamp when the event was created.
    """

    frame_id: int
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class FrameStartEvent(BaseEvent):
    """Emitted after a snapshot has been laid out, before the surface changes.

    Attributes:
        node_count: Nodes in the laid-out snapshot.
        link_count: Links in the laid-out snapshot.
    """

    node_count: int = 0
    link_count: int = 0


@dataclass(frozen=True)
class FrameEndEvent(BaseEvent):
    """Emitted once all enter/update/exit operations of a frame are issued.

    Attributes:
        counts: Per collection, the number of entered/updated/exited elements.
        cleared: True when the frame cleared the surface (empty snapshot).
        duration_ms: Wall-clock time spent in layout and reconciliation.
    """

    counts: dict[str, dict[str, int]] = field(default_factory=dict)
    cleared: bool = False
    duration_ms: float = 0.0

    def total(self, operation: str) -> int:
        """Sum of one operation ("entered", "updated", "exited") over all collections."""
        return sum(c.get(operation, 0) for c in self.counts.values())


@dataclass(frozen=True)
class InterruptEvent(BaseEvent):
    """Emitted when a new frame cancels tweens still in flight.

    Attributes:
        cancelled: Number of tweens cancelled.
    """

    cancelled: int = 0


@dataclass(frozen=True)
class ClearEvent(BaseEvent):
    """Emitted when an empty snapshot clears the surface.

    Attributes:
        removed: Number of elements removed.
    """

    removed: int = 0


@dataclass(frozen=True)
class RenderErrorEvent(BaseEvent):
    """Emitted when a snapshot cannot be rendered. The surface is untouched.

    Attributes:
        error: Error message.
        error_type: Fully qualified exception type name.
    """

    error: str = ""
    error_type: str = ""


Event = Union[
    FrameStartEvent,
    FrameEndEvent,
    InterruptEvent,
    ClearEvent,
    RenderErrorEvent,
]
