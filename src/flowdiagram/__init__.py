"""flowdiagram - Animated Sankey diagrams with keyed, incremental rendering."""

from flowdiagram.channel import DiagramChannel, run_channel
from flowdiagram.config import DiagramConfig, load_config
from flowdiagram.events import (
    ClearEvent,
    EventDispatcher,
    EventProcessor,
    FrameEndEvent,
    FrameStartEvent,
    InterruptEvent,
    RenderErrorEvent,
    TypedEventProcessor,
)
from flowdiagram.exceptions import ChannelError, DuplicateKeyError, InvalidGraphError, KeyStrategyError
from flowdiagram.graph import DiagramData, LinkSpec, NodeSpec, make_diagram, validate_diagram
from flowdiagram.layout import Layout, LayoutConfig, Link, Node, compute_layout
from flowdiagram.render import (
    Diff,
    DrawingSurface,
    FrameResult,
    KeyStrategy,
    SankeyRenderer,
    by_attribute,
    by_id,
    by_title,
    reconcile,
)

__all__ = [
    # Input
    "DiagramData",
    "NodeSpec",
    "LinkSpec",
    "make_diagram",
    "validate_diagram",
    # Layout
    "compute_layout",
    "Layout",
    "LayoutConfig",
    "Node",
    "Link",
    # Rendering
    "SankeyRenderer",
    "DrawingSurface",
    "FrameResult",
    "Diff",
    "reconcile",
    "KeyStrategy",
    "by_id",
    "by_title",
    "by_attribute",
    # Channel
    "DiagramChannel",
    "run_channel",
    # Config
    "DiagramConfig",
    "load_config",
    # Errors
    "InvalidGraphError",
    "DuplicateKeyError",
    "KeyStrategyError",
    "ChannelError",
    # Events
    "EventDispatcher",
    "EventProcessor",
    "TypedEventProcessor",
    "FrameStartEvent",
    "FrameEndEvent",
    "InterruptEvent",
    "ClearEvent",
    "RenderErrorEvent",
]
