"""Geometry produced by the layout engine.

These dataclasses are the hand-off between the layout engine and the
renderer. Nodes and links refer to each other by id and link index so the
whole ``Layout`` stays immutable and comparable by value.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any


@dataclass(frozen=True)
class Node:
    """Laid-out node rectangle."""

    id: str
    title: str
    value: float
    color: str
    x0: float  # Left edge
    y0: float  # Top edge
    x1: float  # Right edge
    y1: float  # Bottom edge
    depth: int = 0
    height: int = 0
    layer: int = 0
    incoming: tuple[int, ...] = ()  # Link indices, top to bottom
    outgoing: tuple[int, ...] = ()  # Link indices, top to bottom
    extra: str | None = None
    data: Mapping[str, Any] = field(default_factory=dict)

    @property
    def width(self) -> float:
        return self.x1 - self.x0

    @property
    def center_x(self) -> float:
        """Horizontal center of the node."""
        return (self.x0 + self.x1) / 2

    @property
    def center_y(self) -> float:
        """Vertical center of the node."""
        return (self.y0 + self.y1) / 2


@dataclass(frozen=True)
class Link:
    """Laid-out flow between two nodes.

    ``y0`` and ``y1`` are the vertical centers of the link band where it
    leaves the source and enters the target.
    """

    index: int
    source: str
    target: str
    value: float
    ordinal: int  # Position among the source's outgoing links, input order
    width: float
    y0: float
    y1: float
    title: str | None = None

    @property
    def stroke_width(self) -> float:
        return max(1.0, self.width)


@dataclass(frozen=True)
class Layout:
    """Complete geometry for one snapshot."""

    nodes: tuple[Node, ...] = ()
    links: tuple[Link, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.nodes or not self.links

    @cached_property
    def _by_id(self) -> dict[str, Node]:
        return {n.id: n for n in self.nodes}

    def node(self, node_id: str) -> Node:
        return self._by_id[node_id]

    def node_map(self) -> dict[str, Node]:
        return dict(self._by_id)

    def incoming(self, node_id: str) -> list[Link]:
        """Links entering a node, in slot order."""
        return [self.links[i] for i in self.node(node_id).incoming]

    def outgoing(self, node_id: str) -> list[Link]:
        """Links leaving a node, in slot order."""
        return [self.links[i] for i in self.node(node_id).outgoing]

    def columns(self) -> list[list[Node]]:
        """Nodes grouped by layer, each column sorted top to bottom."""
        if not self.nodes:
            return []
        count = max(n.layer for n in self.nodes) + 1
        grouped: list[list[Node]] = [[] for _ in range(count)]
        for n in self.nodes:
            grouped[n.layer].append(n)
        return [sorted(col, key=lambda n: n.y0) for col in grouped if col]
