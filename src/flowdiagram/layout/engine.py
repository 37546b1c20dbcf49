"""Sankey layout engine.

Computes node rectangles and link bands for a ``DiagramData`` snapshot.
Nodes are assigned to columns by topological depth, stacked with heights
proportional to their value, then iteratively relaxed toward the positions
implied by their links.

Every relaxation pass is a pure function from one position mapping
(node id -> top edge) to a new one; heights are fixed once the vertical
scale is known, so the top edge is the only moving quantity.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import NamedTuple

import networkx as nx

from flowdiagram.graph.core import DiagramData
from flowdiagram.graph.validation import validate_diagram
from flowdiagram.layout.align import NodeRank, resolve_alignment
from flowdiagram.layout.config import LayoutConfig
from flowdiagram.layout.geometry import Layout, Link, Node
from flowdiagram.styles.palette import color_for

logger = logging.getLogger(__name__)

Positions = Mapping[str, float]

# Moves smaller than this are ignored when resolving collisions
_EPSILON = 1e-6


@dataclass(frozen=True)
class _Frame:
    """Everything about a snapshot that stays fixed during relaxation."""

    sources: tuple[str, ...]  # Link index -> source id
    targets: tuple[str, ...]  # Link index -> target id
    values: tuple[float, ...]  # Link index -> value
    widths: tuple[float, ...]  # Link index -> band width
    out_links: Mapping[str, tuple[int, ...]]
    in_links: Mapping[str, tuple[int, ...]]
    heights: Mapping[str, float]
    layers: Mapping[str, int]
    order: Mapping[str, int]  # Input position, breaks ties
    columns: tuple[tuple[str, ...], ...]
    padding: float
    top: float
    bottom: float


def compute_layout(data: DiagramData, config: LayoutConfig | None = None) -> Layout:
    """Lay out a snapshot.

    Args:
        data: Snapshot to lay out
        config: Layout parameters (defaults to ``LayoutConfig()``)

    Returns:
        Geometry for every node and link. An empty ``Layout`` when the
        snapshot has no nodes or no links.

    Raises:
        InvalidGraphError: If the snapshot is structurally invalid
    """
    config = config or LayoutConfig()
    if data.is_empty:
        return Layout()

    validate_diagram(data)

    ids, node_values = _node_values(data)
    ranks = _node_ranks(data)
    layers, n_layers = _assign_layers(ids, ranks, config)
    columns = _columns(ids, layers, n_layers)

    (x0, y0), (x1, y1) = config.extent
    padding = _effective_padding(columns, config.node_padding, y1 - y0)
    ky = _vertical_scale(columns, node_values, padding, y1 - y0)
    if ky <= 0:
        padding = (y1 - y0) / (2 * (max(len(c) for c in columns) - 1))
        logger.warning(
            "Node padding %.1f leaves no room for nodes; using %.1f",
            config.node_padding,
            padding,
        )
        ky = _vertical_scale(columns, node_values, padding, y1 - y0)

    frame = _build_frame(data, ids, node_values, layers, columns, ky, padding, y0, y1)

    positions = _initial_positions(frame)
    for i in range(config.iterations):
        alpha = 0.99**i
        beta = max(1 - alpha, (i + 1) / config.iterations)
        positions = _relax_right_to_left(frame, positions, alpha, beta)
        positions = _relax_left_to_right(frame, positions, alpha, beta)

    kx = (x1 - x0 - config.node_width) / (n_layers - 1) if n_layers > 1 else 0.0
    layout = _assemble(data, frame, positions, node_values, ranks, x0, kx, config.node_width)
    logger.debug(
        "Laid out %d nodes and %d links in %d columns (ky=%.4f, padding=%.1f)",
        len(layout.nodes),
        len(layout.links),
        len(columns),
        ky,
        padding,
    )
    return layout


# =============================================================================
# Topology
# =============================================================================


def _node_values(data: DiagramData) -> tuple[list[str], dict[str, float]]:
    """Node value is the larger of in/out flow, unless fixed.

    Nodes that end up with no value carry no flow and are left out.
    """
    incoming: dict[str, float] = {n.id: 0.0 for n in data.nodes}
    outgoing: dict[str, float] = {n.id: 0.0 for n in data.nodes}
    for link in data.links:
        outgoing[link.source] += link.value
        incoming[link.target] += link.value

    values: dict[str, float] = {}
    ids: list[str] = []
    for n in data.nodes:
        value = n.fixed_value if n.fixed_value is not None else max(incoming[n.id], outgoing[n.id])
        if value <= 0:
            logger.debug("Skipping node '%s': it carries no flow", n.id)
            continue
        values[n.id] = value
        ids.append(n.id)
    return ids, values


def _node_ranks(data: DiagramData) -> dict[str, NodeRank]:
    G = data.to_nx()
    order = list(nx.topological_sort(G))

    depth: dict[str, int] = {}
    for node_id in order:
        depth[node_id] = max((depth[p] + 1 for p in G.predecessors(node_id)), default=0)

    height: dict[str, int] = {}
    for node_id in reversed(order):
        height[node_id] = max((height[s] + 1 for s in G.successors(node_id)), default=0)

    ranks = {}
    for node_id in G.nodes:
        targets = [depth[s] for s in G.successors(node_id)]
        ranks[node_id] = NodeRank(
            depth=depth[node_id],
            height=height[node_id],
            has_incoming=G.in_degree(node_id) > 0,
            has_outgoing=bool(targets),
            min_target_depth=min(targets) if targets else None,
        )
    return ranks


def _assign_layers(
    ids: list[str],
    ranks: Mapping[str, NodeRank],
    config: LayoutConfig,
) -> tuple[dict[str, int], int]:
    align = resolve_alignment(config.align)
    n = max(ranks[i].depth for i in ids) + 1
    layers = {i: max(0, min(n - 1, math.floor(align(ranks[i], n)))) for i in ids}
    return layers, n


def _columns(ids: list[str], layers: Mapping[str, int], n: int) -> tuple[tuple[str, ...], ...]:
    grouped: list[list[str]] = [[] for _ in range(n)]
    for node_id in ids:
        grouped[layers[node_id]].append(node_id)
    return tuple(tuple(col) for col in grouped if col)


def _effective_padding(columns: tuple[tuple[str, ...], ...], padding: float, extent_height: float) -> float:
    densest = max(len(c) for c in columns)
    if densest <= 1:
        return padding
    return min(padding, extent_height / (densest - 1))


def _vertical_scale(
    columns: tuple[tuple[str, ...], ...],
    values: Mapping[str, float],
    padding: float,
    extent_height: float,
) -> float:
    return min(
        (extent_height - (len(col) - 1) * padding) / sum(values[i] for i in col)
        for col in columns
    )


def _build_frame(
    data: DiagramData,
    ids: list[str],
    values: Mapping[str, float],
    layers: Mapping[str, int],
    columns: tuple[tuple[str, ...], ...],
    ky: float,
    padding: float,
    top: float,
    bottom: float,
) -> _Frame:
    out_links: dict[str, list[int]] = {i: [] for i in ids}
    in_links: dict[str, list[int]] = {i: [] for i in ids}
    for index, link in enumerate(data.links):
        out_links[link.source].append(index)
        in_links[link.target].append(index)

    return _Frame(
        sources=tuple(link.source for link in data.links),
        targets=tuple(link.target for link in data.links),
        values=tuple(link.value for link in data.links),
        widths=tuple(link.value * ky for link in data.links),
        out_links={k: tuple(v) for k, v in out_links.items()},
        in_links={k: tuple(v) for k, v in in_links.items()},
        heights={i: values[i] * ky for i in ids},
        layers=dict(layers),
        order={node_id: pos for pos, node_id in enumerate(ids)},
        columns=columns,
        padding=padding,
        top=top,
        bottom=bottom,
    )


# =============================================================================
# Vertical placement
# =============================================================================


def _initial_positions(frame: _Frame) -> dict[str, float]:
    """Stack each column from the top, then spread the leftover space evenly."""
    positions: dict[str, float] = {}
    for column in frame.columns:
        y = frame.top
        for node_id in column:
            positions[node_id] = y
            y += frame.heights[node_id] + frame.padding
        spread = (frame.bottom - y + frame.padding) / (len(column) + 1)
        for k, node_id in enumerate(column):
            positions[node_id] += spread * (k + 1)
    return positions


class _SlotOrder(NamedTuple):
    """Per-node link order: outgoing by target position, incoming by source position."""

    out: dict[str, tuple[int, ...]]
    incoming: dict[str, tuple[int, ...]]


def _slot_order(frame: _Frame, positions: Positions) -> _SlotOrder:
    return _SlotOrder(
        out={
            node_id: tuple(sorted(links, key=lambda i: (positions[frame.targets[i]], i)))
            for node_id, links in frame.out_links.items()
        },
        incoming={
            node_id: tuple(sorted(links, key=lambda i: (positions[frame.sources[i]], i)))
            for node_id, links in frame.in_links.items()
        },
    )


def _target_top(frame: _Frame, positions: Positions, slots: _SlotOrder, index: int) -> float:
    """Target top edge that would make link ``index`` perfectly horizontal."""
    source, target = frame.sources[index], frame.targets[index]
    out = slots.out[source]
    y = positions[source] - (len(out) - 1) * frame.padding / 2
    for i in out:
        if i == index:
            break
        y += frame.widths[i] + frame.padding
    for i in slots.incoming[target]:
        if i == index:
            break
        y -= frame.widths[i]
    return y


def _source_top(frame: _Frame, positions: Positions, slots: _SlotOrder, index: int) -> float:
    """Source top edge that would make link ``index`` perfectly horizontal."""
    source, target = frame.sources[index], frame.targets[index]
    incoming = slots.incoming[target]
    y = positions[target] - (len(incoming) - 1) * frame.padding / 2
    for i in incoming:
        if i == index:
            break
        y += frame.widths[i] + frame.padding
    for i in slots.out[source]:
        if i == index:
            break
        y -= frame.widths[i]
    return y


def _relax_left_to_right(frame: _Frame, positions: Positions, alpha: float, beta: float) -> dict[str, float]:
    """Move each node toward its incoming links, column by column."""
    current = dict(positions)
    for column in frame.columns[1:]:
        # Positions only change at the end of a column step
        slots = _slot_order(frame, current)
        moved: dict[str, float] = {}
        for node_id in column:
            y = w = 0.0
            for i in frame.in_links[node_id]:
                v = frame.values[i] * (frame.layers[node_id] - frame.layers[frame.sources[i]])
                y += _target_top(frame, current, slots, i) * v
                w += v
            if w > 0:
                moved[node_id] = current[node_id] + (y / w - current[node_id]) * alpha
        current = _resolve_collisions(frame, {**current, **moved}, column, beta)
    return current


def _relax_right_to_left(frame: _Frame, positions: Positions, alpha: float, beta: float) -> dict[str, float]:
    """Move each node toward its outgoing links, column by column."""
    current = dict(positions)
    for column in reversed(frame.columns[:-1]):
        slots = _slot_order(frame, current)
        moved: dict[str, float] = {}
        for node_id in column:
            y = w = 0.0
            for i in frame.out_links[node_id]:
                v = frame.values[i] * (frame.layers[frame.targets[i]] - frame.layers[node_id])
                y += _source_top(frame, current, slots, i) * v
                w += v
            if w > 0:
                moved[node_id] = current[node_id] + (y / w - current[node_id]) * alpha
        current = _resolve_collisions(frame, {**current, **moved}, column, beta)
    return current


def _resolve_collisions(
    frame: _Frame,
    positions: Positions,
    column: tuple[str, ...],
    strength: float,
) -> dict[str, float]:
    """Separate overlapping nodes of one column by at least the padding.

    Pushes outward from the middle node, then pulls everything back inside
    the extent (bottom first, so the top edge wins).
    """
    ordered = sorted(column, key=lambda i: (positions[i], frame.order[i]))
    tops = [positions[i] for i in ordered]
    heights = [frame.heights[i] for i in ordered]
    py = frame.padding

    def push_down(y: float, start: int) -> None:
        for k in range(start, len(tops)):
            dy = (y - tops[k]) * strength
            if dy > _EPSILON:
                tops[k] += dy
            y = tops[k] + heights[k] + py

    def push_up(y: float, start: int) -> None:
        for k in range(start, -1, -1):
            dy = (tops[k] + heights[k] - y) * strength
            if dy > _EPSILON:
                tops[k] -= dy
            y = tops[k] - py

    mid = len(tops) >> 1
    push_up(tops[mid] - py, mid - 1)
    push_down(tops[mid] + heights[mid] + py, mid + 1)
    push_up(frame.bottom, len(tops) - 1)
    push_down(frame.top, 0)

    return {**positions, **dict(zip(ordered, tops))}


# =============================================================================
# Output
# =============================================================================


def _assemble(
    data: DiagramData,
    frame: _Frame,
    positions: Positions,
    values: Mapping[str, float],
    ranks: Mapping[str, NodeRank],
    x0: float,
    kx: float,
    node_width: float,
) -> Layout:
    link_y0: dict[int, float] = {}
    link_y1: dict[int, float] = {}
    slots = _slot_order(frame, positions)
    outgoing = slots.out
    incoming = slots.incoming

    for node_id in frame.order:
        out = outgoing[node_id]
        inc = incoming[node_id]

        y = positions[node_id]
        for i in out:
            link_y0[i] = y + frame.widths[i] / 2
            y += frame.widths[i]
        y = positions[node_id]
        for i in inc:
            link_y1[i] = y + frame.widths[i] / 2
            y += frame.widths[i]

    nodes = []
    for spec in data.nodes:
        if spec.id not in frame.order:
            continue
        left = x0 + frame.layers[spec.id] * kx
        top = positions[spec.id]
        nodes.append(
            Node(
                id=spec.id,
                title=spec.label,
                value=values[spec.id],
                color=spec.color or color_for(spec.id),
                x0=left,
                y0=top,
                x1=left + node_width,
                y1=top + frame.heights[spec.id],
                depth=ranks[spec.id].depth,
                height=ranks[spec.id].height,
                layer=frame.layers[spec.id],
                incoming=incoming[spec.id],
                outgoing=outgoing[spec.id],
                extra=spec.extra,
                data=spec.data,
            )
        )

    ordinals: dict[str, int] = {}
    links = []
    for index, spec in enumerate(data.links):
        ordinal = ordinals.get(spec.source, 0)
        ordinals[spec.source] = ordinal + 1
        links.append(
            Link(
                index=index,
                source=spec.source,
                target=spec.target,
                value=spec.value,
                ordinal=ordinal,
                width=frame.widths[index],
                y0=link_y0[index],
                y1=link_y1[index],
                title=spec.title,
            )
        )

    return Layout(nodes=tuple(nodes), links=tuple(links))
