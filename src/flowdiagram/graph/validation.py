"""Snapshot validation.

All structural checks run before layout so that a bad snapshot never
reaches the drawing surface.
"""

from __future__ import annotations

import math
from collections import Counter

import networkx as nx

from flowdiagram.exceptions import InvalidGraphError
from flowdiagram.graph.core import DiagramData


def validate_diagram(data: DiagramData) -> None:
    """Run all structural validations on a snapshot.

    Raises:
        InvalidGraphError: On the first problem found
    """
    _validate_unique_ids(data)
    _validate_link_endpoints(data)
    _validate_link_values(data)
    _validate_fixed_values(data)
    _validate_acyclic(data)


def _validate_unique_ids(data: DiagramData) -> None:
    counts = Counter(n.id for n in data.nodes)
    duplicates = sorted(str(node_id) for node_id, count in counts.items() if count > 1)
    if duplicates:
        raise InvalidGraphError(
            f"Duplicate node ids: {', '.join(duplicates)}\n\n"
            f"  -> Node ids must be unique within a snapshot",
            node_id=duplicates[0],
        )


def _validate_link_endpoints(data: DiagramData) -> None:
    known = {n.id for n in data.nodes}
    for index, link in enumerate(data.links):
        for end in (link.source, link.target):
            if end not in known:
                raise InvalidGraphError(
                    f"Link #{index} ({link.source} -> {link.target}) references "
                    f"unknown node '{end}'",
                    node_id=end,
                )
        if link.source == link.target:
            raise InvalidGraphError(
                f"Link #{index} is a self-loop on '{link.source}'\n\n"
                f"  -> Flows must connect two different nodes",
                node_id=link.source,
            )


def _validate_link_values(data: DiagramData) -> None:
    for index, link in enumerate(data.links):
        if not math.isfinite(link.value) or link.value <= 0:
            raise InvalidGraphError(
                f"Link #{index} ({link.source} -> {link.target}) has invalid "
                f"value {link.value!r}\n\n"
                f"  -> Flow values must be finite and positive"
            )


def _validate_fixed_values(data: DiagramData) -> None:
    for n in data.nodes:
        if n.fixed_value is None:
            continue
        if not math.isfinite(n.fixed_value) or n.fixed_value <= 0:
            raise InvalidGraphError(
                f"Node '{n.id}' has invalid fixed value {n.fixed_value!r}",
                node_id=n.id,
            )


def _validate_acyclic(data: DiagramData) -> None:
    G = data.to_nx()
    try:
        cycle = nx.find_cycle(G)
    except nx.NetworkXNoCycle:
        return
    path = " -> ".join(str(u) for u, _ in cycle) + f" -> {cycle[0][0]}"
    raise InvalidGraphError(
        f"Circular flow: {path}\n\n"
        f"  -> Flow diagrams are laid out left-to-right and cannot contain cycles",
        node_id=cycle[0][0],
    )
