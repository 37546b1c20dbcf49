"""Input model for flow diagrams.

A ``DiagramData`` is one immutable snapshot produced upstream. It carries
node and link specs only; geometry is produced by the layout engine.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import networkx as nx


@dataclass(frozen=True)
class NodeSpec:
    """A node as supplied by the producer.

    Attributes:
        id: Stable identifier, unique within the snapshot
        title: Display label (defaults to the id)
        color: Fill color; a palette color is derived when omitted
        extra: Free-form annotation appended to the tooltip
        fixed_value: Overrides the value computed from flows
        data: Free-form attributes, available to identity key strategies
    """

    id: str
    title: str | None = None
    color: str | None = None
    extra: str | None = None
    fixed_value: float | None = None
    data: Mapping[str, Any] = field(default_factory=dict)

    @property
    def label(self) -> str:
        return self.title if self.title is not None else str(self.id)


@dataclass(frozen=True)
class LinkSpec:
    """A weighted flow from one node to another."""

    source: str
    target: str
    value: float
    title: str | None = None


@dataclass(frozen=True)
class DiagramData:
    """One complete flow-graph snapshot.

    Example:
        >>> data = DiagramData.from_dict({
        ...     "nodes": [{"id": "A"}, {"id": "B"}],
        ...     "links": [{"source": "A", "target": "B", "value": 3}],
        ... })
        >>> len(data.nodes), len(data.links)
        (2, 1)
    """

    nodes: tuple[NodeSpec, ...] = ()
    links: tuple[LinkSpec, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "links", tuple(self.links))

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to draw."""
        return not self.nodes or not self.links

    @classmethod
    def empty(cls) -> DiagramData:
        return cls()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> DiagramData:
        """Build a snapshot from a JSON-style mapping.

        Node ``value`` keys are accepted and ignored: node values are
        recomputed from flows unless ``fixedValue`` is given.
        """
        nodes = tuple(_node_from_dict(n) for n in payload.get("nodes", []))
        links = tuple(_link_from_dict(link) for link in payload.get("links", []))
        return cls(nodes=nodes, links=links)

    def to_dict(self) -> dict[str, Any]:
        nodes = []
        for n in self.nodes:
            entry: dict[str, Any] = {"id": n.id}
            if n.title is not None:
                entry["title"] = n.title
            if n.color is not None:
                entry["color"] = n.color
            if n.extra is not None:
                entry["extra"] = n.extra
            if n.fixed_value is not None:
                entry["fixedValue"] = n.fixed_value
            if n.data:
                entry["data"] = dict(n.data)
            nodes.append(entry)
        links = []
        for link in self.links:
            entry = {"source": link.source, "target": link.target, "value": link.value}
            if link.title is not None:
                entry["title"] = link.title
            links.append(entry)
        return {"nodes": nodes, "links": links}

    def to_nx(self) -> nx.DiGraph:
        """Project the snapshot onto a NetworkX DiGraph.

        Parallel links between the same pair collapse into one edge whose
        ``value`` is their sum; ``links`` keeps the contributing indices.
        """
        G = nx.DiGraph()
        for n in self.nodes:
            G.add_node(n.id, spec=n)
        for index, link in enumerate(self.links):
            if G.has_edge(link.source, link.target):
                attrs = G.edges[link.source, link.target]
                attrs["value"] += link.value
                attrs["links"].append(index)
            else:
                G.add_edge(link.source, link.target, value=link.value, links=[index])
        return G


def _node_from_dict(raw: Mapping[str, Any]) -> NodeSpec:
    fixed = raw.get("fixedValue", raw.get("fixed_value"))
    return NodeSpec(
        id=raw["id"],
        title=raw.get("title"),
        color=raw.get("color"),
        extra=raw.get("extra"),
        fixed_value=float(fixed) if fixed is not None else None,
        data=dict(raw.get("data", {})),
    )


def _link_from_dict(raw: Mapping[str, Any]) -> LinkSpec:
    return LinkSpec(
        source=raw["source"],
        target=raw["target"],
        value=float(raw["value"]),
        title=raw.get("title"),
    )


def make_diagram(
    nodes: Sequence[NodeSpec | str],
    links: Sequence[LinkSpec | tuple[str, str, float]],
) -> DiagramData:
    """Convenience constructor accepting bare ids and ``(src, dst, value)`` tuples."""
    node_specs = tuple(n if isinstance(n, NodeSpec) else NodeSpec(id=n) for n in nodes)
    link_specs = tuple(
        link if isinstance(link, LinkSpec) else LinkSpec(*link) for link in links
    )
    return DiagramData(nodes=node_specs, links=link_specs)
