"""Identity key strategies.

A key decides whether an element on the surface is "the same" entity as
one in the next snapshot. Node objects are rebuilt for every snapshot, so
the key must come from an attribute that stays stable across snapshots;
positions and indices do not qualify.

Links have no id of their own. Their key is the source node's key plus
the link's ordinal among that source's outgoing links (input order).
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from typing import Union

from flowdiagram.exceptions import KeyStrategyError
from flowdiagram.layout.geometry import Link, Node

NodeKeyFn = Callable[[Node], Hashable]


def by_id(node: Node) -> Hashable:
    return node.id


def by_title(node: Node) -> Hashable:
    return node.title


def by_attribute(name: str) -> NodeKeyFn:
    """Key nodes by a named attribute, falling back to ``node.data[name]``.

    Example:
        >>> key = by_attribute("production")
    """

    def key(node: Node) -> Hashable:
        if name in node.data:
            return node.data[name]
        if hasattr(node, name):
            return getattr(node, name)
        raise KeyStrategyError(node.id, name)

    key.__name__ = f"by_{name}"
    return key


@dataclass(frozen=True)
class KeyStrategy:
    """Pair of node/link key functions used by the renderer."""

    node: NodeKeyFn = by_id

    def node_key(self, node: Node) -> Hashable:
        return self.node(node)

    def link_key(self, link: Link, nodes: Mapping[str, Node]) -> Hashable:
        return (self.node(nodes[link.source]), link.ordinal)


def resolve_key_strategy(spec: Union[str, NodeKeyFn, KeyStrategy, None]) -> KeyStrategy:
    """Build a KeyStrategy from a name, a node key function, or pass one through."""
    if spec is None:
        return KeyStrategy()
    if isinstance(spec, KeyStrategy):
        return spec
    if callable(spec):
        return KeyStrategy(node=spec)
    if spec == "id":
        return KeyStrategy(node=by_id)
    if spec == "title":
        return KeyStrategy(node=by_title)
    return KeyStrategy(node=by_attribute(spec))
