"""Column alignment strategies.

An alignment maps a node's topological rank to a column index given the
total number of columns ``n``. The engine floors and clamps the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union


@dataclass(frozen=True)
class NodeRank:
    """Topological facts about a node used for column assignment.

    Attributes:
        depth: Longest path from any source to this node
        height: Longest path from this node to any sink
        has_incoming: Node is the target of at least one link
        has_outgoing: Node is the source of at least one link
        min_target_depth: Smallest depth among direct targets (None for sinks)
    """

    depth: int
    height: int
    has_incoming: bool
    has_outgoing: bool
    min_target_depth: int | None = None


AlignFn = Callable[[NodeRank, int], float]


def left(rank: NodeRank, n: int) -> float:
    return rank.depth


def right(rank: NodeRank, n: int) -> float:
    return n - 1 - rank.height


def justify(rank: NodeRank, n: int) -> float:
    """Sources follow their depth; sinks are pushed to the last column."""
    return rank.depth if rank.has_outgoing else n - 1


def center(rank: NodeRank, n: int) -> float:
    """Like left, but source-only nodes sit just before their nearest target."""
    if rank.has_incoming:
        return rank.depth
    if rank.min_target_depth is not None:
        return rank.min_target_depth - 1
    return 0


ALIGNMENTS: dict[str, AlignFn] = {
    "left": left,
    "right": right,
    "justify": justify,
    "center": center,
}


def resolve_alignment(align: Union[str, AlignFn]) -> AlignFn:
    """Look up a named alignment or pass a callable through."""
    if callable(align):
        return align
    try:
        return ALIGNMENTS[align]
    except KeyError:
        valid = ", ".join(sorted(ALIGNMENTS))
        raise ValueError(f"Unknown alignment '{align}'. Expected one of: {valid}") from None
