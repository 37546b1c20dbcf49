"""Node color palette.

Colors are picked from the node id with a stable hash, so the same node
keeps its color across snapshots regardless of ordering.
"""

from __future__ import annotations

import hashlib

# d3 schemeCategory10
CATEGORY10: tuple[str, ...] = (
    "#1f77b4",
    "#ff7f0e",
    "#2ca02c",
    "#d62728",
    "#9467bd",
    "#8c564b",
    "#e377c2",
    "#7f7f7f",
    "#bcbd22",
    "#17becf",
)


def color_for(key: object, palette: tuple[str, ...] = CATEGORY10) -> str:
    """Deterministic palette color for a key.

    Example:
        >>> color_for("A") == color_for("A")
        True
    """
    digest = hashlib.sha256(str(key).encode()).digest()
    return palette[int.from_bytes(digest[:4], "big") % len(palette)]
