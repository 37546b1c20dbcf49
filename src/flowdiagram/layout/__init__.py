"""Sankey layout engine.

Usage:
    from flowdiagram.layout import LayoutConfig, compute_layout

    layout = compute_layout(data, LayoutConfig(node_padding=20))
    for node in layout.nodes:
        print(node.id, node.x0, node.y0, node.x1, node.y1)
"""

from flowdiagram.layout.align import ALIGNMENTS, NodeRank, center, justify, left, right
from flowdiagram.layout.config import LayoutConfig
from flowdiagram.layout.engine import compute_layout
from flowdiagram.layout.geometry import Layout, Link, Node
from flowdiagram.layout.paths import horizontal_link_path, link_path

__all__ = [
    "ALIGNMENTS",
    "Layout",
    "LayoutConfig",
    "Link",
    "Node",
    "NodeRank",
    "center",
    "compute_layout",
    "horizontal_link_path",
    "justify",
    "left",
    "link_path",
    "right",
]
