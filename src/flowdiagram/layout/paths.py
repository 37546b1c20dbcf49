"""SVG path data for link bands."""

from __future__ import annotations

from flowdiagram.layout.geometry import Link, Node


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def horizontal_link_path(x0: float, y0: float, x1: float, y1: float) -> str:
    """Cubic Bézier leaving and entering horizontally.

    Example:
        >>> horizontal_link_path(0, 10, 100, 50)
        'M0,10C50,10,50,50,100,50'
    """
    xm = (x0 + x1) / 2
    return f"M{_fmt(x0)},{_fmt(y0)}C{_fmt(xm)},{_fmt(y0)},{_fmt(xm)},{_fmt(y1)},{_fmt(x1)},{_fmt(y1)}"


def link_path(link: Link, source: Node, target: Node) -> str:
    """Path from the source's right edge to the target's left edge."""
    return horizontal_link_path(source.x1, link.y0, target.x0, link.y1)
