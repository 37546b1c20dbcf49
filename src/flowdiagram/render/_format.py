"""Tooltip text for nodes and links."""

from __future__ import annotations

from collections.abc import Mapping

from flowdiagram.layout.geometry import Layout, Link, Node


def format_value(value: float) -> str:
    """Format a flow value for display.

    Examples:
        >>> format_value(1234)
        '1,234'
        >>> format_value(2.5)
        '2.5'
    """
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:,.2f}".rstrip("0").rstrip(".")


def node_tooltip(node: Node, layout: Layout) -> str:
    """Title and value, then inbound and outbound flows, then the annotation.

    Empty sections are left out entirely.
    """
    nodes = layout.node_map()
    sections = [f"{node.title}\n{format_value(node.value)}"]

    inbound = [_flow_line("←", nodes[link.source], link) for link in layout.incoming(node.id)]
    if inbound:
        sections.append("Inbound:\n" + "\n".join(inbound))

    outbound = [_flow_line("→", nodes[link.target], link) for link in layout.outgoing(node.id)]
    if outbound:
        sections.append("Outbound:\n" + "\n".join(outbound))

    if node.extra:
        sections.append(node.extra)
    return "\n\n".join(sections)


def link_tooltip(link: Link, nodes: Mapping[str, Node]) -> str:
    text = f"{nodes[link.source].title} → {nodes[link.target].title}\n{format_value(link.value)}"
    if link.title:
        return f"{link.title}\n{text}"
    return text


def _flow_line(arrow: str, other: Node, link: Link) -> str:
    return f"  {arrow} {other.title}: {format_value(link.value)}"
