"""Persistent drawing surface.

The surface is an in-memory SVG: three named groups whose keyed elements
survive across renders. It is the source of truth for what is on screen;
animation state lives elsewhere and can be thrown away at any time.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field
from typing import Any

SVG_NS = "http://www.w3.org/2000/svg"
ET.register_namespace("", SVG_NS)

NODES = "nodes"
LINKS = "links"
LABELS = "labels"

# Paint order: links underneath nodes, labels on top
GROUP_ORDER: tuple[str, ...] = (LINKS, NODES, LABELS)

GROUP_ATTRS: dict[str, dict[str, Any]] = {
    LINKS: {"fill": "none", "stroke-opacity": 0.5},
    NODES: {},
    LABELS: {"font-family": "sans-serif", "font-size": 10},
}


@dataclass(eq=False)
class Element:
    """One drawn shape. Identity is the object itself, matched by ``key``."""

    tag: str
    key: Hashable
    attrs: dict[str, Any] = field(default_factory=dict)
    title: str | None = None  # Tooltip
    text: str | None = None  # Text content (labels)
    style: dict[str, str] = field(default_factory=dict)

    def to_xml(self) -> ET.Element:
        el = ET.Element(f"{{{SVG_NS}}}{self.tag}", {k: format_attr(v) for k, v in self.attrs.items()})
        if self.style:
            el.set("style", "; ".join(f"{k}: {v}" for k, v in self.style.items()))
        if self.text is not None:
            el.text = self.text
        if self.title is not None:
            title = ET.SubElement(el, f"{{{SVG_NS}}}title")
            title.text = self.title
        return el


class Group:
    """Ordered, keyed collection of elements."""

    def __init__(self, name: str, attrs: dict[str, Any] | None = None) -> None:
        self.name = name
        self.attrs = dict(attrs or {})
        self._elements: dict[Hashable, Element] = {}

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(list(self._elements.values()))

    def __contains__(self, key: Hashable) -> bool:
        return key in self._elements

    def keys(self) -> list[Hashable]:
        return list(self._elements)

    def get(self, key: Hashable) -> Element:
        return self._elements[key]

    def create(self, key: Hashable, tag: str, attrs: dict[str, Any]) -> Element:
        if key in self._elements:
            raise KeyError(f"Element {key!r} already exists in group '{self.name}'")
        element = Element(tag=tag, key=key, attrs=dict(attrs))
        self._elements[key] = element
        return element

    def remove(self, key: Hashable, element: Element | None = None) -> bool:
        """Remove an element; with ``element`` given, only if it is still the one stored."""
        current = self._elements.get(key)
        if current is None or (element is not None and current is not element):
            return False
        del self._elements[key]
        return True

    def clear(self) -> list[Hashable]:
        removed = list(self._elements)
        self._elements.clear()
        return removed


class DrawingSurface:
    """SVG canvas pre-partitioned into node, link and label groups."""

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self._groups = {name: Group(name, GROUP_ATTRS[name]) for name in GROUP_ORDER}

    def group(self, name: str) -> Group:
        return self._groups[name]

    @property
    def nodes(self) -> Group:
        return self._groups[NODES]

    @property
    def links(self) -> Group:
        return self._groups[LINKS]

    @property
    def labels(self) -> Group:
        return self._groups[LABELS]

    def element_count(self) -> int:
        return sum(len(g) for g in self._groups.values())

    def clear(self) -> dict[str, list[Hashable]]:
        """Remove every element at once. Returns removed keys per group."""
        return {name: group.clear() for name, group in self._groups.items()}

    def to_xml(self) -> ET.Element:
        root = ET.Element(
            f"{{{SVG_NS}}}svg",
            {
                "viewBox": f"0 0 {format_attr(self.width)} {format_attr(self.height)}",
                "width": format_attr(self.width),
                "height": format_attr(self.height),
            },
        )
        for name in GROUP_ORDER:
            group = self._groups[name]
            g = ET.SubElement(root, f"{{{SVG_NS}}}g", {"class": name})
            for k, v in group.attrs.items():
                g.set(k, format_attr(v))
            for element in group:
                g.append(element.to_xml())
        return root

    def to_svg(self) -> str:
        return ET.tostring(self.to_xml(), encoding="unicode")

    def _repr_svg_(self) -> str:
        """SVG representation for Jupyter display."""
        return self.to_svg()


def format_attr(value: Any) -> str:
    """Format an attribute value for SVG output.

    Examples:
        >>> format_attr(1.0), format_attr(0.123456), format_attr("none")
        ('1', '0.123', 'none')
    """
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        text = f"{value:.3f}".rstrip("0").rstrip(".")
        return "0" if text == "-0" else text
    return str(value)
