"""Renderer configuration.

Settings are fixed when a renderer is constructed. They can be read from
the ``[tool.flowdiagram]`` section of the nearest pyproject.toml:

    [tool.flowdiagram]
    width = 954
    height = 600
    node_padding = 40
    align = "left"
    duration_ms = 500
"""

from __future__ import annotations

import dataclasses
import logging
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from flowdiagram.layout.config import LayoutConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiagramConfig:
    """Canvas, layout and animation settings.

    Attributes:
        width: Canvas width
        height: Canvas height
        margin_x: Horizontal inset of the layout extent
        margin_y: Vertical inset of the layout extent
        node_width: Node rectangle width
        node_padding: Minimum vertical gap between nodes of a column
        iterations: Relaxation passes
        align: Column alignment name ("justify", "left", "right", "center")
        duration_ms: Transition duration; 0 renders synchronously
        node_key: Identity key for nodes ("id", "title", or an attribute name)
        label_offset: Gap between a node and its label
    """

    width: float = 954
    height: float = 600
    margin_x: float = 1
    margin_y: float = 5
    node_width: float = 15
    node_padding: float = 100
    iterations: int = 100
    align: str = "justify"
    duration_ms: float = 750
    node_key: str = "id"
    label_offset: float = 6

    def layout_config(self) -> LayoutConfig:
        return LayoutConfig(
            extent=(
                (self.margin_x, self.margin_y),
                (self.width - self.margin_x, self.height - self.margin_y),
            ),
            node_width=self.node_width,
            node_padding=self.node_padding,
            align=self.align,
            iterations=self.iterations,
        )

    def replace(self, **changes: Any) -> DiagramConfig:
        """Copy with some fields changed; ``None`` values are ignored."""
        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_mapping(cls, section: Mapping[str, Any]) -> DiagramConfig:
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(section) - known)
        if unknown:
            logger.warning("Ignoring unknown [tool.flowdiagram] keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in section.items() if k in known})


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path | None = None) -> DiagramConfig:
    """Load [tool.flowdiagram] from the nearest pyproject.toml.

    Returns default config if no pyproject.toml or no [tool.flowdiagram] section.
    """
    path = find_pyproject(start)
    if path is None:
        return DiagramConfig()

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return DiagramConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("flowdiagram", {})
    if not section:
        return DiagramConfig()

    logger.debug("Loaded [tool.flowdiagram] from %s", path)
    return DiagramConfig.from_mapping(section)
