"""Layout configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from flowdiagram.layout.align import AlignFn, resolve_alignment

Extent = tuple[tuple[float, float], tuple[float, float]]


@dataclass(frozen=True)
class LayoutConfig:
    """Parameters of one layout invocation.

    Attributes:
        extent: ((x0, y0), (x1, y1)) drawing area in canvas coordinates
        node_width: Width of every node rectangle
        node_padding: Minimum vertical gap between nodes of a column
        align: Alignment name or callable (see ``flowdiagram.layout.align``)
        iterations: Number of relaxation passes
    """

    extent: Extent = ((1.0, 5.0), (953.0, 595.0))
    node_width: float = 15.0
    node_padding: float = 100.0
    align: Union[str, AlignFn] = "justify"
    iterations: int = 100

    def __post_init__(self) -> None:
        (x0, y0), (x1, y1) = self.extent
        if x1 - x0 <= self.node_width or y1 <= y0:
            raise ValueError(f"Layout extent {self.extent} is too small for node width {self.node_width}")
        if self.node_width <= 0:
            raise ValueError(f"node_width must be positive, got {self.node_width}")
        if self.node_padding < 0:
            raise ValueError(f"node_padding must be non-negative, got {self.node_padding}")
        if self.iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {self.iterations}")
        resolve_alignment(self.align)
