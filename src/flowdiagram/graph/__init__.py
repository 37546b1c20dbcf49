"""Flow graph input model and validation."""

from flowdiagram.graph.core import DiagramData, LinkSpec, NodeSpec, make_diagram
from flowdiagram.graph.validation import validate_diagram

__all__ = [
    "DiagramData",
    "LinkSpec",
    "NodeSpec",
    "make_diagram",
    "validate_diagram",
]
