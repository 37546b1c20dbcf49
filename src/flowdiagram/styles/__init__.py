"""Styling for flow diagrams."""

from flowdiagram.styles.palette import CATEGORY10, color_for

__all__ = ["CATEGORY10", "color_for"]
