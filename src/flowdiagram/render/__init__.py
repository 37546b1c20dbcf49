"""Reconciling renderer for flow diagrams.

Usage:
    renderer = SankeyRenderer(DiagramConfig(duration_ms=500))
    renderer.render(snapshot)      # enter/update/exit against the surface
    await renderer.wait()          # let the animations finish
    svg = renderer.to_svg()
"""

from flowdiagram.render.keys import KeyStrategy, by_attribute, by_id, by_title, resolve_key_strategy
from flowdiagram.render.reconcile import Diff, key_by, reconcile
from flowdiagram.render.renderer import ElementSpec, FrameResult, SankeyRenderer
from flowdiagram.render.surface import DrawingSurface, Element, Group
from flowdiagram.render.transition import Animator, Transition

__all__ = [
    "Animator",
    "Diff",
    "DrawingSurface",
    "Element",
    "ElementSpec",
    "FrameResult",
    "Group",
    "KeyStrategy",
    "SankeyRenderer",
    "Transition",
    "by_attribute",
    "by_id",
    "by_title",
    "key_by",
    "reconcile",
    "resolve_key_strategy",
]
