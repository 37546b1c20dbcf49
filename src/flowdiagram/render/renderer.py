"""Reconciling Sankey renderer.

Each ``render()`` lays out a snapshot and reconciles the result against
the elements already on the drawing surface, collection by collection:

- enter: new keys are created hidden and animated in
- update: surviving keys animate from their current attributes
- exit: vanished keys fade out and are removed when the fade completes

Everything that can fail (validation, layout, keying) happens before the
first surface mutation, so a rejected snapshot leaves the previous diagram
on screen.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Any

from flowdiagram.config import DiagramConfig
from flowdiagram.events.dispatcher import EventDispatcher
from flowdiagram.events.processor import EventProcessor
from flowdiagram.events.types import (
    ClearEvent,
    FrameEndEvent,
    FrameStartEvent,
    InterruptEvent,
    RenderErrorEvent,
)
from flowdiagram.graph.core import DiagramData
from flowdiagram.layout.engine import compute_layout
from flowdiagram.layout.geometry import Layout, Node
from flowdiagram.layout.paths import link_path
from flowdiagram.render._format import link_tooltip, node_tooltip
from flowdiagram.render.keys import KeyStrategy, NodeKeyFn, resolve_key_strategy
from flowdiagram.render.reconcile import Diff, key_by, reconcile
from flowdiagram.render.surface import LABELS, LINKS, NODES, DrawingSurface, Group
from flowdiagram.render.transition import Animator, Transition

logger = logging.getLogger(__name__)

_HIDDEN = {"opacity": 0}


@dataclass(frozen=True)
class ElementSpec:
    """Target state of one element in the next frame."""

    tag: str
    attrs: dict[str, Any]
    hidden: dict[str, Any] = field(default_factory=dict)  # Enter-from overrides
    title: str | None = None
    text: str | None = None
    style: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class FrameResult:
    """What one render did to each collection."""

    frame_id: int
    nodes: Diff = field(default_factory=Diff)
    links: Diff = field(default_factory=Diff)
    labels: Diff = field(default_factory=Diff)
    cleared: bool = False

    def counts(self) -> dict[str, dict[str, int]]:
        return {
            NODES: self.nodes.counts(),
            LINKS: self.links.counts(),
            LABELS: self.labels.counts(),
        }


class SankeyRenderer:
    """Keeps a drawing surface in sync with a stream of snapshots.

    Args:
        config: Canvas, layout and animation settings
        keys: Node identity key (name, callable or KeyStrategy); defaults
            to ``config.node_key``
        surface: Existing surface to draw on (a new one by default)
        event_processors: Processors receiving render events
        strict_events: Let processor exceptions propagate out of ``render()``
            instead of logging them
        animator: Tween registry (mainly for tests)

    Example:
        >>> renderer = SankeyRenderer(DiagramConfig(duration_ms=0))
        >>> result = renderer.render(DiagramData.empty())
        >>> result.cleared
        True
    """

    def __init__(
        self,
        config: DiagramConfig | None = None,
        *,
        keys: str | NodeKeyFn | KeyStrategy | None = None,
        surface: DrawingSurface | None = None,
        event_processors: list[EventProcessor] | None = None,
        strict_events: bool = False,
        animator: Animator | None = None,
    ) -> None:
        self.config = config or DiagramConfig()
        self.surface = surface or DrawingSurface(self.config.width, self.config.height)
        self.keys = resolve_key_strategy(keys if keys is not None else self.config.node_key)
        self.layout = Layout()
        self._layout_config = self.config.layout_config()
        self._animator = animator or Animator()
        self._dispatcher = EventDispatcher(event_processors, strict=strict_events)
        self._frame_id = 0

    @property
    def animator(self) -> Animator:
        return self._animator

    def render(self, data: DiagramData) -> FrameResult:
        """Lay out ``data`` and reconcile the surface against it.

        Returns immediately; animations continue on the running event loop.

        Raises:
            InvalidGraphError: If the snapshot is structurally invalid
            DuplicateKeyError: If the key strategy is ambiguous for this snapshot
            KeyStrategyError: If the key strategy cannot key a node
        """
        self._frame_id += 1
        frame_id = self._frame_id
        started = time.perf_counter()

        try:
            layout = compute_layout(data, self._layout_config)
            specs = self._element_specs(layout)
            transition = None if layout.is_empty else self._animator.begin(self.config.duration_ms)
        except Exception as exc:
            if self._dispatcher.active:
                self._dispatcher.emit(
                    RenderErrorEvent(
                        frame_id=frame_id,
                        error=str(exc),
                        error_type=f"{type(exc).__module__}.{type(exc).__qualname__}",
                    )
                )
            raise

        if self._dispatcher.active:
            self._dispatcher.emit(
                FrameStartEvent(frame_id=frame_id, node_count=len(layout.nodes), link_count=len(layout.links))
            )

        cancelled = self._animator.interrupt()
        if cancelled and self._dispatcher.active:
            self._dispatcher.emit(InterruptEvent(frame_id=frame_id, cancelled=cancelled))

        if transition is None:
            result = self._clear(frame_id)
        else:
            result = FrameResult(
                frame_id=frame_id,
                nodes=self._apply(self.surface.nodes, specs[NODES], transition),
                links=self._apply(self.surface.links, specs[LINKS], transition),
                labels=self._apply(self.surface.labels, specs[LABELS], transition),
            )
        self.layout = layout

        duration_ms = (time.perf_counter() - started) * 1000
        if self._dispatcher.active:
            self._dispatcher.emit(
                FrameEndEvent(
                    frame_id=frame_id,
                    counts=result.counts(),
                    cleared=result.cleared,
                    duration_ms=duration_ms,
                )
            )
        logger.debug("Frame %d: %s (%.1fms)", frame_id, result.counts(), duration_ms)
        return result

    async def wait(self) -> None:
        """Wait for in-flight animations (including exit removals) to finish."""
        await self._animator.wait()

    def close(self) -> None:
        """Cancel animations and shut down event processors."""
        self._animator.interrupt()
        self._dispatcher.shutdown()

    def to_svg(self) -> str:
        return self.surface.to_svg()

    def _repr_svg_(self) -> str:
        return self.surface.to_svg()

    # -------------------------------------------------------------------------
    # Reconciliation
    # -------------------------------------------------------------------------

    def _clear(self, frame_id: int) -> FrameResult:
        removed = self.surface.clear()
        if self._dispatcher.active:
            self._dispatcher.emit(ClearEvent(frame_id=frame_id, removed=sum(len(keys) for keys in removed.values())))
        return FrameResult(
            frame_id=frame_id,
            nodes=Diff(exited=tuple(removed[NODES])),
            links=Diff(exited=tuple(removed[LINKS])),
            labels=Diff(exited=tuple(removed[LABELS])),
            cleared=True,
        )

    def _apply(
        self,
        group: Group,
        specs: dict[Hashable, ElementSpec],
        transition: Transition,
    ) -> Diff:
        diff = reconcile(group.keys(), specs.keys())

        for key in diff.exited:
            element = group.get(key)
            transition.animate(
                group.name,
                element,
                dict(_HIDDEN),
                on_end=lambda k=key, el=element: group.remove(k, el),
            )

        for key in diff.updated:
            spec = specs[key]
            element = group.get(key)
            element.title = spec.title
            element.text = spec.text
            element.style = dict(spec.style)
            transition.animate(group.name, element, spec.attrs)

        for key in diff.entered:
            spec = specs[key]
            element = group.create(key, spec.tag, {**spec.attrs, **spec.hidden})
            element.title = spec.title
            element.text = spec.text
            element.style = dict(spec.style)
            transition.animate(group.name, element, spec.attrs)

        return diff

    # -------------------------------------------------------------------------
    # Element specs
    # -------------------------------------------------------------------------

    def _element_specs(self, layout: Layout) -> dict[str, dict[Hashable, ElementSpec]]:
        if layout.is_empty:
            return {NODES: {}, LINKS: {}, LABELS: {}}

        nodes = layout.node_map()
        keyed_nodes = key_by(layout.nodes, self.keys.node_key, NODES)
        keyed_links = key_by(layout.links, lambda link: self.keys.link_key(link, nodes), LINKS)

        return {
            NODES: {key: self._node_spec(node, layout) for key, node in keyed_nodes.items()},
            LINKS: {
                key: ElementSpec(
                    tag="path",
                    attrs={
                        "d": link_path(link, nodes[link.source], nodes[link.target]),
                        "stroke": nodes[link.source].color,
                        "stroke-width": link.stroke_width,
                        "opacity": 1,
                    },
                    hidden=dict(_HIDDEN),
                    title=link_tooltip(link, nodes),
                    style={"mix-blend-mode": "multiply"},
                )
                for key, link in keyed_links.items()
            },
            LABELS: {key: self._label_spec(node) for key, node in keyed_nodes.items()},
        }

    def _node_spec(self, node: Node, layout: Layout) -> ElementSpec:
        return ElementSpec(
            tag="rect",
            attrs={
                "x": node.x0,
                "y": node.y0,
                "width": node.x1 - node.x0,
                "height": node.y1 - node.y0,
                "fill": node.color,
                "opacity": 1,
            },
            # Grow in from the left edge
            hidden={"opacity": 0, "width": 0},
            title=node_tooltip(node, layout),
        )

    def _label_spec(self, node: Node) -> ElementSpec:
        """Label goes right of nodes in the left half of the canvas, left otherwise."""
        if node.center_x < self.config.width / 2:
            x, anchor = node.x1 + self.config.label_offset, "start"
        else:
            x, anchor = node.x0 - self.config.label_offset, "end"
        return ElementSpec(
            tag="text",
            attrs={
                "x": x,
                "y": node.center_y,
                "dy": "0.35em",
                "text-anchor": anchor,
                "opacity": 1,
            },
            hidden=dict(_HIDDEN),
            text=node.title,
        )
