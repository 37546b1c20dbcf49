"""Inbound channel from the host application to the renderer.

The host pushes whole snapshots; exactly one consumer drains them in
order. Each snapshot fully replaces the previous diagram.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from flowdiagram.exceptions import ChannelError, DuplicateKeyError, InvalidGraphError, KeyStrategyError
from flowdiagram.graph.core import DiagramData

if TYPE_CHECKING:
    from flowdiagram.render.renderer import SankeyRenderer

logger = logging.getLogger(__name__)

_CLOSED = object()


class DiagramChannel:
    """One-directional, single-subscriber FIFO of ``DiagramData`` values."""

    def __init__(self) -> None:
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._subscribed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, data: DiagramData) -> None:
        """Queue a snapshot. Never blocks."""
        if self._closed:
            raise ChannelError("Cannot send on a closed DiagramChannel")
        self._queue.put_nowait(data)

    def close(self) -> None:
        """Stop the subscriber once the queued snapshots are drained."""
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    def subscribe(self) -> AsyncIterator[DiagramData]:
        """Iterate over snapshots until the channel is closed.

        Raises:
            ChannelError: If the channel already has a subscriber
        """
        if self._subscribed:
            raise ChannelError("DiagramChannel supports a single subscriber")
        self._subscribed = True
        return self._drain()

    async def _drain(self) -> AsyncIterator[DiagramData]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item


async def run_channel(
    channel: DiagramChannel,
    renderer: SankeyRenderer,
    *,
    settle: bool = True,
) -> int:
    """Render every snapshot from ``channel`` in order until it closes.

    Snapshots that fail to render are logged and skipped; the previous
    diagram stays on screen and later snapshots are still rendered.

    Args:
        channel: Source of snapshots
        renderer: Renderer to drive
        settle: Wait for the last frame's animations before returning

    Returns:
        Number of snapshots rendered successfully
    """
    rendered = 0
    async for data in channel.subscribe():
        try:
            renderer.render(data)
        except (InvalidGraphError, DuplicateKeyError, KeyStrategyError) as exc:
            logger.warning("Skipping snapshot: %s", exc)
            continue
        except Exception:
            # The surface is untouched when render fails, so the stream can go on
            logger.warning("Skipping snapshot after unexpected render failure", exc_info=True)
            continue
        rendered += 1
        # Give in-flight tweens a turn before the next snapshot interrupts them
        await asyncio.sleep(0)
    if settle:
        await renderer.wait()
    return rendered
