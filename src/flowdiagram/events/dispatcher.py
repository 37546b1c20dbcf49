"""Fan-out of render events to the renderer's processors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from flowdiagram.events.processor import EventProcessor

if TYPE_CHECKING:
    from flowdiagram.events.types import Event

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Delivers each render event to every processor, in registration order.

    Delivery is best-effort: a processor that raises is logged and the
    remaining processors still see the event, so a broken observer never
    stops a frame. With ``strict=True`` the first failure propagates to the
    caller of ``emit`` (for ``SankeyRenderer``, out of ``render()``).
    """

    def __init__(
        self,
        processors: list[EventProcessor] | None = None,
        *,
        strict: bool = False,
    ) -> None:
        self._processors: tuple[EventProcessor, ...] = tuple(processors or ())
        self._strict = strict

    @property
    def active(self) -> bool:
        """Whether any processor is listening; callers skip building events otherwise."""
        return bool(self._processors)

    def emit(self, event: Event) -> None:
        for processor in self._processors:
            try:
                processor.on_event(event)
            except Exception:
                if self._strict:
                    raise
                logger.warning(
                    "EventProcessor %s failed on %s (frame %d)",
                    processor,
                    type(event).__name__,
                    event.frame_id,
                    exc_info=True,
                )

    def shutdown(self) -> None:
        """Shut down every processor.

        In strict mode all processors are still shut down; the first
        failure is raised afterwards.
        """
        failure: Exception | None = None
        for processor in self._processors:
            try:
                processor.shutdown()
            except Exception as exc:
                if not self._strict:
                    logger.warning("EventProcessor %s failed during shutdown", processor, exc_info=True)
                elif failure is None:
                    failure = exc
        if failure is not None:
            raise failure
