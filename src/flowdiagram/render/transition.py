"""Cancellable attribute transitions on the asyncio event loop.

Every tween is an ``asyncio.Task`` registered with the ``Animator`` under
its (group, key). Starting a render interrupts the outstanding tasks, which
leaves elements at whatever intermediate state they had reached. All tweens
started from one ``Transition`` share its start time, duration and easing,
so they move in lock-step.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Hashable
from typing import Any

from flowdiagram.render.interpolate import ease_cubic_in_out, interpolate
from flowdiagram.render.surface import Element

logger = logging.getLogger(__name__)

# ~60fps
DEFAULT_FRAME_INTERVAL = 1 / 60


class Transition:
    """One logical animation frame shared by every tween it starts."""

    def __init__(
        self,
        animator: Animator,
        duration_ms: float,
        ease: Callable[[float], float] = ease_cubic_in_out,
    ) -> None:
        self._animator = animator
        self.duration = max(0.0, duration_ms) / 1000
        self.ease = ease
        if self.duration > 0:
            try:
                self._loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
            except RuntimeError:
                raise RuntimeError(
                    "Animated rendering needs a running asyncio event loop.\n\n"
                    "How to fix:\n"
                    "  Call render() from a coroutine, or use duration_ms=0 for static rendering"
                ) from None
            self.start = self._loop.time()
        else:
            self._loop = None
            self.start = 0.0

    @property
    def immediate(self) -> bool:
        return self._loop is None

    def animate(
        self,
        group: str,
        element: Element,
        attrs: dict[str, Any],
        *,
        on_end: Callable[[], None] | None = None,
    ) -> asyncio.Task | None:
        """Tween ``element.attrs`` toward ``attrs``.

        With zero duration the final state is applied synchronously and
        ``on_end`` runs before this returns.
        """
        if self._loop is None:
            element.attrs.update(attrs)
            if on_end is not None:
                on_end()
            return None

        interpolators = {name: interpolate(element.attrs.get(name, value), value) for name, value in attrs.items()}
        task = self._loop.create_task(self._run(element, interpolators, on_end))
        self._animator._track(group, element.key, task)
        return task

    async def _run(
        self,
        element: Element,
        interpolators: dict[str, Callable[[float], Any]],
        on_end: Callable[[], None] | None,
    ) -> None:
        assert self._loop is not None
        while True:
            t = min(1.0, (self._loop.time() - self.start) / self.duration)
            eased = 1.0 if t >= 1 else self.ease(t)
            for name, at in interpolators.items():
                element.attrs[name] = at(eased)
            if t >= 1:
                break
            await asyncio.sleep(self._animator.frame_interval)
        if on_end is not None:
            on_end()


class Animator:
    """Registry of in-flight tweens, grouped by element collection."""

    def __init__(self, frame_interval: float = DEFAULT_FRAME_INTERVAL) -> None:
        self.frame_interval = frame_interval
        self._tasks: dict[str, dict[Hashable, asyncio.Task]] = {}

    def begin(self, duration_ms: float, ease: Callable[[float], float] = ease_cubic_in_out) -> Transition:
        return Transition(self, duration_ms, ease)

    def pending(self, group: str | None = None) -> int:
        return len(self._live(group))

    def interrupt(self, group: str | None = None) -> int:
        """Cancel in-flight tweens (all groups by default). Returns the number cancelled."""
        tasks = self._live(group)
        for task in tasks:
            task.cancel()
        groups = [group] if group is not None else list(self._tasks)
        for name in groups:
            self._tasks.pop(name, None)
        if tasks:
            logger.debug("Interrupted %d in-flight tweens", len(tasks))
        return len(tasks)

    async def wait(self) -> None:
        """Wait until no tween is in flight."""
        while tasks := self._live():
            await asyncio.gather(*tasks, return_exceptions=True)

    def _live(self, group: str | None = None) -> list[asyncio.Task]:
        groups = [self._tasks.get(group, {})] if group is not None else list(self._tasks.values())
        return [task for tasks in groups for task in tasks.values() if not task.done()]

    def _track(self, group: str, key: Hashable, task: asyncio.Task) -> None:
        tasks = self._tasks.setdefault(group, {})
        previous = tasks.get(key)
        if previous is not None and not previous.done():
            previous.cancel()
        tasks[key] = task
        task.add_done_callback(lambda t: self._finished(group, key, t))

    def _finished(self, group: str, key: Hashable, task: asyncio.Task) -> None:
        tasks = self._tasks.get(group)
        if tasks is not None and tasks.get(key) is task:
            del tasks[key]
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Tween for %s[%r] failed", group, key, exc_info=exc)
