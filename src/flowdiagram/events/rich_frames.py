"""Rich console summary of rendered frames."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flowdiagram.events.processor import TypedEventProcessor

if TYPE_CHECKING:
    from flowdiagram.events.types import (
        ClearEvent,
        FrameEndEvent,
        InterruptEvent,
        RenderErrorEvent,
    )

_COLLECTIONS = ("nodes", "links", "labels")


def _require_rich() -> None:
    """Raise a clear error if rich is not installed."""
    try:
        import rich  # noqa: F401
    except ImportError:
        raise ImportError(
            "The 'rich' package is required for RichFrameProcessor. Install it with: pip install 'flowdiagram[cli]' or pip install rich"
        ) from None


def format_counts(counts: dict[str, int]) -> str:
    """Compact ``+entered ~updated -exited`` summary.

    Example:
        >>> format_counts({"entered": 2, "updated": 1, "exited": 0})
        '+2 ~1 -0'
    """
    return f"+{counts.get('entered', 0)} ~{counts.get('updated', 0)} -{counts.get('exited', 0)}"


class RichFrameProcessor(TypedEventProcessor):
    """Prints one line per frame to a Rich console.

    Args:
        console: Rich Console to print to (a new one on stderr by default).
    """

    def __init__(self, console: Any = None) -> None:
        _require_rich()
        if console is None:
            from rich.console import Console

            console = Console(stderr=True)
        self._console = console
        self.frames = 0
        self.errors = 0

    def on_frame_end(self, event: FrameEndEvent) -> None:
        self.frames += 1
        if event.cleared:
            return
        parts = [
            f"[bold]{name}[/bold] {format_counts(event.counts.get(name, {}))}"
            for name in _COLLECTIONS
        ]
        self._console.print(
            f"[cyan]frame {event.frame_id}[/cyan]  " + "  ".join(parts) + f"  [dim]{event.duration_ms:.1f}ms[/dim]"
        )

    def on_clear(self, event: ClearEvent) -> None:
        self._console.print(f"[cyan]frame {event.frame_id}[/cyan]  [yellow]cleared[/yellow] ({event.removed} elements)")

    def on_interrupt(self, event: InterruptEvent) -> None:
        self._console.print(f"[dim]frame {event.frame_id}: interrupted {event.cancelled} tweens[/dim]")

    def on_render_error(self, event: RenderErrorEvent) -> None:
        from rich.markup import escape

        self.errors += 1
        self._console.print(f"[red]frame {event.frame_id} failed:[/red] {escape(event.error)}")
