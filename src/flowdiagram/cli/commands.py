"""CLI commands: render, replay, inspect."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Annotated, Any

import typer

from flowdiagram.channel import DiagramChannel, run_channel
from flowdiagram.cli._format import format_number, print_json, print_lines, print_table
from flowdiagram.config import DiagramConfig, load_config
from flowdiagram.events.processor import TypedEventProcessor
from flowdiagram.events.types import FrameEndEvent
from flowdiagram.exceptions import DuplicateKeyError, InvalidGraphError, KeyStrategyError
from flowdiagram.graph.core import DiagramData
from flowdiagram.layout.engine import compute_layout
from flowdiagram.render.renderer import SankeyRenderer
from flowdiagram.render.surface import DrawingSurface


def _read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        print(f"Error: No such file: {source}")
        raise typer.Exit(1)
    return path.read_text()


def _parse_snapshot(text: str, where: str) -> DiagramData:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        print(f"Error: {where} is not valid JSON: {e}")
        raise typer.Exit(1) from e
    try:
        return DiagramData.from_dict(payload)
    except (KeyError, TypeError, ValueError) as e:
        print(f"Error: {where} is not a diagram snapshot: {e!r}")
        print('Hint: Expected {"nodes": [{"id": ...}], "links": [{"source": ..., "target": ..., "value": ...}]}')
        raise typer.Exit(1) from e


def _resolve_config(
    width: float | None,
    height: float | None,
    align: str | None,
    iterations: int | None,
    padding: float | None,
    key: str | None,
) -> DiagramConfig:
    """Command-line options override [tool.flowdiagram]; rendering is always static."""
    config = load_config().replace(
        width=width,
        height=height,
        align=align,
        iterations=iterations,
        node_padding=padding,
        node_key=key,
        duration_ms=0,
    )
    try:
        config.layout_config()
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(1) from e
    return config


class _FrameWriter(TypedEventProcessor):
    """Writes the surface to one SVG file per frame."""

    def __init__(self, surface: DrawingSurface, out_dir: Path) -> None:
        self._surface = surface
        self._out_dir = out_dir
        self.written: list[Path] = []

    def on_frame_end(self, event: FrameEndEvent) -> None:
        path = self._out_dir / f"frame-{event.frame_id:04d}.svg"
        path.write_text(self._surface.to_svg())
        self.written.append(path)


WidthOpt = Annotated[float | None, typer.Option("--width", help="Canvas width")]
HeightOpt = Annotated[float | None, typer.Option("--height", help="Canvas height")]
AlignOpt = Annotated[str | None, typer.Option("--align", help="justify, left, right or center")]
IterationsOpt = Annotated[int | None, typer.Option("--iterations", help="Relaxation passes")]
PaddingOpt = Annotated[float | None, typer.Option("--padding", help="Minimum gap between nodes")]
KeyOpt = Annotated[str | None, typer.Option("--key", help="Node identity key: id, title or an attribute")]


def register_commands(app: typer.Typer) -> None:
    """Register `render`, `replay` and `inspect` as top-level commands on the app."""

    @app.command("render")
    def render_cmd(
        source: Annotated[str, typer.Argument(help="Snapshot JSON file, or '-' for stdin")],
        output: Annotated[str | None, typer.Option("--output", "-o", help="Write SVG to file")] = None,
        width: WidthOpt = None,
        height: HeightOpt = None,
        align: AlignOpt = None,
        iterations: IterationsOpt = None,
        padding: PaddingOpt = None,
    ):
        """Render one snapshot to a static SVG."""
        data = _parse_snapshot(_read_text(source), source)
        config = _resolve_config(width, height, align, iterations, padding, None)
        renderer = SankeyRenderer(config)
        try:
            renderer.render(data)
        except (InvalidGraphError, DuplicateKeyError, KeyStrategyError, ValueError) as e:
            print(f"Error: {e}")
            raise typer.Exit(1) from e

        svg = renderer.to_svg()
        if output:
            Path(output).write_text(svg)
            print(f"Wrote {len(renderer.layout.nodes)} nodes and {len(renderer.layout.links)} links to {output}")
        else:
            print(svg)

    @app.command("replay")
    def replay_cmd(
        source: Annotated[str, typer.Argument(help="JSONL file with one snapshot per line, or '-'")],
        out_dir: Annotated[str | None, typer.Option("--out-dir", help="Write frame-NNNN.svg per snapshot")] = None,
        width: WidthOpt = None,
        height: HeightOpt = None,
        align: AlignOpt = None,
        key: KeyOpt = None,
    ):
        """Feed a stream of snapshots through one renderer and summarize each frame."""
        from flowdiagram.events.rich_frames import RichFrameProcessor

        snapshots = [
            _parse_snapshot(line, f"{source}:{lineno}")
            for lineno, line in enumerate(_read_text(source).splitlines(), start=1)
            if line.strip()
        ]
        config = _resolve_config(width, height, align, None, None, key)
        surface = DrawingSurface(config.width, config.height)
        summary = RichFrameProcessor()
        processors: list[Any] = [summary]
        writer = None
        if out_dir:
            directory = Path(out_dir)
            directory.mkdir(parents=True, exist_ok=True)
            writer = _FrameWriter(surface, directory)
            processors.append(writer)

        renderer = SankeyRenderer(config, surface=surface, event_processors=processors)
        rendered = asyncio.run(_replay(snapshots, renderer))
        renderer.close()

        print(f"\n  Rendered {rendered}/{len(snapshots)} snapshots")
        if writer is not None:
            print(f"  Wrote {len(writer.written)} SVG files to {out_dir}")
        if rendered < len(snapshots):
            raise typer.Exit(1)

    @app.command("inspect")
    def inspect_cmd(
        source: Annotated[str, typer.Argument(help="Snapshot JSON file, or '-' for stdin")],
        as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
        output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
        align: AlignOpt = None,
        iterations: IterationsOpt = None,
        padding: PaddingOpt = None,
    ):
        """Show the computed layout (columns, values, bounds)."""
        data = _parse_snapshot(_read_text(source), source)
        config = _resolve_config(None, None, align, iterations, padding, None)
        try:
            layout = compute_layout(data, config.layout_config())
        except (InvalidGraphError, ValueError) as e:
            print(f"Error: {e}")
            raise typer.Exit(1) from e

        if as_json:
            payload = {
                "nodes": [
                    {
                        "id": n.id,
                        "title": n.title,
                        "column": n.layer,
                        "value": n.value,
                        "bounds": [n.x0, n.y0, n.x1, n.y1],
                    }
                    for n in layout.nodes
                ],
                "links": [
                    {
                        "source": link.source,
                        "target": link.target,
                        "value": link.value,
                        "width": link.width,
                    }
                    for link in layout.links
                ],
            }
            print_json("inspect", payload, output)
            return

        if layout.is_empty:
            print("\n  Nothing to draw: the snapshot has no nodes or no links.")
            return

        columns = layout.columns()
        print(f"\nLayout: {len(layout.nodes)} nodes | {len(layout.links)} links | {len(columns)} columns\n")
        headers = ["Node", "Column", "Value", "x0", "y0", "x1", "y1"]
        rows = [
            [
                n.title,
                str(n.layer),
                format_number(n.value, 2),
                format_number(n.x0),
                format_number(n.y0),
                format_number(n.x1),
                format_number(n.y1),
            ]
            for column in columns
            for n in column
        ]
        print_lines(print_table(headers, rows))


async def _replay(snapshots: list[DiagramData], renderer: SankeyRenderer) -> int:
    channel = DiagramChannel()
    for data in snapshots:
        channel.send(data)
    channel.close()
    return await run_channel(channel, renderer)
