"""flowdiagram CLI: render and inspect flow diagrams.

Entry point for the `flowdiagram` command. Requires ``pip install flowdiagram[cli]``.

Commands:
    render    Render one JSON snapshot to a static SVG
    replay    Feed a JSONL stream of snapshots through one renderer
    inspect   Show the computed layout (columns, values, bounds)
"""

from __future__ import annotations


def _require_typer():
    """Check that typer is available."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install flowdiagram[cli]", file=sys.stderr)
        raise SystemExit(1) from None


def create_app():
    """Create the Typer app with all commands."""
    _require_typer()

    import typer

    from flowdiagram.cli.commands import register_commands

    app = typer.Typer(
        name="flowdiagram",
        help="Sankey flow diagram layout and rendering.",
        no_args_is_help=True,
    )
    register_commands(app)

    return app


def main():
    """CLI entry point."""
    app = create_app()
    app()
