"""Shared fixtures for flowdiagram tests."""

from __future__ import annotations

import pytest

from flowdiagram import DiagramData, NodeSpec, make_diagram

# =============================================================================
# Snapshots
# =============================================================================


def _split(ab: float = 6, ac: float = 4) -> DiagramData:
    return make_diagram(["A", "B", "C"], [("A", "B", ab), ("A", "C", ac)])


@pytest.fixture
def split():
    """Factory for the A -> B / A -> C snapshot with configurable flows."""
    return _split


@pytest.fixture
def split_data() -> DiagramData:
    return _split()


@pytest.fixture
def energy_data() -> DiagramData:
    """Small energy-flow graph: four columns, a skip link, an annotated node."""
    nodes = [
        NodeSpec(id="coal", title="Coal"),
        NodeSpec(id="gas", title="Gas"),
        NodeSpec(id="solar", title="Solar"),
        NodeSpec(id="power", title="Power plants"),
        NodeSpec(id="grid", title="Grid"),
        NodeSpec(id="homes", title="Homes", extra="Residential demand"),
        NodeSpec(id="industry", title="Industry"),
        NodeSpec(id="losses", title="Losses"),
    ]
    links = [
        ("coal", "power", 40),
        ("gas", "power", 30),
        ("solar", "grid", 10),
        ("power", "grid", 45),
        ("power", "losses", 25),
        ("grid", "homes", 30),
        ("grid", "industry", 25),
        ("gas", "industry", 5),
    ]
    return make_diagram(nodes, links)
