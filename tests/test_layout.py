"""Tests for the Sankey layout engine."""

from __future__ import annotations

import logging
import random

import pytest

from flowdiagram import InvalidGraphError, LayoutConfig, NodeSpec, compute_layout, make_diagram
from flowdiagram.graph.core import DiagramData, LinkSpec
from flowdiagram.layout import horizontal_link_path, link_path
from flowdiagram.layout.align import NodeRank, center, justify, left, resolve_alignment, right
from flowdiagram.layout.engine import _build_frame, _slot_order
from flowdiagram.styles import CATEGORY10, color_for

TOL = 1e-5


def _gaps(layout):
    """Vertical gaps between consecutive nodes of every column."""
    gaps = []
    for column in layout.columns():
        for upper, lower in zip(column, column[1:]):
            gaps.append(lower.y0 - upper.y1)
    return gaps


def _random_dag(seed: int, n_nodes: int = 14, n_links: int = 24) -> DiagramData:
    rng = random.Random(seed)
    ids = [f"n{i}" for i in range(n_nodes)]
    links = []
    seen = set()
    while len(links) < n_links:
        a, b = sorted(rng.sample(range(n_nodes), 2))
        if (a, b) in seen:
            continue
        seen.add((a, b))
        links.append((ids[a], ids[b], rng.randint(1, 20)))
    return make_diagram(ids, links)


# ---------------------------------------------------------------------------
# Concrete scenario
# ---------------------------------------------------------------------------


class TestSplitScenario:
    def test_columns(self, split_data):
        layout = compute_layout(split_data)
        a, b, c = (layout.node(i) for i in "ABC")
        assert a.layer == 0
        assert b.layer == c.layer == 1
        assert a.x0 == pytest.approx(1)
        assert a.x1 == pytest.approx(16)
        assert b.x0 == pytest.approx(953 - 15)
        assert b.x1 == pytest.approx(953)

    def test_link_widths_proportional(self, split_data):
        layout = compute_layout(split_data)
        ab, ac = layout.links
        assert ab.width / ac.width == pytest.approx(6 / 4)

    def test_values_from_flows(self, split_data):
        layout = compute_layout(split_data)
        assert layout.node("A").value == 10
        assert layout.node("B").value == 6
        assert layout.node("C").value == 4

    def test_vertical_scale(self, split_data):
        # Second column is the tightest: (590 - 100) / 10
        layout = compute_layout(split_data)
        a = layout.node("A")
        assert a.y1 - a.y0 == pytest.approx(490)
        assert layout.links[0].width == pytest.approx(6 * 49)

    def test_depth_and_height(self, split_data):
        layout = compute_layout(split_data)
        assert (layout.node("A").depth, layout.node("A").height) == (0, 1)
        assert (layout.node("B").depth, layout.node("B").height) == (1, 0)

    def test_ordinals_follow_input_order(self, split_data):
        layout = compute_layout(split_data)
        assert [link.ordinal for link in layout.links] == [0, 1]


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


class TestProperties:
    def test_deterministic(self, energy_data):
        assert compute_layout(energy_data) == compute_layout(energy_data)

    @pytest.mark.parametrize("seed", range(5))
    def test_conservation(self, seed):
        data = _random_dag(seed)
        layout = compute_layout(data)
        for node in layout.nodes:
            inflow = sum(link.value for link in layout.incoming(node.id))
            outflow = sum(link.value for link in layout.outgoing(node.id))
            assert node.value == pytest.approx(max(inflow, outflow))

    @pytest.mark.parametrize("seed", range(5))
    def test_no_overlap(self, seed):
        config = LayoutConfig(node_padding=10)
        layout = compute_layout(_random_dag(seed), config)
        for gap in _gaps(layout):
            assert gap >= 10 - TOL

    def test_no_overlap_energy(self, energy_data):
        layout = compute_layout(energy_data, LayoutConfig(node_padding=20))
        assert all(gap >= 20 - TOL for gap in _gaps(layout))

    @pytest.mark.parametrize("seed", range(3))
    def test_nodes_inside_extent(self, seed):
        config = LayoutConfig(extent=((0, 0), (500, 300)), node_padding=8)
        layout = compute_layout(_random_dag(seed), config)
        for node in layout.nodes:
            assert node.x0 >= 0 - TOL and node.x1 <= 500 + TOL
            assert node.y0 >= 0 - TOL and node.y1 <= 300 + TOL
            assert node.y1 > node.y0

    def test_link_bands_fill_nodes(self, energy_data):
        layout = compute_layout(energy_data)
        power = layout.node("power")
        out = layout.outgoing("power")
        assert out[0].y0 - out[0].width / 2 == pytest.approx(power.y0)
        assert out[-1].y0 + out[-1].width / 2 == pytest.approx(power.y1)

    def test_outgoing_slots_sorted_by_target(self, energy_data):
        layout = compute_layout(energy_data)
        targets = [layout.node(link.target).y0 for link in layout.outgoing("power")]
        assert targets == sorted(targets)

    def test_slot_order_follows_opposite_ends(self):
        data = make_diagram(
            ["S", "X", "Y", "T"],
            [("S", "X", 1), ("S", "Y", 1), ("X", "T", 1), ("Y", "T", 1)],
        )
        frame = _build_frame(
            data,
            ["S", "X", "Y", "T"],
            {"S": 2, "X": 1, "Y": 1, "T": 2},
            {"S": 0, "X": 1, "Y": 1, "T": 2},
            (("S",), ("X", "Y"), ("T",)),
            1.0,
            0.0,
            0.0,
            10.0,
        )
        slots = _slot_order(frame, {"S": 0, "X": 5, "Y": 1, "T": 0})
        assert slots.out["S"] == (1, 0)
        assert slots.incoming["T"] == (3, 2)
        # Equal positions fall back to input order
        assert _slot_order(frame, {"S": 0, "X": 1, "Y": 1, "T": 0}).out["S"] == (0, 1)

    def test_zero_iterations(self, energy_data):
        layout = compute_layout(energy_data, LayoutConfig(iterations=0, node_padding=10))
        assert all(gap >= 10 - TOL for gap in _gaps(layout))

    def test_padding_is_capped_by_extent(self):
        # 5 nodes in one column with padding 1000 would not fit
        data = make_diagram(
            ["s", "a", "b", "c", "d", "e"],
            [("s", t, 1) for t in "abcde"],
        )
        config = LayoutConfig(extent=((0, 0), (100, 200)), node_padding=1000)
        layout = compute_layout(data, config)
        assert all(node.y1 > node.y0 for node in layout.nodes)
        assert all(node.y1 <= 200 + TOL for node in layout.nodes)

    def test_padding_fallback_warns(self, caplog):
        data = make_diagram(["s", "a", "b"], [("s", "a", 1), ("s", "b", 1)])
        config = LayoutConfig(extent=((0, 0), (100, 100)), node_padding=1000)
        with caplog.at_level(logging.WARNING, logger="flowdiagram.layout.engine"):
            layout = compute_layout(data, config)
        assert "leaves no room" in caplog.text
        a, b = layout.node("a"), layout.node("b")
        assert a.y1 > a.y0 and b.y1 > b.y0


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------


class TestEdgeCases:
    def test_empty_snapshot(self):
        layout = compute_layout(DiagramData.empty())
        assert layout.is_empty
        assert layout.nodes == ()

    def test_nodes_without_links(self):
        assert compute_layout(make_diagram(["A", "B"], [])).is_empty

    def test_links_without_nodes(self):
        assert compute_layout(DiagramData(links=(LinkSpec("A", "B", 1),))).is_empty

    def test_cycle_raises(self):
        data = make_diagram(["A", "B"], [("A", "B", 1), ("B", "A", 1)])
        with pytest.raises(InvalidGraphError):
            compute_layout(data)

    def test_isolated_node_is_skipped(self):
        data = make_diagram(["A", "B", "lonely"], [("A", "B", 1)])
        layout = compute_layout(data)
        assert [n.id for n in layout.nodes] == ["A", "B"]

    def test_isolated_node_with_fixed_value_is_kept(self):
        data = make_diagram(["A", "B", NodeSpec("lonely", fixed_value=2)], [("A", "B", 1)])
        layout = compute_layout(data)
        lonely = layout.node("lonely")
        assert lonely.value == 2
        assert lonely.y1 > lonely.y0

    def test_fixed_value_overrides_flow(self):
        data = make_diagram([NodeSpec("A", fixed_value=20), "B"], [("A", "B", 5)])
        layout = compute_layout(data)
        assert layout.node("A").value == 20
        assert layout.node("B").value == 5

    def test_parallel_links(self):
        data = make_diagram(["A", "B"], [("A", "B", 2), ("A", "B", 3)])
        layout = compute_layout(data)
        assert layout.node("B").value == 5
        assert [link.ordinal for link in layout.links] == [0, 1]

    def test_chain_spans_columns(self):
        layout = compute_layout(make_diagram(["A", "B", "C"], [("A", "B", 1), ("B", "C", 1)]))
        assert [layout.node(i).layer for i in "ABC"] == [0, 1, 2]


class TestLayoutConfig:
    def test_defaults_match_canvas(self):
        config = LayoutConfig()
        assert config.extent == ((1.0, 5.0), (953.0, 595.0))
        assert config.node_width == 15
        assert config.node_padding == 100
        assert config.iterations == 100

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"extent": ((0, 0), (10, 100)), "node_width": 15},
            {"node_width": 0},
            {"node_padding": -1},
            {"iterations": -1},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ValueError):
            LayoutConfig(**kwargs)

    def test_unknown_alignment_rejected_at_construction(self):
        with pytest.raises(ValueError, match="Unknown alignment 'diagonal'"):
            LayoutConfig(align="diagonal")

    def test_callable_alignment_accepted(self):
        assert callable(LayoutConfig(align=lambda rank, n: 0).align)


# ---------------------------------------------------------------------------
# Alignment
# ---------------------------------------------------------------------------


def _skip_graph() -> DiagramData:
    # X is a source whose only target sits in the last column
    return make_diagram(
        ["A", "B", "C", "X"],
        [("A", "B", 2), ("B", "C", 2), ("X", "C", 1)],
    )


class TestAlignment:
    def test_justify_pushes_sinks_right(self):
        data = make_diagram(["A", "B", "C", "D"], [("A", "B", 1), ("B", "C", 1), ("A", "D", 1)])
        layout = compute_layout(data)
        assert layout.node("D").layer == 2

    def test_left_uses_depth(self):
        data = make_diagram(["A", "B", "C", "D"], [("A", "B", 1), ("B", "C", 1), ("A", "D", 1)])
        layout = compute_layout(data, LayoutConfig(align="left"))
        assert layout.node("D").layer == 1

    def test_right_uses_height(self):
        layout = compute_layout(_skip_graph(), LayoutConfig(align="right"))
        assert layout.node("X").layer == 1

    def test_center_moves_sources_next_to_target(self):
        layout = compute_layout(_skip_graph(), LayoutConfig(align="center"))
        assert layout.node("X").layer == 1
        assert layout.node("A").layer == 0

    def test_custom_callable(self, split_data):
        layout = compute_layout(split_data, LayoutConfig(align=lambda rank, n: 0))
        # Everything clamps into column 0, which then holds all nodes
        assert {n.layer for n in layout.nodes} == {0}

    def test_functions(self):
        source = NodeRank(depth=0, height=2, has_incoming=False, has_outgoing=True, min_target_depth=2)
        sink = NodeRank(depth=1, height=0, has_incoming=True, has_outgoing=False)
        assert left(source, 3) == 0
        assert right(source, 3) == 0
        assert justify(sink, 3) == 2
        assert center(source, 3) == 1
        assert center(sink, 3) == 1

    def test_resolve_passes_callables(self):
        assert resolve_alignment(left) is left
        assert resolve_alignment("center") is center


# ---------------------------------------------------------------------------
# Paths and colors
# ---------------------------------------------------------------------------


class TestPaths:
    def test_horizontal_path(self):
        assert horizontal_link_path(0, 10, 100, 50) == "M0,10C50,10,50,50,100,50"

    def test_fractional_coordinates(self):
        assert horizontal_link_path(0.5, 1.25, 10, 2) == "M0.5,1.25C5.25,1.25,5.25,2,10,2"

    def test_link_path_uses_node_edges(self, split_data):
        layout = compute_layout(split_data)
        link = layout.links[0]
        d = link_path(link, layout.node("A"), layout.node("B"))
        assert d.startswith("M16,")
        assert d.rsplit(",", 2)[1] == "938"


class TestPalette:
    def test_stable(self):
        assert color_for("A") == color_for("A")
        assert color_for("A") in CATEGORY10

    def test_producer_color_wins(self):
        data = make_diagram([NodeSpec("A", color="#000000"), "B"], [("A", "B", 1)])
        layout = compute_layout(data)
        assert layout.node("A").color == "#000000"
        assert layout.node("B").color == color_for("B")
