"""Tests for keyed reconciliation and identity key strategies."""

from __future__ import annotations

import pytest

from flowdiagram import DuplicateKeyError, KeyStrategyError, NodeSpec, compute_layout, make_diagram
from flowdiagram.render import KeyStrategy, by_attribute, by_id, by_title, key_by, reconcile, resolve_key_strategy

# ---------------------------------------------------------------------------
# reconcile
# ---------------------------------------------------------------------------


class TestReconcile:
    def test_three_way(self):
        diff = reconcile(["a", "b", "c"], ["c", "d", "b"])
        assert diff.entered == ("d",)
        assert diff.updated == ("c", "b")
        assert diff.exited == ("a",)

    def test_disjoint(self):
        diff = reconcile(["a", "b"], ["b", "c"])
        sets = [set(diff.entered), set(diff.updated), set(diff.exited)]
        assert not (sets[0] & sets[1] or sets[1] & sets[2] or sets[0] & sets[2])

    def test_identical_is_stable(self):
        diff = reconcile(["a", "b"], ["a", "b"])
        assert diff.is_stable
        assert diff.counts() == {"entered": 0, "updated": 2, "exited": 0}

    def test_from_empty(self):
        diff = reconcile([], ["a"])
        assert diff.entered == ("a",)
        assert not diff.is_stable

    def test_to_empty(self):
        assert reconcile(["a", "b"], []).exited == ("a", "b")

    def test_tuple_keys(self):
        diff = reconcile([("A", 0), ("A", 1)], [("A", 0)])
        assert diff.exited == (("A", 1),)


class TestKeyBy:
    def test_preserves_order(self):
        assert list(key_by(["bb", "a", "ccc"], len, "labels")) == [2, 1, 3]

    def test_duplicate_raises(self):
        with pytest.raises(DuplicateKeyError) as exc_info:
            key_by(["ab", "cd"], len, "nodes")
        assert exc_info.value.collection == "nodes"
        assert exc_info.value.key == 2
        assert "How to fix" in str(exc_info.value)


# ---------------------------------------------------------------------------
# Key strategies
# ---------------------------------------------------------------------------


@pytest.fixture
def tagged_layout():
    data = make_diagram(
        [
            NodeSpec("a1", title="Source", data={"production": "p-src"}),
            NodeSpec("b1", title="Sink", data={"production": "p-sink"}),
        ],
        [("a1", "b1", 3), ("a1", "b1", 1)],
    )
    return compute_layout(data)


class TestKeyStrategies:
    def test_by_id(self, tagged_layout):
        assert by_id(tagged_layout.node("a1")) == "a1"

    def test_by_title(self, tagged_layout):
        assert by_title(tagged_layout.node("a1")) == "Source"

    def test_by_attribute_reads_data(self, tagged_layout):
        key = by_attribute("production")
        assert key(tagged_layout.node("b1")) == "p-sink"
        assert key.__name__ == "by_production"

    def test_by_attribute_reads_fields(self, tagged_layout):
        assert by_attribute("color")(tagged_layout.node("a1")) == tagged_layout.node("a1").color

    def test_by_attribute_missing(self, tagged_layout):
        with pytest.raises(KeyStrategyError, match="no attribute or data entry 'nope'") as exc_info:
            by_attribute("nope")(tagged_layout.node("a1"))
        assert exc_info.value.node_id == "a1"
        assert exc_info.value.attribute == "nope"

    def test_link_key_uses_source_key_and_ordinal(self, tagged_layout):
        strategy = KeyStrategy(node=by_title)
        nodes = tagged_layout.node_map()
        keys = [strategy.link_key(link, nodes) for link in tagged_layout.links]
        assert keys == [("Source", 0), ("Source", 1)]

    def test_link_key_independent_of_target(self):
        before = compute_layout(make_diagram(["A", "B", "C"], [("A", "B", 1)]))
        after = compute_layout(make_diagram(["A", "B", "C"], [("A", "C", 1)]))
        strategy = KeyStrategy()
        assert strategy.link_key(before.links[0], before.node_map()) == strategy.link_key(
            after.links[0], after.node_map()
        )


class TestResolveKeyStrategy:
    def test_none_is_by_id(self):
        assert resolve_key_strategy(None).node is by_id

    def test_names(self):
        assert resolve_key_strategy("id").node is by_id
        assert resolve_key_strategy("title").node is by_title
        assert resolve_key_strategy("production").node.__name__ == "by_production"

    def test_callable(self):
        fn = lambda node: node.id.upper()  # noqa: E731
        assert resolve_key_strategy(fn).node is fn

    def test_pass_through(self):
        strategy = KeyStrategy(node=by_title)
        assert resolve_key_strategy(strategy) is strategy
