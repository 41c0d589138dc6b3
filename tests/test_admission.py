"""Unit tests for node admission decisions and node transforms.

Covers the short-circuit order of AdmissionFilter.evaluate, property
exclusion, per-type summarization and the size estimator.
"""

import copy
import sys
import unittest
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from figmachunk import TraversalConfig, TraversalSession, AdmissionFilter, SkipReason
from figmachunk.core import FigmaNode, estimate_node_size, filter_properties, summarize_node
from figmachunk.core.admission import DEFAULT_TEXT_STYLE
from figmachunk.testing import make_frame, make_node, make_text


def unbounded(**kwargs) -> TraversalConfig:
    return TraversalConfig(max_memory_mb=None, max_response_size_mb=None, **kwargs)


class TestDecisionOrder(unittest.TestCase):
    """Test the short-circuit checks of AdmissionFilter.evaluate."""

    def setUp(self):
        self.session = TraversalSession()

    def test_admits_plain_node(self):
        node = FigmaNode(make_frame("f1"))
        decision = AdmissionFilter(unbounded(), self.session).evaluate(node, 0)

        self.assertTrue(decision.admitted)
        self.assertEqual(decision.node["id"], "f1")
        self.assertTrue(self.session.has_seen("f1"))
        self.assertAlmostEqual(self.session.current_size, decision.size)

    def test_duplicate_is_skipped(self):
        node = FigmaNode(make_frame("f1"))
        admission = AdmissionFilter(unbounded(), self.session)

        self.assertTrue(admission.evaluate(node, 0).admitted)
        second = admission.evaluate(node, 0)

        self.assertFalse(second.admitted)
        self.assertEqual(second.reason, SkipReason.DUPLICATE)

    def test_duplicate_skipped_across_config_changes(self):
        node = FigmaNode(make_text("t1", characters="hi"))
        AdmissionFilter(unbounded(), self.session).evaluate(node, 0)

        other = AdmissionFilter(unbounded(summarize_nodes=True, node_types={"TEXT"}), self.session)
        self.assertEqual(other.evaluate(node, 0).reason, SkipReason.DUPLICATE)

    def test_type_filter(self):
        admission = AdmissionFilter(unbounded(node_types={"TEXT"}), self.session)

        self.assertEqual(admission.evaluate(FigmaNode(make_frame("f1")), 0).reason,
                         SkipReason.TYPE_FILTERED)
        self.assertTrue(admission.evaluate(FigmaNode(make_text("t1")), 0).admitted)

    def test_depth_filter(self):
        admission = AdmissionFilter(unbounded(max_depth=1), self.session)

        self.assertTrue(admission.evaluate(FigmaNode(make_frame("a")), 1).admitted)
        self.assertEqual(admission.evaluate(FigmaNode(make_frame("b")), 2).reason,
                         SkipReason.TOO_DEEP)

    def test_dedup_checked_before_type(self):
        node = FigmaNode(make_frame("f1"))
        AdmissionFilter(unbounded(), self.session).evaluate(node, 0)

        decision = AdmissionFilter(unbounded(node_types={"TEXT"}), self.session).evaluate(node, 0)
        self.assertEqual(decision.reason, SkipReason.DUPLICATE)

    def test_over_budget_is_not_charged(self):
        raw = make_text("big", characters="x" * 4096)
        size = estimate_node_size(raw)
        config = TraversalConfig(max_memory_mb=size / 2, max_response_size_mb=None)

        decision = AdmissionFilter(config, self.session).evaluate(FigmaNode(raw), 0)

        self.assertEqual(decision.reason, SkipReason.OVER_BUDGET)
        self.assertEqual(decision.size, size)
        self.assertEqual(self.session.current_size, 0)
        self.assertFalse(self.session.has_seen("big"))

    def test_node_fitting_budget_exactly_is_admitted(self):
        raw = make_frame("exact")
        size = estimate_node_size(raw)
        config = TraversalConfig(max_memory_mb=size, max_response_size_mb=None)

        decision = AdmissionFilter(config, self.session).evaluate(FigmaNode(raw), 0)

        self.assertTrue(decision.admitted)
        self.assertTrue(self.session.has_reached(config.effective_budget_mb))


class TestPropertyExclusion(unittest.TestCase):
    """Test excludeProps handling."""

    def test_excluded_keys_removed(self):
        raw = make_frame("f1", fills=[{"type": "SOLID"}], strokes=[])
        filtered = filter_properties(raw, frozenset({"fills"}))

        self.assertNotIn("fills", filtered)
        self.assertIn("strokes", filtered)

    def test_id_and_type_always_kept(self):
        raw = make_frame("f1", fills=[])
        config = unbounded(exclude_props={"id", "type", "name", "fills"})

        decision = AdmissionFilter(config, TraversalSession()).evaluate(FigmaNode(raw), 0)

        self.assertEqual(decision.node["id"], "f1")
        self.assertEqual(decision.node["type"], "FRAME")
        self.assertNotIn("name", decision.node)
        self.assertNotIn("fills", decision.node)

    def test_source_node_not_mutated(self):
        raw = make_frame("f1", fills=[{"type": "SOLID"}], children=[make_text("t1")])
        before = copy.deepcopy(raw)

        config = unbounded(exclude_props={"fills"}, summarize_nodes=True)
        AdmissionFilter(config, TraversalSession()).evaluate(FigmaNode(raw), 0)

        self.assertEqual(raw, before)


class TestSummarization(unittest.TestCase):
    """Test per-type summary shapes."""

    def test_component_keeps_minimal_shape(self):
        raw = make_node(
            "COMPONENT", "c1", name="Button",
            componentId="comp-42",
            fills=[{"type": "SOLID"}],
            strokes=[],
            effects=[],
            absoluteBoundingBox={"x": 0, "y": 0, "width": 10, "height": 10},
            exportSettings=[],
            children=[make_text("c1-label"), make_node("VECTOR", "c1-icon")],
        )

        decision = AdmissionFilter(unbounded(summarize_nodes=True),
                                   TraversalSession()).evaluate(FigmaNode(raw), 0)
        summary = decision.node

        self.assertEqual(set(summary),
                         {"id", "name", "visible", "type", "children", "componentId"})
        self.assertEqual(summary["componentId"], "comp-42")
        self.assertTrue(summary["visible"])
        self.assertEqual([c["id"] for c in summary["children"]], ["c1-label", "c1-icon"])

    def test_text_gets_default_style(self):
        raw = make_text("t1", characters="Hello", style={"fontFamily": "Roboto"}, fills=[])
        summary = summarize_node(raw)

        self.assertEqual(summary["characters"], "Hello")
        self.assertEqual(summary["style"], DEFAULT_TEXT_STYLE)
        self.assertNotIn("fills", summary)

    def test_frame_drops_visuals(self):
        raw = make_frame("f1", fills=[{"type": "SOLID"}], visible=False)
        summary = summarize_node(raw)

        self.assertEqual(summary["background"], [])
        self.assertEqual(summary["children"], [])
        self.assertFalse(summary["visible"])
        self.assertNotIn("fills", summary)

    def test_type_specific_defaults(self):
        self.assertEqual(summarize_node(make_node("STAR", "s"))["pointCount"], 5)
        self.assertEqual(
            summarize_node(make_node("BOOLEAN_OPERATION", "b", children=[]))["booleanOperation"],
            "UNION")
        self.assertEqual(
            summarize_node(make_node("CANVAS", "p", children=[]))["backgroundColor"],
            {"r": 1, "g": 1, "b": 1, "a": 1})
        self.assertEqual(set(summarize_node(make_node("LINE", "l", strokeWeight=2))),
                         {"id", "name", "visible", "type"})

    def test_unknown_type_falls_back_to_base_shape(self):
        leaf = summarize_node(make_node("SLICE", "s1", exportSettings=[]))
        self.assertEqual(set(leaf), {"id", "name", "visible", "type"})
        self.assertEqual(leaf["type"], "SLICE")

        container = summarize_node(make_node("SECTION", "s2", children=[make_frame("x")]))
        self.assertEqual([c["id"] for c in container["children"]], ["x"])

    def test_missing_name_becomes_empty(self):
        summary = summarize_node({"id": "n", "type": "VECTOR"})
        self.assertEqual(summary["name"], "")


class TestSizeEstimate(unittest.TestCase):
    """Test the size estimator."""

    def test_deterministic_across_key_order(self):
        a = {"id": "1", "type": "FRAME", "name": "x"}
        b = {"name": "x", "type": "FRAME", "id": "1"}
        self.assertEqual(estimate_node_size(a), estimate_node_size(b))

    def test_counts_utf8_bytes(self):
        self.assertEqual(estimate_node_size({"c": "é"}) * 1024 * 1024, len('{"c":"é"}'.encode("utf-8")))

    def test_grows_with_content(self):
        small = make_text("t", characters="a")
        large = make_text("t", characters="a" * 100)
        self.assertLess(estimate_node_size(small), estimate_node_size(large))


if __name__ == "__main__":
    unittest.main()
