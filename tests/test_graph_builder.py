"""Tests for building structural graphs from curve groups."""

from types import SimpleNamespace

import pytest

from rstab_link.common.errors import ErrorCode, GeometryError
from rstab_link.geometry_modeling import GraphBuilder, build_graph, curve_endpoints
from rstab_link.model import Node, StructuralGraph


def _bar(start, end):
    return SimpleNamespace(start=start, end=end)


class TestScenarios:
    def test_two_collinear_bars_share_middle_node(self, two_bar_groups):
        graph = build_graph(two_bar_groups, tolerance=0.01)
        assert len(graph.nodes) == 3
        assert len(graph.edges) == 2
        assert graph.edges[0].cross_section is graph.edges[1].cross_section
        assert graph.edges[0].end is graph.edges[1].start

    def test_disjoint_curves_give_two_nodes_each(self):
        curves = [((i * 10.0, 0, 0), (i * 10.0, 0, 3)) for i in range(5)]
        graph = build_graph([curves], tolerance=0.01)
        assert len(graph.nodes) == 10
        assert len(graph.edges) == 5

    def test_node_ids_are_unique_and_sequential(self):
        curves = [((0, 0, 0), (1, 0, 0)), ((1, 0, 0), (1, 1, 0)), ((1, 1, 0), (0, 0, 0))]
        graph = build_graph([curves])
        assert [n.id for n in graph.nodes] == [1, 2, 3]
        assert [e.id for e in graph.edges] == [1, 2, 3]


class TestTolerance:
    def test_distance_equal_to_tolerance_merges(self):
        graph = build_graph([[((0, 0, 0), (0.5, 0, 0)), ((0.5, 0, 0), (1.0, 0, 0))]], tolerance=0.5)
        # (0,0,0)~(0.5,0,0) at exactly 0.5 collapses the first bar
        assert graph.edges[0].start is graph.edges[0].end

    def test_distance_above_tolerance_keeps_nodes_apart(self):
        graph = build_graph([[((0, 0, 0), (1, 0, 0)), ((1.02, 0, 0), (2, 0, 0))]], tolerance=0.01)
        assert len(graph.nodes) == 4

    @pytest.mark.parametrize("tolerance", [None, 0, -1.0])
    def test_non_positive_tolerance_uses_model_default(self, tolerance, two_bar_groups):
        builder = GraphBuilder(tolerance=tolerance)
        assert builder.tolerance == 0.001
        graph = builder.build(two_bar_groups)
        assert len(graph.nodes) == 3

    def test_degenerate_curve_is_kept(self):
        graph = build_graph([[((1, 1, 1), (1, 1, 1.0001))]], tolerance=0.01)
        assert len(graph.nodes) == 1
        assert len(graph.edges) == 1
        assert graph.edges[0].start is graph.edges[0].end


class TestCrossSections:
    def test_one_section_per_group_with_labels(self):
        groups = [[((0, 0, 0), (0, 0, 3))], [((0, 0, 3), (4, 0, 3))], [((4, 0, 3), (4, 0, 0))]]
        graph = build_graph(groups, ["HEB 200", None, ""])
        assert [cs.id for cs in graph.cross_sections] == [1, 2, 3]
        assert [cs.description for cs in graph.cross_sections] == ["HEB 200", "IPE 100", "IPE 100"]
        assert all(cs.material is graph.materials[0] for cs in graph.cross_sections)

    def test_group_number_when_no_fallback(self):
        builder = GraphBuilder(fallback_description=None)
        graph = builder.build([[((0, 0, 0), (1, 0, 0))], [((5, 0, 0), (6, 0, 0))]])
        assert [cs.description for cs in graph.cross_sections] == ["1", "2"]

    def test_empty_group_still_gets_a_section(self):
        graph = build_graph([[], [((0, 0, 0), (1, 0, 0))]])
        assert len(graph.cross_sections) == 2
        assert graph.edges[0].cross_section.id == 2

    def test_default_material_created(self):
        graph = build_graph([[((0, 0, 0), (1, 0, 0))]])
        assert [(m.id, m.description) for m in graph.materials] == [(1, "Steel St 37")]


class TestDeduplicate:
    def test_reverse_duplicate_skipped_when_enabled(self):
        curves = [((0, 0, 0), (1, 0, 0)), ((1, 0, 0), (0, 0, 0)), ((1, 0, 0), (2, 0, 0))]
        builder = GraphBuilder(deduplicate=True)
        graph = builder.build([curves])
        assert len(graph.edges) == 2
        assert [e.id for e in graph.edges] == [1, 2]
        assert builder.skipped == 1

    def test_duplicates_kept_by_default(self):
        curves = [((0, 0, 0), (1, 0, 0)), ((1, 0, 0), (0, 0, 0))]
        assert len(build_graph([curves]).edges) == 2


class TestExistingGraph:
    def test_reuses_existing_nodes_and_continues_ids(self):
        graph = StructuralGraph.with_default_material()
        origin = graph.add_node(Node(7, 0.0, 0.0, 0.0))
        build_graph([[((0, 0, 0), (0, 0, 3))]], graph=graph)
        assert graph.edges[0].start is origin
        assert graph.edges[0].end.id == 8


class TestCurveInputs:
    def test_start_end_objects_with_xyz_points(self):
        point = lambda x, y, z: SimpleNamespace(X=x, Y=y, Z=z)  # noqa: E731
        curve = SimpleNamespace(PointAtStart=point(0, 0, 0), PointAtEnd=point(1, 2, 3))
        assert curve_endpoints(curve) == ((0.0, 0.0, 0.0), (1.0, 2.0, 3.0))

    def test_polyline_uses_first_and_last_point(self):
        assert curve_endpoints([(0, 0, 0), (1, 0, 0), (2, 0, 0)]) == ((0.0, 0.0, 0.0), (2.0, 0.0, 0.0))

    def test_bar_objects(self):
        graph = build_graph([[_bar((0, 0, 0), (1, 0, 0))]])
        assert graph.edges[0].end.point == (1.0, 0.0, 0.0)

    def test_short_polyline_raises_line_error(self):
        with pytest.raises(GeometryError) as info:
            curve_endpoints([(0, 0, 0)])
        assert info.value.code == ErrorCode.LOCAL_LINE

    def test_bad_point_raises_node_error(self):
        with pytest.raises(GeometryError) as info:
            curve_endpoints([(0, 0), (1, 0, 0)])
        assert info.value.code == ErrorCode.LOCAL_NODE

    def test_unsupported_curve_type(self):
        with pytest.raises(GeometryError):
            build_graph([[42]])
