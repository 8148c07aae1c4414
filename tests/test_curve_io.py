"""Tests for reading curve groups and anchor points from files."""

import json

import pandas as pd
import pytest

from rstab_link.common.errors import ErrorCode, GeometryError
from rstab_link.geometry_modeling import build_graph, load_anchor_points, load_curve_groups


class TestCurveTables:
    def test_csv_groups_in_first_appearance_order(self, tmp_path):
        path = tmp_path / "frame.csv"
        path.write_text(
            "group,section,x1,y1,z1,x2,y2,z2\n"
            "col,HEB 200,0,0,0,0,0,3\n"
            "beam,IPE 300,0,0,3,4,0,3\n"
            "col,,4,0,0,4,0,3\n",
            encoding="utf-8",
        )
        groups, labels = load_curve_groups(path)
        assert labels == ["HEB 200", "IPE 300"]
        assert [len(g) for g in groups] == [2, 1]
        assert groups[0][1] == ((4.0, 0.0, 0.0), (4.0, 0.0, 3.0))

    def test_csv_without_group_column_is_one_group(self, tmp_path):
        path = tmp_path / "bars.csv"
        path.write_text("X1,Y1,Z1,X2,Y2,Z2\n0,0,0,1,0,0\n1,0,0,2,0,0\n", encoding="utf-8")
        groups, labels = load_curve_groups(path)
        assert len(groups) == 1
        assert labels == [None]
        assert len(build_graph(groups, labels).nodes) == 3

    def test_rows_without_group_do_not_join_group_one(self, tmp_path):
        path = tmp_path / "mixed.csv"
        path.write_text(
            "group,section,x1,y1,z1,x2,y2,z2\n"
            "1,HEB 200,0,0,0,0,0,3\n"
            ",IPE 300,0,0,3,4,0,3\n"
            "1,,4,0,0,4,0,3\n",
            encoding="utf-8",
        )
        groups, labels = load_curve_groups(path)
        assert labels == ["HEB 200", "IPE 300"]
        assert [len(g) for g in groups] == [2, 1]

    def test_excel(self, tmp_path):
        path = tmp_path / "frame.xlsx"
        pd.DataFrame(
            [{"group": 1, "section": "SHS 100", "x1": 0, "y1": 0, "z1": 0, "x2": 0, "y2": 0, "z2": 3}]
        ).to_excel(path, index=False)
        groups, labels = load_curve_groups(path)
        assert labels == ["SHS 100"]
        assert groups == [[((0.0, 0.0, 0.0), (0.0, 0.0, 3.0))]]

    def test_missing_columns(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("x1,y1,z1\n0,0,0\n", encoding="utf-8")
        with pytest.raises(ValueError, match="x2"):
            load_curve_groups(path)


class TestCurveJson:
    def test_groups_with_sections(self, tmp_path):
        path = tmp_path / "frame.json"
        data = {
            "groups": [
                {"section": "HEB 200", "curves": [[[0, 0, 0], [0, 0, 1.5], [0, 0, 3]]]},
                {"curves": [[[0, 0, 3], [4, 0, 3]]]},
            ]
        }
        path.write_text(json.dumps(data), encoding="utf-8")
        groups, labels = load_curve_groups(path)
        assert labels == ["HEB 200", None]
        graph = build_graph(groups, labels)
        assert len(graph.nodes) == 3
        assert graph.edges[0].end.point == (0.0, 0.0, 3.0)

    def test_plain_lists(self, tmp_path):
        path = tmp_path / "plain.json"
        path.write_text(json.dumps([[[[0, 0, 0], [1, 0, 0]]]]), encoding="utf-8")
        groups, labels = load_curve_groups(path)
        assert labels == [None]
        assert len(groups[0]) == 1

    def test_bad_point_is_node_error(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps([[[[0, 0], [1, 0, 0]]]]), encoding="utf-8")
        with pytest.raises(GeometryError) as info:
            load_curve_groups(path)
        assert info.value.code == ErrorCode.LOCAL_NODE

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "frame.dxf"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError):
            load_curve_groups(path)


class TestAnchorPoints:
    def test_csv(self, tmp_path):
        path = tmp_path / "anchors.csv"
        path.write_text("x,y,z\n0,0,0\n4,0,0\n", encoding="utf-8")
        assert load_anchor_points(path) == [(0.0, 0.0, 0.0), (4.0, 0.0, 0.0)]

    def test_json(self, tmp_path):
        path = tmp_path / "anchors.json"
        path.write_text(json.dumps([[0, 0, 0], [4, 0, 0.5]]), encoding="utf-8")
        assert load_anchor_points(path) == [(0.0, 0.0, 0.0), (4.0, 0.0, 0.5)]

    def test_anchor_table_needs_xyz(self, tmp_path):
        path = tmp_path / "anchors.csv"
        path.write_text("x,y\n0,0\n", encoding="utf-8")
        with pytest.raises(ValueError, match="z"):
            load_anchor_points(path)
