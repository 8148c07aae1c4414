#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Curve group and anchor point readers for the command line workflow.

Tabular files (.csv / .xlsx / .xls) carry one segment per row::

    group, section, x1, y1, z1, x2, y2, z2

``group`` and ``section`` are optional. Rows are grouped by ``group`` in order
of first appearance; the first non-empty ``section`` of a group labels its
cross section. Rows with an empty ``group`` form one group of their own.
JSON files hold a list of groups::

    [{"section": "HEB 200", "curves": [[[0, 0, 0], [0, 0, 3]], ...]}, ...]

where every curve is a polyline of two or more points.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from rstab_link.common.errors import ErrorCode, GeometryError
from rstab_link.common.utility_functions import Point3, as_point

Segment = Tuple[Point3, Point3]
CurveGroups = List[List[Any]]

_SEGMENT_COLUMNS = ("x1", "y1", "z1", "x2", "y2", "z2")
_POINT_COLUMNS = ("x", "y", "z")
_TABLE_SUFFIXES = (".csv", ".xlsx", ".xls")


def _read_table(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path)
    elif suffix in (".xlsx", ".xls"):
        df = pd.read_excel(path)
    else:
        raise ValueError(f"[curve_io] 不支持的表格文件类型: {path.suffix}")
    df.columns = [str(col).strip().lower() for col in df.columns]
    return df.dropna(how="all")


def _require_columns(df: pd.DataFrame, columns: Tuple[str, ...], path: Path) -> None:
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise ValueError(f"[curve_io] {path.name} 缺少列: {', '.join(missing)}")


def _cell_text(value: Any) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    # integer group ids read back as floats once a column has gaps
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _point(value: Any, path: Path) -> Point3:
    try:
        return as_point(value)
    except (TypeError, ValueError) as exc:
        raise GeometryError(f"[curve_io] {path.name} 坐标无效: {exc}", ErrorCode.LOCAL_NODE) from exc


def _groups_from_table(df: pd.DataFrame, path: Path) -> Tuple[CurveGroups, List[Optional[str]]]:
    _require_columns(df, _SEGMENT_COLUMNS, path)

    # rows without a group share the None key, which no named group can take
    groups: Dict[Optional[str], List[Segment]] = {}
    labels: Dict[Optional[str], Optional[str]] = {}
    for _, row in df.iterrows():
        key = _cell_text(row["group"]) if "group" in df.columns else None
        segment = (
            (float(row["x1"]), float(row["y1"]), float(row["z1"])),
            (float(row["x2"]), float(row["y2"]), float(row["z2"])),
        )
        groups.setdefault(key, []).append(segment)
        if labels.get(key) is None and "section" in df.columns:
            labels[key] = _cell_text(row["section"])

    ordered = list(groups)
    return [groups[key] for key in ordered], [labels.get(key) for key in ordered]


def _groups_from_json(data: Any, path: Path) -> Tuple[CurveGroups, List[Optional[str]]]:
    if isinstance(data, dict) and isinstance(data.get("groups"), list):
        data = data["groups"]
    if not isinstance(data, list):
        raise ValueError(f"[curve_io] 无法从 JSON 解析曲线分组: {path}")

    groups: CurveGroups = []
    labels: List[Optional[str]] = []
    for entry in data:
        if isinstance(entry, dict):
            curves = entry.get("curves", [])
            labels.append(entry.get("section") or None)
        else:
            curves = entry
            labels.append(None)
        groups.append([[_point(point, path) for point in curve] for curve in curves])
    return groups, labels


def load_curve_groups(path) -> Tuple[CurveGroups, List[Optional[str]]]:
    """Read curve groups and their cross-section labels from a table or JSON file."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        with path.open("r", encoding="utf-8") as f:
            return _groups_from_json(json.load(f), path)
    if path.suffix.lower() in _TABLE_SUFFIXES:
        return _groups_from_table(_read_table(path), path)
    raise ValueError(f"[curve_io] 不支持的曲线文件类型: {path.suffix}")


def load_anchor_points(path) -> List[Point3]:
    """Read support anchor points (``x, y, z`` columns, or a JSON list of triples)."""
    path = Path(path)
    if path.suffix.lower() == ".json":
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return [_point(point, path) for point in data]
    if path.suffix.lower() in _TABLE_SUFFIXES:
        df = _read_table(path)
        _require_columns(df, _POINT_COLUMNS, path)
        return [(float(row["x"]), float(row["y"]), float(row["z"])) for _, row in df.iterrows()]
    raise ValueError(f"[curve_io] 不支持的锚点文件类型: {path.suffix}")


__all__ = ["load_curve_groups", "load_anchor_points"]
