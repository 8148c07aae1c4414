#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Structural graph export (nodes/members) to .npz snapshots, CSV tables and Excel."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from rstab_link.common.config import SETTINGS
from rstab_link.geometry_modeling.views import edge_index, node_array
from rstab_link.model.structure import StructuralGraph

EDGE_FIELDS = ["length_m", "cross_section_no"]


def _edge_features(graph: StructuralGraph) -> np.ndarray:
    default_section = SETTINGS.defaults.cross_section_id
    rows: List[List[float]] = []
    for edge in graph.edges:
        section_no = edge.cross_section.id if edge.cross_section is not None else default_section
        rows.append([float(edge.length), float(section_no)])
    if not rows:
        return np.zeros((0, len(EDGE_FIELDS)), dtype=np.float64)
    return np.asarray(rows, dtype=np.float64)


def _section_label(edge) -> Optional[str]:
    return edge.cross_section.description if edge.cross_section is not None else None


def save_graph_snapshot(graph: StructuralGraph, out_path) -> Path:
    """
    Save node coordinates, member connectivity and member features to an .npz file.

    Companion ``<stem>_nodes.csv`` / ``<stem>_edges.csv`` files are written next
    to it for quick inspection.

    Returns:
        Path to the saved .npz file.
    """
    out_path = Path(out_path)
    if out_path.suffix.lower() != ".npz":
        out_path = out_path.with_suffix(".npz")
    out_path.parent.mkdir(parents=True, exist_ok=True)

    coords = node_array(graph)
    index = edge_index(graph)
    edge_features = _edge_features(graph)
    node_id_arr = np.asarray([node.id for node in graph.nodes], dtype=np.int64)
    member_id_arr = np.asarray([edge.id for edge in graph.edges], dtype=np.int64)

    node_id_to_index: Dict[str, int] = {str(node.id): idx for idx, node in enumerate(graph.nodes)}
    meta = {
        "node_id_to_index": node_id_to_index,
        "member_sections": [_section_label(edge) for edge in graph.edges],
        "materials": [{"no": m.id, "description": m.description} for m in graph.materials],
        "cross_sections": [
            {
                "no": cs.id,
                "description": cs.description,
                "material_no": cs.material.id if cs.material is not None else None,
            }
            for cs in graph.cross_sections
        ],
        "feature_fields": {"node": ["X", "Y", "Z"], "edge": EDGE_FIELDS},
        "units": {"length": SETTINGS.session.model_unit},
    }

    np.savez_compressed(
        out_path,
        node_coords=coords,
        node_ids=node_id_arr,
        edge_index=index,  # shape [2, num_members]
        edge_features=edge_features,
        member_ids=member_id_arr,
        meta=json.dumps(meta, ensure_ascii=False),
    )
    file_size = out_path.stat().st_size if out_path.exists() else 0

    nodes_csv = out_path.with_name(f"{out_path.stem}_nodes.csv")
    edges_csv = out_path.with_name(f"{out_path.stem}_edges.csv")
    with nodes_csv.open("w", newline="", encoding="utf-8-sig") as f_nodes:
        writer = csv.writer(f_nodes)
        writer.writerow(["index", "node_no", "X", "Y", "Z"])
        for idx, node in enumerate(graph.nodes):
            writer.writerow([idx, node.id, *[f"{v:.6g}" for v in node.point]])
    with edges_csv.open("w", newline="", encoding="utf-8-sig") as f_edges:
        writer = csv.writer(f_edges)
        writer.writerow(["index", "member_no", "section", "start_node", "end_node", *EDGE_FIELDS])
        for idx, edge in enumerate(graph.edges):
            writer.writerow(
                [
                    idx,
                    edge.id,
                    _section_label(edge) or "",
                    int(index[0, idx]),
                    int(index[1, idx]),
                    *[f"{v:.6g}" for v in edge_features[idx]],
                ]
            )
    print(f"[Graph] CSV 导出: {nodes_csv.name}, {edges_csv.name}")
    print(
        f"[Graph] 结构图已保存: {out_path} "
        f"(nodes={len(graph.nodes)}, members={len(graph.edges)}, size={file_size} bytes)"
    )
    return out_path


def graph_tables(graph: StructuralGraph) -> Dict[str, pd.DataFrame]:
    """DataFrames for the Nodes / Members / CrossSections sheets."""
    nodes = pd.DataFrame(
        [{"No": n.id, "X": n.x, "Y": n.y, "Z": n.z} for n in graph.nodes],
        columns=["No", "X", "Y", "Z"],
    )
    members = pd.DataFrame(
        [
            {
                "No": e.id,
                "StartNode": e.start.id,
                "EndNode": e.end.id,
                "CrossSection": e.cross_section.id if e.cross_section is not None else None,
                "Description": _section_label(e),
                "Length": e.length,
            }
            for e in graph.edges
        ],
        columns=["No", "StartNode", "EndNode", "CrossSection", "Description", "Length"],
    )
    sections = pd.DataFrame(
        [
            {
                "No": cs.id,
                "Description": cs.description,
                "Material": cs.material.id if cs.material is not None else None,
            }
            for cs in graph.cross_sections
        ],
        columns=["No", "Description", "Material"],
    )
    return {"Nodes": nodes, "Members": members, "CrossSections": sections}


def write_graph_workbook(graph: StructuralGraph, path) -> Path:
    """Write the graph as an Excel workbook (one sheet per table)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        for sheet, df in graph_tables(graph).items():
            df.to_excel(writer, sheet_name=sheet, index=False)
    print(f"[Graph] Excel 导出: {path}")
    return path


__all__ = ["save_graph_snapshot", "write_graph_workbook", "graph_tables"]
