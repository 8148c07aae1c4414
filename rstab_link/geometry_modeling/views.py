#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Flattened and grouped views of a structural graph.

Grouping by cross section follows the order in which sections first appear
on the edge list. Edges without a section are collected into one trailing
group. ``cross_section_members`` matches members by section *description*,
so two sections sharing a description list each other's members.
"""

from typing import Callable, Dict, List, Tuple, TypeVar

import numpy as np

from rstab_link.common.utility_functions import Point3
from rstab_link.model.structure import Edge, StructuralGraph

T = TypeVar("T")
Line = Tuple[Point3, Point3]


def node_points(graph: StructuralGraph) -> List[Point3]:
    return [node.point for node in graph.nodes]


def node_ids(graph: StructuralGraph) -> List[str]:
    return [str(node.id) for node in graph.nodes]


def node_array(graph: StructuralGraph) -> np.ndarray:
    """(n, 3) float64 array of node coordinates in graph order."""
    if not graph.nodes:
        return np.zeros((0, 3), dtype=np.float64)
    return np.asarray(node_points(graph), dtype=np.float64)


def edge_index(graph: StructuralGraph) -> np.ndarray:
    """(2, m) int64 array of start/end positions into ``graph.nodes``."""
    position: Dict[int, int] = {id(node): idx for idx, node in enumerate(graph.nodes)}
    pairs = [(position[id(edge.start)], position[id(edge.end)]) for edge in graph.edges]
    if not pairs:
        return np.zeros((2, 0), dtype=np.int64)
    return np.asarray(pairs, dtype=np.int64).T


def _group_edges(graph: StructuralGraph, project: Callable[[Edge], T]) -> List[List[T]]:
    groups: Dict[int, List[T]] = {}
    unassigned: List[T] = []
    for edge in graph.edges:
        if edge.cross_section is None:
            unassigned.append(project(edge))
            continue
        groups.setdefault(id(edge.cross_section), []).append(project(edge))

    ordered = list(groups.values())
    if unassigned:
        ordered.append(unassigned)
    return ordered


def edge_line(edge: Edge) -> Line:
    return edge.start.point, edge.end.point


def edges_by_cross_section(graph: StructuralGraph) -> List[List[Line]]:
    return _group_edges(graph, edge_line)


def member_ids_by_cross_section(graph: StructuralGraph) -> List[List[str]]:
    return _group_edges(graph, lambda edge: str(edge.id))


def cross_section_descriptions(graph: StructuralGraph) -> List[str]:
    return [section.description for section in graph.cross_sections]


def cross_section_members(graph: StructuralGraph) -> List[List[str]]:
    """Per section: ``"<id>_<description>"`` followed by the IDs of members carrying that description."""
    table: List[List[str]] = []
    for section in graph.cross_sections:
        row = [f"{section.id}_{section.description}"]
        row.extend(
            str(edge.id)
            for edge in graph.edges
            if edge.cross_section is not None and edge.cross_section.description == section.description
        )
        table.append(row)
    return table


__all__ = [
    "Line",
    "node_points",
    "node_ids",
    "node_array",
    "edge_index",
    "edge_line",
    "edges_by_cross_section",
    "member_ids_by_cross_section",
    "cross_section_descriptions",
    "cross_section_members",
]
