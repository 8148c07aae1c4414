#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Graph building workflow: loose curve groups -> deduplicated structural graph.
"""

import logging
from typing import Any, Iterable, Optional, Sequence, Tuple

from rstab_link.common.config import DEFAULT_CROSS_SECTION_DESCRIPTION, SETTINGS
from rstab_link.common.errors import ErrorCode, GeometryError
from rstab_link.common.utility_functions import Point3, as_point
from rstab_link.model.structure import CrossSection, Edge, Material, Node, StructuralGraph

log = logging.getLogger(__name__)
if not log.handlers:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

_ENDPOINT_ATTRS = (("start", "end"), ("PointAtStart", "PointAtEnd"))


def _to_point(value: Any, what: str) -> Point3:
    try:
        return as_point(value)
    except (TypeError, ValueError) as exc:
        raise GeometryError(f"Invalid {what}: {exc}", ErrorCode.LOCAL_NODE) from exc


def curve_endpoints(curve: Any) -> Tuple[Point3, Point3]:
    """
    Return the two endpoints of a curve.

    Supported inputs:
    - objects with ``start``/``end`` or ``PointAtStart``/``PointAtEnd``
    - polylines given as a sequence of at least two points (first and last are used)
    """
    for start_attr, end_attr in _ENDPOINT_ATTRS:
        if hasattr(curve, start_attr) and hasattr(curve, end_attr):
            return (
                _to_point(getattr(curve, start_attr), "curve start"),
                _to_point(getattr(curve, end_attr), "curve end"),
            )

    try:
        points = list(curve)
    except TypeError as exc:
        raise GeometryError(f"Unsupported curve type: {type(curve).__name__}") from exc
    if len(points) < 2:
        raise GeometryError(f"Curve needs at least two points, got {len(points)}")
    return _to_point(points[0], "polyline start"), _to_point(points[-1], "polyline end")


class EndpointResolver:
    """Maps curve endpoints onto graph nodes, allocating new nodes when nothing is close enough."""

    def __init__(self, graph: StructuralGraph, tolerance: float):
        self.graph = graph
        self.tolerance = tolerance
        self.next_id = max((node.id for node in graph.nodes), default=0) + 1
        self.created = 0

    def resolve(self, point: Point3) -> Node:
        node = self.graph.find_node_near(point, self.tolerance)
        if node is not None:
            return node
        node = self.graph.add_node(Node.from_point(self.next_id, point))
        self.next_id += 1
        self.created += 1
        return node


class GraphBuilder:
    def __init__(
        self,
        tolerance: Optional[float] = None,
        graph: Optional[StructuralGraph] = None,
        deduplicate: bool = False,
        fallback_description: Optional[str] = DEFAULT_CROSS_SECTION_DESCRIPTION,
    ):
        self.tolerance = SETTINGS.tolerances.resolve(tolerance)
        self.graph = graph if graph is not None else StructuralGraph.with_default_material()
        if not self.graph.materials:
            self.graph.add_material(Material())
        self.material = self.graph.materials[0]
        self.deduplicate = deduplicate
        self.fallback_description = fallback_description
        self.resolver = EndpointResolver(self.graph, self.tolerance)
        self.next_section_id = max((cs.id for cs in self.graph.cross_sections), default=0) + 1
        self.next_member_id = max((edge.id for edge in self.graph.edges), default=0) + 1
        self.skipped = 0

    def _description(self, index: int, labels: Sequence[Optional[str]]) -> str:
        if index < len(labels) and labels[index] not in (None, ""):
            return str(labels[index])
        if self.fallback_description:
            return self.fallback_description
        return str(index + 1)

    def add_group(self, curves: Iterable[Any], description: str) -> CrossSection:
        section = self.graph.add_cross_section(
            CrossSection(id=self.next_section_id, material=self.material, description=description)
        )
        self.next_section_id += 1

        for curve in curves:
            start_point, end_point = curve_endpoints(curve)
            start = self.resolver.resolve(start_point)
            end = self.resolver.resolve(end_point)
            edge = Edge(start=start, end=end, cross_section=section, id=self.next_member_id)
            if self.graph.add_edge(edge, deduplicate=self.deduplicate):
                self.next_member_id += 1
            else:
                self.skipped += 1
        return section

    def build(
        self,
        curve_groups: Iterable[Iterable[Any]],
        cross_section_labels: Optional[Sequence[Optional[str]]] = None,
    ) -> StructuralGraph:
        labels = list(cross_section_labels or [])
        group_count = 0
        for index, curves in enumerate(curve_groups):
            self.add_group(curves, self._description(index, labels))
            group_count += 1

        log.info(
            "Graph built from %s curve groups: %s nodes, %s members, %s duplicates skipped (tolerance=%s)",
            group_count,
            len(self.graph.nodes),
            len(self.graph.edges),
            self.skipped,
            self.tolerance,
        )
        return self.graph


def build_graph(
    curve_groups: Iterable[Iterable[Any]],
    cross_section_labels: Optional[Sequence[Optional[str]]] = None,
    tolerance: Optional[float] = None,
    graph: Optional[StructuralGraph] = None,
    deduplicate: bool = False,
) -> StructuralGraph:
    builder = GraphBuilder(tolerance=tolerance, graph=graph, deduplicate=deduplicate)
    return builder.build(curve_groups, cross_section_labels)


__all__ = [
    "EndpointResolver",
    "GraphBuilder",
    "build_graph",
    "curve_endpoints",
]
