#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Structural graph model: nodes, members, cross sections and materials.

Nodes and edges compare by identity. Positional comparison goes through
``Node.coincides`` / ``Edge.matches`` so that tolerance checks never hide
behind ``==`` or container membership.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from rstab_link.common.config import (
    DEFAULT_CROSS_SECTION_DESCRIPTION,
    DEFAULT_CROSS_SECTION_ID,
    DEFAULT_MATERIAL_DESCRIPTION,
    DEFAULT_MATERIAL_ID,
    POINT_TOLERANCE,
)
from rstab_link.common.utility_functions import Point3, distance, within_tolerance


@dataclass(eq=False)
class Node:
    id: int
    x: float
    y: float
    z: float

    @classmethod
    def from_point(cls, node_id: int, point: Sequence[float]) -> "Node":
        return cls(node_id, float(point[0]), float(point[1]), float(point[2]))

    @property
    def point(self) -> Point3:
        return self.x, self.y, self.z

    def distance_to(self, other: Sequence[float]) -> float:
        return distance(self.point, other)

    def coincides(self, other: "Node", tolerance: float = POINT_TOLERANCE) -> bool:
        """True when both nodes sit within ``tolerance`` of each other."""
        return within_tolerance(self.point, other.point, tolerance)

    def __str__(self) -> str:
        return f"Node X: {self.x}, Y: {self.y}, Z: {self.z}"


@dataclass(eq=False)
class Material:
    id: int = DEFAULT_MATERIAL_ID
    description: str = DEFAULT_MATERIAL_DESCRIPTION


@dataclass(eq=False)
class CrossSection:
    id: int = DEFAULT_CROSS_SECTION_ID
    # None for sections read back from RSTAB, which only report a material number
    material: Optional[Material] = field(default_factory=Material)
    description: str = DEFAULT_CROSS_SECTION_DESCRIPTION


@dataclass(eq=False)
class Edge:
    start: Node
    end: Node
    cross_section: Optional[CrossSection] = None
    id: int = 0
    oriented: bool = False

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end.point)

    def matches(self, other: "Edge") -> bool:
        """
        Positional equality of two edges.

        Oriented edges match only start-to-start and end-to-end; unoriented
        edges also match when traversed in the opposite direction.
        """
        if self.start.coincides(other.start) and self.end.coincides(other.end):
            return True
        if self.oriented:
            return False
        return self.end.coincides(other.start) and self.start.coincides(other.end)


class StructuralGraph:
    """
    Ordered container of nodes, edges, materials and cross sections.

    Insertion order is kept for every collection. Uniqueness is the caller's
    business; the only built-in check is the opt-in ``deduplicate`` flag of
    :meth:`add_edge`.
    """

    def __init__(self):
        self.nodes: List[Node] = []
        self.edges: List[Edge] = []
        self.materials: List[Material] = []
        self.cross_sections: List[CrossSection] = []

    @classmethod
    def with_default_material(cls) -> "StructuralGraph":
        graph = cls()
        graph.add_material(Material())
        return graph

    def add_node(self, node: Node) -> Node:
        self.nodes.append(node)
        return node

    def add_edge(self, edge: Edge, deduplicate: bool = False) -> bool:
        """Append ``edge``; with ``deduplicate`` skip it if a matching edge exists. Returns True if added."""
        if deduplicate and self.has_edge(edge):
            return False
        self.edges.append(edge)
        return True

    def add_material(self, material: Material) -> Material:
        self.materials.append(material)
        return material

    def add_cross_section(self, cross_section: CrossSection) -> CrossSection:
        self.cross_sections.append(cross_section)
        return cross_section

    def has_edge(self, edge: Edge) -> bool:
        return any(existing.matches(edge) for existing in self.edges)

    def node_by_id(self, node_id: int) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def cross_section_by_id(self, section_id: int) -> Optional[CrossSection]:
        for section in self.cross_sections:
            if section.id == section_id:
                return section
        return None

    def material_by_id(self, material_id: int) -> Optional[Material]:
        for material in self.materials:
            if material.id == material_id:
                return material
        return None

    def find_node_near(self, point: Sequence[float], tolerance: float) -> Optional[Node]:
        """First node, in insertion order, within ``tolerance`` of ``point``."""
        for node in self.nodes:
            if within_tolerance(node.point, point, tolerance):
                return node
        return None

    def __repr__(self) -> str:
        return (
            f"StructuralGraph(nodes={len(self.nodes)}, edges={len(self.edges)}, "
            f"materials={len(self.materials)}, cross_sections={len(self.cross_sections)})"
        )


__all__ = [
    "Node",
    "Edge",
    "Material",
    "CrossSection",
    "StructuralGraph",
]
