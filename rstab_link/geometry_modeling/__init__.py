#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
几何建模阶段的规范入口。Curve groups -> structural graph, plus the flattened
and grouped views handed back to callers.
"""

from .curve_io import load_anchor_points, load_curve_groups
from .graph_builder import EndpointResolver, GraphBuilder, build_graph, curve_endpoints
from .views import (
    cross_section_descriptions,
    cross_section_members,
    edge_index,
    edges_by_cross_section,
    member_ids_by_cross_section,
    node_array,
    node_ids,
    node_points,
)

__all__ = [
    "build_graph",
    "curve_endpoints",
    "GraphBuilder",
    "EndpointResolver",
    "load_curve_groups",
    "load_anchor_points",
    "node_points",
    "node_ids",
    "node_array",
    "edge_index",
    "edges_by_cross_section",
    "member_ids_by_cross_section",
    "cross_section_descriptions",
    "cross_section_members",
]
