#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
rstab_link: CAD curve groups -> structural graph -> RSTAB, and back.

The .NET runtime is only loaded when an ``RstabEngine`` is created, so graph
building and the file adapters work without RSTAB installed.
"""

from .conversion import RstabConverter, export_graph, import_graph
from .geometry_modeling import build_graph
from .model import CrossSection, Edge, Material, Node, StructuralGraph

__version__ = "0.1.0"

__all__ = [
    "build_graph",
    "export_graph",
    "import_graph",
    "RstabConverter",
    "StructuralGraph",
    "Node",
    "Edge",
    "Material",
    "CrossSection",
]
