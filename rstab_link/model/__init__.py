#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""In-memory structural graph shared by the builder and the RSTAB converter."""

from .cycle import Cycle, IndexEdge
from .structure import CrossSection, Edge, Material, Node, StructuralGraph

__all__ = [
    "Node",
    "Edge",
    "Material",
    "CrossSection",
    "StructuralGraph",
    "Cycle",
    "IndexEdge",
]
