#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Two-way conversion between structural graphs and a running RSTAB model."""

from .converter import RstabConverter, export_graph, import_graph
from .engine import (
    CrossSectionRecord,
    MaterialRecord,
    MemberRecord,
    NodeRecord,
    RstabEngine,
    SupportRecord,
)
from .session import EngineSession
from .state import ConversionError, ConversionState, ConversionStep

__all__ = [
    "RstabConverter",
    "export_graph",
    "import_graph",
    "RstabEngine",
    "EngineSession",
    "ConversionState",
    "ConversionStep",
    "ConversionError",
    "NodeRecord",
    "MaterialRecord",
    "CrossSectionRecord",
    "SupportRecord",
    "MemberRecord",
]
