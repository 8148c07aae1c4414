#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Structural graph snapshots and workbooks on disk."""

from .graph_output import graph_tables, save_graph_snapshot, write_graph_workbook

__all__ = ["save_graph_snapshot", "write_graph_workbook", "graph_tables"]
