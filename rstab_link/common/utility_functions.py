#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RSTAB 实用工具函数
Point helpers, distance checks and .NET array conversion shared by the
builder and the engine adapter.
"""

import math
from typing import Any, Sequence, Tuple

Point3 = Tuple[float, float, float]


def as_point(value: Any) -> Point3:
    """
    Coerce ``value`` to an ``(x, y, z)`` float tuple.

    Accepts 3-sequences and objects exposing ``X/Y/Z`` or ``x/y/z`` attributes
    (RhinoCommon points, RSTAB node records).
    """
    for names in (("X", "Y", "Z"), ("x", "y", "z")):
        if all(hasattr(value, name) for name in names):
            return tuple(float(getattr(value, name)) for name in names)  # type: ignore[return-value]
    coords = list(value)
    if len(coords) != 3:
        raise ValueError(f"Expected 3 coordinates, got {len(coords)}: {value!r}")
    return float(coords[0]), float(coords[1]), float(coords[2])


def distance(p1: Sequence[float], p2: Sequence[float]) -> float:
    return float(math.sqrt(sum((a - b) ** 2 for a, b in zip(p1, p2))))


def within_tolerance(p1: Sequence[float], p2: Sequence[float], tolerance: float) -> bool:
    """Positional adjacency test used for merging; inclusive at ``tolerance``."""
    return distance(p1, p2) <= tolerance


def empty_array(sys_type, count: int):
    """Allocate a .NET array of ``count`` default-initialised structs for out-style RSTAB calls."""
    # 动态导入System以避免循环导入
    from .rstab_api_loader import get_api_objects

    _, System, _, _ = get_api_objects()
    if System is None:
        raise RuntimeError("System module missing in empty_array; load the .NET runtime first")
    return System.Array.CreateInstance(sys_type, max(int(count), 0))


__all__ = [
    "Point3",
    "as_point",
    "distance",
    "within_tolerance",
    "empty_array",
]
