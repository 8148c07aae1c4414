#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Closed loops expressed as sets of (start, end) node index pairs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Tuple


@dataclass(frozen=True)
class IndexEdge:
    start: int
    end: int


@dataclass(eq=False)
class Cycle:
    edges: List[IndexEdge] = field(default_factory=list)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[int, int]]) -> "Cycle":
        return cls([IndexEdge(start, end) for start, end in pairs])

    def add(self, start: int, end: int) -> None:
        self.edges.append(IndexEdge(start, end))

    def __len__(self) -> int:
        return len(self.edges)

    def __eq__(self, other: object) -> bool:
        # Same cardinality and every edge of self present in other; pairs are directed
        if not isinstance(other, Cycle):
            return NotImplemented
        if len(other.edges) != len(self.edges):
            return False
        return all(edge in other.edges for edge in self.edges)

    __hash__ = None  # type: ignore[assignment]


__all__ = ["IndexEdge", "Cycle"]
