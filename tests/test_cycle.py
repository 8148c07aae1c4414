"""Tests for the edge-set cycle container."""

import pytest

from rstab_link.model import Cycle, IndexEdge


class TestCycle:
    def test_equal_regardless_of_edge_order(self):
        a = Cycle.from_pairs([(0, 1), (1, 2), (2, 0)])
        b = Cycle.from_pairs([(2, 0), (0, 1), (1, 2)])
        assert a == b

    def test_different_cardinality_not_equal(self):
        a = Cycle.from_pairs([(0, 1), (1, 2), (2, 0)])
        b = Cycle.from_pairs([(0, 1), (1, 2)])
        assert a != b

    def test_pairs_are_directed(self):
        a = Cycle.from_pairs([(0, 1), (1, 0)])
        b = Cycle.from_pairs([(0, 1), (0, 1)])
        assert a != b

    def test_add(self):
        cycle = Cycle()
        cycle.add(3, 4)
        assert len(cycle) == 1
        assert cycle.edges[0] == IndexEdge(3, 4)

    def test_not_hashable(self):
        with pytest.raises(TypeError):
            hash(Cycle())
