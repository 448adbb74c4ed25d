"""Unit tests for verification of matchings and delta steps."""

import unittest
from unittest.mock import patch

import mwblossom
from mwblossom.forest import LABEL_NONE, LABEL_S, BlossomForest
from mwblossom.graph import GraphInfo
from mwblossom.verify import check_delta2, check_delta3, verify_optimum


class TestVerificationFail(unittest.TestCase):
    """Test failure handling in verification routine."""

    def _make_forest(self, graph, vertex_dual_2x, blossoms=()):
        forest = BlossomForest(graph.num_vertex, 0)
        forest.dual_var[:graph.num_vertex] = vertex_dual_2x
        for (base, childs, endps, dual) in blossoms:
            b = forest.new_blossom(base, childs, endps)
            forest.dual_var[b] = dual
        return forest

    def _verify(self, edges, vertex_mate, vertex_dual_2x,
                blossoms=(), max_cardinality=False):
        graph = GraphInfo(edges)
        forest = self._make_forest(graph, vertex_dual_2x, blossoms)
        verify_optimum(graph, forest, vertex_mate, max_cardinality)

    # In the two-edge graph below, vertices 1 and 2 are matched through
    # edge 1, so vertex 1 holds remote endpoint 3 and vertex 2 holds
    # remote endpoint 2.

    def test_success(self):
        edges = [(0,1,10), (1,2,11)]
        self._verify(edges,
                     vertex_mate=[-1, 3, 2],
                     vertex_dual_2x=[0, 20, 2])

    def test_asymmetric_matching(self):
        edges = [(0,1,10), (1,2,11)]
        with self.assertRaises(mwblossom.MatchingError):
            self._verify(edges,
                         vertex_mate=[-1, 3, 1],
                         vertex_dual_2x=[0, 20, 2])

    def test_negative_vertex_dual(self):
        edges = [(0,1,10), (1,2,11)]
        with self.assertRaises(mwblossom.MatchingError):
            self._verify(edges,
                         vertex_mate=[-1, 3, 2],
                         vertex_dual_2x=[-2, 22, 0])

    def test_max_cardinality_dual_offset(self):
        """negative vertex duals are allowed in max-cardinality mode"""
        edges = [(0,1,10), (1,2,11)]
        self._verify(edges,
                     vertex_mate=[-1, 3, 2],
                     vertex_dual_2x=[-2, 22, 0],
                     max_cardinality=True)

    def test_unmatched_nonzero_dual(self):
        edges = [(0,1,10), (1,2,11)]
        with self.assertRaises(mwblossom.MatchingError):
            self._verify(edges,
                         vertex_mate=[-1, 3, 2],
                         vertex_dual_2x=[9, 11, 11])

    def test_negative_edge_slack(self):
        edges = [(0,1,10), (1,2,11)]
        with self.assertRaises(mwblossom.MatchingError):
            self._verify(edges,
                         vertex_mate=[-1, 3, 2],
                         vertex_dual_2x=[0, 11, 11])

    def test_matched_edge_slack(self):
        edges = [(0,1,10), (1,2,11)]
        with self.assertRaises(mwblossom.MatchingError):
            self._verify(edges,
                         vertex_mate=[-1, 3, 2],
                         vertex_dual_2x=[0, 20, 11])

    def test_negative_blossom_dual(self):
        #
        # [0]--7--[1]--9--[2]--6--[3]
        #   \            /
        #    \----8-----/
        #
        edges = [(0,1,7), (0,2,8), (1,2,9), (2,3,6)]
        with self.assertRaises(mwblossom.MatchingError):
            self._verify(edges,
                         vertex_mate=[1, 0, 7, 6],
                         vertex_dual_2x=[4, 6, 8, 4],
                         blossoms=[(2, [2, 0, 1], [3, 0, 4], -1)])

    def test_blossom_not_full(self):
        #
        # [3]     [4]
        #  |       |
        #  8       8
        #  |       |
        # [0]--7--[1]--5--[2]
        #   \            /
        #    \----2-----/
        #
        edges = [(0,1,7), (0,2,2), (1,2,5), (0,3,8), (1,4,8)]
        with self.assertRaises(mwblossom.MatchingError):
            self._verify(edges,
                         vertex_mate=[7, 9, -1, 6, 8],
                         vertex_dual_2x=[4, 10, 0, 12, 6],
                         blossoms=[(2, [2, 0, 1], [3, 0, 4], 2)])

    def test_blossom_zero_dual(self):
        """a blossom with zero dual does not need to be full"""
        edges = [(0,1,7), (0,2,2), (1,2,5), (0,3,8), (1,4,8)]
        self._verify(edges,
                     vertex_mate=[7, 9, -1, 6, 8],
                     vertex_dual_2x=[4, 10, 0, 12, 6],
                     blossoms=[(2, [2, 0, 1], [3, 0, 4], 0)])


class TestCheckDelta(unittest.TestCase):
    """Test brute force checks of the least-slack edge tracking."""

    def test_delta2(self):
        # Slack of edge 0 is 2, slack of edge 1 is 0.
        graph = GraphInfo([(0,1,10), (1,2,11)])
        forest = BlossomForest(3, 11)
        label = [LABEL_S, LABEL_NONE, LABEL_S] + 3 * [LABEL_NONE]
        check_delta2(graph, forest, label, [-1, 1, -1, -1, -1, -1])
        with self.assertRaises(mwblossom.MatchingError):
            check_delta2(graph, forest, label, [-1, 0, -1, -1, -1, -1])
        with self.assertRaises(mwblossom.MatchingError):
            check_delta2(graph, forest, label, 6 * [-1])

    def test_delta3(self):
        # Slacks of edges 0, 1, 2 are 4, 2, 0.
        graph = GraphInfo([(0,1,10), (1,2,11), (0,2,12)])
        forest = BlossomForest(3, 12)
        label = 3 * [LABEL_S] + 3 * [LABEL_NONE]
        check_delta3(graph, forest, label, [2, 1, 2, -1, -1, -1])
        with self.assertRaises(mwblossom.MatchingError):
            check_delta3(graph, forest, label, [0, 1, 1, -1, -1, -1])
        with self.assertRaises(mwblossom.MatchingError):
            check_delta3(graph, forest, label, 6 * [-1])

    def test_delta3_non_s_edge(self):
        graph = GraphInfo([(0,1,10), (1,2,11), (0,2,12)])
        forest = BlossomForest(3, 12)
        label = [LABEL_S, LABEL_S, LABEL_NONE] + 3 * [LABEL_NONE]
        with self.assertRaises(mwblossom.MatchingError):
            check_delta3(graph, forest, label, [2, 0, -1, -1, -1, -1])


class TestCheckOptimumOption(unittest.TestCase):
    """Test when the public function runs the optimum check."""

    def test_default_off(self):
        with patch("mwblossom.algorithm.verify_optimum") as mock_verify:
            mwblossom.maximum_weight_matching([(0,1,1), (1,2,2)])
        mock_verify.assert_not_called()

    def test_integer_weights(self):
        with patch("mwblossom.algorithm.verify_optimum") as mock_verify:
            mwblossom.maximum_weight_matching([(0,1,1), (1,2,2)],
                                              check_optimum=True)
        mock_verify.assert_called_once()

    def test_float_weights(self):
        with patch("mwblossom.algorithm.verify_optimum") as mock_verify:
            mate = mwblossom.maximum_weight_matching([(0,1,1.5), (1,2,2.5)],
                                                     check_optimum=True)
        mock_verify.assert_not_called()
        self.assertEqual(mate, [-1, 2, 1])


if __name__ == "__main__":
    unittest.main()
