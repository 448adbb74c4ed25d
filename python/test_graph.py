"""Unit tests for input checking and graph indexing."""

import unittest

from mwblossom import add_default_weight
from mwblossom.graph import GraphInfo, check_input_graph, check_input_types


class TestGraphInfo(unittest.TestCase):
    """Test GraphInfo helper class."""

    def test_empty(self):
        graph = GraphInfo([])
        self.assertEqual(graph.num_vertex, 0)
        self.assertEqual(graph.num_edge, 0)
        self.assertEqual(graph.edges, [])
        self.assertEqual(graph.endpoint, [])
        self.assertEqual(graph.neighbend, [])
        self.assertEqual(graph.max_weight, 0)

    def test_endpoints(self):
        graph = GraphInfo([(1,2,5), (3,1,7), (2,3,-1)])
        self.assertEqual(graph.num_vertex, 4)
        self.assertEqual(graph.num_edge, 3)
        self.assertEqual(graph.endpoint, [1, 2, 3, 1, 2, 3])
        # Remote endpoints of incident edges, in edge order.
        self.assertEqual(graph.neighbend, [[], [1, 2], [0, 5], [3, 4]])
        self.assertEqual(graph.max_weight, 7)
        self.assertTrue(graph.integer_weights)

    def test_remote_endpoint(self):
        graph = GraphInfo([(0,1,1), (1,2,1), (2,0,1)])
        for x in range(graph.num_vertex):
            for p in graph.neighbend[x]:
                # The opposite endpoint belongs to "x" itself.
                self.assertEqual(graph.endpoint[p ^ 1], x)
                self.assertNotEqual(graph.endpoint[p], x)

    def test_negative_weights(self):
        graph = GraphInfo([(0,1,-3), (1,2,-1.5)])
        self.assertEqual(graph.max_weight, 0)
        self.assertFalse(graph.integer_weights)


class TestInputChecks(unittest.TestCase):
    """Test input checking functions."""

    def test_valid(self):
        check_input_types([(0,1,1), (1,2,2.5)])
        check_input_graph([(0,1,1), (1,2,2.5)])
        check_input_types([(0,1), (1,2)], tuple_sizes=(2, 3))

    def test_bad_types(self):
        with self.assertRaises(TypeError):
            check_input_types({(0,1,1)})
        with self.assertRaises(TypeError):
            check_input_types([[0,1,1]])
        with self.assertRaises(TypeError):
            check_input_types([(0,1)])
        with self.assertRaises(TypeError):
            check_input_types([(0,1,None)])

    def test_bad_values(self):
        with self.assertRaises(ValueError):
            check_input_types([(-1,1,1)])
        with self.assertRaises(ValueError):
            check_input_types([(0,1,float("nan"))])
        with self.assertRaises(ValueError):
            check_input_types([(0,1,-1e308)])

    def test_self_edge(self):
        with self.assertRaisesRegex(ValueError, "Self-edges"):
            check_input_graph([(0,1,1), (2,2,1)])

    def test_duplicate_edge(self):
        with self.assertRaisesRegex(ValueError, "Duplicate edge"):
            check_input_graph([(0,1,1), (2,3,1), (1,0,2)])


class TestAddDefaultWeight(unittest.TestCase):
    """Test add_default_weight() function."""

    def test_pairs(self):
        self.assertEqual(add_default_weight([(0,1), (1,2)]),
                         [(0,1,1), (1,2,1)])

    def test_replace_weight(self):
        edges = [(0,1,5), (1,2)]
        self.assertEqual(add_default_weight(edges, 3),
                         [(0,1,3), (1,2,3)])
        self.assertEqual(edges, [(0,1,5), (1,2)])

    def test_bad_input(self):
        with self.assertRaises(TypeError):
            add_default_weight([(0,)])

    def test_weight_not_checked(self):
        """the third element is replaced without being checked"""
        self.assertEqual(add_default_weight([(0,1,"x"), (1,2,None)]),
                         [(0,1,1), (1,2,1)])
        with self.assertRaises(TypeError):
            check_input_types([(0,1,"x")], tuple_sizes=(2, 3))


if __name__ == "__main__":
    unittest.main()
