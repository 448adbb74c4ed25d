"""
Input checking and indexing of the graph passed to the matching algorithm.
"""

from __future__ import annotations

import sys
import math
from collections.abc import Sequence


def check_input_types(
        edges: Sequence[tuple[int, int, int|float]],
        tuple_sizes: tuple[int, ...] = (3,),
        check_weights: bool = True
        ) -> None:
    """Check that the input consists of valid data types and valid
    numerical ranges.

    This function takes time O(m).

    Parameters:
        edges: List of edges, each edge specified as a tuple "(x, y, w)"
            where "x" and "y" are vertex indices and "w" is the edge weight.
        tuple_sizes: Accepted lengths of an edge tuple. Edges of length 2
            carry no weight.
        check_weights: False to skip checking the third element,
            for callers that replace the weights anyway.

    Raises:
        ValueError: If the input does not satisfy the constraints.
        TypeError: If the input contains invalid data types.
    """

    float_limit = sys.float_info.max / 4

    if not isinstance(edges, (list, tuple)):
        raise TypeError('"edges" must be a list or tuple')

    for e in edges:
        if (not isinstance(e, tuple)) or (len(e) not in tuple_sizes):
            sizes = " or ".join(f"{n}-tuple" for n in tuple_sizes)
            raise TypeError(f"Each edge must be specified as a {sizes}")

        (x, y) = e[:2]

        if (not isinstance(x, int)) or (not isinstance(y, int)):
            raise TypeError("Edge endpoints must be integers")

        if (x < 0) or (y < 0):
            raise ValueError("Edge endpoints must be non-negative integers")

        if (len(e) < 3) or (not check_weights):
            continue

        w = e[2]

        if not isinstance(w, (int, float)):
            raise TypeError(
                "Edge weights must be integers or floating point numbers")

        if isinstance(w, float):
            if not math.isfinite(w):
                raise ValueError("Edge weights must be finite numbers")

            # Dual variables hold twice the edge weight, plus some change.
            # Keep them inside the valid floating point range.
            if abs(w) > float_limit:
                raise ValueError("Floating point edge weights must be"
                                 f" less than {float_limit:g}")


def check_input_graph(edges: Sequence[tuple]) -> None:
    """Check that the input is a valid graph, without any multi-edges and
    without any self-edges.

    This function takes time O(m * log(m)).

    Raises:
        ValueError: If the input does not satisfy the constraints.
    """

    for e in edges:
        if e[0] == e[1]:
            raise ValueError("Self-edges are not supported")

    # Sorting gives guaranteed O(m * log(m)) run time.
    edge_endpoints = [(min(e[0], e[1]), max(e[0], e[1])) for e in edges]
    edge_endpoints.sort()

    for i in range(len(edge_endpoints) - 1):
        if edge_endpoints[i] == edge_endpoints[i+1]:
            raise ValueError(f"Duplicate edge {edge_endpoints[i]}")


def add_default_weight(
        edges: Sequence[tuple],
        weight: int|float = 1
        ) -> list[tuple[int, int, int|float]]:
    """Return a new edge list in which every edge has weight "weight".

    Edges may be given as "(x, y)" or as "(x, y, w)"; any existing weight
    is replaced. The input list is not modified.
    """
    check_input_types(edges, tuple_sizes=(2, 3), check_weights=False)
    return [(e[0], e[1], weight) for e in edges]


class GraphInfo:
    """Representation of the input graph.

    These data remain unchanged while the algorithm runs.
    """

    def __init__(self, edges: Sequence[tuple[int, int, int|float]]) -> None:
        """Build the endpoint table and the adjacency lists.

        This function takes time O(n + m).
        """

        # "edges[k] = (x, y, w)" where "k" is an edge index,
        # "x" and "y" are the incident vertices and "w" is the edge weight.
        self.edges: Sequence[tuple[int, int, int|float]] = edges
        self.num_edge: int = len(edges)

        if edges:
            self.num_vertex: int = 1 + max(max(x, y) for (x, y, _w) in edges)
        else:
            self.num_vertex = 0

        # Largest edge weight, but never less than zero.
        # Vertex dual variables start at this value, which gives every edge
        # a non-negative slack.
        self.max_weight: int|float = max(
            [0] + [w for (_x, _y, w) in edges])

        # Each edge "k" has two endpoints, "2*k" and "2*k+1".
        # "endpoint[p]" is the vertex attached to endpoint "p".
        # The opposite endpoint of the same edge is "p ^ 1".
        self.endpoint: list[int] = [
            edges[p // 2][p % 2] for p in range(2 * self.num_edge)]

        # "neighbend[v]" lists the remote endpoints of the edges incident
        # to vertex "v", i.e. the endpoints on the other side.
        self.neighbend: list[list[int]] = [
            [] for _v in range(self.num_vertex)]
        for (k, (x, y, _w)) in enumerate(edges):
            self.neighbend[x].append(2 * k + 1)
            self.neighbend[y].append(2 * k)

        # With integer weights, all dual computations stay integral.
        self.integer_weights: bool = all(isinstance(w, int)
                                         for (_x, _y, w) in edges)
