"""
Independent checks on the state of the matching algorithm.

These checks re-derive quantities that the algorithm already computes.
They are used for testing and are not needed to find a matching.
"""

from __future__ import annotations

from collections.abc import Sequence

from .forest import LABEL_NONE, LABEL_S, BlossomForest
from .graph import GraphInfo


class MatchingError(Exception):
    """Raised when verification of the matching fails.

    This can only happen if there is a bug in the algorithm.
    """


def _edge_slack_2x(graph: GraphInfo,
                   dual_var: Sequence[int|float],
                   k: int
                   ) -> int|float:
    """Return twice the slack of edge "k", ignoring blossom duals."""
    (x, y, w) = graph.edges[k]
    return dual_var[x] + dual_var[y] - 2 * w


def verify_optimum(graph: GraphInfo,
                   forest: BlossomForest,
                   vertex_mate: Sequence[int],
                   max_cardinality: bool
                   ) -> None:
    """Verify that the final matching and dual variables prove that
    the matching is optimal.

    This function checks the conditions of complementary slackness:
    dual feasibility of every edge, zero slack on matched edges,
    zero dual on unmatched vertices and full blossoms wherever the
    blossom dual is positive.

    This only works reliably for integer edge weights.

    This function takes time O(n**2 + m * n).

    Parameters:
        graph: The input graph.
        forest: Final blossom structure and dual variables.
        vertex_mate: For each vertex, the remote endpoint of its matched
            edge, or -1 if the vertex is unmatched.
        max_cardinality: True if the matching was computed in
            maximum-cardinality mode.

    Raises:
        MatchingError: If the matching is not optimal.
    """

    num_vertex = graph.num_vertex
    endpoint = graph.endpoint
    dual_var = forest.dual_var

    # Check that the matching is symmetric.
    for x in range(num_vertex):
        p = vertex_mate[x]
        if p >= 0 and vertex_mate[endpoint[p]] != p ^ 1:
            raise MatchingError(
                f"Verification failed: asymmetric match of vertex {x}")

    # In maximum-cardinality mode, vertex duals may go negative.
    # Shift all vertex duals up by a constant before checking them.
    min_vertex_dual = min(dual_var[:num_vertex])
    if max_cardinality:
        vdual_offset = max(0, -min_vertex_dual)
    else:
        vdual_offset = 0

    if min_vertex_dual + vdual_offset < 0:
        raise MatchingError(
            "Verification failed: negative vertex dual"
            f" {min_vertex_dual}")

    for b in forest.live_blossoms():
        if dual_var[b] < 0:
            raise MatchingError(
                f"Verification failed: negative dual {dual_var[b]}"
                f" for blossom {b}")

    for k in range(graph.num_edge):
        (x, y, _w) = graph.edges[k]
        slack = _edge_slack_2x(graph, dual_var, k)

        # Add the duals of blossoms that contain both endpoints.
        x_chain = forest.ancestors(x)
        y_chain = forest.ancestors(y)
        x_chain.reverse()
        y_chain.reverse()
        for (bx, by) in zip(x_chain, y_chain):
            if bx != by:
                break
            slack += 2 * dual_var[bx]

        if slack < 0:
            raise MatchingError(
                f"Verification failed: negative slack {slack}"
                f" for edge {(x, y)}")

        x_matched = (vertex_mate[x] // 2 == k)
        y_matched = (vertex_mate[y] // 2 == k)
        if x_matched or y_matched:
            if not (x_matched and y_matched):
                raise MatchingError(
                    f"Verification failed: edge {(x, y)} matched"
                    " on one side only")
            if slack != 0:
                raise MatchingError(
                    f"Verification failed: non-zero slack {slack}"
                    f" for matched edge {(x, y)}")

    for x in range(num_vertex):
        if vertex_mate[x] < 0 and dual_var[x] + vdual_offset != 0:
            raise MatchingError(
                f"Verification failed: non-zero dual {dual_var[x]}"
                f" for unmatched vertex {x}")

    # Every blossom with positive dual must be full: all edges between
    # the second and third sub-blossom, the fourth and fifth and so on,
    # must be matched.
    for b in forest.live_blossoms():
        if dual_var[b] <= 0:
            continue
        endps = forest.blossom_endps[b]
        assert endps is not None
        if len(endps) % 2 != 1:
            raise MatchingError(
                f"Verification failed: blossom {b} has even length")
        for p in endps[1::2]:
            if ((vertex_mate[endpoint[p]] != p ^ 1)
                    or (vertex_mate[endpoint[p ^ 1]] != p)):
                raise MatchingError(
                    f"Verification failed: blossom {b} with non-zero dual"
                    " is not full")


def check_delta2(graph: GraphInfo,
                 forest: BlossomForest,
                 label: Sequence[int],
                 best_edge: Sequence[int]
                 ) -> None:
    """Check the least-slack edge to every free vertex against a brute
    force search.

    This function takes time O(n + m).

    Raises:
        MatchingError: If the tracked edge does not have least slack.
    """

    vertex_blossom = forest.vertex_blossom
    dual_var = forest.dual_var

    for v in range(graph.num_vertex):
        if label[vertex_blossom[v]] != LABEL_NONE:
            continue

        bd: int|float = 0
        bk = -1
        for p in graph.neighbend[v]:
            k = p // 2
            w = graph.endpoint[p]
            if label[vertex_blossom[w]] == LABEL_S:
                d = _edge_slack_2x(graph, dual_var, k)
                if bk == -1 or d < bd:
                    bk = k
                    bd = d

        tracked = best_edge[v]
        if (bk == -1) and (tracked == -1):
            continue
        if ((tracked != -1) and (bk != -1)
                and bd == _edge_slack_2x(graph, dual_var, tracked)):
            continue

        raise MatchingError(
            f"Verification failed: vertex {v} tracks edge {tracked}"
            f" but edge {bk} has least slack {bd}")


def check_delta3(graph: GraphInfo,
                 forest: BlossomForest,
                 label: Sequence[int],
                 best_edge: Sequence[int]
                 ) -> None:
    """Check the least-slack edge between distinct S-blossoms against
    a brute force search.

    This function takes time O(n + m).

    Raises:
        MatchingError: If the tracked edges do not include the edge
            with least slack.
    """

    num_vertex = graph.num_vertex
    vertex_blossom = forest.vertex_blossom
    dual_var = forest.dual_var

    bk = -1
    bd: int|float = 0
    tbk = -1
    tbd: int|float = 0

    for b in range(2 * num_vertex):
        if forest.blossom_parent[b] != -1 or label[b] != LABEL_S:
            continue

        for v in forest.leaves(b):
            for p in graph.neighbend[v]:
                k = p // 2
                w = graph.endpoint[p]
                if (vertex_blossom[w] != b
                        and label[vertex_blossom[w]] == LABEL_S):
                    d = _edge_slack_2x(graph, dual_var, k)
                    if bk == -1 or d < bd:
                        bk = k
                        bd = d

        if best_edge[b] != -1:
            (i, j, _w) = graph.edges[best_edge[b]]
            if vertex_blossom[i] != b and vertex_blossom[j] != b:
                raise MatchingError(
                    f"Verification failed: blossom {b} tracks edge"
                    f" {best_edge[b]} which is not incident")
            if (vertex_blossom[i] == b) == (vertex_blossom[j] == b):
                raise MatchingError(
                    f"Verification failed: blossom {b} tracks internal"
                    f" edge {best_edge[b]}")
            if (label[vertex_blossom[i]] != LABEL_S
                    or label[vertex_blossom[j]] != LABEL_S):
                raise MatchingError(
                    f"Verification failed: blossom {b} tracks edge"
                    f" {best_edge[b]} to a non-S blossom")
            d = _edge_slack_2x(graph, dual_var, best_edge[b])
            if tbk == -1 or d < tbd:
                tbk = best_edge[b]
                tbd = d

    if (bk == -1) != (tbk == -1) or bd != tbd:
        raise MatchingError(
            f"Verification failed: least-slack S-S edge {bk} with slack"
            f" {bd} but tracked edge {tbk} with slack {tbd}")
