"""
Algorithm for finding a maximum weight matching in general graphs.

The algorithm is taken from "Efficient Algorithms for Finding Maximum
Matching in Graphs" by Zvi Galil, ACM Computing Surveys, 1986.
It is based on the "blossom" method for finding augmenting paths and
the "primal-dual" method for finding a matching of maximum weight,
both due to Jack Edmonds.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from typing import Optional

from .forest import LABEL_NONE, LABEL_S, LABEL_T, BlossomForest
from .graph import (GraphInfo, add_default_weight,
                    check_input_graph, check_input_types)
from .verify import check_delta2, check_delta3, verify_optimum


_logger = logging.getLogger(__name__)


def maximum_weight_matching(
        edges: Sequence[tuple[int, int, int|float]],
        max_cardinality: bool = False,
        *,
        check_optimum: bool = False,
        check_delta: bool = False
        ) -> list[int]:
    """Compute a maximum-weighted matching in the general undirected weighted
    graph given by "edges".

    The graph is specified as a list of edges, each edge specified as a tuple
    of its two vertices and the edge weight.
    There may be at most one edge between any pair of vertices.
    No vertex may have an edge to itself.
    The graph may be non-connected (i.e. contain multiple components).

    Vertices are indexed by consecutive, non-negative integers, such that
    the first vertex has index 0 and the last vertex has index (n-1).
    Edge weights may be integers or floating point numbers.
    Edge weights may be negative.

    If "max_cardinality" is true, only maximum-cardinality matchings are
    considered as solutions. The result is the matching with maximum weight
    among those.

    This function takes time O(n**3), where "n" is the number of vertices.
    This function uses O(n + m) memory, where "m" is the number of edges.
    The input list is not modified.

    Parameters:
        edges: List of edges, each edge specified as a tuple "(x, y, w)"
            where "x" and "y" are vertex indices and "w" is the edge weight.
        max_cardinality: True to compute a maximum-cardinality matching
            with maximum weight among all maximum-cardinality matchings.
        check_optimum: True to verify the optimality of the result via
            its dual variables. Only done for integer weights.
        check_delta: True to cross-check the least-slack edge tracking
            against a brute force search in every substage.
            This increases the run time to O(n**4).

    Returns:
        List "mate" of length "n", where "mate[x]" is the vertex matched
        to vertex "x", or -1 if vertex "x" is unmatched.

    Raises:
        ValueError: If the input does not satisfy the constraints.
        TypeError: If the input contains invalid data types.
        MatchingError: If "check_optimum" or "check_delta" is set and
            the check fails.
    """

    # Check that the input meets all constraints.
    check_input_types(edges)
    check_input_graph(edges)

    # Special case for empty graphs.
    if not edges:
        return []

    # Initialize graph representation.
    graph = GraphInfo(edges)

    # Initialize the matching algorithm.
    ctx = _MatchingContext(graph, max_cardinality, check_delta)

    # Improve the solution until no further improvement is possible.
    #
    # Each successful pass through this loop increases the number
    # of matched edges by 1.
    #
    # This loop runs through at most (n/2 + 1) iterations.
    # Each iteration takes time O(n**2).
    num_stage = 0
    while ctx.run_stage():
        num_stage += 1

    # Verify that the matching is optimal.
    # This only works reliably for integer weights.
    if check_optimum:
        if graph.integer_weights:
            verify_optimum(graph,
                           ctx.forest,
                           ctx.vertex_mate,
                           max_cardinality)
        else:
            _logger.debug("skip optimum check for non-integer weights")

    mate = ctx.extract_mate()

    _logger.debug("matched %d pairs in %d stages",
                  sum(1 for y in mate if y != -1) // 2, num_stage)

    return mate


def maximum_cardinality_matching(
        edges: Sequence[tuple],
        *,
        check_optimum: bool = False,
        check_delta: bool = False
        ) -> list[int]:
    """Compute a maximum-cardinality matching in the general undirected
    graph given by "edges".

    Edges may be given as "(x, y)" or "(x, y, w)". Weights are ignored;
    every edge counts the same.

    This function takes time O(n**3).

    Returns:
        List "mate" of length "n", where "mate[x]" is the vertex matched
        to vertex "x", or -1 if vertex "x" is unmatched.

    Raises:
        ValueError: If the input does not satisfy the constraints.
        TypeError: If the input contains invalid data types.
    """
    return maximum_weight_matching(add_default_weight(edges),
                                   True,
                                   check_optimum=check_optimum,
                                   check_delta=check_delta)


class MatchedPairs:
    """Pairs "(x, mate[x])" with "x < mate[x]" of a mate list.

    Each call to "iter()" starts a new pass over the mate list.
    """

    __slots__ = ("mate",)

    def __init__(self, mate: Sequence[int]) -> None:
        self.mate = mate

    def __iter__(self) -> Iterator[tuple[int, int]]:
        for (x, y) in enumerate(self.mate):
            if x < y:
                yield (x, y)


def iter_pairs(mate: Sequence[int]) -> MatchedPairs:
    """Return the matched pairs of a mate list as a re-iterable object."""
    return MatchedPairs(mate)


class _MatchingContext:
    """Holds all data used by the matching algorithm.

    It contains a partial solution of the matching problem and several
    auxiliary data structures.
    """

    def __init__(self,
                 graph: GraphInfo,
                 max_cardinality: bool,
                 check_delta: bool
                 ) -> None:
        """Set up the initial state of the matching algorithm."""

        num_vertex = graph.num_vertex

        # Reference to the input graph.
        # The graph does not change while the algorithm runs.
        self.graph = graph

        self.max_cardinality = max_cardinality
        self.check_delta = check_delta

        # Nested blossoms and dual variables.
        self.forest = BlossomForest(num_vertex, graph.max_weight)

        # "vertex_mate[x]" is the remote endpoint of the matched edge
        # of vertex "x", or -1 if "x" is unmatched.
        #
        # If "vertex_mate[x] == p", then "x" is matched to vertex
        # "endpoint[p]" and "vertex_mate[endpoint[p]] == p ^ 1".
        self.vertex_mate: list[int] = num_vertex * [-1]

        # The following data structures are reset at the start of
        # every stage.

        # "label[b]" is the label of top-level blossom "b".
        # A vertex inside a T-blossom gets label T when it is reached from
        # an S-vertex. Otherwise vertex labels mirror the labels of their
        # top-level blossom.
        self.label: list[int] = (2 * num_vertex) * [LABEL_NONE]

        # If "b" is a top-level S-blossom, "label_end[b]" is the remote
        # endpoint of the edge through which "b" got its label, or -1 if
        # its base vertex is unmatched.
        # If "b" is a top-level T-blossom, "label_end[b]" is the remote
        # endpoint of the edge through which "b" got its label.
        # If "x" is a vertex inside a T-blossom and "label[x] == LABEL_T",
        # "label_end[x]" is the remote endpoint of the edge through which
        # "x" was reached.
        self.label_end: list[int] = (2 * num_vertex) * [-1]

        # If "x" is a vertex that is not in an S-blossom, "best_edge[x]" is
        # the least-slack edge to an S-vertex, or -1.
        # If "b" is a top-level S-blossom, "best_edge[b]" is the least-slack
        # edge to a different S-blossom, or -1.
        self.best_edge: list[int] = (2 * num_vertex) * [-1]

        # If "b" is a non-trivial top-level S-blossom,
        # "blossom_best_edges[b]" lists the least-slack edges from "b" to
        # each other S-blossom, at most one per neighboring blossom, or
        # None if the list has not been computed.
        self.blossom_best_edges: list[Optional[list[int]]] = (
            (2 * num_vertex) * [None])

        # "allow_edge[k]" is true if edge "k" is known to have zero slack.
        self.allow_edge: list[bool] = graph.num_edge * [False]

        # Queue of newly labeled S-vertices that still need to be scanned.
        # It is used as a stack; the order does not matter.
        self.queue: list[int] = []

        # Marks blossoms that were visited while tracing back from
        # an S-to-S edge. All marks are cleared after each trace.
        self.blossom_marker: list[bool] = (2 * num_vertex) * [False]

        # True if debug records should be emitted for this stage.
        self.debug = False

    def edge_slack_2x(self, k: int) -> int|float:
        """Return 2 times the slack of edge "k".

        Only valid for edges that are not contained in a blossom.
        """
        (x, y, w) = self.graph.edges[k]
        dual_var = self.forest.dual_var
        return dual_var[x] + dual_var[y] - 2 * w

    def extract_mate(self) -> list[int]:
        """Convert the final matching to a list of partner vertices."""
        endpoint = self.graph.endpoint
        mate = [(endpoint[p] if p >= 0 else -1) for p in self.vertex_mate]
        for x in range(len(mate)):
            assert mate[x] == -1 or mate[mate[x]] == x
        return mate

    def reset_stage(self) -> None:
        """Reset data which are only valid during a stage."""

        num_vertex = self.graph.num_vertex

        self.label[:] = (2 * num_vertex) * [LABEL_NONE]
        self.best_edge[:] = (2 * num_vertex) * [-1]
        self.blossom_best_edges[num_vertex:] = num_vertex * [None]
        self.allow_edge[:] = self.graph.num_edge * [False]
        self.queue.clear()
        self.debug = _logger.isEnabledFor(logging.DEBUG)

    #
    # Alternating trees:
    #

    def assign_label(self, w: int, t: int, p: int) -> None:
        """Assign label "t" to the top-level blossom that contains vertex "w".

        The blossom is reached through the edge with remote endpoint "p",
        or "p" is -1 if the blossom is the root of an alternating tree.

        If "t" is T, the base vertex of the blossom is matched and its mate
        gets label S. New S-vertices are added to the queue.
        """

        endpoint = self.graph.endpoint
        label = self.label
        b = self.forest.vertex_blossom[w]

        if self.debug:
            _logger.debug("assign label %d to vertex %d (endpoint %d)",
                          t, w, p)

        assert label[w] == LABEL_NONE and label[b] == LABEL_NONE
        label[w] = label[b] = t
        self.label_end[w] = self.label_end[b] = p
        self.best_edge[w] = self.best_edge[b] = -1

        if t == LABEL_S:
            # The blossom becomes an S-blossom.
            # All its vertices must be scanned.
            self.queue.extend(self.forest.leaves(b))
        else:
            # The blossom becomes a T-blossom.
            # Its base vertex is matched and the mate becomes an S-vertex.
            base = self.forest.blossom_base[b]
            p_base = self.vertex_mate[base]
            assert p_base >= 0
            self.assign_label(endpoint[p_base], LABEL_S, p_base ^ 1)

    def scan_blossom(self, v: int, w: int) -> int:
        """Trace back from vertices "v" and "w" to discover either
        a new blossom or an augmenting path.

        The two trace-backs advance in turn, one S-blossom at a time.

        Returns:
            Base vertex of the new blossom, or -1 if the trace-backs
            end in two different roots (an augmenting path).
        """

        endpoint = self.graph.endpoint
        vertex_blossom = self.forest.vertex_blossom
        blossom_base = self.forest.blossom_base
        label = self.label
        label_end = self.label_end
        marker = self.blossom_marker

        marked: list[int] = []
        base = -1

        while v != -1 or w != -1:

            # Look for a breadcrumb in the blossom of "v".
            b = vertex_blossom[v]
            if marker[b]:
                # Found a common ancestor; this is the base of a new blossom.
                base = blossom_base[b]
                break

            assert label[b] == LABEL_S
            marked.append(b)
            marker[b] = True

            # Trace one step back.
            assert label_end[b] == self.vertex_mate[blossom_base[b]]
            if label_end[b] == -1:
                # The base of blossom "b" is single; stop tracing this path.
                v = -1
            else:
                v = endpoint[label_end[b]]
                b = vertex_blossom[v]
                assert label[b] == LABEL_T
                # "b" is a T-blossom; trace one more step back.
                assert label_end[b] >= 0
                v = endpoint[label_end[b]]

            # Swap "v" and "w" so that we alternate between both paths.
            if w != -1:
                (v, w) = (w, v)

        # Remove breadcrumbs.
        for b in marked:
            marker[b] = False

        return base

    def add_blossom(self, base: int, k: int) -> None:
        """Create a new blossom with base vertex "base", closed by
        edge "k" between two S-vertices.

        Label the new blossom S, set its dual variable to zero,
        relabel its T-vertices to S and add them to the queue.
        """

        graph = self.graph
        forest = self.forest
        endpoint = graph.endpoint
        vertex_blossom = forest.vertex_blossom
        label = self.label
        label_end = self.label_end
        best_edge = self.best_edge
        blossom_best_edges = self.blossom_best_edges

        (v, w, _wt) = graph.edges[k]
        bb = vertex_blossom[base]
        bv = vertex_blossom[v]
        bw = vertex_blossom[w]

        # Make the list of sub-blossoms and their connecting endpoints.
        # Trace back from "v" to the base.
        path: list[int] = []
        endps: list[int] = []
        while bv != bb:
            path.append(bv)
            endps.append(label_end[bv])
            assert (label[bv] == LABEL_T
                    or (label[bv] == LABEL_S
                        and label_end[bv]
                            == self.vertex_mate[forest.blossom_base[bv]]))
            assert label_end[bv] >= 0
            v = endpoint[label_end[bv]]
            bv = vertex_blossom[v]

        # The sub-blossom that contains the base comes first.
        path.append(bb)
        path.reverse()
        endps.reverse()
        endps.append(2 * k)

        # Trace back from "w" to the base.
        while bw != bb:
            path.append(bw)
            endps.append(label_end[bw] ^ 1)
            assert (label[bw] == LABEL_T
                    or (label[bw] == LABEL_S
                        and label_end[bw]
                            == self.vertex_mate[forest.blossom_base[bw]]))
            assert label_end[bw] >= 0
            w = endpoint[label_end[bw]]
            bw = vertex_blossom[w]

        b = forest.new_blossom(base, path, endps)

        if _logger.isEnabledFor(logging.DEBUG):
            _logger.debug("add blossom %d base %d childs %s",
                          b, base, path)

        # The new blossom is an S-blossom.
        assert label[bb] == LABEL_S
        label[b] = LABEL_S
        label_end[b] = label_end[bb]

        # Former T-vertices of the blossom become S-vertices.
        for x in forest.leaves(b):
            if label[vertex_blossom[x]] == LABEL_T:
                self.queue.append(x)
            vertex_blossom[x] = b

        # Compute the least-slack edges from the new blossom to every
        # neighboring S-blossom, merging the lists of the sub-blossoms.
        best_edge_to = (2 * graph.num_vertex) * [-1]
        for sub in path:
            sub_edges = blossom_best_edges[sub]
            if sub_edges is None:
                # No list available; scan all edges of the sub-blossom.
                sub_edges = [p // 2
                             for x in forest.leaves(sub)
                             for p in graph.neighbend[x]]
            for e in sub_edges:
                (i, j, _wt) = graph.edges[e]
                if vertex_blossom[j] == b:
                    (i, j) = (j, i)
                bj = vertex_blossom[j]
                if ((bj != b)
                        and (label[bj] == LABEL_S)
                        and ((best_edge_to[bj] == -1)
                             or (self.edge_slack_2x(e)
                                 < self.edge_slack_2x(best_edge_to[bj])))):
                    best_edge_to[bj] = e
            # Forget about the least-slack edges of the sub-blossom.
            blossom_best_edges[sub] = None
            best_edge[sub] = -1

        b_edges = [e for e in best_edge_to if e != -1]
        blossom_best_edges[b] = b_edges

        # Select the overall least-slack edge to a different S-blossom.
        best = -1
        for e in b_edges:
            if best == -1 or self.edge_slack_2x(e) < self.edge_slack_2x(best):
                best = e
        best_edge[b] = best

    def expand_blossom(self, b: int, end_stage: bool) -> None:
        """Expand blossom "b" and promote its sub-blossoms to top-level.

        At the end of a stage, sub-blossoms with zero dual are expanded
        as well. In the middle of a stage, an expanded T-blossom is
        replaced by an alternating path through its sub-blossoms.
        """

        forest = self.forest
        num_vertex = self.graph.num_vertex
        vertex_blossom = forest.vertex_blossom

        _logger.debug("expand blossom %d (end_stage=%s)", b, end_stage)

        # Nested expansions use an explicit stack.
        stack = [b]
        while stack:
            b = stack.pop()
            childs = forest.blossom_childs[b]
            assert childs is not None

            # Convert sub-blossoms into top-level blossoms.
            for s in childs:
                forest.blossom_parent[s] = -1
                if s < num_vertex:
                    vertex_blossom[s] = s
                elif end_stage and forest.dual_var[s] == 0:
                    # Expand this sub-blossom as well.
                    stack.append(s)
                else:
                    for x in forest.leaves(s):
                        vertex_blossom[x] = s

            # If we expand a T-blossom during a stage, its sub-blossoms
            # must be relabeled.
            if (not end_stage) and self.label[b] == LABEL_T:
                self.relabel_expanded_t_blossom(b)

            # Recycle the blossom index.
            self.label[b] = LABEL_NONE
            self.label_end[b] = -1
            self.blossom_best_edges[b] = None
            self.best_edge[b] = -1
            forest.release_blossom(b)

    def relabel_expanded_t_blossom(self, b: int) -> None:
        """Relabel the sub-blossoms of T-blossom "b" which has just been
        expanded in the middle of a stage.

        The sub-blossoms on the even-length path from the entry point to
        the base get alternating labels T and S. Sub-blossoms on the
        other side of the cycle keep no label unless they have been
        reached from an S-vertex.
        """

        forest = self.forest
        endpoint = self.graph.endpoint
        vertex_blossom = forest.vertex_blossom
        label = self.label
        label_end = self.label_end
        allow_edge = self.allow_edge

        childs = forest.blossom_childs[b]
        endps = forest.blossom_endps[b]
        assert childs is not None and endps is not None

        # Start at the sub-blossom through which the expanding
        # blossom obtained its label, and relabel sub-blossoms until
        # we reach the base.
        assert label_end[b] >= 0
        entry_child = vertex_blossom[endpoint[label_end[b] ^ 1]]

        # Decide in which direction we will go round the blossom.
        j = childs.index(entry_child)
        if j & 1:
            # Start index is odd; go forward and wrap.
            j -= len(childs)
            jstep = 1
            endptrick = 0
        else:
            # Start index is even; go backward.
            jstep = -1
            endptrick = 1

        # Move along the blossom until we get to the base.
        p = label_end[b]
        while j != 0:
            # Relabel the T-sub-blossom.
            label[endpoint[p ^ 1]] = LABEL_NONE
            label[endpoint[endps[j - endptrick] ^ endptrick ^ 1]] = LABEL_NONE
            self.assign_label(endpoint[p ^ 1], LABEL_T, p)
            # Step to the next S-sub-blossom and note its forward endpoint.
            allow_edge[endps[j - endptrick] // 2] = True
            j += jstep
            p = endps[j - endptrick] ^ endptrick
            # Step to the next T-sub-blossom.
            allow_edge[p // 2] = True
            j += jstep

        # Relabel the base T-sub-blossom without creating a new S-vertex
        # from its mate, which is already an S-vertex outside the blossom.
        bv = childs[j]
        label[endpoint[p ^ 1]] = label[bv] = LABEL_T
        label_end[endpoint[p ^ 1]] = label_end[bv] = p
        self.best_edge[bv] = -1

        # Continue along the blossom until we get back to the entry point.
        j += jstep
        while childs[j] != entry_child:
            # Examine the vertices of the sub-blossom to see whether
            # it is reachable from a neighboring S-vertex outside the
            # expanding blossom.
            bv = childs[j]
            if label[bv] == LABEL_S:
                # This sub-blossom just got label S through one of its
                # neighbors; leave it.
                j += jstep
                continue

            reached = -1
            for x in forest.leaves(bv):
                if label[x] != LABEL_NONE:
                    reached = x
                    break

            # If the sub-blossom contains a reachable vertex, assign
            # label T to the sub-blossom.
            if reached != -1:
                assert label[reached] == LABEL_T
                assert vertex_blossom[reached] == bv
                label[reached] = LABEL_NONE
                label[endpoint[self.vertex_mate[forest.blossom_base[bv]]]] = (
                    LABEL_NONE)
                self.assign_label(reached, LABEL_T, label_end[reached])

            j += jstep

    #
    # Augmenting:
    #

    def augment_blossom(self, b: int, v: int) -> None:
        """Swap matched/unmatched edges over an alternating path through
        blossom "b" between vertex "v" and the base vertex.

        This makes "v" the new base vertex of "b". Sub-blossoms on the
        path are augmented in the same way.
        """

        blossom_parent = self.forest.blossom_parent

        # Use an explicit stack to avoid deep recursion.
        # Each entry "(outer, x)" means that blossom "outer" must be
        # augmented starting from its (possibly indirect) sub-blossom "x".
        # Sub-blossoms are always handled before their parent.
        stack = [(b, v)]
        while stack:
            (outer, sub) = stack.pop()
            parent = blossom_parent[sub]
            if parent != outer:
                # After augmenting "parent", continue one level up.
                stack.append((outer, parent))
            self.augment_blossom_step(parent, sub, stack)

        assert self.forest.blossom_base[b] == v

    def augment_blossom_step(self,
                             b: int,
                             t: int,
                             stack: list[tuple[int, int]]
                             ) -> None:
        """Augment blossom "b" starting from its direct sub-blossom "t",
        which has already been augmented.

        Sub-blossoms on the path which still need augmentation are pushed
        onto "stack".
        """

        forest = self.forest
        num_vertex = self.graph.num_vertex
        endpoint = self.graph.endpoint
        vertex_mate = self.vertex_mate

        childs = forest.blossom_childs[b]
        endps = forest.blossom_endps[b]
        assert childs is not None and endps is not None

        # Figure out how we will go round the blossom.
        i = j = childs.index(t)
        if i & 1:
            # Start index is odd; go forward and wrap.
            j -= len(childs)
            jstep = 1
            endptrick = 0
        else:
            # Start index is even; go backward.
            jstep = -1
            endptrick = 1

        # Move along the blossom until we get to the base.
        while j != 0:
            # Step to the next sub-blossom and augment it.
            j += jstep
            t = childs[j]
            p = endps[j - endptrick] ^ endptrick
            if t >= num_vertex:
                stack.append((t, endpoint[p]))
            # Step to the next sub-blossom and augment it.
            j += jstep
            t = childs[j]
            if t >= num_vertex:
                stack.append((t, endpoint[p ^ 1]))
            # Match the edge connecting those sub-blossoms.
            vertex_mate[endpoint[p]] = p ^ 1
            vertex_mate[endpoint[p ^ 1]] = p

        # Rotate the list of sub-blossoms to put the new base at the front.
        forest.rotate_blossom(b, i)

    def augment_matching(self, k: int) -> None:
        """Augment the matching along the augmenting path through edge "k".

        Edge "k" connects two S-vertices in different alternating trees.
        Both trees are traced back to their roots, flipping matched and
        unmatched edges along the way.
        """

        graph = self.graph
        forest = self.forest
        endpoint = graph.endpoint
        vertex_blossom = forest.vertex_blossom
        label = self.label
        label_end = self.label_end
        vertex_mate = self.vertex_mate
        num_vertex = graph.num_vertex

        (v, w, _wt) = graph.edges[k]

        _logger.debug("augment matching through edge %d (%d, %d)", k, v, w)

        for (s, p) in ((v, 2 * k + 1), (w, 2 * k)):
            # Match vertex "s" to remote endpoint "p", then trace back
            # from "s" until we find a single vertex, swapping matched
            # and unmatched edges as we go.
            while True:
                bs = vertex_blossom[s]
                assert label[bs] == LABEL_S
                assert label_end[bs] == vertex_mate[forest.blossom_base[bs]]
                # Augment through the S-blossom from "s" to its base.
                if bs >= num_vertex:
                    self.augment_blossom(bs, s)
                vertex_mate[s] = p
                # Trace one step back.
                if label_end[bs] == -1:
                    # Reached a single vertex; stop.
                    break
                t = endpoint[label_end[bs]]
                bt = vertex_blossom[t]
                assert label[bt] == LABEL_T
                # Trace one step back.
                assert label_end[bt] >= 0
                s = endpoint[label_end[bt]]
                j = endpoint[label_end[bt] ^ 1]
                # Augment through the T-blossom from "j" to its base.
                assert forest.blossom_base[bt] == t
                if bt >= num_vertex:
                    self.augment_blossom(bt, j)
                vertex_mate[j] = label_end[bt]
                # Keep the opposite endpoint; it will be assigned to
                # "vertex_mate[s]" in the next step.
                p = label_end[bt] ^ 1

    #
    # Main stage function:
    #

    def substage_scan(self) -> bool:
        """Scan queued S-vertices to expand the alternating trees.

        The scan proceeds until either an augmenting path is found,
        or the queue of S-vertices becomes empty.

        New blossoms may be created during the scan.
        If an augmenting path is found, the matching is augmented.

        Returns:
            True if the matching was augmented.
        """

        graph = self.graph
        endpoint = graph.endpoint
        vertex_blossom = self.forest.vertex_blossom
        label = self.label
        best_edge = self.best_edge
        allow_edge = self.allow_edge

        # This loop runs through O(n) iterations per stage.
        while self.queue:

            # Take an S-vertex from the queue.
            v = self.queue.pop()
            if self.debug:
                _logger.debug("scan vertex %d", v)
            assert label[vertex_blossom[v]] == LABEL_S

            # Scan its neighbors.
            for p in graph.neighbend[v]:
                k = p // 2
                w = endpoint[p]

                # Note: blossom index of vertex "v" may change during
                # this loop, so we need to refresh it here.

                # Ignore edges that are internal to a blossom.
                if vertex_blossom[v] == vertex_blossom[w]:
                    continue

                kslack: int|float = 0
                if not allow_edge[k]:
                    kslack = self.edge_slack_2x(k)
                    if kslack <= 0:
                        # Edge "k" has zero slack; it may be used.
                        allow_edge[k] = True

                if allow_edge[k]:
                    wlabel = label[vertex_blossom[w]]
                    if wlabel == LABEL_NONE:
                        # "w" is free; label it T and its mate S.
                        self.assign_label(w, LABEL_T, p ^ 1)
                    elif wlabel == LABEL_S:
                        # Edge between two S-blossoms. Find either a new
                        # blossom or an augmenting path.
                        base = self.scan_blossom(v, w)
                        if base >= 0:
                            self.add_blossom(base, k)
                        else:
                            self.augment_matching(k)
                            return True
                    elif label[w] == LABEL_NONE:
                        # "w" is inside a T-blossom but not yet reached
                        # from an S-vertex. Remember that it is reachable
                        # in case the T-blossom gets expanded.
                        assert wlabel == LABEL_T
                        label[w] = LABEL_T
                        self.label_end[w] = p ^ 1

                elif label[vertex_blossom[w]] == LABEL_S:
                    # Keep track of the least-slack non-allowable edge to
                    # a different S-blossom.
                    b = vertex_blossom[v]
                    if (best_edge[b] == -1
                            or kslack < self.edge_slack_2x(best_edge[b])):
                        best_edge[b] = k

                elif label[w] == LABEL_NONE:
                    # "w" is a free vertex, or an unreached vertex inside
                    # a T-blossom. Keep track of the least-slack
                    # non-allowable edge to an S-vertex.
                    if (best_edge[w] == -1
                            or kslack < self.edge_slack_2x(best_edge[w])):
                        best_edge[w] = k

        # No further S-vertices to scan, and no augmenting path found.
        return False

    def substage_calc_dual_delta(
            self
            ) -> tuple[int, int|float, int, int]:
        """Calculate a delta step in the dual LPP problem.

        This function returns the minimum of the 4 types of delta values,
        the type of delta which obtains the minimum, and the edge or
        blossom that produces the minimum delta, if applicable.

        The returned value is 2 times the actual delta value.
        Multiplication by 2 ensures that the result is an integer if all edge
        weights are integers.

        This function takes time O(n).

        Returns:
            Tuple (delta_type, delta_2x, delta_edge, delta_blossom).
        """

        graph = self.graph
        forest = self.forest
        num_vertex = graph.num_vertex
        vertex_blossom = forest.vertex_blossom
        dual_var = forest.dual_var
        label = self.label
        best_edge = self.best_edge

        delta_type = -1
        delta_2x: int|float = 0
        delta_edge = -1
        delta_blossom = -1

        # Compute delta1: the minimum dual variable of any vertex.
        # In maximum-cardinality mode, vertex duals may become negative
        # and delta1 does not apply.
        if not self.max_cardinality:
            delta_type = 1
            delta_2x = min(dual_var[:num_vertex])

        # Compute delta2: the minimum slack of any edge between an S-vertex
        # and a free vertex.
        for x in range(num_vertex):
            if label[vertex_blossom[x]] == LABEL_NONE and best_edge[x] != -1:
                d = self.edge_slack_2x(best_edge[x])
                if delta_type == -1 or d < delta_2x:
                    delta_type = 2
                    delta_2x = d
                    delta_edge = best_edge[x]

        # Compute delta3: half the minimum slack of any edge between
        # two different top-level S-blossoms.
        for b in range(2 * num_vertex):
            if (forest.blossom_parent[b] == -1
                    and label[b] == LABEL_S
                    and best_edge[b] != -1):
                kslack = self.edge_slack_2x(best_edge[b])
                if graph.integer_weights:
                    # All vertex duals in one alternating tree have the
                    # same parity, so the slack of an S-to-S edge is even.
                    assert kslack % 2 == 0
                    d = kslack // 2
                else:
                    d = kslack / 2
                if delta_type == -1 or d < delta_2x:
                    delta_type = 3
                    delta_2x = d
                    delta_edge = best_edge[b]

        # Compute delta4: the minimum dual variable of any top-level
        # T-blossom.
        for b in range(num_vertex, 2 * num_vertex):
            if (forest.blossom_base[b] >= 0
                    and forest.blossom_parent[b] == -1
                    and label[b] == LABEL_T
                    and (delta_type == -1 or dual_var[b] < delta_2x)):
                delta_type = 4
                delta_2x = dual_var[b]
                delta_blossom = b

        if delta_type == -1:
            # No further improvement possible; max-cardinality optimum
            # reached. Do a final delta update to make the optimum
            # verifiable.
            assert self.max_cardinality
            delta_type = 1
            delta_2x = max(0, min(dual_var[:num_vertex]))

        return (delta_type, delta_2x, delta_edge, delta_blossom)

    def substage_apply_delta_step(self, delta_2x: int|float) -> None:
        """Apply a delta step to the dual LPP variables."""

        forest = self.forest
        num_vertex = self.graph.num_vertex
        vertex_blossom = forest.vertex_blossom
        dual_var = forest.dual_var
        label = self.label

        # Apply delta to dual variables of all vertices.
        for x in range(num_vertex):
            xlabel = label[vertex_blossom[x]]
            if xlabel == LABEL_S:
                # S-vertex: subtract delta from dual variable.
                dual_var[x] -= delta_2x
            elif xlabel == LABEL_T:
                # T-vertex: add delta to dual variable.
                dual_var[x] += delta_2x

        # Apply delta to dual variables of top-level non-trivial blossoms.
        for b in range(num_vertex, 2 * num_vertex):
            if forest.blossom_base[b] >= 0 and forest.blossom_parent[b] == -1:
                if label[b] == LABEL_S:
                    # S-blossom: add delta to dual variable.
                    dual_var[b] += delta_2x
                elif label[b] == LABEL_T:
                    # T-blossom: subtract delta from dual variable.
                    dual_var[b] -= delta_2x

    def expand_zero_dual_blossoms(self) -> None:
        """Expand all top-level S-blossoms with zero dual variable.

        This is done at the end of a stage.
        """
        forest = self.forest
        for b in range(self.graph.num_vertex, 2 * self.graph.num_vertex):
            if (forest.blossom_parent[b] == -1
                    and forest.blossom_base[b] >= 0
                    and self.label[b] == LABEL_S
                    and forest.dual_var[b] == 0):
                self.expand_blossom(b, True)

    def run_stage(self) -> bool:
        """Run one stage of the matching algorithm.

        The stage searches a maximum-weight augmenting path.
        If this path is found, it is used to augment the matching,
        thereby increasing the number of matched edges by 1.
        If no such path is found, the matching must already be optimal.

        This function takes time O(n**2).

        Returns:
            True if the matching was successfully augmented.
            False if no further improvement is possible.
        """

        num_vertex = self.graph.num_vertex
        vertex_blossom = self.forest.vertex_blossom

        self.reset_stage()

        # Assign label S to all unmatched vertices and put them in the queue.
        for x in range(num_vertex):
            if (self.vertex_mate[x] == -1
                    and self.label[vertex_blossom[x]] == LABEL_NONE):
                self.assign_label(x, LABEL_S, -1)

        # Stop if all vertices are matched.
        # No further improvement is possible in that case.
        if not self.queue:
            return False

        _logger.debug("start stage with %d free vertices", len(self.queue))

        # Each pass through the following loop is a "substage".
        # The substage tries to find an augmenting path.
        # If an augmenting path is found, we augment the matching and end
        # the stage. Otherwise we update the dual LPP problem and enter the
        # next substage, or stop if no further improvement is possible.
        #
        # This loop runs through at most O(n) iterations per stage.
        augmented = False
        while True:

            # Expand alternating trees.
            # End the stage if an augmenting path is found.
            augmented = self.substage_scan()
            if augmented:
                break

            if self.check_delta:
                check_delta2(self.graph, self.forest,
                             self.label, self.best_edge)
                check_delta3(self.graph, self.forest,
                             self.label, self.best_edge)

            # Determine the size and type of delta step.
            (delta_type, delta_2x, delta_edge, delta_blossom
                ) = self.substage_calc_dual_delta()

            _logger.debug("delta%d = %s", delta_type, delta_2x)

            # Apply the delta step to the dual variables.
            self.substage_apply_delta_step(delta_2x)

            if delta_type == 1:
                # No further improvement possible; optimum reached.
                break

            elif delta_type == 2:
                # Use the least-slack edge to continue the search.
                self.allow_edge[delta_edge] = True
                (i, j, _w) = self.graph.edges[delta_edge]
                if self.label[vertex_blossom[i]] == LABEL_NONE:
                    (i, j) = (j, i)
                assert self.label[vertex_blossom[i]] == LABEL_S
                self.queue.append(i)

            elif delta_type == 3:
                # Use the least-slack edge to continue the search.
                self.allow_edge[delta_edge] = True
                (i, _j, _w) = self.graph.edges[delta_edge]
                assert self.label[vertex_blossom[i]] == LABEL_S
                self.queue.append(i)

            else:
                # Expand the least-z T-blossom.
                assert delta_type == 4
                self.expand_blossom(delta_blossom, False)

        # Expand S-blossoms with zero dual at the end of the stage,
        # but only if the matching changed.
        if augmented:
            self.expand_zero_dual_blossoms()

        return augmented
