"""
Nested blossom structure of a partially matched graph.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Optional, TypeVar


_ElemT = TypeVar("_ElemT")


# Each top-level blossom may be labeled "S" (outer) or "T" (inner)
# or be unlabeled.
LABEL_NONE = 0
LABEL_S = 1
LABEL_T = 2


def rotate(items: list[_ElemT], k: int) -> None:
    """Cyclically shift "items" in place such that "items[k]" ends up
    at index 0."""
    items[:] = items[k:] + items[:k]


class BlossomForest:
    """Forest of nested blossoms over the vertices of a graph.

    Blossom indices "0 .. n-1" are trivial blossoms, i.e. single vertices.
    Blossom indices "n .. 2*n-1" are non-trivial blossoms. These indices
    are taken from a pool of unused indices when a blossom is created,
    and returned to the pool when the blossom is expanded.

    Every vertex and blossom also has a dual variable in this structure.
    """

    def __init__(self, num_vertex: int, max_weight: int|float) -> None:
        """Set up a forest in which every vertex is a top-level blossom.

        This function takes time O(n).
        """

        self.num_vertex = num_vertex

        # "vertex_blossom[x]" is the top-level blossom that contains
        # vertex "x".
        self.vertex_blossom: list[int] = list(range(num_vertex))

        # "blossom_parent[b]" is the immediate parent of blossom "b",
        # or -1 if "b" is a top-level blossom.
        self.blossom_parent: list[int] = (2 * num_vertex) * [-1]

        # "blossom_childs[b]" is the ordered list of sub-blossoms of
        # non-trivial blossom "b". The list starts with the sub-blossom
        # that contains the base vertex and follows the cycle around.
        self.blossom_childs: list[Optional[list[int]]] = (
            (2 * num_vertex) * [None])

        # "blossom_base[b]" is the base vertex of blossom "b",
        # or -1 if index "b" is not in use.
        self.blossom_base: list[int] = (
            list(range(num_vertex)) + num_vertex * [-1])

        # "blossom_endps[b][i]" is the endpoint of the edge that connects
        # "blossom_childs[b][i]" to "blossom_childs[b][i+1]", on the side
        # of "blossom_childs[b][i]". The last entry wraps around to the
        # sub-blossom that contains the base.
        self.blossom_endps: list[Optional[list[int]]] = (
            (2 * num_vertex) * [None])

        # "dual_var[x]" is twice the dual variable of vertex "x".
        # "dual_var[b]" is the dual variable of non-trivial blossom "b".
        # Vertex duals start at the maximum edge weight.
        self.dual_var: list[int|float] = (
            num_vertex * [max_weight] + num_vertex * [0])

        # Blossom indices that are currently not in use.
        self.unused_blossoms: list[int] = list(
            range(num_vertex, 2 * num_vertex))

    def leaves(self, b: int) -> Iterator[int]:
        """Yield the vertices contained in blossom "b".

        Vertices are produced in cycle order of the sub-blossoms.
        The nesting may be deep, so this uses an explicit stack.
        """
        if b < self.num_vertex:
            yield b
            return

        childs = self.blossom_childs[b]
        assert childs is not None
        stack = [iter(childs)]
        while stack:
            for sub in stack[-1]:
                if sub < self.num_vertex:
                    yield sub
                else:
                    sub_childs = self.blossom_childs[sub]
                    assert sub_childs is not None
                    stack.append(iter(sub_childs))
                    break
            else:
                stack.pop()

    def ancestors(self, x: int) -> list[int]:
        """Return the chain of blossoms from vertex "x" up to its
        top-level blossom, starting with "x" itself."""
        chain = [x]
        while self.blossom_parent[chain[-1]] != -1:
            chain.append(self.blossom_parent[chain[-1]])
        return chain

    def live_blossoms(self) -> Iterator[int]:
        """Yield the indices of all non-trivial blossoms in use."""
        for b in range(self.num_vertex, 2 * self.num_vertex):
            if self.blossom_base[b] >= 0:
                yield b

    def new_blossom(self,
                    base: int,
                    childs: list[int],
                    endps: list[int]
                    ) -> int:
        """Create a top-level blossom over the given sub-blossoms.

        The new blossom gets dual variable 0. The caller is responsible
        for updating "vertex_blossom" of the contained vertices.

        Returns:
            Index of the new blossom.
        """
        assert len(childs) == len(endps)
        assert len(childs) % 2 == 1 and len(childs) >= 3

        b = self.unused_blossoms.pop()
        self.blossom_base[b] = base
        self.blossom_parent[b] = -1
        self.blossom_childs[b] = childs
        self.blossom_endps[b] = endps
        self.dual_var[b] = 0
        for sub in childs:
            self.blossom_parent[sub] = b
        return b

    def release_blossom(self, b: int) -> None:
        """Return the index of an expanded blossom to the pool."""
        assert b >= self.num_vertex
        self.blossom_childs[b] = None
        self.blossom_endps[b] = None
        self.blossom_base[b] = -1
        self.unused_blossoms.append(b)

    def rotate_blossom(self, b: int, k: int) -> None:
        """Rotate the sub-blossom cycle of "b" such that sub-blossom "k"
        becomes the first one, and take its base as the new base of "b"."""
        childs = self.blossom_childs[b]
        endps = self.blossom_endps[b]
        assert childs is not None and endps is not None
        rotate(childs, k)
        rotate(endps, k)
        self.blossom_base[b] = self.blossom_base[childs[0]]
