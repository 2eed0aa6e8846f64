"""Merkle tree keeping every leaf and intermediate node in memory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from .merkle_tree import Hasher, MerkleProof, MerkleTree, MerkleTreeError


@dataclass(frozen=True)
class FullMerkleBranch:
    """One step of a proof: the sibling hash and which side the path took."""

    sibling: Any
    is_left: bool

    @classmethod
    def left(cls, sibling: Any) -> "FullMerkleBranch":
        """Left branch taken; the sibling is on the right."""
        return cls(sibling, True)

    @classmethod
    def right(cls, sibling: Any) -> "FullMerkleBranch":
        """Right branch taken; the sibling is on the left."""
        return cls(sibling, False)

    def __repr__(self) -> str:
        name = "Left" if self.is_left else "Right"
        return f"{name}({self.sibling!r})"


class FullMerkleProof(MerkleProof):
    """Merkle proof as a list of branches, bottom to top."""

    def __init__(self, hasher: Hasher, branches: Iterable[FullMerkleBranch]) -> None:
        super().__init__(hasher)
        self.branches = list(branches)

    def length(self) -> int:
        return len(self.branches)

    def leaf_index(self) -> int:
        index = 0
        for branch in reversed(self.branches):
            index = index << 1 if branch.is_left else (index << 1) + 1
        return index

    def get_path_elements(self) -> list[Any]:
        return [branch.sibling for branch in self.branches]

    def get_path_index(self) -> list[int]:
        return [0 if branch.is_left else 1 for branch in self.branches]

    def compute_root_from(self, leaf: Any) -> Any:
        acc = leaf
        for branch in self.branches:
            if branch.is_left:
                acc = self.hasher.hash([acc, branch.sibling])
            else:
                acc = self.hasher.hash([branch.sibling, acc])
        return acc

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FullMerkleProof):
            return NotImplemented
        return self.branches == other.branches

    def __repr__(self) -> str:
        return f"Proof({self.branches!r})"


class FullMerkleTree(MerkleTree):
    """Merkle tree with all leaf and intermediate hashes stored."""

    def __init__(self, hasher: Hasher, depth: int, initial_leaf: Any) -> None:
        if depth < 0:
            raise MerkleTreeError("depth must be non-negative")
        self._hasher = hasher
        self._depth = depth

        cached = [initial_leaf]
        for _ in range(depth):
            previous = cached[-1]
            cached.append(hasher.hash([previous, previous]))
        self._cached_nodes = cached

        self._nodes = [
            node
            for level, node in enumerate(reversed(cached))
            for _ in range(1 << level)
        ]
        self._leaf_flags = [False] * (1 << depth)
        self._next_index = 0
        self._metadata = b""

    @classmethod
    def default(cls, hasher: Hasher, depth: int) -> "FullMerkleTree":
        """Create a tree whose empty leaves are the hasher's default leaf."""
        return cls(hasher, depth, hasher.default_leaf())

    def depth(self) -> int:
        return self._depth

    def capacity(self) -> int:
        return 1 << self._depth

    def leaves_set(self) -> int:
        """Return the next never-used index (deletions leave it unchanged)."""
        return self._next_index

    def root(self) -> Any:
        return self._nodes[0]

    def close_db_connection(self) -> None:
        """Nothing to release for an in-memory tree."""

    def _leaf_position(self, index: int) -> int:
        return self.capacity() + index - 1

    def set(self, index: int, leaf: Any) -> None:
        self.set_range(index, [leaf])
        self._next_index = max(self._next_index, index + 1)

    def get(self, index: int) -> Any:
        if not 0 <= index < self.capacity():
            raise MerkleTreeError("leaf index out of bounds")
        return self._nodes[self._leaf_position(index)]

    def get_subtree_root(self, n: int, index: int) -> Any:
        """Return the node at level ``n`` (0 is the root) above leaf ``index``."""
        if not 0 <= n <= self._depth:
            raise MerkleTreeError("level exceeds depth size")
        if not 0 <= index < self.capacity():
            raise MerkleTreeError("index exceeds set size")
        if n == 0:
            return self.root()
        if n == self._depth:
            return self.get(index)
        return self._nodes[(1 << n) - 1 + (index >> (self._depth - n))]

    def get_empty_leaves_indices(self) -> list[int]:
        return [
            index
            for index, is_set in enumerate(self._leaf_flags[: self._next_index])
            if not is_set
        ]

    def set_range(self, start: int, leaves: Iterable[Any]) -> None:
        """Set consecutive leaves beginning at ``start``."""
        values = list(leaves)
        if start < 0 or start + len(values) > self.capacity():
            raise MerkleTreeError("provided hashes do not fit in the tree")
        if not values:
            return
        first = self._leaf_position(start)
        for offset, value in enumerate(values):
            self._nodes[first + offset] = value
            self._leaf_flags[start + offset] = True
        self._update_nodes(first, first + len(values) - 1)
        self._next_index = max(self._next_index, start + len(values))

    def override_range(
        self, start: int, leaves: Iterable[Any], indices: Iterable[int]
    ) -> None:
        """Mark ``indices`` empty and write ``leaves`` from ``start`` onwards."""
        indices = list(indices)
        if not indices:
            raise MerkleTreeError("no indices given")
        if any(not 0 <= i < self.capacity() for i in indices):
            raise MerkleTreeError("index exceeds set size")
        min_index = indices[0]
        if min_index > start:
            raise MerkleTreeError("indices must not start after the range")
        new_leaves = list(leaves)
        max_index = start + len(new_leaves)

        values = [self._hasher.default_leaf()] * (max_index - min_index)
        for i in range(min_index, start):
            if i not in indices:
                values[i - min_index] = self.get(i)
        values[start - min_index:] = new_leaves

        for i in indices:
            self._leaf_flags[i] = False

        self.set_range(start, values)

    def update_next(self, leaf: Any) -> None:
        self.set(self._next_index, leaf)

    def delete(self, index: int) -> None:
        """Reset a previously used leaf to the default value."""
        if index < self._next_index:
            self.set(index, self._hasher.default_leaf())
            self._leaf_flags[index] = False

    def proof(self, index: int) -> FullMerkleProof:
        if not 0 <= index < self.capacity():
            raise MerkleTreeError("index exceeds set size")
        position = self._leaf_position(index)
        branches = []
        while position > 0:
            if position & 1:
                branches.append(FullMerkleBranch.left(self._nodes[position + 1]))
            else:
                branches.append(FullMerkleBranch.right(self._nodes[position - 1]))
            position = _parent(position)
        return FullMerkleProof(self._hasher, branches)

    def verify(self, leaf: Any, proof: MerkleProof) -> bool:
        return proof.compute_root_from(leaf) == self.root()

    def compute_root(self) -> Any:
        return self.root()

    def set_metadata(self, metadata: bytes) -> None:
        self._metadata = bytes(metadata)

    def metadata(self) -> bytes:
        return self._metadata

    def _update_nodes(self, start: int, end: int) -> None:
        while start > 0:
            start, end = _parent(start), _parent(end)
            for parent in range(start, end + 1):
                child = 2 * parent + 1
                self._nodes[parent] = self._hasher.hash(
                    [self._nodes[child], self._nodes[child + 1]]
                )


def _parent(position: int) -> int:
    return ((position + 1) >> 1) - 1