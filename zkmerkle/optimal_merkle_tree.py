"""Merkle tree that stores only the nodes touched by set leaves."""

from __future__ import annotations

from typing import Any, Iterable

from .merkle_tree import Hasher, MerkleProof, MerkleTree, MerkleTreeError


class OptimalMerkleProof(MerkleProof):
    """Merkle proof as (sibling, direction) pairs, bottom to top.

    A direction of 0 means the path went left (sibling on the right),
    1 means it went right (sibling on the left).
    """

    def __init__(self, hasher: Hasher, path: Iterable[tuple[Any, int]]) -> None:
        super().__init__(hasher)
        self.path = [(node, int(direction)) for node, direction in path]

    def length(self) -> int:
        return len(self.path)

    def leaf_index(self) -> int:
        index = 0
        for direction in reversed(self.get_path_index()):
            index = (index << 1) + direction
        return index

    def get_path_elements(self) -> list[Any]:
        return [node for node, _ in self.path]

    def get_path_index(self) -> list[int]:
        return [direction for _, direction in self.path]

    def compute_root_from(self, leaf: Any) -> Any:
        acc = leaf
        for sibling, direction in self.path:
            if direction == 0:
                acc = self.hasher.hash([acc, sibling])
            else:
                acc = self.hasher.hash([sibling, acc])
        return acc

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptimalMerkleProof):
            return NotImplemented
        return self.path == other.path

    def __repr__(self) -> str:
        return f"Proof({self.path!r})"


class OptimalMerkleTree(MerkleTree):
    """Sparse Merkle tree: unset nodes fall back to precomputed empty hashes."""

    def __init__(self, hasher: Hasher, depth: int, initial_leaf: Any) -> None:
        if depth < 0:
            raise MerkleTreeError("depth must be non-negative")
        self._hasher = hasher
        self._depth = depth

        cached = [initial_leaf]
        for _ in range(depth):
            previous = cached[-1]
            cached.append(hasher.hash([previous, previous]))
        cached.reverse()
        # cached[level] is the value of an empty node at that level (0 = root).
        self._cached_nodes = cached

        self._nodes: dict[tuple[int, int], Any] = {}
        self._leaf_flags = [False] * (1 << depth)
        self._next_index = 0
        self._metadata = b""

    @classmethod
    def default(cls, hasher: Hasher, depth: int) -> "OptimalMerkleTree":
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
        return self._get_node(0, 0)

    def close_db_connection(self) -> None:
        """Nothing to release for an in-memory tree."""

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
        return self._get_node(n, index >> (self._depth - n))

    def set(self, index: int, leaf: Any) -> None:
        self._check_index(index)
        self._nodes[(self._depth, index)] = leaf
        self._recalculate_from(index)
        self._next_index = max(self._next_index, index + 1)
        self._leaf_flags[index] = True

    def get(self, index: int) -> Any:
        self._check_index(index)
        return self._get_node(self._depth, index)

    def get_leaf(self, index: int) -> Any:
        """Return the leaf at ``index`` without bounds checking."""
        return self._get_node(self._depth, index)

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
            raise MerkleTreeError("provided range exceeds set size")
        for offset, leaf in enumerate(values, start):
            self._nodes[(self._depth, offset)] = leaf
            self._leaf_flags[offset] = True
            self._recalculate_from(offset)
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
                values[i - min_index] = self.get_leaf(i)
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

    def proof(self, index: int) -> OptimalMerkleProof:
        self._check_index(index)
        path = []
        i = index
        for level in range(self._depth, 0, -1):
            i ^= 1
            path.append((self._get_node(level, i), 1 - (i & 1)))
            i >>= 1
        return OptimalMerkleProof(self._hasher, path)

    def verify(self, leaf: Any, proof: MerkleProof) -> bool:
        if proof.length() != self._depth:
            raise MerkleTreeError("witness length doesn't match tree depth")
        return proof.compute_root_from(leaf) == self.root()

    def compute_root(self) -> Any:
        self._recalculate_from(0)
        return self.root()

    def set_metadata(self, metadata: bytes) -> None:
        self._metadata = bytes(metadata)

    def metadata(self) -> bytes:
        return self._metadata

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.capacity():
            raise MerkleTreeError("index exceeds set size")

    def _get_node(self, level: int, index: int) -> Any:
        return self._nodes.get((level, index), self._cached_nodes[level])

    def _hash_couple(self, level: int, index: int) -> Any:
        left = index & ~1
        return self._hasher.hash(
            [self._get_node(level, left), self._get_node(level, left + 1)]
        )

    def _recalculate_from(self, index: int) -> None:
        i = index
        for level in range(self._depth, 0, -1):
            node = self._hash_couple(level, i)
            i >>= 1
            self._nodes[(level - 1, i)] = node
        self._leaf_flags[index] = True