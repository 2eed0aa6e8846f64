"""Interfaces shared by the Merkle tree implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Sequence


class MerkleTreeError(ValueError):
    """Raised when a Merkle tree operation receives invalid input."""


class Hasher(ABC):
    """Defines the node type, the default leaf and the node hash of a tree."""

    @abstractmethod
    def default_leaf(self) -> Any:
        """Return the value of an empty leaf."""

    @abstractmethod
    def hash(self, inputs: Sequence[Any]) -> Any:
        """Hash a sequence of nodes into a single node."""


class MerkleProof(ABC):
    """A Merkle path from a leaf to the root, bottom to top."""

    def __init__(self, hasher: Hasher) -> None:
        self.hasher = hasher

    @abstractmethod
    def get_path_elements(self) -> list[Any]:
        """Return the sibling nodes along the path."""

    @abstractmethod
    def get_path_index(self) -> list[int]:
        """Return the branch directions along the path (0 = left, 1 = right)."""

    def length(self) -> int:
        """Return the number of levels in the proof."""
        return len(self.get_path_index())

    def leaf_index(self) -> int:
        """Return the leaf index encoded by the branch directions."""
        index = 0
        for direction in reversed(self.get_path_index()):
            index = (index << 1) + direction
        return index

    def compute_root_from(self, leaf: Any) -> Any:
        """Hash the leaf up the path and return the resulting root."""
        acc = leaf
        for sibling, direction in zip(self.get_path_elements(), self.get_path_index()):
            pair = [acc, sibling] if direction == 0 else [sibling, acc]
            acc = self.hasher.hash(pair)
        return acc


class MerkleTree(ABC):
    """Operations every Merkle tree implementation provides."""

    @abstractmethod
    def set(self, index: int, leaf: Any) -> None:
        """Set the leaf at the given index."""

    @abstractmethod
    def get(self, index: int) -> Any:
        """Return the leaf at the given index."""

    @abstractmethod
    def proof(self, index: int) -> MerkleProof:
        """Return a Merkle proof for the leaf at the given index."""

    @abstractmethod
    def root(self) -> Any:
        """Return the current root of the tree."""

    def verify(self, leaf: Any, proof: MerkleProof) -> bool:
        """Check that the proof leads from the leaf to the current root."""
        return proof.compute_root_from(leaf) == self.root()