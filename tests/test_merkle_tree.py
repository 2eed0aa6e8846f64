import pytest
from Crypto.Hash import keccak

from zkmerkle.merkle_tree import Hasher, MerkleProof, MerkleTree, MerkleTreeError


class Keccak256(Hasher):
    def default_leaf(self):
        return bytes(32)

    def hash(self, inputs):
        digest = keccak.new(digest_bits=256)
        for element in inputs:
            digest.update(element)
        return digest.digest()


class ListProof(MerkleProof):
    def __init__(self, hasher, path):
        super().__init__(hasher)
        self.path = list(path)

    def get_path_elements(self):
        return [element for element, _ in self.path]

    def get_path_index(self):
        return [direction for _, direction in self.path]


class TwoLeafTree(MerkleTree):
    def __init__(self, hasher):
        self.hasher = hasher
        self.leaves = [hasher.default_leaf(), hasher.default_leaf()]

    def set(self, index, leaf):
        if not 0 <= index < 2:
            raise MerkleTreeError("index exceeds set size")
        self.leaves[index] = leaf

    def get(self, index):
        return self.leaves[index]

    def root(self):
        return self.hasher.hash(self.leaves)

    def proof(self, index):
        return ListProof(self.hasher, [(self.leaves[index ^ 1], index)])


def leaf(value):
    return value.to_bytes(32, "big")


def test_empty_proof_returns_leaf_as_root():
    proof = ListProof(Keccak256(), [])
    assert MerkleProof.compute_root_from(proof, leaf(7)) == leaf(7)
    assert MerkleProof.length(proof) == 0
    assert MerkleProof.leaf_index(proof) == 0


def test_leaf_index_reads_directions_bottom_up():
    hasher = Keccak256()
    proof = ListProof(hasher, [(leaf(1), 1), (leaf(2), 0), (leaf(3), 1)])
    assert MerkleProof.leaf_index(proof) == 5
    assert MerkleProof.length(proof) == 3


def test_compute_root_orders_pairs_by_direction():
    hasher = Keccak256()
    left_proof = ListProof(hasher, [(leaf(2), 0)])
    right_proof = ListProof(hasher, [(leaf(2), 1)])
    assert MerkleProof.compute_root_from(left_proof, leaf(1)) == hasher.hash(
        [leaf(1), leaf(2)]
    )
    assert MerkleProof.compute_root_from(right_proof, leaf(1)) == hasher.hash(
        [leaf(2), leaf(1)]
    )


@pytest.mark.parametrize("index", [0, 1])
def test_verify_accepts_own_leaf_and_rejects_other(index):
    tree = TwoLeafTree(Keccak256())
    tree.set(0, leaf(10))
    tree.set(1, leaf(11))
    proof = tree.proof(index)
    assert MerkleProof.leaf_index(proof) == index
    assert MerkleTree.verify(tree, tree.get(index), proof)
    assert not MerkleTree.verify(tree, tree.get(index ^ 1), proof)


def test_failed_set_leaves_proofs_valid():
    tree = TwoLeafTree(Keccak256())
    tree.set(0, leaf(1))
    tree.set(1, leaf(2))
    with pytest.raises(MerkleTreeError):
        tree.set(2, leaf(3))
    proof = tree.proof(0)
    assert MerkleTree.verify(tree, leaf(1), proof)
    assert MerkleProof.compute_root_from(proof, leaf(1)) == tree.root()


def test_incomplete_tree_cannot_be_instantiated():
    with pytest.raises(TypeError):
        MerkleTree()


def test_hasher_requires_implementation():
    with pytest.raises(TypeError):
        Hasher()