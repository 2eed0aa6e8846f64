# zkmerkle

Fixed-depth binary Merkle trees and the Poseidon hash. Use it to build
membership proofs over field elements or any other hashable node values.

## Trees

The package has two tree classes with the same operations. Both take any hasher:

- `zkmerkle.full_merkle_tree.FullMerkleTree` stores every node of the tree.
- `zkmerkle.optimal_merkle_tree.OptimalMerkleTree` stores only the nodes that
  have been computed from set leaves. It looks up every other node in a
  precomputed table of empty-subtree hashes.

A hasher is an object with two methods, `default_leaf()` and `hash(inputs)`.
`inputs` is a list of nodes. You can subclass `zkmerkle.merkle_tree.Hasher`,
or pass any object that has these two methods.

```python
import hashlib

from zkmerkle.merkle_tree import Hasher
from zkmerkle.full_merkle_tree import FullMerkleTree


class Sha256(Hasher):
    def default_leaf(self):
        return bytes(32)

    def hash(self, inputs):
        return hashlib.sha256(b"".join(inputs)).digest()


tree = FullMerkleTree.default(Sha256(), 2)   # depth 2, capacity of 4 leaves
tree.set(0, b"\x01" * 32)
tree.update_next(b"\x02" * 32)               # written at index 1

proof = tree.proof(1)
assert proof.leaf_index() == 1
assert tree.verify(b"\x02" * 32, proof)
assert proof.compute_root_from(b"\x02" * 32) == tree.root()
```

`FullMerkleTree(hasher, depth, initial_leaf)` and
`OptimalMerkleTree(hasher, depth, initial_leaf)` create a tree whose empty
leaves hold `initial_leaf`. `default(hasher, depth)` uses
`hasher.default_leaf()` as the empty leaf.

Both tree classes have these operations:

- `depth()` and `capacity()` return the tree's depth and its capacity, which is `2 ** depth`.
- `root()` returns the current root. `compute_root()` also returns the root.
- `set(index, leaf)` and `get(index)` write and read a single leaf. `update_next(leaf)` writes at `leaves_set()`.
- `set_range(start, leaves)` writes consecutive leaves from `start`.
- `delete(index)` resets a leaf that was written before to the default leaf. It does nothing for an index at or past `leaves_set()`.
- `leaves_set()` returns the next index that has never been used. Deleting a leaf does not lower it.
- `override_range(start, leaves, indices)` marks `indices` as empty and writes `leaves` from `start`, in one batch. Positions from the first of `indices` up to `start` are rewritten. Those listed in `indices` get the default leaf and the others keep their value.
- `get_empty_leaves_indices()` lists the positions below `leaves_set()` that are currently empty, whether deleted or cleared by `override_range`.
- `get_subtree_root(n, index)` returns the node at level `n` above leaf `index`. The root is level 0 and the leaves are level `depth()`.
- `proof(index)` returns a Merkle proof. `verify(leaf, proof)` checks the proof against the current root.
- `set_metadata(data)` and `metadata()` store application bytes with the tree.
- `close_db_connection()` does nothing for these in-memory trees.

`OptimalMerkleTree` also has `get_leaf(index)`, which reads a leaf without a
bounds check.

Proofs are `FullMerkleProof` or `OptimalMerkleProof` objects. Both have these methods:

- `length()`
- `leaf_index()`
- `get_path_elements()`, which returns the sibling nodes from the bottom up.
- `get_path_index()`: 0 when the path goes left, 1 when it goes right.
- `compute_root_from(leaf)`

These operations raise `zkmerkle.merkle_tree.MerkleTreeError`, a subclass of
`ValueError`:

- an index or level outside the tree
- a range that does not fit in the tree
- `override_range` with no indices, or with a first index after `start`

`OptimalMerkleTree.verify` also raises it when the length of the proof is not
the tree depth.

## Poseidon

`zkmerkle.poseidon_hash.Poseidon(modulus, params)` hashes integers modulo a
prime. `params` holds tuples `(t, full_rounds, partial_rounds, skip_matrices)`.
A call `hash(inputs)` uses the tuple whose `t` equals `len(inputs) + 1`.

```python
from zkmerkle.poseidon_hash import Poseidon

BN254_R = 21888242871839275222246405745257275088548364400416034343698204186575808495617

poseidon = Poseidon(BN254_R, [(3, 8, 57, 0)])
digest = poseidon.hash([1, 2])
```

For each tuple, the constructor derives round constants and a Cauchy MDS
matrix with the Grain LFSR. `zkmerkle.poseidon_constants.find_poseidon_ark_and_mds`
produces them, and `PoseidonGrainLFSR` is the generator it uses.

The generator does not run the MDS security checks. To discard matrices before
the one that is used, set `skip_matrices`.

`get_parameters()` returns copies of the loaded `RoundParameters`. The single
steps of a round are available as `ark`, `sbox` and `mix`.

`hash` raises `ValueError` in two cases:

- the input is empty
- no loaded tuple matches the length of the input

## What it does not do

- Trees live only in memory. There is no on-disk or database storage.
- There is no serialization format for trees or proofs.
- There is no command-line tool.

## Tests

```
pip install -e ".[test]"
pytest
```