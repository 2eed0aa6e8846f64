"""Fixed-depth Merkle trees, Merkle proofs and the Poseidon hash over prime fields."""

__version__ = "0.1.0"
__all__ = [
    "merkle_tree",
    "full_merkle_tree",
    "optimal_merkle_tree",
    "poseidon_constants",
    "poseidon_hash",
]