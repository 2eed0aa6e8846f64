"""The Poseidon hash over a prime field, with field elements as integers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .poseidon_constants import find_poseidon_ark_and_mds


@dataclass(frozen=True)
class RoundParameters:
    """Parameters for one state width ``t`` (input length + 1)."""

    t: int
    n_rounds_f: int
    n_rounds_p: int
    skip_matrices: int
    c: list[int] = field(default_factory=list)
    m: list[list[int]] = field(default_factory=list)


class Poseidon:
    """Poseidon permutation-based hash for several input lengths.

    ``params`` holds tuples ``(t, full_rounds, partial_rounds, skip_matrices)``.
    """

    def __init__(
        self, modulus: int, params: Iterable[tuple[int, int, int, int]] = ()
    ) -> None:
        self.modulus = modulus
        bits = modulus.bit_length()
        self._round_params = []
        for t, n_rounds_f, n_rounds_p, skip_matrices in params:
            ark, mds = find_poseidon_ark_and_mds(
                modulus, 1, 0, bits, t, n_rounds_f, n_rounds_p, skip_matrices
            )
            self._round_params.append(
                RoundParameters(t, n_rounds_f, n_rounds_p, skip_matrices, ark, mds)
            )

    def get_parameters(self) -> list[RoundParameters]:
        """Return copies of the loaded round parameters."""
        return [
            RoundParameters(
                p.t,
                p.n_rounds_f,
                p.n_rounds_p,
                p.skip_matrices,
                list(p.c),
                [list(row) for row in p.m],
            )
            for p in self._round_params
        ]

    def ark(self, state: Sequence[int], constants: Sequence[int], it: int) -> list[int]:
        """Add the round constants starting at offset ``it``."""
        return [
            (value + constants[it + i]) % self.modulus for i, value in enumerate(state)
        ]

    def sbox(
        self, n_rounds_f: int, n_rounds_p: int, state: Sequence[int], i: int
    ) -> list[int]:
        """Apply x^5 to every element in full rounds, to the first in partial ones."""
        half = n_rounds_f // 2
        if i < half or i >= half + n_rounds_p:
            return [pow(value, 5, self.modulus) for value in state]
        result = list(state)
        result[0] = pow(result[0], 5, self.modulus)
        return result

    def mix(self, state: Sequence[int], m: Sequence[Sequence[int]]) -> list[int]:
        """Multiply the state by the MDS matrix."""
        return [
            sum(m[i][j] * value for j, value in enumerate(state)) % self.modulus
            for i in range(len(state))
        ]

    def hash(self, inputs: Sequence[int]) -> int:
        """Hash a non-empty sequence of field elements."""
        t = len(inputs) + 1
        params = next((p for p in self._round_params if p.t == t), None)
        if not inputs or params is None:
            raise ValueError("No parameters found for inputs length")

        state = [0] + [value % self.modulus for value in inputs]
        for i in range(params.n_rounds_f + params.n_rounds_p):
            state = self.ark(state, params.c, i * params.t)
            state = self.sbox(params.n_rounds_f, params.n_rounds_p, state, i)
            state = self.mix(state, params.m)
        return state[0]