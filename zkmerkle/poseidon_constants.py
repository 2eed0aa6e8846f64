"""Poseidon round constants and MDS matrix generation with the Grain LFSR.

The MDS matrix is taken from the LFSR output without running the security
checks of the reference parameter generator. For the parameters in use the
first generated matrix qualifies; for others, pass the number of matrices to
discard as ``skip_matrices``.
"""

from __future__ import annotations

_STATE_SIZE = 80
_TAPS = (62, 51, 38, 23, 13, 0)


def _write_bits(state: list[bool], first: int, last: int, value: int) -> None:
    """Store ``value`` big-endian in ``state[first..=last]``."""
    for position in range(last, first - 1, -1):
        state[position] = bool(value & 1)
        value >>= 1


def _bits_to_int(bits: list[bool]) -> int:
    """Interpret bits as an integer, most significant bit first."""
    value = 0
    for bit in bits:
        value = (value << 1) | int(bit)
    return value


class PoseidonGrainLFSR:
    """The 80-bit Grain LFSR used to derive Poseidon parameters."""

    def __init__(
        self,
        is_field: int,
        is_sbox_an_inverse: int,
        prime_num_bits: int,
        state_len: int,
        num_full_rounds: int,
        num_partial_rounds: int,
    ) -> None:
        if is_field != 1:
            raise ValueError("only prime fields are supported")
        if is_sbox_an_inverse not in (0, 1):
            raise ValueError("is_sbox_an_inverse must be 0 or 1")

        state = [False] * _STATE_SIZE
        state[1] = True
        state[5] = is_sbox_an_inverse == 1
        _write_bits(state, 6, 17, prime_num_bits)
        _write_bits(state, 18, 29, state_len)
        _write_bits(state, 30, 39, num_full_rounds)
        _write_bits(state, 40, 49, num_partial_rounds)
        for position in range(50, _STATE_SIZE):
            state[position] = True

        self.prime_num_bits = prime_num_bits
        self.state = state
        self.head = 0
        for _ in range(160):
            self._update()

    def _update(self) -> bool:
        new_bit = False
        for tap in _TAPS:
            new_bit ^= self.state[(self.head + tap) % _STATE_SIZE]
        self.state[self.head] = new_bit
        self.head = (self.head + 1) % _STATE_SIZE
        return new_bit

    def get_bits(self, num_bits: int) -> list[bool]:
        """Return ``num_bits`` self-shrunk output bits."""
        bits = []
        for _ in range(num_bits):
            while not self._update():
                self._update()
            bits.append(self._update())
        return bits

    def _check_modulus(self, modulus: int) -> None:
        if modulus.bit_length() != self.prime_num_bits:
            raise ValueError("modulus bit size does not match the LFSR parameters")

    def get_field_elements_rejection_sampling(
        self, modulus: int, num_elems: int
    ) -> list[int]:
        """Draw field elements, discarding samples not below ``modulus``."""
        self._check_modulus(modulus)
        elements = []
        for _ in range(num_elems):
            while True:
                value = _bits_to_int(self.get_bits(self.prime_num_bits))
                if value < modulus:
                    elements.append(value)
                    break
        return elements

    def get_field_elements_mod_p(self, modulus: int, num_elems: int) -> list[int]:
        """Draw field elements, reducing each sample modulo ``modulus``."""
        self._check_modulus(modulus)
        return [
            _bits_to_int(self.get_bits(self.prime_num_bits)) % modulus
            for _ in range(num_elems)
        ]


def find_poseidon_ark_and_mds(
    modulus: int,
    is_field: int,
    is_sbox_an_inverse: int,
    prime_bits: int,
    rate: int,
    full_rounds: int,
    partial_rounds: int,
    skip_matrices: int,
) -> tuple[list[int], list[list[int]]]:
    """Return the round constants and the Cauchy MDS matrix for the parameters."""
    lfsr = PoseidonGrainLFSR(
        is_field, is_sbox_an_inverse, prime_bits, rate, full_rounds, partial_rounds
    )

    ark: list[int] = []
    for _ in range(full_rounds + partial_rounds):
        ark.extend(lfsr.get_field_elements_rejection_sampling(modulus, rate))

    for _ in range(skip_matrices):
        lfsr.get_field_elements_mod_p(modulus, 2 * rate)

    xs = lfsr.get_field_elements_mod_p(modulus, rate)
    ys = lfsr.get_field_elements_mod_p(modulus, rate)

    mds = []
    for x in xs:
        row = []
        for y in ys:
            total = (x + y) % modulus
            if total == 0:
                raise ValueError("generated MDS matrix has a non-invertible entry")
            row.append(pow(total, -1, modulus))
        mds.append(row)
    return ark, mds