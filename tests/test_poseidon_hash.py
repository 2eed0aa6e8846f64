import pytest

from zkmerkle.poseidon_hash import Poseidon, RoundParameters

PRIME = 65537
PARAMS = [(2, 8, 4, 0), (3, 8, 4, 0)]


@pytest.fixture(scope="module")
def poseidon():
    return Poseidon(PRIME, PARAMS)


def test_parameters_loaded(poseidon):
    params = poseidon.get_parameters()
    assert [p.t for p in params] == [2, 3]
    for p, (t, rf, rp, skip) in zip(params, PARAMS):
        assert (p.n_rounds_f, p.n_rounds_p, p.skip_matrices) == (rf, rp, skip)
        assert len(p.c) == (rf + rp) * t
        assert len(p.m) == t


def test_get_parameters_returns_copies(poseidon):
    params = poseidon.get_parameters()
    params[0].c.clear()
    assert len(poseidon.get_parameters()[0].c) == 12 * 2


def test_default_has_no_parameters_and_cannot_hash():
    empty = Poseidon(PRIME)
    assert empty.get_parameters() == []
    with pytest.raises(ValueError, match="No parameters found"):
        empty.hash([1])


def test_hash_empty_input_raises(poseidon):
    with pytest.raises(ValueError, match="No parameters found"):
        poseidon.hash([])


def test_hash_unsupported_length_raises(poseidon):
    with pytest.raises(ValueError):
        poseidon.hash([1, 2, 3])


def test_hash_is_deterministic_and_in_field(poseidon):
    first = poseidon.hash([7, 11])
    again = Poseidon(PRIME, PARAMS).hash([7, 11])
    assert first == again
    assert 0 <= first < PRIME


def test_hash_depends_on_input_order(poseidon):
    assert poseidon.hash([1, 2]) != poseidon.hash([2, 1])
    assert poseidon.hash([5]) == poseidon.hash([5 + PRIME])


def test_hash_matches_round_composition(poseidon):
    params: RoundParameters = poseidon.get_parameters()[0]
    state = [0, 42]
    for i in range(params.n_rounds_f + params.n_rounds_p):
        state = poseidon.ark(state, params.c, i * params.t)
        state = poseidon.sbox(params.n_rounds_f, params.n_rounds_p, state, i)
        state = poseidon.mix(state, params.m)
    assert poseidon.hash([42]) == state[0]


def test_ark_adds_constants_at_offset(poseidon):
    assert poseidon.ark([1, 2], [100, 10, 20], 1) == [11, 22]
    assert poseidon.ark([PRIME - 1], [1], 0) == [0]


def test_sbox_full_and_partial_rounds(poseidon):
    partial = poseidon.sbox(8, 4, [2, 3], 4)
    assert partial == [32, 3]
    full = poseidon.sbox(8, 4, [2, 3], 0)
    assert full[0] == partial[0]
    assert full[1] == pow(3, 5, PRIME)
    assert poseidon.sbox(8, 4, [2, 3], 8) == full


def test_mix_identity_and_matrix(poseidon):
    assert poseidon.mix([4, 9], [[1, 0], [0, 1]]) == [4, 9]
    assert poseidon.mix([2, 3], [[1, 1], [0, 1]]) == [5, 3]