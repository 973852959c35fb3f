import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from hybridpqc.sphincs.address import (
    FORS_BYTES,
    FORS_HEIGHT,
    FORS_MSG_BYTES,
    FORS_TREES,
    N,
    Address,
)
from hybridpqc.sphincs.fors import fors_pk_from_sig, fors_sign, message_to_indices
from hybridpqc.sphincs.hashing import Context

CTX = Context(pub_seed=bytes(range(32)), sk_seed=bytes(range(32, 64)))
MESSAGE = bytes((7 * i + 3) % 256 for i in range(FORS_MSG_BYTES))


def _fors_address():
    addr = Address()
    addr.set_layer(0)
    addr.set_tree(12345)
    addr.set_keypair(9)
    return addr


@pytest.fixture(scope="module")
def signed():
    addr = _fors_address()
    sig, pk = fors_sign(MESSAGE, CTX, addr)
    return sig, pk


def test_indices_of_zero_message():
    assert message_to_indices(bytes(FORS_MSG_BYTES)) == [0] * FORS_TREES


def test_indices_of_all_ones_message():
    max_index = (1 << FORS_HEIGHT) - 1
    assert message_to_indices(b"\xff" * FORS_MSG_BYTES) == [max_index] * FORS_TREES


def test_indices_take_bits_most_significant_first():
    max_index = (1 << FORS_HEIGHT) - 1
    indices = message_to_indices(b"\xff\x80" + bytes(FORS_MSG_BYTES - 2))
    assert indices[0] == max_index
    assert indices[1:] == [0] * (FORS_TREES - 1)


@settings(max_examples=50)
@given(st.binary(min_size=FORS_MSG_BYTES, max_size=FORS_MSG_BYTES))
def test_indices_reassemble_message_bits(m):
    indices = message_to_indices(m)
    assert len(indices) == FORS_TREES
    assert all(0 <= i < (1 << FORS_HEIGHT) for i in indices)
    packed = 0
    for index in indices:
        packed = (packed << FORS_HEIGHT) | index
    used = FORS_HEIGHT * FORS_TREES
    assert packed == int.from_bytes(m, "big") >> (FORS_MSG_BYTES * 8 - used)


def test_indices_reject_short_message():
    with pytest.raises(ValueError):
        message_to_indices(bytes(FORS_MSG_BYTES - 1))


def test_signature_sizes(signed):
    sig, pk = signed
    assert len(sig) == FORS_BYTES
    assert len(pk) == N


def test_public_key_recovered_from_signature(signed):
    sig, pk = signed
    assert fors_pk_from_sig(sig, MESSAGE, CTX, _fors_address()) == pk


def test_tampered_signature_gives_other_key(signed):
    sig, pk = signed
    tampered = bytearray(sig)
    tampered[N + 5] ^= 0x01
    assert fors_pk_from_sig(bytes(tampered), MESSAGE, CTX, _fors_address()) != pk


def test_other_message_gives_other_key(signed):
    sig, pk = signed
    other = bytes([MESSAGE[0] ^ 0x80]) + MESSAGE[1:]
    assert fors_pk_from_sig(sig, other, CTX, _fors_address()) != pk


def test_other_address_gives_other_key(signed):
    sig, pk = signed
    addr = _fors_address()
    addr.set_keypair(10)
    assert fors_pk_from_sig(sig, MESSAGE, CTX, addr) != pk


def test_signing_leaves_address_untouched():
    addr = _fors_address()
    before = bytes(addr)
    fors_pk_from_sig(bytes(FORS_BYTES), MESSAGE, CTX, addr)
    assert bytes(addr) == before


def test_pk_from_sig_rejects_bad_length():
    with pytest.raises(ValueError):
        fors_pk_from_sig(bytes(FORS_BYTES - 1), MESSAGE, CTX, _fors_address())