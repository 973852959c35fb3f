import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from hybridpqc.sphincs.address import (
    FORS_MSG_BYTES,
    N,
    PK_BYTES,
    Address,
    AddressType,
)
from hybridpqc.sphincs.hashing import (
    Context,
    gen_message_random,
    hash_message,
    prf_addr,
    thash,
)


@pytest.fixture
def ctx():
    return Context(pub_seed=bytes(range(N)), sk_seed=bytes(range(N, 2 * N)))


def _addr(addr_type=AddressType.WOTS):
    addr = Address()
    addr.set_type(addr_type)
    return addr


def test_context_rejects_wrong_seed_length():
    with pytest.raises(ValueError):
        Context(pub_seed=bytes(N - 1))
    with pytest.raises(ValueError):
        Context(pub_seed=bytes(N), sk_seed=bytes(N + 1))


def test_context_default_secret_seed_is_zero():
    assert Context(pub_seed=bytes(N)).sk_seed == bytes(N)


def test_prf_addr_is_deterministic_and_n_bytes(ctx):
    first = prf_addr(ctx, _addr())
    assert len(first) == N
    assert prf_addr(ctx, _addr()) == first


def test_prf_addr_depends_on_address_and_secret_seed(ctx):
    base = prf_addr(ctx, _addr(AddressType.WOTSPRF))
    assert prf_addr(ctx, _addr(AddressType.FORSPRF)) != base
    other = Context(pub_seed=ctx.pub_seed, sk_seed=bytes(N))
    assert prf_addr(other, _addr(AddressType.WOTSPRF)) != base


def test_prf_addr_matches_thash_of_secret_seed(ctx):
    addr = _addr(AddressType.FORSPRF)
    addr.set_tree_index(77)
    assert prf_addr(ctx, addr) == thash(ctx.sk_seed, ctx, addr)


def test_thash_rejects_partial_blocks(ctx):
    with pytest.raises(ValueError):
        thash(bytes(N + 1), ctx, _addr())


def test_thash_depends_on_input_and_public_seed(ctx):
    addr = _addr(AddressType.HASHTREE)
    one = thash(bytes(2 * N), ctx, addr)
    assert len(one) == N
    assert thash(bytes(N), ctx, addr) != one
    other = Context(pub_seed=bytes(N), sk_seed=ctx.sk_seed)
    assert thash(bytes(2 * N), other, addr) != one


def test_thash_ignores_secret_seed(ctx):
    addr = _addr()
    other = Context(pub_seed=ctx.pub_seed, sk_seed=bytes([9]) * N)
    assert thash(bytes(N), ctx, addr) == thash(bytes(N), other, addr)


def test_gen_message_random_length_and_sensitivity():
    r1 = gen_message_random(bytes(N), bytes(N), b"message")
    assert len(r1) == N
    assert gen_message_random(bytes(N), bytes(N), b"message") == r1
    assert gen_message_random(bytes(N), bytes([1]) * N, b"message") != r1
    assert gen_message_random(bytes(N), bytes(N), b"messagf") != r1


def test_gen_message_random_rejects_bad_lengths():
    with pytest.raises(ValueError):
        gen_message_random(bytes(N - 1), bytes(N), b"m")
    with pytest.raises(ValueError):
        gen_message_random(bytes(N), bytes(N + 1), b"m")


@settings(max_examples=50)
@given(st.binary(min_size=N, max_size=N), st.binary(max_size=100))
def test_hash_message_ranges(r, message):
    digest, tree, leaf_idx = hash_message(r, bytes(PK_BYTES), message)
    assert len(digest) == FORS_MSG_BYTES
    assert 0 <= tree < 1 << 64
    assert 0 <= leaf_idx < 16


def test_hash_message_deterministic_and_message_bound():
    r = bytes([5]) * N
    pk = bytes([6]) * PK_BYTES
    first = hash_message(r, pk, b"abc")
    assert hash_message(r, pk, b"abc") == first
    assert hash_message(r, pk, b"abd")[0] != first[0]


def test_hash_message_rejects_bad_lengths():
    with pytest.raises(ValueError):
        hash_message(bytes(N - 1), bytes(PK_BYTES), b"m")
    with pytest.raises(ValueError):
        hash_message(bytes(N), bytes(PK_BYTES - 1), b"m")