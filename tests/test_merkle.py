import pytest

from hybridpqc.sphincs.address import (
    D,
    N,
    TREE_HEIGHT,
    WOTS_BYTES,
    Address,
    AddressType,
)
from hybridpqc.sphincs.hashing import Context, thash
from hybridpqc.sphincs.merkle import merkle_gen_root, merkle_sign
from hybridpqc.sphincs.utils import compute_root
from hybridpqc.sphincs.wots import NO_SIGN_LEAF, wots_pk_from_sig

CTX = Context(pub_seed=bytes(range(32)), sk_seed=bytes(range(32, 64)))
MESSAGE = bytes(range(200, 232))


def _addresses(layer, tree, idx_leaf):
    tree_addr = Address()
    tree_addr.set_layer(layer)
    tree_addr.set_tree(tree)
    wots_addr = Address()
    wots_addr.set_type(AddressType.WOTS)
    wots_addr.copy_subtree_from(tree_addr)
    wots_addr.set_keypair(idx_leaf)
    return wots_addr, tree_addr


def _root_from_sig(sig, msg, layer, tree, idx_leaf):
    wots_addr, tree_addr = _addresses(layer, tree, idx_leaf)
    tree_addr.set_type(AddressType.HASHTREE)
    pk_addr = Address()
    pk_addr.copy_keypair_from(wots_addr)
    pk_addr.set_type(AddressType.WOTSPK)
    wots_pk = wots_pk_from_sig(sig[:WOTS_BYTES], msg, CTX, wots_addr)
    leaf = thash(wots_pk, CTX, pk_addr)
    return compute_root(leaf, idx_leaf, 0, sig[WOTS_BYTES:], TREE_HEIGHT, CTX, tree_addr)


@pytest.fixture(scope="module")
def signed():
    wots_addr, tree_addr = _addresses(2, 77, 6)
    return merkle_sign(MESSAGE, CTX, wots_addr, tree_addr, 6)


def test_signature_length(signed):
    sig, root = signed
    assert len(sig) == WOTS_BYTES + TREE_HEIGHT * N
    assert len(root) == N


def test_signature_verifies_to_root(signed):
    sig, root = signed
    assert _root_from_sig(sig, MESSAGE, 2, 77, 6) == root


def test_signature_fails_for_other_message(signed):
    sig, root = signed
    other = bytes([MESSAGE[0] ^ 0x10]) + MESSAGE[1:]
    assert _root_from_sig(sig, other, 2, 77, 6) != root


def test_signature_fails_for_other_leaf(signed):
    sig, root = signed
    assert _root_from_sig(sig, MESSAGE, 2, 77, 7) != root


def test_root_does_not_depend_on_signing_leaf(signed):
    _, root = signed
    wots_addr, tree_addr = _addresses(2, 77, 0)
    _, other_root = merkle_sign(MESSAGE, CTX, wots_addr, tree_addr, 0)
    assert other_root == root


def test_no_sign_leaf_gives_empty_signature():
    wots_addr, tree_addr = _addresses(1, 3, 0)
    sig, _ = merkle_sign(MESSAGE, CTX, wots_addr, tree_addr, NO_SIGN_LEAF)
    assert sig == bytes(WOTS_BYTES + TREE_HEIGHT * N)


def test_gen_root_matches_top_layer_subtree():
    wots_addr, tree_addr = _addresses(D - 1, 0, 0)
    _, root = merkle_sign(MESSAGE, CTX, wots_addr, tree_addr, 3)
    assert merkle_gen_root(CTX) == root


def test_gen_root_depends_on_seeds():
    other = Context(pub_seed=bytes(range(32)), sk_seed=bytes(range(64, 96)))
    first = merkle_gen_root(CTX)
    assert len(first) == N
    assert merkle_gen_root(CTX) == first
    assert merkle_gen_root(other) != first


def test_merkle_sign_rejects_short_root():
    wots_addr, tree_addr = _addresses(0, 0, 0)
    with pytest.raises(ValueError):
        merkle_sign(bytes(N - 1), CTX, wots_addr, tree_addr, 0)