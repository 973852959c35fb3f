"""FORS few-time signatures over a message digest."""

from __future__ import annotations

from typing import Callable

from .address import (
    FORS_BYTES,
    FORS_HEIGHT,
    FORS_MSG_BYTES,
    FORS_TREES,
    N,
    Address,
    AddressType,
)
from .hashing import Context, prf_addr, thash
from .utils import compute_root, treehashx1

__all__ = ["message_to_indices", "fors_sign", "fors_pk_from_sig"]

_INDEX_MASK = (1 << FORS_HEIGHT) - 1
_INDEX_BITS = FORS_HEIGHT * FORS_TREES
_TREE_SIG_BYTES = (FORS_HEIGHT + 1) * N


def message_to_indices(m: bytes) -> list[int]:
    """Split the first FORS_HEIGHT * FORS_TREES bits of ``m`` into leaf indices."""
    m = bytes(m)
    if len(m) < FORS_MSG_BYTES:
        raise ValueError(f"message must hold {FORS_MSG_BYTES} bytes, got {len(m)}")
    value = int.from_bytes(m[:FORS_MSG_BYTES], "big")
    value >>= FORS_MSG_BYTES * 8 - _INDEX_BITS
    return [
        (value >> (FORS_HEIGHT * (FORS_TREES - 1 - i))) & _INDEX_MASK
        for i in range(FORS_TREES)
    ]


def _leaf_generator(leaf_addr: Address) -> Callable[[Context, int], bytes]:
    def gen_leaf(ctx: Context, addr_idx: int) -> bytes:
        leaf_addr.set_tree_index(addr_idx)
        leaf_addr.set_type(AddressType.FORSPRF)
        secret = prf_addr(ctx, leaf_addr)
        leaf_addr.set_type(AddressType.FORSTREE)
        return thash(secret, ctx, leaf_addr)

    return gen_leaf


def _pk_address(fors_addr: Address) -> Address:
    pk_addr = Address()
    pk_addr.copy_keypair_from(fors_addr)
    pk_addr.set_type(AddressType.FORSPK)
    return pk_addr


def fors_sign(m: bytes, ctx: Context, fors_addr: Address) -> tuple[bytes, bytes]:
    """Sign the digest ``m`` and return ``(signature, public_key)``."""
    indices = message_to_indices(m)
    tree_addr = Address()
    tree_addr.copy_keypair_from(fors_addr)
    leaf_addr = Address()
    leaf_addr.copy_keypair_from(fors_addr)
    pk_addr = _pk_address(fors_addr)
    gen_leaf = _leaf_generator(leaf_addr)

    sig_parts = []
    roots = []
    for tree, index in enumerate(indices):
        idx_offset = tree << FORS_HEIGHT

        tree_addr.set_tree_height(0)
        tree_addr.set_tree_index(index + idx_offset)
        tree_addr.set_type(AddressType.FORSPRF)
        sig_parts.append(prf_addr(ctx, tree_addr))
        tree_addr.set_type(AddressType.FORSTREE)

        root, auth_path = treehashx1(
            index, idx_offset, FORS_HEIGHT, gen_leaf, ctx, tree_addr
        )
        sig_parts.append(auth_path)
        roots.append(root)

    return b"".join(sig_parts), thash(b"".join(roots), ctx, pk_addr)


def fors_pk_from_sig(sig: bytes, m: bytes, ctx: Context, fors_addr: Address) -> bytes:
    """Derive the FORS public key from a signature on the digest ``m``."""
    sig = bytes(sig)
    if len(sig) != FORS_BYTES:
        raise ValueError(f"signature must be {FORS_BYTES} bytes, got {len(sig)}")
    indices = message_to_indices(m)
    tree_addr = Address()
    tree_addr.copy_keypair_from(fors_addr)
    tree_addr.set_type(AddressType.FORSTREE)
    pk_addr = _pk_address(fors_addr)

    roots = []
    for tree, index in enumerate(indices):
        idx_offset = tree << FORS_HEIGHT
        chunk = sig[tree * _TREE_SIG_BYTES : (tree + 1) * _TREE_SIG_BYTES]

        tree_addr.set_tree_height(0)
        tree_addr.set_tree_index(index + idx_offset)
        leaf = thash(chunk[:N], ctx, tree_addr)
        roots.append(
            compute_root(
                leaf, index, idx_offset, chunk[N:], FORS_HEIGHT, ctx, tree_addr
            )
        )

    return thash(b"".join(roots), ctx, pk_addr)