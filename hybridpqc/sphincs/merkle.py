"""Merkle signatures: a WOTS signature followed by its authentication path."""

from __future__ import annotations

from .address import D, N, TREE_HEIGHT, Address, AddressType
from .hashing import Context
from .utils import treehashx1
from .wots import NO_SIGN_LEAF, LeafInfo, chain_lengths

__all__ = ["merkle_sign", "merkle_gen_root"]


def merkle_sign(
    root: bytes,
    ctx: Context,
    wots_addr: Address,
    tree_addr: Address,
    idx_leaf: int,
) -> tuple[bytes, bytes]:
    """Sign the N-byte ``root`` with leaf ``idx_leaf`` of a subtree.

    Returns ``(signature, subtree_root)``; the signature is the WOTS
    signature followed by the authentication path. ``tree_addr`` has its
    type, height and index fields overwritten.
    """
    info = LeafInfo(wots_steps=chain_lengths(root), wots_sign_leaf=idx_leaf)

    tree_addr.set_type(AddressType.HASHTREE)
    info.pk_addr.set_type(AddressType.WOTSPK)
    info.leaf_addr.copy_subtree_from(wots_addr)
    info.pk_addr.copy_subtree_from(wots_addr)

    subtree_root, auth_path = treehashx1(
        idx_leaf, 0, TREE_HEIGHT, info.gen_leaf, ctx, tree_addr
    )
    return bytes(info.wots_sig) + auth_path, subtree_root


def merkle_gen_root(ctx: Context) -> bytes:
    """Compute the root of the top-most subtree of the hypertree."""
    top_tree_addr = Address()
    wots_addr = Address()
    top_tree_addr.set_layer(D - 1)
    wots_addr.set_layer(D - 1)
    _, root = merkle_sign(bytes(N), ctx, wots_addr, top_tree_addr, NO_SIGN_LEAF)
    return root