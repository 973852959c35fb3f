"""Integer encoding helpers and Merkle tree hashing for SPHINCS+."""

from __future__ import annotations

from typing import Callable

from .address import N, Address
from .hashing import Context, thash

__all__ = [
    "ull_to_bytes",
    "bytes_to_ull",
    "compute_root",
    "treehash",
    "treehashx1",
]


def ull_to_bytes(value: int, length: int) -> bytes:
    """Encode ``value`` in ``length`` big-endian bytes, dropping higher bytes."""
    if length < 0:
        raise ValueError(f"length must not be negative: {length}")
    mask = (1 << (8 * length)) - 1
    return (value & mask).to_bytes(length, "big")


def bytes_to_ull(data: bytes) -> int:
    """Decode big-endian bytes into an unsigned integer."""
    return int.from_bytes(bytes(data), "big")


def compute_root(
    leaf: bytes,
    leaf_idx: int,
    idx_offset: int,
    auth_path: bytes,
    tree_height: int,
    ctx: Context,
    addr: Address,
) -> bytes:
    """Compute a Merkle root from a leaf and its authentication path.

    ``addr`` must be complete apart from tree height and index, which are
    overwritten as the path is climbed.
    """
    if tree_height < 1:
        raise ValueError(f"tree height must be at least 1, got {tree_height}")
    auth_path = bytes(auth_path)
    if len(auth_path) < tree_height * N:
        raise ValueError(
            f"authentication path must hold {tree_height * N} bytes, "
            f"got {len(auth_path)}"
        )
    leaf = bytes(leaf)
    siblings = [auth_path[i * N : (i + 1) * N] for i in range(tree_height)]

    # An odd index is a right child, so its sibling goes on the left.
    buffer = siblings[0] + leaf if leaf_idx & 1 else leaf + siblings[0]

    for height, sibling in enumerate(siblings[1:], start=1):
        leaf_idx >>= 1
        idx_offset >>= 1
        addr.set_tree_height(height)
        addr.set_tree_index(leaf_idx + idx_offset)
        node = thash(buffer, ctx, addr)
        buffer = sibling + node if leaf_idx & 1 else node + sibling

    leaf_idx >>= 1
    idx_offset >>= 1
    addr.set_tree_height(tree_height)
    addr.set_tree_index(leaf_idx + idx_offset)
    return thash(buffer, ctx, addr)


def treehash(
    leaf_idx: int,
    idx_offset: int,
    tree_height: int,
    gen_leaf: Callable[[Context, int, Address], bytes],
    ctx: Context,
    tree_addr: Address,
) -> tuple[bytes, bytes]:
    """Build a tree with Merkle's TreeHash and return ``(root, auth_path)``.

    ``gen_leaf(ctx, addr_idx, tree_addr)`` produces each leaf; indices are
    shifted by ``idx_offset`` before they go into addresses.
    """
    auth_path = bytearray(tree_height * N)
    stack: list[tuple[bytes, int]] = []

    for idx in range(1 << tree_height):
        node = bytes(gen_leaf(ctx, idx + idx_offset, tree_addr))
        stack.append((node, 0))
        if (leaf_idx ^ 1) == idx:
            auth_path[:N] = node

        while len(stack) >= 2 and stack[-1][1] == stack[-2][1]:
            right, height = stack.pop()
            left, _ = stack.pop()
            parent_height = height + 1
            tree_idx = idx >> parent_height
            tree_addr.set_tree_height(parent_height)
            tree_addr.set_tree_index(tree_idx + (idx_offset >> parent_height))
            merged = thash(left + right, ctx, tree_addr)
            stack.append((merged, parent_height))
            if (
                parent_height < tree_height
                and ((leaf_idx >> parent_height) ^ 1) == tree_idx
            ):
                start = parent_height * N
                auth_path[start : start + N] = merged

    return stack[0][0], bytes(auth_path)


def treehashx1(
    leaf_idx: int,
    idx_offset: int,
    tree_height: int,
    gen_leaf: Callable[[Context, int], bytes],
    ctx: Context,
    tree_addr: Address,
) -> tuple[bytes, bytes]:
    """Build a whole Merkle tree and return ``(root, auth_path)``.

    ``gen_leaf(ctx, addr_idx)`` produces each leaf. A ``leaf_idx`` outside
    the tree (such as ``0xFFFFFFFF``) yields an all-zero authentication path.
    """
    auth_path = bytearray(tree_height * N)
    stack = [b""] * tree_height
    max_idx = (1 << tree_height) - 1

    for idx in range(max_idx + 1):
        current = bytes(gen_leaf(ctx, idx + idx_offset))
        internal_offset = idx_offset
        internal_idx = idx
        internal_leaf = leaf_idx
        height = 0
        while True:
            if height == tree_height:
                return current, bytes(auth_path)

            if (internal_idx ^ internal_leaf) == 1:
                auth_path[height * N : (height + 1) * N] = current

            # A left child waits on the stack for its right sibling, except
            # at the last leaf, where the remaining nodes are folded up.
            if (internal_idx & 1) == 0 and idx < max_idx:
                break

            internal_offset >>= 1
            tree_addr.set_tree_height(height + 1)
            tree_addr.set_tree_index(internal_idx // 2 + internal_offset)
            current = thash(stack[height] + current, ctx, tree_addr)

            height += 1
            internal_idx >>= 1
            internal_leaf >>= 1

        stack[height] = current

    raise AssertionError("tree traversal ended without reaching the root")