"""SPHINCS+-SHAKE-256f-simple parameters and the 32-byte hash address structure."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

__all__ = [
    "N",
    "FULL_HEIGHT",
    "D",
    "FORS_HEIGHT",
    "FORS_TREES",
    "WOTS_W",
    "ADDR_BYTES",
    "WOTS_LOGW",
    "WOTS_LEN1",
    "WOTS_LEN2",
    "WOTS_LEN",
    "WOTS_BYTES",
    "WOTS_PK_BYTES",
    "TREE_HEIGHT",
    "FORS_MSG_BYTES",
    "FORS_BYTES",
    "FORS_PK_BYTES",
    "BYTES",
    "PK_BYTES",
    "SK_BYTES",
    "SEED_BYTES",
    "AddressType",
    "Address",
]

# Hash output length in bytes.
N = 32
# Height of the hypertree.
FULL_HEIGHT = 68
# Number of subtree layers.
D = 17
# FORS tree dimensions.
FORS_HEIGHT = 9
FORS_TREES = 35
# Winternitz parameter.
WOTS_W = 16

ADDR_BYTES = 32

WOTS_LOGW = 4
WOTS_LEN1 = 8 * N // WOTS_LOGW
# floor(log(len_1 * (w - 1)) / log(w)) + 1, precomputed.
WOTS_LEN2 = 3
WOTS_LEN = WOTS_LEN1 + WOTS_LEN2
WOTS_BYTES = WOTS_LEN * N
WOTS_PK_BYTES = WOTS_BYTES

TREE_HEIGHT = FULL_HEIGHT // D

FORS_MSG_BYTES = (FORS_HEIGHT * FORS_TREES + 7) // 8
FORS_BYTES = (FORS_HEIGHT + 1) * FORS_TREES * N
FORS_PK_BYTES = N

BYTES = N + FORS_BYTES + D * WOTS_BYTES + FULL_HEIGHT * N
PK_BYTES = 2 * N
SK_BYTES = 2 * N + PK_BYTES
SEED_BYTES = 3 * N

# Byte offsets of the address fields for the SHAKE instantiation.
_OFFSET_LAYER = 3
_OFFSET_TREE = 8
_OFFSET_TYPE = 19
_OFFSET_KP_ADDR2 = 22
_OFFSET_KP_ADDR1 = 23
_OFFSET_CHAIN_ADDR = 27
_OFFSET_HASH_ADDR = 31
_OFFSET_TREE_HGT = 27
_OFFSET_TREE_INDEX = 28

_SUBTREE_PREFIX = _OFFSET_TREE + 8


class AddressType(enum.IntEnum):
    """Purpose of a hash call, stored in the address type byte."""

    WOTS = 0
    WOTSPK = 1
    HASHTREE = 2
    FORSTREE = 3
    FORSPK = 4
    WOTSPRF = 5
    FORSPRF = 6


@dataclass
class Address:
    """Mutable 32-byte address that domain-separates every hash call."""

    data: bytearray = field(default_factory=lambda: bytearray(ADDR_BYTES))

    def __post_init__(self) -> None:
        if len(self.data) != ADDR_BYTES:
            raise ValueError(
                f"address must be {ADDR_BYTES} bytes, got {len(self.data)}"
            )
        self.data = bytearray(self.data)

    def set_layer(self, layer: int) -> None:
        """Set which layer of the hypertree this address refers to."""
        self.data[_OFFSET_LAYER] = layer & 0xFF

    def set_tree(self, tree: int) -> None:
        """Set the index of the tree within its layer (64-bit, big-endian)."""
        end = _OFFSET_TREE + 8
        self.data[_OFFSET_TREE:end] = (tree & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "big")

    def set_type(self, addr_type: int) -> None:
        """Set the hash type; see :class:`AddressType`."""
        self.data[_OFFSET_TYPE] = int(addr_type) & 0xFF

    def set_keypair(self, keypair: int) -> None:
        """Set which one-time keypair (Merkle leaf) is addressed."""
        self.data[_OFFSET_KP_ADDR1] = keypair & 0xFF

    def set_chain(self, chain: int) -> None:
        """Set which Winternitz chain within the one-time key is addressed."""
        self.data[_OFFSET_CHAIN_ADDR] = chain & 0xFF

    def set_hash(self, hash_index: int) -> None:
        """Set the position within the Winternitz chain."""
        self.data[_OFFSET_HASH_ADDR] = hash_index & 0xFF

    def set_tree_height(self, height: int) -> None:
        """Set the height of the node within a Merkle or FORS tree."""
        self.data[_OFFSET_TREE_HGT] = height & 0xFF

    def set_tree_index(self, index: int) -> None:
        """Set the node's distance from the left edge of its tree (32-bit)."""
        end = _OFFSET_TREE_INDEX + 4
        self.data[_OFFSET_TREE_INDEX:end] = (index & 0xFFFFFFFF).to_bytes(4, "big")

    def copy_subtree_from(self, other: Address) -> None:
        """Copy the layer and tree fields of ``other`` into this address."""
        self.data[:_SUBTREE_PREFIX] = other.data[:_SUBTREE_PREFIX]

    def copy_keypair_from(self, other: Address) -> None:
        """Copy the layer, tree and keypair fields of ``other``."""
        self.copy_subtree_from(other)
        self.data[_OFFSET_KP_ADDR1] = other.data[_OFFSET_KP_ADDR1]

    def copy(self) -> Address:
        """Return an independent copy of this address."""
        return Address(bytearray(self.data))

    def __bytes__(self) -> bytes:
        return bytes(self.data)