"""WOTS+ one-time signatures: chain lengths, public-key recovery and leaf generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .address import (
    N,
    WOTS_BYTES,
    WOTS_LEN,
    WOTS_LEN1,
    WOTS_LEN2,
    WOTS_LOGW,
    WOTS_W,
    Address,
    AddressType,
)
from .hashing import Context, prf_addr, thash
from .utils import ull_to_bytes

__all__ = [
    "NO_SIGN_LEAF",
    "chain_lengths",
    "wots_pk_from_sig",
    "LeafInfo",
]

# A leaf index that never occurs, meaning "generate public keys only".
NO_SIGN_LEAF = 0xFFFFFFFF

_CSUM_BYTES = (WOTS_LEN2 * WOTS_LOGW + 7) // 8
_CSUM_SHIFT = (8 - ((WOTS_LEN2 * WOTS_LOGW) % 8)) % 8


def _base_w(data: bytes, out_len: int) -> list[int]:
    """Read ``out_len`` base-w digits from ``data``, most significant first."""
    needed = (out_len * WOTS_LOGW + 7) // 8
    if len(data) < needed:
        raise ValueError(f"need at least {needed} bytes, got {len(data)}")
    digits = []
    source = iter(data)
    total = 0
    bits = 0
    for _ in range(out_len):
        if bits == 0:
            total = next(source)
            bits = 8
        bits -= WOTS_LOGW
        digits.append((total >> bits) & (WOTS_W - 1))
    return digits


def _wots_checksum(msg_base_w: Sequence[int]) -> list[int]:
    """Compute the WOTS+ checksum digits for the message digits."""
    csum = sum(WOTS_W - 1 - digit for digit in msg_base_w[:WOTS_LEN1])
    csum <<= _CSUM_SHIFT
    return _base_w(ull_to_bytes(csum, _CSUM_BYTES), WOTS_LEN2)


def chain_lengths(msg: bytes) -> list[int]:
    """Derive the WOTS_LEN chain lengths for an N-byte message."""
    msg = bytes(msg)
    if len(msg) != N:
        raise ValueError(f"message must be {N} bytes, got {len(msg)}")
    lengths = _base_w(msg, WOTS_LEN1)
    return lengths + _wots_checksum(lengths)


def _gen_chain(
    value: bytes, start: int, steps: int, ctx: Context, addr: Address
) -> bytes:
    """Advance a chain value from position ``start`` by ``steps`` hashes."""
    for position in range(start, min(start + steps, WOTS_W)):
        addr.set_hash(position)
        value = thash(value, ctx, addr)
    return value


def wots_pk_from_sig(sig: bytes, msg: bytes, ctx: Context, addr: Address) -> bytes:
    """Recompute the WOTS public key (WOTS_BYTES long) from a signature.

    ``addr`` must already carry the layer, tree, keypair and WOTS type; its
    chain and hash fields are overwritten.
    """
    sig = bytes(sig)
    if len(sig) != WOTS_BYTES:
        raise ValueError(f"signature must be {WOTS_BYTES} bytes, got {len(sig)}")
    lengths = chain_lengths(msg)
    parts = []
    for chain, length in enumerate(lengths):
        addr.set_chain(chain)
        parts.append(
            _gen_chain(
                sig[chain * N : (chain + 1) * N],
                length,
                WOTS_W - 1 - length,
                ctx,
                addr,
            )
        )
    return b"".join(parts)


@dataclass
class LeafInfo:
    """State for generating WOTS leaves, and one signature, inside a Merkle tree."""

    wots_steps: Sequence[int] = field(default_factory=lambda: [0] * WOTS_LEN)
    wots_sign_leaf: int = NO_SIGN_LEAF
    leaf_addr: Address = field(default_factory=Address)
    pk_addr: Address = field(default_factory=Address)
    wots_sig: bytearray = field(default_factory=lambda: bytearray(WOTS_BYTES))

    def __post_init__(self) -> None:
        self.wots_steps = list(self.wots_steps)
        if len(self.wots_steps) != WOTS_LEN:
            raise ValueError(
                f"need {WOTS_LEN} chain steps, got {len(self.wots_steps)}"
            )
        if len(self.wots_sig) != WOTS_BYTES:
            raise ValueError(
                f"signature buffer must be {WOTS_BYTES} bytes, got {len(self.wots_sig)}"
            )
        self.wots_sig = bytearray(self.wots_sig)

    def gen_leaf(self, ctx: Context, leaf_idx: int) -> bytes:
        """Return the Merkle leaf for ``leaf_idx``.

        When ``leaf_idx`` is the signing leaf, the WOTS signature is written
        into :attr:`wots_sig` along the way.
        """
        signing = leaf_idx == self.wots_sign_leaf
        leaf_addr = self.leaf_addr
        leaf_addr.set_keypair(leaf_idx)
        self.pk_addr.set_keypair(leaf_idx)

        chain_tops = []
        for chain, step in enumerate(self.wots_steps):
            leaf_addr.set_chain(chain)
            leaf_addr.set_hash(0)
            leaf_addr.set_type(AddressType.WOTSPRF)
            node = prf_addr(ctx, leaf_addr)
            leaf_addr.set_type(AddressType.WOTS)

            for k in range(WOTS_W):
                if signing and k == step:
                    self.wots_sig[chain * N : (chain + 1) * N] = node
                if k == WOTS_W - 1:
                    break
                leaf_addr.set_hash(k)
                node = thash(node, ctx, leaf_addr)
            chain_tops.append(node)

        return thash(b"".join(chain_tops), ctx, self.pk_addr)