"""SHAKE256-based hash primitives for SPHINCS+-SHAKE-256f-simple."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from .address import D, FORS_MSG_BYTES, N, PK_BYTES, TREE_HEIGHT, Address

__all__ = [
    "Context",
    "prf_addr",
    "gen_message_random",
    "hash_message",
    "thash",
]

_TREE_BITS = TREE_HEIGHT * (D - 1)
_TREE_BYTES = (_TREE_BITS + 7) // 8
_LEAF_BITS = TREE_HEIGHT
_LEAF_BYTES = (_LEAF_BITS + 7) // 8
_DGST_BYTES = FORS_MSG_BYTES + _TREE_BYTES + _LEAF_BYTES

_TREE_MASK = (1 << _TREE_BITS) - 1
_LEAF_MASK = (1 << _LEAF_BITS) - 1


def _shake256(data: bytes, length: int) -> bytes:
    return hashlib.shake_256(data).digest(length)


def _require_length(name: str, value: bytes, length: int) -> bytes:
    value = bytes(value)
    if len(value) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(value)}")
    return value


@dataclass(frozen=True)
class Context:
    """Public and secret seeds shared by every hash call of one key."""

    pub_seed: bytes
    sk_seed: bytes = field(default=bytes(N))

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "pub_seed", _require_length("pub_seed", self.pub_seed, N)
        )
        object.__setattr__(
            self, "sk_seed", _require_length("sk_seed", self.sk_seed, N)
        )


def prf_addr(ctx: Context, addr: Address) -> bytes:
    """Compute PRF(pub_seed, sk_seed, addr), an N-byte secret value."""
    return _shake256(ctx.pub_seed + bytes(addr) + ctx.sk_seed, N)


def gen_message_random(sk_prf: bytes, optrand: bytes, message: bytes) -> bytes:
    """Derive the N-byte randomizer R from the PRF key, optrand and message."""
    sk_prf = _require_length("sk_prf", sk_prf, N)
    optrand = _require_length("optrand", optrand, N)
    return _shake256(sk_prf + optrand + bytes(message), N)


def hash_message(r: bytes, pk: bytes, message: bytes) -> tuple[bytes, int, int]:
    """Hash R, the public key and the message.

    Returns ``(digest, tree, leaf_idx)``: the FORS message digest, the index
    of the hypertree tree and the index of the leaf within it.
    """
    r = _require_length("r", r, N)
    pk = _require_length("pk", pk, PK_BYTES)
    buf = _shake256(r + pk + bytes(message), _DGST_BYTES)

    digest = buf[:FORS_MSG_BYTES]
    tree_part = buf[FORS_MSG_BYTES : FORS_MSG_BYTES + _TREE_BYTES]
    leaf_part = buf[FORS_MSG_BYTES + _TREE_BYTES :]

    tree = int.from_bytes(tree_part, "big") & _TREE_MASK
    leaf_idx = int.from_bytes(leaf_part, "big") & _LEAF_MASK
    return digest, tree, leaf_idx


def thash(data: bytes, ctx: Context, addr: Address) -> bytes:
    """Tweakable hash of a whole number of N-byte blocks under ``addr``."""
    data = bytes(data)
    if len(data) % N:
        raise ValueError(f"input must be a multiple of {N} bytes, got {len(data)}")
    return _shake256(ctx.pub_seed + bytes(addr) + data, N)