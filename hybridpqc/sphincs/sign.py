"""SPHINCS+-SHAKE-256f-simple key generation, signing and verification."""

from __future__ import annotations

import hmac

from ..randombytes import randombytes
from .address import (
    BYTES,
    D,
    FORS_BYTES,
    N,
    PK_BYTES,
    SEED_BYTES,
    SK_BYTES,
    TREE_HEIGHT,
    WOTS_BYTES,
    WOTS_LEN,
    Address,
    AddressType,
)
from .fors import fors_pk_from_sig, fors_sign
from .hashing import Context, gen_message_random, hash_message, thash
from .merkle import merkle_gen_root, merkle_sign
from .utils import compute_root
from .wots import wots_pk_from_sig

__all__ = [
    "ALGNAME",
    "VerificationError",
    "seed_keypair",
    "keypair",
    "sign_signature",
    "verify",
    "sign",
    "sign_open",
]

ALGNAME = "SPHINCS+-shake-256f-simple"

_LEAF_MASK = (1 << TREE_HEIGHT) - 1
_AUTH_BYTES = TREE_HEIGHT * N


class VerificationError(ValueError):
    """Raised when a signature does not verify under the given public key."""


def _as_bytes(name: str, value: bytes, length: int) -> bytes:
    value = bytes(value)
    if len(value) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(value)}")
    return value


def seed_keypair(seed: bytes) -> tuple[bytes, bytes]:
    """Derive ``(public_key, secret_key)`` from a SEED_BYTES-long seed.

    The secret key is SK_SEED || SK_PRF || PUB_SEED || root and the public
    key is PUB_SEED || root.
    """
    seed = _as_bytes("seed", seed, SEED_BYTES)
    sk_seed = seed[:N]
    pub_seed = seed[2 * N : 3 * N]
    ctx = Context(pub_seed=pub_seed, sk_seed=sk_seed)
    root = merkle_gen_root(ctx)
    return pub_seed + root, seed + root


def keypair() -> tuple[bytes, bytes]:
    """Generate a fresh ``(public_key, secret_key)`` from system randomness."""
    return seed_keypair(randombytes(SEED_BYTES))


def sign_signature(message: bytes, sk: bytes) -> bytes:
    """Return a detached BYTES-long signature of ``message``."""
    sk = _as_bytes("secret key", sk, SK_BYTES)
    message = bytes(message)
    sk_seed = sk[:N]
    sk_prf = sk[N : 2 * N]
    pk = sk[2 * N :]
    ctx = Context(pub_seed=pk[:N], sk_seed=sk_seed)

    wots_addr = Address()
    tree_addr = Address()
    wots_addr.set_type(AddressType.WOTS)
    tree_addr.set_type(AddressType.HASHTREE)

    # Fresh randomness makes signing non-deterministic, which hinders
    # side-channel attacks that need many traces over the same nodes.
    optrand = randombytes(N)
    r = gen_message_random(sk_prf, optrand, message)
    mhash, tree, idx_leaf = hash_message(r, pk, message)

    wots_addr.set_tree(tree)
    wots_addr.set_keypair(idx_leaf)

    fors_sig, root = fors_sign(mhash, ctx, wots_addr)
    parts = [r, fors_sig]

    for layer in range(D):
        tree_addr.set_layer(layer)
        tree_addr.set_tree(tree)
        wots_addr.copy_subtree_from(tree_addr)
        wots_addr.set_keypair(idx_leaf)

        layer_sig, root = merkle_sign(root, ctx, wots_addr, tree_addr, idx_leaf)
        parts.append(layer_sig)

        idx_leaf = tree & _LEAF_MASK
        tree >>= TREE_HEIGHT

    signature = b"".join(parts)
    if len(signature) != BYTES:
        raise AssertionError(f"signature has {len(signature)} bytes, not {BYTES}")
    return signature


def verify(signature: bytes, message: bytes, pk: bytes) -> None:
    """Check a detached signature; raise :class:`VerificationError` if invalid."""
    pk = _as_bytes("public key", pk, PK_BYTES)
    signature = bytes(signature)
    message = bytes(message)
    if len(signature) != BYTES:
        raise VerificationError(
            f"signature must be {BYTES} bytes, got {len(signature)}"
        )

    pub_root = pk[N:]
    ctx = Context(pub_seed=pk[:N])

    wots_addr = Address()
    tree_addr = Address()
    wots_pk_addr = Address()
    wots_addr.set_type(AddressType.WOTS)
    tree_addr.set_type(AddressType.HASHTREE)
    wots_pk_addr.set_type(AddressType.WOTSPK)

    mhash, tree, idx_leaf = hash_message(signature[:N], pk, message)
    offset = N

    wots_addr.set_tree(tree)
    wots_addr.set_keypair(idx_leaf)

    root = fors_pk_from_sig(signature[offset : offset + FORS_BYTES], mhash, ctx, wots_addr)
    offset += FORS_BYTES

    for layer in range(D):
        tree_addr.set_layer(layer)
        tree_addr.set_tree(tree)
        wots_addr.copy_subtree_from(tree_addr)
        wots_addr.set_keypair(idx_leaf)
        wots_pk_addr.copy_keypair_from(wots_addr)

        wots_sig = signature[offset : offset + WOTS_BYTES]
        offset += WOTS_BYTES
        wots_pk = wots_pk_from_sig(wots_sig, root, ctx, wots_addr)
        leaf = thash(wots_pk, ctx, wots_pk_addr)
        if len(wots_pk) != WOTS_LEN * N:
            raise AssertionError("WOTS public key has the wrong length")

        auth_path = signature[offset : offset + _AUTH_BYTES]
        offset += _AUTH_BYTES
        root = compute_root(leaf, idx_leaf, 0, auth_path, TREE_HEIGHT, ctx, tree_addr)

        idx_leaf = tree & _LEAF_MASK
        tree >>= TREE_HEIGHT

    if not hmac.compare_digest(root, pub_root):
        raise VerificationError("signature does not match the public key")


def sign(message: bytes, sk: bytes) -> bytes:
    """Return the signature of ``message`` followed by the message itself."""
    message = bytes(message)
    return sign_signature(message, sk) + message


def sign_open(signed_message: bytes, pk: bytes) -> bytes:
    """Verify a signature-message pair and return the message."""
    signed_message = bytes(signed_message)
    if len(signed_message) < BYTES:
        raise VerificationError(
            f"signed message must hold at least {BYTES} bytes, "
            f"got {len(signed_message)}"
        )
    message = signed_message[BYTES:]
    verify(signed_message[:BYTES], message, pk)
    return message