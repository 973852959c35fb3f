"""Salsa20, Poly1305 and Curve25519 primitives with NaCl secretbox and box.

Boxes follow the NaCl zero-padding convention: a plaintext handed to
:func:`secretbox` or :func:`box` starts with ``ZEROBYTES`` zero bytes, and
the resulting box starts with ``BOXZEROBYTES`` zero bytes.
"""

from __future__ import annotations

import hmac
from typing import Iterator

from .randombytes import randombytes

__all__ = [
    "SIGMA",
    "KEY_BYTES",
    "NONCE_BYTES",
    "SALSA20_NONCE_BYTES",
    "ZEROBYTES",
    "BOXZEROBYTES",
    "ONETIMEAUTH_BYTES",
    "SCALAR_BYTES",
    "CryptoError",
    "verify_16",
    "verify_32",
    "core_salsa20",
    "core_hsalsa20",
    "stream_salsa20_xor",
    "stream_salsa20",
    "stream",
    "stream_xor",
    "onetimeauth",
    "onetimeauth_verify",
    "secretbox",
    "secretbox_open",
    "scalarmult",
    "scalarmult_base",
    "box_keypair",
    "box_beforenm",
    "box_afternm",
    "box_open_afternm",
    "box",
    "box_open",
]

SIGMA = b"expand 32-byte k"
KEY_BYTES = 32
NONCE_BYTES = 24
SALSA20_NONCE_BYTES = 8
ZEROBYTES = 32
BOXZEROBYTES = 16
ONETIMEAUTH_BYTES = 16
SCALAR_BYTES = 32

_MASK32 = 0xFFFFFFFF
_BLOCK = 64
_P1305 = (1 << 130) - 5
_R_CLAMP = 0x0FFFFFFC0FFFFFFC0FFFFFFC0FFFFFFF
_P25519 = (1 << 255) - 19
_A24 = 121665
_BASE_POINT = bytes([9]) + bytes(31)


class CryptoError(Exception):
    """Raised when a box is malformed or fails authentication."""


def _check(name: str, value: bytes, length: int) -> bytes:
    value = bytes(value)
    if len(value) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(value)}")
    return value


def verify_16(x: bytes, y: bytes) -> bool:
    """Compare two 16-byte strings in constant time."""
    return hmac.compare_digest(_check("x", x, 16), _check("y", y, 16))


def verify_32(x: bytes, y: bytes) -> bool:
    """Compare two 32-byte strings in constant time."""
    return hmac.compare_digest(_check("x", x, 32), _check("y", y, 32))


def _rotl(value: int, count: int) -> int:
    value &= _MASK32
    return ((value << count) | (value >> (32 - count))) & _MASK32


def _words(data: bytes) -> list[int]:
    return [int.from_bytes(data[i : i + 4], "little") for i in range(0, len(data), 4)]


def _quarter(x: list[int], a: int, b: int, c: int, d: int) -> None:
    x[b] ^= _rotl(x[a] + x[d], 7)
    x[c] ^= _rotl(x[b] + x[a], 9)
    x[d] ^= _rotl(x[c] + x[b], 13)
    x[a] ^= _rotl(x[d] + x[c], 18)


_COLUMNS = ((0, 4, 8, 12), (5, 9, 13, 1), (10, 14, 2, 6), (15, 3, 7, 11))
_ROWS = ((0, 1, 2, 3), (5, 6, 7, 4), (10, 11, 8, 9), (15, 12, 13, 14))


def _salsa_rounds(inp: bytes, key: bytes, const: bytes) -> tuple[list[int], list[int]]:
    inp = _check("input", inp, 16)
    key = _check("key", key, 32)
    const = _check("constant", const, 16)
    c, k, n = _words(const), _words(key), _words(inp)
    state = [
        c[0], k[0], k[1], k[2],
        k[3], c[1], n[0], n[1],
        n[2], n[3], c[2], k[4],
        k[5], k[6], k[7], c[3],
    ]
    x = list(state)
    for _ in range(10):
        for quad in _COLUMNS:
            _quarter(x, *quad)
        for quad in _ROWS:
            _quarter(x, *quad)
    return state, x


def core_salsa20(inp: bytes, key: bytes, const: bytes) -> bytes:
    """Salsa20 core: a 64-byte block from a 16-byte input and 32-byte key."""
    state, x = _salsa_rounds(inp, key, const)
    return b"".join(
        ((a + b) & _MASK32).to_bytes(4, "little") for a, b in zip(x, state)
    )


def core_hsalsa20(inp: bytes, key: bytes, const: bytes) -> bytes:
    """HSalsa20 core: a 32-byte derived key from a 16-byte input and key."""
    _, x = _salsa_rounds(inp, key, const)
    return b"".join(x[i].to_bytes(4, "little") for i in (0, 5, 10, 15, 6, 7, 8, 9))


def _keystream_blocks(nonce: bytes, key: bytes) -> Iterator[bytes]:
    counter = 0
    while True:
        yield core_salsa20(nonce + counter.to_bytes(8, "little"), key, SIGMA)
        counter = (counter + 1) & 0xFFFFFFFFFFFFFFFF


def _salsa20_keystream(length: int, nonce: bytes, key: bytes) -> bytes:
    if length < 0:
        raise ValueError(f"length must not be negative: {length}")
    nonce = _check("nonce", nonce, SALSA20_NONCE_BYTES)
    key = _check("key", key, KEY_BYTES)
    blocks = _keystream_blocks(nonce, key)
    count = (length + _BLOCK - 1) // _BLOCK
    return b"".join(next(blocks) for _ in range(count))[:length]


def _xor(data: bytes, pad: bytes) -> bytes:
    return bytes(a ^ b for a, b in zip(data, pad))


def stream_salsa20_xor(message: bytes, nonce: bytes, key: bytes) -> bytes:
    """Encrypt or decrypt ``message`` with the Salsa20 stream (8-byte nonce)."""
    message = bytes(message)
    return _xor(message, _salsa20_keystream(len(message), nonce, key))


def stream_salsa20(length: int, nonce: bytes, key: bytes) -> bytes:
    """Return ``length`` bytes of Salsa20 keystream."""
    return _salsa20_keystream(length, nonce, key)


def _xsalsa_split(nonce: bytes, key: bytes) -> tuple[bytes, bytes]:
    nonce = _check("nonce", nonce, NONCE_BYTES)
    subkey = core_hsalsa20(nonce[:16], _check("key", key, KEY_BYTES), SIGMA)
    return nonce[16:], subkey


def stream(length: int, nonce: bytes, key: bytes) -> bytes:
    """Return ``length`` bytes of XSalsa20 keystream (24-byte nonce)."""
    tail, subkey = _xsalsa_split(nonce, key)
    return stream_salsa20(length, tail, subkey)


def stream_xor(message: bytes, nonce: bytes, key: bytes) -> bytes:
    """Encrypt or decrypt ``message`` with the XSalsa20 stream."""
    tail, subkey = _xsalsa_split(nonce, key)
    return stream_salsa20_xor(message, tail, subkey)


def onetimeauth(message: bytes, key: bytes) -> bytes:
    """Compute the 16-byte Poly1305 tag of ``message`` under a 32-byte key."""
    key = _check("key", key, 32)
    message = bytes(message)
    r = int.from_bytes(key[:16], "little") & _R_CLAMP
    s = int.from_bytes(key[16:], "little")
    h = 0
    for start in range(0, len(message), 16):
        chunk = message[start : start + 16] + b"\x01"
        h = (h + int.from_bytes(chunk, "little")) * r % _P1305
    return ((h + s) & ((1 << 128) - 1)).to_bytes(16, "little")


def onetimeauth_verify(tag: bytes, message: bytes, key: bytes) -> bool:
    """Return whether ``tag`` is the Poly1305 tag of ``message``."""
    return verify_16(tag, onetimeauth(message, key))


def secretbox(message: bytes, nonce: bytes, key: bytes) -> bytes:
    """Encrypt and authenticate a zero-padded message with XSalsa20-Poly1305."""
    message = bytes(message)
    if len(message) < ZEROBYTES:
        raise CryptoError(f"message must hold at least {ZEROBYTES} bytes")
    c = stream_xor(message, nonce, key)
    tag = onetimeauth(c[ZEROBYTES:], c[:32])
    return bytes(BOXZEROBYTES) + tag + c[ZEROBYTES:]


def secretbox_open(box: bytes, nonce: bytes, key: bytes) -> bytes:
    """Verify and decrypt a secret box, returning the zero-padded message."""
    box = bytes(box)
    if len(box) < ZEROBYTES:
        raise CryptoError(f"box must hold at least {ZEROBYTES} bytes")
    auth_key = stream(32, nonce, key)
    if not onetimeauth_verify(box[16:32], box[ZEROBYTES:], auth_key):
        raise CryptoError("box failed authentication")
    m = stream_xor(box, nonce, key)
    return bytes(ZEROBYTES) + m[ZEROBYTES:]


def scalarmult(n: bytes, p: bytes) -> bytes:
    """Curve25519 scalar multiplication of the point ``p`` by scalar ``n``."""
    scalar = bytearray(_check("scalar", n, SCALAR_BYTES))
    scalar[0] &= 248
    scalar[31] = (scalar[31] & 127) | 64
    k = int.from_bytes(scalar, "little")
    x1 = int.from_bytes(_check("point", p, 32), "little") & ((1 << 255) - 1)
    x1 %= _P25519

    x2, z2, x3, z3 = 1, 0, x1, 1
    swap = 0
    for t in range(254, -1, -1):
        bit = (k >> t) & 1
        if swap ^ bit:
            x2, x3 = x3, x2
            z2, z3 = z3, z2
        swap = bit
        a = (x2 + z2) % _P25519
        aa = a * a % _P25519
        b = (x2 - z2) % _P25519
        bb = b * b % _P25519
        e = (aa - bb) % _P25519
        c = (x3 + z3) % _P25519
        d = (x3 - z3) % _P25519
        da = d * a % _P25519
        cb = c * b % _P25519
        x3 = (da + cb) ** 2 % _P25519
        z3 = x1 * (da - cb) ** 2 % _P25519
        x2 = aa * bb % _P25519
        z2 = e * (aa + _A24 * e) % _P25519
    if swap:
        x2, z2 = x3, z3
    result = x2 * pow(z2, _P25519 - 2, _P25519) % _P25519
    return result.to_bytes(32, "little")


def scalarmult_base(n: bytes) -> bytes:
    """Multiply the Curve25519 base point by scalar ``n``."""
    return scalarmult(n, _BASE_POINT)


def box_keypair() -> tuple[bytes, bytes]:
    """Generate a fresh ``(public_key, secret_key)`` Curve25519 pair."""
    sk = randombytes(SCALAR_BYTES)
    return scalarmult_base(sk), sk


def box_beforenm(pk: bytes, sk: bytes) -> bytes:
    """Derive the 32-byte shared box key from a public and a secret key."""
    shared = scalarmult(sk, pk)
    return core_hsalsa20(bytes(16), shared, SIGMA)


def box_afternm(message: bytes, nonce: bytes, key: bytes) -> bytes:
    """Seal a zero-padded message with a precomputed shared key."""
    return secretbox(message, nonce, key)


def box_open_afternm(box: bytes, nonce: bytes, key: bytes) -> bytes:
    """Open a box with a precomputed shared key."""
    return secretbox_open(box, nonce, key)


def box(message: bytes, nonce: bytes, pk: bytes, sk: bytes) -> bytes:
    """Seal a zero-padded message from ``sk``'s owner to ``pk``'s owner."""
    return box_afternm(message, nonce, box_beforenm(pk, sk))


def box_open(box: bytes, nonce: bytes, pk: bytes, sk: bytes) -> bytes:
    """Open a box sent by ``pk``'s owner to ``sk``'s owner."""
    return box_open_afternm(box, nonce, box_beforenm(pk, sk))