"""SHA-512 and Ed25519 signatures in the NaCl combined-signature format.

A signed message is the 64-byte signature followed by the message itself.
Secret keys are 64 bytes: the 32-byte seed followed by the public key.
"""

from __future__ import annotations

import hmac

from .randombytes import randombytes

__all__ = [
    "SHA512_IV",
    "HASH_BYTES",
    "BLOCK_BYTES",
    "SIGNATURE_BYTES",
    "PUBLIC_KEY_BYTES",
    "SECRET_KEY_BYTES",
    "SEED_BYTES",
    "BadSignatureError",
    "hashblocks",
    "sha512",
    "sign_keypair_seed",
    "sign_keypair",
    "sign",
    "sign_open",
]

HASH_BYTES = 64
BLOCK_BYTES = 128
SIGNATURE_BYTES = 64
PUBLIC_KEY_BYTES = 32
SECRET_KEY_BYTES = 64
SEED_BYTES = 32

SHA512_IV = bytes(
    [
        0x6A, 0x09, 0xE6, 0x67, 0xF3, 0xBC, 0xC9, 0x08,
        0xBB, 0x67, 0xAE, 0x85, 0x84, 0xCA, 0xA7, 0x3B,
        0x3C, 0x6E, 0xF3, 0x72, 0xFE, 0x94, 0xF8, 0x2B,
        0xA5, 0x4F, 0xF5, 0x3A, 0x5F, 0x1D, 0x36, 0xF1,
        0x51, 0x0E, 0x52, 0x7F, 0xAD, 0xE6, 0x82, 0xD1,
        0x9B, 0x05, 0x68, 0x8C, 0x2B, 0x3E, 0x6C, 0x1F,
        0x1F, 0x83, 0xD9, 0xAB, 0xFB, 0x41, 0xBD, 0x6B,
        0x5B, 0xE0, 0xCD, 0x19, 0x13, 0x7E, 0x21, 0x79,
    ]
)

_K = (
    0x428A2F98D728AE22, 0x7137449123EF65CD, 0xB5C0FBCFEC4D3B2F, 0xE9B5DBA58189DBBC,
    0x3956C25BF348B538, 0x59F111F1B605D019, 0x923F82A4AF194F9B, 0xAB1C5ED5DA6D8118,
    0xD807AA98A3030242, 0x12835B0145706FBE, 0x243185BE4EE4B28C, 0x550C7DC3D5FFB4E2,
    0x72BE5D74F27B896F, 0x80DEB1FE3B1696B1, 0x9BDC06A725C71235, 0xC19BF174CF692694,
    0xE49B69C19EF14AD2, 0xEFBE4786384F25E3, 0x0FC19DC68B8CD5B5, 0x240CA1CC77AC9C65,
    0x2DE92C6F592B0275, 0x4A7484AA6EA6E483, 0x5CB0A9DCBD41FBD4, 0x76F988DA831153B5,
    0x983E5152EE66DFAB, 0xA831C66D2DB43210, 0xB00327C898FB213F, 0xBF597FC7BEEF0EE4,
    0xC6E00BF33DA88FC2, 0xD5A79147930AA725, 0x06CA6351E003826F, 0x142929670A0E6E70,
    0x27B70A8546D22FFC, 0x2E1B21385C26C926, 0x4D2C6DFC5AC42AED, 0x53380D139D95B3DF,
    0x650A73548BAF63DE, 0x766A0ABB3C77B2A8, 0x81C2C92E47EDAEE6, 0x92722C851482353B,
    0xA2BFE8A14CF10364, 0xA81A664BBC423001, 0xC24B8B70D0F89791, 0xC76C51A30654BE30,
    0xD192E819D6EF5218, 0xD69906245565A910, 0xF40E35855771202A, 0x106AA07032BBD1B8,
    0x19A4C116B8D2D0C8, 0x1E376C085141AB53, 0x2748774CDF8EEB99, 0x34B0BCB5E19B48A8,
    0x391C0CB3C5C95A63, 0x4ED8AA4AE3418ACB, 0x5B9CCA4F7763E373, 0x682E6FF3D6B2B8A3,
    0x748F82EE5DEFB2FC, 0x78A5636F43172F60, 0x84C87814A1F0AB72, 0x8CC702081A6439EC,
    0x90BEFFFA23631E28, 0xA4506CEBDE82BDE9, 0xBEF9A3F7B2C67915, 0xC67178F2E372532B,
    0xCA273ECEEA26619C, 0xD186B8C721C0C207, 0xEADA7DD6CDE0EB1E, 0xF57D4F7FEE6ED178,
    0x06F067AA72176FBA, 0x0A637DC5A2C898A6, 0x113F9804BEF90DAE, 0x1B710B35131C471B,
    0x28DB77F523047D84, 0x32CAAB7B40C72493, 0x3C9EBE0A15C9BEBC, 0x431D67C49C100D4C,
    0x4CC5D4BECB3E42B6, 0x597F299CFC657E2A, 0x5FCB6FAB3AD6FAEC, 0x6C44198C4A475817,
)

_MASK64 = 0xFFFFFFFFFFFFFFFF

_P = (1 << 255) - 19
_L = (1 << 252) + 27742317777372353535851937790883648493
_D = -121665 * pow(121666, _P - 2, _P) % _P
_D2 = 2 * _D % _P
_SQRT_M1 = pow(2, (_P - 1) // 4, _P)

_Point = tuple[int, int, int, int]


class BadSignatureError(ValueError):
    """Raised when a signed message does not verify under the public key."""


def _check(name: str, value: bytes, length: int) -> bytes:
    value = bytes(value)
    if len(value) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(value)}")
    return value


def _rotr(x: int, c: int) -> int:
    return ((x >> c) | (x << (64 - c))) & _MASK64


def _compress(state: list[int], block: bytes) -> list[int]:
    w = [int.from_bytes(block[i : i + 8], "big") for i in range(0, BLOCK_BYTES, 8)]
    for t in range(16, 80):
        s0 = _rotr(w[t - 15], 1) ^ _rotr(w[t - 15], 8) ^ (w[t - 15] >> 7)
        s1 = _rotr(w[t - 2], 19) ^ _rotr(w[t - 2], 61) ^ (w[t - 2] >> 6)
        w.append((w[t - 16] + s0 + w[t - 7] + s1) & _MASK64)

    a, b, c, d, e, f, g, h = state
    for t in range(80):
        big_s1 = _rotr(e, 14) ^ _rotr(e, 18) ^ _rotr(e, 41)
        ch = (e & f) ^ (~e & g)
        t1 = (h + big_s1 + ch + _K[t] + w[t]) & _MASK64
        big_s0 = _rotr(a, 28) ^ _rotr(a, 34) ^ _rotr(a, 39)
        maj = (a & b) ^ (a & c) ^ (b & c)
        t2 = (big_s0 + maj) & _MASK64
        h, g, f, e = g, f, e, (d + t1) & _MASK64
        d, c, b, a = c, b, a, (t1 + t2) & _MASK64
    return [(x + y) & _MASK64 for x, y in zip(state, (a, b, c, d, e, f, g, h))]


def hashblocks(state: bytes, data: bytes) -> bytes:
    """Run SHA-512 compression over every whole 128-byte block of ``data``.

    Returns the updated 64-byte state; a trailing partial block is ignored.
    """
    state = _check("state", state, HASH_BYTES)
    data = bytes(data)
    words = [int.from_bytes(state[i : i + 8], "big") for i in range(0, HASH_BYTES, 8)]
    for start in range(0, len(data) - BLOCK_BYTES + 1, BLOCK_BYTES):
        words = _compress(words, data[start : start + BLOCK_BYTES])
    return b"".join(word.to_bytes(8, "big") for word in words)


def sha512(message: bytes) -> bytes:
    """Return the 64-byte SHA-512 digest of ``message``."""
    message = bytes(message)
    bit_length = (len(message) * 8) & ((1 << 128) - 1)
    padding = b"\x80" + bytes((111 - len(message)) % BLOCK_BYTES)
    return hashblocks(SHA512_IV, message + padding + bit_length.to_bytes(16, "big"))


_IDENTITY: _Point = (0, 1, 1, 0)


def _point_add(p: _Point, q: _Point) -> _Point:
    x1, y1, z1, t1 = p
    x2, y2, z2, t2 = q
    a = (y1 - x1) * (y2 - x2) % _P
    b = (y1 + x1) * (y2 + x2) % _P
    c = t1 * _D2 * t2 % _P
    d = 2 * z1 * z2 % _P
    e, f, g, h = b - a, d - c, d + c, b + a
    return (e * f % _P, g * h % _P, f * g % _P, e * h % _P)


def _scalar_mult(point: _Point, scalar: int) -> _Point:
    result = _IDENTITY
    for bit in range(scalar.bit_length() - 1, -1, -1):
        result = _point_add(result, result)
        if (scalar >> bit) & 1:
            result = _point_add(result, point)
    return result


def _recover_x(y: int, sign_bit: int) -> int | None:
    x2 = (y * y - 1) * pow(_D * y * y + 1, _P - 2, _P) % _P
    x = pow(x2, (_P + 3) // 8, _P)
    if (x * x - x2) % _P:
        x = x * _SQRT_M1 % _P
    if (x * x - x2) % _P:
        return None
    if (x & 1) != sign_bit:
        x = -x % _P
    return x


def _encode(point: _Point) -> bytes:
    x, y, z, _ = point
    zi = pow(z, _P - 2, _P)
    x = x * zi % _P
    y = y * zi % _P
    return (y | ((x & 1) << 255)).to_bytes(32, "little")


def _decode(data: bytes) -> _Point | None:
    value = int.from_bytes(data, "little")
    y = (value & ((1 << 255) - 1)) % _P
    x = _recover_x(y, value >> 255)
    if x is None:
        return None
    return (x, y, 1, x * y % _P)


_BY = 4 * pow(5, _P - 2, _P) % _P
_BX = _recover_x(_BY, 0)
_BASE: _Point = (_BX, _BY, 1, _BX * _BY % _P)


def _hash_int(data: bytes) -> int:
    return int.from_bytes(sha512(data), "little") % _L


def _expand_seed(seed: bytes) -> tuple[int, bytes]:
    digest = bytearray(sha512(seed))
    digest[0] &= 248
    digest[31] &= 127
    digest[31] |= 64
    return int.from_bytes(digest[:32], "little"), bytes(digest[32:])


def sign_keypair_seed(seed: bytes) -> tuple[bytes, bytes]:
    """Derive ``(public_key, secret_key)`` from a 32-byte seed.

    The secret key is the seed followed by the public key.
    """
    seed = _check("seed", seed, SEED_BYTES)
    scalar, _ = _expand_seed(seed)
    pk = _encode(_scalar_mult(_BASE, scalar))
    return pk, seed + pk


def sign_keypair() -> tuple[bytes, bytes]:
    """Generate a fresh ``(public_key, secret_key)`` from system randomness."""
    return sign_keypair_seed(randombytes(SEED_BYTES))


def sign(message: bytes, sk: bytes) -> bytes:
    """Return the 64-byte Ed25519 signature of ``message`` followed by it."""
    sk = _check("secret key", sk, SECRET_KEY_BYTES)
    message = bytes(message)
    scalar, prefix = _expand_seed(sk[:32])
    r = _hash_int(prefix + message)
    r_bytes = _encode(_scalar_mult(_BASE, r))
    h = _hash_int(r_bytes + sk[32:] + message)
    s = (r + h * scalar) % _L
    return r_bytes + s.to_bytes(32, "little") + message


def sign_open(signed_message: bytes, pk: bytes) -> bytes:
    """Verify a signed message and return the message it carries.

    Raises :class:`BadSignatureError` when the signature does not verify.
    """
    pk = _check("public key", pk, PUBLIC_KEY_BYTES)
    signed_message = bytes(signed_message)
    if len(signed_message) < SIGNATURE_BYTES:
        raise BadSignatureError(
            f"signed message must hold at least {SIGNATURE_BYTES} bytes, "
            f"got {len(signed_message)}"
        )
    point = _decode(pk)
    if point is None:
        raise BadSignatureError("public key is not a valid curve point")

    r_bytes = signed_message[:32]
    message = signed_message[SIGNATURE_BYTES:]
    h = _hash_int(r_bytes + pk + message)
    s = int.from_bytes(signed_message[32:SIGNATURE_BYTES], "little")

    x, y, z, t = point
    neg_point: _Point = (-x % _P, y, z, -t % _P)
    check = _point_add(_scalar_mult(neg_point, h), _scalar_mult(_BASE, s))
    if not hmac.compare_digest(_encode(check), r_bytes):
        raise BadSignatureError("signature does not verify")
    return message