"""Operating-system backed source of cryptographically secure random bytes."""

from __future__ import annotations

import operator
import os

__all__ = ["randombytes"]


def randombytes(n: int) -> bytes:
    """Return ``n`` bytes of high quality randomness from the operating system.

    Raises ``ValueError`` for a negative length and ``OSError`` when the
    system source of randomness cannot be read.
    """
    length = operator.index(n)
    if length < 0:
        raise ValueError(f"cannot produce a negative number of bytes: {length}")
    if length == 0:
        return b""
    return os.urandom(length)