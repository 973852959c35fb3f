"""Signature and encryption primitives: SPHINCS+, Ed25519, NaCl box and system randomness."""

__version__ = "0.0.1"