# hybridpqc

Pure-Python building blocks for hybrid post-quantum signatures:

- **SPHINCS+-SHAKE-256f-simple** (`hybridpqc.sphincs.sign`), a stateless
  hash-based signature scheme. Its public keys are 64 bytes, its secret keys
  128 bytes, its signatures 49 856 bytes, and its key-generation seeds 96 bytes.
- **Ed25519** signing with a built-in SHA-512 (`hybridpqc.nacl_sign`).
- **NaCl box and secretbox** primitives: Curve25519, XSalsa20 and Poly1305
  (`hybridpqc.nacl_box`).
- **A system randomness source** (`hybridpqc.randombytes`).

The package has no third-party runtime dependencies. Everything is written in
plain Python, so it is slow: a SPHINCS+ signature takes a while to produce.

> This is experimental cryptography. It has not been audited and is not meant
> for production systems.

## Installation

```
pip install hybridpqc
```

To run the test suite, install the `test` extra and run `pytest`:

```
pip install "hybridpqc[test]"
pytest
```

## Random bytes

```python
from hybridpqc.randombytes import randombytes

nonce = randombytes(24)
```

`randombytes(n)` returns `n` bytes from the operating system's
cryptographically secure generator. Asking for zero bytes gives `b""`; a
negative length raises `ValueError`.

## SPHINCS+ signatures

```python
from hybridpqc.sphincs import sign as sphincs

pk, sk = sphincs.keypair()                      # fresh random key pair
pk, sk = sphincs.seed_keypair(bytes(range(96)))  # deterministic key pair from a 96-byte seed

signature = sphincs.sign_signature(b"hello", sk)  # detached signature
sphincs.verify(signature, b"hello", pk)           # raises VerificationError if invalid

signed = sphincs.sign(b"hello", sk)               # signature followed by the message
message = sphincs.sign_open(signed, pk)           # returns b"hello" or raises VerificationError
```

The secret key is laid out as `SK_SEED || SK_PRF || PUB_SEED || root`, and the
public key as `PUB_SEED || root`. Signing draws 32 bytes of fresh randomness
each time, so two signatures over the same message differ; both verify.
`VerificationError` is a subclass of `ValueError`.

The lower-level pieces of the scheme live beside it in `hybridpqc.sphincs`:
`address` (parameters and the hash-address structure), `hashing` (the
SHAKE-256 tweakable hash, PRF and message hash), `utils` (integer encoding,
Merkle tree hashing and root computation), `wots` (WOTS+ one-time
signatures), `fors` (FORS few-time signatures) and `merkle` (hypertree layer
signing).

## Ed25519 signatures

```python
from hybridpqc import nacl_sign

pk, sk = nacl_sign.sign_keypair()                 # or sign_keypair_seed(seed) with a 32-byte seed
signed = nacl_sign.sign(b"hello", sk)              # 64-byte signature followed by the message
message = nacl_sign.sign_open(signed, pk)          # raises BadSignatureError if invalid

digest = nacl_sign.sha512(b"hello")                # 64-byte SHA-512 digest
```

The 64-byte secret key holds the 32-byte seed followed by the 32-byte public
key. `hashblocks(state, data)` exposes the raw SHA-512 compression over whole
128-byte blocks.

## Authenticated encryption

```python
from hybridpqc import nacl_box
from hybridpqc.randombytes import randombytes

alice_pk, alice_sk = nacl_box.box_keypair()
bob_pk, bob_sk = nacl_box.box_keypair()
nonce = randombytes(24)

plaintext = bytes(32) + b"hello"                   # NaCl convention: 32 leading zero bytes
boxed = nacl_box.box(plaintext, nonce, bob_pk, alice_sk)
opened = nacl_box.box_open(boxed, nonce, alice_pk, bob_sk)
assert opened == plaintext
```

`secretbox` and `secretbox_open` do the same with a shared 32-byte key, and
`box_beforenm` with `box_afternm` / `box_open_afternm` split the
Curve25519 key agreement from the encryption. An input shorter than 32 bytes,
or a box whose Poly1305 tag does not match, raises `CryptoError`; keys and
nonces of the wrong length raise `ValueError`.

The raw primitives are also available: `core_salsa20`, `core_hsalsa20`,
`stream_salsa20`, `stream_salsa20_xor`, `stream`, `stream_xor`,
`onetimeauth`, `onetimeauth_verify`, `scalarmult`, `scalarmult_base`,
`verify_16` and `verify_32`.

## What the package does not do

The package provides the component schemes only. It has no Dilithium
implementation and no combined hybrid signature format joining Ed25519,
Dilithium and SPHINCS+ signatures into one, and it offers no command-line
tool.