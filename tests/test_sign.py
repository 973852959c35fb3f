import pytest

from hybridpqc.sphincs.address import BYTES, PK_BYTES, SEED_BYTES, SK_BYTES
from hybridpqc.sphincs.sign import (
    ALGNAME,
    VerificationError,
    keypair,
    seed_keypair,
    sign,
    sign_open,
    sign_signature,
    verify,
)

MESSAGE = b"hybrid signature test message"


@pytest.fixture(scope="module")
def keys():
    seed = bytes(range(SEED_BYTES))
    return seed, *seed_keypair(seed)


@pytest.fixture(scope="module")
def signature(keys):
    _, _, sk = keys
    return sign_signature(MESSAGE, sk)


def test_sizes_match_published_parameters(keys, signature):
    _, pk, sk = keys
    assert (len(sk), len(pk), len(signature)) == (128, 64, 49856)
    assert (SK_BYTES, PK_BYTES, BYTES, SEED_BYTES) == (128, 64, 49856, 96)
    assert ALGNAME == "SPHINCS+-shake-256f-simple"


def test_seed_keypair_layout(keys):
    seed, pk, sk = keys
    assert len(pk) == PK_BYTES
    assert len(sk) == SK_BYTES
    assert sk[:SEED_BYTES] == seed
    assert pk[:32] == seed[64:96]
    assert pk[32:] == sk[96:]
    assert sk[64:] == pk


def test_seed_keypair_is_deterministic(keys):
    seed, pk, sk = keys
    assert seed_keypair(seed) == (pk, sk)


def test_seed_keypair_depends_on_seed(keys):
    seed, pk, _ = keys
    other_pk, _ = seed_keypair(bytes(reversed(seed)))
    assert other_pk[32:] != pk[32:]
    assert other_pk[:32] == bytes(reversed(seed))[64:96]


def test_seed_keypair_rejects_wrong_length():
    with pytest.raises(ValueError):
        seed_keypair(bytes(SEED_BYTES - 1))


def test_keypair_layout():
    pk, sk = keypair()
    assert len(pk) == PK_BYTES
    assert len(sk) == SK_BYTES
    assert sk[64:] == pk


def test_signature_length(signature):
    assert len(signature) == BYTES


def test_valid_signature_opens(keys, signature):
    _, pk, _ = keys
    assert sign_open(signature + MESSAGE, pk) == MESSAGE


def test_tampered_message_fails(keys, signature):
    _, pk, _ = keys
    with pytest.raises(VerificationError):
        verify(signature, MESSAGE + b"!", pk)


@pytest.mark.parametrize("position", [0, 40, 20000, BYTES - 1])
def test_tampered_signature_fails(keys, signature, position):
    _, pk, _ = keys
    corrupted = bytearray(signature)
    corrupted[position] ^= 0x01
    with pytest.raises(VerificationError):
        verify(bytes(corrupted), MESSAGE, pk)


def test_wrong_public_key_fails(keys, signature):
    seed, _, _ = keys
    other_pk, _ = seed_keypair(bytes(reversed(seed)))
    with pytest.raises(VerificationError):
        verify(signature, MESSAGE, other_pk)


def test_wrong_signature_length_fails(keys, signature):
    _, pk, _ = keys
    with pytest.raises(VerificationError):
        verify(signature[:-1], MESSAGE, pk)


def test_sign_open_rejects_short_input(keys):
    _, pk, _ = keys
    with pytest.raises(VerificationError):
        sign_open(bytes(BYTES - 1), pk)


def test_verify_rejects_bad_public_key_length(signature):
    with pytest.raises(ValueError):
        verify(signature, MESSAGE, bytes(PK_BYTES - 1))


def test_sign_rejects_bad_secret_key_length():
    with pytest.raises(ValueError):
        sign_signature(MESSAGE, bytes(SK_BYTES + 1))


def test_sign_round_trip_and_randomised(keys, signature):
    _, pk, sk = keys
    signed = sign(MESSAGE, sk)
    assert len(signed) == BYTES + len(MESSAGE)
    assert signed[BYTES:] == MESSAGE
    assert sign_open(signed, pk) == MESSAGE
    assert signed[:BYTES] != signature