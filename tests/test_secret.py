"""Tests for the Base32 secret codec."""

import secrets

import pytest

from totp_auth.exceptions import InvalidConfig, InvalidSecret
from totp_auth.secret import canonical, decode, encode, random_secret


# RFC 4648 Section 10 test vectors, padding removed
RFC4648_VECTORS = [
    (b"f", "MY"),
    (b"fo", "MZXQ"),
    (b"foo", "MZXW6"),
    (b"foob", "MZXW6YQ"),
    (b"fooba", "MZXW6YTB"),
    (b"foobar", "MZXW6YTBOI"),
]


@pytest.mark.parametrize("raw,encoded", RFC4648_VECTORS)
def test_rfc4648_vectors(raw, encoded):
    """Test encoding and decoding against RFC 4648 vectors."""
    assert encode(raw) == encoded
    assert decode(encoded) == raw


@pytest.mark.parametrize("length", range(1, 65))
def test_round_trip_random_bytes(length):
    """Test that decode(encode(b)) == b for random keys of every length up to 64."""
    raw = secrets.token_bytes(length)
    encoded = encode(raw)

    assert decode(encoded) == raw
    assert decode(encoded.lower()) == raw
    assert canonical(encoded.lower()) == encoded


@pytest.mark.parametrize("char_count", [1, 8, 16, 26, 32, 52, 64, 103])
def test_round_trip_random_secret(char_count):
    """Test that generated secrets are already in canonical form."""
    secret = random_secret(char_count)
    assert encode(decode(secret)) == secret


def test_decode_rfc6238_secret():
    """Test decoding the secret used by the RFC 6238 vectors."""
    assert decode("GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ") == b"12345678901234567890"


def test_decode_is_case_insensitive():
    """Test that lowercase input is accepted."""
    assert decode("mzxw6ytboi") == b"foobar"
    assert decode("MzXw6YtBoI") == b"foobar"


def test_decode_ignores_surrounding_whitespace():
    """Test that leading and trailing whitespace is ignored."""
    assert decode("  MZXW6YTBOI \n") == b"foobar"


def test_decode_accepts_padding():
    """Test that optional '=' padding is accepted."""
    assert decode("MZXW6YQ=") == b"foob"
    assert decode("MY======") == b"f"


def test_encode_has_no_padding():
    """Test that encoded output never carries padding."""
    assert "=" not in encode(b"f")
    assert encode(b"12345678901234567890") == "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


def test_canonical_form():
    """Test that canonical() uppercases and strips padding."""
    assert canonical(" mzxw6yq= ") == "MZXW6YQ"


@pytest.mark.parametrize(
    "bad_secret",
    [
        "GEZDGNB1",  # '1' is outside the alphabet
        "GEZDGNB8",
        "not-a-valid-secret",
        "MZXW 6YTBOI",
        "A",  # impossible lengths
        "ABC",
        "ABCDEF",
    ],
)
def test_decode_rejects_invalid_input(bad_secret):
    """Test that invalid Base32 raises InvalidSecret."""
    with pytest.raises(InvalidSecret):
        decode(bad_secret)


@pytest.mark.parametrize("empty", ["", "   ", "========"])
def test_decode_rejects_empty_secret(empty):
    """Test that an empty secret raises InvalidSecret."""
    with pytest.raises(InvalidSecret, match="empty"):
        decode(empty)


def test_decode_rejects_non_string():
    """Test that bytes input is rejected rather than silently decoded."""
    with pytest.raises(InvalidSecret, match="must be a string"):
        decode(b"MZXW6YTBOI")


def test_invalid_secret_is_value_error():
    """Test that InvalidSecret can be caught as ValueError."""
    with pytest.raises(ValueError):
        decode("!!!!")


def test_random_secret_default_length():
    """Test that the default secret is 32 characters and 160 bits."""
    secret = random_secret()
    assert len(secret) == 32
    assert len(decode(secret)) == 20
    assert secret == secret.upper()
    assert "=" not in secret


def test_random_secret_custom_length():
    """Test that char_count controls the number of random bytes."""
    assert len(decode(random_secret(16))) == 10
    assert len(decode(random_secret(10))) == 7
    assert len(decode(random_secret(1))) == 1


def test_random_secret_is_random():
    """Test that consecutive secrets differ."""
    assert len({random_secret() for _ in range(10)}) == 10


def test_random_secret_rejects_non_positive_count():
    """Test that char_count must be positive."""
    with pytest.raises(InvalidConfig):
        random_secret(0)
