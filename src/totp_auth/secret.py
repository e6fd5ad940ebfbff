"""Base32 codec and random generation for shared secrets."""

import base64
import binascii
import math
import secrets

from totp_auth.exceptions import InvalidConfig, InvalidSecret


# Lengths (mod 8) that a Base32 string without padding can never have
_INVALID_REMAINDERS = (1, 3, 6)


def decode(secret: str) -> bytes:
    """
    Decode a Base32 secret into raw key bytes.

    Input is case-insensitive, surrounding whitespace is ignored and
    ``=`` padding is optional.

    Args:
        secret: The Base32 encoded secret.

    Returns:
        Decoded secret as bytes.

    Raises:
        InvalidSecret: If the secret is not valid Base32 or decodes to nothing.
    """
    if not isinstance(secret, str):
        raise InvalidSecret(f"Secret must be a string, not {type(secret).__name__}")

    stripped = secret.strip().rstrip("=")
    if not stripped:
        raise InvalidSecret("Secret is empty")

    if len(stripped) % 8 in _INVALID_REMAINDERS:
        raise InvalidSecret(f"Invalid Base32 length: {len(stripped)} characters")

    padded = stripped + "=" * (-len(stripped) % 8)
    try:
        raw = base64.b32decode(padded, casefold=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidSecret(f"Unable to decode Base32 secret: {e}") from e

    if not raw:
        raise InvalidSecret("Secret decodes to zero bytes")
    return raw


def encode(raw: bytes) -> str:
    """Encode raw key bytes as uppercase Base32 without padding."""
    return base64.b32encode(bytes(raw)).decode("ascii").rstrip("=")


def canonical(secret: str) -> str:
    """Return the canonical (uppercase, unpadded) form of a Base32 secret."""
    return encode(decode(secret))


def random_secret(char_count: int = 32) -> str:
    """
    Generate a random Base32 secret.

    Draws ``ceil(char_count * 5 / 8)`` bytes from the operating system
    CSPRNG. The default of 32 characters gives a 160-bit key.

    Args:
        char_count: Number of Base32 characters of entropy to draw.

    Returns:
        Canonical Base32 secret string.

    Raises:
        InvalidConfig: If char_count is not positive.
    """
    if char_count < 1:
        raise InvalidConfig(f"char_count must be positive, got {char_count}")

    num_bytes = math.ceil(char_count * 5 / 8)
    return encode(secrets.token_bytes(num_bytes))
