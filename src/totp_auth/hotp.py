"""RFC 4226 HOTP (HMAC-based One-Time Password) building blocks."""

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hmac

from totp_auth.account import Algorithm
from totp_auth.exceptions import InternalError


_COUNTER_MASK = 0xFFFFFFFFFFFFFFFF


def hmac_digest(key: bytes, counter: int, algorithm: Algorithm = Algorithm.SHA1) -> bytes:
    """
    Compute the HMAC of an 8-byte big-endian counter.

    Args:
        key: Raw secret bytes used as the HMAC key.
        counter: The moving factor; reduced modulo 2**64 so negative values
            serialize as their two's-complement pattern.
        algorithm: Hash function to use inside the HMAC.

    Returns:
        The raw HMAC digest.

    Raises:
        InternalError: If the key is empty or the algorithm is unsupported.
    """
    if not key:
        raise InternalError("HMAC key must not be empty")
    if not isinstance(algorithm, Algorithm):
        raise InternalError(f"Unknown HMAC algorithm: {algorithm!r}")

    # Convert counter to 8-byte big-endian integer
    counter_bytes = (counter & _COUNTER_MASK).to_bytes(8, byteorder="big")

    try:
        mac = hmac.HMAC(key, algorithm.hash())
        mac.update(counter_bytes)
        return mac.finalize()
    except UnsupportedAlgorithm as e:
        raise InternalError(f"HMAC-{algorithm.value} is not available: {e}") from e


def truncate(digest: bytes, digits: int) -> str:
    """
    Apply dynamic truncation and reduce to a zero-padded decimal code.

    Args:
        digest: HMAC output, at least 20 bytes long.
        digits: Number of digits in the resulting code.

    Returns:
        The code as a string of exactly ``digits`` characters.
    """
    # Dynamic truncation (RFC 4226, Section 5.3)
    offset = digest[-1] & 0x0F
    binary = (
        ((digest[offset] & 0x7F) << 24)
        | ((digest[offset + 1] & 0xFF) << 16)
        | ((digest[offset + 2] & 0xFF) << 8)
        | (digest[offset + 3] & 0xFF)
    )

    code = binary % (10**digits)
    return f"{code:0{digits}d}"


def generate_hotp(
    key: bytes,
    counter: int,
    digits: int = 6,
    algorithm: Algorithm = Algorithm.SHA1,
) -> str:
    """
    Generate an HOTP code for an explicit counter value.

    Args:
        key: Raw secret bytes.
        counter: The counter value.
        digits: Number of digits in the output code (default: 6).
        algorithm: Hash function (default: SHA1).

    Returns:
        A zero-padded HOTP code string.
    """
    return truncate(hmac_digest(key, counter, algorithm), digits)
