"""Account configuration shared between enrollment and verification."""

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from cryptography.hazmat.primitives import hashes

from totp_auth import secret as secret_codec
from totp_auth.exceptions import InvalidConfig, InvalidSecret


ALLOWED_DIGITS = (6, 7, 8)
DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30


class Algorithm(Enum):
    """Hash function used inside the HMAC."""

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @property
    def uri_name(self) -> str:
        """Token used for the ``algorithm`` parameter of an otpauth URI."""
        return self.value

    def hash(self) -> hashes.HashAlgorithm:
        """Return a fresh cryptography hash instance for this algorithm."""
        return _HASHES[self]()

    @classmethod
    def parse(cls, name: Union[str, "Algorithm"]) -> "Algorithm":
        """
        Resolve an algorithm from its name.

        Accepts ``SHA1``, ``sha-256``, ``HmacSHA512`` and similar spellings.

        Raises:
            InvalidConfig: If the name does not denote a supported algorithm.
        """
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            raise InvalidConfig(f"Unsupported algorithm: {name!r}")

        token = name.strip().upper().replace("-", "").replace("_", "")
        if token.startswith("HMAC"):
            token = token[4:]
        try:
            return cls(token)
        except ValueError as e:
            raise InvalidConfig(
                f"Unsupported algorithm {name!r}, must be SHA1, SHA256 or SHA512"
            ) from e


_HASHES = {
    Algorithm.SHA1: hashes.SHA1,
    Algorithm.SHA256: hashes.SHA256,
    Algorithm.SHA512: hashes.SHA512,
}


@dataclass(frozen=True)
class AccountConfig:
    """
    Immutable description of one TOTP account.

    Together these fields fully determine every generated code.
    """

    label: str
    secret_bytes: bytes = dataclasses.field(repr=False)
    issuer: str = ""
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = DEFAULT_DIGITS
    period: int = DEFAULT_PERIOD

    def __post_init__(self) -> None:
        if not isinstance(self.label, str) or not self.label:
            raise InvalidConfig("Label must be a non-empty string")
        # otpauth URIs reserve ':' to separate an issuer prefix from the label
        if ":" in self.label:
            raise InvalidConfig(f"Label must not contain ':', got {self.label!r}")
        if self.issuer is None:
            object.__setattr__(self, "issuer", "")
        elif not isinstance(self.issuer, str):
            raise InvalidConfig("Issuer must be a string")

        if not isinstance(self.secret_bytes, (bytes, bytearray)) or not self.secret_bytes:
            raise InvalidSecret("Secret must be at least one byte long")
        object.__setattr__(self, "secret_bytes", bytes(self.secret_bytes))

        object.__setattr__(self, "algorithm", Algorithm.parse(self.algorithm))

        # bool is an int subclass but never a sensible digit count or period
        if (
            isinstance(self.digits, bool)
            or not isinstance(self.digits, int)
            or self.digits not in ALLOWED_DIGITS
        ):
            raise InvalidConfig(f"Digits may only be 6, 7 or 8, got {self.digits!r}")
        if isinstance(self.period, bool) or not isinstance(self.period, int) or self.period <= 0:
            raise InvalidConfig(f"Period must be a positive integer, got {self.period!r}")

    @property
    def secret(self) -> str:
        """Canonical Base32 form of the secret."""
        return secret_codec.encode(self.secret_bytes)

    @classmethod
    def from_base32(
        cls,
        label: str,
        secret: str,
        issuer: Optional[str] = "",
        algorithm: Union[str, Algorithm] = Algorithm.SHA1,
        digits: int = DEFAULT_DIGITS,
        period: int = DEFAULT_PERIOD,
    ) -> "AccountConfig":
        """
        Build a configuration from a Base32 secret.

        Raises:
            InvalidSecret: If the secret cannot be decoded.
            InvalidConfig: If any other parameter is out of range.
        """
        return cls(
            label=label,
            secret_bytes=secret_codec.decode(secret),
            issuer=issuer,
            algorithm=algorithm,
            digits=digits,
            period=period,
        )

    @classmethod
    def create(
        cls,
        label: str,
        issuer: Optional[str] = "",
        algorithm: Union[str, Algorithm] = Algorithm.SHA1,
        digits: int = DEFAULT_DIGITS,
        period: int = DEFAULT_PERIOD,
        char_count: int = 32,
    ) -> "AccountConfig":
        """Build a configuration around a freshly generated random secret."""
        return cls.from_base32(
            label,
            secret_codec.random_secret(char_count),
            issuer=issuer,
            algorithm=algorithm,
            digits=digits,
            period=period,
        )

    def replace(self, **changes) -> "AccountConfig":
        """Return a copy with some fields changed; the copy is validated again."""
        if "secret" in changes:
            changes["secret_bytes"] = secret_codec.decode(changes.pop("secret"))
        return dataclasses.replace(self, **changes)
