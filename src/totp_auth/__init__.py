"""TOTP (RFC 6238) code generation, verification and otpauth enrollment."""

from totp_auth.account import AccountConfig, Algorithm
from totp_auth.exceptions import InternalError, InvalidConfig, InvalidSecret, TotpError
from totp_auth.secret import decode, encode, random_secret
from totp_auth.totp import ReplayLog, Verifier, current_code, generate, verify
from totp_auth.uri import build_uri, parse_uri


__all__ = [
    "AccountConfig",
    "Algorithm",
    "InternalError",
    "InvalidConfig",
    "InvalidSecret",
    "ReplayLog",
    "TotpError",
    "Verifier",
    "build_uri",
    "current_code",
    "decode",
    "encode",
    "generate",
    "parse_uri",
    "random_secret",
    "verify",
]
