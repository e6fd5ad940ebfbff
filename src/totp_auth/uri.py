"""Construction and parsing of otpauth:// enrollment URIs.

See https://github.com/google/google-authenticator/wiki/Key-Uri-Format
"""

from urllib.parse import parse_qs, quote, unquote, urlparse

from totp_auth.account import AccountConfig
from totp_auth.exceptions import InvalidConfig


SCHEME = "otpauth"
OTP_TYPE = "totp"


def pct(text: str) -> str:
    """
    Percent-encode every octet outside ``A-Z a-z 0-9 - _ . ~``.

    Hex digits are uppercase and a space becomes ``%20``.
    """
    return quote(text, safe="", encoding="utf-8")


def build_uri(cfg: AccountConfig) -> str:
    """
    Build the enrollment URI for an account.

    The label is used alone as the path; the issuer travels only as a query
    parameter and is left out when empty.

    Args:
        cfg: Account configuration.

    Returns:
        ``otpauth://totp/...`` URI string.
    """
    params = [("secret", cfg.secret)]
    if cfg.issuer:
        params.append(("issuer", cfg.issuer))
    params.extend(
        [
            ("algorithm", cfg.algorithm.uri_name),
            ("digits", str(cfg.digits)),
            ("period", str(cfg.period)),
        ]
    )

    query = "&".join(f"{pct(key)}={pct(value)}" for key, value in params)
    return f"{SCHEME}://{OTP_TYPE}/{pct(cfg.label)}?{query}"


def parse_uri(uri: str) -> AccountConfig:
    """
    Parse an ``otpauth://totp/`` URI back into an account configuration.

    An ``Issuer:Label`` path is accepted; when an ``issuer`` parameter is
    also present the two must agree.

    Args:
        uri: The enrollment URI.

    Returns:
        AccountConfig described by the URI.

    Raises:
        InvalidConfig: If the URI is not a TOTP otpauth URI or a parameter is invalid.
        InvalidSecret: If the secret cannot be decoded.
    """
    parsed = urlparse(uri.strip())
    if parsed.scheme.lower() != SCHEME:
        raise InvalidConfig("Not an otpauth URI")
    if parsed.netloc.lower() != OTP_TYPE:
        raise InvalidConfig(f"Unsupported OTP type: {parsed.netloc!r}")

    label = unquote(parsed.path.lstrip("/"))
    path_issuer = None
    if ":" in label:
        path_issuer, label = (part.strip() for part in label.split(":", 1))

    qs = parse_qs(parsed.query)
    secret = qs.get("secret", [None])[0]
    if not secret:
        raise InvalidConfig("URI missing 'secret=' parameter")

    issuer = qs.get("issuer", [None])[0]
    if issuer is not None and path_issuer is not None and issuer != path_issuer:
        raise InvalidConfig(
            "If issuer is specified in both label and parameters, it should be equal"
        )
    if issuer is None:
        issuer = path_issuer or ""

    try:
        digits = int(qs.get("digits", ["6"])[0])
        period = int(qs.get("period", ["30"])[0])
    except ValueError as e:
        raise InvalidConfig(f"Invalid numeric parameter in URI: {e}") from e

    return AccountConfig.from_base32(
        label,
        secret,
        issuer=issuer,
        algorithm=qs.get("algorithm", ["SHA1"])[0],
        digits=digits,
        period=period,
    )
