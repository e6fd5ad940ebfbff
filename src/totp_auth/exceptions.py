"""Exception hierarchy for totp-auth."""


class TotpError(Exception):
    """Base class for all totp-auth errors."""


class InvalidSecret(TotpError, ValueError):
    """The shared secret is not valid Base32 or decodes to nothing."""


class InvalidConfig(TotpError, ValueError):
    """An account parameter is outside its allowed range."""


class InternalError(TotpError, RuntimeError):
    """The HMAC primitive failed; indicates a programming or platform error."""
