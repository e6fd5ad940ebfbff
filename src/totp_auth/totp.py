"""RFC 6238 TOTP generation and verification."""

import logging
import math
import time
from collections import deque
from typing import Iterator, Optional

from cryptography.hazmat.primitives import constant_time

from totp_auth.account import AccountConfig
from totp_auth.exceptions import InvalidConfig
from totp_auth.hotp import generate_hotp


logger = logging.getLogger(__name__)

DEFAULT_SKEW_WINDOW = 1

_DECIMAL_DIGITS = frozenset("0123456789")


def time_step(epoch_seconds: int, period: int) -> int:
    """Return ``floor(epoch_seconds / period)``; negative times floor downwards."""
    return math.floor(epoch_seconds) // period


def generate(cfg: AccountConfig, epoch_seconds: int) -> str:
    """
    Generate the code valid at the given time.

    Args:
        cfg: Account configuration.
        epoch_seconds: Unix time in seconds.

    Returns:
        Zero-padded code of exactly ``cfg.digits`` characters.
    """
    counter = time_step(epoch_seconds, cfg.period)
    return generate_hotp(cfg.secret_bytes, counter, cfg.digits, cfg.algorithm)


def current_code(cfg: AccountConfig) -> str:
    """Generate the code for the current wall-clock time."""
    return generate(cfg, int(time.time()))


def seconds_remaining(cfg: AccountConfig, epoch_seconds: Optional[int] = None) -> int:
    """Seconds until the code valid at ``epoch_seconds`` rolls over."""
    if epoch_seconds is None:
        epoch_seconds = int(time.time())
    return cfg.period - int(epoch_seconds) % cfg.period


class ReplayLog:
    """
    Bounded record of recently accepted codes and the time step each matched.

    Entries whose step has left the verification window are pruned before a
    new code is recorded, so a log with ``capacity == skew_window + 1`` never
    evicts a code that could still be accepted. The oldest entry is evicted
    once ``capacity`` codes are held.
    """

    def __init__(self, capacity: int = DEFAULT_SKEW_WINDOW + 1):
        if capacity < 1:
            raise InvalidConfig(f"Replay log capacity must be positive, got {capacity}")
        self._entries = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def record(self, code: str, step: int) -> None:
        self._entries.append((step, code))

    def prune(self, oldest_step: int) -> None:
        """Forget codes matched at steps before ``oldest_step``."""
        while self._entries and self._entries[0][0] < oldest_step:
            self._entries.popleft()

    def __contains__(self, code: object) -> bool:
        return any(code == recorded for _, recorded in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return (code for _, code in self._entries)

    def __repr__(self) -> str:
        return f"ReplayLog(capacity={self.capacity}, size={len(self)})"


def _is_well_formed(code: object, digits: int) -> bool:
    return isinstance(code, str) and len(code) == digits and set(code) <= _DECIMAL_DIGITS


def verify(
    cfg: AccountConfig,
    submitted_code: str,
    now_epoch_seconds: int,
    skew_window: int = DEFAULT_SKEW_WINDOW,
    replay_log: Optional[ReplayLog] = None,
) -> bool:
    """
    Check a submitted code against the current and previous time steps.

    Steps ``T, T-1, ..., T-skew_window`` are tried in that order. Future
    steps are never accepted. An accepted code is recorded in ``replay_log``
    and rejected on any later presentation while its step is still inside
    the window.

    Args:
        cfg: Account configuration.
        submitted_code: Code typed by the user.
        now_epoch_seconds: Unix time of the verification.
        skew_window: Number of additional past steps to accept.
        replay_log: Codes accepted earlier; a fresh log is used when omitted.

    Returns:
        True if the code is accepted, False for wrong, reused or malformed codes.

    Raises:
        InvalidConfig: If skew_window is negative.
    """
    if skew_window < 0:
        raise InvalidConfig(f"Skew window must not be negative, got {skew_window}")
    if replay_log is None:
        replay_log = ReplayLog(skew_window + 1)

    if not _is_well_formed(submitted_code, cfg.digits):
        logger.debug("Rejected malformed code for %s", cfg.label)
        return False

    now_step = time_step(now_epoch_seconds, cfg.period)
    replay_log.prune(now_step - skew_window)
    if submitted_code in replay_log:
        logger.debug("Rejected replayed code for %s", cfg.label)
        return False

    submitted = submitted_code.encode("ascii")
    for i in range(skew_window + 1):
        step = now_step - i
        candidate = generate_hotp(cfg.secret_bytes, step, cfg.digits, cfg.algorithm)
        if constant_time.bytes_eq(submitted, candidate.encode("ascii")):
            replay_log.record(submitted_code, step)
            logger.debug("Accepted code for %s at step offset -%d", cfg.label, i)
            return True

    logger.debug("Rejected wrong code for %s", cfg.label)
    return False


class Verifier:
    """
    Verifies codes for one account and remembers which were already used.

    Not thread-safe; callers sharing a verifier must serialize access.
    """

    def __init__(self, cfg: AccountConfig, skew_window: int = DEFAULT_SKEW_WINDOW):
        if skew_window < 0:
            raise InvalidConfig(f"Skew window must not be negative, got {skew_window}")
        self.cfg = cfg
        self.skew_window = skew_window
        self.replay_log = ReplayLog(skew_window + 1)

    def verify(self, code: str, now: Optional[int] = None) -> bool:
        """Verify ``code`` at ``now`` (defaults to the current time)."""
        if now is None:
            now = int(time.time())
        return verify(self.cfg, code, now, self.skew_window, self.replay_log)
