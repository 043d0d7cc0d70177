"""Cryptographic primitives behind the authenticator.

Secret generation reads the operating system CSPRNG and code comparison runs
in constant time for inputs of equal length.
"""

from __future__ import annotations

import logging
import os

from ..codec import base32_utils

logger = logging.getLogger(__name__)

# Secret text length bounds; one character is produced per random byte.
SECRET_LENGTH_MIN: int = 16
SECRET_LENGTH_MAX: int = 128
DEFAULT_SECRET_LENGTH: int = 16


class InvalidLength(ValueError):
    """Raised when a requested secret length is outside the supported range."""


class InsecureRandomUnavailable(RuntimeError):
    """Raised when the operating system cannot supply secure random bytes."""


def create_secret(length: int = DEFAULT_SECRET_LENGTH) -> str:
    """Return a new random base32 secret of exactly ``length`` characters.

    ``length`` must lie in ``[16, 128]``. Each random byte is rendered as one
    alphabet character, see :func:`base32_utils.encode`.
    """

    if isinstance(length, bool) or not isinstance(length, int):
        raise InvalidLength("Secret length must be an integer.")
    if length < SECRET_LENGTH_MIN or length > SECRET_LENGTH_MAX:
        raise InvalidLength(
            f"Secret length must be between {SECRET_LENGTH_MIN} and {SECRET_LENGTH_MAX} characters."
        )
    try:
        raw = os.urandom(length)
    except (OSError, NotImplementedError) as exc:
        raise InsecureRandomUnavailable("No source of secure random bytes available.") from exc
    logger.debug("Created secret of %d characters", length)
    return base32_utils.encode(raw)


def timing_safe_equals(a: str, b: str) -> bool:
    """Compare two strings without short-circuiting on the first difference.

    Only the length check returns early; it reveals the length and never the
    content. Equal-length inputs are always scanned in full.
    """

    left = a.encode("utf-8")
    right = b.encode("utf-8")
    if len(left) != len(right):
        return False
    result = 0
    for x, y in zip(left, right):
        result |= x ^ y
    return result == 0
