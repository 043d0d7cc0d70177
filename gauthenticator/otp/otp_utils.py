"""Time-based One-Time Password derivation and verification.

Codes follow RFC 4226 dynamic truncation over HMAC-SHA1 with RFC 6238
30-second time steps, matching what Google Authenticator expects.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.twofactor.hotp import HOTP

from ..codec import base32_utils
from ..crypto import crypto_utils
from ..qr import qr_utils

logger = logging.getLogger(__name__)

TIME_STEP_SECONDS: int = 30
CODE_DIGITS: int = 6
DEFAULT_DISCREPANCY: int = 1
URI_PREFIX: str = "otpauth://totp/"
_COUNTER_LIMIT: int = 1 << 64


def current_time_step(now: Optional[float] = None) -> int:
    """Return the 30-second time step for ``now`` (defaults to the wall clock)."""

    if now is None:
        now = time.time()
    return int(now // TIME_STEP_SECONDS)


def hotp(key: bytes, counter: int) -> str:
    """Return the 6-digit HOTP value for raw ``key`` bytes and ``counter``."""

    if not 0 <= counter < _COUNTER_LIMIT:
        raise ValueError("Counter must fit in an unsigned 64-bit integer.")
    # Secrets decode to as few as 10 bytes, below the RFC 4226 recommendation.
    generator = HOTP(key, CODE_DIGITS, hashes.SHA1(), enforce_key_length=False)
    return generator.generate(counter).decode("ascii")


def get_code(secret_text: str, time_step: int = 0) -> str:
    """Compute the code for ``secret_text`` at ``time_step``.

    A ``time_step`` of 0 means "the current step". Raises
    :class:`base32_utils.InvalidEncoding` when the secret cannot be decoded.
    """

    if time_step == 0:
        time_step = current_time_step()
    key = base32_utils.decode(secret_text)
    return hotp(key, time_step)


def verify_code(
    secret_text: str,
    code: str,
    discrepancy: int = DEFAULT_DISCREPANCY,
    time_step: int = 0,
) -> bool:
    """Check ``code`` against every step in ``[current - d, current + d]``.

    Codes that are not exactly six characters are rejected before any HMAC is
    computed. A step whose code cannot be derived counts as a mismatch and
    the remaining steps are still checked. Steps below zero are such
    mismatches: counters are unsigned and are not wrapped around.
    """

    if len(code) != CODE_DIGITS:
        return False
    if time_step == 0:
        time_step = current_time_step()

    for i in range(-discrepancy, discrepancy + 1):
        try:
            candidate = get_code(secret_text, time_step + i)
        except ValueError:
            continue
        if crypto_utils.timing_safe_equals(candidate, code):
            logger.debug("TOTP verification succeeded")
            return True
    logger.debug("TOTP verification failed")
    return False


def build_uri(label: str, secret_text: str) -> str:
    """Return the ``otpauth://totp/`` provisioning URI.

    ``label`` and ``secret_text`` are inserted verbatim without percent
    escaping, so labels containing ``?``, ``#``, ``&`` or spaces produce a
    URI that scanners may misread.
    """

    return f"{URI_PREFIX}{label}?secret={secret_text}"


@dataclass(frozen=True)
class GoogleAuthenticator:
    """Convenience facade over the module functions.

    ``code_length`` is kept for compatibility with callers that configure it,
    but only six-digit codes are produced.
    """

    code_length: int = CODE_DIGITS

    def __post_init__(self) -> None:
        if self.code_length != CODE_DIGITS:
            raise ValueError(f"Only {CODE_DIGITS}-digit codes are supported.")

    def create_secret(self, length: int = crypto_utils.DEFAULT_SECRET_LENGTH) -> str:
        return crypto_utils.create_secret(length)

    def get_code(self, secret_text: str, time_step: int = 0) -> str:
        return get_code(secret_text, time_step)

    def verify_code(
        self,
        secret_text: str,
        code: str,
        discrepancy: int = DEFAULT_DISCREPANCY,
        time_step: int = 0,
    ) -> bool:
        return verify_code(secret_text, code, discrepancy, time_step)

    def get_provisioning_uri(self, label: str, secret_text: str) -> str:
        return build_uri(label, secret_text)

    def generate_qr_code(self, title: str, secret_text: str) -> str:
        """Return the provisioning QR code as base64-encoded PNG text."""

        return qr_utils.qr_code_base64(build_uri(title, secret_text))
