"""Base32 helpers used for authenticator secrets.

Secrets are *written* with a simplified scheme: every random byte contributes
its low five bits as one alphabet character. Secrets are *read* back with
regular RFC 4648 decoding. The two operations are intentionally not inverses;
the only guarantee is that anything :func:`encode` emits can be decoded.
"""

from __future__ import annotations

import base64

BASE32_ALPHABET: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
BASE32_PADDING: str = "="
QUANTUM_CHARS: int = 8

# Trailing characters in a partial quantum that cannot complete a byte.
_DANGLING_CHARS = {0: 0, 1: 1, 2: 0, 3: 1, 4: 0, 5: 0, 6: 1, 7: 0}


class InvalidEncoding(ValueError):
    """Raised when secret text is not decodable base32."""


def get_base32_lookup_table() -> str:
    return BASE32_ALPHABET


def encode(random_bytes: bytes) -> str:
    """Map each byte to ``BASE32_ALPHABET[byte & 31]`` without padding."""

    table = get_base32_lookup_table()
    return "".join(table[byte & 31] for byte in random_bytes)


def decode(secret_text: str) -> bytes:
    """Decode base32 secret text into raw key bytes.

    Input is upper-cased and trailing ``=`` padding is stripped. A final
    partial quantum contributes only the whole bytes it carries, so unpadded
    secrets of any length are accepted as long as they produce at least one
    byte.
    """

    if not isinstance(secret_text, str):
        raise InvalidEncoding("Secret must be base32 text.")
    if not secret_text.isascii():
        raise InvalidEncoding("Secret must contain only ASCII base32 characters.")
    text = secret_text.upper().rstrip(BASE32_PADDING)
    for char in text:
        if char not in BASE32_ALPHABET:
            raise InvalidEncoding(f"Invalid base32 character {char!r} in secret.")

    usable = len(text) - _DANGLING_CHARS[len(text) % QUANTUM_CHARS]
    if usable == 0:
        raise InvalidEncoding("Secret is too short to hold a key byte.")
    padded = text[:usable] + BASE32_PADDING * (-usable % QUANTUM_CHARS)
    try:
        return base64.b32decode(padded)
    except ValueError as exc:  # binascii.Error subclasses ValueError
        raise InvalidEncoding("Secret is not valid base32.") from exc
