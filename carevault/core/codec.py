"""
core.codec
~~~~~~~~~~

Reversible encoding used for the ``encryptedContent`` field of medical
records.  This is base64 over UTF-8 and provides NO confidentiality: there is
no key, no nonce and no integrity check.  It exists so the demo can show an
"encrypted" column without pulling real key management into the data layer.

The public functions are total and never raise:

* :func:`encode` / :func:`decode` return their input unchanged on failure.
* :func:`try_decode` returns a :class:`DecodeResult` so callers that care can
  tell a failed decode apart from content that happens to equal its input.
* :func:`hash_text` is a small non-cryptographic fingerprint.
"""

from __future__ import annotations

import base64
import binascii
import re
import struct
from dataclasses import dataclass

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_ASCII_WHITESPACE = re.compile(r"[\t\n\f\r ]")


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of a decode attempt.  ``text`` is the raw input when ``ok`` is False."""
    text: str
    ok: bool


def encode(plaintext: str) -> str:
    """
    Encode *plaintext* as base64 over its UTF-8 bytes.

    Text that cannot be represented in UTF-8 (a lone surrogate, for instance)
    is returned unchanged.
    """
    try:
        raw = plaintext.encode("utf-8")
    except UnicodeEncodeError:
        return plaintext
    return base64.b64encode(raw).decode("ascii")


def try_decode(encoded: str) -> DecodeResult:
    """
    Invert :func:`encode`.

    Follows forgiving-base64 input rules: ASCII whitespace is ignored and
    missing ``=`` padding is restored.  Characters outside the base64
    alphabet, an impossible length and byte sequences that are not valid
    UTF-8 all count as failures.
    """
    cleaned = _ASCII_WHITESPACE.sub("", encoded)
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        raw = base64.b64decode(cleaned, validate=True)
        return DecodeResult(text=raw.decode("utf-8"), ok=True)
    except (binascii.Error, ValueError):
        # UnicodeDecodeError and non-ASCII str input are both ValueErrors
        return DecodeResult(text=encoded, ok=False)


def decode(encoded: str) -> str:
    """Fail-soft decode: the decoded text, or *encoded* itself when it is not valid."""
    return try_decode(encoded).text


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def hash_text(text: str) -> str:
    """
    Deterministic 32-bit rolling hash of *text*, rendered in base 36.

    Iterates over UTF-16 code units, so a character outside the BMP
    contributes two steps (one per surrogate).
    """
    data = text.encode("utf-16-le", errors="surrogatepass")
    units = struct.unpack(f"<{len(data) // 2}H", data)
    acc = 0
    for unit in units:
        acc = _to_int32((acc << 5) - acc + unit)
    return _base36(abs(acc))
