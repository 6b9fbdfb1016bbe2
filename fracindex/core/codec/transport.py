import base64
import binascii
import re
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Self

from fracindex.core.errors import FormatError


HEX_PATTERN = re.compile(r"(?:[0-9a-fA-F]{2})+")


def encode_hex(data: bytes) -> str:
    """Lowercase hex; preserves the byte order of keys."""
    return data.hex()


def decode_hex(text: str) -> bytes:
    """Case-insensitive, strict: no prefix, separators or whitespace."""
    if not HEX_PATTERN.fullmatch(text):
        raise FormatError(f"invalid hex string: {text!r}")
    return bytes.fromhex(text)


class Base64Padding(StrEnum):
    present = "present"
    absent = "absent"
    optional = "optional"


@dataclass(frozen=True, slots=True)
class Base64Variant:
    """
    Standard (RFC 4648 §4) or URL-safe (§5) base64, with a padding policy.

    Base64 does not preserve the order of keys; use it for opaque storage
    only, never as a sort key.

    Padding policy:
        - present:  '=' is written on encode and required on decode
        - absent:   '=' is never written and rejected on decode
        - optional: '=' is written on encode, decode accepts both forms
    """
    url_safe: bool = False
    padding: Base64Padding = Base64Padding.present

    def with_padding(self, padding: Base64Padding) -> Self:
        return replace(self, padding=padding)

    @property
    def alphabet_pattern(self) -> re.Pattern[str]:
        return _URL_SAFE_PATTERN if self.url_safe else _STANDARD_PATTERN

    def encode(self, data: bytes) -> str:
        if self.url_safe:
            text = base64.urlsafe_b64encode(data).decode("ascii")
        else:
            text = base64.b64encode(data).decode("ascii")

        if self.padding is Base64Padding.absent:
            return text.rstrip("=")
        return text

    def decode(self, text: str) -> bytes:
        body = text.rstrip("=")
        pad = len(text) - len(body)

        if not self.alphabet_pattern.fullmatch(body):
            raise FormatError(f"invalid character in base64 string: {text!r}")

        if pad and self.padding is Base64Padding.absent:
            raise FormatError("padding is not allowed for this base64 variant")
        if len(body) % 4 == 1:
            raise FormatError("invalid base64 string length")

        expected_pad = -len(body) % 4
        if pad and pad != expected_pad:
            raise FormatError("invalid base64 padding")
        if not pad and expected_pad and self.padding is Base64Padding.present:
            raise FormatError("missing base64 padding")

        padded = body + "=" * expected_pad
        try:
            if self.url_safe:
                data = base64.urlsafe_b64decode(padded)
            else:
                data = base64.b64decode(padded, validate=True)
        except binascii.Error as ex:
            raise FormatError(f"invalid base64 string: {ex}") from ex

        # reject non-zero pad bits: only one spelling per byte string
        if self.encode(data).rstrip("=") != body:
            raise FormatError("non-zero padding bits in base64 string")

        return data


_STANDARD_PATTERN = re.compile(r"[A-Za-z0-9+/]*")
_URL_SAFE_PATTERN = re.compile(r"[A-Za-z0-9\-_]*")

STANDARD = Base64Variant()
URL_SAFE = Base64Variant(url_safe=True)
STANDARD_NO_PAD = STANDARD.with_padding(Base64Padding.absent)
URL_SAFE_NO_PAD = URL_SAFE.with_padding(Base64Padding.absent)


class KeyEncoding(StrEnum):
    """Text encodings a key can be written in."""
    hex = "hex"
    sortable = "sortable"
    base64 = "base64"
    base64url = "base64url"

    @property
    def order_preserving(self) -> bool:
        return self in (KeyEncoding.hex, KeyEncoding.sortable)
