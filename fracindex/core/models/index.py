from dataclasses import dataclass, field
from typing import Self

from fracindex.core.codec.binary import ByteCodec
from fracindex.core.codec.sortable import SortableBase64
from fracindex.core.codec.transport import (
    STANDARD,
    URL_SAFE_NO_PAD,
    Base64Variant,
    KeyEncoding,
    decode_hex,
    encode_hex,
)
from fracindex.core.errors import FormatError


@dataclass(frozen=True, order=True, slots=True)
class FractionalIndex:
    """
    An opaque, immutable sort key that always admits a new key strictly
    between any two existing ones.

    Keys are ordered by unsigned byte-wise comparison of their canonical
    encoding, a shorter prefix sorting first. This is exactly the order of
    Python `bytes`, so the hex and sortable-text forms can be stored and
    compared as plain strings.

    Build keys with `default()` or one of the `decode_*` constructors, and
    derive new ones with `FractionalIndexGenerator`. Calling the constructor
    directly is still checked: the fields must be a canonical encoding and
    the (major, minor) it decodes to.
    """
    _raw: bytes
    _major: int = field(compare=False, hash=False)
    _minor: bytes = field(compare=False, hash=False)

    TERMINATOR = ByteCodec.TERMINATOR

    def __post_init__(self) -> None:
        if not isinstance(self._raw, bytes) or not isinstance(self._minor, bytes):
            raise FormatError(ByteCodec.INVALID_FORMAT_MESSAGE)
        if ByteCodec.decode(self._raw) != (self._major, self._minor):
            raise FormatError(ByteCodec.INVALID_FORMAT_MESSAGE)

    @classmethod
    def default(cls) -> Self:
        """The distinguished starting key, encoded as the single byte 0x80."""
        raw = bytes([ByteCodec.TERMINATOR])
        return cls(raw, 0, raw)

    @classmethod
    def from_major_minor(cls, major: int, minor: bytes) -> Self:
        return cls(ByteCodec.encode(major, minor), major, bytes(minor))

    @classmethod
    def decode_bytes(cls, data: bytes | bytearray | memoryview) -> Self:
        raw = bytes(data)
        major, minor = ByteCodec.decode(raw)
        return cls(raw, major, minor)

    @classmethod
    def decode_hex(cls, text: str) -> Self:
        return cls.decode_bytes(decode_hex(text))

    @classmethod
    def decode_base64(cls, text: str, variant: Base64Variant = STANDARD) -> Self:
        return cls.decode_bytes(variant.decode(text))

    @classmethod
    def decode_sortable_text(cls, text: str) -> Self:
        return cls.decode_bytes(SortableBase64.decode(text))

    @classmethod
    def parse(cls, text: str, encoding: KeyEncoding = KeyEncoding.hex) -> Self:
        match _key_encoding(encoding):
            case KeyEncoding.hex:
                return cls.decode_hex(text)
            case KeyEncoding.sortable:
                return cls.decode_sortable_text(text)
            case KeyEncoding.base64:
                return cls.decode_base64(text, STANDARD)
            case _:
                return cls.decode_base64(text, URL_SAFE_NO_PAD)

    @property
    def major(self) -> int:
        return self._major

    @property
    def minor(self) -> bytes:
        return self._minor

    def raw_bytes(self) -> bytes:
        """The canonical encoding. `bytes` is immutable, so no copy is needed."""
        return self._raw

    def to_hex(self) -> str:
        return encode_hex(self._raw)

    def to_base64(self, variant: Base64Variant = STANDARD) -> str:
        """Compact but NOT order-preserving; never sort on this form."""
        return variant.encode(self._raw)

    def to_sortable_text(self) -> str:
        return SortableBase64.encode(self._raw)

    def format(self, encoding: KeyEncoding = KeyEncoding.hex) -> str:
        match _key_encoding(encoding):
            case KeyEncoding.hex:
                return self.to_hex()
            case KeyEncoding.sortable:
                return self.to_sortable_text()
            case KeyEncoding.base64:
                return self.to_base64(STANDARD)
            case _:
                return self.to_base64(URL_SAFE_NO_PAD)

    def compare(self, other: Self) -> int:
        """Return -1, 0 or 1 as this key sorts before, with, or after `other`."""
        return (self._raw > other._raw) - (self._raw < other._raw)

    def __len__(self) -> int:
        return len(self._raw)

    def __repr__(self) -> str:
        return f"FractionalIndex({list(self._raw)})"


def _key_encoding(encoding: str) -> KeyEncoding:
    try:
        return KeyEncoding(encoding)
    except ValueError:
        raise FormatError(f"unsupported key encoding: {encoding!r}") from None
