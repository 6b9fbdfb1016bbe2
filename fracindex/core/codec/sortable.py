from fracindex.core.errors import FormatError


class SortableBase64:
    """
    Base64-like text encoding whose output sorts like its input.

    The bit layout is the one of RFC 4648 base64, but:
        - the alphabet is 64 URL-safe characters in ascending ASCII order,
          so comparing encoded strings compares the underlying bytes
        - no padding character is emitted; a trailing group of 1 or 2 bytes
          becomes 2 or 3 characters, and the unused low bits of the last
          character must be zero
        - a string of length 4n+1 cannot represent whole bytes and is rejected
    """
    ALPHABET: str = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"
    DECODE_TABLE: dict[str, int] = {c: i for i, c in enumerate(ALPHABET)}

    @classmethod
    def encode(cls, data: bytes) -> str:
        alphabet = cls.ALPHABET
        out: list[str] = []
        full = len(data) - len(data) % 3

        for i in range(0, full, 3):
            b0, b1, b2 = data[i], data[i + 1], data[i + 2]
            out.append(alphabet[b0 >> 2])
            out.append(alphabet[((b0 & 0x03) << 4) | (b1 >> 4)])
            out.append(alphabet[((b1 & 0x0F) << 2) | (b2 >> 6)])
            out.append(alphabet[b2 & 0x3F])

        rest = len(data) - full
        if rest == 1:
            b0 = data[full]
            out.append(alphabet[b0 >> 2])
            out.append(alphabet[(b0 & 0x03) << 4])
        elif rest == 2:
            b0, b1 = data[full], data[full + 1]
            out.append(alphabet[b0 >> 2])
            out.append(alphabet[((b0 & 0x03) << 4) | (b1 >> 4)])
            out.append(alphabet[(b1 & 0x0F) << 2])

        return "".join(out)

    @classmethod
    def decode(cls, text: str) -> bytes:
        if len(text) % 4 == 1:
            raise FormatError("invalid sortable base64 string length")

        values = [cls._decode_char(c) for c in text]
        out = bytearray()
        full = len(values) - len(values) % 4

        for i in range(0, full, 4):
            c0, c1, c2, c3 = values[i:i + 4]
            out.append((c0 << 2) | (c1 >> 4))
            out.append(((c1 & 0x0F) << 4) | (c2 >> 2))
            out.append(((c2 & 0x03) << 6) | c3)

        rest = values[full:]
        if len(rest) == 2:
            c0, c1 = rest
            if c1 & 0x0F:
                raise FormatError("non-zero padding bits in sortable base64")
            out.append((c0 << 2) | (c1 >> 4))
        elif len(rest) == 3:
            c0, c1, c2 = rest
            if c2 & 0x03:
                raise FormatError("non-zero padding bits in sortable base64")
            out.append((c0 << 2) | (c1 >> 4))
            out.append(((c1 & 0x0F) << 4) | (c2 >> 2))

        return bytes(out)

    @classmethod
    def _decode_char(cls, char: str) -> int:
        value = cls.DECODE_TABLE.get(char)
        if value is None:
            raise FormatError(f"invalid character in sortable base64: {char!r}")
        return value
