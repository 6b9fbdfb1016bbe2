from fracindex.core.errors import FormatError


class ByteCodec:
    """
    Canonical binary layout of a fractional index.

    A key is the pair (major, minor) flattened into one byte string:

        raw = tag || [group byte | magnitude payload] || minor

    The tag selects a tier:

        0x00..0x06  negative long    payload = ~magnitude, (8 - tag) bytes
        0x07..0x16  negative medium  1 extra byte, |major| in 42..4137
        0x17..0x3F  negative short   |major| = 64 - tag, 1..41
        0x40..0xBF  compact          major = 0, raw is the minor itself
        0xC0..0xE8  positive short   major = tag - 0xBF, 1..41
        0xE9..0xF8  positive medium  1 extra byte, major in 42..4137
        0xF9..0xFF  positive long    payload = magnitude, (tag - 0xF7) bytes

    Tags increase with the numeric value of major, so comparing encoded
    keys as unsigned bytes compares (major, minor). Every minor ends with
    TERMINATOR, and only one byte string is accepted for a given pair.
    """
    TERMINATOR: int = 0x80
    BYTE_MAX: int = 0xFF

    MIN_MAJOR: int = -(2 ** 63) + 1
    MAX_MAJOR: int = 2 ** 63 - 1

    SHORT_MAJOR_MAX: int = 41
    MEDIUM_MAJOR_MAX: int = 4137
    MEDIUM_GROUP_SIZE: int = 256
    LONG_PAYLOAD_MIN: int = 2
    LONG_PAYLOAD_MAX: int = 8

    NEGATIVE_LONG_MAX_TAG: int = 0x06
    NEGATIVE_MEDIUM_MIN_TAG: int = 0x07
    NEGATIVE_MEDIUM_MAX_TAG: int = 0x16
    NEGATIVE_SHORT_MIN_TAG: int = 0x17
    NEGATIVE_SHORT_MAX_TAG: int = 0x3F
    COMPACT_FIRST_MIN: int = 0x40
    COMPACT_FIRST_MAX: int = 0xBF
    POSITIVE_SHORT_MIN_TAG: int = 0xC0
    POSITIVE_SHORT_MAX_TAG: int = 0xE8
    POSITIVE_MEDIUM_MIN_TAG: int = 0xE9
    POSITIVE_MEDIUM_MAX_TAG: int = 0xF8
    POSITIVE_LONG_MIN_TAG: int = 0xF9

    INVALID_FORMAT_MESSAGE: str = "invalid fractional index format"

    @classmethod
    def encode(cls, major: int, minor: bytes) -> bytes:
        if not minor or minor[-1] != cls.TERMINATOR:
            raise FormatError(cls.INVALID_FORMAT_MESSAGE)
        if not cls.MIN_MAJOR <= major <= cls.MAX_MAJOR:
            raise FormatError(f"major out of range: {major}")

        if major == 0:
            if not cls.is_compact_minor(minor):
                raise FormatError(cls.INVALID_FORMAT_MESSAGE)
            return bytes(minor)

        return cls._encode_major(major) + minor

    @classmethod
    def decode(cls, raw: bytes) -> tuple[int, bytes]:
        """
        Split a raw key into (major, minor).

        Raises FormatError for empty input, a missing terminator,
        truncated payloads and any non-canonical tier usage.
        """
        if not raw:
            raise FormatError("fractional index must not be empty")
        if raw[-1] != cls.TERMINATOR:
            raise FormatError(
                f"fractional index must end with terminator {cls.TERMINATOR}: "
                f"FractionalIndex({list(raw)})"
            )

        tag = raw[0]
        if cls.COMPACT_FIRST_MIN <= tag <= cls.COMPACT_FIRST_MAX:
            return 0, bytes(raw)

        if tag <= cls.NEGATIVE_SHORT_MAX_TAG:
            major, offset = cls._decode_negative(raw)
        else:
            major, offset = cls._decode_positive(raw)

        minor = bytes(raw[offset:])
        if not minor:
            raise FormatError(cls.INVALID_FORMAT_MESSAGE)
        return major, minor

    @classmethod
    def encoded_length(cls, major: int, minor_size: int) -> int:
        """Byte length `encode(major, minor)` would produce for a minor of `minor_size` bytes."""
        if major == 0:
            return minor_size

        magnitude = abs(major)
        if magnitude <= cls.SHORT_MAJOR_MAX:
            return 1 + minor_size
        if magnitude <= cls.MEDIUM_MAJOR_MAX:
            return 2 + minor_size
        return 1 + cls._payload_length(magnitude) + minor_size

    @classmethod
    def is_encodable_minor_for_major(cls, major: int, minor: bytes) -> bool:
        if not minor or minor[-1] != cls.TERMINATOR:
            return False
        if major != 0:
            return True
        return cls.is_compact_minor(minor)

    @classmethod
    def is_compact_minor(cls, minor: bytes) -> bool:
        return (
            len(minor) > 0 and
            minor[-1] == cls.TERMINATOR and
            cls.COMPACT_FIRST_MIN <= minor[0] <= cls.COMPACT_FIRST_MAX
        )

    @classmethod
    def _encode_major(cls, major: int) -> bytes:
        magnitude = abs(major)

        if magnitude <= cls.SHORT_MAJOR_MAX:
            if major > 0:
                return bytes([cls.POSITIVE_SHORT_MIN_TAG + magnitude - 1])
            return bytes([cls.NEGATIVE_SHORT_MAX_TAG + 1 - magnitude])

        if magnitude <= cls.MEDIUM_MAJOR_MAX:
            group, remainder = divmod(magnitude - (cls.SHORT_MAJOR_MAX + 1), cls.MEDIUM_GROUP_SIZE)
            if major > 0:
                return bytes([cls.POSITIVE_MEDIUM_MIN_TAG + group, remainder])
            return bytes([cls.NEGATIVE_MEDIUM_MAX_TAG - group, cls.BYTE_MAX - remainder])

        length = cls._payload_length(magnitude)
        payload = magnitude.to_bytes(length, "big")
        if major > 0:
            return bytes([cls.POSITIVE_LONG_MIN_TAG + length - cls.LONG_PAYLOAD_MIN]) + payload
        return bytes([cls.LONG_PAYLOAD_MAX - length]) + cls._complement(payload)

    @classmethod
    def _decode_negative(cls, raw: bytes) -> tuple[int, int]:
        tag = raw[0]

        if tag >= cls.NEGATIVE_SHORT_MIN_TAG:
            return -(cls.NEGATIVE_SHORT_MAX_TAG + 1 - tag), 1

        if tag >= cls.NEGATIVE_MEDIUM_MIN_TAG:
            if len(raw) < 3:
                raise FormatError(cls.INVALID_FORMAT_MESSAGE)
            group = cls.NEGATIVE_MEDIUM_MAX_TAG - tag
            remainder = cls.BYTE_MAX - raw[1]
            magnitude = cls._medium_magnitude(group, remainder)
            return -magnitude, 2

        length = cls.LONG_PAYLOAD_MAX - tag
        payload = cls._long_payload(raw, length)
        magnitude = cls._long_magnitude(cls._complement(payload))
        return -magnitude, 1 + length

    @classmethod
    def _decode_positive(cls, raw: bytes) -> tuple[int, int]:
        tag = raw[0]

        if tag <= cls.POSITIVE_SHORT_MAX_TAG:
            return tag - cls.POSITIVE_SHORT_MIN_TAG + 1, 1

        if tag <= cls.POSITIVE_MEDIUM_MAX_TAG:
            if len(raw) < 3:
                raise FormatError(cls.INVALID_FORMAT_MESSAGE)
            group = tag - cls.POSITIVE_MEDIUM_MIN_TAG
            return cls._medium_magnitude(group, raw[1]), 2

        length = tag - cls.POSITIVE_LONG_MIN_TAG + cls.LONG_PAYLOAD_MIN
        payload = cls._long_payload(raw, length)
        return cls._long_magnitude(payload), 1 + length

    @classmethod
    def _medium_magnitude(cls, group: int, remainder: int) -> int:
        magnitude = cls.SHORT_MAJOR_MAX + 1 + group * cls.MEDIUM_GROUP_SIZE + remainder
        if not cls.SHORT_MAJOR_MAX < magnitude <= cls.MEDIUM_MAJOR_MAX:
            raise FormatError(cls.INVALID_FORMAT_MESSAGE)
        return magnitude

    @classmethod
    def _long_payload(cls, raw: bytes, length: int) -> bytes:
        # the minor after the payload holds at least the terminator
        if len(raw) <= 1 + length:
            raise FormatError(cls.INVALID_FORMAT_MESSAGE)
        return bytes(raw[1:1 + length])

    @classmethod
    def _long_magnitude(cls, payload: bytes) -> int:
        if payload[0] == 0:
            # a shorter payload holds the same value
            raise FormatError(cls.INVALID_FORMAT_MESSAGE)
        magnitude = int.from_bytes(payload, "big")
        if not cls.MEDIUM_MAJOR_MAX < magnitude <= cls.MAX_MAJOR:
            raise FormatError(cls.INVALID_FORMAT_MESSAGE)
        return magnitude

    @staticmethod
    def _payload_length(magnitude: int) -> int:
        return (magnitude.bit_length() + 7) // 8

    @staticmethod
    def _complement(payload: bytes) -> bytes:
        return bytes(b ^ 0xFF for b in payload)
