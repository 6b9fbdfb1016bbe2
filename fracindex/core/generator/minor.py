from enum import StrEnum

from fracindex.core.codec.binary import ByteCodec
from fracindex.core.errors import BoundsError, FormatError


TERMINATOR = ByteCodec.TERMINATOR
BYTE_MAX = ByteCodec.BYTE_MAX
DEFAULT_MINOR = bytes([TERMINATOR])

INVALID_BOUNDS_MESSAGE = "lower bound must be smaller than upper bound"


class Direction(StrEnum):
    before = "before"
    after = "after"


class BetweenStrategy(StrEnum):
    """
    How a new minor is placed inside a gap.

    - minimal: the smallest sufficient step, shortest key right now
    - spread:  bias each new byte toward the middle of its local range,
               which keeps keys shorter under repeated one-sided insertion
    """
    minimal = "minimal"
    spread = "spread"


def _step_point(source: bytes, start: int, direction: Direction) -> int:
    # bytes already at the floor (0x00) or ceiling (0xFF) have no room to move
    tail = source[start:]
    if direction is Direction.before:
        rest = tail.lstrip(b"\x00")
    else:
        rest = tail.lstrip(b"\xff")

    index = start + len(tail) - len(rest)
    if index >= len(source):
        if direction is Direction.before:
            raise FormatError("invalid fractional index: missing valid decrement point")
        raise FormatError("invalid fractional index: missing valid increment point")
    return index


def splice(
    source: bytes,
    start: int,
    direction: Direction,
    strategy: BetweenStrategy = BetweenStrategy.minimal,
) -> bytes:
    """
    Step `source` from byte `start` onward and re-terminate it.

    The walk stops at the first byte with room to move. When that byte
    lies on the far side of the terminator, the minimal strategy cuts
    the sequence there. Otherwise the byte is moved by one (minimal) or
    toward the middle of what is left of its range (spread), and the
    rest is dropped. `source[:start]` is always kept as-is.
    """
    index = _step_point(source, start, direction)
    current = source[index]

    if direction is Direction.before:
        if current > TERMINATOR:
            if strategy is BetweenStrategy.minimal:
                return source[:index] + DEFAULT_MINOR
            value = min(current - 1, TERMINATOR + (current - TERMINATOR) // 2)
        elif strategy is BetweenStrategy.minimal:
            value = current - 1
        else:
            value = min(current - 1, current // 2)
    else:
        if current < TERMINATOR:
            if strategy is BetweenStrategy.minimal:
                return source[:index] + DEFAULT_MINOR
            value = max(current + 1, current + max(1, (TERMINATOR - current) // 2))
        elif strategy is BetweenStrategy.minimal:
            value = current + 1
        else:
            value = max(current + 1, current + max(1, (BYTE_MAX - current) // 2))

    return source[:index] + bytes([value, TERMINATOR])


def splice_size(source: bytes, start: int, direction: Direction) -> int:
    """Length of `splice(source, start, direction)` under the minimal strategy."""
    index = _step_point(source, start, direction)
    current = source[index]
    if direction is Direction.before:
        crossing = current > TERMINATOR
    else:
        crossing = current < TERMINATOR
    return index + 1 if crossing else index + 2


def step(minor: bytes, direction: Direction) -> bytes:
    """Smallest same-major move of a minor before or after itself."""
    return splice(minor, 0, direction)


def step_size(minor: bytes, direction: Direction) -> int:
    return splice_size(minor, 0, direction)


def common_prefix_length(left: bytes, right: bytes, limit: int) -> int:
    """Length of the common prefix of `left` and `right`, capped at `limit`."""
    i = 0
    while i < limit and left[i] == right[i]:
        i += 1
    return i


def midpoint_or_none(left: bytes, index: int, left_byte: int, right_byte: int) -> bytes | None:
    if left_byte >= right_byte - 1:
        return None
    return left[:index] + bytes([left_byte + (right_byte - left_byte) // 2, TERMINATOR])


def resolve_length_boundary(
    left: bytes,
    right: bytes,
    split: int,
    strategy: BetweenStrategy,
) -> bytes:
    """
    Handle bounds where one minor runs out before they differ.

    The longer side is stepped toward the shorter one from `split` on.
    """
    if len(left) < len(right):
        if right[split - 1] < TERMINATOR:
            raise BoundsError(INVALID_BOUNDS_MESSAGE)
        return splice(right, split, Direction.before, strategy)

    if len(left) > len(right):
        if left[split - 1] >= TERMINATOR:
            raise BoundsError(INVALID_BOUNDS_MESSAGE)
        return splice(left, split, Direction.after, strategy)

    raise BoundsError(INVALID_BOUNDS_MESSAGE)


def _resolve_length_boundary_size(left: bytes, right: bytes, split: int) -> int:
    if len(left) < len(right):
        if right[split - 1] < TERMINATOR:
            raise BoundsError(INVALID_BOUNDS_MESSAGE)
        return splice_size(right, split, Direction.before)

    if len(left) > len(right):
        if left[split - 1] >= TERMINATOR:
            raise BoundsError(INVALID_BOUNDS_MESSAGE)
        return splice_size(left, split, Direction.after)

    raise BoundsError(INVALID_BOUNDS_MESSAGE)


def minimal_between(left: bytes, right: bytes) -> bytes:
    """Shortest minor strictly between two minors of the same major, `left < right`."""
    shorter = min(len(left), len(right)) - 1
    i = common_prefix_length(left, right, shorter)

    if i < shorter:
        left_byte, right_byte = left[i], right[i]
        midpoint = midpoint_or_none(left, i, left_byte, right_byte)
        if midpoint is not None:
            return midpoint
        if left_byte == right_byte - 1:
            return splice(left, i + 1, Direction.after)
        raise BoundsError(INVALID_BOUNDS_MESSAGE)

    return resolve_length_boundary(left, right, shorter + 1, BetweenStrategy.minimal)


def minimal_between_size(left: bytes, right: bytes) -> int:
    shorter = min(len(left), len(right)) - 1
    i = common_prefix_length(left, right, shorter)

    if i < shorter:
        left_byte, right_byte = left[i], right[i]
        if left_byte < right_byte - 1:
            return i + 2
        if left_byte == right_byte - 1:
            return splice_size(left, i + 1, Direction.after)
        raise BoundsError(INVALID_BOUNDS_MESSAGE)

    return _resolve_length_boundary_size(left, right, shorter + 1)


def should_fallback_to_minimal(left: bytes, right: bytes) -> bool:
    """
    True for the gaps right next to the default minor, [0x80]..[0x81, ...]
    and [0x7F, ...]..[0x80]. Repeated one-sided inserts there grow faster
    with spread than with minimal.
    """
    if left == DEFAULT_MINOR:
        return len(right) > 0 and right[0] == TERMINATOR + 1
    if right == DEFAULT_MINOR:
        return len(left) > 0 and left[0] == TERMINATOR - 1
    return False


def boundary_pressure(minor: bytes) -> int:
    """Distance of the first minor byte from the terminator value."""
    return abs(minor[0] - TERMINATOR)


def candidate_pressure(candidate: bytes, pivot: int) -> int:
    last_digit = max(len(candidate) - 2, 0)
    index = min(max(pivot + 1, 0), last_digit)
    return abs(candidate[index] - TERMINATOR)
