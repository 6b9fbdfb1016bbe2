from typing import NamedTuple

from fracindex.core.codec.binary import ByteCodec
from fracindex.core.errors import BoundsError, FormatError
from fracindex.core.generator.minor import (
    INVALID_BOUNDS_MESSAGE,
    Direction,
    boundary_pressure,
    minimal_between_size,
    step,
    step_size,
)


MAJOR_PENALTY_CAP = 2 ** 31 - 1


class Anchor(NamedTuple):
    """A (major, minor) pair, either an existing key or a candidate for one."""
    major: int
    minor: bytes


class CandidateScore(NamedTuple):
    """Lower is better; fields are compared in order."""
    projected_length: int
    encoded_length: int
    major_penalty: int
    pressure: int


def has_non_adjacent_major_gap(left_major: int, right_major: int) -> bool:
    return left_major < right_major - 1


def midpoint_major(left_major: int, right_major: int) -> int:
    """
    Average of two majors, rounded toward zero.

    Same-sign operands take the offset form, mixed-sign operands the
    plain sum, so the intermediate value stays inside the major range.
    """
    if left_major >= right_major:
        raise BoundsError(INVALID_BOUNDS_MESSAGE)

    if (left_major < 0) == (right_major < 0):
        return left_major + (right_major - left_major) // 2

    total = left_major + right_major
    half = abs(total) // 2
    return half if total >= 0 else -half


def major_distance_penalty(major: int) -> int:
    return min(abs(major), MAJOR_PENALTY_CAP)


def estimate_between_length(left: Anchor, right: Anchor) -> int:
    """Encoded length of the shortest key a minimal insert between `left` and `right` would give."""
    if has_non_adjacent_major_gap(left.major, right.major):
        return ByteCodec.encoded_length(midpoint_major(left.major, right.major), 1)

    if left.major < right.major:
        lengths: list[int] = []

        if left.major != 0:
            lengths.append(ByteCodec.encoded_length(left.major, step_size(left.minor, Direction.after)))
        else:
            candidate = step(left.minor, Direction.after)
            if ByteCodec.is_encodable_minor_for_major(0, candidate):
                lengths.append(len(candidate))

        if right.major != 0:
            lengths.append(ByteCodec.encoded_length(right.major, step_size(right.minor, Direction.before)))
        else:
            candidate = step(right.minor, Direction.before)
            if ByteCodec.is_encodable_minor_for_major(0, candidate):
                lengths.append(len(candidate))

        if not lengths:
            raise FormatError(ByteCodec.INVALID_FORMAT_MESSAGE)
        return min(lengths)

    return ByteCodec.encoded_length(left.major, minimal_between_size(left.minor, right.minor))


def projected_next_length(left: Anchor, right: Anchor, candidate: Anchor) -> int:
    """
    Look one insert ahead: the worse of the next insert on either
    side of `candidate` inside (left, right).
    """
    return max(
        estimate_between_length(left, candidate),
        estimate_between_length(candidate, right),
    )


def candidate_score(left: Anchor, right: Anchor, candidate: Anchor) -> CandidateScore:
    return CandidateScore(
        projected_length=projected_next_length(left, right, candidate),
        encoded_length=ByteCodec.encoded_length(candidate.major, len(candidate.minor)),
        major_penalty=major_distance_penalty(candidate.major),
        pressure=boundary_pressure(candidate.minor),
    )


def prefer_first(left: Anchor, right: Anchor, first: Anchor, second: Anchor) -> bool:
    """Whether `first` scores no worse than `second` as a key inside (left, right)."""
    return candidate_score(left, right, first) <= candidate_score(left, right, second)
