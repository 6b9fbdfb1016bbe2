import logging

from fracindex.core.codec.binary import ByteCodec
from fracindex.core.errors import BoundsError, MajorOverflowError, FormatError
from fracindex.core.generator.minor import (
    DEFAULT_MINOR,
    INVALID_BOUNDS_MESSAGE,
    TERMINATOR,
    BetweenStrategy,
    Direction,
    boundary_pressure,
    candidate_pressure,
    common_prefix_length,
    midpoint_or_none,
    minimal_between,
    resolve_length_boundary,
    should_fallback_to_minimal,
    splice,
    step,
)
from fracindex.core.generator.scoring import (
    Anchor,
    has_non_adjacent_major_gap,
    midpoint_major,
    prefer_first,
    projected_next_length,
)
from fracindex.core.models.index import FractionalIndex


class FractionalIndexGenerator:
    """
    Mints new keys before, after, or between existing keys.

    Every operation is pure: arguments are never modified and equal
    inputs give equal outputs. Growth is kept in check in two ways:

        - edge inserts promote to the next major once the same-major
          minor would no longer be shorter
        - inserts between keys score their candidates, looking one
          insert ahead, and keep the one that will grow the least
    """
    DISTINCT_BOUNDS_MESSAGE: str = "bounds must be distinct"

    # Both first minor bytes at least this far from the terminator mark a
    # tight gap, where the zero-major side is not preferred anymore.
    TIGHT_GAP_PRESSURE_THRESHOLD: int = 24

    # Pressure the spread variant must gain over the minimal one to be kept
    # when both tie on length.
    SPREAD_PRESSURE_GAIN_THRESHOLD: int = 32

    _logger = logging.getLogger("fracindex.core.generator")

    @classmethod
    def before(cls, index: FractionalIndex) -> FractionalIndex:
        """Key sorting strictly before `index`."""
        return cls._edge_insert(index, Direction.before)

    @classmethod
    def after(cls, index: FractionalIndex) -> FractionalIndex:
        """Key sorting strictly after `index`."""
        return cls._edge_insert(index, Direction.after)

    @classmethod
    def between(
        cls,
        first: FractionalIndex,
        second: FractionalIndex,
        strategy: BetweenStrategy = BetweenStrategy.spread,
    ) -> FractionalIndex:
        """
        Key sorting strictly between `first` and `second`, in either order.

        Raises BoundsError when both keys are equal.
        """
        if first == second:
            raise BoundsError(cls.DISTINCT_BOUNDS_MESSAGE)

        strategy = BetweenStrategy(strategy)
        left, right = (first, second) if first < second else (second, first)

        if has_non_adjacent_major_gap(left.major, right.major):
            major = midpoint_major(left.major, right.major)
            return FractionalIndex.from_major_minor(major, DEFAULT_MINOR)

        if left.major < right.major:
            return cls._between_adjacent_majors(left, right, strategy)

        minimal = minimal_between(left.minor, right.minor)
        if strategy is BetweenStrategy.minimal or should_fallback_to_minimal(left.minor, right.minor):
            return FractionalIndex.from_major_minor(left.major, minimal)

        spread = cls._spread_between(left.major, left.minor, right.minor)
        minor = minimal if len(minimal) < len(spread) else spread
        return FractionalIndex.from_major_minor(left.major, minor)

    @classmethod
    def _edge_insert(cls, index: FractionalIndex, direction: Direction) -> FractionalIndex:
        candidate = step(index.minor, direction)

        if direction is Direction.before:
            boundary, delta, message = ByteCodec.MIN_MAJOR, -1, "major underflow"
        else:
            boundary, delta, message = ByteCodec.MAX_MAJOR, 1, "major overflow"

        if index.major == boundary:
            if not ByteCodec.is_encodable_minor_for_major(index.major, candidate):
                raise MajorOverflowError(message)
            return FractionalIndex.from_major_minor(index.major, candidate)

        fallback_major = index.major + delta
        if not ByteCodec.is_compact_minor(candidate):
            cls._logger.debug(f"{direction} {index!r}: minor left compact range, promote to major {fallback_major}")
            return FractionalIndex.from_major_minor(fallback_major, DEFAULT_MINOR)

        same_length = ByteCodec.encoded_length(index.major, len(candidate))
        fallback_length = ByteCodec.encoded_length(fallback_major, len(DEFAULT_MINOR))
        if same_length <= fallback_length:
            return FractionalIndex.from_major_minor(index.major, candidate)

        cls._logger.debug(f"{direction} {index!r}: major {fallback_major} is shorter, promote")
        return FractionalIndex.from_major_minor(fallback_major, DEFAULT_MINOR)

    @classmethod
    def _spread_between(cls, major: int, left: bytes, right: bytes) -> bytes:
        n = min(len(left), len(right))
        i = common_prefix_length(left, right, n)

        if i < n:
            left_byte, right_byte = left[i], right[i]

            midpoint = midpoint_or_none(left, i, left_byte, right_byte)
            if midpoint is not None:
                return midpoint

            if left_byte > right_byte:
                raise BoundsError(INVALID_BOUNDS_MESSAGE)

            # adjacent bytes: extend either side past the pivot
            left_candidate = None
            if i + 1 < len(left):
                left_candidate = splice(left, i + 1, Direction.after, BetweenStrategy.spread)
            right_candidate = None
            if i + 1 < len(right):
                right_candidate = splice(right, i + 1, Direction.before, BetweenStrategy.spread)

            chosen = cls._choose_spread_candidate(major, left, right, i, left_candidate, right_candidate)
            if chosen is not None:
                return chosen

        return resolve_length_boundary(left, right, n, BetweenStrategy.spread)

    @classmethod
    def _choose_spread_candidate(
        cls,
        major: int,
        left: bytes,
        right: bytes,
        pivot: int,
        left_candidate: bytes | None,
        right_candidate: bytes | None,
    ) -> bytes | None:
        if left_candidate is None:
            return right_candidate
        if right_candidate is None:
            return left_candidate

        if len(left_candidate) != len(right_candidate):
            return left_candidate if len(left_candidate) < len(right_candidate) else right_candidate

        left_pressure = candidate_pressure(left_candidate, pivot)
        right_pressure = candidate_pressure(right_candidate, pivot)
        if left_pressure != right_pressure:
            return left_candidate if left_pressure < right_pressure else right_candidate

        left_tail = len(left) - (pivot + 1)
        right_tail = len(right) - (pivot + 1)
        if left_tail != right_tail:
            return left_candidate if left_tail < right_tail else right_candidate

        keep_left = prefer_first(
            Anchor(major, left),
            Anchor(major, right),
            Anchor(major, left_candidate),
            Anchor(major, right_candidate),
        )
        return left_candidate if keep_left else right_candidate

    @classmethod
    def _between_adjacent_majors(
        cls,
        left: FractionalIndex,
        right: FractionalIndex,
        strategy: BetweenStrategy,
    ) -> FractionalIndex:
        left_anchor = Anchor(left.major, left.minor)
        right_anchor = Anchor(right.major, right.minor)

        left_minor = cls._adjacent_candidate(left_anchor, right_anchor, left_anchor, Direction.after, strategy)
        right_minor = cls._adjacent_candidate(left_anchor, right_anchor, right_anchor, Direction.before, strategy)

        left_available = ByteCodec.is_encodable_minor_for_major(left.major, left_minor)
        right_available = ByteCodec.is_encodable_minor_for_major(right.major, right_minor)

        if left_available and right_available:
            choose_left = cls._choose_adjacent_side(left_anchor, right_anchor, left_minor, right_minor)
            cls._logger.debug(
                f"between majors {left.major} and {right.major}: "
                f"keep {'left' if choose_left else 'right'} side"
            )
        elif left_available or right_available:
            choose_left = left_available
        else:
            raise FormatError(ByteCodec.INVALID_FORMAT_MESSAGE)

        if choose_left:
            return FractionalIndex.from_major_minor(left.major, left_minor)
        return FractionalIndex.from_major_minor(right.major, right_minor)

    @classmethod
    def _adjacent_candidate(
        cls,
        left: Anchor,
        right: Anchor,
        anchor: Anchor,
        direction: Direction,
        strategy: BetweenStrategy,
    ) -> bytes:
        minimal = step(anchor.minor, direction)
        if strategy is BetweenStrategy.minimal:
            return minimal
        if not ByteCodec.is_encodable_minor_for_major(anchor.major, minimal):
            return minimal

        spread = splice(anchor.minor, 0, direction, BetweenStrategy.spread)
        if not ByteCodec.is_encodable_minor_for_major(anchor.major, spread):
            return minimal

        return cls._select_adjacent_variant(left, right, anchor.major, minimal, spread)

    @classmethod
    def _select_adjacent_variant(
        cls,
        left: Anchor,
        right: Anchor,
        major: int,
        minimal: bytes,
        spread: bytes,
    ) -> bytes:
        minimal_projected = projected_next_length(left, right, Anchor(major, minimal))
        spread_projected = projected_next_length(left, right, Anchor(major, spread))
        if spread_projected != minimal_projected:
            return spread if spread_projected < minimal_projected else minimal

        minimal_length = ByteCodec.encoded_length(major, len(minimal))
        spread_length = ByteCodec.encoded_length(major, len(spread))
        if spread_length != minimal_length:
            return spread if spread_length < minimal_length else minimal

        if len(spread) != len(minimal):
            return spread if len(spread) < len(minimal) else minimal

        gain = boundary_pressure(spread) - boundary_pressure(minimal)
        return spread if gain >= cls.SPREAD_PRESSURE_GAIN_THRESHOLD else minimal

    @classmethod
    def _choose_adjacent_side(
        cls,
        left: Anchor,
        right: Anchor,
        left_minor: bytes,
        right_minor: bytes,
    ) -> bool:
        """
        True to keep the candidate on the left key's major.

        Criteria, first decisive one wins:
            1. the zero-major side, unless the gap is tight or it overshoots
            2. smaller candidate encoded length
            3. smaller current key encoded length
            4. smaller candidate minor
            5. current minor closer to the terminator
            6. better candidate score (look-ahead first)
        """
        if (left.major == 0) != (right.major == 0):
            zero_on_left = left.major == 0
            zero, other = (left, right) if zero_on_left else (right, left)
            zero_minor, other_minor = (left_minor, right_minor) if zero_on_left else (right_minor, left_minor)

            tight = (
                abs(zero.minor[0] - TERMINATOR) >= cls.TIGHT_GAP_PRESSURE_THRESHOLD and
                abs(other.minor[0] - TERMINATOR) >= cls.TIGHT_GAP_PRESSURE_THRESHOLD
            )
            keep_zero = (
                not tight and
                len(zero_minor) <= len(other_minor) + 1 and
                len(zero.minor) <= len(other.minor) + 2
            )
            if keep_zero:
                return zero_on_left

        left_length = ByteCodec.encoded_length(left.major, len(left_minor))
        right_length = ByteCodec.encoded_length(right.major, len(right_minor))
        if left_length != right_length:
            return left_length < right_length

        left_current = ByteCodec.encoded_length(left.major, len(left.minor))
        right_current = ByteCodec.encoded_length(right.major, len(right.minor))
        if left_current != right_current:
            return left_current < right_current

        if len(left_minor) != len(right_minor):
            return len(left_minor) < len(right_minor)

        left_pressure = boundary_pressure(left.minor)
        right_pressure = boundary_pressure(right.minor)
        if left_pressure != right_pressure:
            return left_pressure < right_pressure

        return prefer_first(left, right, Anchor(left.major, left_minor), Anchor(right.major, right_minor))
