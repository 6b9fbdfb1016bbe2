import logging
import random

import pytest

from fracindex.core.codec.binary import ByteCodec
from fracindex.core.errors import BoundsError
from fracindex.core.generator.generator import FractionalIndexGenerator as Gen
from fracindex.core.generator.minor import BetweenStrategy
from fracindex.core.models.index import FractionalIndex


def k(text: str) -> FractionalIndex:
    return FractionalIndex.decode_hex(text)


def build_sequential_list(size: int) -> list[FractionalIndex]:
    keys = [FractionalIndex.default()]
    while len(keys) < size:
        keys.append(Gen.after(keys[-1]))
    return keys


def insert_at(keys: list[FractionalIndex], position: int) -> FractionalIndex:
    if position == 0:
        return Gen.before(keys[0])
    if position == len(keys):
        return Gen.after(keys[-1])
    return Gen.between(keys[position - 1], keys[position])


def assert_strictly_sorted(keys: list[FractionalIndex]) -> None:
    for low, high in zip(keys, keys[1:]):
        assert low < high, f"{low!r} must sort before {high!r}"


@pytest.mark.ut
def test_edge_vectors():
    root = FractionalIndex.default()

    assert Gen.after(root).to_hex() == "8180"
    assert Gen.after(Gen.after(root)).to_hex() == "8280"
    assert Gen.before(root).to_hex() == "7f80"
    assert Gen.before(Gen.before(root)).to_hex() == "7e80"


@pytest.mark.ut
@pytest.mark.parametrize("left,right,expected", [
    ("6480", "7780", "6d80"),
    ("6c80", "6d80", "6c8180"),
    ("646480", "646880", "646680"),
    ("7f8080", "8080", "7f8180"),
    ("7f8180", "80", "7f8280"),
    ("7f80", "80", "7f8180"),
    ("6480", "649080", "64907f80"),
    ("647a80", "6480", "647a8180"),
    ("647a80", "648080", "647d80"),
    ("80", "80c080", "8080"),
])
def test_between_minimal_vectors(left, right, expected):
    assert Gen.between(k(left), k(right), BetweenStrategy.minimal).to_hex() == expected
    assert Gen.between(k(right), k(left), "minimal").to_hex() == expected


@pytest.mark.ut
def test_between_spread_vectors():
    # a free midpoint byte is taken as-is by both strategies
    assert Gen.between(k("6480"), k("7780")).to_hex() == "6d80"
    # adjacent bytes: spread extends toward the middle of the free range
    assert Gen.between(k("6c80"), k("6d80")).to_hex() == "6cbf80"
    # next to the default minor, minimal is forced
    assert Gen.between(k("80"), k("8180")).to_hex() == "817f80"


@pytest.mark.ut
def test_edge_insert_promotes_to_the_next_major():
    assert Gen.after(k("bf80")).to_hex() == "c080"
    assert Gen.after(k("c080")).to_hex() == "c180"
    assert Gen.before(k("4080")).to_hex() == "3f80"
    assert Gen.before(k("3f80")).to_hex() == "3e80"


@pytest.mark.ut
def test_edge_insert_promotion_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="fracindex.core.generator")

    Gen.after(k("c080"))

    assert any("promote" in record.getMessage() for record in caplog.records)


@pytest.mark.ut
def test_edge_insert_at_the_major_boundaries_stays_on_the_major():
    highest = FractionalIndex.from_major_minor(ByteCodec.MAX_MAJOR, b"\x80")
    lowest = FractionalIndex.from_major_minor(ByteCodec.MIN_MAJOR, b"\x80")

    after = Gen.after(highest)
    before = Gen.before(lowest)

    assert after.major == ByteCodec.MAX_MAJOR
    assert after > highest
    assert before.major == ByteCodec.MIN_MAJOR
    assert before < lowest


@pytest.mark.ut
@pytest.mark.parametrize("left_major,right_major,expected_major", [
    (1, 10, 5),
    (-10, -1, -6),
    (-5, 5, 0),
    (ByteCodec.MIN_MAJOR, ByteCodec.MAX_MAJOR, 0),
])
def test_between_distant_majors_takes_the_midpoint(left_major, right_major, expected_major):
    left = FractionalIndex.from_major_minor(left_major, b"\x10\x80")
    right = FractionalIndex.from_major_minor(right_major, b"\xf0\x80")

    result = Gen.between(left, right)

    assert result.major == expected_major
    assert result.minor == b"\x80"
    assert left < result < right


@pytest.mark.ut
def test_between_adjacent_majors():
    # the left side cannot step without leaving the compact range
    result = Gen.between(k("bf80"), k("c080"))

    assert result.major == 1
    assert result.to_hex() == "c04080"
    assert k("bf80") < result < k("c080")


@pytest.mark.ut
@pytest.mark.parametrize("strategy", list(BetweenStrategy))
def test_between_adjacent_majors_is_strict(strategy):
    pairs = [
        ("7f80", "3f80"),
        ("bf80", "c0ff80"),
        ("3f8080", "4080"),
        ("e8ff80", "e90080"),
        ("16ff7f80", "178080"),
    ]
    for a, b in pairs:
        low, high = sorted([k(a), k(b)])
        result = Gen.between(low, high, strategy)
        assert low < result < high


@pytest.mark.ut
def test_between_equal_bounds_fails():
    key = k("8180")
    with pytest.raises(BoundsError, match="bounds must be distinct"):
        Gen.between(key, k("8180"))


@pytest.mark.ut
def test_between_rejects_unknown_strategy():
    with pytest.raises(ValueError):
        Gen.between(k("80"), k("8180"), "wide")


@pytest.mark.ut
@pytest.mark.parametrize("seed", [1, 7, 19, 43])
def test_random_inserts_keep_keys_strictly_ordered(seed):
    rng = random.Random(seed)
    keys = build_sequential_list(16)

    for _ in range(600):
        position = rng.randrange(len(keys) + 1)
        generated = insert_at(keys, position)
        keys.insert(position, generated)

        assert generated.raw_bytes()[-1] == ByteCodec.TERMINATOR
        assert FractionalIndex.decode_bytes(generated.raw_bytes()) == generated

    assert_strictly_sorted(keys)


@pytest.mark.ut
@pytest.mark.parametrize("strategy", list(BetweenStrategy))
def test_between_is_order_independent(strategy):
    rng = random.Random(11)
    keys = build_sequential_list(8)
    for _ in range(300):
        position = rng.randrange(len(keys) + 1)
        keys.insert(position, insert_at(keys, position))

    for _ in range(300):
        a, b = rng.sample(keys, 2)
        low, high = sorted([a, b])
        result = Gen.between(a, b, strategy)

        assert result == Gen.between(b, a, strategy)
        assert low < result < high


@pytest.mark.ut
def test_before_and_after_bracket_every_key(sequential_keys):
    rng = random.Random(5)
    keys = list(sequential_keys)
    for _ in range(300):
        position = rng.randrange(len(keys) + 1)
        keys.insert(position, insert_at(keys, position))

    extremes = [
        FractionalIndex.from_major_minor(major, b"\x80")
        for major in (-70000, -4138, -42, -1, 1, 41, 42, 4137, 4138, 70000)
    ]
    for key in keys + extremes:
        before, after = Gen.before(key), Gen.after(key)
        assert before < key < after
        assert before.raw_bytes()[-1] == ByteCodec.TERMINATOR
        assert after.raw_bytes()[-1] == ByteCodec.TERMINATOR


@pytest.mark.ut
def test_operations_never_modify_their_inputs():
    rng = random.Random(23)
    keys = build_sequential_list(32)

    for _ in range(2000):
        snapshot = [key.raw_bytes() for key in keys]

        if rng.random() < 0.5:
            position = rng.randrange(len(keys) + 1)
            generated = insert_at(keys, position)
        else:
            source = keys.pop(rng.randrange(len(keys)))
            snapshot.remove(source.raw_bytes())
            position = rng.randrange(len(keys) + 1)
            generated = insert_at(keys, position)

        assert [key.raw_bytes() for key in keys] == snapshot
        keys.insert(position, generated)

    assert_strictly_sorted(keys)


@pytest.mark.ut
def test_operations_are_deterministic():
    a, b = k("6c80"), k("6d80")
    assert Gen.between(a, b) == Gen.between(a, b)
    assert Gen.after(a) == Gen.after(a)
    assert Gen.before(b) == Gen.before(b)


def edge_growth(step, checkpoints: list[int]) -> dict[int, int]:
    results = {}
    current = FractionalIndex.default()
    for i in range(1, max(checkpoints) + 1):
        current = step(current)
        if i in checkpoints:
            results[i] = len(current)
    return results


@pytest.mark.ut
@pytest.mark.parametrize("step", [Gen.after, Gen.before])
def test_edge_growth_is_bounded_until_the_long_tier(step):
    lengths = edge_growth(step, [100, 1_000, 4_000, 4_500])

    assert lengths[100] <= 2
    assert lengths[1_000] <= 3
    assert lengths[4_000] <= 3
    assert lengths[4_500] > 3


@pytest.mark.ut
def test_root_anchored_growth():
    checkpoints = {300: 5, 3_000: 26, 10_000: 81}
    start = FractionalIndex.default()
    end = Gen.after(start)

    for i in range(1, max(checkpoints) + 1):
        end = Gen.between(start, end)
        if i in checkpoints:
            assert len(end) <= checkpoints[i], f"step {i}: {len(end)} bytes"


@pytest.mark.ut
def test_adjacent_pair_growth():
    checkpoints = {300: 47, 3_000: 432, 10_000: 1432}
    start = FractionalIndex.default()
    end = Gen.after(start)

    for i in range(1, max(checkpoints) + 1):
        start = Gen.between(start, end)
        end = Gen.between(start, end)
        if i in checkpoints:
            assert len(start) <= checkpoints[i], f"step {i}: {len(start)} bytes"
