import argparse

from fracindex.core.codec.transport import KeyEncoding
from fracindex.core.errors import FormatError
from fracindex.core.models.index import FractionalIndex


MAX_COUNT = 10_000


class ParseError(ValueError):
    pass


def parse_key(text: str, encoding: KeyEncoding) -> FractionalIndex:
    """Decode a key typed by the user in the given encoding."""
    try:
        return FractionalIndex.parse(text.strip(), encoding)
    except FormatError as ex:
        raise ParseError(f"invalid {encoding} key {text!r}: {ex}") from ex


def positive_count(text: str) -> int:
    """argparse type for -n/--count."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None

    if not 1 <= value <= MAX_COUNT:
        raise argparse.ArgumentTypeError(f"count must be between 1 and {MAX_COUNT}")
    return value
