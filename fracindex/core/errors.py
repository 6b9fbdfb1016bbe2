class FractionalIndexError(ValueError):
    """Base class for every error raised by fracindex."""


class FormatError(FractionalIndexError):
    """
    Raised when bytes or text cannot be decoded into a canonical
    fractional index (missing terminator, tier violation, bad character,
    wrong length, non-zero padding bits).
    """


class BoundsError(FractionalIndexError):
    """Raised when `between` receives equal or misordered bounds."""


class MajorOverflowError(FractionalIndexError):
    """
    Raised when `before`/`after` is called at the representable major
    boundary and no same-major step exists.
    """
