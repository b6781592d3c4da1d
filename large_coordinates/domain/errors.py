# large_coordinates/domain/errors.py
"""Exceptions raised when a large-coordinate contract is violated."""


class LargeCoordinateError(ValueError):
    """Base class for all large-coordinate contract violations."""


class CoordinateRangeError(LargeCoordinateError):
    """An absolute coordinate or cell index lies outside the supported range."""


class ReferenceFrameError(LargeCoordinateError):
    """
    A relative offset is too large to be represented in single precision.

    Raised when the reference cell is too far from the position. Callers should
    use the absolute (double precision) conversions instead.
    """
