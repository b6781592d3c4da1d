"""
Large Coordinates - floating-origin positions for astronomical-scale worlds
"""
import logging

from large_coordinates.domain.errors import (
    CoordinateRangeError,
    LargeCoordinateError,
    ReferenceFrameError,
)
from large_coordinates.domain.geometry.large_position import LargePosition
from large_coordinates.domain.geometry.vectors import DoubleTriple, FloatTriple, IntTriple
from large_coordinates.utils.logging_config import setup_logging
from large_coordinates.utils.units import supported_range, to_unit

__version__ = "1.0.0"

# Library code logs through the package namespace; applications call setup_logging()
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'LargePosition',
    'IntTriple',
    'FloatTriple',
    'DoubleTriple',
    'LargeCoordinateError',
    'CoordinateRangeError',
    'ReferenceFrameError',
    'setup_logging',
    'to_unit',
    'supported_range',
]
