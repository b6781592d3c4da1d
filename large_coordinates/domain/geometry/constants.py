# large_coordinates/domain/geometry/constants.py
"""Constants for large-coordinate calculations."""

# Side length of a cell in world units. FP32 ULP at 2048.0 is 0.000244.
CELL_SIZE = 2048.0

# Offsets up to this magnitude keep a position in its current cell, although the
# natural cell boundary is CELL_SIZE / 2.
HYSTERESIS_THRESHOLD = CELL_SIZE * 0.75

# Largest offset magnitude that can be trusted in a relative frame.
# FP32 ULP at 6144.0 is 0.000488.
RELATIVE_BOUND = CELL_SIZE * 3.0

# Two positions whose cells are further apart than this on any axis are never equal.
MAX_EQUAL_CELL_DISTANCE = int(RELATIVE_BOUND // CELL_SIZE)

# Cell indices are signed 32-bit integers
CELL_INDEX_MIN = -(2 ** 31)
CELL_INDEX_MAX = 2 ** 31 - 1

# Supported absolute coordinate range, about +/-4.398e12 world units
MIN_COORDINATE = CELL_INDEX_MIN * CELL_SIZE
MAX_COORDINATE = CELL_INDEX_MAX * CELL_SIZE

# Expected round-trip accuracy (documentation only, not enforced)
TYPICAL_PRECISION = 0.000244  # FP32 ULP at CELL_SIZE
MIN_PRECISION = 0.000488  # FP32 ULP at RELATIVE_BOUND

# Default tolerances for floating-point comparisons
FLOAT_EPSILON = 1e-6
DOUBLE_EPSILON = 1e-15
POSITION_TOLERANCE = FLOAT_EPSILON

# 1 astronomical unit in metres
AU_DISTANCE = 149597870700.0
