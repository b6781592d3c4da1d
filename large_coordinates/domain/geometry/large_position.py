# large_coordinates/domain/geometry/large_position.py
"""
High-precision positions in a large, cell-partitioned 3D world.

A LargePosition combines two parts:
  cell:  an IntTriple naming the cell whose center is ``cell * CELL_SIZE``
  local: a single-precision FloatTriple offset from that center

so that ``world = cell * CELL_SIZE + local``, evaluated in double precision.

Precision is the same everywhere in the supported range (about +/-29.4 AU
with one world unit per metre): TYPICAL_PRECISION near a cell center and
MIN_PRECISION at the largest offset a relative frame allows.

Cells are loose. An offset may grow past the natural boundary of
+/-CELL_SIZE/2 up to HYSTERESIS_THRESHOLD before the position is re-assigned,
so an object hovering near a boundary does not flip between cells. As a
result several (cell, local) pairs can denote the same world location, and
equality compares world locations rather than fields.
"""
import logging
import math
from typing import Any, Sequence, Tuple, Union

import numpy as np
from pydantic import Field, model_validator

from large_coordinates.domain.errors import CoordinateRangeError, ReferenceFrameError
from large_coordinates.domain.geometry.constants import (
    CELL_INDEX_MAX,
    CELL_INDEX_MIN,
    CELL_SIZE,
    HYSTERESIS_THRESHOLD,
    MAX_COORDINATE,
    MAX_EQUAL_CELL_DISTANCE,
    MIN_COORDINATE,
    POSITION_TOLERANCE,
    RELATIVE_BOUND,
)
from large_coordinates.domain.geometry.vectors import DoubleTriple, FloatTriple, IntTriple
from large_coordinates.utils.base_model import ImmutableModel

logger = logging.getLogger(__name__)

_SINGLE_CELL_SIZE = np.float32(CELL_SIZE)

CellLike = Union[IntTriple, Sequence[int]]
OffsetLike = Union[FloatTriple, Sequence[float]]
WorldLike = Union[DoubleTriple, Sequence[float]]


def round_half_away_from_zero(value: float) -> int:
    """
    Round to the nearest integer, resolving ties away from zero.

    ``0.5 -> 1`` and ``-0.5 -> -1``, so a coordinate exactly on a cell boundary
    belongs to the cell further from the origin.
    """
    magnitude = abs(value)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return whole if value >= 0 else -whole


def _check_cell_range(cell: IntTriple) -> None:
    """Validate that every cell index fits the signed 32-bit index range."""
    for name, index in zip("xyz", cell.as_tuple()):
        if not CELL_INDEX_MIN <= index <= CELL_INDEX_MAX:
            raise CoordinateRangeError(
                f"Cell index {name}={index} outside [{CELL_INDEX_MIN}, {CELL_INDEX_MAX}]"
            )


def _cell_offsets(cells: IntTriple, dtype: type) -> np.ndarray:
    """Distance spanned by a number of cells along each axis, in the given precision."""
    counts = np.array([float(index) for index in cells.as_tuple()], dtype=dtype)
    return counts * dtype(CELL_SIZE)


def _nearest_cell(world: DoubleTriple) -> Tuple[IntTriple, FloatTriple]:
    """Assign a world coordinate to the cell with the nearest center."""
    for name, value in zip("xyz", world.as_tuple()):
        if not MIN_COORDINATE <= value <= MAX_COORDINATE:
            logger.warning(f"Rejected world coordinate {world}: {name} is out of range")
            raise CoordinateRangeError(
                f"{name.upper()} coordinate {value} exceeds the supported range "
                f"[{MIN_COORDINATE}, {MAX_COORDINATE}] (~+/-29.4 AU)"
            )

    cell = IntTriple(
        x=round_half_away_from_zero(world.x / CELL_SIZE),
        y=round_half_away_from_zero(world.y / CELL_SIZE),
        z=round_half_away_from_zero(world.z / CELL_SIZE),
    )
    # Subtract in double precision before narrowing to single precision
    local = FloatTriple.from_array(world.as_array() - _cell_offsets(cell, np.float64))
    return cell, local


def _resolve_cell(origin: IntTriple, offset: FloatTriple) -> Tuple[IntTriple, FloatTriple]:
    """
    Choose the cell for an offset relative to ``origin``.

    The position stays in ``origin`` while every axis is inside the hysteresis
    band. Otherwise all three axes are re-assigned together from the absolute
    double-precision coordinate.
    """
    _check_cell_range(origin)

    magnitudes = np.abs(offset.as_array())
    if not np.all(np.isfinite(magnitudes)):
        logger.warning(f"Rejected offset {offset} from cell {origin}: not finite")
        raise ReferenceFrameError(f"Offset {offset} from cell {origin} is not finite")
    if np.any(magnitudes > RELATIVE_BOUND):
        logger.warning(f"Rejected offset {offset} from cell {origin}: exceeds +/-{RELATIVE_BOUND}")
        raise ReferenceFrameError(
            f"Offset {offset} from cell {origin} exceeds +/-{RELATIVE_BOUND}. "
            "Large movements must go through absolute coordinates."
        )

    if np.all(magnitudes <= HYSTERESIS_THRESHOLD):
        return origin, offset

    world = DoubleTriple.from_array(
        _cell_offsets(origin, np.float64) + offset.as_array().astype(np.float64)
    )
    cell, local = _nearest_cell(world)
    logger.debug(f"Offset {offset} left the hysteresis band of cell {origin}; moved to cell {cell}")
    return cell, local


class LargePosition(ImmutableModel):
    """
    A position split into a cell index and a single-precision offset.

    Constructing with ``cell`` and ``local`` applies the same hysteresis rule
    as from_relative(), so ``LargePosition(cell=(0, 0, 0), local=(2100, 0, 0))``
    ends up in cell (1, 0, 0) with offset (52, 0, 0).
    """
    cell: IntTriple = Field(default_factory=IntTriple, description="Global cell index")
    local: FloatTriple = Field(default_factory=FloatTriple, description="Offset from the cell center")

    # Tolerant equality cannot be hashed consistently
    __hash__ = None

    @model_validator(mode="before")
    @classmethod
    def assign_cell(cls, data: Any) -> Any:
        """Validate the cell index and move the offset to the right cell."""
        if not isinstance(data, dict):
            return data
        cell = IntTriple.model_validate(data.get("cell", IntTriple()))
        local = FloatTriple.model_validate(data.get("local", FloatTriple()))
        cell, local = _resolve_cell(cell, local)
        return {**data, "cell": cell, "local": local}

    @classmethod
    def from_absolute(cls, world: WorldLike) -> "LargePosition":
        """
        Create a position from absolute world coordinates.

        The position is placed in the cell with the nearest center, which keeps
        the offset within about CELL_SIZE / 2. This is the precision-safe path
        for arbitrarily large jumps such as teleports or initial placement.

        Raises:
            CoordinateRangeError: If a coordinate lies outside
                [MIN_COORDINATE, MAX_COORDINATE]
        """
        cell, local = _nearest_cell(DoubleTriple.model_validate(world))
        return cls(cell=cell, local=local)

    def to_absolute(self) -> DoubleTriple:
        """Get the absolute world coordinates in double precision."""
        return DoubleTriple.from_array(
            _cell_offsets(self.cell, np.float64) + self.local.as_array().astype(np.float64)
        )

    def cell_center(self) -> DoubleTriple:
        """Get the absolute world coordinates of this position's cell center."""
        return DoubleTriple.from_array(_cell_offsets(self.cell, np.float64))

    def _offset_from(self, origin: IntTriple) -> np.ndarray:
        """Single-precision offset from the center of ``origin``, without bound checks."""
        return self.local.as_array() + _cell_offsets(self.cell - origin, np.float32)

    def to_relative(self, origin: CellLike) -> FloatTriple:
        """
        Express this position as an offset from another cell's center.

        Args:
            origin: The reference cell

        Returns:
            Single-precision offset from the reference cell's center

        Raises:
            ReferenceFrameError: If the offset exceeds RELATIVE_BOUND on any axis,
                meaning the reference cell is too far away for single precision
        """
        origin = IntTriple.model_validate(origin)
        _check_cell_range(origin)

        offset = self._offset_from(origin)
        if np.any(np.abs(offset) > RELATIVE_BOUND):
            logger.warning(f"Cell {origin} is too far from {self} for a relative offset")
            raise ReferenceFrameError(
                f"The distance from cell {origin} to {self} is too large "
                "to be represented as a single-precision offset."
            )
        return FloatTriple.from_array(offset)

    @classmethod
    def from_relative(cls, origin: CellLike, offset: OffsetLike) -> "LargePosition":
        """
        Create a position from an offset relative to a reference cell.

        The position stays in ``origin`` while the offset is within
        HYSTERESIS_THRESHOLD on every axis. Beyond that the cell is recomputed
        from the double-precision world coordinate, which also collapses the
        offset back towards zero.

        Raises:
            ReferenceFrameError: If the offset exceeds RELATIVE_BOUND on any axis.
                Movements that large must use from_absolute() and to_absolute().
            CoordinateRangeError: If the resulting position is out of range
        """
        origin = IntTriple.model_validate(origin)
        offset = FloatTriple.model_validate(offset)
        cell, local = _resolve_cell(origin, offset)
        return cls(cell=cell, local=local)

    def translate(self, delta: Union[FloatTriple, DoubleTriple, Sequence[float]]) -> "LargePosition":
        """
        Move the position by a displacement.

        Short moves shift the offset and go through from_relative(). Moves that
        would take the offset past RELATIVE_BOUND are applied to the absolute
        coordinate instead.
        """
        if not isinstance(delta, (FloatTriple, DoubleTriple)):
            delta = DoubleTriple.model_validate(delta)

        # Summed in double and rounded once, so the result never crosses the bound
        moved = self.local.as_array().astype(np.float64) + delta.as_array().astype(np.float64)
        if np.all(np.abs(moved) <= RELATIVE_BOUND):
            return self.from_relative(self.cell, FloatTriple.from_array(moved))

        logger.debug(f"Displacement {delta} too large for a relative move; using absolute coordinates")
        world = self.to_absolute() + DoubleTriple.from_array(delta.as_array())
        return self.from_absolute(world)

    def distance_to(self, other: "LargePosition") -> float:
        """Calculate the Euclidean distance to another position in double precision."""
        cells = _cell_offsets(other.cell - self.cell, np.float64)
        offsets = other.local.as_array().astype(np.float64) - self.local.as_array().astype(np.float64)
        return float(np.linalg.norm(cells + offsets))

    def __eq__(self, other: object) -> bool:
        """
        Compare world locations, not the internal representation.

        Cells more than MAX_EQUAL_CELL_DISTANCE apart on any axis can never
        hold the same location. Otherwise the separation is computed in double
        precision and every component must be below POSITION_TOLERANCE.
        """
        if not isinstance(other, LargePosition):
            return NotImplemented

        cell_distance = other.cell - self.cell
        if max(abs(index) for index in cell_distance.as_tuple()) > MAX_EQUAL_CELL_DISTANCE:
            return False

        # Both terms change sign when the operands swap, so a == b and b == a agree
        offsets = other.local.as_array().astype(np.float64) - self.local.as_array().astype(np.float64)
        separation = offsets + _cell_offsets(cell_distance, np.float64)
        return bool(np.all(np.abs(separation) < POSITION_TOLERANCE))

    def __str__(self) -> str:
        return f"LargePosition(cell={self.cell}, local={self.local})"
