# large_coordinates/domain/geometry/vectors.py
"""
Fixed three-component vectors used by large-coordinate positions.

IntTriple holds cell indices, FloatTriple holds single-precision offsets and
DoubleTriple holds absolute world coordinates. All three are immutable and
support componentwise arithmetic.
"""
import math
from typing import Any, Callable, ClassVar, Optional, Tuple, Type, TypeVar

import numpy as np
from pydantic import Field, field_validator, model_validator

from large_coordinates.domain.geometry.constants import DOUBLE_EPSILON, FLOAT_EPSILON
from large_coordinates.utils.base_model import ImmutableModel

F = TypeVar('F', bound='_FloatingTriple')


def _coerce_sequence(data: Any) -> Any:
    """Accept a 3-sequence (tuple, list or numpy array) in place of keyword fields."""
    if isinstance(data, np.ndarray):
        data = data.tolist()
    if isinstance(data, (tuple, list)):
        if len(data) != 3:
            raise ValueError(f"Expected 3 components, got {len(data)}")
        x, y, z = data
        return {"x": x, "y": y, "z": z}
    return data


class IntTriple(ImmutableModel):
    """
    Integer triple used for cell indices.

    Components are Python integers, so arithmetic never overflows. Equality is exact.
    """
    x: int = Field(default=0, description="X component")
    y: int = Field(default=0, description="Y component")
    z: int = Field(default=0, description="Z component")

    @model_validator(mode="before")
    @classmethod
    def coerce_sequence(cls, data: Any) -> Any:
        return _coerce_sequence(data)

    def add(self, other: "IntTriple") -> "IntTriple":
        """Componentwise addition."""
        return IntTriple(x=self.x + other.x, y=self.y + other.y, z=self.z + other.z)

    def subtract(self, other: "IntTriple") -> "IntTriple":
        """Componentwise subtraction."""
        return IntTriple(x=self.x - other.x, y=self.y - other.y, z=self.z - other.z)

    def scale(self, factor: int) -> "IntTriple":
        """Multiply every component by an integer factor."""
        return IntTriple(x=self.x * factor, y=self.y * factor, z=self.z * factor)

    def __add__(self, other: "IntTriple") -> "IntTriple":
        return self.add(other)

    def __sub__(self, other: "IntTriple") -> "IntTriple":
        return self.subtract(other)

    def __mul__(self, factor: int) -> "IntTriple":
        return self.scale(factor)

    def __neg__(self) -> "IntTriple":
        return self.scale(-1)

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)

    def as_array(self) -> np.ndarray:
        """Return the components as an int64 numpy array."""
        return np.array(self.as_tuple(), dtype=np.int64)

    def format_as_tuple(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"

    def __str__(self) -> str:
        return self.format_as_tuple()


class _FloatingTriple(ImmutableModel):
    """
    Shared behaviour of the floating-point triples.

    Components are rounded to the precision of ``dtype`` on construction and
    all arithmetic is carried out in that precision. Equality is tolerant: two
    triples are equal when every component differs by less than ``epsilon``.
    Non-finite input is rejected; arithmetic results may overflow to inf or NaN.
    """
    dtype: ClassVar[Type[np.floating]] = np.float64
    epsilon: ClassVar[float] = DOUBLE_EPSILON

    x: float = Field(default=0.0, description="X component")
    y: float = Field(default=0.0, description="Y component")
    z: float = Field(default=0.0, description="Z component")

    # Tolerant equality cannot be hashed consistently
    __hash__ = None

    @model_validator(mode="before")
    @classmethod
    def coerce_sequence(cls, data: Any) -> Any:
        # A triple of the other precision is converted componentwise
        if isinstance(data, _FloatingTriple) and not isinstance(data, cls):
            data = data.as_tuple()
        return _coerce_sequence(data)

    @field_validator("x", "y", "z")
    @classmethod
    def validate_component(cls, value: float) -> float:
        """Validate that the component is finite and round it to the triple's precision."""
        if not math.isfinite(value):
            raise ValueError(f"Component must be a finite number, got {value}")
        if abs(value) > float(np.finfo(cls.dtype).max):
            raise ValueError(f"Component {value} exceeds the {np.dtype(cls.dtype).name} range")
        return float(cls.dtype(value))

    @classmethod
    def from_array(cls: Type[F], values: np.ndarray) -> F:
        """Create a triple from a numpy array of three components."""
        x, y, z = np.asarray(values, dtype=cls.dtype).tolist()
        return cls(x=x, y=y, z=z)

    def as_array(self) -> np.ndarray:
        """Return the components as a numpy array of the triple's dtype."""
        return np.array(self.as_tuple(), dtype=self.dtype)

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def _apply(self: F, operation: Callable[[np.ndarray, np.ndarray], np.ndarray], operand: Any) -> F:
        """
        Apply a numpy operation in the triple's precision.

        Results follow IEEE-754: overflow gives +/-inf and invalid operations give
        NaN. They are not revalidated, so only user input is checked for finiteness.
        """
        with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
            values = operation(self.as_array(), np.asarray(operand, dtype=self.dtype))
        x, y, z = values.astype(self.dtype).tolist()
        return type(self).model_construct(x=x, y=y, z=z)

    def add(self: F, other: F) -> F:
        """Componentwise addition."""
        return self._apply(np.add, other.as_array())

    def subtract(self: F, other: F) -> F:
        """Componentwise subtraction."""
        return self._apply(np.subtract, other.as_array())

    def scale(self: F, factor: float) -> F:
        """Multiply every component by a scalar."""
        return self._apply(np.multiply, factor)

    def divide(self: F, divisor: float) -> F:
        """Divide every component by a scalar."""
        if divisor == 0:
            raise ZeroDivisionError("Cannot divide a vector by zero")
        return self._apply(np.divide, divisor)

    def __add__(self: F, other: F) -> F:
        return self.add(other)

    def __sub__(self: F, other: F) -> F:
        return self.subtract(other)

    def __mul__(self: F, factor: float) -> F:
        return self.scale(factor)

    def __truediv__(self: F, divisor: float) -> F:
        return self.divide(divisor)

    def __neg__(self: F) -> F:
        return self.scale(-1.0)

    def is_close_to(self, other: "_FloatingTriple", tolerance: Optional[float] = None) -> bool:
        """
        Check whether every component is within the tolerance of the other triple.

        Args:
            other: The triple to compare with
            tolerance: Absolute per-component tolerance. If None, uses the
                      triple's default epsilon.

        Returns:
            True if all component differences are strictly below the tolerance
        """
        if tolerance is None:
            tolerance = self.epsilon
        with np.errstate(over="ignore", invalid="ignore"):
            difference = np.abs(self.as_array() - other.as_array())
        return bool(np.all(difference < self.dtype(tolerance)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.is_close_to(other)

    def format_as_tuple(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"

    def __str__(self) -> str:
        return self.format_as_tuple()


class FloatTriple(_FloatingTriple):
    """Single-precision triple, used for offsets from a cell center."""
    dtype: ClassVar[Type[np.floating]] = np.float32
    epsilon: ClassVar[float] = FLOAT_EPSILON

    __hash__ = None


class DoubleTriple(_FloatingTriple):
    """Double-precision triple, used for absolute world coordinates."""
    dtype: ClassVar[Type[np.floating]] = np.float64
    epsilon: ClassVar[float] = DOUBLE_EPSILON

    __hash__ = None
