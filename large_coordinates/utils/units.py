# large_coordinates/utils/units.py
"""
Conversion of world distances to physical length units.

World coordinates are unitless; WORLD_UNIT names the physical length of one
world unit so that ranges and distances can be reported in metres,
kilometres or astronomical units.
"""
from typing import Tuple

import pint

from large_coordinates.domain.geometry.constants import MAX_COORDINATE, MIN_COORDINATE

ureg = pint.UnitRegistry()

# Physical length of one world unit
WORLD_UNIT = "meter"


def to_quantity(value: float, world_unit: str = WORLD_UNIT) -> pint.Quantity:
    """Attach a physical length unit to a world distance."""
    return value * ureg(world_unit)


def to_unit(value: float, unit: str, world_unit: str = WORLD_UNIT) -> float:
    """
    Convert a world distance to another length unit.

    Args:
        value: Distance in world units
        unit: Target unit string (e.g. 'km', 'astronomical_unit')
        world_unit: Physical length of one world unit

    Returns:
        The distance expressed in the target unit

    Raises:
        pint.errors.DimensionalityError: If the target unit is not a length
    """
    return to_quantity(value, world_unit).to(unit).magnitude


def supported_range(unit: str = "astronomical_unit", world_unit: str = WORLD_UNIT) -> Tuple[float, float]:
    """Get the (min, max) absolute coordinate supported along each axis, in the given unit."""
    return (to_unit(MIN_COORDINATE, unit, world_unit), to_unit(MAX_COORDINATE, unit, world_unit))
