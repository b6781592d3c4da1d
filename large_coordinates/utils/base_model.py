# large_coordinates/utils/base_model.py
from typing import TypeVar, Any, cast
from pydantic import BaseModel

T = TypeVar('T', bound=BaseModel)


class ImmutableModel(BaseModel):
    """
    Base class for all coordinate value types.

    Every vector and position inherits from this class:
    - Immutability: instances are frozen after creation
    - Copyability: modified copies via with_changes() go through full validation,
      so a position copy is re-assigned to the right cell
    """
    model_config = {
        "frozen": True,
    }

    def with_changes(self, **changes: Any) -> T:
        """
        Create a new instance with specified changes.

        Args:
            **changes: Keyword arguments with field values to change

        Returns:
            New validated instance with updated values

        Raises:
            ValueError: If an invalid field name is provided
        """
        current_data = {name: getattr(self, name) for name in type(self).model_fields}

        for key, value in changes.items():
            if key not in current_data:
                raise ValueError(f"Invalid field: {key}")
            current_data[key] = value

        cls = self.__class__
        return cast(T, cls.model_validate(current_data))
