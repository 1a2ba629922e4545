"""Validation utilities for EcoSync inputs."""

from typing import Any, Optional, Sequence, Union, Type, Tuple
import math
import numbers

from .exceptions import InvalidInputError, ValidationTypeError, ValidationRangeError

class Validator:
    """Base validator class."""
    
    @staticmethod
    def validate_type(value: Any, expected_type: Union[Type, Tuple[Type, ...]]) -> None:
        """Validate value type."""
        # bool is an int subclass but never a valid quantity
        if isinstance(value, bool) or not isinstance(value, expected_type):
            names = (
                "/".join(t.__name__ for t in expected_type)
                if isinstance(expected_type, tuple) else expected_type.__name__
            )
            raise ValidationTypeError(
                f"Expected type {names}, got {type(value).__name__}"
            )

    @staticmethod
    def validate_range(
        value: Union[int, float],
        min_value: Optional[Union[int, float]] = None,
        max_value: Optional[Union[int, float]] = None
    ) -> None:
        """Validate numeric range."""
        if min_value is not None and value < min_value:
            raise ValidationRangeError(f"Value {value} is below minimum {min_value}")
        
        if max_value is not None and value > max_value:
            raise ValidationRangeError(f"Value {value} exceeds maximum {max_value}")

    @staticmethod
    def validate_finite(value: Union[int, float]) -> None:
        """Reject NaN and infinite values."""
        if not math.isfinite(value):
            raise ValidationRangeError(f"Value {value} is not finite")

class EnergyValidator(Validator):
    """Validator for energy and money quantities."""
    
    @staticmethod
    def validate_quantity(value: float, name: str = "value") -> None:
        """Validate a non-negative finite quantity."""
        try:
            Validator.validate_type(value, numbers.Real)
            Validator.validate_finite(value)
            Validator.validate_range(value, min_value=0)
        except (ValidationTypeError, ValidationRangeError) as e:
            raise type(e)(f"{name}: {e}") from None

    @staticmethod
    def validate_number(value: float, name: str = "value") -> None:
        """Validate a finite real number of either sign."""
        try:
            Validator.validate_type(value, numbers.Real)
            Validator.validate_finite(value)
        except (ValidationTypeError, ValidationRangeError) as e:
            raise type(e)(f"{name}: {e}") from None
    
    @staticmethod
    def validate_hours(hours: int) -> None:
        """Validate a requested history length."""
        Validator.validate_type(hours, numbers.Integral)
        Validator.validate_range(hours, min_value=0)

class SeriesValidator(Validator):
    """Validator for energy series."""
    
    @staticmethod
    def validate_series(series: Sequence[Any]) -> None:
        """Validate that a series can be analyzed."""
        if series is None or len(series) == 0:
            raise InvalidInputError("Energy series must contain at least one data point")
