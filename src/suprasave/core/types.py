"""Shared type aliases for the core and domain layers."""
from typing import Tuple, Union

Position = Tuple[float, float, float]

PlainValue = Union[None, bool, int, float, str, list, dict]

__all__ = ["PlainValue", "Position"]
