"""Domain definition exports."""

from .marker_def import MarkerDef

__all__ = ["MarkerDef"]
