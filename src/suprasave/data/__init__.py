"""Data layer utilities for loading the marker catalog."""

from .errors import DataError, DataLoadError, DataValidationError
from .paths import get_data_path, get_markers_path, get_repo_root

__all__ = [
    "DataError",
    "DataLoadError",
    "DataValidationError",
    "get_data_path",
    "get_markers_path",
    "get_repo_root",
]
