"""Repository exports."""

from .base import RepositoryBase
from .markers_repo import MarkersRepository

__all__ = [
    "MarkersRepository",
    "RepositoryBase",
]
