"""Helpers for resolving data file locations."""
from __future__ import annotations

from pathlib import Path


def get_repo_root() -> Path:
    """Return the repository root."""
    return Path(__file__).resolve().parents[3]


def get_data_path(base_path: Path | str | None = None) -> Path:
    """Return the directory containing marker catalog files."""
    if base_path is not None:
        return Path(base_path)
    return get_repo_root() / "data"


def get_markers_filename(game: str) -> str:
    """Return the catalog file name for a game id such as ``sl`` or ``siu``."""
    return f"markers.{game}.json"


def get_markers_path(game: str, base_path: Path | str | None = None) -> Path:
    return get_data_path(base_path) / get_markers_filename(game)
