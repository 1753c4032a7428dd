"""JSON reading shared by the marker catalog and the config file."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import DataLoadError


def load_json(path: Path, label: str = "Marker catalog") -> object:
    """Decode ``path`` as JSON.

    ``label`` names what the file holds (a game's marker catalog, the
    reconciler config) in the DataLoadError raised for a missing, unreadable
    or malformed file.
    """
    try:
        text = path.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise DataLoadError(f"{label} not found at {path}.") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DataLoadError(f"{label} at {path} could not be read: {exc}") from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(
            f"{label} at {path} is not valid JSON (line {exc.lineno}, column {exc.colno}): {exc.msg}"
        ) from exc
