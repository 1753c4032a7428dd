"""Repository for the marker catalog."""
from __future__ import annotations

from pathlib import Path
from typing import Dict

from suprasave.data.errors import DataValidationError
from suprasave.data.paths import get_markers_filename
from suprasave.data.repositories.base import RepositoryBase
from suprasave.domain.defs import MarkerDef

_KNOWN_FIELDS = {"area", "name", "type", "lat", "lng", "cost", "price_type", "coins", "spawns"}
_FLOAT_FIELDS = ("lat", "lng")
_INT_FIELDS = ("cost", "price_type", "coins")


class MarkersRepository(RepositoryBase[MarkerDef]):
    """Loads and validates marker definitions keyed by ``area:name``."""

    def __init__(
        self,
        filename: str = "markers.json",
        base_path: Path | str | None = None,
        game: str | None = None,
    ) -> None:
        super().__init__(filename, base_path)
        self._game = game

    @classmethod
    def for_game(cls, game: str, base_path: Path | str | None = None) -> "MarkersRepository":
        return cls(get_markers_filename(game), base_path, game=game)

    def _describe(self) -> str:
        if self._game is None:
            return f"Marker catalog '{self._filename}'"
        return f"Marker catalog for game '{self._game}'"

    def _build(self, raw: object) -> Dict[str, MarkerDef]:
        entries = self._require_list(raw, self._filename)
        markers: Dict[str, MarkerDef] = {}
        for index, entry in enumerate(entries):
            context = f"{self._filename}[{index}]"
            data = self._require_mapping(entry, context)
            area = self._require_str(data.get("area"), f"{context} area")
            name = self._require_str(data.get("name"), f"{context} name")
            marker_type = self._require_str(data.get("type"), f"{context} type")

            numbers: Dict[str, object] = {}
            for field_name in _FLOAT_FIELDS:
                value = data.get(field_name)
                if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                    raise DataValidationError(f"{context} {field_name} must be a number if provided.")
                numbers[field_name] = float(value) if value is not None else None
            for field_name in _INT_FIELDS:
                value = data.get(field_name)
                if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                    raise DataValidationError(f"{context} {field_name} must be an integer if provided.")
                numbers[field_name] = value

            spawns = data.get("spawns")
            if spawns is not None and not isinstance(spawns, str):
                raise DataValidationError(f"{context} spawns must be a string if provided.")

            marker = MarkerDef(
                area=area,
                name=name,
                type=marker_type,
                spawns=spawns,
                extra={key: value for key, value in data.items() if key not in _KNOWN_FIELDS},
                **numbers,
            )
            if marker.key in markers:
                raise DataValidationError(f"Duplicate marker '{marker.key}' in {self._filename}.")
            markers[marker.key] = marker
        return markers
