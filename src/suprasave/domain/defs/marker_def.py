"""Marker catalog definition structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from suprasave.domain.identifiers import WorldObjectId


@dataclass(frozen=True, slots=True)
class MarkerDef:
    """A static world object listed in the marker catalog."""

    area: str
    name: str
    type: str
    lat: float | None = None
    lng: float | None = None
    cost: int | None = None
    price_type: int | None = None
    coins: int | None = None
    spawns: str | None = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def object_id(self) -> WorldObjectId:
        return WorldObjectId(area=self.area, instance_name=self.name)

    @property
    def key(self) -> str:
        return str(self.object_id)
