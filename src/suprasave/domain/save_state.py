"""Semantic state reconstructed from a decoded save."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

from suprasave.core.types import Position
from suprasave.domain.identifiers import WorldObjectId


@dataclass(frozen=True, slots=True)
class SaveState:
    """Found world objects plus the player's last position, if stored."""

    found_ids: FrozenSet[WorldObjectId] = field(default_factory=frozenset)
    player_position: Position | None = None

    @property
    def found_keys(self) -> FrozenSet[str]:
        return frozenset(str(object_id) for object_id in self.found_ids)

    @property
    def has_position(self) -> bool:
        return self.player_position is not None

    def is_found(self, object_id: WorldObjectId | str) -> bool:
        if isinstance(object_id, str):
            return object_id in self.found_keys
        return object_id in self.found_ids
