"""Decoded save archive: header plus top-level property list."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Iterator, Tuple

from suprasave.domain.properties import Property


@dataclass(frozen=True, slots=True)
class EngineVersion:
    major: int
    minor: int
    patch: int
    changelist: int
    branch: str

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}-{self.changelist}+{self.branch}"


@dataclass(frozen=True, slots=True)
class CustomVersion:
    key: uuid.UUID
    version: int
    friendly_name: str | None = None


@dataclass(frozen=True, slots=True)
class SaveHeader:
    """Fixed GVAS header fields, validated but otherwise uninterpreted."""

    save_game_version: int
    package_version: int
    package_version_ue5: int | None
    engine_version: EngineVersion
    custom_version_format: int | None
    custom_versions: Tuple[CustomVersion, ...]
    save_game_class: str


@dataclass(frozen=True, slots=True)
class SaveArchive:
    """Result of a single decode pass over one save buffer."""

    header: SaveHeader
    properties: Tuple[Property, ...]
    trailing_bytes: int = 0

    def __iter__(self) -> Iterator[Property]:
        return iter(self.properties)

    def __len__(self) -> int:
        return len(self.properties)

    def find(self, name: str) -> Property | None:
        """Return the first top-level record with the given name."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def find_all(self, name: str) -> Tuple[Property, ...]:
        return tuple(prop for prop in self.properties if prop.name == name)
