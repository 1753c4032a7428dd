"""Correlates found world objects with the marker catalog."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from suprasave.data.repositories import MarkersRepository
from suprasave.domain.defs import MarkerDef
from suprasave.domain.identifiers import WorldObjectId

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CatalogMatch:
    """Found ids split into catalog hits and ids the catalog does not list."""

    matched: Tuple[MarkerDef, ...]
    unmatched: Tuple[WorldObjectId, ...]

    @property
    def matched_keys(self) -> Tuple[str, ...]:
        return tuple(marker.key for marker in self.matched)


class CatalogService:
    """Looks up world-object ids in a marker catalog."""

    def __init__(self, markers_repo: MarkersRepository) -> None:
        self._markers_repo = markers_repo

    def correlate(self, object_ids: Iterable[WorldObjectId]) -> CatalogMatch:
        matched: List[MarkerDef] = []
        unmatched: List[WorldObjectId] = []
        for object_id in sorted(set(object_ids)):
            marker = self._markers_repo.find(str(object_id))
            if marker is None:
                unmatched.append(object_id)
            else:
                matched.append(marker)
        logger.info("Entries found in catalog: %d, not found: %d.", len(matched), len(unmatched))
        return CatalogMatch(matched=tuple(matched), unmatched=tuple(unmatched))

    def markers_of_type(self, object_ids: Iterable[WorldObjectId], marker_type: str) -> Tuple[MarkerDef, ...]:
        """Return catalog markers of one class among the given ids."""
        return tuple(marker for marker in self.correlate(object_ids).matched if marker.type == marker_type)


def select_by_prefix(object_ids: Iterable[WorldObjectId], prefix: str) -> Tuple[WorldObjectId, ...]:
    """Return ids whose instance name starts with ``prefix`` (e.g. ``Pipe``), sorted."""
    return tuple(sorted(object_id for object_id in set(object_ids) if object_id.instance_name.startswith(prefix)))
