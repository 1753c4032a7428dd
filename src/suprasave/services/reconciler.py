"""Reconstructs found world objects and the player position from a save."""
from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, Sequence, Set

from suprasave.config import DEFAULT_CONFIG, ReconcilerConfig
from suprasave.core.types import Position
from suprasave.domain.identifiers import WorldObjectId, normalize_path
from suprasave.domain.properties import (
    ArrayValue,
    Property,
    PropertyKind,
    PropertyValue,
    StructValue,
    Transform,
    Vector,
)
from suprasave.domain.save_state import SaveState

logger = logging.getLogger(__name__)

PATH_KINDS = frozenset({PropertyKind.OBJECT, PropertyKind.SOFT_OBJECT, PropertyKind.STR})
TRANSLATION_FIELD = "Translation"


def iter_path_items(prop: Property) -> Iterator[str]:
    """Yield the path strings held by an array or set record."""
    if prop.kind not in (PropertyKind.ARRAY, PropertyKind.SET) or not isinstance(prop.value, ArrayValue):
        return
    for item in prop.value.items:
        if item.kind in PATH_KINDS and isinstance(item.value, str):
            yield item.value


def _vector_shape(value: PropertyValue) -> Position | None:
    if isinstance(value, StructValue):
        value = value.body
    if isinstance(value, Vector):
        return value.as_tuple()
    return None


def _transform_shape(value: PropertyValue) -> Position | None:
    if not isinstance(value, StructValue):
        return None
    if isinstance(value.body, Transform):
        return value.body.translation.as_tuple()
    translation = value.field(TRANSLATION_FIELD)
    if translation is None:
        return None
    return _vector_shape(translation.value)


# Tried in order; the first shape that matches wins.
POSITION_SHAPES: Sequence[Callable[[PropertyValue], Position | None]] = (_vector_shape, _transform_shape)


class SaveStateReconciler:
    """Walks configured top-level properties to build a SaveState."""

    def __init__(self, config: ReconcilerConfig | None = None) -> None:
        self._config = config or DEFAULT_CONFIG

    @property
    def config(self) -> ReconcilerConfig:
        return self._config

    def reconcile(self, properties: Iterable[Property]) -> SaveState:
        records = tuple(properties)
        found_ids = self.collect_found_ids(records)
        position = self.resolve_player_position(records)
        logger.info(
            "Reconciled %d found objects; player position %s.",
            len(found_ids),
            "present" if position is not None else "absent",
        )
        return SaveState(found_ids=found_ids, player_position=position)

    def collect_found_ids(self, properties: Iterable[Property]) -> frozenset[WorldObjectId]:
        wanted = set(self._config.found_fields)
        found: Set[WorldObjectId] = set()
        for prop in properties:
            if prop.name not in wanted:
                continue
            if prop.kind not in (PropertyKind.ARRAY, PropertyKind.SET):
                logger.debug("Skipping '%s': expected an array, found %s.", prop.name, prop.kind.value)
                continue
            capitalize = prop.name in self._config.capitalize_instance_fields
            for path in iter_path_items(prop):
                object_id = normalize_path(path, capitalize_instance=capitalize)
                if object_id.is_unset:
                    continue
                found.add(object_id)
        return frozenset(found)

    def resolve_player_position(self, properties: Iterable[Property]) -> Position | None:
        for prop in properties:
            if prop.name != self._config.position_field:
                continue
            for shape in POSITION_SHAPES:
                position = shape(prop.value)
                if position is not None:
                    return position
            logger.debug("Cannot read a player position from '%s' (%s).", prop.name, prop.type_name)
        return None
