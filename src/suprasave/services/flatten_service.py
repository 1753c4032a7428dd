"""Flattens a decoded archive into a plain name -> value mapping."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping

from suprasave.config import DEFAULT_CONFIG, ReconcilerConfig
from suprasave.core.types import PlainValue
from suprasave.domain.identifiers import normalize_path
from suprasave.domain.properties import ArrayValue, Property, PropertyKind
from suprasave.services.report_service import to_plain

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FlattenedSave:
    """Plain values per top-level property, ready for diffing or dumping."""

    values: Mapping[str, PlainValue] = field(default_factory=lambda: MappingProxyType({}))
    duplicate_count: int = 0

    def __getitem__(self, name: str) -> PlainValue:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values


_OBJECT_KINDS = frozenset({PropertyKind.OBJECT, PropertyKind.SOFT_OBJECT})


def _is_path_item(item: Property) -> bool:
    if item.kind in _OBJECT_KINDS:
        return True
    # Name and string lists only count when the entries are object paths.
    return item.kind is PropertyKind.STR and isinstance(item.value, str) and "/" in item.value and "." in item.value


def _is_path_array(value: ArrayValue) -> bool:
    return bool(value.items) and all(_is_path_item(item) for item in value.items)


def flatten_archive(properties: Iterable[Property], config: ReconcilerConfig | None = None) -> FlattenedSave:
    """Reduce each top-level record to a plain value.

    Object paths become ``area:instanceName`` keys, path arrays become
    de-duplicated key lists. Maps, arrays of structs and undecodable records
    are skipped.
    """
    config = config or DEFAULT_CONFIG
    values: Dict[str, PlainValue] = {}
    duplicates = 0
    for prop in properties:
        if prop.kind in (PropertyKind.MAP, PropertyKind.UNKNOWN):
            logger.debug("Skipping '%s': %s has no flat form.", prop.name, prop.type_name)
            continue
        value = prop.value
        if isinstance(value, ArrayValue) and value.inner_type == "StructProperty":
            logger.debug("Skipping '%s': array of %d structs.", prop.name, len(value))
            continue

        if prop.name in values:
            duplicates += 1

        if prop.kind in _OBJECT_KINDS and isinstance(value, str):
            object_id = normalize_path(value)
            values[prop.name] = None if object_id.is_unset else str(object_id)
        elif isinstance(value, ArrayValue) and _is_path_array(value):
            capitalize = prop.name in config.capitalize_instance_fields
            keys: List[str] = []
            for item in value.items:
                object_id = normalize_path(str(item.value), capitalize_instance=capitalize)
                if object_id.is_unset:
                    continue
                key = str(object_id)
                if key in keys:
                    duplicates += 1
                    continue
                keys.append(key)
            values[prop.name] = keys
        else:
            values[prop.name] = to_plain(value)
    return FlattenedSave(values=MappingProxyType(values), duplicate_count=duplicates)
