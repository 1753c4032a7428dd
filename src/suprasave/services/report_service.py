"""Serialization of decoded archives into readable JSON documents."""
from __future__ import annotations

import json
import uuid
from dataclasses import fields, is_dataclass
from typing import Any, Dict, List

from suprasave.core.types import PlainValue
from suprasave.domain.archive import SaveArchive, SaveHeader
from suprasave.domain.properties import (
    ArrayValue,
    EnumValue,
    MapValue,
    Property,
    RawValue,
    StructValue,
)


def to_plain(value: object) -> PlainValue:
    """Convert a decoded value into JSON-serializable data."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Property):
        return to_plain(value.value)
    if isinstance(value, EnumValue):
        return value.member if value.enum_type is None else f"{value.enum_type}::{value.member}"
    if isinstance(value, ArrayValue):
        return [to_plain(item.value) for item in value.items]
    if isinstance(value, MapValue):
        return [[to_plain(key.value), to_plain(item.value)] for key, item in value.entries]
    if isinstance(value, StructValue):
        if isinstance(value.body, tuple):
            return {prop.name: to_plain(prop.value) for prop in value.body}
        return to_plain(value.body)
    if isinstance(value, RawValue):
        return {"raw": value.data.hex(), "size": value.size}
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, bytes):
        return value.hex()
    if isinstance(value, tuple):
        return [to_plain(item) for item in value]
    if is_dataclass(value) and not isinstance(value, type):
        return {field.name: to_plain(getattr(value, field.name)) for field in fields(value)}
    raise TypeError(f"Cannot serialize {type(value).__name__}.")


def property_to_entry(prop: Property) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "name": prop.name,
        "type": prop.type_name,
        "kind": prop.kind.value,
        "value": to_plain(prop.value),
    }
    if prop.index:
        entry["index"] = prop.index
    if isinstance(prop.value, StructValue):
        entry["struct_type"] = prop.value.struct_type
    elif isinstance(prop.value, ArrayValue):
        entry["inner_type"] = prop.value.inner_type
    elif isinstance(prop.value, RawValue) and prop.value.subtype:
        entry["inner_type"] = prop.value.subtype
    return entry


def header_to_entry(header: SaveHeader) -> Dict[str, Any]:
    return {
        "save_game_version": header.save_game_version,
        "package_version": header.package_version,
        "package_version_ue5": header.package_version_ue5,
        "engine_version": str(header.engine_version),
        "custom_version_format": header.custom_version_format,
        "custom_versions": [
            {"key": str(custom.key), "version": custom.version} for custom in header.custom_versions
        ],
        "save_game_class": header.save_game_class,
    }


def archive_to_document(archive: SaveArchive) -> Dict[str, Any]:
    """Return the whole archive as one JSON-ready mapping."""
    properties: List[Dict[str, Any]] = [property_to_entry(prop) for prop in archive.properties]
    return {"header": header_to_entry(archive.header), "properties": properties}


def render_json(document: object) -> str:
    return json.dumps(document, indent=2, sort_keys=True)
