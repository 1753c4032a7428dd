"""Domain exports."""

from .archive import CustomVersion, EngineVersion, SaveArchive, SaveHeader
from .identifiers import WorldObjectId, normalize_path
from .properties import (
    ArrayValue,
    EnumValue,
    MapValue,
    Property,
    PropertyKind,
    RawValue,
    StructValue,
    Transform,
    Vector,
)
from .save_state import SaveState

__all__ = [
    "ArrayValue",
    "CustomVersion",
    "EngineVersion",
    "EnumValue",
    "MapValue",
    "Property",
    "PropertyKind",
    "RawValue",
    "SaveArchive",
    "SaveHeader",
    "SaveState",
    "StructValue",
    "Transform",
    "Vector",
    "WorldObjectId",
    "normalize_path",
]
