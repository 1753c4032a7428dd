"""Property tree produced by decoding a save archive."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple, Union


class PropertyKind(Enum):
    """Closed set of property kinds a record can decode to."""

    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STR = "str"
    BYTE = "byte"
    ENUM = "enum"
    OBJECT = "object"
    SOFT_OBJECT = "soft_object"
    ARRAY = "array"
    SET = "set"
    MAP = "map"
    STRUCT = "struct"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Vector:
    x: float
    y: float
    z: float

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True, slots=True)
class Vector2D:
    x: float
    y: float


@dataclass(frozen=True, slots=True)
class Rotator:
    pitch: float
    yaw: float
    roll: float


@dataclass(frozen=True, slots=True)
class Quat:
    x: float
    y: float
    z: float
    w: float


@dataclass(frozen=True, slots=True)
class Transform:
    """Rotation, translation and scale, in on-disk order."""

    rotation: Quat
    translation: Vector
    scale: Vector


@dataclass(frozen=True, slots=True)
class LinearColor:
    r: float
    g: float
    b: float
    a: float


@dataclass(frozen=True, slots=True)
class Color:
    b: int
    g: int
    r: int
    a: int


@dataclass(frozen=True, slots=True)
class IntPoint:
    x: int
    y: int


@dataclass(frozen=True, slots=True)
class Ticks:
    """DateTime or Timespan stored as 100ns ticks."""

    value: int


FixedShape = Union[Vector, Vector2D, Rotator, Quat, Transform, LinearColor, Color, IntPoint, Ticks, uuid.UUID]


@dataclass(frozen=True, slots=True)
class EnumValue:
    """Named enum member; enum_type is None when the file does not say."""

    enum_type: str | None
    member: str


@dataclass(frozen=True, slots=True)
class RawValue:
    """Opaque payload of a record whose type could not be decoded."""

    data: bytes
    subtype: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True, slots=True)
class ArrayValue:
    """Homogeneous sequence of records sharing one inner type tag."""

    inner_type: str
    items: Tuple["Property", ...]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Property"]:
        return iter(self.items)


@dataclass(frozen=True, slots=True)
class MapValue:
    key_type: str
    value_type: str
    entries: Tuple[Tuple["Property", "Property"], ...]
    removed_keys: Tuple["Property", ...] = ()

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True, slots=True)
class StructValue:
    """A struct either as a fixed shape or as a nested property list."""

    struct_type: str
    body: Union[FixedShape, Tuple["Property", ...]]

    @property
    def fields(self) -> Tuple["Property", ...]:
        return self.body if isinstance(self.body, tuple) else ()

    def field(self, name: str) -> "Property | None":
        """Return the first nested field with the given name, if any."""
        for prop in self.fields:
            if prop.name == name:
                return prop
        return None


PropertyValue = Union[int, float, bool, str, EnumValue, ArrayValue, MapValue, StructValue, RawValue]


@dataclass(frozen=True, slots=True)
class Property:
    """One named, typed record of a property bag."""

    name: str
    kind: PropertyKind
    type_name: str
    value: PropertyValue
    index: int = 0


__all__ = [
    "ArrayValue",
    "Color",
    "EnumValue",
    "FixedShape",
    "IntPoint",
    "LinearColor",
    "MapValue",
    "Property",
    "PropertyKind",
    "PropertyValue",
    "Quat",
    "RawValue",
    "Rotator",
    "StructValue",
    "Ticks",
    "Transform",
    "Vector",
    "Vector2D",
]
