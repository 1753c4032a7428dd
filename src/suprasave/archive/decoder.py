"""Recursive-descent decoder for tagged property lists.

Each record is laid out as::

    name           string ("None" terminates the enclosing list)
    type           string (e.g. "IntProperty")
    size           u32    payload byte count
    index          u32    static array index
    type header    type specific (enum/inner/struct type names, struct guid)
    has_guid       u8     (+ 16-byte guid when set)
    payload        ``size`` bytes

BoolProperty is the exception: its value byte sits before ``has_guid`` and
its declared size is 0.
"""
from __future__ import annotations

import logging
import struct
from typing import Callable, Dict, List, Tuple

from suprasave.domain.properties import (
    ArrayValue,
    Color,
    EnumValue,
    FixedShape,
    IntPoint,
    LinearColor,
    MapValue,
    Property,
    PropertyKind,
    PropertyValue,
    Quat,
    RawValue,
    Rotator,
    StructValue,
    Ticks,
    Transform,
    Vector,
    Vector2D,
)

from .cursor import BinaryCursor
from .errors import ArchiveError, MalformedLengthError, SizeMismatchError, UnknownTypeError

logger = logging.getLogger(__name__)

NONE_SENTINEL = "None"
MAX_STRUCT_DEPTH = 64

_SCALAR_TYPES: Dict[str, Tuple[PropertyKind, struct.Struct]] = {
    "Int8Property": (PropertyKind.INT, struct.Struct("<b")),
    "Int16Property": (PropertyKind.INT, struct.Struct("<h")),
    "IntProperty": (PropertyKind.INT, struct.Struct("<i")),
    "Int64Property": (PropertyKind.INT, struct.Struct("<q")),
    "UInt16Property": (PropertyKind.INT, struct.Struct("<H")),
    "UInt32Property": (PropertyKind.INT, struct.Struct("<I")),
    "UInt64Property": (PropertyKind.INT, struct.Struct("<Q")),
    "FloatProperty": (PropertyKind.FLOAT, struct.Struct("<f")),
    "DoubleProperty": (PropertyKind.FLOAT, struct.Struct("<d")),
}
_STRING_TYPES = frozenset({"StrProperty", "NameProperty"})
_OBJECT_TYPES = frozenset({"ObjectProperty", "ClassProperty", "InterfaceProperty"})
_TAGGED_TYPES = (
    frozenset(_SCALAR_TYPES)
    | _STRING_TYPES
    | _OBJECT_TYPES
    | {
        "BoolProperty",
        "ByteProperty",
        "EnumProperty",
        "SoftObjectProperty",
        "ArrayProperty",
        "SetProperty",
        "MapProperty",
        "StructProperty",
    }
)

ShapeReader = Callable[[BinaryCursor], FixedShape]


def _fixed(layout: str, build: Callable[[tuple], FixedShape]) -> Dict[int, ShapeReader]:
    packed = struct.Struct(layout)
    return {packed.size: lambda cursor: build(cursor.read_struct(packed))}


def _floats(count: int, build: Callable[[tuple], FixedShape]) -> Dict[int, ShapeReader]:
    # UE5 large-world saves store the same shapes as doubles.
    readers = _fixed(f"<{count}f", build)
    readers.update(_fixed(f"<{count}d", build))
    return readers


def _transform(values: tuple) -> Transform:
    return Transform(
        rotation=Quat(*values[0:4]),
        translation=Vector(*values[4:7]),
        scale=Vector(*values[7:10]),
    )


# struct type -> payload size -> reader
_FIXED_STRUCTS: Dict[str, Dict[int, ShapeReader]] = {
    "Vector": _floats(3, lambda v: Vector(*v)),
    "Vector2D": _floats(2, lambda v: Vector2D(*v)),
    "Rotator": _floats(3, lambda v: Rotator(*v)),
    "Quat": _floats(4, lambda v: Quat(*v)),
    "Transform": _floats(10, _transform),
    "LinearColor": _fixed("<4f", lambda v: LinearColor(*v)),
    "Color": _fixed("<4B", lambda v: Color(*v)),
    "IntPoint": _fixed("<2i", lambda v: IntPoint(*v)),
    "Guid": {16: lambda cursor: cursor.read_guid()},
    "DateTime": _fixed("<q", lambda v: Ticks(v[0])),
    "Timespan": _fixed("<q", lambda v: Ticks(v[0])),
}


class PropertyDecoder:
    """Decodes sentinel-terminated property lists from a cursor."""

    def __init__(self, cursor: BinaryCursor) -> None:
        self._cursor = cursor
        self._depth = 0
        self._payload_readers: Dict[str, Callable[[str, Tuple[str, ...]], Tuple[PropertyKind, PropertyValue]]] = {
            "ByteProperty": self._read_byte,
            "EnumProperty": self._read_enum,
            "SoftObjectProperty": lambda name, header: (PropertyKind.SOFT_OBJECT, self._read_soft_object()),
            "ArrayProperty": self._read_array,
            "SetProperty": self._read_set,
            "MapProperty": self._read_map,
        }

    def read_property_list(self) -> Tuple[Property, ...]:
        """Read records until the ``None`` terminator, which is consumed."""
        if self._depth >= MAX_STRUCT_DEPTH:
            raise MalformedLengthError(
                f"Struct nesting exceeds {MAX_STRUCT_DEPTH} levels at offset {self._cursor.position}."
            )
        self._depth += 1
        try:
            properties: List[Property] = []
            while True:
                name = self._cursor.read_string()
                if name == NONE_SENTINEL:
                    return tuple(properties)
                properties.append(self._read_property(name))
        finally:
            self._depth -= 1

    def _read_property(self, name: str) -> Property:
        cursor = self._cursor
        type_name = cursor.read_string()
        size = cursor.read_u32()
        index = cursor.read_u32()

        if type_name == "BoolProperty":
            value = cursor.read_bool()
            self._skip_guid()
            if size != 0:
                raise SizeMismatchError(f"Property '{name}' (BoolProperty) declared {size} payload bytes, expected 0.")
            return Property(name=name, kind=PropertyKind.BOOL, type_name=type_name, value=value, index=index)

        header = self._read_type_header(type_name)
        self._skip_guid()
        start = cursor.position
        if size > cursor.remaining:
            raise MalformedLengthError(
                f"Property '{name}' ({type_name}) declares {size} bytes at offset {start}, "
                f"only {cursor.remaining} remain."
            )
        try:
            kind, value = self._read_payload(name, type_name, header, size)
        except UnknownTypeError as exc:
            logger.warning("Keeping property '%s' (%s) as %d raw bytes: %s", name, type_name, size, exc)
            cursor.seek(start)
            subtype = exc.type_name if exc.type_name != type_name else None
            kind, value = PropertyKind.UNKNOWN, RawValue(data=cursor.read_bytes(size), subtype=subtype)

        consumed = cursor.position - start
        if consumed != size:
            raise SizeMismatchError(
                f"Property '{name}' ({type_name}) declared {size} payload bytes but decoded {consumed}."
            )
        return Property(name=name, kind=kind, type_name=type_name, value=value, index=index)

    def _read_type_header(self, type_name: str) -> Tuple[str, ...]:
        cursor = self._cursor
        if type_name in ("ByteProperty", "EnumProperty", "ArrayProperty", "SetProperty"):
            return (cursor.read_string(),)
        if type_name == "MapProperty":
            return (cursor.read_string(), cursor.read_string())
        if type_name == "StructProperty":
            struct_type = cursor.read_string()
            cursor.read_guid()
            return (struct_type,)
        return ()

    def _skip_guid(self) -> None:
        if self._cursor.read_u8():
            self._cursor.read_guid()

    def _read_payload(
        self, name: str, type_name: str, header: Tuple[str, ...], size: int
    ) -> Tuple[PropertyKind, PropertyValue]:
        if type_name == "StructProperty":
            # The record size is known, so fixed shapes can be told apart by width.
            return PropertyKind.STRUCT, self._read_struct_body(header[0], size)
        reader = self._payload_readers.get(type_name)
        if reader is not None:
            return reader(name, header)
        element = self._read_element(type_name, name)
        return element.kind, element.value

    def _read_byte(self, name: str, header: Tuple[str, ...]) -> Tuple[PropertyKind, PropertyValue]:
        enum_type = header[0]
        if enum_type == NONE_SENTINEL:
            return PropertyKind.BYTE, self._cursor.read_u8()
        return PropertyKind.ENUM, EnumValue(enum_type=enum_type, member=self._cursor.read_string())

    def _read_enum(self, name: str, header: Tuple[str, ...]) -> Tuple[PropertyKind, PropertyValue]:
        return PropertyKind.ENUM, EnumValue(enum_type=header[0], member=self._cursor.read_string())

    def _read_soft_object(self) -> str:
        path = self._cursor.read_string()
        sub_path = self._cursor.read_string()
        return f"{path}:{sub_path}" if sub_path else path

    def _read_count(self) -> int:
        offset = self._cursor.position
        count = self._cursor.read_i32()
        if count < 0 or count > self._cursor.remaining:
            raise MalformedLengthError(f"Element count {count} at offset {offset} is impossible here.")
        return count

    def _read_array(self, name: str, header: Tuple[str, ...]) -> Tuple[PropertyKind, PropertyValue]:
        inner_type = header[0]
        count = self._read_count()
        if inner_type == "StructProperty":
            items = self._read_struct_elements(count)
        else:
            items = tuple(self._read_element(inner_type, name) for _ in range(count))
        return PropertyKind.ARRAY, ArrayValue(inner_type=inner_type, items=items)

    def _read_set(self, name: str, header: Tuple[str, ...]) -> Tuple[PropertyKind, PropertyValue]:
        inner_type = header[0]
        removed = self._read_count()
        for _ in range(removed):
            self._read_element(inner_type, name)
        if removed:
            logger.debug("Set '%s' lists %d removed elements; dropping them.", name, removed)
        count = self._read_count()
        items = tuple(self._read_element(inner_type, name) for _ in range(count))
        return PropertyKind.SET, ArrayValue(inner_type=inner_type, items=items)

    def _read_map(self, name: str, header: Tuple[str, ...]) -> Tuple[PropertyKind, PropertyValue]:
        key_type, value_type = header
        removed_keys = tuple(self._read_element(key_type, name) for _ in range(self._read_count()))
        entries = tuple(
            (self._read_element(key_type, name), self._read_element(value_type, name))
            for _ in range(self._read_count())
        )
        return PropertyKind.MAP, MapValue(
            key_type=key_type,
            value_type=value_type,
            entries=entries,
            removed_keys=removed_keys,
        )

    def _read_struct_elements(self, count: int) -> Tuple[Property, ...]:
        """Read an array of structs: one shared element header, then the bodies."""
        cursor = self._cursor
        element_name = cursor.read_string()
        element_type = cursor.read_string()
        size = cursor.read_u32()
        cursor.read_u32()
        if element_type != "StructProperty":
            raise UnknownTypeError(element_type)
        struct_type = cursor.read_string()
        cursor.read_guid()
        self._skip_guid()
        start = cursor.position
        if size > cursor.remaining:
            raise MalformedLengthError(
                f"Struct array '{element_name}' declares {size} bytes, only {cursor.remaining} remain."
            )
        element_size = size // count if count and size % count == 0 else None
        items = tuple(
            Property(
                name=element_name,
                kind=PropertyKind.STRUCT,
                type_name=element_type,
                value=self._read_struct_body(struct_type, element_size),
            )
            for _ in range(count)
        )
        consumed = cursor.position - start
        if consumed != size:
            raise SizeMismatchError(
                f"Struct array '{element_name}' ({struct_type}) declared {size} bytes but decoded {consumed}."
            )
        return items

    def _read_struct_body(self, struct_type: str, size: int | None) -> StructValue:
        readers = _FIXED_STRUCTS.get(struct_type)
        if readers is not None and size in readers:
            return StructValue(struct_type=struct_type, body=readers[size](self._cursor))
        return StructValue(struct_type=struct_type, body=self.read_property_list())

    def _read_element(self, type_name: str, name: str) -> Property:
        """Read one bare value of a container (or a simple record payload)."""
        cursor = self._cursor
        value: PropertyValue
        if type_name in _SCALAR_TYPES:
            kind, layout = _SCALAR_TYPES[type_name]
            value = cursor.read_struct(layout)[0]
        elif type_name == "BoolProperty":
            kind, value = PropertyKind.BOOL, cursor.read_bool()
        elif type_name in _STRING_TYPES:
            kind, value = PropertyKind.STR, cursor.read_string()
        elif type_name == "ByteProperty":
            kind, value = PropertyKind.BYTE, cursor.read_u8()
        elif type_name == "EnumProperty":
            kind, value = PropertyKind.ENUM, EnumValue(enum_type=None, member=cursor.read_string())
        elif type_name in _OBJECT_TYPES:
            kind, value = PropertyKind.OBJECT, cursor.read_string()
        elif type_name == "SoftObjectProperty":
            kind, value = PropertyKind.SOFT_OBJECT, self._read_soft_object()
        elif type_name == "StructProperty":
            # Set and map entries carry no struct type. Natively serialized
            # bodies (Guid, Vector keys) cannot be told apart, so the record goes raw.
            if not self._starts_tagged_list():
                raise UnknownTypeError(type_name)
            kind, value = PropertyKind.STRUCT, self._read_struct_body("", None)
        else:
            raise UnknownTypeError(type_name)
        return Property(name=name, kind=kind, type_name=type_name, value=value)

    def _starts_tagged_list(self) -> bool:
        """Peek whether the cursor sits on a terminator or a record with a known type tag."""
        cursor = self._cursor
        start = cursor.position
        try:
            name = cursor.read_string()
            if name == NONE_SENTINEL:
                return True
            return bool(name) and cursor.read_string() in _TAGGED_TYPES
        except ArchiveError:
            return False
        finally:
            cursor.seek(start)
