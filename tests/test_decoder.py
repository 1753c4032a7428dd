from __future__ import annotations

import struct
import uuid

import pytest

from suprasave.archive.cursor import BinaryCursor
from suprasave.archive.decoder import MAX_STRUCT_DEPTH, PropertyDecoder
from suprasave.archive.errors import MalformedLengthError, OutOfBoundsError, SizeMismatchError
from suprasave.domain.properties import (
    ArrayValue,
    EnumValue,
    MapValue,
    PropertyKind,
    RawValue,
    StructValue,
    Ticks,
    Transform,
    Vector,
)
from tests.helpers import gvas_builder as gb


def _decode(*records: bytes):
    cursor = BinaryCursor(gb.property_list(*records))
    properties = PropertyDecoder(cursor).read_property_list()
    assert cursor.remaining == 0
    return properties


def test_scalar_properties_decode_in_order() -> None:
    props = _decode(
        gb.int_prop("Coins", 442),
        gb.float_prop("Health", 2.5),
        gb.double_prop("PlayTime", 1234.5),
        gb.bool_prop("HasDoubleJump", True),
        gb.str_prop("SlotName", "Slot 1"),
        gb.name_prop("LastMap", "Map"),
    )

    assert [(p.name, p.kind) for p in props] == [
        ("Coins", PropertyKind.INT),
        ("Health", PropertyKind.FLOAT),
        ("PlayTime", PropertyKind.FLOAT),
        ("HasDoubleJump", PropertyKind.BOOL),
        ("SlotName", PropertyKind.STR),
        ("LastMap", PropertyKind.STR),
    ]
    assert [p.value for p in props] == [442, 2.5, 1234.5, True, "Slot 1", "Map"]
    assert props[0].type_name == "IntProperty"


def test_terminator_is_consumed_and_not_emitted() -> None:
    props = _decode()
    assert props == ()


def test_byte_property_without_enum_is_raw_byte() -> None:
    (prop,) = _decode(gb.byte_prop("PlayerArea", 3))
    assert prop.kind is PropertyKind.BYTE
    assert prop.value == 3


def test_byte_property_with_enum_names_member() -> None:
    (prop,) = _decode(gb.enum_byte_prop("Difficulty", "EDifficulty", "EDifficulty::Hard"))
    assert prop.kind is PropertyKind.ENUM
    assert prop.value == EnumValue(enum_type="EDifficulty", member="EDifficulty::Hard")


def test_enum_property() -> None:
    (prop,) = _decode(gb.enum_prop("Mode", "EGameMode", "EGameMode::Story"))
    assert prop.kind is PropertyKind.ENUM
    assert prop.value.member == "EGameMode::Story"


def test_object_and_soft_object_paths() -> None:
    props = _decode(
        gb.object_prop("LastCheckpoint", "/Game/Maps/Map.Map:PersistentLevel.Checkpoint_3"),
        gb.soft_object_prop("Asset", "/Game/Items/Sword.Sword"),
        gb.soft_object_prop("Actor", "/Game/Maps/Map.Map", "PersistentLevel.Chest_2"),
    )

    assert props[0].kind is PropertyKind.OBJECT
    assert props[0].value == "/Game/Maps/Map.Map:PersistentLevel.Checkpoint_3"
    assert props[1].kind is PropertyKind.SOFT_OBJECT
    assert props[1].value == "/Game/Items/Sword.Sword"
    assert props[2].value == "/Game/Maps/Map.Map:PersistentLevel.Chest_2"


def test_object_array_is_homogeneous() -> None:
    (prop,) = _decode(gb.object_array("ThingsToRemove", ["/Game/A.A:PersistentLevel.X1", "None"]))

    assert prop.kind is PropertyKind.ARRAY
    assert isinstance(prop.value, ArrayValue)
    assert prop.value.inner_type == "ObjectProperty"
    assert [item.value for item in prop.value] == ["/Game/A.A:PersistentLevel.X1", "None"]
    assert {item.kind for item in prop.value} == {PropertyKind.OBJECT}


def test_int_array() -> None:
    (prop,) = _decode(gb.int_array("Scores", [1, -2, 3]))
    assert [item.value for item in prop.value] == [1, -2, 3]


def test_array_of_vectors_uses_element_width() -> None:
    (prop,) = _decode(gb.struct_array("Path", "Vector", [gb.vector_body(1, 2, 3), gb.vector_body(4, 5, 6)]))

    assert prop.value.inner_type == "StructProperty"
    assert [item.value.body for item in prop.value] == [Vector(1.0, 2.0, 3.0), Vector(4.0, 5.0, 6.0)]


def test_array_of_tagged_structs() -> None:
    bodies = [
        gb.property_list(gb.int_prop("Count", 1), gb.str_prop("Id", "a")),
        gb.property_list(gb.int_prop("Count", 2), gb.str_prop("Id", "b")),
    ]
    (prop,) = _decode(gb.struct_array("Inventory", "InventoryStack", bodies))

    counts = [item.value.field("Count").value for item in prop.value]
    assert counts == [1, 2]
    assert prop.value.items[0].value.struct_type == "InventoryStack"


def test_set_property_decodes_like_array() -> None:
    (prop,) = _decode(gb.set_prop("Unlocked", "NameProperty", [gb.fstring("A"), gb.fstring("B")]))
    assert prop.kind is PropertyKind.SET
    assert [item.value for item in prop.value] == ["A", "B"]


def test_map_property_pairs() -> None:
    entries = [
        (gb.fstring("Coins"), struct.pack("<i", 10)),
        (gb.fstring("Bones"), struct.pack("<i", 3)),
    ]
    (prop,) = _decode(gb.map_prop("Counters", "NameProperty", "IntProperty", entries))

    assert prop.kind is PropertyKind.MAP
    assert isinstance(prop.value, MapValue)
    assert [(k.value, v.value) for k, v in prop.value.entries] == [("Coins", 10), ("Bones", 3)]


def test_map_with_struct_values_decodes_property_lists() -> None:
    entries = [(struct.pack("<i", 7), gb.property_list(gb.bool_prop("Opened", True)))]
    (prop,) = _decode(gb.map_prop("Chests", "IntProperty", "StructProperty", entries))

    key, value = prop.value.entries[0]
    assert key.value == 7
    assert value.value.field("Opened").value is True


def test_set_drops_removed_elements() -> None:
    props = _decode(
        gb.set_prop("Unlocked", "NameProperty", [gb.fstring("A"), gb.fstring("B")], removed=[gb.fstring("Old")]),
        gb.int_prop("After", 1),
    )
    assert [item.value for item in props[0].value] == ["A", "B"]
    assert props[1].value == 1


def test_map_keeps_removed_keys() -> None:
    (prop,) = _decode(
        gb.map_prop(
            "Counters",
            "NameProperty",
            "IntProperty",
            [(gb.fstring("Coins"), struct.pack("<i", 10))],
            removed_keys=[gb.fstring("Stale"), gb.fstring("Gone")],
        )
    )
    assert [key.value for key in prop.value.removed_keys] == ["Stale", "Gone"]
    assert [(k.value, v.value) for k, v in prop.value.entries] == [("Coins", 10)]


def test_map_with_native_struct_keys_is_kept_raw() -> None:
    guid = uuid.UUID("12345678-1234-5678-1234-567812345678")
    chest_states = gb.map_prop("ChestStates", "StructProperty", "IntProperty", [(guid.bytes, struct.pack("<i", 1))])
    props = _decode(gb.int_prop("Before", 1), chest_states, gb.int_prop("After", 2))

    assert [p.name for p in props] == ["Before", "ChestStates", "After"]
    states = props[1]
    assert states.kind is PropertyKind.UNKNOWN
    assert states.type_name == "MapProperty"
    assert states.value.subtype == "StructProperty"
    assert states.value.data == struct.pack("<ii", 0, 1) + guid.bytes + struct.pack("<i", 1)
    assert props[2].value == 2


def test_set_of_native_vectors_is_kept_raw() -> None:
    props = _decode(
        gb.set_prop("Visited", "StructProperty", [gb.vector_body(1.0, 2.0, 3.0)]),
        gb.int_prop("After", 2),
    )
    assert props[0].kind is PropertyKind.UNKNOWN
    assert props[1].value == 2


def test_vector_struct() -> None:
    (prop,) = _decode(gb.struct_prop("Player Position", "Vector", gb.vector_body(1.0, 2.0, 3.0)))
    assert prop.kind is PropertyKind.STRUCT
    assert prop.value == StructValue(struct_type="Vector", body=Vector(1.0, 2.0, 3.0))


def test_double_precision_vector_struct() -> None:
    (prop,) = _decode(gb.struct_prop("Location", "Vector", gb.vector_body_double(1.25, 2.5, -3.0)))
    assert prop.value.body == Vector(1.25, 2.5, -3.0)


def test_packed_transform_order_is_rotation_translation_scale() -> None:
    body = gb.transform_body((10.0, 20.0, 0.0), rotation=(0.0, 0.0, 0.5, 0.5), scale=(2.0, 2.0, 2.0))
    (prop,) = _decode(gb.struct_prop("Player Position", "Transform", body))

    transform = prop.value.body
    assert isinstance(transform, Transform)
    assert transform.rotation.z == 0.5
    assert transform.translation == Vector(10.0, 20.0, 0.0)
    assert transform.scale == Vector(2.0, 2.0, 2.0)


def test_tagged_transform_falls_back_to_property_list() -> None:
    (prop,) = _decode(gb.struct_prop("Player Position", "Transform", gb.tagged_transform_body((1.0, 2.0, 3.0))))

    translation = prop.value.field("Translation")
    assert translation is not None
    assert translation.value.body == Vector(1.0, 2.0, 3.0)


def test_guid_and_datetime_structs() -> None:
    guid = uuid.UUID("12345678-1234-5678-1234-567812345678")
    props = _decode(
        gb.struct_prop("Id", "Guid", guid.bytes),
        gb.struct_prop("SavedAt", "DateTime", struct.pack("<q", 637000000000000000)),
    )
    assert props[0].value.body == guid
    assert props[1].value.body == Ticks(637000000000000000)


def test_unknown_struct_type_decodes_nested_list() -> None:
    body = gb.property_list(gb.int_prop("Level", 4), gb.struct_prop("Home", "Vector", gb.vector_body(0, 0, 1)))
    (prop,) = _decode(gb.struct_prop("Stats", "PlayerStats", body))

    assert [field.name for field in prop.value.fields] == ["Level", "Home"]
    assert prop.value.field("Home").value.body == Vector(0.0, 0.0, 1.0)


def test_unknown_type_between_records_is_kept_raw() -> None:
    props = _decode(
        gb.int_prop("Before", 1),
        gb.raw_prop("Mystery", "FancyNewProperty", b"\x01\x02\x03\x04\x05"),
        gb.int_prop("After", 2),
    )

    assert [(p.name, p.value) for p in props if p.kind is PropertyKind.INT] == [("Before", 1), ("After", 2)]
    mystery = props[1]
    assert mystery.kind is PropertyKind.UNKNOWN
    assert mystery.type_name == "FancyNewProperty"
    assert mystery.value == RawValue(data=b"\x01\x02\x03\x04\x05")


def test_array_with_unknown_inner_type_is_kept_raw() -> None:
    payload_elements = [b"\xaa\xbb", b"\xcc\xdd"]
    props = _decode(
        gb.array_prop("Texts", "TextProperty", payload_elements),
        gb.int_prop("After", 9),
    )

    texts = props[0]
    assert texts.kind is PropertyKind.UNKNOWN
    assert texts.type_name == "ArrayProperty"
    assert texts.value.subtype == "TextProperty"
    assert texts.value.data == struct.pack("<i", 2) + b"\xaa\xbb\xcc\xdd"
    assert props[1].value == 9


def test_corrupted_declared_size_raises_size_mismatch() -> None:
    with pytest.raises(SizeMismatchError):
        _decode(gb.int_prop("Coins", 5, size=5), gb.int_prop("Other", 1))


def test_bool_with_nonzero_size_raises_size_mismatch() -> None:
    record = bytearray(gb.bool_prop("Flag", True))
    size_offset = len(gb.fstring("Flag")) + len(gb.fstring("BoolProperty"))
    record[size_offset:size_offset + 4] = struct.pack("<I", 1)
    with pytest.raises(SizeMismatchError):
        _decode(bytes(record))


def test_declared_size_beyond_buffer_is_malformed() -> None:
    with pytest.raises(MalformedLengthError):
        _decode(gb.record("Mystery", "FancyNewProperty", b"\x00" * 4, size=1000))


def test_missing_terminator_runs_out_of_bounds() -> None:
    cursor = BinaryCursor(gb.int_prop("Coins", 1))
    with pytest.raises(OutOfBoundsError):
        PropertyDecoder(cursor).read_property_list()


def test_runaway_struct_nesting_is_rejected() -> None:
    body = gb.terminator()
    for level in range(MAX_STRUCT_DEPTH + 1):
        body = gb.property_list(gb.struct_prop(f"Level{level}", "Nested", body))
    cursor = BinaryCursor(body)
    with pytest.raises(MalformedLengthError):
        PropertyDecoder(cursor).read_property_list()


def test_decoding_is_deterministic() -> None:
    data = gb.property_list(
        gb.object_array("ThingsToRemove", ["/Game/A.A:PersistentLevel.X1"]),
        gb.struct_prop("Player Position", "Transform", gb.transform_body((1.0, 2.0, 3.0))),
        gb.raw_prop("Mystery", "FancyNewProperty", b"\x09"),
    )
    first = PropertyDecoder(BinaryCursor(data)).read_property_list()
    second = PropertyDecoder(BinaryCursor(data)).read_property_list()
    assert first == second
