from __future__ import annotations

import struct

from suprasave.archive import load_save
from suprasave.config import ReconcilerConfig
from suprasave.services.flatten_service import flatten_archive
from tests.helpers import gvas_builder as gb


def _flatten(*records: bytes, config: ReconcilerConfig | None = None):
    return flatten_archive(load_save(gb.archive(*records)), config)


def test_scalars_and_structs_become_plain_values() -> None:
    flat = _flatten(
        gb.int_prop("Coins", 442),
        gb.bool_prop("HasDoubleJump", True),
        gb.str_prop("SlotName", "Slot 1"),
        gb.struct_prop("Home", "Vector", gb.vector_body(1.0, 2.0, 3.0)),
    )
    assert flat["Coins"] == 442
    assert flat["HasDoubleJump"] is True
    assert flat["SlotName"] == "Slot 1"
    assert flat["Home"] == {"x": 1.0, "y": 2.0, "z": 3.0}


def test_object_paths_become_keys() -> None:
    flat = _flatten(
        gb.object_prop("LastCheckpoint", "/Game/Maps/Map.Map:PersistentLevel.Checkpoint_3"),
        gb.object_prop("Target", "None"),
    )
    assert flat["LastCheckpoint"] == "Map:Checkpoint_3"
    assert flat["Target"] is None


def test_path_arrays_are_deduplicated_and_counted() -> None:
    flat = _flatten(
        gb.object_array(
            "ThingsToRemove",
            [
                "/Game/Maps/A.A:PersistentLevel.X1",
                "None",
                "/Game/Maps/A.A:PersistentLevel.X2",
                "/Game/Maps/A.A:PersistentLevel.X1",
            ],
        )
    )
    assert flat["ThingsToRemove"] == ["A:X1", "A:X2"]
    assert flat.duplicate_count == 1


def test_capitalization_follows_config() -> None:
    config = ReconcilerConfig(capitalize_instance_fields=("ThingsToActivate",))
    flat = _flatten(
        gb.object_array("ThingsToActivate", ["/Game/Maps/A.A:PersistentLevel.shell2_1957"]),
        config=config,
    )
    assert flat["ThingsToActivate"] == ["A:Shell2_1957"]


def test_maps_struct_arrays_and_unknown_records_are_skipped() -> None:
    flat = _flatten(
        gb.map_prop("Counters", "NameProperty", "IntProperty", [(gb.fstring("Coins"), struct.pack("<i", 1))]),
        gb.struct_array("Path", "Vector", [gb.vector_body(0, 0, 0)]),
        gb.raw_prop("Mystery", "FancyNewProperty", b"\x01"),
        gb.int_array("Scores", [3, 4]),
    )
    assert "Counters" not in flat
    assert "Path" not in flat
    assert "Mystery" not in flat
    assert flat["Scores"] == [3, 4]


def test_repeated_top_level_names_count_as_duplicates() -> None:
    flat = _flatten(gb.int_prop("Coins", 1), gb.int_prop("Coins", 2))
    assert flat["Coins"] == 2
    assert flat.duplicate_count == 1


def test_plain_name_lists_stay_plain() -> None:
    flat = _flatten(
        gb.set_prop("UnlockedSkins", "NameProperty", [gb.fstring("Gold"), gb.fstring("Red")]),
        gb.array_prop("Tags", "StrProperty", [gb.fstring("v1.2"), gb.fstring("a/b")]),
    )
    assert flat["UnlockedSkins"] == ["Gold", "Red"]
    assert flat["Tags"] == ["v1.2", "a/b"]


def test_string_lists_of_object_paths_become_keys() -> None:
    flat = _flatten(
        gb.array_prop("Visited", "StrProperty", [gb.fstring("/Game/Maps/A.A:PersistentLevel.X1")]),
    )
    assert flat["Visited"] == ["A:X1"]
