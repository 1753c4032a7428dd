"""GVAS header reader.

Layout::

    magic                 4 bytes  b"GVAS"
    save_game_version     i32      1, 2 or 3
    package_version       i32      (+ i32 UE5 package version when save_game_version >= 3)
    engine_version        u16 major, u16 minor, u16 patch, u32 changelist, string branch
    custom versions       save_game_version >= 2 only:
                          i32 format (2 or 3), i32 count,
                          count x (16-byte guid, i32 version[, string friendly name if format 2])
    save_game_class       string
"""
from __future__ import annotations

import struct

from suprasave.domain.archive import CustomVersion, EngineVersion, SaveHeader

from .cursor import BinaryCursor
from .errors import MalformedLengthError, UnsupportedVersionError

GVAS_MAGIC = b"GVAS"
SUPPORTED_SAVE_GAME_VERSIONS = frozenset({1, 2, 3})
SUPPORTED_CUSTOM_VERSION_FORMATS = frozenset({2, 3})

_ENGINE_NUMBERS = struct.Struct("<HHHI")
_CUSTOM_VERSIONS_SINCE = 2
_UE5_PACKAGE_VERSION_SINCE = 3


def read_header(cursor: BinaryCursor) -> SaveHeader:
    """Read and validate the header, leaving the cursor on the first property."""
    magic = cursor.read_bytes(len(GVAS_MAGIC))
    if magic != GVAS_MAGIC:
        raise UnsupportedVersionError(f"Unrecognized magic {magic!r}; expected {GVAS_MAGIC!r}.")

    save_game_version = cursor.read_i32()
    if save_game_version not in SUPPORTED_SAVE_GAME_VERSIONS:
        raise UnsupportedVersionError(f"Unsupported save game version {save_game_version}.")

    package_version = cursor.read_i32()
    package_version_ue5 = None
    if save_game_version >= _UE5_PACKAGE_VERSION_SINCE:
        package_version_ue5 = cursor.read_i32()

    major, minor, patch, changelist = cursor.read_struct(_ENGINE_NUMBERS)
    engine_version = EngineVersion(
        major=major,
        minor=minor,
        patch=patch,
        changelist=changelist,
        branch=cursor.read_string(),
    )

    custom_version_format = None
    custom_versions: list[CustomVersion] = []
    if save_game_version >= _CUSTOM_VERSIONS_SINCE:
        custom_version_format = cursor.read_i32()
        if custom_version_format not in SUPPORTED_CUSTOM_VERSION_FORMATS:
            raise UnsupportedVersionError(f"Unsupported custom version format {custom_version_format}.")
        count = cursor.read_i32()
        if count < 0:
            raise MalformedLengthError(f"Negative custom version count {count}.")
        for _ in range(count):
            key = cursor.read_guid()
            version = cursor.read_i32()
            friendly_name = cursor.read_string() if custom_version_format == 2 else None
            custom_versions.append(CustomVersion(key=key, version=version, friendly_name=friendly_name))

    return SaveHeader(
        save_game_version=save_game_version,
        package_version=package_version,
        package_version_ue5=package_version_ue5,
        engine_version=engine_version,
        custom_version_format=custom_version_format,
        custom_versions=tuple(custom_versions),
        save_game_class=cursor.read_string(),
    )
