"""Sequential, bounds-checked reader over an immutable byte buffer."""
from __future__ import annotations

import struct
import uuid
from typing import Tuple

from .errors import MalformedLengthError, OutOfBoundsError

_U8 = struct.Struct("<B")
_I32 = struct.Struct("<i")
_U32 = struct.Struct("<I")
_I64 = struct.Struct("<q")
_U64 = struct.Struct("<Q")
_F32 = struct.Struct("<f")
_F64 = struct.Struct("<d")


class BinaryCursor:
    """Reads little-endian primitives and length-prefixed strings in order."""

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = bytes(data)
        self._offset = 0
        self.seek(offset)

    @property
    def position(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def __len__(self) -> int:
        return len(self._data)

    def seek(self, offset: int) -> None:
        """Move to an absolute offset inside the buffer."""
        if not 0 <= offset <= len(self._data):
            raise OutOfBoundsError(f"Offset {offset} outside {len(self._data)}-byte buffer.")
        self._offset = offset

    def advance(self, count: int) -> int:
        """Skip ``count`` bytes and return the offset they started at."""
        if count < 0 or count > self.remaining:
            raise OutOfBoundsError(
                f"Cannot advance {count} bytes at offset {self._offset} in {len(self._data)}-byte buffer."
            )
        start = self._offset
        self._offset += count
        return start

    def read_bytes(self, count: int) -> bytes:
        start = self.advance(count)
        return self._data[start:self._offset]

    def read_struct(self, layout: struct.Struct) -> Tuple:
        start = self.advance(layout.size)
        return layout.unpack_from(self._data, start)

    def read_u8(self) -> int:
        return self.read_struct(_U8)[0]

    def read_i32(self) -> int:
        return self.read_struct(_I32)[0]

    def read_u32(self) -> int:
        return self.read_struct(_U32)[0]

    def read_i64(self) -> int:
        return self.read_struct(_I64)[0]

    def read_u64(self) -> int:
        return self.read_struct(_U64)[0]

    def read_f32(self) -> float:
        return self.read_struct(_F32)[0]

    def read_f64(self) -> float:
        return self.read_struct(_F64)[0]

    def read_bool(self) -> bool:
        return self.read_u8() != 0

    def read_guid(self) -> uuid.UUID:
        return uuid.UUID(bytes=self.read_bytes(16))

    def read_string(self) -> str:
        """Read an ``i32`` length-prefixed, NUL-terminated string.

        A positive length counts single-byte units, a negative one counts
        UTF-16 units; both include the terminator, which is not returned.
        """
        length_offset = self._offset
        length = self.read_i32()
        if length == 0:
            return ""
        wide = length < 0
        byte_count = -length * 2 if wide else length
        if byte_count > self.remaining:
            raise MalformedLengthError(
                f"String length {length} at offset {length_offset} exceeds the {self.remaining} remaining bytes."
            )
        raw = self.read_bytes(byte_count)
        terminator = b"\x00\x00" if wide else b"\x00"
        if not raw.endswith(terminator):
            raise MalformedLengthError(f"String at offset {length_offset} is not NUL-terminated.")
        try:
            if wide:
                return raw[:-2].decode("utf-16-le")
            return raw[:-1].decode("latin-1")
        except UnicodeDecodeError as exc:
            raise MalformedLengthError(f"Undecodable string at offset {length_offset}: {exc}") from exc
