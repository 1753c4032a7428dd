"""Archive layer: binary decoding of GVAS save files."""

from .cursor import BinaryCursor
from .decoder import PropertyDecoder
from .errors import (
    ArchiveError,
    LoadFailedError,
    MalformedLengthError,
    OutOfBoundsError,
    SizeMismatchError,
    UnknownTypeError,
    UnsupportedVersionError,
)
from .header import read_header
from .loader import load_save, load_save_file

__all__ = [
    "ArchiveError",
    "BinaryCursor",
    "LoadFailedError",
    "MalformedLengthError",
    "OutOfBoundsError",
    "PropertyDecoder",
    "SizeMismatchError",
    "UnknownTypeError",
    "UnsupportedVersionError",
    "load_save",
    "load_save_file",
    "read_header",
]
