"""One-shot loading of save archives."""
from __future__ import annotations

import logging
from pathlib import Path

from suprasave.domain.archive import SaveArchive

from .cursor import BinaryCursor
from .decoder import PropertyDecoder
from .errors import ArchiveError, LoadFailedError
from .header import read_header

logger = logging.getLogger(__name__)


def load_save(data: bytes) -> SaveArchive:
    """Decode a complete GVAS buffer or raise LoadFailedError.

    No partial tree is returned: once any record fails to decode the cursor
    position can no longer be trusted.
    """
    cursor = BinaryCursor(data)
    try:
        header = read_header(cursor)
        properties = PropertyDecoder(cursor).read_property_list()
    except ArchiveError as exc:
        logger.debug("Decode failed at offset %d: %s", cursor.position, exc)
        raise LoadFailedError(exc) from exc

    if cursor.remaining:
        logger.debug("%d bytes follow the top-level terminator.", cursor.remaining)
    logger.info(
        "Decoded %d top-level properties from %s (engine %s).",
        len(properties),
        header.save_game_class,
        header.engine_version,
    )
    return SaveArchive(header=header, properties=properties, trailing_bytes=cursor.remaining)


def load_save_file(path: Path | str) -> SaveArchive:
    """Read a save file from disk and decode it."""
    file_path = Path(path)
    try:
        data = file_path.read_bytes()
    except OSError as exc:
        raise LoadFailedError(exc) from exc
    return load_save(data)
