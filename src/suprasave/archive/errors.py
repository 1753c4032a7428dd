"""Exceptions raised while decoding save archives."""
from __future__ import annotations


class ArchiveError(Exception):
    """Base exception for the archive layer."""


class OutOfBoundsError(ArchiveError):
    """Raised when a read would move past the end of the buffer."""


class MalformedLengthError(ArchiveError):
    """Raised when a declared length is inconsistent with the remaining bytes."""


class UnsupportedVersionError(ArchiveError):
    """Raised when the header magic or version is not recognized."""


class SizeMismatchError(ArchiveError):
    """Raised when a record consumed a different byte count than it declared."""


class UnknownTypeError(ArchiveError):
    """Raised for an unrecognized type tag; the decoder recovers from it."""

    def __init__(self, type_name: str) -> None:
        super().__init__(f"Unrecognized property type '{type_name}'.")
        self.type_name = type_name


class LoadFailedError(Exception):
    """Terminal outcome of a load that could not produce a property tree."""

    USER_MESSAGE = "Could not load file, incompatible format."

    def __init__(self, reason: BaseException) -> None:
        super().__init__(self.USER_MESSAGE)
        self.reason = reason

    @property
    def detail(self) -> str:
        """Diagnostic description of the underlying failure."""
        return f"{type(self.reason).__name__}: {self.reason}"
