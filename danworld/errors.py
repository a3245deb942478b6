"""
Exceptions raised while decoding .dan world files.

Every decode failure is a ValueError subclass, so callers that only care
about "bad file" can catch ValueError.
"""

from typing import Optional


class DanWorldError(ValueError):
    """Base class for all decode failures."""

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f"{message} (at byte {offset})"
        super().__init__(message)
        self.offset = offset


class UnexpectedEnd(DanWorldError):
    """The stream ran out before a required field was complete."""

    def __init__(self, wanted: int, available: int, offset: Optional[int] = None):
        super().__init__(
            f"Unexpected end of data: wanted {wanted} bytes, {available} available",
            offset,
        )
        self.wanted = wanted
        self.available = available


class InvalidText(DanWorldError):
    """Bytes that should hold a string are not valid UTF-8."""


class CorruptHeader(DanWorldError):
    """The magic string at the start of the file is wrong."""


class TruncatedPayload(DanWorldError):
    """An extra value is too short for the view that was requested."""


class UnsupportedVersion(DanWorldError):
    """The file version has no known layout for its version-dependent fields."""

    def __init__(self, version: int):
        super().__init__(f"Unsupported version: {version}")
        self.version = version


class TrailingData(DanWorldError):
    """Bytes remain after the extra table in strict mode."""
