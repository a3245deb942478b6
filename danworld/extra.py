"""
Named extra values attached to a world.

An extra entry is stored as:
- Key: u8 length + UTF-8
- Length: uint16
- Data: `length` raw bytes

The data is opaque until a caller asks for a typed view. Two views exist,
matching what the exporter can write:

- Position: x, y, z as float64 then yaw, pitch as float32 (32 bytes),
  relative to the minimum corner of the exported region
- String: uint32 length + UTF-8

Views are computed on demand and may fail even though the entry itself
decoded fine.
"""

import struct
from dataclasses import dataclass
from typing import NamedTuple, Tuple

import numpy as np

from danworld.cursor import ByteCursor
from danworld.errors import InvalidText, TruncatedPayload

_POSITION = struct.Struct(">dddff")
_STRING_LENGTH = struct.Struct(">I")


class Position(NamedTuple):
    """Location plus facing, as stored in a position extra."""
    x: float
    y: float
    z: float
    yaw: float
    pitch: float


@dataclass(frozen=True)
class ExtraValue:
    """Raw bytes of one extra entry with typed views over them."""
    data: bytes

    def __len__(self) -> int:
        return len(self.data)

    def as_position(self) -> Position:
        """
        Read the data as a position with yaw and pitch.

        Raises:
            TruncatedPayload: If fewer than 32 bytes are stored
        """
        if len(self.data) < _POSITION.size:
            raise TruncatedPayload(
                f"Position needs {_POSITION.size} bytes, extra holds {len(self.data)}"
            )
        return Position(*_POSITION.unpack_from(self.data))

    def as_vector(self) -> np.ndarray:
        """Position view as a float64 array [x, y, z, yaw, pitch]."""
        return np.array(self.as_position(), dtype=np.float64)

    def as_string(self) -> str:
        """
        Read the data as a uint32-length-prefixed UTF-8 string.

        Raises:
            TruncatedPayload: If the prefix or the text is cut short
            InvalidText: If the text is not valid UTF-8
        """
        if len(self.data) < _STRING_LENGTH.size:
            raise TruncatedPayload(
                f"String length needs {_STRING_LENGTH.size} bytes, extra holds {len(self.data)}"
            )
        length = _STRING_LENGTH.unpack_from(self.data)[0]
        end = _STRING_LENGTH.size + length
        if end > len(self.data):
            raise TruncatedPayload(
                f"String of {length} bytes does not fit in {len(self.data) - _STRING_LENGTH.size} remaining"
            )
        try:
            return self.data[_STRING_LENGTH.size:end].decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidText(f"Invalid UTF-8 in string extra: {e.reason}") from e


def read_extra(cursor: ByteCursor) -> Tuple[str, ExtraValue]:
    """
    Read one (key, value) extra entry.

    Raises:
        UnexpectedEnd: If the entry is cut short
        InvalidText: If the key is not valid UTF-8
    """
    key = cursor.read_string()
    length = cursor.read_u16()
    return key, ExtraValue(cursor.read(length))
