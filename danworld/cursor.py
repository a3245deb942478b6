"""
Forward-only big-endian reader over an in-memory buffer.

All multi-byte integers in a .dan file are big-endian (the exporter writes
them with a Java DataOutputStream). Strings are prefixed by a single
unsigned length byte and hold UTF-8.
"""

import struct
from typing import Union

from danworld.errors import UnexpectedEnd, InvalidText

_U8 = struct.Struct(">B")
_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")


class ByteCursor:
    """
    Sequential reader that never short-reads.

    Every read either returns exactly the requested number of bytes or
    raises UnexpectedEnd. A failed read leaves the position untouched.

    Example:
        >>> c = ByteCursor(b"\\x08DanWorld\\x01")
        >>> c.read_string()
        'DanWorld'
        >>> c.read_u8()
        1
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        self._data = memoryview(data).cast("B")
        self._pos = 0

    @property
    def position(self) -> int:
        """Offset of the next byte to be read."""
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def at_end(self) -> bool:
        return self._pos >= len(self._data)

    def read(self, n: int) -> bytes:
        """
        Read exactly n raw bytes.

        Raises:
            UnexpectedEnd: If fewer than n bytes are left
        """
        if n < 0:
            raise ValueError(f"Cannot read a negative number of bytes: {n}")
        end = self._pos + n
        if end > len(self._data):
            raise UnexpectedEnd(n, self.remaining, self._pos)
        chunk = self._data[self._pos:end].tobytes()
        self._pos = end
        return chunk

    def _unpack(self, fmt: struct.Struct) -> int:
        return fmt.unpack(self.read(fmt.size))[0]

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_string(self) -> str:
        """
        Read a u8 length followed by that many UTF-8 bytes.

        Raises:
            UnexpectedEnd: If the length byte or the text is cut short
            InvalidText: If the bytes are not valid UTF-8
        """
        start = self._pos
        length = self.read_u8()
        try:
            raw = self.read(length)
        except UnexpectedEnd:
            self._pos = start
            raise
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            self._pos = start
            raise InvalidText(f"Invalid UTF-8 in string: {e.reason}", start) from e
