"""
Binary stream reader for WebAssembly containers.

This module provides a BinaryStream class that reads little-endian
primitives and LEB128 integers from an in-memory buffer. Every read is
bounds-checked: running past the end of the buffer raises
MalformedEncodingError instead of returning short data.
"""

import struct
from typing import Union

from ..errors import MalformedEncodingError

# Widest LEB128 value accepted, in bits
MAX_LEB128_BITS = 64


class BinaryStream:
    """
    Binary stream reader over a bytes-like buffer.

    The stream never copies the buffer; slices handed out by
    read_view() alias the original data.

    Attributes:
        position: Current read offset from the start of the buffer
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview]):
        """
        Initialize a BinaryStream.

        Args:
            data: The raw buffer to read from
        """
        self._data = memoryview(data)
        self._position = 0

    # ========== Position ==========

    @property
    def position(self) -> int:
        """Get current stream position."""
        return self._position

    @property
    def remaining(self) -> int:
        """Number of bytes left to read."""
        return len(self._data) - self._position

    def is_empty(self) -> bool:
        return self._position >= len(self._data)

    # ========== Primitive Readers ==========

    def read_view(self, count: int) -> memoryview:
        """Read a slice of the buffer without copying it."""
        if count < 0 or count > self.remaining:
            raise MalformedEncodingError(
                f"Unexpected end of data: need {count} bytes at 0x{self._position:x}, "
                f"{self.remaining} available"
            )
        view = self._data[self._position:self._position + count]
        self._position += count
        return view

    def read_byte(self) -> int:
        """Read an unsigned byte."""
        return self.read_view(1)[0]

    def read_uint32(self) -> int:
        """Read an unsigned 32-bit integer."""
        return struct.unpack('<I', self.read_view(4))[0]

    # ========== Variable-length Readers ==========

    def read_uleb128(self) -> int:
        """Read an unsigned LEB128 encoded integer."""
        result = 0
        shift = 0
        while True:
            b = self.read_byte()
            if shift >= MAX_LEB128_BITS or (shift == 63 and (b & 0x7F) > 1):
                raise MalformedEncodingError(
                    f"Unsigned LEB128 value at 0x{self._position - 1:x} exceeds 64 bits"
                )
            result |= (b & 0x7F) << shift
            if (b & 0x80) == 0:
                break
            shift += 7
        return result

    # ========== String Readers ==========

    def read_string(self, length: int) -> str:
        """Read a fixed-length UTF-8 string."""
        start = self._position
        raw = self.read_view(length)
        try:
            return str(raw, 'utf-8')
        except UnicodeDecodeError as e:
            raise MalformedEncodingError(f"Invalid UTF-8 string at 0x{start:x}: {e}") from e

    def read_name(self) -> str:
        """Read a LEB128 length-prefixed UTF-8 name."""
        return self.read_string(self.read_uleb128())

    def sub_stream(self, count: int) -> 'BinaryStream':
        """Split off the next count bytes as an independent stream."""
        return BinaryStream(self.read_view(count))
