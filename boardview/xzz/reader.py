"""Bounds-checked little-endian reads over an immutable byte buffer."""
import struct

from .errors import TruncatedDataError

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_U32 = struct.Struct("<I")
_I32 = struct.Struct("<i")


class ByteReader:
    """Random-access reader over a bytes buffer.

    Every read takes an absolute offset and raises TruncatedDataError
    instead of returning short data.
    """

    def __init__(self, data: bytes | bytearray | memoryview):
        self._data = bytes(data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def data(self) -> bytes:
        return self._data

    def has(self, offset: int, size: int) -> bool:
        """Return True if `size` bytes starting at `offset` are inside the buffer."""
        return offset >= 0 and size >= 0 and offset + size <= len(self._data)

    def require(self, offset: int, size: int) -> None:
        if not self.has(offset, size):
            raise TruncatedDataError(offset, size, len(self._data))

    def u8(self, offset: int) -> int:
        self.require(offset, 1)
        return _U8.unpack_from(self._data, offset)[0]

    def u16(self, offset: int) -> int:
        self.require(offset, 2)
        return _U16.unpack_from(self._data, offset)[0]

    def u32(self, offset: int) -> int:
        self.require(offset, 4)
        return _U32.unpack_from(self._data, offset)[0]

    def i32(self, offset: int) -> int:
        self.require(offset, 4)
        return _I32.unpack_from(self._data, offset)[0]

    def bytes_at(self, offset: int, size: int) -> bytes:
        self.require(offset, size)
        return self._data[offset:offset + size]

    def is_zero(self, offset: int, size: int) -> bool:
        """True if the range is in bounds and every byte in it is zero."""
        if not self.has(offset, size):
            return False
        return not any(self._data[offset:offset + size])

    def find(self, needle: bytes, start: int = 0) -> int:
        return self._data.find(needle, start)

    def slice(self, offset: int, size: int) -> "ByteReader":
        """Return a new reader over a bounds-checked sub-range."""
        return ByteReader(self.bytes_at(offset, size))
