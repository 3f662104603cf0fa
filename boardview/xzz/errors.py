"""Exceptions raised while decoding XZZ board files."""


class BoardLoadError(Exception):
    """A failure that aborts the whole load. No board is produced."""


class SignatureError(BoardLoadError):
    """The file does not start with the XZZ signature, masked or not."""


class HeaderError(BoardLoadError):
    """The header is truncated or declares a region outside the file."""


class BlockOverflowError(BoardLoadError):
    """A main-region block declares a payload past the region or file end."""


class NetTableError(BoardLoadError):
    """The net table is corrupt in a way that cannot be bounded."""


class TruncatedDataError(BoardLoadError):
    """A read went past the end of the buffer."""

    def __init__(self, offset: int, size: int, length: int):
        super().__init__(
            f"read of {size} bytes at offset {offset:#x} exceeds buffer of {length} bytes"
        )
        self.offset = offset
        self.size = size
        self.length = length


class RecordError(ValueError):
    """A single element record is malformed; only that element is dropped."""
