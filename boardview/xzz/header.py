"""File header: section offsets and the main block region bounds."""
from dataclasses import dataclass

from .constants import (
    HEADER_BASE,
    IMAGE_OFFSET_FIELD,
    MAIN_REGION_SIZE_FIELD,
    MIN_HEADER_SIZE,
    NET_OFFSET_FIELD,
)
from .errors import HeaderError
from .reader import ByteReader


@dataclass(frozen=True)
class Header:
    image_offset: int  # Absolute; HEADER_BASE when the field is zero
    net_offset: int  # Absolute; HEADER_BASE when the field is zero
    main_offset: int  # First byte of the main block region
    main_size: int  # Declared length of the main block region
    image_field: int = 0  # Raw field values, zero means "section absent"
    net_field: int = 0

    @property
    def main_end(self) -> int:
        return self.main_offset + self.main_size

    @property
    def has_net_table(self) -> bool:
        return self.net_field != 0

    @property
    def has_image_table(self) -> bool:
        return self.image_field != 0


def parse_header(reader: ByteReader) -> Header:
    """
    Read the section offsets from a decrypted buffer.

    Raises:
        HeaderError: the buffer is shorter than the header, or the main
            region is non-empty and runs past the end of the buffer.
    """
    if len(reader) < MIN_HEADER_SIZE:
        raise HeaderError(f"file too small for header: {len(reader)} bytes")

    image_field = reader.u32(IMAGE_OFFSET_FIELD)
    net_field = reader.u32(NET_OFFSET_FIELD)
    main_size = reader.u32(MAIN_REGION_SIZE_FIELD)
    main_offset = MAIN_REGION_SIZE_FIELD + 4

    if main_size > 0 and main_offset + main_size > len(reader):
        raise HeaderError(
            f"main block region of {main_size} bytes at {main_offset:#x} "
            f"exceeds file size {len(reader)}"
        )

    return Header(
        image_offset=image_field + HEADER_BASE,
        net_offset=net_field + HEADER_BASE,
        main_offset=main_offset,
        main_size=main_size,
        image_field=image_field,
        net_field=net_field,
    )
