"""Net table: id -> name records following a total-size field."""
import logging

from ..pcb.models import Net
from .cipher import decode_text
from .errors import NetTableError
from .header import Header
from .reader import ByteReader

log = logging.getLogger(__name__)

NET_RECORD_HEADER = 8


def parse_net_table(reader: ByteReader, header: Header) -> dict[int, Net]:
    """
    Decode the net table.

    A zero offset field, or an offset at or past the end of the file, means
    the table is absent and an empty map is returned.

    Raises:
        NetTableError: a zero-size record, or a record that runs past the
            file or the table's declared size.
    """
    start = header.net_offset
    if not header.has_net_table or start >= len(reader):
        return {}

    if not reader.has(start, 4):
        raise NetTableError(f"net table size field at {start:#x} is truncated")
    total = reader.u32(start)
    pos = start + 4
    end = pos + total

    nets: dict[int, Net] = {}
    while pos < end:
        if not reader.has(pos, NET_RECORD_HEADER):
            raise NetTableError(f"net record header at {pos:#x} is truncated")
        record_size = reader.u32(pos)
        net_id = reader.u32(pos + 4)

        if record_size < NET_RECORD_HEADER:
            if record_size == 0:
                raise NetTableError(f"zero-size net record at {pos:#x}")
            log.warning("Skipping net record at %#x with invalid size %d", pos, record_size)
            pos += record_size
            continue

        if pos + record_size > end or not reader.has(pos, record_size):
            raise NetTableError(
                f"net record {net_id} at {pos:#x} of {record_size} bytes overruns the table"
            )

        name = decode_text(reader.bytes_at(pos + NET_RECORD_HEADER, record_size - NET_RECORD_HEADER))
        nets[net_id] = Net(net_id, name)
        pos += record_size

    return nets
