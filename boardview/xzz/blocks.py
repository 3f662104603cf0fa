"""Main block region: tagged, length-prefixed element records."""
import logging
from typing import Callable, Union

from ..pcb.board import Board
from ..pcb.models import Arc, Component, TextLabel, Trace, Via
from .cipher import decode_text
from .component import parse_component
from .constants import (
    ANGLE_SCALE,
    ARC_RECORD_SIZE,
    BLOCK_ARC,
    BLOCK_COMPONENT,
    BLOCK_TEST_PAD,
    BLOCK_TEXT,
    BLOCK_TRACE,
    BLOCK_UNKNOWN_03,
    BLOCK_VIA,
    COORD_SCALE,
    MAX_VIA_TEXT_LENGTH,
    TEXT_RECORD_SIZE,
    TRACE_RECORD_SIZE,
    VIA_RECORD_SIZE,
)
from .context import ParseContext
from .errors import BlockOverflowError, RecordError, TruncatedDataError
from .header import Header
from .reader import ByteReader

log = logging.getLogger(__name__)

BLOCK_HEADER_SIZE = 5
PADDING_SIZE = 4

BoardElement = Union[Arc, Via, Trace, TextLabel, Component]


def _coord(raw: int) -> float:
    return raw / COORD_SCALE


def _require_size(payload: ByteReader, minimum: int, kind: str) -> None:
    if len(payload) < minimum:
        raise RecordError(f"{kind} record of {len(payload)} bytes, need {minimum}")


def parse_arc(payload: ByteReader) -> Arc:
    """Arc: layer, centre, radius, start/end angle, thickness, net."""
    _require_size(payload, ARC_RECORD_SIZE, "arc")
    return Arc(
        layer=payload.u32(0),
        cx=_coord(payload.i32(4)),
        cy=_coord(payload.i32(8)),
        radius=_coord(payload.i32(12)),
        start_angle=payload.i32(16) / ANGLE_SCALE,
        end_angle=payload.i32(20) / ANGLE_SCALE,
        thickness=_coord(payload.i32(24)),
        net_id=payload.i32(28),
    )


def parse_via(payload: ByteReader) -> Via:
    """
    Via or test pad: position, two pad radii, layer span, net, optional text.

    A text length that overruns the record or is implausibly large is
    treated as no text.
    """
    _require_size(payload, VIA_RECORD_SIZE, "via")
    text = ""
    text_len = payload.u32(28)
    if 0 < text_len <= MAX_VIA_TEXT_LENGTH and VIA_RECORD_SIZE + text_len <= len(payload):
        text = decode_text(payload.bytes_at(VIA_RECORD_SIZE, text_len))
    elif text_len:
        log.warning("Ignoring via text of declared length %d in %d-byte record", text_len, len(payload))

    return Via(
        x=_coord(payload.i32(0)),
        y=_coord(payload.i32(4)),
        pad_radius_a=_coord(payload.i32(8)),
        pad_radius_b=_coord(payload.i32(12)),
        layer_a=payload.u32(16),
        layer_b=payload.u32(20),
        net_id=payload.u32(24),
        text=text,
    )


def parse_trace(payload: ByteReader) -> Trace:
    _require_size(payload, TRACE_RECORD_SIZE, "trace")
    return Trace(
        layer=payload.u32(0),
        x1=_coord(payload.i32(4)),
        y1=_coord(payload.i32(8)),
        x2=_coord(payload.i32(12)),
        y2=_coord(payload.i32(16)),
        width=_coord(payload.i32(20)),
        net_id=payload.u32(24),
    )


def parse_text(payload: ByteReader) -> TextLabel:
    """Standalone label: layer, position, font size, scale, text."""
    _require_size(payload, TEXT_RECORD_SIZE, "text")
    text_len = payload.u32(24)
    if TEXT_RECORD_SIZE + text_len > len(payload):
        raise RecordError(f"text of {text_len} bytes overruns {len(payload)}-byte record")

    return TextLabel(
        text=decode_text(payload.bytes_at(TEXT_RECORD_SIZE, text_len)),
        x=_coord(payload.i32(4)),
        y=_coord(payload.i32(8)),
        layer=payload.u32(0),
        font_size=_coord(payload.u32(12)),  # Board units, like positions
        scale=float(payload.u32(16)),
    )


def _add_element(board: Board, element: BoardElement) -> None:
    if isinstance(element, Arc):
        board.arcs.append(element)
    elif isinstance(element, Via):
        board.vias.append(element)
    elif isinstance(element, Trace):
        board.traces.append(element)
    elif isinstance(element, TextLabel):
        board.labels.append(element)
    elif isinstance(element, Component):
        board.components.append(element)
    else:
        raise TypeError(f"unknown element: {element!r}")


Parser = Callable[[ByteReader, ParseContext], BoardElement]

BLOCK_PARSERS: dict[int, Parser] = {
    BLOCK_ARC: lambda payload, ctx: parse_arc(payload),
    BLOCK_VIA: lambda payload, ctx: parse_via(payload),
    BLOCK_TEST_PAD: lambda payload, ctx: parse_via(payload),
    BLOCK_TRACE: lambda payload, ctx: parse_trace(payload),
    BLOCK_TEXT: lambda payload, ctx: parse_text(payload),
    BLOCK_COMPONENT: lambda payload, ctx: parse_component(payload.data, ctx),
}


def iter_blocks(reader: ByteReader, header: Header):
    """
    Yield (offset, tag, payload) for each block in the main region.

    Runs of four zero bytes between blocks are padding. Fewer than five
    bytes left in the region ends the scan.

    Raises:
        BlockOverflowError: a block's payload runs past the region or file.
    """
    pos = header.main_offset
    end = header.main_end
    while pos < end:
        if pos + BLOCK_HEADER_SIZE > end or pos + BLOCK_HEADER_SIZE > len(reader):
            break
        if reader.u32(pos) == 0:
            pos += PADDING_SIZE
            continue

        tag = reader.u8(pos)
        size = reader.u32(pos + 1)
        start = pos + BLOCK_HEADER_SIZE
        if start + size > end or start + size > len(reader):
            raise BlockOverflowError(
                f"block {tag:#04x} at {pos:#x} declares {size} bytes past region end {end:#x}"
            )

        yield pos, tag, reader.slice(start, size)
        pos = start + size


def parse_main_blocks(ctx: ParseContext, header: Header, board: Board) -> int:
    """
    Decode every block of the main region into board elements, in order.

    Element-local problems drop only that element. Returns the number of
    elements added.
    """
    added = 0
    for offset, tag, payload in iter_blocks(ctx.reader, header):
        if tag == BLOCK_UNKNOWN_03 or tag not in BLOCK_PARSERS:
            log.debug("Skipping block %#04x of %d bytes at %#x", tag, len(payload), offset)
            continue

        try:
            element = BLOCK_PARSERS[tag](payload, ctx)
        except (RecordError, TruncatedDataError) as e:
            log.warning("Dropping block %#04x at %#x: %s", tag, offset, e)
            continue

        _add_element(board, element)
        added += 1
    return added
