"""Component blocks: DES-protected header plus nested sub-blocks."""
import logging
from typing import Optional

from ..pcb.models import (
    CapsulePad, CirclePad, Component, ComponentType, LineSegment, PadShape,
    Pin, RectanglePad, TextLabel,
)
from .cipher import decode_text, decrypt_blocks
from .constants import (
    ANGLE_SCALE,
    COORD_SCALE,
    EMBEDDED_TEXT_RECORD_SIZE,
    MAX_PIN_OUTLINES,
    OUTLINE_RECT,
    OUTLINE_ROUND,
    PIN_FOOTER_SIZE,
    PIN_OUTLINE_END,
    PIN_RECORD_MIN_SIZE,
    SEGMENT_RECORD_SIZE,
    SUB_END,
    SUB_PIN,
    SUB_SEGMENT,
    SUB_TEXT,
    TEXT_VISIBLE,
)
from .context import ParseContext
from .errors import RecordError
from .reader import ByteReader

log = logging.getLogger(__name__)

# Offsets within the decrypted component header
PART_SIZE_FIELD = 0
ANCHOR_X_FIELD = 8
ANCHOR_Y_FIELD = 12
NAME_LEN_FIELD = 22
NAME_FIELD = 26

DEFAULT_PAD = CirclePad(radius=0.1)
OUTLINE_RECORD_SIZE = 9


def _coord(raw: int) -> float:
    return raw / COORD_SCALE


def parse_segment(sub: ByteReader) -> Optional[LineSegment]:
    if len(sub) < SEGMENT_RECORD_SIZE:
        return None
    return LineSegment(
        layer=sub.u32(0),
        x1=_coord(sub.i32(4)),
        y1=_coord(sub.i32(8)),
        x2=_coord(sub.i32(12)),
        y2=_coord(sub.i32(16)),
        thickness=_coord(sub.u32(20)),
    )


def parse_embedded_text(sub: ByteReader) -> Optional[TextLabel]:
    """Component label; positions are relative to the component anchor."""
    if len(sub) < EMBEDDED_TEXT_RECORD_SIZE:
        return None
    name_len = sub.u32(26)
    if EMBEDDED_TEXT_RECORD_SIZE + name_len > len(sub):
        return None

    return TextLabel(
        text=decode_text(sub.bytes_at(EMBEDDED_TEXT_RECORD_SIZE, name_len)),
        x=_coord(sub.i32(4)),
        y=_coord(sub.i32(8)),
        layer=sub.u32(0),
        font_size=_coord(sub.u32(12)),
        scale=float(sub.u32(16)),
        visible=sub.u8(24) == TEXT_VISIBLE,
        component_relative=True,
        flags=sub.u8(25),
    )


def pad_shape_from_outline(width: float, height: float, outline_type: int) -> Optional[PadShape]:
    """Pad shape for an outline record; None for unknown types."""
    if outline_type == OUTLINE_ROUND:
        if width == height:
            return CirclePad(radius=width / 2)
        return CapsulePad(width=width, height=height)
    if outline_type == OUTLINE_RECT:
        return RectanglePad(width=width, height=height)
    return None


def parse_pin(sub: ByteReader) -> Optional[Pin]:
    """
    Pin: position, pad rotation, name, up to four outline records, net footer.

    Only the first outline record decides the pad shape. The net id sits in
    a fixed footer at the end of the record.
    """
    size = len(sub)
    if size < PIN_RECORD_MIN_SIZE:
        return None

    x = _coord(sub.i32(4))
    y = _coord(sub.i32(8))
    pad_rotation = sub.u32(16) / ANGLE_SCALE
    name_len = sub.u32(20)
    pos = 24
    name = ""
    if pos + name_len <= size:
        name = decode_text(sub.bytes_at(pos, name_len))
    pos += name_len

    shape: Optional[PadShape] = None
    for _ in range(MAX_PIN_OUTLINES):
        if pos + len(PIN_OUTLINE_END) > size:
            break
        if sub.bytes_at(pos, len(PIN_OUTLINE_END)) == PIN_OUTLINE_END:
            break
        if pos + OUTLINE_RECORD_SIZE > size:
            break
        width = _coord(sub.u32(pos))
        height = _coord(sub.u32(pos + 4))
        outline_type = sub.u8(pos + 8)
        pos += OUTLINE_RECORD_SIZE
        if shape is None:
            shape = pad_shape_from_outline(width, height, outline_type) or DEFAULT_PAD

    return Pin(
        name=name,
        x=x,
        y=y,
        shape=shape or DEFAULT_PAD,
        net_id=sub.u32(size - PIN_FOOTER_SIZE),
        pad_rotation=pad_rotation,
    )


def _mount_type(component: Component) -> ComponentType:
    if len(component.pins) > 1 and all(isinstance(p.shape, CirclePad) for p in component.pins):
        return ComponentType.THROUGH_HOLE
    return ComponentType.SMD


def _finish(component: Component, ctx: ParseContext) -> Component:
    if not component.reference:
        if component.footprint:
            component.reference = f"{component.footprint}?"
        else:
            component.reference = f"COMP?{ctx.next_unnamed()}"

    bounds = component.outline_bounds()
    if bounds is not None:
        min_x, min_y, max_x, max_y = bounds
        component.width = max_x - min_x
        component.height = max_y - min_y

    for pin in component.pins:
        pin.component_reference = component.reference
    component.mount_type = _mount_type(component)
    return component


def parse_component(raw: bytes, ctx: ParseContext) -> Component:
    """
    Decrypt and decode one component block.

    A sub-block that overruns the buffer or the declared part size ends
    parsing of this component; what was read so far is kept.

    Raises:
        RecordError: the decrypted header is too short to hold the anchor.
    """
    reader = ByteReader(decrypt_blocks(raw))
    if not reader.has(0, NAME_LEN_FIELD):
        raise RecordError(f"component header truncated ({len(reader)} bytes)")

    part_size = reader.u32(PART_SIZE_FIELD)
    component = Component(
        footprint="",
        x=_coord(reader.i32(ANCHOR_X_FIELD)),
        y=_coord(reader.i32(ANCHOR_Y_FIELD)),
    )

    name_len = 0
    if NAME_FIELD <= len(reader) and NAME_FIELD <= part_size:
        name_len = reader.u32(NAME_LEN_FIELD)
        end = NAME_FIELD + name_len
        if end <= len(reader) and end <= part_size:
            component.footprint = decode_text(reader.bytes_at(NAME_FIELD, name_len))
    pos = NAME_FIELD + name_len

    limit = min(part_size, len(reader))
    while pos < limit:
        subtype = reader.u8(pos)
        pos += 1
        if subtype == SUB_END:
            break
        if pos + 4 > limit:
            log.warning("Component %r truncated at sub-block header %#x", component.footprint, pos)
            break
        size = reader.u32(pos)
        pos += 4
        if pos + size > limit:
            log.warning(
                "Component %r truncated: sub-block %#04x of %d bytes overruns %d",
                component.footprint, subtype, size, limit,
            )
            break

        sub = reader.slice(pos, size)
        pos += size

        if subtype == SUB_SEGMENT:
            segment = parse_segment(sub)
            if segment is not None:
                component.segments.append(segment)
        elif subtype == SUB_TEXT:
            label = parse_embedded_text(sub)
            if label is None:
                continue
            component.labels.append(label)
            if len(component.labels) == 1:
                component.reference = label.text
            elif len(component.labels) == 2:
                component.value = label.text
        elif subtype == SUB_PIN:
            pin = parse_pin(sub)
            if pin is None:
                continue
            pin.diagnostic_reading = ctx.readings.for_pin(
                component.reference, pin.name, ctx.net_name(pin.net_id)
            )
            component.pins.append(pin)
        else:
            log.debug("Skipping component sub-block %#04x", subtype)

    return _finish(component, ctx)
