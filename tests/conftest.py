"""Pytest configuration and a synthetic XZZ file builder."""
import struct

import pytest

from boardview.pcb import Board, CirclePad, Component, Pin, RectanglePad
from boardview.pcb.models import LineSegment
from boardview.xzz import LoadOptions, decode, encrypt_blocks
from boardview.xzz.constants import (
    BLOCK_ARC, BLOCK_COMPONENT, BLOCK_TEXT, BLOCK_TRACE, BLOCK_VIA,
    DIAGNOSTIC_MARKER, DIAGNOSTIC_SKIP, OUTLINE_RECT, OUTLINE_ROUND, SIGNATURE,
    SUB_END, SUB_PIN, SUB_SEGMENT, SUB_TEXT,
)

SCALE = 10000


def _c(value: float) -> int:
    """World unit -> raw integer."""
    return int(round(value * SCALE))


def _u32(value: int) -> bytes:
    return struct.pack("<I", value)


def _i32(value: int) -> bytes:
    return struct.pack("<i", value)


class XZZBuilder:
    """
    Assemble XZZ board files from element descriptions.

    Element methods append a main-region block and return the builder, so
    calls can be chained. Sub-block helpers return raw bytes for use in
    `component_payload`.
    """

    def __init__(self):
        self.blocks: list[bytes] = []
        self.nets: list[tuple[int, str]] = []
        self.diagnostics = b""

    # --- Main region blocks ------------------------------------------------

    def raw_block(self, tag: int, payload: bytes) -> "XZZBuilder":
        self.blocks.append(bytes([tag]) + _u32(len(payload)) + payload)
        return self

    def padding(self) -> "XZZBuilder":
        self.blocks.append(bytes(4))
        return self

    def arc(self, layer, cx, cy, radius, start, end, thickness=0.1, net=0) -> "XZZBuilder":
        payload = (_u32(layer) + _i32(_c(cx)) + _i32(_c(cy)) + _i32(_c(radius))
                   + _i32(_c(start)) + _i32(_c(end)) + _i32(_c(thickness)) + _i32(net))
        return self.raw_block(BLOCK_ARC, payload)

    def via(self, x, y, radius_a=0.3, radius_b=0.3, layer_a=1, layer_b=16, net=0,
            text="", tag=BLOCK_VIA) -> "XZZBuilder":
        raw_text = text.encode("ascii")
        payload = (_i32(_c(x)) + _i32(_c(y)) + _i32(_c(radius_a)) + _i32(_c(radius_b))
                   + _u32(layer_a) + _u32(layer_b) + _u32(net) + _u32(len(raw_text)) + raw_text)
        return self.raw_block(tag, payload)

    def trace(self, layer, x1, y1, x2, y2, width=0.1, net=0) -> "XZZBuilder":
        payload = (_u32(layer) + _i32(_c(x1)) + _i32(_c(y1)) + _i32(_c(x2)) + _i32(_c(y2))
                   + _i32(_c(width)) + _u32(net))
        return self.raw_block(BLOCK_TRACE, payload)

    def outline(self, min_x, min_y, max_x, max_y, layer=28) -> "XZZBuilder":
        """Rectangular board outline made of four traces."""
        self.trace(layer, min_x, min_y, max_x, min_y)
        self.trace(layer, max_x, min_y, max_x, max_y)
        self.trace(layer, max_x, max_y, min_x, max_y)
        return self.trace(layer, min_x, max_y, min_x, min_y)

    def text(self, layer, x, y, text, font_size=1.0, scale=1) -> "XZZBuilder":
        raw_text = text.encode("ascii")
        payload = (_u32(layer) + _i32(_c(x)) + _i32(_c(y)) + _u32(_c(font_size)) + _u32(scale)
                   + bytes(4) + _u32(len(raw_text)) + raw_text)
        return self.raw_block(BLOCK_TEXT, payload)

    def component(self, payload: bytes) -> "XZZBuilder":
        """Encrypt a plain component payload and append it."""
        return self.raw_block(BLOCK_COMPONENT, encrypt_blocks(payload))

    def net(self, net_id: int, name: str) -> "XZZBuilder":
        self.nets.append((net_id, name))
        return self

    # --- Component sub-blocks ----------------------------------------------

    @staticmethod
    def sub_block(subtype: int, body: bytes) -> bytes:
        return bytes([subtype]) + _u32(len(body)) + body

    @staticmethod
    def segment(x1, y1, x2, y2, layer=17, thickness=0.05) -> bytes:
        body = (_u32(layer) + _i32(_c(x1)) + _i32(_c(y1)) + _i32(_c(x2)) + _i32(_c(y2))
                + _u32(_c(thickness)))
        return XZZBuilder.sub_block(SUB_SEGMENT, body)

    @staticmethod
    def box(min_x, min_y, max_x, max_y, layer=17) -> list[bytes]:
        return [
            XZZBuilder.segment(min_x, min_y, max_x, min_y, layer),
            XZZBuilder.segment(max_x, min_y, max_x, max_y, layer),
            XZZBuilder.segment(max_x, max_y, min_x, max_y, layer),
            XZZBuilder.segment(min_x, max_y, min_x, min_y, layer),
        ]

    @staticmethod
    def label(text, x=0.0, y=0.0, layer=17, font_size=0.5, visible=True, flags=0) -> bytes:
        raw_text = text.encode("ascii")
        body = (_u32(layer) + _i32(_c(x)) + _i32(_c(y)) + _u32(_c(font_size)) + _u32(1)
                + bytes(4) + bytes([2 if visible else 0, flags]) + _u32(len(raw_text)) + raw_text)
        return XZZBuilder.sub_block(SUB_TEXT, body)

    @staticmethod
    def pin(name, x, y, outlines=(), net=0, rotation=0.0) -> bytes:
        """Pin sub-block; outlines are (width, height, type) tuples."""
        raw_name = name.encode("ascii")
        body = (_u32(0) + _i32(_c(x)) + _i32(_c(y)) + bytes(4) + _u32(_c(rotation))
                + _u32(len(raw_name)) + raw_name)
        for width, height, outline_type in outlines:
            body += _u32(_c(width)) + _u32(_c(height)) + bytes([outline_type])
        body += bytes(5)
        body += _u32(net) + bytes(8)
        return XZZBuilder.sub_block(SUB_PIN, body)

    @staticmethod
    def rect_pin(name, x, y, width, height, net=0) -> bytes:
        return XZZBuilder.pin(name, x, y, [(width, height, OUTLINE_RECT)], net)

    @staticmethod
    def round_pin(name, x, y, diameter, net=0) -> bytes:
        return XZZBuilder.pin(name, x, y, [(diameter, diameter, OUTLINE_ROUND)], net)

    @staticmethod
    def component_payload(x, y, footprint="", sub_blocks=(), part_size=None) -> bytes:
        """Plain component payload, zero-padded to whole cipher blocks."""
        raw_name = footprint.encode("ascii")
        body = (bytes(4) + bytes(4) + _i32(_c(x)) + _i32(_c(y)) + bytes(4) + bytes(2)
                + _u32(len(raw_name)) + raw_name)
        body += b"".join(sub_blocks) + bytes([SUB_END])
        size = len(body) if part_size is None else part_size
        body = _u32(size) + body[4:]
        if len(body) % 8:
            body += bytes(8 - len(body) % 8)
        return body

    # --- Trailing sections ---------------------------------------------------

    def pin_readings(self, readings: list[tuple[str, str, str]]) -> "XZZBuilder":
        """(voltage, part, pin) records in the per-pin layout."""
        body = b"".join(f"\n={v}={part}({pin})".encode("ascii") for v, part, pin in readings)
        self.diagnostics = DIAGNOSTIC_MARKER + bytes(DIAGNOSTIC_SKIP) + body
        return self

    def net_readings(self, readings: list[tuple[str, str]]) -> "XZZBuilder":
        """(net, value) records in the per-net layout."""
        body = b"".join(f"\r\n{net}={value}".encode("ascii") for net, value in readings)
        self.diagnostics = DIAGNOSTIC_MARKER + bytes(DIAGNOSTIC_SKIP) + body + b"\r\n\r\n"
        return self

    def build(self, xor_key: int = 0) -> bytes:
        """Assemble the file; a non-zero key masks it the way writers do."""
        main = b"".join(self.blocks)
        header = bytearray(0x44)
        header[0:len(SIGNATURE)] = SIGNATURE
        struct.pack_into("<I", header, 0x40, len(main))

        net_table = b""
        if self.nets:
            records = b"".join(
                _u32(8 + len(name)) + _u32(net_id) + name.encode("ascii")
                for net_id, name in self.nets
            )
            net_table = _u32(len(records)) + records
            struct.pack_into("<I", header, 0x28, len(header) + len(main) - 0x20)

        data = bytes(header) + main + net_table
        if xor_key:
            data = bytes(b ^ xor_key for b in data)
        return data + self.diagnostics


@pytest.fixture
def builder():
    """A fresh synthetic file builder."""
    return XZZBuilder()


@pytest.fixture
def plain_options():
    """Load options with every optional pass off."""
    return LoadOptions(resolve_pins=False, fold=False, mirror_x=False)


@pytest.fixture
def sample_file(builder):
    """A small board: outline, traces, a via, a label, two parts and nets."""
    builder.net(1, "GND").net(2, "VCC").net(7, "NET7")
    builder.outline(0, 0, 100, 60)
    builder.trace(1, 10, 10, 40, 10, width=0.2, net=2)
    builder.arc(1, 50, 30, 5, 0, 90, thickness=0.2, net=1)
    builder.via(40, 10, net=2)
    builder.text(17, 5, 55, "TOP", font_size=2.0)
    builder.component(XZZBuilder.component_payload(
        20, 30, "R0603",
        XZZBuilder.box(-1.5, -0.8, 1.5, 0.8) + [
            XZZBuilder.label("R1"),
            XZZBuilder.label("10k", y=1.0),
            XZZBuilder.rect_pin("1", -0.8, 0, 0.6, 0.9, net=2),
            XZZBuilder.rect_pin("2", 0.8, 0, 0.6, 0.9, net=1),
        ],
    ))
    builder.component(XZZBuilder.component_payload(
        70, 30, "DIP8",
        XZZBuilder.box(-5, -4, 5, 4) + [XZZBuilder.label("U1")] + [
            XZZBuilder.round_pin(str(i + 1), -3.81 + 2.54 * (i % 4), -3 if i < 4 else 3, 1.2,
                                 net=1 if i == 3 else 0)
            for i in range(8)
        ],
    ))
    builder.pin_readings([("0.512", "R1", "1"), ("0.300", "U1", "4")])
    return builder.build(xor_key=0x5A)


@pytest.fixture
def sample_board(sample_file):
    """The sample file decoded with default options."""
    return decode(sample_file, name="sample")


def make_pin(name, x, y, width, height, net_id=0):
    """Build a pin directly, bypassing the decoder."""
    if width == height:
        shape = CirclePad(radius=width / 2)
    else:
        shape = RectanglePad(width=width, height=height)
    return Pin(name=name, x=x, y=y, shape=shape, net_id=net_id)


@pytest.fixture
def make_component():
    """Factory for components built from (name, x, y, w, h) pin tuples and an outline box."""
    def factory(pins, box=None, reference="U1", x=0.0, y=0.0):
        component = Component(footprint="TEST", x=x, y=y, reference=reference)
        component.pins = [make_pin(*p) for p in pins]
        if box is not None:
            min_x, min_y, max_x, max_y = box
            component.segments = [
                LineSegment(17, min_x, min_y, max_x, min_y, 0.05),
                LineSegment(17, max_x, min_y, max_x, max_y, 0.05),
                LineSegment(17, max_x, max_y, min_x, max_y, 0.05),
                LineSegment(17, min_x, max_y, min_x, min_y, 0.05),
            ]
            component.width = max_x - min_x
            component.height = max_y - min_y
        return component
    return factory


@pytest.fixture
def empty_board():
    return Board(name="empty")
