"""Tests for the XZZ decoder: signature, header, main blocks and loading."""
import logging
import struct

import pytest

from boardview.pcb import Arc, Board, TextLabel, Trace, Via
from boardview.pcb.layers import PINS_LAYER, VIAS_LAYER
from boardview.xzz import (
    BlockOverflowError, BoardLoadError, HeaderError, LoadOptions, SignatureError,
    decode, load_board, normalize, try_decode,
)
from boardview.xzz.constants import BLOCK_TEST_PAD, BLOCK_TRACE, BLOCK_UNKNOWN_03, SIGNATURE
from boardview.xzz.header import parse_header
from boardview.xzz.reader import ByteReader


def test_minimal_file_loads_empty_board(builder, plain_options):
    """Test that a bare header with an empty main region gives an empty board."""
    board = decode(builder.build(), name="blank", options=plain_options)

    assert isinstance(board, Board)
    assert board.is_loaded
    assert board.error_message == ""
    assert board.name == "blank"
    assert list(board.all_elements()) == []
    assert board.nets == {}
    assert board.width == 0
    assert board.origin_offset == (0.0, 0.0)


def test_masked_and_plain_decode_identically(builder, plain_options):
    """Test that the XOR layer is transparent."""
    builder.trace(1, 0, 0, 5, 5, net=3).net(3, "SIG")
    plain = decode(builder.build(), options=plain_options)
    masked = decode(builder.build(xor_key=0xA7), options=plain_options)

    assert plain.traces == masked.traces
    assert plain.nets == masked.nets


def test_bad_signature(builder):
    """Test that a file without the signature is rejected."""
    data = bytearray(builder.build())
    data[0:6] = b"ABCDEF"
    with pytest.raises(SignatureError):
        decode(bytes(data))
    assert try_decode(bytes(data)) is None


def test_failed_load_is_logged(builder, caplog):
    """Test that fatal failures are logged at error level before propagating."""
    with caplog.at_level(logging.ERROR, logger="boardview.xzz.loader"):
        with pytest.raises(BoardLoadError):
            decode(b"not a board", name="junk")
    assert any("junk" in r.getMessage() for r in caplog.records)


def test_header_too_short():
    with pytest.raises(HeaderError):
        decode(SIGNATURE + bytes(20))


def test_header_region_past_end(builder):
    """Test that a main region longer than the file is fatal."""
    data = bytearray(builder.build())
    struct.pack_into("<I", data, 0x40, 1000)
    with pytest.raises(HeaderError):
        decode(bytes(data))


def test_header_fields(builder):
    builder.trace(1, 0, 0, 1, 1).net(1, "A")
    header = parse_header(ByteReader(builder.build()))

    assert header.main_offset == 0x44
    assert header.main_size == 5 + 28
    assert header.main_end == 0x44 + 33
    assert header.has_net_table
    assert header.net_offset == header.main_end
    assert not header.has_image_table


def test_blocks_decoded_in_order(builder, plain_options):
    """Test that every element kind is decoded with scaled values, in file order."""
    builder.trace(1, 1.5, -2.25, 3, 4, width=0.2, net=9)
    builder.padding()
    builder.arc(2, 10, 10, 2.5, 45, 270.5, thickness=0.15, net=4)
    builder.via(-7, 8, radius_a=0.4, radius_b=0.25, layer_a=1, layer_b=2, net=5, text="TP1")
    builder.via(1, 1, tag=BLOCK_TEST_PAD)
    builder.text(17, 3, 4, "HELLO", font_size=1.25, scale=3)
    builder.trace(3, 0, 0, 1, 0)
    board = decode(builder.build(), options=plain_options)

    assert board.traces == [
        Trace(layer=1, x1=1.5, y1=-2.25, x2=3.0, y2=4.0, width=0.2, net_id=9),
        Trace(layer=3, x1=0.0, y1=0.0, x2=1.0, y2=0.0, width=0.1, net_id=0),
    ]
    assert board.arcs == [
        Arc(layer=2, cx=10.0, cy=10.0, radius=2.5, start_angle=45.0, end_angle=270.5,
            thickness=0.15, net_id=4),
    ]
    assert len(board.vias) == 2
    via = board.vias[0]
    assert (via.x, via.y, via.layer_a, via.layer_b, via.net_id, via.text) == (-7.0, 8.0, 1, 2, 5, "TP1")
    assert via.radius == pytest.approx(0.4)
    assert via.drill_diameter == pytest.approx(0.15)
    assert board.vias[1].text == ""

    label = board.labels[0]
    assert isinstance(label, TextLabel)
    assert (label.text, label.x, label.y, label.layer) == ("HELLO", 3.0, 4.0, 17)
    assert label.font_size == pytest.approx(1.25)
    assert label.scale == 3.0
    assert not label.component_relative


def test_unknown_and_skipped_tags(builder, plain_options, caplog):
    """Test that tag 3 and unknown tags are skipped without stopping the scan."""
    builder.raw_block(BLOCK_UNKNOWN_03, b"\x01" * 12)
    builder.raw_block(0x42, b"\x02" * 7)
    builder.trace(1, 0, 0, 1, 1)
    with caplog.at_level(logging.DEBUG, logger="boardview.xzz.blocks"):
        board = decode(builder.build(), options=plain_options)

    assert len(board.traces) == 1
    assert any("0x42" in r.getMessage() for r in caplog.records)


def test_malformed_record_dropped(builder, plain_options, caplog):
    """Test that a short element record drops only that element."""
    builder.raw_block(BLOCK_TRACE, b"\x01" * 10)
    builder.trace(1, 0, 0, 1, 1)
    with caplog.at_level(logging.WARNING):
        board = decode(builder.build(), options=plain_options)

    assert len(board.traces) == 1
    assert any(r.levelno == logging.WARNING for r in caplog.records)


def test_block_overflow_is_fatal(builder):
    """Test that a block running past the region produces no board."""
    builder.trace(1, 0, 0, 1, 1)
    builder.blocks.append(bytes([BLOCK_TRACE]) + struct.pack("<I", 1000) + bytes(28))
    data = builder.build()

    with pytest.raises(BlockOverflowError):
        decode(data)
    assert try_decode(data) is None


def test_trailing_short_bytes_end_scan(builder, plain_options):
    """Test that fewer than five bytes left in the region end the scan."""
    builder.trace(1, 0, 0, 1, 1)
    builder.blocks.append(b"\x05\x01\x00")
    board = decode(builder.build(), options=plain_options)
    assert len(board.traces) == 1


def test_oversized_via_text_ignored(builder, plain_options):
    builder.raw_block(0x02, struct.pack("<iiiiIIII", 0, 0, 3000, 3000, 1, 2, 0, 5000))
    board = decode(builder.build(), options=plain_options)
    assert board.vias[0].text == ""


def test_normalization_centres_outline(builder, plain_options):
    """Test that the outline box is moved to the origin."""
    builder.outline(10, 20, 110, 80)
    builder.trace(1, 60, 50, 70, 50)
    builder.via(10, 20)
    builder.component(builder.component_payload(
        30, 40, "X", [builder.rect_pin("1", 1.0, 2.0, 0.5, 0.5)]
    ))
    board = decode(builder.build(), options=plain_options)

    assert board.origin_offset == pytest.approx((60.0, 50.0))
    assert board.width == pytest.approx(100.0)
    assert board.height == pytest.approx(60.0)
    assert (board.traces[-1].x1, board.traces[-1].y1) == pytest.approx((0.0, 0.0))
    assert (board.vias[0].x, board.vias[0].y) == pytest.approx((-50.0, -30.0))

    component = board.components[0]
    assert (component.x, component.y) == pytest.approx((-30.0, -10.0))
    assert (component.pins[0].x, component.pins[0].y) == pytest.approx((1.0, 2.0))


def test_normalization_without_outline(builder, plain_options):
    builder.trace(1, 5, 5, 6, 6)
    board = decode(builder.build(), options=plain_options)

    assert board.origin_offset == (0.0, 0.0)
    assert board.traces[0].x1 == 5.0
    assert not normalize(board)


def test_load_board_from_path(tmp_path, sample_file):
    """Test loading from disk names the board after the file."""
    path = tmp_path / "mainboard.pcb"
    path.write_bytes(sample_file)
    board = load_board(path, LoadOptions(resolve_pins=False))

    assert board.board_name == "mainboard"
    assert board.file_path == str(path)
    assert len(board.components) == 2


def test_load_board_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_board(tmp_path / "missing.pcb")


def test_sample_board_info(sample_board):
    """Test the summary counts of the sample board."""
    info = sample_board.get_board_info()

    assert info.name == "sample"
    assert info.component_count == 2
    assert info.pin_count == 10
    assert info.net_count == 3
    assert info.trace_count == 5
    assert info.via_count == 1
    assert info.arc_count == 1
    assert info.label_count == 1
    assert info.width == pytest.approx(100.1)
    assert info.height == pytest.approx(60.1)
    assert info.origin_offset == pytest.approx((50.0, 30.0))


def test_elements_on_layer(sample_board):
    assert len(sample_board.elements_on_layer(1)) == 2
    assert len(sample_board.elements_on_layer(28)) == 4
    assert len(sample_board.elements_on_layer(29)) == 1
    assert [c.reference for c in sample_board.elements_on_layer(31)] == ["R1", "U1"]
    assert sample_board.elements_on_layer(5) == []


def test_synthetic_layers(sample_board):
    """Test that vias, parts and pins sit on the standard synthetic layers."""
    assert sample_board.vias[0].layer == VIAS_LAYER
    assert all(c.layer_id == PINS_LAYER for c in sample_board.components)
    assert all(p.layer_id == PINS_LAYER for _, p in sample_board.iter_pins())
    assert sample_board.get_layer(VIAS_LAYER).name == "Vias"
    assert sample_board.get_layer(PINS_LAYER).name == "Pins"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
