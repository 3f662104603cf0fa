"""Tests for the three-pass pin orientation resolver."""
import math

import pytest

from boardview.orientation import (
    Layout, apply_resolution, build_frame, classify_edges, dominant_angle,
    resolve_board, resolve_component, second_pass, third_pass,
)
from boardview.pcb import Board, LineSegment, LocalEdge, PinOrientation
from boardview.pcb.transform import rotate_point

H = PinOrientation.HORIZONTAL
V = PinOrientation.VERTICAL
N = PinOrientation.NATURAL


def _qfp_pins():
    """Four pins per side of a 10x10 body; every pad declared 0.3 wide, 1.0 tall."""
    pins = []
    offsets = (-1.5, -0.5, 0.5, 1.5)
    for i, y in enumerate(offsets):
        pins.append((f"L{i}", -4.5, y, 0.3, 1.0))
    for i, x in enumerate(offsets):
        pins.append((f"B{i}", x, 4.5, 0.3, 1.0))
    for i, y in enumerate(offsets):
        pins.append((f"R{i}", 4.5, y, 0.3, 1.0))
    for i, x in enumerate(offsets):
        pins.append((f"T{i}", x, -4.5, 0.3, 1.0))
    return pins


def _rotated_box(width, height, angle_deg):
    corners = [(-width / 2, -height / 2), (width / 2, -height / 2),
               (width / 2, height / 2), (-width / 2, height / 2)]
    points = [rotate_point(x, y, angle_deg) for x, y in corners]
    return [LineSegment(17, *points[i], *points[(i + 1) % 4], 0.05) for i in range(4)]


def test_no_pins_is_skipped(make_component):
    assert resolve_component(make_component([])) is None


@pytest.mark.parametrize("size,expected", [
    ((0.5, 1.0), V),
    ((1.0, 0.5), H),
    ((0.8, 0.8), N),
])
def test_single_pin(make_component, size, expected):
    """Test that a lone pad follows its own long side."""
    component = make_component([("1", 0, 0, *size)])
    resolution = resolve_component(component)

    assert resolution.layout is Layout.SINGLE
    assert resolution.orientations == (expected,)
    assert resolution.edges == (LocalEdge.UNKNOWN,)


def test_two_pad_side_by_side(make_component):
    """Test that pads spread along X are drawn tall."""
    component = make_component(
        [("1", -1, 0, 0.6, 1.0), ("2", 1, 0, 0.6, 1.0)], box=(-1.6, -0.8, 1.6, 0.8)
    )
    resolution = resolve_component(component)
    assert resolution.layout is Layout.TWO_PAD
    assert resolution.orientations == (V, V)


def test_two_pad_stacked(make_component):
    """Test that pads spread along Y are drawn wide."""
    component = make_component(
        [("1", 0, -1, 1.0, 0.6), ("2", 0, 1, 1.0, 0.6)], box=(-0.8, -1.6, 0.8, 1.6)
    )
    assert resolve_component(component).orientations == (H, H)


def test_two_pad_flipped_back_into_body(make_component):
    """Test that pass two flips pads that would stick out of a flat body."""
    component = make_component(
        [("1", -1, 0, 0.6, 1.0), ("2", 1, 0, 0.6, 1.0)], box=(-1.6, -0.4, 1.6, 0.4)
    )
    assert resolve_component(component).orientations == (H, H)


def test_qfp(make_component):
    """Test that side pins point away from the body on all four sides."""
    component = make_component(_qfp_pins(), box=(-5, -5, 5, 5))
    resolution = resolve_component(component)

    assert resolution.layout is Layout.QFP
    edges = dict(zip((p.name for p in component.pins), resolution.edges))
    assert edges["L0"] is LocalEdge.LEFT
    assert edges["R3"] is LocalEdge.RIGHT
    assert edges["T1"] is LocalEdge.TOP
    assert edges["B2"] is LocalEdge.BOTTOM

    by_name = dict(zip((p.name for p in component.pins), resolution.orientations))
    for name, orientation in by_name.items():
        if name[0] in "LR":
            assert orientation is H, name
        else:
            assert orientation is V, name


def test_wide_connector(make_component):
    """Test that a wide connector draws every pad tall regardless of edge."""
    pins = [(str(i), -9, -5.4 + 1.2 * i, 0.5, 1.0) for i in range(10)]
    component = make_component(pins, box=(-10, -6, 10, 6))
    resolution = resolve_component(component)

    assert resolution.layout is Layout.CONNECTOR
    assert set(resolution.edges) == {LocalEdge.LEFT}
    assert resolution.orientations == (V,) * 10


def test_interior_and_unknown_edges(make_component):
    """Test edge classification away from the body sides."""
    component = make_component(
        [("1", -1, 0, 0.5, 0.5), ("2", 1, 0, 0.5, 0.5), ("3", 3, 3, 0.5, 0.5)],
        box=(-4, -4, 4, 4),
    )
    edges = classify_edges(build_frame(component))
    assert edges == (LocalEdge.INTERIOR, LocalEdge.INTERIOR, LocalEdge.UNKNOWN)


def test_square_pads_stay_natural(make_component):
    component = make_component(
        [("1", -1, 0, 0.8, 0.8), ("2", 1, 0, 0.8, 0.8)], box=(-2, -1, 2, 1)
    )
    assert resolve_component(component).orientations == (N, N)


def test_second_pass_keeps_pad_when_flip_is_not_clean(make_component):
    component = make_component(
        [("1", -1, 0, 0.6, 1.0), ("2", 1, 0, 0.6, 1.0)], box=(-1.6, -0.2, 1.6, 0.2)
    )
    frame = build_frame(component)
    assert second_pass(frame, (V, V)) == (V, V)


def test_second_pass_flips_small_overflow(make_component):
    """Test that pass two flips a pad sticking out by less than the boundary margin."""
    component = make_component(
        [("1", -40, 0, 0.6, 1.0), ("2", 40, 0, 0.6, 1.0)], box=(-50, -0.45, 50, 0.45)
    )
    frame = build_frame(component)
    assert second_pass(frame, (V, V)) == (H, H)


def test_second_pass_separates_overlapping_pads(make_component):
    """Test that the first of two overlapping pads is turned and its neighbour kept."""
    component = make_component(
        [("1", 0, 0, 0.6, 1.0), ("2", 0, 0.8, 0.6, 1.0)], box=(-5, -5, 5, 5)
    )
    frame = build_frame(component)
    assert second_pass(frame, (V, V)) == (H, V)


def test_third_pass_prefers_smaller_overflow(make_component):
    """Test that a pad overflowing either way keeps the lesser overflow."""
    component = make_component(
        [("1", -1, 0, 0.6, 1.0), ("2", 1, 0, 0.6, 1.0)], box=(-1.6, -0.2, 1.6, 0.2)
    )
    frame = build_frame(component)
    assert third_pass(frame, (V, V)) == (H, H)
    assert third_pass(frame, (H, H)) == (H, H)


@pytest.mark.parametrize("angle,expected", [
    (0.0, 0.0),
    (30.0, 30.0),
    (60.0, -30.0),
    (90.0, 0.0),
    (-20.0, -20.0),
])
def test_dominant_angle(make_component, angle, expected):
    """Test the folded dominant outline angle of a rotated 4x1 body."""
    component = make_component([("1", 0, 0, 0.5, 0.5)])
    component.segments = _rotated_box(4.0, 1.0, angle)
    assert math.degrees(dominant_angle(component)) == pytest.approx(expected, abs=1e-6)


def test_rotated_part_resolves_in_local_frame(make_component):
    """Test that a rotated two-pad part gets the same answer as an upright one."""
    local = [(-1.0, 0.0), (1.0, 0.0)]
    pins = []
    for i, (x, y) in enumerate(local):
        rx, ry = rotate_point(x, y, 30.0)
        pins.append((str(i + 1), rx, ry, 0.6, 1.0))
    component = make_component(pins)
    component.segments = _rotated_box(3.2, 1.6, 30.0)

    resolution = resolve_component(component)
    assert resolution.rotation == pytest.approx(math.radians(30.0))
    assert resolution.orientations == (V, V)


def test_resolution_is_pure(make_component):
    """Test that resolving does not modify the component."""
    component = make_component(_qfp_pins(), box=(-5, -5, 5, 5))
    resolve_component(component)
    assert all(p.orientation is N for p in component.pins)
    assert component.rotation == 0.0


def test_apply_and_idempotence(make_component):
    """Test that resolving again after applying gives the same answer."""
    component = make_component(_qfp_pins(), box=(-5, -5, 5, 5))
    first = resolve_component(component)
    apply_resolution(component, first)
    second = resolve_component(component)

    assert first == second
    assert component.pins[0].orientation is H
    assert component.pins[0].local_edge is LocalEdge.LEFT
    assert component.pins[0].extent() == (1.0, 0.3)


def test_resolve_board(make_component):
    board = Board(components=[
        make_component([("1", 0, 0, 1.0, 0.5)], reference="TP1"),
        make_component([], reference="MH1"),
        make_component(_qfp_pins(), box=(-5, -5, 5, 5)),
    ])
    assert resolve_board(board) == 2
    assert board.components[0].pins[0].orientation is H


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
