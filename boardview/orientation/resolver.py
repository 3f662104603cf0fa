"""Pin pad orientation inference.

Component records carry pad sizes but not which way a pad is turned.
The resolver works per component in a local frame rotated so the
dominant outline angle is zero, and runs three passes:

1. Analysis. Pins are grouped into edge lines, the component is
   classified (two-pad, QFP, connector or general) and each pin gets an
   orientation from a fixed decision table.
2. Local correction. A pin that leaves the body box or overlaps a
   neighbour is flipped if the flipped pad is clean on both counts.
3. Boundary sweep. Pins still overflowing the box keep whichever
   orientation overflows less.

A secondary collision pass (see collisions.py) then retries the pins
that are still in conflict. All passes are pure: they read a
`ComponentFrame` and return new orientation tuples. `apply_resolution`
is the only place a Component is written.
"""
import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from ..pcb.board import Board
from ..pcb.models import Component, LocalEdge, PinOrientation, pad_size
from .collisions import resolve_collisions
from .frame import ComponentFrame, build_frame, out_of_box, overlaps_neighbour

log = logging.getLogger(__name__)

# Aspect ratio above which a body counts as wide or tall
ASPECT_RATIO = 1.2
# Grid cell for grouping pins into lines, as a fraction of the box short side
GRID_FRACTION = 0.05
MIN_GRID_CELL = 1e-4
# Distance from a box side, as a fraction of the short side, for an edge line
EDGE_BAND_FRACTION = 0.25
# Gap tolerance between neighbouring pins of a line, in average pin sizes
LINE_GAP_PIN_SIZES = 4.0
# Pass-3 overflow margin, as a fraction of the largest box dimension
BOUNDARY_MARGIN_FRACTION = 0.001
MIN_BOUNDARY_MARGIN = 1e-4
QFP_MIN_EDGE_PINS = 2
CONNECTOR_MIN_EDGE_PINS = 8


class Layout(str, Enum):
    SINGLE = "single"
    TWO_PAD = "two_pad"
    QFP = "qfp"
    CONNECTOR = "connector"
    GENERAL = "general"


@dataclass(frozen=True)
class Resolution:
    rotation: float  # Radians
    layout: Layout
    edges: tuple[LocalEdge, ...]
    orientations: tuple[PinOrientation, ...]


# --- Pass 1 -----------------------------------------------------------------

def _edge_lines(coords: np.ndarray, along: np.ndarray, cell: float, gap: float) -> list[list[int]]:
    """
    Group pin indices into lines sharing a grid-snapped coordinate.

    Pins with the same snapped `coords` value are sorted along the line
    and split wherever neighbours are further apart than `gap`. Runs of
    at least two pins are lines.
    """
    groups: dict[int, list[int]] = defaultdict(list)
    for i, value in enumerate(coords):
        groups[int(round(value / cell))].append(i)

    lines = []
    for key in sorted(groups):
        members = sorted(groups[key], key=lambda i: (along[i], i))
        run = [members[0]]
        for i in members[1:]:
            if along[i] - along[run[-1]] > gap:
                if len(run) >= 2:
                    lines.append(run)
                run = [i]
            else:
                run.append(i)
        if len(run) >= 2:
            lines.append(run)
    return lines


def _line_edge(mean: float, low: float, high: float, band: float,
               low_edge: LocalEdge, high_edge: LocalEdge) -> LocalEdge:
    to_low = mean - low
    to_high = high - mean
    if min(to_low, to_high) > band:
        return LocalEdge.INTERIOR
    return low_edge if to_low <= to_high else high_edge


def classify_edges(frame: ComponentFrame) -> tuple[LocalEdge, ...]:
    """Assign each pin the body side its edge line sits on."""
    pins = frame.pins
    if len(pins) < 2:
        return tuple(LocalEdge.UNKNOWN for _ in pins)

    min_x, min_y, max_x, max_y = frame.box
    short = min(frame.box_width, frame.box_height)
    cell = max(short * GRID_FRACTION, MIN_GRID_CELL)
    band = short * EDGE_BAND_FRACTION
    avg_size = float(np.mean([p.long_side for p in pins]))
    gap = max(LINE_GAP_PIN_SIZES * avg_size, cell)

    xs = np.array([p.x for p in pins])
    ys = np.array([p.y for p in pins])

    # (edge, line size) per pin for each axis
    vertical: dict[int, tuple[LocalEdge, int]] = {}
    for line in _edge_lines(xs, ys, cell, gap):
        edge = _line_edge(float(xs[line].mean()), min_x, max_x, band, LocalEdge.LEFT, LocalEdge.RIGHT)
        for i in line:
            vertical[i] = (edge, len(line))

    horizontal: dict[int, tuple[LocalEdge, int]] = {}
    for line in _edge_lines(ys, xs, cell, gap):
        edge = _line_edge(float(ys[line].mean()), min_y, max_y, band, LocalEdge.TOP, LocalEdge.BOTTOM)
        for i in line:
            horizontal[i] = (edge, len(line))

    edges = []
    for i in range(len(pins)):
        v = vertical.get(i)
        h = horizontal.get(i)
        if v and h:
            edges.append(v[0] if v[1] >= h[1] else h[0])
        elif v:
            edges.append(v[0])
        elif h:
            edges.append(h[0])
        else:
            edges.append(LocalEdge.UNKNOWN)
    return tuple(edges)


def classify_layout(frame: ComponentFrame, edges: tuple[LocalEdge, ...]) -> Layout:
    if len(frame.pins) == 1:
        return Layout.SINGLE
    if len(frame.pins) == 2:
        return Layout.TWO_PAD

    counts = {edge: edges.count(edge) for edge in (LocalEdge.LEFT, LocalEdge.RIGHT, LocalEdge.TOP, LocalEdge.BOTTOM)}
    if all(n >= QFP_MIN_EDGE_PINS for n in counts.values()):
        return Layout.QFP
    if any(n >= CONNECTOR_MIN_EDGE_PINS for n in counts.values()):
        return Layout.CONNECTOR
    return Layout.GENERAL


def _edge_rule(edge: LocalEdge) -> PinOrientation:
    if edge in (LocalEdge.LEFT, LocalEdge.RIGHT):
        return PinOrientation.HORIZONTAL
    if edge in (LocalEdge.TOP, LocalEdge.BOTTOM):
        return PinOrientation.VERTICAL
    return PinOrientation.NATURAL


def _two_pad_rule(frame: ComponentFrame) -> PinOrientation:
    a, b = frame.pins
    dx = abs(b.x - a.x)
    dy = abs(b.y - a.y)
    if dx > dy:
        return PinOrientation.VERTICAL
    if dy > dx:
        return PinOrientation.HORIZONTAL
    return PinOrientation.NATURAL


def first_pass(frame: ComponentFrame) -> tuple[Layout, tuple[LocalEdge, ...], tuple[PinOrientation, ...]]:
    """Initial orientation of every pin from edges and layout class."""
    edges = classify_edges(frame)
    layout = classify_layout(frame, edges)

    if layout is Layout.SINGLE:
        pin = frame.pins[0]
        if pin.is_square:
            return layout, edges, (PinOrientation.NATURAL,)
        if pin.height > pin.width:
            return layout, edges, (PinOrientation.VERTICAL,)
        return layout, edges, (PinOrientation.HORIZONTAL,)

    wide = frame.box_width > frame.box_height * ASPECT_RATIO
    tall = frame.box_height > frame.box_width * ASPECT_RATIO
    two_pad = _two_pad_rule(frame) if layout is Layout.TWO_PAD else None

    orientations = []
    for pin, edge in zip(frame.pins, edges):
        if pin.is_square:
            orientations.append(PinOrientation.NATURAL)
        elif two_pad is not None:
            orientations.append(two_pad)
        elif layout is Layout.CONNECTOR and wide:
            orientations.append(PinOrientation.VERTICAL)
        elif layout is Layout.CONNECTOR and tall:
            orientations.append(PinOrientation.HORIZONTAL)
        else:
            orientations.append(_edge_rule(edge))
    return layout, edges, tuple(orientations)


# --- Pass 2 and 3 -----------------------------------------------------------

def second_pass(frame: ComponentFrame, orientations: tuple[PinOrientation, ...]) -> tuple[PinOrientation, ...]:
    """Flip pins that leave the box or overlap, when the flip is clean.

    The box test has no tolerance; only the boundary sweep allows a margin.
    """
    current = list(orientations)
    for i, pin in enumerate(frame.pins):
        o = current[i]
        if not (out_of_box(frame, i, o) or overlaps_neighbour(frame, i, o, current)):
            continue
        flipped = pin.flipped(o)
        if flipped is o:
            continue
        if not out_of_box(frame, i, flipped) and not overlaps_neighbour(frame, i, flipped, current):
            current[i] = flipped
    return tuple(current)


def boundary_margin(frame: ComponentFrame) -> float:
    return max(BOUNDARY_MARGIN_FRACTION * max(frame.box_width, frame.box_height), MIN_BOUNDARY_MARGIN)


def overflow(frame: ComponentFrame, index: int, orientation: PinOrientation) -> float:
    """Total distance the pad sticks out of the box, summed over four sides."""
    pin = frame.pins[index]
    width, height = pin.extent(orientation)
    min_x, min_y, max_x, max_y = frame.box
    return (max(0.0, min_x - (pin.x - width / 2)) + max(0.0, pin.x + width / 2 - max_x)
            + max(0.0, min_y - (pin.y - height / 2)) + max(0.0, pin.y + height / 2 - max_y))


def third_pass(frame: ComponentFrame, orientations: tuple[PinOrientation, ...]) -> tuple[PinOrientation, ...]:
    """Keep the orientation with less overflow for pins still past the box."""
    margin = boundary_margin(frame)
    current = list(orientations)
    for i, pin in enumerate(frame.pins):
        o = current[i]
        over = overflow(frame, i, o)
        if over <= margin:
            continue
        flipped = pin.flipped(o)
        if flipped is not o and overflow(frame, i, flipped) < over:
            current[i] = flipped
    return tuple(current)


# --- Driver -----------------------------------------------------------------

def resolve_component(component: Component) -> Optional[Resolution]:
    """Compute rotation, edges and orientations without touching the component."""
    if not component.pins:
        return None

    frame = build_frame(component)
    layout, edges, orientations = first_pass(frame)
    if layout is not Layout.SINGLE:
        orientations = second_pass(frame, orientations)
        orientations = third_pass(frame, orientations)
        orientations = resolve_collisions(frame, orientations)
    return Resolution(frame.angle, layout, edges, orientations)


def apply_resolution(component: Component, resolution: Resolution) -> None:
    """Write a resolution back onto the component and its pins."""
    component.rotation = resolution.rotation
    for pin, edge, orientation in zip(component.pins, resolution.edges, resolution.orientations):
        pin.initial_width, pin.initial_height = pad_size(pin.shape)
        pin.short_side = min(pin.initial_width, pin.initial_height)
        pin.long_side = max(pin.initial_width, pin.initial_height)
        pin.local_edge = edge
        pin.orientation = orientation


def resolve_board(board: Board) -> int:
    """Resolve every component with pins; returns how many were processed."""
    resolved = 0
    for component in board.components:
        resolution = resolve_component(component)
        if resolution is None:
            continue
        apply_resolution(component, resolution)
        log.debug("%s: %s layout, rotation %.2f deg",
                  component.reference, resolution.layout.value, math.degrees(resolution.rotation))
        resolved += 1
    return resolved
