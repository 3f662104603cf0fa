"""Whole-board transforms: translation, mirroring and folding."""
import logging
from typing import Optional

from .board import Board
from .geometry import Element, bounding_box, union_bounds
from .layers import BOARD_OUTLINE_LAYER
from .models import Arc, Component, MountingSide, Pin, TextLabel, Trace, Via
from .transform import mirror_arc_angles, mirror_x

log = logging.getLogger(__name__)


def translate_element(element: Element, dx: float, dy: float) -> None:
    """Move a top-level element. Components move by their anchor only."""
    if isinstance(element, Trace):
        element.x1 += dx
        element.x2 += dx
        element.y1 += dy
        element.y2 += dy
    elif isinstance(element, Arc):
        element.cx += dx
        element.cy += dy
    elif isinstance(element, (Via, TextLabel, Component)):
        element.x += dx
        element.y += dy
    elif isinstance(element, Pin):
        raise TypeError("pins move with their component")
    else:
        raise TypeError(f"unknown element: {element!r}")


def translate_board(board: Board, dx: float, dy: float) -> None:
    for element in board.all_elements():
        translate_element(element, dx, dy)


def mirror_component(component: Component, center_x: float) -> None:
    """Reflect a component's anchor and its local geometry across x = center_x."""
    component.x = mirror_x(component.x, center_x)
    for pin in component.pins:
        pin.x = -pin.x
    for label in component.labels:
        label.x = -label.x
    for segment in component.segments:
        segment.x1 = -segment.x1
        segment.x2 = -segment.x2


def mirror_element(element: Element, center_x: float) -> None:
    if isinstance(element, Trace):
        element.x1 = mirror_x(element.x1, center_x)
        element.x2 = mirror_x(element.x2, center_x)
    elif isinstance(element, Arc):
        element.cx = mirror_x(element.cx, center_x)
        element.start_angle, element.end_angle = mirror_arc_angles(
            element.start_angle, element.end_angle
        )
    elif isinstance(element, (Via, TextLabel)):
        element.x = mirror_x(element.x, center_x)
    elif isinstance(element, Component):
        mirror_component(element, center_x)
    else:
        raise TypeError(f"cannot mirror element: {element!r}")


def _center_x(box: Optional[tuple[float, float, float, float]]) -> Optional[float]:
    if box is None:
        return None
    return (box[0] + box[2]) / 2


def mirror_board(board: Board) -> Optional[float]:
    """
    Mirror every element across the board's vertical centre line.

    Returns the axis used, or None when the board has no extent.
    """
    bounds = union_bounds(bounding_box(e) for e in board.all_elements())
    if bounds is None or (bounds[2] - bounds[0] <= 0 and bounds[3] - bounds[1] <= 0):
        return None

    center_x = _center_x(bounds)
    for element in board.all_elements():
        mirror_element(element, center_x)
    log.info("Mirrored board across x=%.4f", center_x)
    return center_x


def detect_center_axis(board: Board) -> float:
    """
    X of the fold line of a two-sided (butterfly) board file.

    Taken as the middle of the outline layer; falls back to half the
    board width when there is no outline with area.
    """
    boxes = []
    for element in board.elements_on_layer(BOARD_OUTLINE_LAYER):
        box = bounding_box(element)
        if box[2] > box[0] and box[3] > box[1]:
            boxes.append(box)
    bounds = union_bounds(boxes)
    if bounds is None:
        return board.width / 2
    return _center_x(bounds)


def component_center_x(component: Component) -> float:
    return component.x + component.outline_center[0]


def fold_board(board: Board) -> bool:
    """
    Fold a side-by-side board file onto a single footprint.

    Elements right of the centre axis are mirrored onto the left half.
    Components left of the axis are tagged TOP, the rest BOTTOM (and
    mirrored). Outline elements right of the axis are dropped. Returns
    False if the board was already folded.
    """
    if board.folded:
        return False

    center_x = detect_center_axis(board)
    for element in list(board.arcs) + list(board.vias) + list(board.traces) + list(board.labels):
        if getattr(element, "layer", None) == BOARD_OUTLINE_LAYER:
            continue
        if _center_x(bounding_box(element)) > center_x:
            mirror_element(element, center_x)

    for component in board.components:
        if component_center_x(component) < center_x:
            component.side = MountingSide.TOP
        else:
            mirror_component(component, center_x)
            component.side = MountingSide.BOTTOM

    def keep(element: Element) -> bool:
        if getattr(element, "layer", None) != BOARD_OUTLINE_LAYER:
            return True
        return _center_x(bounding_box(element)) < center_x

    board.traces = [t for t in board.traces if keep(t)]
    board.arcs = [a for a in board.arcs if keep(a)]
    board.labels = [lbl for lbl in board.labels if keep(lbl)]

    board.folded = True
    log.info("Folded board at x=%.4f", center_x)
    return True
