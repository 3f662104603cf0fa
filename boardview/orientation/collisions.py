"""Secondary pad collision resolver.

After the three orientation passes some pads may still overlap a
neighbour or stick out of the body box. Those pins are retried largest
pad first: a pin is flipped only if the flipped pad touches no other pad
on its layer and fits inside the box.
"""
import numpy as np

from ..pcb.models import PinOrientation
from .frame import ComponentFrame, pad_extents

# Overlap area below which two pads are considered clear
MIN_OVERLAP_AREA = 1e-6
# Slack for the touch test used when validating a flip
TOUCH_TOLERANCE = 1e-6


def overlap_areas(frame: ComponentFrame, orientations: list[PinOrientation]) -> np.ndarray:
    """Pairwise overlap area matrix of pads on the same layer (diagonal zero)."""
    sizes = pad_extents(frame, orientations)
    xs = np.array([p.x for p in frame.pins])
    ys = np.array([p.y for p in frame.pins])
    layers = np.array([p.layer_id for p in frame.pins])

    half_w = sizes[:, 0] / 2
    half_h = sizes[:, 1] / 2
    left = np.maximum.outer(xs - half_w, xs - half_w)
    right = np.minimum.outer(xs + half_w, xs + half_w)
    top = np.maximum.outer(ys - half_h, ys - half_h)
    bottom = np.minimum.outer(ys + half_h, ys + half_h)

    areas = np.clip(right - left, 0, None) * np.clip(bottom - top, 0, None)
    areas[layers[:, None] != layers[None, :]] = 0.0
    np.fill_diagonal(areas, 0.0)
    return areas


def _contained(frame: ComponentFrame, index: int, orientation: PinOrientation) -> bool:
    pin = frame.pins[index]
    width, height = pin.extent(orientation)
    min_x, min_y, max_x, max_y = frame.box
    return (pin.x - width / 2 >= min_x and pin.x + width / 2 <= max_x
            and pin.y - height / 2 >= min_y and pin.y + height / 2 <= max_y)


def _touches_any(frame: ComponentFrame, index: int, orientation: PinOrientation,
                 orientations: list[PinOrientation]) -> bool:
    pin = frame.pins[index]
    width, height = pin.extent(orientation)
    for j, other in enumerate(frame.pins):
        if j == index or other.layer_id != pin.layer_id:
            continue
        other_w, other_h = other.extent(orientations[j])
        if (abs(pin.x - other.x) <= (width + other_w) / 2 + TOUCH_TOLERANCE
                and abs(pin.y - other.y) <= (height + other_h) / 2 + TOUCH_TOLERANCE):
            return True
    return False


def problematic_pins(frame: ComponentFrame, orientations: list[PinOrientation]) -> list[int]:
    """Indices of pins that overlap a neighbour or leave the box."""
    areas = overlap_areas(frame, orientations)
    colliding = set(np.nonzero((areas > MIN_OVERLAP_AREA).any(axis=1))[0].tolist())
    outside = {i for i in range(len(frame.pins)) if not _contained(frame, i, orientations[i])}
    return sorted(colliding | outside)


def resolve_collisions(frame: ComponentFrame,
                       orientations: tuple[PinOrientation, ...]) -> tuple[PinOrientation, ...]:
    """Flip conflicting pins, largest pad first, where the flip is clean."""
    current = list(orientations)
    candidates = problematic_pins(frame, current)
    if not candidates:
        return orientations

    def area(i: int) -> float:
        width, height = frame.pins[i].extent(current[i])
        return width * height

    # Stable sort keeps index order between equal areas
    for i in sorted(candidates, key=area, reverse=True):
        pin = frame.pins[i]
        flipped = pin.flipped(current[i])
        if flipped is current[i]:
            continue
        if _contained(frame, i, flipped) and not _touches_any(frame, i, flipped, current):
            current[i] = flipped
    return tuple(current)
