"""Local-frame snapshot of a component used by the orientation passes."""
import math
from collections import defaultdict
from dataclasses import dataclass

import numpy as np

from ..pcb.models import Component, PinOrientation, pad_size
from ..pcb.transform import rotate_point

# Histogram bin width for the dominant outline angle
ANGLE_BIN_DEG = 5.0
OVERLAP_EPSILON = 1e-9

BBox = tuple[float, float, float, float]


@dataclass(frozen=True)
class LocalPin:
    """A pin in the component's local frame."""
    x: float
    y: float
    width: float  # Natural pad width
    height: float  # Natural pad height
    layer_id: int

    @property
    def is_square(self) -> bool:
        return self.width == self.height

    @property
    def short_side(self) -> float:
        return min(self.width, self.height)

    @property
    def long_side(self) -> float:
        return max(self.width, self.height)

    def extent(self, orientation: PinOrientation) -> tuple[float, float]:
        if orientation is PinOrientation.HORIZONTAL:
            return self.long_side, self.short_side
        if orientation is PinOrientation.VERTICAL:
            return self.short_side, self.long_side
        return self.width, self.height

    def flipped(self, orientation: PinOrientation) -> PinOrientation:
        """The orientation that swaps this pad's drawn width and height."""
        if self.is_square:
            return orientation
        if orientation is PinOrientation.NATURAL:
            if self.width > self.height:
                return PinOrientation.VERTICAL
            return PinOrientation.HORIZONTAL
        return orientation.opposite()


@dataclass(frozen=True)
class ComponentFrame:
    """Read-only snapshot of one component, rotated into its local frame."""
    angle: float  # Radians; local = rotate(board - anchor, -angle)
    box: BBox
    pins: tuple[LocalPin, ...]

    @property
    def box_width(self) -> float:
        return self.box[2] - self.box[0]

    @property
    def box_height(self) -> float:
        return self.box[3] - self.box[1]


def dominant_angle(component: Component) -> float:
    """
    Dominant outline direction in radians, folded into [-pi/4, pi/4).

    Segment directions (mod 180 degrees) are binned in 5 degree bins
    weighted by length; the heaviest bin wins, lowest bin on ties. The
    result is the length-weighted mean angle of that bin.
    """
    weights: dict[int, float] = defaultdict(float)
    sums: dict[int, float] = defaultdict(float)
    for seg in component.segments:
        length = seg.length
        if length <= 0:
            continue
        angle = math.degrees(math.atan2(seg.y2 - seg.y1, seg.x2 - seg.x1)) % 180.0
        bin_index = int(angle // ANGLE_BIN_DEG) % int(180 / ANGLE_BIN_DEG)
        weights[bin_index] += length
        sums[bin_index] += angle * length

    if not weights:
        return 0.0

    best = max(sorted(weights), key=lambda b: weights[b])
    angle = sums[best] / weights[best]
    folded = (angle + 45.0) % 90.0 - 45.0
    return math.radians(folded)


def _local_box(component: Component, angle_deg: float, pins: list[LocalPin]) -> BBox:
    if component.segments:
        points = []
        for seg in component.segments:
            points.append(rotate_point(seg.x1, seg.y1, -angle_deg))
            points.append(rotate_point(seg.x2, seg.y2, -angle_deg))
        arr = np.asarray(points)
        return float(arr[:, 0].min()), float(arr[:, 1].min()), float(arr[:, 0].max()), float(arr[:, 1].max())

    if component.width > 0 and component.height > 0:
        return -component.width / 2, -component.height / 2, component.width / 2, component.height / 2

    xs = [p.x - p.width / 2 for p in pins] + [p.x + p.width / 2 for p in pins]
    ys = [p.y - p.height / 2 for p in pins] + [p.y + p.height / 2 for p in pins]
    return min(xs), min(ys), max(xs), max(ys)


def build_frame(component: Component) -> ComponentFrame:
    """Snapshot a component's pins and body box in its local frame."""
    angle = dominant_angle(component)
    angle_deg = math.degrees(angle)
    pins = []
    for pin in component.pins:
        x, y = rotate_point(pin.x, pin.y, -angle_deg)
        width, height = pad_size(pin.shape)
        pins.append(LocalPin(x, y, width, height, pin.layer_id))
    return ComponentFrame(angle, _local_box(component, angle_deg, pins), tuple(pins))


def pad_extents(frame: ComponentFrame, orientations: list[PinOrientation]) -> np.ndarray:
    return np.array([pin.extent(o) for pin, o in zip(frame.pins, orientations)], dtype=float)


def out_of_box(frame: ComponentFrame, index: int, orientation: PinOrientation) -> bool:
    pin = frame.pins[index]
    width, height = pin.extent(orientation)
    min_x, min_y, max_x, max_y = frame.box
    return (pin.x - width / 2 < min_x or pin.x + width / 2 > max_x
            or pin.y - height / 2 < min_y or pin.y + height / 2 > max_y)


def overlaps_neighbour(frame: ComponentFrame, index: int, orientation: PinOrientation,
                       orientations: list[PinOrientation]) -> bool:
    """True if the pad strictly overlaps another pad on the same layer."""
    pin = frame.pins[index]
    width, height = pin.extent(orientation)
    sizes = pad_extents(frame, orientations)
    xs = np.array([p.x for p in frame.pins])
    ys = np.array([p.y for p in frame.pins])
    same_layer = np.array([p.layer_id == pin.layer_id for p in frame.pins])
    same_layer[index] = False

    overlap_x = (width + sizes[:, 0]) / 2 - np.abs(xs - pin.x)
    overlap_y = (height + sizes[:, 1]) / 2 - np.abs(ys - pin.y)
    hits = (overlap_x > OVERLAP_EPSILON) & (overlap_y > OVERLAP_EPSILON) & same_layer
    return bool(hits.any())

