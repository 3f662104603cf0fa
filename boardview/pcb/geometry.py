"""Bounding boxes, distances and hit tests for board elements."""
import math
from typing import Iterable, Optional, Union

import numpy as np

from .models import (
    Arc, CapsulePad, CirclePad, Component, Pin, PinOrientation, RectanglePad,
    TextLabel, Trace, Via,
)
from .transform import normalize_angle, pad_corners, pin_position, rotate_point

Element = Union[Arc, Via, Trace, TextLabel, Pin, Component]
BBox = tuple[float, float, float, float]

# Approximate glyph advance relative to font size
TEXT_ASPECT = 0.6


class GeometryChecker:
    """
    Distance calculations for element shapes.

    All methods return the distance from a point to the element edge:
    - Positive: point is outside the element
    - Negative: point is inside the element
    - Zero: point is exactly on the edge
    """

    @staticmethod
    def point_to_pad_distance(px: float, py: float, pin: Pin,
                              component: Optional[Component] = None) -> float:
        """
        Distance from a board point to a pin pad, in its resolved orientation.

        Without a component the pin position is taken as absolute.
        """
        if component is not None:
            cx, cy = pin_position(pin, component)
            angle = component.rotation
        else:
            cx, cy = pin.x, pin.y
            angle = 0.0

        local_x, local_y = rotate_point(px - cx, py - cy, -math.degrees(angle))
        width, height = pin.extent()
        half_w = width / 2
        half_h = height / 2

        shape = pin.shape
        if isinstance(shape, CirclePad) and pin.orientation is PinOrientation.NATURAL:
            return GeometryChecker._point_to_circle(local_x, local_y, shape.radius)
        if isinstance(shape, (CirclePad, CapsulePad)):
            return GeometryChecker._point_to_oval(local_x, local_y, half_w, half_h)
        if isinstance(shape, RectanglePad):
            return GeometryChecker._point_to_rect(local_x, local_y, half_w, half_h)
        raise TypeError(f"unknown pad shape: {shape!r}")

    @staticmethod
    def _point_to_circle(x: float, y: float, radius: float) -> float:
        """Distance from point at (x,y) to circle centered at origin."""
        return math.sqrt(x * x + y * y) - radius

    @staticmethod
    def _point_to_rect(x: float, y: float, half_w: float, half_h: float) -> float:
        """Distance from point to axis-aligned rectangle centered at origin."""
        if abs(x) <= half_w and abs(y) <= half_h:
            return -min(half_w - abs(x), half_h - abs(y))

        closest_x = max(-half_w, min(half_w, x))
        closest_y = max(-half_h, min(half_h, y))
        return math.sqrt((x - closest_x) ** 2 + (y - closest_y) ** 2)

    @staticmethod
    def _point_to_oval(x: float, y: float, half_w: float, half_h: float) -> float:
        """
        Distance from point to oval (stadium shape / discorectangle).

        Oval is two semicircles connected by straight sides.
        """
        if half_w > half_h:
            radius = half_h
            cap_offset = half_w - radius
            if abs(x) > cap_offset:
                return math.sqrt((abs(x) - cap_offset) ** 2 + y ** 2) - radius
            return abs(y) - radius
        if half_h > half_w:
            radius = half_w
            cap_offset = half_h - radius
            if abs(y) > cap_offset:
                return math.sqrt(x ** 2 + (abs(y) - cap_offset) ** 2) - radius
            return abs(x) - radius
        return math.sqrt(x * x + y * y) - half_w

    @staticmethod
    def point_to_trace_distance(px: float, py: float, trace: Trace) -> float:
        """
        Distance from point to trace edge.

        Trace is a capsule (line segment with rounded ends).
        """
        centerline_dist = GeometryChecker._point_to_segment(
            px, py, trace.x1, trace.y1, trace.x2, trace.y2
        )
        return centerline_dist - trace.width / 2

    @staticmethod
    def point_to_via_distance(px: float, py: float, via: Via) -> float:
        """Distance from point to via edge (via is a circle)."""
        return math.sqrt((px - via.x) ** 2 + (py - via.y) ** 2) - via.radius

    @staticmethod
    def point_to_arc_distance(px: float, py: float, arc: Arc) -> float:
        """Distance from point to the stroked arc edge."""
        dx = px - arc.cx
        dy = py - arc.cy
        angle = math.degrees(math.atan2(dy, dx))
        if angle_in_sweep(angle, arc.start_angle, arc.end_angle):
            return abs(math.hypot(dx, dy) - arc.radius) - arc.thickness / 2

        ends = arc_endpoints(arc)
        return min(math.hypot(px - x, py - y) for x, y in ends) - arc.thickness / 2

    @staticmethod
    def _point_to_segment(px: float, py: float,
                          x1: float, y1: float,
                          x2: float, y2: float) -> float:
        """Calculate shortest distance from point to line segment."""
        dx = x2 - x1
        dy = y2 - y1
        length_sq = dx * dx + dy * dy

        if length_sq < 0.000001:
            return math.sqrt((px - x1) ** 2 + (py - y1) ** 2)

        t = ((px - x1) * dx + (py - y1) * dy) / length_sq
        t = max(0.0, min(1.0, t))

        closest_x = x1 + t * dx
        closest_y = y1 + t * dy
        return math.sqrt((px - closest_x) ** 2 + (py - closest_y) ** 2)


def angle_in_sweep(angle_deg: float, start_deg: float, end_deg: float) -> bool:
    """True if angle lies on the counterclockwise sweep from start to end."""
    start = normalize_angle(start_deg)
    sweep = normalize_angle(end_deg - start_deg)
    if sweep == 0 and end_deg != start_deg:
        sweep = 360.0
    return normalize_angle(angle_deg - start) <= sweep


def arc_endpoints(arc: Arc) -> list[tuple[float, float]]:
    points = []
    for angle in (arc.start_angle, arc.end_angle):
        rad = math.radians(angle)
        points.append((arc.cx + arc.radius * math.cos(rad), arc.cy + arc.radius * math.sin(rad)))
    return points


def points_bounds(points: Iterable[tuple[float, float]]) -> Optional[BBox]:
    """Axis-aligned bounds of a point cloud, or None when empty."""
    arr = np.asarray(list(points), dtype=float)
    if arr.size == 0:
        return None
    mins = arr.min(axis=0)
    maxs = arr.max(axis=0)
    return float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1])


def union_bounds(boxes: Iterable[Optional[BBox]]) -> Optional[BBox]:
    """Bounds enclosing every non-empty box."""
    arr = np.asarray([b for b in boxes if b is not None], dtype=float)
    if arr.size == 0:
        return None
    return (float(arr[:, 0].min()), float(arr[:, 1].min()),
            float(arr[:, 2].max()), float(arr[:, 3].max()))


def _expand(box: BBox, margin: float) -> BBox:
    return box[0] - margin, box[1] - margin, box[2] + margin, box[3] + margin


def _arc_bbox(arc: Arc) -> BBox:
    points = arc_endpoints(arc)
    for quadrant in (0.0, 90.0, 180.0, 270.0):
        if angle_in_sweep(quadrant, arc.start_angle, arc.end_angle):
            rad = math.radians(quadrant)
            points.append((arc.cx + arc.radius * math.cos(rad), arc.cy + arc.radius * math.sin(rad)))
    return _expand(points_bounds(points), arc.thickness / 2)


def _label_origin(label: TextLabel, parent: Optional[Component]) -> tuple[float, float]:
    if parent is not None and label.component_relative:
        return parent.x + label.x, parent.y + label.y
    return label.x, label.y


def _label_bbox(label: TextLabel, parent: Optional[Component]) -> BBox:
    x, y = _label_origin(label, parent)
    height = label.font_size
    width = len(label.text) * height * TEXT_ASPECT
    return x, y - height, x + width, y


def _pin_bbox(pin: Pin, parent: Optional[Component]) -> BBox:
    if parent is None:
        width, height = pin.extent()
        return pin.x - width / 2, pin.y - height / 2, pin.x + width / 2, pin.y + height / 2
    return points_bounds(pad_corners(pin, parent))


def _component_bbox(component: Component) -> Optional[BBox]:
    boxes = []
    local = component.outline_bounds()
    if local is not None:
        boxes.append((component.x + local[0], component.y + local[1],
                      component.x + local[2], component.y + local[3]))
    boxes.extend(_pin_bbox(pin, component) for pin in component.pins)
    if not boxes:
        return component.x, component.y, component.x, component.y
    return union_bounds(boxes)


def bounding_box(element: Element, parent: Optional[Component] = None) -> Optional[BBox]:
    """
    Board-space bounding box of an element.

    Args:
        element: Any board element
        parent: Owning component for pins and embedded labels

    Returns:
        (min_x, min_y, max_x, max_y)
    """
    if isinstance(element, Trace):
        box = points_bounds([(element.x1, element.y1), (element.x2, element.y2)])
        return _expand(box, element.width / 2)
    if isinstance(element, Via):
        r = element.radius
        return element.x - r, element.y - r, element.x + r, element.y + r
    if isinstance(element, Arc):
        return _arc_bbox(element)
    if isinstance(element, TextLabel):
        return _label_bbox(element, parent)
    if isinstance(element, Pin):
        return _pin_bbox(element, parent)
    if isinstance(element, Component):
        return _component_bbox(element)
    raise TypeError(f"unknown element: {element!r}")


def hit_test(element: Element, x: float, y: float, tolerance: float = 0.0,
             parent: Optional[Component] = None) -> bool:
    """True if (x, y) lies on the element, within tolerance."""
    if isinstance(element, Trace):
        return GeometryChecker.point_to_trace_distance(x, y, element) <= tolerance
    if isinstance(element, Via):
        return GeometryChecker.point_to_via_distance(x, y, element) <= tolerance
    if isinstance(element, Arc):
        return GeometryChecker.point_to_arc_distance(x, y, element) <= tolerance
    if isinstance(element, TextLabel):
        min_x, min_y, max_x, max_y = _expand(_label_bbox(element, parent), tolerance)
        return min_x <= x <= max_x and min_y <= y <= max_y
    if isinstance(element, Pin):
        return GeometryChecker.point_to_pad_distance(x, y, element, parent) <= tolerance
    if isinstance(element, Component):
        if any(hit_test(pin, x, y, tolerance, element) for pin in element.pins):
            return True
        local = element.outline_bounds()
        if local is None:
            return False
        return (element.x + local[0] - tolerance <= x <= element.x + local[2] + tolerance
                and element.y + local[1] - tolerance <= y <= element.y + local[3] + tolerance)
    raise TypeError(f"unknown element: {element!r}")
