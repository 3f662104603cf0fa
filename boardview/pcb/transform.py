"""Coordinate transformation utilities."""
import math

from .models import Component, Pin


def rotate_point(x: float, y: float, angle_deg: float) -> tuple[float, float]:
    """
    Rotate a point around the origin by the given angle.

    Args:
        x: X coordinate
        y: Y coordinate
        angle_deg: Rotation angle in degrees (counterclockwise positive)

    Returns:
        Tuple of (rotated_x, rotated_y)
    """
    if angle_deg == 0:
        return x, y

    angle_rad = math.radians(angle_deg)
    cos_a = math.cos(angle_rad)
    sin_a = math.sin(angle_rad)

    rotated_x = x * cos_a - y * sin_a
    rotated_y = x * sin_a + y * cos_a

    return rotated_x, rotated_y


def normalize_angle(angle_deg: float) -> float:
    """Map an angle in degrees into [0, 360)."""
    angle_deg = math.fmod(angle_deg, 360.0)
    if angle_deg < 0:
        angle_deg += 360.0
    return angle_deg


def mirror_x(x: float, center_x: float) -> float:
    """Reflect an X coordinate across the vertical line x = center_x."""
    return 2 * center_x - x


def mirror_arc_angles(start_deg: float, end_deg: float) -> tuple[float, float]:
    """
    Start/end angles of an arc after reflection across a vertical axis.

    Reflection reverses sweep direction, so the new start is the mirrored end.
    """
    return normalize_angle(180.0 - end_deg), normalize_angle(180.0 - start_deg)


def pin_position(pin: Pin, component: Component) -> tuple[float, float]:
    """Board-absolute position of a component pin."""
    return component.x + pin.x, component.y + pin.y


def pad_corners(pin: Pin, component: Component) -> list[tuple[float, float]]:
    """
    Board-absolute corners of a pin's pad in its resolved orientation.

    The pad rectangle is axis-aligned in the component's local frame,
    which is rotated by the component's dominant angle.
    """
    width, height = pin.extent()
    half_w = width / 2
    half_h = height / 2
    cx, cy = pin_position(pin, component)
    angle_deg = math.degrees(component.rotation)

    corners = []
    for dx, dy in ((-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)):
        rx, ry = rotate_point(dx, dy, angle_deg)
        corners.append((cx + rx, cy + ry))
    return corners
