"""SVG element generators for board features."""
import math
from typing import Optional
from xml.etree.ElementTree import Element

from ..pcb.geometry import arc_endpoints
from ..pcb.models import (
    Arc, CapsulePad, CirclePad, Component, LineSegment, Pin, PinOrientation,
    TextLabel, Trace, Via,
)
from ..pcb.transform import normalize_angle, pad_corners, pin_position
from .styles import (
    BACKGROUND_COLOR, DEFAULT_STROKE_WIDTH, GRAPHICS_OPACITY, PAD_OPACITY,
    TRACE_OPACITY,
)

# Used for labels that carry no font size
DEFAULT_FONT_SIZE = 1.0


def _stroke(width: float) -> str:
    return f"{width if width > 0 else DEFAULT_STROKE_WIDTH:.4f}"


def _arc_sweep(arc: Arc) -> float:
    """Counterclockwise sweep from start to end in degrees, in (0, 360]."""
    sweep = normalize_angle(arc.end_angle - arc.start_angle)
    if sweep == 0:
        return 360.0
    return sweep


def create_trace_element(trace: Trace, color: str, net_name: str = "",
                         min_width: float = 0.0) -> Element:
    """Create a stroked line for a trace, at least `min_width` wide."""
    return Element("line", {
        "x1": f"{trace.x1:.4f}",
        "y1": f"{trace.y1:.4f}",
        "x2": f"{trace.x2:.4f}",
        "y2": f"{trace.y2:.4f}",
        "stroke": color,
        "stroke-width": _stroke(max(trace.width, min_width)),
        "stroke-linecap": "round",
        "stroke-opacity": str(TRACE_OPACITY),
        "class": "trace",
        "data-net": str(trace.net_id),
        "data-net-name": net_name,
    })


def create_arc_element(arc: Arc, color: str) -> Element:
    """
    Create an SVG element for an arc.

    Arcs sweep counterclockwise from start to end angle. A full sweep is
    drawn as a circle since an SVG arc command cannot close on itself.
    """
    attrs = {
        "stroke": color,
        "stroke-width": _stroke(arc.thickness),
        "stroke-opacity": str(GRAPHICS_OPACITY),
        "fill": "none",
        "class": "arc",
        "data-net": str(arc.net_id),
    }
    sweep = _arc_sweep(arc)
    if sweep >= 360.0:
        return Element("circle", {
            **attrs,
            "cx": f"{arc.cx:.4f}",
            "cy": f"{arc.cy:.4f}",
            "r": f"{arc.radius:.4f}",
        })

    (x1, y1), (x2, y2) = arc_endpoints(arc)
    large_arc = 1 if sweep > 180.0 else 0
    d = (
        f"M {x1:.4f} {y1:.4f} "
        f"A {arc.radius:.4f} {arc.radius:.4f} 0 {large_arc} 1 "
        f"{x2:.4f} {y2:.4f}"
    )
    return Element("path", {**attrs, "d": d, "stroke-linecap": "round"})


def create_via_element(via: Via, net_name: str = "") -> Element:
    """Create the pad circle of a via."""
    return Element("circle", {
        "cx": f"{via.x:.4f}",
        "cy": f"{via.y:.4f}",
        "r": f"{via.radius:.4f}",
        "fill": "#C8A832",  # Gold color for vias
        "fill-opacity": str(PAD_OPACITY),
        "class": "via",
        "data-net": str(via.net_id),
        "data-net-name": net_name,
        "data-layers": f"{via.layer_a}-{via.layer_b}",
    })


def create_via_hole(via: Via) -> Element:
    """Create the drill hole drawn over a via."""
    return Element("circle", {
        "cx": f"{via.x:.4f}",
        "cy": f"{via.y:.4f}",
        "r": f"{via.drill_diameter / 2:.4f}",
        "fill": BACKGROUND_COLOR,
        "class": "via-hole",
    })


def create_pin_element(pin: Pin, component: Component, color: str,
                       net_name: str = "") -> Element:
    """
    Create an SVG element for a pin pad.

    The pad is drawn with its resolved orientation in the component's
    local frame, then turned by the component rotation.

    Args:
        pin: Pin to draw
        component: Owning component
        color: Fill colour
        net_name: Name of the pin's net, for the data attributes

    Returns:
        SVG element
    """
    cx, cy = pin_position(pin, component)
    attrs = {
        "data-net": str(pin.net_id),
        "data-net-name": net_name,
        "data-component": component.reference,
        "data-pin": pin.name,
        "data-orientation": pin.orientation.value,
        "fill": color,
        "fill-opacity": str(PAD_OPACITY),
        "class": "pad",
    }

    shape = pin.shape
    if isinstance(shape, CirclePad) and pin.orientation is PinOrientation.NATURAL:
        return Element("circle", {
            **attrs,
            "cx": f"{cx:.4f}",
            "cy": f"{cy:.4f}",
            "r": f"{shape.radius:.4f}",
        })

    if isinstance(shape, (CirclePad, CapsulePad)):
        width, height = pin.extent()
        corner = min(width, height) / 2
        elem = Element("rect", {
            **attrs,
            "x": f"{cx - width / 2:.4f}",
            "y": f"{cy - height / 2:.4f}",
            "width": f"{width:.4f}",
            "height": f"{height:.4f}",
            "rx": f"{corner:.4f}",
            "ry": f"{corner:.4f}",
        })
        if component.rotation:
            elem.set("transform", f"rotate({math.degrees(component.rotation):.4f} {cx:.4f} {cy:.4f})")
        return elem

    points = " ".join(f"{x:.4f},{y:.4f}" for x, y in pad_corners(pin, component))
    return Element("polygon", {**attrs, "points": points})


def create_segment_element(segment: LineSegment, component: Component, color: str) -> Element:
    """Create a line for a component outline segment."""
    return Element("line", {
        "x1": f"{component.x + segment.x1:.4f}",
        "y1": f"{component.y + segment.y1:.4f}",
        "x2": f"{component.x + segment.x2:.4f}",
        "y2": f"{component.y + segment.y2:.4f}",
        "stroke": color,
        "stroke-width": _stroke(segment.thickness),
        "stroke-linecap": "round",
        "stroke-opacity": str(GRAPHICS_OPACITY),
        "class": "outline",
        "data-component": component.reference,
    })


def create_label_element(label: TextLabel, color: str,
                         parent: Optional[Component] = None) -> Optional[Element]:
    """Create a text element anchored at the label origin; None if hidden."""
    if not label.visible or not label.text:
        return None

    x, y = label.x, label.y
    if parent is not None and label.component_relative:
        x += parent.x
        y += parent.y

    elem = Element("text", {
        "x": f"{x:.4f}",
        "y": f"{y:.4f}",
        "fill": color,
        "font-size": f"{label.font_size or DEFAULT_FONT_SIZE:.4f}",
        "font-family": "monospace",
        "class": "label",
    })
    if label.rotation:
        elem.set("transform", f"rotate({label.rotation:.4f} {x:.4f} {y:.4f})")
    elem.text = label.text
    return elem
