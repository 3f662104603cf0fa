"""One-line element descriptions for tooltips and the CLI."""
from typing import Optional

from .board import Board
from .geometry import Element
from .models import (
    Arc, CapsulePad, CirclePad, Component, Pin, RectanglePad, TextLabel, Trace, Via,
)


def _net(board: Board, net_id: int) -> str:
    return board.net_name(net_id) or f"#{net_id}"


def _layer(board: Board, layer_id: int) -> str:
    layer = board.get_layer(layer_id)
    return layer.name if layer else f"Layer {layer_id}"


def describe_shape(pin: Pin) -> str:
    shape = pin.shape
    if isinstance(shape, CirclePad):
        return f"circle r={shape.radius:g}"
    if isinstance(shape, RectanglePad):
        return f"rect {shape.width:g}x{shape.height:g}"
    if isinstance(shape, CapsulePad):
        return f"capsule {shape.width:g}x{shape.height:g}"
    raise TypeError(f"unknown pad shape: {shape!r}")


def describe(element: Element, board: Board, parent: Optional[Component] = None) -> str:
    """Short human-readable summary of an element."""
    if isinstance(element, Trace):
        return (f"Trace on {_layer(board, element.layer)}, net {_net(board, element.net_id)}, "
                f"width {element.width:g}, length {element.length:.4g}")
    if isinstance(element, Arc):
        return (f"Arc on {_layer(board, element.layer)}, net {_net(board, element.net_id)}, "
                f"r={element.radius:g} {element.start_angle:g}..{element.end_angle:g} deg")
    if isinstance(element, Via):
        text = f" '{element.text}'" if element.text else ""
        return (f"Via L{element.layer_a}-L{element.layer_b}, net {_net(board, element.net_id)}, "
                f"r={element.radius:g}, drill {element.drill_diameter:.4g}{text}")
    if isinstance(element, TextLabel):
        return f"Text '{element.text}' on {_layer(board, element.layer)}"
    if isinstance(element, Pin):
        owner = parent.reference if parent else element.component_reference
        parts = [f"Pin {owner}.{element.name}", f"net {_net(board, element.net_id)}",
                 describe_shape(element), element.orientation.value]
        if element.diagnostic_reading:
            parts.append(f"reading {element.diagnostic_reading}")
        return ", ".join(parts)
    if isinstance(element, Component):
        value = f" {element.value}" if element.value else ""
        return (f"Component {element.reference}{value} ({element.footprint or 'no footprint'}), "
                f"{len(element.pins)} pins, {element.side.value}, {element.mount_type.value}")
    raise TypeError(f"unknown element: {element!r}")
