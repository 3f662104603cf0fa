"""SVG document generator for board previews."""
from typing import Optional
from xml.etree.ElementTree import Element, SubElement, tostring

from ..pcb.board import Board
from ..pcb.layers import BOARD_OUTLINE_LAYER, PINS_LAYER, VIAS_LAYER
from .elements import (
    create_arc_element, create_label_element, create_pin_element,
    create_segment_element, create_trace_element, create_via_element,
    create_via_hole,
)
from .styles import (
    BACKGROUND_COLOR, DEFAULT_LAYER_COLOR, HIGHLIGHT_COLOR, LAYER_ORDER,
    MARGIN_FRACTION, MIN_MARGIN, OUTLINE_STROKE_WIDTH,
)


class SVGGenerator:
    """Generate SVG representation of a decoded board."""

    def __init__(self, board: Board):
        """Initialize with a decoded Board."""
        self.board = board
        self.board_info = board.get_board_info()

    def default_margin(self) -> float:
        return max(MARGIN_FRACTION * max(self.board_info.width, self.board_info.height), MIN_MARGIN)

    def generate(self, layers: Optional[list[int]] = None, margin: Optional[float] = None) -> str:
        """
        Generate SVG document.

        Args:
            layers: Layer ids to include, or None for every visible layer
            margin: Margin around the board, defaults to 2% of its larger side

        Returns:
            SVG document as string
        """
        if layers is None:
            layers = [layer.id for layer in self.board.layers if layer.visible]
        if margin is None:
            margin = self.default_margin()

        # Calculate viewBox with margin
        min_x = self.board_info.min_x - margin
        min_y = self.board_info.min_y - margin
        width = self.board_info.width + 2 * margin
        height = self.board_info.height + 2 * margin

        svg = Element("svg", {
            "xmlns": "http://www.w3.org/2000/svg",
            "viewBox": f"{min_x:.4f} {min_y:.4f} {width:.4f} {height:.4f}",
            "width": "100%",
            "height": "100%",
            "preserveAspectRatio": "xMidYMid meet",
        })

        style = SubElement(svg, "style")
        style.text = self._generate_css()

        SubElement(svg, "rect", {
            "class": "background",
            "x": f"{min_x:.4f}",
            "y": f"{min_y:.4f}",
            "width": f"{width:.4f}",
            "height": f"{height:.4f}",
            "fill": BACKGROUND_COLOR,
        })

        for layer_id in LAYER_ORDER:
            if layer_id not in layers:
                continue
            layer = self.board.get_layer(layer_id)
            group = SubElement(svg, "g", {
                "id": f"layer-{layer_id}",
                "class": "layer",
                "data-layer": str(layer_id),
                "data-layer-name": layer.name if layer else "",
            })

            if layer_id == VIAS_LAYER:
                self._add_vias(group)
            elif layer_id == PINS_LAYER:
                self._add_pins(group)
            else:
                self._add_layer_graphics(group, layer_id)

        return tostring(svg, encoding="unicode")

    def _color(self, layer_id: int) -> str:
        layer = self.board.get_layer(layer_id)
        return layer.color if layer else DEFAULT_LAYER_COLOR

    def _generate_css(self) -> str:
        """Generate CSS styles for the SVG."""
        return f"""
            .pad {{ cursor: pointer; pointer-events: all; }}
            .pad:hover {{ filter: brightness(1.3); }}
            .pad.highlighted {{
                fill: {HIGHLIGHT_COLOR} !important;
                fill-opacity: 0.9 !important;
            }}
            .trace {{ pointer-events: none; }}
            .trace.highlighted {{
                stroke: {HIGHLIGHT_COLOR} !important;
                stroke-opacity: 1 !important;
            }}
            .via {{ cursor: pointer; pointer-events: all; }}
            .via:hover {{ filter: brightness(1.3); }}
            .via.highlighted {{
                fill: {HIGHLIGHT_COLOR} !important;
                fill-opacity: 0.9 !important;
            }}
            .layer {{ pointer-events: none; }}
            .layer.hidden {{ display: none; }}
            .label {{ pointer-events: none; }}
        """

    def _add_layer_graphics(self, group: Element, layer_id: int) -> None:
        """Add traces, arcs, labels and component outlines drawn on a layer."""
        color = self._color(layer_id)
        min_width = OUTLINE_STROKE_WIDTH if layer_id == BOARD_OUTLINE_LAYER else 0.0

        for trace in self.board.traces_on_layer(layer_id):
            group.append(create_trace_element(
                trace, color, self.board.net_name(trace.net_id), min_width
            ))
        for arc in self.board.arcs:
            if arc.layer == layer_id:
                group.append(create_arc_element(arc, color))
        for label in self.board.labels:
            if label.layer == layer_id:
                elem = create_label_element(label, color)
                if elem is not None:
                    group.append(elem)

        for component in self.board.components:
            for segment in component.segments:
                if segment.layer == layer_id:
                    group.append(create_segment_element(segment, component, color))
            for label in component.labels:
                if label.layer == layer_id:
                    elem = create_label_element(label, color, component)
                    if elem is not None:
                        group.append(elem)

    def _add_pins(self, group: Element) -> None:
        """Add every component pin pad."""
        color = self._color(PINS_LAYER)
        for component, pin in self.board.iter_pins():
            group.append(create_pin_element(
                pin, component, color, self.board.net_name(pin.net_id)
            ))

    def _add_vias(self, group: Element) -> None:
        """Add vias with their drill holes on top."""
        for via in self.board.vias:
            group.append(create_via_element(via, self.board.net_name(via.net_id)))
        for via in self.board.vias:
            group.append(create_via_hole(via))
