"""The decoded board and its read accessors."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from .geometry import Element, bounding_box, union_bounds
from .layers import BOARD_OUTLINE_LAYER, PINS_LAYER, VIAS_LAYER, build_standard_layers
from .models import (
    Arc, BoardInfo, Component, Layer, Net, Pin, TextLabel, Trace, Via,
)

# part/net name -> pin name (or fixed key) -> reading
DiagnosticTable = dict[str, dict[str, str]]


@dataclass
class Board:
    """A fully decoded board.

    Coordinates are in world units, centred on the board outline when one
    was found. Pins, embedded labels and outline segments are stored
    relative to their component anchor.
    """
    name: str = ""
    file_path: str = ""
    width: float = 0.0
    height: float = 0.0
    origin_offset: tuple[float, float] = (0.0, 0.0)  # Translation applied by normalization
    layers: list[Layer] = field(default_factory=build_standard_layers)
    arcs: list[Arc] = field(default_factory=list)
    vias: list[Via] = field(default_factory=list)
    traces: list[Trace] = field(default_factory=list)
    labels: list[TextLabel] = field(default_factory=list)
    components: list[Component] = field(default_factory=list)
    nets: dict[int, Net] = field(default_factory=dict)
    diagnostic_readings: DiagnosticTable = field(default_factory=dict)
    folded: bool = False
    is_loaded: bool = True
    error_message: str = ""

    @property
    def board_name(self) -> str:
        """Display name: explicit name, else the file stem."""
        if self.name:
            return self.name
        if self.file_path:
            return Path(self.file_path).stem
        return ""

    def get_layer(self, layer_id: int) -> Optional[Layer]:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    def is_layer_visible(self, layer_id: int) -> bool:
        layer = self.get_layer(layer_id)
        return layer is not None and layer.visible

    def set_layer_visible(self, layer_id: int, visible: bool) -> None:
        """Toggle a layer's visibility. Unknown ids raise KeyError."""
        layer = self.get_layer(layer_id)
        if layer is None:
            raise KeyError(layer_id)
        layer.visible = visible

    def get_net(self, net_id: int) -> Optional[Net]:
        return self.nets.get(net_id)

    def net_name(self, net_id: int) -> str:
        """Net name, or an empty string for unknown ids."""
        net = self.nets.get(net_id)
        return net.name if net else ""

    def get_component(self, reference: str) -> Optional[Component]:
        for component in self.components:
            if component.reference == reference:
                return component
        return None

    def traces_on_layer(self, layer_id: int) -> list[Trace]:
        return [t for t in self.traces if t.layer == layer_id]

    def elements_on_layer(self, layer_id: int) -> list[Element]:
        """Top-level elements drawn on a layer."""
        if layer_id == VIAS_LAYER:
            return list(self.vias)
        if layer_id == PINS_LAYER:
            return [c for c in self.components if c.layer_id == layer_id]
        elements: list[Element] = []
        elements.extend(a for a in self.arcs if a.layer == layer_id)
        elements.extend(t for t in self.traces if t.layer == layer_id)
        elements.extend(lbl for lbl in self.labels if lbl.layer == layer_id)
        return elements

    def all_elements(self) -> Iterator[Element]:
        """Every top-level element; pins are reached through their component."""
        yield from self.arcs
        yield from self.vias
        yield from self.traces
        yield from self.labels
        yield from self.components

    def iter_pins(self) -> Iterator[tuple[Component, Pin]]:
        for component in self.components:
            for pin in component.pins:
                yield component, pin

    def pins_by_net(self, net_id: int) -> list[tuple[Component, Pin]]:
        """All (component, pin) pairs connected to a net."""
        return [(c, p) for c, p in self.iter_pins() if p.net_id == net_id]

    @property
    def outline_traces(self) -> list[Trace]:
        return self.traces_on_layer(BOARD_OUTLINE_LAYER)

    def get_board_info(self) -> BoardInfo:
        """Get overall board information."""
        bounds = union_bounds(bounding_box(t) for t in self.outline_traces)
        if bounds is None:
            bounds = union_bounds(bounding_box(e) for e in self.all_elements())
        if bounds is None:
            bounds = (0.0, 0.0, 0.0, 0.0)

        return BoardInfo(
            name=self.board_name,
            min_x=bounds[0],
            min_y=bounds[1],
            max_x=bounds[2],
            max_y=bounds[3],
            layers=[layer.name for layer in self.layers],
            component_count=len(self.components),
            pin_count=sum(len(c.pins) for c in self.components),
            net_count=len(self.nets),
            trace_count=len(self.traces),
            via_count=len(self.vias),
            arc_count=len(self.arcs),
            label_count=len(self.labels),
            origin_offset=self.origin_offset,
            folded=self.folded,
        )
