"""Standard layer table shared by every decoded board."""
import colorsys

from .models import (
    BOARD_OUTLINE_LAYER, PINS_LAYER, SILKSCREEN_LAYER, TRACE_LAYERS, UNKNOWN_LAYERS,
    VIAS_LAYER, Layer, LayerType,
)

# Base hue for trace layer colours, rotated 30 degrees per layer
BASE_HUE = 0.0
HUE_STEP = 30.0 / 360.0

SILKSCREEN_COLOR = "#ffffff"
OUTLINE_COLOR = "#ffff00"
VIAS_COLOR = "#c0c0c0"
PINS_COLOR = "#d4a017"


def layer_color(index: int) -> str:
    """Colour for the index-th generated layer (hue rotation)."""
    hue = (BASE_HUE + index * HUE_STEP) % 1.0
    r, g, b = colorsys.hsv_to_rgb(hue, 0.8, 0.9)
    return f"#{int(r * 255):02x}{int(g * 255):02x}{int(b * 255):02x}"


def build_standard_layers() -> list[Layer]:
    """Create the fixed layer list in drawing order."""
    layers = [
        Layer(PINS_LAYER, "Pins", LayerType.SIGNAL, color=PINS_COLOR),
        Layer(VIAS_LAYER, "Vias", LayerType.DRILL, color=VIAS_COLOR),
    ]
    for i in TRACE_LAYERS:
        layers.append(Layer(i, f"Trace Layer {i}", LayerType.SIGNAL, color=layer_color(i - 1)))
    layers.append(Layer(SILKSCREEN_LAYER, "Silkscreen", LayerType.SILKSCREEN, color=SILKSCREEN_COLOR))
    for i in UNKNOWN_LAYERS:
        layers.append(Layer(i, f"Unknown Layer {i}", LayerType.OTHER, color=layer_color(i - 1)))
    layers.append(Layer(BOARD_OUTLINE_LAYER, "Board Edges", LayerType.OUTLINE, color=OUTLINE_COLOR))
    return layers
