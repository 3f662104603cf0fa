"""SVG styling constants for board previews."""
from ..pcb.layers import (
    BOARD_OUTLINE_LAYER, PINS_LAYER, SILKSCREEN_LAYER, TRACE_LAYERS,
    UNKNOWN_LAYERS, VIAS_LAYER,
)

# Background color for the board
BACKGROUND_COLOR = "#1a1a1a"

# Highlight color for selected nets
HIGHLIGHT_COLOR = "#00FF00"

# Fallback for layers missing from the board's layer table
DEFAULT_LAYER_COLOR = "#888888"

# Layer render order (back to front)
LAYER_ORDER = [
    BOARD_OUTLINE_LAYER,
    *UNKNOWN_LAYERS,
    *reversed(TRACE_LAYERS),
    SILKSCREEN_LAYER,
    VIAS_LAYER,
    PINS_LAYER,
]

# Default opacities
PAD_OPACITY = 0.9
TRACE_OPACITY = 0.9
GRAPHICS_OPACITY = 0.8

# Stroke widths, used when a record carries no width of its own
OUTLINE_STROKE_WIDTH = 0.15
DEFAULT_STROKE_WIDTH = 0.12

# Margin around the board as a fraction of its larger side
MARGIN_FRACTION = 0.02
MIN_MARGIN = 1.0
