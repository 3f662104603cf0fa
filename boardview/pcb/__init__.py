from .board import Board
from .models import (
    Arc, BoardInfo, CapsulePad, CirclePad, Component, ComponentType, Layer,
    LayerType, LineSegment, LocalEdge, MountingSide, Net, PadShape, Pin,
    PinOrientation, RectanglePad, TextLabel, Trace, Via,
)
from .geometry import bounding_box, hit_test
from .info import describe

__all__ = [
    "Board", "Arc", "BoardInfo", "CapsulePad", "CirclePad", "Component",
    "ComponentType", "Layer", "LayerType", "LineSegment", "LocalEdge",
    "MountingSide", "Net", "PadShape", "Pin", "PinOrientation",
    "RectanglePad", "TextLabel", "Trace", "Via",
    "bounding_box", "hit_test", "describe",
]
