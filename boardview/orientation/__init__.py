from .frame import ComponentFrame, LocalPin, build_frame, dominant_angle
from .resolver import (
    Layout, Resolution, apply_resolution, classify_edges, first_pass,
    resolve_board, resolve_component, second_pass, third_pass,
)
from .collisions import resolve_collisions

__all__ = [
    "ComponentFrame", "LocalPin", "build_frame", "dominant_angle",
    "Layout", "Resolution", "apply_resolution", "classify_edges", "first_pass",
    "resolve_board", "resolve_component", "second_pass", "third_pass",
    "resolve_collisions",
]
