"""Data models for decoded board elements."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

# Layer ids of the standard table
TRACE_LAYERS = range(1, 17)
SILKSCREEN_LAYER = 17
UNKNOWN_LAYERS = range(18, 28)
BOARD_OUTLINE_LAYER = 28
VIAS_LAYER = 29
PINS_LAYER = 31


class LayerType(str, Enum):
    SIGNAL = "signal"
    PLANE = "plane"
    SILKSCREEN = "silkscreen"
    MASK = "mask"
    PASTE = "paste"
    DRILL = "drill"
    MECHANICAL = "mechanical"
    OUTLINE = "outline"
    COMMENT = "comment"
    OTHER = "other"


class PinOrientation(str, Enum):
    """How a pad is drawn relative to its component's local frame."""
    NATURAL = "natural"  # Pad shape as declared
    HORIZONTAL = "horizontal"  # Long side along X
    VERTICAL = "vertical"  # Long side along Y

    def opposite(self) -> "PinOrientation":
        if self is PinOrientation.HORIZONTAL:
            return PinOrientation.VERTICAL
        if self is PinOrientation.VERTICAL:
            return PinOrientation.HORIZONTAL
        return PinOrientation.NATURAL


class LocalEdge(str, Enum):
    """Which side of the component body a pin sits on."""
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"
    INTERIOR = "interior"
    UNKNOWN = "unknown"


class MountingSide(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"


class ComponentType(str, Enum):
    SMD = "smd"
    THROUGH_HOLE = "through_hole"
    OTHER = "other"


@dataclass(frozen=True)
class CirclePad:
    radius: float


@dataclass(frozen=True)
class RectanglePad:
    width: float
    height: float


@dataclass(frozen=True)
class CapsulePad:
    width: float
    height: float


PadShape = Union[CirclePad, RectanglePad, CapsulePad]


def pad_size(shape: PadShape) -> tuple[float, float]:
    """Natural (width, height) of a pad shape."""
    if isinstance(shape, CirclePad):
        return shape.radius * 2, shape.radius * 2
    if isinstance(shape, (RectanglePad, CapsulePad)):
        return shape.width, shape.height
    raise TypeError(f"unknown pad shape: {shape!r}")


@dataclass
class Layer:
    """A board layer from the standard layer table."""
    id: int
    name: str
    type: LayerType
    visible: bool = True
    color: str = "#ffffff"  # Display colour as #rrggbb


@dataclass(frozen=True)
class Net:
    """An electrical net."""
    id: int
    name: str


@dataclass
class Arc:
    """A copper or graphic arc. Angles are in degrees."""
    layer: int
    cx: float
    cy: float
    radius: float
    start_angle: float
    end_angle: float
    thickness: float
    net_id: int = 0


@dataclass
class Via:
    """A via or test pad spanning two layers."""
    x: float
    y: float
    pad_radius_a: float  # Pad radius on layer_a
    pad_radius_b: float  # Pad radius on layer_b
    layer_a: int
    layer_b: int
    net_id: int = 0
    text: str = ""
    layer: int = VIAS_LAYER

    @property
    def drill_diameter(self) -> float:
        return min(self.pad_radius_a, self.pad_radius_b) * 0.6

    @property
    def radius(self) -> float:
        return max(self.pad_radius_a, self.pad_radius_b)


@dataclass
class Trace:
    """A straight copper or graphic segment."""
    layer: int
    x1: float
    y1: float
    x2: float
    y2: float
    width: float
    net_id: int = 0

    @property
    def length(self) -> float:
        return ((self.x2 - self.x1) ** 2 + (self.y2 - self.y1) ** 2) ** 0.5


@dataclass
class TextLabel:
    """A text label, standalone or embedded in a component."""
    text: str
    x: float
    y: float
    layer: int
    font_size: float = 0.0
    scale: float = 1.0
    rotation: float = 0.0  # Degrees
    visible: bool = True
    component_relative: bool = False  # Position is relative to the owning component
    flags: int = 0  # Secondary flag byte, meaning unknown


@dataclass
class LineSegment:
    """A component outline segment in component-relative coordinates."""
    layer: int
    x1: float
    y1: float
    x2: float
    y2: float
    thickness: float

    @property
    def length(self) -> float:
        return ((self.x2 - self.x1) ** 2 + (self.y2 - self.y1) ** 2) ** 0.5


@dataclass
class Pin:
    """A component pin. Position is relative to the component anchor."""
    name: str
    x: float
    y: float
    shape: PadShape
    net_id: int = 0
    layer_id: int = PINS_LAYER
    pad_rotation: float = 0.0  # Degrees, informational
    diagnostic_reading: str = ""
    component_reference: str = ""
    # Filled by the orientation resolver
    initial_width: float = 0.0
    initial_height: float = 0.0
    short_side: float = 0.0
    long_side: float = 0.0
    local_edge: LocalEdge = LocalEdge.UNKNOWN
    orientation: PinOrientation = PinOrientation.NATURAL

    def __post_init__(self):
        if not self.initial_width and not self.initial_height:
            self.initial_width, self.initial_height = pad_size(self.shape)
            self.short_side = min(self.initial_width, self.initial_height)
            self.long_side = max(self.initial_width, self.initial_height)

    @property
    def is_square(self) -> bool:
        return self.initial_width == self.initial_height

    def extent(self, orientation: Optional[PinOrientation] = None) -> tuple[float, float]:
        """(width, height) of the pad drawn in the given orientation."""
        orientation = orientation or self.orientation
        if orientation is PinOrientation.HORIZONTAL:
            return self.long_side, self.short_side
        if orientation is PinOrientation.VERTICAL:
            return self.short_side, self.long_side
        return self.initial_width, self.initial_height


@dataclass
class Component:
    """A placed component. Owns its pins, labels and outline segments."""
    footprint: str
    x: float  # Anchor X (board coordinates)
    y: float  # Anchor Y (board coordinates)
    reference: str = ""
    value: str = ""
    rotation: float = 0.0  # Radians, set by the orientation resolver
    width: float = 0.0
    height: float = 0.0
    side: MountingSide = MountingSide.TOP
    mount_type: ComponentType = ComponentType.SMD
    layer_id: int = PINS_LAYER
    pins: list[Pin] = field(default_factory=list)
    labels: list[TextLabel] = field(default_factory=list)
    segments: list[LineSegment] = field(default_factory=list)

    def outline_bounds(self) -> Optional[tuple[float, float, float, float]]:
        """Local (min_x, min_y, max_x, max_y) of the outline segments."""
        if not self.segments:
            return None
        xs = [v for s in self.segments for v in (s.x1, s.x2)]
        ys = [v for s in self.segments for v in (s.y1, s.y2)]
        return min(xs), min(ys), max(xs), max(ys)

    @property
    def outline_center(self) -> tuple[float, float]:
        """Local centre of the outline, or the anchor when there is none."""
        bounds = self.outline_bounds()
        if bounds is None:
            return 0.0, 0.0
        min_x, min_y, max_x, max_y = bounds
        return (min_x + max_x) / 2, (min_y + max_y) / 2

    def get_pin(self, name: str) -> Optional[Pin]:
        for pin in self.pins:
            if pin.name == name:
                return pin
        return None


@dataclass
class BoardInfo:
    """Overall board information."""
    name: str
    min_x: float
    min_y: float
    max_x: float
    max_y: float
    layers: list[str]
    component_count: int
    pin_count: int
    net_count: int
    trace_count: int = 0
    via_count: int = 0
    arc_count: int = 0
    label_count: int = 0
    origin_offset: tuple[float, float] = (0.0, 0.0)
    folded: bool = False

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y
