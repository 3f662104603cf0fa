"""FastAPI application exposing a decoded board."""
import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import DEFAULT_BOARD_FILE, DEFAULT_HOST, DEFAULT_PORT, configure_logging
from .pcb import Board, Component, Pin, describe
from .pcb.transform import pin_position
from .svg import SVGGenerator
from .xzz import BoardLoadError, load_board

log = logging.getLogger(__name__)

app = FastAPI(title="Boardview", version="0.1.0")


class LayerInfo(BaseModel):
    """A layer from the standard table."""
    id: int
    name: str
    type: str
    visible: bool
    color: str


class PinInfo(BaseModel):
    """A pin with its board-absolute position."""
    component: str
    name: str
    x: float
    y: float
    width: float
    height: float
    orientation: str
    net_id: int
    net_name: str
    reading: str = ""


class ComponentSummary(BaseModel):
    reference: str
    value: str
    footprint: str
    x: float
    y: float
    rotation: float  # Radians
    side: str
    mount_type: str
    pin_count: int


class ComponentDetail(ComponentSummary):
    width: float
    height: float
    description: str
    pins: list[PinInfo]


@lru_cache(maxsize=1)
def get_board() -> Board:
    """Load the configured board file once, on first use."""
    log.info("Loading board from %s", DEFAULT_BOARD_FILE)
    return load_board(DEFAULT_BOARD_FILE)


@app.exception_handler(BoardLoadError)
async def board_load_error_handler(request: Request, exc: BoardLoadError):
    return JSONResponse(status_code=500, content={"detail": f"Board failed to load: {exc}"})


def _pin_info(board: Board, component: Component, pin: Pin) -> PinInfo:
    x, y = pin_position(pin, component)
    width, height = pin.extent()
    return PinInfo(
        component=component.reference,
        name=pin.name,
        x=x,
        y=y,
        width=width,
        height=height,
        orientation=pin.orientation.value,
        net_id=pin.net_id,
        net_name=board.net_name(pin.net_id),
        reading=pin.diagnostic_reading,
    )


def _component_summary(component: Component) -> ComponentSummary:
    return ComponentSummary(
        reference=component.reference,
        value=component.value,
        footprint=component.footprint,
        x=component.x,
        y=component.y,
        rotation=component.rotation,
        side=component.side.value,
        mount_type=component.mount_type.value,
        pin_count=len(component.pins),
    )


@app.get("/api/board/info")
async def get_board_info(board: Board = Depends(get_board)):
    """Return board metadata."""
    info = board.get_board_info()
    return {
        "name": info.name,
        "bounds": {
            "min_x": info.min_x,
            "min_y": info.min_y,
            "max_x": info.max_x,
            "max_y": info.max_y,
            "width": info.width,
            "height": info.height,
        },
        "origin_offset": list(info.origin_offset),
        "folded": info.folded,
        "layers": info.layers,
        "counts": {
            "components": info.component_count,
            "pins": info.pin_count,
            "nets": info.net_count,
            "traces": info.trace_count,
            "vias": info.via_count,
            "arcs": info.arc_count,
            "labels": info.label_count,
        },
    }


@app.get("/api/layers", response_model=list[LayerInfo])
async def get_layers(board: Board = Depends(get_board)):
    """Return the layer table in standard order."""
    return [
        LayerInfo(id=layer.id, name=layer.name, type=layer.type.value,
                  visible=layer.visible, color=layer.color)
        for layer in board.layers
    ]


@app.get("/api/nets")
async def get_nets(board: Board = Depends(get_board)):
    """Return list of all nets with pin counts."""
    nets = [
        {"id": net.id, "name": net.name, "pin_count": len(board.pins_by_net(net.id))}
        for net in board.nets.values()
    ]
    return {"nets": sorted(nets, key=lambda n: n["id"])}


@app.get("/api/net/{net_id}")
async def get_net(net_id: int, board: Board = Depends(get_board)):
    """Return details for a specific net."""
    net = board.get_net(net_id)
    if net is None:
        raise HTTPException(status_code=404, detail=f"Net {net_id} not found")
    return {
        "id": net.id,
        "name": net.name,
        "pins": [_pin_info(board, c, p) for c, p in board.pins_by_net(net_id)],
        "trace_count": sum(1 for t in board.traces if t.net_id == net_id),
        "via_count": sum(1 for v in board.vias if v.net_id == net_id),
    }


@app.get("/api/components", response_model=list[ComponentSummary])
async def get_components(board: Board = Depends(get_board)):
    """Return every component in file order."""
    return [_component_summary(c) for c in board.components]


@app.get("/api/component/{reference}", response_model=ComponentDetail)
async def get_component(reference: str, board: Board = Depends(get_board)):
    """Return a component with its pins."""
    component = board.get_component(reference)
    if component is None:
        raise HTTPException(status_code=404, detail=f"Component {reference!r} not found")
    summary = _component_summary(component)
    return ComponentDetail(
        **summary.model_dump(),
        width=component.width,
        height=component.height,
        description=describe(component, board),
        pins=[_pin_info(board, component, p) for p in component.pins],
    )


@app.get("/api/svg")
async def get_svg(
    layers: Optional[str] = Query(
        default=None,
        description="Comma-separated list of layer ids to include (default: all visible)"
    ),
    board: Board = Depends(get_board),
):
    """Generate and return SVG of the board."""
    layer_list = None
    if layers:
        try:
            layer_list = [int(part) for part in layers.split(",") if part.strip()]
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid layer list: {layers!r}") from None
    svg_content = SVGGenerator(board).generate(layers=layer_list)
    return Response(content=svg_content, media_type="image/svg+xml")


if __name__ == "__main__":
    import uvicorn
    configure_logging()
    uvicorn.run(app, host=DEFAULT_HOST, port=DEFAULT_PORT)
