"""Assemble a Board from an XZZ file."""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Optional

from .. import config
from ..orientation import resolve_board
from ..pcb.board import Board
from ..pcb.folding import fold_board, mirror_board, translate_board
from ..pcb.geometry import points_bounds
from ..pcb.layers import BOARD_OUTLINE_LAYER
from .blocks import parse_main_blocks
from .cipher import verify_signature, xor_decrypt, xor_key
from .constants import SIGNATURE
from .context import ParseContext
from .diagnostics import parse_diagnostics
from .errors import BoardLoadError, SignatureError
from .header import parse_header
from .nets import parse_net_table
from .reader import ByteReader

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadOptions:
    """Per-load switches."""
    resolve_pins: bool = field(default_factory=lambda: config.RESOLVE_PIN_ORIENTATION)
    fold: bool = field(default_factory=lambda: config.FOLD_BOARD)
    mirror_x: bool = False


def outline_bounds(board: Board) -> Optional[tuple[float, float, float, float]]:
    """Bounds of the endpoints of all board-outline traces, visible or not."""
    points = []
    for trace in board.traces:
        if trace.layer == BOARD_OUTLINE_LAYER:
            points.append((trace.x1, trace.y1))
            points.append((trace.x2, trace.y2))
    return points_bounds(points)


def normalize(board: Board) -> bool:
    """
    Centre the board on its outline.

    Every top-level element is translated so the outline box is centred at
    the origin. Component-local geometry is untouched. Returns False and
    leaves the board as-is when there is no outline with extent.
    """
    bounds = outline_bounds(board)
    if bounds is None:
        return False
    min_x, min_y, max_x, max_y = bounds
    width = max_x - min_x
    height = max_y - min_y
    if width <= 0 and height <= 0:
        return False

    center = ((min_x + max_x) / 2, (min_y + max_y) / 2)
    translate_board(board, -center[0], -center[1])
    board.origin_offset = center
    board.width = width
    board.height = height
    log.info("Normalized board by offset (%.4f, %.4f), size %.4f x %.4f",
             center[0], center[1], width, height)
    return True


def decode(data: bytes, name: str = "", path: str = "",
           options: Optional[LoadOptions] = None) -> Board:
    """
    Decode an XZZ file image into a Board.

    Args:
        data: Raw file contents
        name: Board name; defaults to the stem of `path`
        path: Source path, informational
        options: Load switches; defaults come from config

    Returns:
        A loaded Board

    Raises:
        BoardLoadError: the file is not a readable XZZ board. No partial
            board is ever returned.
    """
    options = options or LoadOptions()
    try:
        return _decode(bytes(data), name, path, options)
    except BoardLoadError as e:
        log.error("Failed to load board %s: %s", path or name or "<bytes>", e)
        raise


def _decode(data: bytes, name: str, path: str, options: LoadOptions) -> Board:
    if not verify_signature(data):
        raise SignatureError("missing XZZPCB signature")

    key = xor_key(data)
    if key and not data.startswith(SIGNATURE):
        data = xor_decrypt(data, key)

    reader = ByteReader(data)
    header = parse_header(reader)
    readings = parse_diagnostics(data)
    nets = parse_net_table(reader, header)
    ctx = ParseContext(reader=reader, nets=MappingProxyType(nets), readings=readings)

    board = Board(
        name=name or (Path(path).stem if path else ""),
        file_path=path,
        nets=nets,
        diagnostic_readings=readings.table,
    )
    parse_main_blocks(ctx, header, board)
    normalize(board)

    if options.fold:
        fold_board(board)
    if options.mirror_x:
        mirror_board(board)
    if options.resolve_pins:
        resolve_board(board)

    log.info(
        "Loaded board %r: %d traces, %d arcs, %d vias, %d labels, %d components, %d nets",
        board.board_name, len(board.traces), len(board.arcs), len(board.vias),
        len(board.labels), len(board.components), len(board.nets),
    )
    return board


def load_board(path: str | Path, options: Optional[LoadOptions] = None) -> Board:
    """Read and decode a board file. OSError from reading propagates."""
    path = Path(path)
    data = path.read_bytes()
    return decode(data, path=str(path), options=options)


def try_decode(data: bytes, name: str = "", path: str = "",
               options: Optional[LoadOptions] = None) -> Optional[Board]:
    """Like decode, but returns None instead of raising on a fatal failure."""
    try:
        return decode(data, name=name, path=path, options=options)
    except BoardLoadError:
        return None
