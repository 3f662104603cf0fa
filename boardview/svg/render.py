"""Rasterise board previews to PNG."""
from io import BytesIO
from pathlib import Path
from typing import Optional, Union

import cairosvg
from PIL import Image

from ..pcb.board import Board
from ..xzz import LoadOptions, load_board
from .generator import SVGGenerator

# Pixels per board unit when neither scale nor width is given
DEFAULT_SCALE = 10.0


def render_svg_to_png(
    svg_content: str,
    output_path: str | Path | None = None,
    scale: float = DEFAULT_SCALE,
    width: Optional[int] = None,
) -> Image.Image:
    """
    Render SVG content to a PNG image.

    Args:
        svg_content: SVG document as a string
        output_path: Optional path to save the PNG file
        scale: Pixels per board unit
        width: Output width in pixels; overrides `scale` and keeps the
            aspect ratio

    Returns:
        PIL Image object
    """
    options = {"output_width": width} if width else {"scale": scale}
    png_bytes = cairosvg.svg2png(bytestring=svg_content.encode("utf-8"), **options)
    image = Image.open(BytesIO(png_bytes))
    image.load()

    if output_path:
        image.save(str(output_path), format="PNG")
    return image


def render_board_to_png(
    board: Union[Board, str, Path],
    output_path: str | Path | None = None,
    layers: Optional[list[int]] = None,
    scale: float = DEFAULT_SCALE,
    width: Optional[int] = None,
    options: Optional[LoadOptions] = None,
) -> Image.Image:
    """
    Render a board to PNG.

    A path is loaded with `options` first. Layers default to the board's
    visible layers.
    """
    if not isinstance(board, Board):
        board = load_board(board, options)
    svg_content = SVGGenerator(board).generate(layers=layers)
    return render_svg_to_png(svg_content, output_path, scale=scale, width=width)
