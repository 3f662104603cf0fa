"""Decoder and viewer model for XZZ board files."""
from .pcb import Board
from .xzz import BoardLoadError, LoadOptions, decode, load_board, try_decode

__version__ = "0.1.0"

__all__ = ["Board", "BoardLoadError", "LoadOptions", "decode", "load_board", "try_decode"]
