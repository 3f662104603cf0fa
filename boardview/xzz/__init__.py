"""Decoder for XZZ board files."""
from .cipher import decrypt_blocks, derive_key, encrypt_blocks, verify_signature, xor_decrypt
from .errors import (
    BlockOverflowError, BoardLoadError, HeaderError, NetTableError,
    RecordError, SignatureError, TruncatedDataError,
)
from .loader import LoadOptions, decode, load_board, normalize, try_decode

__all__ = [
    "decrypt_blocks", "derive_key", "encrypt_blocks", "verify_signature", "xor_decrypt",
    "BlockOverflowError", "BoardLoadError", "HeaderError", "NetTableError",
    "RecordError", "SignatureError", "TruncatedDataError",
    "LoadOptions", "decode", "load_board", "normalize", "try_decode",
]
