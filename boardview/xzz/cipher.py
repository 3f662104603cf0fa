"""Obfuscation layers of the XZZ format.

Two independent schemes are used:

- a single-byte XOR over the whole file, keyed by the byte at offset 0x10,
  stopping at the trailing diagnostic section;
- DES in ECB mode over each component payload, with a fixed key derived
  from a small constant table.
"""
from functools import lru_cache

from Crypto.Cipher import DES

from .constants import (
    CIPHER_BLOCK_SIZE,
    CIPHER_KEY_CONSTANTS,
    CIPHER_KEY_MASK,
    DIAGNOSTIC_MARKER,
    SIGNATURE,
    XOR_KEY_OFFSET,
)


def xor_key(data: bytes) -> int:
    """Return the whole-file XOR key byte, or 0 when the file is too short."""
    if len(data) <= XOR_KEY_OFFSET:
        return 0
    return data[XOR_KEY_OFFSET]


def verify_signature(data: bytes) -> bool:
    """Check the file signature, directly or after undoing the XOR mask."""
    if len(data) < len(SIGNATURE):
        return False
    head = bytes(data[:len(SIGNATURE)])
    if head == SIGNATURE:
        return True

    key = xor_key(data)
    if key == 0:
        return False
    return bytes(b ^ key for b in head) == SIGNATURE


def find_diagnostic_marker(data: bytes, start: int = 0) -> int:
    """Offset of the diagnostic section marker, or -1 if absent."""
    return bytes(data).find(DIAGNOSTIC_MARKER, start)


def xor_decrypt(data: bytes, key: int | None = None) -> bytes:
    """Undo the whole-file XOR mask.

    Everything before the diagnostic marker is XORed with `key` (read from
    the file when omitted). The marker and what follows are left untouched.
    A key of zero returns the data unchanged. Applying this twice with the
    same key restores the input.
    """
    if key is None:
        key = xor_key(data)
    if key == 0:
        return bytes(data)

    end = find_diagnostic_marker(data)
    if end < 0:
        end = len(data)

    head = bytes(b ^ key for b in data[:end])
    return head + bytes(data[end:])


@lru_cache(maxsize=None)
def derive_key() -> bytes:
    """Build the 8-byte component cipher key.

    The constant table is read as big-endian 16-bit pairs, each XORed with
    the mask, and the words concatenated in order.
    """
    key = 0
    for i in range(0, len(CIPHER_KEY_CONSTANTS), 2):
        word = (CIPHER_KEY_CONSTANTS[i] << 8) | CIPHER_KEY_CONSTANTS[i + 1]
        key = (key << 16) | (word ^ CIPHER_KEY_MASK)
    return key.to_bytes(8, "big")


def _whole_blocks(data: bytes) -> bytes:
    usable = len(data) - len(data) % CIPHER_BLOCK_SIZE
    return bytes(data[:usable])


def decrypt_blocks(data: bytes, key: bytes | None = None) -> bytes:
    """DES-decrypt successive 8-byte blocks; a trailing partial block is dropped."""
    cipher = DES.new(key or derive_key(), DES.MODE_ECB)
    return cipher.decrypt(_whole_blocks(data))


def encrypt_blocks(data: bytes, key: bytes | None = None) -> bytes:
    """Inverse of decrypt_blocks, used to produce component payloads."""
    cipher = DES.new(key or derive_key(), DES.MODE_ECB)
    return cipher.encrypt(_whole_blocks(data))


def decode_text(raw: bytes) -> str:
    """Decode GB2312-tolerant label text.

    ASCII bytes are kept; every two-byte high-bit sequence becomes a single
    '?'. A lone trailing high byte also becomes '?'.
    """
    out = []
    pending_high = False
    for b in raw:
        if b < 0x80:
            out.append(chr(b))
            pending_high = False
        else:
            if not pending_high:
                out.append("?")
            pending_high = not pending_high
    return "".join(out)
