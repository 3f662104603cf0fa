"""Fixed layout constants of the XZZ board file format."""

# File signature and whole-file XOR mask
SIGNATURE = b"XZZPCB"
XOR_KEY_OFFSET = 0x10

# Header fields (little-endian u32)
HEADER_BASE = 0x20
IMAGE_OFFSET_FIELD = 0x24
NET_OFFSET_FIELD = 0x28
MAIN_REGION_SIZE_FIELD = 0x40
MIN_HEADER_SIZE = 0x44

# Trailing diagnostic section ("v6v6555v6v6")
DIAGNOSTIC_MARKER = bytes([0x76, 0x36, 0x76, 0x36, 0x35, 0x35, 0x35, 0x76, 0x36, 0x76, 0x36])
DIAGNOSTIC_SKIP = 7

# Raw integer -> world unit
COORD_SCALE = 10000
ANGLE_SCALE = 10000

# Main block tags
BLOCK_ARC = 0x01
BLOCK_VIA = 0x02
BLOCK_UNKNOWN_03 = 0x03
BLOCK_TRACE = 0x05
BLOCK_TEXT = 0x06
BLOCK_COMPONENT = 0x07
BLOCK_TEST_PAD = 0x09

# Component sub-block tags
SUB_END = 0x00
SUB_SEGMENT = 0x05
SUB_TEXT = 0x06
SUB_PIN = 0x09

# Pin outline record types
OUTLINE_ROUND = 0x01
OUTLINE_RECT = 0x02
MAX_PIN_OUTLINES = 4
PIN_OUTLINE_END = bytes(5)
PIN_FOOTER_SIZE = 12

# Minimum record sizes
ARC_RECORD_SIZE = 32
VIA_RECORD_SIZE = 32
TRACE_RECORD_SIZE = 28
TEXT_RECORD_SIZE = 28
SEGMENT_RECORD_SIZE = 24
EMBEDDED_TEXT_RECORD_SIZE = 30
PIN_RECORD_MIN_SIZE = 24

MAX_VIA_TEXT_LENGTH = 1024

# Block cipher key material: pairs of bytes, each pair XORed with KEY_MASK
CIPHER_KEY_CONSTANTS = (0xE0, 0xCF, 0x2E, 0x9F, 0x3C, 0x33, 0x3C, 0x33)
CIPHER_KEY_MASK = 0x3C33
CIPHER_BLOCK_SIZE = 8

# Visible flag value in embedded component text
TEXT_VISIBLE = 0x02

# Fixed key used for per-net diagnostic readings
NET_READING_KEY = "0"
