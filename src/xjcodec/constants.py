"""Wire format constants for xjcodec.

Every encoded value starts with a single tag byte. Most tags are fixed; two
16-wide ranges pack a small payload into the tag itself:

    0xE0..0xEF  string of 0-15 UTF-8 bytes (length in the low nibble)
    0xF0..0xFF  integer 0-15 (value in the low nibble)

Multi-byte integers are little-endian. Bigint magnitudes are big-endian.
"""

from __future__ import annotations

TAG_NULL = 0x00
TAG_FALSE = 0x01
TAG_TRUE = 0x02
TAG_FLOAT64 = 0x03
TAG_BIGINT_POS = 0x04
TAG_STRING = 0x05
TAG_BUFFER = 0x06

# Typed vectors, one tag per element kind
TAG_INT8_VECTOR = 0x07
TAG_INT16_VECTOR = 0x08
TAG_INT32_VECTOR = 0x09
TAG_UINT8_VECTOR = 0x0A
TAG_UINT16_VECTOR = 0x0B
TAG_UINT32_VECTOR = 0x0C
TAG_UINT8_CLAMPED_VECTOR = 0x0D
TAG_FLOAT32_VECTOR = 0x0E
TAG_FLOAT64_VECTOR = 0x0F
TAG_INT64_VECTOR = 0x10
TAG_UINT64_VECTOR = 0x11

TAG_ARRAY = 0x12
TAG_RECORD = 0x13
TAG_ERROR = 0x14
TAG_UNDEFINED = 0x15

# Sign-and-width integer tags; the payload is the magnitude
TAG_POS_U8 = 0x16
TAG_BIGINT_NEG = 0x17
TAG_NEG_U8 = 0x18
TAG_POS_U16 = 0x19
TAG_NEG_U16 = 0x1A
TAG_POS_U32 = 0x1B
TAG_NEG_U32 = 0x1C

SMALLSTR_BASE = 0xE0
SMALLINT_BASE = 0xF0
SMALL_MAX = 0x0F

CAUSE_ABSENT = 0x00
CAUSE_PRESENT = 0x01

MAX_U8 = 0xFF
MAX_U16 = 0xFFFF
MAX_U32 = 0xFFFFFFFF
MAX_SAFE_INTEGER = 2**53 - 1
MAX_STRING_BYTES = 2**31 - 1

# Nesting limit for arrays, records and error causes. Each level costs two
# interpreter frames, so the ceiling stays well below the default recursion limit.
DEFAULT_MAX_DEPTH = 128
MAX_DEPTH_CEILING = 256
