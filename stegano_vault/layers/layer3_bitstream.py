"""
Layer 3 — BIT STREAM: length-prefixed MSB-first bit codec
==========================================================
Shared by both carriers. A payload is framed as

    u32_be(len(payload)) || payload

and expanded to bits, eight per byte, most significant bit first. A
carrier writes those bits one per LSB slot and reads them back in the
same order; the first 32 bits tell the reader how many bytes follow.

    len(frame(payload)) == 32 + 8 * len(payload)
"""

import struct
from typing import List, Sequence

LENGTH_PREFIX_BYTES = 4
LENGTH_PREFIX_BITS  = LENGTH_PREFIX_BYTES * 8
MAX_PAYLOAD         = 0xFFFFFFFF


def to_bits(data: bytes) -> List[int]:
    """Expand bytes into a list of 0/1 ints, MSB first."""
    bits = []
    for byte in data:
        for i in range(7, -1, -1):
            bits.append((byte >> i) & 1)
    return bits


def frame(payload: bytes) -> List[int]:
    """Bit stream for payload behind its 32-bit big-endian length."""
    if len(payload) > MAX_PAYLOAD:
        raise ValueError("Payload too long for a 32-bit length prefix.")
    return to_bits(struct.pack(">I", len(payload)) + payload)


def from_bits(bits: Sequence[int], length_prefix_bits: int = LENGTH_PREFIX_BITS) -> bytes:
    """
    Reassemble bytes from bits, skipping the first `length_prefix_bits`.
    Trailing bits that do not fill a whole byte are ignored.
    """
    out = bytearray()
    for i in range(length_prefix_bits, len(bits) - 7, 8):
        byte = 0
        for j in range(8):
            byte |= bits[i + j] << (7 - j)
        out.append(byte)
    return bytes(out)


def read_length(bits: Sequence[int]) -> int:
    """Decode the big-endian u32 length carried by the first 32 bits."""
    if len(bits) < LENGTH_PREFIX_BITS:
        raise ValueError(f"Need {LENGTH_PREFIX_BITS} bits, got {len(bits)}.")
    prefix = from_bits(bits[:LENGTH_PREFIX_BITS], length_prefix_bits=0)
    return struct.unpack(">I", prefix)[0]
