"""
Layer 6 — CAPACITY: how much text fits in a carrier
====================================================
Pure arithmetic, no carrier decoding.

Raw capacity is the largest envelope a carrier accepts:

    image   (width * height * 3) // 8 - 4     (R, G, B of every pixel)
    audio   sample_count // 8 - 4             (one bit per sample)

The `- 4` is the length prefix, subtracted after flooring to whole bytes.
That undercounts by up to seven bits on some carriers; the formula is kept
as-is because embed and extract both validate against it.

Message capacity removes the fixed envelope overhead
(magic 4 + salt 16 + nonce 12 + tag 16 = 48 bytes) and never goes negative.
"""

from .layer2_envelope import OVERHEAD
from .layer3_bitstream import LENGTH_PREFIX_BYTES

ENVELOPE_OVERHEAD = OVERHEAD


def raw_image_capacity(width: int, height: int) -> int:
    """Largest envelope (bytes) an RGB(A) image can carry. May be negative."""
    return (width * height * 3) // 8 - LENGTH_PREFIX_BYTES


def raw_audio_capacity(sample_count: int) -> int:
    """Largest envelope (bytes) a PCM sample sequence can carry. May be negative."""
    return sample_count // 8 - LENGTH_PREFIX_BYTES


def message_capacity(raw_capacity: int) -> int:
    """Largest UTF-8 message (bytes) once envelope overhead is reserved."""
    return max(0, raw_capacity - ENVELOPE_OVERHEAD)


def image_message_capacity(width: int, height: int) -> int:
    return message_capacity(raw_image_capacity(width, height))


def audio_message_capacity(sample_count: int) -> int:
    return message_capacity(raw_audio_capacity(sample_count))
