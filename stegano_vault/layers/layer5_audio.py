"""
Layer 5 — AUDIO CARRIER: one LSB per PCM sample
================================================
Hide the envelope in the least significant bit of decoded PCM samples.

Samples are taken in decoder order, interleaved across channels, and each
one carries a single bit: `(sample & ~1) | bit`. At 16-bit depth that is a
change of one part in 65536, well under the noise floor of any recording.
Samples after the last bit are left untouched, and the re-encoded file
keeps the original channel count, sample rate and bit depth.

Supported:  uncompressed PCM WAV, 8 / 16 / 24 / 32-bit, any channel count
Capacity:   sample_count // 8 - 4  bytes of envelope

Decoding and re-encoding the WAV container lives in stegano_vault.wav.
"""

import logging
from typing import List, Sequence

from ..errors import ErrorKind, SteganoError
from .layer3_bitstream import LENGTH_PREFIX_BITS, frame, from_bits, read_length
from .layer6_capacity import raw_audio_capacity

logger = logging.getLogger(__name__)


class AudioCarrier:
    """Embed and extract envelopes in PCM sample LSBs."""

    def embed(self, samples: Sequence[int], blob: bytes) -> List[int]:
        """
        Return a copy of samples with len(blob) || blob in their LSBs.
        Raises SteganoError(MESSAGE_TOO_LARGE) if blob exceeds capacity.
        """
        if len(blob) > raw_audio_capacity(len(samples)):
            raise SteganoError(ErrorKind.MESSAGE_TOO_LARGE)

        bits = frame(blob)
        out  = list(samples)
        for i, bit in enumerate(bits):
            out[i] = (out[i] & ~1) | bit

        logger.debug(f"Audio embed: {len(blob)}B into {len(bits)}/{len(samples)} samples")
        return out

    def extract(self, samples: Sequence[int]) -> bytes:
        """
        Read back a payload written by embed().
        Raises SteganoError(NO_MESSAGE_FOUND) when no plausible header is present.
        """
        n = len(samples)
        if n < LENGTH_PREFIX_BITS:
            raise SteganoError(ErrorKind.NO_MESSAGE_FOUND)

        length = read_length([s & 1 for s in samples[:LENGTH_PREFIX_BITS]])
        needed = LENGTH_PREFIX_BITS + length * 8
        if length == 0 or length > raw_audio_capacity(n) or needed > n:
            raise SteganoError(ErrorKind.NO_MESSAGE_FOUND)

        logger.debug(f"Audio extract: {length}B from {n} samples")
        return from_bits([s & 1 for s in samples[:needed]])
