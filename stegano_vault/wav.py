"""
WAV CODEC  |  PCM in, integers out
===================================
Minimal PCM WAV collaborator for the audio carrier.

    decode(bytes)            -> (AudioFormat, [int, ...])
    encode(AudioFormat, ints) -> bytes
    sample_count(bytes)      -> int      (header only)

Reading walks the RIFF chunks directly so the header's own bits-per-sample
is kept, and both plain PCM (tag 0x0001) and WAVE_FORMAT_EXTENSIBLE
(tag 0xFFFE with a PCM sub-format) are accepted. For extensible files the
valid-bits field is the bit depth. Writing goes through the standard-library
``wave`` module.

Samples are interleaved across channels exactly as stored. 8-bit WAV is
unsigned on disk and is shifted to the signed range (-128..127); 16, 24 and
32-bit data are little-endian two's complement. Encoding truncates each
sample to the format's bit depth.

Bit depths other than 8 / 16 / 24 / 32 raise UNSUPPORTED_AUDIO_FORMAT.
"""

import io
import logging
import struct
import wave
from typing import List, NamedTuple, Sequence, Tuple

from .errors import ErrorKind, SteganoError

logger = logging.getLogger(__name__)

SUPPORTED_BIT_DEPTHS = (8, 16, 24, 32)

WAVE_FORMAT_PCM        = 0x0001
WAVE_FORMAT_EXTENSIBLE = 0xFFFE


class AudioFormat(NamedTuple):
    channels: int
    sample_rate: int
    bits_per_sample: int

    @property
    def sample_width(self) -> int:
        return self.bits_per_sample // 8


def _read_chunks(data: bytes) -> Tuple[bytes, bytes]:
    """Return the (fmt, data) chunk bodies of a RIFF/WAVE file."""
    if len(data) < 12 or data[:4] != b"RIFF" or data[8:12] != b"WAVE":
        raise SteganoError(ErrorKind.AUDIO_ERROR, "file does not start with RIFF/WAVE id")

    fmt = None
    pos = 12
    while pos + 8 <= len(data):
        chunk_id = data[pos:pos + 4]
        size     = struct.unpack_from("<I", data, pos + 4)[0]
        body     = data[pos + 8:pos + 8 + size]
        if chunk_id == b"fmt ":
            fmt = body
        elif chunk_id == b"data":
            if fmt is None:
                raise SteganoError(ErrorKind.AUDIO_ERROR, "data chunk before fmt chunk")
            if len(body) < size:
                raise SteganoError(ErrorKind.AUDIO_ERROR,
                                   f"truncated sample data: {len(body)}B, expected {size}B")
            return fmt, body
        pos += 8 + size + (size & 1)      # chunks are word aligned

    raise SteganoError(ErrorKind.AUDIO_ERROR, "missing fmt or data chunk")


def _parse_format(fmt: bytes) -> AudioFormat:
    if len(fmt) < 16:
        raise SteganoError(ErrorKind.AUDIO_ERROR, "fmt chunk too short")
    tag, channels, rate, _, block_align, bits = struct.unpack_from("<HHIIHH", fmt)

    if tag == WAVE_FORMAT_EXTENSIBLE:
        if len(fmt) < 40:
            raise SteganoError(ErrorKind.AUDIO_ERROR, "extensible fmt chunk too short")
        valid_bits = struct.unpack_from("<H", fmt, 18)[0]
        tag        = struct.unpack_from("<H", fmt, 24)[0]     # first field of SubFormat GUID
        bits       = valid_bits or bits

    if tag != WAVE_FORMAT_PCM:
        raise SteganoError(ErrorKind.AUDIO_ERROR, f"unknown format: {tag}")
    if channels < 1:
        raise SteganoError(ErrorKind.AUDIO_ERROR, "no channels")
    if bits not in SUPPORTED_BIT_DEPTHS or block_align != channels * bits // 8:
        raise SteganoError(ErrorKind.UNSUPPORTED_AUDIO_FORMAT,
                           f"{bits}-bit samples in {block_align}-byte frames")
    return AudioFormat(channels, rate, bits)


def decode(data: bytes) -> Tuple[AudioFormat, List[int]]:
    """Decode a PCM WAV into its format and interleaved integer samples."""
    fmt_chunk, raw = _read_chunks(data)
    fmt   = _parse_format(fmt_chunk)
    width = fmt.sample_width
    n     = len(raw) // fmt.channels // width * fmt.channels
    raw   = raw[:n * width]                  # drop a trailing partial frame

    if width == 1:
        samples = [b - 128 for b in raw]
    elif width == 2:
        samples = list(struct.unpack(f"<{n}h", raw))
    elif width == 4:
        samples = list(struct.unpack(f"<{n}i", raw))
    else:
        samples = [int.from_bytes(raw[i:i + width], "little", signed=True)
                   for i in range(0, len(raw), width)]

    logger.debug(f"WAV decode: {fmt.channels}ch {fmt.sample_rate}Hz "
                 f"{fmt.bits_per_sample}-bit, {n} samples")
    return fmt, samples


def encode(fmt: AudioFormat, samples: Sequence[int]) -> bytes:
    """
    Encode interleaved samples as a PCM WAV with the given format.
    Raises SteganoError(UNSUPPORTED_AUDIO_FORMAT) for bit depths outside
    8/16/24/32, and AUDIO_ERROR if the samples do not fill whole frames.
    """
    if fmt.bits_per_sample not in SUPPORTED_BIT_DEPTHS:
        raise SteganoError(ErrorKind.UNSUPPORTED_AUDIO_FORMAT)
    if fmt.channels < 1 or len(samples) % fmt.channels:
        raise SteganoError(ErrorKind.AUDIO_ERROR,
                           f"{len(samples)} samples do not fill {fmt.channels}-channel frames")

    width = fmt.sample_width
    mask  = (1 << fmt.bits_per_sample) - 1
    out   = bytearray()
    if width == 1:
        out.extend((s + 128) & 0xFF for s in samples)
    else:
        for s in samples:
            out += (s & mask).to_bytes(width, "little")

    buf = io.BytesIO()
    try:
        with wave.open(buf, "wb") as wf:
            wf.setnchannels(fmt.channels)
            wf.setsampwidth(width)
            wf.setframerate(fmt.sample_rate)
            wf.writeframes(bytes(out))
    except wave.Error as exc:
        raise SteganoError(ErrorKind.AUDIO_ERROR, str(exc)) from exc
    return buf.getvalue()


def sample_count(data: bytes) -> int:
    """Interleaved sample count (whole frames × channels), without decoding samples."""
    fmt_chunk, raw = _read_chunks(data)
    fmt = _parse_format(fmt_chunk)
    return len(raw) // (fmt.channels * fmt.sample_width) * fmt.channels
