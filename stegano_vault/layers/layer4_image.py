"""
Layer 4 — IMAGE CARRIER: LSB of R, G, B
========================================
Hide the existence of the envelope inside an ordinary picture.

Each pixel offers three one-bit slots (R, G, B). Pixels are walked in
raster order, left to right and top to bottom, and every slot's least
significant bit is replaced by the next bit of the framed envelope. A
channel value of 200 becomes 200 or 201; nobody can see it. Alpha is never
touched, and nothing after the last bit is modified.

Carrier format: output is always PNG. Lossy formats (JPEG, lossy WebP)
rewrite low bits and destroy the payload, so they are never produced.

Capacity:       (width × height × 3) // 8 - 4  bytes of envelope

Dependencies: Pillow >= 10.0
"""

import io
import logging
from typing import List, Tuple, Union

from PIL import Image

from ..errors import ErrorKind, SteganoError
from .layer3_bitstream import LENGTH_PREFIX_BITS, frame, from_bits, read_length
from .layer6_capacity import raw_image_capacity

logger = logging.getLogger(__name__)

CHANNELS_USED = 3    # R, G, B
PIXEL_STRIDE  = 4    # RGBA bytes per pixel


class ImageCarrier:
    """Embed and extract envelopes in RGBA pixel LSBs."""

    def embed(self, image_input: Union[bytes, Image.Image], blob: bytes) -> Image.Image:
        """
        Write len(blob) || blob into the image's R, G, B LSBs.

        Args:
            image_input : encoded image bytes, or a PIL Image
            blob        : opaque payload (normally an envelope)

        Returns:
            A new RGBA image; the input is not modified.

        Raises SteganoError(MESSAGE_TOO_LARGE) if blob exceeds capacity.
        """
        img = self.load(image_input)
        width, height = img.size
        capacity = raw_image_capacity(width, height)
        if len(blob) > capacity:
            raise SteganoError(ErrorKind.MESSAGE_TOO_LARGE)

        bits = frame(blob)
        data = bytearray(img.tobytes())
        for i, bit in enumerate(bits):
            offset = self._slot_offset(i)
            data[offset] = (data[offset] & 0xFE) | bit

        logger.debug(f"Image embed: {len(blob)}B into {width}x{height} "
                     f"({len(bits)}/{width * height * CHANNELS_USED} slots)")
        return Image.frombytes("RGBA", img.size, bytes(data))

    def extract(self, image_input: Union[bytes, Image.Image]) -> bytes:
        """
        Read back a payload written by embed().

        Raises SteganoError(NO_MESSAGE_FOUND) when the carrier holds no
        plausible length header: too few slots, a zero length, or a length
        larger than the image could ever have carried.
        """
        img = self.load(image_input)
        width, height = img.size
        data  = img.tobytes()
        slots = width * height * CHANNELS_USED

        if slots < LENGTH_PREFIX_BITS:
            raise SteganoError(ErrorKind.NO_MESSAGE_FOUND)

        length = read_length(self._read_bits(data, LENGTH_PREFIX_BITS))
        needed = LENGTH_PREFIX_BITS + length * 8
        if length == 0 or length > raw_image_capacity(width, height) or needed > slots:
            raise SteganoError(ErrorKind.NO_MESSAGE_FOUND)

        logger.debug(f"Image extract: {length}B from {width}x{height}")
        return from_bits(self._read_bits(data, needed))

    # ── codec ────────────────────────────────────────────────────────────────

    @staticmethod
    def load(src: Union[bytes, Image.Image]) -> Image.Image:
        """
        Decode image bytes (or take a PIL Image) as RGBA. An RGBA Image is
        returned as-is; embed() never writes into it.
        """
        if isinstance(src, Image.Image) and src.mode == "RGBA":
            return src
        ImageCarrier._require_image_or_bytes(src)
        try:
            img = src if isinstance(src, Image.Image) else Image.open(io.BytesIO(src))
            return img.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise SteganoError(ErrorKind.IMAGE_ERROR, str(exc)) from exc

    @staticmethod
    def size(src: Union[bytes, Image.Image]) -> Tuple[int, int]:
        """(width, height) from the image header, without decoding pixels."""
        if isinstance(src, Image.Image):
            return src.size
        ImageCarrier._require_image_or_bytes(src)
        try:
            with Image.open(io.BytesIO(src)) as img:
                return img.size
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise SteganoError(ErrorKind.IMAGE_ERROR, str(exc)) from exc

    @staticmethod
    def to_png(img: Image.Image) -> bytes:
        """Encode losslessly. PNG keeps every LSB intact."""
        buf = io.BytesIO()
        try:
            img.save(buf, format="PNG")
        except (OSError, ValueError) as exc:
            raise SteganoError(ErrorKind.IMAGE_ERROR, str(exc)) from exc
        return buf.getvalue()

    # ── helpers ──────────────────────────────────────────────────────────────

    @staticmethod
    def _require_image_or_bytes(src) -> None:
        # the carrier never opens files itself
        if not isinstance(src, (Image.Image, bytes, bytearray, memoryview)):
            raise SteganoError(ErrorKind.IMAGE_ERROR,
                               f"expected encoded image bytes, got {type(src).__name__}")

    @staticmethod
    def _slot_offset(bit_index: int) -> int:
        # bit i lives in pixel i // 3, channel i % 3 (R, G, B)
        return (bit_index // CHANNELS_USED) * PIXEL_STRIDE + bit_index % CHANNELS_USED

    @classmethod
    def _read_bits(cls, data: bytes, count: int) -> List[int]:
        return [data[cls._slot_offset(i)] & 1 for i in range(count)]
