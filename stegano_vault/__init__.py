"""
stegano_vault — passphrase-sealed messages hidden in images and audio
======================================================================
Six-layer stack, leaves first.

Layers:
    1  KEY DERIVATION  — Argon2id passphrase → 256-bit key
    2  ENVELOPE        — AES-256-GCM, MAGIC || salt || nonce || ciphertext+tag
    3  BIT STREAM      — 32-bit length prefix, MSB-first bit codec
    4  IMAGE CARRIER   — LSB of R, G, B in raster order (alpha untouched)
    5  AUDIO CARRIER   — LSB of every PCM sample, 8/16/24/32-bit WAV
    6  CAPACITY        — largest message a carrier accepts

License: Apache 2.0
"""

__version__ = "1.0.0"

from .errors                    import ErrorKind, SteganoError
from .layers.layer1_kdf         import KeyDeriver
from .layers.layer2_envelope    import EnvelopeCipher
from .layers.layer4_image       import ImageCarrier
from .layers.layer5_audio       import AudioCarrier
from .wav                       import AudioFormat
from .vault                     import (
    embed_image, extract_image, image_capacity,
    embed_audio, extract_audio, audio_capacity,
)

__all__ = [
    "ErrorKind",
    "SteganoError",
    "KeyDeriver",
    "EnvelopeCipher",
    "ImageCarrier",
    "AudioCarrier",
    "AudioFormat",
    "embed_image",
    "extract_image",
    "image_capacity",
    "embed_audio",
    "extract_audio",
    "audio_capacity",
]
