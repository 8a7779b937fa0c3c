"""
VAULT  |  public operations
============================
Encrypt, then hide. Extract, then decrypt.

    embed_image(image_bytes, message, passphrase)  -> PNG bytes
    extract_image(image_bytes, passphrase)         -> message
    image_capacity(image_bytes)                    -> max message bytes

    embed_audio(wav_bytes, message, passphrase)    -> WAV bytes
    extract_audio(wav_bytes, passphrase)           -> message
    audio_capacity(wav_bytes)                      -> max message bytes

Everything is bytes in, bytes (or text) out. Reading files, base64 for
transport and user-facing wording belong to the host application. Every
failure is a SteganoError; nothing partial is ever returned.

Pass `cipher=EnvelopeCipher(kdf=..., rng=...)` to change the Argon2 costs
or the random source. The same costs must be used to extract.
"""

import logging

from . import wav
from .layers.layer2_envelope import EnvelopeCipher
from .layers.layer4_image import ImageCarrier
from .layers.layer5_audio import AudioCarrier
from .layers.layer6_capacity import audio_message_capacity, image_message_capacity

logger = logging.getLogger(__name__)

_images = ImageCarrier()
_audio  = AudioCarrier()


def _cipher(cipher: EnvelopeCipher = None) -> EnvelopeCipher:
    return cipher if cipher is not None else EnvelopeCipher()


# ── image ────────────────────────────────────────────────────────────────────

def embed_image(image_bytes: bytes, message: str, passphrase: str,
                cipher: EnvelopeCipher = None) -> bytes:
    """Encrypt message and hide it in the image. Returns PNG bytes."""
    img  = _images.load(image_bytes)
    blob = _cipher(cipher).encrypt(message, passphrase)
    out  = _images.to_png(_images.embed(img, blob))
    logger.debug(f"embed_image: {len(blob)}B envelope -> {len(out)}B PNG")
    return out


def extract_image(image_bytes: bytes, passphrase: str,
                  cipher: EnvelopeCipher = None) -> str:
    """Recover and decrypt a message hidden by embed_image()."""
    blob = _images.extract(image_bytes)
    return _cipher(cipher).decrypt(blob, passphrase)


def image_capacity(image_bytes: bytes) -> int:
    """Largest message (UTF-8 bytes) embed_image() will accept for this image."""
    width, height = _images.size(image_bytes)
    return image_message_capacity(width, height)


# ── audio ────────────────────────────────────────────────────────────────────

def embed_audio(wav_bytes: bytes, message: str, passphrase: str,
                cipher: EnvelopeCipher = None) -> bytes:
    """Encrypt message and hide it in the WAV's samples. Returns WAV bytes."""
    fmt, samples = wav.decode(wav_bytes)
    blob = _cipher(cipher).encrypt(message, passphrase)
    out  = wav.encode(fmt, _audio.embed(samples, blob))
    logger.debug(f"embed_audio: {len(blob)}B envelope -> {len(out)}B WAV")
    return out


def extract_audio(wav_bytes: bytes, passphrase: str,
                  cipher: EnvelopeCipher = None) -> str:
    """Recover and decrypt a message hidden by embed_audio()."""
    _, samples = wav.decode(wav_bytes)
    blob = _audio.extract(samples)
    return _cipher(cipher).decrypt(blob, passphrase)


def audio_capacity(wav_bytes: bytes) -> int:
    """Largest message (UTF-8 bytes) embed_audio() will accept for this WAV."""
    return audio_message_capacity(wav.sample_count(wav_bytes))
