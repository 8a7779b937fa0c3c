"""
Error taxonomy
==============
Every failure the vault can surface is one ``SteganoError`` carrying an
``ErrorKind``. The kinds are a closed set: callers switch on ``err.kind``
instead of catching a tree of subclasses.

    IMAGE_ERROR               image codec could not decode/encode the carrier
    AUDIO_ERROR               WAV codec could not decode/encode the carrier
    ENCRYPTION_ERROR          key derivation or cipher setup failed (fatal)
    MESSAGE_TOO_LARGE         envelope does not fit the carrier
    NO_MESSAGE_FOUND          no plausible hidden payload in the carrier
    INVALID_FORMAT            envelope too short, or plaintext is not UTF-8
    DECRYPTION_FAILED         wrong passphrase or tampered ciphertext
    UNSUPPORTED_AUDIO_FORMAT  PCM bit depth outside {8, 16, 24, 32}
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    IMAGE_ERROR              = "Image error"
    AUDIO_ERROR              = "Audio error"
    ENCRYPTION_ERROR         = "Encryption error"
    MESSAGE_TOO_LARGE        = "Message too large for carrier"
    NO_MESSAGE_FOUND         = "No hidden message found"
    INVALID_FORMAT           = "Invalid message format"
    DECRYPTION_FAILED        = "Decryption failed - wrong passphrase or corrupted data"
    UNSUPPORTED_AUDIO_FORMAT = "Unsupported audio format"


class SteganoError(Exception):
    """A typed vault failure. ``kind`` says what went wrong."""

    def __init__(self, kind: ErrorKind, detail: Optional[str] = None):
        self.kind   = kind
        self.detail = detail
        message = kind.value if detail is None else f"{kind.value}: {detail}"
        super().__init__(message)

    def __repr__(self):
        return f"SteganoError({self.kind.name}, {self.detail!r})"
