"""
Layer 2 — ENVELOPE: Argon2id key + AES-256-GCM
===============================================
Wrap a text message into a self-contained, tamper-evident blob.

Every call draws a fresh salt (key derivation) and nonce (GCM), so the
same message and passphrase never produce the same blob twice. GCM's
128-bit tag covers the whole ciphertext: a wrong passphrase and a single
flipped bit fail in exactly the same way, which is deliberate — telling
them apart would hand an attacker an oracle.

Envelope format (wire-exact):

    offset  size  field
    0       4     magic = b"STEG"
    4       16    salt
    20      12    nonce
    32      N     ciphertext || tag(16)

Dependencies: cryptography >= 41.0, argon2-cffi >= 21.0
"""

import logging
import os
from typing import Callable

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..errors import ErrorKind, SteganoError
from .layer1_kdf import KeyDeriver

logger = logging.getLogger(__name__)

MAGIC       = b"STEG"
SALT_SIZE   = 16
NONCE_SIZE  = 12
TAG_SIZE    = 16
HEADER_SIZE = len(MAGIC) + SALT_SIZE + NONCE_SIZE     # 32
OVERHEAD    = HEADER_SIZE + TAG_SIZE                  # 48


class EnvelopeCipher:
    """Passphrase-based AES-256-GCM envelope encryption."""

    # wire format, fixed: changing these breaks every existing envelope
    MAGIC       = MAGIC
    SALT_SIZE   = SALT_SIZE
    NONCE_SIZE  = NONCE_SIZE
    TAG_SIZE    = TAG_SIZE
    HEADER_SIZE = HEADER_SIZE

    def __init__(self, kdf: KeyDeriver = None,
                 rng: Callable[[int], bytes] = None):
        """
        kdf : KeyDeriver to use, defaults to Argon2id reference costs.
        rng : callable returning n random bytes, defaults to os.urandom.
              Inject a seeded source for reproducible tests only.
        """
        self._kdf = kdf if kdf is not None else KeyDeriver()
        self._rng = rng if rng is not None else os.urandom

    @property
    def kdf(self) -> KeyDeriver:
        return self._kdf

    def _aead(self, passphrase: str, salt: bytes) -> AESGCM:
        key = self._kdf.derive_key(passphrase, salt)
        try:
            return AESGCM(key)
        except ValueError as exc:
            raise SteganoError(ErrorKind.ENCRYPTION_ERROR, str(exc)) from exc

    def encrypt(self, message: str, passphrase: str) -> bytes:
        """
        Encrypt message text under passphrase.
        Returns: MAGIC || salt || nonce || ciphertext+tag
        """
        salt  = self._rng(SALT_SIZE)
        nonce = self._rng(NONCE_SIZE)
        ct    = self._aead(passphrase, salt).encrypt(nonce, message.encode("utf-8"), None)
        logger.debug(f"Envelope sealed: {len(ct)}B ciphertext, {HEADER_SIZE + len(ct)}B total")
        return MAGIC + salt + nonce + ct

    def decrypt(self, blob: bytes, passphrase: str) -> str:
        """
        Verify and decrypt an envelope produced by encrypt().

        Raises SteganoError with kind
            INVALID_FORMAT     blob shorter than the header, or non-UTF-8 plaintext
            NO_MESSAGE_FOUND   magic bytes missing — not one of our envelopes
            DECRYPTION_FAILED  wrong passphrase or corrupted ciphertext/tag
        """
        if len(blob) < HEADER_SIZE:
            raise SteganoError(ErrorKind.INVALID_FORMAT)
        if blob[:len(MAGIC)] != MAGIC:
            raise SteganoError(ErrorKind.NO_MESSAGE_FOUND)

        salt  = blob[len(MAGIC):len(MAGIC) + SALT_SIZE]
        nonce = blob[len(MAGIC) + SALT_SIZE:HEADER_SIZE]
        ct    = blob[HEADER_SIZE:]

        try:
            plaintext = self._aead(passphrase, salt).decrypt(nonce, ct, None)
        except InvalidTag as exc:
            raise SteganoError(ErrorKind.DECRYPTION_FAILED) from exc

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SteganoError(ErrorKind.INVALID_FORMAT) from exc


def encrypt(message: str, passphrase: str) -> bytes:
    """Seal message with default parameters and os.urandom."""
    return EnvelopeCipher().encrypt(message, passphrase)


def decrypt(blob: bytes, passphrase: str) -> str:
    """Open an envelope sealed with default parameters."""
    return EnvelopeCipher().decrypt(blob, passphrase)
