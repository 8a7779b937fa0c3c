"""
Layer 1 — KEY DERIVATION: Argon2id
===================================
Turn a human passphrase into a 256-bit symmetric key.

Argon2 is memory-hard: every guess costs the attacker the same RAM and
passes over it that it costs us, which blunts GPU/ASIC brute forcing of
weak passphrases. The salt is random per message and travels in the
envelope header, so equal passphrases never yield equal keys.

Defaults are the Argon2 reference defaults:
    variant      Argon2id, version 0x13
    memory cost  19456 KiB (19 MiB)
    time cost    2 passes
    parallelism  1 lane
    output       32 bytes

Dependencies: argon2-cffi >= 21.0
"""

import logging

from argon2.exceptions import HashingError
from argon2.low_level import ARGON2_VERSION, Type, hash_secret_raw

from ..errors import ErrorKind, SteganoError

logger = logging.getLogger(__name__)


class KeyDeriver:
    """Argon2id passphrase → key derivation with tunable cost."""

    KEY_SIZE        = 32      # 256-bit AES key
    TIME_COST       = 2
    MEMORY_COST_KIB = 19456
    PARALLELISM     = 1

    def __init__(self, time_cost: int = None, memory_cost: int = None,
                 parallelism: int = None):
        """
        Omit any parameter to use the class default. Changing them changes
        every derived key: envelopes are only readable with the same costs.
        """
        self.time_cost   = self.TIME_COST if time_cost is None else time_cost
        self.memory_cost = self.MEMORY_COST_KIB if memory_cost is None else memory_cost
        self.parallelism = self.PARALLELISM if parallelism is None else parallelism

    def derive_key(self, passphrase: str, salt: bytes) -> bytes:
        """
        Deterministic: the same (passphrase, salt) always yields the same key.
        Raises SteganoError(ENCRYPTION_ERROR) if Argon2 rejects the inputs.
        """
        try:
            key = hash_secret_raw(
                secret=passphrase.encode("utf-8"),
                salt=salt,
                time_cost=self.time_cost,
                memory_cost=self.memory_cost,
                parallelism=self.parallelism,
                hash_len=self.KEY_SIZE,
                type=Type.ID,
                version=ARGON2_VERSION,
            )
        except HashingError as exc:
            raise SteganoError(ErrorKind.ENCRYPTION_ERROR, str(exc)) from exc
        logger.debug(f"Argon2id: t={self.time_cost} m={self.memory_cost}KiB "
                     f"p={self.parallelism} salt={len(salt)}B")
        return key

    def __repr__(self):
        return (f"KeyDeriver(t={self.time_cost}, m={self.memory_cost}, "
                f"p={self.parallelism})")


def derive_key(passphrase: str, salt: bytes) -> bytes:
    """Derive a 32-byte key with the default Argon2id parameters."""
    return KeyDeriver().derive_key(passphrase, salt)
