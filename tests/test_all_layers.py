"""
stegano_vault — Key derivation, envelope, bit stream, capacity
===============================================================
Run with:  python -m pytest tests/ -v
       or:  python tests/test_all_layers.py
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import random

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from stegano_vault.errors                   import ErrorKind, SteganoError
from stegano_vault.layers.layer1_kdf        import KeyDeriver, derive_key
from stegano_vault.layers.layer2_envelope   import (
    EnvelopeCipher, MAGIC, HEADER_SIZE, OVERHEAD, encrypt, decrypt,
)
from stegano_vault.layers.layer3_bitstream  import (
    to_bits, frame, from_bits, read_length, LENGTH_PREFIX_BITS,
)
from stegano_vault.layers.layer6_capacity   import (
    ENVELOPE_OVERHEAD, raw_image_capacity, raw_audio_capacity, message_capacity,
    image_message_capacity, audio_message_capacity,
)

PASS  = "correct horse battery staple"
SALT  = bytes(range(16))
FAST  = KeyDeriver(time_cost=1, memory_cost=8, parallelism=1)
TEXTS = ["", "hi", "Grüße, мир — 日本語 🎉", "X" * 5000]


def seeded_rng(seed: int = 7):
    return random.Random(seed).randbytes


def fast_cipher(seed: int = None) -> EnvelopeCipher:
    return EnvelopeCipher(kdf=FAST, rng=seeded_rng(seed) if seed is not None else None)


# ── Layer 1 — key derivation ──────────────────────────────────────────────────
def test_kdf_deterministic_32_bytes():
    k1 = FAST.derive_key(PASS, SALT)
    k2 = FAST.derive_key(PASS, SALT)
    assert k1 == k2
    assert len(k1) == 32

def test_kdf_salt_and_passphrase_change_key():
    base = FAST.derive_key(PASS, SALT)
    assert FAST.derive_key(PASS, bytes(16)) != base
    assert FAST.derive_key(PASS + "!", SALT) != base

def test_kdf_cost_parameters_change_key():
    other = KeyDeriver(time_cost=2, memory_cost=8, parallelism=1)
    assert other.derive_key(PASS, SALT) != FAST.derive_key(PASS, SALT)

def test_kdf_default_parameters():
    kdf = KeyDeriver()
    assert (kdf.time_cost, kdf.memory_cost, kdf.parallelism) == (2, 19456, 1)
    assert derive_key(PASS, SALT) == kdf.derive_key(PASS, SALT)

def test_kdf_rejected_input_is_encryption_error():
    with pytest.raises(SteganoError) as exc:
        FAST.derive_key(PASS, b"short")      # Argon2 needs >= 8 salt bytes
    assert exc.value.kind is ErrorKind.ENCRYPTION_ERROR


# ── Layer 2 — envelope ────────────────────────────────────────────────────────
@pytest.mark.parametrize("text", TEXTS)
def test_envelope_roundtrip(text):
    c = fast_cipher()
    assert c.decrypt(c.encrypt(text, PASS), PASS) == text

def test_envelope_layout():
    blob = fast_cipher(seed=3).encrypt("hi", PASS)
    expected = random.Random(3).randbytes
    salt, nonce = expected(16), expected(12)
    assert blob[:4] == MAGIC == b"STEG"
    assert blob[4:20] == salt
    assert blob[20:32] == nonce
    assert len(blob) == OVERHEAD + 2 == 50

def test_envelope_class_constants_match_wire_format():
    c = EnvelopeCipher
    assert (c.MAGIC, c.SALT_SIZE, c.NONCE_SIZE, c.TAG_SIZE, c.HEADER_SIZE) == \
        (b"STEG", 16, 12, 16, 32)
    assert len(c.MAGIC) + c.SALT_SIZE + c.NONCE_SIZE == c.HEADER_SIZE == HEADER_SIZE
    assert c.HEADER_SIZE + c.TAG_SIZE == OVERHEAD

def test_envelope_fresh_salt_and_nonce_per_call():
    c  = fast_cipher()
    b1 = c.encrypt("same", PASS)
    b2 = c.encrypt("same", PASS)
    assert b1[4:32] != b2[4:32]
    assert b1[32:] != b2[32:]

def test_envelope_seeded_rng_is_reproducible():
    assert fast_cipher(seed=11).encrypt("m", PASS) == fast_cipher(seed=11).encrypt("m", PASS)

def test_envelope_wrong_passphrase():
    c = fast_cipher()
    blob = c.encrypt("secret", "p1")
    with pytest.raises(SteganoError) as exc:
        c.decrypt(blob, "p2")
    assert exc.value.kind is ErrorKind.DECRYPTION_FAILED

def test_envelope_every_bit_flip_detected():
    c = fast_cipher()
    blob = c.encrypt("hi", PASS)
    for pos in range(len(MAGIC), len(blob)):
        for bit in range(8):
            tampered = bytearray(blob)
            tampered[pos] ^= 1 << bit
            with pytest.raises(SteganoError) as exc:
                c.decrypt(bytes(tampered), PASS)
            assert exc.value.kind is ErrorKind.DECRYPTION_FAILED

def test_envelope_bad_magic_is_no_message():
    blob = bytearray(fast_cipher().encrypt("hi", PASS))
    blob[0] ^= 0x01
    with pytest.raises(SteganoError) as exc:
        fast_cipher().decrypt(bytes(blob), PASS)
    assert exc.value.kind is ErrorKind.NO_MESSAGE_FOUND

@pytest.mark.parametrize("blob", [b"", b"STEG", MAGIC + bytes(HEADER_SIZE - 5)])
def test_envelope_too_short_is_invalid_format(blob):
    with pytest.raises(SteganoError) as exc:
        fast_cipher().decrypt(blob, PASS)
    assert exc.value.kind is ErrorKind.INVALID_FORMAT

def test_envelope_header_only_fails_authentication():
    with pytest.raises(SteganoError) as exc:
        fast_cipher().decrypt(MAGIC + bytes(HEADER_SIZE - 4), PASS)
    assert exc.value.kind is ErrorKind.DECRYPTION_FAILED

def test_envelope_non_utf8_plaintext_is_invalid_format():
    salt, nonce = bytes(16), bytes(12)
    key  = FAST.derive_key(PASS, salt)
    blob = MAGIC + salt + nonce + AESGCM(key).encrypt(nonce, b"\xff\xfe\xfd", None)
    with pytest.raises(SteganoError) as exc:
        fast_cipher().decrypt(blob, PASS)
    assert exc.value.kind is ErrorKind.INVALID_FORMAT

def test_envelope_module_helpers_default_costs():
    blob = encrypt("default costs", PASS)
    assert decrypt(blob, PASS) == "default costs"
    # cheaper Argon2 costs derive a different key
    with pytest.raises(SteganoError) as exc:
        fast_cipher().decrypt(blob, PASS)
    assert exc.value.kind is ErrorKind.DECRYPTION_FAILED

def test_error_messages():
    assert str(SteganoError(ErrorKind.MESSAGE_TOO_LARGE)) == "Message too large for carrier"
    assert str(SteganoError(ErrorKind.AUDIO_ERROR, "bad header")) == "Audio error: bad header"


# ── Layer 3 — bit stream ──────────────────────────────────────────────────────
def test_to_bits_msb_first():
    assert to_bits(b"\xa5\x01") == [1, 0, 1, 0, 0, 1, 0, 1,
                                    0, 0, 0, 0, 0, 0, 0, 1]

def test_frame_prefix_and_length():
    payload = b"payload"
    bits = frame(payload)
    assert len(bits) == LENGTH_PREFIX_BITS + 8 * len(payload)
    assert bits[:32] == to_bits(b"\x00\x00\x00\x07")
    assert read_length(bits) == 7
    assert from_bits(bits) == payload

def test_frame_empty_payload():
    bits = frame(b"")
    assert bits == [0] * 32
    assert from_bits(bits) == b""

def test_from_bits_without_prefix_ignores_partial_byte():
    assert from_bits([0, 1, 0, 0, 0, 0, 0, 1, 1, 1], length_prefix_bits=0) == b"A"

def test_read_length_needs_32_bits():
    with pytest.raises(ValueError):
        read_length([1] * 31)

def test_read_length_big_endian():
    assert read_length(to_bits(b"\x01\x02\x03\x04")) == 0x01020304


# ── Layer 6 — capacity ────────────────────────────────────────────────────────
def test_overhead_constant():
    assert ENVELOPE_OVERHEAD == 4 + 16 + 12 + 16 == 48

@pytest.mark.parametrize("w,h,raw", [(10, 10, 33), (12, 12, 50), (3, 3, -1), (1, 1, -4),
                                     (100, 50, 1871)])
def test_raw_image_capacity(w, h, raw):
    assert raw_image_capacity(w, h) == raw

def test_image_message_capacity_clamps():
    assert image_message_capacity(10, 10) == 0
    assert image_message_capacity(12, 12) == 2
    assert image_message_capacity(100, 50) == 1871 - 48

def test_audio_capacity():
    assert raw_audio_capacity(1000) == 121
    assert raw_audio_capacity(7) == -4
    assert audio_message_capacity(1000) == 73
    assert audio_message_capacity(100) == 0

def test_message_capacity_never_negative():
    assert message_capacity(-4) == 0
    assert message_capacity(48) == 0
    assert message_capacity(49) == 1


# ── run directly ─────────────────────────────────────────────────────────────
if __name__ == "__main__":
    import time
    tests = [
        ("L1 — KDF deterministic",             test_kdf_deterministic_32_bytes),
        ("L1 — KDF salt/passphrase",           test_kdf_salt_and_passphrase_change_key),
        ("L1 — KDF cost parameters",           test_kdf_cost_parameters_change_key),
        ("L1 — KDF defaults",                  test_kdf_default_parameters),
        ("L1 — KDF rejected input",            test_kdf_rejected_input_is_encryption_error),
        ("L2 — Envelope roundtrip",            lambda: [test_envelope_roundtrip(t) for t in TEXTS]),
        ("L2 — Envelope layout",               test_envelope_layout),
        ("L2 — Class constants",               test_envelope_class_constants_match_wire_format),
        ("L2 — Fresh salt/nonce",              test_envelope_fresh_salt_and_nonce_per_call),
        ("L2 — Wrong passphrase",              test_envelope_wrong_passphrase),
        ("L2 — Bit-flip tamper",               test_envelope_every_bit_flip_detected),
        ("L2 — Bad magic",                     test_envelope_bad_magic_is_no_message),
        ("L2 — Non-UTF-8 plaintext",           test_envelope_non_utf8_plaintext_is_invalid_format),
        ("L2 — Default costs",                 test_envelope_module_helpers_default_costs),
        ("L3 — MSB-first bits",                test_to_bits_msb_first),
        ("L3 — Length prefix",                 test_frame_prefix_and_length),
        ("L6 — Image capacity clamp",          test_image_message_capacity_clamps),
        ("L6 — Audio capacity",                test_audio_capacity),
    ]

    print("\n" + "═" * 70)
    print("  stegano_vault — Layer Test Suite")
    print("═" * 70)
    passed = failed = 0
    for name, fn in tests:
        t0 = time.perf_counter()
        try:
            fn()
            elapsed = time.perf_counter() - t0
            print(f"  ✓  {name:<45} {elapsed:.3f}s")
            passed += 1
        except Exception as e:
            print(f"  ✗  {name:<45} FAILED: {e}")
            failed += 1
    print("═" * 70)
    print(f"  {passed} passed  |  {failed} failed")
    print("═" * 70 + "\n")
    sys.exit(0 if failed == 0 else 1)
