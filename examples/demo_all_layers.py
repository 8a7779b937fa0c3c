"""
stegano_vault — Live Demo: All Six Layers
==========================================
Run:  python examples/demo_all_layers.py

Builds a cover image and a cover WAV in memory, hides a sealed message in
each, and prints sizes, capacities and timings for every layer.
"""

import sys, os, io, time, wave, random
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from PIL import Image

from stegano_vault                          import (
    embed_image, extract_image, image_capacity,
    embed_audio, extract_audio, audio_capacity,
    SteganoError,
)
from stegano_vault.layers.layer1_kdf        import KeyDeriver
from stegano_vault.layers.layer2_envelope   import EnvelopeCipher
from stegano_vault.layers.layer3_bitstream  import frame
from stegano_vault.layers.layer6_capacity   import ENVELOPE_OVERHEAD

LINE = "═" * 70
MSG  = "Meet at the old mill — bring the 日本語 dictionary."
PASS = "correct horse battery staple"

def header(layer, name):
    print(f"\n{LINE}")
    print(f"  Layer {layer} — {name}")
    print(LINE)

def ok(label, value=""):
    print(f"  ✓  {label}{f': {value}' if value else ''}")

def cover_png(w, h):
    rnd = random.Random(2024)
    img = Image.frombytes("RGB", (w, h), rnd.randbytes(w * h * 3))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()

def cover_wav(seconds=1, rate=16000):
    rnd = random.Random(2024)
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(2)
        wf.setsampwidth(2)
        wf.setframerate(rate)
        wf.writeframes(rnd.randbytes(seconds * rate * 2 * 2))
    return buf.getvalue()

logging.basicConfig(level=logging.INFO, format=' %(message)s')

# ─────────────────────────────────────────────────────────────────────────────
print(f"\n{LINE}")
print("  stegano_vault — Six-Layer Demo")
print(LINE)
print(f"  Message: {MSG}\n")

# ── LAYER 1 ──────────────────────────────────────────────────────────────────
header(1, "KEY DERIVATION — Argon2id")
kdf = KeyDeriver()
t0  = time.perf_counter()
key = kdf.derive_key(PASS, b"\x00" * 16)
elapsed = time.perf_counter() - t0
ok("Parameters", repr(kdf))
ok("Key",        key.hex()[:32] + "...")
ok("Cost",       f"{elapsed*1000:.1f} ms")

# ── LAYER 2 ──────────────────────────────────────────────────────────────────
header(2, "ENVELOPE — AES-256-GCM")
cipher = EnvelopeCipher(kdf)
blob   = cipher.encrypt(MSG, PASS)
ok("Envelope",  f"{len(blob)} bytes (overhead={ENVELOPE_OVERHEAD} + {len(MSG.encode())} text)")
ok("Magic",     blob[:4].decode())
ok("Decrypted", cipher.decrypt(blob, PASS))
try:
    cipher.decrypt(blob, "wrong")
except SteganoError as e:
    ok("Wrong passphrase", f"{e.kind.name}")

# ── LAYER 3 ──────────────────────────────────────────────────────────────────
header(3, "BIT STREAM — 32-bit length prefix")
bits = frame(blob)
ok("Bits",   f"{len(bits)} = 32 + 8 × {len(blob)}")
ok("Prefix", "".join(map(str, bits[:32])))

# ── LAYER 4 + 6 ──────────────────────────────────────────────────────────────
header(4, "IMAGE CARRIER — LSB of R, G, B")
png = cover_png(64, 48)
ok("Cover",    f"64x48 PNG, {len(png)} bytes")
ok("Capacity", f"{image_capacity(png)} message bytes")
t0    = time.perf_counter()
stego = embed_image(png, MSG, PASS, cipher=cipher)
found = extract_image(stego, PASS, cipher=cipher)
elapsed = time.perf_counter() - t0
ok("Stego",      f"{len(stego)} bytes PNG")
ok("Round-trip", f"{elapsed*1000:.0f} ms")
ok("Extracted",  found)

# ── LAYER 5 + 6 ──────────────────────────────────────────────────────────────
header(5, "AUDIO CARRIER — LSB per PCM sample")
wav_in = cover_wav()
ok("Cover",    f"1 s stereo 16-bit, {len(wav_in)} bytes")
ok("Capacity", f"{audio_capacity(wav_in)} message bytes")
t0    = time.perf_counter()
stego = embed_audio(wav_in, MSG, PASS, cipher=cipher)
found = extract_audio(stego, PASS, cipher=cipher)
elapsed = time.perf_counter() - t0
ok("Stego",      f"{len(stego)} bytes WAV")
ok("Round-trip", f"{elapsed*1000:.0f} ms")
ok("Extracted",  found)

# ── Summary ───────────────────────────────────────────────────────────────────
print(f"\n{LINE}")
print("  ALL LAYERS COMPLETE")
print(f"  {LINE}")
print("  Layer 1  Argon2id                     — Passphrase → key")
print("  Layer 2  AES-256-GCM envelope          — Tamper-evident seal")
print("  Layer 3  Length-prefixed bit stream    — MSB first")
print("  Layer 4  Image LSB (R, G, B)           — Hide in pixels")
print("  Layer 5  Audio LSB (PCM 8/16/24/32)    — Hide in samples")
print("  Layer 6  Capacity                      — Check before you embed")
print(LINE + "\n")
