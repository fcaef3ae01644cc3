# Shared application constants
import os

# --- Streaming digest ---
DIGEST_CHUNK_SIZE = 4096

# --- Output sink ---
# Width of the delimiter lines and base64 body when binary output is printed.
BLOCK_WIDTH = 80
BLOCK_FILL = "="

# --- Entropy ---
SEED_SIZE = 32

# Legacy QRNG endpoint. The base URL comes from --qrng-url / DILIKEY_QRNG_URL.
QRNG_PATH = "/qrng/base64"
QRNG_TIMEOUT = float(os.getenv("DILIKEY_QRNG_TIMEOUT", "10"))

# --- Logging ---
LOG_LEVEL = os.getenv("DILIKEY_LOG_LEVEL", "WARNING").upper()
