"""
Configuration constants for the asset pipeline.
"""
from pathlib import Path

# --- File Type Definitions ---
# Matched case-sensitively against the extension as stored on disk
JPEG_EXTS = {'.jpg', '.jpeg'}
PNG_EXTS = {'.png'}

# --- Filtering ---
# Any path containing this marker is treated as pipeline output and never re-processed
COMPRESSED_MARKER = "compressed"
HIDDEN_PREFIX = "."

# --- Hashing ---
HASH_CHUNK_SIZE = 64 * 1024  # 64 KB chunks for reading

# --- Compression Output ---
OUTPUT_DIR = Path(COMPRESSED_MARKER)
DEFAULT_QUALITY = 80

# --- Remote Shrink Service ---
SHRINK_ENDPOINT = "https://api.tinify.com/shrink"
SHRINK_AUTH_USER = "api"
SHRINK_TIMEOUT_SEC = 5.0

# Environment variables read for credentials (also loaded from .env by the CLI)
ENV_API_KEY = "TINIFY_API_KEY"
ENV_ENDPOINT = "TINIFY_ENDPOINT"
ENV_TIMEOUT = "TINIFY_TIMEOUT"

# --- Reporting ---
SIZE_UNITS = "KMGTPE"
