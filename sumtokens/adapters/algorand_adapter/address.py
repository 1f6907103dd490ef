from __future__ import annotations

import base64
import hashlib

_APP_ID_PREFIX = b"appID"
_CHECKSUM_LEN = 4


def _sha512_256(data: bytes) -> bytes:
    return hashlib.new("sha512_256", data).digest()


def encode_address(public_key: bytes) -> str:
    """Algorand address: base32(key || last 4 bytes of SHA-512/256(key)), unpadded."""
    if len(public_key) != 32:
        raise ValueError(f"Expected 32-byte key, got {len(public_key)} bytes")
    checksum = _sha512_256(public_key)[-_CHECKSUM_LEN:]
    return base64.b32encode(public_key + checksum).decode().rstrip("=")


def get_application_address(app_id: int | str) -> str:
    """Escrow account address controlled by application ``app_id``."""
    app_id = int(app_id)
    if app_id < 0:
        raise ValueError("app_id must be non-negative")
    return encode_address(_sha512_256(_APP_ID_PREFIX + app_id.to_bytes(8, "big")))


def is_valid_address(address: str) -> bool:
    if len(address) != 58:
        return False
    try:
        decoded = base64.b32decode(address + "======")
    except ValueError:
        return False
    key, checksum = decoded[:32], decoded[32:]
    return _sha512_256(key)[-_CHECKSUM_LEN:] == checksum
