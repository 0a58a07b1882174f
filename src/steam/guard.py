"""Steam Guard one-time code generation.

Codes are an HOTP variant: HMAC-SHA1 over the 30 second time step keyed
with the base64 shared secret, truncated the RFC 4226 way and rendered in
Steam's 26 character alphabet.
"""
import base64
import binascii
import struct
import time
from typing import Callable, Optional

from cryptography.hazmat.primitives import hashes, hmac

from src.steam.exceptions import InvalidSecretError

CODE_CHARS = "23456789BCDFGHJKMNPQRTVWXY"
CODE_LENGTH = 5
TIME_STEP = 30

AuthCodeProvider = Callable[[str], str]


def decode_secret(secret: str) -> bytes:
    """Decode a base64 shared secret. Raises InvalidSecretError if malformed."""
    if not secret:
        raise InvalidSecretError("Shared secret is empty")
    try:
        return base64.b64decode(secret, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidSecretError(f"Shared secret is not valid base64: {e}") from e


def generate_auth_code(secret: str, timestamp: Optional[float] = None) -> str:
    """Generate the Steam Guard code for ``timestamp`` (default: now)."""
    key = decode_secret(secret)
    now = time.time() if timestamp is None else timestamp
    counter = struct.pack(">Q", int(now) // TIME_STEP)
    mac = hmac.HMAC(key, hashes.SHA1())
    mac.update(counter)
    digest = mac.finalize()
    offset = digest[19] & 0x0F
    full = struct.unpack(">I", digest[offset:offset + 4])[0] & 0x7FFFFFFF
    chars = []
    for _ in range(CODE_LENGTH):
        chars.append(CODE_CHARS[full % len(CODE_CHARS)])
        full //= len(CODE_CHARS)
    return "".join(chars)
