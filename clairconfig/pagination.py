import base64
import binascii
import secrets

from .errors import KeyGenerationError, PaginationKeyError

KEY_SIZE = 32


def generate_key() -> str:
    """Return a fresh random key, URL-safe base64 encoded."""
    try:
        raw = secrets.token_bytes(KEY_SIZE)
    except (OSError, NotImplementedError) as exc:  # no entropy source
        raise KeyGenerationError(f"could not generate pagination key: {exc}") from exc
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_key(key: str) -> bytes:
    try:
        raw = base64.b64decode(key.encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise PaginationKeyError() from exc
    if len(raw) != KEY_SIZE:
        raise PaginationKeyError()
    return raw
