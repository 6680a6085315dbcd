"""Base64 helpers for envelope bodies."""

import base64
import binascii

from core.exceptions import DecodeError


def decode_body(text: str) -> bytes:
    """Decode a standard, padded base64 body. Empty text is an empty body."""
    if not text:
        return b""
    # Line breaks inside the encoded text are ignored; any other stray character is an error.
    text = text.replace("\r", "").replace("\n", "")
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"illegal base64 data in body: {e}") from e


def encode_body(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")
