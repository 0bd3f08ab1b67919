from __future__ import annotations

import base64
import binascii
import re
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from ..errors import InvalidImageFormat

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

_DATA_URL_RE = re.compile(r"data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[^,;]+)*),(?P<data>.*)", re.S)


def decode_image_payload(payload: bytes | str | None, field: str) -> bytes | None:
    """Turn raw bytes or a ``data:image/png;base64,...`` URL into bytes."""
    if payload is None:
        return None
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload) or None
    if not isinstance(payload, str):
        raise InvalidImageFormat(field, f"unsupported payload type {type(payload).__name__}")
    text = payload.strip()
    if not text:
        return None
    match = _DATA_URL_RE.fullmatch(text)
    if not match:
        raise InvalidImageFormat(field, "expected a data URL")
    mime = (match.group("mime") or "").lower()
    if mime != "image/png":
        raise InvalidImageFormat(field, f"media type {mime or '<none>'}")
    if ";base64" not in match.group("params").lower():
        raise InvalidImageFormat(field, "data URL is not base64 encoded")
    try:
        return base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageFormat(field, "invalid base64 data") from exc


def ensure_png(data: bytes | None, field: str) -> None:
    """Raise ``InvalidImageFormat`` unless ``data`` is a decodable PNG image.

    The check looks at content only: the signature first, then Pillow's
    structural verification.
    """
    if not data:
        raise InvalidImageFormat(field, "empty payload")
    if not data.startswith(PNG_SIGNATURE):
        raise InvalidImageFormat(field, "missing PNG signature")
    try:
        with Image.open(BytesIO(data)) as img:
            if img.format != "PNG":
                raise InvalidImageFormat(field, f"decoded as {img.format}")
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise InvalidImageFormat(field, str(exc) or exc.__class__.__name__) from exc
