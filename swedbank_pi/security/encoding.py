"""Base64url helpers for detached token segments."""

from __future__ import annotations

import binascii
import re
from typing import Union

from jwt.utils import base64url_decode, base64url_encode

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_-]*$")


def b64url_encode(data: Union[bytes, str]) -> str:
    """Base64url encode without padding."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64url_encode(data).decode("ascii")


def b64url_decode(segment: str) -> bytes:
    """Decode an unpadded base64url segment.

    Only canonical encodings are accepted: the segment must use the URL-safe
    alphabet without padding and must be exactly what :func:`b64url_encode`
    produces for the decoded bytes.

    Raises:
        ValueError: If ``segment`` is not a canonical base64url string.
    """
    if not isinstance(segment, str) or not _SEGMENT_RE.match(segment):
        raise ValueError("segment contains characters outside the base64url alphabet")
    try:
        data = base64url_decode(segment)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"segment is not valid base64url: {exc}") from exc
    if b64url_encode(data) != segment:
        raise ValueError("segment is not canonically encoded")
    return data
