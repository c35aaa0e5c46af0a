"""
Patrol Storage — Portable Text Transport
==========================================
wire document ↔ base64( compact ASCII JSON )

"e30=" is the portable form of {}. Decoding is strict: surrounding
whitespace is ignored, anything else outside the standard base64
alphabet, non-UTF-8 bytes or malformed JSON raises
TransportDecodeError. JSON the parser refuses for size (over-deep
nesting, integer literals past the interpreter's digit limit) counts
as malformed.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from patrol.storage.errors import TransportDecodeError


def encode_text(document: Any) -> str:
    payload = json.dumps(
        document,
        separators=(",", ":"),
        ensure_ascii=True,
        allow_nan=False,
    )
    return base64.b64encode(payload.encode("ascii")).decode("ascii")


def decode_text(text: Any, max_length: int) -> Any:
    if not isinstance(text, str):
        raise TransportDecodeError(f"expected text, got {type(text).__name__}")

    text = text.strip()
    if len(text) > max_length:
        raise TransportDecodeError(
            f"text is {len(text)} characters, limit is {max_length}"
        )

    try:
        raw = base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError, ValueError) as exc:
        raise TransportDecodeError(f"not base64: {exc}") from exc

    try:
        payload = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise TransportDecodeError(f"not UTF-8: {exc}") from exc

    try:
        return json.loads(payload)
    except (ValueError, RecursionError) as exc:
        raise TransportDecodeError(f"not JSON: {exc}") from exc
