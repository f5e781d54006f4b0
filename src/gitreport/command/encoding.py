"""Encoding detection and normalisation for captured command output."""

from __future__ import annotations

import codecs
from typing import Union

import chardet

BINARY = "binary"  # sentinel: no encoding could be determined
DEFAULT_ENCODING = "utf-8"


def _codec_name(encoding: str) -> str:
    return codecs.lookup(encoding).name


def detect_encoding(data: bytes) -> str:
    """Return the most likely encoding of *data*, or ``"binary"``."""
    return chardet.detect(data).get("encoding") or BINARY


def normalize(data: Union[bytes, str], normalize_to: str = DEFAULT_ENCODING) -> str:
    """Decode *data* into text, transcoding through the detected encoding.

    Bytes that are already valid in *normalize_to* are decoded as-is.
    Anything else is decoded from the detected encoding with invalid and
    undefined sequences replaced, so this never raises on bad input.
    """
    if isinstance(data, str):
        return data

    try:
        return data.decode(normalize_to)
    except UnicodeDecodeError:
        pass

    detected = detect_encoding(data)
    if detected == BINARY:
        # Only the ASCII range is meaningful without an encoding
        return data.decode("ascii", errors="replace")
    try:
        source = _codec_name(detected)
    except LookupError:
        return data.decode("ascii", errors="replace")
    return data.decode(source, errors="replace")
