#!/usr/bin/env python3
"""
Byte-order-mark based text encoding detection.

The editor calls this when opening a file so it can write the document back
out in the same encoding it was read with.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .models import FileEncoding

UNTITLED_DOCUMENT = "untitled"
SNIFF_LENGTH = 5


def detect_encoding_from_bytes(data: bytes) -> FileEncoding:
    """
    Classify leading bytes by byte-order mark.

    Genuine BOMs are checked before the UTF-16 without-BOM heuristic, which
    only applies when no BOM matched.

    Args:
        data: The first bytes of a file (at most a handful are inspected).

    Returns:
        FileEncoding: The detected encoding, ``FileEncoding.UTF8`` when no
        BOM is present.
    """
    if data[:3] == b"\xef\xbb\xbf":
        return FileEncoding.UTF8_BOM
    if data[:2] == b"\xff\xfe":
        return FileEncoding.UTF16_LE
    if data[:2] == b"\xfe\xff":
        return FileEncoding.UTF16_BE
    if data[:3] == b"\x2b\x2f\x76":
        return FileEncoding.UTF7
    if (
        len(data) > 3
        and data[0] != 0
        and data[1] == 0
        and data[2] != 0
        and data[3] == 0
    ):
        logger.warning("UTF-16 little-endian text without a BOM detected")
        return FileEncoding.UTF16_LE
    return FileEncoding.UTF8


def detect_file_encoding(path: Optional[Union[str, Path]]) -> FileEncoding:
    """
    Detect the text encoding of a file from its first five bytes.

    New documents (no path, or the ``untitled`` placeholder) have nothing to
    sniff and default to UTF-8 with BOM.

    Args:
        path: File to inspect. Must exist and be readable.

    Returns:
        FileEncoding: The detected encoding.

    Raises:
        OSError: If the file cannot be opened.
    """
    if path is None or str(path) == "" or str(path).lower() == UNTITLED_DOCUMENT:
        return FileEncoding.UTF8_BOM

    with open(path, "rb") as f:
        data = f.read(SNIFF_LENGTH)

    encoding = detect_encoding_from_bytes(data)
    logger.debug(f"Detected {encoding.name} for {path}")
    return encoding
