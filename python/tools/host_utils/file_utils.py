#!/usr/bin/env python3
"""
File helpers used around opening and tracking documents.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Mapping, Optional, Union

from loguru import logger

from .encoding import UNTITLED_DOCUMENT

IMAGE_MEDIA_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".woff": "application/font-woff",
    ".svg": "image/svg+xml",
    ".woff2": "font/woff2",
}
DEFAULT_IMAGE_MEDIA_TYPE = "application/image"


def _normalize_separators(file: str) -> str:
    return file.replace("/", os.sep).replace("\\", os.sep)


def normalize_filename_with_base_path(
    file: Union[str, Path], base_path: Union[str, Path]
) -> Optional[Path]:
    """
    Resolve a possibly relative filename against a base path.

    Args:
        file: Fully qualified or relative filename.
        base_path: Folder to try when ``file`` does not exist as given.

    Returns:
        Path: The existing file, or None if it is found in neither place.
    """
    candidate = Path(file)
    if candidate.is_file():
        return candidate

    candidate = Path(base_path) / file
    if candidate.is_file():
        return candidate

    return None


def fixup_document_filename(
    file: Optional[str], start_directory: Union[str, Path, None] = None
) -> Optional[Path]:
    """
    Locate a document passed on the command line.

    Separators are normalized for the platform, then the file is looked up as
    given and under the directory the application was started from.
    """
    if file is None:
        return None

    file = _normalize_separators(file)
    return normalize_filename_with_base_path(file, start_directory or Path.cwd())


def get_checksum_from_file(file: Union[str, Path]) -> Optional[str]:
    """
    Compute the MD5 checksum of a file as uppercase hex.

    Returns:
        str: The checksum, or None if the file is missing or unreadable.
    """
    path = Path(file)
    if not path.is_file():
        return None

    md5 = hashlib.md5()
    try:
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                md5.update(chunk)
    except OSError as e:
        logger.debug(f"Could not checksum {path}: {e}")
        return None
    return md5.hexdigest().upper()


def get_editor_syntax_from_file_type(
    filename: Optional[str], mappings: Mapping[str, str]
) -> Optional[str]:
    """
    Look up the editor syntax for a file by its extension.

    Args:
        filename: Document name; ``untitled`` documents are markdown.
        mappings: Extension (without dot, lowercase) to syntax name.

    Returns:
        str: Syntax name, or None for unknown file types.
    """
    if not filename:
        return None
    if filename.lower() == UNTITLED_DOCUMENT:
        return "markdown"

    ext = Path(filename).suffix.lower().lstrip(".")
    if ext == "md":
        return "markdown"
    return mappings.get(ext)


def get_image_media_type_from_filename(file: Optional[str]) -> Optional[str]:
    """Return the media type for an image (or web font) filename or URL."""
    if not file:
        return file
    return IMAGE_MEDIA_TYPES.get(Path(file).suffix.lower(), DEFAULT_IMAGE_MEDIA_TYPE)
