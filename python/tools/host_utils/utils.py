#!/usr/bin/env python3
"""
Path helpers and the scoped working-directory guard.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional, Union

from loguru import logger

from .exceptions import WorkingDirectoryError

PathLike = Union[str, Path]


def ensure_path(path: Optional[PathLike]) -> Optional[Path]:
    """
    Convert a string to an absolute Path object.

    Args:
        path: String path, Path object, or None.

    Returns:
        Path: The absolute path, or None if input was None.
    """
    if path is None:
        return None
    return Path(path).expanduser().absolute()


@contextmanager
def change_directory(path: Optional[PathLike]) -> Generator[Path, None, None]:
    """
    Context manager that switches the process-wide working directory.

    The previous directory is restored on every exit path, including when the
    body raises. The working directory is process state, so callers must not
    run two guarded operations concurrently.

    Args:
        path: The directory to change to. If None, stays in current directory.

    Yields:
        Path: The directory we changed to (or current if path was None)

    Raises:
        WorkingDirectoryError: If the directory cannot be entered.

    Example:
        >>> with change_directory(Path("/path/to/repo")) as current_dir:
        ...     print(f"Working in {current_dir}")
    """
    original_dir = Path.cwd()
    if path is None:
        yield original_dir
        return

    target_dir = ensure_path(path)
    try:
        os.chdir(target_dir)
    except OSError as e:
        logger.error(f"Failed to change directory to {target_dir}: {e}")
        raise WorkingDirectoryError(
            f"Failed to change directory to {target_dir}: {e}",
            target_directory=target_dir,
            original_directory=original_dir,
            original_error=e,
        ) from e

    logger.debug(f"Changed directory from {original_dir} to {target_dir}")
    try:
        yield target_dir
    finally:
        try:
            os.chdir(original_dir)
            logger.debug(f"Restored directory to {original_dir}")
        except OSError as e:
            logger.error(f"Failed to restore directory to {original_dir}: {e}")
