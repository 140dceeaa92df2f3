#!/usr/bin/env python3
"""
Recoverable file deletion through the platform trash / recycle bin.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .exceptions import TrashError
from .platforms import TrashFacility, get_platform_profile
from .utils import ensure_path


def move_to_trash(
    path: Union[str, Path], facility: Optional[TrashFacility] = None
) -> bool:
    """
    Move a file or folder to the trash without prompting the user.

    Args:
        path: Entry to delete.
        facility: Trash implementation; defaults to the platform's.

    Returns:
        bool: True if the entry was moved. On False the caller decides
        whether to delete permanently or notify the user.
    """
    target = ensure_path(path)
    facility = facility or get_platform_profile().trash

    try:
        facility.move_to_trash(target)
    except TrashError as e:
        logger.warning(str(e))
        return False
    except Exception as e:
        logger.exception(f"Unexpected error moving {target} to the trash: {e}")
        return False

    logger.info(f"Moved {target} to the trash")
    return True
