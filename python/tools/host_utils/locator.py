#!/usr/bin/env python3
"""
Best-effort discovery of locally installed companion tools.

Probes a fixed, ordered list of install locations for each tool kind and
returns the first one that exists. This is filesystem probing only: no
installation, registry lookups or network access.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from loguru import logger

from .config import HostConfiguration
from .models import Found, NotFound, ToolKind, ToolPath
from .platforms import PlatformProfile, ToolCandidate, get_platform_profile


def newest_match(folder: Path, pattern: str) -> Optional[Path]:
    """
    Return the most recently modified entry of ``folder`` matching ``pattern``.

    Args:
        folder: Directory to scan (not recursive).
        pattern: Glob such as ``"app-*"`` or ``"gimp-*.*.*"``.

    Returns:
        Path: The newest match, or None if the folder is missing or nothing
        matches.
    """
    if not folder.is_dir():
        return None

    newest: Optional[Path] = None
    newest_mtime = 0.0
    try:
        entries = list(folder.glob(pattern))
    except OSError as e:
        logger.debug(f"Could not scan {folder}: {e}")
        return None

    for entry in entries:
        # Dangling links and entries removed mid-scan are skipped.
        try:
            mtime = entry.stat().st_mtime
        except OSError as e:
            logger.debug(f"Skipping {entry}: {e}")
            continue
        if newest is None or mtime > newest_mtime:
            newest, newest_mtime = entry, mtime
    return newest


class ToolLocator:
    """Finds companion tools using the candidate tables of a platform profile."""

    def __init__(self, profile: Optional[PlatformProfile] = None):
        self.profile = profile or get_platform_profile()

    def _resolve_candidate(self, candidate: ToolCandidate) -> Optional[Path]:
        if candidate.root is None:
            base = Path(*candidate.subpath) if candidate.subpath else None
        else:
            root = self.profile.folders.resolve(candidate.root)
            if root is None:
                return None
            base = root.joinpath(*candidate.subpath)
        if base is None:
            return None

        if candidate.pattern is None:
            exists = base.is_dir() if candidate.expect_directory else base.is_file()
            return base if exists else None

        match = newest_match(base, candidate.pattern)
        if match is None:
            return None
        if candidate.executable:
            executable = match / candidate.executable
            return executable if executable.exists() else None
        return match

    def find_companion_tool(self, kind: ToolKind) -> ToolPath:
        """
        Locate a companion tool of the given kind.

        Args:
            kind: Which tool to look for.

        Returns:
            ToolPath: ``Found`` with the first existing candidate or the
            platform fallback, otherwise ``NotFound``.
        """
        for candidate in self.profile.tool_candidates(kind):
            path = self._resolve_candidate(candidate)
            if path is not None:
                logger.debug(f"Found {kind.value}: {path}")
                return Found(str(path))

        fallback = self.profile.tool_fallback(kind)
        if fallback:
            logger.debug(f"No {kind.value} installed, falling back to {fallback}")
            return Found(fallback, is_fallback=True)

        logger.debug(f"No {kind.value} found")
        return NotFound(kind)

    def find_image_editor(self) -> ToolPath:
        return self.find_companion_tool(ToolKind.IMAGE_EDITOR)

    def find_image_viewer(self) -> ToolPath:
        return self.find_companion_tool(ToolKind.IMAGE_VIEWER)

    def find_git_client(self) -> ToolPath:
        return self.find_companion_tool(ToolKind.GIT_CLIENT)

    def find_diff_tool(self) -> ToolPath:
        return self.find_companion_tool(ToolKind.DIFF_TOOL)

    def resolve_missing(self, config: HostConfiguration) -> HostConfiguration:
        """
        Fill in unset tool paths of a configuration.

        The input is left untouched; the caller decides whether to persist
        the returned copy.
        """
        updates = {}
        git_updates = {}

        if not config.image_editor:
            tool = self.find_image_editor()
            if isinstance(tool, Found):
                updates["image_editor"] = tool.path
        if not config.image_viewer:
            tool = self.find_image_viewer()
            if isinstance(tool, Found):
                updates["image_viewer"] = tool.path
        if not config.git.git_client_executable:
            tool = self.find_git_client()
            if isinstance(tool, Found):
                git_updates["git_client_executable"] = tool.path
        if not config.git.diff_tool:
            tool = self.find_diff_tool()
            if isinstance(tool, Found):
                git_updates["diff_tool"] = tool.path

        if git_updates:
            updates["git"] = config.git.model_copy(update=git_updates)
        if updates:
            logger.info(f"Discovered companion tools: {', '.join(updates)}")
        return config.model_copy(update=updates)


def find_image_editor() -> ToolPath:
    return ToolLocator().find_image_editor()


def find_image_viewer() -> ToolPath:
    return ToolLocator().find_image_viewer()


def find_git_client() -> ToolPath:
    return ToolLocator().find_git_client()


def find_diff_tool() -> ToolPath:
    return ToolLocator().find_diff_tool()
