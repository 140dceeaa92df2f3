#!/usr/bin/env python3
"""
Platform profiles for host integration.

Everything that differs between operating systems lives here: special folder
roots, the candidate install locations of companion tools, the trash
facility and the default-handler / file-manager shell verbs. The profile is
chosen once at startup by :func:`get_platform_profile`; the rest of the
package never branches on the platform itself.
"""

from __future__ import annotations

import os
import platform
import shutil
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable

from loguru import logger

from .exceptions import TrashError
from .models import ProcessSpec, ToolKind, WaitPolicy, WindowStyle
from .process import ProcessRunner

TRASH_TIMEOUT_MS = 10000


class SpecialFolder(Enum):
    """Well-known install roots."""

    PROGRAM_FILES_64 = auto()
    PROGRAM_FILES_X86 = auto()
    LOCAL_APP_DATA = auto()
    HOME = auto()


@runtime_checkable
class SpecialFolderResolver(Protocol):
    """Resolves a special folder to a directory, or None if it has no meaning."""

    def resolve(self, folder: SpecialFolder) -> Optional[Path]: ...


@runtime_checkable
class TrashFacility(Protocol):
    """Moves a filesystem entry to the recycle bin / trash."""

    def move_to_trash(self, path: Path) -> None: ...


@dataclass(frozen=True)
class ToolCandidate:
    """
    One probe location for a companion tool.

    ``root`` is None when ``subpath`` is already absolute. When ``pattern`` is
    set, ``subpath`` names a folder whose entries matching the glob are
    ranked by modification time and the newest one wins; ``executable`` is
    then joined onto a matched directory.
    """

    root: Optional[SpecialFolder]
    subpath: Tuple[str, ...]
    pattern: Optional[str] = None
    executable: Optional[str] = None
    expect_directory: bool = False

    @classmethod
    def file(cls, root: Optional[SpecialFolder], *parts: str) -> "ToolCandidate":
        return cls(root, tuple(parts))

    @classmethod
    def versioned(
        cls,
        root: Optional[SpecialFolder],
        *parts: str,
        pattern: str,
        executable: Optional[str] = None,
    ) -> "ToolCandidate":
        return cls(root, tuple(parts), pattern=pattern, executable=executable)


class EnvironmentFolderResolver:
    """Resolves special folders from environment variables with defaults."""

    def __init__(self, mapping: Dict[SpecialFolder, Tuple[str, Optional[str]]]):
        self._mapping = mapping

    def resolve(self, folder: SpecialFolder) -> Optional[Path]:
        if folder is SpecialFolder.HOME:
            return Path.home()
        env_var, default = self._mapping.get(folder, ("", None))
        value = os.environ.get(env_var) if env_var else None
        value = value or default
        return Path(value).expanduser() if value else None


class PlatformProfile(ABC):
    """Operating-system specific behavior used by the host utilities."""

    name: str = ""
    terminal_command: str = ""
    terminal_command_args: str = "{0}"
    optipng_executable: str = "optipng"

    def __init__(
        self,
        folders: SpecialFolderResolver,
        runner: Optional[ProcessRunner] = None,
    ):
        self.folders = folders
        self.runner = runner or ProcessRunner()

    @abstractmethod
    def tool_candidates(self, kind: ToolKind) -> Tuple[ToolCandidate, ...]:
        """Ordered probe locations for a companion tool."""

    def tool_fallback(self, kind: ToolKind) -> Optional[str]:
        """Tool to use when no candidate exists, or None for the OS handler."""
        return None

    @property
    @abstractmethod
    def trash(self) -> TrashFacility:
        """The trash facility for this platform."""

    @abstractmethod
    def open_with_default_handler(self, target: str, verb: str = "open") -> bool:
        """Open a file, folder or URL with the OS-registered application."""

    @abstractmethod
    def reveal_in_file_manager(self, path: Path) -> bool:
        """Show a file selected in the platform file manager."""

    def _launch(self, executable: str, arguments: List[str]) -> bool:
        result = self.runner.run(
            ProcessSpec(
                executable=executable,
                arguments=arguments,
                wait=WaitPolicy.NO_WAIT,
                window_style=WindowStyle.NORMAL,
            )
        )
        return not result.launch_failed


class _WindowsShellTrash:
    """Recycle bin deletion through ``SHFileOperationW``."""

    FO_DELETE = 3
    FOF_SILENT = 0x0004
    FOF_NOCONFIRMATION = 0x0010
    FOF_ALLOWUNDO = 0x0040
    FOF_NOERRORUI = 0x0400

    def move_to_trash(self, path: Path) -> None:
        import ctypes
        from ctypes import wintypes

        class SHFILEOPSTRUCTW(ctypes.Structure):
            _fields_ = [
                ("hwnd", wintypes.HWND),
                ("wFunc", wintypes.UINT),
                ("pFrom", wintypes.LPCWSTR),
                ("pTo", wintypes.LPCWSTR),
                ("fFlags", ctypes.c_ushort),
                ("fAnyOperationsAborted", wintypes.BOOL),
                ("hNameMappings", ctypes.c_void_p),
                ("lpszProgressTitle", wintypes.LPCWSTR),
            ]

        operation = SHFILEOPSTRUCTW()
        operation.wFunc = self.FO_DELETE
        # pFrom is a double-null-terminated list.
        operation.pFrom = str(path) + "\0"
        operation.fFlags = (
            self.FOF_ALLOWUNDO
            | self.FOF_NOCONFIRMATION
            | self.FOF_SILENT
            | self.FOF_NOERRORUI
        )

        status = ctypes.windll.shell32.SHFileOperationW(ctypes.byref(operation))
        if status != 0 or operation.fAnyOperationsAborted:
            raise TrashError(
                f"SHFileOperation failed for {path} (status {status})",
                target_path=path,
                status=status,
            )


class _CommandTrash:
    """Trash facility backed by an external command-line tool."""

    def __init__(self, runner: ProcessRunner, commands: List[List[str]]):
        self.runner = runner
        self.commands = commands

    def _command_for(self, path: Path) -> List[str]:
        for template in self.commands:
            if shutil.which(template[0]):
                return [part.format(path=path) for part in template]
        raise TrashError(
            "No trash utility available", target_path=path, status=None
        )

    def move_to_trash(self, path: Path) -> None:
        command = self._command_for(path)
        result = self.runner.run(
            ProcessSpec(
                executable=command[0],
                arguments=command[1:],
                wait=WaitPolicy.up_to(TRASH_TIMEOUT_MS),
                capture_output=True,
            )
        )
        if result.exit_code != 0:
            raise TrashError(
                f"{command[0]} could not move {path} to the trash: {result.output}",
                target_path=path,
                status=result.exit_code,
            )


def _applescript_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class _FinderTrash(_CommandTrash):
    """macOS trash through Finder scripting."""

    def __init__(self, runner: ProcessRunner):
        super().__init__(runner, [])

    def _command_for(self, path: Path) -> List[str]:
        script = (
            "tell application \"Finder\" to delete POSIX file "
            + _applescript_string(str(path))
        )
        return ["osascript", "-e", script]


class WindowsProfile(PlatformProfile):
    name = "windows"
    terminal_command = "powershell.exe"
    terminal_command_args = "-noexit -command \"cd '{0}'\""
    optipng_executable = "optipng.exe"

    def __init__(
        self,
        folders: Optional[SpecialFolderResolver] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        super().__init__(
            folders
            or EnvironmentFolderResolver(
                {
                    SpecialFolder.PROGRAM_FILES_64: ("ProgramW6432", r"C:\Program Files"),
                    SpecialFolder.PROGRAM_FILES_X86: (
                        "ProgramFiles(x86)",
                        r"C:\Program Files (x86)",
                    ),
                    SpecialFolder.LOCAL_APP_DATA: ("LOCALAPPDATA", None),
                }
            ),
            runner,
        )
        self._trash = _WindowsShellTrash()

    def tool_candidates(self, kind: ToolKind) -> Tuple[ToolCandidate, ...]:
        pf64 = SpecialFolder.PROGRAM_FILES_64
        pf86 = SpecialFolder.PROGRAM_FILES_X86
        local = SpecialFolder.LOCAL_APP_DATA
        return {
            ToolKind.IMAGE_EDITOR: (
                ToolCandidate.file(pf64, "Techsmith", "Snagit 2018", "SnagItEditor.exe"),
                ToolCandidate.file(pf64, "paint.net", "PaintDotnet.exe"),
                ToolCandidate.file(pf64, "irfanview", "i_view64.exe"),
                ToolCandidate.versioned(pf64, "GIMP 2", "bin", pattern="gimp-*.*.*"),
            ),
            ToolKind.IMAGE_VIEWER: (
                ToolCandidate.file(pf64, "irfanview", "i_view64.exe"),
                ToolCandidate.file(pf64, "ImageGlass", "ImageGlass.exe"),
            ),
            ToolKind.GIT_CLIENT: (
                ToolCandidate.file(pf86, "SmartGit", "bin", "SmartGit.exe"),
                ToolCandidate.file(local, "GitHubDesktop", "GitHubDesktop.exe"),
                ToolCandidate.file(local, "SourceTree", "sourcetree.exe"),
                ToolCandidate.versioned(
                    local, "gitkraken", pattern="app-*", executable="gitkraken.exe"
                ),
            ),
            ToolKind.DIFF_TOOL: (
                ToolCandidate.file(pf64, "Beyond Compare 4", "BCompare.exe"),
                ToolCandidate.file(pf86, "Meld", "Meld.exe"),
                ToolCandidate.file(pf64, "KDiff", "KDiff.exe"),
            ),
        }[kind]

    def tool_fallback(self, kind: ToolKind) -> Optional[str]:
        if kind is ToolKind.IMAGE_EDITOR:
            return "mspaint.exe"
        return None

    @property
    def trash(self) -> TrashFacility:
        return self._trash

    def open_with_default_handler(self, target: str, verb: str = "open") -> bool:
        try:
            os.startfile(target, verb)  # type: ignore[attr-defined]
        except OSError as e:
            if verb == "open":
                logger.warning(f"Could not open {target}: {e}")
                return False
            logger.debug(f"Verb '{verb}' failed for {target}, retrying with 'open'")
            return self.open_with_default_handler(target, "open")
        return True

    def reveal_in_file_manager(self, path: Path) -> bool:
        return self._launch("explorer.exe", [f"/select,{path}"])


class MacProfile(PlatformProfile):
    name = "darwin"
    terminal_command = "open"
    terminal_command_args = '-a Terminal "{0}"'

    def __init__(
        self,
        folders: Optional[SpecialFolderResolver] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        super().__init__(
            folders
            or EnvironmentFolderResolver(
                {
                    SpecialFolder.PROGRAM_FILES_64: ("", "/Applications"),
                    SpecialFolder.PROGRAM_FILES_X86: ("", "/Applications"),
                    SpecialFolder.LOCAL_APP_DATA: ("", "~/Applications"),
                }
            ),
            runner,
        )
        self._trash = _FinderTrash(self.runner)

    def tool_candidates(self, kind: ToolKind) -> Tuple[ToolCandidate, ...]:
        apps = SpecialFolder.PROGRAM_FILES_64
        user_apps = SpecialFolder.LOCAL_APP_DATA
        return {
            ToolKind.IMAGE_EDITOR: (
                ToolCandidate.file(
                    apps, "Pixelmator Pro.app", "Contents", "MacOS", "Pixelmator Pro"
                ),
                ToolCandidate.versioned(
                    apps, pattern="GIMP*.app", executable="Contents/MacOS/gimp"
                ),
            ),
            ToolKind.IMAGE_VIEWER: (
                ToolCandidate.file(apps, "Xee³.app", "Contents", "MacOS", "Xee³"),
            ),
            ToolKind.GIT_CLIENT: (
                ToolCandidate.file(apps, "SmartGit.app", "Contents", "MacOS", "SmartGit"),
                ToolCandidate.file(
                    apps, "GitHub Desktop.app", "Contents", "MacOS", "GitHub Desktop"
                ),
                ToolCandidate.file(apps, "Sourcetree.app", "Contents", "MacOS", "Sourcetree"),
                ToolCandidate.file(apps, "GitKraken.app", "Contents", "MacOS", "GitKraken"),
                ToolCandidate.file(
                    user_apps, "GitKraken.app", "Contents", "MacOS", "GitKraken"
                ),
            ),
            ToolKind.DIFF_TOOL: (
                ToolCandidate.file(apps, "Beyond Compare.app", "Contents", "MacOS", "bcomp"),
                ToolCandidate.file(apps, "Meld.app", "Contents", "MacOS", "Meld"),
                ToolCandidate.file(None, "/usr/local/bin/kdiff3"),
            ),
        }[kind]

    def tool_fallback(self, kind: ToolKind) -> Optional[str]:
        if kind is ToolKind.IMAGE_EDITOR:
            return "/System/Applications/Preview.app/Contents/MacOS/Preview"
        return None

    @property
    def trash(self) -> TrashFacility:
        return self._trash

    def open_with_default_handler(self, target: str, verb: str = "open") -> bool:
        return self._launch("open", [target])

    def reveal_in_file_manager(self, path: Path) -> bool:
        return self._launch("open", ["-R", str(path)])


class LinuxProfile(PlatformProfile):
    name = "linux"
    terminal_command = "gnome-terminal"
    terminal_command_args = '--working-directory="{0}"'

    def __init__(
        self,
        folders: Optional[SpecialFolderResolver] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        super().__init__(
            folders
            or EnvironmentFolderResolver(
                {
                    SpecialFolder.PROGRAM_FILES_64: ("", "/usr/bin"),
                    SpecialFolder.PROGRAM_FILES_X86: ("", "/opt"),
                    SpecialFolder.LOCAL_APP_DATA: ("XDG_DATA_HOME", "~/.local/share"),
                }
            ),
            runner,
        )
        self._trash = _CommandTrash(
            self.runner,
            [
                ["gio", "trash", "{path}"],
                ["trash-put", "{path}"],
                ["kioclient5", "move", "{path}", "trash:/"],
            ],
        )

    def tool_candidates(self, kind: ToolKind) -> Tuple[ToolCandidate, ...]:
        bin_dir = SpecialFolder.PROGRAM_FILES_64
        opt = SpecialFolder.PROGRAM_FILES_X86
        home = SpecialFolder.HOME
        return {
            ToolKind.IMAGE_EDITOR: (
                ToolCandidate.file(bin_dir, "gimp"),
                ToolCandidate.file(bin_dir, "krita"),
                ToolCandidate.file(bin_dir, "pinta"),
                ToolCandidate.file(None, "/snap/bin/gimp"),
                ToolCandidate.versioned(home, "Applications", pattern="GIMP-*.AppImage"),
            ),
            ToolKind.IMAGE_VIEWER: (
                ToolCandidate.file(bin_dir, "eog"),
                ToolCandidate.file(bin_dir, "gwenview"),
                ToolCandidate.file(bin_dir, "ristretto"),
            ),
            ToolKind.GIT_CLIENT: (
                ToolCandidate.file(opt, "smartgit", "bin", "smartgit.sh"),
                ToolCandidate.file(bin_dir, "github-desktop"),
                ToolCandidate.file(bin_dir, "gitkraken"),
                ToolCandidate.versioned(
                    opt, pattern="gitkraken*", executable="gitkraken"
                ),
                ToolCandidate.file(bin_dir, "gitg"),
            ),
            ToolKind.DIFF_TOOL: (
                ToolCandidate.file(bin_dir, "bcompare"),
                ToolCandidate.file(bin_dir, "meld"),
                ToolCandidate.file(bin_dir, "kdiff3"),
            ),
        }[kind]

    @property
    def trash(self) -> TrashFacility:
        return self._trash

    def open_with_default_handler(self, target: str, verb: str = "open") -> bool:
        return self._launch("xdg-open", [target])

    def reveal_in_file_manager(self, path: Path) -> bool:
        folder = path if path.is_dir() else path.parent
        return self._launch("xdg-open", [str(folder)])


@lru_cache(maxsize=1)
def get_platform_profile() -> PlatformProfile:
    """Select the profile for the running operating system."""
    system = platform.system().lower()

    match system:
        case "windows":
            profile: PlatformProfile = WindowsProfile()
        case "darwin":
            profile = MacProfile()
        case "linux":
            profile = LinuxProfile()
        case _:
            logger.warning(f"Unknown system '{system}', using Linux defaults")
            profile = LinuxProfile()

    logger.debug(f"Using {profile.name} platform profile")
    return profile
