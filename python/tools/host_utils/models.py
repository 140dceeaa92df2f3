#!/usr/bin/env python3
"""
Data models for host integration utilities.
Contains enum classes, dataclasses and sentinel constants shared by the
encoding detector, tool locator, process runner and git workflow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, StrEnum
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

# Exit code returned when a bounded wait expires (Win32 ERROR_TIMEOUT).
PROCESS_TIMED_OUT = 1460
# Exit code returned when the process could not be launched or waited on.
PROCESS_LAUNCH_FAILED = -1

OutputSink = Callable[[str, str], None]


class FileEncoding(Enum):
    """
    Text encodings recognized from a file's leading bytes.

    ``codec`` is the Python codec used to read the file and ``has_bom`` tells
    whether a byte-order mark should be written back when the file is saved.
    """

    UTF8_BOM = "utf-8-bom"
    UTF8 = "utf-8"
    UTF16_LE = "utf-16-le"
    UTF16_BE = "utf-16-be"
    UTF7 = "utf-7"
    DEFAULT = "default"

    @property
    def codec(self) -> str:
        return _CODECS[self]

    @property
    def has_bom(self) -> bool:
        return self in (
            FileEncoding.UTF8_BOM,
            FileEncoding.UTF16_LE,
            FileEncoding.UTF16_BE,
        )


_CODECS = {
    FileEncoding.UTF8_BOM: "utf-8-sig",
    FileEncoding.UTF8: "utf-8",
    FileEncoding.UTF16_LE: "utf-16-le",
    FileEncoding.UTF16_BE: "utf-16-be",
    FileEncoding.UTF7: "utf-7",
    FileEncoding.DEFAULT: "utf-8",
}


class ToolKind(StrEnum):
    """Companion tools the editor can hand files off to."""

    IMAGE_EDITOR = "image_editor"
    IMAGE_VIEWER = "image_viewer"
    DIFF_TOOL = "diff_tool"
    GIT_CLIENT = "git_client"


@dataclass(frozen=True)
class Found:
    """A companion tool was located."""

    path: str
    is_fallback: bool = False

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class NotFound:
    """No companion tool was located; callers use the OS default handler."""

    kind: ToolKind

    def __bool__(self) -> bool:
        return False


ToolPath = Union[Found, NotFound]


class WindowStyle(Enum):
    """Window visibility hint for launched processes (Win32 SW_* values)."""

    HIDDEN = 0
    NORMAL = 1
    MINIMIZED = 2
    MAXIMIZED = 3


@dataclass(frozen=True)
class NoWait:
    """Launch and return immediately (fire-and-forget)."""


@dataclass(frozen=True)
class WaitUpTo:
    """Wait at most ``timeout_ms`` milliseconds for the process to exit."""

    timeout_ms: int

    def __post_init__(self) -> None:
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {self.timeout_ms}")

    @property
    def seconds(self) -> float:
        return self.timeout_ms / 1000.0


@dataclass(frozen=True)
class WaitIndefinitely:
    """Block until the process exits."""


class WaitPolicy:
    """Factory helpers for the three wait variants."""

    NO_WAIT = NoWait()
    INDEFINITELY = WaitIndefinitely()

    @staticmethod
    def up_to(timeout_ms: int) -> WaitUpTo:
        return WaitUpTo(timeout_ms)

    @staticmethod
    def from_timeout_ms(timeout_ms: int) -> "AnyWaitPolicy":
        """
        Translate a signed millisecond timeout into a wait policy.

        ``0`` means fire-and-forget, a negative value waits indefinitely and a
        positive value is a bounded wait.
        """
        if timeout_ms == 0:
            return WaitPolicy.NO_WAIT
        if timeout_ms < 0:
            return WaitPolicy.INDEFINITELY
        return WaitUpTo(timeout_ms)


AnyWaitPolicy = Union[NoWait, WaitUpTo, WaitIndefinitely]


class ProcessStatus(Enum):
    """How a process run ended."""

    EXITED = "exited"
    DETACHED = "detached"
    TIMED_OUT = "timed_out"
    LAUNCH_FAILED = "launch_failed"


@dataclass
class ProcessSpec:
    """
    Inputs to a process launch.

    ``arguments`` may be a single command-line string or a sequence of
    already-split arguments.
    """

    executable: Union[str, Path]
    arguments: Union[str, Sequence[str], None] = None
    working_directory: Optional[Union[str, Path]] = None
    wait: AnyWaitPolicy = field(default_factory=NoWait)
    capture_output: bool = False
    window_style: WindowStyle = WindowStyle.HIDDEN
    output_sink: Optional[OutputSink] = None


@dataclass
class ProcessResult:
    """
    Result of a process launch.

    ``exit_code`` is the real exit code for ``EXITED``, ``0`` for
    ``DETACHED``, ``PROCESS_TIMED_OUT`` for ``TIMED_OUT`` and
    ``PROCESS_LAUNCH_FAILED`` for ``LAUNCH_FAILED``.
    """

    exit_code: int
    status: ProcessStatus = ProcessStatus.EXITED
    stdout_lines: List[str] = field(default_factory=list)
    stderr_lines: List[str] = field(default_factory=list)
    command: List[str] = field(default_factory=list)
    error: str = ""
    duration: float = 0.0

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def timed_out(self) -> bool:
        return self.status is ProcessStatus.TIMED_OUT

    @property
    def launch_failed(self) -> bool:
        return self.status is ProcessStatus.LAUNCH_FAILED

    @property
    def output(self) -> str:
        """Get combined output (stdout + stderr)."""
        return "\n".join(self.stdout_lines + self.stderr_lines).strip()

    def __bool__(self) -> bool:
        return self.success


@dataclass(frozen=True)
class GitCommitRequest:
    """A request to commit a single file and optionally push it."""

    path: Union[str, Path]
    push: bool = False


@dataclass(frozen=True)
class GitCommitResult:
    """Outcome of a single-file commit; ``message`` is empty only on success."""

    success: bool
    message: str = ""

    def __post_init__(self) -> None:
        if self.success and self.message:
            raise ValueError("A successful commit result carries no message")
        if not self.success and not self.message:
            raise ValueError("A failed commit result requires a message")

    @classmethod
    def ok(cls) -> "GitCommitResult":
        return cls(True, "")

    @classmethod
    def failed(cls, message: str) -> "GitCommitResult":
        return cls(False, message)

    def __bool__(self) -> bool:
        return self.success

    def __iter__(self):
        yield self.success
        yield self.message
