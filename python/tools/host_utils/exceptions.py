#!/usr/bin/env python3
"""
Exception types for host integration operations.
Provides structured error handling with context and debugging information.

Public operations of this package convert these into result values at their
boundary; they are raised internally so the failure carries its context up
to the place where it is logged and turned into a user-facing message.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Context information for debugging host integration errors."""

    timestamp: float = field(default_factory=time.time)
    working_directory: Optional[Path] = None
    target_path: Optional[Path] = None
    command: List[str] = field(default_factory=list)
    additional_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "timestamp": self.timestamp,
            "working_directory": (
                str(self.working_directory) if self.working_directory else None
            ),
            "target_path": str(self.target_path) if self.target_path else None,
            "command": self.command,
            "additional_data": self.additional_data,
        }


class HostUtilsException(Exception):
    """
    Base exception for all host integration errors with enhanced context.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None,
        **extra_context: Any,
    ):
        super().__init__(message)
        self.error_code = error_code or self.__class__.__name__.upper()
        self.context = context or ErrorContext()
        self.original_error = original_error
        self.extra_context = extra_context

        if extra_context:
            self.context.additional_data.update(extra_context)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to structured dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "message": str(self),
            "error_code": self.error_code,
            "context": self.context.to_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
            "extra_context": self.extra_context,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={str(self)!r}, error_code={self.error_code!r})"


class ProcessLaunchError(HostUtilsException):
    """Raised when a child process cannot be started or waited on."""

    def __init__(
        self,
        command: List[str],
        reason: str,
        *,
        working_directory: Optional[Path] = None,
        **kwargs: Any,
    ):
        self.command = command
        self.reason = reason

        command_str = " ".join(command)
        super().__init__(
            f"Failed to launch process: {command_str}: {reason}",
            error_code="PROCESS_LAUNCH_FAILED",
            context=create_error_context(
                command=command, working_directory=working_directory
            ),
            **kwargs,
        )


class WorkingDirectoryError(HostUtilsException):
    """Raised when the current directory cannot be switched."""

    def __init__(
        self,
        message: str,
        target_directory: Optional[Path] = None,
        original_directory: Optional[Path] = None,
        **kwargs: Any,
    ):
        self.target_directory = target_directory
        self.original_directory = original_directory

        super().__init__(
            message,
            error_code="WORKING_DIRECTORY_ERROR",
            context=create_error_context(
                target_path=target_directory, working_directory=original_directory
            ),
            **kwargs,
        )


class ConfigurationError(HostUtilsException):
    """Raised when the host configuration cannot be loaded or saved."""

    def __init__(
        self, message: str, config_path: Optional[Path] = None, **kwargs: Any
    ):
        self.config_path = config_path

        super().__init__(
            message,
            error_code=kwargs.pop("error_code", "CONFIGURATION_ERROR"),
            context=create_error_context(target_path=config_path),
            **kwargs,
        )


class TrashError(HostUtilsException):
    """Raised by a trash facility when the OS refuses to move an entry."""

    def __init__(
        self,
        message: str,
        target_path: Optional[Path] = None,
        status: Optional[int] = None,
        **kwargs: Any,
    ):
        self.target_path = target_path
        self.status = status

        super().__init__(
            message,
            error_code="TRASH_ERROR",
            context=create_error_context(target_path=target_path),
            status=status,
            **kwargs,
        )


def create_error_context(
    target_path: Optional[Path] = None,
    command: Optional[List[str]] = None,
    working_directory: Optional[Path] = None,
    **extra: Any,
) -> ErrorContext:
    """
    Create an error context.

    The working directory defaults to the current one when not given.
    """
    cwd: Optional[Path] = Path(working_directory) if working_directory else None
    if cwd is None:
        try:
            cwd = Path(os.getcwd())
        except OSError:
            cwd = None

    return ErrorContext(
        working_directory=cwd,
        target_path=target_path,
        command=command or [],
        additional_data=extra,
    )


__all__ = [
    "ErrorContext",
    "create_error_context",
    "HostUtilsException",
    "ProcessLaunchError",
    "WorkingDirectoryError",
    "ConfigurationError",
    "TrashError",
]
