#!/usr/bin/env python3
"""
Process launching and supervision.

Launches a child process, optionally streams its output line by line to a
sink, and waits according to an explicit wait policy. Launch and wait
failures never propagate: they come back as the ``PROCESS_LAUNCH_FAILED``
sentinel so callers can branch on the exit code alone.
"""

from __future__ import annotations

import os
import platform
import shlex
import subprocess
import threading
import time
from typing import IO, Any, Dict, List, Optional, Sequence, Union

from loguru import logger

from .exceptions import ProcessLaunchError
from .models import (
    PROCESS_LAUNCH_FAILED,
    PROCESS_TIMED_OUT,
    NoWait,
    OutputSink,
    ProcessResult,
    ProcessSpec,
    ProcessStatus,
    WaitPolicy,
    WaitUpTo,
    WindowStyle,
)

_IS_WINDOWS = platform.system() == "Windows"

# Grace period for reader threads to drain pipes after the child exited.
READER_JOIN_TIMEOUT = 5.0


def log_output_line(line: str, stream: str) -> None:
    """Default output sink: forward child output to the debug log."""
    logger.debug(f"[{stream}] {line}")


def split_arguments(arguments: Union[str, Sequence[str], None]) -> List[str]:
    """
    Split an argument string the way the platform shell would.

    Args:
        arguments: A command-line string, an argument sequence, or None.

    Returns:
        List[str]: The individual arguments.
    """
    if arguments is None:
        return []
    if isinstance(arguments, str):
        return shlex.split(arguments, posix=not _IS_WINDOWS)
    return [str(arg) for arg in arguments]


def _build_command(spec: ProcessSpec) -> Union[str, List[str]]:
    executable = os.fspath(spec.executable)
    # Windows takes a raw command line, which keeps caller quoting intact.
    if _IS_WINDOWS and isinstance(spec.arguments, str):
        return f"{subprocess.list2cmdline([executable])} {spec.arguments}".strip()

    try:
        arguments = split_arguments(spec.arguments)
    except ValueError as e:
        raise ProcessLaunchError(
            [executable],
            f"Invalid arguments {spec.arguments!r}: {e}",
            working_directory=spec.working_directory,
            original_error=e,
        ) from e
    return [executable, *arguments]


def _window_options(style: WindowStyle) -> Dict[str, Any]:
    if not _IS_WINDOWS:
        return {}

    startupinfo = subprocess.STARTUPINFO()
    startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW
    startupinfo.wShowWindow = style.value
    options: Dict[str, Any] = {"startupinfo": startupinfo}
    if style is WindowStyle.HIDDEN:
        options["creationflags"] = subprocess.CREATE_NO_WINDOW
    return options


class _StreamReader(threading.Thread):
    """Forwards each line of a child's pipe to a sink as it arrives."""

    def __init__(self, stream: IO[str], name: str, sink: OutputSink):
        super().__init__(name=f"process-{name}-reader", daemon=True)
        self.stream = stream
        self.stream_name = name
        self.sink = sink
        self.lines: List[str] = []

    def run(self) -> None:
        try:
            for raw_line in self.stream:
                line = raw_line.rstrip("\r\n")
                self.lines.append(line)
                try:
                    self.sink(line, self.stream_name)
                except Exception as e:
                    logger.exception(f"Output sink failed on {self.stream_name}: {e}")
        except (OSError, ValueError) as e:
            logger.debug(f"Stopped reading {self.stream_name}: {e}")
        finally:
            self.stream.close()


class ProcessRunner:
    """
    Launches external processes and reports a structured result.

    Each call owns its process handle and pipes; nothing is shared between
    calls, so one runner may be used from several threads.
    """

    def __init__(self, default_sink: Optional[OutputSink] = None):
        """
        Initialize the runner.

        Args:
            default_sink: Sink used when a spec captures output without
                providing its own. Defaults to debug logging.
        """
        self.default_sink = default_sink or log_output_line

    def run(self, spec: ProcessSpec) -> ProcessResult:
        """
        Launch the process described by ``spec`` and wait per its policy.

        Args:
            spec: Executable, arguments, working directory and wait policy.

        Returns:
            ProcessResult: Real exit code, or one of the sentinels for a
            detached, timed-out or failed launch.
        """
        start_time = time.monotonic()
        parts = [str(spec.executable)]
        try:
            command = _build_command(spec)
            parts = command if isinstance(command, list) else [command]
            logger.debug(
                f"Running process: {' '.join(parts)} in "
                f"{spec.working_directory or 'current directory'}"
            )
            return self._run(spec, command, parts, start_time)
        except ProcessLaunchError as e:
            logger.error(str(e))
            error = e.reason
        except Exception as e:
            logger.exception(f"Error executing process {spec.executable}: {e}")
            error = str(e)

        return ProcessResult(
            exit_code=PROCESS_LAUNCH_FAILED,
            status=ProcessStatus.LAUNCH_FAILED,
            command=parts,
            error=error,
            duration=time.monotonic() - start_time,
        )

    def _run(
        self,
        spec: ProcessSpec,
        command: Union[str, List[str]],
        parts: List[str],
        start_time: float,
    ) -> ProcessResult:
        detached = isinstance(spec.wait, NoWait)
        capture = spec.capture_output and not detached
        if spec.capture_output and detached:
            logger.debug("Output capture is ignored for fire-and-forget launches")

        try:
            process = subprocess.Popen(
                command,
                cwd=os.fspath(spec.working_directory) if spec.working_directory else None,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE if capture else subprocess.DEVNULL,
                stderr=subprocess.PIPE if capture else subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1 if capture else -1,
                start_new_session=detached,
                **_window_options(spec.window_style),
            )
        except (OSError, ValueError) as e:
            raise ProcessLaunchError(
                parts, str(e), working_directory=spec.working_directory, original_error=e
            ) from e

        if detached:
            logger.debug(f"Launched {spec.executable} (pid {process.pid}) without waiting")
            return ProcessResult(
                exit_code=0,
                status=ProcessStatus.DETACHED,
                command=parts,
                duration=time.monotonic() - start_time,
            )

        readers: List[_StreamReader] = []
        if capture:
            sink = spec.output_sink or self.default_sink
            readers = [
                _StreamReader(process.stdout, "stdout", sink),
                _StreamReader(process.stderr, "stderr", sink),
            ]
            for reader in readers:
                reader.start()

        try:
            if isinstance(spec.wait, WaitUpTo):
                exit_code = process.wait(timeout=spec.wait.seconds)
            else:
                exit_code = process.wait()
        except subprocess.TimeoutExpired:
            # The child keeps running; its readers close the pipes at EOF.
            logger.warning(
                f"Process timed out after {spec.wait.timeout_ms} ms: {spec.executable}"
            )
            return ProcessResult(
                exit_code=PROCESS_TIMED_OUT,
                status=ProcessStatus.TIMED_OUT,
                stdout_lines=list(readers[0].lines) if readers else [],
                stderr_lines=list(readers[1].lines) if readers else [],
                command=parts,
                duration=time.monotonic() - start_time,
            )

        for reader in readers:
            reader.join(READER_JOIN_TIMEOUT)

        logger.debug(f"Process {spec.executable} exited with code {exit_code}")
        return ProcessResult(
            exit_code=exit_code,
            status=ProcessStatus.EXITED,
            stdout_lines=list(readers[0].lines) if readers else [],
            stderr_lines=list(readers[1].lines) if readers else [],
            command=parts,
            duration=time.monotonic() - start_time,
        )


def run_process(spec: ProcessSpec) -> ProcessResult:
    """Run a process with a default :class:`ProcessRunner`."""
    return ProcessRunner().run(spec)


def execute_process(
    executable: str,
    arguments: Union[str, Sequence[str], None] = None,
    timeout_ms: int = 0,
    window_style: WindowStyle = WindowStyle.HIDDEN,
) -> int:
    """
    Execute a process and return only its exit code.

    Args:
        executable: Executable to run.
        arguments: Command-line arguments.
        timeout_ms: ``0`` to not wait, negative to wait forever, positive to
            wait at most that many milliseconds.
        window_style: Window visibility hint.

    Returns:
        int: Exit code, ``PROCESS_TIMED_OUT`` or ``PROCESS_LAUNCH_FAILED``.
    """
    spec = ProcessSpec(
        executable=executable,
        arguments=arguments,
        wait=WaitPolicy.from_timeout_ms(timeout_ms),
        capture_output=True,
        window_style=window_style,
    )
    return run_process(spec).exit_code


__all__ = [
    "ProcessRunner",
    "run_process",
    "execute_process",
    "split_arguments",
    "log_output_line",
]
