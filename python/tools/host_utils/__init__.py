"""
Host Integration Utilities

This package connects a desktop document editor to its host system. It is
called from the editor but has no dependency on the editor's UI or document
model.

Features:
- Encoding detection: byte-order-mark sniffing of documents
- Tool discovery: image editors, image viewers, diff tools and git clients
- Process supervision: fire-and-forget, bounded and unbounded waits with
  streamed output capture and sentinel exit codes
- Git workflow: commit a single file and optionally push
- Trash: silent, recoverable deletion through the platform recycle bin
- Shell: open files, folders, terminals and URLs in companion applications

Author:
    Max Qian <lightapt.com>

License:
    GPL-3.0-or-later

Version:
    1.0.0
"""

from .config import (
    GitConfiguration,
    HostConfiguration,
    load_configuration,
    save_configuration,
)
from .encoding import detect_encoding_from_bytes, detect_file_encoding
from .exceptions import (
    ConfigurationError,
    HostUtilsException,
    ProcessLaunchError,
    TrashError,
    WorkingDirectoryError,
)
from .file_utils import (
    fixup_document_filename,
    get_checksum_from_file,
    get_editor_syntax_from_file_type,
    get_image_media_type_from_filename,
    normalize_filename_with_base_path,
)
from .git_workflow import GitWorkflow, commit_file_to_git
from .locator import (
    ToolLocator,
    find_diff_tool,
    find_git_client,
    find_image_editor,
    find_image_viewer,
)
from .logging_config import setup_logging
from .models import (
    PROCESS_LAUNCH_FAILED,
    PROCESS_TIMED_OUT,
    FileEncoding,
    Found,
    GitCommitRequest,
    GitCommitResult,
    NotFound,
    NoWait,
    ProcessResult,
    ProcessSpec,
    ProcessStatus,
    ToolKind,
    ToolPath,
    WaitIndefinitely,
    WaitPolicy,
    WaitUpTo,
    WindowStyle,
)
from .platforms import PlatformProfile, get_platform_profile
from .process import ProcessRunner, execute_process, run_process
from .shell import ShellLauncher
from .trash import move_to_trash
from .utils import change_directory

__version__ = "1.0.0"
__author__ = "Max Qian"
__license__ = "GPL-3.0-or-later"

__all__ = [
    # Configuration
    "GitConfiguration",
    "HostConfiguration",
    "load_configuration",
    "save_configuration",
    "setup_logging",
    # Encoding and files
    "FileEncoding",
    "detect_encoding_from_bytes",
    "detect_file_encoding",
    "fixup_document_filename",
    "normalize_filename_with_base_path",
    "get_checksum_from_file",
    "get_editor_syntax_from_file_type",
    "get_image_media_type_from_filename",
    # Tool discovery
    "ToolKind",
    "ToolPath",
    "Found",
    "NotFound",
    "ToolLocator",
    "find_image_editor",
    "find_image_viewer",
    "find_git_client",
    "find_diff_tool",
    # Processes
    "PROCESS_TIMED_OUT",
    "PROCESS_LAUNCH_FAILED",
    "NoWait",
    "WaitUpTo",
    "WaitIndefinitely",
    "WaitPolicy",
    "WindowStyle",
    "ProcessSpec",
    "ProcessResult",
    "ProcessStatus",
    "ProcessRunner",
    "run_process",
    "execute_process",
    # Git
    "GitCommitRequest",
    "GitCommitResult",
    "GitWorkflow",
    "commit_file_to_git",
    "change_directory",
    # Platform
    "PlatformProfile",
    "get_platform_profile",
    "ShellLauncher",
    "move_to_trash",
    # Errors
    "HostUtilsException",
    "ProcessLaunchError",
    "WorkingDirectoryError",
    "ConfigurationError",
    "TrashError",
    "get_tool_info",
]


def get_tool_info() -> dict:
    """
    Return metadata about this tool for discovery.

    Returns:
        dict: Tool name, version, capabilities and requirements.
    """
    return {
        "name": "host_utils",
        "version": __version__,
        "description": "Host integration utilities for a desktop document editor",
        "author": __author__,
        "license": __license__,
        "supported": True,
        "platform": ["windows", "linux", "macos"],
        "capabilities": [
            "encoding_detection",
            "tool_discovery",
            "process_supervision",
            "git_commit_push",
            "trash_deletion",
            "shell_launch",
        ],
        "requirements": ["loguru", "pydantic"],
    }
