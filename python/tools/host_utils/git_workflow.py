#!/usr/bin/env python3
"""
Single-file git commit workflow.

Commits exactly one file with an auto-generated message and optionally
pushes afterwards. Every outcome is a :class:`GitCommitResult` whose message
can be shown to the user as-is.

Note: a push may publish more than the file just committed if earlier local
commits have not been pushed yet.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Union

from loguru import logger

from .config import GitConfiguration
from .models import (
    GitCommitRequest,
    GitCommitResult,
    ProcessResult,
    ProcessSpec,
    WaitPolicy,
)
from .process import ProcessRunner
from .utils import change_directory, ensure_path

SaveDocument = Callable[[], bool]


def _no_active_document() -> bool:
    return True


class GitWorkflow:
    """
    Commits a single file to git and optionally pushes to the remote.

    The working directory is process-wide state: run one workflow at a time.
    """

    def __init__(
        self,
        save_document: Optional[SaveDocument] = None,
        config: Optional[GitConfiguration] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        """
        Initialize the workflow.

        Args:
            save_document: Saves the editor's active document, returning
                False on failure. Defaults to a no-op that succeeds.
            config: Git executable, remote and timeout settings.
            runner: Process runner used for git invocations.
        """
        self.save_document = save_document or _no_active_document
        self.config = config or GitConfiguration()
        self.runner = runner or ProcessRunner()

    def _run_git(self, arguments: List[str], folder: Path) -> ProcessResult:
        return self.runner.run(
            ProcessSpec(
                executable=self.config.git_executable,
                arguments=arguments,
                working_directory=folder,
                wait=WaitPolicy.up_to(self.config.timeout_ms),
                capture_output=True,
            )
        )

    def commit_file(
        self, path: Union[str, Path], push: bool = False
    ) -> GitCommitResult:
        """
        Commit a single file and optionally push.

        Args:
            path: File to commit.
            push: If True, pushes to the configured remote after committing.

        Returns:
            GitCommitResult: Success with an empty message, or failure with a
            user-facing message.

        Example:
            >>> success, message = GitWorkflow().commit_file("README.md", push=True)
            >>> if not success:
            ...     print(message)
        """
        try:
            return self._commit_file(path, push)
        except Exception as e:
            logger.exception(f"Git commit of {path} failed: {e}")
            return GitCommitResult.failed(f"An error occurred committing to Git: {e}")

    def commit(self, request: GitCommitRequest) -> GitCommitResult:
        return self.commit_file(request.path, request.push)

    def _commit_file(self, path: Union[str, Path], push: bool) -> GitCommitResult:
        if not self.save_document():
            return GitCommitResult.failed("Couldn't save file.")

        file = ensure_path(path)
        name = file.name
        if not file.is_file():
            return GitCommitResult.failed(f"File {name} doesn't exist.")

        folder = file.parent
        if not folder.is_dir():
            return GitCommitResult.failed(f"File {file} doesn't exist.")

        with change_directory(folder):
            logger.info(f"Committing {file}")
            result = self._run_git(
                ["commit", "--only", str(file), "-m", f"Updating {name}."], folder
            )
            if result.exit_code != 0:
                logger.info(f"Nothing committed for {name} (exit code {result.exit_code})")
                return GitCommitResult.failed(
                    f"There are no changes to commit for {name}."
                )

            if push:
                push_result = self._run_git(["push", self.config.remote], folder)
                # Push failures are not reported to the caller.
                if push_result.exit_code != 0:
                    logger.warning(
                        f"git push {self.config.remote} failed with exit code "
                        f"{push_result.exit_code}: {push_result.output}"
                    )
                else:
                    logger.info(f"Pushed to {self.config.remote}")

        logger.success(f"Committed {name}")
        return GitCommitResult.ok()


def commit_file_to_git(
    path: Union[str, Path],
    push: bool = False,
    save_document: Optional[SaveDocument] = None,
    config: Optional[GitConfiguration] = None,
) -> GitCommitResult:
    """Commit a single file with a default :class:`GitWorkflow`."""
    return GitWorkflow(save_document=save_document, config=config).commit_file(path, push)
