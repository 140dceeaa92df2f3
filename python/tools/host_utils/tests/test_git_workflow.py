#!/usr/bin/env python3
"""
Tests for the single-file git commit workflow.
"""

import os
import shutil
import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from host_utils.config import GitConfiguration
from host_utils.git_workflow import GitWorkflow, commit_file_to_git
from host_utils.models import (
    PROCESS_TIMED_OUT,
    GitCommitRequest,
    GitCommitResult,
    ProcessResult,
    ProcessStatus,
    WaitUpTo,
)


def exited(code: int) -> ProcessResult:
    return ProcessResult(exit_code=code, status=ProcessStatus.EXITED)


@pytest.fixture
def document(tmp_path: Path) -> Path:
    path = tmp_path / "repo" / "README.md"
    path.parent.mkdir()
    path.write_text("# Readme\n", encoding="utf-8")
    return path


@pytest.fixture
def runner() -> MagicMock:
    mock = MagicMock()
    mock.run.return_value = exited(0)
    return mock


def test_commit_success(document: Path, runner: MagicMock):
    workflow = GitWorkflow(runner=runner)

    result = workflow.commit_file(document)

    assert result == GitCommitResult(True, "")
    spec = runner.run.call_args.args[0]
    assert spec.executable == "git"
    assert spec.arguments == [
        "commit",
        "--only",
        str(document),
        "-m",
        "Updating README.md.",
    ]
    assert spec.working_directory == document.parent
    assert spec.wait == WaitUpTo(10000)


def test_result_unpacks_to_success_and_message(document: Path, runner: MagicMock):
    success, message = GitWorkflow(runner=runner).commit_file(document)

    assert success is True
    assert message == ""


def test_missing_file_does_not_run_git(tmp_path: Path, runner: MagicMock):
    result = GitWorkflow(runner=runner).commit_file(tmp_path / "missing.md")

    assert result == GitCommitResult(False, "File missing.md doesn't exist.")
    runner.run.assert_not_called()


def test_save_failure_short_circuits(document: Path, runner: MagicMock):
    result = GitWorkflow(save_document=lambda: False, runner=runner).commit_file(document)

    assert result == GitCommitResult(False, "Couldn't save file.")
    runner.run.assert_not_called()


def test_save_runs_before_existence_check(tmp_path: Path, runner: MagicMock):
    calls = []

    def save() -> bool:
        calls.append("save")
        return False

    result = GitWorkflow(save_document=save, runner=runner).commit_file(
        tmp_path / "missing.md"
    )

    assert calls == ["save"]
    assert result.message == "Couldn't save file."


@pytest.mark.parametrize("exit_code", [1, PROCESS_TIMED_OUT, -1])
def test_commit_failure_reports_nothing_to_commit(
    document: Path, runner: MagicMock, exit_code: int
):
    runner.run.return_value = exited(exit_code)

    result = GitWorkflow(runner=runner).commit_file(document, push=True)

    assert result == GitCommitResult(
        False, "There are no changes to commit for README.md."
    )
    # No push after a failed commit.
    assert runner.run.call_count == 1


def test_push_failure_is_not_reported(document: Path, runner: MagicMock):
    runner.run.side_effect = [exited(0), exited(128)]

    result = GitWorkflow(runner=runner).commit_file(document, push=True)

    assert result == GitCommitResult(True, "")
    push_spec = runner.run.call_args_list[1].args[0]
    assert push_spec.arguments == ["push", "origin"]
    assert push_spec.wait == WaitUpTo(10000)


def test_push_uses_configured_remote_and_git(document: Path, runner: MagicMock):
    config = GitConfiguration(git_executable="/opt/git/bin/git", remote="upstream", timeout_ms=2500)

    GitWorkflow(config=config, runner=runner).commit_file(document, push=True)

    specs = [call.args[0] for call in runner.run.call_args_list]
    assert [spec.executable for spec in specs] == ["/opt/git/bin/git"] * 2
    assert specs[1].arguments == ["push", "upstream"]
    assert specs[1].wait == WaitUpTo(2500)


def test_working_directory_restored_after_exception(document: Path, runner: MagicMock):
    original = os.getcwd()
    seen = []

    def explode(spec):
        seen.append(os.getcwd())
        raise RuntimeError("git exploded")

    runner.run.side_effect = explode

    result = GitWorkflow(runner=runner).commit_file(document)

    assert os.getcwd() == original
    assert Path(seen[0]).resolve() == document.parent.resolve()
    assert result == GitCommitResult(
        False, "An error occurred committing to Git: git exploded"
    )


def test_working_directory_restored_after_success(document: Path, runner: MagicMock):
    original = os.getcwd()

    GitWorkflow(runner=runner).commit_file(document, push=True)

    assert os.getcwd() == original


def test_save_exception_is_reported(document: Path, runner: MagicMock):
    def save() -> bool:
        raise OSError("disk full")

    result = GitWorkflow(save_document=save, runner=runner).commit_file(document)

    assert not result
    assert result.message == "An error occurred committing to Git: disk full"


def test_commit_request(document: Path, runner: MagicMock):
    runner.run.side_effect = [exited(0), exited(0)]

    result = GitWorkflow(runner=runner).commit(GitCommitRequest(document, push=True))

    assert result.success
    assert runner.run.call_count == 2


def test_commit_result_invariant():
    with pytest.raises(ValueError):
        GitCommitResult(True, "unexpected")
    with pytest.raises(ValueError):
        GitCommitResult(False, "")


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestRealRepository:
    """Runs the workflow against a throwaway repository."""

    @pytest.fixture
    def repo(self, tmp_path: Path) -> Path:
        repo = tmp_path / "repo"
        repo.mkdir()

        def git(*args: str) -> None:
            subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True)

        git("init")
        git("config", "user.email", "tests@example.com")
        git("config", "user.name", "Tests")
        git("config", "commit.gpgsign", "false")
        (repo / "notes.md").write_text("one\n", encoding="utf-8")
        (repo / "other.md").write_text("one\n", encoding="utf-8")
        git("add", ".")
        git("commit", "-m", "initial")
        return repo

    def test_commits_only_the_given_file(self, repo: Path):
        (repo / "notes.md").write_text("two\n", encoding="utf-8")
        (repo / "other.md").write_text("two\n", encoding="utf-8")

        result = commit_file_to_git(repo / "notes.md")

        assert result == GitCommitResult(True, "")
        log = subprocess.run(
            ["git", "log", "-1", "--name-only", "--pretty=format:%s"],
            cwd=repo,
            check=True,
            capture_output=True,
            text=True,
        ).stdout.splitlines()
        assert log == ["Updating notes.md.", "notes.md"]

    def test_unmodified_file_has_nothing_to_commit(self, repo: Path):
        result = commit_file_to_git(repo / "notes.md")

        assert result == GitCommitResult(
            False, "There are no changes to commit for notes.md."
        )

    def test_push_without_remote_still_succeeds(self, repo: Path):
        (repo / "notes.md").write_text("three\n", encoding="utf-8")

        result = commit_file_to_git(repo / "notes.md", push=True)

        assert result == GitCommitResult(True, "")
