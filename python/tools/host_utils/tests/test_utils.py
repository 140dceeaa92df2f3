#!/usr/bin/env python3
"""
Tests for the working-directory guard and exception context.
"""

from pathlib import Path

import pytest

from host_utils.exceptions import (
    ProcessLaunchError,
    WorkingDirectoryError,
    create_error_context,
)
from host_utils.utils import change_directory, ensure_path


def test_change_directory_restores_on_success(tmp_path: Path):
    original = Path.cwd()

    with change_directory(tmp_path) as current:
        assert Path.cwd().resolve() == tmp_path.resolve()
        assert current == tmp_path

    assert Path.cwd() == original


def test_change_directory_restores_on_exception(tmp_path: Path):
    original = Path.cwd()

    with pytest.raises(KeyError):
        with change_directory(tmp_path):
            raise KeyError("boom")

    assert Path.cwd() == original


def test_change_directory_none_stays_put():
    original = Path.cwd()

    with change_directory(None) as current:
        assert current == original

    assert Path.cwd() == original


def test_change_directory_missing_folder(tmp_path: Path):
    original = Path.cwd()

    with pytest.raises(WorkingDirectoryError) as exc_info:
        with change_directory(tmp_path / "missing"):
            pass

    assert Path.cwd() == original
    assert exc_info.value.target_directory == tmp_path / "missing"
    assert exc_info.value.original_directory == original


def test_ensure_path():
    assert ensure_path(None) is None
    assert ensure_path("a/b").is_absolute()


def test_process_launch_error_to_dict(tmp_path: Path):
    error = ProcessLaunchError(["git", "status"], "not found", working_directory=tmp_path)

    data = error.to_dict()

    assert data["error_code"] == "PROCESS_LAUNCH_FAILED"
    assert data["context"]["command"] == ["git", "status"]
    assert data["context"]["working_directory"] == str(tmp_path)
    assert "git status" in data["message"]


def test_process_launch_error_defaults_to_current_directory():
    error = ProcessLaunchError(["git"], "not found")

    assert error.context.working_directory == Path.cwd()


def test_create_error_context(tmp_path: Path):
    context = create_error_context(
        target_path=tmp_path / "a.md", command=["git", "push"], remote="origin"
    )

    assert context.working_directory == Path.cwd()
    assert context.target_path == tmp_path / "a.md"
    assert context.command == ["git", "push"]
    assert context.additional_data == {"remote": "origin"}


def test_working_directory_error_context(tmp_path: Path):
    error = WorkingDirectoryError(
        "cannot enter", target_directory=tmp_path / "x", original_directory=tmp_path
    )

    assert error.context.working_directory == tmp_path
    assert error.context.target_path == tmp_path / "x"
