#!/usr/bin/env python3
"""
Tests for companion tool discovery.
"""

import os
from pathlib import Path

import pytest

from host_utils.config import GitConfiguration, HostConfiguration
from host_utils.locator import ToolLocator, newest_match
from host_utils.models import Found, NotFound, ToolKind
from host_utils.platforms import SpecialFolder, ToolCandidate


def touch(path: Path, mtime=None) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def test_first_existing_candidate_wins(fake_profile, program_files):
    fake_profile.candidates[ToolKind.IMAGE_EDITOR] = (
        ToolCandidate.file(SpecialFolder.PROGRAM_FILES_64, "Snagit", "SnagItEditor.exe"),
        ToolCandidate.file(SpecialFolder.PROGRAM_FILES_64, "paint.net", "PaintDotnet.exe"),
        ToolCandidate.file(SpecialFolder.PROGRAM_FILES_64, "irfanview", "i_view64.exe"),
    )
    paint = touch(program_files / "paint.net" / "PaintDotnet.exe")
    touch(program_files / "irfanview" / "i_view64.exe")

    result = ToolLocator(fake_profile).find_image_editor()

    assert result == Found(str(paint))
    assert not result.is_fallback


def test_fallback_when_nothing_installed(fake_profile):
    fake_profile.candidates[ToolKind.IMAGE_EDITOR] = (
        ToolCandidate.file(SpecialFolder.PROGRAM_FILES_64, "paint.net", "PaintDotnet.exe"),
    )
    fake_profile.fallbacks[ToolKind.IMAGE_EDITOR] = "mspaint.exe"

    result = ToolLocator(fake_profile).find_image_editor()

    assert result == Found("mspaint.exe", is_fallback=True)


def test_not_found_without_fallback(fake_profile):
    fake_profile.candidates[ToolKind.DIFF_TOOL] = (
        ToolCandidate.file(SpecialFolder.PROGRAM_FILES_64, "Meld", "Meld.exe"),
    )

    result = ToolLocator(fake_profile).find_diff_tool()

    assert result == NotFound(ToolKind.DIFF_TOOL)
    assert not result


def test_unresolvable_root_is_skipped(fake_profile, program_files):
    fake_profile.candidates[ToolKind.DIFF_TOOL] = (
        ToolCandidate.file(SpecialFolder.PROGRAM_FILES_X86, "Meld", "Meld.exe"),
        ToolCandidate.file(SpecialFolder.PROGRAM_FILES_64, "KDiff", "KDiff.exe"),
    )
    kdiff = touch(program_files / "KDiff" / "KDiff.exe")

    assert ToolLocator(fake_profile).find_diff_tool() == Found(str(kdiff))


def test_directory_does_not_satisfy_file_candidate(fake_profile, program_files):
    fake_profile.candidates[ToolKind.IMAGE_VIEWER] = (
        ToolCandidate.file(SpecialFolder.PROGRAM_FILES_64, "irfanview", "i_view64.exe"),
    )
    (program_files / "irfanview" / "i_view64.exe").mkdir(parents=True)

    assert isinstance(ToolLocator(fake_profile).find_image_viewer(), NotFound)


def test_absolute_candidate(fake_profile, tmp_path):
    tool = touch(tmp_path / "bin" / "kdiff3")
    fake_profile.candidates[ToolKind.DIFF_TOOL] = (ToolCandidate.file(None, str(tool)),)

    assert ToolLocator(fake_profile).find_diff_tool() == Found(str(tool))


def test_versioned_install_prefers_newest_directory(fake_profile, local_app_data):
    fake_profile.candidates[ToolKind.GIT_CLIENT] = (
        ToolCandidate.versioned(
            SpecialFolder.LOCAL_APP_DATA,
            "gitkraken",
            pattern="app-*",
            executable="gitkraken.exe",
        ),
    )
    root = local_app_data / "gitkraken"
    touch(root / "app-6.5.1" / "gitkraken.exe")
    newest = touch(root / "app-6.5.3" / "gitkraken.exe")
    touch(root / "app-6.5.2" / "gitkraken.exe")
    os.utime(root / "app-6.5.1", (1_000_000, 1_000_000))
    os.utime(root / "app-6.5.3", (3_000_000, 3_000_000))
    os.utime(root / "app-6.5.2", (2_000_000, 2_000_000))

    assert ToolLocator(fake_profile).find_git_client() == Found(str(newest))


def test_versioned_install_without_executable_is_not_found(fake_profile, local_app_data):
    fake_profile.candidates[ToolKind.GIT_CLIENT] = (
        ToolCandidate.versioned(
            SpecialFolder.LOCAL_APP_DATA,
            "gitkraken",
            pattern="app-*",
            executable="gitkraken.exe",
        ),
    )
    (local_app_data / "gitkraken" / "app-7.0.0").mkdir(parents=True)

    assert ToolLocator(fake_profile).find_git_client() == NotFound(ToolKind.GIT_CLIENT)


def test_versioned_file_match(fake_profile, program_files):
    fake_profile.candidates[ToolKind.IMAGE_EDITOR] = (
        ToolCandidate.versioned(
            SpecialFolder.PROGRAM_FILES_64, "GIMP 2", "bin", pattern="gimp-*.*.*"
        ),
    )
    gimp = touch(program_files / "GIMP 2" / "bin" / "gimp-2.10.exe")
    touch(program_files / "GIMP 2" / "bin" / "gimptool.exe")

    assert ToolLocator(fake_profile).find_image_editor() == Found(str(gimp))


def test_newest_match(tmp_path: Path):
    touch(tmp_path / "app-1", mtime=100)
    newest = touch(tmp_path / "app-2", mtime=300)
    touch(tmp_path / "app-3", mtime=200)
    touch(tmp_path / "other", mtime=900)

    assert newest_match(tmp_path, "app-*") == newest
    assert newest_match(tmp_path, "nothing-*") is None
    assert newest_match(tmp_path / "missing", "app-*") is None


def test_newest_match_skips_unreadable_entries(tmp_path: Path):
    installed = tmp_path / "app-1.0"
    installed.mkdir()
    try:
        (tmp_path / "app-2.0").symlink_to(tmp_path / "removed", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not available")

    assert newest_match(tmp_path, "app-*") == installed


def test_versioned_install_ignores_dangling_newer_entry(fake_profile, local_app_data):
    fake_profile.candidates[ToolKind.GIT_CLIENT] = (
        ToolCandidate.versioned(
            SpecialFolder.LOCAL_APP_DATA,
            "gitkraken",
            pattern="app-*",
            executable="gitkraken.exe",
        ),
    )
    root = local_app_data / "gitkraken"
    installed = touch(root / "app-6.5.1" / "gitkraken.exe")
    try:
        (root / "app-9.0.0").symlink_to(root / "uninstalled", target_is_directory=True)
    except (OSError, NotImplementedError):
        pytest.skip("symlinks are not available")

    assert ToolLocator(fake_profile).find_git_client() == Found(str(installed))


def test_resolve_missing_fills_only_unset_tools(fake_profile, program_files):
    fake_profile.candidates[ToolKind.IMAGE_EDITOR] = (
        ToolCandidate.file(SpecialFolder.PROGRAM_FILES_64, "paint.net", "PaintDotnet.exe"),
    )
    fake_profile.candidates[ToolKind.IMAGE_VIEWER] = (
        ToolCandidate.file(SpecialFolder.PROGRAM_FILES_64, "irfanview", "i_view64.exe"),
    )
    fake_profile.candidates[ToolKind.DIFF_TOOL] = (
        ToolCandidate.file(SpecialFolder.PROGRAM_FILES_64, "Meld", "Meld.exe"),
    )
    paint = touch(program_files / "paint.net" / "PaintDotnet.exe")
    touch(program_files / "irfanview" / "i_view64.exe")
    meld = touch(program_files / "Meld" / "Meld.exe")

    config = HostConfiguration(
        image_viewer="C:/Tools/viewer.exe",
        git=GitConfiguration(remote="upstream"),
    )

    resolved = ToolLocator(fake_profile).resolve_missing(config)

    assert resolved.image_editor == str(paint)
    assert resolved.image_viewer == "C:/Tools/viewer.exe"
    assert resolved.git.diff_tool == str(meld)
    assert resolved.git.git_client_executable is None
    assert resolved.git.remote == "upstream"
    # The input configuration is not modified.
    assert config.image_editor is None
    assert config.git.diff_tool is None
