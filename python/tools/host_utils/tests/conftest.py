"""Shared fixtures for host_utils tests."""

import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# Make the tools directory importable when the package is not installed.
sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from host_utils.models import ToolKind
from host_utils.platforms import PlatformProfile, SpecialFolder, ToolCandidate


class FolderMap:
    """Special folder resolver backed by a plain dictionary."""

    def __init__(self, folders: Dict[SpecialFolder, Path]):
        self.folders = folders

    def resolve(self, folder: SpecialFolder) -> Optional[Path]:
        return self.folders.get(folder)


class RecordingTrash:
    def __init__(self):
        self.paths: List[Path] = []

    def move_to_trash(self, path: Path) -> None:
        self.paths.append(path)


class FakeProfile(PlatformProfile):
    """Profile with configurable candidates that records shell requests."""

    name = "fake"
    terminal_command = "fake-terminal"
    terminal_command_args = "--cd {0}"

    def __init__(self, folders, runner=None):
        super().__init__(folders, runner)
        self.candidates: Dict[ToolKind, Tuple[ToolCandidate, ...]] = {}
        self.fallbacks: Dict[ToolKind, str] = {}
        self.opened: List[Tuple[str, str]] = []
        self.revealed: List[Path] = []
        self._trash = RecordingTrash()

    def tool_candidates(self, kind: ToolKind) -> Tuple[ToolCandidate, ...]:
        return self.candidates.get(kind, ())

    def tool_fallback(self, kind: ToolKind) -> Optional[str]:
        return self.fallbacks.get(kind)

    @property
    def trash(self):
        return self._trash

    def open_with_default_handler(self, target: str, verb: str = "open") -> bool:
        self.opened.append((target, verb))
        return True

    def reveal_in_file_manager(self, path: Path) -> bool:
        self.revealed.append(path)
        return True


@pytest.fixture
def program_files(tmp_path: Path) -> Path:
    folder = tmp_path / "Program Files"
    folder.mkdir()
    return folder


@pytest.fixture
def local_app_data(tmp_path: Path) -> Path:
    folder = tmp_path / "AppData" / "Local"
    folder.mkdir(parents=True)
    return folder


@pytest.fixture
def fake_profile(program_files: Path, local_app_data: Path) -> FakeProfile:
    folders = FolderMap(
        {
            SpecialFolder.PROGRAM_FILES_64: program_files,
            SpecialFolder.LOCAL_APP_DATA: local_app_data,
        }
    )
    return FakeProfile(folders)


@pytest.fixture
def recording_trash() -> RecordingTrash:
    return RecordingTrash()
