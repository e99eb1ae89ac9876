"""Shared fixtures for celestia-i18n tests."""
import sys
from pathlib import Path, PurePosixPath

import pytest

# Ensure src is on path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

FIXTURES = Path(__file__).parent / "fixtures"


class MemoryFileSystem:
    """In-memory FileSystem: {"dir/file.kt": b"..."}."""

    def __init__(self, files=None):
        self.files = {PurePosixPath(k): v for k, v in (files or {}).items()}

    def list_dir(self, path):
        from celestia_i18n.errors import EnumerationError
        from celestia_i18n.services.storage import DirEntry
        path = PurePosixPath(path)
        children = {}
        for file in self.files:
            if path in file.parents:
                rel = file.relative_to(path)
                child = path / rel.parts[0]
                children[child] = len(rel.parts) > 1
        if not children:
            raise EnumerationError(f"Cannot list {path}")
        return [DirEntry(p, d) for p, d in sorted(children.items())]

    def read_bytes(self, path):
        from celestia_i18n.errors import FileReadError
        try:
            return self.files[PurePosixPath(path)]
        except KeyError:
            raise FileReadError(f"Cannot read {path}") from None

    def write_bytes(self, path, data, fail_if_exists=False):
        from celestia_i18n.errors import FileWriteError
        path = PurePosixPath(path)
        if fail_if_exists and path in self.files:
            raise FileWriteError(f"{path} exists")
        self.files[path] = data

    def text(self, path):
        return self.files[PurePosixPath(path)].decode("utf-8")


@pytest.fixture
def fixtures_dir():
    return FIXTURES


@pytest.fixture
def memory_fs():
    return MemoryFileSystem()


@pytest.fixture
def make_fs():
    return MemoryFileSystem


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path, monkeypatch):
    """Keep tests away from the user's settings file."""
    settings_file = tmp_path / "settings.json"
    monkeypatch.setattr("celestia_i18n.services.settings._SETTINGS_FILE", settings_file)
    from celestia_i18n.services.settings import Settings
    Settings.reset_instance()
    yield settings_file
    Settings.reset_instance()
