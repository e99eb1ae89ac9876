"""File-system access used by the parser, writer and extractor.

The core only needs three operations, so they are kept behind a small
protocol. Tests swap in an in-memory implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Union

from celestia_i18n.errors import EnumerationError, FileReadError, FileWriteError

PathLike = Union[str, Path]


@dataclass(frozen=True)
class DirEntry:
    path: Path
    is_directory: bool


class FileSystem(Protocol):
    def list_dir(self, path: PathLike) -> list[DirEntry]: ...

    def read_bytes(self, path: PathLike) -> bytes: ...

    def write_bytes(self, path: PathLike, data: bytes, fail_if_exists: bool = False) -> None: ...


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def list_dir(self, path: PathLike) -> list[DirEntry]:
        try:
            children = sorted(Path(path).iterdir())
        except OSError as e:
            raise EnumerationError(f"Cannot list {path}: {e}") from e
        entries = []
        for child in children:
            try:
                is_directory = child.is_dir()
            except OSError as e:
                raise FileReadError(f"Cannot stat {child}: {e}") from e
            entries.append(DirEntry(child, is_directory))
        return entries

    def read_bytes(self, path: PathLike) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise FileReadError(f"Cannot read {path}: {e}") from e

    def write_bytes(self, path: PathLike, data: bytes, fail_if_exists: bool = False) -> None:
        mode = "xb" if fail_if_exists else "wb"
        try:
            with open(path, mode) as f:
                f.write(data)
        except OSError as e:
            raise FileWriteError(f"Cannot write {path}: {e}") from e


def default_fs() -> FileSystem:
    return LocalFileSystem()
