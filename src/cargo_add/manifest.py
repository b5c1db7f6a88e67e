from __future__ import annotations

import os
import stat
import sys
from enum import Enum
from pathlib import Path
from typing import Any, TextIO

import tomli_w
from pydantic import BaseModel, Field

from cargo_add.config import LOCK_FILENAME, MANIFEST_FILENAME, PRIMARY_SECTIONS

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

Dependency = tuple[str, Any]


class ManifestError(RuntimeError):
    pass


class ManifestStructureError(ManifestError):
    """Catch-all error for misconfigured crates."""

    default_message = "Your Cargo.toml is either missing or incorrectly structured."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class ManifestNotFoundError(ManifestStructureError):
    pass


class TableTypeError(ManifestStructureError):
    pass


class MissingPrimarySectionError(ManifestStructureError):
    pass


class ManifestParseError(ManifestError):
    pass


class CargoFile(Enum):
    CONFIG = MANIFEST_FILENAME
    LOCK = LOCK_FILENAME


def find(specified: str | os.PathLike[str] | None, target: CargoFile) -> Path:
    """Resolve the file to operate on.

    An existing file is returned as given. A directory starts an upward search
    from there, and no path at all starts it from the working directory. A
    path that does not exist raises ``FileNotFoundError``.
    """
    if specified is None:
        return search(Path.cwd(), target)

    path = Path(specified)
    if stat.S_ISREG(path.stat().st_mode):
        return path
    return search(path, target)


def search(directory: Path, target: CargoFile) -> Path:
    """Look for ``target`` in ``directory`` and each of its ancestors."""
    current = Path(os.path.abspath(directory))
    while True:
        candidate = current / target.value
        if candidate.exists():
            return candidate
        if current.parent == current:
            raise ManifestNotFoundError(
                f"Could not find `{target.value}` in `{directory}` or any parent directory"
            )
        current = current.parent


def _open_read_write(path: Path) -> TextIO:
    return open(path, "r+", encoding="utf-8")


def find_file(path: str | os.PathLike[str] | None = None) -> TextIO:
    """Look for a ``Cargo.toml`` file and open it for reading and writing.

    Starts at the given path and goes into its parent directories until the
    manifest file is found. Without a path the working directory is used.
    """
    return _open_read_write(find(path, CargoFile.CONFIG))


def find_lock_file(path: str | os.PathLike[str] | None = None) -> TextIO:
    """Look for a ``Cargo.lock`` file and open it for reading and writing."""
    return _open_read_write(find(path, CargoFile.LOCK))


class Manifest(BaseModel):
    """A Cargo manifest, held as plain TOML data."""

    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_str(cls, text: str) -> Manifest:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ManifestParseError(f"Invalid TOML in manifest: {exc}") from exc
        return cls(data=data)

    @classmethod
    def from_handle(cls, handle: TextIO) -> Manifest:
        try:
            text = handle.read()
        except UnicodeDecodeError as exc:
            raise ManifestParseError(f"Manifest is not valid UTF-8: {exc}") from exc
        return cls.from_str(text)

    @classmethod
    def open(cls, path: str | os.PathLike[str] | None = None) -> Manifest:
        """Open the ``Cargo.toml`` for a path, or for the working directory."""
        with find_file(path) as handle:
            return cls.from_handle(handle)

    @classmethod
    def open_lock_file(cls, path: str | os.PathLike[str] | None = None) -> Manifest:
        """Open the ``Cargo.lock`` for a path, or for the working directory."""
        with find_lock_file(path) as handle:
            return cls.from_handle(handle)

    def insert_into_table(self, table: str, dependency: Dependency) -> None:
        """Add an entry to ``table``, creating the table when it is missing."""
        name, spec = dependency
        entries = self.data.setdefault(table, {})
        if not isinstance(entries, dict):
            raise TableTypeError(f"`{table}` exists in the manifest but is not a table")
        entries[name] = spec

    def add_deps(self, table: str, dependencies: list[Dependency]) -> None:
        """Add multiple dependencies, stopping at the first failure.

        Entries inserted before the failing one stay in place.
        """
        for dependency in dependencies:
            self.insert_into_table(table, dependency)

    def dumps(self) -> str:
        """Render the manifest with its ``package``/``project`` section first."""
        document = dict(self.data)
        header = next((name for name in PRIMARY_SECTIONS if name in document), None)
        if header is None:
            raise MissingPrimarySectionError(
                "Manifest has neither a `package` nor a `project` section"
            )

        ordered = {header: document.pop(header)}
        ordered.update(document)
        return tomli_w.dumps(ordered)

    def write_to_file(self, handle: TextIO) -> None:
        """Overwrite ``handle`` with the manifest contents."""
        content = self.dumps()
        handle.seek(0)
        handle.write(content)
        handle.truncate()
