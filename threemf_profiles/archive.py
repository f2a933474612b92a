"""
Read-only access to a 3MF package as a ZIP container.

A Package is opened once per extraction call and closed on every exit
path; use it as a context manager.
"""

import logging
import os
import zlib
from pathlib import Path
from typing import Callable, Iterator
from zipfile import BadZipFile, ZipFile

logger = logging.getLogger(__name__)


class ArchiveError(Exception):
    """Raised when a package cannot be opened or one of its entries cannot be read."""


class Package:
    """An opened 3MF package. Entries are exposed in archive order."""

    def __init__(self, path: Path, zf: ZipFile):
        self.path = path
        self._zf = zf
        self._names = [info.filename for info in zf.infolist()]
        self._closed = False

    def __enter__(self) -> "Package":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if not self._closed:
            self._zf.close()
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def entries(self) -> list[str]:
        return list(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def read(self, name: str) -> bytes | None:
        """Return the entry's bytes, or None if the package has no such entry."""
        if name not in self._names:
            return None
        try:
            return self._zf.read(name)
        except (BadZipFile, zlib.error, OSError, RuntimeError, NotImplementedError) as e:
            raise ArchiveError(f"Cannot read entry '{name}': {e}") from e

    def read_at(self, index: int) -> tuple[str, bytes]:
        name = self._names[index]
        data = self.read(name)
        return name, data if data is not None else b""

    def iter_matching(self, predicate: Callable[[str], bool]) -> Iterator[str]:
        """Yield entry names accepted by ``predicate``, in archive order."""
        for name in self._names:
            if predicate(name):
                yield name

    def find_first(self, predicate: Callable[[str], bool]) -> str | None:
        return next(self.iter_matching(predicate), None)


def open_package(path: str | os.PathLike) -> Package:
    """Open ``path`` as a ZIP container.

    Raises:
        ArchiveError: The file is missing, unreadable, or not a ZIP archive.
    """
    path = Path(path)
    if not path.is_file():
        raise ArchiveError(f"File not found: {path}")
    try:
        zf = ZipFile(path, "r")
    except (BadZipFile, OSError, EOFError) as e:
        raise ArchiveError(f"Not a valid ZIP archive: {path} ({e})") from e
    logger.debug("Opened %s (%d entries)", path, len(zf.namelist()))
    return Package(path, zf)
