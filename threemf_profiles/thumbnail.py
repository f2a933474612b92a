"""Locate and copy the preview image embedded in a package."""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Iterable

from .archive import ArchiveError, Package, open_package
from .models import DEFAULT_LAYOUT, PackageLayout

logger = logging.getLogger(__name__)

_UMASK = os.umask(0)
os.umask(_UMASK)


def find_thumbnail_entry(
    entries: Iterable[str],
    layout: PackageLayout = DEFAULT_LAYOUT,
) -> str | None:
    """Pick the preview entry.

    A Bambu-style plate image wins over a generic ``*thumbnail*`` image
    regardless of which comes first in the archive.
    """
    plate = re.compile(layout.plate_thumbnail_pattern, re.IGNORECASE)
    fallback: str | None = None
    for name in entries:
        if plate.search(name):
            return name
        lowered = name.lower()
        if (
            fallback is None
            and layout.thumbnail_keyword in lowered
            and lowered.endswith(layout.thumbnail_extensions)
        ):
            fallback = name
    return fallback


def _write_atomic(output_path: Path, data: bytes) -> None:
    """Write ``data`` via a sibling temp file so a failed write leaves nothing behind."""
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent
    )
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.chmod(tmp_name, 0o666 & ~_UMASK)
        os.replace(tmp_name, output_path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def extract_thumbnail(
    package: Package,
    output_path: str | os.PathLike,
    layout: PackageLayout = DEFAULT_LAYOUT,
) -> bool:
    """Copy the package's preview image byte-for-byte to ``output_path``.

    Returns False without touching the filesystem when no preview entry
    exists, and False when the entry is empty or unreadable or the write
    fails.
    """
    name = find_thumbnail_entry(package.entries(), layout)
    if name is None:
        return False

    try:
        data = package.read(name)
    except ArchiveError as e:
        logger.warning("Cannot read thumbnail from %s: %s", package.path, e)
        return False
    if not data:
        return False

    output_path = Path(output_path)
    try:
        _write_atomic(output_path, data)
    except OSError as e:
        logger.warning("Cannot write thumbnail to %s: %s", output_path, e)
        return False

    logger.debug("Wrote thumbnail %s -> %s (%d bytes)", name, output_path, len(data))
    return True


def extract_thumbnail_from_file(
    path: str | os.PathLike,
    output_path: str | os.PathLike,
    layout: PackageLayout = DEFAULT_LAYOUT,
) -> bool:
    try:
        package = open_package(path)
    except ArchiveError as e:
        logger.debug("%s", e)
        return False
    with package:
        return extract_thumbnail(package, output_path, layout)
