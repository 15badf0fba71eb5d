"""Extraction of package content entries onto disk.

Entries are replayed strictly in the order the package presents them,
one at a time.  Extraction is all-or-abort: the first ``OSError`` stops
the run and propagates unchanged, leaving whatever was already written
in place.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from upack_cli.core.models import ExtractionReport
from upack_cli.core.protocols import PackageEntry
from upack_cli.exceptions import UnsafeEntryPathError

logger = logging.getLogger(__name__)

# Zip archives store DOS times, which start in 1980; anything at or
# before that year is an unset timestamp.
UNSET_TIMESTAMP_YEAR = 1980

_COPY_BUFFER_SIZE = 64 * 1024


def resolve_entry_path(root: Path, content_path: str) -> Path:
    """Return where *content_path* lands under *root*.

    Raises
    ------
    UnsafeEntryPathError
        If the path is absolute or climbs out of *root*.
    """
    relative = PurePosixPath(content_path)
    if relative.is_absolute() or ".." in relative.parts:
        raise UnsafeEntryPathError(
            f"Package entry {content_path!r} points outside the target directory.",
        )
    target = root.joinpath(*relative.parts)
    if not target.resolve().is_relative_to(root.resolve()):
        raise UnsafeEntryPathError(
            f"Package entry {content_path!r} points outside the target directory.",
        )
    return target


def _write_file(
    entry: PackageEntry,
    target: Path,
    *,
    overwrite: bool,
    preserve_timestamps: bool,
) -> None:
    # "xb" fails with FileExistsError when the file is already there.
    mode = "wb" if overwrite else "xb"
    with entry.open() as source, open(target, mode) as destination:
        shutil.copyfileobj(source, destination, _COPY_BUFFER_SIZE)

    if not preserve_timestamps:
        return
    timestamp = entry.timestamp
    if timestamp is not None and timestamp.year > UNSET_TIMESTAMP_YEAR:
        os.utime(target, (target.stat().st_atime, timestamp.timestamp()))


async def extract_entries(
    target_directory: Path,
    entries: Iterable[PackageEntry],
    *,
    overwrite: bool = False,
    preserve_timestamps: bool = False,
) -> ExtractionReport:
    """Write every content entry of a package below *target_directory*.

    Parameters
    ----------
    target_directory:
        Created if missing.
    entries:
        Package entries; non-content entries are skipped.
    overwrite:
        Replace existing files instead of failing on them.
    preserve_timestamps:
        Copy each entry's timestamp to the file's modification time when
        the timestamp is set (year after 1980).

    Raises
    ------
    FileExistsError
        When *overwrite* is false and a file already exists.
    UnsafeEntryPathError
        When an entry would be written outside *target_directory*.
    OSError
        For any other I/O failure; remaining entries are not processed.
    """
    root = Path(target_directory)
    root.mkdir(parents=True, exist_ok=True)
    report = ExtractionReport()

    for entry in entries:
        if not entry.is_content:
            continue

        target = resolve_entry_path(root, entry.content_path)
        if entry.is_directory:
            target.mkdir(parents=True, exist_ok=True)
            report.directories += 1
            continue

        target.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("extracting %s", entry.content_path)
        await asyncio.to_thread(
            _write_file,
            entry,
            target,
            overwrite=overwrite,
            preserve_timestamps=preserve_timestamps,
        )
        report.files += 1

    logger.debug(
        "extracted %d files and %d directories into %s",
        report.files,
        report.directories,
        root,
    )
    return report
