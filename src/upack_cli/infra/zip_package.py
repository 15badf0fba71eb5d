"""Zip backed package reader.

A package file is a zip archive with the ``upack.json`` manifest at its
root and the payload under the ``package/`` prefix.  This module is the
only place that touches :mod:`zipfile`; archive and manifest problems
are re-raised as :class:`~upack_cli.exceptions.PackageFormatError`.
"""

from __future__ import annotations

import json
import logging
import zipfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import IO, Any

from upack_cli.core.models import PackageManifest
from upack_cli.exceptions import PackageFormatError

logger = logging.getLogger(__name__)

CONTENT_PREFIX = "package/"
MANIFEST_NAME = "upack.json"


def decode_manifest(data: bytes) -> PackageManifest:
    """Decode ``upack.json`` bytes into a :class:`PackageManifest`.

    Raises
    ------
    PackageFormatError
        If the bytes are not a JSON object with ``name`` and ``version``.
    """
    try:
        raw: Any = json.loads(data.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise PackageFormatError(f"Package manifest is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise PackageFormatError("Package manifest must be a JSON object.")

    name = raw.get("name")
    version = raw.get("version")
    if not isinstance(name, str) or not name:
        raise PackageFormatError("Package manifest is missing a name.")
    if not isinstance(version, str) or not version:
        raise PackageFormatError("Package manifest is missing a version.")

    group = raw.get("group")
    return PackageManifest(
        group=group if isinstance(group, str) and group else None,
        name=name,
        version=version,
    )


@dataclass(frozen=True, slots=True)
class ZipPackageEntry:
    """One archive member, satisfying :class:`~upack_cli.core.protocols.PackageEntry`."""

    archive: zipfile.ZipFile
    info: zipfile.ZipInfo

    @property
    def _name(self) -> str:
        return self.info.filename.replace("\\", "/")

    @property
    def is_content(self) -> bool:
        name = self._name
        return name.startswith(CONTENT_PREFIX) and len(name) > len(CONTENT_PREFIX)

    @property
    def is_directory(self) -> bool:
        return self._name.endswith("/")

    @property
    def content_path(self) -> str:
        if not self.is_content:
            return ""
        return self._name[len(CONTENT_PREFIX):]

    @property
    def timestamp(self) -> datetime | None:
        # DOS time carries no zone; it is interpreted as local time.  A
        # zeroed date reads back as (1980, 0, 0, ...) and counts as unset.
        try:
            return datetime(*self.info.date_time)
        except ValueError:
            return None

    def open(self) -> IO[bytes]:
        return self.archive.open(self.info)


class ZipPackage:
    """An opened package file.

    Usage::

        with ZipPackage(path) as package:
            manifest = package.read_manifest()
            for entry in package.entries: ...
    """

    def __init__(self, path: Path | str) -> None:
        self.path: Path = Path(path)
        try:
            self._archive: zipfile.ZipFile = zipfile.ZipFile(self.path)
        except FileNotFoundError as exc:
            raise PackageFormatError(f"Package file not found: {self.path}") from exc
        except zipfile.BadZipFile as exc:
            raise PackageFormatError(
                f"{self.path} is not a valid package file.",
                hint="Package files are zip archives containing upack.json.",
            ) from exc
        logger.debug("opened package %s", self.path)

    def __enter__(self) -> ZipPackage:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    def close(self) -> None:
        self._archive.close()

    @property
    def entries(self) -> list[ZipPackageEntry]:
        """Every archive member, in archive order."""
        return [ZipPackageEntry(self._archive, info) for info in self._archive.infolist()]

    def read_manifest(self) -> PackageManifest:
        """Decode the package's ``upack.json``."""
        try:
            data = self._archive.read(MANIFEST_NAME)
        except KeyError as exc:
            raise PackageFormatError(
                f"{self.path} does not contain {MANIFEST_NAME}.",
            ) from exc
        return decode_manifest(data)
