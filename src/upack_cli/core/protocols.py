"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols, never on concrete
implementations.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import IO, Any, Protocol

from upack_cli.core.models import PackageId, PackageVersion


class VersionSource(Protocol):
    """Contract for the remote listing of a package's versions.

    Implementations raise transport failures unmodified; the core layer
    passes them through
    :func:`~upack_cli.core.failures.translate_feed_failure`.
    """

    async def list_versions(self, package_id: PackageId) -> Sequence[PackageVersion]:
        """Return every published version of *package_id*, in any order."""
        ...  # pragma: no cover


class PackageDownloader(Protocol):
    """Contract for fetching a package file from a feed."""

    async def download_package(
        self,
        package_id: PackageId,
        version: PackageVersion,
        destination: Path,
        *,
        progress_callback: Callable[[dict[str, Any]], None] | None = None,
    ) -> None:
        """Write the package file for *package_id* at *version* to *destination*.

        *progress_callback* receives dicts with a ``"status"`` key
        (``"downloading"`` or ``"finished"``) plus byte counters.
        """
        ...  # pragma: no cover


class PackageEntry(Protocol):
    """One record of a package payload.

    Only entries with :attr:`is_content` set are extracted; their
    :attr:`content_path` is relative to the package content root and
    uses ``/`` separators.
    """

    @property
    def is_content(self) -> bool: ...  # pragma: no cover

    @property
    def is_directory(self) -> bool: ...  # pragma: no cover

    @property
    def content_path(self) -> str: ...  # pragma: no cover

    @property
    def timestamp(self) -> datetime | None: ...  # pragma: no cover

    def open(self) -> IO[bytes]:
        """Open the entry's bytes for reading."""
        ...  # pragma: no cover
