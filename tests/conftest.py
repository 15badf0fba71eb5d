"""Shared pytest fixtures and configuration for the upack-cli test suite.

Guidelines
----------
* No internet access in any test: feeds are served by
  ``httpx.MockTransport``.
* Filesystem work happens under ``tmp_path`` only.
* Coroutines are driven with ``asyncio.run``.
* Tests must not depend on ``UPACK_*`` variables from the host.
"""

from __future__ import annotations

import io
import json
import os
import zipfile
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import IO, Any

import pytest

PackageBuilder = Callable[..., Path]

STAMP = (2019, 5, 17, 12, 30, 0)


@pytest.fixture(autouse=True)
def _isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path,
) -> None:
    """Drop host ``UPACK_*`` settings and keep ``.env`` lookups local."""
    for name in list(os.environ):
        if name.upper().startswith("UPACK_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@dataclass
class FakeEntry:
    """In-memory package entry satisfying the ``PackageEntry`` protocol."""

    content_path: str
    data: bytes = b""
    is_directory: bool = False
    is_content: bool = True
    timestamp: datetime | None = None

    def open(self) -> IO[bytes]:
        return io.BytesIO(self.data)


def write_package(
    path: Path,
    *,
    manifest: dict[str, Any] | None = None,
    files: dict[str, bytes] | None = None,
    directories: tuple[str, ...] = (),
    date_time: tuple[int, int, int, int, int, int] = STAMP,
) -> Path:
    """Write a zip package file with the given manifest and content."""
    manifest = manifest if manifest is not None else {
        "group": "tools",
        "name": "app",
        "version": "1.2.0",
    }
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("upack.json", json.dumps(manifest))
        for directory in directories:
            archive.writestr(
                zipfile.ZipInfo(f"package/{directory.rstrip('/')}/", date_time=date_time),
                b"",
            )
        for name, data in (files or {}).items():
            archive.writestr(zipfile.ZipInfo(f"package/{name}", date_time=date_time), data)
    return path


@pytest.fixture()
def build_package(tmp_path: Path) -> PackageBuilder:
    """Factory fixture: ``build_package(name="app.upack", **kwargs) -> Path``."""

    def _build(name: str = "app.upack", **kwargs: Any) -> Path:
        return write_package(tmp_path / name, **kwargs)

    return _build
