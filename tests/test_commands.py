"""End-to-end tests for the ``upack`` commands (cli/commands/).

Commands are driven through :func:`~upack_cli.cli.app.main` with real
package files from the ``build_package`` fixture.  ``install`` talks to
an ``httpx.MockTransport`` feed injected by patching
:meth:`FeedClient.create`.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import httpx
import pytest

from conftest import STAMP, PackageBuilder
from upack_cli.cli import exit_codes
from upack_cli.cli.app import main
from upack_cli.core.failures import PACKAGE_NOT_FOUND_MESSAGE
from upack_cli.exceptions import (
    FeedError,
    NoVersionsFoundError,
    PackageFormatError,
    UsageError,
)
from upack_cli.infra.feed_client import FeedClient

FEED = "https://proget.example/upack/Main"


def _serve_feed(
    monkeypatch: pytest.MonkeyPatch,
    package_bytes: bytes,
    *,
    versions: list[str] | None = None,
) -> list[httpx.Request]:
    """Route ``FeedClient.create`` to an in-memory feed; return its request log."""
    seen: list[httpx.Request] = []
    listing = [{"version": v} for v in (versions if versions is not None else ["1.0.0", "1.2.0"])]

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        path = request.url.path
        if path == "/upack/Main/versions":
            return httpx.Response(200, json=listing)
        if path.startswith("/upack/Main/download/"):
            if path.endswith("/1.2.0"):
                return httpx.Response(200, content=package_bytes)
            return httpx.Response(404, text="no such version")
        return httpx.Response(404)

    real_create = FeedClient.create

    def _create(source: str, credentials: object = None, **_kwargs: object) -> FeedClient:
        return real_create(source, credentials, transport=httpx.MockTransport(handler))

    monkeypatch.setattr(FeedClient, "create", _create)
    return seen


# ---------------------------------------------------------------------------
# metadata
# ---------------------------------------------------------------------------

class TestMetadata:
    def test_prints_manifest(
        self, build_package: PackageBuilder, capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = main(["metadata", str(build_package())])
        assert code == exit_codes.SUCCESS
        assert capsys.readouterr().out.splitlines() == [
            "Package: tools:app",
            "Version: 1.2.0",
        ]

    def test_group_free_manifest(
        self, build_package: PackageBuilder, capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = build_package(manifest={"name": "app", "version": "3.0.0"})
        main(["metadata", str(path)])
        assert "Package: app" in capsys.readouterr().out

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(PackageFormatError):
            main(["metadata", str(tmp_path / "absent.upack")])


# ---------------------------------------------------------------------------
# unpack
# ---------------------------------------------------------------------------

class TestUnpack:
    def test_extracts_package(
        self,
        build_package: PackageBuilder,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        path = build_package(directories=("docs",), files={"docs/readme.txt": b"hi"})
        target = tmp_path / "out"

        code = main(["unpack", str(path), str(target)])

        assert code == exit_codes.SUCCESS
        assert (target / "docs" / "readme.txt").read_bytes() == b"hi"
        out = capsys.readouterr().out
        assert "Package: tools:app" in out
        assert "Extracted 1 files and 1 directories." in out

    def test_second_run_needs_overwrite(
        self, build_package: PackageBuilder, tmp_path: Path,
    ) -> None:
        path = build_package(files={"a.txt": b"a"})
        target = tmp_path / "out"
        main(["unpack", str(path), str(target)])

        with pytest.raises(FileExistsError):
            main(["unpack", str(path), str(target)])
        assert main(["unpack", str(path), str(target), "--overwrite"]) == exit_codes.SUCCESS

    def test_preserve_timestamps(
        self, build_package: PackageBuilder, tmp_path: Path,
    ) -> None:
        path = build_package(files={"a.txt": b"a"})
        target = tmp_path / "out"
        main(["unpack", str(path), str(target), "--preserve-timestamps"])
        assert (target / "a.txt").stat().st_mtime == pytest.approx(
            datetime(*STAMP).timestamp(),
        )

    def test_missing_arguments(self) -> None:
        with pytest.raises(UsageError) as exc_info:
            main(["unpack"])
        assert exc_info.value.messages == (
            "Missing required argument: Package",
            "Missing required argument: Target",
        )
        assert exc_info.value.hint == (
            "upack unpack «Package» «Target» [--overwrite] [--preserve-timestamps]"
        )

    def test_bad_flag_value(self, build_package: PackageBuilder, tmp_path: Path) -> None:
        with pytest.raises(UsageError, match='--overwrite must be "true" or "false".'):
            main(["unpack", str(build_package()), str(tmp_path), "--overwrite=sure"])


# ---------------------------------------------------------------------------
# install
# ---------------------------------------------------------------------------

class TestInstall:
    def test_latest_downloads_and_extracts(
        self,
        monkeypatch: pytest.MonkeyPatch,
        build_package: PackageBuilder,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        package_bytes = build_package(files={"bin/app": b"\x7fELF"}).read_bytes()
        seen = _serve_feed(monkeypatch, package_bytes)
        target = tmp_path / "installed"

        code = main([
            "install", "tools/app", f"--source={FEED}", f"--target={target}",
        ])

        assert code == exit_codes.SUCCESS
        assert (target / "bin" / "app").read_bytes() == b"\x7fELF"
        assert [r.url.path for r in seen] == [
            "/upack/Main/versions",
            "/upack/Main/download/tools/app/1.2.0",
        ]
        out = capsys.readouterr().out
        assert "Version: 1.2.0" in out
        assert "Extracted 1 files and 0 directories." in out

    def test_explicit_version_skips_listing(
        self,
        monkeypatch: pytest.MonkeyPatch,
        build_package: PackageBuilder,
        tmp_path: Path,
    ) -> None:
        seen = _serve_feed(monkeypatch, build_package().read_bytes())

        main([
            "install", "tools/app", "1.2.0",
            f"--source={FEED}", f"--target={tmp_path / 'out'}",
        ])

        assert [r.url.path for r in seen] == ["/upack/Main/download/tools/app/1.2.0"]

    def test_credentials_sent(
        self,
        monkeypatch: pytest.MonkeyPatch,
        build_package: PackageBuilder,
        tmp_path: Path,
    ) -> None:
        seen = _serve_feed(monkeypatch, build_package().read_bytes())

        main([
            "install", "tools/app", "1.2.0", f"--source={FEED}",
            f"--target={tmp_path / 'out'}", "--user=alice:pw",
        ])

        assert seen[0].headers["Authorization"].startswith("Basic ")

    def test_missing_version_is_package_not_found(
        self,
        monkeypatch: pytest.MonkeyPatch,
        build_package: PackageBuilder,
        tmp_path: Path,
    ) -> None:
        _serve_feed(monkeypatch, build_package().read_bytes())

        with pytest.raises(FeedError) as exc_info:
            main([
                "install", "tools/app", "9.9.9",
                f"--source={FEED}", f"--target={tmp_path / 'out'}",
            ])
        assert str(exc_info.value) == f"{PACKAGE_NOT_FOUND_MESSAGE}: no such version"
        assert not (tmp_path / "out").exists()

    def test_empty_feed(
        self,
        monkeypatch: pytest.MonkeyPatch,
        build_package: PackageBuilder,
        tmp_path: Path,
    ) -> None:
        _serve_feed(monkeypatch, build_package().read_bytes(), versions=[])

        with pytest.raises(NoVersionsFoundError, match="tools/app"):
            main(["install", "tools/app", f"--source={FEED}", f"--target={tmp_path}"])

    def test_required_named_arguments(self) -> None:
        with pytest.raises(UsageError) as exc_info:
            main(["install", "tools/app"])
        assert exc_info.value.messages == (
            "Missing required argument: source",
            "Missing required argument: target",
        )
