"""Tests for version resolution (core/version_resolver.py).

The :class:`VersionSource` dependency is an ``AsyncMock``: these tests
verify when the feed is consulted, not how it is reached.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from upack_cli.core.failures import FEED_NOT_FOUND_MESSAGE, INCORRECT_CREDENTIALS_MESSAGE
from upack_cli.core.models import PackageId, PackageVersion
from upack_cli.core.version_resolver import needs_listing, resolve_version
from upack_cli.exceptions import FeedError, InvalidVersionError, NoVersionsFoundError

PID = PackageId(group="tools", name="app")


def _source(versions: list[str] | Exception) -> AsyncMock:
    source = AsyncMock()
    if isinstance(versions, Exception):
        source.list_versions.side_effect = versions
    else:
        source.list_versions.return_value = [PackageVersion.parse(v) for v in versions]
    return source


def _resolve(source: AsyncMock, requested: str | None, *, prerelease: bool = False) -> PackageVersion:
    return asyncio.run(resolve_version(source, PID, requested, prerelease=prerelease))


# ---------------------------------------------------------------------------
# Explicit versions
# ---------------------------------------------------------------------------

class TestExplicitVersion:
    def test_returned_without_remote_call(self) -> None:
        source = _source(["9.9.9"])
        assert _resolve(source, "2.0.0") == PackageVersion(2, 0, 0)
        source.list_versions.assert_not_called()

    def test_explicit_prerelease_text_parsed_locally(self) -> None:
        source = _source([])
        assert _resolve(source, "2.0.0-rc.1") == PackageVersion(2, 0, 0, "rc.1")
        source.list_versions.assert_not_called()

    def test_invalid_text_names_the_text(self) -> None:
        source = _source([])
        with pytest.raises(InvalidVersionError, match="not-a-version"):
            _resolve(source, "not-a-version")
        source.list_versions.assert_not_called()


# ---------------------------------------------------------------------------
# Remote listing
# ---------------------------------------------------------------------------

class TestRemoteListing:
    @pytest.mark.parametrize("requested", ["latest", "LATEST", "Latest", "", None])
    def test_latest_picks_maximum(self, requested: str | None) -> None:
        source = _source(["1.0.0", "1.2.0", "0.9.0"])
        assert _resolve(source, requested) == PackageVersion(1, 2, 0)
        source.list_versions.assert_awaited_once_with(PID)

    def test_prerelease_always_lists(self) -> None:
        source = _source(["1.0.0", "1.1.0-beta"])
        assert _resolve(source, "2.0.0", prerelease=True) == PackageVersion(1, 1, 0, "beta")
        source.list_versions.assert_awaited_once()

    def test_empty_listing_names_package(self) -> None:
        source = _source([])
        with pytest.raises(NoVersionsFoundError, match="tools/app"):
            _resolve(source, "latest")

    def test_transport_failure_translated(self) -> None:
        request = httpx.Request("GET", "https://feed.example/versions")
        response = httpx.Response(404, request=request)
        failure = httpx.HTTPStatusError("404", request=request, response=response)
        source = _source(failure)

        with pytest.raises(FeedError) as exc_info:
            _resolve(source, "latest")
        assert str(exc_info.value) == FEED_NOT_FOUND_MESSAGE
        assert exc_info.value.__cause__ is failure

    def test_unauthorized_translated(self) -> None:
        request = httpx.Request("GET", "https://feed.example/versions")
        response = httpx.Response(401, request=request)
        source = _source(httpx.HTTPStatusError("401", request=request, response=response))

        with pytest.raises(FeedError, match=INCORRECT_CREDENTIALS_MESSAGE):
            _resolve(source, None)


class TestNeedsListing:
    def test_explicit(self) -> None:
        assert not needs_listing("1.0.0", prerelease=False)

    def test_latest(self) -> None:
        assert needs_listing("latest", prerelease=False)

    def test_prerelease(self) -> None:
        assert needs_listing("1.0.0", prerelease=True)
