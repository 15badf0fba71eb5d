"""httpx backed universal feed client.

Implements :class:`~upack_cli.core.protocols.VersionSource` and
:class:`~upack_cli.core.protocols.PackageDownloader` against the
universal feed HTTP API:

* ``GET <feed>/versions?group=<g>&name=<n>``: JSON array of objects
  carrying a ``version`` field.
* ``GET <feed>/download/<group>/<name>/<version>``: the package file.

Transport failures (``httpx.HTTPError``) are raised unmodified so that
callers can translate them with the right not-found message.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx

from upack_cli.config import UpackSettings
from upack_cli.core.models import Credentials, PackageId, PackageVersion
from upack_cli.exceptions import FeedError, InvalidFeedUrlError

logger = logging.getLogger(__name__)


def build_async_client(
    settings: UpackSettings | None = None,
    *,
    credentials: Credentials | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an ``httpx.AsyncClient`` with the configured defaults.

    Credentials are sent as HTTP basic auth; *transport* lets tests plug
    in ``httpx.MockTransport``.
    """
    settings = settings or UpackSettings()
    auth = (
        httpx.BasicAuth(credentials.username, credentials.password)
        if credentials is not None
        else None
    )
    return httpx.AsyncClient(
        auth=auth,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


def parse_feed_url(source: str) -> httpx.URL:
    """Validate *source* as an absolute http(s) feed address.

    Raises
    ------
    InvalidFeedUrlError
        If *source* is malformed, relative, or not http(s).
    """
    try:
        url = httpx.URL(source.strip())
    except httpx.InvalidURL as exc:
        raise InvalidFeedUrlError(f"Invalid UPack feed URL: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidFeedUrlError(
            f"Invalid UPack feed URL: {source}",
            hint="Use an absolute address such as https://proget.example/upack/MyFeed",
        )
    return url


class FeedClient:
    """Concrete feed adapter over an ``httpx.AsyncClient``.

    Usage::

        async with FeedClient.create(source, credentials) as feed:
            versions = await feed.list_versions(PackageId.parse("tools/app"))
    """

    def __init__(self, feed_url: httpx.URL, client: httpx.AsyncClient) -> None:
        self._base: str = str(feed_url).rstrip("/")
        self._client: httpx.AsyncClient = client

    @classmethod
    def create(
        cls,
        source: str,
        credentials: Credentials | None = None,
        *,
        settings: UpackSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> FeedClient:
        """Validate *source* and build a client for it."""
        url = parse_feed_url(source)
        client = build_async_client(
            settings, credentials=credentials, transport=transport,
        )
        return cls(url, client)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FeedClient:
        return self

    async def __aexit__(self, *_args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # URLs
    # ------------------------------------------------------------------

    def versions_url(self) -> str:
        return f"{self._base}/versions"

    def download_url(self, package_id: PackageId, version: PackageVersion) -> str:
        segments = [quote(package_id.name, safe=""), quote(str(version), safe="")]
        if package_id.group:
            segments.insert(0, quote(package_id.group, safe="/"))
        return f"{self._base}/download/" + "/".join(segments)

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    async def list_versions(self, package_id: PackageId) -> list[PackageVersion]:
        """Return the published versions of *package_id*.

        Entries whose version text does not parse are skipped.

        Raises
        ------
        httpx.HTTPError
            For transport failures and non-success statuses.
        FeedError
            If the feed answers with something other than a JSON array.
        """
        params = {"name": package_id.name}
        if package_id.group:
            params["group"] = package_id.group

        response = await self._client.get(self.versions_url(), params=params)
        response.raise_for_status()

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise FeedError(
                "The feed returned a version list that is not valid JSON.",
            ) from exc
        if not isinstance(payload, list):
            raise FeedError("The feed returned an unexpected version list.")

        versions: list[PackageVersion] = []
        for item in payload:
            text = item.get("version") if isinstance(item, dict) else None
            parsed = PackageVersion.parse(text) if isinstance(text, str) else None
            if parsed is None:
                logger.warning("skipping unparseable version entry %r", item)
                continue
            versions.append(parsed)

        logger.debug("feed lists %d versions of %s", len(versions), package_id)
        return versions

    async def download_package(
        self,
        package_id: PackageId,
        version: PackageVersion,
        destination: Path,
        *,
        progress_callback: Callable[[dict[str, Any]], None] | None = None,
    ) -> None:
        """Stream the package file into *destination*.

        Raises
        ------
        httpx.HTTPError
            For transport failures and non-success statuses.  The error
            response body is read first so it can be reported.
        """
        url = self.download_url(package_id, version)
        logger.debug("downloading %s", url)

        async with self._client.stream("GET", url) as response:
            if response.is_error:
                await response.aread()
            response.raise_for_status()

            total = _content_length(response)
            downloaded = 0
            handle = await asyncio.to_thread(open, destination, "wb")
            try:
                async for chunk in response.aiter_bytes():
                    await asyncio.to_thread(handle.write, chunk)
                    downloaded += len(chunk)
                    if progress_callback is not None:
                        progress_callback({
                            "status": "downloading",
                            "downloaded_bytes": downloaded,
                            "total_bytes": total,
                            "filename": f"{package_id.name}-{version}.upack",
                        })
            finally:
                await asyncio.to_thread(handle.close)

        if progress_callback is not None:
            progress_callback({"status": "finished"})


def _content_length(response: httpx.Response) -> int | None:
    raw = response.headers.get("content-length")
    if raw is None or not raw.isdigit():
        return None
    return int(raw)
