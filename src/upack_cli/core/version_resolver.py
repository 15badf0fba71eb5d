"""Package version resolution.

Decides which version an operation targets.  An explicit version is
parsed locally; ``latest`` (or any request with prereleases enabled)
asks the injected :class:`~upack_cli.core.protocols.VersionSource` for
the published versions and picks the highest.
"""

from __future__ import annotations

import logging

import httpx

from upack_cli.core.failures import translate_feed_failure
from upack_cli.core.models import PackageId, PackageVersion
from upack_cli.core.protocols import VersionSource
from upack_cli.exceptions import InvalidVersionError, NoVersionsFoundError

logger = logging.getLogger(__name__)

LATEST = "latest"


def needs_listing(requested: str | None, *, prerelease: bool) -> bool:
    """True when *requested* cannot be answered without the feed."""
    return prerelease or not requested or requested.strip().lower() == LATEST


async def resolve_version(
    source: VersionSource,
    package_id: PackageId,
    requested: str | None,
    *,
    prerelease: bool = False,
) -> PackageVersion:
    """Return the version of *package_id* to operate on.

    Raises
    ------
    InvalidVersionError
        If an explicit *requested* version is malformed.
    NoVersionsFoundError
        If the feed lists no versions of *package_id*.
    FeedError
        If the listing call fails at the transport layer.
    """
    if requested and not needs_listing(requested, prerelease=prerelease):
        parsed = PackageVersion.parse(requested)
        if parsed is None:
            raise InvalidVersionError(
                f"Invalid UPack version number: {requested}",
                hint="Versions look like 1.2.3 or 1.2.3-beta.1, or use 'latest'.",
            )
        return parsed

    logger.debug("listing versions of %s", package_id)
    try:
        versions = await source.list_versions(package_id)
    except httpx.HTTPError as exc:
        raise translate_feed_failure(exc) from exc

    if not versions:
        raise NoVersionsFoundError(f"No versions of package {package_id} found.")

    selected = max(versions)
    logger.debug("resolved %s to %s (of %d versions)", package_id, selected, len(versions))
    return selected
