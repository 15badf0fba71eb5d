"""Infrastructure layer: external system integration.

This layer wraps all interaction with feeds (over httpx) and package
files (zip archives).  Archive and manifest problems are re-raised as
:class:`~upack_cli.exceptions.UpackError` subclasses; HTTP transport
failures are raised as ``httpx.HTTPError`` for the core translator.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from upack_cli.infra.feed_client import FeedClient, build_async_client, parse_feed_url
from upack_cli.infra.zip_package import ZipPackage, ZipPackageEntry, decode_manifest

__all__: list[str] = [
    "FeedClient",
    "ZipPackage",
    "ZipPackageEntry",
    "build_async_client",
    "decode_manifest",
    "parse_feed_url",
]
