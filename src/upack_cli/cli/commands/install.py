"""``upack install``: download a package from a feed and extract it.

Flow:
1. Validate the feed address and open a feed client.
2. Resolve the requested version (``latest`` consults the feed).
3. Download the package file to a temporary directory with progress.
4. Print the manifest and extract the content into the target.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

import httpx

from upack_cli.cli import exit_codes
from upack_cli.cli.commands.metadata import print_manifest
from upack_cli.cli.commands.unpack import OVERWRITE, PRESERVE_TIMESTAMPS
from upack_cli.cli.console import echo
from upack_cli.cli.progress import DownloadProgress
from upack_cli.core.arguments import (
    CommandDescriptor,
    NamedArgument,
    PositionalArgument,
    ValueKind,
)
from upack_cli.core.command import Command
from upack_cli.core.extraction import extract_entries
from upack_cli.core.failures import PACKAGE_NOT_FOUND_MESSAGE, translate_feed_failure
from upack_cli.core.models import Credentials, PackageId
from upack_cli.core.version_resolver import resolve_version
from upack_cli.infra.feed_client import FeedClient
from upack_cli.infra.zip_package import ZipPackage


class InstallCommand(Command):
    descriptor = CommandDescriptor.build(
        "install",
        description="Downloads the specified universal package and extracts its contents to a directory.",
        positional=[
            PositionalArgument(
                index=0,
                attribute="package_name",
                display_name="PackageName",
                description="Package name and group, such as group/name.",
            ),
            PositionalArgument(
                index=1,
                attribute="version",
                display_name="Version",
                description="Package version. If not specified, the latest version is retrieved.",
                optional=True,
            ),
        ],
        named=[
            NamedArgument(
                attribute="source",
                display_name="source",
                description="URL of a universal package feed.",
                optional=False,
            ),
            NamedArgument(
                attribute="target_directory",
                display_name="target",
                description="Directory where the contents of the package will be extracted.",
                optional=False,
            ),
            NamedArgument(
                attribute="authentication",
                display_name="user",
                description="User name and password to use for servers that require authentication.",
                kind=ValueKind.CREDENTIALS,
                alternate_names=("username",),
            ),
            OVERWRITE,
            NamedArgument(
                attribute="prerelease",
                display_name="prerelease",
                description="When version is not specified, will install the latest prerelease version instead of the latest stable version.",
                kind=ValueKind.BOOLEAN,
                default=False,
            ),
            PRESERVE_TIMESTAMPS,
        ],
    )

    package_name: str
    version: str | None
    source: str
    target_directory: str
    authentication: Credentials | None
    overwrite: bool
    prerelease: bool
    preserve_timestamps: bool

    async def run(self) -> int:
        package_id = PackageId.parse(self.package_name)

        async with FeedClient.create(self.source, self.authentication) as feed:
            version = await resolve_version(
                feed, package_id, self.version, prerelease=self.prerelease,
            )

            with tempfile.TemporaryDirectory(prefix="upack-") as scratch:
                package_path = Path(scratch) / "package.upack"
                try:
                    with DownloadProgress() as progress:
                        await feed.download_package(
                            package_id,
                            version,
                            package_path,
                            progress_callback=progress,
                        )
                except httpx.HTTPError as exc:
                    raise translate_feed_failure(exc, PACKAGE_NOT_FOUND_MESSAGE) from exc

                with ZipPackage(package_path) as package:
                    print_manifest(package.read_manifest())
                    report = await extract_entries(
                        Path(self.target_directory),
                        package.entries,
                        overwrite=self.overwrite,
                        preserve_timestamps=self.preserve_timestamps,
                    )

        echo(report.summary())
        return exit_codes.SUCCESS
