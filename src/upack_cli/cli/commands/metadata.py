"""``upack metadata``: print a package file's manifest."""

from __future__ import annotations

from upack_cli.cli import exit_codes
from upack_cli.cli.console import echo
from upack_cli.core.arguments import CommandDescriptor, PositionalArgument
from upack_cli.core.command import Command
from upack_cli.core.models import PackageManifest
from upack_cli.infra.zip_package import ZipPackage


def print_manifest(manifest: PackageManifest) -> None:
    for line in manifest.describe():
        echo(line)


class MetadataCommand(Command):
    descriptor = CommandDescriptor.build(
        "metadata",
        description="Displays the metadata of a universal package file.",
        positional=[
            PositionalArgument(
                index=0,
                attribute="package_path",
                display_name="Package",
                description="Path of a valid .upack file.",
            ),
        ],
    )

    package_path: str

    async def run(self) -> int:
        with ZipPackage(self.package_path) as package:
            print_manifest(package.read_manifest())
        return exit_codes.SUCCESS
