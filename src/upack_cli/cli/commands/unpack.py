"""``upack unpack``: extract a local package file into a directory."""

from __future__ import annotations

from pathlib import Path

from upack_cli.cli import exit_codes
from upack_cli.cli.commands.metadata import print_manifest
from upack_cli.cli.console import echo
from upack_cli.core.arguments import (
    CommandDescriptor,
    NamedArgument,
    PositionalArgument,
    ValueKind,
)
from upack_cli.core.command import Command
from upack_cli.core.extraction import extract_entries
from upack_cli.infra.zip_package import ZipPackage

OVERWRITE = NamedArgument(
    attribute="overwrite",
    display_name="overwrite",
    description="When specified, overwrite files in the target directory.",
    kind=ValueKind.BOOLEAN,
    default=False,
)

PRESERVE_TIMESTAMPS = NamedArgument(
    attribute="preserve_timestamps",
    display_name="preserve-timestamps",
    description=(
        "When specified, files will be written to disk using the "
        "timestamps recorded in the package."
    ),
    kind=ValueKind.BOOLEAN,
    default=False,
)


class UnpackCommand(Command):
    descriptor = CommandDescriptor.build(
        "unpack",
        description="Extracts the contents of a universal package to a directory.",
        positional=[
            PositionalArgument(
                index=0,
                attribute="package_path",
                display_name="Package",
                description="Path of a valid .upack file.",
            ),
            PositionalArgument(
                index=1,
                attribute="target_directory",
                display_name="Target",
                description="Directory where the contents of the package will be extracted.",
            ),
        ],
        named=[OVERWRITE, PRESERVE_TIMESTAMPS],
    )

    package_path: str
    target_directory: str
    overwrite: bool
    preserve_timestamps: bool

    async def run(self) -> int:
        with ZipPackage(self.package_path) as package:
            print_manifest(package.read_manifest())
            report = await extract_entries(
                Path(self.target_directory),
                package.entries,
                overwrite=self.overwrite,
                preserve_timestamps=self.preserve_timestamps,
            )
        echo(report.summary())
        return exit_codes.SUCCESS
