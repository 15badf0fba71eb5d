"""Registered ``upack`` commands, keyed by display name."""

from __future__ import annotations

from upack_cli.cli.commands.install import InstallCommand
from upack_cli.cli.commands.metadata import MetadataCommand
from upack_cli.cli.commands.unpack import UnpackCommand
from upack_cli.core.command import Command

COMMANDS: dict[str, type[Command]] = {
    command.descriptor.display_name: command
    for command in (InstallCommand, MetadataCommand, UnpackCommand)
}


def find_command(name: str) -> type[Command] | None:
    """Look up a command by display name, ignoring case."""
    folded = name.casefold()
    for display_name, command in COMMANDS.items():
        if display_name.casefold() == folded:
            return command
    return None


__all__: list[str] = [
    "COMMANDS",
    "InstallCommand",
    "MetadataCommand",
    "UnpackCommand",
    "find_command",
]
