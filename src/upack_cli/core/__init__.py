"""Core layer: command descriptors, binding, and package routines.

Rules
-----
* No ``print()`` calls and no console rendering.
* No imports from ``cli`` or ``infra``.
* Collaborators (feeds, package readers) are reached only through the
  protocols in :mod:`upack_cli.core.protocols`.
* ``httpx`` is imported for its error types only, so transport failures
  can be classified here.
"""

from upack_cli.core.arguments import (
    CommandDescriptor,
    NamedArgument,
    PositionalArgument,
    ValueKind,
)
from upack_cli.core.binding import BindError, ParseResult, bind_arguments, bind_value
from upack_cli.core.command import Command
from upack_cli.core.extraction import extract_entries
from upack_cli.core.failures import translate_feed_failure
from upack_cli.core.models import (
    Credentials,
    ExtractionReport,
    PackageId,
    PackageManifest,
    PackageVersion,
)
from upack_cli.core.protocols import PackageDownloader, PackageEntry, VersionSource
from upack_cli.core.usage import format_help, format_usage
from upack_cli.core.version_resolver import resolve_version

__all__: list[str] = [
    "BindError",
    "Command",
    "CommandDescriptor",
    "Credentials",
    "ExtractionReport",
    "NamedArgument",
    "PackageDownloader",
    "PackageEntry",
    "PackageId",
    "PackageManifest",
    "PackageVersion",
    "ParseResult",
    "PositionalArgument",
    "ValueKind",
    "VersionSource",
    "bind_arguments",
    "bind_value",
    "extract_entries",
    "format_help",
    "format_usage",
    "resolve_version",
    "translate_feed_failure",
]
