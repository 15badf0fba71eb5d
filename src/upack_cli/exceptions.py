"""Custom exception hierarchy for upack-cli.

All user-facing exceptions that cross layer boundaries must inherit from
:class:`UpackError`.  Raw third-party exceptions (e.g. from httpx or
zipfile) must NEVER propagate beyond the infrastructure layer: they must
be caught and re-raised as a typed subclass defined here.

Hierarchy
---------
UpackError
├── UsageError
├── InvalidVersionError
├── NoVersionsFoundError
├── InvalidFeedUrlError
├── FeedError
├── PackageFormatError
└── UnsafeEntryPathError

CommandConfigurationError sits outside the hierarchy on purpose: it
signals a mis-declared command schema and must never be rendered as a
routine user error.
"""

from __future__ import annotations

from collections.abc import Sequence


class UpackError(Exception):
    """Base exception for all user-facing upack errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Command line ----------------------------------------------------------

class UsageError(UpackError):
    """Raised when invocation tokens cannot be bound to a command."""

    def __init__(
        self,
        messages: Sequence[str],
        *,
        usage: str | None = None,
    ) -> None:
        super().__init__("\n".join(messages), hint=usage)
        self.messages: tuple[str, ...] = tuple(messages)


# --- Version resolution ----------------------------------------------------

class InvalidVersionError(UpackError):
    """Raised when an explicit version number cannot be parsed."""


class NoVersionsFoundError(UpackError):
    """Raised when the feed lists no versions for a package."""


# --- Feed access -----------------------------------------------------------

class InvalidFeedUrlError(UpackError):
    """Raised when the feed address is not an absolute http(s) URL."""


class FeedError(UpackError):
    """Raised for a transport failure after translation to a user message."""


# --- Package content -------------------------------------------------------

class PackageFormatError(UpackError):
    """Raised when a package file or its manifest cannot be read."""


class UnsafeEntryPathError(UpackError):
    """Raised when a content entry would be written outside the target."""


# --- Schema defects --------------------------------------------------------

class CommandConfigurationError(Exception):
    """Raised when a command schema is declared incorrectly.

    Duplicate positional indices, duplicate attributes, or a value kind
    the binder does not support.  This is a programming error and is
    never caught by command code.
    """
