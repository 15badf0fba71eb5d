"""Argument and command descriptors.

A command declares its schema statically: an ordered set of
:class:`PositionalArgument` slots and a set of :class:`NamedArgument`
options, gathered into a :class:`CommandDescriptor` through
:meth:`CommandDescriptor.build`.  Descriptors are immutable and carry
everything the binder and the usage formatter need; nothing is
discovered by inspecting the command class at run time.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

from upack_cli.exceptions import CommandConfigurationError


class ValueKind(enum.Enum):
    """The closed set of value types an argument can bind to."""

    BOOLEAN = "boolean"
    TEXT = "text"
    CREDENTIALS = "credentials"


# ---------------------------------------------------------------------------
# Argument descriptors
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True, kw_only=True)
class _Argument:
    attribute: str
    """Attribute of the command object that receives the bound value."""

    display_name: str = ""
    """Name shown in usage and help; defaults to :attr:`attribute`."""

    description: str = ""
    kind: ValueKind = ValueKind.TEXT
    default: object = None

    def __post_init__(self) -> None:
        if not self.attribute:
            raise CommandConfigurationError("argument attribute must not be empty")
        if not isinstance(self.kind, ValueKind):
            raise CommandConfigurationError(
                f"unsupported value kind {self.kind!r} for {self.attribute!r}",
            )
        if not self.display_name:
            object.__setattr__(self, "display_name", self.attribute)

    def help_line(self) -> str:
        return f"{self.display_name} - {self.description}"


@dataclass(frozen=True, slots=True, kw_only=True)
class PositionalArgument(_Argument):
    """An argument matched by its position on the command line."""

    index: int
    optional: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class NamedArgument(_Argument):
    """An argument matched by ``--name=value`` (or bare ``--name``)."""

    optional: bool = True
    alternate_names: tuple[str, ...] = ()

    @property
    def names(self) -> tuple[str, ...]:
        """Primary display name followed by the alternates."""
        return (self.display_name, *self.alternate_names)

    def matches(self, name: str) -> bool:
        folded = name.casefold()
        return any(candidate.casefold() == folded for candidate in self.names)

    @property
    def is_flag(self) -> bool:
        """True for optional booleans that default to ``False``."""
        return (
            self.kind is ValueKind.BOOLEAN
            and self.optional
            and self.default is False
        )


# ---------------------------------------------------------------------------
# Command descriptor
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CommandDescriptor:
    """Complete, immutable schema of one command."""

    display_name: str
    description: str = ""
    positional: tuple[PositionalArgument, ...] = ()
    named: tuple[NamedArgument, ...] = ()

    @classmethod
    def build(
        cls,
        display_name: str,
        *,
        description: str = "",
        positional: Iterable[PositionalArgument] = (),
        named: Iterable[NamedArgument] = (),
    ) -> CommandDescriptor:
        """Validate and assemble a descriptor.

        Positional arguments are sorted by ascending index.

        Raises
        ------
        CommandConfigurationError
            If two positional arguments share an index, or two arguments
            bind to the same attribute.
        """
        ordered = tuple(sorted(positional, key=lambda arg: arg.index))
        seen_indices: set[int] = set()
        for arg in ordered:
            if arg.index in seen_indices:
                raise CommandConfigurationError(
                    f"command {display_name!r} declares positional index "
                    f"{arg.index} more than once",
                )
            seen_indices.add(arg.index)

        named_args = tuple(named)
        seen_attributes: set[str] = set()
        for arg in (*ordered, *named_args):
            if arg.attribute in seen_attributes:
                raise CommandConfigurationError(
                    f"command {display_name!r} binds attribute "
                    f"{arg.attribute!r} more than once",
                )
            seen_attributes.add(arg.attribute)

        return cls(
            display_name=display_name,
            description=description,
            positional=ordered,
            named=named_args,
        )

    @property
    def arguments(self) -> tuple[PositionalArgument | NamedArgument, ...]:
        """Every argument, positional first, in usage order."""
        return (*self.positional, *self.named)

    def find_named(self, name: str) -> NamedArgument | None:
        """Return the first named argument answering to *name*.

        Matching is case-insensitive over primary and alternate names.
        """
        for arg in self.named:
            if arg.matches(name):
                return arg
        return None

    def defaults(self) -> dict[str, object]:
        """Map every bound attribute to its declared default."""
        return {arg.attribute: arg.default for arg in self.arguments}
