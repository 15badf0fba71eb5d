"""Value binding: raw command-line text to typed command fields.

:func:`bind_value` converts one raw token for one argument and returns
either the typed value or a :class:`BindError` value; malformed user
input never raises.  :func:`bind_arguments` drives it over a full token
list and collects every problem into a :class:`ParseResult`.

Only a mis-declared schema raises, with
:class:`~upack_cli.exceptions.CommandConfigurationError`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

from upack_cli.core.arguments import NamedArgument, PositionalArgument, ValueKind
from upack_cli.core.models import Credentials
from upack_cli.exceptions import CommandConfigurationError

if TYPE_CHECKING:
    from upack_cli.core.command import Command

CommandT = TypeVar("CommandT", bound="Command")


@dataclass(frozen=True, slots=True)
class BindError:
    """A user-input problem with a single argument."""

    display_name: str
    reason: str

    def __str__(self) -> str:
        return f"--{self.display_name} {self.reason}."


def bind_value(
    argument: PositionalArgument | NamedArgument,
    raw: str | None,
) -> object | BindError:
    """Convert *raw* into the value type declared by *argument*.

    Rules
    -----
    * ``BOOLEAN``: empty or absent means ``True``; otherwise the literal
      words ``true``/``false`` in any case.
    * ``TEXT``: verbatim, including the empty string.
    * ``CREDENTIALS``: blank means no credentials (``None``); otherwise
      ``username:password`` split at the first colon only.

    Raises
    ------
    CommandConfigurationError
        If the argument declares a kind this binder does not handle.
    """
    kind = argument.kind
    match kind:
        case ValueKind.BOOLEAN:
            if not raw:
                return True
            word = raw.strip().lower()
            if word == "true":
                return True
            if word == "false":
                return False
            return BindError(argument.display_name, 'must be "true" or "false"')
        case ValueKind.TEXT:
            return raw if raw is not None else ""
        case ValueKind.CREDENTIALS:
            if raw is None or not raw.strip():
                return None
            username, sep, password = raw.partition(":")
            if not sep:
                return BindError(
                    argument.display_name,
                    'must be in the format "username:password"',
                )
            return Credentials(username=username, password=password)
        case _:
            raise CommandConfigurationError(
                f"unsupported value kind {kind!r} for {argument.attribute!r}",
            )


# ---------------------------------------------------------------------------
# Token list binding
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class ParseResult(Generic[CommandT]):
    """Outcome of binding a token list to a fresh command instance."""

    command: CommandT
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _split_named(token: str) -> tuple[str, str]:
    name, _, value = token[2:].partition("=")
    return name, value


def bind_arguments(
    command_type: type[CommandT],
    tokens: Sequence[str],
) -> ParseResult[CommandT]:
    """Bind *tokens* to a new instance of *command_type*.

    Tokens starting with ``--`` are named (``--name=value`` or bare
    ``--name``); every other token fills the next positional slot.
    Fields keep their declared defaults unless a token binds them.
    """
    descriptor = command_type.descriptor
    result: ParseResult[CommandT] = ParseResult(command=command_type())
    seen: set[str] = set()
    positional_slots = iter(descriptor.positional)

    for token in tokens:
        argument: PositionalArgument | NamedArgument | None
        if token.startswith("--"):
            name, raw = _split_named(token)
            argument = descriptor.find_named(name)
            if argument is None:
                result.errors.append(f"Unrecognized argument: --{name}")
                continue
        else:
            raw = token
            argument = next(positional_slots, None)
            if argument is None:
                result.errors.append(f"Unexpected argument: {token}")
                continue

        seen.add(argument.attribute)
        value = bind_value(argument, raw)
        if isinstance(value, BindError):
            result.errors.append(str(value))
            continue
        setattr(result.command, argument.attribute, value)

    for argument in descriptor.arguments:
        if not argument.optional and argument.attribute not in seen:
            result.errors.append(
                f"Missing required argument: {argument.display_name}",
            )

    return result
