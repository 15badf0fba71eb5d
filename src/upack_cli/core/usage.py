"""Usage and help text synthesis.

Pure functions of a :class:`CommandDescriptor`: no I/O and no access to
bound values, so the output is fully deterministic.
"""

from __future__ import annotations

from collections.abc import Iterable

from upack_cli.core.arguments import CommandDescriptor, NamedArgument, PositionalArgument

DEFAULT_PROGRAM = "upack"


def _bracket(text: str, optional: bool) -> str:
    return f"[{text}]" if optional else text


def positional_usage(argument: PositionalArgument) -> str:
    return _bracket(f"«{argument.display_name}»", argument.optional)


def named_usage(argument: NamedArgument) -> str:
    # Optional boolean flags defaulting to false read as bare switches.
    if argument.is_flag:
        return f"[--{argument.display_name}]"
    return _bracket(
        f"--{argument.display_name}=«{argument.display_name}»",
        argument.optional,
    )


def format_usage(descriptor: CommandDescriptor, program: str = DEFAULT_PROGRAM) -> str:
    """Return the one-line usage string, e.g.

    ``upack unpack «Package» «Target» [--overwrite]``
    """
    parts = [program, descriptor.display_name]
    parts.extend(positional_usage(arg) for arg in descriptor.positional)
    parts.extend(named_usage(arg) for arg in descriptor.named)
    return " ".join(parts)


def format_help(descriptor: CommandDescriptor, program: str = DEFAULT_PROGRAM) -> str:
    """Return the multi-paragraph help text.

    Layout: the usage line, a blank line, the command description, then
    one ``DisplayName - Description`` line per argument in usage order.
    """
    lines = [f"Usage: {format_usage(descriptor, program)}", "", descriptor.description]
    help_lines = [arg.help_line() for arg in descriptor.arguments]
    if help_lines:
        lines.append("")
        lines.extend(help_lines)
    return "\n".join(lines)


def format_command_list(
    descriptors: Iterable[CommandDescriptor],
    program: str = DEFAULT_PROGRAM,
) -> str:
    """Return the top-level usage listing every command."""
    ordered = sorted(descriptors, key=lambda d: d.display_name)
    width = max((len(d.display_name) for d in ordered), default=0)
    lines = [f"Usage: {program} «command»", "", "Commands:"]
    lines.extend(
        f"  {d.display_name.ljust(width)}  {d.description}" for d in ordered
    )
    lines.extend(["", f"Run '{program} help «command»' for details on a command."])
    return "\n".join(lines)
