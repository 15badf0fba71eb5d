"""CLI application entry point and command routing for upack.

This module is the **sole error boundary** for the entire application.
It catches :class:`~upack_cli.exceptions.UpackError`, extraction
``OSError``, ``KeyboardInterrupt``, and any unexpected ``Exception``,
rendering user-friendly messages via Rich and returning well-defined
exit codes.

Architecture notes
------------------
* No business logic lives here: commands delegate to the core and
  infrastructure layers.
* Tokens arrive already split by the shell; binding them to a command
  is done by :func:`~upack_cli.core.binding.bind_arguments`.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import asyncio
import logging
import sys

from rich.markup import escape

from upack_cli.cli import exit_codes
from upack_cli.cli.commands import COMMANDS, find_command
from upack_cli.cli.console import echo, err_console
from upack_cli.config import UpackSettings
from upack_cli.core.binding import bind_arguments
from upack_cli.core.usage import format_command_list, format_help, format_usage
from upack_cli.exceptions import UpackError, UsageError
from upack_cli.version import __version__

logger = logging.getLogger(__name__)

_HELP_FLAGS = frozenset({"--help", "-h", "-?", "/?"})
_VERSION_FLAGS = frozenset({"--version", "-V"})


def _configure_logging(settings: UpackSettings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_help(tokens: list[str], program: str) -> int:
    """``upack help [«command»]``."""
    if not tokens:
        echo(format_command_list(
            (command.descriptor for command in COMMANDS.values()), program,
        ))
        return exit_codes.SUCCESS

    command_type = find_command(tokens[0])
    if command_type is None:
        raise UsageError(
            [f"Unknown command: {tokens[0]}"],
            usage=f"Run '{program} help' to list the available commands.",
        )
    echo(format_help(command_type.descriptor, program))
    return exit_codes.SUCCESS


def _handle_command(name: str, tokens: list[str], program: str) -> int:
    command_type = find_command(name)
    if command_type is None:
        raise UsageError(
            [f"Unknown command: {name}"],
            usage=f"Run '{program} help' to list the available commands.",
        )

    if any(token in _HELP_FLAGS for token in tokens):
        echo(format_help(command_type.descriptor, program))
        return exit_codes.SUCCESS

    result = bind_arguments(command_type, tokens)
    if not result.ok:
        raise UsageError(
            result.errors,
            usage=format_usage(command_type.descriptor, program),
        )

    logger.debug("running %s", command_type.descriptor.display_name)
    return asyncio.run(result.command.run())


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the upack CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    settings = UpackSettings()
    _configure_logging(settings)
    program = settings.program_name

    if not args or args[0] in _HELP_FLAGS:
        return _handle_help([], program)

    if args[0] in _VERSION_FLAGS:
        echo(f"{program} {__version__}")
        return exit_codes.SUCCESS

    name, tokens = args[0], args[1:]
    if name.lower() == "help":
        return _handle_help(tokens, program)

    return _handle_command(name, tokens, program)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except UpackError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            err_console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except OSError as exc:
        err_console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        err_console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
