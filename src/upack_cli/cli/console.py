"""Rich consoles shared by the CLI layer.

Command output goes to stdout; errors and progress go to stderr.  Both
consoles resolve their stream at print time, so output redirection
(and pytest's ``capsys``) applies.
"""

from __future__ import annotations

from rich.console import Console

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def echo(text: str) -> None:
    """Print plain text verbatim: no markup, no wrapping."""
    console.print(text, markup=False, soft_wrap=True)
