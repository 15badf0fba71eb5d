"""Allow ``python -m upack_cli`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m upack_cli`` behaves identically to the ``upack``
console script.
"""

from __future__ import annotations

from upack_cli.cli.app import cli

if __name__ == "__main__":
    cli()
