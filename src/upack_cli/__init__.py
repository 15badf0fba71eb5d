"""upack-cli: command-line client for universal packages.

Declarative command schemas, argument binding, and the package
resolution/extraction routines behind the ``upack`` commands.
"""

from upack_cli.version import __version__

__all__: list[str] = ["__version__"]
