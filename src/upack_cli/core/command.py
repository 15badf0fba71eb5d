"""Command base class.

Concrete commands declare a class-level :class:`CommandDescriptor` and
implement :meth:`Command.run`.  A new instance starts with every bound
attribute set to the declared default; :func:`bind_arguments` then
overwrites the attributes the invocation supplies.

Example::

    class Greet(Command):
        descriptor = CommandDescriptor.build(
            "greet",
            description="Say hello.",
            positional=[PositionalArgument(index=0, attribute="name")],
        )

        name: str

        async def run(self) -> int:
            ...
"""

from __future__ import annotations

import abc
from typing import ClassVar

from upack_cli.core.arguments import CommandDescriptor


class Command(abc.ABC):
    """A bound, executable command."""

    descriptor: ClassVar[CommandDescriptor]

    def __init__(self) -> None:
        for attribute, default in self.descriptor.defaults().items():
            setattr(self, attribute, default)

    @abc.abstractmethod
    async def run(self) -> int:
        """Execute the command and return the process exit status."""
