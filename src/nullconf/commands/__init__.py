"""Subcommand modules for nullconf.

:func:`register_commands` imports command modules lazily so
``nullconf --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``duration`` group and the ``decode`` command."""
    from nullconf.commands.decode import decode
    from nullconf.commands.duration import duration

    cli.add_command(duration)
    cli.add_command(decode)
