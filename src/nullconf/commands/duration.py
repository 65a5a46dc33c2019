"""Command group: parse and normalize durations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nullconf.commands._base import NullconfGroup

if TYPE_CHECKING:
    from nullconf.commands._context import AppContext


@click.group(
    cls=NullconfGroup,
    examples="""\
  nullconf duration parse 1m15s
  nullconf duration parse 1.5h
  nullconf duration json 75000000000
  nullconf duration json '"10s"'
  nullconf duration json null --nullable""",
)
def duration() -> None:
    """Parse durations from text or JSON."""


@duration.command(
    examples="""\
  nullconf duration parse 90s
  nullconf --json duration parse -- -1h2m3.5s
  nullconf -q duration parse 3600s""",
)
@click.argument("text")
@click.pass_obj
def parse(app: AppContext, text: str) -> None:
    """Parse TEXT (e.g. 1h2m3s) and print its canonical form."""
    from nullconf.services.convert import ConvertService

    app.emit(ConvertService(app.settings).parse_duration(text))


@duration.command(
    name="json",
    examples="""\
  nullconf duration json 75000000000
  nullconf duration json '"1m15s"'
  nullconf duration json null --nullable""",
)
@click.argument("raw")
@click.option("--nullable", is_flag=True, help="Decode as a nullable duration (accepts null).")
@click.pass_obj
def json_cmd(app: AppContext, raw: str, nullable: bool) -> None:
    """Decode RAW JSON: a number of nanoseconds or a duration string."""
    from nullconf.services.convert import ConvertService

    app.emit(ConvertService(app.settings).duration_from_json(raw, nullable=nullable))
