"""Command: decode a JSON document into typed nullable fields."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nullconf.commands._base import NullconfCommand

if TYPE_CHECKING:
    from nullconf.commands._context import AppContext


@click.command(
    cls=NullconfCommand,
    examples="""\
  nullconf decode '{"timeout": "10s"}' -f timeout=duration
  nullconf decode '{"retries": 3, "name": "api"}' -f retries=int -f name=string
  nullconf --weak decode '{"hosts": "a"}' -f hosts=strings
  cat doc.json | nullconf decode - -f enabled=bool""",
)
@click.argument("document")
@click.option(
    "-f",
    "--field",
    "fields",
    multiple=True,
    required=True,
    help="Field declaration NAME=KIND (string, bool, int, float, duration, strings).",
)
@click.pass_obj
def decode(app: AppContext, document: str, fields: tuple[str, ...]) -> None:
    """Decode DOCUMENT (JSON, or - for stdin) against the declared fields."""
    from nullconf.services.convert import ConvertService

    if document == "-":
        document = click.get_text_stream("stdin").read()
    app.emit(ConvertService(app.settings).decode_fields(document, list(fields)))
