"""Root CLI group for nullconf with global flags and command registration."""

from __future__ import annotations

import click

from nullconf import __version__
from nullconf.commands import register_commands
from nullconf.commands._context import AppContext
from nullconf.config.settings import NullconfSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="nullconf")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--weak", "weakly_typed_input", is_flag=True, help="Lenient scalar decoding.")
@click.option("--error-unused", is_flag=True, help="Fail on document keys with no field.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    weakly_typed_input: bool,
    error_unused: bool,
) -> None:
    """nullconf: duration and nullable config value tools."""
    settings = NullconfSettings.from_cli(
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        weakly_typed_input=weakly_typed_input,
        error_unused=error_unused,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
