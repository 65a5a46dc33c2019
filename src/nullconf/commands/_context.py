"""AppContext: shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Configures logging and owns result emission
(stdout/stderr routing and exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from nullconf.config.logging import configure_logging
from nullconf.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from nullconf.config.settings import NullconfSettings
    from nullconf.services.result import ServiceResult


class AppContext:
    """Settings plus output handling shared across subcommands."""

    def __init__(self, settings: NullconfSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    def emit(self, result: ServiceResult) -> None:
        """Write a ServiceResult and exit 1 on failure.

        Success goes to stdout; failures go to stderr.
        """
        output = format_result(
            result,
            settings=OutputSettings(
                json_output=self.settings.json_output,
                quiet=self.settings.quiet,
                verbose=self.settings.verbose,
            ),
        )
        if result.ok:
            click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            return
        click.echo(output, err=True)
        raise SystemExit(1)
