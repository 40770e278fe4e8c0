"""This module initializes the CLI application."""

import os

import click
from licitasaas.cli.analysis import analysis_group
from licitasaas.cli.config import config_group
from licitasaas.cli.serve import serve


def create_cli() -> click.Group:
    """Create and configure the main CLI group with all subcommands.

    Returns:
        The main Click command group for the application.
    """

    @click.group()
    @click.option(
        "--log-level",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
        help="Override the default log level for this command.",
    )
    def cli(log_level: str | None) -> None:
        """Command-line interface for the LicitaSaaS edital analysis backend.

        Args:
            log_level: The desired logging level.
        """
        if log_level:
            os.environ["LOG_LEVEL"] = log_level.upper()

    cli.add_command(analysis_group)
    cli.add_command(config_group)
    cli.add_command(serve)

    return cli
