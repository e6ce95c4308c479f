"""
breachwatch CLI - Main entry point for the command-line interface.
"""

import logging

import click

from breachwatch import __version__
from breachwatch.hibp.cli import add_hibp_commands

LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


@click.group()
@click.version_option(version=__version__, prog_name="breachwatch")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="warning",
    show_default=True,
    help="Logging level",
)
@click.pass_context
def main(ctx: click.Context, log_level: str) -> None:
    """breachwatch - Have I Been Pwned lookups from the command line.

    Checks accounts, sites, pastes and passwords against the HIBP
    breach database.
    """
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=log_level.upper(),
    )
    ctx.ensure_object(dict)


add_hibp_commands(main)


if __name__ == "__main__":
    main()
