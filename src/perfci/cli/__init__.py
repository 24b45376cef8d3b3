"""CLI module for perfci commands.

This module re-exports all command functions so the entry point and tests can
import them from one place while each command lives in its own module.
"""

import click

from .. import __version__
from ..io import setup_logging
from .baseline_cmd import baseline
from .detect_cmd import detect
from .show_cmd import show
from .trigger_cmd import trigger


@click.group()
@click.version_option(version=__version__, prog_name="perfci")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    envvar="PERFCI_LOG_LEVEL",
    show_default=True,
    help="Logging verbosity",
)
def main(log_level: str) -> None:
    """📈 perfci: JMH performance gate for CI."""
    setup_logging(log_level)


main.add_command(detect)
main.add_command(baseline)
main.add_command(show)
main.add_command(trigger)

__all__ = [
    "baseline",
    "detect",
    "main",
    "show",
    "trigger",
]
