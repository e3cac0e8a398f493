"""Payslip Calc CLI - Command-line interface for tax and payslip calculations."""

import click

from payslip import __version__

from .payslip_commands import brackets, generate, stats
from .records_commands import records_cli as records_group
from .settings_commands import settings as settings_group


@click.group()
@click.version_option(version=__version__, prog_name="payslip")
def cli():
    """Payslip Calc - progressive income tax and monthly payslips.

    Commands for computing monthly payslips from annual salaries,
    inspecting tax bracket tables, and browsing payslip history.

    Configuration is loaded from (in order):

    \b
    1. PAYSLIP_CONFIG_PATH environment variable
    2. ~/.config/payslip-calc/settings.json (XDG default)
    """
    pass


cli.add_command(generate)
cli.add_command(brackets)
cli.add_command(stats)
cli.add_command(records_group, name="records")
cli.add_command(settings_group)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
