"""Settings CLI commands for Payslip Calc.

Manages settings.json - data directory and default currency.
"""

import click
from pathlib import Path

from payslip.sdk import (
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_settings_path,
    get_data_path,
    get_default_currency,
)

KNOWN_SETTINGS = ("data_dir", "default_currency")


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - data_dir: custom data directory path
    - default_currency: ISO 4217 code used when --currency is omitted
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective values:")
    click.echo(f"  data_dir: {get_data_path()}")
    click.echo(f"  default_currency: {get_default_currency()}")


@settings.command("set")
@click.argument("key", type=click.Choice(KNOWN_SETTINGS))
@click.argument("value")
def settings_set(key, value):
    """Set a setting value.

    \b
    Examples:
      payslip settings set default_currency SGD
    """
    try:
        path = set_setting(key, value)
    except ValueError as e:
        raise click.ClickException(str(e))
    click.echo(f"Set {key}: {get_setting(key)}")
    click.echo(f"Saved to: {path}")


@settings.command("data-dir")
@click.argument("path", required=False, type=click.Path(file_okay=False))
@click.option("--clear", is_flag=True, help="Forget the custom directory and use the XDG default.")
def settings_data_dir(path, clear):
    """Show, set or clear where payslip records are stored.

    \b
    Examples:
      payslip settings data-dir
      payslip settings data-dir ~/payslips
      payslip settings data-dir --clear
    """
    if clear:
        current = load_settings()
        if current.pop("data_dir", None) is None:
            click.echo("data_dir was not set.")
            return
        save_settings(current)
        click.echo("Cleared data_dir setting.")
        click.echo("Using the default data directory.")
        return

    if path:
        data_path = Path(path).expanduser().resolve()
        try:
            data_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise click.ClickException(f"Cannot use {data_path} as data directory: {e}")
        set_setting("data_dir", str(data_path))
        click.echo(f"Set data_dir: {data_path}")
        return

    source = "custom" if get_setting("data_dir") else "default"
    click.echo(f"Data directory: {get_data_path()} ({source})")
