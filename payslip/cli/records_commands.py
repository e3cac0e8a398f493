"""Records CLI commands for Payslip Calc.

Browse and manage the history of generated payslips.
"""

import json
from datetime import datetime, time, timezone
from typing import Optional

import click

from payslip.sdk import RecordStore, format_cents_as_decimal


def parse_date(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """Parse YYYY-MM-DD (or a full ISO timestamp) as a UTC datetime."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"Invalid date '{value}'. Use YYYY-MM-DD.")
    if len(value) == 10 and end_of_day:
        parsed = datetime.combine(parsed.date(), time.max)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_record_row(record) -> str:
    """Format a single record as a table row."""
    return (
        f"{record.id or '':<10} {record.timestamp.strftime('%Y-%m-%d %H:%M'):<17} "
        f"{record.employee_name[:20]:<20} "
        f"{format_cents_as_decimal(record.annual_salary_cents):>13} "
        f"{format_cents_as_decimal(record.monthly_income_tax_cents):>11} "
        f"{record.currency_code:<4}"
    )


@click.group()
def records_cli():
    """Manage the payslip history.

    Every 'payslip generate' (unless --no-save) stores one record.
    """
    pass


@records_cli.command("list")
@click.option("--employee", help="Only records for this employee (exact name).")
@click.option("--since", help="Only records on or after this date (YYYY-MM-DD).")
@click.option("--until", help="Only records on or before this date (YYYY-MM-DD).")
@click.option("--count", "count_only", is_flag=True, help="Print only the number of matching records.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def records_list(employee: Optional[str], since: Optional[str], until: Optional[str],
                 count_only: bool, output_format: str):
    """List salary computations, newest first.

    \b
    Examples:
      payslip records list
      payslip records list --employee "Ren"
      payslip records list --since 2025-01-01 --until 2025-03-31
      payslip records list --count
    """
    store = RecordStore()
    start = parse_date(since)
    end = parse_date(until, end_of_day=True)

    if start or end:
        results = store.find_by_date_range(
            start or datetime.min.replace(tzinfo=timezone.utc),
            end or datetime.max.replace(tzinfo=timezone.utc),
        )
    else:
        results = store.find_all()

    if employee:
        results = [r for r in results if r.employee_name == employee]

    if count_only:
        click.echo(len(results))
        return

    if output_format == "json":
        click.echo(json.dumps([r.model_dump(mode="json") for r in results], indent=2))
        return

    if not results:
        click.echo("No salary computations found.")
        click.echo("\nRun 'payslip generate NAME SALARY' to create one.")
        return

    click.echo("-" * 80)
    click.echo(f"{'ID':<10} {'TIMESTAMP':<17} {'EMPLOYEE':<20} {'ANNUAL':>13} {'MONTHLY TAX':>11} CUR")
    for record in results:
        click.echo(format_record_row(record))
    click.echo("-" * 80)
    click.echo(f"Total: {len(results)} record(s)")


@records_cli.command("show")
@click.argument("record_id")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def records_show(record_id: str, output_format: str):
    """Show details of a single record.

    \b
    Arguments:
      RECORD_ID    The 8-character record ID (from 'records list')
    """
    record = RecordStore().get(record_id)

    if not record:
        raise click.ClickException(f"Record not found: {record_id}")

    if output_format == "json":
        click.echo(json.dumps(record.model_dump(mode="json"), indent=2))
        return

    click.echo(f"Record: {record_id}")
    click.echo("-" * 40)
    click.echo(f"Employee: {record.employee_name}")
    click.echo(f"Timestamp: {record.timestamp.isoformat()}")
    click.echo(f"Currency: {record.currency_code}")
    click.echo(f"Tax strategy: {record.tax_strategy_used or 'unknown'}")
    click.echo(f"Annual salary: {format_cents_as_decimal(record.annual_salary_cents)}")
    click.echo(f"Gross monthly income: {format_cents_as_decimal(record.gross_monthly_income_cents)}")
    click.echo(f"Monthly income tax: {format_cents_as_decimal(record.monthly_income_tax_cents)}")
    click.echo(f"Net monthly income: {format_cents_as_decimal(record.net_monthly_income_cents)}")


@records_cli.command("remove")
@click.argument("record_id")
def records_remove(record_id: str):
    """Remove a single record by ID."""
    if not RecordStore().remove(record_id):
        raise click.ClickException(f"Record not found: {record_id}")
    click.echo(f"Removed record {record_id}")


@records_cli.command("clear")
@click.option("--force", is_flag=True, help="Skip confirmation prompt.")
def records_clear(force: bool):
    """Delete the entire payslip history."""
    store = RecordStore()
    total = store.count()

    if total == 0:
        click.echo("No records to delete.")
        return

    if not force:
        click.confirm(f"Delete all {total} record(s)?", abort=True)

    deleted = store.clear()
    click.echo(f"Deleted {deleted} record(s).")
