"""Payslip CLI commands: generate, brackets, stats.

The CLI is where dollars become cents: ANNUAL_SALARY and bracket files
are read in whole currency units and converted before reaching the SDK.
"""

import json
import math
from typing import Optional

import click

from payslip.sdk import (
    BracketFileError,
    InvalidTaxBracketsError,
    PayslipService,
    PayslipServiceError,
    TaxCalculationStrategy,
    TaxStrategyFactory,
    dollars_to_cents,
    format_cents_as_decimal,
    format_payslip,
    load_bracket_table,
)
from payslip.sdk.taxes import CUSTOM_STRATEGY_NAME


def strategy_options(func):
    """Shared options selecting which tax strategy to use."""
    func = click.option("--brackets", "brackets_file", type=click.Path(dir_okay=False),
                        help="YAML bracket table to use instead of a built-in table.")(func)
    func = click.option("--flat-rate", type=float,
                        help="Use a flat tax at this rate (0-1) instead of brackets.")(func)
    func = click.option("--strategy", "strategy_key", type=click.Choice(["default", "alternative"]),
                        default="default", show_default=True,
                        help="Built-in bracket table.")(func)
    return func


def resolve_strategy(
    factory: TaxStrategyFactory,
    strategy_key: str = "default",
    flat_rate: Optional[float] = None,
    brackets_file: Optional[str] = None,
) -> TaxCalculationStrategy:
    """Build the strategy selected by CLI options.

    --brackets takes precedence over --flat-rate, which takes precedence
    over --strategy.
    """
    if brackets_file and flat_rate is not None:
        raise click.BadParameter("Use either --brackets or --flat-rate, not both.")

    try:
        if brackets_file:
            name, brackets = load_bracket_table(brackets_file)
            return factory.create_custom_strategy(brackets, name=name or CUSTOM_STRATEGY_NAME)
        if flat_rate is not None:
            return factory.create_flat_tax_strategy(flat_rate)
    except (BracketFileError, InvalidTaxBracketsError) as e:
        raise click.ClickException(str(e))

    if strategy_key == "alternative":
        return factory.create_alternative_strategy()
    return factory.create_default_strategy()


@click.command("generate")
@click.argument("employee_name")
@click.argument("annual_salary", type=float)
@click.option("--currency", help="ISO 4217 currency code (default: settings default_currency).")
@strategy_options
@click.option("--save/--no-save", default=True, show_default=True,
              help="Store the computation in the records history.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def generate(employee_name, annual_salary, currency, strategy_key, flat_rate, brackets_file,
             save, output_format):
    """Generate a monthly payslip from an annual salary.

    ANNUAL_SALARY is in whole currency units (e.g. 60000 or 60000.50).

    \b
    Examples:
      payslip generate "Ren" 60000
      payslip generate "Ren" 60000 --strategy alternative --no-save
      payslip generate "Ren" 100000 --flat-rate 0.15
      payslip generate "Ren" 80150 --brackets my_table.yaml --format json
    """
    if not math.isfinite(annual_salary) or annual_salary <= 0:
        raise click.BadParameter("Annual salary must be a positive number.",
                                 param_hint="ANNUAL_SALARY")

    service = PayslipService()
    strategy = resolve_strategy(service.factory, strategy_key, flat_rate, brackets_file)

    try:
        result = service.generate_monthly_payslip(
            employee_name,
            dollars_to_cents(annual_salary),
            currency_code=currency,
            save=save,
            strategy=strategy,
        )
    except PayslipServiceError as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps({
            "employee_name": result.employee_name,
            "gross_monthly_income": result.gross_monthly_income_display,
            "monthly_income_tax": result.monthly_income_tax_display,
            "net_monthly_income": result.net_monthly_income_display,
            "currency_code": result.currency_code,
            "calculated_at": result.calculated_at.isoformat(),
            "tax_strategy": strategy.strategy_name,
        }, indent=2))
        return

    click.echo(format_payslip(result))


@click.command("brackets")
@strategy_options
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def brackets(strategy_key, flat_rate, brackets_file, output_format):
    """Show the bracket table of a tax strategy."""
    strategy = resolve_strategy(TaxStrategyFactory(), strategy_key, flat_rate, brackets_file)

    if output_format == "json":
        click.echo(json.dumps({
            "strategy": strategy.strategy_name,
            "brackets": [b.model_dump() for b in strategy.brackets],
        }, indent=2))
        return

    click.echo(strategy.strategy_name)
    click.echo("-" * 44)
    click.echo(f"{'FROM':>15} {'TO':>15} {'RATE':>10}")
    for bracket in strategy.brackets:
        upper = "-" if bracket.max_cents is None else format_cents_as_decimal(bracket.max_cents)
        click.echo(
            f"{format_cents_as_decimal(bracket.min_cents):>15} {upper:>15} "
            f"{bracket.rate * 100:>9g}%"
        )


@click.command("stats")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def stats(output_format):
    """Show service statistics."""
    statistics = PayslipService().get_service_statistics()

    if output_format == "json":
        click.echo(json.dumps(statistics.to_dict(), indent=2))
        return

    click.echo(f"Total payslips generated: {statistics.total_payslips_generated}")
    click.echo(f"Current tax strategy: {statistics.current_tax_strategy}")
    click.echo(f"Supported currencies: {', '.join(statistics.supported_currencies)}")
    click.echo(f"Version: {statistics.version}")
