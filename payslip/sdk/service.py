"""Payslip generation service.

Wires the pieces together:

    factory -> strategy -> annual tax -> monthly amounts -> builder -> record store

The service holds the "current" tax strategy. Switching replaces the
reference in one assignment; a calculation reads the reference once at
its start, so a switch never changes a calculation already in progress.
Callers that want no shared state at all can pass `strategy=` to
generate_monthly_payslip.
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from payslip import __version__

from .builder import PayslipBuilder, PayslipCalculationResult
from .config import SUPPORTED_CURRENCIES, get_default_currency, normalize_currency_code
from .financial_math import (
    annual_to_monthly,
    cents_to_dollars,
    dollars_to_cents,
    format_cents_as_decimal,
)
from .records import PayslipRecord, RecordStore
from .taxes import TaxCalculationStrategy, TaxStrategyFactory
from .taxes.factory import BracketInput

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

# Salaries above this are accepted but logged
HIGH_SALARY_WARNING_CENTS = dollars_to_cents(10_000_000)


class PayslipServiceError(Exception):
    """Raised when the service fails to generate or retrieve payslips."""
    pass


@dataclass
class ServiceStatistics:
    """Summary of service state."""

    total_payslips_generated: int
    current_tax_strategy: str
    supported_currencies: List[str] = field(default_factory=lambda: list(SUPPORTED_CURRENCIES))
    version: str = __version__

    def to_dict(self) -> dict:
        return asdict(self)


def format_payslip(result: PayslipCalculationResult) -> str:
    """Render a payslip the way it is printed on the console."""
    return "\n".join([
        f'Monthly Payslip for: "{result.employee_name}"',
        f"Gross Monthly Income: ${result.gross_monthly_income_display}",
        f"Monthly Income Tax: ${result.monthly_income_tax_display}",
        f"Net Monthly Income: ${result.net_monthly_income_display}",
    ])


class PayslipService:
    """Generates monthly payslips and keeps a history of them.

    Args:
        factory: Strategy factory (default: TaxStrategyFactory())
        store: Record store (default: RecordStore() under the data dir)
        strategy: Initial strategy (default: the factory's default strategy)
    """

    def __init__(
        self,
        factory: Optional[TaxStrategyFactory] = None,
        store: Optional[RecordStore] = None,
        strategy: Optional[TaxCalculationStrategy] = None,
    ):
        self.factory = factory or TaxStrategyFactory()
        self.store = store or RecordStore()
        if strategy is None:
            self._strategy = self.factory.create_default_strategy()
            logger.info("PayslipService initialised with default tax strategy")
        else:
            self._strategy = strategy
            logger.info(f"PayslipService initialised with {strategy.strategy_name}")

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------

    def generate_monthly_payslip(
        self,
        employee_name: str,
        annual_salary_cents: int,
        currency_code: Optional[str] = None,
        save: bool = True,
        strategy: Optional[TaxCalculationStrategy] = None,
    ) -> PayslipCalculationResult:
        """Compute a monthly payslip from an annual salary.

        Args:
            employee_name: Employee name (must be non-empty after trimming)
            annual_salary_cents: Annual salary in cents (must be positive)
            currency_code: ISO 4217 code (default: settings default_currency)
            save: Persist a PayslipRecord to the store
            strategy: Strategy for this calculation only (default: current)

        Returns:
            The built PayslipCalculationResult

        Raises:
            PayslipServiceError: On any validation or storage failure
        """
        active = strategy or self._strategy
        logger.info(
            f"Generating payslip for {employee_name} with annual salary "
            f"{cents_to_dollars(annual_salary_cents)}"
        )

        try:
            self._validate_inputs(employee_name, annual_salary_cents)
            currency = normalize_currency_code(currency_code or get_default_currency())

            annual_tax_cents = active.calculate_annual_tax_cents(annual_salary_cents)

            gross_monthly_cents = annual_to_monthly(annual_salary_cents)
            monthly_tax_cents = annual_to_monthly(annual_tax_cents)
            net_monthly_cents = gross_monthly_cents - monthly_tax_cents

            payslip = (
                PayslipBuilder()
                .set_employee_name(employee_name)
                .set_gross_monthly_income_cents(gross_monthly_cents)
                .set_monthly_income_tax_cents(monthly_tax_cents)
                .set_net_monthly_income_cents(net_monthly_cents)
                .set_currency_code(currency)
                .set_calculated_at(datetime.now().astimezone())
                .build()
            )

            if save:
                self.store.save(PayslipRecord(
                    timestamp=payslip.calculated_at,
                    employee_name=payslip.employee_name,
                    annual_salary_cents=annual_salary_cents,
                    monthly_income_tax_cents=monthly_tax_cents,
                    gross_monthly_income_cents=gross_monthly_cents,
                    net_monthly_income_cents=net_monthly_cents,
                    currency_code=currency,
                    tax_strategy_used=active.strategy_name,
                ))
        except (ValueError, OSError) as e:
            logger.error(f"Failed to generate payslip for {employee_name}: {e}")
            raise PayslipServiceError(f"Failed to generate payslip: {e}") from e

        logger.info(f"Payslip generated successfully for {employee_name}")
        return payslip

    def calculate_annual_tax_cents(self, annual_salary_cents: int) -> int:
        """Annual tax under the current strategy."""
        return self._strategy.calculate_annual_tax_cents(annual_salary_cents)

    def _validate_inputs(self, employee_name: str, annual_salary_cents: int) -> None:
        if not employee_name or not employee_name.strip():
            raise ValueError("Employee name cannot be empty")

        if annual_salary_cents <= 0:
            raise ValueError("Annual salary must be a positive number")

        if annual_salary_cents > HIGH_SALARY_WARNING_CENTS:
            logger.warning(
                f"Very high salary detected: {format_cents_as_decimal(annual_salary_cents)}"
            )

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def get_all_salary_computations(self) -> List[PayslipRecord]:
        logger.info("Retrieving all salary computations")
        try:
            return self.store.find_all()
        except OSError as e:
            logger.error(f"Failed to retrieve salary computations: {e}")
            raise PayslipServiceError(f"Failed to retrieve salary computations: {e}") from e

    def get_salary_computations_by_employee(self, employee_name: str) -> List[PayslipRecord]:
        logger.info(f"Retrieving salary computations for {employee_name}")
        try:
            return self.store.find_by_employee(employee_name)
        except OSError as e:
            logger.error(f"Failed to retrieve salary computations for {employee_name}: {e}")
            raise PayslipServiceError(f"Failed to retrieve salary computations: {e}") from e

    def get_salary_computations_by_date_range(
        self, start: datetime, end: datetime
    ) -> List[PayslipRecord]:
        logger.info(f"Retrieving salary computations from {start} to {end}")
        try:
            return self.store.find_by_date_range(start, end)
        except OSError as e:
            logger.error(f"Failed to retrieve salary computations: {e}")
            raise PayslipServiceError(f"Failed to retrieve salary computations: {e}") from e

    # ------------------------------------------------------------------
    # Strategy selection
    # ------------------------------------------------------------------

    @property
    def current_strategy(self) -> TaxCalculationStrategy:
        return self._strategy

    @property
    def current_tax_strategy_name(self) -> str:
        return self._strategy.strategy_name

    def use_strategy(self, strategy: TaxCalculationStrategy) -> None:
        """Replace the current strategy with an already-built one."""
        self._strategy = strategy
        logger.info(f"Switched to {strategy.strategy_name}")

    def switch_to_default_strategy(self) -> None:
        self._strategy = self.factory.create_default_strategy()
        logger.info("Switched to default tax strategy")

    def switch_to_alternative_strategy(self) -> None:
        self._strategy = self.factory.create_alternative_strategy()
        logger.info("Switched to alternative tax strategy")

    def switch_to_custom_strategy(self, brackets: Iterable[BracketInput]) -> None:
        """Raises InvalidTaxBracketsError and keeps the current strategy if invalid."""
        self._strategy = self.factory.create_custom_strategy(brackets)
        logger.info("Switched to custom tax strategy")

    def switch_to_flat_tax_strategy(self, rate: float) -> None:
        """Raises InvalidTaxBracketsError and keeps the current strategy if invalid."""
        self._strategy = self.factory.create_flat_tax_strategy(rate)
        logger.info(f"Switched to flat tax strategy with rate {rate * 100:g}%")

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_service_statistics(self) -> ServiceStatistics:
        return ServiceStatistics(
            total_payslips_generated=self.store.count(),
            current_tax_strategy=self.current_tax_strategy_name,
        )
