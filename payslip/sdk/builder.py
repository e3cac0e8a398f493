"""Payslip assembly and cross-field validation.

PayslipBuilder accumulates the payslip fields through chained setters and
emits an immutable PayslipCalculationResult from build(). A successful
build() resets the builder, so one instance can be reused for the next,
unrelated payslip without carrying values over:

    builder = PayslipBuilder()
    first = builder.set_employee_name("Ren").set_gross_monthly_income_cents(500_000) \
        .set_monthly_income_tax_cents(50_000).set_net_monthly_income_cents(450_000) \
        .set_currency_code("MYR").build()
    builder.build()  # raises PayslipValidationError, nothing was carried over

A builder is not safe for concurrent chains; use one per payslip.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .financial_math import format_cents_as_decimal


class PayslipValidationError(ValueError):
    """Raised when build() is called with missing or inconsistent fields."""
    pass


class PayslipCalculationResult(BaseModel):
    """Monthly payslip breakdown. Created only by PayslipBuilder.build()."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    employee_name: str
    gross_monthly_income_cents: int = Field(..., ge=0)
    monthly_income_tax_cents: int = Field(..., ge=0)
    net_monthly_income_cents: int = Field(..., ge=0)
    currency_code: str = Field(..., description="ISO 4217 currency code")
    calculated_at: datetime

    # Display renderings of the cents fields, e.g. "5000.00"
    gross_monthly_income_display: str
    monthly_income_tax_display: str
    net_monthly_income_display: str


class PayslipBuildingData(BaseModel):
    """Partial payslip collected by the builder."""

    model_config = ConfigDict(extra="forbid")

    employee_name: Optional[str] = None
    gross_monthly_income_cents: Optional[int] = None
    monthly_income_tax_cents: Optional[int] = None
    net_monthly_income_cents: Optional[int] = None
    currency_code: Optional[str] = None
    calculated_at: Optional[datetime] = None


class PayslipBuilder:
    """Fluent builder for PayslipCalculationResult."""

    def __init__(self):
        self._data = PayslipBuildingData()

    def reset(self) -> "PayslipBuilder":
        """Discard any accumulated fields."""
        self._data = PayslipBuildingData()
        return self

    def set_employee_name(self, name: Optional[str]) -> "PayslipBuilder":
        self._data.employee_name = name.strip() if name is not None else None
        return self

    def set_gross_monthly_income_cents(self, amount_cents: int) -> "PayslipBuilder":
        self._data.gross_monthly_income_cents = amount_cents
        return self

    def set_monthly_income_tax_cents(self, amount_cents: int) -> "PayslipBuilder":
        self._data.monthly_income_tax_cents = amount_cents
        return self

    def set_net_monthly_income_cents(self, amount_cents: int) -> "PayslipBuilder":
        self._data.net_monthly_income_cents = amount_cents
        return self

    def set_currency_code(self, currency_code: str) -> "PayslipBuilder":
        self._data.currency_code = currency_code
        return self

    def set_calculated_at(self, calculated_at: datetime) -> "PayslipBuilder":
        self._data.calculated_at = calculated_at
        return self

    def build(self) -> PayslipCalculationResult:
        """Validate the accumulated fields and emit the result.

        Checks, in order: employee name, presence of all three amounts
        (zero is allowed), currency code, non-negative amounts, and
        net == gross - tax exactly. On failure the builder state is left
        as it was; on success it is reset.

        Raises:
            PayslipValidationError: On the first failed check
        """
        data = self._data

        if not data.employee_name:
            raise PayslipValidationError("Employee name is required")

        gross = data.gross_monthly_income_cents
        tax = data.monthly_income_tax_cents
        net = data.net_monthly_income_cents

        if gross is None or tax is None or net is None:
            raise PayslipValidationError("All income amounts are required")

        if not data.currency_code:
            raise PayslipValidationError("Currency code is required")

        if gross < 0 or tax < 0 or net < 0:
            raise PayslipValidationError("Income amounts cannot be negative")

        if net != gross - tax:
            raise PayslipValidationError("Net income must equal gross income minus tax")

        result = PayslipCalculationResult(
            employee_name=data.employee_name,
            gross_monthly_income_cents=gross,
            monthly_income_tax_cents=tax,
            net_monthly_income_cents=net,
            currency_code=data.currency_code,
            calculated_at=data.calculated_at or datetime.now(timezone.utc),
            gross_monthly_income_display=format_cents_as_decimal(gross),
            monthly_income_tax_display=format_cents_as_decimal(tax),
            net_monthly_income_display=format_cents_as_decimal(net),
        )

        # Reset for next use
        self.reset()

        return result
