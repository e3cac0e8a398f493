"""Marginal tax calculation over an ordered bracket sequence.

There is one algorithm. A flat tax is a single unbounded bracket starting
at zero, so every strategy the factory hands out is a ProgressiveTaxStrategy.
"""

from typing import Iterable, Protocol, Tuple, runtime_checkable

from ..financial_math import calculate_percentage
from .schemas import TaxBracket


DEFAULT_STRATEGY_NAME = "Progressive Tax Strategy"


class NegativeSalaryError(ValueError):
    """Raised when a tax calculation is asked for a negative salary."""

    def __init__(self, annual_salary_cents: int):
        self.annual_salary_cents = annual_salary_cents
        super().__init__("Annual salary cannot be negative")


@runtime_checkable
class TaxCalculationStrategy(Protocol):
    """Capability shared by all tax strategies."""

    @property
    def strategy_name(self) -> str: ...

    @property
    def brackets(self) -> Tuple[TaxBracket, ...]: ...

    def calculate_annual_tax_cents(self, annual_salary_cents: int) -> int: ...


class ProgressiveTaxStrategy:
    """Progressive tax over brackets taken in the order given.

    Brackets are copied in at construction and exposed as a tuple, so the
    strategy is immutable and safe to share between callers.
    """

    def __init__(self, brackets: Iterable[TaxBracket], name: str = DEFAULT_STRATEGY_NAME):
        self._brackets = tuple(brackets)
        self._name = name

    @property
    def strategy_name(self) -> str:
        return self._name

    @property
    def brackets(self) -> Tuple[TaxBracket, ...]:
        return self._brackets

    def calculate_annual_tax_cents(self, annual_salary_cents: int) -> int:
        """Calculate total annual tax for a salary, both in cents.

        For each bracket the taxable slice is
        min(salary, ceiling) - floor, counted only when the salary is
        strictly above the floor. A salary exactly on a boundary therefore
        stays in the lower bracket.

        Each slice is rounded on its own and the results are summed, which
        can differ by a cent from rounding the total once.

        Raises:
            NegativeSalaryError: If annual_salary_cents < 0
        """
        if annual_salary_cents < 0:
            raise NegativeSalaryError(annual_salary_cents)

        if annual_salary_cents == 0:
            return 0

        total_tax_cents = 0
        for bracket in self._brackets:
            # Salary doesn't reach this bracket
            if annual_salary_cents <= bracket.min_cents:
                continue

            bracket_start = max(bracket.min_cents, 0)
            if bracket.max_cents is None:
                bracket_end = annual_salary_cents
            else:
                bracket_end = min(bracket.max_cents, annual_salary_cents)

            taxable_cents = max(0, bracket_end - bracket_start)
            if taxable_cents > 0:
                total_tax_cents += calculate_percentage(taxable_cents, bracket.rate)

        return total_tax_cents

    def __repr__(self) -> str:
        return f"ProgressiveTaxStrategy(name={self._name!r}, brackets={len(self._brackets)})"
