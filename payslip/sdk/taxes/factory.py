"""Construction and validation of tax strategies.

All four constructors return a ProgressiveTaxStrategy. Custom bracket
lists are validated bracket by bracket and the first violation is
reported with its index. Contiguity and ordering are NOT enforced: a
list with gaps or overlaps is accepted and taxed exactly as the
marginal algorithm defines.
"""

from typing import Any, Iterable, List, Optional, Union

from pydantic import ValidationError

from .schemas import TaxBracket
from .strategy import DEFAULT_STRATEGY_NAME, ProgressiveTaxStrategy, TaxCalculationStrategy


ALTERNATIVE_STRATEGY_NAME = "Alternative Progressive Tax Strategy"
CUSTOM_STRATEGY_NAME = "Custom Progressive Tax Strategy"

# Built-in tables
# Format: (min_cents, max_cents, rate), max_cents None = unbounded
DEFAULT_TAX_BRACKETS = (
    (0, 2_000_000, 0.0),             # $0 - $20,000
    (2_000_000, 4_000_000, 0.1),     # $20,000 - $40,000
    (4_000_000, 8_000_000, 0.2),     # $40,000 - $80,000
    (8_000_000, 18_000_000, 0.3),    # $80,000 - $180,000
    (18_000_000, None, 0.4),         # over $180,000
)

# Demonstration/testing table
ALTERNATIVE_TAX_BRACKETS = (
    (0, 3_000_000, 0.05),            # $0 - $30,000
    (3_000_000, 7_000_000, 0.15),    # $30,000 - $70,000
    (7_000_000, None, 0.25),         # over $70,000
)

BracketInput = Union[TaxBracket, dict]


class InvalidTaxBracketsError(ValueError):
    """Raised when a bracket list or flat rate fails validation.

    Attributes:
        index: Index of the offending bracket, None for list-level errors
    """

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


def _brackets_from_table(table) -> List[TaxBracket]:
    return [TaxBracket(min_cents=lo, max_cents=hi, rate=rate) for lo, hi, rate in table]


def _coerce_bracket(bracket: Any, index: int) -> TaxBracket:
    """Accept TaxBracket instances or plain dicts with the same keys."""
    if isinstance(bracket, TaxBracket):
        return bracket
    try:
        return TaxBracket.model_validate(bracket)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'bracket'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidTaxBracketsError(
            f"Invalid tax bracket at index {index}: {problems}", index=index
        ) from e


def validate_tax_brackets(brackets: Optional[Iterable[BracketInput]]) -> List[TaxBracket]:
    """Validate a bracket list and return it as TaxBracket instances.

    Raises:
        InvalidTaxBracketsError: On the first violation found
    """
    bracket_list = list(brackets) if brackets is not None else []
    if not bracket_list:
        raise InvalidTaxBracketsError("Tax brackets cannot be empty")

    validated = []
    for index, raw in enumerate(bracket_list):
        bracket = _coerce_bracket(raw, index)

        if bracket.min_cents < 0:
            raise InvalidTaxBracketsError(
                f"Invalid tax bracket at index {index}: minimum amount cannot be negative",
                index=index,
            )

        if bracket.rate < 0:
            raise InvalidTaxBracketsError(
                f"Invalid tax bracket at index {index}: rate cannot be negative",
                index=index,
            )

        # `not <=` also rejects NaN
        if not bracket.rate <= 1:
            raise InvalidTaxBracketsError(
                f"Invalid tax bracket at index {index}: rate cannot exceed 100%",
                index=index,
            )

        if bracket.max_cents is not None and bracket.min_cents > bracket.max_cents:
            raise InvalidTaxBracketsError(
                f"Invalid tax bracket at index {index}: minimum cannot be greater than maximum",
                index=index,
            )

        validated.append(bracket)

    return validated


def validate_flat_tax_rate(rate: float) -> None:
    """Raise InvalidTaxBracketsError unless 0 <= rate <= 1."""
    if not 0 <= rate <= 1:
        raise InvalidTaxBracketsError("Flat tax rate must be between 0 and 1")


def flat_tax_strategy_name(rate: float) -> str:
    """Display name for a flat strategy, e.g. 0.15 -> "Flat Tax Strategy (15%)"."""
    return f"Flat Tax Strategy ({rate * 100:g}%)"


class TaxStrategyFactory:
    """Builds tax strategies. Every call returns a fresh instance."""

    def create_default_strategy(self) -> TaxCalculationStrategy:
        return ProgressiveTaxStrategy(
            _brackets_from_table(DEFAULT_TAX_BRACKETS), name=DEFAULT_STRATEGY_NAME
        )

    def create_alternative_strategy(self) -> TaxCalculationStrategy:
        return ProgressiveTaxStrategy(
            _brackets_from_table(ALTERNATIVE_TAX_BRACKETS), name=ALTERNATIVE_STRATEGY_NAME
        )

    def create_custom_strategy(
        self,
        brackets: Iterable[BracketInput],
        name: str = CUSTOM_STRATEGY_NAME,
    ) -> TaxCalculationStrategy:
        """Create a progressive strategy from caller-supplied brackets.

        Args:
            brackets: TaxBracket instances or dicts with min_cents, max_cents, rate
            name: Strategy display name

        Raises:
            InvalidTaxBracketsError: If the list is empty or any bracket is invalid
        """
        return ProgressiveTaxStrategy(validate_tax_brackets(brackets), name=name)

    def create_flat_tax_strategy(self, rate: float) -> TaxCalculationStrategy:
        """Create a single-bracket strategy taxing the whole salary at `rate`.

        Raises:
            InvalidTaxBracketsError: If rate is outside [0, 1]
        """
        validate_flat_tax_rate(rate)
        return ProgressiveTaxStrategy(
            [TaxBracket(min_cents=0, max_cents=None, rate=rate)],
            name=flat_tax_strategy_name(rate),
        )
