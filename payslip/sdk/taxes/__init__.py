"""taxes - Bracket model and tax calculation strategies.

Scope:
- TaxBracket model (cents, marginal rate)
- ProgressiveTaxStrategy: the single marginal-bracket algorithm
- TaxStrategyFactory: default, alternative, custom and flat strategies
- YAML bracket tables

Constraints:
- Pure calculation - no I/O except explicit bracket file loading
- Strategies are immutable once constructed

Usage:
    from payslip.sdk.taxes import TaxStrategyFactory

    strategy = TaxStrategyFactory().create_default_strategy()
    strategy.calculate_annual_tax_cents(6_000_000)  # -> 600_000
"""

from .schemas import TaxBracket, BracketFile, BracketFileEntry

from .strategy import (
    DEFAULT_STRATEGY_NAME,
    NegativeSalaryError,
    ProgressiveTaxStrategy,
    TaxCalculationStrategy,
)

from .factory import (
    ALTERNATIVE_STRATEGY_NAME,
    ALTERNATIVE_TAX_BRACKETS,
    CUSTOM_STRATEGY_NAME,
    DEFAULT_TAX_BRACKETS,
    InvalidTaxBracketsError,
    TaxStrategyFactory,
    flat_tax_strategy_name,
    validate_flat_tax_rate,
    validate_tax_brackets,
)

from .rules import BracketFileError, load_bracket_table, load_brackets_file

__all__ = [
    # Schemas
    "TaxBracket",
    "BracketFile",
    "BracketFileEntry",
    # Strategy
    "DEFAULT_STRATEGY_NAME",
    "NegativeSalaryError",
    "ProgressiveTaxStrategy",
    "TaxCalculationStrategy",
    # Factory
    "ALTERNATIVE_STRATEGY_NAME",
    "ALTERNATIVE_TAX_BRACKETS",
    "CUSTOM_STRATEGY_NAME",
    "DEFAULT_TAX_BRACKETS",
    "InvalidTaxBracketsError",
    "TaxStrategyFactory",
    "flat_tax_strategy_name",
    "validate_flat_tax_rate",
    "validate_tax_brackets",
    # Bracket files
    "BracketFileError",
    "load_bracket_table",
    "load_brackets_file",
]
