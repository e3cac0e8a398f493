"""Payslip Calc SDK - Core functionality for tax and payslip calculations."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_data_path,
    get_default_currency,
    normalize_currency_code,
    DEFAULT_CURRENCY,
    SUPPORTED_CURRENCIES,
)

from .financial_math import (
    dollars_to_cents,
    cents_to_dollars,
    format_cents_as_decimal,
    calculate_percentage,
    annual_to_monthly,
)

from .taxes import (
    TaxBracket,
    TaxCalculationStrategy,
    ProgressiveTaxStrategy,
    TaxStrategyFactory,
    NegativeSalaryError,
    InvalidTaxBracketsError,
    BracketFileError,
    load_brackets_file,
    load_bracket_table,
)

from .builder import (
    PayslipBuilder,
    PayslipCalculationResult,
    PayslipValidationError,
)

from .records import PayslipRecord, RecordStore

from .service import (
    PayslipService,
    PayslipServiceError,
    ServiceStatistics,
    format_payslip,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_data_path",
    "get_default_currency",
    "normalize_currency_code",
    "DEFAULT_CURRENCY",
    "SUPPORTED_CURRENCIES",
    # Financial math
    "dollars_to_cents",
    "cents_to_dollars",
    "format_cents_as_decimal",
    "calculate_percentage",
    "annual_to_monthly",
    # Taxes
    "TaxBracket",
    "TaxCalculationStrategy",
    "ProgressiveTaxStrategy",
    "TaxStrategyFactory",
    "NegativeSalaryError",
    "InvalidTaxBracketsError",
    "BracketFileError",
    "load_brackets_file",
    "load_bracket_table",
    # Builder
    "PayslipBuilder",
    "PayslipCalculationResult",
    "PayslipValidationError",
    # Records
    "PayslipRecord",
    "RecordStore",
    # Service
    "PayslipService",
    "PayslipServiceError",
    "ServiceStatistics",
    "format_payslip",
]
