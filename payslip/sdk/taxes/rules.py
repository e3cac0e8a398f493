"""Loading bracket tables from YAML files.

File format (amounts in whole currency units):

    name: Example 2025 table      # optional
    brackets:
      - {min: 0, max: 20000, rate: 0.0}
      - {min: 20000, max: 40000, rate: 0.1}
      - {min: 40000, rate: 0.2}   # no max = unbounded

The returned brackets are in cents and have NOT been range-checked;
pass them to TaxStrategyFactory.create_custom_strategy for that.
"""

from pathlib import Path
from typing import List, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from ..financial_math import dollars_to_cents
from .schemas import BracketFile, TaxBracket


class BracketFileError(ValueError):
    """Raised when a bracket table file cannot be read or parsed."""
    pass


def _read_bracket_file(path: Union[str, Path]) -> BracketFile:
    bracket_path = Path(path)
    if not bracket_path.exists():
        raise BracketFileError(f"Bracket file not found: {bracket_path}")

    try:
        with open(bracket_path, "r") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise BracketFileError(f"Invalid YAML in {bracket_path}: {e}") from e

    if not isinstance(raw, dict):
        raise BracketFileError(f"{bracket_path}: expected a mapping with a 'brackets' list")

    try:
        return BracketFile.model_validate(raw)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise BracketFileError(f"{bracket_path}: {errors}") from e


def load_brackets_file(path: Union[str, Path]) -> List[TaxBracket]:
    """Load a bracket table from YAML, converted to cents.

    Raises:
        BracketFileError: If the file is missing, not valid YAML, or has the wrong shape
    """
    return load_bracket_table(path)[1]


def load_bracket_table(path: Union[str, Path]) -> Tuple[Optional[str], List[TaxBracket]]:
    """Load a bracket table and its optional display name."""
    table = _read_bracket_file(path)
    brackets = [
        TaxBracket(
            min_cents=dollars_to_cents(entry.min),
            max_cents=dollars_to_cents(entry.max) if entry.max is not None else None,
            rate=entry.rate,
        )
        for entry in table.brackets
    ]
    return table.name, brackets
