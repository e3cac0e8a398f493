"""Pydantic schemas for tax brackets.

TaxBracket is the in-memory bracket used by strategies. It only checks
types; range rules (non-negative floor, rate within [0, 1], max >= min)
belong to TaxStrategyFactory so that violations are reported with the
index of the offending bracket.

BracketFile validates the YAML bracket tables read by rules.py. Those
files are written by hand in whole currency units, so they use `min`
and `max` rather than cents.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TaxBracket(BaseModel):
    """Single marginal-rate bracket, amounts in cents.

    The taxable range is [min_cents, max_cents). max_cents=None means the
    bracket is unbounded above.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    min_cents: int = Field(..., description="Lower bound of the bracket in cents")
    max_cents: Optional[int] = Field(default=None, description="Upper bound in cents (None if unbounded)")
    rate: float = Field(..., description="Marginal rate as decimal (0.1 = 10%)")

    @property
    def is_unbounded(self) -> bool:
        return self.max_cents is None


class BracketFileEntry(BaseModel):
    """One bracket as written in a YAML bracket table."""

    model_config = ConfigDict(extra="forbid")

    min: float = Field(..., allow_inf_nan=False, description="Lower bound in whole currency units")
    max: Optional[float] = Field(default=None, allow_inf_nan=False,
                                 description="Upper bound (omit for the top bracket)")
    rate: float = Field(..., allow_inf_nan=False, description="Marginal rate as decimal")


class BracketFile(BaseModel):
    """A YAML bracket table."""

    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, description="Display name for the strategy")
    brackets: List[BracketFileEntry]
