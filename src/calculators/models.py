"""Pydantic models for calculator results."""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer

# Decimal in Python, plain number in JSON.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Rate = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class FrozenModel(BaseModel):
    """Immutable base for result records."""

    model_config = ConfigDict(frozen=True)


class BracketTax(FrozenModel):
    """Tax charged within one bracket."""

    lower: Money
    upper: Money | None = None  # None = top bracket
    rate: Rate
    taxable_amount: Money
    tax: Money


class IncomeTaxResult(FrozenModel):
    """Total income tax with per-bracket breakdown."""

    annual_income: Money
    total_tax: Money
    effective_rate: Rate  # percent
    breakdown: list[BracketTax] = []


class CalculationResult(FrozenModel):
    """Annual and monthly PAYE breakdown for one salary."""

    annual_gross: Money
    annual_tax: Money
    annual_kiwisaver: Money
    annual_acc: Money
    annual_take_home: Money
    monthly_gross: Money
    monthly_tax: Money
    monthly_kiwisaver: Money
    monthly_acc: Money
    monthly_take_home: Money

    tax_year: str
    kiwisaver_rate: Rate
    effective_rate: Rate
    marginal_rate: Rate
    tax_breakdown: list[BracketTax] = []


class PeriodAmounts(FrozenModel):
    """A CalculationResult's annual figures split across pay periods."""

    pay_period: str
    periods_per_year: int
    gross: Money
    income_tax: Money
    kiwisaver: Money
    acc_levy: Money
    take_home: Money
