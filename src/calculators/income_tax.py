"""Income tax calculator: bracket-by-bracket breakdown."""

from decimal import Decimal

from src.calculators.models import BracketTax, IncomeTaxResult
from src.calculators.money import ZERO, to_cents
from src.calculators.tax_data import TaxBracket


def marginal_rate(annual_income: Decimal, brackets: tuple[TaxBracket, ...]) -> Decimal:
    """Rate applied to the last dollar of income.

    Upper bounds are inclusive: income exactly on a boundary stays in the
    lower bracket.
    """
    for bracket in brackets:
        if bracket.upper is None or annual_income <= bracket.upper:
            return bracket.rate
    return brackets[-1].rate


def calculate_income_tax(
    annual_income: Decimal,
    brackets: tuple[TaxBracket, ...],
) -> IncomeTaxResult:
    """Calculate NZ income tax with per-bracket breakdown.

    Each bracket taxes only the slice of income between its bounds. Slices
    are summed unrounded and the total is rounded once to cents.

    Args:
        annual_income: Validated gross annual income (>= 0).
        brackets: Ordered bracket table from a TaxYearData.

    Returns:
        IncomeTaxResult with total_tax, effective_rate and breakdown.
    """
    breakdown: list[BracketTax] = []
    total_tax = Decimal("0")

    for bracket in brackets:
        if annual_income <= bracket.lower:
            break

        upper = bracket.upper if bracket.upper is not None else annual_income
        taxable = min(annual_income, upper) - bracket.lower
        tax = taxable * bracket.rate

        breakdown.append(
            BracketTax(
                lower=bracket.lower,
                upper=bracket.upper,
                rate=bracket.rate,
                taxable_amount=to_cents(taxable),
                tax=to_cents(tax),
            )
        )
        total_tax += tax

    total_tax = to_cents(total_tax)
    effective_rate = to_cents(total_tax / annual_income * 100) if annual_income > 0 else ZERO

    return IncomeTaxResult(
        annual_income=to_cents(annual_income),
        total_tax=total_tax,
        effective_rate=effective_rate,
        breakdown=breakdown,
    )
