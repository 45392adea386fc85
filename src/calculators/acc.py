"""ACC earner's levy calculator."""

from decimal import Decimal

from src.calculators.money import to_cents
from src.calculators.tax_data import AccLevy


def calculate_acc_levy(annual_income: Decimal, acc: AccLevy) -> Decimal:
    """Calculate ACC earner's levy.

    The levy is charged on income up to a maximum liable earnings cap, so it
    is flat for any income at or above the cap.

    Args:
        annual_income: Validated gross annual income (>= 0).
        acc: Levy rate and cap for the tax year.

    Returns:
        Annual levy rounded to cents.
    """
    liable_earnings = min(annual_income, acc.max_liable_earnings)
    return to_cents(liable_earnings * acc.rate)
