"""KiwiSaver employee contribution calculator."""

from decimal import Decimal

from src.calculators.money import to_cents


def calculate_kiwisaver(annual_salary: Decimal, rate: Decimal) -> Decimal:
    """Flat percentage of gross salary, uncapped."""
    return to_cents(annual_salary * rate)
