"""Input validation for the PAYE calculators.

CalculationInput is only ever produced by validate_input(); the calculators
trust it and do no further checking.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, NamedTuple

from src.calculators.tax_data import KIWISAVER_RATES

# $1 trillion. Keeps every cent-rounded amount well inside the default
# 28-digit decimal context.
MAX_ANNUAL_SALARY = Decimal("1000000000000")


class ValidationError(ValueError):
    """Invalid calculator input, tied to the offending field."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class CalculationInput(NamedTuple):
    """Validated salary and KiwiSaver rate."""

    annual_salary: Decimal
    kiwisaver_rate: Decimal


def _parse_number(value: Any, field: str) -> Decimal:
    # bool is an int subclass; True is not a salary.
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise ValidationError(field, "must be a number")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(field, "must be a number") from None
    if not number.is_finite():
        raise ValidationError(field, "must be a finite number")
    return number


def validate_input(annual_salary: Any, kiwisaver_rate: Any) -> CalculationInput:
    """Validate raw salary and KiwiSaver selection.

    Args:
        annual_salary: Gross annual salary in NZD (number or numeric string).
        kiwisaver_rate: Contribution rate as a fraction: 0, 0.03 or 0.05.

    Returns:
        CalculationInput with both values as Decimal.

    Raises:
        ValidationError: On the first invalid field. Salary is checked first.
    """
    salary = _parse_number(annual_salary, "annual_salary")
    if salary < 0:
        raise ValidationError("annual_salary", "salary must be non-negative")
    if salary > MAX_ANNUAL_SALARY:
        raise ValidationError("annual_salary", f"salary must not exceed {MAX_ANNUAL_SALARY:,}")
    # Drops the sign of "-0".
    salary = abs(salary)

    rate = _parse_number(kiwisaver_rate, "kiwisaver_rate")
    if rate not in KIWISAVER_RATES:
        raise ValidationError("kiwisaver_rate", "KiwiSaver rate must be 0%, 3%, or 5%")
    rate = KIWISAVER_RATES[KIWISAVER_RATES.index(rate)]

    return CalculationInput(annual_salary=salary, kiwisaver_rate=rate)
