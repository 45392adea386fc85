"""PAYE calculator: composites income tax, KiwiSaver and ACC."""

from decimal import Decimal
from typing import Any

from src.calculators.acc import calculate_acc_levy
from src.calculators.income_tax import calculate_income_tax, marginal_rate
from src.calculators.kiwisaver import calculate_kiwisaver
from src.calculators.models import CalculationResult, PeriodAmounts
from src.calculators.money import to_cents
from src.calculators.tax_data import TaxYearData, get_tax_year
from src.calculators.validation import CalculationInput, ValidationError, validate_input

PAY_PERIODS: dict[str, int] = {
    "weekly": 52,
    "fortnightly": 26,
    "four-weekly": 13,
    "monthly": 12,
}

_MONTHS = Decimal("12")


def calculate_paye(calc_input: CalculationInput, tax_year: TaxYearData) -> CalculationResult:
    """Calculate annual and monthly PAYE deductions.

    Take-home is gross minus the rounded annual deductions, so the annual
    figures always add back up to gross. A negative take-home is reported
    as-is.

    Args:
        calc_input: Output of validate_input().
        tax_year: Brackets and ACC parameters to apply.

    Returns:
        CalculationResult with annual and monthly figures in cents.
    """
    salary = calc_input.annual_salary

    tax_result = calculate_income_tax(salary, tax_year.brackets)
    annual_gross = to_cents(salary)
    annual_tax = tax_result.total_tax
    annual_kiwisaver = calculate_kiwisaver(salary, calc_input.kiwisaver_rate)
    annual_acc = calculate_acc_levy(salary, tax_year.acc)
    annual_take_home = annual_gross - annual_tax - annual_kiwisaver - annual_acc

    return CalculationResult(
        annual_gross=annual_gross,
        annual_tax=annual_tax,
        annual_kiwisaver=annual_kiwisaver,
        annual_acc=annual_acc,
        annual_take_home=annual_take_home,
        monthly_gross=to_cents(annual_gross / _MONTHS),
        monthly_tax=to_cents(annual_tax / _MONTHS),
        monthly_kiwisaver=to_cents(annual_kiwisaver / _MONTHS),
        monthly_acc=to_cents(annual_acc / _MONTHS),
        monthly_take_home=to_cents(annual_take_home / _MONTHS),
        tax_year=tax_year.label,
        kiwisaver_rate=calc_input.kiwisaver_rate,
        effective_rate=tax_result.effective_rate,
        marginal_rate=marginal_rate(salary, tax_year.brackets),
        tax_breakdown=tax_result.breakdown,
    )


def calculate(
    annual_salary: Any,
    kiwisaver_rate: Any,
    tax_year: TaxYearData | None = None,
) -> CalculationResult:
    """Validate raw input and calculate PAYE.

    Raises:
        ValidationError: Before any arithmetic, if either input is invalid.
    """
    calc_input = validate_input(annual_salary, kiwisaver_rate)
    if tax_year is None:
        tax_year = get_tax_year()
    return calculate_paye(calc_input, tax_year)


def split_by_period(result: CalculationResult, pay_period: str) -> PeriodAmounts:
    """Divide a result's annual figures across weekly/fortnightly/etc. pays.

    Raises:
        ValidationError: If pay_period is not one of PAY_PERIODS.
    """
    if pay_period not in PAY_PERIODS:
        valid = ", ".join(sorted(PAY_PERIODS))
        raise ValidationError("pay_period", f"Invalid pay period: {pay_period}. Must be one of: {valid}")

    periods = PAY_PERIODS[pay_period]
    divisor = Decimal(periods)
    return PeriodAmounts(
        pay_period=pay_period,
        periods_per_year=periods,
        gross=to_cents(result.annual_gross / divisor),
        income_tax=to_cents(result.annual_tax / divisor),
        kiwisaver=to_cents(result.annual_kiwisaver / divisor),
        acc_levy=to_cents(result.annual_acc / divisor),
        take_home=to_cents(result.annual_take_home / divisor),
    )
