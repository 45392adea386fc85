"""Print a PAYE / KiwiSaver / ACC breakdown for an annual salary."""

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.settings import settings
from src.calculators.models import CalculationResult, PeriodAmounts
from src.calculators.paye import PAY_PERIODS, calculate, split_by_period
from src.calculators.tax_data import ConfigurationError, load_tax_year_data
from src.calculators.validation import ValidationError

logger = logging.getLogger(__name__)

KIWISAVER_CHOICES = {"0": "0", "3": "0.03", "5": "0.05"}


def format_table(result: CalculationResult, per_period: PeriodAmounts | None = None) -> str:
    """Render a result as a plain-text table."""
    rows = [
        ("Gross", result.annual_gross, result.monthly_gross),
        ("Income tax", result.annual_tax, result.monthly_tax),
        ("KiwiSaver", result.annual_kiwisaver, result.monthly_kiwisaver),
        ("ACC levy", result.annual_acc, result.monthly_acc),
        ("Take-home", result.annual_take_home, result.monthly_take_home),
    ]
    lines = [
        f"Tax year {result.tax_year}  "
        f"(effective {result.effective_rate}%, marginal {float(result.marginal_rate) * 100:g}%)",
        f"{'':<12}{'Annual':>14}{'Monthly':>14}",
    ]
    lines += [f"{label:<12}{annual:>14,.2f}{monthly:>14,.2f}" for label, annual, monthly in rows]

    if per_period is not None:
        lines.append("")
        lines.append(f"Per {per_period.pay_period} pay ({per_period.periods_per_year} per year)")
        lines += [
            f"{'Gross':<12}{per_period.gross:>14,.2f}",
            f"{'Income tax':<12}{per_period.income_tax:>14,.2f}",
            f"{'KiwiSaver':<12}{per_period.kiwisaver:>14,.2f}",
            f"{'ACC levy':<12}{per_period.acc_levy:>14,.2f}",
            f"{'Take-home':<12}{per_period.take_home:>14,.2f}",
        ]
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, calculate, print. Returns the exit status."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("salary", help="Gross annual salary in NZD")
    parser.add_argument(
        "--kiwisaver",
        choices=sorted(KIWISAVER_CHOICES),
        required=True,
        help="KiwiSaver employee contribution in percent",
    )
    parser.add_argument("--tax-year", default=settings.tax_year, help="Tax year, e.g. 2023-24")
    parser.add_argument("--tax-table", default=settings.tax_table_file, help="YAML tax table file")
    parser.add_argument("--pay-period", choices=sorted(PAY_PERIODS), help="Also split per pay period")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(message)s")

    try:
        data = load_tax_year_data(
            tax_year=args.tax_year,
            acc_rate=settings.acc_rate,
            acc_max_liable_earnings=settings.acc_max_liable_earnings,
            tax_table_file=args.tax_table,
        )
    except ConfigurationError as exc:
        logger.error("Invalid tax configuration: %s", exc)
        return 1

    try:
        result = calculate(args.salary, KIWISAVER_CHOICES[args.kiwisaver], data)
    except ValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    per_period = split_by_period(result, args.pay_period) if args.pay_period else None

    if args.json:
        payload = result.model_dump(mode="json")
        if per_period is not None:
            payload["per_period"] = per_period.model_dump(mode="json")
        print(json.dumps(payload, indent=2))
    else:
        print(format_table(result, per_period))
    return 0


if __name__ == "__main__":
    sys.exit(main())
