"""NZ tax constants: brackets and ACC levies per tax year.

Hardcoded Python constants (not DB-driven). Tax brackets change rarely
(last NZ change: July 2024). A table for another year can be loaded from
YAML with load_tax_year_data() without touching the calculators.
"""

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, NamedTuple

import yaml

from config import load_yaml_config

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when a tax table or ACC override is malformed."""


class TaxBracket(NamedTuple):
    """A single income tax bracket."""

    lower: Decimal  # exclusive, except 0
    upper: Decimal | None  # inclusive; None = no cap
    rate: Decimal


class AccLevy(NamedTuple):
    """ACC earner's levy parameters for a tax year."""

    rate: Decimal
    max_liable_earnings: Decimal


class TaxYearData(NamedTuple):
    """All tax parameters for a single NZ tax year."""

    label: str
    brackets: tuple[TaxBracket, ...]
    acc: AccLevy


def validate_brackets(brackets: tuple[TaxBracket, ...]) -> None:
    """Check a bracket table is ordered, contiguous and covers [0, inf).

    Raises:
        ConfigurationError: On the first violated rule.
    """
    if not brackets:
        raise ConfigurationError("Bracket table is empty.")
    if brackets[0].lower != 0:
        raise ConfigurationError("First bracket must start at 0.")
    if brackets[-1].upper is not None:
        raise ConfigurationError("Last bracket must be unbounded (upper=None).")

    for i, bracket in enumerate(brackets):
        if not Decimal("0") <= bracket.rate <= Decimal("1"):
            raise ConfigurationError(f"Bracket {i}: rate {bracket.rate} outside [0, 1].")
        if i == len(brackets) - 1:
            break
        if bracket.upper is None:
            raise ConfigurationError(f"Bracket {i}: only the last bracket may be unbounded.")
        if bracket.upper <= bracket.lower:
            raise ConfigurationError(f"Bracket {i}: upper {bracket.upper} <= lower {bracket.lower}.")
        following = brackets[i + 1]
        if following.lower != bracket.upper:
            raise ConfigurationError(
                f"Bracket {i + 1}: lower {following.lower} does not continue "
                f"from previous upper {bracket.upper}."
            )
        if following.rate < bracket.rate:
            raise ConfigurationError(f"Bracket {i + 1}: rate decreases from {bracket.rate}.")


def validate_acc(acc: AccLevy) -> None:
    """Check ACC levy parameters are in range."""
    if not Decimal("0") <= acc.rate < Decimal("1"):
        raise ConfigurationError(f"ACC rate {acc.rate} outside [0, 1).")
    if acc.max_liable_earnings <= 0:
        raise ConfigurationError("ACC max liable earnings must be positive.")


def make_tax_year(label: str, brackets: tuple[TaxBracket, ...], acc: AccLevy) -> TaxYearData:
    """Build a validated TaxYearData."""
    validate_brackets(brackets)
    validate_acc(acc)
    return TaxYearData(label=label, brackets=brackets, acc=acc)


# Pre-July 2024 brackets (2023-24 and earlier)
_BRACKETS_PRE_2024 = (
    TaxBracket(Decimal("0"), Decimal("14000"), Decimal("0.105")),
    TaxBracket(Decimal("14000"), Decimal("48000"), Decimal("0.175")),
    TaxBracket(Decimal("48000"), Decimal("70000"), Decimal("0.30")),
    TaxBracket(Decimal("70000"), Decimal("180000"), Decimal("0.33")),
    TaxBracket(Decimal("180000"), None, Decimal("0.39")),
)

# Post-July 2024 brackets (2024-25 onwards)
_BRACKETS_2024 = (
    TaxBracket(Decimal("0"), Decimal("15600"), Decimal("0.105")),
    TaxBracket(Decimal("15600"), Decimal("53500"), Decimal("0.175")),
    TaxBracket(Decimal("53500"), Decimal("78100"), Decimal("0.30")),
    TaxBracket(Decimal("78100"), Decimal("180000"), Decimal("0.33")),
    TaxBracket(Decimal("180000"), None, Decimal("0.39")),
)

# $1.53 per $100 incl. GST
ACC_LEVY_2023_24 = AccLevy(rate=Decimal("0.0153"), max_liable_earnings=Decimal("139384"))
# $1.60 per $100 incl. GST (from 1 Apr 2024)
ACC_LEVY_2024_25 = AccLevy(rate=Decimal("0.0160"), max_liable_earnings=Decimal("142283"))
# $1.67 per $100 incl. GST (from 1 Apr 2025). Source: IRD ACC earners' levy rates page
ACC_LEVY_2025_26 = AccLevy(rate=Decimal("0.0167"), max_liable_earnings=Decimal("152790"))

TAX_YEARS: dict[str, TaxYearData] = {
    "2023-24": make_tax_year("2023-24", _BRACKETS_PRE_2024, ACC_LEVY_2023_24),
    "2024-25": make_tax_year("2024-25", _BRACKETS_2024, ACC_LEVY_2024_25),
    "2025-26": make_tax_year("2025-26", _BRACKETS_2024, ACC_LEVY_2025_26),
}

# Pins the 1.53% / $139,384 ACC pair.
DEFAULT_TAX_YEAR = "2023-24"

KIWISAVER_RATES: tuple[Decimal, ...] = (Decimal("0"), Decimal("0.03"), Decimal("0.05"))


def get_tax_year(tax_year: str = DEFAULT_TAX_YEAR) -> TaxYearData:
    """Look up a built-in tax year.

    Raises:
        ConfigurationError: If the year is not known.
    """
    try:
        return TAX_YEARS[tax_year]
    except KeyError:
        raise ConfigurationError(
            f"Unknown tax year: {tax_year}. Available: {', '.join(sorted(TAX_YEARS))}"
        ) from None


def _to_decimal(value: Any, what: str) -> Decimal:
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(f"{what}: {value!r} is not a number.") from None
    if not result.is_finite():
        raise ConfigurationError(f"{what}: {value!r} is not finite.")
    return result


def tax_year_from_mapping(data: dict[str, Any]) -> TaxYearData:
    """Build a TaxYearData from a parsed YAML/JSON mapping.

    Expected shape::

        label: "2026-27"
        brackets:
          - {lower: 0, upper: 15600, rate: 0.105}
          - {lower: 15600, upper: null, rate: 0.175}
        acc: {rate: 0.0167, max_liable_earnings: 152790}
    """
    try:
        label = str(data["label"])
        raw_brackets = data["brackets"]
        raw_acc = data["acc"]
    except (KeyError, TypeError) as exc:
        raise ConfigurationError(f"Tax table missing required key: {exc}") from None

    brackets = []
    try:
        for i, raw in enumerate(raw_brackets):
            upper = raw.get("upper")
            brackets.append(
                TaxBracket(
                    lower=_to_decimal(raw["lower"], f"bracket {i} lower"),
                    upper=_to_decimal(upper, f"bracket {i} upper") if upper is not None else None,
                    rate=_to_decimal(raw["rate"], f"bracket {i} rate"),
                )
            )

        acc = AccLevy(
            rate=_to_decimal(raw_acc["rate"], "acc rate"),
            max_liable_earnings=_to_decimal(
                raw_acc["max_liable_earnings"], "acc max_liable_earnings"
            ),
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ConfigurationError(f"Malformed tax table {label}: {exc!r}") from None
    return make_tax_year(label, tuple(brackets), acc)


def load_tax_year_data(
    tax_year: str = DEFAULT_TAX_YEAR,
    acc_rate: Decimal | None = None,
    acc_max_liable_earnings: Decimal | None = None,
    tax_table_file: str | None = None,
) -> TaxYearData:
    """Resolve the active tax configuration.

    A YAML table file takes precedence over the built-in year. ACC overrides
    must be given together and replace the table's ACC parameters.
    """
    if tax_table_file:
        # Paths that exist relative to cwd win over names inside config/.
        path = Path(tax_table_file)
        if path.exists():
            tax_table_file = str(path.resolve())
        try:
            raw = load_yaml_config(tax_table_file)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Cannot read tax table {tax_table_file}: {exc}") from exc
        data = tax_year_from_mapping(raw)
        logger.info("Loaded tax table %s from %s", data.label, tax_table_file)
    else:
        data = get_tax_year(tax_year)

    if (acc_rate is None) != (acc_max_liable_earnings is None):
        raise ConfigurationError("ACC rate and max liable earnings must be overridden together.")
    if acc_rate is not None and acc_max_liable_earnings is not None:
        acc = AccLevy(rate=acc_rate, max_liable_earnings=acc_max_liable_earnings)
        validate_acc(acc)
        logger.warning(
            "Overriding ACC levy for %s: rate=%s max_liable_earnings=%s",
            data.label,
            acc.rate,
            acc.max_liable_earnings,
        )
        data = data._replace(acc=acc)

    return data
