"""Shared test fixtures."""

from decimal import Decimal

import pytest

from src.calculators.tax_data import TAX_YEARS, AccLevy, TaxBracket, TaxYearData, make_tax_year


@pytest.fixture
def tax_2023_24() -> TaxYearData:
    """Old brackets with the 1.53% / $139,384 ACC pair (the default)."""
    return TAX_YEARS["2023-24"]


@pytest.fixture
def tax_2025_26() -> TaxYearData:
    """New brackets with the 1.67% / $152,790 ACC pair."""
    return TAX_YEARS["2025-26"]


@pytest.fixture
def punitive_tax_year() -> TaxYearData:
    """A deliberately broken-but-valid table whose deductions exceed gross."""
    return make_tax_year(
        "punitive",
        (TaxBracket(Decimal("0"), None, Decimal("1")),),
        AccLevy(rate=Decimal("0.5"), max_liable_earnings=Decimal("1000000")),
    )


@pytest.fixture
def tax_table_yaml(tmp_path):  # type: ignore[no-untyped-def]
    """Write a custom tax table YAML file and return its absolute path."""
    path = tmp_path / "tax_2026_27.yaml"
    path.write_text(
        "label: '2026-27'\n"
        "brackets:\n"
        "  - {lower: 0, upper: 20000, rate: 0.10}\n"
        "  - {lower: 20000, upper: 100000, rate: 0.20}\n"
        "  - {lower: 100000, upper: null, rate: 0.40}\n"
        "acc:\n"
        "  rate: 0.02\n"
        "  max_liable_earnings: 150000\n"
    )
    return str(path)
