"""API routes for the NZ PAYE calculator."""

import logging
from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.calculators.models import CalculationResult, PeriodAmounts
from src.calculators.paye import calculate, split_by_period
from src.calculators.tax_data import TAX_YEARS, ConfigurationError, TaxYearData, get_tax_year
from src.calculators.validation import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter()


class CalculateRequest(BaseModel):
    """Request body for the /calculate endpoint.

    Values are left loosely typed so the calculator's own validation
    produces the field-level error message.
    """

    annual_salary: Any
    kiwisaver_rate: Any
    tax_year: str | None = None
    pay_period: str | None = None


class CalculateResponse(CalculationResult):
    """Calculation result with an optional pay-period split."""

    per_period: PeriodAmounts | None = None


def _active_tax_year(request: Request, requested: str | None) -> TaxYearData:
    if requested is not None:
        try:
            return get_tax_year(requested)
        except ConfigurationError as exc:
            raise ValidationError("tax_year", str(exc)) from None
    return request.app.state.tax_year


def _tax_year_summary(data: TaxYearData) -> dict[str, Any]:
    return {
        "label": data.label,
        "brackets": [
            {
                "lower": float(b.lower),
                "upper": float(b.upper) if b.upper is not None else None,
                "rate": float(b.rate),
            }
            for b in data.brackets
        ],
        "acc": {
            "rate": float(data.acc.rate),
            "max_liable_earnings": float(data.acc.max_liable_earnings),
        },
    }


@router.get("/health")
async def health(request: Request) -> dict[str, str]:
    """Health check with the active tax year."""
    return {"status": "ok", "tax_year": _active_tax_year(request, None).label}


@router.get("/tax-years")
async def tax_years() -> list[dict[str, Any]]:
    """List built-in tax years with their brackets and ACC parameters."""
    return [_tax_year_summary(TAX_YEARS[label]) for label in sorted(TAX_YEARS)]


@router.post("/calculate", response_model=CalculateResponse)
async def calculate_endpoint(body: CalculateRequest, request: Request) -> CalculateResponse:
    """Calculate PAYE, KiwiSaver and ACC for an annual salary."""
    data = _active_tax_year(request, body.tax_year)
    result = calculate(body.annual_salary, body.kiwisaver_rate, data)
    per_period = split_by_period(result, body.pay_period) if body.pay_period else None
    logger.info("Calculated PAYE for tax year %s", data.label)
    return CalculateResponse(**result.model_dump(), per_period=per_period)
