"""Tests for the API endpoints."""

from decimal import Decimal

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from config.settings import settings
from src.api.app import create_app


@pytest.fixture
def app() -> FastAPI:
    """Create the app; lifespan does not run unless the client is entered."""
    return create_app()


@pytest.fixture
def client(app: FastAPI, monkeypatch: pytest.MonkeyPatch) -> Iterator[TestClient]:
    """Client with lifespan run against default settings."""
    monkeypatch.setattr(settings, "tax_year", "2023-24")
    monkeypatch.setattr(settings, "acc_rate", None)
    monkeypatch.setattr(settings, "acc_max_liable_earnings", None)
    monkeypatch.setattr(settings, "tax_table_file", None)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client: TestClient) -> None:
    """GET /health returns ok status and the default tax year."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "tax_year": "2023-24"}


def test_tax_years(client: TestClient) -> None:
    response = client.get("/tax-years")
    assert response.status_code == 200
    data = response.json()
    assert [y["label"] for y in data] == ["2023-24", "2024-25", "2025-26"]
    assert data[0]["acc"] == {"rate": 0.0153, "max_liable_earnings": 139384.0}
    assert data[0]["brackets"][-1]["upper"] is None


def test_calculate_scenario(client: TestClient) -> None:
    """POST /calculate returns annual and monthly figures as numbers."""
    response = client.post("/calculate", json={"annual_salary": 60000, "kiwisaver_rate": 0.03})
    assert response.status_code == 200
    data = response.json()
    assert data["monthly_gross"] == 5000.0
    assert data["monthly_kiwisaver"] == 150.0
    assert data["monthly_acc"] == 76.5
    assert data["monthly_tax"] == 918.33
    assert data["monthly_take_home"] == 3855.17
    assert data["annual_take_home"] == 46262.0
    assert data["tax_year"] == "2023-24"
    assert data["per_period"] is None
    assert len(data["tax_breakdown"]) == 3


def test_calculate_string_salary(client: TestClient) -> None:
    response = client.post("/calculate", json={"annual_salary": "60000", "kiwisaver_rate": "0.05"})
    assert response.status_code == 200
    assert response.json()["annual_kiwisaver"] == 3000.0


def test_calculate_explicit_tax_year(client: TestClient) -> None:
    response = client.post(
        "/calculate", json={"annual_salary": 80000, "kiwisaver_rate": 0, "tax_year": "2025-26"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["tax_year"] == "2025-26"
    assert data["annual_acc"] == 1336.0


def test_calculate_with_pay_period(client: TestClient) -> None:
    response = client.post(
        "/calculate", json={"annual_salary": 52000, "kiwisaver_rate": 0, "pay_period": "weekly"}
    )
    assert response.status_code == 200
    per_period = response.json()["per_period"]
    assert per_period["periods_per_year"] == 52
    assert per_period["gross"] == 1000.0


def test_calculate_negative_salary(client: TestClient) -> None:
    response = client.post("/calculate", json={"annual_salary": -1, "kiwisaver_rate": 0})
    assert response.status_code == 422
    assert response.json() == {"error": "salary must be non-negative", "field": "annual_salary"}


def test_calculate_invalid_kiwisaver_rate(client: TestClient) -> None:
    response = client.post("/calculate", json={"annual_salary": 50000, "kiwisaver_rate": 0.04})
    assert response.status_code == 422
    assert response.json()["field"] == "kiwisaver_rate"


def test_calculate_unknown_tax_year(client: TestClient) -> None:
    response = client.post(
        "/calculate", json={"annual_salary": 50000, "kiwisaver_rate": 0, "tax_year": "2099-00"}
    )
    assert response.status_code == 422
    assert response.json()["field"] == "tax_year"


def test_calculate_invalid_pay_period(client: TestClient) -> None:
    response = client.post(
        "/calculate", json={"annual_salary": 50000, "kiwisaver_rate": 0, "pay_period": "biweekly"}
    )
    assert response.status_code == 422
    assert response.json()["field"] == "pay_period"


def test_calculate_missing_salary(client: TestClient) -> None:
    """POST /calculate without annual_salary is rejected by request parsing."""
    response = client.post("/calculate", json={})
    assert response.status_code == 422


def test_calculate_missing_kiwisaver_rate(client: TestClient) -> None:
    """No KiwiSaver selection is rejected, never defaulted to 0%."""
    response = client.post("/calculate", json={"annual_salary": 60000})
    assert response.status_code == 422


def test_calculate_salary_too_large(client: TestClient) -> None:
    response = client.post("/calculate", json={"annual_salary": 1e26, "kiwisaver_rate": 0.03})
    assert response.status_code == 422
    assert response.json()["field"] == "annual_salary"


def test_calculate_negative_zero_salary(client: TestClient) -> None:
    response = client.post("/calculate", json={"annual_salary": "-0", "kiwisaver_rate": "-0"})
    assert response.status_code == 200
    data = response.json()
    assert str(data["annual_gross"]) == "0.0"
    assert str(data["monthly_take_home"]) == "0.0"
    assert str(data["kiwisaver_rate"]) == "0.0"


def test_calculate_requires_startup(app: FastAPI) -> None:
    """Without the lifespan there is no active tax table to fall back on."""
    client = TestClient(app)
    with pytest.raises(AttributeError):
        client.post("/calculate", json={"annual_salary": 60000, "kiwisaver_rate": 0})


def test_lifespan_applies_settings(app: FastAPI, monkeypatch: pytest.MonkeyPatch) -> None:
    """Startup resolves tax year and ACC overrides from settings."""
    monkeypatch.setattr(settings, "tax_year", "2025-26")
    monkeypatch.setattr(settings, "acc_rate", Decimal("0.0153"))
    monkeypatch.setattr(settings, "acc_max_liable_earnings", Decimal("139384"))

    with TestClient(app) as client:
        assert client.get("/health").json()["tax_year"] == "2025-26"
        data = client.post(
            "/calculate", json={"annual_salary": 200000, "kiwisaver_rate": 0}
        ).json()

    # $139,384 * 1.53% = $2,132.5752
    assert data["annual_acc"] == 2132.58
