"""
Tests for the calculation API endpoints.
"""

import pytest


@pytest.fixture
def financing_payload():
    """R$ 250k property, R$ 50k down, 12% a.a. over 12 months, SAC."""
    return {
        "property_value": "R$ 250.000,00",
        "down_payment": 50000,
        "annual_interest_rate": "12",
        "term_months": 12,
        "system": "sac",
    }


@pytest.fixture
def investment_payload(financing_payload):
    return {
        **financing_payload,
        "market_value": 300000,
        "holding_period_months": 12,
        "itbi": "5.000,00",
        "documentation": 2000,
        "brokerage": 3000,
        "renovation": 10000,
        "monthly_expenses": 500,
    }


class TestFinancingEndpoint:
    """Test POST /api/calculate/financing."""

    def test_sac_schedule(self, client, financing_payload):
        response = client.post("/api/calculate/financing", json=financing_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["system"] == "sac"
        assert data["financed_amount"] == 200000.0
        assert data["monthly_rate"] == 1.0
        assert data["first_installment"] == 18666.67
        assert data["last_installment"] == 16833.33
        assert data["total_interest"] == 13000.0
        assert len(data["schedule"]) == 12
        assert data["schedule"][-1]["balance"] == 0.0
        assert data["headline"]["financed_amount"] == "R$ 200.000,00"

    def test_price_schedule(self, client, financing_payload):
        financing_payload["system"] = "price"
        response = client.post("/api/calculate/financing", json=financing_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["first_installment"] == 17769.76
        assert data["first_installment"] == data["last_installment"]

    def test_down_payment_percentage(self, client, financing_payload):
        del financing_payload["down_payment"]
        financing_payload["down_payment_percentage"] = 20
        response = client.post("/api/calculate/financing", json=financing_payload)

        assert response.status_code == 200
        assert response.json()["financed_amount"] == 200000.0

    def test_down_payment_percentage_text(self, client, financing_payload):
        del financing_payload["down_payment"]
        financing_payload["down_payment_percentage"] = "20,5"
        response = client.post("/api/calculate/financing", json=financing_payload)

        assert response.status_code == 200
        assert response.json()["financed_amount"] == 198750.0

    @pytest.mark.parametrize("rate", ["12.0", "12,0", "12.00%", 12.0])
    def test_rate_with_decimal_point(self, client, financing_payload, rate):
        """A dotted rate is 12% a year, never 120%."""
        financing_payload["annual_interest_rate"] = rate
        response = client.post("/api/calculate/financing", json=financing_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["monthly_rate"] == 1.0
        assert data["first_installment"] == 18666.67

    def test_ambiguous_amount(self, client, financing_payload):
        financing_payload["property_value"] = "12.34,56"
        response = client.post("/api/calculate/financing", json=financing_payload)

        assert response.status_code == 422

    def test_due_dates(self, client, financing_payload):
        financing_payload["first_payment_date"] = "2026-01-31"
        response = client.post("/api/calculate/financing", json=financing_payload)

        schedule = response.json()["schedule"]
        assert schedule[0]["due_date"] == "2026-01-31"
        assert schedule[1]["due_date"] == "2026-02-28"

    def test_down_payment_covers_price(self, client, financing_payload):
        financing_payload["down_payment"] = 250000
        response = client.post("/api/calculate/financing", json=financing_payload)

        assert response.status_code == 400
        fields = [issue["field"] for issue in response.json()["detail"]]
        assert "down_payment" in fields

    def test_term_too_long(self, client, financing_payload):
        financing_payload["term_months"] = 600
        response = client.post("/api/calculate/financing", json=financing_payload)

        assert response.status_code == 400

    def test_unparseable_amount(self, client, financing_payload):
        financing_payload["property_value"] = "abc"
        response = client.post("/api/calculate/financing", json=financing_payload)

        assert response.status_code == 422

    def test_unknown_system(self, client, financing_payload):
        financing_payload["system"] = "german"
        response = client.post("/api/calculate/financing", json=financing_payload)

        assert response.status_code == 422


class TestInvestmentEndpoint:
    """Test POST /api/calculate/investment."""

    def test_resale_analysis(self, client, investment_payload):
        response = client.post("/api/calculate/investment", json=investment_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["holding_period_months"] == 12
        assert data["total_investment"] == 289000.0
        assert data["estimated_profit"] == 11000.0
        assert data["total_roi"] == 3.8062
        assert data["remaining_debt_at_resale"] == 0.0
        assert data["discount"] == 50000.0
        assert data["rating"] == "risky"
        assert [row["month"] for row in data["timeline_comparison"]] == [6, 12]
        assert len(data["debt_evolution"]) == 12
        assert len(data["payment_breakdown"]) == 12
        assert data["financing"]["first_installment"] == 18666.67

    def test_custom_candidates(self, client, investment_payload):
        investment_payload["candidate_months"] = [3, 9]
        response = client.post("/api/calculate/investment", json=investment_payload)

        months = [row["month"] for row in response.json()["timeline_comparison"]]
        assert months == [3, 9]

    def test_invalid_market_value(self, client, investment_payload):
        investment_payload["market_value"] = 0
        response = client.post("/api/calculate/investment", json=investment_payload)

        assert response.status_code == 400
        assert response.json()["detail"][0]["field"] == "market_value"


class TestTimelineEndpoint:
    """Test POST /api/calculate/timeline."""

    def test_timeline(self, client, investment_payload):
        investment_payload["candidate_months"] = [12, 6]
        response = client.post("/api/calculate/timeline", json=investment_payload)

        assert response.status_code == 200
        rows = response.json()["timeline_comparison"]
        assert [row["month"] for row in rows] == [6, 12]
        assert rows[0]["profit"] == 17500.0
        assert rows[0]["remaining_debt"] == 100000.0
        assert rows[1]["profit"] == 11000.0

    def test_default_candidates(self, client, investment_payload):
        response = client.post("/api/calculate/timeline", json=investment_payload)

        rows = response.json()["timeline_comparison"]
        assert [row["month"] for row in rows] == [6, 12]


class TestBalanceEndpoint:
    """Test POST /api/calculate/balance."""

    def test_sac_balance(self, client):
        response = client.post(
            "/api/calculate/balance",
            json={
                "financed_amount": 120000,
                "current_installment": 10600,
                "paid_installments": 3,
                "annual_interest_rate": 12,
                "system": "sac",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["remaining_installments"] == 9
        assert data["remaining_balance"] == 90000.0

    def test_inconsistent_installment(self, client):
        response = client.post(
            "/api/calculate/balance",
            json={
                "financed_amount": 200000,
                "current_installment": 1000,
                "paid_installments": 3,
                "annual_interest_rate": 12,
                "system": "price",
            },
        )

        assert response.status_code == 400


class TestReferenceEndpoints:
    """Test rates and health endpoints."""

    def test_suggested_rates(self, client):
        response = client.get("/api/calculate/rates")

        assert response.status_code == 200
        data = response.json()
        assert data["min"] <= data["default"] <= data["max"]

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
