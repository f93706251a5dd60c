"""
Tests for account API endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Business logic is tested in
tests/services/test_ledger_service.py.
"""

from decimal import Decimal


def create_account(client, **fields):
    body = {"account_type": "current", "name": "Current", "balance": "100.00"}
    body.update(fields)
    return client.post("/accounts", json=body)


class TestCreateAccount:

    def test_create_returns_201(self, client):
        response = create_account(client)
        assert response.status_code == 201

    def test_create_returns_data(self, client):
        data = create_account(client, id="acc-1").json()
        assert data["id"] == "acc-1"
        assert data["account_type"] == "current"
        assert Decimal(data["balance"]) == Decimal("100.00")
        assert data["reset_frequency"] is None

    def test_savings_with_interest(self, client):
        data = create_account(
            client, account_type="savings", interest_rate="4.25"
        ).json()
        assert Decimal(data["interest_rate"]) == Decimal("4.25")

    def test_field_from_another_type_returns_422(self, client):
        response = create_account(client, interest_rate="4.25")
        assert response.status_code == 422

    def test_unknown_type_returns_422(self, client):
        response = create_account(client, account_type="piggy_bank")
        assert response.status_code == 422

    def test_api_key_not_returned(self, client):
        data = create_account(
            client, account_type="investment", api_key="secret", pie_id="pie-1"
        ).json()
        assert "api_key" not in data
        assert data["pie_id"] == "pie-1"


class TestAccountCrud:

    def test_get_missing_returns_404(self, client):
        response = client.get("/accounts/nope")
        assert response.status_code == 404
        assert response.json() == {
            "detail": "Account nope not found",
            "retryable": False,
        }

    def test_list(self, client):
        create_account(client, name="B", display_order=2)
        create_account(client, name="A", display_order=1)
        names = [a["name"] for a in client.get("/accounts").json()]
        assert names == ["A", "B"]

    def test_patch(self, client):
        account_id = create_account(client).json()["id"]
        response = client.patch(f"/accounts/{account_id}", json={
            "reset_frequency": "monthly",
            "reset_day": 25,
        })
        assert response.status_code == 200
        assert response.json()["reset_day"] == 25

    def test_patch_invalid_field_for_type_returns_400(self, client):
        account_id = create_account(client).json()["id"]
        response = client.patch(f"/accounts/{account_id}", json={"pie_id": "x"})
        assert response.status_code == 400

    def test_delete(self, client):
        account_id = create_account(client).json()["id"]
        assert client.delete(f"/accounts/{account_id}").status_code == 204
        assert client.get(f"/accounts/{account_id}").status_code == 404


class TestProjection:

    def test_projection(self, client):
        account_id = create_account(
            client, reset_frequency="weekly"
        ).json()["id"]
        client.post("/recurring-payments", json={
            "name": "Gym",
            "amount": "30.00",
            "frequency": "monthly",
            "category": "Health",
            "payment_type": "expense",
            "next_payment_date": "2024-01-20",
            "account_id": account_id,
        })

        data = client.get(f"/accounts/{account_id}/projection").json()

        assert data["boundary"] == "2024-01-21T23:59:59"
        assert Decimal(data["expense_total"]) == Decimal("30.00")
        assert Decimal(data["projected_balance"]) == Decimal("70.00")

    def test_projection_without_reset(self, client):
        account_id = create_account(client).json()["id"]
        data = client.get(f"/accounts/{account_id}/projection").json()
        assert data["boundary"] is None
        assert Decimal(data["projected_balance"]) == Decimal("100.00")
