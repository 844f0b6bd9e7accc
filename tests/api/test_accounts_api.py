"""
Tests for the currency and chart of accounts endpoints.

These test the HTTP layer: status codes, response format and
error bodies. Business rules are tested in tests/services.
"""


class TestCurrencies:

    def test_create_currency_returns_201(self, client):
        response = client.post("/currencies", json={
            "code": "usd",
            "name": "US Dollar",
            "symbol": "$",
            "is_base": True,
        })
        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "USD"
        assert data["is_base"] is True

    def test_duplicate_currency_returns_400(self, client):
        client.post("/currencies", json={"code": "USD", "name": "US Dollar"})
        response = client.post("/currencies", json={"code": "USD", "name": "Again"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "ERR_VALIDATION"

    def test_invalid_code_length_returns_422(self, client):
        response = client.post("/currencies", json={"code": "DOLLAR", "name": "x"})
        assert response.status_code == 422

    def test_unknown_currency_returns_404(self, client):
        response = client.get("/currencies/99")
        assert response.status_code == 404
        assert response.json() == {
            "error_code": "ERR_NOT_FOUND",
            "message": "Currency 99 not found",
        }

    def test_list_currencies(self, client, chart):
        codes = [c["code"] for c in client.get("/currencies").json()]
        assert codes == ["USD", "ZWL"]


class TestAccounts:

    def test_create_account_returns_201(self, client):
        response = client.post("/accounts", json={
            "code": "1010",
            "name": "Cash on Hand",
            "account_type": "ASSET",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "1010"
        assert data["account_type"] == "ASSET"
        assert data["is_active"] is True
        assert data["parent_id"] is None

    def test_duplicate_code_returns_400(self, client, chart):
        response = client.post("/accounts", json={
            "code": "1010",
            "name": "Petty Cash",
            "account_type": "ASSET",
        })
        assert response.status_code == 400

    def test_unknown_account_type_returns_422(self, client):
        response = client.post("/accounts", json={
            "code": "9000",
            "name": "Mystery",
            "account_type": "EXOTIC",
        })
        assert response.status_code == 422

    def test_unknown_parent_returns_404(self, client):
        response = client.post("/accounts", json={
            "code": "1011",
            "name": "Cash Drawer",
            "account_type": "ASSET",
            "parent_id": 500,
        })
        assert response.status_code == 404

    def test_list_accounts_by_type(self, client, chart):
        response = client.get("/accounts", params={"account_type": "INCOME"})
        assert [a["code"] for a in response.json()] == ["4010", "4020"]

    def test_children(self, client, chart):
        parent = client.get(f"/accounts/{chart.cash}").json()["parent_id"]
        response = client.get(f"/accounts/{parent}/children")
        assert [a["code"] for a in response.json()] == ["1010", "1020"]

    def test_deactivate_account(self, client, chart):
        response = client.patch(f"/accounts/{chart.bank}", json={"is_active": False})
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        active = client.get("/accounts", params={"active_only": True}).json()
        assert "1020" not in [a["code"] for a in active]

    def test_cyclic_parent_returns_400(self, client, chart):
        parent = client.get(f"/accounts/{chart.cash}").json()["parent_id"]
        response = client.patch(f"/accounts/{parent}", json={"parent_id": chart.cash})
        assert response.status_code == 400
        assert "cycle" in response.json()["message"]

    def test_code_change_after_postings_returns_400(self, client, chart):
        client.post("/journal/entries", json={
            "description": "Fees",
            "lines": [
                {"account_id": chart.cash, "debit": 5},
                {"account_id": chart.tuition, "credit": 5},
            ],
        })
        response = client.patch(f"/accounts/{chart.tuition}", json={"code": "4011"})
        assert response.status_code == 400
        assert response.json()["error_code"] == "ERR_VALIDATION"
