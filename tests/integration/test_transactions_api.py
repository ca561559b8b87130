"""Integration tests for transaction endpoints."""

from datetime import date, timedelta
from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from finsmart.models.transaction import Transaction
from finsmart.models.user import User
from finsmart.repositories.transaction import TransactionRepository


async def _create(client: AsyncClient, headers: dict, **overrides) -> dict:
    payload = {"kind": "expense", "description": "Cena en restaurante", "amount": 2500}
    payload.update(overrides)
    response = await client.post("/api/v1/transactions", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateTransaction:
    @pytest.mark.asyncio
    async def test_category_inferred_from_description(self, client: AsyncClient, auth_headers):
        data = await _create(client, auth_headers)

        assert data["category"] == "alimentación"
        assert data["kind"] == "expense"
        assert data["amount"] == 2500
        assert data["txn_date"] == date.today().isoformat()
        assert data["payment_method"] == "cash"

    @pytest.mark.asyncio
    async def test_explicit_category_kept(self, client: AsyncClient, auth_headers):
        data = await _create(client, auth_headers, category="hogar")
        assert data["category"] == "hogar"

    @pytest.mark.asyncio
    async def test_unmatched_description_is_other(self, client: AsyncClient, auth_headers):
        data = await _create(client, auth_headers, description="Varios sin detalle")
        assert data["category"] == "otros"

    @pytest.mark.asyncio
    async def test_invalid_amount(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/v1/transactions",
            json={"kind": "expense", "description": "Taxi", "amount": -1},
            headers=auth_headers,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "VAL_001"
        assert body["details"][0]["field"] == "amount"

    @pytest.mark.asyncio
    async def test_requires_authentication(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/transactions",
            json={"kind": "expense", "description": "Taxi", "amount": 100},
        )
        assert response.status_code in (401, 403)

    @pytest.mark.asyncio
    async def test_income_without_goals_succeeds(self, client: AsyncClient, auth_headers):
        data = await _create(
            client, auth_headers, kind="income", description="Salario", amount=100000
        )
        assert data["kind"] == "income"


class TestListTransactions:
    @pytest.mark.asyncio
    async def test_filters_and_totals(self, client: AsyncClient, auth_headers):
        await _create(client, auth_headers, kind="income", description="Salario", amount=200000)
        await _create(client, auth_headers, description="Taxi al aeropuerto", amount=3000)
        await _create(client, auth_headers, description="Supermercado", amount=7000)

        response = await client.get("/api/v1/transactions", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["pagination"]["total"] == 3
        assert data["totals"] == {
            "total_income": 200000,
            "total_expense": 10000,
            "balance": 190000,
            "income_count": 1,
            "expense_count": 2,
        }
        assert data["money"]["currency"] == "EUR"

        response = await client.get(
            "/api/v1/transactions",
            params={"kind": "expense", "category": "transporte"},
            headers=auth_headers,
        )
        data = response.json()
        assert [t["description"] for t in data["transactions"]] == ["Taxi al aeropuerto"]
        assert data["totals"]["total_income"] == 0

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, client: AsyncClient, auth_headers):
        await _create(client, auth_headers, description="Supermercado Central")

        response = await client.get(
            "/api/v1/transactions", params={"search": "central"}, headers=auth_headers
        )

        assert response.json()["pagination"]["total"] == 1

    @pytest.mark.asyncio
    async def test_date_range_inclusive_and_newest_first(self, client: AsyncClient, auth_headers):
        today = date.today()
        for days_ago in (0, 5, 10):
            await _create(
                client,
                auth_headers,
                description=f"Taxi {days_ago}",
                txn_date=(today - timedelta(days=days_ago)).isoformat(),
            )

        response = await client.get(
            "/api/v1/transactions",
            params={
                "start_date": (today - timedelta(days=5)).isoformat(),
                "end_date": today.isoformat(),
            },
            headers=auth_headers,
        )

        descriptions = [t["description"] for t in response.json()["transactions"]]
        assert descriptions == ["Taxi 0", "Taxi 5"]

    @pytest.mark.asyncio
    async def test_pagination(self, client: AsyncClient, auth_headers):
        for i in range(5):
            await _create(client, auth_headers, description=f"Taxi {i}")

        response = await client.get(
            "/api/v1/transactions", params={"page": 2, "limit": 2}, headers=auth_headers
        )

        data = response.json()
        assert len(data["transactions"]) == 2
        assert data["pagination"] == {"page": 2, "limit": 2, "total": 5, "total_pages": 3}

    @pytest.mark.asyncio
    async def test_limit_out_of_range(self, client: AsyncClient, auth_headers):
        response = await client.get(
            "/api/v1/transactions", params={"limit": 101}, headers=auth_headers
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_other_users_transactions_hidden(
        self, client: AsyncClient, auth_headers, db_session: AsyncSession, other_user: User
    ):
        await TransactionRepository(db_session).create(
            Transaction(
                user_id=other_user.id,
                kind="expense",
                description="Ajeno",
                amount=100,
                category="otros",
                payment_method="cash",
            )
        )

        response = await client.get("/api/v1/transactions", headers=auth_headers)
        assert response.json()["pagination"]["total"] == 0


class TestSingleTransaction:
    @pytest.mark.asyncio
    async def test_get(self, client: AsyncClient, auth_headers):
        created = await _create(client, auth_headers)

        response = await client.get(f"/api/v1/transactions/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    @pytest.mark.asyncio
    async def test_get_missing(self, client: AsyncClient, auth_headers):
        response = await client.get(f"/api/v1/transactions/{uuid4()}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error_code"] == "TXN_001"

    @pytest.mark.asyncio
    async def test_update_reclassifies(self, client: AsyncClient, auth_headers):
        created = await _create(client, auth_headers)

        response = await client.put(
            f"/api/v1/transactions/{created['id']}",
            json={"kind": "expense", "description": "Consulta médico", "amount": 4000},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["category"] == "salud"
        assert data["amount"] == 4000

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, client: AsyncClient, auth_headers, db_session: AsyncSession):
        created = await _create(client, auth_headers)

        response = await client.delete(
            f"/api/v1/transactions/{created['id']}", headers=auth_headers
        )
        assert response.status_code == 204

        response = await client.get(f"/api/v1/transactions/{created['id']}", headers=auth_headers)
        assert response.status_code == 404

        # Row is kept, only flagged inactive
        row = await TransactionRepository(db_session).get_by_id(UUID(created["id"]))
        assert row is not None
        assert row.is_active is False

        response = await client.delete(
            f"/api/v1/transactions/{created['id']}", headers=auth_headers
        )
        assert response.status_code == 404


class TestReports:
    @pytest.mark.asyncio
    async def test_category_summary(self, client: AsyncClient, auth_headers):
        await _create(client, auth_headers, description="Supermercado", amount=6000)
        await _create(client, auth_headers, description="Restaurante", amount=2000)
        await _create(client, auth_headers, description="Taxi", amount=1000)

        response = await client.get(
            "/api/v1/transactions/summary/categories",
            params={"kind": "expense"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["grand_total"] == 9000
        first = data["categories"][0]
        assert first["category"] == "alimentación"
        assert first["total"] == 8000
        assert first["count"] == 2
        assert first["average"] == 4000

    @pytest.mark.asyncio
    async def test_monthly_trends_zero_filled(self, client: AsyncClient, auth_headers):
        today = date.today()
        await _create(client, auth_headers, kind="income", description="Salario", amount=50000)
        await _create(client, auth_headers, description="Taxi", amount=1500)

        response = await client.get(
            "/api/v1/transactions/trends/monthly",
            params={"year": today.year},
            headers=auth_headers,
        )

        assert response.status_code == 200
        months = response.json()["months"]
        assert [m["month"] for m in months] == list(range(1, 13))
        current = months[today.month - 1]
        assert current == {
            "month": today.month,
            "income": 50000,
            "expense": 1500,
            "balance": 48500,
        }
        assert sum(m["income"] for m in months) == 50000
