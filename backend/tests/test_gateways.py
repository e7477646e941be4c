"""Tests for the table gateways (SQL backend and mocked Supabase client)."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from postgrest.exceptions import APIError
from sqlalchemy.exc import OperationalError

from clientdesk.gateway import factory
from clientdesk.gateway.sql_gateway import SqlTableGateway
from clientdesk.gateway.supabase_gateway import SupabaseTableGateway
from clientdesk.utils.exceptions import RemoteOperationError


# ---------------------------------------------------------------------------
# SQL gateway
# ---------------------------------------------------------------------------


class TestSqlTableGateway:
    @pytest.mark.asyncio
    async def test_insert_assigns_ids(self, gateway, client_data) -> None:
        rows = await gateway.insert([client_data(1), client_data(2)])
        assert len(rows) == 2
        assert all(row["id"] for row in rows)
        assert rows[0]["id"] != rows[1]["id"]

    @pytest.mark.asyncio
    async def test_insert_ignores_caller_id(self, gateway, client_data) -> None:
        [row] = await gateway.insert([{**client_data(1), "id": "chosen-by-caller"}])
        assert row["id"] != "chosen-by-caller"

    @pytest.mark.asyncio
    async def test_select_page_returns_range_and_count(self, gateway, client_data) -> None:
        await gateway.insert([client_data(i) for i in range(12)])

        rows, count = await gateway.select_page(10, 19, order_by="name")

        assert count == 12
        assert [r["name"] for r in rows] == ["Client 10", "Client 11"]

    @pytest.mark.asyncio
    async def test_select_page_descending(self, gateway, client_data) -> None:
        await gateway.insert([client_data(i) for i in range(3)])
        rows, _ = await gateway.select_page(0, 0, order_by="name", ascending=False)
        assert rows[0]["name"] == "Client 02"

    @pytest.mark.asyncio
    async def test_select_unknown_column(self, gateway) -> None:
        with pytest.raises(RemoteOperationError, match="unknown column"):
            await gateway.select_page(0, 9, order_by="email")

    @pytest.mark.asyncio
    async def test_update_returns_affected_rows(self, gateway, client_data) -> None:
        [row] = await gateway.insert([client_data(1)])

        affected = await gateway.update(row["id"], {"city": "Lyon"})

        assert affected == [{**row, "city": "Lyon"}]

    @pytest.mark.asyncio
    async def test_update_missing_row(self, gateway) -> None:
        assert await gateway.update("missing", {"city": "Lyon"}) == []

    @pytest.mark.asyncio
    async def test_update_rejects_unknown_columns(self, gateway, client_data) -> None:
        [row] = await gateway.insert([client_data(1)])
        with pytest.raises(RemoteOperationError, match="unknown columns"):
            await gateway.update(row["id"], {"email": "a@b.c"})

    @pytest.mark.asyncio
    async def test_delete(self, gateway, client_data) -> None:
        [row] = await gateway.insert([client_data(1)])

        assert await gateway.delete(row["id"]) == [row]
        assert await gateway.delete(row["id"]) == []
        _, count = await gateway.select_page(0, 9, order_by="name")
        assert count == 0

    @pytest.mark.asyncio
    async def test_database_error_is_wrapped(self) -> None:
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("disk I/O error"))
        gateway = SqlTableGateway(MagicMock(return_value=db))

        with pytest.raises(RemoteOperationError, match="select failed"):
            await gateway.select_page(0, 9, order_by="name")
        db.rollback.assert_called_once()
        db.close.assert_called_once()

    def test_backend_name(self, gateway) -> None:
        assert gateway.backend_name == "sql"


# ---------------------------------------------------------------------------
# Supabase gateway
# ---------------------------------------------------------------------------


def _make_supabase_client(data=None, count=None, error: Exception | None = None):
    """Mock of the supabase AsyncClient; every builder call returns the same builder."""
    response = MagicMock()
    response.data = data
    response.count = count

    builder = MagicMock()
    for method in ("select", "order", "range", "insert", "update", "delete", "eq"):
        getattr(builder, method).return_value = builder
    builder.execute = AsyncMock(return_value=response, side_effect=error)

    client = MagicMock()
    client.table.return_value = builder
    return client, builder


class TestSupabaseTableGateway:
    @pytest.mark.asyncio
    async def test_select_page_builds_query(self) -> None:
        client, builder = _make_supabase_client(data=[{"id": 1, "name": "A"}], count=25)
        gateway = SupabaseTableGateway("clients", client=client)

        rows, count = await gateway.select_page(10, 19, order_by="name", ascending=True)

        client.table.assert_called_once_with("clients")
        builder.select.assert_called_once_with("*", count="exact")
        builder.order.assert_called_once_with("name", desc=False)
        builder.range.assert_called_once_with(10, 19)
        assert rows == [{"id": 1, "name": "A"}]
        assert count == 25

    @pytest.mark.asyncio
    async def test_select_page_without_data(self) -> None:
        client, _ = _make_supabase_client(data=None, count=0)
        gateway = SupabaseTableGateway("clients", client=client)
        assert await gateway.select_page(0, 9, order_by="name") == ([], 0)

    @pytest.mark.asyncio
    async def test_select_page_without_count_is_an_error(self) -> None:
        client, _ = _make_supabase_client(data=[{"id": 1, "name": "A"}], count=None)
        gateway = SupabaseTableGateway("clients", client=client)

        with pytest.raises(RemoteOperationError, match="no exact count"):
            await gateway.select_page(0, 9, order_by="name")

    @pytest.mark.asyncio
    async def test_insert(self) -> None:
        inserted = [{"id": "abc", "name": "Dupont"}]
        client, builder = _make_supabase_client(data=inserted)
        gateway = SupabaseTableGateway("clients", client=client)

        assert await gateway.insert([{"name": "Dupont"}]) == inserted
        builder.insert.assert_called_once_with([{"name": "Dupont"}])

    @pytest.mark.asyncio
    async def test_update_filters_by_id(self) -> None:
        client, builder = _make_supabase_client(data=[])
        gateway = SupabaseTableGateway("clients", client=client)

        await gateway.update("abc", {"city": "Lyon"})

        builder.update.assert_called_once_with({"city": "Lyon"})
        builder.eq.assert_called_once_with("id", "abc")

    @pytest.mark.asyncio
    async def test_delete_filters_by_id(self) -> None:
        client, builder = _make_supabase_client(data=[])
        gateway = SupabaseTableGateway("clients", client=client)

        assert await gateway.delete("abc") == []
        builder.delete.assert_called_once_with()
        builder.eq.assert_called_once_with("id", "abc")

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped(self) -> None:
        error = APIError({"message": "permission denied", "code": "42501", "hint": None, "details": None})
        client, _ = _make_supabase_client(error=error)
        gateway = SupabaseTableGateway("clients", client=client)

        with pytest.raises(RemoteOperationError, match="permission denied"):
            await gateway.delete("abc")

    @pytest.mark.asyncio
    async def test_transport_error_is_wrapped(self) -> None:
        client, _ = _make_supabase_client(error=httpx.ConnectError("connection refused"))
        gateway = SupabaseTableGateway("clients", client=client)

        with pytest.raises(RemoteOperationError, match="insert failed"):
            await gateway.insert([{"name": "X"}])

    def test_requires_credentials(self) -> None:
        with patch("clientdesk.gateway.supabase_gateway.settings") as mock_settings:
            mock_settings.clients_table = "clients"
            mock_settings.supabase_url = ""
            mock_settings.supabase_key = ""
            with pytest.raises(ValueError, match="SUPABASE_URL"):
                SupabaseTableGateway()

    @pytest.mark.asyncio
    async def test_client_created_lazily(self) -> None:
        client, _ = _make_supabase_client(data=[], count=0)
        with (
            patch("clientdesk.gateway.supabase_gateway.settings") as mock_settings,
            patch(
                "clientdesk.gateway.supabase_gateway.acreate_client",
                AsyncMock(return_value=client),
            ) as mock_create,
        ):
            mock_settings.clients_table = "clients"
            mock_settings.supabase_url = "https://example.supabase.co"
            mock_settings.supabase_key = "anon-key"
            gateway = SupabaseTableGateway()

            await gateway.select_page(0, 9, order_by="name")
            await gateway.select_page(0, 9, order_by="name")

        mock_create.assert_awaited_once_with("https://example.supabase.co", "anon-key")

    @pytest.mark.asyncio
    async def test_concurrent_first_calls_create_one_client(self) -> None:
        client, _ = _make_supabase_client(data=[], count=0)

        async def slow_create(url, key):
            await asyncio.sleep(0)
            return client

        with (
            patch("clientdesk.gateway.supabase_gateway.settings") as mock_settings,
            patch(
                "clientdesk.gateway.supabase_gateway.acreate_client",
                AsyncMock(side_effect=slow_create),
            ) as mock_create,
        ):
            mock_settings.clients_table = "clients"
            mock_settings.supabase_url = "https://example.supabase.co"
            mock_settings.supabase_key = "anon-key"
            gateway = SupabaseTableGateway()

            await asyncio.gather(
                gateway.select_page(0, 9, order_by="name"),
                gateway.select_page(10, 19, order_by="name"),
            )

        assert mock_create.await_count == 1


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class TestGatewayFactory:
    def setup_method(self) -> None:
        factory._gateway_instance = None

    def teardown_method(self) -> None:
        factory._gateway_instance = None

    def test_sql_backend(self) -> None:
        with patch("clientdesk.gateway.factory.settings") as mock_settings:
            mock_settings.table_backend = "sql"
            gateway = factory.get_table_gateway()
        assert isinstance(gateway, SqlTableGateway)
        assert factory.get_table_gateway() is gateway

    def test_unknown_backend(self) -> None:
        with patch("clientdesk.gateway.factory.settings") as mock_settings:
            mock_settings.table_backend = "firebase"
            with pytest.raises(ValueError, match="Unknown table backend"):
                factory.get_table_gateway()
