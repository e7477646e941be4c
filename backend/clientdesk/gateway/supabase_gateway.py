"""Clients table access through the Supabase (PostgREST) async client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from clientdesk.config import settings
from clientdesk.gateway.base import Row, TableGateway
from clientdesk.utils.exceptions import RemoteOperationError

logger = logging.getLogger(__name__)


class SupabaseTableGateway(TableGateway):
    def __init__(
        self,
        table_name: str | None = None,
        *,
        client: AsyncClient | None = None,
    ) -> None:
        self._table_name = table_name or settings.clients_table
        self._client = client
        self._client_lock = asyncio.Lock()
        if client is None and not (settings.supabase_url and settings.supabase_key):
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be configured")

    @property
    def backend_name(self) -> str:
        return "supabase"

    async def _table(self) -> Any:
        if self._client is None:
            async with self._client_lock:
                if self._client is None:
                    self._client = await acreate_client(
                        settings.supabase_url, settings.supabase_key
                    )
        return self._client.table(self._table_name)

    async def _execute(self, operation: str, query: Any) -> Any:
        try:
            return await query.execute()
        except APIError as e:
            logger.error("Supabase %s on '%s' rejected: %s", operation, self._table_name, e.message)
            raise RemoteOperationError(operation, e.message or str(e)) from e
        except httpx.HTTPError as e:
            logger.error("Supabase %s on '%s' request error: %s", operation, self._table_name, e)
            raise RemoteOperationError(operation, str(e)) from e

    async def select_page(
        self, start: int, end: int, *, order_by: str, ascending: bool = True
    ) -> tuple[list[Row], int]:
        table = await self._table()
        query = (
            table.select("*", count="exact")
            .order(order_by, desc=not ascending)
            .range(start, end)
        )
        response = await self._execute("select", query)
        if response.count is None:
            logger.error("Supabase select on '%s' returned no row count", self._table_name)
            raise RemoteOperationError("select", "no exact count returned")
        return response.data or [], response.count

    async def insert(self, rows: list[Row]) -> list[Row]:
        table = await self._table()
        response = await self._execute("insert", table.insert(rows))
        return response.data or []

    async def update(self, row_id: str, values: Row) -> list[Row]:
        table = await self._table()
        response = await self._execute("update", table.update(values).eq("id", row_id))
        return response.data or []

    async def delete(self, row_id: str) -> list[Row]:
        table = await self._table()
        response = await self._execute("delete", table.delete().eq("id", row_id))
        return response.data or []
