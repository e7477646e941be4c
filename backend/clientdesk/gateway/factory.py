from __future__ import annotations

from clientdesk.config import settings
from clientdesk.gateway.base import TableGateway

_gateway_instance: TableGateway | None = None


def get_table_gateway() -> TableGateway:
    global _gateway_instance
    if _gateway_instance is None:
        if settings.table_backend == "supabase":
            from clientdesk.gateway.supabase_gateway import SupabaseTableGateway

            _gateway_instance = SupabaseTableGateway()
        elif settings.table_backend == "sql":
            from clientdesk.gateway.sql_gateway import SqlTableGateway

            _gateway_instance = SqlTableGateway()
        else:
            raise ValueError(f"Unknown table backend: {settings.table_backend}")
    return _gateway_instance
