from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

Row = dict[str, Any]


class TableGateway(ABC):
    """CRUD and count access to one remote table.

    Every method either returns its payload or raises
    ``RemoteOperationError``; a call never yields both.
    """

    @abstractmethod
    async def select_page(
        self, start: int, end: int, *, order_by: str, ascending: bool = True
    ) -> tuple[list[Row], int]:
        """Return rows ``start..end`` (both inclusive) and the exact row count."""

    @abstractmethod
    async def insert(self, rows: list[Row]) -> list[Row]: ...

    @abstractmethod
    async def update(self, row_id: str, values: Row) -> list[Row]: ...

    @abstractmethod
    async def delete(self, row_id: str) -> list[Row]: ...

    @property
    @abstractmethod
    def backend_name(self) -> str: ...
