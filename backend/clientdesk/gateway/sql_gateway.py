"""Clients table access through SQLAlchemy, for local development and tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from clientdesk.database import SessionLocal
from clientdesk.gateway.base import Row, TableGateway
from clientdesk.models.client import ClientRow
from clientdesk.utils.exceptions import RemoteOperationError

logger = logging.getLogger(__name__)

COLUMNS = ("id", "custom_id", "name", "phone", "address", "city")


def _to_row(client: ClientRow) -> Row:
    return {column: getattr(client, column) for column in COLUMNS}


def _check_columns(values: Row) -> None:
    unknown = set(values) - set(COLUMNS)
    if unknown:
        raise RemoteOperationError("write", f"unknown columns: {sorted(unknown)}")


class SqlTableGateway(TableGateway):
    def __init__(self, session_factory: sessionmaker[Session] | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    @property
    def backend_name(self) -> str:
        return "sql"

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("SQL %s on clients failed: %s", operation, e)
            raise RemoteOperationError(operation, str(e)) from e
        finally:
            db.close()

    async def select_page(
        self, start: int, end: int, *, order_by: str, ascending: bool = True
    ) -> tuple[list[Row], int]:
        if order_by not in COLUMNS:
            raise RemoteOperationError("select", f"unknown column '{order_by}'")
        column = getattr(ClientRow, order_by)
        with self._session("select") as db:
            count = db.query(ClientRow).count()
            clients = (
                db.query(ClientRow)
                .order_by(column.asc() if ascending else column.desc())
                .offset(start)
                .limit(max(end - start + 1, 0))
                .all()
            )
            return [_to_row(c) for c in clients], count

    async def insert(self, rows: list[Row]) -> list[Row]:
        for values in rows:
            _check_columns(values)
        with self._session("insert") as db:
            # The id is always assigned here, never taken from the caller
            clients = [
                ClientRow(**{k: v for k, v in values.items() if k != "id"})
                for values in rows
            ]
            db.add_all(clients)
            db.commit()
            for client in clients:
                db.refresh(client)
            return [_to_row(c) for c in clients]

    async def update(self, row_id: str, values: Row) -> list[Row]:
        _check_columns(values)
        with self._session("update") as db:
            clients = db.query(ClientRow).filter(ClientRow.id == row_id).all()
            for client in clients:
                for column, value in values.items():
                    if column != "id":
                        setattr(client, column, value)
            db.commit()
            for client in clients:
                db.refresh(client)
            return [_to_row(c) for c in clients]

    async def delete(self, row_id: str) -> list[Row]:
        with self._session("delete") as db:
            clients = db.query(ClientRow).filter(ClientRow.id == row_id).all()
            deleted = [_to_row(c) for c in clients]
            for client in clients:
                db.delete(client)
            db.commit()
            return deleted
