"""Pytest configuration and fixtures for tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clientdesk.database import Base
from clientdesk.gateway.sql_gateway import SqlTableGateway
from clientdesk.services.clients_page import ClientsPageController
from clientdesk.services.notifications import ToastQueue


@pytest.fixture
def engine():
    """Create a fresh in-memory SQLite database for each test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    # Import all models so they're registered
    import clientdesk.models  # noqa: F401

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def gateway(session_factory) -> SqlTableGateway:
    return SqlTableGateway(session_factory)


@pytest.fixture
def toasts() -> ToastQueue:
    return ToastQueue()


@pytest.fixture
def controller(gateway, toasts) -> ClientsPageController:
    return ClientsPageController(gateway, toasts, page_size=10)


def make_client_data(index: int, **overrides) -> dict[str, str]:
    data = {
        "custom_id": f"C{index}",
        "name": f"Client {index:02d}",
        "phone": f"01020304{index:02d}",
        "address": f"{index} Rue A",
        "city": "Paris",
    }
    data.update(overrides)
    return data


@pytest.fixture
def client_data():
    """Factory for form-like client payloads."""
    return make_client_data
