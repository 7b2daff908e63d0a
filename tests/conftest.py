from datetime import date
from decimal import Decimal
from typing import Callable, List, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from fintrack.database.connection import Base, get_db, get_session_factory
from fintrack.main import app
from fintrack.schemas.insights_schema import EntryCategory, EntryFilter, LedgerEntry


def make_entry(type: str, amount, day: date, category: Optional[str] = None, color: str = "#ef4444"):
    return LedgerEntry(
        type=type,
        amount=Decimal(str(amount)),
        date=day,
        category=EntryCategory(name=category, color=color) if category else None,
    )


class InMemoryEntrySource:
    """Entry source over a fixed list, optionally failing for chosen filters."""

    def __init__(
        self,
        entries: List[LedgerEntry],
        error: Optional[Exception] = None,
        fail_when: Optional[Callable[[EntryFilter], bool]] = None,
    ):
        self.entries = entries
        self.error = error
        self.fail_when = fail_when
        self.calls: List[EntryFilter] = []

    async def fetch_entries(self, entry_filter: EntryFilter) -> List[LedgerEntry]:
        self.calls.append(entry_filter)
        if self.error is not None and (self.fail_when is None or self.fail_when(entry_filter)):
            raise self.error

        return [
            entry
            for entry in self.entries
            if (entry_filter.type is None or entry.type == entry_filter.type)
            and (entry_filter.start_date is None or entry.date >= entry_filter.start_date)
            and (entry_filter.end_date is None or entry.date <= entry_filter.end_date)
        ]


@pytest.fixture
def january_entries():
    return [
        make_entry("income", 100, date(2024, 1, 5)),
        make_entry("expense", 40, date(2024, 1, 5), category="Food"),
        make_entry("expense", 10, date(2024, 1, 6)),
    ]


@pytest.fixture
def session_factory(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}", connect_args={"check_same_thread": False}
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    engine.dispose()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client: TestClient, username: str = "alice") -> dict:
    response = client.post(
        "/user/create",
        json={
            "full_name": "Alice Example",
            "username": username,
            "email": f"{username}@example.com",
            "password": "s3cret-pass",
        },
    )
    assert response.status_code == 200

    response = client.post(
        "/user/login", data={"username": username, "password": "s3cret-pass"}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return register_and_login(client)
