"""Tests for the API routes via FastAPI TestClient."""

import io
from collections.abc import Generator
from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from openpyxl import load_workbook
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from adrevenue.services._helpers import utc_now
from adrevenue.services.errors import RecordSourceError
from adrevenue.services.sources import RecordSource
from app.main import install_error_handlers
from app.routes import health, revenue
from db.connection import get_db
from db.models import Admins, Base, Transactions, Users, Wallets

ADMIN_TOKEN = "admin-token"
USER_TOKEN = "advertiser-token"


def _create_test_app() -> FastAPI:
    """Minimal app without lifespan (no schema init against the real DB)."""
    test_app: FastAPI = FastAPI()
    install_error_handlers(test_app)
    test_app.include_router(health.router)
    test_app.include_router(revenue.router)
    return test_app


_test_app: FastAPI = _create_test_app()


@pytest.fixture()
def _route_engine() -> Generator[Engine, None, None]:
    """In-memory SQLite engine with check_same_thread=False for TestClient."""
    eng: Engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def _route_session(_route_engine: Engine) -> Generator[Session, None, None]:
    factory: sessionmaker[Session] = sessionmaker(
        bind=_route_engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )
    sess: Session = factory()
    yield sess
    sess.close()


@pytest.fixture()
def client(_route_session: Session) -> Generator[TestClient, None, None]:
    def _override_get_db() -> Generator[Session, None, None]:
        yield _route_session

    _test_app.dependency_overrides[get_db] = _override_get_db
    _seed_users(_route_session)
    with TestClient(_test_app) as c:
        yield c
    _test_app.dependency_overrides.clear()


def _seed_users(session: Session) -> None:
    admin = Users(email="admin@example.com", role="ADMIN", api_token=ADMIN_TOKEN)
    advertiser = Users(email="ads@example.com", role="ADVERTISER", api_token=USER_TOKEN)
    session.add_all([admin, advertiser])
    session.flush()
    session.add(Admins(user_id=admin.id))
    session.commit()


def _seed_recent_revenue(session: Session, amounts: tuple[str, ...] = ("100.00", "40.00")) -> None:
    wallet = Wallets()
    session.add(wallet)
    session.flush()
    today: datetime = utc_now().replace(hour=0, minute=0, second=0, microsecond=0)
    for i, amount in enumerate(amounts):
        session.add(
            Transactions(
                wallet_id=wallet.id,
                type="DEPOSIT",
                status="COMPLETED",
                amount=Decimal(amount),
                date=today - timedelta(days=i + 1),
            )
        )
    session.commit()


def _auth(token: str = ADMIN_TOKEN) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


EXPORT_URL = "/api/admin/revenue/export"


class TestAuth:
    def test_missing_token(self, client: TestClient) -> None:
        r = client.get(EXPORT_URL)
        assert r.status_code == 401
        assert r.json() == {"error": "Unauthorized"}

    def test_unknown_token(self, client: TestClient) -> None:
        r = client.get(EXPORT_URL, headers=_auth("nope"))
        assert r.status_code == 401

    def test_wrong_scheme(self, client: TestClient) -> None:
        r = client.get(EXPORT_URL, headers={"Authorization": f"Basic {ADMIN_TOKEN}"})
        assert r.status_code == 401

    def test_non_admin(self, client: TestClient) -> None:
        r = client.get(EXPORT_URL, headers=_auth(USER_TOKEN))
        assert r.status_code == 403
        assert r.json() == {"error": "Forbidden: Admin access required"}

    def test_auth_checked_before_format(self, client: TestClient) -> None:
        r = client.get(EXPORT_URL, params={"format": "pdf"})
        assert r.status_code == 401


class TestExport:
    def test_default_overview_csv(self, client: TestClient, _route_session: Session) -> None:
        _seed_recent_revenue(_route_session)
        r = client.get(EXPORT_URL, headers=_auth())
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/csv")
        today: str = utc_now().date().isoformat()
        assert r.headers["content-disposition"] == (
            f'attachment; filename="revenue-overview-{today}.csv"'
        )
        lines: list[str] = r.text.strip().split("\n")
        assert lines[0] == "Date,Revenue"
        assert len(lines) == 3
        assert lines[1].endswith('"40.00"')
        assert lines[2].endswith('"100.00"')

    def test_xlsx(self, client: TestClient, _route_session: Session) -> None:
        _seed_recent_revenue(_route_session)
        r = client.get(EXPORT_URL, params={"format": "xlsx", "type": "transactions"}, headers=_auth())
        assert r.status_code == 200
        assert r.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "revenue-transactions-" in r.headers["content-disposition"]
        ws = load_workbook(io.BytesIO(r.content))["Revenue Data"]
        rows = list(ws.iter_rows(values_only=True))
        assert rows[0][:3] == ("ID", "Type", "Amount")
        assert len(rows) == 3

    def test_explicit_dates(self, client: TestClient, _route_session: Session) -> None:
        _seed_recent_revenue(_route_session)
        r = client.get(
            EXPORT_URL,
            params={"startDate": "2020-01-01", "endDate": "2020-01-31", "type": "overview"},
            headers=_auth(),
        )
        assert r.status_code == 200
        assert r.text == "Date,Revenue\n"

    def test_pdf_not_implemented(self, client: TestClient) -> None:
        r = client.get(EXPORT_URL, params={"format": "pdf"}, headers=_auth())
        assert r.status_code == 501
        assert r.json() == {"error": "PDF export is not implemented in this example"}

    def test_unknown_format(self, client: TestClient) -> None:
        r = client.get(EXPORT_URL, params={"format": "json"}, headers=_auth())
        assert r.status_code == 400
        assert r.json() == {"error": "Unsupported export format"}

    def test_inverted_range(self, client: TestClient) -> None:
        r = client.get(
            EXPORT_URL,
            params={"startDate": "2024-04-01", "endDate": "2024-03-01"},
            headers=_auth(),
        )
        assert r.status_code == 400
        assert "error" in r.json()

    def test_store_failure_is_generic(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        def _broken(self: RecordSource, time_range: object) -> None:
            raise RecordSourceError("revenue_by_day query failed: disk I/O error")

        monkeypatch.setattr(RecordSource, "revenue_by_day", _broken)
        r = client.get(EXPORT_URL, headers=_auth())
        assert r.status_code == 500
        assert r.json() == {"error": "Internal server error"}

    def test_every_report_type(self, client: TestClient, _route_session: Session) -> None:
        _seed_recent_revenue(_route_session)
        for report_type in ("transactions", "payments", "partners", "advertisers", "projections", "overview"):
            r = client.get(EXPORT_URL, params={"type": report_type}, headers=_auth())
            assert r.status_code == 200, report_type
            assert f"revenue-{report_type}-" in r.headers["content-disposition"]


class TestSummary:
    def test_camel_case_payload(self, client: TestClient, _route_session: Session) -> None:
        _seed_recent_revenue(_route_session)
        r = client.get("/api/admin/revenue", params={"range": "7d"}, headers=_auth())
        assert r.status_code == 200
        data = r.json()
        assert data["totalRevenue"] == 140.0
        assert data["totalTransactions"] == 2
        assert data["averageTransactionValue"] == 70.0
        assert data["topPaymentMethod"] == "OTHER"
        assert "previousPeriod" in data
        assert len(data["trends"]) == 8
        assert set(data["trends"][0]) == {"date", "revenue", "transactions", "refunds"}

    def test_requires_admin(self, client: TestClient) -> None:
        assert client.get("/api/admin/revenue").status_code == 401
        assert client.get("/api/admin/revenue", headers=_auth(USER_TOKEN)).status_code == 403


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok"}
