from __future__ import annotations

from decimal import Decimal

import pytest
from sqlalchemy import create_engine

import app.core.startup as startup_module
from app.core.config import OUTBOX_MAX_BATCH_SIZE
from app.core.exceptions import ConfigurationError
from app.models import Base


class _Cfg:
    def __init__(self, required: bool = False, production: bool = False, batch_size: int = 100) -> None:
        self.DB_CONNECTIVITY_REQUIRED = required
        self.ENV = "production" if production else "development"
        self.APP_VERSION = "1.0.0"
        self.DEFAULT_COMMISSION_RATE = Decimal("10")
        self.OUTBOX_BATCH_SIZE = batch_size
        self._production = production

    @property
    def is_production(self) -> bool:
        return self._production


def _use(monkeypatch, cfg: _Cfg, database_ok: bool, url: str = "postgresql+psycopg2://u:p@db:5432/pipeline"):
    monkeypatch.setattr(startup_module, "get_config", lambda: cfg)
    monkeypatch.setattr(startup_module.db_module, "verify_database_connection", lambda: database_ok)
    monkeypatch.setattr(startup_module.db_module, "get_active_database_url", lambda: url)


def test_unreachable_optional_database_is_reported_not_raised(monkeypatch):
    _use(monkeypatch, _Cfg(required=False), database_ok=False)

    report = startup_module.validate_startup_config()

    assert report.database_ok is False
    assert report.missing_tables == ()


def test_unreachable_required_database_stops_startup(monkeypatch):
    _use(monkeypatch, _Cfg(required=True), database_ok=False)

    with pytest.raises(RuntimeError, match="Database connectivity check failed"):
        startup_module.validate_startup_config()


def test_outbox_batch_larger_than_route_page_is_rejected(monkeypatch):
    _use(monkeypatch, _Cfg(batch_size=OUTBOX_MAX_BATCH_SIZE + 1), database_ok=True)

    with pytest.raises(ConfigurationError, match="OUTBOX_BATCH_SIZE"):
        startup_module.validate_startup_config(check_schema=False)

    startup_module.check_outbox_batch_size(OUTBOX_MAX_BATCH_SIZE)


def test_missing_pipeline_tables_are_listed(monkeypatch):
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(
        bind=engine,
        tables=[Base.metadata.tables["stage_registries"], Base.metadata.tables["stages"]],
    )
    _use(monkeypatch, _Cfg(), database_ok=True)
    monkeypatch.setattr(startup_module.db_module, "get_engine", lambda: engine)

    report = startup_module.validate_startup_config()

    assert "stages" not in report.missing_tables
    assert "orders" in report.missing_tables
    assert "affiliate_events" in report.missing_tables


def test_sqlite_in_production_flags_unenforced_row_locks(monkeypatch, caplog):
    _use(monkeypatch, _Cfg(production=True), database_ok=True, url="sqlite:///./pipeline.db")

    with caplog.at_level("WARNING", logger=startup_module.__name__):
        report = startup_module.validate_startup_config(check_schema=False)

    assert report.row_locks_enforced is False
    assert report.database_url_scheme == "sqlite"
    assert any(r.getMessage() == "startup.row_locks.not_enforced" for r in caplog.records)
