"""Checks run once before the pipeline API accepts traffic."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import inspect

from app.core.config import OUTBOX_MAX_BATCH_SIZE, get_config
from app.core.exceptions import ConfigurationError
from app.core.logging_config import configure_logging
from app.database import db as db_module

logger = logging.getLogger(__name__)

# Tables the services read or write; init_db creates them.
REQUIRED_TABLES = frozenset(
    {
        "stage_registries",
        "stages",
        "leads",
        "lead_stage_history",
        "orders",
        "order_status_events",
        "affiliates",
        "affiliate_events",
        "prescriptions",
        "regulatory_approvals",
    }
)


@dataclass(frozen=True)
class StartupReport:
    database_ok: bool
    database_url_scheme: str
    row_locks_enforced: bool
    missing_tables: tuple[str, ...] = ()


def check_outbox_batch_size(batch_size: int) -> None:
    """A default batch larger than the route ceiling could never be served in one page."""
    if batch_size > OUTBOX_MAX_BATCH_SIZE:
        raise ConfigurationError(
            f"OUTBOX_BATCH_SIZE={batch_size} exceeds the outbox page limit of {OUTBOX_MAX_BATCH_SIZE}."
        )


def missing_pipeline_tables() -> tuple[str, ...]:
    present = set(inspect(db_module.get_engine()).get_table_names())
    return tuple(sorted(REQUIRED_TABLES - present))


def validate_startup_config(check_schema: bool = True) -> StartupReport:
    config = get_config()
    check_outbox_batch_size(config.OUTBOX_BATCH_SIZE)

    database_ok = db_module.verify_database_connection()
    if not database_ok and config.DB_CONNECTIVITY_REQUIRED:
        raise RuntimeError("Database connectivity check failed.")
    if not database_ok:
        logger.warning("startup.database.unreachable", extra={"event": "startup.database.unreachable"})

    scheme = db_module.get_active_database_url().split("://", 1)[0]
    # SQLite ignores FOR UPDATE: registry and order commands do not serialize there.
    row_locks_enforced = not scheme.startswith("sqlite")
    if config.is_production and not row_locks_enforced:
        logger.warning(
            "startup.row_locks.not_enforced",
            extra={"event": "startup.row_locks.not_enforced", "database_url_scheme": scheme},
        )

    missing: tuple[str, ...] = ()
    if database_ok and check_schema:
        missing = missing_pipeline_tables()
        if missing:
            logger.warning(
                "startup.schema.incomplete",
                extra={"event": "startup.schema.incomplete", "missing_tables": list(missing)},
            )

    logger.info(
        "startup.ready",
        extra={
            "event": "startup.ready",
            "env": config.ENV,
            "app_version": config.APP_VERSION,
            "database_url_scheme": scheme,
            "default_commission_rate": str(config.DEFAULT_COMMISSION_RATE),
            "outbox_batch_size": config.OUTBOX_BATCH_SIZE,
        },
    )
    return StartupReport(
        database_ok=database_ok,
        database_url_scheme=scheme,
        row_locks_enforced=row_locks_enforced,
        missing_tables=missing,
    )


def bootstrap(check_schema: bool = True) -> StartupReport:
    """Configure logging, then run the startup checks."""
    configure_logging()
    return validate_startup_config(check_schema=check_schema)
