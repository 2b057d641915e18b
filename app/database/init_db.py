import logging
import sys
from pathlib import Path

from alembic import command
from alembic.config import Config as AlembicConfig
from sqlalchemy import inspect

PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(PROJECT_ROOT))

from app.core.startup import bootstrap
import app.database.db as db_module
from app.models import Base

logger = logging.getLogger(__name__)


def _build_alembic_config(database_url: str) -> AlembicConfig:
    cfg = AlembicConfig(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", database_url)
    return cfg


def _is_unversioned_schema() -> bool:
    """Tables exist (e.g. from create_all) but Alembic never stamped them."""
    table_names = set(inspect(db_module.get_engine()).get_table_names())
    return "stages" in table_names and "alembic_version" not in table_names


def init_db() -> None:
    # Tables do not exist yet on a fresh database.
    bootstrap(check_schema=False)
    active_url = db_module.get_active_database_url()
    alembic_cfg = _build_alembic_config(active_url)

    if _is_unversioned_schema():
        command.stamp(alembic_cfg, "head")
        logger.info(
            "database.schema.stamped",
            extra={"event": "database.schema.stamped", "revision": "head"},
        )
    else:
        command.upgrade(alembic_cfg, "head")

    # Idempotent; covers tables added to the models ahead of their migration.
    Base.metadata.create_all(bind=db_module.get_engine())
    logger.info(
        "database.tables.created",
        extra={
            "event": "database.tables.created",
            "database_url_scheme": active_url.split("://", 1)[0],
        },
    )


if __name__ == "__main__":
    init_db()
