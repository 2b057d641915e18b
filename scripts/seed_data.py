import logging
import sys
from pathlib import Path

from sqlalchemy import select

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from app.core.logging_config import configure_logging
from app.database.db import SessionLocal
from app.models import StageRegistry
from app.services.stage_registry_service import StageRegistryService

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_NAME = "Default pipeline"

# Kanban columns mirroring the legacy status pipeline.
DEFAULT_STAGES = [
    ("Novo", "new", "blue"),
    ("Contato inicial", "initial_contact", "teal"),
    ("Aguardando receita", "awaiting_prescription", "yellow"),
    ("Receita recebida", "prescription_received", "orange"),
    ("Receita validada", "prescription_validated", "purple"),
    ("Produtos liberados", "products_released", "green"),
    ("Fechado", "closed", "gray"),
]


def seed_default_registry() -> int:
    service = StageRegistryService(SessionLocal())
    try:
        existing = service.db.scalars(
            select(StageRegistry).where(StageRegistry.name == DEFAULT_REGISTRY_NAME)
        ).first()
        if existing:
            logger.info("seed.registry.exists", extra={"event": "seed.registry.exists", "registry_id": existing.id})
            return existing.id

        registry = service.create_registry(DEFAULT_REGISTRY_NAME)
        for name, slug, color in DEFAULT_STAGES:
            service.create_stage(registry.id, name=name, slug=slug, color=color)
        logger.info(
            "seed.registry.created",
            extra={"event": "seed.registry.created", "registry_id": registry.id, "stages": len(DEFAULT_STAGES)},
        )
        return registry.id
    finally:
        service.close()


if __name__ == "__main__":
    configure_logging()
    seed_default_registry()
