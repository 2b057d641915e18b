"""SQLAlchemy model package for the pipeline schema."""

from app.models.affiliate import Affiliate, AffiliateEvent
from app.models.base import Base
from app.models.care import Prescription, RegulatoryApproval
from app.models.lead import Lead, LeadStageHistory
from app.models.order import Order, OrderStatusEvent
from app.models.stage import Stage, StageRegistry

__all__ = [
    "Affiliate",
    "AffiliateEvent",
    "Base",
    "Lead",
    "LeadStageHistory",
    "Order",
    "OrderStatusEvent",
    "Prescription",
    "RegulatoryApproval",
    "Stage",
    "StageRegistry",
]
