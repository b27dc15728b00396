"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .enums import DepletionReason, EventStatus, IngredientUnit
from .purchase_lot import PurchaseLot
from .ingredient import Ingredient
from .drink import Drink, RecipeLine
from .event import Event, StaffMember, event_drinks
from .stock_depletion import StockDepletion

__all__ = [
    "Base",
    "BaseModel",
    # Enums
    "DepletionReason",
    "EventStatus",
    "IngredientUnit",
    # Catalog
    "Ingredient",
    "PurchaseLot",
    "Drink",
    "RecipeLine",
    # Events
    "Event",
    "StaffMember",
    "event_drinks",
    # Audit
    "StockDepletion",
]
