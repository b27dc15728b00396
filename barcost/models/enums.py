"""
Enumerations for events and stock movements.

This module contains enums used across models and services:
- IngredientUnit: Unit an ingredient is measured in
- EventStatus: Event lifecycle state
- DepletionReason: Why stock left a purchase lot
"""

from enum import Enum


class IngredientUnit(str, Enum):
    """
    Unit an ingredient is stocked and measured in.

    All recipe quantities, lot quantities and usage for an ingredient are
    expressed in its unit.
    """

    ML = "ml"
    L = "l"
    G = "g"
    KG = "kg"
    UN = "un"


class EventStatus(str, Enum):
    """
    Event lifecycle state.

    Values:
        PLANNED: Created, stock not yet depleted
        COMPLETED: Consumption has been reconciled against stock (terminal)
    """

    PLANNED = "planned"
    COMPLETED = "completed"


class DepletionReason(str, Enum):
    """
    Reason stock was removed from a purchase lot.

    EVENT_COMPLETION is recorded automatically by the event reconciler.
    The remaining values classify manual adjustments.
    """

    EVENT_COMPLETION = "event_completion"
    SPOILAGE = "spoilage"
    BREAKAGE = "breakage"
    CORRECTION = "correction"
    OTHER = "other"

    @classmethod
    def manual_reasons(cls) -> list:
        """Reasons an operator may choose for a manual adjustment."""
        return [reason for reason in cls if reason is not cls.EVENT_COMPLETION]
