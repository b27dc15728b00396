"""
StockDepletion model for tracking stock reductions.

Provides an immutable audit trail for every quantity removed from a purchase
lot, whether by event completion or by a manual adjustment.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from .base import BaseModel
from barcost.utils.datetime_utils import utc_now


class StockDepletion(BaseModel):
    """
    StockDepletion model for the depletion audit trail.

    Attributes:
        purchase_lot_id: FK to the PurchaseLot that was depleted
        event_id: FK to the Event whose completion caused it (None for manual adjustments)
        quantity_depleted: Amount removed (positive)
        depletion_reason: DepletionReason value
        unit_cost: Lot unit cost at the time of depletion
        cost: quantity_depleted * unit_cost
        depletion_date: When the depletion occurred
        notes: Optional explanation

    Note:
        Records are never updated or deleted by the services.
    """

    __tablename__ = "stock_depletions"

    purchase_lot_id = Column(
        Integer, ForeignKey("purchase_lots.id", ondelete="CASCADE"), nullable=False
    )
    event_id = Column(Integer, ForeignKey("events.id", ondelete="SET NULL"), nullable=True)

    quantity_depleted = Column(Numeric(14, 4), nullable=False)
    depletion_reason = Column(String(50), nullable=False)
    unit_cost = Column(Numeric(12, 6), nullable=False)
    cost = Column(Numeric(12, 4), nullable=False)
    depletion_date = Column(DateTime, nullable=False, default=utc_now)
    notes = Column(Text, nullable=True)

    purchase_lot = relationship("PurchaseLot", back_populates="depletions")
    event = relationship("Event")

    __table_args__ = (
        Index("idx_depletion_lot", "purchase_lot_id"),
        Index("idx_depletion_event", "event_id"),
        Index("idx_depletion_reason", "depletion_reason"),
        CheckConstraint("quantity_depleted > 0", name="ck_depletion_quantity_positive"),
    )

    def __repr__(self) -> str:
        """String representation of stock depletion."""
        return (
            f"StockDepletion(id={self.id}, "
            f"purchase_lot_id={self.purchase_lot_id}, "
            f"quantity={self.quantity_depleted}, "
            f"reason='{self.depletion_reason}')"
        )
