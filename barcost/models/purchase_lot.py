"""
PurchaseLot model for lot-tracked ingredient stock.

Each record is one purchase batch of an ingredient. Lots are created by
stock intake and afterwards only their remaining quantity changes, through
FIFO depletion (event completion or manual adjustment).
"""

from datetime import date

from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Index, Integer, Numeric, Text
from sqlalchemy.orm import relationship

from .base import BaseModel


class PurchaseLot(BaseModel):
    """
    PurchaseLot model representing one purchase batch.

    FIFO Consumption:
    Lots are consumed in purchase_date order (oldest first); lots bought on
    the same date are consumed in the order they were recorded.

    Attributes:
        ingredient_id: Foreign key to Ingredient
        purchase_date: When the batch was bought
        purchased_quantity: Quantity bought, in the ingredient's unit
        total_price: Total amount paid for the batch
        remaining_quantity: Quantity still on hand
        notes: Optional notes (supplier, invoice number)
    """

    __tablename__ = "purchase_lots"

    ingredient_id = Column(
        Integer, ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False, index=True
    )

    purchase_date = Column(Date, nullable=False, default=date.today, index=True)
    purchased_quantity = Column(Numeric(14, 4), nullable=False)
    total_price = Column(Numeric(12, 4), nullable=False)
    remaining_quantity = Column(Numeric(14, 4), nullable=False)
    notes = Column(Text, nullable=True)

    ingredient = relationship("Ingredient", back_populates="lots")
    depletions = relationship(
        "StockDepletion",
        back_populates="purchase_lot",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_lot_ingredient_date", "ingredient_id", "purchase_date"),
        CheckConstraint("purchased_quantity >= 0", name="ck_lot_purchased_non_negative"),
        CheckConstraint("total_price >= 0", name="ck_lot_price_non_negative"),
        CheckConstraint("remaining_quantity >= 0", name="ck_lot_remaining_non_negative"),
        CheckConstraint(
            "remaining_quantity <= purchased_quantity",
            name="ck_lot_remaining_within_purchased",
        ),
    )

    def __repr__(self) -> str:
        """String representation of purchase lot."""
        return (
            f"PurchaseLot(id={self.id}, "
            f"ingredient_id={self.ingredient_id}, "
            f"date={self.purchase_date}, "
            f"remaining={self.remaining_quantity}/{self.purchased_quantity})"
        )

    @property
    def unit_cost(self):
        """Cost of one unit from this lot (zero when nothing was purchased)."""
        from barcost.services.costing.valuation import lot_unit_cost

        return lot_unit_cost(self)

    @property
    def is_depleted(self) -> bool:
        """True when nothing remains in the lot."""
        return self.remaining_quantity is not None and self.remaining_quantity <= 0

    def to_dict(self, include_relationships: bool = False) -> dict:
        """Convert lot to dictionary with its unit cost."""
        result = super().to_dict(include_relationships)
        result["unit_cost"] = str(self.unit_cost)
        result["is_depleted"] = self.is_depleted
        return result
