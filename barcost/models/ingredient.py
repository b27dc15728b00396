"""
Ingredient model for the bar catalog.

An ingredient is anything a drink recipe consumes (spirits, juices, syrups,
garnishes). Stock is held in purchase lots, each tracked separately for FIFO
costing.
"""

from sqlalchemy import Boolean, CheckConstraint, Column, Index, Numeric, String
from sqlalchemy.orm import relationship

from .base import BaseModel
from .purchase_lot import PurchaseLot


class Ingredient(BaseModel):
    """
    Ingredient model.

    Attributes:
        name: Display name (e.g., "White Rum")
        unit: Unit all quantities of this ingredient are expressed in
              (ml, l, g, kg, un). Never converted.
        is_alcoholic: Whether the ingredient contains alcohol. A drink with
                      any alcoholic ingredient is never served to children.
        low_stock_threshold: Optional alert level in the ingredient's unit

    Relationships:
        lots: Purchase lots, oldest first
    """

    __tablename__ = "ingredients"

    name = Column(String(200), nullable=False, index=True)
    unit = Column(String(10), nullable=False)
    is_alcoholic = Column(Boolean, nullable=False, default=False)
    low_stock_threshold = Column(Numeric(14, 4), nullable=True)

    lots = relationship(
        "PurchaseLot",
        back_populates="ingredient",
        cascade="all, delete-orphan",
        order_by=[PurchaseLot.purchase_date, PurchaseLot.id],
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_ingredient_name", "name"),
        CheckConstraint("unit IN ('ml', 'l', 'g', 'kg', 'un')", name="ck_ingredient_unit_valid"),
        CheckConstraint(
            "low_stock_threshold IS NULL OR low_stock_threshold >= 0",
            name="ck_ingredient_threshold_non_negative",
        ),
    )

    def __repr__(self) -> str:
        """String representation of ingredient."""
        return f"Ingredient(id={self.id}, name='{self.name}', unit='{self.unit}')"

    def to_dict(self, include_relationships: bool = False) -> dict:
        """
        Convert ingredient to dictionary, including current stock figures.

        Args:
            include_relationships: If True, include purchase lots

        Returns:
            Dictionary representation
        """
        from barcost.services.costing.valuation import is_low_stock, valuate

        result = super().to_dict(include_relationships)
        valuation = valuate(self)
        result["total_stock"] = str(valuation.total_stock)
        result["avg_unit_cost"] = str(valuation.avg_unit_cost)
        result["total_value"] = str(valuation.total_value)
        result["is_low_stock"] = is_low_stock(self)
        return result
