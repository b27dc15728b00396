"""
Drink models for the bar menu.

This module contains:
- Drink: A menu item with its consumption-rate assumptions
- RecipeLine: Quantity of one ingredient consumed per serving of a drink
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class Drink(BaseModel):
    """
    Drink model.

    Whether a drink is alcoholic is not stored: it is derived from the
    current ingredient catalog each time it is needed (see
    barcost.services.costing.consumption.is_drink_alcoholic).

    Attributes:
        name: Display name (e.g., "Mojito")
        adults_per_person_per_hour: Servings each adult is assumed to drink per hour
        children_per_person_per_hour: Servings each child is assumed to drink per
                                      hour (ignored for alcoholic drinks)
        notes: Optional preparation notes

    Relationships:
        recipe: Recipe lines (ingredient quantities per serving)
    """

    __tablename__ = "drinks"

    name = Column(String(200), nullable=False, index=True)
    adults_per_person_per_hour = Column(Numeric(8, 4), nullable=False, default=0)
    children_per_person_per_hour = Column(Numeric(8, 4), nullable=False, default=0)
    notes = Column(Text, nullable=True)

    recipe = relationship(
        "RecipeLine",
        back_populates="drink",
        cascade="all, delete-orphan",
        order_by="RecipeLine.id",
        lazy="selectin",
    )

    __table_args__ = (Index("idx_drink_name", "name"),)

    def __repr__(self) -> str:
        """String representation of drink."""
        return f"Drink(id={self.id}, name='{self.name}')"

    @property
    def ingredient_ids(self) -> list:
        """IDs of the ingredients referenced by the recipe."""
        return [line.ingredient_id for line in self.recipe]


class RecipeLine(BaseModel):
    """
    RecipeLine model linking a drink to an ingredient.

    Attributes:
        drink_id: Foreign key to Drink
        ingredient_id: Foreign key to Ingredient
        quantity: Amount per serving, in the ingredient's unit
    """

    __tablename__ = "recipe_lines"

    drink_id = Column(
        Integer, ForeignKey("drinks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    ingredient_id = Column(
        Integer, ForeignKey("ingredients.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    quantity = Column(Numeric(14, 4), nullable=False)

    drink = relationship("Drink", back_populates="recipe")
    ingredient = relationship("Ingredient", lazy="selectin")

    __table_args__ = (
        Index("idx_recipe_line_drink", "drink_id"),
        Index("idx_recipe_line_ingredient", "ingredient_id"),
        CheckConstraint("quantity > 0", name="ck_recipe_line_quantity_positive"),
        UniqueConstraint("drink_id", "ingredient_id", name="uq_recipe_line_drink_ingredient"),
    )

    def __repr__(self) -> str:
        """String representation of recipe line."""
        return (
            f"RecipeLine(drink_id={self.drink_id}, "
            f"ingredient_id={self.ingredient_id}, "
            f"quantity={self.quantity})"
        )
