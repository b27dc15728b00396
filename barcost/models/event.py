"""
Event models for catered bar events.

This module contains:
- Event: A planned or completed event with guest counts and selected drinks
- StaffMember: Flat operational cost attached to an event
- event_drinks: Association table for the drinks selected for an event
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import relationship

from .base import Base, BaseModel
from .enums import EventStatus
from barcost.utils.datetime_utils import duration_hours


event_drinks = Table(
    "event_drinks",
    Base.metadata,
    Column("event_id", Integer, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True),
    Column("drink_id", Integer, ForeignKey("drinks.id", ondelete="RESTRICT"), primary_key=True),
)


class Event(BaseModel):
    """
    Event model.

    Status moves from PLANNED to COMPLETED exactly once, when the event's
    consumption is reconciled against stock.

    Attributes:
        name: Event name (e.g., "Silva Wedding")
        start_time: When the bar opens
        end_time: When the bar closes (must be after start_time)
        status: PLANNED or COMPLETED
        num_adults: Adult guests
        num_children: Child guests
        simulated_*: Cost snapshot saved from the simulator (optional)
        actual_ingredient_cost: FIFO cost of the stock consumed on completion
        completed_at: When the event was completed
        notes: Additional notes

    Relationships:
        drinks: Drinks selected for the event
        staff: Staff members and their flat costs
    """

    __tablename__ = "events"

    name = Column(String(200), nullable=False, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    status = Column(SQLEnum(EventStatus), nullable=False, default=EventStatus.PLANNED)
    num_adults = Column(Integer, nullable=False, default=0)
    num_children = Column(Integer, nullable=False, default=0)

    simulated_ingredient_cost = Column(Numeric(12, 4), nullable=True)
    simulated_operational_cost = Column(Numeric(12, 4), nullable=True)
    simulated_total_cost = Column(Numeric(12, 4), nullable=True)
    simulated_profit = Column(Numeric(12, 4), nullable=True)
    simulated_final_price = Column(Numeric(12, 4), nullable=True)

    actual_ingredient_cost = Column(Numeric(12, 4), nullable=True)
    completed_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)

    drinks = relationship("Drink", secondary=event_drinks, order_by="Drink.id", lazy="selectin")
    staff = relationship(
        "StaffMember",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="StaffMember.id",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_event_start", "start_time"),
        Index("idx_event_status", "status"),
        CheckConstraint("end_time > start_time", name="ck_event_end_after_start"),
    )

    def __repr__(self) -> str:
        """String representation of event."""
        return f"Event(id={self.id}, name='{self.name}', status={self.status})"

    @property
    def duration_hours(self):
        """Event length in hours (Decimal)."""
        return duration_hours(self.start_time, self.end_time)

    @property
    def selected_drink_ids(self) -> list:
        """IDs of the drinks selected for the event."""
        return [drink.id for drink in self.drinks]

    @property
    def is_completed(self) -> bool:
        """True once the event has been reconciled against stock."""
        return self.status == EventStatus.COMPLETED

    @property
    def total_guests(self) -> int:
        """Adults plus children."""
        return (self.num_adults or 0) + (self.num_children or 0)

    @property
    def simulated_costs(self):
        """Saved simulator breakdown, or None if the event was not created from a simulation."""
        if self.simulated_final_price is None:
            return None

        from barcost.services.costing.cost_aggregation import CostBreakdown

        return CostBreakdown(
            ingredient_cost=self.simulated_ingredient_cost,
            operational_cost=self.simulated_operational_cost,
            total_cost=self.simulated_total_cost,
            profit=self.simulated_profit,
            final_price=self.simulated_final_price,
        )

    def set_simulated_costs(self, breakdown) -> None:
        """Store a cost breakdown snapshot on the event."""
        self.simulated_ingredient_cost = breakdown.ingredient_cost
        self.simulated_operational_cost = breakdown.operational_cost
        self.simulated_total_cost = breakdown.total_cost
        self.simulated_profit = breakdown.profit
        self.simulated_final_price = breakdown.final_price

    def to_dict(self, include_relationships: bool = False) -> dict:
        """Convert event to dictionary with derived fields."""
        result = super().to_dict(include_relationships)
        result["status"] = self.status.value if self.status is not None else None
        result["duration_hours"] = str(self.duration_hours)
        result["selected_drink_ids"] = self.selected_drink_ids
        return result


class StaffMember(BaseModel):
    """
    StaffMember model.

    The cost is a flat amount for the event; it is not scaled by duration.

    Attributes:
        event_id: Foreign key to Event
        role: Role description (e.g., "Bartender")
        cost: Flat cost for the event
    """

    __tablename__ = "staff_members"

    event_id = Column(
        Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=True, index=True
    )
    role = Column(String(100), nullable=False)
    cost = Column(Numeric(12, 4), nullable=False, default=0)

    event = relationship("Event", back_populates="staff")

    def __repr__(self) -> str:
        """String representation of staff member."""
        return f"StaffMember(id={self.id}, role='{self.role}', cost={self.cost})"
