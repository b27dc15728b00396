"""Pytest configuration and fixtures for Bar Costing tests."""

from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, scoped_session

import barcost.models  # noqa: F401  (registers every table on Base.metadata)
from barcost.models import Drink, Event, EventStatus, Ingredient, PurchaseLot, RecipeLine, StaffMember
from barcost.models.base import Base


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    engine = create_engine("sqlite:///:memory:", echo=False)

    Base.metadata.create_all(engine)

    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import barcost.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    yield Session

    Session.remove()
    Base.metadata.drop_all(engine)

    db_module.get_session_factory = original_get_session


# ============================================================================
# In-memory model builders for the costing engine (no session)
# ============================================================================


@pytest.fixture
def make_lot():
    """Build an unsaved PurchaseLot. remaining defaults to the purchased quantity."""
    counter = {"next_id": 1}

    def _make(quantity, total_price, purchase_date=date(2025, 1, 1), remaining=None):
        lot = PurchaseLot(
            id=counter["next_id"],
            purchase_date=purchase_date,
            purchased_quantity=Decimal(str(quantity)),
            total_price=Decimal(str(total_price)),
            remaining_quantity=Decimal(str(quantity if remaining is None else remaining)),
        )
        counter["next_id"] += 1
        return lot

    return _make


@pytest.fixture
def make_ingredient():
    """Build an unsaved Ingredient with the given lots."""

    def _make(ingredient_id, name, unit="ml", is_alcoholic=False, lots=None, threshold=None):
        return Ingredient(
            id=ingredient_id,
            name=name,
            unit=unit,
            is_alcoholic=is_alcoholic,
            low_stock_threshold=threshold,
            lots=list(lots or []),
        )

    return _make


@pytest.fixture
def make_drink():
    """Build an unsaved Drink. recipe is a list of (ingredient_id, quantity) pairs."""

    def _make(drink_id, name, recipe, adult_rate, child_rate="0"):
        return Drink(
            id=drink_id,
            name=name,
            adults_per_person_per_hour=Decimal(str(adult_rate)),
            children_per_person_per_hour=Decimal(str(child_rate)),
            recipe=[
                RecipeLine(ingredient_id=ingredient_id, quantity=Decimal(str(quantity)))
                for ingredient_id, quantity in recipe
            ],
        )

    return _make


@pytest.fixture
def make_event():
    """Build an unsaved PLANNED Event."""

    def _make(
        drinks,
        num_adults,
        num_children=0,
        start_time=datetime(2025, 6, 1, 18, 0),
        end_time=datetime(2025, 6, 1, 22, 0),
        staff=None,
        event_id=1,
    ):
        return Event(
            id=event_id,
            name="Test Event",
            start_time=start_time,
            end_time=end_time,
            status=EventStatus.PLANNED,
            num_adults=num_adults,
            num_children=num_children,
            drinks=list(drinks),
            staff=[StaffMember(role=role, cost=Decimal(str(cost))) for role, cost in staff or []],
        )

    return _make


@pytest.fixture
def mojito_setup(make_lot, make_ingredient, make_drink):
    """White rum (5000 ml for 100.00) and a Mojito using 50 ml at 0.5 servings/adult/hour."""
    rum = make_ingredient(1, "White Rum", is_alcoholic=True, lots=[make_lot(5000, 100)])
    mojito = make_drink(10, "Mojito", [(1, 50)], adult_rate="0.5", child_rate="0")
    return {"rum": rum, "mojito": mojito, "ingredients": {1: rum}}
