"""Fixtures for service layer tests."""

from datetime import date, datetime

import pytest


@pytest.fixture
def rum(test_db):
    """White rum with one 5000 ml lot bought for 100.00 (0.02 per ml)."""
    from barcost.services import ingredient_service, stock_service

    ingredient = ingredient_service.create_ingredient(
        {"name": "White Rum", "unit": "ml", "is_alcoholic": True}
    )
    stock_service.add_stock_lot(ingredient.id, 5000, 100, purchase_date=date(2025, 1, 1))
    return ingredient


@pytest.fixture
def mojito(test_db, rum):
    """Mojito: 50 ml rum per serving, 0.5 servings per adult per hour."""
    from barcost.services import drink_service

    return drink_service.create_drink(
        {
            "name": "Mojito",
            "adults_per_person_per_hour": "0.5",
            "children_per_person_per_hour": "0",
            "recipe": [{"ingredient_id": rum.id, "quantity": 50}],
        }
    )


@pytest.fixture
def wedding(test_db, mojito):
    """Four-hour event for 40 adults serving Mojitos."""
    from barcost.services import event_service

    return event_service.create_event(
        "Silva Wedding",
        datetime(2025, 6, 1, 18, 0),
        datetime(2025, 6, 1, 22, 0),
        drink_ids=[mojito.id],
        num_adults=40,
        num_children=0,
        staff=[{"role": "Bartender", "cost": 50}],
    )
