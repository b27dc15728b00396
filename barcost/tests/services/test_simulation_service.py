"""Tests for the event cost simulator."""

from datetime import datetime
from decimal import Decimal

import pytest

from barcost.models import EventStatus
from barcost.services import event_service, ingredient_service, simulation_service, stock_service
from barcost.services.exceptions import DrinkNotFound, ValidationError

START = datetime(2025, 6, 1, 18, 0)
END = datetime(2025, 6, 1, 22, 0)


class TestSimulateEventCosts:
    """Tests for simulate_event_costs()."""

    def test_mojito_simulation(self, test_db, mojito):
        result = simulation_service.simulate_event_costs(
            [mojito.id],
            num_adults=40,
            num_children=10,
            duration_hours=4,
            staff=[{"role": "Bartender", "cost": 50}, {"role": "Barback", "cost": "30"}],
            profit_margin_percent=20,
        )

        assert result.projection.total_servings == Decimal("80")
        assert result.breakdown.to_dict() == {
            "ingredient_cost": "80.00",
            "operational_cost": "80.00",
            "total_cost": "160.00",
            "profit": "16.00",
            "final_price": "176.00",
        }

    def test_default_margin_is_one_hundred_percent(self, test_db, mojito, monkeypatch):
        monkeypatch.delenv("BAR_COSTING_PROFIT_MARGIN", raising=False)

        result = simulation_service.simulate_event_costs([mojito.id], 40, 0, 4)

        assert result.breakdown.profit == Decimal("80")
        assert result.breakdown.final_price == Decimal("160")

    def test_soft_drink_counts_children(self, test_db, mojito):
        from barcost.services import drink_service

        lime = ingredient_service.create_ingredient({"name": "Lime Juice", "unit": "ml"})
        stock_service.add_stock_lot(lime.id, 1000, 10)
        lemonade = drink_service.create_drink(
            {
                "name": "Lemonade",
                "adults_per_person_per_hour": "0.25",
                "children_per_person_per_hour": "0.5",
                "recipe": [{"ingredient_id": lime.id, "quantity": 30}],
            }
        )

        result = simulation_service.simulate_event_costs(
            [mojito.id, lemonade.id], 40, 10, 4, profit_margin_percent=0
        )

        servings = {d.drink_name: d.total_servings for d in result.projection.drinks}
        assert servings == {"Mojito": Decimal("80"), "Lemonade": Decimal("60")}
        # 4000 ml rum @ 0.02 + 1800 ml lime @ 0.01
        assert result.breakdown.ingredient_cost == Decimal("98")

    def test_simulation_leaves_stock_alone(self, test_db, rum, mojito):
        simulation_service.simulate_event_costs([mojito.id], 40, 0, 4)
        assert stock_service.get_lot_history(rum.id)[0].remaining_quantity == Decimal("5000")

    def test_unknown_drink(self, test_db):
        with pytest.raises(DrinkNotFound):
            simulation_service.simulate_event_costs([999], 10, 0, 2)

    def test_invalid_staff(self, test_db, mojito):
        with pytest.raises(ValidationError):
            simulation_service.simulate_event_costs(
                [mojito.id], 10, 0, 2, staff=[{"role": "", "cost": "lots"}]
            )


class TestSaveSimulationAsEvent:
    """Tests for save_simulation_as_event()."""

    def test_saved_event_keeps_snapshot(self, test_db, mojito):
        event = simulation_service.save_simulation_as_event(
            "Costa Birthday",
            START,
            END,
            [mojito.id],
            num_adults=40,
            num_children=5,
            staff=[{"role": "Bartender", "cost": 50}],
            profit_margin_percent=20,
        )

        saved = event_service.get_event(event.id)
        assert saved.status == EventStatus.PLANNED
        assert saved.simulated_costs.final_price == Decimal("146")
        assert [s.role for s in saved.staff] == ["Bartender"]

    def test_snapshot_survives_price_changes(self, test_db, rum, mojito):
        event = simulation_service.save_simulation_as_event(
            "Costa Birthday", START, END, [mojito.id], 40, 0, profit_margin_percent=0
        )
        stock_service.adjust_stock(rum.id, 5000, reason="correction")
        stock_service.add_stock_lot(rum.id, 5000, 500)

        saved = event_service.get_event(event.id)
        estimate = event_service.estimate_event_costs(event.id, profit_margin_percent=0)

        assert saved.simulated_costs.ingredient_cost == Decimal("80")
        assert estimate.breakdown.ingredient_cost == Decimal("400")

    @pytest.mark.parametrize(
        "start,end,adults,children",
        [
            (START, END, 0, 0),
            (END, START, 10, 0),
        ],
    )
    def test_invalid_simulation_not_saved(self, test_db, mojito, start, end, adults, children):
        with pytest.raises(ValidationError):
            simulation_service.save_simulation_as_event(
                "Party", start, end, [mojito.id], adults, children
            )
        assert event_service.get_all_events() == []

    def test_no_drinks_not_saved(self, test_db):
        with pytest.raises(ValidationError):
            simulation_service.save_simulation_as_event("Party", START, END, [], 10, 0)
