"""Tests for cost aggregation.

Tests cover:
- Profit charged on ingredient cost only
- Staff costs passed through without markup
- Unknown ingredients priced at zero
- Negative inputs flowing through unchanged
- Serving cost and full simulations
"""

from decimal import Decimal

import pytest

from barcost.models import StaffMember
from barcost.services.costing.cost_aggregation import aggregate, serving_cost, simulate_costs


def staff(*costs):
    return [StaffMember(role="Bartender", cost=Decimal(str(cost))) for cost in costs]


@pytest.fixture
def rum_catalog(make_lot, make_ingredient):
    rum = make_ingredient(1, "White Rum", is_alcoholic=True, lots=[make_lot(5000, 100)])
    return {1: rum}


class TestAggregate:
    """Tests for aggregate()."""

    def test_profit_on_ingredient_cost_only(self, rum_catalog):
        breakdown = aggregate({1: Decimal("5000")}, rum_catalog, staff(50), 20)

        assert breakdown.ingredient_cost == Decimal("100")
        assert breakdown.operational_cost == Decimal("50")
        assert breakdown.total_cost == Decimal("150")
        assert breakdown.profit == Decimal("20")
        assert breakdown.final_price == Decimal("170")

    def test_staff_costs_are_summed(self, rum_catalog):
        breakdown = aggregate({}, rum_catalog, staff(80, 80, "45.50"), 100)

        assert breakdown.ingredient_cost == Decimal("0")
        assert breakdown.operational_cost == Decimal("205.50")
        assert breakdown.profit == Decimal("0")
        assert breakdown.final_price == Decimal("205.50")

    def test_unknown_ingredient_priced_at_zero(self, rum_catalog):
        breakdown = aggregate({1: Decimal("500"), 42: Decimal("300")}, rum_catalog, [], 0)
        assert breakdown.ingredient_cost == Decimal("10")

    def test_negative_margin_passes_through(self, rum_catalog):
        breakdown = aggregate({1: Decimal("5000")}, rum_catalog, [], -10)

        assert breakdown.profit == Decimal("-10")
        assert breakdown.final_price == Decimal("90")

    def test_to_dict_formats_two_decimals(self, rum_catalog):
        breakdown = aggregate({1: Decimal("5000")}, rum_catalog, staff(50), 20)

        assert breakdown.to_dict() == {
            "ingredient_cost": "100.00",
            "operational_cost": "50.00",
            "total_cost": "150.00",
            "profit": "20.00",
            "final_price": "170.00",
        }


class TestServingCost:
    """Tests for serving_cost()."""

    def test_serving_cost_at_average_cost(self, make_drink, rum_catalog):
        mojito = make_drink(10, "Mojito", [(1, 50)], adult_rate="0.5")
        assert serving_cost(mojito, rum_catalog) == Decimal("1.00")

    def test_out_of_stock_ingredient_costs_nothing(self, make_drink, make_ingredient):
        catalog = {1: make_ingredient(1, "White Rum", is_alcoholic=True)}
        mojito = make_drink(10, "Mojito", [(1, 50)], adult_rate="0.5")

        assert serving_cost(mojito, catalog) == Decimal("0")


class TestSimulateCosts:
    """Tests for simulate_costs()."""

    def test_mojito_simulation(self, mojito_setup):
        result = simulate_costs(
            [mojito_setup["mojito"]],
            mojito_setup["ingredients"],
            40,
            10,
            4,
            staff(50),
            100,
        )

        assert result.projection.total_servings == Decimal("80")
        assert result.projection.usage == {1: Decimal("4000")}
        assert result.ingredient_costs == {1: Decimal("80")}
        assert result.breakdown.ingredient_cost == Decimal("80")
        assert result.breakdown.profit == Decimal("80")
        assert result.breakdown.final_price == Decimal("210")

    def test_zero_duration_leaves_only_staff(self, mojito_setup):
        result = simulate_costs(
            [mojito_setup["mojito"]], mojito_setup["ingredients"], 40, 0, 0, staff(50), 100
        )

        assert result.breakdown.ingredient_cost == Decimal("0")
        assert result.breakdown.final_price == Decimal("50")

    def test_simulation_does_not_touch_stock(self, mojito_setup):
        simulate_costs([mojito_setup["mojito"]], mojito_setup["ingredients"], 40, 0, 4, [], 100)
        assert mojito_setup["rum"].lots[0].remaining_quantity == Decimal("5000")
