"""Tests for consumption projection.

Tests cover:
- Derived alcoholic flag (including lookups by callable and unknown ids)
- Children's servings suppressed for alcoholic drinks
- Usage accumulation across drinks sharing an ingredient
- Non-positive durations
"""

from decimal import Decimal

import pytest

from barcost.services.costing.consumption import (
    effective_children_rate,
    is_drink_alcoholic,
    project_drinks,
    project_servings,
    project_usage,
    resolve,
)


@pytest.fixture
def catalog(make_ingredient):
    rum = make_ingredient(1, "White Rum", is_alcoholic=True)
    lime = make_ingredient(2, "Lime Juice")
    soda = make_ingredient(3, "Soda Water")
    return {1: rum, 2: lime, 3: soda}


class TestAlcoholicFlag:
    """Tests for is_drink_alcoholic() and effective_children_rate()."""

    def test_any_alcoholic_ingredient_makes_drink_alcoholic(self, make_drink, catalog):
        mojito = make_drink(10, "Mojito", [(2, 20), (1, 50)], adult_rate="0.5", child_rate="0.3")
        assert is_drink_alcoholic(mojito, catalog) is True

    def test_drink_without_alcohol(self, make_drink, catalog):
        lemonade = make_drink(11, "Lemonade", [(2, 30), (3, 150)], adult_rate="0.2", child_rate="0.4")
        assert is_drink_alcoholic(lemonade, catalog) is False

    def test_flag_follows_catalog_changes(self, make_drink, catalog):
        lemonade = make_drink(11, "Lemonade", [(2, 30)], adult_rate="0.2", child_rate="0.4")
        assert is_drink_alcoholic(lemonade, catalog) is False

        catalog[2].is_alcoholic = True

        assert is_drink_alcoholic(lemonade, catalog) is True

    def test_callable_lookup(self, make_drink, catalog):
        mojito = make_drink(10, "Mojito", [(1, 50)], adult_rate="0.5")
        assert is_drink_alcoholic(mojito, catalog.get) is True

    def test_unknown_ingredient_is_not_alcoholic(self, make_drink, catalog):
        mystery = make_drink(12, "Mystery", [(99, 10)], adult_rate="1")
        assert is_drink_alcoholic(mystery, catalog) is False

    def test_effective_children_rate_is_zero_when_alcoholic(self, make_drink, catalog):
        mojito = make_drink(10, "Mojito", [(1, 50)], adult_rate="0.5", child_rate="0.3")

        assert mojito.children_per_person_per_hour == Decimal("0.3")
        assert effective_children_rate(mojito, catalog) == Decimal("0")

    def test_effective_children_rate_kept_when_not_alcoholic(self, make_drink, catalog):
        lemonade = make_drink(11, "Lemonade", [(2, 30)], adult_rate="0.2", child_rate="0.4")
        assert effective_children_rate(lemonade, catalog) == Decimal("0.4")


class TestProjectServings:
    """Tests for project_servings()."""

    def test_adults_only(self, make_drink, catalog):
        mojito = make_drink(10, "Mojito", [(1, 50)], adult_rate="0.5")
        assert project_servings(mojito, 40, 0, 4, catalog) == Decimal("80")

    def test_children_never_drink_alcoholic_drinks(self, make_drink, catalog):
        mojito = make_drink(10, "Mojito", [(1, 50)], adult_rate="0.5", child_rate="1")

        with_children = project_servings(mojito, 40, 25, 4, catalog)
        without_children = project_servings(mojito, 40, 0, 4, catalog)

        assert with_children == without_children == Decimal("80")

    def test_children_counted_for_soft_drinks(self, make_drink, catalog):
        lemonade = make_drink(11, "Lemonade", [(2, 30)], adult_rate="0.25", child_rate="0.5")
        # 40 * 4 * 0.25 + 10 * 4 * 0.5
        assert project_servings(lemonade, 40, 10, 4, catalog) == Decimal("60")

    @pytest.mark.parametrize("hours", [0, -2])
    def test_non_positive_duration_gives_zero(self, make_drink, catalog, hours):
        mojito = make_drink(10, "Mojito", [(1, 50)], adult_rate="0.5")
        assert project_servings(mojito, 40, 0, hours, catalog) == Decimal("0")

    def test_fractional_duration(self, make_drink, catalog):
        mojito = make_drink(10, "Mojito", [(1, 50)], adult_rate="0.5")
        assert project_servings(mojito, 10, 0, Decimal("2.5"), catalog) == Decimal("12.5")


class TestProjectUsage:
    """Tests for project_usage() and project_drinks()."""

    def test_usage_scales_recipe_by_servings(self, make_drink):
        mojito = make_drink(10, "Mojito", [(1, 50), (2, 20)], adult_rate="0.5")
        assert project_usage(mojito, Decimal("80")) == {1: Decimal("4000"), 2: Decimal("1600")}

    def test_zero_servings_gives_empty_usage(self, make_drink):
        mojito = make_drink(10, "Mojito", [(1, 50)], adult_rate="0.5")
        assert project_usage(mojito, Decimal("0")) == {}

    def test_shared_ingredient_accumulates(self, make_drink, catalog):
        mojito = make_drink(10, "Mojito", [(1, 50), (2, 20)], adult_rate="0.5")
        lemonade = make_drink(11, "Lemonade", [(2, 30), (3, 150)], adult_rate="0.25", child_rate="0.5")

        projection = project_drinks([mojito, lemonade], 40, 10, 4, catalog)

        # lime: 80 mojitos * 20 + 60 lemonades * 30
        assert projection.usage[2] == Decimal("3400")
        assert projection.usage[1] == Decimal("4000")
        assert projection.usage[3] == Decimal("9000")
        assert projection.total_servings == Decimal("140")

    def test_per_drink_detail(self, make_drink, catalog):
        mojito = make_drink(10, "Mojito", [(1, 50)], adult_rate="0.5", child_rate="0.5")

        projection = project_drinks([mojito], 40, 10, 4, catalog)
        detail = projection.drinks[0]

        assert detail.drink_id == 10
        assert detail.is_alcoholic is True
        assert detail.adult_servings == Decimal("80")
        assert detail.child_servings == Decimal("0")
        assert detail.usage == {1: Decimal("4000")}

    def test_unknown_ingredient_usage_is_still_reported(self, make_drink, catalog):
        mystery = make_drink(12, "Mystery", [(99, 10)], adult_rate="1")

        projection = project_drinks([mystery], 5, 0, 2, catalog)

        assert projection.usage == {99: Decimal("100")}


class TestResolve:
    """Tests for resolve()."""

    def test_mapping_callable_and_missing(self, catalog):
        assert resolve(catalog, 2).name == "Lime Juice"
        assert resolve(catalog.get, 3).name == "Soda Water"
        assert resolve(catalog, 99) is None
        assert resolve(None, 1) is None
