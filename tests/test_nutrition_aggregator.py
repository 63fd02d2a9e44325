"""Tests for recursive nutrition aggregation."""

from collections import Counter
from dataclasses import dataclass, field
from uuid import UUID, uuid4

import pytest

from recipe_nutrition.domain.errors import (
    CyclicReferenceError,
    MaxDepthExceededError,
    MissingReferenceError,
)
from recipe_nutrition.domain.nutrition import NutritionProfile
from recipe_nutrition.domain.recipes import Recipe, RecipeItem, RecipeVersion
from recipe_nutrition.services.catalog import InMemoryFoodCatalog, InMemoryRecipeStore
from recipe_nutrition.services.nutrition import MissingDataPolicy, NutritionAggregator
from tests.conftest import EGG, FLOUR, MILK, make_recipe


def test_omelette_totals(aggregator: NutritionAggregator, omelette: Recipe) -> None:
    totals = aggregator.aggregate(omelette.current_version)

    assert totals.total.calories == 253.5
    assert totals.per_serving.calories == 126.75
    assert totals.total.protein == pytest.approx(13 * 1.5 + 3.4 * 0.5)
    assert totals.warnings == ()
    assert not totals.is_partial


def test_doubling_amounts_doubles_total(aggregator: NutritionAggregator) -> None:
    items = [RecipeItem.food(EGG.id, 120, "g"), RecipeItem.food(FLOUR.id, 0.3, "kg")]
    doubled = [item.with_amount(item.amount * 2) for item in items]

    single = aggregator.aggregate_items(items, servings=3)
    double = aggregator.aggregate_items(doubled, servings=3)

    assert double.total.is_close(single.total.scaled(2))
    assert double.per_serving.is_close(single.per_serving.scaled(2))
    assert double.total.divided(2).is_close(single.total)


def test_nested_recipe_uses_per_serving_basis(
    aggregator: NutritionAggregator, recipe_store: InMemoryRecipeStore
) -> None:
    # 200 g egg over 2 servings: 155 kcal per serving.
    base = make_recipe([RecipeItem.food(EGG.id, 200, "g")], servings=2)
    recipe_store.create_recipe(base)
    parent = make_recipe([RecipeItem.recipe(base.id, 300, "g")], servings=1)
    recipe_store.create_recipe(parent)

    totals = aggregator.aggregate(parent.current_version)

    assert totals.total.calories == pytest.approx(155 * 3)


def test_nested_recipe_tracks_current_version(
    aggregator: NutritionAggregator, recipe_store: InMemoryRecipeStore
) -> None:
    base = make_recipe([RecipeItem.food(EGG.id, 100, "g")])
    recipe_store.create_recipe(base)
    parent = make_recipe([RecipeItem.recipe(base.id, 100, "g")])
    recipe_store.create_recipe(parent)
    before = aggregator.aggregate(parent.current_version).total.calories

    recipe_store.add_version(
        base.id,
        RecipeVersion(
            id=uuid4(),
            recipe_id=base.id,
            version_number=2,
            servings=1,
            items=(RecipeItem.food(MILK.id, 100, "g"),),
            per_serving=NutritionProfile.zero(),
        ),
    )
    after = aggregator.aggregate(parent.current_version).total.calories

    assert before == pytest.approx(155)
    assert after == pytest.approx(42)


def test_direct_cycle_is_rejected(
    aggregator: NutritionAggregator, recipe_store: InMemoryRecipeStore
) -> None:
    a_id, b_id = uuid4(), uuid4()
    recipe_a = make_recipe([RecipeItem.recipe(b_id, 100, "g")], recipe_id=a_id)
    recipe_b = make_recipe([RecipeItem.recipe(a_id, 100, "g")], recipe_id=b_id)
    recipe_store.create_recipe(recipe_a)
    recipe_store.create_recipe(recipe_b)

    with pytest.raises(CyclicReferenceError) as excinfo:
        aggregator.aggregate(recipe_a.current_version)

    assert excinfo.value.recipe_id == a_id


def test_transitive_cycle_is_rejected(
    aggregator: NutritionAggregator, recipe_store: InMemoryRecipeStore
) -> None:
    a_id, b_id, c_id = uuid4(), uuid4(), uuid4()
    recipe_store.create_recipe(
        make_recipe([RecipeItem.recipe(b_id, 50, "g")], recipe_id=a_id)
    )
    recipe_store.create_recipe(
        make_recipe(
            [RecipeItem.food(EGG.id, 50, "g"), RecipeItem.recipe(c_id, 50, "g")],
            recipe_id=b_id,
        )
    )
    recipe_store.create_recipe(
        make_recipe([RecipeItem.recipe(a_id, 50, "g")], recipe_id=c_id)
    )

    with pytest.raises(CyclicReferenceError):
        aggregator.aggregate(recipe_store.get_current_version(b_id))


def test_self_reference_is_rejected(
    aggregator: NutritionAggregator, recipe_store: InMemoryRecipeStore
) -> None:
    recipe_id = uuid4()
    recipe_store.create_recipe(
        make_recipe([RecipeItem.recipe(recipe_id, 10, "g")], recipe_id=recipe_id)
    )

    with pytest.raises(CyclicReferenceError):
        aggregator.aggregate(recipe_store.get_current_version(recipe_id))


def test_shared_sub_recipe_is_not_a_cycle(
    aggregator: NutritionAggregator, recipe_store: InMemoryRecipeStore
) -> None:
    shared = make_recipe([RecipeItem.food(EGG.id, 100, "g")])
    recipe_store.create_recipe(shared)
    parent = make_recipe(
        [RecipeItem.recipe(shared.id, 100, "g"), RecipeItem.recipe(shared.id, 50, "g")]
    )
    recipe_store.create_recipe(parent)

    totals = aggregator.aggregate(parent.current_version)

    assert totals.total.calories == pytest.approx(155 * 1.5)


def test_deep_chain_hits_depth_limit(
    food_catalog: InMemoryFoodCatalog, recipe_store: InMemoryRecipeStore
) -> None:
    previous = make_recipe([RecipeItem.food(EGG.id, 100, "g")])
    recipe_store.create_recipe(previous)
    for _ in range(5):
        previous = make_recipe([RecipeItem.recipe(previous.id, 100, "g")])
        recipe_store.create_recipe(previous)

    shallow = NutritionAggregator(food_catalog, recipe_store, max_depth=4)
    deep = NutritionAggregator(food_catalog, recipe_store, max_depth=5)

    with pytest.raises(MaxDepthExceededError) as excinfo:
        shallow.aggregate(previous.current_version)
    assert excinfo.value.max_depth == 4
    assert deep.aggregate(previous.current_version).total.calories == pytest.approx(155)


def test_missing_food_counts_as_zero(aggregator: NutritionAggregator) -> None:
    missing_id = uuid4()
    items = [RecipeItem.food(EGG.id, 100, "g"), RecipeItem.food(missing_id, 100, "g")]

    totals = aggregator.aggregate_items(items, servings=1)

    assert totals.total.calories == pytest.approx(155)
    assert totals.is_partial
    assert str(missing_id) in totals.warnings[0]


def test_missing_recipe_counts_as_zero(aggregator: NutritionAggregator) -> None:
    items = [RecipeItem.recipe(uuid4(), 100, "g"), RecipeItem.food(MILK.id, 100, "g")]

    totals = aggregator.aggregate_items(items, servings=1)

    assert totals.total.calories == pytest.approx(42)
    assert len(totals.warnings) == 1


def test_strict_policy_raises_for_missing_data(
    food_catalog: InMemoryFoodCatalog, recipe_store: InMemoryRecipeStore
) -> None:
    strict = NutritionAggregator(
        food_catalog, recipe_store, on_missing=MissingDataPolicy.ERROR
    )
    missing_id = uuid4()

    with pytest.raises(MissingReferenceError) as excinfo:
        strict.aggregate_items([RecipeItem.food(missing_id, 1, "g")], servings=1)

    assert excinfo.value.ref_id == missing_id
    assert excinfo.value.kind == "food"


def test_unconvertible_line_is_zero_filled(aggregator: NutritionAggregator) -> None:
    items = [
        RecipeItem.food(EGG.id, 100, "g"),
        RecipeItem.food(MILK.id, 100, "celsius"),
    ]

    totals = aggregator.aggregate_items(items, servings=1)

    assert totals.total.calories == pytest.approx(155)
    assert totals.warnings


def test_volume_lines_are_weighed_as_water(aggregator: NutritionAggregator) -> None:
    totals = aggregator.aggregate_items(
        [RecipeItem.food(MILK.id, 1, "cup")], servings=1
    )

    assert totals.total.calories == pytest.approx(42 * 2.4)


def test_item_contribution_matches_aggregate(aggregator: NutritionAggregator) -> None:
    item = RecipeItem.food(FLOUR.id, 250, "g")

    contribution, warnings = aggregator.item_contribution(item)

    assert warnings == ()
    assert contribution.is_close(
        aggregator.aggregate_items([item], servings=1).total
    )


def test_snapshot_is_per_serving(aggregator: NutritionAggregator) -> None:
    items = [RecipeItem.food(FLOUR.id, 200, "g")]

    snapshot = aggregator.snapshot_for(4, items, recipe_id=uuid4())

    assert snapshot.calories == pytest.approx(182)


@dataclass
class CountingRecipeLookup:
    """Recipe lookup that records how often each recipe is resolved."""

    store: InMemoryRecipeStore
    calls: Counter = field(default_factory=Counter)

    def get_current_version(self, recipe_id: UUID) -> RecipeVersion | None:
        self.calls[recipe_id] += 1
        return self.store.get_current_version(recipe_id)

    def get_version(self, recipe_id: UUID, version_id: UUID) -> RecipeVersion | None:
        return self.store.get_version(recipe_id, version_id)


def test_shared_sub_recipes_are_resolved_once_per_level(
    food_catalog: InMemoryFoodCatalog, recipe_store: InMemoryRecipeStore
) -> None:
    previous = make_recipe([RecipeItem.food(EGG.id, 100, "g")])
    recipe_store.create_recipe(previous)
    for _ in range(30):
        previous = make_recipe(
            [
                RecipeItem.recipe(previous.id, 50, "g"),
                RecipeItem.recipe(previous.id, 50, "g"),
            ]
        )
        recipe_store.create_recipe(previous)
    lookup = CountingRecipeLookup(recipe_store)
    aggregator = NutritionAggregator(food_catalog, lookup)

    totals = aggregator.aggregate(previous.current_version)

    assert totals.total.calories == pytest.approx(155)
    assert max(lookup.calls.values()) == 1
