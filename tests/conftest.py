"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID, uuid4

import pytest

from recipe_nutrition.config import Settings
from recipe_nutrition.containers import AppContainer
from recipe_nutrition.domain.nutrition import Food, NutritionProfile
from recipe_nutrition.domain.recipes import DayEntry, Recipe, RecipeItem, RecipeVersion
from recipe_nutrition.services.catalog import InMemoryFoodCatalog, InMemoryRecipeStore
from recipe_nutrition.services.days import DayEntryRepository, DayTrackingService
from recipe_nutrition.services.nutrition import NutritionAggregator
from recipe_nutrition.services.recipes import RecipeService
from recipe_nutrition.services.scaling import ScalingEngine

EGG = Food(
    id=UUID("00000000-0000-0000-0000-000000000001"),
    name="Egg",
    profile=NutritionProfile(
        calories=155, protein=13, carbs=1.1, fat=11, fiber=0, sugar=1.1, sodium=124
    ),
)
MILK = Food(
    id=UUID("00000000-0000-0000-0000-000000000002"),
    name="Milk",
    profile=NutritionProfile(
        calories=42, protein=3.4, carbs=5, fat=1, fiber=0, sugar=5, sodium=44
    ),
)
FLOUR = Food(
    id=UUID("00000000-0000-0000-0000-000000000003"),
    name="Flour",
    profile=NutritionProfile(
        calories=364, protein=10, carbs=76, fat=1, fiber=2.7, sugar=0.3, sodium=2
    ),
)


@dataclass
class InMemoryDayEntryRepository(DayEntryRepository):
    """In-memory day entry repository for tests."""

    entries: dict[UUID, DayEntry] = field(default_factory=dict)

    def add_entry(self, entry: DayEntry) -> None:
        self.entries[entry.id] = entry

    def list_entries(self, day: date) -> list[DayEntry]:
        return [entry for entry in self.entries.values() if entry.day == day]

    def delete_entry(self, entry_id: UUID) -> bool:
        return self.entries.pop(entry_id, None) is not None


def make_recipe(
    items: list[RecipeItem],
    servings: int = 1,
    recipe_id: UUID | None = None,
    name: str = "Recipe",
) -> Recipe:
    """Build a saved recipe directly, bypassing snapshot computation."""
    resolved_id = recipe_id or uuid4()
    version = RecipeVersion(
        id=uuid4(),
        recipe_id=resolved_id,
        version_number=1,
        servings=servings,
        items=tuple(items),
        per_serving=NutritionProfile.zero(),
    )
    return Recipe(
        id=resolved_id,
        name=name,
        current_version_id=version.id,
        versions=(version,),
    )


@pytest.fixture
def food_catalog() -> InMemoryFoodCatalog:
    return InMemoryFoodCatalog([EGG, MILK, FLOUR])


@pytest.fixture
def recipe_store() -> InMemoryRecipeStore:
    return InMemoryRecipeStore()


@pytest.fixture
def aggregator(
    food_catalog: InMemoryFoodCatalog, recipe_store: InMemoryRecipeStore
) -> NutritionAggregator:
    return NutritionAggregator(food_lookup=food_catalog, recipe_lookup=recipe_store)


@pytest.fixture
def recipe_service(
    recipe_store: InMemoryRecipeStore, aggregator: NutritionAggregator
) -> RecipeService:
    return RecipeService(recipe_store, aggregator)


@pytest.fixture
def scaling_engine(aggregator: NutritionAggregator) -> ScalingEngine:
    return ScalingEngine(aggregator)


@pytest.fixture
def day_repository() -> InMemoryDayEntryRepository:
    return InMemoryDayEntryRepository()


@pytest.fixture
def day_tracking_service(
    day_repository: InMemoryDayEntryRepository,
    recipe_store: InMemoryRecipeStore,
    food_catalog: InMemoryFoodCatalog,
) -> DayTrackingService:
    return DayTrackingService(
        repository=day_repository,
        recipe_lookup=recipe_store,
        food_lookup=food_catalog,
    )


@pytest.fixture
def omelette(recipe_service: RecipeService) -> Recipe:
    return recipe_service.create_recipe(
        name="Omelette",
        servings=2,
        items=[
            RecipeItem.food(EGG.id, 150, "g"),
            RecipeItem.food(MILK.id, 50, "ml"),
        ],
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
    )


@pytest.fixture
def container(
    settings: Settings,
    aggregator: NutritionAggregator,
    recipe_service: RecipeService,
    scaling_engine: ScalingEngine,
    day_tracking_service: DayTrackingService,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        aggregator=aggregator,
        recipe_service=recipe_service,
        scaling_engine=scaling_engine,
        day_tracking_service=day_tracking_service,
    )
