"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from recipe_nutrition.adapters.supabase_day_entry_repository import (
    SupabaseDayEntryRepository,
)
from recipe_nutrition.adapters.supabase_food_repository import SupabaseFoodRepository
from recipe_nutrition.adapters.supabase_recipe_repository import (
    SupabaseRecipeRepository,
)
from recipe_nutrition.config import Settings
from recipe_nutrition.services.days import DayTrackingService
from recipe_nutrition.services.nutrition import NutritionAggregator
from recipe_nutrition.services.recipes import RecipeService
from recipe_nutrition.services.scaling import ScalingEngine


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    aggregator: NutritionAggregator
    recipe_service: RecipeService
    scaling_engine: ScalingEngine
    day_tracking_service: DayTrackingService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    food_repository = SupabaseFoodRepository(supabase_client)
    recipe_repository = SupabaseRecipeRepository(supabase_client)
    day_entry_repository = SupabaseDayEntryRepository(supabase_client)
    aggregator = NutritionAggregator(
        food_lookup=food_repository,
        recipe_lookup=recipe_repository,
        max_depth=resolved_settings.max_nesting_depth,
        on_missing=resolved_settings.missing_data_policy,
    )
    return AppContainer(
        settings=resolved_settings,
        aggregator=aggregator,
        recipe_service=RecipeService(recipe_repository, aggregator),
        scaling_engine=ScalingEngine(aggregator),
        day_tracking_service=DayTrackingService(
            repository=day_entry_repository,
            recipe_lookup=recipe_repository,
            food_lookup=food_repository,
        ),
    )
