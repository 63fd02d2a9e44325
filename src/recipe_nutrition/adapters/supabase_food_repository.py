"""Supabase implementation of the food catalog lookup."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from recipe_nutrition.domain.nutrition import Food, NutritionProfile
from recipe_nutrition.services.nutrition import FoodLookup


@dataclass
class SupabaseFoodRepository(FoodLookup):
    """Reads foods and their per-100g profiles from Supabase."""

    client: Client

    def get(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""
        response = (
            self.client.table("foods")
            .select("*")
            .eq("id", str(food_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_food(response.data[0])


def _parse_food(row: dict[str, object]) -> Food:
    return Food(
        id=UUID(row["id"]),
        name=row.get("name", ""),
        profile=NutritionProfile.from_dict(row),
    )
