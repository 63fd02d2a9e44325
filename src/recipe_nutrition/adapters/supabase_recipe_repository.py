"""Supabase repository for recipes and recipe versions."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from recipe_nutrition.domain.nutrition import NutritionProfile
from recipe_nutrition.domain.recipes import (
    FoodRef,
    Recipe,
    RecipeItem,
    RecipeRef,
    RecipeVersion,
)
from recipe_nutrition.domain.units import Unit
from recipe_nutrition.services.nutrition import RecipeLookup
from recipe_nutrition.services.recipes import RecipeRepository

_NUTRIENTS = ("calories", "protein", "carbs", "fat", "fiber", "sugar", "sodium")


@dataclass
class SupabaseRecipeRepository(RecipeRepository, RecipeLookup):
    """Supabase-backed store for recipes, versions and items.

    Versions are only ever inserted; the ``current_version_id`` column on
    ``recipes`` is the single field updated when a recipe is edited.
    """

    client: Client

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe with all of its versions."""
        response = (
            self.client.table("recipes")
            .select("*")
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return self._load_recipe(response.data[0])

    def list_recipes(self, query: str | None, limit: int) -> list[Recipe]:
        """Return recipes whose name matches the query."""
        request = self.client.table("recipes").select("*")
        if query:
            request = request.ilike("name", f"%{query}%")
        response = request.order("name").limit(limit).execute()
        return [self._load_recipe(row) for row in response.data or []]

    def create_recipe(self, recipe: Recipe) -> None:
        """Insert a recipe, its versions, then point it at the current one.

        A recipe row whose versions fail to insert is deleted again, so a
        stored recipe always has at least one version.
        """
        response = (
            self.client.table("recipes")
            .insert(
                {
                    "id": str(recipe.id),
                    "name": recipe.name,
                    "description": recipe.description,
                    "image_url": recipe.image_url,
                    "current_version_id": None,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe")
        try:
            for version in recipe.versions:
                self._insert_version(version)
        except RuntimeError:
            self.client.table("recipes").delete().eq("id", str(recipe.id)).execute()
            raise
        if recipe.current_version_id is not None:
            self._set_current(recipe.id, recipe.current_version_id)

    def add_version(self, recipe_id: UUID, version: RecipeVersion) -> None:
        """Insert a version and make it current."""
        self._insert_version(version)
        self._set_current(recipe_id, version.id)

    def update_metadata(
        self,
        recipe_id: UUID,
        name: str,
        description: str | None,
        image_url: str | None,
    ) -> None:
        """Update the recipe's display fields."""
        self.client.table("recipes").update(
            {"name": name, "description": description, "image_url": image_url}
        ).eq("id", str(recipe_id)).execute()

    def get_current_version(self, recipe_id: UUID) -> RecipeVersion | None:
        """Return the version a recipe currently points at."""
        response = (
            self.client.table("recipes")
            .select("current_version_id")
            .eq("id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data or not response.data[0].get("current_version_id"):
            return None
        return self.get_version(recipe_id, UUID(response.data[0]["current_version_id"]))

    def get_version(self, recipe_id: UUID, version_id: UUID) -> RecipeVersion | None:
        """Return a version of a recipe with its items."""
        response = (
            self.client.table("recipe_versions")
            .select("*")
            .eq("id", str(version_id))
            .eq("recipe_id", str(recipe_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        items = self._load_items([row["id"]])
        return _parse_version(row, items.get(row["id"], []))

    def _load_recipe(self, row: dict[str, object]) -> Recipe:
        versions_response = (
            self.client.table("recipe_versions")
            .select("*")
            .eq("recipe_id", row["id"])
            .order("version")
            .execute()
        )
        version_rows = versions_response.data or []
        items = self._load_items([version["id"] for version in version_rows])
        versions = [
            _parse_version(version, items.get(version["id"], []))
            for version in version_rows
        ]
        current = row.get("current_version_id")
        return Recipe(
            id=UUID(row["id"]),
            name=row["name"],
            description=row.get("description"),
            image_url=row.get("image_url"),
            current_version_id=UUID(current) if current else None,
            versions=tuple(versions),
        )

    def _load_items(self, version_ids: list[str]) -> dict[str, list[RecipeItem]]:
        if not version_ids:
            return {}
        response = (
            self.client.table("recipe_items")
            .select("*")
            .in_("recipe_version_id", version_ids)
            .order("position")
            .execute()
        )
        grouped: dict[str, list[RecipeItem]] = {}
        for row in response.data or []:
            grouped.setdefault(row["recipe_version_id"], []).append(_parse_item(row))
        return grouped

    def _insert_version(self, version: RecipeVersion) -> None:
        response = (
            self.client.table("recipe_versions")
            .insert(
                {
                    "id": str(version.id),
                    "recipe_id": str(version.recipe_id),
                    "version": version.version_number,
                    "servings": version.servings,
                    "created_at": version.created_at.isoformat(),
                    **{
                        f"{name}_per_serving": getattr(version.per_serving, name)
                        for name in _NUTRIENTS
                    },
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create recipe version")
        payload = [
            {
                "recipe_version_id": str(version.id),
                "position": position,
                "food_id": str(item.food_id) if item.food_id else None,
                "recipe_id": str(item.recipe_id) if item.recipe_id else None,
                "amount": item.amount,
                "unit": item.unit.value,
            }
            for position, item in enumerate(version.items)
        ]
        if payload:
            items_response = self.client.table("recipe_items").insert(payload).execute()
            if not items_response.data:
                raise RuntimeError("Failed to create recipe items")

    def _set_current(self, recipe_id: UUID, version_id: UUID) -> None:
        self.client.table("recipes").update(
            {"current_version_id": str(version_id)}
        ).eq("id", str(recipe_id)).execute()


def _parse_item(row: dict[str, object]) -> RecipeItem:
    if row.get("food_id"):
        ref: FoodRef | RecipeRef = FoodRef(UUID(row["food_id"]))
    else:
        ref = RecipeRef(UUID(row["recipe_id"]))
    return RecipeItem(amount=float(row["amount"]), unit=Unit.parse(row["unit"]), ref=ref)


def _parse_version(row: dict[str, object], items: list[RecipeItem]) -> RecipeVersion:
    return RecipeVersion(
        id=UUID(row["id"]),
        recipe_id=UUID(row["recipe_id"]),
        version_number=int(row["version"]),
        servings=int(row["servings"]),
        items=tuple(items),
        per_serving=NutritionProfile(
            **{name: float(row.get(f"{name}_per_serving") or 0.0) for name in _NUTRIENTS}
        ),
        created_at=datetime.fromisoformat(row["created_at"]),
    )
