"""In-memory lookups for foods and recipes."""

from dataclasses import dataclass, replace
from uuid import UUID

from recipe_nutrition.domain.nutrition import Food
from recipe_nutrition.domain.recipes import Recipe, RecipeVersion
from recipe_nutrition.services.nutrition import FoodLookup, RecipeLookup
from recipe_nutrition.services.recipes import RecipeRepository


@dataclass
class InMemoryFoodCatalog(FoodLookup):
    """Dictionary-backed food catalog."""

    _foods: dict[UUID, Food]

    def __init__(self, foods: list[Food] | None = None) -> None:
        self._foods = {food.id: food for food in foods or []}

    def get(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""
        return self._foods.get(food_id)

    def add(self, food: Food) -> Food:
        """Store a food and return it."""
        self._foods[food.id] = food
        return food

    def snapshot(self) -> "InMemoryFoodCatalog":
        """Return an independent copy for consistent multi-read work."""
        return InMemoryFoodCatalog(list(self._foods.values()))


@dataclass
class InMemoryRecipeStore(RecipeLookup, RecipeRepository):
    """Dictionary-backed recipe store.

    Recipes handed out are copies, so callers never mutate stored state
    except through the repository methods.
    """

    _recipes: dict[UUID, Recipe]

    def __init__(self, recipes: list[Recipe] | None = None) -> None:
        self._recipes = {recipe.id: replace(recipe) for recipe in recipes or []}

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a copy of a recipe, if present."""
        recipe = self._recipes.get(recipe_id)
        return replace(recipe) if recipe else None

    def list_recipes(self, query: str | None, limit: int) -> list[Recipe]:
        """Return recipes whose name contains the query, case-insensitively."""
        needle = (query or "").lower()
        matches = [
            replace(recipe)
            for recipe in self._recipes.values()
            if needle in recipe.name.lower()
        ]
        return matches[:limit]

    def create_recipe(self, recipe: Recipe) -> None:
        """Store a new recipe."""
        self._recipes[recipe.id] = replace(recipe)

    def add_version(self, recipe_id: UUID, version: RecipeVersion) -> None:
        """Append a version to the stored recipe and make it current."""
        self._recipes[recipe_id].append_version(version)

    def update_metadata(
        self,
        recipe_id: UUID,
        name: str,
        description: str | None,
        image_url: str | None,
    ) -> None:
        """Patch display fields of the stored recipe."""
        recipe = self._recipes[recipe_id]
        recipe.name = name
        recipe.description = description
        recipe.image_url = image_url

    def get_current_version(self, recipe_id: UUID) -> RecipeVersion | None:
        """Return the current version of a recipe, if present."""
        recipe = self._recipes.get(recipe_id)
        return recipe.current_version if recipe else None

    def get_version(self, recipe_id: UUID, version_id: UUID) -> RecipeVersion | None:
        """Return a specific version of a recipe, if present."""
        recipe = self._recipes.get(recipe_id)
        return recipe.get_version(version_id) if recipe else None

    def snapshot(self) -> "InMemoryRecipeStore":
        """Return an independent copy for consistent multi-read work."""
        return InMemoryRecipeStore(list(self._recipes.values()))
