"""Recipe versioning service."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID, uuid4

from recipe_nutrition.domain.errors import (
    RecipeNotFoundError,
    RecipeValidationError,
    VersionNotFoundError,
)
from recipe_nutrition.domain.nutrition import NutritionTotals
from recipe_nutrition.domain.recipes import Recipe, RecipeItem, RecipeVersion
from recipe_nutrition.services.nutrition import NutritionAggregator

_logger = logging.getLogger(__name__)


class RecipeRepository(Protocol):
    """Persistence interface for recipes and their versions."""

    def get_recipe(self, recipe_id: UUID) -> Recipe | None:
        """Return a recipe with its full version history, if present."""

    def list_recipes(self, query: str | None, limit: int) -> list[Recipe]:
        """Return recipes whose name matches the query."""

    def create_recipe(self, recipe: Recipe) -> None:
        """Persist a new recipe together with its first version."""

    def add_version(self, recipe_id: UUID, version: RecipeVersion) -> None:
        """Append a version and make it current."""

    def update_metadata(
        self,
        recipe_id: UUID,
        name: str,
        description: str | None,
        image_url: str | None,
    ) -> None:
        """Patch the recipe envelope's display fields."""


@dataclass
class RecipeService:
    """Creates recipes and appends immutable versions on every edit.

    Servings and items live on versions; every change to either appends a
    new version and repoints the recipe's current pointer. Name,
    description and image live on the recipe itself and are patched in
    place without creating a version.
    """

    repository: RecipeRepository
    aggregator: NutritionAggregator

    def create_recipe(
        self,
        name: str,
        servings: int,
        items: Iterable[RecipeItem],
        description: str | None = None,
        image_url: str | None = None,
    ) -> Recipe:
        """Create a recipe at version 1."""
        recipe_id = uuid4()
        version = self._build_version(recipe_id, 1, servings, items)
        recipe = Recipe(
            id=recipe_id,
            name=_clean_name(name),
            description=description,
            image_url=image_url,
            current_version_id=version.id,
            versions=(version,),
        )
        self.repository.create_recipe(recipe)
        _logger.info("Created recipe %s at version 1", recipe_id)
        return recipe

    def save_version(
        self, recipe_id: UUID, servings: int, items: Iterable[RecipeItem]
    ) -> Recipe:
        """Append a new version when servings or items changed."""
        recipe = self.get_recipe(recipe_id)
        items = tuple(items)
        current = recipe.current_version
        if current and current.servings == servings and current.items == items:
            return recipe
        return self._append(recipe, servings, items)

    def revert_to_version(self, recipe_id: UUID, version_id: UUID) -> Recipe:
        """Append a copy of an earlier version as the new current version."""
        recipe = self.get_recipe(recipe_id)
        source = recipe.get_version(version_id)
        if source is None:
            raise VersionNotFoundError(recipe_id, version_id)
        _logger.info(
            "Reverting recipe %s to version %s", recipe_id, source.version_number
        )
        return self._append(recipe, source.servings, source.items)

    def update_metadata(
        self,
        recipe_id: UUID,
        name: str | None = None,
        description: str | None = None,
        image_url: str | None = None,
    ) -> Recipe:
        """Patch display fields without touching any version."""
        recipe = self.get_recipe(recipe_id)
        if name is not None:
            recipe.name = _clean_name(name)
        if description is not None:
            recipe.description = description
        if image_url is not None:
            recipe.image_url = image_url
        self.repository.update_metadata(
            recipe_id, recipe.name, recipe.description, recipe.image_url
        )
        return recipe

    def get_recipe(self, recipe_id: UUID) -> Recipe:
        """Return a recipe or raise ``RecipeNotFoundError``."""
        recipe = self.repository.get_recipe(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id)
        return recipe

    def get_version(self, recipe_id: UUID, version_id: UUID) -> RecipeVersion:
        """Return a specific version of a recipe."""
        version = self.get_recipe(recipe_id).get_version(version_id)
        if version is None:
            raise VersionNotFoundError(recipe_id, version_id)
        return version

    def get_current_version(self, recipe_id: UUID) -> RecipeVersion:
        """Return the version the recipe currently points at."""
        recipe = self.get_recipe(recipe_id)
        version = recipe.current_version
        if version is None:
            raise RecipeValidationError("Recipe has no saved version", "versions")
        return version

    def list_versions(self, recipe_id: UUID) -> list[RecipeVersion]:
        """Return every version, newest first."""
        recipe = self.get_recipe(recipe_id)
        return sorted(
            recipe.versions, key=lambda version: version.version_number, reverse=True
        )

    def search(self, query: str | None, limit: int = 20) -> list[Recipe]:
        """Search recipes by name."""
        return self.repository.list_recipes(query, limit)

    def nutrition(
        self, recipe_id: UUID, version_id: UUID | None = None
    ) -> NutritionTotals:
        """Aggregate live nutrition for the current or a given version."""
        if version_id is None:
            version = self.get_current_version(recipe_id)
        else:
            version = self.get_version(recipe_id, version_id)
        return self.aggregator.aggregate(version)

    def _append(
        self, recipe: Recipe, servings: int, items: Iterable[RecipeItem]
    ) -> Recipe:
        version = self._build_version(
            recipe.id, recipe.latest_version_number + 1, servings, items
        )
        recipe.append_version(version)
        self.repository.add_version(recipe.id, version)
        _logger.info(
            "Recipe %s moved to version %s", recipe.id, version.version_number
        )
        return recipe

    def _build_version(
        self,
        recipe_id: UUID,
        version_number: int,
        servings: int,
        items: Iterable[RecipeItem],
    ) -> RecipeVersion:
        items = tuple(items)
        if not items:
            raise RecipeValidationError(
                "Recipe must have at least one ingredient", "items"
            )
        if isinstance(servings, bool) or not isinstance(servings, int) or servings < 1:
            raise RecipeValidationError(
                "Servings must be a positive whole number", "servings"
            )
        per_serving = self.aggregator.snapshot_for(servings, items, recipe_id)
        return RecipeVersion(
            id=uuid4(),
            recipe_id=recipe_id,
            version_number=version_number,
            servings=servings,
            items=items,
            per_serving=per_serving,
        )


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise RecipeValidationError("Recipe name is required", "name")
    return cleaned
