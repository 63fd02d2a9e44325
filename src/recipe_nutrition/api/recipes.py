"""Recipe, versioning, nutrition and scaling endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Request

from recipe_nutrition.api.models import (  # noqa: TC001
    RecipeCreateRequest,
    RecipeMetadataRequest,
    RecipeVersionRequest,
    RevertRequest,
    ScaleRequest,
)

if TYPE_CHECKING:
    from recipe_nutrition.containers import AppContainer

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("")
async def list_recipes(
    request: Request, search: str | None = None, limit: int = 20
) -> dict[str, object]:
    """Return recipes whose name matches the search text."""
    container: AppContainer = request.app.state.container
    recipes = container.recipe_service.search(search, limit)
    return {"recipes": [recipe.as_dict() for recipe in recipes]}


@router.post("")
async def create_recipe(
    payload: RecipeCreateRequest, request: Request
) -> dict[str, object]:
    """Create a recipe at version 1."""
    container: AppContainer = request.app.state.container
    recipe = container.recipe_service.create_recipe(
        name=payload.name,
        servings=payload.servings,
        items=[item.to_item() for item in payload.items],
        description=payload.description,
        image_url=payload.image_url,
    )
    return recipe.as_dict()


@router.get("/{recipe_id}")
async def get_recipe(recipe_id: UUID, request: Request) -> dict[str, object]:
    """Return a recipe with its version history."""
    container: AppContainer = request.app.state.container
    return container.recipe_service.get_recipe(recipe_id).as_dict()


@router.patch("/{recipe_id}")
async def update_recipe_metadata(
    recipe_id: UUID, payload: RecipeMetadataRequest, request: Request
) -> dict[str, object]:
    """Patch name, description or image without creating a version."""
    container: AppContainer = request.app.state.container
    recipe = container.recipe_service.update_metadata(
        recipe_id,
        name=payload.name,
        description=payload.description,
        image_url=payload.image_url,
    )
    return recipe.as_dict()


@router.get("/{recipe_id}/versions")
async def list_versions(recipe_id: UUID, request: Request) -> dict[str, object]:
    """Return every version of a recipe, newest first."""
    container: AppContainer = request.app.state.container
    versions = container.recipe_service.list_versions(recipe_id)
    return {"versions": [version.as_dict() for version in versions]}


@router.post("/{recipe_id}/versions")
async def save_version(
    recipe_id: UUID, payload: RecipeVersionRequest, request: Request
) -> dict[str, object]:
    """Save new servings or items as a new version."""
    container: AppContainer = request.app.state.container
    recipe = container.recipe_service.save_version(
        recipe_id,
        servings=payload.servings,
        items=[item.to_item() for item in payload.items],
    )
    return recipe.as_dict()


@router.post("/{recipe_id}/revert")
async def revert_version(
    recipe_id: UUID, payload: RevertRequest, request: Request
) -> dict[str, object]:
    """Copy an earlier version forward as the new current version."""
    container: AppContainer = request.app.state.container
    recipe = container.recipe_service.revert_to_version(recipe_id, payload.version_id)
    return recipe.as_dict()


@router.get("/{recipe_id}/nutrition")
async def recipe_nutrition(
    recipe_id: UUID, request: Request, version_id: UUID | None = None
) -> dict[str, object]:
    """Return live total and per-serving nutrition."""
    container: AppContainer = request.app.state.container
    return container.recipe_service.nutrition(recipe_id, version_id).as_dict()


@router.post("/{recipe_id}/scale")
async def scale_recipe(
    recipe_id: UUID, payload: ScaleRequest, request: Request
) -> dict[str, object]:
    """Scale a recipe by servings or by total weight."""
    container: AppContainer = request.app.state.container
    if payload.version_id is None:
        version = container.recipe_service.get_current_version(recipe_id)
    else:
        version = container.recipe_service.get_version(recipe_id, payload.version_id)
    scaled = container.scaling_engine.scale(version, payload.to_mode())
    return scaled.as_dict()
