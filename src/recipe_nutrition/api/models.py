"""Request models for the HTTP API."""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from recipe_nutrition.domain.recipes import RecipeItem
from recipe_nutrition.domain.units import Unit
from recipe_nutrition.services.scaling import ByServings, ByTotalWeight, ScaleMode


class IngredientInput(BaseModel):
    """One ingredient line referencing a food or a recipe."""

    food_id: UUID | None = None
    recipe_id: UUID | None = None
    amount: float = Field(gt=0)
    unit: str = "g"

    @model_validator(mode="after")
    def _one_reference(self) -> "IngredientInput":
        if (self.food_id is None) == (self.recipe_id is None):
            raise ValueError("Ingredient must have a food or recipe selected")
        return self

    def to_item(self) -> RecipeItem:
        if self.food_id is not None:
            return RecipeItem.food(self.food_id, self.amount, self.unit)
        return RecipeItem.recipe(self.recipe_id, self.amount, self.unit)


class RecipeCreateRequest(BaseModel):
    name: str
    servings: int = Field(default=1, ge=1)
    items: list[IngredientInput] = Field(min_length=1)
    description: str | None = None
    image_url: str | None = None


class RecipeVersionRequest(BaseModel):
    servings: int = Field(ge=1)
    items: list[IngredientInput] = Field(min_length=1)


class RecipeMetadataRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    image_url: str | None = None


class RevertRequest(BaseModel):
    version_id: UUID


class ScaleRequest(BaseModel):
    """Scaling options for cooking mode."""

    mode: Literal["servings", "total_weight"]
    target_value: float
    unit: str = "g"
    version_id: UUID | None = None

    def to_mode(self) -> ScaleMode:
        if self.mode == "servings":
            return ByServings(self.target_value)
        return ByTotalWeight(self.target_value, Unit.parse(self.unit))


class ConversionRequest(BaseModel):
    amount: float
    from_unit: str
    to_unit: str


class DayEntryRequest(BaseModel):
    """A portion to log on a day."""

    food_id: UUID | None = None
    recipe_id: UUID | None = None
    amount: float = Field(gt=0)
    unit: str = "g"
    meal_type: str = "snack"

    @model_validator(mode="after")
    def _one_reference(self) -> "DayEntryRequest":
        if (self.food_id is None) == (self.recipe_id is None):
            raise ValueError("Entry must have a food or recipe selected")
        return self
