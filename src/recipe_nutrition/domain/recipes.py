"""Domain models for recipes, versions and day entries."""

import math
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime
from uuid import UUID

from recipe_nutrition.domain.errors import RecipeValidationError
from recipe_nutrition.domain.nutrition import NutritionProfile
from recipe_nutrition.domain.units import Unit


@dataclass(frozen=True)
class FoodRef:
    """Reference to a base ingredient."""

    food_id: UUID


@dataclass(frozen=True)
class RecipeRef:
    """Reference to another recipe, resolved to its current version."""

    recipe_id: UUID


@dataclass(frozen=True)
class RecipeItem:
    """One ingredient line of a recipe version."""

    amount: float
    unit: Unit
    ref: FoodRef | RecipeRef

    def __post_init__(self) -> None:
        if not math.isfinite(self.amount) or self.amount <= 0:
            raise RecipeValidationError(
                "Ingredient must have a positive amount", "amount"
            )
        if not isinstance(self.ref, FoodRef | RecipeRef):
            raise RecipeValidationError(
                "Ingredient must reference a food or a recipe", "ref"
            )

    @classmethod
    def food(cls, food_id: UUID, amount: float, unit: Unit | str) -> "RecipeItem":
        """Create a line referencing a food."""
        return cls(amount=amount, unit=Unit.parse(unit), ref=FoodRef(food_id))

    @classmethod
    def recipe(
        cls, recipe_id: UUID, amount: float, unit: Unit | str
    ) -> "RecipeItem":
        """Create a line referencing a nested recipe."""
        return cls(amount=amount, unit=Unit.parse(unit), ref=RecipeRef(recipe_id))

    @property
    def food_id(self) -> UUID | None:
        return self.ref.food_id if isinstance(self.ref, FoodRef) else None

    @property
    def recipe_id(self) -> UUID | None:
        return self.ref.recipe_id if isinstance(self.ref, RecipeRef) else None

    def with_amount(self, amount: float) -> "RecipeItem":
        """Return a copy of the line with a different amount."""
        return replace(self, amount=amount)

    def as_dict(self) -> dict[str, object]:
        """Return the line as plain data."""
        return {
            "food_id": str(self.food_id) if self.food_id else None,
            "recipe_id": str(self.recipe_id) if self.recipe_id else None,
            "amount": self.amount,
            "unit": self.unit.value,
        }


@dataclass(frozen=True)
class RecipeVersion:
    """Immutable snapshot of a recipe's servings and items."""

    id: UUID
    recipe_id: UUID
    version_number: int
    servings: int
    items: tuple[RecipeItem, ...]
    per_serving: NutritionProfile
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def __post_init__(self) -> None:
        if self.version_number < 1:
            raise RecipeValidationError(
                "Version numbers start at 1", "version_number"
            )
        if isinstance(self.servings, bool) or not isinstance(self.servings, int):
            raise RecipeValidationError(
                "Servings must be a positive whole number", "servings"
            )
        if self.servings < 1:
            raise RecipeValidationError(
                "Servings must be a positive whole number", "servings"
            )
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))

    def as_dict(self) -> dict[str, object]:
        """Return the version as plain data."""
        return {
            "id": str(self.id),
            "recipe_id": str(self.recipe_id),
            "version_number": self.version_number,
            "servings": self.servings,
            "items": [item.as_dict() for item in self.items],
            "per_serving": self.per_serving.as_dict(),
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class Recipe:
    """Mutable envelope around an append-only version history."""

    id: UUID
    name: str
    description: str | None = None
    image_url: str | None = None
    current_version_id: UUID | None = None
    versions: tuple[RecipeVersion, ...] = ()

    def __post_init__(self) -> None:
        self.versions = tuple(self.versions)
        if self.current_version_id is not None and not any(
            version.id == self.current_version_id for version in self.versions
        ):
            raise RecipeValidationError(
                "Current version must be one of the recipe versions",
                "current_version_id",
            )

    @property
    def current_version(self) -> RecipeVersion | None:
        """Return the version the current pointer references."""
        if self.current_version_id is None:
            return None
        return self.get_version(self.current_version_id)

    @property
    def latest_version_number(self) -> int:
        return max((version.version_number for version in self.versions), default=0)

    def get_version(self, version_id: UUID) -> RecipeVersion | None:
        """Return a version by id, if it belongs to this recipe."""
        for version in self.versions:
            if version.id == version_id:
                return version
        return None

    def append_version(self, version: RecipeVersion) -> None:
        """Append a new version and repoint the current pointer at it."""
        if version.recipe_id != self.id:
            raise RecipeValidationError("Version belongs to another recipe", "recipe_id")
        if version.version_number != self.latest_version_number + 1:
            raise RecipeValidationError(
                "Version numbers must increase by one", "version_number"
            )
        self.versions = (*self.versions, version)
        self.current_version_id = version.id

    def as_dict(self) -> dict[str, object]:
        """Return the recipe with its version history as plain data."""
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            "current_version_id": (
                str(self.current_version_id) if self.current_version_id else None
            ),
            "versions": [version.as_dict() for version in self.versions],
        }


@dataclass(frozen=True)
class DayEntry:
    """A logged portion pinned to a specific recipe version or a food."""

    id: UUID
    day: date
    amount: float
    unit: Unit
    meal_type: str = "snack"
    recipe_id: UUID | None = None
    version_id: UUID | None = None
    food_id: UUID | None = None

    def __post_init__(self) -> None:
        pinned_recipe = self.recipe_id is not None and self.version_id is not None
        if pinned_recipe == (self.food_id is not None):
            raise RecipeValidationError(
                "Entry must pin a recipe version or reference a food", "entry"
            )
        if not math.isfinite(self.amount) or self.amount <= 0:
            raise RecipeValidationError("Entry must have a positive amount", "amount")

    def as_dict(self) -> dict[str, object]:
        """Return the entry as plain data."""
        return {
            "id": str(self.id),
            "day": self.day.isoformat(),
            "amount": self.amount,
            "unit": self.unit.value,
            "meal_type": self.meal_type,
            "recipe_id": str(self.recipe_id) if self.recipe_id else None,
            "version_id": str(self.version_id) if self.version_id else None,
            "food_id": str(self.food_id) if self.food_id else None,
        }
