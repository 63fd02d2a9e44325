"""Day tracking with entries pinned to recipe versions."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol
from uuid import UUID, uuid4

from recipe_nutrition.domain.errors import ConversionError, RecipeNotFoundError
from recipe_nutrition.domain.nutrition import NutritionProfile
from recipe_nutrition.domain.recipes import DayEntry
from recipe_nutrition.domain.units import Unit
from recipe_nutrition.services.nutrition import FoodLookup, RecipeLookup
from recipe_nutrition.services.units import to_grams

_logger = logging.getLogger(__name__)


class DayEntryRepository(Protocol):
    """Persistence interface for day entries."""

    def add_entry(self, entry: DayEntry) -> None:
        """Persist a new entry."""

    def list_entries(self, day: date) -> list[DayEntry]:
        """Return the entries logged on a day."""

    def delete_entry(self, entry_id: UUID) -> bool:
        """Delete an entry, returning whether it existed."""


@dataclass
class DaySummary:
    """Totals for one day of entries."""

    day: date
    total: NutritionProfile
    entries: list[DayEntry]
    warnings: list[str] = field(default_factory=list)


@dataclass
class DayTrackingService:
    """Logs portions and totals them per day.

    Recipe entries pin the version that was current when they were logged
    and use that version's cached per-serving snapshot, so later edits to
    the recipe or its sub-recipes never change a logged day.
    """

    repository: DayEntryRepository
    recipe_lookup: RecipeLookup
    food_lookup: FoodLookup

    def log_recipe(
        self,
        day: date,
        recipe_id: UUID,
        amount: float,
        unit: Unit | str = Unit.G,
        meal_type: str = "snack",
    ) -> DayEntry:
        """Log a recipe portion against its current version."""
        version = self.recipe_lookup.get_current_version(recipe_id)
        if version is None:
            raise RecipeNotFoundError(recipe_id)
        entry = DayEntry(
            id=uuid4(),
            day=day,
            amount=amount,
            unit=Unit.parse(unit),
            meal_type=meal_type,
            recipe_id=recipe_id,
            version_id=version.id,
        )
        self.repository.add_entry(entry)
        return entry

    def log_food(
        self,
        day: date,
        food_id: UUID,
        amount: float,
        unit: Unit | str = Unit.G,
        meal_type: str = "snack",
    ) -> DayEntry:
        """Log a food portion."""
        entry = DayEntry(
            id=uuid4(),
            day=day,
            amount=amount,
            unit=Unit.parse(unit),
            meal_type=meal_type,
            food_id=food_id,
        )
        self.repository.add_entry(entry)
        return entry

    def remove_entry(self, entry_id: UUID) -> bool:
        """Remove an entry."""
        return self.repository.delete_entry(entry_id)

    def entry_nutrition(self, entry: DayEntry) -> tuple[NutritionProfile, list[str]]:
        """Return an entry's nutrition and any reasons it was zero-filled."""
        if entry.food_id is not None:
            food = self.food_lookup.get(entry.food_id)
            basis = food.profile if food else None
            label = f"food {entry.food_id}"
        else:
            version = self.recipe_lookup.get_version(entry.recipe_id, entry.version_id)
            basis = version.per_serving if version else None
            label = f"recipe {entry.recipe_id} version {entry.version_id}"
        if basis is None:
            return NutritionProfile.zero(), [f"Unknown {label} counted as zero"]
        try:
            grams = to_grams(entry.amount, entry.unit, assume_water_density=True)
        except ConversionError as exc:
            _logger.warning("Zero-filled day entry %s: %s", entry.id, exc)
            return NutritionProfile.zero(), [f"Skipped entry {entry.id}: {exc}"]
        return basis.scaled(grams / 100.0), []

    def day_totals(self, day: date) -> DaySummary:
        """Sum every entry logged on a day."""
        entries = self.repository.list_entries(day)
        total = NutritionProfile.zero()
        warnings: list[str] = []
        for entry in entries:
            nutrition, entry_warnings = self.entry_nutrition(entry)
            total = total + nutrition
            warnings.extend(entry_warnings)
        return DaySummary(day=day, total=total, entries=entries, warnings=warnings)
