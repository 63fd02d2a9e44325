"""Recursive nutrition aggregation over nested recipes."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol
from uuid import UUID

from recipe_nutrition.domain.errors import (
    ConversionError,
    CyclicReferenceError,
    MaxDepthExceededError,
    MissingReferenceError,
)
from recipe_nutrition.domain.nutrition import Food, NutritionProfile, NutritionTotals
from recipe_nutrition.domain.recipes import FoodRef, RecipeItem, RecipeVersion
from recipe_nutrition.services.units import to_grams

DEFAULT_MAX_DEPTH = 32

_logger = logging.getLogger(__name__)

_NestedMemo = dict[tuple[UUID, int], tuple[NutritionProfile | None, tuple[str, ...]]]


class FoodLookup(Protocol):
    """Read interface for the food catalog."""

    def get(self, food_id: UUID) -> Food | None:
        """Return a food by id, if present."""


class RecipeLookup(Protocol):
    """Read interface for recipe versions."""

    def get_current_version(self, recipe_id: UUID) -> RecipeVersion | None:
        """Return the current version of a recipe, if present."""

    def get_version(self, recipe_id: UUID, version_id: UUID) -> RecipeVersion | None:
        """Return a specific version of a recipe, if present."""


class MissingDataPolicy(str, Enum):
    """What to do when a line references an unknown food or recipe."""

    ZERO = "zero"
    ERROR = "error"


@dataclass
class NutritionAggregator:
    """Computes total and per-serving nutrition for recipe versions.

    Food lines contribute ``profile * grams / 100``. Nested recipe lines are
    resolved to the sub-recipe's current version, aggregated recursively and
    contribute ``per_serving * grams / 100``: one serving of the sub-recipe
    is its 100 g basis.

    Lines that cannot be converted to grams contribute zero and are
    reported in ``NutritionTotals.warnings``. Unknown references do the same
    unless ``on_missing`` is ``MissingDataPolicy.ERROR``. Reference cycles and
    nesting deeper than ``max_depth`` always raise.
    """

    food_lookup: FoodLookup
    recipe_lookup: RecipeLookup
    max_depth: int = DEFAULT_MAX_DEPTH
    on_missing: MissingDataPolicy = MissingDataPolicy.ZERO

    def aggregate(self, version: RecipeVersion) -> NutritionTotals:
        """Aggregate nutrition for a recipe version."""
        return self.aggregate_items(
            version.items, version.servings, recipe_id=version.recipe_id
        )

    def aggregate_items(
        self,
        items: Iterable[RecipeItem],
        servings: int,
        recipe_id: UUID | None = None,
    ) -> NutritionTotals:
        """Aggregate nutrition for a list of lines that may not be saved yet.

        ``recipe_id`` names the recipe the lines belong to, so lines that
        point back at it are rejected as cycles.
        """
        warnings: list[str] = []
        path = frozenset({recipe_id}) if recipe_id is not None else frozenset()
        total = self._sum_items(items, path, 0, warnings, {})
        return NutritionTotals(
            total=total,
            per_serving=total.divided(servings),
            warnings=tuple(warnings),
        )

    def snapshot_for(
        self, servings: int, items: Iterable[RecipeItem], recipe_id: UUID
    ) -> NutritionProfile:
        """Return the per-serving profile to cache on a new version."""
        totals = self.aggregate_items(items, servings, recipe_id=recipe_id)
        if totals.is_partial:
            _logger.warning(
                "Snapshot for recipe %s is partial: %s",
                recipe_id,
                "; ".join(totals.warnings),
            )
        return totals.per_serving

    def item_contribution(
        self, item: RecipeItem, recipe_id: UUID | None = None
    ) -> tuple[NutritionProfile, tuple[str, ...]]:
        """Return one line's absolute contribution and any warnings."""
        warnings: list[str] = []
        path = frozenset({recipe_id}) if recipe_id is not None else frozenset()
        contribution = self._contribution(item, path, 0, warnings, {})
        return contribution, tuple(warnings)

    def _sum_items(
        self,
        items: Iterable[RecipeItem],
        path: frozenset[UUID],
        depth: int,
        warnings: list[str],
        memo: _NestedMemo,
    ) -> NutritionProfile:
        total = NutritionProfile.zero()
        for item in items:
            total = total + self._contribution(item, path, depth, warnings, memo)
        return total

    def _contribution(
        self,
        item: RecipeItem,
        path: frozenset[UUID],
        depth: int,
        warnings: list[str],
        memo: _NestedMemo,
    ) -> NutritionProfile:
        if isinstance(item.ref, FoodRef):
            food = self.food_lookup.get(item.ref.food_id)
            if food is None:
                return self._missing("food", item.ref.food_id, warnings)
            basis = food.profile
        else:
            nested = self._nested_per_serving(
                item.ref.recipe_id, path, depth, warnings, memo
            )
            if nested is None:
                return NutritionProfile.zero()
            basis = nested

        try:
            grams = to_grams(item.amount, item.unit, assume_water_density=True)
        except ConversionError as exc:
            message = f"Skipped {item.amount} {item.unit.value}: {exc}"
            _logger.warning("Zero-filled ingredient line: %s", message)
            warnings.append(message)
            return NutritionProfile.zero()
        return basis.scaled(grams / 100.0)

    def _nested_per_serving(
        self,
        recipe_id: UUID,
        path: frozenset[UUID],
        depth: int,
        warnings: list[str],
        memo: _NestedMemo,
    ) -> NutritionProfile | None:
        """Return a sub-recipe's per-serving profile.

        Results are memoized per call by recipe and depth, so a sub-recipe
        shared by several lines is aggregated once. The path check runs
        before the memo lookup; any cycle below a memoized recipe has
        already raised while it was first computed.
        """
        if recipe_id in path:
            raise CyclicReferenceError(recipe_id)
        if depth + 1 > self.max_depth:
            raise MaxDepthExceededError(recipe_id, self.max_depth)
        key = (recipe_id, depth)
        if key in memo:
            per_serving, nested_warnings = memo[key]
            warnings.extend(nested_warnings)
            return per_serving

        version = self.recipe_lookup.get_current_version(recipe_id)
        collected: list[str] = []
        if version is None:
            self._missing("recipe", recipe_id, collected)
            per_serving = None
        else:
            total = self._sum_items(
                version.items, path | {recipe_id}, depth + 1, collected, memo
            )
            per_serving = total.divided(version.servings)
        memo[key] = (per_serving, tuple(collected))
        warnings.extend(collected)
        return per_serving

    def _missing(
        self, kind: str, ref_id: UUID, warnings: list[str]
    ) -> NutritionProfile:
        if self.on_missing is MissingDataPolicy.ERROR:
            raise MissingReferenceError(kind, ref_id)
        message = f"Unknown {kind} {ref_id} counted as zero"
        _logger.warning("Zero-filled ingredient line: %s", message)
        warnings.append(message)
        return NutritionProfile.zero()
