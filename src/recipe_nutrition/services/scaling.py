"""Recipe scaling by servings or by total weight."""

import logging
import math
from dataclasses import dataclass, field

from recipe_nutrition.domain.errors import (
    ConversionError,
    EmptyOrZeroWeightRecipeError,
    InvalidTargetValueError,
)
from recipe_nutrition.domain.nutrition import NutritionProfile, NutritionTotals
from recipe_nutrition.domain.recipes import RecipeItem, RecipeVersion
from recipe_nutrition.domain.units import Unit
from recipe_nutrition.services.nutrition import NutritionAggregator
from recipe_nutrition.services.units import to_grams

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ByServings:
    """Scale to a target number of servings."""

    target_servings: float


@dataclass(frozen=True)
class ByTotalWeight:
    """Scale to a target total weight."""

    target_weight: float
    unit: Unit = Unit.G


ScaleMode = ByServings | ByTotalWeight


@dataclass(frozen=True)
class ScaledItem:
    """An ingredient line with its scaled amount and nutrition."""

    item: RecipeItem
    scaled_amount: float
    nutrition: NutritionProfile

    def as_dict(self) -> dict[str, object]:
        return {
            **self.item.as_dict(),
            "scaled_amount": self.scaled_amount,
            "nutrition": self.nutrition.as_dict(),
        }


@dataclass(frozen=True)
class ScaledRecipe:
    """Result of scaling a recipe version."""

    version: RecipeVersion
    scale_factor: float
    servings: float
    items: tuple[ScaledItem, ...]
    nutrition: NutritionTotals
    shortcut_total: NutritionProfile
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def as_dict(self) -> dict[str, object]:
        return {
            "version_id": str(self.version.id),
            "scale_factor": self.scale_factor,
            "servings": self.servings,
            "items": [item.as_dict() for item in self.items],
            "nutrition": self.nutrition.as_dict(),
            "warnings": list(self.warnings),
        }


@dataclass
class ScalingEngine:
    """Computes scale factors and scaled ingredient lists."""

    aggregator: NutritionAggregator

    def scale(self, version: RecipeVersion, mode: ScaleMode) -> ScaledRecipe:
        """Scale a version and recompute nutrition from the scaled amounts."""
        warnings: list[str] = []
        factor = self.scale_factor(version, mode, warnings)

        scaled_items: list[ScaledItem] = []
        total = NutritionProfile.zero()
        for item in version.items:
            scaled = item.with_amount(item.amount * factor)
            nutrition, item_warnings = self.aggregator.item_contribution(
                scaled, recipe_id=version.recipe_id
            )
            warnings.extend(item_warnings)
            total = total + nutrition
            scaled_items.append(
                ScaledItem(item=item, scaled_amount=scaled.amount, nutrition=nutrition)
            )

        servings = version.servings * factor
        original = self.aggregator.aggregate(version)
        return ScaledRecipe(
            version=version,
            scale_factor=factor,
            servings=servings,
            items=tuple(scaled_items),
            nutrition=NutritionTotals(
                total=total,
                per_serving=total.divided(servings),
                warnings=tuple(warnings),
            ),
            shortcut_total=original.total.scaled(factor),
            warnings=tuple(warnings),
        )

    def scale_factor(
        self,
        version: RecipeVersion,
        mode: ScaleMode,
        warnings: list[str] | None = None,
    ) -> float:
        """Return the multiplier that takes the version to the target."""
        if isinstance(mode, ByServings):
            _require_positive(mode.target_servings, "target servings")
            return mode.target_servings / version.servings

        _require_positive(mode.target_weight, "target weight")
        original_grams = self.total_weight_grams(version, warnings)
        if original_grams <= 0:
            raise EmptyOrZeroWeightRecipeError(
                f"Recipe version {version.id} has no measurable weight"
            )
        # Failing to convert the target is fatal; it is not a recipe line.
        target_grams = to_grams(
            mode.target_weight, mode.unit, assume_water_density=True
        )
        return target_grams / original_grams

    def total_weight_grams(
        self, version: RecipeVersion, warnings: list[str] | None = None
    ) -> float:
        """Sum every line of a version in grams.

        Volume lines are weighed as water. Lines whose unit cannot be
        weighed count their raw amount as grams.
        """
        total = 0.0
        for item in version.items:
            try:
                total += to_grams(item.amount, item.unit, assume_water_density=True)
            except ConversionError as exc:
                message = (
                    f"Counted {item.amount} {item.unit.value} as grams: {exc}"
                )
                _logger.warning("Weight fallback for line: %s", message)
                if warnings is not None:
                    warnings.append(message)
                total += item.amount
        return total


def _require_positive(value: float, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise InvalidTargetValueError(f"The {label} must be a number")
    if not math.isfinite(value) or value <= 0:
        raise InvalidTargetValueError(f"The {label} must be positive, got {value}")
