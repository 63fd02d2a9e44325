"""Nutrition domain models."""

from dataclasses import asdict, dataclass, field
from uuid import UUID


@dataclass(frozen=True)
class NutritionProfile:
    """The seven tracked nutrients.

    A food's profile is expressed per 100 g; aggregated values use the same
    shape with absolute amounts.
    """

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0
    sodium: float = 0.0

    @classmethod
    def zero(cls) -> "NutritionProfile":
        """Return a profile with every nutrient at zero."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "NutritionProfile":
        """Build a profile from a mapping, treating absent keys as zero."""
        return cls(
            calories=_as_float(data.get("calories")),
            protein=_as_float(data.get("protein")),
            carbs=_as_float(data.get("carbs")),
            fat=_as_float(data.get("fat")),
            fiber=_as_float(data.get("fiber")),
            sugar=_as_float(data.get("sugar")),
            sodium=_as_float(data.get("sodium")),
        )

    def __add__(self, other: "NutritionProfile") -> "NutritionProfile":
        return NutritionProfile(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
            fiber=self.fiber + other.fiber,
            sugar=self.sugar + other.sugar,
            sodium=self.sodium + other.sodium,
        )

    def scaled(self, factor: float) -> "NutritionProfile":
        """Return every nutrient multiplied by ``factor``."""
        return NutritionProfile(
            calories=self.calories * factor,
            protein=self.protein * factor,
            carbs=self.carbs * factor,
            fat=self.fat * factor,
            fiber=self.fiber * factor,
            sugar=self.sugar * factor,
            sodium=self.sodium * factor,
        )

    def divided(self, divisor: float) -> "NutritionProfile":
        """Return every nutrient divided by ``divisor``."""
        return NutritionProfile(
            calories=self.calories / divisor,
            protein=self.protein / divisor,
            carbs=self.carbs / divisor,
            fat=self.fat / divisor,
            fiber=self.fiber / divisor,
            sugar=self.sugar / divisor,
            sodium=self.sodium / divisor,
        )

    def is_close(self, other: "NutritionProfile", rel_tol: float = 1e-9) -> bool:
        """Compare two profiles field by field within a relative tolerance."""
        pairs = zip(asdict(self).values(), asdict(other).values(), strict=True)
        return all(
            abs(left - right) <= rel_tol * max(abs(left), abs(right), 1.0)
            for left, right in pairs
        )

    def as_dict(self) -> dict[str, float]:
        """Return the profile as a plain dict."""
        return asdict(self)


@dataclass(frozen=True)
class NutritionTotals:
    """Aggregated nutrition for a recipe version."""

    total: NutritionProfile
    per_serving: NutritionProfile
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_partial(self) -> bool:
        """Return True when some lines were zero-filled."""
        return bool(self.warnings)

    def as_dict(self) -> dict[str, object]:
        """Return the totals as plain data."""
        return {
            "total": self.total.as_dict(),
            "per_serving": self.per_serving.as_dict(),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class Food:
    """A leaf ingredient with a per-100g nutrition profile."""

    id: UUID
    name: str
    profile: NutritionProfile


def _as_float(value: object) -> float:
    if isinstance(value, int | float):
        return float(value)
    return 0.0
