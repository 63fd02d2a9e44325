"""Error taxonomy for the nutrition engine."""

from uuid import UUID


class EngineError(Exception):
    """Base class for all engine errors."""


class ConversionError(EngineError):
    """Raised when a quantity cannot be converted."""


class UnknownUnitError(ConversionError):
    """Raised for unit strings the engine does not know."""

    def __init__(self, unit: str) -> None:
        super().__init__(f"Unknown unit: {unit!r}")
        self.unit = unit


class IncompatibleCategoriesError(ConversionError):
    """Raised when converting between units of different categories."""

    def __init__(self, from_unit: str, to_unit: str) -> None:
        super().__init__(f"Cannot convert {from_unit} to {to_unit}")
        self.from_unit = from_unit
        self.to_unit = to_unit


class AggregationError(EngineError):
    """Raised when nutrition aggregation cannot complete."""


class CyclicReferenceError(AggregationError):
    """Raised when a recipe references itself directly or transitively."""

    def __init__(self, recipe_id: UUID) -> None:
        super().__init__(f"Recipe {recipe_id} references itself")
        self.recipe_id = recipe_id


class MaxDepthExceededError(AggregationError):
    """Raised when nested recipes go deeper than the configured limit."""

    def __init__(self, recipe_id: UUID, max_depth: int) -> None:
        super().__init__(f"Recipe {recipe_id} nests deeper than {max_depth} levels")
        self.recipe_id = recipe_id
        self.max_depth = max_depth


class MissingReferenceError(AggregationError):
    """Raised for unknown foods or recipes under the strict missing-data policy."""

    def __init__(self, kind: str, ref_id: UUID) -> None:
        super().__init__(f"Unknown {kind} {ref_id}")
        self.kind = kind
        self.ref_id = ref_id


class ScalingError(EngineError):
    """Raised when a recipe cannot be scaled."""


class EmptyOrZeroWeightRecipeError(ScalingError):
    """Raised when scaling by weight a recipe whose total weight is zero."""


class InvalidTargetValueError(ScalingError):
    """Raised when a scaling target is not a positive finite number."""


class RecipeValidationError(EngineError):
    """Raised when recipe data breaks a model invariant."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class RecipeNotFoundError(EngineError):
    """Raised when a recipe id does not resolve."""

    def __init__(self, recipe_id: UUID) -> None:
        super().__init__(f"Recipe with ID {recipe_id} not found")
        self.recipe_id = recipe_id


class VersionNotFoundError(EngineError):
    """Raised when a version id does not belong to the recipe."""

    def __init__(self, recipe_id: UUID, version_id: UUID) -> None:
        super().__init__(f"Version {version_id} not found for recipe {recipe_id}")
        self.recipe_id = recipe_id
        self.version_id = version_id
