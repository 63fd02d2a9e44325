"""Measurement units and their categories."""

from enum import Enum

from recipe_nutrition.domain.errors import UnknownUnitError


class UnitCategory(str, Enum):
    """Measurement domain a unit belongs to."""

    MASS = "mass"
    VOLUME = "volume"
    TEMPERATURE = "temperature"


class Unit(str, Enum):
    """Supported units, each tagged with a category."""

    G = "g"
    KG = "kg"
    MG = "mg"
    OZ = "oz"
    LB = "lb"
    ML = "ml"
    L = "l"
    CUP = "cup"
    TBSP = "tbsp"
    TSP = "tsp"
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"
    KELVIN = "kelvin"

    @property
    def category(self) -> UnitCategory:
        """Return the measurement category for the unit."""
        return _CATEGORIES[self]

    @classmethod
    def parse(cls, raw: "str | Unit") -> "Unit":
        """Parse a unit string, accepting common aliases."""
        if isinstance(raw, Unit):
            return raw
        key = raw.strip()
        if key in _CASE_SENSITIVE_ALIASES:
            return _CASE_SENSITIVE_ALIASES[key]
        unit = _ALIASES.get(key.lower())
        if unit is None:
            raise UnknownUnitError(raw)
        return unit


_CATEGORIES: dict[Unit, UnitCategory] = {
    Unit.G: UnitCategory.MASS,
    Unit.KG: UnitCategory.MASS,
    Unit.MG: UnitCategory.MASS,
    Unit.OZ: UnitCategory.MASS,
    Unit.LB: UnitCategory.MASS,
    Unit.ML: UnitCategory.VOLUME,
    Unit.L: UnitCategory.VOLUME,
    Unit.CUP: UnitCategory.VOLUME,
    Unit.TBSP: UnitCategory.VOLUME,
    Unit.TSP: UnitCategory.VOLUME,
    Unit.CELSIUS: UnitCategory.TEMPERATURE,
    Unit.FAHRENHEIT: UnitCategory.TEMPERATURE,
    Unit.KELVIN: UnitCategory.TEMPERATURE,
}

# "K" is kelvin while "k" is not a unit at all.
_CASE_SENSITIVE_ALIASES: dict[str, Unit] = {
    "K": Unit.KELVIN,
    "°C": Unit.CELSIUS,
    "°F": Unit.FAHRENHEIT,
}

_ALIASES: dict[str, Unit] = {
    **{unit.value: unit for unit in Unit},
    "gram": Unit.G,
    "grams": Unit.G,
    "kilogram": Unit.KG,
    "kilograms": Unit.KG,
    "milligram": Unit.MG,
    "milligrams": Unit.MG,
    "ounce": Unit.OZ,
    "ounces": Unit.OZ,
    "pound": Unit.LB,
    "pounds": Unit.LB,
    "lbs": Unit.LB,
    "milliliter": Unit.ML,
    "milliliters": Unit.ML,
    "millilitre": Unit.ML,
    "liter": Unit.L,
    "liters": Unit.L,
    "litre": Unit.L,
    "cups": Unit.CUP,
    "tablespoon": Unit.TBSP,
    "tablespoons": Unit.TBSP,
    "teaspoon": Unit.TSP,
    "teaspoons": Unit.TSP,
}
