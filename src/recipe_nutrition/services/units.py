"""Unit conversion within mass, volume and temperature."""

from recipe_nutrition.domain.errors import IncompatibleCategoriesError
from recipe_nutrition.domain.units import Unit, UnitCategory

# Factors to the category base unit: grams for mass, millilitres for volume.
_FACTORS: dict[Unit, float] = {
    Unit.G: 1.0,
    Unit.KG: 1000.0,
    Unit.MG: 0.001,
    Unit.OZ: 28.35,
    Unit.LB: 453.592,
    Unit.ML: 1.0,
    Unit.L: 1000.0,
    Unit.CUP: 240.0,
    Unit.TBSP: 15.0,
    Unit.TSP: 5.0,
}

WATER_DENSITY_G_PER_ML = 1.0

_ABSOLUTE_ZERO_OFFSET = 273.15


def convert(amount: float, from_unit: Unit | str, to_unit: Unit | str) -> float:
    """Convert ``amount`` between two units of the same category.

    Raises ``UnknownUnitError`` for unit strings that do not parse and
    ``IncompatibleCategoriesError`` when the categories differ.
    """
    source = Unit.parse(from_unit)
    target = Unit.parse(to_unit)
    if source is target:
        return amount
    if source.category is not target.category:
        raise IncompatibleCategoriesError(source.value, target.value)
    if source.category is UnitCategory.TEMPERATURE:
        return convert_temperature(amount, source, target)
    return amount * _FACTORS[source] / _FACTORS[target]


def convert_temperature(amount: float, from_unit: Unit, to_unit: Unit) -> float:
    """Convert between Celsius, Fahrenheit and Kelvin via Celsius."""
    for unit in (from_unit, to_unit):
        if unit.category is not UnitCategory.TEMPERATURE:
            raise IncompatibleCategoriesError(from_unit.value, to_unit.value)
    if from_unit is Unit.FAHRENHEIT:
        celsius = (amount - 32) * 5 / 9
    elif from_unit is Unit.KELVIN:
        celsius = amount - _ABSOLUTE_ZERO_OFFSET
    else:
        celsius = amount

    if to_unit is Unit.FAHRENHEIT:
        return celsius * 9 / 5 + 32
    if to_unit is Unit.KELVIN:
        return celsius + _ABSOLUTE_ZERO_OFFSET
    return celsius


def to_grams(
    amount: float, unit: Unit | str, *, assume_water_density: bool = False
) -> float:
    """Convert an amount to grams.

    Volume units only convert when ``assume_water_density`` is set, in which
    case one millilitre weighs one gram (so a cup is 240 g). Real
    per-ingredient densities are not modelled.
    """
    source = Unit.parse(unit)
    if source.category is UnitCategory.VOLUME and assume_water_density:
        return convert(amount, source, Unit.ML) * WATER_DENSITY_G_PER_ML
    return convert(amount, source, Unit.G)
