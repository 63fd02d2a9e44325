"""Tests for container wiring."""

from recipe_nutrition.containers import build_container
from recipe_nutrition.services.nutrition import MissingDataPolicy


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.recipe_service is not None
    assert container.scaling_engine.aggregator is container.aggregator
    assert container.aggregator.max_depth == settings.max_nesting_depth
    assert container.aggregator.on_missing is MissingDataPolicy.ZERO
