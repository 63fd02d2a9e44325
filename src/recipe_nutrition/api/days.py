"""Day tracking endpoints."""

from __future__ import annotations

from datetime import date  # noqa: TC003
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Request, status

from recipe_nutrition.api.models import DayEntryRequest  # noqa: TC001

if TYPE_CHECKING:
    from recipe_nutrition.containers import AppContainer

router = APIRouter(prefix="/days", tags=["days"])


@router.get("/{day}")
async def get_day(day: date, request: Request) -> dict[str, object]:
    """Return a day's entries and totals."""
    container: AppContainer = request.app.state.container
    summary = container.day_tracking_service.day_totals(day)
    return {
        "day": summary.day.isoformat(),
        "total": summary.total.as_dict(),
        "entries": [entry.as_dict() for entry in summary.entries],
        "warnings": summary.warnings,
    }


@router.post("/{day}/entries")
async def add_entry(
    day: date, payload: DayEntryRequest, request: Request
) -> dict[str, object]:
    """Log a food or a recipe portion, pinning recipes to their current version."""
    container: AppContainer = request.app.state.container
    service = container.day_tracking_service
    if payload.recipe_id is not None:
        entry = service.log_recipe(
            day, payload.recipe_id, payload.amount, payload.unit, payload.meal_type
        )
    else:
        entry = service.log_food(
            day, payload.food_id, payload.amount, payload.unit, payload.meal_type
        )
    nutrition, warnings = service.entry_nutrition(entry)
    return {
        "entry": entry.as_dict(),
        "nutrition": nutrition.as_dict(),
        "warnings": warnings,
    }


@router.delete("/entries/{entry_id}")
async def delete_entry(entry_id: UUID, request: Request) -> dict[str, str]:
    """Remove a logged entry."""
    container: AppContainer = request.app.state.container
    if not container.day_tracking_service.remove_entry(entry_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "ok"}
