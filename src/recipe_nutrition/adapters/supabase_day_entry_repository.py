"""Supabase repository for day entries."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from recipe_nutrition.domain.recipes import DayEntry
from recipe_nutrition.domain.units import Unit
from recipe_nutrition.services.days import DayEntryRepository


@dataclass
class SupabaseDayEntryRepository(DayEntryRepository):
    """Supabase implementation for day entries."""

    client: Client

    def add_entry(self, entry: DayEntry) -> None:
        """Insert an entry row."""
        response = (
            self.client.table("day_entries")
            .insert(
                {
                    "id": str(entry.id),
                    "day": entry.day.isoformat(),
                    "amount": entry.amount,
                    "unit": entry.unit.value,
                    "meal_type": entry.meal_type,
                    "food_id": str(entry.food_id) if entry.food_id else None,
                    "recipe_id": str(entry.recipe_id) if entry.recipe_id else None,
                    "recipe_version_id": (
                        str(entry.version_id) if entry.version_id else None
                    ),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create day entry")

    def list_entries(self, day: date) -> list[DayEntry]:
        """Return the entries logged on a day."""
        response = (
            self.client.table("day_entries")
            .select("*")
            .eq("day", day.isoformat())
            .execute()
        )
        return [_parse_entry(row) for row in response.data or []]

    def delete_entry(self, entry_id: UUID) -> bool:
        """Delete an entry, returning whether a row was removed."""
        response = (
            self.client.table("day_entries")
            .delete()
            .eq("id", str(entry_id))
            .execute()
        )
        return bool(response.data)


def _parse_entry(row: dict[str, object]) -> DayEntry:
    return DayEntry(
        id=UUID(row["id"]),
        day=date.fromisoformat(row["day"]),
        amount=float(row["amount"]),
        unit=Unit.parse(row["unit"]),
        meal_type=row.get("meal_type") or "snack",
        recipe_id=UUID(row["recipe_id"]) if row.get("recipe_id") else None,
        version_id=(
            UUID(row["recipe_version_id"]) if row.get("recipe_version_id") else None
        ),
        food_id=UUID(row["food_id"]) if row.get("food_id") else None,
    )
