"""Supabase repository for food and water entries."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutrition_insights.domain.entries import FoodEntry, WaterEntry
from nutrition_insights.services.entries import EntryRepository

_FOOD_COLUMNS = (
    "id, user_id, created_at, name, calories, protein, carbs, fats, "
    "quantity, image_url, ingredients"
)
_WATER_COLUMNS = "id, user_id, created_at, amount_ml"


@dataclass
class SupabaseEntryRepository(EntryRepository):
    """Supabase implementation for entry persistence."""

    client: Client

    def list_food_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodEntry]:
        """Return food entries in the time range."""
        response = (
            self.client.table("food_entries")
            .select(_FOOD_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("created_at", start.astimezone(UTC).isoformat())
            .lt("created_at", end.astimezone(UTC).isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_food_row(row) for row in response.data or []]

    def list_water_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[WaterEntry]:
        """Return water entries in the time range."""
        response = (
            self.client.table("water_entries")
            .select(_WATER_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("created_at", start.astimezone(UTC).isoformat())
            .lt("created_at", end.astimezone(UTC).isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_water_row(row) for row in response.data or []]

    def insert_food_entry(  # noqa: PLR0913
        self,
        user_id: UUID,
        name: str,
        calories: float,
        protein: float,
        carbs: float,
        fats: float,
        quantity: int,
        image_url: str | None,
        ingredients: list[str],
    ) -> FoodEntry:
        """Insert a food entry row and return it."""
        response = (
            self.client.table("food_entries")
            .insert(
                {
                    "user_id": str(user_id),
                    "name": name,
                    "calories": calories,
                    "protein": protein,
                    "carbs": carbs,
                    "fats": fats,
                    "quantity": quantity,
                    "image_url": image_url,
                    "ingredients": ingredients,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food entry")
        return _parse_food_row(response.data[0])

    def delete_food_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete a food entry row owned by the user."""
        self.client.table("food_entries").delete().eq("id", str(entry_id)).eq(
            "user_id", str(user_id)
        ).execute()

    def insert_water_entry(self, user_id: UUID, amount_ml: float) -> WaterEntry:
        """Insert a water entry row and return it."""
        response = (
            self.client.table("water_entries")
            .insert({"user_id": str(user_id), "amount_ml": amount_ml})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create water entry")
        return _parse_water_row(response.data[0])

    def delete_water_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete a water entry row owned by the user."""
        self.client.table("water_entries").delete().eq("id", str(entry_id)).eq(
            "user_id", str(user_id)
        ).execute()


def _parse_timestamp(raw: object) -> datetime:
    if isinstance(raw, str) and raw:
        parsed = datetime.fromisoformat(raw)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed
    return datetime.min.replace(tzinfo=UTC)


def _parse_food_row(row: dict[str, object]) -> FoodEntry:
    ingredients = row.get("ingredients") or []
    if not isinstance(ingredients, list):
        ingredients = []
    quantity = row.get("quantity")
    return FoodEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        created_at=_parse_timestamp(row.get("created_at")),
        name=str(row.get("name") or ""),
        calories=row.get("calories"),  # type: ignore[arg-type]
        protein=row.get("protein"),  # type: ignore[arg-type]
        carbs=row.get("carbs"),  # type: ignore[arg-type]
        fats=row.get("fats"),  # type: ignore[arg-type]
        quantity=int(quantity) if isinstance(quantity, int | float) else 1,
        image_url=row.get("image_url"),  # type: ignore[arg-type]
        ingredients=tuple(str(item) for item in ingredients),
    )


def _parse_water_row(row: dict[str, object]) -> WaterEntry:
    return WaterEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        created_at=_parse_timestamp(row.get("created_at")),
        amount_ml=row.get("amount_ml"),  # type: ignore[arg-type]
    )
