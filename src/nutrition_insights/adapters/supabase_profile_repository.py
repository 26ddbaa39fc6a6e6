"""Supabase repository for user profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from nutrition_insights.domain.errors import ProfileNotFound
from nutrition_insights.domain.profiles import (
    DEFAULT_HEIGHT_UNIT,
    DEFAULT_WEIGHT_UNIT,
    Profile,
)
from nutrition_insights.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for profile persistence."""

    client: Client

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the profile row for a user, if present."""
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def upsert_profile(self, user_id: UUID, fields: dict[str, object]) -> Profile:
        """Create or overwrite the profile row."""
        response = (
            self.client.table("profiles")
            .upsert(
                {
                    **fields,
                    "id": str(user_id),
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="id",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to upsert profile")
        return _parse_row(response.data[0])

    def update_profile(self, user_id: UUID, fields: dict[str, object]) -> Profile:
        """Update the profile row; raise ProfileNotFound when no row matched."""
        response = (
            self.client.table("profiles")
            .update({**fields, "updated_at": datetime.now(tz=UTC).isoformat()})
            .eq("id", str(user_id))
            .execute()
        )
        if not response.data:
            raise ProfileNotFound(str(user_id))
        return _parse_row(response.data[0])


def _optional_float(value: object) -> float | None:
    if value is None or value == "":
        return None
    return float(value)  # type: ignore[arg-type]


def _parse_row(row: dict[str, object]) -> Profile:
    return Profile(
        id=UUID(str(row["id"])),
        username=row.get("username"),  # type: ignore[arg-type]
        daily_calories=_optional_float(row.get("daily_calories")),
        daily_protein=_optional_float(row.get("daily_protein")),
        daily_carbs=_optional_float(row.get("daily_carbs")),
        daily_fats=_optional_float(row.get("daily_fats")),
        daily_water=_optional_float(row.get("daily_water")),
        height=_optional_float(row.get("height")),
        weight=_optional_float(row.get("weight")),
        height_unit=str(row.get("height_unit") or DEFAULT_HEIGHT_UNIT),
        weight_unit=str(row.get("weight_unit") or DEFAULT_WEIGHT_UNIT),
    )
