"""Profile and goal management."""

import asyncio
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar
from uuid import UUID

from nutrition_insights.domain.errors import ProfileNotFound
from nutrition_insights.domain.profiles import Goals, Profile, baseline_profile_fields
from nutrition_insights.services.cache import AggregateCache

NUMERIC_PROFILE_FIELDS = frozenset(
    {
        "height",
        "weight",
        "daily_calories",
        "daily_protein",
        "daily_carbs",
        "daily_fats",
        "daily_water",
    }
)
TEXT_PROFILE_FIELDS = frozenset({"username", "height_unit", "weight_unit"})

_T = TypeVar("_T")
_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for profiles."""

    def get_profile(self, user_id: UUID) -> Profile | None:
        """Return the user's profile, if present."""

    def upsert_profile(self, user_id: UUID, fields: dict[str, object]) -> Profile:
        """Create or overwrite the user's profile and return it."""

    def update_profile(self, user_id: UUID, fields: dict[str, object]) -> Profile:
        """Update an existing profile; raise ProfileNotFound when absent."""


@dataclass
class ProfileService:
    """Service for reading and updating profiles and goals."""

    repository: ProfileRepository
    cache: AggregateCache | None = None
    retry_attempts: int = 3
    retry_delay_seconds: float = 1.0

    async def get_profile(self, user_id: UUID) -> Profile:
        """Return the profile, creating it with baseline goals on first access."""
        profile = await self._call_with_retry(
            lambda: self.repository.get_profile(user_id), action="get_profile"
        )
        if profile is not None:
            return profile
        _logger.info("Creating baseline profile: user_id=%s", user_id)
        return self.repository.upsert_profile(user_id, baseline_profile_fields())

    async def get_goals(self, user_id: UUID) -> Goals:
        """Return the user's goals with the baseline filling missing fields."""
        profile = await self.get_profile(user_id)
        return profile.goals.resolved()

    def update_profile(self, user_id: UUID, fields: dict[str, object]) -> Profile:
        """Apply onboarding or settings changes."""
        cleaned = normalize_profile_fields(fields)
        try:
            profile = self.repository.update_profile(user_id, cleaned)
        except ProfileNotFound:
            profile = self.repository.upsert_profile(
                user_id, {**baseline_profile_fields(), **cleaned}
            )
        if self.cache is not None:
            self.cache.invalidate_user(user_id)
        return profile

    async def _call_with_retry(self, func: Callable[[], _T], *, action: str) -> _T:
        """Call an idempotent read with a fixed backoff between attempts."""
        attempt = 0
        while True:
            try:
                return func()
            except Exception as exc:
                attempt += 1
                _logger.warning(
                    "Profile %s failed (attempt %s/%s): %s",
                    action,
                    attempt,
                    self.retry_attempts,
                    exc,
                )
                if attempt >= self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def normalize_profile_fields(fields: dict[str, object]) -> dict[str, object]:
    """Coerce form values into profile column values.

    Numeric fields accept numbers or numeric strings; an empty string clears
    the field.
    """
    cleaned: dict[str, object] = {}
    for key, value in fields.items():
        if key in NUMERIC_PROFILE_FIELDS:
            cleaned[key] = _parse_number(key, value)
        elif key in TEXT_PROFILE_FIELDS:
            cleaned[key] = value
        else:
            raise ValueError(f"Unknown profile field: {key}")
    return cleaned


def _parse_number(key: str, value: object) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid number for {key}: {value!r}")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid number for {key}: {value!r}") from exc
    if not math.isfinite(number) or number < 0:
        raise ValueError(f"Invalid number for {key}: {value!r}")
    return number
