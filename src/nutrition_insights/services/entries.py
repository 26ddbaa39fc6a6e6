"""Food and water entry logging."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID

from nutrition_insights.domain.aggregates import Window
from nutrition_insights.domain.entries import FoodEntry, WaterEntry
from nutrition_insights.domain.vision import MealEstimate
from nutrition_insights.services.cache import AggregateCache

WATER_PORTIONS_ML = {
    "small": 200,
    "medium": 350,
    "large": 500,
}

_logger = logging.getLogger(__name__)


class EntryRepository(Protocol):
    """Persistence interface for food and water entries."""

    def list_food_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[FoodEntry]:
        """Return food entries created within ``[start, end)``."""

    def list_water_entries(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[WaterEntry]:
        """Return water entries created within ``[start, end)``."""

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
        """Create a food entry and return it."""

    def delete_food_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete a food entry owned by the user."""

    def insert_water_entry(self, user_id: UUID, amount_ml: float) -> WaterEntry:
        """Create a water entry and return it."""

    def delete_water_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete a water entry owned by the user."""


@dataclass
class EntryService:
    """Service for creating and deleting entries."""

    repository: EntryRepository
    cache: AggregateCache

    def list_food_entries(self, user_id: UUID, window: Window) -> list[FoodEntry]:
        """Return the user's meals within a window."""
        return self.repository.list_food_entries(user_id, window.start, window.end)

    def log_food_entry(
        self,
        user_id: UUID,
        estimate: MealEstimate,
        image_url: str | None = None,
        quantity: int = 1,
    ) -> FoodEntry:
        """Persist a confirmed meal estimate."""
        if quantity < 1:
            raise ValueError("Quantity must be a positive integer")
        entry = self.repository.insert_food_entry(
            user_id=user_id,
            name=estimate.name,
            calories=estimate.calories,
            protein=estimate.protein,
            carbs=estimate.carbs,
            fats=estimate.fats,
            quantity=quantity,
            image_url=image_url,
            ingredients=list(estimate.ingredients),
        )
        self.cache.invalidate_user(user_id)
        _logger.info("Food entry logged: user_id=%s entry_id=%s", user_id, entry.id)
        return entry

    def delete_food_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete one of the user's food entries."""
        self.repository.delete_food_entry(user_id, entry_id)
        self.cache.invalidate_user(user_id)

    def log_water(self, user_id: UUID, amount_ml: float) -> WaterEntry:
        """Persist a custom water amount."""
        if amount_ml <= 0:
            raise ValueError("Water amount must be positive")
        entry = self.repository.insert_water_entry(user_id, amount_ml)
        self.cache.invalidate_user(user_id)
        return entry

    def log_water_portion(self, user_id: UUID, portion: str) -> WaterEntry:
        """Persist one of the preset water portions."""
        amount = WATER_PORTIONS_ML.get(portion.lower())
        if amount is None:
            raise ValueError(f"Unknown water portion: {portion}")
        return self.log_water(user_id, amount)

    def delete_water_entry(self, user_id: UUID, entry_id: UUID) -> None:
        """Delete one of the user's water entries."""
        self.repository.delete_water_entry(user_id, entry_id)
        self.cache.invalidate_user(user_id)
