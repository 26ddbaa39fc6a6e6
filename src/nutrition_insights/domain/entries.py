"""Domain models for food and water entries."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class FoodEntry:
    """A logged meal with its macro estimate."""

    id: UUID
    user_id: UUID
    created_at: datetime
    name: str
    calories: float | str | None
    protein: float | str | None
    carbs: float | str | None
    fats: float | str | None
    quantity: int = 1
    image_url: str | None = None
    ingredients: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class WaterEntry:
    """A logged water portion."""

    id: UUID
    user_id: UUID
    created_at: datetime
    amount_ml: float | str | None
