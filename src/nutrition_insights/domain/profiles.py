"""Profile and nutrition goal models."""

from dataclasses import dataclass
from uuid import UUID

DEFAULT_DAILY_CALORIES = 2000.0
DEFAULT_DAILY_PROTEIN = 150.0
DEFAULT_DAILY_CARBS = 250.0
DEFAULT_DAILY_FATS = 70.0
DEFAULT_DAILY_WATER = 2000.0
DEFAULT_HEIGHT_UNIT = "cm"
DEFAULT_WEIGHT_UNIT = "kg"


@dataclass(frozen=True)
class Goals:
    """Daily nutrition targets.

    A ``None`` field means the user has not configured that goal.
    """

    calories: float | None
    protein: float | None
    carbs: float | None
    fats: float | None
    water: float | None

    def resolved(self) -> "Goals":
        """Return goals with the baseline substituted for missing fields."""
        return Goals(
            calories=_or_default(self.calories, DEFAULT_DAILY_CALORIES),
            protein=_or_default(self.protein, DEFAULT_DAILY_PROTEIN),
            carbs=_or_default(self.carbs, DEFAULT_DAILY_CARBS),
            fats=_or_default(self.fats, DEFAULT_DAILY_FATS),
            water=_or_default(self.water, DEFAULT_DAILY_WATER),
        )

    def as_dict(self) -> dict[str, float | None]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fats": self.fats,
            "water": self.water,
        }


BASELINE_GOALS = Goals(
    calories=DEFAULT_DAILY_CALORIES,
    protein=DEFAULT_DAILY_PROTEIN,
    carbs=DEFAULT_DAILY_CARBS,
    fats=DEFAULT_DAILY_FATS,
    water=DEFAULT_DAILY_WATER,
)


@dataclass(frozen=True)
class Profile:
    """User profile row holding body metrics and daily goals."""

    id: UUID
    username: str | None = None
    daily_calories: float | None = None
    daily_protein: float | None = None
    daily_carbs: float | None = None
    daily_fats: float | None = None
    daily_water: float | None = None
    height: float | None = None
    weight: float | None = None
    height_unit: str = DEFAULT_HEIGHT_UNIT
    weight_unit: str = DEFAULT_WEIGHT_UNIT

    @property
    def goals(self) -> Goals:
        return Goals(
            calories=self.daily_calories,
            protein=self.daily_protein,
            carbs=self.daily_carbs,
            fats=self.daily_fats,
            water=self.daily_water,
        )


def baseline_profile_fields() -> dict[str, object]:
    """Return the column values used when a profile is created lazily."""
    return {
        "daily_calories": DEFAULT_DAILY_CALORIES,
        "daily_protein": DEFAULT_DAILY_PROTEIN,
        "daily_carbs": DEFAULT_DAILY_CARBS,
        "daily_fats": DEFAULT_DAILY_FATS,
        "daily_water": DEFAULT_DAILY_WATER,
        "height_unit": DEFAULT_HEIGHT_UNIT,
        "weight_unit": DEFAULT_WEIGHT_UNIT,
    }


def _or_default(value: float | None, default: float) -> float:
    # An explicit 0 is a configured goal, not a missing one.
    return default if value is None else value
