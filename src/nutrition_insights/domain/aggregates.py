"""Derived aggregate models for food and water totals."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Window:
    """Half-open time interval ``[start, end)``."""

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant < self.end


@dataclass(frozen=True)
class Totals:
    """Summed macros and water intake."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    water: float = 0.0

    def __add__(self, other: "Totals") -> "Totals":
        return Totals(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fats=self.fats + other.fats,
            water=self.water + other.water,
        )

    def divided_by(self, days: int) -> "Totals":
        return Totals(
            calories=self.calories / days,
            protein=self.protein / days,
            carbs=self.carbs / days,
            fats=self.fats / days,
            water=self.water / days,
        )

    def as_dict(self) -> dict[str, float]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fats": self.fats,
            "water": self.water,
        }


@dataclass(frozen=True)
class DailyAggregate:
    """Totals for a single calendar day."""

    day: date
    totals: Totals
    entry_count: int


@dataclass(frozen=True)
class RangeAggregate:
    """Totals and per-day averages over a window."""

    start: datetime
    end: datetime
    totals: Totals
    averages: Totals
    days_in_range: int
    entry_count: int
