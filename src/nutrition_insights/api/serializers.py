"""Helpers turning domain objects into JSON-ready dicts."""

from nutrition_insights.domain.aggregates import DailyAggregate, RangeAggregate
from nutrition_insights.domain.entries import FoodEntry, WaterEntry
from nutrition_insights.domain.profiles import Goals, Profile
from nutrition_insights.domain.uploads import UploadOutcome
from nutrition_insights.services.attainment import CalendarDay


def range_aggregate(result: RangeAggregate) -> dict[str, object]:
    return {
        "start": result.start.isoformat(),
        "end": result.end.isoformat(),
        "days_in_range": result.days_in_range,
        "entry_count": result.entry_count,
        "totals": result.totals.as_dict(),
        "averages": result.averages.as_dict(),
    }


def daily_aggregate(result: DailyAggregate) -> dict[str, object]:
    return {
        "date": result.day.isoformat(),
        "entry_count": result.entry_count,
        "totals": result.totals.as_dict(),
    }


def goals(value: Goals) -> dict[str, float | None]:
    return value.as_dict()


def profile(value: Profile) -> dict[str, object]:
    return {
        "id": str(value.id),
        "username": value.username,
        "height": value.height,
        "weight": value.weight,
        "height_unit": value.height_unit,
        "weight_unit": value.weight_unit,
        "goals": value.goals.resolved().as_dict(),
    }


def food_entry(entry: FoodEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "created_at": entry.created_at.isoformat(),
        "name": entry.name,
        "calories": entry.calories,
        "protein": entry.protein,
        "carbs": entry.carbs,
        "fats": entry.fats,
        "quantity": entry.quantity,
        "image_url": entry.image_url,
        "ingredients": list(entry.ingredients),
    }


def water_entry(entry: WaterEntry) -> dict[str, object]:
    return {
        "id": str(entry.id),
        "created_at": entry.created_at.isoformat(),
        "amount_ml": entry.amount_ml,
    }


def calendar_day(cell: CalendarDay) -> dict[str, object]:
    return {
        "date": cell.day.isoformat(),
        "in_month": cell.in_month,
        "status": cell.status.value,
    }


def upload_outcome(outcome: UploadOutcome) -> dict[str, object]:
    return {
        "state": outcome.state.value,
        "image_url": outcome.image_url,
        "estimate": outcome.estimate.model_dump() if outcome.estimate else None,
        "reason": outcome.reason,
    }
