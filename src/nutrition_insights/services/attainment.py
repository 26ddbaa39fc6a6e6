"""Goal attainment classification and calendar grids."""

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from uuid import UUID

from nutrition_insights.domain.aggregates import DailyAggregate, Totals, Window
from nutrition_insights.domain.attainment import AttainmentStatus
from nutrition_insights.domain.profiles import Goals
from nutrition_insights.services.aggregation import AggregationService, day_window
from nutrition_insights.services.profiles import ProfileService

# Calories, carbs and fats are upper limits: a day passes when it stays at
# or under goal * (1 + tolerance). Protein is a floor: a day passes when it
# reaches at least goal * (1 - tolerance), with no upper bound.
UPPER_LIMIT_TOLERANCE = 0.10
PROTEIN_FLOOR_TOLERANCE = 0.10

_UPPER_LIMIT_FIELDS = ("calories", "carbs", "fats")


def classify(day: date, daily: DailyAggregate, goals: Goals) -> AttainmentStatus:
    """Return the attainment label for a day.

    Days without food entries are ``no_meals`` whatever their totals.
    Goals that are unset or not positive are left out of the verdict.
    Water never affects the label.
    """
    if daily.entry_count == 0:
        return AttainmentStatus.NO_MEALS
    if _meets_goals(daily.totals, goals):
        return AttainmentStatus.GOALS_MET
    return AttainmentStatus.GOALS_NOT_MET


def classify_calendar(
    dailies: Iterable[DailyAggregate], goals: Goals
) -> dict[date, AttainmentStatus]:
    """Classify each day once."""
    return {daily.day: classify(daily.day, daily, goals) for daily in dailies}


def _meets_goals(totals: Totals, goals: Goals) -> bool:
    for field_name in _UPPER_LIMIT_FIELDS:
        goal = getattr(goals, field_name)
        if not _is_active(goal):
            continue
        if getattr(totals, field_name) > goal * (1 + UPPER_LIMIT_TOLERANCE):
            return False
    if _is_active(goals.protein):
        if totals.protein < goals.protein * (1 - PROTEIN_FLOOR_TOLERANCE):
            return False
    return True


def _is_active(goal: float | None) -> bool:
    return goal is not None and goal > 0


@dataclass(frozen=True)
class CalendarDay:
    """A rendered calendar cell."""

    day: date
    in_month: bool
    status: AttainmentStatus


@dataclass
class CalendarService:
    """Builds month grids colored by goal attainment."""

    aggregation_service: AggregationService
    profile_service: ProfileService

    async def get_month(
        self, user_id: UUID, year: int, month: int, timezone_name: str = "UTC"
    ) -> list[CalendarDay]:
        """Return Sunday-to-Saturday weeks covering the month."""
        first, last = month_grid_bounds(year, month)
        window = Window(
            start=day_window(first, timezone_name).start,
            end=day_window(last, timezone_name).end,
        )
        dailies = self.aggregation_service.get_days(user_id, window, timezone_name)
        profile = await self.profile_service.get_profile(user_id)
        statuses = classify_calendar(dailies, profile.goals)
        return [
            CalendarDay(
                day=daily.day,
                in_month=daily.day.month == month,
                status=statuses[daily.day],
            )
            for daily in dailies
        ]


def month_grid_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the Sunday before the 1st and the Saturday after the last day."""
    first_of_month = date(year, month, 1)
    last_of_month = date(year, month, calendar.monthrange(year, month)[1])
    # date.weekday(): Monday=0 .. Sunday=6
    first = first_of_month - timedelta(days=(first_of_month.weekday() + 1) % 7)
    last = last_of_month + timedelta(days=(5 - last_of_month.weekday()) % 7)
    return first, last
