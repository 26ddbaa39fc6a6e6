"""Aggregation of food and water entries over time windows."""

import logging
import math
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo

from nutrition_insights.domain.aggregates import (
    DailyAggregate,
    RangeAggregate,
    Totals,
    Window,
)
from nutrition_insights.domain.entries import FoodEntry, WaterEntry
from nutrition_insights.domain.errors import DataQualityAnomaly, InvalidWindow
from nutrition_insights.services.cache import AggregateCache
from nutrition_insights.services.entries import EntryRepository

DECEMBER = 12
_ONE_DAY = timedelta(days=1)
_FOOD_FIELDS = ("calories", "protein", "carbs", "fats")

_logger = logging.getLogger(__name__)


def aggregate(
    food_entries: Iterable[FoodEntry],
    water_entries: Iterable[WaterEntry],
    window: Window,
) -> RangeAggregate:
    """Sum entries inside ``[window.start, window.end)`` and average per day."""
    _validate_window(window)
    totals = Totals()
    entry_count = 0
    for entry in food_entries:
        if not window.contains(entry.created_at):
            continue
        food_totals = _food_totals(entry)
        if food_totals is None:
            continue
        totals += food_totals
        entry_count += 1
    for entry in water_entries:
        if not window.contains(entry.created_at):
            continue
        amount = _water_amount(entry)
        if amount is None:
            continue
        totals += Totals(water=amount)

    days = days_in_range(window)
    return RangeAggregate(
        start=window.start,
        end=window.end,
        totals=totals,
        averages=totals.divided_by(days),
        days_in_range=days,
        entry_count=entry_count,
    )


def days_in_range(window: Window) -> int:
    """Return the number of (possibly partial) days a window spans, at least 1."""
    _validate_window(window)
    return max(1, math.ceil((window.end - window.start) / _ONE_DAY))


def day_window(day: date, timezone_name: str = "UTC") -> Window:
    """Return the window from local midnight of ``day`` to the next midnight."""
    start = datetime.combine(day, time.min, tzinfo=ZoneInfo(timezone_name))
    return Window(start=start, end=start + _ONE_DAY)


def aggregate_day(
    day: date,
    food_entries: Iterable[FoodEntry],
    water_entries: Iterable[WaterEntry],
    timezone_name: str = "UTC",
) -> DailyAggregate:
    """Aggregate a single calendar day."""
    result = aggregate(food_entries, water_entries, day_window(day, timezone_name))
    return DailyAggregate(
        day=day, totals=result.totals, entry_count=result.entry_count
    )


def daily_breakdown(
    food_entries: Iterable[FoodEntry],
    water_entries: Iterable[WaterEntry],
    window: Window,
    timezone_name: str = "UTC",
) -> list[DailyAggregate]:
    """Return one aggregate per local day touched by the window.

    Entries are bucketed by local date in a single pass, so the cost is
    linear in entries plus days.
    """
    _validate_window(window)
    tz = ZoneInfo(timezone_name)
    totals_by_day: dict[date, Totals] = defaultdict(Totals)
    counts_by_day: dict[date, int] = defaultdict(int)
    for entry in food_entries:
        if not window.contains(entry.created_at):
            continue
        food_totals = _food_totals(entry)
        if food_totals is None:
            continue
        local_day = entry.created_at.astimezone(tz).date()
        totals_by_day[local_day] += food_totals
        counts_by_day[local_day] += 1
    for entry in water_entries:
        if not window.contains(entry.created_at):
            continue
        amount = _water_amount(entry)
        if amount is None:
            continue
        local_day = entry.created_at.astimezone(tz).date()
        totals_by_day[local_day] += Totals(water=amount)

    first = window.start.astimezone(tz).date()
    last = (window.end.astimezone(tz) - timedelta(microseconds=1)).date()
    daily = []
    day = first
    while day <= last:
        daily.append(
            DailyAggregate(
                day=day,
                totals=totals_by_day.get(day, Totals()),
                entry_count=counts_by_day.get(day, 0),
            )
        )
        day += _ONE_DAY
    return daily


def period_window(
    period: str, timezone_name: str = "UTC", now: datetime | None = None
) -> Window:
    """Return the current day, week (Monday start) or month window."""
    tz = ZoneInfo(timezone_name)
    current = (now or datetime.now(tz=tz)).astimezone(tz)
    midnight = current.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "day":
        return Window(start=midnight, end=midnight + _ONE_DAY)
    if period == "week":
        start = midnight - timedelta(days=current.weekday())
        return Window(start=start, end=start + timedelta(days=7))
    if period == "month":
        start = midnight.replace(day=1)
        if start.month == DECEMBER:
            end = start.replace(year=start.year + 1, month=1)
        else:
            end = start.replace(month=start.month + 1)
        return Window(start=start, end=end)
    raise ValueError(f"Unknown period: {period}")


def _validate_window(window: Window) -> None:
    if window.end <= window.start:
        raise InvalidWindow(
            f"Window end {window.end.isoformat()} is not after "
            f"start {window.start.isoformat()}"
        )


def _food_totals(entry: FoodEntry) -> Totals | None:
    values: dict[str, float] = {}
    for field_name in _FOOD_FIELDS:
        raw = getattr(entry, field_name)
        value = _coerce(raw)
        if value is None:
            _report_anomaly(DataQualityAnomaly(entry.id, field_name, raw))
            return None
        values[field_name] = value
    return Totals(**values)


def _water_amount(entry: WaterEntry) -> float | None:
    # A logged portion is always positive.
    value = _coerce(entry.amount_ml)
    if value is None or value == 0:
        _report_anomaly(DataQualityAnomaly(entry.id, "amount_ml", entry.amount_ml))
        return None
    return value


def _coerce(raw: object) -> float | None:
    """Parse a stored numeric value into a finite non-negative float."""
    if isinstance(raw, bool) or raw is None:
        return None
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def _report_anomaly(anomaly: DataQualityAnomaly) -> None:
    _logger.warning(
        "Excluding entry from aggregation: entry_id=%s field=%s value=%r",
        anomaly.entry_id,
        anomaly.field,
        anomaly.raw_value,
    )


@dataclass
class AggregationService:
    """Service for computing a user's totals from stored entries."""

    repository: EntryRepository
    cache: AggregateCache

    def get_range(self, user_id: UUID, window: Window) -> RangeAggregate:
        """Return totals and averages for a window."""
        _validate_window(window)
        cached = self.cache.get(user_id, window, "range")
        if isinstance(cached, RangeAggregate):
            return cached
        food, water = self._fetch(user_id, window)
        result = aggregate(food, water, window)
        self.cache.set(user_id, window, "range", result)
        return result

    def get_day(
        self, user_id: UUID, day: date, timezone_name: str = "UTC"
    ) -> DailyAggregate:
        """Return totals for one local calendar day."""
        window = day_window(day, timezone_name)
        result = self.get_range(user_id, window)
        return DailyAggregate(
            day=day, totals=result.totals, entry_count=result.entry_count
        )

    def get_today(self, user_id: UUID, timezone_name: str = "UTC") -> DailyAggregate:
        """Return today's totals in the user's timezone."""
        today = datetime.now(tz=ZoneInfo(timezone_name)).date()
        return self.get_day(user_id, today, timezone_name)

    def get_period(
        self, user_id: UUID, period: str, timezone_name: str = "UTC"
    ) -> RangeAggregate:
        """Return the aggregate for the current day, week or month."""
        return self.get_range(user_id, period_window(period, timezone_name))

    def get_days(
        self, user_id: UUID, window: Window, timezone_name: str = "UTC"
    ) -> list[DailyAggregate]:
        """Return per-day aggregates across a window."""
        _validate_window(window)
        kind = f"days:{timezone_name}"
        cached = self.cache.get(user_id, window, kind)
        if isinstance(cached, list):
            return cached
        food, water = self._fetch(user_id, window)
        result = daily_breakdown(food, water, window, timezone_name)
        self.cache.set(user_id, window, kind, result)
        return result

    def _fetch(
        self, user_id: UUID, window: Window
    ) -> tuple[list[FoodEntry], list[WaterEntry]]:
        food = self.repository.list_food_entries(user_id, window.start, window.end)
        water = self.repository.list_water_entries(user_id, window.start, window.end)
        return food, water
