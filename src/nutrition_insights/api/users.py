"""Per-user endpoints for progress, calendar, insights and entry logging."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Body, HTTPException, Query, Request, Response, status

from nutrition_insights.api import serializers
from nutrition_insights.api.models import (  # noqa: TC001
    FoodEntryRequest,
    InsightRequest,
    WaterEntryRequest,
)
from nutrition_insights.domain.aggregates import Window
from nutrition_insights.domain.errors import InsightGenerationFailed, InvalidWindow
from nutrition_insights.domain.uploads import UploadState
from nutrition_insights.services.aggregation import day_window
from nutrition_insights.services.attainment import classify

if TYPE_CHECKING:
    from nutrition_insights.containers import AppContainer

router = APIRouter(prefix="/users/{user_id}", tags=["users"])
logger = logging.getLogger(__name__)

UNPROCESSABLE = 422


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _require_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except Exception as exc:
        raise HTTPException(
            status_code=UNPROCESSABLE,
            detail=f"Unknown timezone: {value}",
        ) from exc
    return value


def _error_detail(container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


@router.get("/profile")
async def get_profile(user_id: UUID, request: Request) -> dict[str, object]:
    """Return the profile, creating it with baseline goals if needed."""
    profile = await _container(request).profile_service.get_profile(user_id)
    return serializers.profile(profile)


@router.patch("/profile")
async def update_profile(
    user_id: UUID, request: Request, fields: dict[str, object] = Body(...)
) -> dict[str, object]:
    """Apply onboarding or settings changes to the profile."""
    try:
        profile = _container(request).profile_service.update_profile(user_id, fields)
    except ValueError as exc:
        raise HTTPException(status_code=UNPROCESSABLE, detail=str(exc)) from exc
    return serializers.profile(profile)


@router.get("/progress/today")
async def today_progress(
    user_id: UUID, request: Request, timezone: str = "UTC"
) -> dict[str, object]:
    """Return today's totals against the user's goals."""
    container = _container(request)
    timezone = _require_timezone(timezone)
    daily = container.aggregation_service.get_today(user_id, timezone)
    profile = await container.profile_service.get_profile(user_id)
    return {
        **serializers.daily_aggregate(daily),
        "goals": serializers.goals(profile.goals.resolved()),
        "status": classify(daily.day, daily, profile.goals).value,
    }


@router.get("/aggregate")
async def range_aggregate(
    user_id: UUID, request: Request, start: datetime, end: datetime
) -> dict[str, object]:
    """Return totals and daily averages for ``[start, end)``."""
    window = Window(start=_as_aware(start), end=_as_aware(end))
    try:
        result = _container(request).aggregation_service.get_range(user_id, window)
    except InvalidWindow as exc:
        raise HTTPException(status_code=UNPROCESSABLE, detail=str(exc)) from exc
    return serializers.range_aggregate(result)


@router.get("/calendar")
async def month_calendar(
    user_id: UUID,
    request: Request,
    year: int = Query(ge=1, le=9999),
    month: int = Query(ge=1, le=12),
    timezone: str = "UTC",
) -> dict[str, object]:
    """Return the month grid with an attainment status per day."""
    timezone = _require_timezone(timezone)
    days = await _container(request).calendar_service.get_month(
        user_id, year, month, timezone
    )
    return {"days": [serializers.calendar_day(day) for day in days]}


@router.post("/insights")
async def generate_insights(
    user_id: UUID, payload: InsightRequest, request: Request
) -> dict[str, object]:
    """Generate trends, recommendations and goals for a period."""
    container = _container(request)
    timezone = _require_timezone(payload.timezone)
    try:
        result = await container.insight_service.generate(
            user_id, payload.period, timezone
        )
    except InsightGenerationFailed as exc:
        logger.exception("Insight generation failed", extra={"user_id": user_id})
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=_error_detail(
                container, exc, "Failed to generate insights. Please try again."
            ),
        ) from exc
    return result.model_dump()


@router.post("/uploads")
async def upload_meal_photo(
    user_id: UUID, request: Request, filename: str = "meal.jpg"
) -> dict[str, object]:
    """Store a meal photo and return the analysis estimate.

    The estimate is not logged; the client confirms it via ``food-entries``.
    """
    container = _container(request)
    data = await request.body()
    if not data:
        raise HTTPException(
            status_code=UNPROCESSABLE,
            detail="Request body must contain image bytes",
        )
    outcome = await container.upload_orchestrator.run(user_id, filename, data)
    if outcome.state is UploadState.FAILED:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                **serializers.upload_outcome(outcome),
                "message": _error_detail(
                    container,
                    outcome.error,  # type: ignore[arg-type]
                    "Failed to process the image. Please try again.",
                ),
            },
        )
    return serializers.upload_outcome(outcome)


@router.get("/food-entries")
async def list_food_entries(
    user_id: UUID, request: Request, day: date | None = None, timezone: str = "UTC"
) -> dict[str, object]:
    """Return the meals logged on a local day (today by default)."""
    timezone = _require_timezone(timezone)
    selected = day or datetime.now(tz=ZoneInfo(timezone)).date()
    entries = _container(request).entry_service.list_food_entries(
        user_id, day_window(selected, timezone)
    )
    return {
        "date": selected.isoformat(),
        "entries": [serializers.food_entry(entry) for entry in entries],
    }


@router.post("/food-entries", status_code=status.HTTP_201_CREATED)
async def create_food_entry(
    user_id: UUID, payload: FoodEntryRequest, request: Request
) -> dict[str, object]:
    """Log a meal estimate the user confirmed."""
    entry = _container(request).entry_service.log_food_entry(
        user_id,
        payload.estimate,
        image_url=payload.image_url,
        quantity=payload.quantity,
    )
    return serializers.food_entry(entry)


@router.delete(
    "/food-entries/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_food_entry(user_id: UUID, entry_id: UUID, request: Request) -> None:
    """Delete a logged meal."""
    _container(request).entry_service.delete_food_entry(user_id, entry_id)


@router.post("/water-entries", status_code=status.HTTP_201_CREATED)
async def create_water_entry(
    user_id: UUID, payload: WaterEntryRequest, request: Request
) -> dict[str, object]:
    """Log a preset or custom water portion."""
    entry_service = _container(request).entry_service
    if payload.portion is not None:
        entry = entry_service.log_water_portion(user_id, payload.portion)
    else:
        amount_ml = payload.amount_ml or 0.0
        entry = entry_service.log_water(user_id, amount_ml)
    return serializers.water_entry(entry)


@router.delete(
    "/water-entries/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
async def delete_water_entry(user_id: UUID, entry_id: UUID, request: Request) -> None:
    """Delete a logged water portion."""
    _container(request).entry_service.delete_water_entry(user_id, entry_id)


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
