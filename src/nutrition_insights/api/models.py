"""Pydantic request models for the HTTP API."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from nutrition_insights.domain.vision import MealEstimate


class InsightRequest(BaseModel):
    """Insight generation request."""

    period: Literal["day", "week", "month"] = "week"
    timezone: str = "UTC"


class FoodEntryRequest(BaseModel):
    """Confirmed meal estimate to log as a food entry."""

    estimate: MealEstimate
    image_url: str | None = None
    quantity: int = Field(default=1, ge=1)


class WaterEntryRequest(BaseModel):
    """Water intake, either a preset portion or a custom amount."""

    portion: Literal["small", "medium", "large"] | None = None
    amount_ml: float | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _exactly_one(self) -> "WaterEntryRequest":
        if (self.portion is None) == (self.amount_ml is None):
            raise ValueError("Provide exactly one of portion or amount_ml")
        return self
