"""Models for meal image analysis results."""

from pydantic import BaseModel, Field


class MealEstimate(BaseModel):
    """Structured meal estimate returned by the vision service."""

    name: str
    calories: float = Field(ge=0.0)
    protein: float = Field(ge=0.0)
    carbs: float = Field(ge=0.0)
    fats: float = Field(ge=0.0)
    ingredients: list[str] = Field(default_factory=list)
