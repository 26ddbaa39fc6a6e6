"""Models for generated nutrition insights."""

from pydantic import BaseModel

UNAVAILABLE = "unavailable"


class InsightGoals(BaseModel):
    """Resolved daily goals sent to the insight generator."""

    calories: float
    protein: float
    carbs: float
    fats: float
    water: float


class InsightMacros(BaseModel):
    """Macro and water figures for a range."""

    calories: float
    protein: float
    carbs: float
    fats: float
    water: float


class InsightRequestPayload(BaseModel):
    """Bounded summary of a range handed to the insight generator."""

    range_label: str
    days: int
    totals: InsightMacros
    averages: InsightMacros
    goals: InsightGoals


class InsightResult(BaseModel):
    """Three-section insight text.

    ``partial`` is set when the generator returned fewer than three
    sections; missing sections hold ``UNAVAILABLE``.
    """

    trends: str
    recommendations: str
    goals: str
    partial: bool = False
