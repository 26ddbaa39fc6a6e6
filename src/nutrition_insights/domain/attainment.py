"""Goal attainment labels."""

from enum import StrEnum


class AttainmentStatus(StrEnum):
    """Per-day goal attainment label used to color the calendar."""

    GOALS_MET = "goals_met"
    GOALS_NOT_MET = "goals_not_met"
    NO_MEALS = "no_meals"
