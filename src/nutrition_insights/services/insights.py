"""Nutrition insight generation."""

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from nutrition_insights.domain.aggregates import RangeAggregate
from nutrition_insights.domain.errors import InsightGenerationFailed
from nutrition_insights.domain.insights import (
    UNAVAILABLE,
    InsightGoals,
    InsightMacros,
    InsightRequestPayload,
    InsightResult,
)
from nutrition_insights.domain.profiles import Goals
from nutrition_insights.services.aggregation import AggregationService, period_window
from nutrition_insights.services.profiles import ProfileService

PERIOD_LABELS = {
    "day": "Today",
    "week": "This week",
    "month": "This month",
}

SYSTEM_PROMPT = (
    "You are a nutrition expert providing insights and recommendations.\n"
    "Provide three sections, in this order, separated by a single blank line:\n"
    "1. Trends: analyze the nutrition patterns in the data\n"
    "2. Recommendations: actionable advice for maintaining a healthy diet\n"
    "3. Goals: realistic goals based on the user's targets\n"
    "Keep each section concise and focused. Do not use blank lines inside "
    "a section.\n"
    "Use ** for important numbers or key points you want to emphasize.\n"
    "Do not include section headers in your response."
)

_SECTION_DELIMITER = re.compile(r"\n\s*\n")

_logger = logging.getLogger(__name__)


class InsightClient(Protocol):
    """Interface for the generative text service."""

    async def complete(
        self, *, model: str, system_prompt: str, user_prompt: str
    ) -> str:
        """Return the generated text for a prompt pair."""


def build_summary(
    range_label: str, aggregate: RangeAggregate, goals: Goals
) -> InsightRequestPayload:
    """Build the bounded payload sent to the insight generator."""
    resolved = goals.resolved()
    return InsightRequestPayload(
        range_label=range_label,
        days=aggregate.days_in_range,
        totals=InsightMacros(**aggregate.totals.as_dict()),
        averages=InsightMacros(**aggregate.averages.as_dict()),
        goals=InsightGoals(**resolved.as_dict()),
    )


def build_prompts(payload: InsightRequestPayload) -> tuple[str, str]:
    """Return the system and user prompts for a summary payload."""
    summary = json.dumps(payload.model_dump(), indent=2)
    user_prompt = (
        "Please provide nutrition insights and recommendations based on this "
        f"user's intake and goals:\n{summary}"
    )
    return SYSTEM_PROMPT, user_prompt


def parse_insight_response(raw_text: str) -> InsightResult:
    """Split generated text into trends, recommendations and goals.

    The text is split on the first two blank-line delimiters. Missing or
    empty sections are filled with ``UNAVAILABLE`` and the result is marked
    partial.
    """
    normalized = raw_text.replace("\r\n", "\n").strip()
    sections = [part.strip() for part in _SECTION_DELIMITER.split(normalized, 2)]
    sections += [""] * (3 - len(sections))
    partial = any(not section for section in sections)
    trends, recommendations, goals = (section or UNAVAILABLE for section in sections)
    if partial:
        _logger.warning("Insight response had fewer than three sections")
    return InsightResult(
        trends=trends,
        recommendations=recommendations,
        goals=goals,
        partial=partial,
    )


@dataclass
class InsightService:
    """Builds summaries, calls the generator and parses its answer."""

    client: InsightClient
    aggregation_service: AggregationService
    profile_service: ProfileService
    model: str
    timeout_seconds: float = 30.0

    async def generate(
        self, user_id: UUID, period: str, timezone_name: str = "UTC"
    ) -> InsightResult:
        """Generate insights for the current day, week or month."""
        label = PERIOD_LABELS.get(period)
        if label is None:
            raise ValueError(f"Unknown period: {period}")
        window = period_window(period, timezone_name)
        try:
            aggregate = self.aggregation_service.get_range(user_id, window)
            goals = await self.profile_service.get_goals(user_id)
        except ValueError:
            raise
        except Exception as exc:
            raise InsightGenerationFailed(
                f"Could not load nutrition data: {exc}"
            ) from exc
        payload = build_summary(label, aggregate, goals)
        return await self.request(payload)

    async def request(self, payload: InsightRequestPayload) -> InsightResult:
        """Send a payload to the generator and parse the response."""
        system_prompt, user_prompt = build_prompts(payload)
        try:
            text = await asyncio.wait_for(
                self.client.complete(
                    model=self.model,
                    system_prompt=system_prompt,
                    user_prompt=user_prompt,
                ),
                timeout=self.timeout_seconds,
            )
        except InsightGenerationFailed:
            raise
        except TimeoutError as exc:
            raise InsightGenerationFailed(
                f"Insight generation timed out after {self.timeout_seconds}s"
            ) from exc
        except Exception as exc:
            raise InsightGenerationFailed(f"Insight service error: {exc}") from exc
        if not isinstance(text, str) or not text.strip():
            raise InsightGenerationFailed("Insight service returned no content")
        return parse_insight_response(text)
