"""Meal image analysis using LLM vision models."""

import base64
from dataclasses import dataclass
from typing import Protocol

from nutrition_insights.domain.vision import MealEstimate

MEAL_ESTIMATE_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "calories": {"type": "number", "minimum": 0},
        "protein": {"type": "number", "minimum": 0},
        "carbs": {"type": "number", "minimum": 0},
        "fats": {"type": "number", "minimum": 0},
        "ingredients": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["name", "calories", "protein", "carbs", "fats", "ingredients"],
    "additionalProperties": False,
}

ANALYSIS_PROMPT = (
    "Identify the meal in the image. "
    "Return a short meal name, estimated total calories (kcal), "
    "protein, carbs and fats in grams for the whole plate, "
    "and the list of visible ingredients."
)

_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF8", "image/gif"),
    (b"RIFF", "image/webp"),
)


class VisionClient(Protocol):
    """Interface for LLM vision extraction."""

    async def extract(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        image_data_url: str,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return structured vision extraction data."""


@dataclass
class VisionService:
    """Service that prepares vision prompts and validates results."""

    client: VisionClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze(self, image_bytes: bytes) -> MealEstimate:
        """Estimate the meal and macros shown in an image."""
        if not image_bytes:
            raise ValueError("Cannot analyze an empty image")
        raw = await self.client.extract(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            image_data_url=to_data_url(image_bytes),
            schema=MEAL_ESTIMATE_SCHEMA,
            prompt=ANALYSIS_PROMPT,
        )
        return MealEstimate.model_validate(raw)


def to_data_url(image_bytes: bytes) -> str:
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{detect_mime_type(image_bytes)};base64,{encoded}"


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer the image type from its leading bytes, defaulting to JPEG."""
    for signature, mime_type in _SIGNATURES:
        if image_bytes.startswith(signature):
            if mime_type == "image/webp" and image_bytes[8:12] != b"WEBP":
                continue
            return mime_type
    return "image/jpeg"
