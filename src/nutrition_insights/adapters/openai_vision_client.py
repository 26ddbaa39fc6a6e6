"""OpenAI Responses API client for meal image analysis."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from nutrition_insights.services.vision import VisionClient

SCHEMA_NAME = "meal_estimate"


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by OpenAI Responses API.

    Retries are disabled; the upload orchestrator owns the timeout and
    reports a failed analysis instead of retrying.
    """

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout_seconds: float) -> "OpenAIVisionClient":
        return cls(
            client=AsyncOpenAI(
                api_key=api_key, timeout=timeout_seconds, max_retries=0
            )
        )

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
        """Send the image with a strict JSON schema and decode the answer."""
        request = build_request(
            model=model,
            store=store,
            image_data_url=image_data_url,
            schema=schema,
            prompt=prompt,
        )
        if reasoning_effort:
            request["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request)
        if getattr(response, "status", None) == "incomplete":
            details = getattr(response, "incomplete_details", None)
            reason = getattr(details, "reason", None) or "unknown"
            raise RuntimeError(f"OpenAI response incomplete: {reason}")
        return parse_output(response.output_text)


def build_request(
    *,
    model: str,
    store: bool,
    image_data_url: str,
    schema: dict[str, object],
    prompt: str,
) -> dict[str, object]:
    """Return Responses API keyword arguments for one image."""
    content = [
        {"type": "input_text", "text": prompt},
        {"type": "input_image", "image_url": image_data_url},
    ]
    json_format = {
        "type": "json_schema",
        "name": SCHEMA_NAME,
        "strict": True,
        "schema": schema,
    }
    return {
        "model": model,
        "input": [{"role": "user", "content": content}],
        "text": {"format": json_format},
        "store": store,
    }


def parse_output(output_text: str | None) -> dict[str, object]:
    if not output_text:
        raise RuntimeError("OpenAI returned an empty response")
    try:
        payload = json.loads(output_text)
    except json.JSONDecodeError as exc:
        raise RuntimeError("OpenAI returned malformed JSON") from exc
    if not isinstance(payload, dict):
        raise RuntimeError("OpenAI returned a non-object payload")
    return payload
