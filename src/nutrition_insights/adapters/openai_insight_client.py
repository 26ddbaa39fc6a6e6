"""OpenAI Chat Completions client for nutrition insights."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nutrition_insights.domain.errors import InsightGenerationFailed
from nutrition_insights.services.insights import InsightClient


@dataclass
class OpenAIInsightClient(InsightClient):
    """Insight client backed by OpenAI Chat Completions."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str, timeout_seconds: float) -> "OpenAIInsightClient":
        """Create an OpenAI insight client."""
        return cls(client=AsyncOpenAI(api_key=api_key, timeout=timeout_seconds))

    async def complete(
        self, *, model: str, system_prompt: str, user_prompt: str
    ) -> str:
        """Return the first choice's message content."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        )
        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        if not content:
            raise InsightGenerationFailed("Invalid response format from OpenAI")
        return content
