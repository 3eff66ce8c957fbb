"""OpenAI chat completions client for nutrition estimates."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from calorie_tracker.services.nutrition import NutritionClient


@dataclass
class OpenAINutritionClient(NutritionClient):
    """Nutrition client backed by an OpenAI-compatible chat endpoint."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str | None = None,
        timeout: float = 30.0,
    ) -> "OpenAINutritionClient":
        """Create a client; ``base_url`` targets any compatible provider."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout)
        )

    async def complete_json(
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        """Call chat completions with a JSON schema response format."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "nutritional_estimate",
                    "strict": False,
                    "schema": schema,
                },
            },
        )
        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise RuntimeError("OpenAI returned an empty response")
        payload = json.loads(content)
        if not isinstance(payload, dict):
            raise RuntimeError("OpenAI returned a non-object response")
        return payload

    async def close(self) -> None:
        await self.client.close()
