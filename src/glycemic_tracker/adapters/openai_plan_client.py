"""OpenAI chat completions client for plan generation."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from glycemic_tracker.services.plans import PlanClient


@dataclass
class OpenAIPlanClient(PlanClient):
    """Plan client backed by OpenAI chat completions in JSON mode."""

    client: AsyncOpenAI
    timeout_seconds: float = 30

    async def complete_json(
        self, *, model: str, system_prompt: str, prompt: str, temperature: float
    ) -> dict[str, object]:
        """Request a JSON object answer and decode it."""
        response = await self.client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            temperature=temperature,
            timeout=self.timeout_seconds,
        )
        content = response.choices[0].message.content
        if not content:
            raise RuntimeError("OpenAI returned an empty plan")
        return json.loads(content)
