"""OpenAI Responses API client for nutrition analysis."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI

from glycemic_tracker.services.analysis import AnalysisClient


@dataclass
class OpenAIAnalysisClient(AnalysisClient):
    """Analysis client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        system_prompt: str,
        prompt: str,
        image_data_url: str | None,
        schema: dict[str, object],
        temperature: float,
        max_output_tokens: int,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with structured outputs."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": prompt}]
        if image_data_url:
            content.append({"type": "input_image", "image_url": image_data_url})
        response = await self.client.responses.create(
            model=model,
            instructions=system_prompt,
            input=[{"role": "user", "content": content}],
            text={
                "format": {
                    "type": "json_schema",
                    "name": "nutrition_analysis",
                    "strict": True,
                    "schema": schema,
                }
            },
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            store=False,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return json.loads(output_text)
