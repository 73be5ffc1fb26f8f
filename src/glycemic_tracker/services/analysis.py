"""Nutrition analysis through an LLM, with simulated fallbacks."""

import asyncio
import base64
import binascii
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from pydantic import ValidationError

from glycemic_tracker.domain.errors import InvalidInput
from glycemic_tracker.domain.nutrition import (
    FoodEntry,
    FoodItem,
    MealCategory,
    NutritionAnalysis,
)

if TYPE_CHECKING:
    from collections.abc import Callable

_logger = logging.getLogger(__name__)

_NUMBER = {"type": "number", "minimum": 0}

ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "foods": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "quantity": {"type": "string"},
                    "calories": _NUMBER,
                    "carbs": _NUMBER,
                    "protein": _NUMBER,
                    "fat": _NUMBER,
                },
                "required": ["name", "quantity", "calories", "carbs", "protein", "fat"],
                "additionalProperties": False,
            },
        },
        "total_calories": _NUMBER,
        "total_carbs": _NUMBER,
        "total_protein": _NUMBER,
        "total_fat": _NUMBER,
        "glycemic_score": {"type": "integer", "minimum": 0, "maximum": 100},
        "recommendations": {"type": "array", "items": {"type": "string"}},
    },
    "required": [
        "foods",
        "total_calories",
        "total_carbs",
        "total_protein",
        "total_fat",
        "glycemic_score",
        "recommendations",
    ],
    "additionalProperties": False,
}

SYSTEM_PROMPT = (
    "You are a nutritionist specialized in nutritional analysis and glycemic "
    "impact. Always answer with valid JSON."
)

_SCORING_RULES = (
    "- glycemic_score ranges from 0 to 100: below 55 is a low glycemic impact, "
    "55 to 69 is medium, 70 and above is high\n"
    "- Give exactly 3 practical, personalized recommendations based on the "
    "analysis\n"
    "- Be precise with the nutritional calculations"
)

SIMULATED_RECOMMENDATIONS = [
    "Set OPENAI_API_KEY to get real analyses",
    "This is a simulated analysis for development",
    "Add your OpenAI credentials to the service configuration",
]

_MOCK_ITEM = {"calories": 150.0, "carbs": 20.0, "protein": 10.0, "fat": 5.0}

_MOCK_PLATE = [
    FoodItem(
        name="White rice", quantity="1 cup", calories=206, carbs=45, protein=4, fat=0.4
    ),
    FoodItem(
        name="Black beans",
        quantity="1/2 cup",
        calories=114,
        carbs=20,
        protein=8,
        fat=0.5,
    ),
    FoodItem(
        name="Grilled chicken",
        quantity="150g",
        calories=165,
        carbs=0,
        protein=31,
        fat=3.6,
    ),
]


class AnalysisClient(Protocol):
    """Interface for structured LLM completions."""

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
        """Return the model's JSON answer as a dict."""


@dataclass
class AnalysisService:
    """Service that builds analysis prompts and validates the results.

    A missing client means the provider is not configured; every failure
    path returns a simulated analysis instead of raising.
    """

    client: AnalysisClient | None
    model: str
    temperature: float = 0.3
    max_output_tokens: int = 1500
    timeout_seconds: float = 30.0

    async def analyze_foods(self, foods: list[FoodEntry]) -> NutritionAnalysis:
        """Analyze a manually entered list of foods."""
        if not foods:
            raise InvalidInput("Food list is empty", field="foods")
        food_list = "\n".join(f"- {food.name}: {food.quantity}" for food in foods)
        prompt = (
            "Analyze the following foods and their quantities and provide a "
            "detailed nutritional analysis.\n\n"
            f"Foods eaten:\n{food_list}\n\n"
            "Important:\n"
            "- Compute nutritional values from the quantities given\n"
            f"{_SCORING_RULES}"
        )
        analysis = await self._analyze(
            prompt=prompt,
            image_data_url=None,
            fallback=lambda: mock_foods_analysis(foods),
            action="analyze_foods",
        )
        return analysis.model_copy(update={"meal_category": MealCategory.MANUAL})

    async def analyze_image(
        self, image: str | bytes, meal_category: MealCategory
    ) -> NutritionAnalysis:
        """Analyze a meal photo given as bytes, a data URL or bare base64."""
        if not image:
            raise InvalidInput("Image not provided", field="image")
        data_url = (
            _to_data_url(image) if isinstance(image, bytes) else _as_data_url(image)
        )
        prompt = (
            f"Analyze this photo of a meal ({meal_category}) and provide a "
            "detailed nutritional analysis.\n\n"
            "Important:\n"
            "- Identify every food visible in the image\n"
            "- Estimate quantities from the visual portion size\n"
            "- Compute nutritional values from the estimated quantities\n"
            f"{_SCORING_RULES}"
        )
        analysis = await self._analyze(
            prompt=prompt,
            image_data_url=data_url,
            fallback=mock_plate_analysis,
            action="analyze_image",
        )
        return analysis.model_copy(update={"meal_category": meal_category})

    async def _analyze(
        self,
        *,
        prompt: str,
        image_data_url: str | None,
        fallback: "Callable[[], NutritionAnalysis]",
        action: str,
    ) -> NutritionAnalysis:
        if self.client is None:
            _logger.warning("OpenAI not configured, returning simulated %s", action)
            return fallback()
        try:
            raw = await asyncio.wait_for(
                self.client.complete(
                    model=self.model,
                    system_prompt=SYSTEM_PROMPT,
                    prompt=prompt,
                    image_data_url=image_data_url,
                    schema=ANALYSIS_SCHEMA,
                    temperature=self.temperature,
                    max_output_tokens=self.max_output_tokens,
                ),
                timeout=self.timeout_seconds,
            )
            return NutritionAnalysis.model_validate(raw)
        except TimeoutError:
            _logger.warning(
                "Nutrition %s timed out after %ss", action, self.timeout_seconds
            )
        except ValidationError as exc:
            _logger.warning(
                "Nutrition %s returned an invalid payload: %s",
                action,
                exc.error_count(),
            )
        except Exception:
            _logger.exception("Nutrition %s failed", action)
        return fallback()


def mock_foods_analysis(foods: list[FoodEntry]) -> NutritionAnalysis:
    """Return placeholder values for a text request."""
    count = len(foods)
    return NutritionAnalysis(
        foods=[
            FoodItem(name=food.name, quantity=food.quantity, **_MOCK_ITEM)
            for food in foods
        ],
        total_calories=count * _MOCK_ITEM["calories"],
        total_carbs=count * _MOCK_ITEM["carbs"],
        total_protein=count * _MOCK_ITEM["protein"],
        total_fat=count * _MOCK_ITEM["fat"],
        glycemic_score=55,
        recommendations=list(SIMULATED_RECOMMENDATIONS),
    )


def mock_plate_analysis() -> NutritionAnalysis:
    """Return a fixed placeholder plate for an image request."""
    return NutritionAnalysis(
        foods=[item.model_copy() for item in _MOCK_PLATE],
        total_calories=485,
        total_carbs=65,
        total_protein=43,
        total_fat=4.5,
        glycemic_score=62,
        recommendations=list(SIMULATED_RECOMMENDATIONS),
    )


def _as_data_url(image: str) -> str:
    """Return a data URL, wrapping bare base64 with a sniffed MIME type."""
    if image.startswith("data:"):
        return image
    try:
        head = base64.b64decode(image[:64])
    except (binascii.Error, ValueError) as exc:
        raise InvalidInput("Image is not valid base64", field="image") from exc
    return f"data:{_detect_mime_type(head)};base64,{image}"


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
