"""Food analysis service using vision LLMs."""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import ValidationError

from nutriscan.domain.analysis import FoodAnalysis
from nutriscan.domain.capture import CapturedImage
from nutriscan.domain.errors import (
    ConfigurationError,
    MalformedResponseError,
    TransportError,
)

logger = logging.getLogger(__name__)

ANALYSIS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "is_food": {
            "type": "boolean",
            "description": (
                "True if the image contains food or drink, false otherwise."
            ),
        },
        "food_name": {
            "type": "string",
            "description": "Name of the identified food dish or item.",
        },
        "serving_size_estimate": {
            "type": "string",
            "description": (
                "Estimated serving size shown in the image (e.g., '1 cup', '200g')."
            ),
        },
        "calories_kcal": {
            "type": "number",
            "description": "Estimated calories for the visible serving size.",
        },
        "macronutrients": {
            "type": "object",
            "properties": {
                "protein_g": {"type": "number", "description": "Protein in grams."},
                "carbs_g": {
                    "type": "number",
                    "description": "Carbohydrates in grams.",
                },
                "fat_g": {"type": "number", "description": "Total fat in grams."},
            },
            "required": ["protein_g", "carbs_g", "fat_g"],
        },
        "micronutrients": {
            "type": "object",
            "properties": {
                "sugar_g": {"type": "number", "description": "Sugar in grams."},
                "fiber_g": {"type": "number", "description": "Fiber in grams."},
                "sodium_mg": {
                    "type": "number",
                    "description": "Sodium in milligrams.",
                },
            },
            "required": ["sugar_g", "fiber_g"],
        },
        "health_score": {
            "type": "number",
            "description": (
                "A score from 0 (unhealthy) to 100 (very healthy) "
                "based on nutritional density."
            ),
        },
        "short_description": {
            "type": "string",
            "description": (
                "A brief, 1-sentence interesting fact or summary "
                "about this food's nutrition."
            ),
        },
        "confidence": {
            "type": "number",
            "description": "Confidence score of the identification (0-100).",
        },
        "alternatives": {
            "type": "array",
            "items": {"type": "string"},
            "description": (
                "List of 2-3 healthier alternative options if the food is "
                "unhealthy, or similar foods if healthy."
            ),
        },
    },
    "required": [
        "is_food",
        "food_name",
        "calories_kcal",
        "macronutrients",
        "micronutrients",
        "health_score",
        "short_description",
    ],
}

ANALYSIS_PROMPT = (
    "Analyze this image. If it is food, provide a detailed nutritional "
    "breakdown for the estimated portion size visible. Be realistic with "
    "serving sizes. If it is NOT food, set 'is_food' to false and provide "
    "a generic description in 'food_name'."
)


class AnalysisClient(Protocol):
    """Interface for LLM structured image analysis."""

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float,
        image: CapturedImage,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Return the parsed JSON object produced for the image."""


@dataclass
class AnalysisService:
    """Service that sends images for analysis and validates results."""

    client: AnalysisClient | None
    model: str
    temperature: float = 0.2
    timeout_seconds: float | None = None

    async def analyze(self, image: CapturedImage) -> FoodAnalysis:
        """Analyze one image via the configured client."""
        if self.client is None:
            raise ConfigurationError(
                "API key is missing. Set OPENAI_API_KEY to enable analysis."
            )
        try:
            raw = await asyncio.wait_for(
                self.client.generate(
                    model=self.model,
                    temperature=self.temperature,
                    image=image,
                    schema=ANALYSIS_SCHEMA,
                    prompt=ANALYSIS_PROMPT,
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as exc:
            raise TransportError(
                f"Analysis timed out after {self.timeout_seconds}s"
            ) from exc
        try:
            analysis = FoodAnalysis.model_validate(raw)
        except ValidationError as exc:
            raise MalformedResponseError("Response does not match schema") from exc
        logger.info(
            "Analyzed %s image: is_food=%s name=%s",
            image.mime_type,
            analysis.is_food,
            analysis.food_name,
        )
        return analysis


def integration_code(model: str) -> str:
    """Render a copyable Python sample that calls the model with the schema."""
    schema = json.dumps(ANALYSIS_SCHEMA, indent=2)
    return f'''import base64
import json

from openai import OpenAI

# 1. Get your API key: https://platform.openai.com/api-keys
client = OpenAI(api_key="YOUR_API_KEY")

# 2. Define the schema (copy this exactly)
SCHEMA = {schema}

PROMPT = {ANALYSIS_PROMPT!r}


# 3. Helper function
def identify_food(image_bytes: bytes, mime_type: str = "image/jpeg") -> dict:
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    response = client.responses.create(
        model={model!r},
        input=[
            {{
                "role": "user",
                "content": [
                    {{"type": "input_text", "text": PROMPT}},
                    {{
                        "type": "input_image",
                        "image_url": f"data:{{mime_type}};base64,{{encoded}}",
                    }},
                ],
            }}
        ],
        text={{
            "format": {{
                "type": "json_schema",
                "name": "food_analysis",
                "strict": False,
                "schema": SCHEMA,
            }}
        }},
    )
    return json.loads(response.output_text)
'''
