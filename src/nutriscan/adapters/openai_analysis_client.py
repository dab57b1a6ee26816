"""OpenAI Responses API client for food analysis."""

import json
from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from nutriscan.domain.capture import CapturedImage
from nutriscan.domain.errors import MalformedResponseError, TransportError
from nutriscan.services.analysis import AnalysisClient


@dataclass
class OpenAIAnalysisClient(AnalysisClient):
    """Analysis client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIAnalysisClient":
        """Create an OpenAI analysis client."""
        return cls(client=AsyncOpenAI(api_key=api_key, max_retries=0))

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float,
        image: CapturedImage,
        schema: dict[str, object],
        prompt: str,
    ) -> dict[str, object]:
        """Call OpenAI Responses API with a JSON schema output format."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_image", "image_url": image.data_url},
                        {"type": "input_text", "text": prompt},
                    ],
                }
            ],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "food_analysis",
                    "strict": False,
                    "schema": schema,
                }
            },
            "temperature": temperature,
            "store": False,
        }

        try:
            response = await self.client.responses.create(**request_payload)
        except OpenAIError as exc:
            raise TransportError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise MalformedResponseError("OpenAI returned an empty response")
        try:
            payload = json.loads(output_text, parse_constant=_reject_constant)
        except json.JSONDecodeError as exc:
            raise MalformedResponseError("OpenAI returned non-JSON text") from exc
        if not isinstance(payload, dict):
            raise MalformedResponseError("OpenAI returned a non-object payload")
        return payload

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()


def _reject_constant(token: str) -> float:
    raise MalformedResponseError(f"OpenAI returned non-JSON number {token}")
