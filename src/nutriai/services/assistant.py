"""AI nutrition assistant: photo analysis, estimation and chat."""

import base64
import binascii
import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from nutriai.domain.diary import Ingredient
from nutriai.domain.errors import ServiceError, ValidationError
from nutriai.domain.vision import AnalyzedIngredient, NutritionEstimate

ANALYZE_PROMPT = (
    "Analyze this food image. Identify all distinct food items. "
    "Return a STRICT JSON array. Do not use Markdown. Output format: "
    '[{"name": "Food Name (Traditional Chinese)", '
    '"portion": "Estimated portion (e.g. 約100克)", '
    '"calories": integer, "protein": float, "carbs": float, "fat": float}]. '
    "If unable to identify, return an empty array."
)
ESTIMATE_PROMPT = (
    'Estimate the nutrition facts for: Food: "{name}", Portion: "{portion}". '
    "Return a STRICT JSON object. Do not use Markdown. Output format: "
    '{{"calories": int, "protein": float, "carbs": float, "fat": float}}'
)
CHAT_PROMPT = (
    "You are a friendly, professional AI nutrition assistant. "
    "Keep answers short and concrete. For recipes give only ingredients and "
    "steps. Give actionable advice instead of asking questions back. "
    "Do not use Markdown symbols; answer in plain text. "
    "Answer in Traditional Chinese.\n\n"
)

_DATA_URI_PREFIX = re.compile(r"^data:image/[\w.+-]+;base64,")
_CODE_FENCE = re.compile(r"```(?:json)?")
_MARKDOWN_LINK = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_INGREDIENTS = TypeAdapter(list[AnalyzedIngredient])
_WRAPPER_KEYS = ("items", "ingredients", "foods")

_logger = logging.getLogger(__name__)


class GenerativeClient(Protocol):
    """Interface for a generative model endpoint.

    Implementations raise QuotaExceededError on rate limiting and
    ServiceError on any other failure.
    """

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str | None = None,
        json_output: bool = False,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> str:
        """Return the model's text output."""


@dataclass
class NutritionAssistantService:
    """Service that prompts the model and normalizes its output."""

    client: GenerativeClient
    model: str
    chat_temperature: float = 0.7
    chat_max_tokens: int = 2048

    async def analyze_food_image(self, image: bytes | str) -> list[Ingredient]:
        """Detect food items with macros in a photo."""
        image_bytes = decode_image(image) if isinstance(image, str) else image
        if not image_bytes:
            raise ValidationError("No image provided")
        text = await self.client.generate(
            model=self.model,
            prompt=ANALYZE_PROMPT,
            image_data_url=_to_data_url(image_bytes),
            json_output=True,
        )
        data = _load_json(text or "[]")
        try:
            items = _INGREDIENTS.validate_python(_unwrap_items(data))
        except PydanticValidationError as exc:
            raise ServiceError("AI returned an unexpected analysis format") from exc
        return [Ingredient(**item.model_dump()) for item in items]

    async def estimate_nutrition(self, name: str, portion: str) -> NutritionEstimate:
        """Estimate macros for a food and portion description."""
        if not (name or "").strip():
            raise ValidationError("Food name is required")
        text = await self.client.generate(
            model=self.model,
            prompt=ESTIMATE_PROMPT.format(name=name, portion=portion or ""),
            json_output=True,
        )
        data = _load_json(text or "{}")
        if isinstance(data, list) and data:
            data = data[0]
        try:
            return NutritionEstimate.model_validate(data)
        except PydanticValidationError as exc:
            raise ServiceError("AI returned an unexpected estimate format") from exc

    async def chat(self, message: str, context: str | None = None) -> str:
        """Answer a nutrition question in plain text."""
        if not (message or "").strip():
            raise ValidationError("Message is required")
        prompt = CHAT_PROMPT
        if context:
            prompt += f"User context: {context}\n\n"
        prompt += f"User question: {message}"
        text = await self.client.generate(
            model=self.model,
            prompt=prompt,
            temperature=self.chat_temperature,
            max_tokens=self.chat_max_tokens,
        )
        reply = strip_markdown(text or "")
        if not reply:
            _logger.warning("AI chat returned an empty reply")
            raise ServiceError("AI returned an empty response")
        return reply


def decode_image(image: str) -> bytes:
    """Decode a base64 string or data URI into bytes."""
    raw = _DATA_URI_PREFIX.sub("", image.strip())
    try:
        return base64.b64decode(raw, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("Image must be base64 encoded") from exc


def strip_markdown(text: str) -> str:
    """Remove common Markdown markers from model output."""
    cleaned = text.replace("**", "").replace("*", "")
    cleaned = re.sub(r"#{2,}", "", cleaned)
    cleaned = cleaned.replace("`", "")
    cleaned = _MARKDOWN_LINK.sub(r"\1", cleaned)
    return cleaned.strip()


def _load_json(text: str) -> object:
    cleaned = _CODE_FENCE.sub("", text).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ServiceError("AI returned invalid JSON") from exc


def _unwrap_items(data: object) -> list[object]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in _WRAPPER_KEYS:
            if isinstance(data.get(key), list):
                return data[key]
        if "name" in data:
            return [data]
        return []
    raise ServiceError("AI returned an unexpected analysis format")


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
