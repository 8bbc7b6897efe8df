"""Tests for the AI nutrition assistant."""

import asyncio
import base64

import pytest

from nutriai.domain.errors import QuotaExceededError, ServiceError, ValidationError
from nutriai.services.assistant import (
    NutritionAssistantService,
    decode_image,
    strip_markdown,
)
from tests.conftest import FakeGenerativeClient

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 8


def _service(client: FakeGenerativeClient) -> NutritionAssistantService:
    return NutritionAssistantService(client=client, model="gemini-2.5-flash")


def test_analyze_parses_fenced_json(generative_client) -> None:
    generative_client.replies.append(
        '```json\n[{"name": "白飯", "portion": "約150克", "calories": 195.6,'
        ' "protein": 3.5, "carbs": 43, "fat": 0.4}]\n```'
    )
    data_uri = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()

    items = asyncio.run(_service(generative_client).analyze_food_image(data_uri))

    assert len(items) == 1
    assert items[0].name == "白飯"
    assert items[0].calories == 196
    call = generative_client.calls[0]
    assert call["json_output"] is True
    assert str(call["image_data_url"]).startswith("data:image/png;base64,")


def test_analyze_accepts_wrapped_and_empty_results(generative_client) -> None:
    generative_client.replies.extend(
        ['{"items": [{"name": "Egg", "calories": 70}]}', "[]"]
    )
    service = _service(generative_client)

    wrapped = asyncio.run(service.analyze_food_image(PNG_BYTES))
    empty = asyncio.run(service.analyze_food_image(PNG_BYTES))

    assert [item.name for item in wrapped] == ["Egg"]
    assert empty == []


def test_analyze_invalid_json(generative_client) -> None:
    generative_client.replies.append("I think this is rice")

    with pytest.raises(ServiceError):
        asyncio.run(_service(generative_client).analyze_food_image(PNG_BYTES))


def test_analyze_rejects_bad_base64(generative_client) -> None:
    with pytest.raises(ValidationError):
        asyncio.run(_service(generative_client).analyze_food_image("not base64!"))
    assert generative_client.calls == []


def test_estimate_nutrition(generative_client) -> None:
    generative_client.replies.append(
        '{"calories": 250, "protein": 20.5, "carbs": 10, "fat": 12}'
    )

    estimate = asyncio.run(
        _service(generative_client).estimate_nutrition("雞胸肉", "100克")
    )

    assert estimate.calories == 250
    assert estimate.protein == 20.5
    assert '"雞胸肉"' in str(generative_client.calls[0]["prompt"])


def test_chat_strips_markdown_and_includes_context(generative_client) -> None:
    generative_client.replies.append(
        "## Tips\n**Eat** more `fiber`, see [guide](http://x)"
    )

    reply = asyncio.run(
        _service(generative_client).chat("How to eat?", context="goal: deficit")
    )

    assert reply == "Tips\nEat more fiber, see guide"
    call = generative_client.calls[0]
    assert "goal: deficit" in str(call["prompt"])
    assert call["temperature"] == 0.7
    assert call["max_tokens"] == 2048


def test_chat_empty_reply_is_service_error(generative_client) -> None:
    generative_client.replies.append("   ")

    with pytest.raises(ServiceError):
        asyncio.run(_service(generative_client).chat("hi"))


def test_quota_errors_propagate(generative_client) -> None:
    generative_client.error = QuotaExceededError("quota")

    with pytest.raises(QuotaExceededError):
        asyncio.run(_service(generative_client).estimate_nutrition("rice", "1 bowl"))


def test_helpers() -> None:
    assert decode_image(base64.b64encode(b"abc").decode()) == b"abc"
    assert strip_markdown("*a* **b**") == "a b"
