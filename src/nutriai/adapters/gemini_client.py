"""Gemini client over the OpenAI-compatible chat completions API."""

from dataclasses import dataclass

import openai
from openai import AsyncOpenAI

from nutriai.domain.errors import QuotaExceededError, ServiceError
from nutriai.services.assistant import GenerativeClient

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


@dataclass
class OpenAICompatibleGeminiClient(GenerativeClient):
    """Generative client backed by the OpenAI SDK pointed at Gemini."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls,
        api_key: str,
        base_url: str = GEMINI_OPENAI_BASE_URL,
        timeout: float = 30.0,
    ) -> "OpenAICompatibleGeminiClient":
        """Create a client with a bounded request timeout."""
        return cls(
            client=AsyncOpenAI(
                api_key=api_key, base_url=base_url, timeout=timeout, max_retries=1
            )
        )

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
        """Send one user turn and return the reply text."""
        content: list[dict[str, object]] = [{"type": "text", "text": prompt}]
        if image_data_url:
            content.append(
                {"type": "image_url", "image_url": {"url": image_data_url}}
            )
        request_payload: dict[str, object] = {
            "model": model,
            "messages": [{"role": "user", "content": content}],
        }
        if json_output:
            request_payload["response_format"] = {"type": "json_object"}
        if temperature is not None:
            request_payload["temperature"] = temperature
        if max_tokens is not None:
            request_payload["max_tokens"] = max_tokens

        try:
            response = await self.client.chat.completions.create(**request_payload)
        except openai.RateLimitError as exc:
            raise QuotaExceededError("AI quota exhausted") from exc
        except openai.APIError as exc:
            if "quota" in str(exc).lower():
                raise QuotaExceededError("AI quota exhausted") from exc
            raise ServiceError(f"AI request failed: {exc}") from exc

        if not response.choices:
            raise ServiceError("AI returned no candidates")
        choice = response.choices[0]
        if choice.finish_reason == "content_filter":
            raise ServiceError("AI response was blocked by the safety filter")
        return choice.message.content or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
