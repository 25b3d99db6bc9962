"""OpenAI chat-completions translation backend."""

from __future__ import annotations

import logging

from verbi.backends.base import TranslationBackend, TranslationRequest, TranslationResponse
from verbi.backends.prompt import build_system_prompt, build_user_prompt, parse_ai_response

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.3
DEFAULT_MAX_RETRIES = 3


class OpenAIBackend(TranslationBackend):
    """Translates a whole batch in one JSON-mode chat completion."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_url: str | None = None,
    ) -> None:
        try:
            import openai
        except ImportError:
            raise ImportError(
                "OpenAI backend requires the 'openai' package. "
                "Install it with: pip install verbi[openai]"
            ) from None
        self.model = model
        self.temperature = temperature
        self._client = openai.AsyncOpenAI(
            api_key=api_key,
            max_retries=max_retries,
            base_url=base_url,
        )

    async def translate(self, requests: list[TranslationRequest]) -> list[TranslationResponse]:
        if not requests:
            return []

        first = requests[0]
        logger.debug("Translating %d texts with OpenAI (%s)", len(requests), self.model)

        response = await self._client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            messages=[
                {
                    "role": "system",
                    "content": build_system_prompt(
                        first.source_locale, first.target_locale, first.glossary
                    ),
                },
                {"role": "user", "content": build_user_prompt(requests)},
            ],
            response_format={"type": "json_object"},
        )

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ValueError("Empty response from OpenAI")

        return [
            TranslationResponse(
                key=t["key"],
                text=t["text"],
                confidence=0.95,
                metadata={"provider": self.name, "model": self.model},
            )
            for t in parse_ai_response(content)
        ]

    async def validate_config(self) -> bool:
        try:
            await self._client.models.list()
        except Exception as e:
            logger.error("OpenAI configuration validation failed: %s", e)
            return False
        logger.info("OpenAI configuration validated successfully")
        return True
