"""Anthropic Messages API translation backend."""

from __future__ import annotations

import logging

from verbi.backends.base import TranslationBackend, TranslationRequest, TranslationResponse
from verbi.backends.prompt import build_system_prompt, build_user_prompt, parse_ai_response

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-haiku-20240307"
DEFAULT_MAX_TOKENS = 4096
DEFAULT_MAX_RETRIES = 3


class AnthropicBackend(TranslationBackend):
    """Translates a whole batch in one message exchange."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_url: str | None = None,
    ) -> None:
        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "Anthropic backend requires the 'anthropic' package. "
                "Install it with: pip install verbi[anthropic]"
            ) from None
        self.model = model
        self.max_tokens = max_tokens
        self._client = anthropic.AsyncAnthropic(
            api_key=api_key,
            max_retries=max_retries,
            base_url=base_url,
        )

    async def translate(self, requests: list[TranslationRequest]) -> list[TranslationResponse]:
        if not requests:
            return []

        first = requests[0]
        logger.debug("Translating %d texts with Anthropic (%s)", len(requests), self.model)

        response = await self._client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=build_system_prompt(first.source_locale, first.target_locale, first.glossary),
            messages=[{"role": "user", "content": build_user_prompt(requests)}],
        )

        block = response.content[0] if response.content else None
        if block is None or block.type != "text":
            raise ValueError("Unexpected response type from Anthropic")

        return [
            TranslationResponse(
                key=t["key"],
                text=t["text"],
                confidence=0.95,
                metadata={"provider": self.name, "model": self.model},
            )
            for t in parse_ai_response(block.text)
        ]

    async def validate_config(self) -> bool:
        try:
            await self._client.messages.create(
                model=self.model,
                max_tokens=10,
                messages=[{"role": "user", "content": "test"}],
            )
        except Exception as e:
            logger.error("Anthropic configuration validation failed: %s", e)
            return False
        logger.info("Anthropic configuration validated successfully")
        return True
