"""DeepL API translation backend."""

from __future__ import annotations

import asyncio
import logging

from verbi.backends.base import TranslationBackend, TranslationRequest, TranslationResponse
from verbi.core.locale import get_language_code, normalize_locale
from verbi.errors import RetryableError

logger = logging.getLogger(__name__)

# DeepL target codes that need a region or differ from ours
_TARGET_LOCALES: dict[str, str] = {
    "en": "EN-US",
    "en-US": "EN-US",
    "en-GB": "EN-GB",
    "pt": "PT-PT",
    "pt-PT": "PT-PT",
    "pt-BR": "PT-BR",
    "zh-CN": "ZH",
    "zh-TW": "ZH",
}


def to_deepl_target(locale: str) -> str:
    normalized = normalize_locale(locale)
    return _TARGET_LOCALES.get(normalized, get_language_code(normalized).upper())


def to_deepl_source(locale: str) -> str:
    """Source languages are plain language codes in DeepL."""
    return get_language_code(locale).upper()


class DeepLBackend(TranslationBackend):
    """Translation backend using the DeepL API.

    The DeepL client is blocking, so calls run in a worker thread.
    """

    name = "deepl"

    def __init__(
        self,
        api_key: str,
        formality: str | None = None,
        preserve_formatting: bool = True,
    ) -> None:
        try:
            import deepl
        except ImportError:
            raise ImportError(
                "DeepL backend requires the 'deepl' package. "
                "Install it with: pip install verbi[deepl]"
            ) from None
        self._deepl = deepl
        self._translator = deepl.Translator(api_key)
        self.formality = formality
        self.preserve_formatting = preserve_formatting

    def _translate_sync(self, texts: list[str], source_lang: str, target_lang: str) -> list:
        options: dict = {
            "source_lang": source_lang,
            "target_lang": target_lang,
            "preserve_formatting": self.preserve_formatting,
            "tag_handling": "xml",
        }
        if self.formality:
            options["formality"] = self.formality

        try:
            result = self._translator.translate_text(texts, **options)
        except (self._deepl.QuotaExceededException, self._deepl.AuthorizationException) as e:
            raise RetryableError(f"DeepL: {e}", retryable=False) from e

        # translate_text returns a list of TextResult when given a list
        return result if isinstance(result, list) else [result]

    async def translate(self, requests: list[TranslationRequest]) -> list[TranslationResponse]:
        """Translate texts using DeepL. All requests must share one locale pair."""
        if not requests:
            return []

        first = requests[0]
        source_lang = to_deepl_source(first.source_locale)
        target_lang = to_deepl_target(first.target_locale)
        logger.debug("Translating %d texts with DeepL (%s -> %s)", len(requests), source_lang, target_lang)

        results = await asyncio.to_thread(
            self._translate_sync,
            [r.source_text for r in requests],
            source_lang,
            target_lang,
        )

        return [
            TranslationResponse(
                key=req.key,
                text=res.text,
                confidence=0.98,
                metadata={
                    "provider": self.name,
                    "detected_source_lang": getattr(res, "detected_source_lang", None),
                },
            )
            for req, res in zip(requests, results, strict=True)
        ]

    async def validate_config(self) -> bool:
        try:
            await asyncio.to_thread(self._translator.get_usage)
        except Exception as e:
            logger.error("DeepL configuration validation failed: %s", e)
            return False
        logger.info("DeepL configuration validated successfully")
        return True
