"""Dummy translation backend for testing: prefixes strings with a [XX] tag."""

from __future__ import annotations

from verbi.backends.base import TranslationBackend, TranslationRequest, TranslationResponse


class DummyBackend(TranslationBackend):
    """Test backend that prefixes each string with the target language tag.

    Example: "Save" -> "[FR] Save"
    """

    name = "dummy"

    async def translate(self, requests: list[TranslationRequest]) -> list[TranslationResponse]:
        return [
            TranslationResponse(
                key=r.key,
                text=f"[{r.target_locale.upper()}] {r.source_text}",
                confidence=1.0,
                metadata={"provider": self.name},
            )
            for r in requests
        ]

    async def validate_config(self) -> bool:
        return True
