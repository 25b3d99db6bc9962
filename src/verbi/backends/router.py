"""Router backend: dispatch each request to a provider chosen by locale pair.

Rules are checked in order against ``"<source>><target>"`` (e.g. ``"en>fr"``);
``*`` in a pattern matches one locale. The first matching rule wins, then the
fallback. Mixed batches are split per locale pair, so every provider call
carries a single pair, and the parts are translated concurrently.
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass

from verbi.backends.base import TranslationBackend, TranslationRequest, TranslationResponse
from verbi.errors import NoProviderError

logger = logging.getLogger(__name__)


@dataclass
class RouterRule:
    match: list[str]
    use: TranslationBackend


def locale_pair(source_locale: str, target_locale: str) -> str:
    return f"{source_locale}>{target_locale}"


def match_pattern(pair: str, pattern: str) -> bool:
    """Full match of ``pair`` against ``pattern``; other characters are literal."""
    regex = re.escape(pattern).replace(r"\*", "[^>]+")
    return re.fullmatch(regex, pair) is not None


class RouterBackend(TranslationBackend):
    """Meta-backend that routes requests to sub-backends by locale pair."""

    name = "router"

    def __init__(
        self,
        rules: list[RouterRule],
        fallback: TranslationBackend | None = None,
    ) -> None:
        self.rules = rules
        self.fallback = fallback

    def find_provider(self, source_locale: str, target_locale: str) -> TranslationBackend:
        pair = locale_pair(source_locale, target_locale)
        for rule in self.rules:
            if any(match_pattern(pair, pattern) for pattern in rule.match):
                return rule.use
        if self.fallback is not None:
            return self.fallback
        raise NoProviderError(f"No provider found for locale pair: {pair}")

    async def translate(self, requests: list[TranslationRequest]) -> list[TranslationResponse]:
        if not requests:
            return []

        # One group per locale pair, keeping first-seen order
        groups: dict[tuple[str, str], list[TranslationRequest]] = {}
        for req in requests:
            groups.setdefault((req.source_locale, req.target_locale), []).append(req)

        routed: list[tuple[TranslationBackend, list[TranslationRequest]]] = []
        for (source_locale, target_locale), group in groups.items():
            provider = self.find_provider(source_locale, target_locale)
            logger.debug(
                "Routing %d requests for %s to %s",
                len(group), locale_pair(source_locale, target_locale), provider.name,
            )
            routed.append((provider, group))

        results = await asyncio.gather(*(provider.translate(group) for provider, group in routed))
        return [response for part in results for response in part]

    def _providers(self) -> list[TranslationBackend]:
        unique: dict[int, TranslationBackend] = {}
        for rule in self.rules:
            unique.setdefault(id(rule.use), rule.use)
        if self.fallback is not None:
            unique.setdefault(id(self.fallback), self.fallback)
        return list(unique.values())

    async def validate_config(self) -> bool:
        results = await asyncio.gather(*(p.validate_config() for p in self._providers()))
        return all(results)
