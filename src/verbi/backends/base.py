"""Abstract base class for translation backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from verbi.translation.glossary import Glossary


@dataclass(frozen=True)
class TranslationRequest:
    key: str
    source_text: str
    source_locale: str
    target_locale: str
    context: str | None = None
    glossary: Glossary | None = field(default=None, compare=False, hash=False)


@dataclass
class TranslationResponse:
    key: str
    text: str
    confidence: float | None = None
    metadata: dict = field(default_factory=dict)


class TranslationBackend(ABC):
    """Interface for translation backends."""

    name: str = "backend"

    @abstractmethod
    async def translate(self, requests: list[TranslationRequest]) -> list[TranslationResponse]:
        """Translate a batch of requests.

        Args:
            requests: Requests to translate. Callers send one locale pair per
                batch, except through the router which splits mixed batches.

        Returns:
            One response per request key, in any order.
        """
        ...

    @abstractmethod
    async def validate_config(self) -> bool:
        """Make a cheap real call to check credentials and reachability.

        Returns False instead of raising on auth or connectivity problems.
        """
        ...
