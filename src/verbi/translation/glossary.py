"""Glossary support: terms that must survive translation unchanged."""

from __future__ import annotations

import json
import tomllib
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from verbi.errors import ConfigError


@dataclass(frozen=True)
class GlossaryTerm:
    """A configured vocabulary item.

    ``keep`` terms must appear verbatim in every translation. ``translation``
    optionally maps a target locale to the preferred rendering of the term.
    """

    term: str
    keep: bool = False
    translation: dict[str, str] | None = field(default=None, compare=False, hash=False)

    def to_dict(self) -> dict:
        data: dict = {"term": self.term, "keep": self.keep}
        if self.translation:
            data["translation"] = dict(self.translation)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> GlossaryTerm:
        term = data.get("term")
        if not isinstance(term, str) or not term:
            raise ConfigError(f"Glossary entry needs a non-empty 'term': {data!r}")
        translation = data.get("translation")
        if translation is not None and not isinstance(translation, dict):
            raise ConfigError(f"Glossary 'translation' must be a table of locale = text: {term}")
        return cls(term=term, keep=bool(data.get("keep", False)), translation=translation)


@dataclass
class Glossary:
    """Ordered list of glossary terms.

    Order matters: the serialized form is part of every cache fingerprint,
    so reordering or editing terms invalidates cached translations.
    """

    terms: list[GlossaryTerm] = field(default_factory=list)

    def __iter__(self) -> Iterator[GlossaryTerm]:
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    @classmethod
    def from_entries(cls, entries: Iterable[dict]) -> Glossary:
        return cls(terms=[GlossaryTerm.from_dict(e) for e in entries])

    @classmethod
    def from_toml(cls, path: str | Path) -> Glossary:
        """Load a glossary from a TOML file.

        Expected format:
            [[terms]]
            term = "Verbi"
            keep = true

            [[terms]]
            term = "Dashboard"
            translation = { es = "Panel" }
        """
        path = Path(path)
        with open(path, "rb") as f:
            data = tomllib.load(f)

        return cls.from_entries(data.get("terms", []))

    @classmethod
    def from_multiple_toml(cls, paths: list[Path]) -> Glossary:
        """Load and merge multiple TOML files. Later files override earlier ones."""
        result = cls()
        for p in paths:
            result.merge(cls.from_toml(p))
        return result

    def merge(self, other: Glossary) -> None:
        """Merge another glossary. Other's entries replace same-term entries in place."""
        index = {t.term: i for i, t in enumerate(self.terms)}
        for term in other.terms:
            if term.term in index:
                self.terms[index[term.term]] = term
            else:
                index[term.term] = len(self.terms)
                self.terms.append(term)

    def kept_terms(self) -> list[str]:
        return [t.term for t in self.terms if t.keep]

    def serialize(self) -> str:
        """Deterministic compact JSON of the term list (used in fingerprints)."""
        return json.dumps(
            [t.to_dict() for t in self.terms],
            separators=(",", ":"),
            ensure_ascii=False,
            sort_keys=False,
        )
