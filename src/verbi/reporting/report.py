"""Report data models for translation and validation runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class TranslationStats:
    """Per-locale outcome of a translation run."""

    locale: str
    total: int = 0
    translated: int = 0
    cached: int = 0
    already_translated: int = 0
    deleted: int = 0
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: datetime | None = None

    @property
    def duration_seconds(self) -> float:
        if self.finished_at is None:
            return 0.0
        return (self.finished_at - self.started_at).total_seconds()

    def finish(self) -> None:
        self.finished_at = datetime.now()

    def to_dict(self) -> dict:
        return {
            "locale": self.locale,
            "total": self.total,
            "translated": self.translated,
            "cached": self.cached,
            "already_translated": self.already_translated,
            "deleted": self.deleted,
            "duration_seconds": self.duration_seconds,
        }


@dataclass
class ValidationIssue:
    """An error (``icu``, ``placeholder``, ``glossary``, ``missing``) or a
    warning (``length``) found for one key."""

    key: str
    type: str
    message: str
    source_text: str | None = None
    translated_text: str | None = None

    def to_dict(self) -> dict:
        data = {"key": self.key, "type": self.type, "message": self.message}
        if self.source_text is not None:
            data["source_text"] = self.source_text
        if self.translated_text is not None:
            data["translated_text"] = self.translated_text
        return data


# Error types that make a locale fail validation. Glossary misses are reported only.
BLOCKING_ERROR_TYPES = frozenset({"icu", "placeholder", "missing"})


@dataclass
class ValidationReport:
    locale: str
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)
    total: int = 0
    valid: int = 0
    invalid: int = 0
    missing: int = 0

    @property
    def has_blocking_errors(self) -> bool:
        return any(e.type in BLOCKING_ERROR_TYPES for e in self.errors)

    @property
    def stats(self) -> dict:
        return {
            "total": self.total,
            "valid": self.valid,
            "invalid": self.invalid,
            "missing": self.missing,
        }

    def to_dict(self) -> dict:
        return {
            "locale": self.locale,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "stats": self.stats,
        }
