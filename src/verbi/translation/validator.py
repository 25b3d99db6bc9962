"""Post-translation checks: ICU/placeholder parity, glossary, length ratio."""

from __future__ import annotations

from typing import TYPE_CHECKING

from verbi.reporting.report import ValidationIssue, ValidationReport
from verbi.translation.icu import (
    extract_simple_placeholders,
    placeholder_diff,
    validate_icu_parity,
)

if TYPE_CHECKING:
    from verbi.config import VerbiConfig

MIN_LENGTH_RATIO = 0.33
MAX_LENGTH_RATIO = 3.0


def validate_translations(
    source_messages: dict[str, str],
    target_messages: dict[str, str],
    locale: str,
    config: VerbiConfig,
) -> ValidationReport:
    """Check every source key against its translation.

    ICU and placeholder failures count the key invalid and skip the remaining
    checks for it. Glossary misses are recorded as errors without
    invalidating the key; unusual length ratios only produce warnings.
    """
    report = ValidationReport(locale=locale, total=len(source_messages))
    validate = config.validate
    kept_terms = config.glossary.kept_terms()

    for key, source_text in source_messages.items():
        target_text = target_messages.get(key)

        if not target_text:
            report.missing += 1
            if validate.fail_on_missing:
                report.errors.append(ValidationIssue(
                    key=key,
                    type="missing",
                    message=f"Missing translation for key: {key}",
                    source_text=source_text,
                ))
            continue

        if validate.icu:
            result = validate_icu_parity(source_text, target_text)
            if not result.valid:
                report.invalid += 1
                report.errors.append(ValidationIssue(
                    key=key,
                    type="icu",
                    message="; ".join(result.errors),
                    source_text=source_text,
                    translated_text=target_text,
                ))
                continue
        elif validate.placeholders:
            problems = placeholder_diff(
                extract_simple_placeholders(source_text),
                extract_simple_placeholders(target_text),
            )
            if problems:
                report.invalid += 1
                report.errors.append(ValidationIssue(
                    key=key,
                    type="placeholder",
                    message="; ".join(problems),
                    source_text=source_text,
                    translated_text=target_text,
                ))
                continue

        for term in kept_terms:
            if term in source_text and term not in target_text:
                report.errors.append(ValidationIssue(
                    key=key,
                    type="glossary",
                    message=f'Glossary term "{term}" not preserved in translation',
                    source_text=source_text,
                    translated_text=target_text,
                ))

        if source_text:
            ratio = len(target_text) / len(source_text)
            if ratio > MAX_LENGTH_RATIO or ratio < MIN_LENGTH_RATIO:
                report.warnings.append(ValidationIssue(
                    key=key,
                    type="length",
                    message=(
                        "Translation length significantly different "
                        f"({round(ratio * 100)}% of original)"
                    ),
                ))

        report.valid += 1

    return report
