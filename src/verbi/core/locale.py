"""Locale code helpers."""

from __future__ import annotations

import re

_RE_LOCALE = re.compile(r"^[a-z]{2,3}(-[A-Z]{2})?$")

_DISPLAY_NAMES: dict[str, str] = {
    "en": "English",
    "en-US": "English (US)",
    "en-GB": "English (UK)",
    "es": "Spanish",
    "es-ES": "Spanish (Spain)",
    "es-MX": "Spanish (Mexico)",
    "fr": "French",
    "fr-FR": "French (France)",
    "fr-CA": "French (Canada)",
    "de": "German",
    "de-DE": "German (Germany)",
    "it": "Italian",
    "pt": "Portuguese",
    "pt-BR": "Portuguese (Brazil)",
    "pt-PT": "Portuguese (Portugal)",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "zh-CN": "Chinese (Simplified)",
    "zh-TW": "Chinese (Traditional)",
    "ar": "Arabic",
    "ru": "Russian",
    "pl": "Polish",
    "tr": "Turkish",
    "nl": "Dutch",
    "sv": "Swedish",
    "da": "Danish",
    "fi": "Finnish",
    "no": "Norwegian",
    "cs": "Czech",
    "el": "Greek",
    "he": "Hebrew",
    "th": "Thai",
    "vi": "Vietnamese",
    "id": "Indonesian",
    "hi": "Hindi",
}


def normalize_locale(locale: str) -> str:
    """Normalize ``en_us`` / ``EN-us`` to ``en-US``. Longer tags only get ``_`` -> ``-``."""
    normalized = locale.replace("_", "-")
    parts = normalized.split("-")
    if len(parts) == 1:
        return parts[0].lower()
    if len(parts) == 2:
        return f"{parts[0].lower()}-{parts[1].upper()}"
    return normalized


def get_language_code(locale: str) -> str:
    return locale.replace("_", "-").split("-")[0].lower()


def get_locale_display_name(locale: str) -> str:
    normalized = normalize_locale(locale)
    return _DISPLAY_NAMES.get(normalized, normalized)


def is_valid_locale(locale: str) -> bool:
    return bool(_RE_LOCALE.match(normalize_locale(locale)))
