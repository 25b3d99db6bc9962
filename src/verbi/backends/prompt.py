"""Prompt construction and response parsing shared by the LLM backends."""

from __future__ import annotations

import json
import re

from verbi.backends.base import TranslationRequest
from verbi.translation.glossary import Glossary

_RE_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")


def build_system_prompt(
    source_locale: str,
    target_locale: str,
    glossary: Glossary | None = None,
) -> str:
    glossary_text = ""
    if glossary:
        lines = []
        for term in glossary:
            rendered = term.translation.get(target_locale) if term.translation else None
            if rendered and not term.keep:
                lines.append(f"- {term.term} -> {rendered}")
            else:
                lines.append(f"- {term.term}")
        glossary_text = "\n\nGlossary terms (preserve exactly):\n" + "\n".join(lines)

    return f"""You are a professional translator specializing in software localization.

Your task: Translate texts from {source_locale} to {target_locale}.

CRITICAL RULES:
1. Preserve ALL ICU MessageFormat syntax exactly: {{variable}}, {{count, plural, one {{#}} other {{#}}}}, {{gender, select, male {{...}} female {{...}}}}
2. Keep placeholders identical - do not translate variable names
3. Maintain the same tone, formality, and style as the source
4. Preserve whitespace and line breaks
5. Return ONLY valid JSON in this exact format:
{{
  "translations": [
    {{"key": "original.key", "text": "translated text"}},
    ...
  ]
}}{glossary_text}

Do NOT include any explanations, markdown, or additional text outside the JSON structure."""


def build_user_prompt(requests: list[TranslationRequest]) -> str:
    items = []
    for req in requests:
        item = {"key": req.key, "text": req.source_text}
        if req.context:
            item["context"] = req.context
        items.append(item)
    return json.dumps(items, indent=2, ensure_ascii=False)


def _load_json(content: str):
    try:
        return json.loads(content.strip())
    except ValueError:
        pass
    match = _RE_JSON_OBJECT.search(content)
    if not match:
        raise ValueError("No JSON found in response")
    return json.loads(match.group(0))


def parse_ai_response(content: str) -> list[dict[str, str]]:
    """Extract ``[{"key", "text"}, ...]`` from a model reply.

    Accepts a bare array, ``{"translations": [...]}``, ``{"results": [...]}``
    or a flat ``{key: text}`` object.
    """
    try:
        parsed = _load_json(content)

        if isinstance(parsed, dict):
            for wrapper in ("translations", "results"):
                if isinstance(parsed.get(wrapper), list):
                    parsed = parsed[wrapper]
                    break
            else:
                return [{"key": k, "text": str(v)} for k, v in parsed.items()]

        if not isinstance(parsed, list):
            raise ValueError("Invalid response format")

        items = []
        for entry in parsed:
            if not isinstance(entry, dict) or "key" not in entry or "text" not in entry:
                raise ValueError(f"Invalid translation entry: {entry!r}")
            items.append({"key": str(entry["key"]), "text": str(entry["text"])})
        return items

    except ValueError as e:
        raise ValueError(f"Failed to parse AI response: {e}") from e
