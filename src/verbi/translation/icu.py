"""ICU MessageFormat validation and placeholder parity checks.

Messages are parsed with :mod:`pyicumessageformat`. Its AST is a list of
literal strings and dict nodes; every argument node carries a ``name``, and
``plural``/``selectordinal``/``select`` nodes hold their branches under
``options``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from pyicumessageformat import Parser

_RE_SIMPLE_PLACEHOLDER = re.compile(r"\{([^}]+)\}")

_parser = Parser({"require_other": True, "allow_tags": False})


class ICUSyntaxError(ValueError):
    """The message is not valid ICU MessageFormat."""


def parse_icu(text: str) -> list:
    """Parse a message into its AST. Raises ICUSyntaxError."""
    try:
        return _parser.parse(text)
    except (SyntaxError, ValueError) as e:
        raise ICUSyntaxError(str(e)) from e


def extract_placeholders(ast: list) -> list[str]:
    """Argument names in first-seen order, including those nested in branches."""
    seen: dict[str, None] = {}

    def visit(nodes: list) -> None:
        for node in nodes:
            if not isinstance(node, dict):
                continue
            name = node.get("name")
            if name is not None:
                seen.setdefault(name)
            for branch in (node.get("options") or {}).values():
                visit(branch)

    visit(ast)
    return list(seen)


def extract_simple_placeholders(text: str) -> list[str]:
    """Contents of every ``{...}`` without grammar awareness."""
    return _RE_SIMPLE_PLACEHOLDER.findall(text)


@dataclass
class ICUValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    placeholders: list[str] = field(default_factory=list)


def validate_icu(text: str) -> ICUValidationResult:
    try:
        placeholders = extract_placeholders(parse_icu(text))
    except ICUSyntaxError as e:
        return ICUValidationResult(valid=False, errors=[f"Invalid ICU syntax: {e}"])
    return ICUValidationResult(valid=True, placeholders=placeholders)


def placeholder_diff(source: list[str], translation: list[str]) -> list[str]:
    """``Missing: ...`` / ``Extra: ...`` messages for two placeholder lists."""
    missing = [p for p in source if p not in translation]
    extra = [p for p in translation if p not in source]
    errors = []
    if missing:
        errors.append(f"Missing: {', '.join(missing)}")
    if extra:
        errors.append(f"Extra: {', '.join(extra)}")
    return errors


def validate_icu_parity(source: str, translation: str) -> ICUValidationResult:
    """Both messages must parse and reference the same placeholders."""
    src = validate_icu(source)
    dst = validate_icu(translation)

    errors: list[str] = []
    if not src.valid:
        errors.append("Source has invalid ICU syntax")
    if not dst.valid:
        errors.append("Translation has invalid ICU syntax")
    errors.extend(placeholder_diff(src.placeholders, dst.placeholders))

    return ICUValidationResult(valid=not errors, errors=errors, placeholders=dst.placeholders)
