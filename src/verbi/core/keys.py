"""Deterministic message key derivation."""

from __future__ import annotations

import hashlib
import re

_RE_SOURCE_EXT = re.compile(r"\.(tsx?|jsx?)$")
_RE_NON_WORD = re.compile(r"[^a-z0-9\s]")
_RE_VALID_KEY = re.compile(r"^[A-Za-z][A-Za-z0-9._-]*$")
_RE_INVALID_CHARS = re.compile(r"[^A-Za-z0-9._-]")

DEFAULT_READABLE_MAX_LENGTH = 30


def namespace_for_file(file: str) -> str:
    """``components/Counter.tsx`` -> ``components.Counter``."""
    return _RE_SOURCE_EXT.sub("", file).replace("/", ".")


def generate_stable_key(
    text: str,
    file: str | None = None,
    namespace: str | None = None,
) -> str:
    """``<namespace>.<first 8 hex of sha256(text)>``.

    The namespace falls back to the file path (dots for slashes), then ``global``.
    """
    ns = namespace or (namespace_for_file(file) if file else "") or "global"
    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:8]
    return f"{ns}.{digest}"


def generate_readable_key(text: str, max_length: int = DEFAULT_READABLE_MAX_LENGTH) -> str:
    """Camel-case the first four words: ``"Save your changes!"`` -> ``saveYourChanges``."""
    cleaned = _RE_NON_WORD.sub("", text.lower())
    words = cleaned.split()[:4]
    if not words:
        return generate_stable_key(text)

    key = words[0] + "".join(w[:1].upper() + w[1:] for w in words[1:])
    return key[:max_length]


def derive_key(
    text: str,
    file: str | None = None,
    namespace: str | None = None,
    policy: str = "stable",
) -> str:
    if policy == "readable":
        return generate_readable_key(text)
    return generate_stable_key(text, file=file, namespace=namespace)


def is_valid_key(key: str) -> bool:
    return bool(_RE_VALID_KEY.match(key))


def sanitize_key(key: str) -> str:
    """Replace invalid characters with ``_`` and make sure the key starts with a letter."""
    sanitized = _RE_INVALID_CHARS.sub("_", key)
    if not sanitized[:1].isascii() or not sanitized[:1].isalpha():
        sanitized = "key_" + sanitized
    return sanitized
