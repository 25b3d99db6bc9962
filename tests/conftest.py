"""Shared test fixtures for verbi tests."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from verbi.config import config_from_dict
from verbi.core.parser import ExtractedMessage, Location
from verbi.translation.cache import MemoryCache

FIXTURES_DIR = Path(__file__).parent / "fixtures"

CONFIG_TOML = """\
source_locale = "en"
locales = ["en", "es", "fr"]

[provider]
name = "dummy"

[cache]
kind = "memory"

[[glossary]]
term = "Verbi"
keep = true
"""


def make_message(text: str, file: str = "components/Button.tsx", line: int = 1, column: int = 0) -> ExtractedMessage:
    """Create an ExtractedMessage keyed by its text."""
    return ExtractedMessage(key=text, text=text, location=Location(file=file, line=line, column=column))


def make_config(root: Path, **overrides):
    """Build a validated config rooted at *root* (dummy provider, memory cache)."""
    data = {
        "source_locale": "en",
        "locales": ["en", "es", "fr"],
        "provider": {"name": "dummy"},
        "cache": {"kind": "memory"},
        "glossary": [{"term": "Verbi", "keep": True}],
    }
    data.update(overrides)
    return config_from_dict(data, root=root)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A copy of the fixture app with a verbi.toml at its root."""
    root = tmp_path / "app"
    shutil.copytree(FIXTURES_DIR / "app", root)
    (root / "verbi.toml").write_text(CONFIG_TOML, encoding="utf-8")
    return root


@pytest.fixture
def config(project: Path):
    return make_config(project)


@pytest.fixture
def memory_cache() -> MemoryCache:
    return MemoryCache()
