"""Project configuration loaded from ``verbi.toml``."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from verbi.core.locale import is_valid_locale
from verbi.errors import ConfigError
from verbi.translation.glossary import Glossary

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "verbi.toml"

NAMESPACE_STRATEGIES = ("file", "directory", "flat")
CACHE_KINDS = ("file", "memory")

DEFAULT_INCLUDE = [
    "src/**/*.{ts,tsx,js,jsx}",
    "app/**/*.{ts,tsx,js,jsx}",
    "components/**/*.{ts,tsx,js,jsx}",
]
DEFAULT_EXCLUDE = ["**/*.test.*", "**/*.spec.*", "**/node_modules/**"]


@dataclass
class ProviderConfig:
    """Provider selection: ``name`` picks the backend, ``config`` is passed to it."""

    name: str
    config: dict = field(default_factory=dict)


@dataclass
class CacheConfig:
    enabled: bool = True
    kind: str = "file"
    path: Path = Path(".verbi-cache")


@dataclass
class ValidationConfig:
    icu: bool = True
    placeholders: bool = True
    max_paraphrase_delta: float = 0.15
    fail_on_missing: bool = False


@dataclass
class VerbiConfig:
    """Resolved configuration. All paths are absolute."""

    source_locale: str
    locales: list[str]
    provider: ProviderConfig
    root: Path = field(default_factory=Path.cwd)
    messages_dir: Path = Path("messages")
    include: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    glossary: Glossary = field(default_factory=Glossary)
    cache: CacheConfig = field(default_factory=CacheConfig)
    validate: ValidationConfig = field(default_factory=ValidationConfig)
    namespace_strategy: str = "directory"

    @property
    def target_locales(self) -> list[str]:
        return [loc for loc in self.locales if loc != self.source_locale]


def find_config(start: Path) -> Path:
    """Return the config file for *start* (a file, or a directory holding verbi.toml)."""
    if start.is_file():
        return start
    candidate = start / CONFIG_FILENAME
    if not candidate.exists():
        raise ConfigError(f"Config file not found: {candidate}")
    return candidate


def load_config(path: Path | None = None) -> VerbiConfig:
    """Load and validate configuration from a TOML file."""
    config_path = find_config(path or Path.cwd())
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Failed to load config {config_path}: {e}") from e

    return config_from_dict(data, root=config_path.resolve().parent)


def _load_glossary(root: Path, files: list[str], entries: list[dict]) -> Glossary:
    """Glossary files in order, then inline ``[[glossary]]`` entries. Later terms win."""
    try:
        glossary = Glossary.from_multiple_toml([root / f for f in files])
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to load glossary: {e}") from e
    glossary.merge(Glossary.from_entries(entries))
    return glossary


def config_from_dict(data: dict, root: Path | None = None) -> VerbiConfig:
    """Validate a raw mapping and fill in defaults."""
    root = (root or Path.cwd()).resolve()

    source_locale = data.get("source_locale")
    if not source_locale or not isinstance(source_locale, str):
        raise ConfigError("source_locale is required and must be a string")

    locales = data.get("locales")
    if not isinstance(locales, list) or not locales:
        raise ConfigError("locales must be a non-empty array")
    for loc in [source_locale, *locales]:
        if not is_valid_locale(loc):
            logger.warning("Unusual locale code %r", loc)

    provider = data.get("provider")
    if not isinstance(provider, dict) or not isinstance(provider.get("name"), str):
        raise ConfigError("provider.name is required")
    provider_config = provider.get("config", {})
    if not isinstance(provider_config, dict):
        raise ConfigError("provider.config must be a table")

    strategy = data.get("namespace_strategy", "directory")
    if strategy not in NAMESPACE_STRATEGIES:
        raise ConfigError(
            f"namespace_strategy must be one of {', '.join(NAMESPACE_STRATEGIES)}, got {strategy!r}"
        )

    glossary_entries = data.get("glossary", [])
    if not isinstance(glossary_entries, list):
        raise ConfigError("glossary must be an array of tables")

    glossary_files = data.get("glossary_files", [])
    if not isinstance(glossary_files, list) or not all(isinstance(p, str) for p in glossary_files):
        raise ConfigError("glossary_files must be an array of paths")

    raw_cache = data.get("cache", {})
    kind = raw_cache.get("kind", "file")
    if kind not in CACHE_KINDS:
        raise ConfigError(f"cache.kind must be one of {', '.join(CACHE_KINDS)}, got {kind!r}")
    cache = CacheConfig(
        enabled=raw_cache.get("enabled", True) is not False,
        kind=kind,
        path=root / raw_cache.get("path", ".verbi-cache"),
    )

    raw_validate = data.get("validate", {})
    validate = ValidationConfig(
        icu=raw_validate.get("icu", True) is not False,
        placeholders=raw_validate.get("placeholders", True) is not False,
        max_paraphrase_delta=float(raw_validate.get("max_paraphrase_delta", 0.15)),
        fail_on_missing=bool(raw_validate.get("fail_on_missing", False)),
    )

    return VerbiConfig(
        source_locale=source_locale,
        locales=list(locales),
        provider=ProviderConfig(name=provider["name"], config=provider_config),
        root=root,
        messages_dir=root / data.get("messages_dir", "./messages"),
        include=list(data.get("include", DEFAULT_INCLUDE)),
        exclude=list(data.get("exclude", DEFAULT_EXCLUDE)),
        glossary=_load_glossary(root, glossary_files, glossary_entries),
        cache=cache,
        validate=validate,
        namespace_strategy=strategy,
    )
