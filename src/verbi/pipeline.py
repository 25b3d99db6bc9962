"""Shared pipeline logic: scan sources, translate catalogs, validate results.

Used by the CLI. Every step is a plain function taking the resolved config;
progress is reported through callbacks so the caller decides how to render it.
"""

from __future__ import annotations

import fnmatch
import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from verbi.backends import create_provider
from verbi.backends.base import TranslationBackend, TranslationRequest, TranslationResponse
from verbi.config import VerbiConfig
from verbi.core.catalog import build_catalogs, load_catalog, load_source_catalog, save_catalog
from verbi.core.parser import ExtractedMessage, parse_file
from verbi.errors import BatchError, SourceParseError
from verbi.reporting.report import TranslationStats, ValidationReport
from verbi.translation.batcher import BatchProcessor, BatchProgress
from verbi.translation.cache import Cache, CacheWrite
from verbi.translation.differ import DiffItem, DiffStatus, diff_catalogs, filter_items_for_translation
from verbi.translation.retry import with_retry
from verbi.translation.validator import validate_translations

__all__ = [
    "ScanResult",
    "LocaleStatus",
    "create_provider",
    "discover_files",
    "scan_project",
    "run_scan",
    "translation_status",
    "translate_locale",
    "translate_all",
    "validate_locale",
]

logger = logging.getLogger(__name__)

BATCH_SIZE = 50
CONCURRENCY = 2
RETRY_ATTEMPTS = 3
RETRY_DELAY = 1.0  # seconds

_RE_BRACES = re.compile(r"\{([^{}]*)\}")

# (locale, BatchProgress) after each completed chunk
TranslateProgressCallback = Callable[[str, BatchProgress], None]


@dataclass
class ScanResult:
    """Result of scanning a project's sources."""
    messages: list[ExtractedMessage] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)
    errors: list[tuple[Path, str]] = field(default_factory=list)


@dataclass
class LocaleStatus:
    locale: str
    total: int
    missing: int
    has_catalog: bool

    @property
    def translated(self) -> int:
        return self.total - self.missing


# ── File discovery ──


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives: ``*.{ts,tsx}`` -> ``*.ts``, ``*.tsx``."""
    match = _RE_BRACES.search(pattern)
    if not match:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end():]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(head + option + tail))
    return expanded


def _is_excluded(relative: str, patterns: list[str]) -> bool:
    for pattern in patterns:
        for candidate in expand_braces(pattern):
            if fnmatch.fnmatchcase(relative, candidate):
                return True
            # "**/" also matches zero directories
            if candidate.startswith("**/") and fnmatch.fnmatchcase(relative, candidate[3:]):
                return True
    return False


def discover_files(config: VerbiConfig, project_root: Path | None = None) -> list[Path]:
    """Files under the project root matching ``include`` and not ``exclude``, sorted."""
    root = (project_root or config.root).resolve()
    found: set[Path] = set()

    for pattern in config.include:
        for expanded in expand_braces(pattern):
            for path in root.glob(expanded):
                if not path.is_file():
                    continue
                relative = path.relative_to(root).as_posix()
                if not _is_excluded(relative, config.exclude):
                    found.add(path)

    return sorted(found)


# ── Scan ──


def scan_project(config: VerbiConfig, project_root: Path | None = None) -> ScanResult:
    """Parse every discovered file and collect unique messages.

    A file that fails to parse is logged and recorded in ``errors``; the scan
    continues with the remaining files. Messages are deduplicated by key: the
    last occurrence wins but keeps the position of the first.
    """
    root = (project_root or config.root).resolve()
    result = ScanResult(files=discover_files(config, root))
    logger.info("Found %d files to scan", len(result.files))

    unique: dict[str, ExtractedMessage] = {}
    for path in result.files:
        try:
            messages = parse_file(path, root)
        except (SourceParseError, OSError, UnicodeDecodeError) as e:
            logger.error("Skipping %s: %s", path, e)
            result.errors.append((path, str(e)))
            continue

        for msg in messages:
            previous = unique.get(msg.key)
            if previous is not None and previous.text != msg.text:
                logger.warning(
                    "Key %s collides: %r (%s:%d) replaced by %r (%s:%d)",
                    msg.key,
                    previous.text, previous.location.file, previous.location.line,
                    msg.text, msg.location.file, msg.location.line,
                )
            unique[msg.key] = msg

    result.messages = list(unique.values())
    logger.info("Extracted %d unique messages", len(result.messages))
    return result


def run_scan(config: VerbiConfig, project_root: Path | None = None) -> ScanResult:
    """Scan the project and write the source-locale catalogs."""
    result = scan_project(config, project_root)
    paths = build_catalogs(result.messages, config)
    logger.info("Wrote %d catalog files to %s", len(paths), config.messages_dir / config.source_locale)
    return result


def translation_status(messages: list[ExtractedMessage], config: VerbiConfig) -> list[LocaleStatus]:
    """Count source keys without a translation, per target locale."""
    source_keys = {m.key for m in messages}
    statuses = []
    for locale in config.target_locales:
        target = load_catalog(config.messages_dir, locale)
        missing = sum(1 for key in source_keys if key not in target)
        statuses.append(LocaleStatus(
            locale=locale,
            total=len(source_keys),
            missing=missing,
            has_catalog=bool(target),
        ))
    return statuses


# ── Translate ──


async def translate_locale(
    locale: str,
    config: VerbiConfig,
    provider: TranslationBackend,
    cache: Cache,
    on_progress: TranslateProgressCallback | None = None,
) -> TranslationStats:
    """Bring one target catalog up to date with the source catalog.

    Items the diff marks new or changed are looked up in the cache first; the
    rest go to ``provider`` in chunks. Each finished chunk is committed to the
    in-memory catalog and the cache right away, and the catalog is written
    even when a chunk fails, so a rerun only pays for what is left.

    Raises:
        BatchError: a chunk still failed after retries.
    """
    logger.info("Translating to %s...", locale)
    stats = TranslationStats(locale=locale)

    source = load_source_catalog(config.messages_dir, config.source_locale)
    target = load_catalog(config.messages_dir, locale)
    stats.total = len(source)
    stats.already_translated = len(target)

    diff = diff_catalogs(source, target)
    stats.deleted = sum(1 for item in diff if item.status is DiffStatus.deleted)
    if stats.deleted:
        logger.info("%s: %d keys no longer in source (kept)", locale, stats.deleted)

    to_translate = filter_items_for_translation(diff)
    if not to_translate:
        logger.info("%s: all %d messages up to date", locale, stats.total)
        stats.already_translated = stats.total
        stats.finish()
        return stats

    logger.info("%s: found %d texts to translate", locale, len(to_translate))

    uncached: list[DiffItem] = []
    for item in to_translate:
        hit = await cache.get(item.key, config.source_locale, locale, item.text, config.glossary)
        if hit:
            target[item.key] = hit
            stats.cached += 1
            logger.debug("Cache hit for %s", item.key)
        else:
            uncached.append(item)

    if uncached:
        logger.info("%s: translating %d texts via %s", locale, len(uncached), provider.name)

        def _on_retry(attempt: int, error: BaseException) -> None:
            logger.warning("Translation retry %d: %s", attempt, error)

        async def _translate_chunk(chunk: list[DiffItem]) -> list[TranslationResponse]:
            requests = [
                TranslationRequest(
                    key=item.key,
                    source_text=item.text,
                    source_locale=config.source_locale,
                    target_locale=locale,
                    glossary=config.glossary,
                )
                for item in chunk
            ]
            responses = await with_retry(
                lambda: provider.translate(requests),
                max_attempts=RETRY_ATTEMPTS,
                delay=RETRY_DELAY,
                backoff="exponential",
                on_retry=_on_retry,
            )

            # Commit this chunk before the next wave starts
            texts = {item.key: item.text for item in chunk}
            writes = []
            for response in responses:
                if response.key not in texts:
                    logger.warning("Provider returned unknown key %r, ignoring", response.key)
                    continue
                target[response.key] = response.text
                writes.append(CacheWrite(
                    response.key, config.source_locale, locale,
                    texts[response.key], config.glossary, response.text,
                ))
            await cache.set_many(writes)
            stats.translated += len(writes)
            return responses

        processor = BatchProcessor(
            _translate_chunk,
            batch_size=BATCH_SIZE,
            concurrency=CONCURRENCY,
            on_progress=(lambda p: on_progress(locale, p)) if on_progress else None,
        )

        try:
            await processor.process(uncached)
        except BatchError:
            path = save_catalog(config.messages_dir, locale, target)
            logger.error(
                "%s: translation failed, saved %d completed translations to %s",
                locale, stats.translated, path,
            )
            raise

    save_catalog(config.messages_dir, locale, target)
    stats.finish()
    logger.info(
        "%s: translated %d new, %d from cache, %d existing",
        locale, stats.translated, stats.cached, stats.already_translated,
    )
    return stats


async def translate_all(
    config: VerbiConfig,
    provider: TranslationBackend,
    cache: Cache,
    locales: list[str] | None = None,
    on_progress: TranslateProgressCallback | None = None,
) -> list[TranslationStats]:
    """Translate each locale in turn (all target locales by default)."""
    results = []
    for locale in locales or config.locales:
        if locale == config.source_locale:
            logger.debug("Skipping source locale %s", locale)
            continue
        results.append(await translate_locale(locale, config, provider, cache, on_progress))
    return results


# ── Validate ──


def validate_locale(config: VerbiConfig, locale: str) -> ValidationReport:
    """Check a target catalog against the current source catalog."""
    source = load_source_catalog(config.messages_dir, config.source_locale)
    target = load_catalog(config.messages_dir, locale)
    return validate_translations(source, target, locale, config)
