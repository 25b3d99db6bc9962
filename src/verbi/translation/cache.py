"""Content-addressed translation cache to avoid redundant provider calls.

Entries are addressed by a fingerprint of (key, source text, source locale,
target locale, glossary). Two stores share the same contract: ``FileCache``
persists a versioned JSON document, ``MemoryCache`` lives for one process.

The file store rewrites the whole document on every mutation. Within a
process writes are serialized by a lock; two processes writing the same
cache file race and the last writer wins.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from verbi.errors import ConfigError
from verbi.translation.glossary import Glossary

if TYPE_CHECKING:
    from verbi.config import CacheConfig

logger = logging.getLogger(__name__)

CACHE_VERSION = "1.0"
CACHE_FILENAME = "translations.json"
DEFAULT_CACHE_DIR = Path(".verbi-cache")


def fingerprint(
    key: str,
    source_locale: str,
    target_locale: str,
    source_text: str,
    glossary: Glossary | None,
) -> str:
    """sha256 over key, source text, locales and the serialized glossary, in that order."""
    h = hashlib.sha256()
    h.update(key.encode("utf-8"))
    h.update(source_text.encode("utf-8"))
    h.update(source_locale.encode("utf-8"))
    h.update(target_locale.encode("utf-8"))
    h.update((glossary or Glossary()).serialize().encode("utf-8"))
    return h.hexdigest()


@dataclass
class CacheEntry:
    translation: str
    timestamp: int
    source_text: str
    target_locale: str

    def to_dict(self) -> dict:
        return {
            "translation": self.translation,
            "timestamp": self.timestamp,
            "sourceText": self.source_text,
            "targetLocale": self.target_locale,
        }

    @classmethod
    def from_dict(cls, data: dict) -> CacheEntry:
        return cls(
            translation=data["translation"],
            timestamp=int(data["timestamp"]),
            source_text=data["sourceText"],
            target_locale=data["targetLocale"],
        )


@dataclass
class CacheStats:
    total_entries: int
    size_in_bytes: int
    oldest_entry: int | None
    newest_entry: int | None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class CacheWrite:
    """One pending cache write, see :meth:`Cache.set_many`."""

    key: str
    source_locale: str
    target_locale: str
    source_text: str
    glossary: Glossary | None
    translation: str


def _now_ms() -> int:
    return int(time.time() * 1000)


class Cache(ABC):
    """Interface shared by the file and memory stores."""

    @abstractmethod
    async def get(
        self,
        key: str,
        source_locale: str,
        target_locale: str,
        source_text: str,
        glossary: Glossary | None,
    ) -> str | None:
        """Return the cached translation, or None on a miss."""
        ...

    @abstractmethod
    async def set_many(self, writes: list[CacheWrite]) -> None:
        """Store several translations as a single mutation."""
        ...

    @abstractmethod
    async def clear(self) -> int:
        """Drop every entry. Returns the number of entries removed."""
        ...

    async def set(
        self,
        key: str,
        source_locale: str,
        target_locale: str,
        source_text: str,
        glossary: Glossary | None,
        translation: str,
    ) -> None:
        await self.set_many([
            CacheWrite(key, source_locale, target_locale, source_text, glossary, translation)
        ])


class MemoryCache(Cache):
    """Volatile store with the same contract as FileCache."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    async def get(self, key, source_locale, target_locale, source_text, glossary):
        entry = self._entries.get(fingerprint(key, source_locale, target_locale, source_text, glossary))
        return entry.translation if entry else None

    async def set_many(self, writes: list[CacheWrite]) -> None:
        for w in writes:
            fp = fingerprint(w.key, w.source_locale, w.target_locale, w.source_text, w.glossary)
            self._entries[fp] = CacheEntry(w.translation, _now_ms(), w.source_text, w.target_locale)

    async def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def count(self) -> int:
        return len(self._entries)


class FileCache(Cache):
    """Persistent store: ``<cache_path>/translations.json``, loaded lazily."""

    def __init__(self, cache_path: str | Path = DEFAULT_CACHE_DIR) -> None:
        self.cache_path = Path(cache_path)
        self.cache_file = self.cache_path / CACHE_FILENAME
        self.loaded = False
        self._entries: dict[str, CacheEntry] = {}
        self._lock = asyncio.Lock()

    def _read(self) -> dict[str, CacheEntry]:
        if not self.cache_file.exists():
            return {}
        try:
            data = json.loads(self.cache_file.read_text(encoding="utf-8"))
            if data.get("version") != CACHE_VERSION:
                logger.warning(
                    "Ignoring cache %s with unsupported version %r, starting fresh",
                    self.cache_file, data.get("version"),
                )
                return {}
            return {fp: CacheEntry.from_dict(e) for fp, e in data["entries"].items()}
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Failed to load cache %s, starting fresh: %s", self.cache_file, e)
            return {}

    def _write(self, payload: str) -> None:
        self.cache_path.mkdir(parents=True, exist_ok=True)
        self.cache_file.write_text(payload, encoding="utf-8")

    async def _load(self) -> None:
        if self.loaded:
            return
        self._entries = await asyncio.to_thread(self._read)
        self.loaded = True

    async def _save(self) -> None:
        data = {
            "version": CACHE_VERSION,
            "entries": {fp: e.to_dict() for fp, e in self._entries.items()},
        }
        await asyncio.to_thread(self._write, json.dumps(data, indent=2, ensure_ascii=False))

    async def get(self, key, source_locale, target_locale, source_text, glossary):
        async with self._lock:
            await self._load()
            fp = fingerprint(key, source_locale, target_locale, source_text, glossary)
            entry = self._entries.get(fp)
            if entry is None:
                return None

            # Only reachable through a fingerprint collision or a hand-edited file
            if entry.source_text != source_text or entry.target_locale != target_locale:
                logger.warning("Dropping inconsistent cache entry for key %r", key)
                del self._entries[fp]
                await self._save()
                return None

            return entry.translation

    async def set_many(self, writes: list[CacheWrite]) -> None:
        if not writes:
            return
        async with self._lock:
            await self._load()
            for w in writes:
                fp = fingerprint(w.key, w.source_locale, w.target_locale, w.source_text, w.glossary)
                self._entries[fp] = CacheEntry(w.translation, _now_ms(), w.source_text, w.target_locale)
            await self._save()

    async def clear(self) -> int:
        async with self._lock:
            await self._load()
            count = len(self._entries)
            self._entries.clear()
            await self._save()
            return count

    async def get_stats(self) -> CacheStats:
        async with self._lock:
            await self._load()
            timestamps = [e.timestamp for e in self._entries.values()]
            serialized = json.dumps(
                {fp: e.to_dict() for fp, e in self._entries.items()},
                separators=(",", ":"),
                ensure_ascii=False,
            )
            return CacheStats(
                total_entries=len(self._entries),
                size_in_bytes=len(serialized.encode("utf-8")),
                oldest_entry=min(timestamps) if timestamps else None,
                newest_entry=max(timestamps) if timestamps else None,
            )


def get_cache(config: CacheConfig) -> Cache:
    """Build the store named by ``config.kind``. A disabled cache is volatile."""
    if not config.enabled:
        return MemoryCache()
    if config.kind == "file":
        return FileCache(config.path)
    if config.kind == "memory":
        return MemoryCache()
    raise ConfigError(f"Unknown cache kind: {config.kind}")
