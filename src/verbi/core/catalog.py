"""Read and write per-locale message catalogs."""

from __future__ import annotations

import json
import logging
import posixpath
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from verbi.core.keys import namespace_for_file
from verbi.core.parser import ExtractedMessage

if TYPE_CHECKING:
    from verbi.config import VerbiConfig

logger = logging.getLogger(__name__)

KEY_MAP_PATH = Path(".verbi") / "keys.map.json"
TARGET_CATALOG_NAME = "messages.json"

# Files checked (and merged) before falling back to every JSON file of a locale.
_CATALOG_CANDIDATES = ("messages.json", "root.json", "index.json")

# type alias: key -> {"message": str, "location": {...}}
MessageCatalog = dict[str, dict]


def read_json(path: Path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, data: object) -> None:
    """Write pretty JSON (two-space indent, trailing newline), creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def namespace_of(message: ExtractedMessage, strategy: str) -> str:
    file = message.location.file
    if strategy == "file":
        return namespace_for_file(file)
    if strategy == "directory":
        directory = posixpath.dirname(file)
        return directory.replace("/", ".") if directory else "root"
    if strategy == "flat":
        return "messages"
    raise ValueError(f"Unknown namespace strategy: {strategy}")


def group_by_namespace(
    messages: Iterable[ExtractedMessage],
    strategy: str,
) -> dict[str, list[ExtractedMessage]]:
    groups: dict[str, list[ExtractedMessage]] = {}
    for msg in messages:
        groups.setdefault(namespace_of(msg, strategy), []).append(msg)
    return groups


def build_catalog(messages: Iterable[ExtractedMessage]) -> MessageCatalog:
    return {
        msg.key: {"message": msg.text, "location": msg.location.to_dict()}
        for msg in messages
    }


def build_catalogs(messages: list[ExtractedMessage], config: VerbiConfig) -> list[Path]:
    """Write source-locale catalogs (one per namespace) and the debug key map.

    The source locale is regenerated wholesale: namespace files this scan did
    not produce (removed sources, a changed strategy) are deleted.
    Returns the catalog paths written.
    """
    source_dir = config.messages_dir / config.source_locale
    source_dir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []
    for namespace, msgs in group_by_namespace(messages, config.namespace_strategy).items():
        path = source_dir / f"{namespace}.json"
        write_json(path, build_catalog(msgs))
        written.append(path)
        logger.debug("Wrote %d messages to %s", len(msgs), path)

    for stale in sorted(set(source_dir.rglob("*.json")) - set(written)):
        stale.unlink()
        logger.info("Removed stale catalog %s", stale)

    write_json(
        config.messages_dir / KEY_MAP_PATH,
        [
            {
                "key": m.key,
                "text": m.text,
                "location": m.location.to_dict(),
                "explicitKey": m.explicit_key,
            }
            for m in messages
        ],
    )
    return written


def _flatten(content: dict, into: dict[str, str]) -> None:
    for key, value in content.items():
        if isinstance(value, dict) and "message" in value:
            into[key] = value["message"]
        else:
            into[key] = str(value)


def load_catalog(messages_dir: Path, locale: str) -> dict[str, str]:
    """Load a locale's catalog as a flat ``key -> message`` mapping.

    A missing locale directory yields an empty catalog.
    """
    locale_dir = messages_dir / locale
    catalog: dict[str, str] = {}

    for name in _CATALOG_CANDIDATES:
        path = locale_dir / name
        if path.is_file():
            _flatten(read_json(path), catalog)

    if not catalog and locale_dir.is_dir():
        for path in sorted(locale_dir.rglob("*.json")):
            _flatten(read_json(path), catalog)

    return catalog


def load_source_catalog(messages_dir: Path, locale: str) -> dict[str, str]:
    """Merge every namespace file of the source locale into one flat mapping."""
    catalog: dict[str, str] = {}
    locale_dir = messages_dir / locale
    if locale_dir.is_dir():
        for path in sorted(locale_dir.rglob("*.json")):
            _flatten(read_json(path), catalog)
    return catalog


def save_catalog(messages_dir: Path, locale: str, catalog: dict[str, str]) -> Path:
    """Write a target-locale catalog as ``{key: {"message": text}}``."""
    path = messages_dir / locale / TARGET_CATALOG_NAME
    write_json(path, {key: {"message": text} for key, text in catalog.items()})
    return path
