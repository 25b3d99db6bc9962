"""Compare a source catalog against a target catalog."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DiffStatus(str, Enum):
    new = "new"
    changed = "changed"
    deleted = "deleted"


@dataclass(frozen=True)
class DiffItem:
    key: str
    text: str
    status: DiffStatus
    previous_text: str | None = None


def diff_catalogs(source: dict[str, str], target: dict[str, str]) -> list[DiffItem]:
    """Classify every key as new, changed or deleted (unchanged keys are omitted).

    ``changed`` means the target holds a value different from the current
    source text. Since a translated target normally differs from its source,
    translated keys come back as ``changed`` on every run; the translation
    cache is what keeps those from reaching a provider again.
    """
    items: list[DiffItem] = []

    for key, source_text in source.items():
        target_text = target.get(key)
        if not target_text:
            items.append(DiffItem(key=key, text=source_text, status=DiffStatus.new))
        elif target_text != source_text:
            items.append(
                DiffItem(
                    key=key,
                    text=source_text,
                    status=DiffStatus.changed,
                    previous_text=target_text,
                )
            )

    for key, target_text in target.items():
        if key not in source:
            items.append(DiffItem(key=key, text=target_text, status=DiffStatus.deleted))

    return items


def filter_items_for_translation(items: list[DiffItem]) -> list[DiffItem]:
    """Keep new and changed items. Deleted keys are reported, never purged."""
    return [i for i in items if i.status in (DiffStatus.new, DiffStatus.changed)]
