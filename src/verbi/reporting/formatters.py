"""Output formatters for validation reports."""

from __future__ import annotations

import json
from pathlib import Path

from verbi.reporting.report import ValidationReport


def to_json(reports: list[ValidationReport], indent: int = 2) -> str:
    """Format reports as a JSON array."""
    return json.dumps([r.to_dict() for r in reports], indent=indent, ensure_ascii=False)


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def to_markdown(reports: list[ValidationReport]) -> str:
    """Format reports as Markdown."""
    lines = [
        "# Validation Report",
        "",
        "| Locale | Total | Valid | Invalid | Missing | Warnings |",
        "|--------|-------|-------|---------|---------|----------|",
    ]
    for r in reports:
        lines.append(
            f"| {r.locale} | {r.total} | {r.valid} | {r.invalid} | {r.missing} | {len(r.warnings)} |"
        )

    for r in reports:
        if not r.errors and not r.warnings:
            continue
        lines.extend(["", f"## {r.locale}", ""])
        for issue in r.errors:
            lines.append(f"- **{issue.type}** `{_escape_cell(issue.key)}`: {_escape_cell(issue.message)}")
        for issue in r.warnings:
            lines.append(f"- _{issue.type}_ `{_escape_cell(issue.key)}`: {_escape_cell(issue.message)}")

    return "\n".join(lines) + "\n"


def save_report(reports: list[ValidationReport], path: str | Path) -> None:
    """Save reports to file, picking the format from the extension (default JSON)."""
    path = Path(path)
    if path.suffix.lower() in (".md", ".markdown"):
        content = to_markdown(reports)
    else:
        content = to_json(reports)
    path.write_text(content, encoding="utf-8")
