"""CLI interface for verbi using Typer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table

from verbi import __version__
from verbi.config import VerbiConfig, load_config
from verbi.core.locale import get_locale_display_name
from verbi.errors import ConfigError, VerbiError

app = typer.Typer(
    name="verbi",
    help="Extract, translate and validate i18n messages for JS/TS projects.",
    add_completion=False,
)
console = Console()

_verbose = False
_quiet = False

# Shown in the translate/validate error tables before truncating
_MAX_ISSUES_SHOWN = 20


def _print(msg: str, *, verbose_only: bool = False) -> None:
    """Print respecting --verbose/--quiet flags. Errors bypass --quiet."""
    if _quiet:
        return
    if verbose_only and not _verbose:
        return
    console.print(msg)


def _setup_logging() -> None:
    level = logging.DEBUG if _verbose else logging.ERROR if _quiet else logging.INFO
    logger = logging.getLogger("verbi")
    logger.handlers.clear()
    logger.addHandler(RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=_verbose,
        markup=False,
    ))
    logger.setLevel(level)


def _load(config_path: Path | None) -> VerbiConfig:
    try:
        return load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def _resolve_locales(config: VerbiConfig, locales: str | None, all_locales: bool) -> list[str]:
    if all_locales or locales is None:
        return config.target_locales
    return [loc.strip() for loc in locales.split(",") if loc.strip()]


_CONFIG_OPTION = typer.Option(
    None, "--config", "-c",
    help="Path to verbi.toml or the directory holding it. Defaults to the current directory.",
)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"verbi {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Show debug logging.",
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Only show errors.",
    ),
) -> None:
    """verbi: extract, translate and validate i18n message catalogs."""
    global _verbose, _quiet
    _verbose = verbose
    _quiet = quiet
    _setup_logging()


@app.command()
def scan(config_path: Path | None = _CONFIG_OPTION) -> None:
    """Scan source files and write the source-locale catalogs."""
    from verbi.pipeline import run_scan, translation_status

    config = _load(config_path)

    with console.status("Scanning..."):
        result = run_scan(config)

    _print(
        f"Scanned [cyan]{len(result.files)}[/cyan] files, "
        f"extracted [green]{len(result.messages)}[/green] unique messages"
    )
    _print(f"Catalogs: [cyan]{config.messages_dir / config.source_locale}[/cyan]")

    if result.errors:
        err_table = Table(title="Parse errors")
        err_table.add_column("File", style="red")
        err_table.add_column("Error")
        for path, message in result.errors:
            err_table.add_row(str(path), message)
        console.print(err_table)

    statuses = translation_status(result.messages, config)
    if statuses and not _quiet:
        table = Table(title="Translation Status")
        table.add_column("Locale", style="bold")
        table.add_column("Language")
        table.add_column("Translated", justify="right")
        table.add_column("Missing", justify="right")
        for status in statuses:
            missing = f"[yellow]{status.missing}[/yellow]" if status.missing else "[green]0[/green]"
            if not status.has_catalog:
                missing += " (no translations yet)"
            table.add_row(
                status.locale, get_locale_display_name(status.locale), str(status.translated), missing,
            )
        console.print(table)


@app.command()
def translate(
    config_path: Path | None = _CONFIG_OPTION,
    locales: str | None = typer.Option(
        None, "--locales", "-l",
        help="Comma-separated target locales (e.g. es,fr).",
    ),
    all_locales: bool = typer.Option(
        False, "--all", help="Translate every configured target locale.",
    ),
    use_dummy: bool = typer.Option(
        False, "--dummy",
        help="Use the dummy provider instead of the configured one.",
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Disable the persistent translation cache.",
    ),
    skip_validate_config: bool = typer.Option(
        False, "--skip-validate-config",
        help="Don't check provider credentials before translating.",
    ),
) -> None:
    """Translate missing and changed messages."""
    from verbi.backends.dummy import DummyBackend
    from verbi.pipeline import create_provider, translate_locale
    from verbi.translation.cache import MemoryCache, get_cache

    config = _load(config_path)

    if locales is None and not all_locales:
        console.print("[red]Error:[/red] Specify --locales or --all.")
        raise typer.Exit(1)
    targets = _resolve_locales(config, locales, all_locales)
    if not targets:
        console.print("[red]Error:[/red] No target locales to translate.")
        raise typer.Exit(1)

    try:
        provider = DummyBackend() if use_dummy else create_provider(config.provider)
        cache = MemoryCache() if no_cache else get_cache(config.cache)
    except (ConfigError, ImportError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e

    _print(f"Provider: [cyan]{provider.name}[/cyan]", verbose_only=True)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("•"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
        disable=_quiet,
    ) as progress:
        tasks: dict[str, TaskID] = {}

        def on_progress(locale, p) -> None:
            if locale not in tasks:
                tasks[locale] = progress.add_task(f"Translating {locale}", total=p.total)
            progress.update(tasks[locale], completed=p.completed)

        async def run() -> list:
            if not skip_validate_config:
                _print("Validating provider configuration...")
                if not await provider.validate_config():
                    raise ConfigError("Provider configuration is invalid. Please check your API keys.")
            results = []
            for locale in targets:
                if locale == config.source_locale:
                    continue
                results.append(await translate_locale(locale, config, provider, cache, on_progress))
            return results

        try:
            all_stats = asyncio.run(run())
        except VerbiError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1) from e

    summary = Table(title="Translation Summary")
    summary.add_column("Locale", style="bold")
    summary.add_column("Total", justify="right")
    summary.add_column("Translated", justify="right")
    summary.add_column("Cached", justify="right")
    summary.add_column("Existing", justify="right")
    summary.add_column("Deleted", justify="right")
    for stats in all_stats:
        summary.add_row(
            stats.locale,
            str(stats.total),
            f"[green]{stats.translated}[/green]",
            f"[cyan]{stats.cached}[/cyan]",
            str(stats.already_translated),
            f"[yellow]{stats.deleted}[/yellow]" if stats.deleted else "0",
        )
    if not _quiet:
        console.print(summary)

    total_new = sum(s.translated for s in all_stats)
    total_cached = sum(s.cached for s in all_stats)
    _print(f"Total translated: [green]{total_new}[/green] new, [cyan]{total_cached}[/cyan] from cache")


@app.command()
def validate(
    config_path: Path | None = _CONFIG_OPTION,
    locales: str | None = typer.Option(
        None, "--locales", "-l",
        help="Comma-separated locales to check. Defaults to all target locales.",
    ),
    report: Path | None = typer.Option(
        None, "--report", "-r",
        help="Save report to file (json/md).",
    ),
) -> None:
    """Validate translations against the source catalog."""
    from verbi.pipeline import validate_locale
    from verbi.reporting.formatters import save_report

    config = _load(config_path)
    reports = [validate_locale(config, loc) for loc in _resolve_locales(config, locales, False)]

    table = Table(title="Validation Summary")
    table.add_column("Locale", style="bold")
    table.add_column("Total", justify="right")
    table.add_column("Valid", justify="right")
    table.add_column("Invalid", justify="right")
    table.add_column("Missing", justify="right")
    table.add_column("Warnings", justify="right")
    for r in reports:
        table.add_row(
            r.locale,
            str(r.total),
            f"[green]{r.valid}[/green]",
            f"[red]{r.invalid}[/red]" if r.invalid else "0",
            f"[yellow]{r.missing}[/yellow]" if r.missing else "0",
            str(len(r.warnings)),
        )
    if not _quiet:
        console.print(table)

    issues = [(r.locale, e) for r in reports for e in r.errors]
    if issues:
        err_table = Table(title="Errors")
        err_table.add_column("Locale", style="bold")
        err_table.add_column("Key", style="dim")
        err_table.add_column("Type", style="red")
        err_table.add_column("Message")
        for locale, issue in issues[:_MAX_ISSUES_SHOWN]:
            err_table.add_row(locale, issue.key, issue.type, issue.message)
        console.print(err_table)
        if len(issues) > _MAX_ISSUES_SHOWN:
            console.print(f"[dim]... and {len(issues) - _MAX_ISSUES_SHOWN} more[/dim]")

    if report:
        save_report(reports, report)
        _print(f"Report saved: [cyan]{report}[/cyan]")

    if any(r.has_blocking_errors for r in reports):
        console.print("[red]Validation failed.[/red]")
        raise typer.Exit(1)
    _print("[green]Validation passed.[/green]")


@app.command(name="cache-info")
def cache_info(config_path: Path | None = _CONFIG_OPTION) -> None:
    """Show translation cache statistics."""
    from verbi.translation.cache import FileCache, get_cache

    config = _load(config_path)
    cache = get_cache(config.cache) if config.cache.enabled else None
    if not isinstance(cache, FileCache):
        console.print("Cache is not persistent (disabled or in-memory).")
        return

    stats = asyncio.run(cache.get_stats())
    console.print(f"Cached translations: [green]{stats.total_entries}[/green]")
    console.print(f"Size: [green]{stats.size_in_bytes}[/green] bytes")
    console.print(f"Cache location: [dim]{cache.cache_file}[/dim]")


@app.command(name="cache-clear")
def cache_clear(config_path: Path | None = _CONFIG_OPTION) -> None:
    """Clear the translation cache."""
    from verbi.translation.cache import FileCache, get_cache

    config = _load(config_path)
    cache = get_cache(config.cache) if config.cache.enabled else None
    if not isinstance(cache, FileCache):
        console.print("Cache is not persistent (disabled or in-memory).")
        return

    deleted = asyncio.run(cache.clear())
    console.print(f"Cleared [yellow]{deleted}[/yellow] cached translations.")


if __name__ == "__main__":
    app()
