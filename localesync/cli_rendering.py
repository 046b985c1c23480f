"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
per-document progress, and run summaries.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import PipelineStageError
from .models.datatypes import DocumentResult, RunReport


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_document_result(position: int, total: int, result: DocumentResult) -> None:
    """Print one deterministic progress row for a processed document."""

    target = str(result.target_path) if result.target_path is not None else "-"
    line = (
        f"[{position}/{total}] {result.status} locale={result.target_locale} "
        f"units={result.unit_count} source={result.source_path} target={target}"
    )
    if result.template_policy is not None:
        line += f" template={result.template_policy}"
    if result.status in {"failed", "skipped"}:
        typer.secho(f"{line} reason={result.detail}", fg=typer.colors.YELLOW)
        return
    typer.echo(line)


def echo_run_summary(report: RunReport) -> None:
    """Print run-level document, unit, provider, and cache counters."""

    typer.echo(f"Source locale: {report.source_locale}")
    typer.echo(f"Target locales: {', '.join(report.target_locales)}")
    typer.echo(f"Provider: {report.provider}{' (dry run)' if report.dry_run else ''}")
    if report.dry_run:
        typer.echo(f"Documents collected: {report.count('dry_run')}")
    else:
        typer.echo(f"Documents synced: {report.count('synced')}")
    typer.echo(f"Documents skipped: {report.count('skipped')}")
    typer.echo(f"Documents failed: {report.count('failed')}")
    typer.echo(f"Text units: {report.total_units}")
    if report.dry_run:
        return
    typer.echo(f"Provider calls: {report.provider_calls}")
    typer.echo(f"Cache hits/misses: {report.cache_hits}/{report.cache_misses}")
    typer.echo(f"Retries: {report.retry_attempts}")
    typer.echo(f"Untranslated fallbacks: {report.unit_failures}")
