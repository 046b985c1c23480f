"""Command-line interface for localesync.

Responsibilities:
- Expose user-facing commands for synchronization and cache/credential upkeep.
- Convert CLI arguments into `SyncConfig` and execute the pipeline.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
import os
from pathlib import Path
from typing import Annotated, Any

import typer

from .cli_rendering import echo_document_result, echo_run_summary, exit_with_command_error
from .cli_runtime import prompt_papago_credentials, resolve_provider_runtime_sources
from .config import (
    DEFAULT_TARGET_LOCALES,
    ConfigLoader,
    RuntimeConfigSources,
    SyncConfig,
)
from .credentials import PAPAGO_CLIENT_ID, PAPAGO_CLIENT_SECRET, create_credential_store
from .errors import PipelineStageError
from .parsing import parse_csv_list
from .pipeline import SyncPipeline
from .telemetry.logger import RunLogger
from .translation.cache import TranslationCacheStore

app = typer.Typer(
    name="localesync",
    no_args_is_help=True,
    help="Synchronize HTML content across locale trees.",
)


def _load_yaml_config(config_path: Path | None) -> SyncConfig | None:
    """Load a YAML config file when requested and map failures to stage errors."""

    if config_path is None:
        return None

    try:
        return ConfigLoader.from_yaml(config_path)
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid config file `{config_path}`: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc
    except OSError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Failed to load config file `{config_path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def _resolve_command_base_config(
    config_file: Path | None,
    root: Path | None,
    overrides: dict[str, Any],
) -> SyncConfig:
    """Resolve effective command config from YAML defaults and explicit CLI overrides."""

    loaded_config = _load_yaml_config(config_file)
    if loaded_config is None:
        if root is None:
            raise PipelineStageError(
                stage="config",
                detail="Project root is required when `--config` is not provided.",
                hint="Pass `--root <dir>` or use `--config <path.yaml>` with `root`.",
            )
        loaded_config = SyncConfig(root=root)
    elif root is not None:
        overrides["root"] = root

    explicit = {key: value for key, value in overrides.items() if value is not None}
    return replace(loaded_config, **explicit)


@app.command("sync")
def sync_command(
    root: Annotated[
        Path | None,
        typer.Option("--root", help="Project root. Required unless provided by `--config`."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with command defaults."),
    ] = None,
    source_locale: Annotated[
        str | None, typer.Option("--from", help="Source locale tag (default `kor`).")
    ] = None,
    target_locales: Annotated[
        str | None,
        typer.Option("--to", help="Comma-separated target locale tags (default `chn,vtn`)."),
    ] = None,
    scope: Annotated[
        str | None, typer.Option("--scope", help="Source sub-directory (default `esg`).")
    ] = None,
    provider: Annotated[
        str | None,
        typer.Option("--provider", help="Translation provider: google, papago, libre, argos."),
    ] = None,
    google_url: Annotated[
        str | None, typer.Option("--google-url", help="Google web endpoint override.")
    ] = None,
    libre_url: Annotated[
        str | None, typer.Option("--libre-url", help="LibreTranslate server URL.")
    ] = None,
    papago_url: Annotated[
        str | None, typer.Option("--papago-url", help="Papago NMT API URL override.")
    ] = None,
    argos_script: Annotated[
        Path | None,
        typer.Option("--argos-script", help="Argos helper script (relative to root)."),
    ] = None,
    files: Annotated[
        str | None,
        typer.Option(
            "--files",
            help="Comma-separated source paths or globs, e.g. `kor/esg/**/page.html`.",
        ),
    ] = None,
    node_concurrency: Annotated[
        int | None,
        typer.Option("--node-concurrency", min=1, help="Concurrent per-text requests (default 1)."),
    ] = None,
    request_interval_ms: Annotated[
        int | None,
        typer.Option("--req-interval-ms", min=0, help="Minimum ms between provider calls (default 800)."),
    ] = None,
    max_retries: Annotated[
        int | None,
        typer.Option("--retry", min=0, help="Retries for rate-limit/transient errors (default 5)."),
    ] = None,
    retry_base_ms: Annotated[
        int | None,
        typer.Option("--retry-base-ms", min=0, help="Backoff base in ms (default 1000)."),
    ] = None,
    page_sleep_ms: Annotated[
        int | None,
        typer.Option("--page-sleep-ms", min=0, help="Delay between documents in ms (default 1000)."),
    ] = None,
    dry_run: Annotated[
        bool | None,
        typer.Option("--dry-run/--no-dry-run", help="Collect and report only; write nothing."),
    ] = None,
    prompt_credentials: Annotated[
        bool,
        typer.Option(
            "--prompt-credentials",
            help="Prompt for Papago credentials with hidden input (never echoed).",
        ),
    ] = False,
    store_credentials: Annotated[
        bool,
        typer.Option(
            "--store-credentials/--no-store-credentials",
            help="Persist prompted credentials to secure credential storage.",
        ),
    ] = True,
) -> None:
    """Translate source-locale documents into every target locale."""

    try:
        runtime_cli_values, runtime_secure_values = resolve_provider_runtime_sources(
            provider=provider,
            google_url=google_url,
            libre_url=libre_url,
            papago_url=papago_url,
            prompt_credentials=prompt_credentials,
            store_credentials=store_credentials,
            credential_store_factory=create_credential_store,
        )
        base_config = _resolve_command_base_config(
            config_file=config_file,
            root=root,
            overrides={
                "source_locale": source_locale,
                "target_locales": parse_csv_list(target_locales) or None,
                "scope": scope,
                "argos_script": argos_script,
                "files": parse_csv_list(files) or None,
                "node_concurrency": node_concurrency,
                "request_interval_ms": request_interval_ms,
                "max_retries": max_retries,
                "retry_base_ms": retry_base_ms,
                "page_sleep_ms": page_sleep_ms,
                "dry_run": dry_run,
            },
        )
        config = replace(
            base_config,
            runtime_sources=RuntimeConfigSources(
                cli=runtime_cli_values,
                secure=runtime_secure_values,
                env=os.environ,
            ),
        )
        pipeline = SyncPipeline(
            run_logger=RunLogger(),
            document_callback=echo_document_result,
        )
        report = pipeline.run(config)
    except Exception as exc:
        exit_with_command_error("sync", exc)

    echo_run_summary(report)


@app.command("clear-cache")
def clear_cache_command(
    root: Annotated[Path, typer.Option("--root", help="Project root.")],
    target_locales: Annotated[
        str,
        typer.Option("--to", help="Comma-separated locale tags whose caches are cleared."),
    ] = ",".join(DEFAULT_TARGET_LOCALES),
) -> None:
    """Delete per-locale translation caches so glossary changes take effect."""

    locales = parse_csv_list(target_locales)
    if not locales:
        exit_with_command_error(
            "clear-cache",
            PipelineStageError(
                stage="config",
                detail="No locales given.",
                hint="Pass `--to chn,vtn` with at least one locale tag.",
            ),
        )

    store = TranslationCacheStore(SyncConfig(root=root).cache_dir)
    for locale in locales:
        try:
            removed = store.clear(locale)
        except OSError as exc:
            exit_with_command_error("clear-cache", exc)
        if removed:
            typer.echo(f"Cleared cache: {store.path_for(locale)}")
        else:
            typer.echo(f"No cache for `{locale}`.")


@app.command("credentials")
def credentials_command(
    set_papago: Annotated[
        bool,
        typer.Option(
            "--set-papago",
            help="Prompt for Papago credentials with hidden input and store them securely.",
        ),
    ] = False,
    clear_papago: Annotated[
        bool,
        typer.Option(
            "--clear-papago",
            help="Clear stored Papago credentials from secure credential storage.",
        ),
    ] = False,
) -> None:
    """Manage securely stored CLI credentials."""

    if set_papago and clear_papago:
        exit_with_command_error(
            "credentials",
            PipelineStageError(
                stage="credentials",
                detail="`--set-papago` and `--clear-papago` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_papago:
        prompted = prompt_papago_credentials()
        if set(prompted) != {PAPAGO_CLIENT_ID, PAPAGO_CLIENT_SECRET}:
            exit_with_command_error(
                "credentials",
                PipelineStageError(
                    stage="credentials",
                    detail="Both the Papago API key id and API key are required.",
                    hint="Provide non-empty values when using `--set-papago`.",
                ),
            )
        try:
            for key, value in prompted.items():
                credential_store.set(key, value)
        except Exception as exc:
            exit_with_command_error(
                "credentials",
                PipelineStageError(
                    stage="credentials",
                    detail=f"Failed to store credentials securely: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo("Papago credentials stored in secure credential storage.")
        return

    if clear_papago:
        removed = [credential_store.clear(name) for name in (PAPAGO_CLIENT_ID, PAPAGO_CLIENT_SECRET)]
        if any(removed):
            typer.echo("Stored Papago credentials cleared from secure credential storage.")
        else:
            typer.echo("No stored Papago credentials found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    typer.echo(f"Secure credential storage: {availability}")
    for name, label in (
        (PAPAGO_CLIENT_ID, "Papago API key id"),
        (PAPAGO_CLIENT_SECRET, "Papago API key"),
    ):
        status = "present" if credential_store.get(name) is not None else "not set"
        typer.echo(f"Stored {label}: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
