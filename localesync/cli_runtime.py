"""CLI provider runtime resolution helpers.

This module isolates provider option assembly, hidden credential prompts,
and secure credential persistence from the command wiring layer.
"""

from __future__ import annotations

from typing import Callable, Protocol

import typer

from .credentials import (
    PAPAGO_CLIENT_ID,
    PAPAGO_CLIENT_SECRET,
    create_credential_store,
)
from .errors import PipelineStageError
from .parsing import normalize_optional_string


class CredentialStoreProtocol(Protocol):
    """Protocol for secure credential store operations used by CLI runtime resolution."""

    def secure_sources(self) -> dict[str, str]:
        """Return stored credentials keyed by runtime-source name."""

    def set(self, name: str, value: str) -> None:
        """Persist one credential value in secure storage."""


def _set_runtime_cli_value(
    runtime_cli_values: dict[str, str],
    key: str,
    value: str | None,
) -> None:
    """Set a normalized runtime CLI value when user input is present."""

    normalized = normalize_optional_string(value)
    if normalized is not None:
        runtime_cli_values[key] = normalized


def prompt_papago_credentials() -> dict[str, str]:
    """Prompt for Papago credentials with hidden input; blank answers are skipped."""

    values: dict[str, str] = {}
    for key, label in (
        (PAPAGO_CLIENT_ID, "Papago API key id (hidden; leave blank to skip)"),
        (PAPAGO_CLIENT_SECRET, "Papago API key (hidden; leave blank to skip)"),
    ):
        prompted = normalize_optional_string(
            typer.prompt(label, default="", hide_input=True, show_default=False)
        )
        if prompted is not None:
            values[key] = prompted
    return values


def resolve_provider_runtime_sources(
    provider: str | None,
    google_url: str | None,
    libre_url: str | None,
    papago_url: str | None,
    prompt_credentials: bool,
    store_credentials: bool,
    credential_store_factory: Callable[[], CredentialStoreProtocol] = create_credential_store,
) -> tuple[dict[str, str], dict[str, str]]:
    """Resolve CLI and secure runtime source mappings for provider configuration."""

    runtime_cli_values: dict[str, str] = {}
    _set_runtime_cli_value(runtime_cli_values, "provider", provider)
    _set_runtime_cli_value(runtime_cli_values, "google_url", google_url)
    _set_runtime_cli_value(runtime_cli_values, "libre_url", libre_url)
    _set_runtime_cli_value(runtime_cli_values, "papago_url", papago_url)

    prompted_values = prompt_papago_credentials() if prompt_credentials else {}
    runtime_cli_values.update(prompted_values)

    credential_store = credential_store_factory()
    runtime_secure_values = credential_store.secure_sources()

    if prompted_values and store_credentials:
        try:
            for key, value in prompted_values.items():
                credential_store.set(key, value)
            typer.echo("Stored Papago credentials in secure credential storage.")
        except Exception as exc:
            raise PipelineStageError(
                stage="credentials",
                detail=f"Failed to store credentials securely: {exc}",
                hint=(
                    "Install and configure a keyring backend, or rerun with "
                    "`--no-store-credentials` for one-off usage."
                ),
            ) from exc

    return runtime_cli_values, runtime_secure_values
