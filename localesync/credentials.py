"""Secure credential storage helpers for the localesync CLI.

Responsibilities:
- Persist Papago API credentials in an OS-backed secure credential store.
- Provide deterministic read/write/delete operations per credential.
- Avoid logging or exposing secret values in diagnostics.

Key types:
- `CredentialStore`: interface for provider credential persistence.
- `KeyringCredentialStore`: keyring-backed secure credential storage.
"""

from __future__ import annotations

from dataclasses import dataclass

import keyring
from keyring.errors import KeyringError, NoKeyringError, PasswordDeleteError


_DEFAULT_SERVICE_NAME = "localesync"

# Credential names double as runtime-source keys in `SyncConfig`.
PAPAGO_CLIENT_ID = "papago_client_id"
PAPAGO_CLIENT_SECRET = "papago_client_secret"
CREDENTIAL_NAMES = (PAPAGO_CLIENT_ID, PAPAGO_CLIENT_SECRET)


class CredentialStore:
    """Interface for secure provider credential operations."""

    def is_available(self) -> bool:
        """Return whether secure credential operations are available."""

        raise NotImplementedError

    def get(self, name: str) -> str | None:
        """Load a stored credential, when available."""

        raise NotImplementedError

    def set(self, name: str, value: str) -> None:
        """Persist a credential in secure storage."""

        raise NotImplementedError

    def clear(self, name: str) -> bool:
        """Delete a stored credential and return whether one existed."""

        raise NotImplementedError

    def secure_sources(self) -> dict[str, str]:
        """Return every stored credential keyed by name, skipping missing ones."""

        values: dict[str, str] = {}
        for name in CREDENTIAL_NAMES:
            value = self.get(name)
            if value is not None:
                values[name] = value
        return values


@dataclass(slots=True)
class KeyringCredentialStore(CredentialStore):
    """Secure credential store backed by the `keyring` package."""

    service_name: str = _DEFAULT_SERVICE_NAME

    def is_available(self) -> bool:
        """Return `True` when a usable keyring backend is configured."""

        try:
            backend = keyring.get_keyring()
        except KeyringError:
            return False
        return getattr(backend, "priority", 0) > 0

    def get(self, name: str) -> str | None:
        """Get a normalized credential from keyring, returning `None` when missing."""

        self._require_known_name(name)
        try:
            value = keyring.get_password(self.service_name, name)
        except NoKeyringError:
            return None
        if value is None:
            return None
        normalized = value.strip()
        if not normalized:
            return None
        return normalized

    def set(self, name: str, value: str) -> None:
        """Persist a normalized credential in keyring or raise when unavailable."""

        self._require_known_name(name)
        normalized = value.strip()
        if not normalized:
            raise ValueError(f"`{name}` must be a non-empty string.")
        try:
            keyring.set_password(self.service_name, name, normalized)
        except NoKeyringError as exc:
            raise RuntimeError(
                "Secure credential storage is unavailable because no keyring backend "
                "is configured. Use environment variables instead."
            ) from exc

    def clear(self, name: str) -> bool:
        """Remove a stored credential from keyring and report if one was present."""

        if self.get(name) is None:
            return False
        try:
            keyring.delete_password(self.service_name, name)
        except PasswordDeleteError:
            return False
        return True

    @staticmethod
    def _require_known_name(name: str) -> None:
        if name not in CREDENTIAL_NAMES:
            raise ValueError(f"Unknown credential `{name}`.")


def create_credential_store() -> CredentialStore:
    """Create the default secure credential store implementation."""

    return KeyringCredentialStore()
