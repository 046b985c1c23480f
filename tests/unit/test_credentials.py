"""Unit tests for secure credential store helpers."""

from __future__ import annotations

import pytest
from keyring.errors import NoKeyringError

from localesync import credentials
from localesync.credentials import (
    PAPAGO_CLIENT_ID,
    PAPAGO_CLIENT_SECRET,
    KeyringCredentialStore,
)


class FakeBackend:
    """Keyring backend stand-in exposing only a priority."""

    def __init__(self, priority: float) -> None:
        self.priority = priority


class FakeKeyringModule:
    """In-memory keyring stub for deterministic credential store tests."""

    def __init__(self, priority: float = 1.0) -> None:
        """Initialize fake storage dictionary."""

        self._storage: dict[tuple[str, str], str] = {}
        self._backend = FakeBackend(priority)

    def get_keyring(self) -> FakeBackend:
        """Return the configured fake backend."""

        return self._backend

    def get_password(self, service_name: str, account_name: str) -> str | None:
        """Return previously stored password if present."""

        return self._storage.get((service_name, account_name))

    def set_password(self, service_name: str, account_name: str, value: str) -> None:
        """Store password value for the service/account key."""

        self._storage[(service_name, account_name)] = value

    def delete_password(self, service_name: str, account_name: str) -> None:
        """Delete password value for the service/account key."""

        self._storage.pop((service_name, account_name), None)


class NoBackendKeyringModule(FakeKeyringModule):
    """Keyring stub behaving like an environment without any backend."""

    def get_password(self, service_name: str, account_name: str) -> str | None:
        raise NoKeyringError("no backend")

    def set_password(self, service_name: str, account_name: str, value: str) -> None:
        raise NoKeyringError("no backend")


def test_keyring_store_roundtrip_set_get_clear(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keyring store should set/get/clear Papago values via the keyring backend."""

    fake_keyring = FakeKeyringModule()
    monkeypatch.setattr(credentials, "keyring", fake_keyring)
    store = KeyringCredentialStore()

    assert store.is_available() is True
    assert store.get(PAPAGO_CLIENT_ID) is None

    store.set(PAPAGO_CLIENT_ID, "  id-123  ")
    store.set(PAPAGO_CLIENT_SECRET, "secret-456")
    assert store.get(PAPAGO_CLIENT_ID) == "id-123"
    assert store.secure_sources() == {
        PAPAGO_CLIENT_ID: "id-123",
        PAPAGO_CLIENT_SECRET: "secret-456",
    }

    assert store.clear(PAPAGO_CLIENT_ID) is True
    assert store.get(PAPAGO_CLIENT_ID) is None
    assert store.clear(PAPAGO_CLIENT_ID) is False
    assert store.secure_sources() == {PAPAGO_CLIENT_SECRET: "secret-456"}


def test_keyring_store_uses_service_name_namespace(monkeypatch: pytest.MonkeyPatch) -> None:
    """Values are stored under the configured service name."""

    fake_keyring = FakeKeyringModule()
    monkeypatch.setattr(credentials, "keyring", fake_keyring)

    KeyringCredentialStore(service_name="custom").set(PAPAGO_CLIENT_SECRET, "s")

    assert fake_keyring.get_password("custom", PAPAGO_CLIENT_SECRET) == "s"
    assert fake_keyring.get_password("localesync", PAPAGO_CLIENT_SECRET) is None


def test_keyring_store_handles_missing_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without a backend, reads degrade to `None` and writes raise a clear error."""

    monkeypatch.setattr(credentials, "keyring", NoBackendKeyringModule(priority=0))
    store = KeyringCredentialStore()

    assert store.is_available() is False
    assert store.get(PAPAGO_CLIENT_ID) is None
    assert store.clear(PAPAGO_CLIENT_ID) is False
    with pytest.raises(RuntimeError, match="no keyring backend"):
        store.set(PAPAGO_CLIENT_ID, "value")


def test_keyring_store_rejects_blank_values_and_unknown_names(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Blank secrets and unknown credential names are programming errors."""

    monkeypatch.setattr(credentials, "keyring", FakeKeyringModule())
    store = KeyringCredentialStore()

    with pytest.raises(ValueError, match="non-empty"):
        store.set(PAPAGO_CLIENT_ID, "   ")
    with pytest.raises(ValueError, match="Unknown credential"):
        store.get("openai_api_key")
