"""Integration-test fixtures for deterministic provider and credential behavior."""

from __future__ import annotations

import pytest
import requests

from localesync.credentials import CredentialStore


class InMemoryCredentialStore(CredentialStore):
    """Credential store kept in memory so tests never touch the OS keyring."""

    def __init__(self, available: bool = True) -> None:
        self.available = available
        self.values: dict[str, str] = {}

    def is_available(self) -> bool:
        return self.available

    def get(self, name: str) -> str | None:
        return self.values.get(name)

    def set(self, name: str, value: str) -> None:
        if not self.available:
            raise RuntimeError("no keyring backend")
        self.values[name] = value.strip()

    def clear(self, name: str) -> bool:
        return self.values.pop(name, None) is not None


@pytest.fixture(autouse=True)
def _block_network_calls(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fail loudly if an integration test reaches a real translation endpoint."""

    def _blocked_request(method: str, url: str, **kwargs: object) -> None:
        raise AssertionError(f"Unexpected network call: {method} {url}")

    monkeypatch.setattr(requests, "request", _blocked_request)


@pytest.fixture
def credential_store(monkeypatch: pytest.MonkeyPatch) -> InMemoryCredentialStore:
    """Route CLI credential access to an in-memory store."""

    store = InMemoryCredentialStore()
    monkeypatch.setattr("localesync.cli.create_credential_store", lambda: store)
    return store
