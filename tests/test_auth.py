"""Tests for the credential gate."""

from pathlib import Path

import pytest

from training_ledger.auth import CredentialGate
from training_ledger.config import AuthConfig
from training_ledger.storage.blob_store import AUTH_KEY, BlobStore


@pytest.fixture
def store(tmp_path: Path) -> BlobStore:
    return BlobStore(tmp_path)


@pytest.fixture
def gate(store: BlobStore) -> CredentialGate:
    return CredentialGate(AuthConfig(username="Trainer", password="Calendar1"), store)


class TestLogin:
    def test_username_case_insensitive(self, gate: CredentialGate) -> None:
        assert gate.login("tRAINER", "Calendar1") is True

    def test_password_exact(self, gate: CredentialGate) -> None:
        assert gate.login("trainer", "calendar1") is False
        assert gate.login("trainer", "Calendar1 ") is False

    def test_rejected_login_keeps_gate_closed(self, gate: CredentialGate) -> None:
        gate.login("someone", "Calendar1")

        assert gate.is_authenticated is False

    def test_success_persists(self, gate: CredentialGate, store: BlobStore) -> None:
        gate.login("trainer", "Calendar1")

        reopened = CredentialGate(gate.auth_config, store)
        assert reopened.is_authenticated is True

    def test_logout(self, gate: CredentialGate) -> None:
        gate.login("trainer", "Calendar1")
        gate.logout()

        assert gate.is_authenticated is False


class TestGateState:
    def test_starts_closed(self, gate: CredentialGate) -> None:
        assert gate.is_authenticated is False

    def test_disabled_gate_is_open(self, store: BlobStore) -> None:
        gate = CredentialGate(AuthConfig(enabled=False), store)

        assert gate.is_authenticated is True

    def test_unreadable_flag_counts_as_logged_out(self, gate: CredentialGate, store: BlobStore) -> None:
        store.put(AUTH_KEY, "not json")

        assert gate.is_authenticated is False
