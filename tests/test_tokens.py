"""Tests for token persistence on top of credential stores."""

from __future__ import annotations

import threading
from unittest.mock import MagicMock, patch

import pytest

from stickyboard.credentials import CredentialStore, MemoryCredentialStore
from stickyboard.tokens import (
    ACCESS_TOKEN_KEY,
    REFRESH_TOKEN_KEY,
    CredentialTokenStore,
    TokenPair,
    get_token_store,
)


class TestCredentialTokenStore:
    def test_load_empty(self) -> None:
        store = CredentialTokenStore(MemoryCredentialStore())
        assert store.load() == TokenPair()

    def test_save_and_load(self) -> None:
        store = CredentialTokenStore(MemoryCredentialStore())
        store.save("a1", "r1")
        assert store.load() == TokenPair("a1", "r1")

    def test_save_none_erases_slot(self) -> None:
        creds = MemoryCredentialStore()
        store = CredentialTokenStore(creds)
        store.save("a1", "r1")
        store.save(None, "r2")
        assert creds.get(ACCESS_TOKEN_KEY) is None
        assert store.load() == TokenPair(None, "r2")

    def test_save_never_writes_empty_string(self) -> None:
        creds = MagicMock(spec=CredentialStore)
        store = CredentialTokenStore(creds)
        store.save(None, "")
        creds.set.assert_not_called()
        assert creds.delete.call_count == 2

    def test_clear_removes_both(self) -> None:
        creds = MemoryCredentialStore()
        store = CredentialTokenStore(creds)
        store.save("a1", "r1")
        store.clear()
        assert not creds.exists(ACCESS_TOKEN_KEY)
        assert not creds.exists(REFRESH_TOKEN_KEY)

    def test_concurrent_saves_never_mix_pairs(self) -> None:
        store = CredentialTokenStore(MemoryCredentialStore())

        def writer(n: int) -> None:
            for _ in range(50):
                store.save(f"a{n}", f"r{n}")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        pair = store.load()
        assert pair.access is not None and pair.refresh is not None
        assert pair.access[1:] == pair.refresh[1:]


class TestTokenPair:
    def test_repr_hides_secrets(self) -> None:
        text = repr(TokenPair("secret-access", "secret-refresh"))
        assert "secret" not in text
        assert "<set>" in text

    def test_is_empty(self) -> None:
        assert TokenPair().is_empty
        assert not TokenPair(refresh="r").is_empty


class TestGetTokenStore:
    def test_memory_backend(self) -> None:
        store = get_token_store("ns", "memory")
        assert isinstance(store, CredentialTokenStore)
        assert isinstance(store.credentials, MemoryCredentialStore)

    def test_keychain_backend_requires_a_persistent_store(self) -> None:
        with patch("stickyboard.credentials.sys.platform", "win32"):
            with pytest.raises(RuntimeError, match="No system credential store"):
                get_token_store("ns", "keychain")

    def test_auto_backend_degrades_to_memory(self) -> None:
        with patch("stickyboard.credentials.sys.platform", "win32"):
            store = get_token_store("ns", "auto")
        assert isinstance(store, CredentialTokenStore)
        assert store.credentials.persistent is False
