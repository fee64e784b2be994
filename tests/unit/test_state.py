"""Tests for CSRF state generation and MemoryStateStore."""

from __future__ import annotations

import re

from gh_apple_oauth.auth.state import MemoryStateStore, create_state


class TestCreateState:
    """Tests for create_state."""

    def test_state_is_32_hex_chars(self) -> None:
        """128 bits of randomness, hex encoded."""
        state = create_state()
        assert re.fullmatch(r"[0-9a-f]{32}", state)

    def test_state_has_no_separators(self) -> None:
        for _ in range(50):
            state = create_state()
            assert "-" not in state
            assert "_" not in state

    def test_consecutive_states_differ(self) -> None:
        states = {create_state() for _ in range(1000)}
        assert len(states) == 1000


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestMemoryStateStore:
    """Tests for the in-process StateStore."""

    def test_get_returns_stored_value(self) -> None:
        store = MemoryStateStore()
        store.set("ghOAuthState", "abc", max_age=600)
        assert store.get("ghOAuthState") == "abc"

    def test_get_missing_key_returns_none(self) -> None:
        assert MemoryStateStore().get("ghOAuthState") is None

    def test_delete_removes_value(self) -> None:
        store = MemoryStateStore()
        store.set("ghOAuthState", "abc", max_age=600)
        store.delete("ghOAuthState")
        assert store.get("ghOAuthState") is None
        assert len(store) == 0

    def test_delete_missing_key_is_noop(self) -> None:
        MemoryStateStore().delete("nothing-here")

    def test_entry_expires_after_max_age(self) -> None:
        clock = FakeClock()
        store = MemoryStateStore(clock=clock)
        store.set("ghOAuthState", "abc", max_age=600)

        clock.now += 599
        assert store.get("ghOAuthState") == "abc"

        clock.now += 1
        assert store.get("ghOAuthState") is None
        assert len(store) == 0

    def test_set_overwrites_previous_value(self) -> None:
        store = MemoryStateStore()
        store.set("ghOAuthState", "first", max_age=600)
        store.set("ghOAuthState", "second", max_age=600)
        assert store.get("ghOAuthState") == "second"
