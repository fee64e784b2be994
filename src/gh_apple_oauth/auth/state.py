"""CSRF state generation and an in-process state store."""

from __future__ import annotations

import secrets
import time
from collections.abc import Callable

# 16 bytes -> 128 bits, hex keeps the token free of separators
_STATE_BYTES = 16


def create_state() -> str:
    """Generate a cryptographically random OAuth state string."""
    return secrets.token_hex(_STATE_BYTES)


class MemoryStateStore:
    """Dict-backed StateStore with per-entry expiry.

    Suitable for tests and single-process callers that key the store per
    user-agent themselves.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}

    def set(self, key: str, value: str, max_age: int) -> None:
        self._entries[key] = (value, self._clock() + max_age)

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
