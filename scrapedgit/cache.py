"""Bounded in-memory key/value store with per-entry expiry."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from cachetools import TLRUCache

V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class _Entry:
    value: Any
    ttl: float


def _expires_at(_key: str, entry: _Entry, now: float) -> float:
    return now + entry.ttl


class TTLStore(Generic[V]):
    """``get``/``set``/``delete`` on top of :class:`cachetools.TLRUCache`.

    Each entry carries its own time-to-live; ``default_ttl`` applies when a
    caller does not pass one. Least recently used entries are evicted once
    ``maxsize`` is reached. The store is not locked; async callers serialise
    access themselves.
    """

    def __init__(
        self,
        maxsize: int = 1024,
        default_ttl: float = 3600.0,
        *,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        if default_ttl <= 0:
            raise ValueError("default_ttl must be greater than zero")
        self.default_ttl = default_ttl
        self._entries: TLRUCache[str, _Entry] = TLRUCache(
            maxsize=maxsize, ttu=_expires_at, timer=timer
        )

    def get(self, key: str, default: V | None = None) -> V | None:
        """Return the live value for ``key`` or ``default``."""

        entry = self._entries.get(key)
        return default if entry is None else entry.value

    def set(self, key: str, value: V, ttl: float | None = None) -> None:
        """Store ``value`` for ``ttl`` seconds (``default_ttl`` when omitted)."""

        lifetime = self.default_ttl if ttl is None else ttl
        if lifetime <= 0:
            raise ValueError("ttl must be greater than zero")
        self._entries[key] = _Entry(value=value, ttl=lifetime)

    def delete(self, key: str) -> bool:
        """Remove ``key``; return ``True`` when something was removed."""

        return self._entries.pop(key, None) is not None

    def expire(self) -> None:
        """Drop every entry whose time-to-live has elapsed."""

        self._entries.expire()

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        self._entries.expire()
        return len(self._entries)


__all__ = ["TTLStore"]
