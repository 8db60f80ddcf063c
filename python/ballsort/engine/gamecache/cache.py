"""Snapshot caches placed in front of game retrieval.

Game play never reads from a cache; it only calls :meth:`invalidate`
after each mutation. Reads go through :meth:`BallSortEngine.snapshot`.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Protocol

from ballsort.engine.gamestate import GameSnapshot


class BoardCache(Protocol):
    def get(self, game_id: str) -> GameSnapshot | None: ...

    def put(self, snapshot: GameSnapshot) -> None: ...

    def invalidate(self, game_id: str) -> None: ...


class NullBoardCache:
    """Caches nothing."""

    def get(self, game_id: str) -> GameSnapshot | None:
        return None

    def put(self, snapshot: GameSnapshot) -> None:
        pass

    def invalidate(self, game_id: str) -> None:
        pass


class TTLBoardCache:
    """In-process map of snapshots, each expiring *ttl* seconds after ``put``.

    Expired entries are dropped when read, and ``put`` sweeps the whole map
    at most once per *ttl* so abandoned games do not pile up.

    No locking: callers serialize mutations per game id.
    """

    def __init__(
        self, ttl: float, clock: Callable[[], float] = time.monotonic
    ) -> None:
        if ttl <= 0:
            raise ValueError(f"TTL must be positive, got {ttl}.")
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[float, GameSnapshot]] = {}
        self._next_sweep = self._clock() + ttl

    def get(self, game_id: str) -> GameSnapshot | None:
        entry = self._entries.get(game_id)
        if entry is None:
            return None
        expires_at, snapshot = entry
        if self._clock() >= expires_at:
            del self._entries[game_id]
            return None
        return snapshot

    def put(self, snapshot: GameSnapshot) -> None:
        now = self._clock()
        if now >= self._next_sweep:
            self._sweep(now)
        self._entries[snapshot.game_id] = (now + self.ttl, snapshot)

    def _sweep(self, now: float) -> None:
        expired = [
            game_id
            for game_id, (expires_at, _) in self._entries.items()
            if now >= expires_at
        ]
        for game_id in expired:
            del self._entries[game_id]
        self._next_sweep = now + self.ttl

    def invalidate(self, game_id: str) -> None:
        self._entries.pop(game_id, None)

    def __len__(self) -> int:
        return len(self._entries)
