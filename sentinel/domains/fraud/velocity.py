"""Sliding-window velocity tracking keyed by actor identity.

Every recorded event is stored under each of its actor keys (typically the
actor id and the source address) as ``(timestamp_ms, event_id)``. Counting a
set of keys returns the number of distinct events across their union, so an
event seen under both the user and the IP counts once.
"""

import bisect
import itertools
import threading
from collections.abc import Iterable
from datetime import datetime

import structlog

from .config import VelocitySettings
from .models import VelocityResult

logger = structlog.get_logger()


def _to_ms(moment: datetime) -> float:
    return moment.timestamp() * 1000.0


def score_velocity(
    count: int,
    window_ms: int,
    max_allowed: int,
    settings: VelocitySettings | None = None,
) -> tuple[int, str | None]:
    """Map a window count to a score contribution and reason."""
    settings = settings or VelocitySettings()
    # One below the limit, never negative for max_allowed <= 1.
    near_limit = max(max_allowed - 1, 0)

    if count >= max_allowed:
        return (
            settings.limit_score,
            f"{count} transactions in {window_ms / 1000:g}s (velocity limit exceeded)",
        )
    if count > 0 and count >= near_limit:
        return settings.near_limit_score, "High transaction velocity detected"
    return 0, None


class VelocityTracker:
    """Per-key sorted windows of recent event timestamps.

    Each key's window drops entries older than the cutoff whenever that key
    is recorded or counted. Keys that are never seen again are dropped by a
    full sweep, run from ``record_and_count`` at most once per window length
    of event time. ``prune`` runs the same sweep on demand.
    """

    def __init__(self, settings: VelocitySettings | None = None) -> None:
        self._settings = settings or VelocitySettings()
        self._windows: dict[str, list[tuple[float, int]]] = {}
        self._event_ids = itertools.count(1)
        self._last_sweep_ms = float("-inf")
        self._lock = threading.Lock()

    @staticmethod
    def _keys(actor_keys: Iterable[str]) -> set[str]:
        return {key for key in actor_keys if key}

    def _evict(self, key: str, cutoff: float) -> None:
        window = self._windows.get(key)
        if not window:
            return
        drop = bisect.bisect_left(window, (cutoff, 0))
        if drop:
            del window[:drop]
        if not window:
            del self._windows[key]

    def _sweep_locked(self, cutoff: float) -> None:
        for key in list(self._windows):
            self._evict(key, cutoff)

    def _count_locked(self, keys: set[str], cutoff: float) -> int:
        events: set[int] = set()
        for key in keys:
            self._evict(key, cutoff)
            events.update(event_id for _, event_id in self._windows.get(key, ()))
        return len(events)

    def record_and_count(
        self,
        actor_keys: Iterable[str],
        now: datetime,
        window_ms: int | None = None,
        max_allowed: int | None = None,
    ) -> VelocityResult:
        """Record one event under every key and score the resulting window count.

        The count includes the event just recorded.
        """
        window_ms = window_ms if window_ms is not None else self._settings.window_ms
        max_allowed = max_allowed if max_allowed is not None else self._settings.max_transactions
        keys = self._keys(actor_keys)
        now_ms = _to_ms(now)

        with self._lock:
            event_id = next(self._event_ids)
            for key in keys:
                bisect.insort(self._windows.setdefault(key, []), (now_ms, event_id))
            count = self._count_locked(keys, now_ms - window_ms)
            if now_ms - self._last_sweep_ms >= window_ms:
                self._sweep_locked(now_ms - window_ms)
                self._last_sweep_ms = now_ms

        score, reason = score_velocity(count, window_ms, max_allowed, self._settings)
        if score:
            logger.debug("velocity_threshold_reached", count=count, max_allowed=max_allowed)
        return VelocityResult(
            count=count,
            score=score,
            reason=reason,
            window_ms=window_ms,
            max_allowed=max_allowed,
        )

    def count(self, actor_keys: Iterable[str], now: datetime, window_ms: int | None = None) -> int:
        window_ms = window_ms if window_ms is not None else self._settings.window_ms
        keys = self._keys(actor_keys)
        with self._lock:
            return self._count_locked(keys, _to_ms(now) - window_ms)

    def prune(self, now: datetime, window_ms: int | None = None) -> int:
        """Evict expired entries for every key. Returns the number of keys still tracked."""
        window_ms = window_ms if window_ms is not None else self._settings.window_ms
        cutoff = _to_ms(now) - window_ms
        with self._lock:
            self._sweep_locked(cutoff)
            return len(self._windows)

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._windows)

    def clear(self) -> None:
        with self._lock:
            self._windows.clear()
            self._last_sweep_ms = float("-inf")
