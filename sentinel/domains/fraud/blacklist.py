"""In-memory deny lists for users, IP addresses, payment instruments and merchants.

Each kind is an independent hash set, so membership tests and mutations are
O(1) amortized. User and merchant keys are trimmed and case-folded; IP and
instrument keys are trimmed only and stay case-sensitive.
"""

import threading
from typing import Any

import structlog

from .config import BlacklistSettings
from .models import BlacklistKind

logger = structlog.get_logger()

_CASE_FOLDED = frozenset({BlacklistKind.USER, BlacklistKind.MERCHANT})


def normalize_key(kind: BlacklistKind, value: str) -> str:
    key = value.strip()
    if kind in _CASE_FOLDED:
        key = key.casefold()
    return key


class BlacklistIndex:
    """Four disjoint exact-match sets keyed by BlacklistKind."""

    def __init__(self, seed: BlacklistSettings | None = None) -> None:
        self._sets: dict[BlacklistKind, set[str]] = {kind: set() for kind in BlacklistKind}
        self._lock = threading.RLock()
        if seed is not None:
            self._load_seed(seed)

    def _load_seed(self, seed: BlacklistSettings) -> None:
        seeded = {
            BlacklistKind.USER: seed.users,
            BlacklistKind.IP: seed.ips,
            BlacklistKind.INSTRUMENT: seed.instruments,
            BlacklistKind.MERCHANT: seed.merchants,
        }
        for kind, values in seeded.items():
            for value in values:
                self.add(kind, value)

    def _resolve(self, kind: Any, value: Any) -> tuple[BlacklistKind, str] | None:
        try:
            resolved = BlacklistKind(kind)
        except (TypeError, ValueError):
            logger.warning("blacklist_invalid_kind", kind=str(kind))
            return None
        if not isinstance(value, str):
            logger.warning("blacklist_invalid_value", kind=resolved.value, value_type=type(value).__name__)
            return None
        key = normalize_key(resolved, value)
        if not key:
            logger.warning("blacklist_empty_value", kind=resolved.value)
            return None
        return resolved, key

    def add(self, kind: BlacklistKind | str, value: str) -> bool:
        """Add a value. Returns False for malformed input instead of raising."""
        resolved = self._resolve(kind, value)
        if resolved is None:
            return False
        resolved_kind, key = resolved
        with self._lock:
            self._sets[resolved_kind].add(key)
        logger.info("blacklist_entry_added", kind=resolved_kind.value)
        return True

    def remove(self, kind: BlacklistKind | str, value: str) -> bool:
        """Remove a value. Returns True only if it was present."""
        resolved = self._resolve(kind, value)
        if resolved is None:
            return False
        resolved_kind, key = resolved
        with self._lock:
            entries = self._sets[resolved_kind]
            if key not in entries:
                return False
            entries.discard(key)
        logger.info("blacklist_entry_removed", kind=resolved_kind.value)
        return True

    def contains(self, kind: BlacklistKind | str, value: str) -> bool:
        resolved = self._resolve(kind, value)
        if resolved is None:
            return False
        resolved_kind, key = resolved
        with self._lock:
            return key in self._sets[resolved_kind]

    def counts(self) -> dict[str, int]:
        with self._lock:
            sizes = {kind.value: len(entries) for kind, entries in self._sets.items()}
        sizes["total"] = sum(sizes.values())
        return sizes

    def all(self) -> dict[str, list[str]]:
        with self._lock:
            return {kind.value: sorted(entries) for kind, entries in self._sets.items()}

    def clear(self) -> None:
        with self._lock:
            for entries in self._sets.values():
                entries.clear()
        logger.info("blacklist_cleared")
