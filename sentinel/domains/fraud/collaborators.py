"""Interfaces the engine consumes from the surrounding system.

The durable transaction store and the IP-network registry live outside the
engine. Both may be synchronous or asynchronous; results are awaited when
they are awaitable. The in-memory implementations below back tests and
single-process deployments and are not durable.
"""

import inspect
import threading
from collections.abc import Awaitable, Iterable
from datetime import UTC, datetime, timedelta
from typing import Protocol, TypeVar, runtime_checkable

import structlog

from .models import IPNetworkRecord

logger = structlog.get_logger()

T = TypeVar("T")


async def resolve(value: T | Awaitable[T]) -> T:
    """Await value if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


@runtime_checkable
class TransactionHistory(Protocol):
    def count_recent(
        self, actor_keys: frozenset[str], since: datetime
    ) -> int | Awaitable[int]:
        """Number of persisted transactions matching any key since the given moment."""
        ...


@runtime_checkable
class IPNetworkRegistry(Protocol):
    def record_activity(
        self, address: str, actor_id: str, transaction_id: str | None = None
    ) -> IPNetworkRecord | Awaitable[IPNetworkRecord]:
        """Find-or-create the address record, link the actor, bump the count."""
        ...


class InMemoryTransactionHistory:
    """History source fed explicitly by the caller after persisting a transaction."""

    def __init__(self) -> None:
        self._events: list[tuple[datetime, frozenset[str]]] = []
        self._lock = threading.Lock()

    def add(self, actor_keys: Iterable[str], at: datetime | None = None) -> None:
        with self._lock:
            self._events.append((at or datetime.now(UTC), frozenset(actor_keys)))

    def count_recent(self, actor_keys: frozenset[str], since: datetime) -> int:
        with self._lock:
            return sum(
                1 for at, keys in self._events if at >= since and not keys.isdisjoint(actor_keys)
            )

    def prune(self, older_than: timedelta) -> None:
        cutoff = datetime.now(UTC) - older_than
        with self._lock:
            self._events = [(at, keys) for at, keys in self._events if at >= cutoff]


class InMemoryIPNetworkRegistry:
    """Address registry with create-if-absent semantics and an external flag marker."""

    def __init__(self) -> None:
        self._records: dict[str, IPNetworkRecord] = {}
        self._lock = threading.Lock()

    def _get_or_create(self, address: str, now: datetime) -> IPNetworkRecord:
        record = self._records.get(address)
        if record is None:
            record = IPNetworkRecord(address=address, first_seen=now, last_seen=now)
            self._records[address] = record
        return record

    def record_activity(
        self, address: str, actor_id: str, transaction_id: str | None = None
    ) -> IPNetworkRecord:
        now = datetime.now(UTC)
        with self._lock:
            record = self._get_or_create(address, now)
            if actor_id not in record.linked_actors:
                record.linked_actors.append(actor_id)
            if transaction_id:
                record.linked_transactions.append(transaction_id)
            record.transaction_count += 1
            record.last_seen = now
            return record.model_copy(deep=True)

    def get(self, address: str) -> IPNetworkRecord | None:
        with self._lock:
            record = self._records.get(address)
            return record.model_copy(deep=True) if record else None

    def flag(self, address: str, reason: str) -> IPNetworkRecord:
        with self._lock:
            record = self._get_or_create(address, datetime.now(UTC))
            record.flagged = True
            record.flag_reason = reason
            snapshot = record.model_copy(deep=True)
        logger.info("ip_network_flagged", address=address, reason=reason)
        return snapshot

    def unflag(self, address: str) -> bool:
        with self._lock:
            record = self._records.get(address)
            if record is None or not record.flagged:
                return False
            record.flagged = False
            record.flag_reason = None
        logger.info("ip_network_unflagged", address=address)
        return True

    def flagged_addresses(self) -> list[str]:
        with self._lock:
            return sorted(address for address, record in self._records.items() if record.flagged)
