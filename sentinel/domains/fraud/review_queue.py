"""Max-heap of transactions awaiting manual review, highest risk first."""

import heapq
import itertools
import threading

import structlog

from .exceptions import InternalInconsistencyError
from .models import ReviewQueueEntry

logger = structlog.get_logger()


class ReviewPriorityQueue:
    """Binary max-heap over risk score.

    heapq is a min-heap, so entries are stored as ``(-risk_score, seq, entry)``.
    The sequence number only keeps tuple comparison away from the entries;
    ordering among equal scores is not part of the contract.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[int, int, ReviewQueueEntry]] = []
        self._sequence = itertools.count()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return self.size()

    def enqueue(self, entry: ReviewQueueEntry) -> None:
        with self._lock:
            heapq.heappush(self._heap, (-entry.risk_score, next(self._sequence), entry))
            size = len(self._heap)
        logger.info(
            "review_enqueued",
            transaction_id=entry.transaction_id,
            risk_score=entry.risk_score,
            queue_size=size,
        )

    def dequeue(self) -> ReviewQueueEntry | None:
        """Remove and return the highest-risk entry, or None when empty."""
        with self._lock:
            if not self._heap:
                return None
            _, _, entry = heapq.heappop(self._heap)
        logger.info(
            "review_dequeued",
            transaction_id=entry.transaction_id,
            risk_score=entry.risk_score,
        )
        return entry

    def peek(self) -> ReviewQueueEntry | None:
        with self._lock:
            return self._heap[0][2] if self._heap else None

    def snapshot(self) -> list[ReviewQueueEntry]:
        """All pending entries, highest risk first, without removing them."""
        with self._lock:
            entries = [entry for _, _, entry in self._heap]
        return sorted(entries, key=lambda entry: entry.risk_score, reverse=True)

    def size(self) -> int:
        with self._lock:
            return len(self._heap)

    def is_empty(self) -> bool:
        return self.size() == 0

    def clear(self) -> None:
        with self._lock:
            self._heap.clear()

    def verify(self) -> None:
        """Raise InternalInconsistencyError if any parent scores below one of its children."""
        with self._lock:
            heap = self._heap
            for index in range(1, len(heap)):
                parent = (index - 1) // 2
                if heap[parent][2].risk_score < heap[index][2].risk_score:
                    raise InternalInconsistencyError(
                        f"Heap invariant violated at index {index}: "
                        f"parent {heap[parent][2].risk_score} < child {heap[index][2].risk_score}"
                    )
