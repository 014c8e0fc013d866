"""Scoring orchestrator: heuristics -> capped score -> status.

The engine owns one instance of each auxiliary structure (blacklist, velocity
tracker, fraud graph, review queue). Build one engine per process, or several
isolated ones in tests; nothing here is module-global.
"""

import copy
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

import structlog
from pydantic import ValidationError

from .blacklist import BlacklistIndex
from .collaborators import (
    InMemoryIPNetworkRegistry,
    IPNetworkRegistry,
    TransactionHistory,
)
from .config import FraudConfig
from .exceptions import CollaboratorUnavailableError, InvalidTransactionError
from .graph import FraudGraph
from .models import (
    BlacklistKind,
    FactorResult,
    GraphStats,
    ReviewQueueEntry,
    RiskAssessment,
    TransactionInput,
    TransactionStatus,
)
from .review_queue import ReviewPriorityQueue
from .rules import ALL_RULES, FraudRule, RuleContext
from .velocity import VelocityTracker

logger = structlog.get_logger()

MAX_SCORE = 100


def classify_status(score: int, config: FraudConfig) -> TransactionStatus:
    if score >= config.thresholds.high:
        return TransactionStatus.FRAUD
    if score >= config.thresholds.medium:
        return TransactionStatus.UNDER_REVIEW
    return TransactionStatus.SAFE


def _utcnow() -> datetime:
    return datetime.now(UTC)


class FraudRiskEngine:
    """Assigns a 0-100 risk score and status to one transaction at a time.

    Every heuristic runs on every transaction, even after a high-severity hit,
    so the reasons list is exhaustive. A heuristic that fails contributes zero
    and a "heuristic unavailable" reason instead of aborting the assessment.

    Enqueueing for review is left to the caller (``enqueue_for_review``) so
    the caller controls ordering relative to persistence.
    """

    def __init__(
        self,
        config: FraudConfig | None = None,
        *,
        blacklist: BlacklistIndex | None = None,
        velocity: VelocityTracker | None = None,
        graph: FraudGraph | None = None,
        review_queue: ReviewPriorityQueue | None = None,
        network_registry: IPNetworkRegistry | None = None,
        history: TransactionHistory | None = None,
        rules: list[FraudRule] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        # Engines never share config state.
        self._config = (copy.deepcopy(config) if config is not None else FraudConfig()).validate()
        self._blacklist = blacklist or BlacklistIndex(seed=self._config.blacklist)
        self._velocity = velocity or VelocityTracker(self._config.velocity)
        self._graph = graph or FraudGraph()
        self._review_queue = review_queue or ReviewPriorityQueue()
        self._network_registry = network_registry or InMemoryIPNetworkRegistry()
        self._history = history
        self._rules = list(rules) if rules is not None else list(ALL_RULES)
        self._clock = clock or _utcnow
        logger.info("fraud_engine_initialized", rule_count=len(self._rules))

    @property
    def config(self) -> FraudConfig:
        return self._config

    @property
    def blacklist(self) -> BlacklistIndex:
        return self._blacklist

    @property
    def velocity(self) -> VelocityTracker:
        return self._velocity

    @property
    def graph(self) -> FraudGraph:
        return self._graph

    @property
    def review_queue(self) -> ReviewPriorityQueue:
        return self._review_queue

    @property
    def network_registry(self) -> IPNetworkRegistry:
        return self._network_registry

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    @staticmethod
    def _coerce(transaction: TransactionInput | Mapping[str, Any]) -> TransactionInput:
        if isinstance(transaction, TransactionInput):
            return transaction
        try:
            return TransactionInput.model_validate(transaction)
        except ValidationError as exc:
            logger.warning("transaction_rejected", error_count=exc.error_count())
            raise InvalidTransactionError(
                f"Invalid transaction: {exc.error_count()} validation error(s)",
                errors=exc.errors(include_url=False),
            ) from exc

    def classify(self, score: int) -> TransactionStatus:
        return classify_status(score, self._config)

    async def _run_rule(
        self, rule: FraudRule, transaction: TransactionInput, context: RuleContext
    ) -> FactorResult:
        try:
            return await rule.evaluate(transaction, context)
        except CollaboratorUnavailableError as exc:
            logger.warning(
                "collaborator_unavailable",
                rule_id=rule.rule_id.value,
                collaborator=exc.collaborator,
                transaction_id=transaction.transaction_id,
            )
            return FactorResult.unavailable(rule.rule_id, str(exc))
        except Exception as exc:
            logger.exception(
                "rule_evaluation_error",
                rule_id=rule.rule_id.value,
                transaction_id=transaction.transaction_id,
            )
            return FactorResult.unavailable(rule.rule_id, type(exc).__name__)

    async def analyze(self, transaction: TransactionInput | Mapping[str, Any]) -> RiskAssessment:
        """Score a transaction. Raises InvalidTransactionError before scoring on bad input."""
        txn = self._coerce(transaction)
        context = RuleContext(
            config=self._config,
            now=txn.submitted_at or self._clock(),
            blacklist=self._blacklist,
            velocity=self._velocity,
            graph=self._graph,
            network_registry=self._network_registry,
            history=self._history,
        )

        breakdown: dict[str, FactorResult] = {}
        for rule in self._rules:
            breakdown[rule.rule_id.value] = await self._run_rule(rule, txn, context)

        raw_score = sum(result.score for result in breakdown.values())
        risk_score = max(0, min(raw_score, MAX_SCORE))
        status = self.classify(risk_score)
        reasons = [reason for result in breakdown.values() for reason in result.reasons]

        assessment = RiskAssessment(
            transaction_id=txn.transaction_id,
            risk_score=risk_score,
            status=status,
            reasons=reasons,
            breakdown=breakdown,
            assessed_at=self._clock(),
        )

        logger.info(
            "transaction_assessed",
            transaction_id=txn.transaction_id,
            risk_score=risk_score,
            raw_score=raw_score,
            status=status.value,
            triggered=[name for name, result in breakdown.items() if result.triggered],
            unavailable=[name for name, result in breakdown.items() if not result.available],
        )
        return assessment

    # ------------------------------------------------------------------
    # Review queue
    # ------------------------------------------------------------------

    def enqueue_for_review(self, assessment: RiskAssessment, transaction_ref: Any = None) -> bool:
        """Queue the transaction if its status needs review. Returns whether it was queued."""
        if not assessment.needs_review:
            return False
        self._review_queue.enqueue(
            ReviewQueueEntry(
                transaction_ref=transaction_ref if transaction_ref is not None else assessment.transaction_id,
                transaction_id=assessment.transaction_id,
                risk_score=assessment.risk_score,
                status=assessment.status,
                reasons=list(assessment.reasons),
                enqueued_at=self._clock(),
            )
        )
        return True

    def dequeue_next_for_review(self) -> ReviewQueueEntry | None:
        return self._review_queue.dequeue()

    def peek_next_for_review(self) -> ReviewQueueEntry | None:
        return self._review_queue.peek()

    def pending_reviews(self) -> list[ReviewQueueEntry]:
        return self._review_queue.snapshot()

    # ------------------------------------------------------------------
    # Blacklist administration
    # ------------------------------------------------------------------

    def blacklist_add(self, kind: BlacklistKind | str, value: str) -> bool:
        return self._blacklist.add(kind, value)

    def blacklist_remove(self, kind: BlacklistKind | str, value: str) -> bool:
        return self._blacklist.remove(kind, value)

    def blacklist_contains(self, kind: BlacklistKind | str, value: str) -> bool:
        return self._blacklist.contains(kind, value)

    def blacklist_counts(self) -> dict[str, int]:
        return self._blacklist.counts()

    # ------------------------------------------------------------------
    # Fraud graph reporting
    # ------------------------------------------------------------------

    def graph_stats(self) -> GraphStats:
        return self._graph.stats()

    def are_actors_linked(self, actor_a: str, actor_b: str) -> bool:
        return self._graph.are_connected(actor_a, actor_b)

    def fraud_rings(self) -> list[set[str]]:
        return self._graph.connected_components()

    # ------------------------------------------------------------------
    # Address flagging (delegated to the registry when it supports it)
    # ------------------------------------------------------------------

    def flag_address(self, address: str, reason: str) -> bool:
        flag = getattr(self._network_registry, "flag", None)
        if flag is None:
            logger.warning("registry_flagging_unsupported", address=address)
            return False
        flag(address, reason)
        return True

    def unflag_address(self, address: str) -> bool:
        unflag = getattr(self._network_registry, "unflag", None)
        if unflag is None:
            logger.warning("registry_flagging_unsupported", address=address)
            return False
        return bool(unflag(address))
