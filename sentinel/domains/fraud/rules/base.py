"""Abstract base class for fraud heuristics."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..blacklist import BlacklistIndex
from ..collaborators import IPNetworkRegistry, TransactionHistory
from ..config import FraudConfig
from ..graph import FraudGraph
from ..models import FactorResult, RiskFactor, TransactionInput
from ..velocity import VelocityTracker


@dataclass(frozen=True)
class RuleContext:
    """Shared structures and collaborators handed to every rule for one evaluation."""

    config: FraudConfig
    now: datetime
    blacklist: BlacklistIndex
    velocity: VelocityTracker
    graph: FraudGraph
    network_registry: IPNetworkRegistry
    history: TransactionHistory | None = None


class FraudRule(ABC):
    """Base class for all fraud heuristics.

    Rules are async because the stateful ones may await collaborators. A rule
    contributes a non-negative score and zero or more reasons; it never
    decides the final status.
    """

    rule_id: RiskFactor

    @abstractmethod
    async def evaluate(self, transaction: TransactionInput, context: RuleContext) -> FactorResult:
        """Evaluate this heuristic and return its FactorResult."""
        ...

    def _not_triggered(self, **evidence: Any) -> FactorResult:
        return FactorResult.clear(self.rule_id, **evidence)

    def _triggered(
        self,
        score: int,
        reasons: list[str],
        evidence: dict[str, Any] | None = None,
    ) -> FactorResult:
        return FactorResult(
            factor=self.rule_id,
            score=score,
            reasons=reasons,
            evidence=evidence or {},
        )
