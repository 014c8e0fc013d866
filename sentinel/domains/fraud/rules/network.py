"""Shared-address network heuristic feeding the fraud graph."""

import structlog

from ..collaborators import resolve
from ..exceptions import CollaboratorUnavailableError
from ..models import FactorResult, IPNetworkRecord, RiskFactor, TransactionInput
from .base import FraudRule, RuleContext

logger = structlog.get_logger()


class SharedNetworkRule(FraudRule):
    """Links every actor seen on an address and scores the address itself.

    The flagged, shared-by-many and overused conditions are independent and
    additive; every matched reason is kept.
    """

    rule_id = RiskFactor.NETWORK

    async def evaluate(self, transaction: TransactionInput, context: RuleContext) -> FactorResult:
        settings = context.config.network
        try:
            record: IPNetworkRecord = await resolve(
                context.network_registry.record_activity(
                    transaction.source_address,
                    transaction.actor_id,
                    transaction.transaction_id,
                )
            )
        except Exception as exc:
            raise CollaboratorUnavailableError("ip network registry", str(exc)) from exc

        context.graph.add_vertex(transaction.actor_id)
        for linked_actor in record.linked_actors:
            if linked_actor != transaction.actor_id:
                context.graph.add_edge(transaction.actor_id, linked_actor)

        score = 0
        reasons: list[str] = []
        actor_count = len(record.linked_actors)

        if record.flagged:
            score += settings.flagged_score
            reasons.append(f"IP address flagged: {record.flag_reason or 'no reason given'}")
        if actor_count > settings.shared_actor_limit:
            score += settings.shared_actor_score
            reasons.append(f"IP shared by {actor_count} users (potential fraud ring)")
        if record.transaction_count > settings.transaction_count_limit:
            score += settings.transaction_count_score
            reasons.append(f"High transaction count from IP: {record.transaction_count}")

        evidence = {
            "address": record.address,
            "network_size": actor_count,
            "transaction_count": record.transaction_count,
            "flagged": record.flagged,
        }
        if not score:
            return self._not_triggered(**evidence)

        logger.info(
            "shared_network_risk",
            address=record.address,
            network_size=actor_count,
            score=score,
        )
        return self._triggered(score=score, reasons=reasons, evidence=evidence)
