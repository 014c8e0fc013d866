"""Velocity and time-of-day heuristics."""

from datetime import timedelta

from ..collaborators import resolve
from ..exceptions import CollaboratorUnavailableError
from ..models import FactorResult, RiskFactor, TransactionInput
from ..velocity import score_velocity
from .base import FraudRule, RuleContext


def is_unusual_hour(hour: int, start: int = 2, end: int = 5) -> bool:
    return start <= hour <= end


class VelocityRule(FraudRule):
    """Sliding-window count over the actor and its source address.

    The in-memory tracker always records the event. When a history source is
    configured, persisted transactions it reports (plus the current one) can
    raise the count but never lower it.
    """

    rule_id = RiskFactor.VELOCITY

    async def evaluate(self, transaction: TransactionInput, context: RuleContext) -> FactorResult:
        settings = context.config.velocity
        actor_keys = frozenset({transaction.actor_id, transaction.source_address})

        tracked = context.velocity.record_and_count(
            actor_keys,
            context.now,
            settings.window_ms,
            settings.max_transactions,
        )
        count = tracked.count
        history_count = None

        if context.history is not None:
            since = context.now - timedelta(milliseconds=settings.window_ms)
            try:
                history_count = await resolve(context.history.count_recent(actor_keys, since))
            except Exception as exc:
                raise CollaboratorUnavailableError("transaction history", str(exc)) from exc
            count = max(count, history_count + 1)

        score, reason = score_velocity(
            count, settings.window_ms, settings.max_transactions, settings
        )
        evidence = {
            "count": count,
            "tracked_count": tracked.count,
            "history_count": history_count,
            "window_ms": settings.window_ms,
            "max_allowed": settings.max_transactions,
        }
        if not score:
            return self._not_triggered(**evidence)
        return self._triggered(score=score, reasons=[reason], evidence=evidence)


class UnusualHourRule(FraudRule):
    """Triggers for transactions in the small hours, local time as supplied."""

    rule_id = RiskFactor.TIME

    async def evaluate(self, transaction: TransactionInput, context: RuleContext) -> FactorResult:
        settings = context.config.time
        moment = transaction.submitted_at or context.now.astimezone()
        hour = moment.hour
        if not is_unusual_hour(hour, settings.unusual_hour_start, settings.unusual_hour_end):
            return self._not_triggered(hour=hour)
        return self._triggered(
            score=settings.score,
            reasons=["Transaction during unusual hours"],
            evidence={"hour": hour},
        )
