"""Blacklist heuristic: one factor no matter how many identifiers match."""

from ..models import BlacklistKind, FactorResult, RiskFactor, TransactionInput
from .base import FraudRule, RuleContext

_REASONS = {
    BlacklistKind.USER: "User is blacklisted",
    BlacklistKind.IP: "IP address is blacklisted",
    BlacklistKind.MERCHANT: "Merchant is blacklisted",
    BlacklistKind.INSTRUMENT: "Payment instrument is blacklisted",
}


class BlacklistRule(FraudRule):
    rule_id = RiskFactor.BLACKLIST

    async def evaluate(self, transaction: TransactionInput, context: RuleContext) -> FactorResult:
        candidates = [
            (BlacklistKind.USER, transaction.actor_id),
            (BlacklistKind.IP, transaction.source_address),
            (BlacklistKind.MERCHANT, transaction.merchant),
        ]
        if transaction.payment_instrument:
            candidates.append((BlacklistKind.INSTRUMENT, transaction.payment_instrument))

        matched = [kind for kind, value in candidates if context.blacklist.contains(kind, value)]
        if not matched:
            return self._not_triggered()
        return self._triggered(
            score=context.config.blacklist.score,
            reasons=[_REASONS[kind] for kind in matched],
            evidence={"matched": [kind.value for kind in matched]},
        )
