"""Location heuristic."""

from collections.abc import Iterable

from ..models import FactorResult, RiskFactor, TransactionInput
from .base import FraudRule, RuleContext

DEFAULT_HIGH_RISK_TOKENS = ("unknown", "anonymous", "vpn")


def location_risk(location: str, tokens: Iterable[str] = DEFAULT_HIGH_RISK_TOKENS) -> str | None:
    """First high-risk token contained in the location, case-insensitively."""
    lowered = location.casefold()
    for token in tokens:
        if token and token.casefold() in lowered:
            return token
    return None


class HighRiskLocationRule(FraudRule):
    rule_id = RiskFactor.LOCATION

    async def evaluate(self, transaction: TransactionInput, context: RuleContext) -> FactorResult:
        settings = context.config.location
        token = location_risk(transaction.location, settings.high_risk_tokens)
        if token is None:
            return self._not_triggered()
        return self._triggered(
            score=settings.score,
            reasons=["Transaction from high-risk location"],
            evidence={"location": transaction.location, "token": token},
        )
