"""Amount banding heuristic."""

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal

from ..config import AmountSettings
from ..models import FactorResult, RiskFactor, TransactionInput
from .base import FraudRule, RuleContext


@dataclass(frozen=True)
class AmountBand:
    name: str
    predicate: Callable[[Decimal], bool]
    score: int
    reason: str


def build_amount_bands(settings: AmountSettings) -> list[AmountBand]:
    """Ordered bands, checked top to bottom; the first match wins."""
    very_high = Decimal(str(settings.very_high_min))
    high = Decimal(str(settings.high_min))
    low = Decimal(str(settings.low_max))
    return [
        AmountBand(
            name="very_high",
            predicate=lambda amount: amount > very_high,
            score=settings.very_high_score,
            reason="Unusually high transaction amount",
        ),
        AmountBand(
            name="high",
            predicate=lambda amount: amount > high,
            score=settings.high_score,
            reason="High transaction amount",
        ),
        AmountBand(
            name="low",
            predicate=lambda amount: amount < low,
            score=settings.low_score,
            reason="Suspiciously low amount",
        ),
    ]


AMOUNT_BANDS = build_amount_bands(AmountSettings())


def amount_risk(amount: Decimal | float | int, bands: list[AmountBand] | None = None) -> AmountBand | None:
    """Return the first band the amount falls into, or None."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    for band in bands if bands is not None else AMOUNT_BANDS:
        if band.predicate(value):
            return band
    return None


class AmountRule(FraudRule):
    rule_id = RiskFactor.AMOUNT

    async def evaluate(self, transaction: TransactionInput, context: RuleContext) -> FactorResult:
        band = amount_risk(transaction.amount, build_amount_bands(context.config.amount))
        if band is None:
            return self._not_triggered(amount=str(transaction.amount))
        return self._triggered(
            score=band.score,
            reasons=[band.reason],
            evidence={"amount": str(transaction.amount), "band": band.name},
        )
