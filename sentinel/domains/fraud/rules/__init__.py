"""Fraud heuristics package.

Exports ALL_RULES (one rule per RiskFactor, in evaluation order) and the
individual rule classes and pure heuristic functions for direct use.
"""

from .amount import AMOUNT_BANDS, AmountBand, AmountRule, amount_risk, build_amount_bands
from .base import FraudRule, RuleContext
from .blacklist import BlacklistRule
from .geo import DEFAULT_HIGH_RISK_TOKENS, HighRiskLocationRule, location_risk
from .network import SharedNetworkRule
from .velocity import UnusualHourRule, VelocityRule, is_unusual_hour

# All rule instances in evaluation order
ALL_RULES: list[FraudRule] = [
    BlacklistRule(),
    AmountRule(),
    VelocityRule(),
    SharedNetworkRule(),
    HighRiskLocationRule(),
    UnusualHourRule(),
]

__all__ = [
    "ALL_RULES",
    "AMOUNT_BANDS",
    "AmountBand",
    "AmountRule",
    "BlacklistRule",
    "DEFAULT_HIGH_RISK_TOKENS",
    "FraudRule",
    "HighRiskLocationRule",
    "RuleContext",
    "SharedNetworkRule",
    "UnusualHourRule",
    "VelocityRule",
    "amount_risk",
    "build_amount_bands",
    "is_unusual_hour",
    "location_risk",
]
