"""Builders shared by the rule unit tests."""

from datetime import datetime

from sentinel.domains.fraud.blacklist import BlacklistIndex
from sentinel.domains.fraud.collaborators import InMemoryIPNetworkRegistry
from sentinel.domains.fraud.config import FraudConfig
from sentinel.domains.fraud.graph import FraudGraph
from sentinel.domains.fraud.rules.base import RuleContext
from sentinel.domains.fraud.velocity import VelocityTracker
from tests.conftest import NOW


def make_context(config: FraudConfig | None = None, now: datetime = NOW, **overrides) -> RuleContext:
    config = config or FraudConfig()
    fields = {
        "config": config,
        "now": now,
        "blacklist": BlacklistIndex(),
        "velocity": VelocityTracker(config.velocity),
        "graph": FraudGraph(),
        "network_registry": InMemoryIPNetworkRegistry(),
        "history": None,
    }
    fields.update(overrides)
    return RuleContext(**fields)
