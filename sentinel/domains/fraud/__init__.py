"""Fraud risk scoring domain."""

from .blacklist import BlacklistIndex
from .collaborators import (
    InMemoryIPNetworkRegistry,
    InMemoryTransactionHistory,
    IPNetworkRegistry,
    TransactionHistory,
)
from .config import FraudConfig
from .engine import FraudRiskEngine, classify_status
from .exceptions import (
    CollaboratorUnavailableError,
    FraudEngineError,
    InternalInconsistencyError,
    InvalidTransactionError,
)
from .graph import FraudGraph
from .models import (
    BlacklistKind,
    Channel,
    FactorResult,
    GraphStats,
    IPNetworkRecord,
    ReviewQueueEntry,
    RiskAssessment,
    RiskFactor,
    TransactionInput,
    TransactionStatus,
    VelocityResult,
)
from .review_queue import ReviewPriorityQueue
from .rules import ALL_RULES
from .velocity import VelocityTracker, score_velocity

__all__ = [
    "ALL_RULES",
    "BlacklistIndex",
    "BlacklistKind",
    "Channel",
    "CollaboratorUnavailableError",
    "FactorResult",
    "FraudConfig",
    "FraudEngineError",
    "FraudGraph",
    "FraudRiskEngine",
    "GraphStats",
    "IPNetworkRecord",
    "IPNetworkRegistry",
    "InMemoryIPNetworkRegistry",
    "InMemoryTransactionHistory",
    "InternalInconsistencyError",
    "InvalidTransactionError",
    "ReviewPriorityQueue",
    "ReviewQueueEntry",
    "RiskAssessment",
    "RiskFactor",
    "TransactionHistory",
    "TransactionInput",
    "TransactionStatus",
    "VelocityResult",
    "VelocityTracker",
    "classify_status",
    "score_velocity",
]
