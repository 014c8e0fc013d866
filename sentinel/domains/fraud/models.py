"""Pydantic models for the fraud domain."""

from datetime import datetime
from decimal import Decimal
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

IPV4_PATTERN = r"^(\d{1,3}\.){3}\d{1,3}$"

_CHANNEL_ALIASES = {
    "web app": "web",
    "mobile app": "mobile",
}


class Channel(StrEnum):
    WEB = "web"
    MOBILE = "mobile"
    API = "api"


class TransactionStatus(StrEnum):
    NEW = "new"
    SAFE = "safe"
    UNDER_REVIEW = "under_review"
    FRAUD = "fraud"


REVIEW_STATUSES = frozenset({TransactionStatus.UNDER_REVIEW, TransactionStatus.FRAUD})


class BlacklistKind(StrEnum):
    USER = "user"
    IP = "ip"
    INSTRUMENT = "instrument"
    MERCHANT = "merchant"


class RiskFactor(StrEnum):
    # Declaration order is evaluation order.
    BLACKLIST = "blacklist"
    AMOUNT = "amount"
    VELOCITY = "velocity"
    NETWORK = "network"
    LOCATION = "location"
    TIME = "time"


class TransactionInput(BaseModel):
    """A transaction as submitted by the caller, validated before scoring."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    transaction_id: str | None = None
    actor_id: str = Field(min_length=1)
    amount: Decimal = Field(ge=0, allow_inf_nan=False)
    merchant: str = Field(min_length=1)
    location: str = Field(min_length=1)
    source_address: str = Field(pattern=IPV4_PATTERN)
    channel: Channel = Channel.WEB
    submitted_at: datetime | None = None
    payment_instrument: str | None = None

    @field_validator("channel", mode="before")
    @classmethod
    def _normalize_channel(cls, value: Any) -> Any:
        if isinstance(value, str):
            lowered = value.strip().lower()
            return _CHANNEL_ALIASES.get(lowered, lowered)
        return value

    @field_validator("payment_instrument")
    @classmethod
    def _blank_instrument_is_absent(cls, value: str | None) -> str | None:
        return value or None


class FactorResult(BaseModel):
    """Outcome of a single heuristic: a non-negative score plus its reasons."""

    model_config = ConfigDict(frozen=True)

    factor: RiskFactor
    score: int = Field(default=0, ge=0)
    reasons: list[str] = Field(default_factory=list)
    evidence: dict[str, Any] = Field(default_factory=dict)
    available: bool = True

    @property
    def reason(self) -> str | None:
        return "; ".join(self.reasons) if self.reasons else None

    @property
    def triggered(self) -> bool:
        return self.score > 0

    @classmethod
    def clear(cls, factor: RiskFactor, **evidence: Any) -> "FactorResult":
        return cls(factor=factor, evidence=evidence)

    @classmethod
    def unavailable(cls, factor: RiskFactor, error: str | None = None) -> "FactorResult":
        return cls(
            factor=factor,
            reasons=[f"{factor.value} heuristic unavailable"],
            evidence={"error": error} if error else {},
            available=False,
        )


class RiskAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    transaction_id: str | None = None
    risk_score: int = Field(ge=0, le=100)
    status: TransactionStatus
    reasons: list[str] = Field(default_factory=list)
    breakdown: dict[str, FactorResult] = Field(default_factory=dict)
    assessed_at: datetime

    @property
    def needs_review(self) -> bool:
        return self.status in REVIEW_STATUSES


class ReviewQueueEntry(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    transaction_ref: Any
    transaction_id: str | None = None
    risk_score: int = Field(ge=0, le=100)
    status: TransactionStatus
    reasons: list[str] = Field(default_factory=list)
    enqueued_at: datetime


class IPNetworkRecord(BaseModel):
    """Everything the registry knows about one source address."""

    address: str
    linked_actors: list[str] = Field(default_factory=list)
    linked_transactions: list[str] = Field(default_factory=list)
    flagged: bool = False
    flag_reason: str | None = None
    transaction_count: int = 0
    first_seen: datetime | None = None
    last_seen: datetime | None = None


class VelocityResult(BaseModel):
    count: int = 0
    score: int = 0
    reason: str | None = None
    window_ms: int
    max_allowed: int


class GraphStats(BaseModel):
    vertex_count: int = 0
    edge_count: int = 0
    ring_count: int = 0
    largest_ring_size: int = 0
