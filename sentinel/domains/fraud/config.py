"""Fraud engine configuration with sensible defaults."""

import os
from dataclasses import dataclass, field


def _split_env(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass
class ThresholdSettings:
    high: int = 75
    medium: int = 50


@dataclass
class VelocitySettings:
    window_ms: int = 300_000
    max_transactions: int = 5
    limit_score: int = 40
    near_limit_score: int = 20


@dataclass
class AmountSettings:
    very_high_min: float = 10_000.0
    very_high_score: int = 30
    high_min: float = 5_000.0
    high_score: int = 15
    low_max: float = 1.0
    low_score: int = 10


@dataclass
class LocationSettings:
    high_risk_tokens: tuple[str, ...] = ("unknown", "anonymous", "vpn")
    score: int = 20


@dataclass
class TimeSettings:
    # Inclusive on both ends.
    unusual_hour_start: int = 2
    unusual_hour_end: int = 5
    score: int = 10


@dataclass
class NetworkSettings:
    flagged_score: int = 35
    shared_actor_limit: int = 5
    shared_actor_score: int = 25
    transaction_count_limit: int = 50
    transaction_count_score: int = 15


@dataclass
class BlacklistSettings:
    score: int = 50
    users: tuple[str, ...] = ()
    ips: tuple[str, ...] = ()
    instruments: tuple[str, ...] = ()
    merchants: tuple[str, ...] = ()


@dataclass
class FraudConfig:
    thresholds: ThresholdSettings = field(default_factory=ThresholdSettings)
    velocity: VelocitySettings = field(default_factory=VelocitySettings)
    amount: AmountSettings = field(default_factory=AmountSettings)
    location: LocationSettings = field(default_factory=LocationSettings)
    time: TimeSettings = field(default_factory=TimeSettings)
    network: NetworkSettings = field(default_factory=NetworkSettings)
    blacklist: BlacklistSettings = field(default_factory=BlacklistSettings)

    def validate(self) -> "FraudConfig":
        """Reject threshold combinations that would make status mapping ambiguous."""
        high = self.thresholds.high
        medium = self.thresholds.medium
        if not (0 <= medium <= 100 and 0 <= high <= 100):
            raise ValueError(f"Thresholds must lie in [0, 100] (high={high}, medium={medium})")
        if high < medium:
            raise ValueError(f"High threshold {high} is below medium threshold {medium}")
        if self.velocity.window_ms <= 0:
            raise ValueError(f"Velocity window must be positive, got {self.velocity.window_ms}ms")
        return self

    @classmethod
    def from_env(cls) -> "FraudConfig":
        """Load config with env var overrides. Env vars use FRAUD_ prefix."""
        config = cls()

        # Threshold overrides
        if v := os.getenv("FRAUD_THRESHOLD_HIGH"):
            config.thresholds.high = int(v)
        if v := os.getenv("FRAUD_THRESHOLD_MEDIUM"):
            config.thresholds.medium = int(v)

        # Velocity overrides
        if v := os.getenv("FRAUD_VELOCITY_WINDOW_MS"):
            config.velocity.window_ms = int(v)
        if v := os.getenv("FRAUD_VELOCITY_MAX_TRANSACTIONS"):
            config.velocity.max_transactions = int(v)

        # Location overrides
        if v := os.getenv("FRAUD_HIGH_RISK_LOCATIONS"):
            config.location.high_risk_tokens = _split_env(v)

        # Blacklist seeds
        if v := os.getenv("FRAUD_BLACKLIST_USERS"):
            config.blacklist.users = _split_env(v)
        if v := os.getenv("FRAUD_BLACKLIST_IPS"):
            config.blacklist.ips = _split_env(v)
        if v := os.getenv("FRAUD_BLACKLIST_INSTRUMENTS"):
            config.blacklist.instruments = _split_env(v)
        if v := os.getenv("FRAUD_BLACKLIST_MERCHANTS"):
            config.blacklist.merchants = _split_env(v)

        return config.validate()

