"""Shared test fixtures for Fraud Sentinel tests."""

from datetime import UTC, datetime

import pytest

from sentinel.domains.fraud.config import FraudConfig
from sentinel.domains.fraud.engine import FraudRiskEngine
from sentinel.domains.fraud.models import TransactionInput

# 14:00 UTC on a weekday: outside the unusual-hours band.
NOW = datetime(2026, 1, 15, 14, 0, 0, tzinfo=UTC)


def make_transaction(**kwargs) -> TransactionInput:
    defaults = {
        "transaction_id": "txn-1",
        "actor_id": "alice@example.com",
        "amount": "50.00",
        "merchant": "Corner Bakery",
        "location": "Boston, US",
        "source_address": "10.0.1.50",
        "channel": "web",
        "submitted_at": NOW,
    }
    defaults.update(kwargs)
    return TransactionInput(**defaults)


@pytest.fixture
def config() -> FraudConfig:
    return FraudConfig()


@pytest.fixture
def engine(config) -> FraudRiskEngine:
    return FraudRiskEngine(config=config, clock=lambda: NOW)


@pytest.fixture
def sample_transaction_payload() -> dict:
    return {
        "transaction_id": "txn-payload-1",
        "actor_id": "bob@example.com",
        "amount": "120.50",
        "merchant": "Acme Hardware",
        "location": "Cambridge, US",
        "source_address": "10.0.2.17",
        "channel": "Mobile App",
        "submitted_at": "2026-01-15T14:00:00+00:00",
    }
