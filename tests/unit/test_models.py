"""Validation tests for the fraud domain models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from sentinel.domains.fraud.models import (
    Channel,
    FactorResult,
    RiskAssessment,
    RiskFactor,
    TransactionInput,
    TransactionStatus,
)
from tests.conftest import NOW, make_transaction


class TestTransactionInput:
    def test_valid_transaction(self):
        txn = make_transaction()
        assert txn.amount == Decimal("50.00")
        assert txn.channel == Channel.WEB

    def test_strings_are_trimmed(self):
        txn = make_transaction(actor_id="  alice@example.com ", source_address=" 10.0.0.1 ")
        assert txn.actor_id == "alice@example.com"
        assert txn.source_address == "10.0.0.1"

    @pytest.mark.parametrize("label,expected", [("Web App", Channel.WEB), ("Mobile App", Channel.MOBILE), ("API", Channel.API)])
    def test_channel_labels(self, label, expected):
        assert make_transaction(channel=label).channel == expected

    @pytest.mark.parametrize(
        "field,value",
        [
            ("amount", "-1"),
            ("amount", "abc"),
            ("amount", "NaN"),
            ("actor_id", "   "),
            ("merchant", ""),
            ("location", ""),
            ("source_address", "not-an-ip"),
            ("source_address", "10.0.0"),
            ("channel", "fax"),
        ],
    )
    def test_invalid_fields(self, field, value):
        with pytest.raises(ValidationError):
            make_transaction(**{field: value})

    def test_zero_amount_allowed(self):
        assert make_transaction(amount="0").amount == Decimal("0")

    def test_blank_instrument_is_absent(self):
        assert make_transaction(payment_instrument="  ").payment_instrument is None

    def test_immutable(self):
        txn = make_transaction()
        with pytest.raises(ValidationError):
            txn.amount = Decimal("1")


class TestFactorResult:
    def test_reason_joins_reasons(self):
        result = FactorResult(factor=RiskFactor.NETWORK, score=40, reasons=["a", "b"])
        assert result.reason == "a; b"
        assert result.triggered

    def test_clear_result(self):
        result = FactorResult.clear(RiskFactor.AMOUNT, amount="5")
        assert result.reason is None
        assert not result.triggered
        assert result.evidence == {"amount": "5"}

    def test_unavailable_result(self):
        result = FactorResult.unavailable(RiskFactor.VELOCITY, "timeout")
        assert not result.available
        assert result.score == 0
        assert result.reasons == ["velocity heuristic unavailable"]

    def test_negative_score_rejected(self):
        with pytest.raises(ValidationError):
            FactorResult(factor=RiskFactor.AMOUNT, score=-1)


class TestRiskAssessment:
    def test_score_bounds(self):
        with pytest.raises(ValidationError):
            RiskAssessment(risk_score=101, status=TransactionStatus.FRAUD, assessed_at=NOW)

    @pytest.mark.parametrize(
        "status,needs_review",
        [
            (TransactionStatus.SAFE, False),
            (TransactionStatus.UNDER_REVIEW, True),
            (TransactionStatus.FRAUD, True),
        ],
    )
    def test_needs_review(self, status, needs_review):
        assessment = RiskAssessment(risk_score=60, status=status, assessed_at=NOW)
        assert assessment.needs_review is needs_review
