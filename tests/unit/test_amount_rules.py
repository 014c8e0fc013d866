"""Unit tests for the amount banding heuristic."""

from decimal import Decimal

import pytest

from sentinel.domains.fraud.config import AmountSettings, FraudConfig
from sentinel.domains.fraud.models import RiskFactor
from sentinel.domains.fraud.rules.amount import (
    AMOUNT_BANDS,
    AmountRule,
    amount_risk,
    build_amount_bands,
)
from tests.unit.rule_helpers import make_context
from tests.conftest import make_transaction


class TestAmountRisk:
    @pytest.mark.parametrize(
        "amount,expected_score",
        [
            ("10000.01", 30),
            ("15000", 30),
            ("10000", 15),
            ("5000.01", 15),
            ("5000", 0),
            ("1", 0),
            ("0.99", 10),
            ("0", 10),
        ],
    )
    def test_bands(self, amount, expected_score):
        band = amount_risk(Decimal(amount))
        assert (band.score if band else 0) == expected_score

    def test_first_match_wins(self):
        band = amount_risk(Decimal("20000"))
        assert band.name == "very_high"
        assert band.reason == "Unusually high transaction amount"

    def test_bands_are_ordered_high_to_low(self):
        assert [band.name for band in AMOUNT_BANDS] == ["very_high", "high", "low"]

    def test_accepts_floats(self):
        assert amount_risk(7500.0).name == "high"

    def test_custom_bands(self):
        bands = build_amount_bands(AmountSettings(very_high_min=100, high_min=50))
        assert amount_risk(Decimal("150"), bands).score == 30
        assert amount_risk(Decimal("75"), bands).score == 15


class TestAmountRule:
    rule = AmountRule()

    @pytest.mark.asyncio
    async def test_benign_amount(self):
        result = await self.rule.evaluate(make_transaction(amount="50"), make_context())
        assert not result.triggered
        assert result.factor == RiskFactor.AMOUNT

    @pytest.mark.asyncio
    async def test_high_amount(self):
        result = await self.rule.evaluate(make_transaction(amount="15000"), make_context())
        assert result.score == 30
        assert result.reasons == ["Unusually high transaction amount"]
        assert result.evidence["band"] == "very_high"

    @pytest.mark.asyncio
    async def test_uses_configured_bands(self):
        config = FraudConfig()
        config.amount.high_min = 100
        result = await self.rule.evaluate(make_transaction(amount="150"), make_context(config))
        assert result.score == 15
