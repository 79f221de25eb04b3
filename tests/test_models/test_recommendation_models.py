"""Tests for the Recommendation model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from trade_signals.models.recommendation import Recommendation


class TestRecommendation:
    def test_valid_construction(self):
        r = Recommendation(action="buy", confidence=0.7, reason="Turtle breakout")
        assert r.action == "buy"
        assert r.confidence == 0.7
        assert r.is_actionable

    def test_hold_factory(self):
        r = Recommendation.hold("insufficient data")
        assert r.action == "hold"
        assert r.confidence == 0.0
        assert not r.is_actionable

    def test_unknown_action_raises(self):
        with pytest.raises(ValidationError):
            Recommendation(action="avoid", confidence=0.5, reason="x")

    @pytest.mark.parametrize("confidence", [-0.01, 1.01])
    def test_confidence_out_of_range_raises(self, confidence):
        with pytest.raises(ValidationError, match="confidence"):
            Recommendation(action="buy", confidence=confidence, reason="x")

    @pytest.mark.parametrize("confidence", [0.0, 1.0])
    def test_confidence_bounds_inclusive(self, confidence):
        assert Recommendation(action="sell", confidence=confidence, reason="x").confidence == confidence

    def test_empty_reason_raises(self):
        with pytest.raises(ValidationError, match="reason"):
            Recommendation(action="hold", confidence=0.0, reason="   ")

    def test_reason_is_stripped(self):
        assert Recommendation.hold("  no signal  ").reason == "no signal"

    def test_frozen(self):
        r = Recommendation.hold("x")
        with pytest.raises(ValidationError):
            r.action = "buy"

    def test_dump_has_exactly_three_fields(self):
        assert set(Recommendation.hold("x").model_dump()) == {"action", "confidence", "reason"}
