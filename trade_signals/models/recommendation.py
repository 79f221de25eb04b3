"""
Recommendation output model.

A ``Recommendation`` is the single value every strategy evaluator and the
signal orchestrator return: one action, a confidence in [0, 1] and a
non-empty reason naming the rule that fired.  The model is frozen and built
fresh on every evaluation; it is never stored or updated.

By convention ``confidence`` is 0 exactly when ``action == "hold"``.  That
convention is kept by the evaluators rather than enforced here.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

RecommendationAction = Literal["buy", "sell", "hold"]
VALID_ACTIONS: frozenset[str] = frozenset({"buy", "sell", "hold"})


class Recommendation(BaseModel):
    """A buy/sell/hold decision for one pair.

    Attributes:
        action: ``"buy"``, ``"sell"`` or ``"hold"``.
        confidence: Evaluator's self-reported certainty, in [0, 1].
        reason: Human-readable description of the rule that fired.
    """

    model_config = ConfigDict(frozen=True)

    action: RecommendationAction
    confidence: float
    reason: str

    @field_validator("confidence")
    @classmethod
    def validate_confidence_range(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"confidence must be in [0.0, 1.0], got {v}.")
        return v

    @field_validator("reason")
    @classmethod
    def validate_reason_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("reason must not be empty.")
        return v.strip()

    @classmethod
    def hold(cls, reason: str) -> "Recommendation":
        """A hold with zero confidence."""
        return cls(action="hold", confidence=0.0, reason=reason)

    @property
    def is_actionable(self) -> bool:
        return self.action != "hold"
