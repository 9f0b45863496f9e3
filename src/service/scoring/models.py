"""
Data models for eligibility scoring.

These models represent the data structures used throughout the scoring pipeline,
from the aggregated behavioural features to the final, auditable result.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from src.domain.entities import FraudFlag


class Impact(str, Enum):
    """Polarity of a reason code."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class LoanDecision(str, Enum):
    """Outcome of an eligibility assessment."""
    APPROVE = "approve"
    REJECT = "reject"


@dataclass(frozen=True)
class ReasonCode:
    """
    A short code plus explanation justifying part of a scoring outcome.

    Attributes:
        code: Stable identifier, e.g. "I001"
        description: Human-readable explanation
        impact: Whether this pushed the outcome up, down, or neither
    """
    code: str
    description: str
    impact: Impact

    def with_description(self, description: Optional[str]) -> "ReasonCode":
        """Copy with a contextual description, keeping code and impact."""
        if not description:
            return self
        return replace(self, description=description)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "description": self.description,
            "impact": self.impact.value,
        }


@dataclass(frozen=True)
class SpendingBehavior:
    """
    Spending features over the observation window.

    Attributes:
        avg_monthly_spend: Average monthly outflow
        discretionary_spend_pct: Spend as % of inflow, capped at 100
        savings_rate_pct: Share of inflow not spent, floored at 0
        overdraft_count: Overdraft events, if known
        budget_adherence_pct: % of budgets respected; None when no budgets are set
    """
    avg_monthly_spend: float
    discretionary_spend_pct: float
    savings_rate_pct: float
    overdraft_count: Optional[int] = None
    budget_adherence_pct: Optional[float] = None


@dataclass(frozen=True)
class CashflowStability:
    """
    Cash-flow stability features.

    Attributes:
        income_variance_pct: Coefficient of variation of monthly inflow (%), 0-100
        consecutive_positive_months: Trailing months with non-negative net flow
        negative_balance_days: Days spent below zero, if known
        transaction_volume_90d: Number of transactions in the last 90 days
    """
    income_variance_pct: float
    consecutive_positive_months: int
    negative_balance_days: Optional[int] = None
    transaction_volume_90d: int = 0


@dataclass(frozen=True)
class EligibilityInput:
    """Canonical request object consumed by the scoring engine."""
    monthly_income_estimate: float
    spending_behavior: SpendingBehavior
    cashflow_stability: CashflowStability
    fraud_flags: Tuple[FraudFlag, ...] = ()


@dataclass(frozen=True)
class ScoreWeights:
    """Weights applied to the inverted sub-scores."""
    income: float
    spending: float
    cashflow: float

    def to_dict(self) -> dict:
        return {
            "income": self.income,
            "spending": self.spending,
            "cashflow": self.cashflow,
        }


@dataclass(frozen=True)
class SubScore:
    """A sub-score (0-100, higher = healthier) and the reasons behind it."""
    score: float
    reason_codes: Tuple[ReasonCode, ...] = ()


@dataclass(frozen=True)
class ScoreFactors:
    """
    Full decomposition of a risk score, always returned for auditability.

    Attributes:
        income_score: 0-100, higher is healthier
        spending_score: 0-100, higher is healthier
        cashflow_score: 0-100, higher is healthier
        fraud_penalty: Additive risk from fraud signals
        weights: Weights used to combine the sub-scores
    """
    income_score: float
    spending_score: float
    cashflow_score: float
    fraud_penalty: float
    weights: ScoreWeights

    def to_dict(self) -> dict:
        return {
            "income_score": self.income_score,
            "spending_score": self.spending_score,
            "cashflow_score": self.cashflow_score,
            "fraud_penalty": self.fraud_penalty,
            "weights": self.weights.to_dict(),
        }


@dataclass(frozen=True)
class EligibilityResult:
    """
    The outcome of one scoring call.

    Created fresh on every call and never mutated afterwards.

    Attributes:
        risk_score: 0-100, higher means riskier
        decision: approve or reject
        reason_codes: Never empty; DEFAULT when no rule fired
        factors: Sub-score decomposition
        recommended_limit: Credit line, present only on approval
        model_version: Version of the settings used
        timestamp: When the result was produced (UTC)
    """
    risk_score: int
    decision: LoanDecision
    reason_codes: Tuple[ReasonCode, ...]
    factors: ScoreFactors
    model_version: str
    timestamp: datetime
    recommended_limit: Optional[int] = None

    @property
    def approved(self) -> bool:
        return self.decision == LoanDecision.APPROVE

    @property
    def codes(self) -> Tuple[str, ...]:
        """Just the reason code identifiers, in the order they were attached."""
        return tuple(rc.code for rc in self.reason_codes)

    def to_dict(self) -> dict:
        """Convert to the audit/serialization format."""
        return {
            "risk_score": self.risk_score,
            "decision": self.decision.value,
            "reason_codes": [rc.to_dict() for rc in self.reason_codes],
            "factors": self.factors.to_dict(),
            "recommended_limit": self.recommended_limit,
            "model_version": self.model_version,
            "timestamp": self.timestamp.isoformat(),
        }
