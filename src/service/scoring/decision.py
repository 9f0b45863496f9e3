"""
Decision Engine for the Loan Eligibility Engine.

This module orchestrates the complete scoring pipeline:
1. Assess fraud signals (a critical flag vetoes immediately)
2. Score income, spending and cash flow
3. Combine into a composite risk score and decide
4. Size the credit line for approvals
5. Build and return the final, immutable result

This is the main entry point for the scoring module.
"""

from datetime import datetime, timezone
from typing import Optional

from src.domain.entities import FinancialSnapshot

from .credit_limit import recommend_credit_limit
from .features import build_eligibility_input
from .fraud import FraudVeto, assess_fraud
from .models import EligibilityInput, EligibilityResult, LoanDecision, ScoreFactors
from .reason_codes import REASON_CODES
from .risk_score import calculate_risk_score, score_cashflow, score_income, score_spending
from .settings import ScoringSettings, scoring_settings


def score(
    eligibility_input: EligibilityInput,
    settings: ScoringSettings = scoring_settings,
    scored_at: Optional[datetime] = None,
) -> EligibilityResult:
    """
    Score an eligibility input.

    Pure and deterministic: identical inputs produce identical results,
    apart from the timestamp when scored_at is not given.

    Decision Logic:
        - Critical fraud flag: risk 100, reject, sub-scores zeroed
        - Otherwise: approve iff risk score <= approve threshold
        - Approvals carry a recommended limit; rejections never do

    Args:
        eligibility_input: Aggregated behavioural features
        settings: Scoring settings (uses defaults if not provided)
        scored_at: Timestamp to stamp on the result (defaults to now, UTC)

    Returns:
        EligibilityResult with decision, reasons, and factors
    """
    timestamp = scored_at or datetime.now(timezone.utc)
    fraud = assess_fraud(eligibility_input.fraud_flags, settings)

    if isinstance(fraud, FraudVeto):
        return EligibilityResult(
            risk_score=100,
            decision=LoanDecision.REJECT,
            reason_codes=(fraud.reason_code,),
            factors=ScoreFactors(
                income_score=0.0,
                spending_score=0.0,
                cashflow_score=0.0,
                fraud_penalty=fraud.penalty,
                weights=settings.weights,
            ),
            model_version=settings.model_version,
            timestamp=timestamp,
        )

    fraud_penalty = fraud.amount
    fraud_reasons = fraud.reason_codes

    income = eligibility_input.monthly_income_estimate
    income_sub = score_income(income, settings)
    spending_sub = score_spending(eligibility_input.spending_behavior, income, settings)
    cashflow_sub = score_cashflow(eligibility_input.cashflow_stability, settings)

    risk_score = calculate_risk_score(
        income_score=income_sub.score,
        spending_score=spending_sub.score,
        cashflow_score=cashflow_sub.score,
        fraud_penalty=fraud_penalty,
        settings=settings,
    )

    if risk_score <= settings.approve_threshold:
        decision = LoanDecision.APPROVE
        recommended_limit = recommend_credit_limit(risk_score, income, settings)
    else:
        decision = LoanDecision.REJECT
        recommended_limit = None

    reason_codes = (
        fraud_reasons +
        income_sub.reason_codes +
        spending_sub.reason_codes +
        cashflow_sub.reason_codes
    )
    if not reason_codes:
        reason_codes = (REASON_CODES["DEFAULT"],)

    return EligibilityResult(
        risk_score=risk_score,
        decision=decision,
        reason_codes=reason_codes,
        factors=ScoreFactors(
            income_score=income_sub.score,
            spending_score=spending_sub.score,
            cashflow_score=cashflow_sub.score,
            fraud_penalty=fraud_penalty,
            weights=settings.weights,
        ),
        model_version=settings.model_version,
        timestamp=timestamp,
        recommended_limit=recommended_limit,
    )


def score_eligibility(
    snapshot: FinancialSnapshot,
    income_override: Optional[float] = None,
    settings: ScoringSettings = scoring_settings,
) -> EligibilityResult:
    """
    Aggregate a snapshot into features and score them.

    Args:
        snapshot: Financial snapshot for the subject
        income_override: Stated monthly income, used when positive
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        EligibilityResult
    """
    return score(build_eligibility_input(snapshot, income_override), settings)


def explain_result(result: EligibilityResult) -> str:
    """
    Generate a human-readable explanation of a result.

    This can be used for:
    - Logging and debugging
    - Support team reference

    Args:
        result: The result to explain

    Returns:
        Human-readable explanation string
    """
    factors = result.factors

    lines = []

    if result.approved:
        lines.append(f"Decision: APPROVED (${result.recommended_limit} recommended limit)")
    else:
        lines.append("Decision: DECLINED")

    lines.append(f"Risk Score: {result.risk_score}/100 (model {result.model_version})")
    lines.append("")
    lines.append("Sub-scores:")
    lines.append(f"  - Income: {factors.income_score:.1f} (weight {factors.weights.income:.2f})")
    lines.append(f"  - Spending: {factors.spending_score:.1f} (weight {factors.weights.spending:.2f})")
    lines.append(f"  - Cashflow: {factors.cashflow_score:.1f} (weight {factors.weights.cashflow:.2f})")
    lines.append(f"  - Fraud penalty: {factors.fraud_penalty:.0f}")
    lines.append("")
    lines.append("Reasons:")

    for reason in result.reason_codes:
        sign = {"positive": "+", "negative": "-"}.get(reason.impact.value, " ")
        lines.append(f"  {sign} [{reason.code}] {reason.description}")

    return "\n".join(lines)
