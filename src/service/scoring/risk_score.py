"""
Risk Score Calculation for the Loan Eligibility Engine.

This module computes the three behavioural sub-scores (0-100, higher =
healthier) and combines them with the fraud penalty into a composite risk
score (0-100, higher = riskier).

Each sub-score function returns a SubScore pairing the score with the reason
codes it produced; the caller merges them. No function here shares or
mutates state.
"""

import math

from .models import CashflowStability, SpendingBehavior, SubScore
from .reason_codes import REASON_CODES
from .settings import ScoringSettings, scoring_settings


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp a value to [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up."""
    return int(math.floor(value + 0.5))


def calculate_spend_rate(avg_monthly_spend: float, monthly_income: float) -> float:
    """
    Average monthly spend as a percentage of monthly income.

    No income reads as a spend rate of 100.
    """
    if monthly_income > 0:
        return avg_monthly_spend / monthly_income * 100
    return 100.0


def score_income(
    monthly_income: float,
    settings: ScoringSettings = scoring_settings,
) -> SubScore:
    """
    Convert monthly income to a 0-100 score.

    Scoring:
        - At or above the minimum: 50 plus one point per income_score_step
          above it, capped at 100 (INCOME_SUFFICIENT)
        - Below the minimum: scaled linearly from 0 to 50 (INCOME_INSUFFICIENT)

    Args:
        monthly_income: Monthly income estimate
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        SubScore with exactly one reason code
    """
    if monthly_income >= settings.min_income:
        score = min(100.0, 50 + (monthly_income - settings.min_income) / settings.income_score_step)
        return SubScore(score=score, reason_codes=(REASON_CODES["INCOME_SUFFICIENT"],))

    score = max(0.0, monthly_income / settings.min_income * 50)
    return SubScore(score=score, reason_codes=(REASON_CODES["INCOME_INSUFFICIENT"],))


def score_spending(
    spending: SpendingBehavior,
    monthly_income: float,
    settings: ScoringSettings = scoring_settings,
) -> SubScore:
    """
    Convert spending behaviour to a 0-100 score.

    Starts from a base of 70 and applies, in order:
        - Spend rate within max DTI: LOW_DTI; above it: -30, HIGH_DTI
        - Savings rate >= 5%: +15 (capped at 100), POSITIVE_SAVINGS
        - Budget adherence >= 70% (only when budgets exist): +10 (capped), BUDGET_DISCIPLINE
        - Overdrafts: -20 per event, at most 3 events counted, OVERDRAFT_HISTORY
        - Spend rate above 100%: -25, HIGH_SPEND_RATE (stacks with HIGH_DTI)

    Args:
        spending: Spending features
        monthly_income: Monthly income estimate
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        SubScore clamped to 0-100
    """
    score = settings.spending_base_score
    reasons = []

    spend_rate = calculate_spend_rate(spending.avg_monthly_spend, monthly_income)
    if spend_rate <= settings.max_dti_pct:
        reasons.append(REASON_CODES["LOW_DTI"])
    else:
        score -= settings.high_dti_penalty
        reasons.append(REASON_CODES["HIGH_DTI"])

    if spending.savings_rate_pct >= settings.savings_rate_threshold_pct:
        score = min(100.0, score + settings.savings_bonus)
        reasons.append(REASON_CODES["POSITIVE_SAVINGS"])

    adherence = spending.budget_adherence_pct
    if adherence is not None and adherence >= settings.budget_adherence_threshold_pct:
        score = min(100.0, score + settings.budget_bonus)
        reasons.append(REASON_CODES["BUDGET_DISCIPLINE"])

    overdrafts = spending.overdraft_count or 0
    if overdrafts > 0:
        score -= settings.overdraft_penalty * min(settings.overdraft_penalty_max_count, overdrafts)
        reasons.append(REASON_CODES["OVERDRAFT_HISTORY"])

    if spend_rate > settings.overspend_threshold_pct:
        score -= settings.overspend_penalty
        reasons.append(REASON_CODES["HIGH_SPEND_RATE"])

    return SubScore(score=clamp(score), reason_codes=tuple(reasons))


def score_cashflow(
    stability: CashflowStability,
    settings: ScoringSettings = scoring_settings,
) -> SubScore:
    """
    Convert cash-flow stability to a 0-100 score.

    Starts from a base of 60. Exactly one of the following applies, first
    match wins:
        1. Fewer than 10 transactions in 90 days: -30, LIMITED_HISTORY
        2. 2+ consecutive positive months: +25, STABLE_CASHFLOW
        3. Income variance above 30%: -20, UNSTABLE_CASHFLOW

    Independently, negative balance days cost 15 each, at most 5 days
    counted (NEGATIVE_BALANCE).

    Args:
        stability: Cash-flow features
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        SubScore clamped to 0-100
    """
    score = settings.cashflow_base_score
    reasons = []

    if stability.transaction_volume_90d < settings.min_transaction_volume:
        score -= settings.limited_history_penalty
        reasons.append(REASON_CODES["LIMITED_HISTORY"])
    elif stability.consecutive_positive_months >= settings.stable_months_required:
        score += settings.stable_cashflow_bonus
        reasons.append(REASON_CODES["STABLE_CASHFLOW"])
    elif stability.income_variance_pct > settings.unstable_variance_pct:
        score -= settings.unstable_cashflow_penalty
        reasons.append(REASON_CODES["UNSTABLE_CASHFLOW"])

    negative_days = stability.negative_balance_days or 0
    if negative_days > 0:
        score -= settings.negative_balance_penalty * min(settings.negative_balance_max_days, negative_days)
        reasons.append(REASON_CODES["NEGATIVE_BALANCE"])

    return SubScore(score=clamp(score), reason_codes=tuple(reasons))


def calculate_risk_score(
    income_score: float,
    spending_score: float,
    cashflow_score: float,
    fraud_penalty: float,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Calculate the composite risk score from the sub-scores.

    Each sub-score is inverted (100 - score) so worse behaviour pushes risk
    up, weighted, and summed. The fraud penalty is added unweighted.

    Args:
        income_score: Income sub-score (0-100)
        spending_score: Spending sub-score (0-100)
        cashflow_score: Cash-flow sub-score (0-100)
        fraud_penalty: Additive fraud penalty
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Composite risk score from 0-100 (higher = riskier)
    """
    raw = (
        (100 - income_score) * settings.weight_income +
        (100 - spending_score) * settings.weight_spending +
        (100 - cashflow_score) * settings.weight_cashflow +
        fraud_penalty
    )

    return round_half_up(clamp(raw))
