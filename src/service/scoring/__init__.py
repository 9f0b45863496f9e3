"""
Eligibility Scoring Module for the Loan Eligibility Engine
"""

from .models import (
    Impact,
    LoanDecision,
    ReasonCode,
    SpendingBehavior,
    CashflowStability,
    EligibilityInput,
    ScoreWeights,
    SubScore,
    ScoreFactors,
    EligibilityResult,
)
from .settings import ScoringSettings, scoring_settings
from .reason_codes import REASON_CODES, REASON_CODE_CATALOG_VERSION, get_reason_code
from .features import (
    estimate_monthly_income,
    calculate_savings_rate_pct,
    calculate_discretionary_spend_pct,
    calculate_income_variance_pct,
    count_consecutive_positive_months,
    build_eligibility_input,
)
from .fraud import FraudVeto, FraudPenalty, assess_fraud
from .risk_score import (
    score_income,
    score_spending,
    score_cashflow,
    calculate_risk_score,
)
from .credit_limit import recommend_credit_limit, get_credit_limit_bucket
from .decision import score, score_eligibility, explain_result

__all__ = [
    # Settings
    "ScoringSettings",
    "scoring_settings",
    # Models
    "Impact",
    "LoanDecision",
    "ReasonCode",
    "SpendingBehavior",
    "CashflowStability",
    "EligibilityInput",
    "ScoreWeights",
    "SubScore",
    "ScoreFactors",
    "EligibilityResult",
    # Reason Codes
    "REASON_CODES",
    "REASON_CODE_CATALOG_VERSION",
    "get_reason_code",
    # Features
    "estimate_monthly_income",
    "calculate_savings_rate_pct",
    "calculate_discretionary_spend_pct",
    "calculate_income_variance_pct",
    "count_consecutive_positive_months",
    "build_eligibility_input",
    # Fraud
    "FraudVeto",
    "FraudPenalty",
    "assess_fraud",
    # Scoring
    "score_income",
    "score_spending",
    "score_cashflow",
    "calculate_risk_score",
    # Credit Limit
    "recommend_credit_limit",
    "get_credit_limit_bucket",
    # Decision
    "score",
    "score_eligibility",
    "explain_result",
]
