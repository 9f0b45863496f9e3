"""
Recommended Credit Limit for the Loan Eligibility Engine.

This module sizes the credit line for approved subjects. The line is the
smaller of an income-based cap and a risk-based cap, kept within the
product's floor and ceiling.
"""

from .risk_score import clamp, round_half_up
from .settings import ScoringSettings, scoring_settings


def recommend_credit_limit(
    risk_score: int,
    monthly_income: float,
    settings: ScoringSettings = scoring_settings,
) -> int:
    """
    Recommend a credit limit for an approved subject.

    Algorithm:
        max_by_income = income * 0.25
        max_by_risk = 5000 - (risk_score / 100) * 3000
        limit = round(clamp(min(max_by_income, max_by_risk), 500, 5000))

    Args:
        risk_score: Composite risk score (0-100)
        monthly_income: Monthly income estimate
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        Credit limit in whole currency units
    """
    max_by_income = monthly_income * settings.limit_income_share
    max_by_risk = settings.limit_ceiling - (risk_score / 100) * settings.limit_risk_span

    return round_half_up(
        clamp(min(max_by_income, max_by_risk), settings.limit_floor, settings.limit_ceiling)
    )


def get_credit_limit_bucket(limit: int | None) -> str:
    """
    Get the bucket label for a credit limit (for metrics reporting).

    Args:
        limit: Recommended limit, None when declined

    Returns:
        Bucket label string
    """
    if not limit:
        return "0"
    elif limit <= 500:
        return "500"
    elif limit <= 1000:
        return "500-1000"
    elif limit <= 2000:
        return "1000-2000"
    elif limit <= 3000:
        return "2000-3000"
    elif limit <= 4000:
        return "3000-4000"
    else:
        return "4000-5000"
