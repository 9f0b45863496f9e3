"""
Feature Aggregation for the Loan Eligibility Engine.

This module turns a FinancialSnapshot into the normalized EligibilityInput
the scoring engine consumes:
- Monthly income estimate
- Spending behaviour (average spend, discretionary share, savings rate)
- Cash-flow stability (income variance, positive-month streak)

Each derivation is documented with:
- The calculation algorithm
- Edge cases and how they're handled

Zero denominators are guarded everywhere; degenerate snapshots produce
conservative features rather than errors.
"""

from typing import Optional, Sequence

from src.domain.entities import FinancialSnapshot

from .models import CashflowStability, EligibilityInput, SpendingBehavior

MONTHS_IN_WINDOW = 3


def estimate_monthly_income(
    snapshot: FinancialSnapshot,
    override: Optional[float] = None,
) -> float:
    """
    Estimate the subject's monthly income.

    Algorithm:
        1. A caller-supplied override wins when it is positive
        2. Otherwise use the most recent month's credits, if positive
        3. Otherwise fall back to the 90-day average of credits

    Args:
        snapshot: Financial snapshot
        override: Stated income supplied by the caller

    Returns:
        Monthly income estimate (0 or higher)
    """
    if override is not None and override > 0:
        return float(override)

    latest = snapshot.monthly_credits[-1] if snapshot.monthly_credits else 0.0
    if latest > 0:
        return float(latest)

    return max(0.0, snapshot.total_credits_90d / MONTHS_IN_WINDOW)


def calculate_savings_rate_pct(avg_monthly_credits: float, avg_monthly_spend: float) -> float:
    """
    Share of monthly inflow that is not spent, as a percentage.

    Edge Cases:
        - No inflow: 0 (nothing can be saved)
        - Spend exceeds inflow: floored at 0
    """
    if avg_monthly_credits <= 0:
        return 0.0
    return max(0.0, (avg_monthly_credits - avg_monthly_spend) / avg_monthly_credits * 100)


def calculate_discretionary_spend_pct(avg_monthly_credits: float, avg_monthly_spend: float) -> float:
    """
    Monthly spend as a percentage of monthly inflow, capped at 100.

    Edge Cases:
        - No inflow: 100 (every dollar spent is discretionary)
    """
    if avg_monthly_credits <= 0:
        return 100.0
    return min(100.0, avg_monthly_spend / avg_monthly_credits * 100)


def calculate_income_variance_pct(monthly_credits: Sequence[float]) -> float:
    """
    Calculate how much monthly income moves around.

    Algorithm:
        1. Mean of the monthly credit totals
        2. Population standard deviation around that mean
        3. Coefficient of variation (std_dev / mean) as a percentage, capped at 100

    Edge Cases:
        - Fewer than 2 months: 0 (no variation can be observed)
        - Mean <= 0: 100 (no reliable income reads as maximally unstable)

    Args:
        monthly_credits: Credit totals per month

    Returns:
        Income variance percentage from 0 to 100
    """
    values = list(monthly_credits)
    if len(values) < 2:
        return 0.0

    mean = sum(values) / len(values)
    if mean <= 0:
        return 100.0

    variance = sum((v - mean) ** 2 for v in values) / len(values)
    std_dev = variance ** 0.5

    return min(100.0, std_dev / mean * 100)


def count_consecutive_positive_months(
    monthly_credits: Sequence[float],
    monthly_debits: Sequence[float],
) -> int:
    """
    Count trailing months with non-negative net cash flow.

    Algorithm:
        Walk the months from most recent to oldest and count while
        credits - debits >= 0. The first negative month ends the streak,
        so this is not a global count of positive months.

    Edge Cases:
        - A month with no debit total counts its debits as 0

    Args:
        monthly_credits: Credit totals per month, oldest first
        monthly_debits: Debit totals per month, oldest first

    Returns:
        Length of the trailing positive streak
    """
    count = 0
    for i in range(len(monthly_credits) - 1, -1, -1):
        debits = monthly_debits[i] if i < len(monthly_debits) else 0.0
        if monthly_credits[i] - debits >= 0:
            count += 1
        else:
            break
    return count


def build_eligibility_input(
    snapshot: FinancialSnapshot,
    monthly_income_override: Optional[float] = None,
) -> EligibilityInput:
    """
    Aggregate a snapshot into the scoring engine's input.

    Budget adherence is only carried when the subject has budgets; its
    absence, not a zero, signals "no budgets set".

    Args:
        snapshot: Financial snapshot
        monthly_income_override: Stated income supplied by the caller

    Returns:
        EligibilityInput ready for scoring
    """
    avg_monthly_spend = snapshot.total_spend_90d / MONTHS_IN_WINDOW
    avg_monthly_credits = snapshot.total_credits_90d / MONTHS_IN_WINDOW

    spending = SpendingBehavior(
        avg_monthly_spend=avg_monthly_spend,
        discretionary_spend_pct=calculate_discretionary_spend_pct(
            avg_monthly_credits, avg_monthly_spend
        ),
        savings_rate_pct=calculate_savings_rate_pct(avg_monthly_credits, avg_monthly_spend),
        overdraft_count=snapshot.overdraft_count,
        budget_adherence_pct=(
            snapshot.budget_adherence_pct if snapshot.budget_count > 0 else None
        ),
    )

    stability = CashflowStability(
        income_variance_pct=calculate_income_variance_pct(snapshot.monthly_credits),
        consecutive_positive_months=count_consecutive_positive_months(
            snapshot.monthly_credits, snapshot.monthly_debits
        ),
        negative_balance_days=snapshot.negative_balance_days,
        transaction_volume_90d=snapshot.transaction_count_90d,
    )

    return EligibilityInput(
        monthly_income_estimate=estimate_monthly_income(snapshot, monthly_income_override),
        spending_behavior=spending,
        cashflow_stability=stability,
        fraud_flags=tuple(snapshot.fraud_flags),
    )
