"""
Financial Snapshot Module - raw ledger to FinancialSnapshot
"""

from .builder import (
    build_snapshot,
    calculate_budget_adherence_pct,
    count_negative_balance_days,
    count_overdrafts,
    filter_window,
    monthly_totals,
)

__all__ = [
    "build_snapshot",
    "calculate_budget_adherence_pct",
    "count_negative_balance_days",
    "count_overdrafts",
    "filter_window",
    "monthly_totals",
]
