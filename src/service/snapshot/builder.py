"""
Financial Snapshot construction from a raw ledger.

This module condenses what a data source returns (account balances, posted
transactions, budgets, fraud signals) into the FinancialSnapshot the
eligibility engine aggregates:
- 90-day transaction count, spend and credit totals
- Credit/debit totals for the trailing 3 calendar months
- Overdraft count and negative-balance days
- Budget adherence for the current month

All functions are pure; "today" is always passed in as `as_of`.
"""

from datetime import date, timedelta
from typing import Dict, List, Sequence, Tuple

from src.domain.entities import (
    AccountBalance,
    Budget,
    FinancialSnapshot,
    FraudFlag,
    LedgerTransaction,
)

WINDOW_DAYS = 90
TRAILING_MONTHS = 3

# Used when the source gives no per-transaction balances but the subject is overdrawn now
OVERDRAWN_FALLBACK_DAYS = 30


def _month_start(day: date, months_back: int) -> date:
    """First day of the calendar month `months_back` months before `day`."""
    month_index = day.year * 12 + (day.month - 1) - months_back
    return date(month_index // 12, month_index % 12 + 1, 1)


def filter_window(
    transactions: Sequence[LedgerTransaction],
    as_of: date,
    days: int = WINDOW_DAYS,
) -> List[LedgerTransaction]:
    """Transactions posted in the `days` calendar days ending on `as_of`, oldest first."""
    start = as_of - timedelta(days=days - 1)
    return sorted(
        (t for t in transactions if start <= t.date <= as_of),
        key=lambda t: t.date,
    )


def monthly_totals(
    transactions: Sequence[LedgerTransaction],
    as_of: date,
    months: int = TRAILING_MONTHS,
) -> Tuple[Tuple[float, ...], Tuple[float, ...]]:
    """
    Sum credits and debits per calendar month.

    Algorithm:
        For each of the `months` calendar months ending with the month of
        `as_of` (oldest first), sum positive amounts as credits and the
        absolute value of negative amounts as debits.

    Args:
        transactions: Transactions to bucket
        as_of: Day the window ends on
        months: Number of trailing calendar months

    Returns:
        (credits, debits), each ordered oldest to newest
    """
    credits = []
    debits = []

    for back in range(months - 1, -1, -1):
        start = _month_start(as_of, back)
        end = _month_start(as_of, back - 1)
        in_month = [t for t in transactions if start <= t.date < end]
        credits.append(sum(t.amount for t in in_month if t.amount > 0))
        debits.append(sum(abs(t.amount) for t in in_month if t.amount < 0))

    return tuple(credits), tuple(debits)


def count_overdrafts(transactions: Sequence[LedgerTransaction]) -> int:
    """
    Count overdraft events.

    Algorithm:
        1. Count transactions the source flagged as overdrafts
        2. Count debits that took their account's balance from >= 0 to below zero
        3. Never count the same transaction twice

    Previous balances are tracked per account.

    Args:
        transactions: Transactions ordered oldest first

    Returns:
        Total count of overdraft events (0 or higher)
    """
    count = 0
    prev_balances: Dict[str, float] = {}

    for txn in transactions:
        prev_balance = prev_balances.get(txn.account_id, 0.0)
        if txn.overdraft:
            count += 1
        elif txn.is_debit and txn.balance is not None and txn.balance < 0 and prev_balance >= 0:
            count += 1

        if txn.balance is not None:
            prev_balances[txn.account_id] = txn.balance

    return count


def count_negative_balance_days(
    transactions: Sequence[LedgerTransaction],
    total_balance: float,
    as_of: date,
    days: int = WINDOW_DAYS,
) -> int:
    """
    Count days in the window that ended with a negative balance.

    Algorithm:
        1. Build a map of date -> end-of-day balance for each account
        2. Walk every day from the first balance to `as_of`, carrying each
           account's balance forward on days it has no transactions
        3. Count days where the balances summed across accounts are below zero

    Edge Cases:
        - No per-transaction balances: fall back to the current total
          balance, counting a fixed 30 days when it is negative

    Args:
        transactions: Transactions in the window, oldest first
        total_balance: Current balance across active accounts
        as_of: Last day of the window
        days: Window length in calendar days, including `as_of`

    Returns:
        Number of negative-balance days (0 to `days`)
    """
    daily_balances: Dict[str, Dict[date, float]] = {}
    for txn in transactions:
        if txn.balance is not None:
            daily_balances.setdefault(txn.account_id, {})[txn.date] = txn.balance

    if not daily_balances:
        return OVERDRAWN_FALLBACK_DAYS if total_balance < 0 else 0

    window_start = as_of - timedelta(days=days - 1)
    current = min(min(balances) for balances in daily_balances.values())
    last_balances = {account_id: 0.0 for account_id in daily_balances}
    negative_days = 0
    while current <= as_of:
        for account_id, balances in daily_balances.items():
            if current in balances:
                last_balances[account_id] = balances[current]
        if current >= window_start and sum(last_balances.values()) < 0:
            negative_days += 1
        current += timedelta(days=1)

    return negative_days


def calculate_budget_adherence_pct(
    budgets: Sequence[Budget],
    transactions: Sequence[LedgerTransaction],
    as_of: date,
) -> float:
    """
    Percentage of budgets respected so far this month.

    Algorithm:
        Month-to-date spend is split evenly across the budgets; a budget is
        respected when its share does not exceed its allowance.

    Edge Cases:
        - No budgets: 0 (the aggregator treats this as "no budgets set")

    Args:
        budgets: Active budgets
        transactions: Transactions in the window
        as_of: Current day

    Returns:
        Adherence percentage rounded to a whole number
    """
    if not budgets:
        return 0.0

    month_start = _month_start(as_of, 0)
    month_spend = sum(
        abs(t.amount) for t in transactions
        if t.amount < 0 and month_start <= t.date <= as_of
    )
    share = month_spend / len(budgets)

    under_budget = sum(1 for b in budgets if share <= b.amount)
    return float(round(under_budget / len(budgets) * 100))


def build_snapshot(
    accounts: Sequence[AccountBalance],
    transactions: Sequence[LedgerTransaction],
    budgets: Sequence[Budget],
    fraud_flags: Sequence[FraudFlag],
    as_of: date,
) -> FinancialSnapshot:
    """
    Build a FinancialSnapshot from a raw ledger.

    A subject with no accounts and no transactions yields the all-zero
    snapshot rather than an error.

    Args:
        accounts: Linked accounts with current balances
        transactions: Posted transactions (any range; filtered to the window)
        budgets: Budgets (filtered to those active on `as_of`)
        fraud_flags: Fraud signals attached to the subject
        as_of: Day the window ends on

    Returns:
        FinancialSnapshot
    """
    total_balance = sum(a.current_balance for a in accounts if a.is_active)
    window = filter_window(transactions, as_of)
    credits, debits = monthly_totals(window, as_of)
    active_budgets = [b for b in budgets if b.is_active_on(as_of)]

    return FinancialSnapshot(
        total_balance=total_balance,
        transaction_count_90d=len(window),
        total_spend_90d=sum(abs(t.amount) for t in window if t.amount < 0),
        total_credits_90d=sum(t.amount for t in window if t.amount > 0),
        monthly_credits=credits,
        monthly_debits=debits,
        overdraft_count=count_overdrafts(window),
        negative_balance_days=count_negative_balance_days(window, total_balance, as_of),
        budget_count=len(active_budgets),
        budget_adherence_pct=calculate_budget_adherence_pct(active_budgets, window, as_of),
        fraud_flags=tuple(fraud_flags),
    )
