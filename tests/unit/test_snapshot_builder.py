"""
Unit Tests for Financial Snapshot construction.

These tests verify:
1. The 90-day window and calendar-month buckets
2. Overdraft and negative-balance-day counting
3. Budget adherence
4. End-to-end snapshot building from a raw ledger
"""

from datetime import date, timedelta

from src.domain.entities import (
    AccountBalance,
    Budget,
    FinancialSnapshot,
    FraudFlag,
    LedgerTransaction,
)
from src.service.snapshot import (
    build_snapshot,
    calculate_budget_adherence_pct,
    count_negative_balance_days,
    count_overdrafts,
    filter_window,
    monthly_totals,
)


# =============================================================================
# Test Fixtures
# =============================================================================

AS_OF = date(2024, 3, 15)


def make_transaction(
    day: date,
    amount: float,
    balance: float | None = None,
    overdraft: bool = False,
    account_id: str = "",
) -> LedgerTransaction:
    return LedgerTransaction(
        date=day,
        amount=amount,
        balance=balance,
        overdraft=overdraft,
        account_id=account_id,
    )


def generate_ledger() -> list[LedgerTransaction]:
    """Two paychecks, some spending and one dip below zero in March."""
    return [
        make_transaction(date(2023, 11, 1), 999, 999),  # outside the window
        make_transaction(date(2024, 1, 20), 2000, 2000),
        make_transaction(date(2024, 2, 1), -500, 1500),
        make_transaction(date(2024, 2, 20), 2000, 3500),
        make_transaction(date(2024, 3, 5), -4000, -500),
        make_transaction(date(2024, 3, 10), 1000, 500),
    ]


# =============================================================================
# Window Tests
# =============================================================================

class TestFilterWindow:
    """Tests for filter_window()."""

    def test_window_is_90_calendar_days_including_as_of(self):
        transactions = [
            make_transaction(AS_OF, -10),
            make_transaction(AS_OF - timedelta(days=89), -20),
            make_transaction(AS_OF - timedelta(days=90), -30),
            make_transaction(AS_OF + timedelta(days=1), -40),
        ]
        window = filter_window(transactions, AS_OF)
        assert [t.amount for t in window] == [-20, -10]

    def test_window_sorted_oldest_first(self):
        transactions = [
            make_transaction(date(2024, 3, 10), 1),
            make_transaction(date(2024, 1, 20), 2),
        ]
        window = filter_window(transactions, AS_OF)
        assert [t.date for t in window] == [date(2024, 1, 20), date(2024, 3, 10)]


class TestMonthlyTotals:
    """Tests for monthly_totals()."""

    def test_buckets_by_calendar_month(self):
        credits, debits = monthly_totals(generate_ledger(), AS_OF)
        assert credits == (2000, 2000, 1000)
        assert debits == (0, 500, 4000)

    def test_buckets_cross_year_boundary(self):
        transactions = [
            make_transaction(date(2023, 11, 30), 100),
            make_transaction(date(2023, 12, 31), 200),
            make_transaction(date(2024, 1, 1), -50),
        ]
        credits, debits = monthly_totals(transactions, date(2024, 1, 15))
        assert credits == (100, 200, 0)
        assert debits == (0, 0, 50)

    def test_no_transactions(self):
        assert monthly_totals([], AS_OF) == ((0, 0, 0), (0, 0, 0))


# =============================================================================
# Overdraft and Negative Balance Tests
# =============================================================================

class TestCountOverdrafts:
    """Tests for count_overdrafts()."""

    def test_flagged_overdraft(self):
        transactions = [
            make_transaction(date(2024, 3, 1), 1000, 1000),
            make_transaction(date(2024, 3, 2), -100, 900, overdraft=True),
        ]
        assert count_overdrafts(transactions) == 1

    def test_debit_crossing_zero(self):
        assert count_overdrafts(generate_ledger()) == 1

    def test_staying_negative_counts_once(self):
        """Only the crossing into the negative counts, not each debit after it."""
        transactions = [
            make_transaction(date(2024, 3, 1), -100, -100),
            make_transaction(date(2024, 3, 2), -100, -200),
        ]
        assert count_overdrafts(transactions) == 1

    def test_flagged_crossing_not_double_counted(self):
        transactions = [
            make_transaction(date(2024, 3, 1), 100, 100),
            make_transaction(date(2024, 3, 2), -200, -100, overdraft=True),
        ]
        assert count_overdrafts(transactions) == 1

    def test_crossing_tracked_per_account(self):
        """A credit on another account does not reset the overdrawn account."""
        transactions = [
            make_transaction(date(2024, 3, 1), -100, -100, account_id="acc_a"),
            make_transaction(date(2024, 3, 2), 500, 500, account_id="acc_b"),
            make_transaction(date(2024, 3, 3), -50, -150, account_id="acc_a"),
        ]
        assert count_overdrafts(transactions) == 1

    def test_crossing_on_each_account_counted(self):
        transactions = [
            make_transaction(date(2024, 3, 1), -100, -100, account_id="acc_a"),
            make_transaction(date(2024, 3, 2), -20, -20, account_id="acc_b"),
        ]
        assert count_overdrafts(transactions) == 2

    def test_empty(self):
        assert count_overdrafts([]) == 0


class TestNegativeBalanceDays:
    """Tests for count_negative_balance_days()."""

    def test_balance_carried_forward(self):
        """The balance on 3/5 holds until the credit on 3/10."""
        window = filter_window(generate_ledger(), AS_OF)
        assert count_negative_balance_days(window, 500, AS_OF) == 5

    def test_negative_through_as_of(self):
        transactions = [make_transaction(date(2024, 3, 13), -50, -50)]
        assert count_negative_balance_days(transactions, -50, AS_OF) == 3

    def test_balances_summed_across_accounts(self):
        """Account b's balance on 3/11 does not replace account a's."""
        transactions = [
            make_transaction(date(2024, 3, 10), -100, -100, account_id="acc_a"),
            make_transaction(date(2024, 3, 11), 30, 30, account_id="acc_b"),
        ]
        assert count_negative_balance_days(transactions, -70, AS_OF) == 6

    def test_only_days_inside_window_counted(self):
        """A balance from before the window still carries into it."""
        transactions = [make_transaction(AS_OF - timedelta(days=100), -50, -50)]
        assert count_negative_balance_days(transactions, -50, AS_OF) == 90

    def test_no_balances_and_overdrawn(self):
        transactions = [make_transaction(date(2024, 3, 1), -50)]
        assert count_negative_balance_days(transactions, -10, AS_OF) == 30

    def test_no_balances_and_in_credit(self):
        assert count_negative_balance_days([], 10, AS_OF) == 0


# =============================================================================
# Budget Adherence Tests
# =============================================================================

class TestBudgetAdherence:
    """Tests for calculate_budget_adherence_pct()."""

    def test_spend_split_across_budgets(self):
        """300 this month split over two budgets is 150 each."""
        budgets = [Budget("groceries", 100), Budget("transport", 200)]
        transactions = [
            make_transaction(date(2024, 3, 2), -100),
            make_transaction(date(2024, 3, 9), -200),
            make_transaction(date(2024, 2, 28), -5000),  # last month
        ]
        assert calculate_budget_adherence_pct(budgets, transactions, AS_OF) == 50.0

    def test_no_budgets(self):
        assert calculate_budget_adherence_pct([], generate_ledger(), AS_OF) == 0.0

    def test_budget_active_window(self):
        expired = Budget("old", 100, end_date=date(2024, 1, 31))
        future = Budget("new", 100, start_date=date(2024, 4, 1))
        current = Budget("current", 100, start_date=date(2024, 1, 1))

        assert not expired.is_active_on(AS_OF)
        assert not future.is_active_on(AS_OF)
        assert current.is_active_on(AS_OF)


# =============================================================================
# Snapshot Building Tests
# =============================================================================

class TestBuildSnapshot:
    """Tests for build_snapshot()."""

    def test_snapshot_from_ledger(self):
        flags = [FraudFlag("new_device", "low")]
        snapshot = build_snapshot(
            accounts=[
                AccountBalance("checking", 500.0),
                AccountBalance("closed", 1000.0, is_active=False),
            ],
            transactions=generate_ledger(),
            budgets=[
                Budget("everything", 5000),
                Budget("old", 100, end_date=date(2024, 1, 31)),
            ],
            fraud_flags=flags,
            as_of=AS_OF,
        )

        assert snapshot.total_balance == 500.0
        assert snapshot.transaction_count_90d == 5
        assert snapshot.total_spend_90d == 4500.0
        assert snapshot.total_credits_90d == 5000.0
        assert snapshot.net_90d == 500.0
        assert snapshot.monthly_credits == (2000, 2000, 1000)
        assert snapshot.monthly_debits == (0, 500, 4000)
        assert snapshot.overdraft_count == 1
        assert snapshot.negative_balance_days == 5
        assert snapshot.budget_count == 1
        assert snapshot.budget_adherence_pct == 100.0
        assert snapshot.fraud_flags == tuple(flags)

    def test_no_accounts_gives_empty_snapshot(self):
        snapshot = build_snapshot([], [], [], [], AS_OF)
        assert snapshot == FinancialSnapshot.empty()
