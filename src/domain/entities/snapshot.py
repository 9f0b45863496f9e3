"""Financial snapshot entity consumed by the eligibility engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class FraudSeverity(str, Enum):
    """Severity of a fraud signal."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class FraudFlag:
    """
    Immutable fraud signal read from an external fraud source.

    Attributes:
        code: Signal type, e.g. "velocity_spike"
        severity: One of FraudSeverity; unrecognized values are kept as-is
        description: Optional text explaining the signal
    """

    code: str
    severity: str
    description: Optional[str] = None

    @property
    def is_critical(self) -> bool:
        """Check if this flag vetoes the application outright."""
        return self.severity == FraudSeverity.CRITICAL


@dataclass(frozen=True)
class FinancialSnapshot:
    """
    Point-in-time summary of a subject's finances.

    Recomputed per request and never persisted. Monthly series cover the
    trailing 3 calendar months, ordered oldest to newest.

    Attributes:
        total_balance: Sum of current balances across active accounts
        transaction_count_90d: Transactions in the trailing 90 days
        total_spend_90d: Sum of outflows (positive number) in 90 days
        total_credits_90d: Sum of inflows in 90 days
        monthly_credits: Inflow per calendar month, oldest first
        monthly_debits: Outflow per calendar month, oldest first
        overdraft_count: Overdraft events in the window
        negative_balance_days: Days with a negative balance
        budget_count: Active budgets
        budget_adherence_pct: % of active budgets respected this month
        fraud_flags: Fraud signals attached to the subject
    """

    total_balance: float = 0.0
    transaction_count_90d: int = 0
    total_spend_90d: float = 0.0
    total_credits_90d: float = 0.0
    monthly_credits: Tuple[float, ...] = (0.0, 0.0, 0.0)
    monthly_debits: Tuple[float, ...] = (0.0, 0.0, 0.0)
    overdraft_count: int = 0
    negative_balance_days: int = 0
    budget_count: int = 0
    budget_adherence_pct: float = 0.0
    fraud_flags: Tuple[FraudFlag, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "FinancialSnapshot":
        """Snapshot for a subject with no linked accounts."""
        return cls()

    @property
    def net_90d(self) -> float:
        """Net cash flow over the 90-day window."""
        return self.total_credits_90d - self.total_spend_90d
