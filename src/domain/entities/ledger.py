"""Raw ledger entities returned by the financial data source."""

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class AccountBalance:
    """
    Current balance of one linked account.

    Attributes:
        account_id: Provider's account identifier
        current_balance: Balance right now (negative when overdrawn)
        is_active: Inactive accounts are ignored
    """

    account_id: str
    current_balance: float
    is_active: bool = True


@dataclass(frozen=True)
class LedgerTransaction:
    """
    Immutable representation of a posted transaction.

    Attributes:
        date: Posting date
        amount: Signed amount; positive is money in, negative is money out
        balance: Account balance after this transaction, when the source provides it
        overdraft: True if the source marked this transaction as an overdraft
        description: Human-readable transaction description
        account_id: Account the transaction posted to, empty when the source does not say
    """

    date: date
    amount: float
    balance: Optional[float] = None
    overdraft: bool = False
    description: str = ""
    account_id: str = ""

    @property
    def is_debit(self) -> bool:
        """Check if this is money out."""
        return self.amount < 0


@dataclass(frozen=True)
class Budget:
    """
    An active spending budget.

    Attributes:
        category: Budget category label
        amount: Monthly allowance
        start_date: First day the budget applies
        end_date: Last day it applies, None for open-ended budgets
    """

    category: str
    amount: float
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def is_active_on(self, day: date) -> bool:
        """Check whether the budget applies on the given day."""
        if self.start_date is not None and self.start_date > day:
            return False
        if self.end_date is not None and self.end_date < day:
            return False
        return True
