"""External data provider interfaces."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Optional

from src.domain.entities import FinancialSnapshot


class FinancialDataProvider(ABC):
    """
    Abstract source of financial snapshots.

    Implementations read balances, transactions, budgets and fraud
    signals for a subject and condense them into a FinancialSnapshot.
    """

    @abstractmethod
    async def fetch(
        self,
        subject_id: str,
        as_of: Optional[date] = None,
    ) -> FinancialSnapshot:
        """
        Fetch a snapshot covering the trailing 90 days.

        Args:
            subject_id: The subject's identifier
            as_of: Day the window ends on (defaults to today)

        Returns:
            Snapshot with at least 90 days of totals and the 3 most recent
            calendar months of credits/debits. A subject with no accounts
            yields an all-zero snapshot, not an error.

        Raises:
            SubjectNotFoundException: If the subject doesn't exist
            DataProviderException: If the source returns an error
            DataProviderTimeoutException: If the request times out
        """
        ...
