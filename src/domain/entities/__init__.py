"""Domain Entities - Core business objects."""

from .ledger import AccountBalance, Budget, LedgerTransaction
from .snapshot import FinancialSnapshot, FraudFlag, FraudSeverity

__all__ = [
    "AccountBalance",
    "Budget",
    "LedgerTransaction",
    "FinancialSnapshot",
    "FraudFlag",
    "FraudSeverity",
]
