"""
Reason Code Catalog for the Loan Eligibility Engine.

Every scoring branch that explains itself attaches one of these entries.
Codes are grouped by domain prefix:
- I: income
- S: spending
- C: cashflow
- F: fraud
- D: default / no signal

The x0xx range holds positive signals and x1xx negative ones.
"""

from types import MappingProxyType
from typing import Mapping

from src.domain.exceptions import UnknownReasonCodeException

from .models import Impact, ReasonCode

REASON_CODE_CATALOG_VERSION = "1.0.0"


REASON_CODES: Mapping[str, ReasonCode] = MappingProxyType({
    # Positive
    "INCOME_SUFFICIENT": ReasonCode("I001", "Monthly income meets minimum threshold", Impact.POSITIVE),
    "LOW_DTI": ReasonCode("I002", "Debt-to-income ratio within acceptable range", Impact.POSITIVE),
    "STABLE_CASHFLOW": ReasonCode("C001", "Consistent positive cashflow over observation period", Impact.POSITIVE),
    "POSITIVE_SAVINGS": ReasonCode("S001", "Demonstrates savings behavior", Impact.POSITIVE),
    "BUDGET_DISCIPLINE": ReasonCode("S002", "Budget adherence observed", Impact.POSITIVE),
    "NO_FRAUD_FLAGS": ReasonCode("F001", "No fraud indicators present", Impact.POSITIVE),
    # Negative
    "INCOME_INSUFFICIENT": ReasonCode("I101", "Monthly income below minimum threshold", Impact.NEGATIVE),
    "HIGH_DTI": ReasonCode("I102", "Debt-to-income ratio exceeds limit", Impact.NEGATIVE),
    "UNSTABLE_CASHFLOW": ReasonCode("C101", "High variance in monthly cashflow", Impact.NEGATIVE),
    "HIGH_SPEND_RATE": ReasonCode("S101", "Spending rate exceeds income", Impact.NEGATIVE),
    "OVERDRAFT_HISTORY": ReasonCode("S102", "Overdraft activity detected", Impact.NEGATIVE),
    "NEGATIVE_BALANCE": ReasonCode("C102", "Negative balance days in observation period", Impact.NEGATIVE),
    "LIMITED_HISTORY": ReasonCode("C103", "Insufficient transaction history", Impact.NEGATIVE),
    "FRAUD_FLAG_LOW": ReasonCode("F101", "Low-severity fraud flag present", Impact.NEGATIVE),
    "FRAUD_FLAG_MEDIUM": ReasonCode("F102", "Medium-severity fraud flag present", Impact.NEGATIVE),
    "FRAUD_FLAG_HIGH": ReasonCode("F103", "High-severity fraud flag present", Impact.NEGATIVE),
    "FRAUD_FLAG_CRITICAL": ReasonCode("F104", "Critical fraud flag - application declined", Impact.NEGATIVE),
    # Fallback
    "DEFAULT": ReasonCode("D000", "Standard eligibility assessment", Impact.NEUTRAL),
})


def get_reason_code(key: str) -> ReasonCode:
    """
    Look up a catalog entry by key.

    Args:
        key: Catalog key, e.g. "LOW_DTI"

    Returns:
        The catalog entry

    Raises:
        UnknownReasonCodeException: If the key is not in the catalog
    """
    try:
        return REASON_CODES[key]
    except KeyError:
        raise UnknownReasonCodeException(key) from None

