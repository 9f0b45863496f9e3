"""External API client implementations."""

from .financial_data_client import HttpFinancialDataProvider

__all__ = [
    "HttpFinancialDataProvider",
]
