"""
Domain Interfaces (Ports)
"""

from .providers import FinancialDataProvider
from .sinks import ResultSink

__all__ = [
    "FinancialDataProvider",
    "ResultSink",
]
