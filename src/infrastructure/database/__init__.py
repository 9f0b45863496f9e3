"""Database infrastructure."""

from .connection import DatabaseSessionManager, db_manager
from .models import Base, EligibilityResultModel

__all__ = [
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "EligibilityResultModel",
]
