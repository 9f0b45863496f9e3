"""Application services (use cases)."""

from .eligibility_service import EligibilityService

__all__ = [
    "EligibilityService",
]
