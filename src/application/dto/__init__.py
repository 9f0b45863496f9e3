"""Data Transfer Objects for application layer."""

from .eligibility import EligibilityRequest

__all__ = [
    "EligibilityRequest",
]
