"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .eligibility import (
    InvalidEligibilityRequestException,
    ResultSinkException,
    UnknownReasonCodeException,
)
from .provider import (
    DataProviderException,
    DataProviderTimeoutException,
    SubjectNotFoundException,
)

__all__ = [
    "DomainException",
    "InvalidEligibilityRequestException",
    "ResultSinkException",
    "UnknownReasonCodeException",
    "DataProviderException",
    "DataProviderTimeoutException",
    "SubjectNotFoundException",
]
