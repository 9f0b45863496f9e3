"""Eligibility-related domain exceptions."""

from .base import DomainException


class InvalidEligibilityRequestException(DomainException):
    """Raised when an eligibility request is invalid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_ELIGIBILITY_REQUEST",
        )


class UnknownReasonCodeException(DomainException):
    """Raised when a reason code key is not in the catalog."""

    def __init__(self, key: str):
        super().__init__(
            message=f"Unknown reason code: {key}",
            code="UNKNOWN_REASON_CODE",
        )
        self.key = key


class ResultSinkException(DomainException):
    """Raised when an eligibility result cannot be recorded."""

    def __init__(self, message: str, subject_id: str | None = None):
        super().__init__(
            message=message,
            code="RESULT_SINK_ERROR",
        )
        self.subject_id = subject_id
