"""Financial data provider domain exceptions."""

from .base import DomainException


class DataProviderException(DomainException):
    """Raised when the financial data source returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="DATA_PROVIDER_ERROR",
        )
        self.status_code = status_code


class DataProviderTimeoutException(DataProviderException):
    """Raised when the financial data source times out."""

    def __init__(self):
        super().__init__(
            message="Financial data request timed out",
            status_code=None,
        )
        self.code = "DATA_PROVIDER_TIMEOUT"


class SubjectNotFoundException(DomainException):
    """Raised when the data source has no record of the subject."""

    def __init__(self, subject_id: str):
        super().__init__(
            message=f"Subject not found: {subject_id}",
            code="SUBJECT_NOT_FOUND",
        )
        self.subject_id = subject_id
