"""Data transfer objects for eligibility assessments."""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional


@dataclass(frozen=True)
class EligibilityRequest:
    """Input data for requesting an eligibility assessment."""
    subject_id: str
    monthly_income_override: Optional[float] = None
    as_of: Optional[date] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.subject_id or not self.subject_id.strip():
            errors.append("subject_id is required")

        if self.monthly_income_override is not None and self.monthly_income_override < 0:
            errors.append("monthly_income_override must not be negative")

        return errors
