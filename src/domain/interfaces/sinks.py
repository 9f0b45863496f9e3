"""Result sink interfaces."""

from abc import ABC, abstractmethod

from src.service.scoring.models import EligibilityResult


class ResultSink(ABC):
    """
    Abstract one-way store for eligibility results.

    Results are written for audit only; nothing in the engine reads them back.
    """

    @abstractmethod
    async def record(self, subject_id: str, result: EligibilityResult) -> None:
        """
        Persist a result verbatim.

        Args:
            subject_id: The subject the result belongs to
            result: The result to record

        Raises:
            ResultSinkException: If the result could not be stored
        """
        ...
