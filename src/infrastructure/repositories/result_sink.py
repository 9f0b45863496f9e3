"""SQLAlchemy implementation of ResultSink."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domain.exceptions import ResultSinkException
from src.domain.interfaces import ResultSink
from src.infrastructure.database.models import EligibilityResultModel
from src.service.scoring.models import EligibilityResult


class SqlAlchemyResultSink(ResultSink):
    """
    Writes each eligibility result as one audit row.

    Every write opens and commits its own session, so a write scheduled
    after the scoring call returned never shares a transaction with it.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def record(self, subject_id: str, result: EligibilityResult) -> None:
        """Persist a result verbatim, with reason codes and factors as JSON."""
        model = EligibilityResultModel(
            subject_id=subject_id,
            risk_score=result.risk_score,
            decision=result.decision.value,
            reason_codes=[rc.to_dict() for rc in result.reason_codes],
            factors=result.factors.to_dict(),
            recommended_limit=result.recommended_limit,
            model_version=result.model_version,
            scored_at=result.timestamp,
        )

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(model)
        except SQLAlchemyError as e:
            raise ResultSinkException(
                message=f"Failed to record eligibility result: {e}",
                subject_id=subject_id,
            ) from e
