"""Eligibility service - orchestrates the loan eligibility use case."""

import asyncio
from typing import Optional, Set

import structlog

from src.application.dto import EligibilityRequest
from src.core.metrics import (
    record_decision,
    record_fraud_veto,
    record_sink_write,
    track_scoring_latency,
)
from src.domain.exceptions import InvalidEligibilityRequestException
from src.domain.interfaces import FinancialDataProvider, ResultSink
from src.service.scoring import (
    EligibilityResult,
    ScoringSettings,
    scoring_settings,
    score_eligibility,
)
from src.service.scoring.reason_codes import REASON_CODES

logger = structlog.get_logger(__name__)


class EligibilityService:
    """
    Application service for loan eligibility assessments.

    Fetches a snapshot, scores it, and hands the result to the sink as a
    detached task. A sink failure is logged and counted; it never reaches
    the caller and never delays the returned result.
    """

    def __init__(
        self,
        data_provider: FinancialDataProvider,
        result_sink: Optional[ResultSink] = None,
        settings: ScoringSettings = scoring_settings,
    ):
        self._data_provider = data_provider
        self._result_sink = result_sink
        self._settings = settings
        self._pending_writes: Set[asyncio.Task] = set()

    async def assess(self, request: EligibilityRequest) -> EligibilityResult:
        """
        Assess a subject's loan eligibility.

        Args:
            request: The eligibility request with subject_id and optional override

        Returns:
            EligibilityResult with decision, reasons, and factors

        Raises:
            InvalidEligibilityRequestException: If request validation fails
            DataProviderException: If the financial data fetch fails
            SubjectNotFoundException: If the subject doesn't exist
        """
        errors = request.validate()
        if errors:
            raise InvalidEligibilityRequestException("; ".join(errors))

        log = logger.bind(
            subject_id=request.subject_id,
            income_override=request.monthly_income_override,
        )
        log.info("eligibility_requested")

        with track_scoring_latency():
            snapshot = await self._data_provider.fetch(request.subject_id, request.as_of)
            log.info(
                "snapshot_fetched",
                transaction_count=snapshot.transaction_count_90d,
                fraud_flag_count=len(snapshot.fraud_flags),
            )

            result = score_eligibility(
                snapshot,
                income_override=request.monthly_income_override,
                settings=self._settings,
            )

        if REASON_CODES["FRAUD_FLAG_CRITICAL"].code in result.codes:
            record_fraud_veto()
        record_decision(
            approved=result.approved,
            risk_score=result.risk_score,
            recommended_limit=result.recommended_limit,
            model_version=result.model_version,
        )

        log.info(
            "eligibility_scored",
            decision=result.decision.value,
            risk_score=result.risk_score,
            recommended_limit=result.recommended_limit,
            reason_codes=list(result.codes),
            model_version=result.model_version,
        )

        self._schedule_record(request.subject_id, result)

        return result

    async def wait_for_pending_writes(self) -> None:
        """Wait for every scheduled sink write to finish (shutdown hooks, tests)."""
        if self._pending_writes:
            await asyncio.gather(*list(self._pending_writes))

    def _schedule_record(self, subject_id: str, result: EligibilityResult) -> None:
        """Start a detached sink write, keeping a reference until it finishes."""
        if self._result_sink is None:
            return

        task = asyncio.create_task(self._record(subject_id, result))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _record(self, subject_id: str, result: EligibilityResult) -> None:
        """Write a result to the sink, logging and continuing on failure."""
        try:
            await self._result_sink.record(subject_id, result)
        except Exception as e:
            record_sink_write(success=False)
            logger.error(
                "eligibility_result_record_failed",
                subject_id=subject_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return

        record_sink_write(success=True)
        logger.debug("eligibility_result_recorded", subject_id=subject_id)
