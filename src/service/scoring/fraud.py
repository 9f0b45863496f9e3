"""
Fraud Assessment for the Loan Eligibility Engine.

Fraud signals are assessed before anything else. The outcome is one of two
variants:
- FraudVeto: a critical flag was found; the application is rejected outright
- FraudPenalty: an additive risk penalty plus the reasons behind it

The pipeline matches on the variant before computing any sub-score.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import structlog

from src.domain.entities import FraudFlag, FraudSeverity

from .models import ReasonCode
from .reason_codes import REASON_CODES
from .settings import ScoringSettings, scoring_settings

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class FraudVeto:
    """A critical fraud signal; no other input can rescue the application."""
    reason_code: ReasonCode
    penalty: float = 100.0


@dataclass(frozen=True)
class FraudPenalty:
    """Accumulated, capped penalty from non-critical fraud signals."""
    amount: float
    reason_codes: Tuple[ReasonCode, ...] = ()


FraudAssessment = Union[FraudVeto, FraudPenalty]


def assess_fraud(
    flags: Sequence[FraudFlag],
    settings: ScoringSettings = scoring_settings,
) -> FraudAssessment:
    """
    Turn fraud flags into a veto or an additive penalty.

    Policy:
        1. No flags: penalty 0 with NO_FRAUD_FLAGS
        2. Any critical flag: veto at the first one found, other flags ignored
        3. Otherwise accumulate per flag (high 40, medium 25, low 10,
           unrecognized 15), capped at 99 so 100 stays reserved for the veto

    A flag's own description replaces the catalog text on its reason code.
    Unrecognized severities add their penalty without a reason code, since
    the catalog has no entry to attach.

    Args:
        flags: Fraud flags attached to the subject
        settings: Scoring settings (uses defaults if not provided)

    Returns:
        FraudVeto or FraudPenalty
    """
    if not flags:
        return FraudPenalty(amount=0.0, reason_codes=(REASON_CODES["NO_FRAUD_FLAGS"],))

    for flag in flags:
        if flag.is_critical:
            return FraudVeto(
                reason_code=REASON_CODES["FRAUD_FLAG_CRITICAL"].with_description(flag.description),
                penalty=settings.fraud_veto_penalty,
            )

    by_severity = {
        FraudSeverity.HIGH: (settings.fraud_penalty_high, REASON_CODES["FRAUD_FLAG_HIGH"]),
        FraudSeverity.MEDIUM: (settings.fraud_penalty_medium, REASON_CODES["FRAUD_FLAG_MEDIUM"]),
        FraudSeverity.LOW: (settings.fraud_penalty_low, REASON_CODES["FRAUD_FLAG_LOW"]),
    }

    penalty = 0.0
    reasons = []
    for flag in flags:
        try:
            amount, reason = by_severity[FraudSeverity(flag.severity)]
        except (ValueError, KeyError):
            logger.warning("unrecognized_fraud_severity", code=flag.code, severity=flag.severity)
            penalty += settings.fraud_penalty_unknown
            continue

        penalty += amount
        reasons.append(reason.with_description(flag.description))

    return FraudPenalty(
        amount=min(settings.fraud_penalty_cap, penalty),
        reason_codes=tuple(reasons),
    )
