"""
Scoring Settings for the Loan Eligibility Engine.

This module contains every tunable constant of the eligibility model. The
settings object is immutable once built and is passed explicitly into the
scoring functions, so two model versions can be evaluated side by side
without touching global state.

Environment variables use the SCORING_ prefix:
    SCORING_APPROVE_THRESHOLD=60
    SCORING_WEIGHT_INCOME=0.30
    SCORING_MODEL_VERSION=1.0.0

Usage:
    from src.service.scoring.settings import scoring_settings

    # Use default settings (loaded from env)
    threshold = scoring_settings.approve_threshold

    # Or create custom settings for testing
    custom = ScoringSettings(approve_threshold=50, model_version="1.1.0")
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import ScoreWeights


class ScoringSettings(BaseSettings):
    """
    Configurable parameters for the eligibility scoring model.

    All settings can be overridden via environment variables with SCORING_ prefix.
    Monetary values are in the account currency's major unit.
    All scores are 0-100.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    model_version: str = Field(
        default="1.0.0",
        description="Version stamped onto every eligibility result",
    )

    # === Decision ===
    approve_threshold: int = Field(
        default=60,
        ge=0,
        le=100,
        description="Risk score at or below this is approved",
    )

    # === Income ===
    min_income: float = Field(
        default=1500.0,
        gt=0.0,
        description="Monthly income below this is considered insufficient",
    )
    income_score_step: float = Field(
        default=100.0,
        gt=0.0,
        description="Income above the minimum needed per extra score point",
    )

    # === Spending ===
    max_dti_pct: float = Field(
        default=45.0,
        ge=0.0,
        description="Spend rate (spend / income, %) above this is high DTI",
    )
    spending_base_score: float = Field(default=70.0, ge=0.0, le=100.0)
    high_dti_penalty: float = Field(default=30.0, ge=0.0)
    savings_rate_threshold_pct: float = Field(default=5.0, ge=0.0)
    savings_bonus: float = Field(default=15.0, ge=0.0)
    budget_adherence_threshold_pct: float = Field(default=70.0, ge=0.0, le=100.0)
    budget_bonus: float = Field(default=10.0, ge=0.0)
    overdraft_penalty: float = Field(default=20.0, ge=0.0)
    overdraft_penalty_max_count: int = Field(default=3, ge=0)
    overspend_threshold_pct: float = Field(
        default=100.0,
        ge=0.0,
        description="Spend rate above this means spending exceeds income",
    )
    overspend_penalty: float = Field(default=25.0, ge=0.0)

    # === Cashflow ===
    cashflow_base_score: float = Field(default=60.0, ge=0.0, le=100.0)
    min_transaction_volume: int = Field(
        default=10,
        ge=0,
        description="Fewer 90-day transactions than this is limited history",
    )
    limited_history_penalty: float = Field(default=30.0, ge=0.0)
    stable_months_required: int = Field(default=2, ge=0)
    stable_cashflow_bonus: float = Field(default=25.0, ge=0.0)
    unstable_variance_pct: float = Field(default=30.0, ge=0.0)
    unstable_cashflow_penalty: float = Field(default=20.0, ge=0.0)
    negative_balance_penalty: float = Field(default=15.0, ge=0.0)
    negative_balance_max_days: int = Field(default=5, ge=0)

    # === Fraud ===
    fraud_penalty_high: float = Field(default=40.0, ge=0.0)
    fraud_penalty_medium: float = Field(default=25.0, ge=0.0)
    fraud_penalty_low: float = Field(default=10.0, ge=0.0)
    fraud_penalty_unknown: float = Field(default=15.0, ge=0.0)
    fraud_penalty_cap: float = Field(
        default=99.0,
        ge=0.0,
        description="Accumulated penalty cap; 100 is reserved for the critical veto",
    )
    fraud_veto_penalty: float = Field(default=100.0, ge=0.0)

    # === Factor Weights ===
    # Intentionally sum to 0.90; the fraud penalty is added unweighted on top.
    weight_income: float = Field(default=0.30, ge=0.0, le=1.0)
    weight_spending: float = Field(default=0.35, ge=0.0, le=1.0)
    weight_cashflow: float = Field(default=0.25, ge=0.0, le=1.0)

    # === Recommended Limit ===
    limit_income_share: float = Field(
        default=0.25,
        ge=0.0,
        le=1.0,
        description="Share of monthly income usable as a credit line",
    )
    limit_ceiling: float = Field(default=5000.0, gt=0.0)
    limit_floor: float = Field(default=500.0, ge=0.0)
    limit_risk_span: float = Field(
        default=3000.0,
        ge=0.0,
        description="Amount removed from the ceiling as risk goes from 0 to 100",
    )

    @model_validator(mode="after")
    def validate_limits(self) -> "ScoringSettings":
        """Validate that weights are usable and the limit range is well-formed."""
        if self.weight_income + self.weight_spending + self.weight_cashflow > 1.0:
            raise ValueError("Sub-score weights must not sum above 1.0")
        if self.limit_floor > self.limit_ceiling:
            raise ValueError(
                f"limit_floor ({self.limit_floor}) > limit_ceiling ({self.limit_ceiling})"
            )
        return self

    @property
    def weights(self) -> ScoreWeights:
        """Sub-score weights as reported in score factors."""
        return ScoreWeights(
            income=self.weight_income,
            spending=self.weight_spending,
            cashflow=self.weight_cashflow,
        )


@lru_cache
def get_scoring_settings() -> ScoringSettings:
    """Get cached scoring settings instance."""
    return ScoringSettings()


scoring_settings = get_scoring_settings()
