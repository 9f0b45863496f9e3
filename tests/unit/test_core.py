"""
Unit Tests for the core wiring: logging, metrics and service lifecycle.
"""

import pytest
import structlog

from src.application.services import EligibilityService
from src.core import dependencies
from src.core.config import settings
from src.core.logging import setup_logging
from src.core.metrics import get_metrics, record_decision


class TestLogging:
    """Tests for setup_logging()."""

    def test_setup_logging_json(self):
        setup_logging("INFO", "json")
        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.processors.JSONRenderer)

    def test_setup_logging_console(self):
        setup_logging("DEBUG", "console")
        config = structlog.get_config()
        assert isinstance(config["processors"][-1], structlog.dev.ConsoleRenderer)

    def test_unknown_level_falls_back_to_info(self):
        setup_logging("NOT_A_LEVEL", "json")
        structlog.get_logger("test").info("logging_configured")


class TestMetrics:
    """Tests for the metrics exposition."""

    def test_metrics_exposition_includes_eligibility_metrics(self):
        record_decision(approved=False, risk_score=75, recommended_limit=None, model_version="1.0.0")
        content = get_metrics().decode()

        assert "eligibility_decision_total" in content
        assert "eligibility_limit_bucket_total" in content
        assert "eligibility_risk_score_bucket" in content


class TestDependencies:
    """Tests for service wiring."""

    def test_service_without_result_sink(self, monkeypatch):
        monkeypatch.setattr(settings, "result_sink_enabled", False)

        assert dependencies.get_result_sink() is None
        assert isinstance(dependencies.get_eligibility_service(), EligibilityService)

    @pytest.mark.asyncio
    async def test_lifespan_yields_service(self, monkeypatch):
        monkeypatch.setattr(settings, "result_sink_enabled", False)

        async with dependencies.eligibility_service_lifespan() as service:
            assert isinstance(service, EligibilityService)
