"""Service wiring and lifecycle."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog

from src import __version__
from src.application.services import EligibilityService
from src.core.config import settings
from src.core.logging import setup_logging
from src.infrastructure.clients import HttpFinancialDataProvider
from src.infrastructure.database import db_manager
from src.infrastructure.repositories import SqlAlchemyResultSink
from src.service.scoring import scoring_settings


def get_data_provider() -> HttpFinancialDataProvider:
    """Get a FinancialDataProvider instance."""
    return HttpFinancialDataProvider()


def get_result_sink() -> SqlAlchemyResultSink | None:
    """Get a ResultSink instance, or None when recording is disabled."""
    if not settings.result_sink_enabled:
        return None
    return SqlAlchemyResultSink(db_manager.sessionmaker)


def get_eligibility_service() -> EligibilityService:
    """Get an EligibilityService instance with all dependencies."""
    return EligibilityService(
        data_provider=get_data_provider(),
        result_sink=get_result_sink(),
        settings=scoring_settings,
    )


@asynccontextmanager
async def eligibility_service_lifespan(
    database_url: str | None = None,
    create_tables: bool = False,
) -> AsyncGenerator[EligibilityService, None]:
    """
    Run an EligibilityService for the lifetime of a host process.

    Handles startup and shutdown:
    - Set up logging
    - Initialize the database connection pool (when recording is enabled)
    - Optionally create missing tables
    - Drain pending result writes and close the pool on exit
    """
    setup_logging()
    logger = structlog.get_logger(__name__)

    if settings.result_sink_enabled:
        db_manager.init(database_url)
        if create_tables:
            await db_manager.create_tables()

    service = get_eligibility_service()
    logger.info(
        "eligibility_service_started",
        version=__version__,
        model_version=scoring_settings.model_version,
    )

    try:
        yield service
    finally:
        await service.wait_for_pending_writes()
        await db_manager.close()
        logger.info("eligibility_service_stopped")
