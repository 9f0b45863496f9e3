"""
Fixtures for integration tests.

Provides:
- Mock financial data provider with canned subject snapshots
- Recording, failing and blocking result sinks
- In-memory database for testing
"""

import asyncio
from datetime import date
from typing import AsyncGenerator, Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.application.services import EligibilityService
from src.domain.entities import FinancialSnapshot, FraudFlag
from src.domain.exceptions import (
    DataProviderException,
    ResultSinkException,
    SubjectNotFoundException,
)
from src.domain.interfaces import FinancialDataProvider, ResultSink
from src.infrastructure.database import Base
from src.service.scoring import EligibilityResult


# =============================================================================
# Test Data
# =============================================================================

SUBJECT_SNAPSHOTS: Dict[str, FinancialSnapshot] = {
    # 3500 in, 1000 out every month: approved with a 875 line
    "subject_good": FinancialSnapshot(
        total_balance=2500.0,
        transaction_count_90d=45,
        total_spend_90d=3000.0,
        total_credits_90d=10500.0,
        monthly_credits=(3500.0, 3500.0, 3500.0),
        monthly_debits=(1000.0, 1000.0, 1000.0),
    ),
    # No linked accounts
    "subject_thin": FinancialSnapshot.empty(),
    # Healthy finances with a critical fraud signal
    "subject_fraud": FinancialSnapshot(
        total_balance=2500.0,
        transaction_count_90d=45,
        total_spend_90d=3000.0,
        total_credits_90d=10500.0,
        monthly_credits=(3500.0, 3500.0, 3500.0),
        monthly_debits=(1000.0, 1000.0, 1000.0),
        fraud_flags=(FraudFlag("synthetic_identity", "critical", "Synthetic identity detected"),),
    ),
}


# =============================================================================
# Mock Provider and Sinks
# =============================================================================

class MockFinancialDataProvider(FinancialDataProvider):
    """Mock provider that returns canned snapshots."""

    def __init__(self, fail_mode: bool = False):
        self.fail_mode = fail_mode
        self.call_count = 0
        self.requests: List[Tuple[str, Optional[date]]] = []

    async def fetch(self, subject_id: str, as_of: Optional[date] = None) -> FinancialSnapshot:
        """Return a canned snapshot or raise based on mode."""
        self.call_count += 1
        self.requests.append((subject_id, as_of))

        if self.fail_mode:
            raise DataProviderException(
                message="Financial data API unavailable",
                status_code=503,
            )

        if subject_id not in SUBJECT_SNAPSHOTS:
            raise SubjectNotFoundException(subject_id)

        return SUBJECT_SNAPSHOTS[subject_id]


class MockResultSink(ResultSink):
    """Sink that keeps every recorded result in memory."""

    def __init__(self):
        self.records: List[Tuple[str, EligibilityResult]] = []

    async def record(self, subject_id: str, result: EligibilityResult) -> None:
        self.records.append((subject_id, result))


class FailingResultSink(ResultSink):
    """Sink whose every write fails."""

    def __init__(self):
        self.call_count = 0

    async def record(self, subject_id: str, result: EligibilityResult) -> None:
        self.call_count += 1
        raise ResultSinkException("Audit store unavailable", subject_id=subject_id)


class BlockingResultSink(ResultSink):
    """Sink whose writes hang until released."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.records: List[Tuple[str, EligibilityResult]] = []

    async def record(self, subject_id: str, result: EligibilityResult) -> None:
        self.started.set()
        await self.release.wait()
        self.records.append((subject_id, result))


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


# =============================================================================
# Provider, Sink and Service Fixtures
# =============================================================================

@pytest.fixture
def mock_provider() -> MockFinancialDataProvider:
    """Create a mock financial data provider."""
    return MockFinancialDataProvider()


@pytest.fixture
def failing_provider() -> MockFinancialDataProvider:
    """Create a provider that always fails."""
    return MockFinancialDataProvider(fail_mode=True)


@pytest.fixture
def mock_sink() -> MockResultSink:
    """Create an in-memory result sink."""
    return MockResultSink()


@pytest.fixture
def failing_sink() -> FailingResultSink:
    """Create a result sink that always fails."""
    return FailingResultSink()


@pytest.fixture
def blocking_sink() -> BlockingResultSink:
    """Create a result sink that holds writes until released."""
    return BlockingResultSink()


@pytest.fixture
def service(
    mock_provider: MockFinancialDataProvider,
    mock_sink: MockResultSink,
) -> EligibilityService:
    """Eligibility service with a mock provider and in-memory sink."""
    return EligibilityService(data_provider=mock_provider, result_sink=mock_sink)
