"""
Integration tests for the HTTP financial data provider.

These tests verify:
1. The four reads are combined into a FinancialSnapshot
2. Raw payload quirks (unsigned amounts, timestamps, missing dates) are handled
3. 404 maps to SubjectNotFoundException, other errors to DataProviderException
4. Timeouts are retried with backoff before giving up
5. A failed read cancels the reads still in flight
"""

import asyncio
from collections import Counter
from datetime import date

import httpx
import pytest
from prometheus_client import REGISTRY

from src.domain.exceptions import (
    DataProviderException,
    DataProviderTimeoutException,
    SubjectNotFoundException,
)
from src.infrastructure.clients import HttpFinancialDataProvider


# =============================================================================
# Test Data
# =============================================================================

AS_OF = date(2024, 3, 15)

PAYLOADS = {
    "/accounts": {
        "accounts": [
            {"id": "acc_1", "current_balance": 2900, "is_active": True},
            {"id": "acc_2", "current_balance": 10000, "is_active": False},
        ],
    },
    "/transactions": {
        "transactions": [
            {"date": "2024-03-01", "amount": 2500, "type": "credit", "balance": 3000},
            {"date": "2024-03-05T10:00:00Z", "amount": 100, "type": "debit", "balance": 2900},
            {"amount": 5, "type": "debit"},
        ],
    },
    "/budgets": {
        "budgets": [
            {"category": "groceries", "amount": 400, "start_date": "2024-01-01"},
        ],
    },
    "/fraud-signals": {
        "fraud_signals": [
            {"signal_type": "new_device", "severity": "MEDIUM", "description": "Login from new device"},
        ],
    },
}


class RecordingHandler:
    """MockTransport handler that serves PAYLOADS and records requests."""

    def __init__(
        self,
        status_code: int = 200,
        timeouts: dict | None = None,
        not_found_paths: tuple = (),
        payloads: dict | None = None,
    ):
        self.status_code = status_code
        self.timeouts = dict(timeouts or {})
        self.not_found_paths = set(not_found_paths)
        self.payloads = {**PAYLOADS, **(payloads or {})}
        self.calls = Counter()
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls[path] += 1
        self.requests.append(request)

        if path in self.not_found_paths:
            return httpx.Response(404, text="not found")

        if self.timeouts.get(path, 0) > 0:
            self.timeouts[path] -= 1
            raise httpx.ConnectTimeout("timed out", request=request)

        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream error")

        return httpx.Response(200, json=self.payloads[path])


def make_provider(handler: RecordingHandler, max_retries: int = 3) -> HttpFinancialDataProvider:
    return HttpFinancialDataProvider(
        base_url="http://data.test",
        timeout=1.0,
        max_retries=max_retries,
        transport=httpx.MockTransport(handler),
    )


# =============================================================================
# Fetch Tests
# =============================================================================

class TestFetch:
    """Tests for HttpFinancialDataProvider.fetch()."""

    @pytest.mark.asyncio
    async def test_snapshot_built_from_all_reads(self):
        handler = RecordingHandler()
        snapshot = await make_provider(handler).fetch("subject_1", as_of=AS_OF)

        assert set(handler.calls) == set(PAYLOADS)
        assert snapshot.total_balance == 2900.0
        assert snapshot.transaction_count_90d == 2
        assert snapshot.total_credits_90d == 2500.0
        assert snapshot.total_spend_90d == 100.0
        assert snapshot.monthly_credits == (0, 0, 2500.0)
        assert snapshot.monthly_debits == (0, 0, 100.0)
        assert snapshot.budget_count == 1
        assert snapshot.budget_adherence_pct == 100.0
        assert len(snapshot.fraud_flags) == 1
        flag = snapshot.fraud_flags[0]
        assert flag.code == "new_device"
        assert flag.severity == "medium"
        assert flag.description == "Login from new device"

    @pytest.mark.asyncio
    async def test_subject_and_as_of_sent(self):
        handler = RecordingHandler()
        await make_provider(handler).fetch("subject_1", as_of=AS_OF)

        for request in handler.requests:
            assert request.url.params["subject_id"] == "subject_1"

        transactions_request = next(r for r in handler.requests if r.url.path == "/transactions")
        assert transactions_request.url.params["as_of"] == "2024-03-15"


# =============================================================================
# Error Handling Tests
# =============================================================================

class TestFetchErrors:
    """Tests for error mapping and retries."""

    @pytest.mark.asyncio
    async def test_not_found(self):
        handler = RecordingHandler(status_code=404)

        with pytest.raises(SubjectNotFoundException) as exc_info:
            await make_provider(handler).fetch("subject_missing", as_of=AS_OF)

        assert exc_info.value.subject_id == "subject_missing"

    @pytest.mark.asyncio
    async def test_server_error_not_retried(self):
        handler = RecordingHandler(status_code=500)

        with pytest.raises(DataProviderException) as exc_info:
            await make_provider(handler).fetch("subject_1", as_of=AS_OF)

        assert exc_info.value.status_code == 500
        assert all(count == 1 for count in handler.calls.values())

    @pytest.mark.asyncio
    async def test_timeout_retried_then_succeeds(self):
        handler = RecordingHandler(timeouts={"/budgets": 1})

        snapshot = await make_provider(handler).fetch("subject_1", as_of=AS_OF)

        assert handler.calls["/budgets"] == 2
        assert snapshot.budget_count == 1

    @pytest.mark.asyncio
    async def test_timeout_exhausts_retries(self):
        handler = RecordingHandler(timeouts={path: 10 for path in PAYLOADS})

        with pytest.raises(DataProviderTimeoutException) as exc_info:
            await make_provider(handler, max_retries=2).fetch("subject_1", as_of=AS_OF)

        assert exc_info.value.code == "DATA_PROVIDER_TIMEOUT"
        assert max(handler.calls.values()) == 2

    @pytest.mark.asyncio
    async def test_failure_cancels_reads_in_flight(self):
        """Reads still retrying when another read fails are cancelled, not orphaned."""
        slow_paths = {"/transactions", "/budgets", "/fraud-signals"}
        handler = RecordingHandler(
            timeouts={path: 10 for path in slow_paths},
            not_found_paths=("/accounts",),
        )
        labels = {"error_type": "error"}
        errors_before = REGISTRY.get_sample_value("eligibility_data_fetch_failures_total", labels)

        with pytest.raises(SubjectNotFoundException):
            await make_provider(handler).fetch("subject_missing", as_of=AS_OF)

        # Long enough for any surviving read to finish its backoff
        await asyncio.sleep(0.5)

        assert REGISTRY.get_sample_value("eligibility_data_fetch_failures_total", labels) == errors_before
        assert all(handler.calls[path] <= 1 for path in slow_paths)


# =============================================================================
# Payload Parsing Tests
# =============================================================================

class TestPayloadParsing:
    """Tests for tolerance of sparse upstream payloads."""

    @pytest.mark.asyncio
    async def test_null_type_and_description(self):
        handler = RecordingHandler(payloads={
            "/transactions": {
                "transactions": [
                    {"date": "2024-03-01", "amount": 250, "type": None, "description": None},
                    {"date": "2024-03-02", "amount": -40, "type": None},
                ],
            },
        })

        snapshot = await make_provider(handler).fetch("subject_1", as_of=AS_OF)

        assert snapshot.transaction_count_90d == 2
        assert snapshot.total_credits_90d == 250.0
        assert snapshot.total_spend_90d == 40.0

    def test_transactions_carry_account_id(self):
        provider = make_provider(RecordingHandler())

        transactions = provider._parse_transactions({
            "transactions": [
                {"date": "2024-03-01", "amount": -20, "account_id": "acc_1", "balance": -20},
                {"date": "2024-03-02", "amount": 10, "description": None},
            ],
        })

        assert [t.account_id for t in transactions] == ["acc_1", ""]
        assert transactions[1].description == ""
