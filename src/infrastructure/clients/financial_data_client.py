"""HTTP implementation of FinancialDataProvider."""

import asyncio
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import httpx
import structlog

from src.core.config import settings
from src.core.metrics import (
    track_data_fetch_latency,
    record_data_fetch_success,
    record_data_fetch_failure,
)
from src.domain.entities import (
    AccountBalance,
    Budget,
    FinancialSnapshot,
    FraudFlag,
    LedgerTransaction,
)
from src.domain.exceptions import (
    DataProviderException,
    DataProviderTimeoutException,
    SubjectNotFoundException,
)
from src.domain.interfaces import FinancialDataProvider
from src.service.snapshot import build_snapshot

logger = structlog.get_logger(__name__)

MAX_FRAUD_SIGNALS = 20


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    if "T" in value:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    return datetime.strptime(value, "%Y-%m-%d").date()


class HttpFinancialDataProvider(FinancialDataProvider):
    """
    HTTP client for the financial data API.

    Reads accounts, transactions, budgets and fraud signals concurrently,
    with retry and exponential backoff per read, then builds the snapshot.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url or settings.data_api_url
        self._timeout = timeout or settings.data_api_timeout
        self._max_retries = max_retries or settings.data_api_max_retries
        self._transport = transport

    async def fetch(
        self,
        subject_id: str,
        as_of: Optional[date] = None,
    ) -> FinancialSnapshot:
        """
        Fetch the raw ledger for a subject and condense it into a snapshot.

        The four reads are independent and run in parallel. The first
        failure cancels the reads still in flight and propagates to the caller.
        """
        as_of = as_of or date.today()

        with track_data_fetch_latency():
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                tasks = [
                    asyncio.create_task(self._get_json(client, "/accounts", subject_id)),
                    asyncio.create_task(
                        self._get_json(client, "/transactions", subject_id, as_of=as_of)
                    ),
                    asyncio.create_task(self._get_json(client, "/budgets", subject_id)),
                    asyncio.create_task(self._get_json(client, "/fraud-signals", subject_id)),
                ]
                try:
                    accounts, transactions, budgets, signals = await asyncio.gather(*tasks)
                except BaseException:
                    # Stop the sibling reads before the client closes under them
                    for task in tasks:
                        task.cancel()
                    await asyncio.gather(*tasks, return_exceptions=True)
                    raise

        record_data_fetch_success()

        snapshot = build_snapshot(
            accounts=self._parse_accounts(accounts),
            transactions=self._parse_transactions(transactions),
            budgets=self._parse_budgets(budgets),
            fraud_flags=self._parse_fraud_flags(signals),
            as_of=as_of,
        )
        logger.info(
            "financial_snapshot_fetched",
            subject_id=subject_id,
            transaction_count=snapshot.transaction_count_90d,
            fraud_flag_count=len(snapshot.fraud_flags),
        )
        return snapshot

    async def _get_json(
        self,
        client: httpx.AsyncClient,
        path: str,
        subject_id: str,
        as_of: Optional[date] = None,
    ) -> Dict[str, Any]:
        """
        GET one resource for a subject.

        Implements retry logic with exponential backoff.
        """
        params = {"subject_id": subject_id}
        if as_of is not None:
            params["as_of"] = as_of.isoformat()

        last_exception = None

        for attempt in range(self._max_retries):
            try:
                response = await client.get(path, params=params)

                if response.status_code == 404:
                    record_data_fetch_failure("not_found")
                    raise SubjectNotFoundException(subject_id)

                if response.status_code >= 400:
                    record_data_fetch_failure("error")
                    raise DataProviderException(
                        message=f"Financial data API error on {path}: {response.text}",
                        status_code=response.status_code,
                    )

                return response.json()

            except httpx.TimeoutException:
                record_data_fetch_failure("timeout")
                last_exception = DataProviderTimeoutException()
                logger.warning(
                    "data_api_timeout",
                    subject_id=subject_id,
                    path=path,
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                )
            except (SubjectNotFoundException, DataProviderException):
                raise
            except Exception as e:
                record_data_fetch_failure("error")
                last_exception = DataProviderException(
                    message=f"Unexpected error: {str(e)}",
                )
                logger.error(
                    "data_api_error",
                    subject_id=subject_id,
                    path=path,
                    attempt=attempt + 1,
                    error=str(e),
                )

            # Exponential backoff
            if attempt < self._max_retries - 1:
                await asyncio.sleep(2**attempt * 0.1)

        raise last_exception or DataProviderException(f"Failed to fetch {path}")

    def _parse_accounts(self, data: Dict[str, Any]) -> List[AccountBalance]:
        """Parse raw API response into AccountBalance entities."""
        return [
            AccountBalance(
                account_id=str(item.get("id", "")),
                current_balance=float(item.get("current_balance", 0) or 0),
                is_active=item.get("is_active", True),
            )
            for item in data.get("accounts", [])
        ]

    def _parse_transactions(self, data: Dict[str, Any]) -> List[LedgerTransaction]:
        """Parse raw API response into LedgerTransaction entities."""
        transactions = []

        for item in data.get("transactions", []):
            txn_date = _parse_date(item.get("date"))
            if txn_date is None:
                continue

            amount = float(item.get("amount", 0) or 0)

            # Some sources send unsigned amounts with an explicit type
            txn_type = (item.get("type") or "").lower()
            if txn_type == "debit" and amount > 0:
                amount = -amount
            elif txn_type == "credit" and amount < 0:
                amount = -amount

            balance = item.get("balance")

            transactions.append(LedgerTransaction(
                date=txn_date,
                amount=amount,
                balance=float(balance) if balance is not None else None,
                overdraft=item.get("overdraft", False),
                description=item.get("description") or "",
                account_id=str(item.get("account_id") or ""),
            ))

        return transactions

    def _parse_budgets(self, data: Dict[str, Any]) -> List[Budget]:
        """Parse raw API response into Budget entities."""
        return [
            Budget(
                category=item.get("category", ""),
                amount=float(item.get("amount", 0) or 0),
                start_date=_parse_date(item.get("start_date")),
                end_date=_parse_date(item.get("end_date")),
            )
            for item in data.get("budgets", [])
        ]

    def _parse_fraud_flags(self, data: Dict[str, Any]) -> List[FraudFlag]:
        """Parse the most recent fraud signals into FraudFlag entities."""
        return [
            FraudFlag(
                code=item.get("signal_type", item.get("code", "")),
                severity=str(item.get("severity", "")).lower(),
                description=item.get("description"),
            )
            for item in data.get("fraud_signals", [])[:MAX_FRAUD_SIGNALS]
        ]
