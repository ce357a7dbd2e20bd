# accounting/tests/test_run_atomic.py

from __future__ import annotations

from datetime import date

from django.db import OperationalError
from django.test import TestCase, override_settings

from accounting.models.entry import AccountingEntry
from accounting.services.entry_service import post_entry
from accounting.services.exceptions import (
    ConcurrencyConflictError,
    InvalidStateError,
    StoreUnavailableError,
)
from accounting.services.transactions import default_max_retries, run_atomic


def _write_entry():
    return post_entry(
        document_date=date(2024, 3, 1),
        document_type=AccountingEntry.DOC_INTERNAL,
        direction=AccountingEntry.INFLOW,
        financial_status=AccountingEntry.COLLECTED,
        net_amount="10.00",
    )


class RunAtomicTests(TestCase):
    def test_returns_work_result(self):
        self.assertEqual(run_atomic(lambda: 42, operation="noop"), 42)

    def test_conflict_is_retried_and_rolled_back(self):
        calls = {"n": 0}

        def work():
            calls["n"] += 1
            _write_entry()
            if calls["n"] < 3:
                raise ConcurrencyConflictError("lost race")
            return "done"

        with self.assertLogs("ledger.transactions", level="WARNING"):
            result = run_atomic(work, operation="test", max_retries=3)

        self.assertEqual(result, "done")
        self.assertEqual(calls["n"], 3)
        # failed attempts left nothing behind
        self.assertEqual(AccountingEntry.objects.count(), 1)

    def test_retries_exhausted_surfaces_conflict(self):
        calls = {"n": 0}

        def work():
            calls["n"] += 1
            _write_entry()
            raise ConcurrencyConflictError("lost race")

        with self.assertLogs("ledger.transactions", level="WARNING"):
            with self.assertRaises(ConcurrencyConflictError):
                run_atomic(work, operation="test", max_retries=2)

        self.assertEqual(calls["n"], 2)
        self.assertFalse(AccountingEntry.objects.exists())

    def test_state_errors_are_not_retried(self):
        calls = {"n": 0}

        def work():
            calls["n"] += 1
            raise InvalidStateError("closed")

        with self.assertRaises(InvalidStateError):
            run_atomic(work, operation="test", max_retries=3)
        self.assertEqual(calls["n"], 1)

    def test_store_failure_becomes_store_unavailable(self):
        def work():
            _write_entry()
            raise OperationalError("connection dropped")

        with self.assertLogs("ledger.transactions", level="ERROR"):
            with self.assertRaises(StoreUnavailableError):
                run_atomic(work, operation="test")

        self.assertFalse(AccountingEntry.objects.exists())

    @override_settings(SETTLEMENT_MAX_RETRIES=5)
    def test_default_retries_from_settings(self):
        self.assertEqual(default_max_retries(), 5)
