# accounting/tests/test_report_service.py

from datetime import date
from decimal import Decimal
from unittest import mock

from django.test import SimpleTestCase, TestCase

from accounting.services.exceptions import InvalidParameter, InvalidReportType, MissingParameter
from accounting.services.journal_store import InMemoryJournalStore
from accounting.services.report_service import (
    REPORT_TYPES,
    generate_report,
    parse_iso_date,
    resolve_date_range,
)
from accounting.tests.helpers import make_account, make_pharmacy, posted_line


class ParameterParsingTests(SimpleTestCase):
    def test_iso_date(self):
        self.assertEqual(parse_iso_date({"d": "2025-03-31"}, "d"), date(2025, 3, 31))
        self.assertEqual(parse_iso_date({"d": ""}, "d", date(2025, 1, 1)), date(2025, 1, 1))

    def test_malformed_dates(self):
        for raw in ("31/03/2025", "2025-02-30", "yesterday"):
            with self.assertRaises(InvalidParameter) as ctx:
                parse_iso_date({"start_date": raw}, "start_date")
            self.assertEqual(ctx.exception.field, "start_date")

    @mock.patch("accounting.services.report_service.timezone.localdate", return_value=date(2025, 6, 14))
    def test_default_range_is_year_to_date(self, _localdate):
        self.assertEqual(resolve_date_range({}), (date(2025, 1, 1), date(2025, 6, 14)))

    def test_reversed_range(self):
        with self.assertRaises(InvalidParameter):
            resolve_date_range({"start_date": "2025-02-01", "end_date": "2025-01-01"})


class ReportDispatchTests(TestCase):
    """
    GUARANTEES:
    - unknown report types are rejected before any read
    - every supported type dispatches and tags its output
    """

    def setUp(self):
        self.pharmacy = make_pharmacy()
        for code in ("411", "7001", "512", "101"):
            make_account(self.pharmacy, code)

        self.store = InMemoryJournalStore()
        self.store.add(
            self.pharmacy.pk,
            posted_line("411", debit="10000", entry_number="VT-2025-00001", line_number=1),
            posted_line("7001", credit="10000", entry_number="VT-2025-00001", line_number=2),
        )
        self.params = {"start_date": "2025-01-01", "end_date": "2025-01-31"}

    def test_unknown_type(self):
        with self.assertRaises(InvalidReportType) as ctx:
            generate_report(self.pharmacy.pk, "cash_flow", {}, store=self.store)
        self.assertEqual(ctx.exception.as_dict()["code"], "invalid_report_type")

    def test_every_type_dispatches(self):
        params = {**self.params, "account_code": "411", "year": "2025", "month": "1"}
        for report_type in REPORT_TYPES:
            with self.subTest(report_type=report_type):
                report = generate_report(self.pharmacy.pk, report_type, params, store=self.store)
                self.assertEqual(report["report_type"], report_type)
                self.assertEqual(report["pharmacy_id"], str(self.pharmacy.pk))

    def test_trial_balance_from_store(self):
        report = generate_report(self.pharmacy.pk, "trial_balance", self.params, store=self.store)
        self.assertEqual(report["totals"]["closing_debit"], Decimal("10000"))
        self.assertTrue(report["totals"]["balanced"])

    def test_general_ledger_requires_account_code(self):
        with self.assertRaises(MissingParameter) as ctx:
            generate_report(self.pharmacy.pk, "general_ledger", self.params, store=self.store)
        self.assertEqual(ctx.exception.field, "account_code")

    def test_balance_sheet_uses_end_date_when_as_of_missing(self):
        report = generate_report(
            self.pharmacy.pk, "balance_sheet", {"end_date": "2025-01-31"}, store=self.store
        )
        self.assertEqual(report["as_of_date"], "2025-01-31")
        self.assertEqual(report["assets"]["receivables"], Decimal("10000"))

    def test_invalid_date_surfaces_field(self):
        with self.assertRaises(InvalidParameter) as ctx:
            generate_report(
                self.pharmacy.pk, "income_statement", {"start_date": "2025-13-01"}, store=self.store
            )
        self.assertEqual(ctx.exception.as_dict()["field"], "start_date")

    def test_g50_month_zero_is_rejected(self):
        for month in (0, "0"):
            with self.subTest(month=month):
                with self.assertRaises(InvalidParameter) as ctx:
                    generate_report(self.pharmacy.pk, "g50", {"year": 2025, "month": month}, store=self.store)
                self.assertEqual(ctx.exception.field, "month")

    @mock.patch("accounting.services.report_service.timezone.localdate", return_value=date(2025, 6, 14))
    def test_g50_defaults_to_current_month(self, _localdate):
        report = generate_report(self.pharmacy.pk, "g50", {"month": ""}, store=self.store)
        self.assertEqual(report["period"], "2025-06")
