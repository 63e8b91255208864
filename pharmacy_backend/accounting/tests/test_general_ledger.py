# accounting/tests/test_general_ledger.py

from datetime import date
from decimal import Decimal

from django.test import TestCase

from accounting.services.exceptions import AccountNotFound, MissingParameter
from accounting.services.general_ledger_service import GeneralLedgerService
from accounting.tests.helpers import make_account, make_pharmacy, post_entry


class GeneralLedgerTests(TestCase):
    """
    GUARANTEES:
    - closing = opening + signed sum of period lines
    - running balance updated row by row
    - exact account match (no sub-account leakage)
    """

    def setUp(self):
        self.pharmacy = make_pharmacy()
        for code in ("411", "4111", "512", "7001"):
            make_account(self.pharmacy, code)
        self.service = GeneralLedgerService()

    def test_single_sale_end_to_end(self):
        post_entry(self.pharmacy, date(2025, 1, 15), [("411", "10000", "0"), ("7001", "0", "10000")])

        report = self.service.generate(
            pharmacy_id=self.pharmacy.pk,
            account_code="411",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 31),
        )

        self.assertEqual(report["opening_balance"], Decimal("0"))
        self.assertEqual(len(report["entries"]), 1)
        row = report["entries"][0]
        self.assertEqual(row["debit"], Decimal("10000"))
        self.assertEqual(row["credit"], Decimal("0"))
        self.assertEqual(row["balance"], Decimal("10000"))
        self.assertEqual(report["closing_balance"], Decimal("10000"))

    def test_running_balance_and_opening(self):
        post_entry(self.pharmacy, date(2024, 12, 30), [("411", "300", "0"), ("7001", "0", "300")])
        post_entry(self.pharmacy, date(2025, 1, 10), [("411", "200", "0"), ("7001", "0", "200")])
        post_entry(self.pharmacy, date(2025, 1, 10), [("512", "450", "0"), ("411", "0", "450")])
        post_entry(self.pharmacy, date(2025, 1, 12), [("4111", "999", "0"), ("7001", "0", "999")])

        report = self.service.generate(
            pharmacy_id=self.pharmacy.pk,
            account_code="411",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 31),
        )

        self.assertEqual(report["opening_balance"], Decimal("300"))
        self.assertEqual([row["balance"] for row in report["entries"]], [Decimal("500"), Decimal("50")])
        self.assertEqual(report["total_debit"], Decimal("200"))
        self.assertEqual(report["total_credit"], Decimal("450"))
        self.assertEqual(
            report["closing_balance"],
            report["opening_balance"] + report["total_debit"] - report["total_credit"],
        )
        numbers = [row["entry_number"] for row in report["entries"]]
        self.assertEqual(numbers, sorted(numbers))

    def test_credit_normal_account(self):
        post_entry(self.pharmacy, date(2025, 1, 15), [("411", "100", "0"), ("7001", "0", "100")])

        report = self.service.generate(
            pharmacy_id=self.pharmacy.pk,
            account_code="7001",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 31),
        )
        self.assertEqual(report["closing_balance"], Decimal("100"))

    def test_empty_period_keeps_opening(self):
        post_entry(self.pharmacy, date(2024, 6, 1), [("411", "80", "0"), ("7001", "0", "80")])

        report = self.service.generate(
            pharmacy_id=self.pharmacy.pk,
            account_code="411",
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 31),
        )
        self.assertEqual(report["entries"], [])
        self.assertEqual(report["closing_balance"], Decimal("80"))

    def test_unknown_account(self):
        with self.assertRaises(AccountNotFound):
            self.service.generate(
                pharmacy_id=self.pharmacy.pk,
                account_code="999",
                start_date=date(2025, 1, 1),
                end_date=date(2025, 1, 31),
            )

    def test_account_code_required(self):
        with self.assertRaises(MissingParameter) as ctx:
            self.service.generate(
                pharmacy_id=self.pharmacy.pk,
                account_code="",
                start_date=date(2025, 1, 1),
                end_date=date(2025, 1, 31),
            )
        self.assertEqual(ctx.exception.field, "account_code")
